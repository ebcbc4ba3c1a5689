"""
Galaxy service — deterministic star systems, planets, mineral deposits and flora.

Generation hierarchy (each level only reads its own seed):

    base_seed + (x, y, z)  ->  system seed
    system seed + index    ->  planet seed   ->  minerals seed -> deposit seeds
                                             ->  plants seed

Special coordinates:
  - (0, 0, 0) is The Cradle, a fixed tutorial system independent of base_seed.
  - The six unit neighbours of the origin form the Talos Arm, reserved tutorial
    systems; (1, 0, 0) is Talos Prime, the primary tutorial target.
  - Every other core system must sit on the starter lattice (0..9, step 3).
  - Frontier systems use the full coordinate range and are seeded by
    coordinates alone.
"""

import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from constants import (
    COMMON_MINERALS,
    DARKSTONE_DISTANCE,
    DEEP_SPACE_TIERS,
    DEPOSIT_BASE_QUANTITY_MIN,
    DEPOSIT_BASE_QUANTITY_SPAN,
    DEPTH_CATEGORIES,
    EXOTIC_CHANCE_PCT,
    EXOTIC_MINERALS,
    FRONTIER_COORD_MAX,
    FUTURISTIC_MIN_DISTANCE,
    GRID_SIZE,
    MAX_PLANTS_PER_PLANET,
    MINERAL_CATALOG,
    MINERAL_TIER_BANDS,
    PLANET_NAME_PREFIXES,
    PLANET_NAME_SUFFIXES,
    PLANET_QUANTITY_MULTIPLIERS,
    PLANET_SIZES,
    PLANET_TYPES,
    PLANT_RETRY_CAP,
    PLANT_TYPES,
    STAR_TYPE_MINERALS,
    STAR_TYPES,
    SYSTEM_NAME_MIDDLES,
    SYSTEM_NAME_PREFIXES,
    SYSTEM_NAME_SUFFIXES,
    SYSTEM_SPACING,
)
from seed_service import InvalidGenerationInput, SeedCursor, derive, extract, round_half_up

Coordinate = Tuple[int, int, int]

ABUNDANCE_LEVELS: List[str] = ["low", "medium", "high", "very_high"]

# Fixed deposit figures for hand-authored systems, keyed by abundance label.
_ABUNDANCE_QUANTITY: Dict[str, int] = {
    "very_low": 2_000,
    "low": 10_000,
    "medium": 25_000,
    "high": 50_000,
    "very_high": 100_000,
}
_ABUNDANCE_PURITY: Dict[str, float] = {
    "very_low": 0.3,
    "low": 0.5,
    "medium": 0.6,
    "high": 0.8,
    "very_high": 0.9,
}


@dataclass(frozen=True)
class Deposit:
    mineral_name: str
    quantity: int
    purity: float
    depth_category: str


@dataclass(frozen=True)
class GeneratedPlanet:
    name: str
    type: str
    size: str
    minerals: Tuple[Deposit, ...]
    plants: Tuple[str, ...]


@dataclass(frozen=True)
class GeneratedSystem:
    coordinates: Coordinate
    seed: str
    name: str
    star_type: str
    planet_count: int
    planets: Tuple[GeneratedPlanet, ...]
    hazard_level: int
    base_prices: Dict[str, int]
    resource_distribution: Dict[str, Any]
    special_properties: Dict[str, Any] = field(default_factory=dict)


# ── Validation ────────────────────────────────────────────────────────────────

def _require_int(value: Any, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidGenerationInput(f"{name} must be an integer, got {value!r}")
    return value


def validate_core_coordinates(x: Any, y: Any, z: Any) -> Coordinate:
    for name, value in (("x", x), ("y", y), ("z", z)):
        _require_int(value, name)
        if not 0 <= value < GRID_SIZE:
            raise InvalidGenerationInput(f"{name}={value} must be in range 0-{GRID_SIZE - 1}")
        if value % SYSTEM_SPACING != 0:
            raise InvalidGenerationInput(f"{name}={value} must be divisible by {SYSTEM_SPACING}")
    return (x, y, z)


def validate_frontier_coordinates(x: Any, y: Any, z: Any) -> Coordinate:
    for name, value in (("x", x), ("y", y), ("z", z)):
        _require_int(value, name)
        if not 0 <= value <= FRONTIER_COORD_MAX:
            raise InvalidGenerationInput(f"{name}={value} must be in range 0-{FRONTIER_COORD_MAX}")
    return (x, y, z)


def lattice_coordinates() -> List[Coordinate]:
    """All valid core-system positions, in x-major order."""
    axis = range(0, GRID_SIZE, SYSTEM_SPACING)
    return [(x, y, z) for x in axis for y in axis for z in axis]


# ── Minerals ──────────────────────────────────────────────────────────────────

def _select_mineral(cursor: SeedCursor) -> str:
    is_exotic = cursor.claim(0, 2, 100) < EXOTIC_CHANCE_PCT
    if is_exotic:
        return EXOTIC_MINERALS[cursor.claim(2, 1, len(EXOTIC_MINERALS))]
    return COMMON_MINERALS[cursor.claim(2, 2, len(COMMON_MINERALS))]


def generate_deposit(minerals_seed: str, deposit_index: int, planet_type: str) -> Deposit:
    cursor = SeedCursor(derive(minerals_seed, "deposit", deposit_index))
    mineral = _select_mineral(cursor)

    base_quantity = cursor.claim(4, 3, DEPOSIT_BASE_QUANTITY_SPAN) + DEPOSIT_BASE_QUANTITY_MIN
    multiplier = PLANET_QUANTITY_MULTIPLIERS.get(planet_type, 1.0)
    quantity = int(base_quantity * multiplier)

    purity = (cursor.claim(7, 1, 10) + 1) / 10.0
    depth = DEPTH_CATEGORIES[cursor.claim(8, 1, len(DEPTH_CATEGORIES))]

    return Deposit(mineral_name=mineral, quantity=quantity, purity=purity, depth_category=depth)


def generate_minerals(planet_seed: str, planet_type: str) -> Tuple[Deposit, ...]:
    """1-10 deposits for a planet; quantities scale with the planet type."""
    minerals_seed = derive(planet_seed, "minerals")
    deposit_count = extract(minerals_seed, 0, 1, 10) + 1
    return tuple(generate_deposit(minerals_seed, i, planet_type) for i in range(deposit_count))


# ── Plants ────────────────────────────────────────────────────────────────────

def generate_plants(planet_seed: str, planet_type: str) -> Tuple[str, ...]:
    """0-5 distinct flora for the planet's biome.

    A biome with no flora table (gas giants, unknown biomes) yields an empty
    tuple.  Each plant walks forward through the reread window on collision, so
    neighbouring plants share reread bytes.
    """
    available = PLANT_TYPES.get(planet_type) or []
    if not available:
        return ()

    cursor = SeedCursor(derive(planet_seed, "plants"))
    plant_count = cursor.claim(0, 1, MAX_PLANTS_PER_PLANET + 1)
    if plant_count == 0:
        return ()

    cursor.window(1, MAX_PLANTS_PER_PLANET + PLANT_RETRY_CAP)
    selected: List[str] = []
    used: set[int] = set()
    for i in range(plant_count):
        for attempt in range(PLANT_RETRY_CAP + 1):
            idx = cursor.reread(1 + i + attempt, 1, len(available))
            if idx not in used:
                used.add(idx)
                selected.append(available[idx])
                break

    return tuple(dict.fromkeys(selected))


# ── Planets ───────────────────────────────────────────────────────────────────

def _planet_name(cursor: SeedCursor, planet_index: int) -> str:
    prefix = PLANET_NAME_PREFIXES[cursor.claim(0, 2, len(PLANET_NAME_PREFIXES))]
    suffix = PLANET_NAME_SUFFIXES[cursor.claim(2, 2, len(PLANET_NAME_SUFFIXES))]
    name_format = cursor.claim(4, 1, 3)
    if name_format == 0:
        return f"{prefix}-{planet_index + 1}{suffix[0]}"
    if name_format == 1:
        return f"{prefix} {suffix}"
    return f"{prefix}-{suffix}"


def generate_planet(system_seed: str, planet_index: int) -> GeneratedPlanet:
    planet_seed = derive(system_seed, "planet", planet_index)
    cursor = SeedCursor(planet_seed)
    name = _planet_name(cursor, planet_index)
    planet_type = PLANET_TYPES[cursor.claim(5, 1, len(PLANET_TYPES))]
    size = PLANET_SIZES[cursor.claim(6, 1, len(PLANET_SIZES))]
    return GeneratedPlanet(
        name=name,
        type=planet_type,
        size=size,
        minerals=generate_minerals(planet_seed, planet_type),
        plants=generate_plants(planet_seed, planet_type),
    )


# ── Shared system helpers ─────────────────────────────────────────────────────

def catalog_base_prices(modifier: float = 1.0) -> Dict[str, int]:
    """Name -> base price for every catalog mineral, optionally scaled."""
    if modifier == 1.0:
        return {m["name"]: int(m["base_price"]) for m in MINERAL_CATALOG}
    return {m["name"]: round_half_up(m["base_price"] * modifier) for m in MINERAL_CATALOG}


def distance_from_cradle(x: int, y: int, z: int) -> float:
    return math.sqrt(x ** 2 + y ** 2 + z ** 2)


def available_tiers(distance: float) -> Tuple[str, ...]:
    for upper, tiers in MINERAL_TIER_BANDS:
        if distance < upper:
            return tiers
    return DEEP_SPACE_TIERS


def minerals_for_system(star_type: str, x: int, y: int, z: int) -> Tuple[str, ...]:
    """
    Catalog minerals a system's market can offer: tiered minerals in catalog
    order, then any futuristic ones.

    Distance from The Cradle unlocks tiers (rare from 100 units, exotic from
    500).  Beyond 500 units the star type adds its futuristic mineral, and
    beyond 5,000 units Darkstone is always present.
    """
    for name, value in (("x", x), ("y", y), ("z", z)):
        _require_int(value, name)
    distance = distance_from_cradle(x, y, z)
    tiers = available_tiers(distance)

    names = [m["name"] for m in MINERAL_CATALOG if m["tier"] in tiers]
    if distance > FUTURISTIC_MIN_DISTANCE and star_type in STAR_TYPE_MINERALS:
        names.append(STAR_TYPE_MINERALS[star_type])
    if distance > DARKSTONE_DISTANCE:
        names.append("Darkstone")
    return tuple(dict.fromkeys(names))


def system_name_from_seed(name_seed: int) -> str:
    p = len(SYSTEM_NAME_PREFIXES)
    m = len(SYSTEM_NAME_MIDDLES)
    prefix = SYSTEM_NAME_PREFIXES[name_seed % p]
    middle = SYSTEM_NAME_MIDDLES[(name_seed // p) % m]
    suffix = SYSTEM_NAME_SUFFIXES[(name_seed // (p * m)) % len(SYSTEM_NAME_SUFFIXES)]
    return f"{prefix} {middle} {suffix}"


def _planet_distribution(planets: Tuple[GeneratedPlanet, ...], mineral_seed: int) -> Dict[int, Dict[str, Any]]:
    distribution: Dict[int, Dict[str, Any]] = {}
    for idx, planet in enumerate(planets):
        distribution[idx] = {
            "minerals": list(dict.fromkeys(d.mineral_name for d in planet.minerals)),
            "abundance": ABUNDANCE_LEVELS[(mineral_seed + idx) % len(ABUNDANCE_LEVELS)],
        }
    return distribution


def _resource_distribution(mineral_seed: int, planets: Tuple[GeneratedPlanet, ...]) -> Dict[str, Any]:
    return {
        "abundant": "iron" if mineral_seed % 3 == 0 else "silicon",
        "common": ["carbon", "oxygen"],
        "rare": "gold" if mineral_seed % 5 == 0 else "platinum",
        "planets": _planet_distribution(planets, mineral_seed),
    }


def _build_generic_system(coords: Coordinate, system_seed: str, base_prices_modifier: Optional[int]) -> GeneratedSystem:
    cursor = SeedCursor(system_seed)
    star_type = STAR_TYPES[cursor.claim(0, 2, len(STAR_TYPES))]
    planet_count = cursor.claim(2, 1, 13)
    hazard_level = cursor.claim(3, 1, 101)
    mineral_seed = cursor.claim(4, 4, 2**32)
    name_seed = cursor.claim(12, 4, 2**32)

    if base_prices_modifier is None:
        base_prices = catalog_base_prices()
        special: Dict[str, Any] = {}
    else:
        price_seed = cursor.claim(8, 4, 2**32)
        price_modifier = 0.5 + (price_seed % 150) / 100.0
        base_prices = catalog_base_prices(price_modifier)
        special = {
            "frontier": True,
            "price_modifier": price_modifier,
            "available_minerals": list(minerals_for_system(star_type, *coords)),
        }

    planets = tuple(generate_planet(system_seed, i) for i in range(planet_count))
    return GeneratedSystem(
        coordinates=coords,
        seed=system_seed,
        name=system_name_from_seed(name_seed),
        star_type=star_type,
        planet_count=planet_count,
        planets=planets,
        hazard_level=hazard_level,
        base_prices=base_prices,
        resource_distribution=_resource_distribution(mineral_seed, planets),
        special_properties=special,
    )


def _fixed_deposits(minerals: List[str], abundance: str, planet_type: str) -> Tuple[Deposit, ...]:
    multiplier = PLANET_QUANTITY_MULTIPLIERS.get(planet_type, 1.0)
    return tuple(
        Deposit(
            mineral_name=mineral,
            quantity=int(_ABUNDANCE_QUANTITY[abundance] * multiplier),
            purity=_ABUNDANCE_PURITY[abundance],
            depth_category="surface",
        )
        for mineral in minerals
    )


# ── The Cradle ────────────────────────────────────────────────────────────────

CRADLE_SEED = "cradle_fixed_seed"
CRADLE_NAME = "The Cradle"
CRADLE_STAR_TYPE = "yellow_dwarf"

# (planet name, type, size, minerals, abundance)
_CRADLE_PLANETS: List[Tuple[str, str, str, List[str], str]] = [
    ("Cradle I", "rocky", "medium", ["iron", "copper"], "high"),
    ("Cradle II", "ice", "small", ["water", "ice"], "high"),
    ("Cradle III", "desert", "large", ["silicon", "aluminum"], "medium"),
    ("Cradle IV", "barren", "medium", ["gold", "silver"], "low"),
    ("Cradle V", "volcanic", "small", ["uranium", "plutonium"], "very_low"),
]


def generate_cradle() -> GeneratedSystem:
    """The fixed tutorial system at the origin."""
    planets = tuple(
        GeneratedPlanet(
            name=name,
            type=planet_type,
            size=size,
            minerals=_fixed_deposits(minerals, abundance, planet_type),
            plants=generate_plants(derive(CRADLE_SEED, "planet", idx), planet_type),
        )
        for idx, (name, planet_type, size, minerals, abundance) in enumerate(_CRADLE_PLANETS)
    )
    distribution = {
        idx: {"minerals": list(minerals), "abundance": abundance}
        for idx, (_, _, _, minerals, abundance) in enumerate(_CRADLE_PLANETS)
    }
    return GeneratedSystem(
        coordinates=(0, 0, 0),
        seed=CRADLE_SEED,
        name=CRADLE_NAME,
        star_type=CRADLE_STAR_TYPE,
        planet_count=len(planets),
        planets=planets,
        hazard_level=0,
        base_prices=catalog_base_prices(),
        resource_distribution={
            "abundant": "iron",
            "common": ["copper", "water"],
            "rare": "plutonium",
            "planets": distribution,
        },
        special_properties={
            "tutorial_zone": True,
            "high_security": True,
            "saturated_markets": True,
        },
    )


# ── Talos Arm (reserved tutorial systems) ─────────────────────────────────────

TALOS_ARM: Dict[Coordinate, str] = {
    (1, 0, 0): "Talos Prime",
    (0, 1, 0): "Talos II",
    (0, 0, 1): "Talos III",
    (1, 1, 0): "Talos IV",
    (1, 0, 1): "Talos V",
    (0, 1, 1): "Talos VI",
}
TALOS_PRIME: Coordinate = (1, 0, 0)

_TALOS_STABLE_STARS: List[str] = ["yellow_dwarf", "orange_dwarf", "red_dwarf"]
_TALOS_BASE_MINERALS: List[str] = ["iron", "silicon"]
_TALOS_BONUS_MINERALS: List[str] = ["copper", "aluminum", "titanium", "water"]
_TALOS_PLANET_MINERALS: List[str] = ["iron", "silicon", "copper", "aluminum", "titanium", "water", "ice", "gold"]
_TALOS_PLANET_TYPES: List[str] = ["rocky", "barren", "desert", "ice", "oceanic", "jungle"]

TALOS_BASE_PRICES: Dict[str, int] = {
    "iron": 12,
    "silicon": 15,
    "copper": 18,
    "water": 6,
    "food": 22,
    "fuel": 28,
}


def is_reserved(x: int, y: int, z: int) -> bool:
    return (x, y, z) in TALOS_ARM


def _talos_minerals(cursor_values: Dict[str, int], idx: int) -> List[str]:
    if idx == 0:
        bonus = _TALOS_BONUS_MINERALS[(cursor_values["bonus"] + idx) % len(_TALOS_BONUS_MINERALS)]
        return list(dict.fromkeys(_TALOS_BASE_MINERALS + [bonus]))
    seed_offset = cursor_values["planet_minerals"] + idx * 100
    count = 1 + seed_offset % 3
    picked = [
        _TALOS_PLANET_MINERALS[(seed_offset + i * 37) % len(_TALOS_PLANET_MINERALS)]
        for i in range(count)
    ]
    return list(dict.fromkeys(picked))


def generate_reserved_system(x: int, y: int, z: int) -> GeneratedSystem:
    coords = (x, y, z)
    if coords not in TALOS_ARM:
        raise InvalidGenerationInput(f"({x}, {y}, {z}) is not a reserved Talos Arm coordinate")

    seed = derive("talos", x, y, z)
    cursor = SeedCursor(seed)
    primary = coords == TALOS_PRIME

    star_roll = cursor.claim(0, 4, len(_TALOS_STABLE_STARS))
    count_roll = cursor.claim(4, 2, 3)
    hazard_roll = cursor.claim(6, 2, 11)
    values = {
        "bonus": cursor.claim(8, 2, 2**16),
        "planet_minerals": cursor.claim(10, 2, 2**16),
    }

    star_type = "yellow_dwarf" if primary else _TALOS_STABLE_STARS[star_roll]
    planet_count = 3 if primary else 2 + count_roll
    hazard_level = 0 if primary else hazard_roll
    name = TALOS_ARM[coords]

    planets: List[GeneratedPlanet] = []
    distribution: Dict[int, Dict[str, Any]] = {}
    for idx in range(planet_count):
        planet_type = "rocky" if idx == 0 else _TALOS_PLANET_TYPES[cursor.claim(12 + idx, 1, len(_TALOS_PLANET_TYPES))]
        abundance = "high" if idx == 0 else "medium"
        minerals = _talos_minerals(values, idx)
        planets.append(
            GeneratedPlanet(
                name=f"{name} {idx + 1}",
                type=planet_type,
                size="medium",
                minerals=_fixed_deposits(minerals, abundance, planet_type),
                plants=generate_plants(derive(seed, "planet", idx), planet_type),
            )
        )
        distribution[idx] = {"minerals": minerals, "abundance": abundance}

    return GeneratedSystem(
        coordinates=coords,
        seed=seed,
        name=name,
        star_type=star_type,
        planet_count=planet_count,
        planets=tuple(planets),
        hazard_level=hazard_level,
        base_prices=dict(TALOS_BASE_PRICES),
        resource_distribution={
            "abundant": "iron",
            "common": ["silicon", "copper"],
            "rare": "titanium",
            "planets": distribution,
        },
        special_properties={
            "talos_arm": True,
            "is_reserved": True,
            "tutorial_eligible": True,
            "is_primary_tutorial": primary,
            "discovery_bonus_credits": 100,
            "building_tutorial_ready": True,
        },
    )


def all_reserved_systems() -> List[GeneratedSystem]:
    return [generate_reserved_system(*coords) for coords in TALOS_ARM]


# ── Public entry points ───────────────────────────────────────────────────────

def generate_system(base_seed: Any, x: int, y: int, z: int) -> GeneratedSystem:
    """Derive the core system at (x, y, z) under base_seed."""
    for name, value in (("x", x), ("y", y), ("z", z)):
        _require_int(value, name)
    if (x, y, z) == (0, 0, 0):
        return generate_cradle()
    if is_reserved(x, y, z):
        return generate_reserved_system(x, y, z)
    coords = validate_core_coordinates(x, y, z)
    if base_seed is None or str(base_seed) == "":
        raise InvalidGenerationInput("base_seed must be a non-empty value")
    return _build_generic_system(coords, derive(base_seed, x, y, z), base_prices_modifier=None)


def generate_frontier_system(x: int, y: int, z: int) -> GeneratedSystem:
    """Derive a frontier system from its coordinates alone (full 0..999,999 range)."""
    coords = validate_frontier_coordinates(x, y, z)
    if coords == (0, 0, 0):
        return generate_cradle()
    if is_reserved(x, y, z):
        return generate_reserved_system(x, y, z)
    return _build_generic_system(coords, derive(x, y, z), base_prices_modifier=1)


def generate_grid(base_seed: Any) -> Dict[Coordinate, GeneratedSystem]:
    """Every core lattice system for base_seed (64 systems, including The Cradle)."""
    return {coords: generate_system(base_seed, *coords) for coords in lattice_coordinates()}
