"""
Building & ship service — tier-scaled structures and hulls for each race.

Both generators are keyed only by their inputs:

    building seed = derive(race, function, tier, location_seed)
    ship seed     = derive(race, hull_size, tier)

so the same request always yields the same blueprint.  Costs follow a
1.8x-per-tier power law; outputs grow faster than inputs.
"""

import copy
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from constants import (
    BUILDING_BASE_COSTS,
    BUILDING_FUNCTIONS,
    BUILDING_RACIAL_PREFIXES,
    BUILDING_TYPE_NAMES,
    BUILDING_TYPES,
    HULL_SIZES,
    MAX_TIER,
    MIN_TIER,
    RACES,
    RACIAL_FOCUSES,
    SHIP_NAME_PREFIXES,
    SHIP_NAME_SUFFIXES,
    SHIP_RACIAL_BONUSES,
    TIER_COST_GROWTH,
    TIER_EXPONENTS,
    TIER_NUMERALS,
)
from seed_service import InvalidGenerationInput, SeedCursor, derive, round_half_up

TIERS = list(range(MIN_TIER, MAX_TIER + 1))
STANDARD_LOCATION_SEED = "standard_location_seed"

# Corruption a vex building carries before its racial multiplier.
VEX_BASE_CORRUPTION = 0.1
PREFERRED_FUNCTION_EFFICIENCY = 1.1
SPECIAL_ARCHETYPE_THRESHOLD = 70


@dataclass(frozen=True)
class GeneratedBuilding:
    race: str
    function: str
    building_type: Optional[str]
    tier: int
    name: str
    attributes: Dict[str, Any]
    cost: int
    seed: str


@dataclass(frozen=True)
class GeneratedShip:
    race: str
    hull_size: str
    tier: int
    name: str
    cargo_capacity: int
    fuel_efficiency: float
    maneuverability: int
    hardpoints: int
    crew_min: int
    crew_max: int
    maintenance_rate: int
    hull_points: int
    sensor_range: int
    cost: int
    seed: str


# ── Validation ────────────────────────────────────────────────────────────────

def _validate_race(race: Any) -> str:
    if race not in RACES:
        raise InvalidGenerationInput(f"Invalid race: {race!r} (expected one of {', '.join(RACES)})")
    return race


def _validate_tier(tier: Any) -> int:
    if isinstance(tier, bool) or not isinstance(tier, int) or tier not in TIERS:
        raise InvalidGenerationInput(f"Tier must be {MIN_TIER}-{MAX_TIER}, got {tier!r}")
    return tier


def tier_multiplier(tier: int) -> float:
    return TIER_COST_GROWTH ** (tier - 1)


def building_cost(function: str, tier: int) -> int:
    return round_half_up(BUILDING_BASE_COSTS[function] * tier_multiplier(tier))


# ── Buildings ─────────────────────────────────────────────────────────────────

def building_candidates(function: str) -> List[str]:
    return [name for name, data in BUILDING_TYPES.items() if data["function"] == function]


def _select_building_type(cursor: SeedCursor, function: str, race: str) -> Optional[str]:
    candidates = building_candidates(function)
    focus = RACIAL_FOCUSES[race]
    special_chance = cursor.claim(0, 1, 100)
    idx_roll = cursor.claim(1, 1, 256)
    if not candidates:
        return None
    if function in focus["preferred_functions"] and focus["special_buildings"]:
        if special_chance > SPECIAL_ARCHETYPE_THRESHOLD:
            return candidates[0]
    return candidates[idx_roll % len(candidates)]


def _scaled_attributes(base: Dict[str, Any], tier: int) -> Dict[str, Any]:
    attributes: Dict[str, Any] = {}
    if base.get("inputs"):
        attributes["inputs"] = {k: round_half_up(v * tier ** TIER_EXPONENTS["inputs"]) for k, v in base["inputs"].items()}
    if base.get("outputs"):
        attributes["outputs"] = {k: round_half_up(v * tier ** TIER_EXPONENTS["outputs"]) for k, v in base["outputs"].items()}
    for key in ("storage", "firepower", "population_support"):
        if base.get(key):
            attributes[key] = round_half_up(base[key] * tier ** TIER_EXPONENTS[key])

    attributes["staff"] = dict(base.get("staff") or {})
    for key in ("planet_requirement", "decay_rate"):
        if key in base:
            attributes[key] = base[key]
    return attributes


def _apply_racial_modifiers(attributes: Dict[str, Any], race: str, function: str) -> None:
    focus = RACIAL_FOCUSES[race]
    modifiers = focus["modifiers"]

    if function in focus["preferred_functions"]:
        attributes["efficiency_modifier"] = attributes.get("efficiency_modifier", 1.0) * PREFERRED_FUNCTION_EFFICIENCY

    if race == "vex":
        attributes["corruption_rate"] = VEX_BASE_CORRUPTION * modifiers["corruption"]
        attributes["income_bonus"] = modifiers["income"]
    elif race == "solari":
        inputs = attributes.get("inputs") or {}
        if "energy" in inputs:
            inputs["energy"] = round_half_up(inputs["energy"] * modifiers["energy_cost"])
    elif race == "krog":
        attributes["durability_bonus"] = modifiers["durability"]
        attributes["pollution_output"] = modifiers["pollution"]
    elif race == "myrmidon":
        if "population_support" in attributes:
            attributes["population_support"] = round_half_up(attributes["population_support"] * modifiers["population"])


def building_name(race: str, building_type: Optional[str], tier: int) -> str:
    prefix = BUILDING_RACIAL_PREFIXES[race][tier - 1]
    if building_type is None:
        type_name = "Structure"
    else:
        type_name = BUILDING_TYPE_NAMES.get(building_type) or building_type.replace("_", " ").title()
    return f"{prefix} {type_name} Mark {TIER_NUMERALS[tier - 1]}"


def generate_building(race: str, function: str, tier: int, location_seed: Any) -> GeneratedBuilding:
    """
    Blueprint for a (race, function, tier) building at a location.

    Inputs scale with tier^0.8, outputs with tier^1.2, storage tier^1.1,
    firepower tier^1.3 and population linearly.  A seeded efficiency variance
    of -10..+10% is stored as efficiency_modifier.
    """
    _validate_race(race)
    if function not in BUILDING_FUNCTIONS:
        raise InvalidGenerationInput(f"Invalid function: {function!r} (expected one of {', '.join(BUILDING_FUNCTIONS)})")
    _validate_tier(tier)

    seed = derive(race, function, tier, location_seed)
    cursor = SeedCursor(seed)
    building_type = _select_building_type(cursor, function, race)

    base = BUILDING_TYPES.get(building_type, {}) if building_type else {}
    attributes = _scaled_attributes(base, tier)
    variance = cursor.claim(10, 2, 21) - 10
    attributes["efficiency_modifier"] = 1.0 + variance / 100.0
    _apply_racial_modifiers(attributes, race, function)

    return GeneratedBuilding(
        race=race,
        function=function,
        building_type=building_type,
        tier=tier,
        name=building_name(race, building_type, tier),
        attributes=attributes,
        cost=building_cost(function, tier),
        seed=seed,
    )


def generate_all_building_variants(location_seed: Any = STANDARD_LOCATION_SEED) -> List[GeneratedBuilding]:
    """Every race x function x tier combination (100 blueprints)."""
    return [
        generate_building(race, function, tier, location_seed)
        for race in RACES
        for function in BUILDING_FUNCTIONS
        for tier in TIERS
    ]


def _effective_output(building: GeneratedBuilding) -> int:
    attrs = building.attributes
    if attrs.get("outputs"):
        return sum(attrs["outputs"].values())
    for key in ("storage", "firepower", "population_support"):
        if attrs.get(key):
            return attrs[key]
    return 0


def verify_tier_scaling(race: str = "vex", location_seed: Any = "test_seed") -> Dict[str, Dict[str, float]]:
    """Average tier-over-tier cost and output ratios per function."""
    results: Dict[str, Dict[str, float]] = {}
    for function in BUILDING_FUNCTIONS:
        buildings = [generate_building(race, function, tier, location_seed) for tier in TIERS]
        cost_ratios: List[float] = []
        output_ratios: List[float] = []
        for lower, upper in zip(buildings, buildings[1:]):
            cost_ratios.append(upper.cost / lower.cost)
            lo, hi = _effective_output(lower), _effective_output(upper)
            if lo > 0 and hi > 0:
                output_ratios.append(hi / lo)
        results[function] = {
            "avg_cost_ratio": sum(cost_ratios) / len(cost_ratios),
            "avg_output_ratio": sum(output_ratios) / len(output_ratios) if output_ratios else 0.0,
        }
    return results


# ── Ships ─────────────────────────────────────────────────────────────────────

def _variance(cursor: SeedCursor, byte_offset: int) -> int:
    return cursor.claim(byte_offset, 2, 21) - 10


def _scaled_hull_stats(race: str, hull_size: str, tier: int) -> Dict[str, Any]:
    """Tier-scaled hull figures with seeded variance, before racial bonuses."""
    seed = derive(race, hull_size, tier)
    cursor = SeedCursor(seed)
    base = HULL_SIZES[hull_size]
    tm = tier_multiplier(tier)

    cargo_var = _variance(cursor, 0)
    fuel_var = _variance(cursor, 2)
    maneuver_var = _variance(cursor, 4)
    hull_var = _variance(cursor, 6)
    maint_var = _variance(cursor, 8)
    sensor_var = _variance(cursor, 10)

    return {
        "seed": seed,
        "cargo": round_half_up(base["cargo"] * (1 + cargo_var / 100.0) * tm),
        "fuel_efficiency": round_half_up(base["fuel_eff"] * (1 + fuel_var / 100.0), 2),
        "maneuverability": max(1, min(100, base["maneuverability"] + maneuver_var)),
        "hull_points": round_half_up(round_half_up(base["hull_points"] * (1 + hull_var / 100.0)) * tm),
        "maintenance_rate": round_half_up(round_half_up(base["maintenance"] * (1 + maint_var / 100.0)) * tm),
        "sensor_range": round_half_up(round_half_up(base["sensors"] * (1 + sensor_var / 100.0)) * tm),
    }


def ship_name(race: str, hull_size: str, tier: int) -> str:
    prefixes = SHIP_NAME_PREFIXES[race]
    suffixes = SHIP_NAME_SUFFIXES[hull_size]
    return f"{prefixes[(tier - 1) % len(prefixes)]} {suffixes[(tier - 1) % len(suffixes)]} Mk{TIER_NUMERALS[tier - 1]}"


def generate_ship(race: str, hull_size: str, tier: int) -> GeneratedShip:
    _validate_race(race)
    if hull_size not in HULL_SIZES:
        raise InvalidGenerationInput(f"Invalid hull_size: {hull_size!r} (expected one of {', '.join(HULL_SIZES)})")
    _validate_tier(tier)

    stats = _scaled_hull_stats(race, hull_size, tier)
    bonus = SHIP_RACIAL_BONUSES[race]
    base = HULL_SIZES[hull_size]
    crew_min, crew_max = base["crew"]

    return GeneratedShip(
        race=race,
        hull_size=hull_size,
        tier=tier,
        name=ship_name(race, hull_size, tier),
        cargo_capacity=round_half_up(stats["cargo"] * bonus["cargo"]),
        fuel_efficiency=stats["fuel_efficiency"],
        maneuverability=stats["maneuverability"],
        hardpoints=base["hardpoints"],
        crew_min=crew_min,
        crew_max=crew_max,
        maintenance_rate=stats["maintenance_rate"],
        hull_points=round_half_up(stats["hull_points"] * bonus["hull"]),
        sensor_range=round_half_up(stats["sensor_range"] * bonus["sensors"]),
        cost=round_half_up(base["cost"] * tier_multiplier(tier) * bonus["cost"]),
        seed=stats["seed"],
    )


def generate_all_ship_types() -> List[GeneratedShip]:
    """Every race x hull x tier combination (100 ships)."""
    return [
        generate_ship(race, hull_size, tier)
        for race in RACES
        for hull_size in HULL_SIZES
        for tier in TIERS
    ]


def verify_racial_bonuses() -> Dict[str, Dict[str, float]]:
    """Per-race averages of the bonus-affected ship stats."""
    results: Dict[str, Dict[str, float]] = {}
    for race in RACES:
        ships = [generate_ship(race, hull_size, tier) for hull_size in HULL_SIZES for tier in TIERS]
        n = float(len(ships))
        results[race] = {
            "cargo": sum(s.cargo_capacity for s in ships) / n,
            "sensors": sum(s.sensor_range for s in ships) / n,
            "hull": sum(s.hull_points for s in ships) / n,
            "cost": sum(s.cost for s in ships) / n,
        }
    return results


def cargo_skew(race: str) -> float:
    """Ratio of a race's total ship cargo to the same ships without racial bonuses."""
    _validate_race(race)
    bonused = 0
    neutral = 0
    for hull_size in HULL_SIZES:
        for tier in TIERS:
            bonused += generate_ship(race, hull_size, tier).cargo_capacity
            neutral += _scaled_hull_stats(race, hull_size, tier)["cargo"]
    return bonused / neutral


def building_as_dict(building: GeneratedBuilding) -> Dict[str, Any]:
    return {
        "race": building.race,
        "function": building.function,
        "building_type": building.building_type,
        "tier": building.tier,
        "name": building.name,
        "attributes": copy.deepcopy(building.attributes),
        "cost": building.cost,
        "seed": building.seed,
    }
