"""
Canonical attribute tables for the StellArb generation engine.

Generators index into these tables with seed-derived integers, so the ORDER of
every list here is part of the output contract: reordering or inserting into a
table changes every world generated before the edit.  Append-only changes are
still breaking for tables indexed by modulo of their length.
"""

from typing import Any, Dict, List, Tuple

# ---------------------------------------------------------------------------
# Star systems
# ---------------------------------------------------------------------------

STAR_TYPES: List[str] = [
    "red_dwarf",
    "yellow_dwarf",
    "orange_dwarf",
    "white_dwarf",
    "blue_giant",
    "red_giant",
    "yellow_giant",
    "neutron_star",
    "binary_system",
    "black_hole_proximity",
]

SYSTEM_NAME_PREFIXES: List[str] = [
    "Alpha", "Beta", "Gamma", "Delta", "Epsilon", "Zeta", "Eta", "Theta", "Iota", "Kappa",
]
SYSTEM_NAME_MIDDLES: List[str] = [
    "Centauri", "Pegasi", "Cygni", "Orionis", "Ursae", "Draconis", "Leonis", "Aquarii", "Scorpii", "Tauri",
]
SYSTEM_NAME_SUFFIXES: List[str] = [
    "Prime", "Major", "Minor", "Alpha", "Beta", "Gamma",
    "I", "II", "III", "IV", "V", "VI", "VII", "VIII", "IX", "X",
]

# Core starter grid: axes 0..9, one system every 3 units.
GRID_SIZE = 10
SYSTEM_SPACING = 3
# Frontier space outside the starter grid.
FRONTIER_COORD_MAX = 999_999

# ---------------------------------------------------------------------------
# Planets
# ---------------------------------------------------------------------------

PLANET_TYPES: List[str] = [
    "rocky",
    "gas_giant",
    "ice",
    "volcanic",
    "oceanic",
    "desert",
    "jungle",
    "barren",
]

PLANET_SIZES: List[str] = ["small", "medium", "large", "massive"]

PLANET_NAME_PREFIXES: List[str] = [
    "Kepler", "Sigma", "Tau", "Alpha", "Beta", "Gamma", "Delta", "Epsilon", "Zeta", "Eta",
    "Theta", "Iota", "Kappa", "Lambda", "Mu", "Nu", "Xi", "Omicron", "Pi", "Rho",
    "Sol", "Luna", "Terra", "Nova", "Proxima", "Centauri", "Andromeda", "Perseus", "Orion",
]

PLANET_NAME_SUFFIXES: List[str] = [
    "Prime", "Minor", "Major", "Alpha", "Beta", "Gamma", "Delta", "One", "Two", "Three",
    "Four", "Five", "Six", "Seven", "Eight", "Nine", "Ten", "Eleven", "Twelve",
    "b", "c", "d", "e", "f", "g", "h", "i", "j", "k",
]

# ---------------------------------------------------------------------------
# Mineral deposits
# ---------------------------------------------------------------------------

COMMON_MINERALS: List[str] = [
    "iron", "copper", "gold", "silver", "platinum", "titanium", "aluminum", "nickel", "zinc", "lead",
    "tin", "tungsten", "cobalt", "chromium", "manganese", "vanadium", "molybdenum", "uranium", "thorium", "plutonium",
    "lithium", "beryllium", "magnesium", "calcium", "sodium", "potassium", "silicon", "carbon", "sulfur", "phosphorus",
    "mercury", "arsenic", "antimony", "bismuth", "cadmium", "indium", "gallium", "germanium", "selenium", "tellurium",
    "rubidium", "strontium", "zirconium", "niobium", "palladium", "rhodium", "ruthenium", "osmium", "iridium", "rhenium",
]

EXOTIC_MINERALS: List[str] = [
    "stellarium", "voidstone", "chronite", "darkmatter", "quantium",
    "etherealite", "singularite", "cosmic_crystal", "zero_point_ore", "omnium",
]

# Percent chance (out of 100) that a deposit draws from EXOTIC_MINERALS.
EXOTIC_CHANCE_PCT = 2

DEPTH_CATEGORIES: List[str] = ["surface", "shallow", "deep", "core"]

DEPOSIT_BASE_QUANTITY_MIN = 1_000
DEPOSIT_BASE_QUANTITY_SPAN = 99_000

PLANET_QUANTITY_MULTIPLIERS: Dict[str, float] = {
    "gas_giant": 0.1,
    "rocky": 1.5,
    "barren": 1.5,
    "volcanic": 2.0,
}

# ---------------------------------------------------------------------------
# Flora (per biome).  An empty list is a valid biome with no flora.
# ---------------------------------------------------------------------------

PLANT_TYPES: Dict[str, List[str]] = {
    "jungle": [
        "megafern", "vinestalker", "sporetree", "glowmoss", "canopygiant",
        "thornvine", "orchidbloom", "rubbertree", "shadowleaf", "mudcrawler",
    ],
    "oceanic": [
        "kelpforest", "coralbloom", "seagrass", "planktonmat", "floatfruit",
        "tidepod", "shellflower", "deepsponge", "biolume", "currentweed",
    ],
    "desert": [
        "cactoid", "sandblossom", "dustshrub", "miragepalm", "thornweed",
        "saltbrush", "crystalcactus", "suntrapper", "sandcrawler", "drysage",
    ],
    "volcanic": [
        "ashbloom", "lavamoss", "sulfurweed", "firevine", "heatstem",
        "magmafern", "cinderfruit", "scorchroot", "emberflower", "pyrobulb",
    ],
    "ice": [
        "frostlichen", "snowbloom", "icemoss", "crystalfern", "winterleaf",
        "glaciervine", "permafrost", "polarweed", "coldsnap", "frozenfruit",
    ],
    "rocky": [
        "stonelichen", "rockweed", "mineralvine", "cliffbloom", "cavemoss",
        "gravelfern", "boulderleaf", "canyonroot", "plateaugrass", "dustlichen",
    ],
    "barren": [
        "voidlichen", "starmoss", "cosmicweed", "solardust", "nullbloom",
        "vacuumfern", "radleaf", "ionvine", "darkmatter", "zerogrowth",
    ],
    "gas_giant": [],
}

MAX_PLANTS_PER_PLANET = 5
PLANT_RETRY_CAP = 10

# ---------------------------------------------------------------------------
# Market mineral catalog (60 entries: 50 real in four tiers + 10 futuristic)
# ---------------------------------------------------------------------------

def _minerals(tier: str, rows: List[Tuple[str, str, int]]) -> List[Dict[str, Any]]:
    return [{"name": name, "category": category, "base_price": price, "tier": tier} for name, category, price in rows]


MINERAL_CATALOG: List[Dict[str, Any]] = (
    _minerals("common", [
        ("Iron", "Metal", 10), ("Copper", "Metal", 15), ("Aluminum", "Metal", 12),
        ("Silicon", "Semiconductor", 18), ("Carbon", "Element", 8), ("Sulfur", "Element", 6),
        ("Limestoneite", "Rock", 5), ("Salt", "Mineral", 4), ("Coal", "Fuel", 7),
        ("Graphite", "Carbon", 14),
    ])
    + _minerals("uncommon", [
        ("Nickel", "Metal", 25), ("Zinc", "Metal", 22), ("Tin", "Metal", 28), ("Lead", "Metal", 20),
        ("Manganese", "Metal", 30), ("Chromium", "Metal", 35), ("Cobalt", "Metal", 45),
        ("Tungsten", "Metal", 55), ("Molybdenum", "Metal", 50), ("Vanadium", "Metal", 48),
        ("Quartz", "Crystal", 32), ("Feldspar", "Mineral", 15), ("Mica", "Mineral", 25),
        ("Bauxite", "Ore", 18), ("Magnetite", "Ore", 22),
    ])
    + _minerals("rare", [
        ("Gold", "Precious", 100), ("Silver", "Precious", 65), ("Platinum", "Precious", 150),
        ("Palladium", "Precious", 140), ("Rhodium", "Precious", 200), ("Titanium", "Metal", 80),
        ("Lithium", "Alkali", 75), ("Beryllium", "Metal", 90), ("Tantalum", "Metal", 120),
        ("Niobium", "Metal", 95), ("Gallium", "Metal", 85), ("Germanium", "Semiconductor", 110),
        ("Indium", "Metal", 130), ("Tellurium", "Metalloid", 105), ("Neodymium", "Rare Earth", 160),
    ])
    + _minerals("exotic", [
        ("Uranium", "Radioactive", 250), ("Thorium", "Radioactive", 220), ("Plutonium", "Radioactive", 400),
        ("Iridium", "Precious", 300), ("Osmium", "Precious", 280), ("Rhenium", "Metal", 350),
        ("Scandium", "Rare Earth", 180), ("Yttrium", "Rare Earth", 170), ("Hafnium", "Metal", 260),
        ("Zirconium", "Metal", 145),
    ])
    + _minerals("futuristic", [
        ("Stellarium", "Futuristic", 500), ("Voidite", "Futuristic", 750), ("Chronite", "Futuristic", 600),
        ("Plasmaite", "Futuristic", 450), ("Darkstone", "Futuristic", 800), ("Quantium", "Futuristic", 650),
        ("Nebulite", "Futuristic", 400), ("Solarite", "Futuristic", 350), ("Cryonite", "Futuristic", 300),
        ("Exotite", "Futuristic", 1000),
    ])
)

MINERAL_BY_NAME: Dict[str, Dict[str, Any]] = {m["name"].lower(): m for m in MINERAL_CATALOG}

# Catalog tiers a market offers, by distance from The Cradle: (upper bound, tiers).
MINERAL_TIER_BANDS: List[Tuple[float, Tuple[str, ...]]] = [
    (100, ("common", "uncommon")),
    (500, ("common", "uncommon", "rare")),
]
DEEP_SPACE_TIERS: Tuple[str, ...] = ("common", "uncommon", "rare", "exotic")

# Futuristic minerals need distance > FUTURISTIC_MIN_DISTANCE and a matching star.
FUTURISTIC_MIN_DISTANCE = 500
DARKSTONE_DISTANCE = 5_000
STAR_TYPE_MINERALS: Dict[str, str] = {
    "neutron_star": "Stellarium",
    "black_hole_proximity": "Voidite",
    "binary_system": "Chronite",
    "blue_giant": "Plasmaite",
    "yellow_giant": "Solarite",
    "red_giant": "Cryonite",
    "pulsar": "Quantium",
    "nebula": "Nebulite",
    "anomaly": "Exotite",
}

# ---------------------------------------------------------------------------
# Races
# ---------------------------------------------------------------------------

RACES: List[str] = ["vex", "solari", "krog", "myrmidon"]

# ---------------------------------------------------------------------------
# Buildings
# ---------------------------------------------------------------------------

BUILDING_FUNCTIONS: List[str] = ["extraction", "refining", "logistics", "civic", "defense"]

BUILDING_TYPES: Dict[str, Dict[str, Any]] = {
    "mineral_mine": {
        "function": "extraction",
        "inputs": {"energy": 10},
        "outputs": {"minerals": 20},
        "staff": {"engineer": 1, "marine": 1},
        "planet_requirement": "rocky",
    },
    "gas_harvester": {
        "function": "extraction",
        "inputs": {"energy": 15},
        "outputs": {"gas": 30},
        "staff": {"engineer": 2},
        "planet_requirement": "gas_giant",
    },
    "water_extractor": {
        "function": "extraction",
        "inputs": {"energy": 5},
        "outputs": {"water": 50},
        "staff": {"engineer": 1},
        "planet_requirement": "ice_or_ocean",
    },
    "ore_refinery": {
        "function": "refining",
        "inputs": {"raw_ore": 100, "energy": 20},
        "outputs": {"refined_metal": 30},
        "staff": {"engineer": 2, "governor": 1},
    },
    "chemical_plant": {
        "function": "refining",
        "inputs": {"gas": 50, "water": 20, "energy": 30},
        "outputs": {"chemicals": 40},
        "staff": {"engineer": 3},
    },
    "warehouse": {
        "function": "logistics",
        "storage": 10_000,
        "decay_rate": 0.01,
        "staff": {"governor": 1},
    },
    "habitat": {
        "function": "civic",
        "population_support": 1_000,
        "staff": {"governor": 2, "marine": 1},
    },
    "defense_platform": {
        "function": "defense",
        "firepower": 100,
        "staff": {"marine": 3},
    },
}

BUILDING_TYPE_NAMES: Dict[str, str] = {
    "mineral_mine": "Mine",
    "gas_harvester": "Harvester",
    "water_extractor": "Extractor",
    "ore_refinery": "Refinery",
    "chemical_plant": "Chemical Plant",
    "warehouse": "Warehouse",
    "habitat": "Habitat",
    "defense_platform": "Defense Platform",
}

BUILDING_BASE_COSTS: Dict[str, int] = {
    "extraction": 10_000,
    "refining": 25_000,
    "logistics": 15_000,
    "civic": 20_000,
    "defense": 30_000,
}

# Cost multiplier applied per tier above 1.
TIER_COST_GROWTH = 1.8
MIN_TIER = 1
MAX_TIER = 5

# Per-attribute tier exponents: inputs grow sub-linearly, outputs super-linearly.
TIER_EXPONENTS: Dict[str, float] = {
    "inputs": 0.8,
    "outputs": 1.2,
    "storage": 1.1,
    "firepower": 1.3,
    "population_support": 1.0,
}

RACIAL_FOCUSES: Dict[str, Dict[str, Any]] = {
    "vex": {
        "preferred_functions": ["logistics", "civic"],
        "modifiers": {"income": 1.2, "corruption": 1.3},
        "special_buildings": ["casino", "trade_hub", "black_market"],
    },
    "solari": {
        "preferred_functions": ["extraction", "refining"],
        "modifiers": {"tech": 1.2, "energy_cost": 1.3},
        "special_buildings": ["research_lab", "sensor_array", "shield_generator"],
    },
    "krog": {
        "preferred_functions": ["refining", "defense"],
        "modifiers": {"durability": 1.3, "pollution": 1.2},
        "special_buildings": ["shipyard", "bunker", "armory"],
    },
    "myrmidon": {
        "preferred_functions": ["civic", "extraction"],
        "modifiers": {"population": 1.2, "cost": 0.8},
        "special_buildings": ["hydroponics", "clone_vats", "hive_housing"],
    },
}

BUILDING_RACIAL_PREFIXES: Dict[str, List[str]] = {
    "vex": ["Profitable", "Golden", "Premium", "Luxury", "Elite"],
    "solari": ["Efficient", "Optimal", "Advanced", "Quantum", "Photonic"],
    "krog": ["Heavy", "Armored", "Fortified", "Brutal", "Massive"],
    "myrmidon": ["Collective", "Swarm", "Hive", "Unity", "Colony"],
}

TIER_NUMERALS: List[str] = ["I", "II", "III", "IV", "V"]

# ---------------------------------------------------------------------------
# Ships
# ---------------------------------------------------------------------------

HULL_SIZES: Dict[str, Dict[str, Any]] = {
    "scout": {"cargo": 10, "fuel_eff": 1.0, "crew": (1, 2), "hardpoints": 1,
              "maneuverability": 80, "hull_points": 100, "maintenance": 50, "sensors": 10, "cost": 10_000},
    "frigate": {"cargo": 50, "fuel_eff": 1.2, "crew": (2, 4), "hardpoints": 2,
                "maneuverability": 65, "hull_points": 250, "maintenance": 150, "sensors": 8, "cost": 50_000},
    "transport": {"cargo": 200, "fuel_eff": 1.5, "crew": (3, 6), "hardpoints": 2,
                  "maneuverability": 40, "hull_points": 500, "maintenance": 300, "sensors": 5, "cost": 200_000},
    "cruiser": {"cargo": 500, "fuel_eff": 1.8, "crew": (5, 10), "hardpoints": 4,
                "maneuverability": 25, "hull_points": 1_000, "maintenance": 600, "sensors": 12, "cost": 1_000_000},
    "titan": {"cargo": 2_000, "fuel_eff": 2.0, "crew": (10, 20), "hardpoints": 8,
              "maneuverability": 10, "hull_points": 2_500, "maintenance": 1_500, "sensors": 15, "cost": 5_000_000},
}

SHIP_RACIAL_BONUSES: Dict[str, Dict[str, float]] = {
    "vex": {"cargo": 1.2, "sensors": 1.0, "hull": 1.0, "cost": 1.0},
    "solari": {"cargo": 1.0, "sensors": 1.2, "hull": 1.0, "cost": 1.0},
    "krog": {"cargo": 1.0, "sensors": 1.0, "hull": 1.2, "cost": 1.0},
    "myrmidon": {"cargo": 1.0, "sensors": 1.0, "hull": 1.0, "cost": 0.8},
}

SHIP_NAME_PREFIXES: Dict[str, List[str]] = {
    "vex": ["Profit", "Greed", "Fortune", "Credit", "Margin"],
    "solari": ["Logic", "Reason", "Theory", "Axiom", "Proof"],
    "krog": ["Hammer", "Fist", "Rage", "Fury", "Storm"],
    "myrmidon": ["Swarm", "Hive", "Unity", "Cluster", "Colony"],
}

SHIP_NAME_SUFFIXES: Dict[str, List[str]] = {
    "scout": ["Scout", "Seeker", "Finder", "Eye", "Wing"],
    "frigate": ["Hunter", "Guard", "Shield", "Blade", "Edge"],
    "transport": ["Hauler", "Carrier", "Mover", "Lifter", "Loader"],
    "cruiser": ["Destroyer", "Warrior", "Champion", "Dominator", "Victor"],
    "titan": ["Colossus", "Behemoth", "Leviathan", "Juggernaut", "Sovereign"],
}

# ---------------------------------------------------------------------------
# NPCs
# ---------------------------------------------------------------------------

NPC_CLASSES: List[str] = ["governor", "navigator", "engineer", "marine"]

# Ordered: the cumulative rarity roll walks this list top to bottom.
RARITY_TIERS: Dict[str, Dict[str, Any]] = {
    "common": {"weight": 70, "skill_range": (20, 60), "wage_multiplier": 1.0},
    "uncommon": {"weight": 20, "skill_range": (40, 75), "wage_multiplier": 1.5},
    "rare": {"weight": 8, "skill_range": (60, 85), "wage_multiplier": 2.5},
    "legendary": {"weight": 2, "skill_range": (75, 100), "wage_multiplier": 5.0},
}

QUIRKS: Dict[str, List[str]] = {
    "positive": ["meticulous", "efficient", "loyal", "frugal", "lucky", "focused", "dedicated", "inspiring"],
    "neutral": ["superstitious", "nocturnal", "chatty", "loner", "methodical", "cautious", "traditional", "spontaneous"],
    "negative": ["lazy", "greedy", "volatile", "reckless", "paranoid", "saboteur", "argumentative", "forgetful"],
}

# Performance delta per quirk; racial traits are included so every NPC quirk resolves.
QUIRK_EFFECTS: Dict[str, float] = {
    "meticulous": 0.10, "efficient": 0.15, "loyal": 0.05, "frugal": 0.05,
    "lucky": 0.08, "focused": 0.10, "dedicated": 0.08, "inspiring": 0.12,
    "superstitious": 0.0, "nocturnal": 0.0, "chatty": -0.02, "loner": 0.0,
    "methodical": 0.02, "cautious": 0.0, "traditional": 0.0, "spontaneous": -0.01,
    "lazy": -0.15, "greedy": -0.05, "volatile": -0.10, "reckless": -0.12,
    "paranoid": -0.05, "saboteur": -0.25, "argumentative": -0.08, "forgetful": -0.07,
    "cold": 0.0, "hive_mind": 0.05,
}

NPC_RACIAL_TRAITS: Dict[str, Dict[str, Any]] = {
    "vex": {"skills": {"barter": 10, "luck": 5}, "required_trait": "greedy", "salary_modifier": 1.2},
    "solari": {"skills": {"science": 10, "navigation": 5}, "required_trait": "cold", "morale_modifier": 0.8},
    "krog": {"skills": {"combat": 10, "engineering": 5}, "required_trait": "volatile", "strike_chance_modifier": 1.5},
    "myrmidon": {"skills": {"agriculture": 10, "industry": 5}, "required_trait": "hive_mind", "minimum_group_size": 3},
}

# (upper chaos bound inclusive, (min quirks, max quirks))
QUIRK_COUNT_BANDS: List[Tuple[int, Tuple[int, int]]] = [
    (20, (0, 1)),
    (50, (1, 2)),
    (80, (1, 2)),
    (100, (2, 3)),
]

# (chaos strictly below, {polarity: weight})
QUIRK_POLARITY_BANDS: List[Tuple[int, Dict[str, int]]] = [
    (30, {"positive": 70, "neutral": 25, "negative": 5}),
    (70, {"positive": 30, "neutral": 40, "negative": 30}),
    (101, {"positive": 5, "neutral": 25, "negative": 70}),
]

# ---------------------------------------------------------------------------
# Employment history
# ---------------------------------------------------------------------------

EMPLOYMENT_OUTCOMES: Dict[str, List[str]] = {
    "clean": [
        "Contract completed",
        "Promoted to Lead",
        "Company dissolved (economic)",
        "Honorable discharge",
        "Project completed successfully",
        "Transferred to sister company",
    ],
    "incident": [
        "Creative differences",
        "Mutual separation",
        "Restructuring",
        "Budget cuts",
        "Equipment malfunction",
        "Minor workplace incident",
    ],
    "catastrophe": [
        "Reactor incident (T4)",
        "Navigation error - lost cargo",
        "Security breach - assets compromised",
        "Catastrophic system failure",
        "Multiple safety violations",
        "Gross insubordination",
    ],
}

# (upper chaos bound inclusive, {outcome category: weight}); each row sums to 100.
OUTCOME_BANDS: List[Tuple[int, Dict[str, int]]] = [
    (20, {"clean": 90, "incident": 10, "catastrophe": 0}),
    (50, {"clean": 70, "incident": 25, "catastrophe": 5}),
    (80, {"clean": 40, "incident": 45, "catastrophe": 15}),
    (100, {"clean": 10, "incident": 50, "catastrophe": 40}),
]

# (chaos strictly above, first month, month span)
TENURE_BANDS: List[Tuple[int, int, int]] = [
    (80, 1, 6),
    (50, 6, 12),
    (-1, 12, 24),
]

EMPLOYER_PREFIXES: List[str] = [
    "Stellar", "Quantum", "Nexus", "Cosmic", "Orbital", "Frontier", "Deep", "Void", "Galactic", "Nova",
]
EMPLOYER_MIDDLES: List[str] = [
    "Mining", "Transport", "Security", "Research", "Trading",
    "Manufacturing", "Energy", "Defense", "Logistics", "Systems",
]
EMPLOYER_SUFFIXES: List[str] = [
    "Corp", "LLC", "Industries", "Enterprises", "Co",
    "Group", "Syndicate", "Consortium", "Holdings", "Solutions",
]

GAP_EMPLOYER = "Unlisted (gap)"
GAP_CHAOS_THRESHOLD = 70
GAP_ROLL_THRESHOLD = 80

NPC_FIRST_NAMES: Dict[str, List[str]] = {
    "vex": ["Grimbly", "Fleezo", "Krix", "Zapper", "Margin", "Profit", "Swindol", "Lucre"],
    "solari": ["Alpha", "Beta", "Gamma", "Delta", "Epsilon", "Zeta", "Theta", "Sigma"],
    "krog": ["Smash", "Bork", "Grunt", "Thud", "Crash", "Boom", "Slam", "Krunk"],
    "myrmidon": ["Cluster", "Unit", "Drone", "Node", "Swarm", "Hive", "Colony", "Matrix"],
}

NPC_LAST_NAMES: Dict[str, List[str]] = {
    "vex": ["Skunt", "Margin", "Bottomline", "Goldgrab", "Cashflow", "Profit", "Greed", "Hoard"],
    "solari": ["Null", "Prime", "Zero", "One", "Binary", "Hex", "Octal", "Decimal"],
    "krog": ["Ironface", "Steelfist", "Rockjaw", "Smashgut", "Doomhammer", "Waraxe", "Bloodfist", "Skullcrusher"],
    "myrmidon": ["447", "Alpha-9", "Beta-3", "Gamma-7", "Delta-2", "Epsilon-5", "Zeta-1", "Theta-8"],
}

# Hire-time wage spiral (applies to a HiredRecruit, not to the pool listing).
HIRE_WAGE_BASE = 50
HIRE_WAGE_GROWTH = 1.06
HIRE_CHAOS_DISCOUNT = 0.003
RACIAL_WAGE_MODIFIERS: Dict[str, float] = {
    "vex": 1.15,
    "solari": 1.0,
    "krog": 0.95,
    "myrmidon": 0.85,
}
