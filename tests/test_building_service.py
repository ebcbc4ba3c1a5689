"""
Building & ship blueprint tests.

Covers: input validation, archetype selection, tier power-law scaling,
racial modifiers, the 1.8x cost curve, ship racial bonuses and naming,
half-up rounding of scaled attributes, blueprint latency.
"""

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))


# ── Validation ───────────────────────────────────────────────────────────────

class TestBuildingValidation:
    def test_invalid_race(self):
        from building_service import generate_building
        from seed_service import InvalidGenerationInput

        with pytest.raises(InvalidGenerationInput, match="race"):
            generate_building("human", "civic", 1, "loc")

    def test_invalid_function(self):
        from building_service import generate_building
        from seed_service import InvalidGenerationInput

        with pytest.raises(InvalidGenerationInput, match="function"):
            generate_building("vex", "farming", 1, "loc")

    @pytest.mark.parametrize("tier", [0, 6, True, 2.5])
    def test_invalid_tier(self, tier):
        from building_service import generate_building
        from seed_service import InvalidGenerationInput

        with pytest.raises(InvalidGenerationInput, match="Tier"):
            generate_building("vex", "civic", tier, "loc")


# ── Buildings ────────────────────────────────────────────────────────────────

class TestBuildings:
    def test_deterministic(self):
        from building_service import generate_building
        assert generate_building("krog", "refining", 3, "loc-a") == generate_building("krog", "refining", 3, "loc-a")

    def test_archetype_matches_function(self):
        from building_service import generate_all_building_variants
        from constants import BUILDING_TYPES

        variants = generate_all_building_variants()
        assert len(variants) == 100
        for b in variants:
            assert BUILDING_TYPES[b.building_type]["function"] == b.function

    def test_name_format(self):
        from building_service import generate_building

        warehouse = generate_building("vex", "logistics", 3, "loc")
        assert warehouse.building_type == "warehouse"
        assert warehouse.name == "Premium Warehouse Mark III"

    def test_cost_curve(self):
        from building_service import generate_building
        from constants import BUILDING_FUNCTIONS

        for function in BUILDING_FUNCTIONS:
            costs = [generate_building("solari", function, t, "loc").cost for t in range(1, 6)]
            for lower, upper in zip(costs, costs[1:]):
                assert upper / lower == pytest.approx(1.8, abs=0.001)

    def test_cost_base(self):
        from building_service import generate_building
        assert generate_building("vex", "defense", 1, "loc").cost == 30_000
        assert generate_building("vex", "defense", 2, "loc").cost == 54_000

    def test_verify_tier_scaling_reports_ratios(self):
        from building_service import verify_tier_scaling

        results = verify_tier_scaling()
        for data in results.values():
            assert data["avg_cost_ratio"] == pytest.approx(1.8, abs=0.001)
        # single-archetype functions keep the same building across tiers
        for function in ("logistics", "civic", "defense"):
            assert results[function]["avg_output_ratio"] > 1.0

    def test_defense_firepower_scaling(self):
        from building_service import generate_building
        from seed_service import round_half_up

        tier1 = generate_building("vex", "defense", 1, "loc")
        tier4 = generate_building("vex", "defense", 4, "loc")
        assert tier1.attributes["firepower"] == 100
        assert tier4.attributes["firepower"] == round_half_up(100 * 4 ** 1.3)

    def test_outputs_outgrow_inputs(self):
        from building_service import _scaled_attributes
        from constants import BUILDING_TYPES

        base = BUILDING_TYPES["ore_refinery"]
        t1 = _scaled_attributes(base, 1)
        t5 = _scaled_attributes(base, 5)
        out_growth = t5["outputs"]["refined_metal"] / t1["outputs"]["refined_metal"]
        in_growth = t5["inputs"]["raw_ore"] / t1["inputs"]["raw_ore"]
        assert out_growth > in_growth

    def test_variance_bounds(self):
        from building_service import generate_building

        for i in range(30):
            # krog does not prefer logistics: plain -10..+10% variance
            b = generate_building("krog", "logistics", 2, f"loc-{i}")
            assert 0.9 - 1e-9 <= b.attributes["efficiency_modifier"] <= 1.1 + 1e-9
            # vex prefers logistics: variance times 1.1
            v = generate_building("vex", "logistics", 2, f"loc-{i}")
            assert 0.99 - 1e-9 <= v.attributes["efficiency_modifier"] <= 1.21 + 1e-9


# ── Racial modifiers ─────────────────────────────────────────────────────────

class TestRacialBuildingModifiers:
    def test_vex_corruption_and_income(self):
        from building_service import generate_building

        for function in ("extraction", "civic", "defense"):
            b = generate_building("vex", function, 2, "loc")
            assert b.attributes["corruption_rate"] == pytest.approx(0.13)
            assert b.attributes["income_bonus"] == 1.2

    def test_other_races_have_no_corruption(self):
        from building_service import generate_building

        for race in ("solari", "krog", "myrmidon"):
            assert "corruption_rate" not in generate_building(race, "civic", 2, "loc").attributes

    def test_krog_durability_and_pollution(self):
        from building_service import generate_building

        b = generate_building("krog", "defense", 3, "loc")
        assert b.attributes["durability_bonus"] == 1.3
        assert b.attributes["pollution_output"] == 1.2

    def test_solari_energy_inputs(self):
        from building_service import generate_building
        from constants import BUILDING_TYPES
        from seed_service import round_half_up

        b = generate_building("solari", "refining", 3, "loc")
        base_energy = BUILDING_TYPES[b.building_type]["inputs"]["energy"]
        scaled = round_half_up(base_energy * 3 ** 0.8)
        assert b.attributes["inputs"]["energy"] == round_half_up(scaled * 1.3)

    def test_solari_half_energy_rounds_up(self):
        from building_service import _apply_racial_modifiers, _scaled_attributes
        from constants import BUILDING_TYPES

        attributes = _scaled_attributes(BUILDING_TYPES["water_extractor"], 1)
        _apply_racial_modifiers(attributes, "solari", "extraction")
        # 5 * 1.3 = 6.5
        assert attributes["inputs"]["energy"] == 7

    def test_myrmidon_population(self):
        from building_service import generate_building

        b = generate_building("myrmidon", "civic", 2, "loc")
        assert b.building_type == "habitat"
        assert b.attributes["population_support"] == 2400


# ── Ships ────────────────────────────────────────────────────────────────────

class TestShips:
    def test_deterministic(self):
        from building_service import generate_ship
        assert generate_ship("vex", "frigate", 2) == generate_ship("vex", "frigate", 2)

    def test_invalid_hull(self):
        from building_service import generate_ship
        from seed_service import InvalidGenerationInput

        with pytest.raises(InvalidGenerationInput, match="hull_size"):
            generate_ship("vex", "dreadnought", 2)

    def test_all_types(self):
        from building_service import generate_all_ship_types
        assert len(generate_all_ship_types()) == 100

    def test_cost_ratio(self):
        from building_service import generate_ship

        costs = [generate_ship("vex", "frigate", t).cost for t in range(1, 6)]
        for lower, upper in zip(costs, costs[1:]):
            assert upper / lower == pytest.approx(1.8, abs=0.001)

    def test_higher_tier_better(self):
        from building_service import generate_ship

        t1 = generate_ship("vex", "frigate", 1)
        t5 = generate_ship("vex", "frigate", 5)
        assert t5.cargo_capacity > t1.cargo_capacity
        assert t5.hull_points > t1.hull_points

    def test_crew_and_hardpoints_from_table(self):
        from building_service import generate_ship

        ship = generate_ship("solari", "cruiser", 4)
        assert (ship.crew_min, ship.crew_max) == (5, 10)
        assert ship.hardpoints == 4
        assert 1 <= ship.maneuverability <= 100

    def test_myrmidon_discount(self):
        from building_service import generate_ship

        vex = generate_ship("vex", "frigate", 3)
        myrmidon = generate_ship("myrmidon", "frigate", 3)
        assert myrmidon.cost / vex.cost == pytest.approx(0.8, abs=0.001)

    def test_vex_cargo_skew(self):
        from building_service import cargo_skew, verify_racial_bonuses

        assert cargo_skew("vex") == pytest.approx(1.2, abs=0.01)
        assert cargo_skew("krog") == pytest.approx(1.0)
        averages = verify_racial_bonuses()
        for race in ("solari", "krog", "myrmidon"):
            assert averages["vex"]["cargo"] > averages[race]["cargo"]

    def test_name(self):
        from building_service import generate_ship
        assert generate_ship("krog", "titan", 2).name == "Fist Behemoth MkII"


# ── Latency ──────────────────────────────────────────────────────────────────

class TestBlueprintLatency:
    def test_building_generation_time(self):
        import time

        from building_service import generate_building
        from constants import BUILDING_FUNCTIONS, RACES

        keys = [(r, f, t) for r in RACES for f in BUILDING_FUNCTIONS for t in range(1, 6)]
        start = time.perf_counter()
        for race, function, tier in keys:
            generate_building(race, function, tier, "latency")
        assert (time.perf_counter() - start) / len(keys) < 0.010

    def test_ship_generation_time(self):
        import time

        from building_service import generate_ship
        from constants import HULL_SIZES, RACES

        keys = [(r, h, t) for r in RACES for h in HULL_SIZES for t in range(1, 6)]
        start = time.perf_counter()
        for race, hull, tier in keys:
            generate_ship(race, hull, tier)
        assert (time.perf_counter() - start) / len(keys) < 0.010
