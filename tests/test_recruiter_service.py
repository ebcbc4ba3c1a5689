"""
Recruiter pool lifecycle tests (in-memory repository).

Covers: pool sizing, per-tier rotation intervals and windows, idempotent
rotation, expiry, copy-on-hire isolation, hire exclusivity under threads,
and the Hiring status machine.
"""

import dataclasses
import sys
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

NOW = 1_700_000_123.0


# ── Sizing & rotation ────────────────────────────────────────────────────────

class TestSizing:
    @pytest.mark.parametrize("players,expected", [(0, 10), (10, 10), (35, 11), (50, 15), (100, 30)])
    def test_pool_size_per_class(self, players, expected):
        from recruiter_service import pool_size_per_class
        assert pool_size_per_class(players) == expected

    def test_pool_size_covers_all_classes(self):
        from recruiter_service import pool_size
        assert pool_size(100) == 120

    def test_negative_players_rejected(self):
        from recruiter_service import pool_size_per_class
        from seed_service import InvalidGenerationInput

        with pytest.raises(InvalidGenerationInput):
            pool_size_per_class(-1)


class TestRotationWindow:
    def test_interval_range_and_determinism(self):
        from recruiter_service import rotation_interval_minutes

        for tier in range(1, 30):
            minutes = rotation_interval_minutes(tier)
            assert 30 <= minutes <= 90
            assert minutes == rotation_interval_minutes(tier)

    def test_window_contains_now(self):
        from recruiter_service import rotation_interval_minutes, rotation_window

        start, end = rotation_window(3, NOW)
        assert start <= NOW < end
        assert end - start == rotation_interval_minutes(3) * 60

    def test_same_window_same_start(self):
        from recruiter_service import rotation_window_start

        start = rotation_window_start(2, NOW)
        assert rotation_window_start(2, start) == start
        assert rotation_window_start(2, start + 59) == start

    def test_invalid_tier(self):
        from recruiter_service import rotation_interval_minutes
        from seed_service import InvalidGenerationInput

        with pytest.raises(InvalidGenerationInput):
            rotation_interval_minutes(0)


# ── Rotation ─────────────────────────────────────────────────────────────────

class TestRotation:
    def test_batch_shape(self, memory_repo):
        from constants import NPC_CLASSES
        from recruiter_service import rotate_recruiter_pool

        entries = rotate_recruiter_pool(memory_repo, 1, NOW)
        assert len(entries) == 40
        assert [e.slot_index for e in entries] == list(range(40))
        for cls in NPC_CLASSES:
            assert sum(1 for e in entries if e.npc.npc_class == cls) == 10

    def test_entries_match_generator(self, memory_repo):
        from npc_service import generate_npc
        from recruiter_service import rotate_recruiter_pool

        entries = rotate_recruiter_pool(memory_repo, 2, NOW)
        for entry in entries[:8]:
            expected = generate_npc(2, entry.available_at, entry.slot_index, npc_class=entry.npc.npc_class)
            assert entry.npc == expected

    def test_idempotent_within_window(self, memory_repo):
        from recruiter_service import rotate_recruiter_pool, rotation_window

        first = rotate_recruiter_pool(memory_repo, 1, NOW)
        start, end = rotation_window(1, NOW)
        again = rotate_recruiter_pool(memory_repo, 1, end - 1)
        assert first == again

    def test_next_window_expires_previous(self, memory_repo):
        from recruiter_service import rotate_recruiter_pool, rotation_window

        first = rotate_recruiter_pool(memory_repo, 1, NOW)
        _, end = rotation_window(1, NOW)
        second = rotate_recruiter_pool(memory_repo, 1, end)
        assert {e.entry_id for e in first}.isdisjoint({e.entry_id for e in second})
        assert memory_repo.get_entry(first[0].entry_id) is None

    def test_tiers_are_independent(self, memory_repo):
        from recruiter_service import rotate_recruiter_pool

        tier1 = rotate_recruiter_pool(memory_repo, 1, NOW)
        tier2 = rotate_recruiter_pool(memory_repo, 2, NOW)
        assert memory_repo.get_entry(tier1[0].entry_id) is not None
        assert tier2[0].level_tier == 2

    def test_active_players_scale_pool(self, memory_repo):
        from recruiter_service import rotate_recruiter_pool
        assert len(rotate_recruiter_pool(memory_repo, 4, NOW, active_players=100)) == 120

    def test_rotation_time(self, memory_repo):
        import time

        from recruiter_service import rotate_recruiter_pool

        start = time.perf_counter()
        entries = rotate_recruiter_pool(memory_repo, 6, NOW, active_players=100)
        assert len(entries) == 120
        assert time.perf_counter() - start < 0.5


# ── Copy-on-hire ─────────────────────────────────────────────────────────────

class TestCopyOnHire:
    def test_hire_copies_fields(self, memory_repo):
        from recruiter_service import hire, rotate_recruiter_pool

        entry = rotate_recruiter_pool(memory_repo, 1, NOW)[0]
        recruit = hire(entry, hired_at=NOW)
        assert recruit.source_entry_id == entry.entry_id
        assert recruit.hired_at == NOW
        assert recruit.skill == entry.npc.skill
        assert recruit.chaos_factor == entry.npc.chaos_factor
        assert recruit.employment_history == entry.npc.employment_history

    def test_recruit_is_immutable_and_hashable(self, memory_repo):
        from npc_service import generate_npc
        from recruiter_service import hire, rotate_recruiter_pool

        entry = rotate_recruiter_pool(memory_repo, 1, NOW)[0]
        recruit = hire(entry, hired_at=NOW)
        with pytest.raises(dataclasses.FrozenInstanceError):
            recruit.skill = 1
        with pytest.raises(TypeError):
            recruit.skill_bonuses["barter"] = 999
        assert hash(recruit) == hash(hire(entry, hired_at=NOW))
        regenerated = generate_npc(1, entry.available_at, entry.slot_index, npc_class=entry.npc.npc_class)
        assert hash(entry.npc) == hash(regenerated)

    def test_expiry_leaves_recruit_unchanged(self, memory_repo):
        from recruiter_service import hire, rotate_recruiter_pool

        entry = rotate_recruiter_pool(memory_repo, 1, NOW)[0]
        recruit = hire(entry, hired_at=NOW)
        snapshot = dataclasses.asdict(recruit)
        memory_repo.expire_before(1, float("inf"))
        assert memory_repo.get_entry(entry.entry_id) is None
        assert dataclasses.asdict(recruit) == snapshot

    def test_hire_does_not_mutate_entry(self, memory_repo):
        from recruiter_service import hire, rotate_recruiter_pool

        entry = rotate_recruiter_pool(memory_repo, 1, NOW)[0]
        before = dataclasses.asdict(entry)
        hire(entry, hired_at=NOW)
        assert dataclasses.asdict(entry) == before


# ── Hire exclusivity ─────────────────────────────────────────────────────────

class TestHireExclusivity:
    def test_second_hire_rejected(self, memory_repo):
        from recruiter_service import EntryAlreadyHired, rotate_recruiter_pool

        entry = rotate_recruiter_pool(memory_repo, 1, NOW)[0]
        memory_repo.record_hire(entry.entry_id, hired_at=NOW)
        with pytest.raises(EntryAlreadyHired):
            memory_repo.record_hire(entry.entry_id, hired_at=NOW)

    def test_unknown_entry(self, memory_repo):
        from recruiter_service import UnknownPoolEntry

        with pytest.raises(UnknownPoolEntry):
            memory_repo.record_hire("1-0-0")

    def test_concurrent_hires_single_winner(self, memory_repo):
        from recruiter_service import EntryAlreadyHired, rotate_recruiter_pool

        entry = rotate_recruiter_pool(memory_repo, 1, NOW)[5]

        def attempt(_):
            try:
                memory_repo.record_hire(entry.entry_id, hired_at=NOW)
                return True
            except EntryAlreadyHired:
                return False

        with ThreadPoolExecutor(max_workers=8) as pool:
            outcomes = list(pool.map(attempt, range(16)))
        assert outcomes.count(True) == 1
        assert memory_repo.hired(entry.entry_id) is not None


# ── Hiring status machine ────────────────────────────────────────────────────

def _hiring(memory_repo):
    from recruiter_service import Hiring, rotate_recruiter_pool

    entry = rotate_recruiter_pool(memory_repo, 1, NOW)[0]
    recruit = memory_repo.record_hire(entry.entry_id, hired_at=NOW)
    return Hiring.start(recruit)


class TestHiring:
    def test_start_uses_hire_wage(self, memory_repo):
        hiring = _hiring(memory_repo)
        assert hiring.status == "active"
        assert hiring.wage == hiring.hired_recruit.calculate_wage()
        assert hiring.hired_at == NOW
        assert hiring.display_name == hiring.hired_recruit.name

    def test_custom_name(self, memory_repo):
        from recruiter_service import Hiring

        recruit = _hiring(memory_repo).hired_recruit
        assert Hiring.start(recruit, custom_name="Old Reliable").display_name == "Old Reliable"

    def test_assign_and_unassign(self, memory_repo):
        from recruiter_service import BuildingRef, ShipRef

        hiring = _hiring(memory_repo)
        hiring.assign_to(ShipRef("ship-1"))
        assert hiring.assignable == ShipRef("ship-1")
        hiring.assign_to(BuildingRef("bldg-9"))
        assert hiring.assignable.kind == "building"
        hiring.unassign()
        assert hiring.assignable is None

    def test_assign_rejects_untyped_asset(self, memory_repo):
        hiring = _hiring(memory_repo)
        with pytest.raises(ValueError):
            hiring.assign_to("ship-1")

    @pytest.mark.parametrize("reason", ["fired", "deceased", "retired", "striking"])
    def test_terminal_statuses(self, memory_repo, reason):
        from recruiter_service import InvalidHiringTransition, ShipRef

        hiring = _hiring(memory_repo)
        hiring.assign_to(ShipRef("ship-1"))
        hiring.terminate(reason, terminated_at=NOW + 60)
        assert hiring.status == reason
        assert hiring.terminated_at == NOW + 60
        assert hiring.assignable is None
        with pytest.raises(InvalidHiringTransition):
            hiring.assign_to(ShipRef("ship-2"))
        with pytest.raises(InvalidHiringTransition):
            hiring.unassign()
        with pytest.raises(InvalidHiringTransition):
            hiring.terminate("fired")

    def test_bad_reason(self, memory_repo):
        from recruiter_service import InvalidHiringTransition

        hiring = _hiring(memory_repo)
        with pytest.raises(InvalidHiringTransition):
            hiring.terminate("active")
        assert hiring.status == "active"
