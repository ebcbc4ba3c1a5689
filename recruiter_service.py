"""
Recruiter service — the shared, rotating pool of hireable NPCs.

Lifecycle:
  - Each level tier rotates on its own fixed interval (30-90 minutes, derived
    from the tier, never from a clock).  All calls inside one window see the
    same rotation timestamp, so rotating twice in a window is a no-op.
  - A pool entry is shared by every player until someone hires it.
  - hire() deep-copies the entry's NPC into an immutable HiredRecruit; later
    expiry or mutation of the pool never reaches the copy.
  - A Hiring tracks one player's employment of a HiredRecruit: assignment to
    a ship or building, and termination into a terminal status.

Hire exclusivity (at most one HiredRecruit per entry) is the repository's job.
"""

import copy
import threading
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Protocol, Tuple, Union

from constants import NPC_CLASSES
from npc_service import GeneratedNpc, JobRecord, exponential_wage, generate_npc
from seed_service import InvalidGenerationInput, derive, extract, round_half_up

POOL_PLAYER_FRACTION = 0.3
MIN_POOL_PER_CLASS = 10
ROTATION_MIN_MINUTES = 30
ROTATION_MAX_MINUTES = 90

HIRING_STATUSES = ("active", "fired", "deceased", "retired", "striking")
TERMINAL_STATUSES = frozenset(HIRING_STATUSES[1:])


class InvalidHiringTransition(ValueError):
    """A Hiring in a terminal status was asked to change."""


class EntryAlreadyHired(ValueError):
    """A pool entry was hired a second time."""


class UnknownPoolEntry(ValueError):
    """No live pool entry has the requested id."""


# ── Pool sizing & rotation ────────────────────────────────────────────────────

def pool_size_per_class(active_players: int) -> int:
    if active_players < 0:
        raise InvalidGenerationInput(f"active_players must be >= 0, got {active_players}")
    return max(round_half_up(active_players * POOL_PLAYER_FRACTION), MIN_POOL_PER_CLASS)


def pool_size(active_players: int) -> int:
    return pool_size_per_class(active_players) * len(NPC_CLASSES)


def _validate_tier(level_tier: Any) -> int:
    if isinstance(level_tier, bool) or not isinstance(level_tier, int) or level_tier < 1:
        raise InvalidGenerationInput(f"level_tier must be an integer >= 1, got {level_tier!r}")
    return level_tier


def rotation_interval_minutes(level_tier: int) -> int:
    _validate_tier(level_tier)
    span = ROTATION_MAX_MINUTES - ROTATION_MIN_MINUTES + 1
    return ROTATION_MIN_MINUTES + extract(derive("recruiter_rotation", level_tier), 0, 2, span)


def rotation_window(level_tier: int, now: float) -> Tuple[int, int]:
    """(start, end) in epoch seconds of the rotation window containing now."""
    interval_s = rotation_interval_minutes(level_tier) * 60
    start = int(now // interval_s) * interval_s
    return start, start + interval_s


def rotation_window_start(level_tier: int, now: float) -> int:
    return rotation_window(level_tier, now)[0]


# ── Pool entries & hired copies ───────────────────────────────────────────────

@dataclass(frozen=True)
class RecruiterPoolEntry:
    entry_id: str
    npc: GeneratedNpc
    level_tier: int
    slot_index: int
    available_at: int
    expires_at: int

    def is_available(self, now: float) -> bool:
        return self.available_at <= now < self.expires_at


def pool_entry_id(level_tier: int, rotation_timestamp: int, slot_index: int) -> str:
    return f"{level_tier}-{rotation_timestamp}-{slot_index}"


@dataclass(frozen=True)
class HiredRecruit:
    source_entry_id: str
    hired_at: float
    race: str
    npc_class: str
    name: str
    skill: int
    rarity: str
    chaos_factor: int
    quirks: Tuple[str, ...]
    employment_history: Tuple[JobRecord, ...]
    base_wage: int
    level_tier: int
    seed: str
    skill_bonuses: Tuple[Tuple[str, int], ...] = ()

    def calculate_wage(self, modifier: float = 1.0) -> int:
        return exponential_wage(self.skill, chaos_factor=self.chaos_factor, race=self.race, modifier=modifier)


def hire(pool_entry: RecruiterPoolEntry, hired_at: Optional[float] = None) -> HiredRecruit:
    """Copy-on-hire: every generation-derived field is deep-copied off the entry."""
    npc = copy.deepcopy(pool_entry.npc)
    return HiredRecruit(
        source_entry_id=pool_entry.entry_id,
        hired_at=time.time() if hired_at is None else hired_at,
        race=npc.race,
        npc_class=npc.npc_class,
        name=npc.name,
        skill=npc.skill,
        rarity=npc.rarity,
        chaos_factor=npc.chaos_factor,
        quirks=tuple(npc.quirks),
        employment_history=tuple(npc.employment_history),
        base_wage=npc.base_wage,
        level_tier=npc.level_tier,
        seed=npc.seed,
        skill_bonuses=tuple(npc.skill_bonuses),
    )


# ── Hiring relationship ───────────────────────────────────────────────────────

@dataclass(frozen=True)
class ShipRef:
    ship_id: str
    kind: str = field(default="ship", init=False)


@dataclass(frozen=True)
class BuildingRef:
    building_id: str
    kind: str = field(default="building", init=False)


Assignable = Union[ShipRef, BuildingRef]


@dataclass
class Hiring:
    hired_recruit: HiredRecruit
    wage: int
    hired_at: float
    assignable: Optional[Assignable] = None
    custom_name: Optional[str] = None
    status: str = "active"
    terminated_at: Optional[float] = None

    @classmethod
    def start(cls, recruit: HiredRecruit, custom_name: Optional[str] = None, wage: Optional[int] = None) -> "Hiring":
        resolved_wage = recruit.calculate_wage() if wage is None else wage
        if resolved_wage <= 0:
            raise InvalidGenerationInput(f"wage must be > 0, got {resolved_wage}")
        return cls(hired_recruit=recruit, wage=resolved_wage, hired_at=recruit.hired_at, custom_name=custom_name)

    @property
    def display_name(self) -> str:
        return self.custom_name or self.hired_recruit.name

    @property
    def is_active(self) -> bool:
        return self.status == "active"

    def _require_active(self, action: str) -> None:
        if self.status in TERMINAL_STATUSES:
            raise InvalidHiringTransition(f"cannot {action}: hiring is already {self.status}")

    def assign_to(self, asset: Assignable) -> None:
        self._require_active("assign")
        if not isinstance(asset, (ShipRef, BuildingRef)):
            raise InvalidGenerationInput(f"assignable must be a ShipRef or BuildingRef, got {asset!r}")
        self.assignable = asset

    def unassign(self) -> None:
        self._require_active("unassign")
        self.assignable = None

    def terminate(self, reason: str = "fired", terminated_at: Optional[float] = None) -> None:
        self._require_active("terminate")
        if reason not in TERMINAL_STATUSES:
            raise InvalidHiringTransition(
                f"invalid termination reason {reason!r} (expected one of {', '.join(sorted(TERMINAL_STATUSES))})"
            )
        self.status = reason
        self.terminated_at = time.time() if terminated_at is None else terminated_at
        self.assignable = None


# ── Repository ────────────────────────────────────────────────────────────────

class PoolRepository(Protocol):
    def entries_for_window(self, level_tier: int, rotation_timestamp: int) -> List[RecruiterPoolEntry]: ...

    def save_entries(self, entries: List[RecruiterPoolEntry]) -> None: ...

    def expire_before(self, level_tier: int, cutoff: float) -> int: ...

    def get_entry(self, entry_id: str) -> Optional[RecruiterPoolEntry]: ...

    def record_hire(self, entry_id: str, hired_at: Optional[float] = None) -> HiredRecruit: ...


class InMemoryPoolRepository:
    """Process-local pool store.  Hires are serialized under one lock."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._entries: Dict[str, RecruiterPoolEntry] = {}
        self._hires: Dict[str, HiredRecruit] = {}

    def entries_for_window(self, level_tier: int, rotation_timestamp: int) -> List[RecruiterPoolEntry]:
        with self._lock:
            rows = [
                e for e in self._entries.values()
                if e.level_tier == level_tier and e.available_at == rotation_timestamp
            ]
        return sorted(rows, key=lambda e: e.slot_index)

    def save_entries(self, entries: List[RecruiterPoolEntry]) -> None:
        with self._lock:
            for entry in entries:
                self._entries.setdefault(entry.entry_id, entry)

    def expire_before(self, level_tier: int, cutoff: float) -> int:
        with self._lock:
            stale = [
                entry_id for entry_id, e in self._entries.items()
                if e.level_tier == level_tier and e.expires_at <= cutoff
            ]
            for entry_id in stale:
                del self._entries[entry_id]
        return len(stale)

    def get_entry(self, entry_id: str) -> Optional[RecruiterPoolEntry]:
        with self._lock:
            return self._entries.get(entry_id)

    def record_hire(self, entry_id: str, hired_at: Optional[float] = None) -> HiredRecruit:
        with self._lock:
            entry = self._entries.get(entry_id)
            if entry is None:
                raise UnknownPoolEntry(f"Unknown pool entry: {entry_id}")
            if entry_id in self._hires:
                raise EntryAlreadyHired(f"Pool entry {entry_id} has already been hired")
            recruit = hire(entry, hired_at=hired_at)
            self._hires[entry_id] = recruit
            return recruit

    def hired(self, entry_id: str) -> Optional[HiredRecruit]:
        with self._lock:
            return self._hires.get(entry_id)


# ── Rotation ──────────────────────────────────────────────────────────────────

def build_pool_entries(level_tier: int, rotation_timestamp: int, expires_at: int, active_players: int = 0) -> List[RecruiterPoolEntry]:
    """Generate one window's entries in slot order, per_class slots for each class in turn."""
    per_class = pool_size_per_class(active_players)
    entries: List[RecruiterPoolEntry] = []
    for slot in range(per_class * len(NPC_CLASSES)):
        npc_class = NPC_CLASSES[slot // per_class]
        entries.append(
            RecruiterPoolEntry(
                entry_id=pool_entry_id(level_tier, rotation_timestamp, slot),
                npc=generate_npc(level_tier, rotation_timestamp, slot, npc_class=npc_class),
                level_tier=level_tier,
                slot_index=slot,
                available_at=rotation_timestamp,
                expires_at=expires_at,
            )
        )
    return entries


def rotate_recruiter_pool(repository: PoolRepository, level_tier: int, now: float, active_players: int = 0) -> List[RecruiterPoolEntry]:
    """
    Return the pool for the rotation window containing now.

    Entries from earlier windows are expired first.  If the window's batch is
    already stored it is returned as-is; otherwise it is generated and saved.
    """
    _validate_tier(level_tier)
    start, end = rotation_window(level_tier, now)

    expired = repository.expire_before(level_tier, start)
    if expired:
        print(f"[recruiter-pool] tier={level_tier} expired {expired} entries before {start}")

    existing = repository.entries_for_window(level_tier, start)
    if existing:
        return existing

    entries = build_pool_entries(level_tier, start, end, active_players)
    repository.save_entries(entries)
    print(f"[recruiter-pool] tier={level_tier} window={start} generated {len(entries)} entries")
    return repository.entries_for_window(level_tier, start)
