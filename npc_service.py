"""
NPC service — recruitable characters and their employment history.

An NPC is a pure function of (level_tier, rotation_timestamp, slot_index).
Its chaos_factor is hidden state: it shapes quirks, tenures and job
outcomes but is never part of any outward projection (see public_npc_view).

Seed byte layout for the NPC seed:

    0 race | 1 class | 3 skill | 4 chaos | 5 quirk count | 6-7 rarity roll
    10 job count | 20+3i quirk pool roll (2 bytes) | 22+3i quirk index
    29 first name | 30 last name

Each job reads its own seed, derive(npc_seed, "job_<i>"):

    0 duration | 1 outcome roll | 2 outcome phrase | 3/4/5 employer parts
    6 gap roll | 7 gap months
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from constants import (
    EMPLOYER_MIDDLES,
    EMPLOYER_PREFIXES,
    EMPLOYER_SUFFIXES,
    EMPLOYMENT_OUTCOMES,
    GAP_CHAOS_THRESHOLD,
    GAP_EMPLOYER,
    GAP_ROLL_THRESHOLD,
    HIRE_CHAOS_DISCOUNT,
    HIRE_WAGE_BASE,
    HIRE_WAGE_GROWTH,
    NPC_CLASSES,
    NPC_FIRST_NAMES,
    NPC_LAST_NAMES,
    NPC_RACIAL_TRAITS,
    OUTCOME_BANDS,
    QUIRK_COUNT_BANDS,
    QUIRK_EFFECTS,
    QUIRK_POLARITY_BANDS,
    QUIRKS,
    RACES,
    RACIAL_WAGE_MODIFIERS,
    RARITY_TIERS,
    TENURE_BANDS,
)
from seed_service import InvalidGenerationInput, SeedCursor, derive, round_half_up

BASE_WAGE = 100
WAGE_GROWTH = 1.03
MIN_JOBS = 2
MAX_JOBS = 5
MIN_PERFORMANCE = 0.1


class WeightTableError(RuntimeError):
    """A weighted table does not sum to 100."""


def check_weight_tables() -> None:
    tables = [("rarity weights", {k: t["weight"] for k, t in RARITY_TIERS.items()})]
    tables += [(f"outcome weights for chaos <= {bound}", w) for bound, w in OUTCOME_BANDS]
    tables += [(f"quirk polarity weights for chaos < {bound}", w) for bound, w in QUIRK_POLARITY_BANDS]
    for label, weights in tables:
        total = sum(weights.values())
        if total != 100:
            raise WeightTableError(f"{label} must sum to 100, got {total}")


check_weight_tables()


@dataclass(frozen=True)
class JobRecord:
    employer: str
    duration_months: int
    outcome: Optional[str]

    @property
    def is_gap(self) -> bool:
        return self.outcome is None


@dataclass(frozen=True)
class GeneratedNpc:
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


# ── Weighted tables ───────────────────────────────────────────────────────────

def _pick_weighted(roll: int, weights: Dict[str, int]) -> str:
    cumulative = 0
    for key, weight in weights.items():
        cumulative += weight
        if roll < cumulative:
            return key
    return next(iter(weights))


def rarity_for_roll(roll: int) -> str:
    """Walk the cumulative rarity weights (common 70, uncommon 20, rare 8, legendary 2)."""
    return _pick_weighted(roll, {name: data["weight"] for name, data in RARITY_TIERS.items()})


def outcome_weights(chaos_factor: int) -> Dict[str, int]:
    for bound, weights in OUTCOME_BANDS:
        if chaos_factor <= bound:
            return weights
    return OUTCOME_BANDS[-1][1]


def quirk_polarity_weights(chaos_factor: int) -> Dict[str, int]:
    for bound, weights in QUIRK_POLARITY_BANDS:
        if chaos_factor < bound:
            return weights
    return QUIRK_POLARITY_BANDS[-1][1]


def quirk_count_range(chaos_factor: int) -> Tuple[int, int]:
    for bound, count_range in QUIRK_COUNT_BANDS:
        if chaos_factor <= bound:
            return count_range
    return QUIRK_COUNT_BANDS[-1][1]


def tenure_range(chaos_factor: int) -> Tuple[int, int]:
    for threshold, first_month, span in TENURE_BANDS:
        if chaos_factor > threshold:
            return first_month, span
    return TENURE_BANDS[-1][1], TENURE_BANDS[-1][2]


# ── Wages ─────────────────────────────────────────────────────────────────────

def calculate_base_wage(skill: int, rarity: str) -> int:
    """Listing wage: 100 * 1.03^skill * rarity multiplier."""
    return round_half_up(BASE_WAGE * WAGE_GROWTH ** skill * RARITY_TIERS[rarity]["wage_multiplier"])


def exponential_wage(skill: int, chaos_factor: int = 0, race: Optional[str] = None, modifier: float = 1.0) -> int:
    """Hire-time wage: risky hires are discounted, racial temperament adjusts the rest."""
    base = HIRE_WAGE_BASE * HIRE_WAGE_GROWTH ** skill
    chaos_discount = 1.0 - chaos_factor * HIRE_CHAOS_DISCOUNT
    racial = RACIAL_WAGE_MODIFIERS.get(race, 1.0) if race else 1.0
    return round_half_up(base * chaos_discount * racial * modifier)


# ── Quirks ────────────────────────────────────────────────────────────────────

def _generate_quirks(cursor: SeedCursor, chaos_factor: int, race: str) -> Tuple[str, ...]:
    low, high = quirk_count_range(chaos_factor)
    quirk_count = low + cursor.claim(5, 1, high - low + 1)
    weights = quirk_polarity_weights(chaos_factor)

    quirks: List[str] = []
    for i in range(quirk_count):
        pool = _pick_weighted(cursor.claim(20 + 3 * i, 2, 100), weights)
        options = QUIRKS[pool]
        quirks.append(options[cursor.claim(22 + 3 * i, 1, len(options))])

    required = NPC_RACIAL_TRAITS[race]["required_trait"]
    if required not in quirks:
        quirks.append(required)
    return tuple(dict.fromkeys(quirks))


def performance_modifier(quirks: Tuple[str, ...]) -> float:
    """Multiplicative output factor from the sum of quirk effects, floored at 0.1."""
    total = sum(QUIRK_EFFECTS.get(q, 0.0) for q in quirks)
    return round_half_up(max(MIN_PERFORMANCE, 1.0 + total), 2)


# ── Employment history ────────────────────────────────────────────────────────

def _employer_name(cursor: SeedCursor) -> str:
    prefix = EMPLOYER_PREFIXES[cursor.claim(3, 1, len(EMPLOYER_PREFIXES))]
    middle = EMPLOYER_MIDDLES[cursor.claim(4, 1, len(EMPLOYER_MIDDLES))]
    suffix = EMPLOYER_SUFFIXES[cursor.claim(5, 1, len(EMPLOYER_SUFFIXES))]
    return f"{prefix} {middle} {suffix}"


def generate_employment_history(npc_seed: str, chaos_factor: int, job_count: int) -> Tuple[JobRecord, ...]:
    """
    Narrate job_count prior jobs, oldest first.

    High-chaos NPCs (chaos > 70) may carry an unexplained gap before any job
    after the first; the gap record has no outcome.
    """
    if not MIN_JOBS <= job_count <= MAX_JOBS:
        raise InvalidGenerationInput(f"job_count must be {MIN_JOBS}-{MAX_JOBS}, got {job_count}")

    first_month, span = tenure_range(chaos_factor)
    weights = outcome_weights(chaos_factor)
    history: List[JobRecord] = []

    for i in range(job_count):
        cursor = SeedCursor(derive(npc_seed, f"job_{i}"))
        duration = first_month + cursor.claim(0, 1, span)
        category = _pick_weighted(cursor.claim(1, 1, 100), weights)
        phrases = EMPLOYMENT_OUTCOMES[category]
        outcome = phrases[cursor.claim(2, 1, len(phrases))]
        employer = _employer_name(cursor)
        gap_roll = cursor.claim(6, 1, 100)
        gap_months = cursor.claim(7, 1, 8) + 1

        if i > 0 and chaos_factor > GAP_CHAOS_THRESHOLD and gap_roll > GAP_ROLL_THRESHOLD:
            history.append(JobRecord(employer=GAP_EMPLOYER, duration_months=gap_months, outcome=None))
        history.append(JobRecord(employer=employer, duration_months=duration, outcome=outcome))

    return tuple(history)


# ── NPC ───────────────────────────────────────────────────────────────────────

def _validate_npc_key(level_tier: Any, rotation_timestamp: Any, slot_index: Any) -> None:
    for name, value in (("level_tier", level_tier), ("rotation_timestamp", rotation_timestamp), ("slot_index", slot_index)):
        if isinstance(value, bool) or not isinstance(value, int):
            raise InvalidGenerationInput(f"{name} must be an integer, got {value!r}")
    if level_tier < 1:
        raise InvalidGenerationInput(f"level_tier must be >= 1, got {level_tier}")
    if slot_index < 0:
        raise InvalidGenerationInput(f"slot_index must be >= 0, got {slot_index}")


def generate_npc(level_tier: int, rotation_timestamp: int, slot_index: int, npc_class: Optional[str] = None) -> GeneratedNpc:
    """Derive the NPC occupying one recruiter slot.

    npc_class overrides the seeded class (the pool labels each slot with its
    class); every other attribute still comes from the seed.
    """
    _validate_npc_key(level_tier, rotation_timestamp, slot_index)
    if npc_class is not None and npc_class not in NPC_CLASSES:
        raise InvalidGenerationInput(f"Invalid npc_class: {npc_class!r}")

    seed = derive(level_tier, rotation_timestamp, slot_index)
    cursor = SeedCursor(seed)

    race = RACES[cursor.claim(0, 1, len(RACES))]
    seeded_class = NPC_CLASSES[cursor.claim(1, 1, len(NPC_CLASSES))]
    rarity = rarity_for_roll(cursor.claim(6, 2, 100))
    low, high = RARITY_TIERS[rarity]["skill_range"]
    skill = low + cursor.claim(3, 1, high - low + 1)
    chaos_factor = cursor.claim(4, 1, 101)

    quirks = _generate_quirks(cursor, chaos_factor, race)
    job_count = MIN_JOBS + cursor.claim(10, 1, MAX_JOBS - MIN_JOBS + 1)
    history = generate_employment_history(seed, chaos_factor, job_count)

    first = NPC_FIRST_NAMES[race][cursor.claim(29, 1, len(NPC_FIRST_NAMES[race]))]
    last = NPC_LAST_NAMES[race][cursor.claim(30, 1, len(NPC_LAST_NAMES[race]))]

    return GeneratedNpc(
        race=race,
        npc_class=npc_class or seeded_class,
        name=f"{first} {last}",
        skill=skill,
        rarity=rarity,
        chaos_factor=chaos_factor,
        quirks=quirks,
        employment_history=history,
        base_wage=calculate_base_wage(skill, rarity),
        level_tier=level_tier,
        seed=seed,
        skill_bonuses=tuple(NPC_RACIAL_TRAITS[race]["skills"].items()),
    )


# ── Presentation ──────────────────────────────────────────────────────────────

def job_record_view(job: JobRecord) -> Dict[str, Any]:
    return {"employer": job.employer, "duration_months": job.duration_months, "outcome": job.outcome}


def public_npc_view(npc: Any) -> Dict[str, Any]:
    """Outward projection of an NPC or hired recruit.  Never carries chaos_factor."""
    return {
        "name": npc.name,
        "race": npc.race,
        "npc_class": npc.npc_class,
        "skill": npc.skill,
        "rarity": npc.rarity,
        "quirks": list(npc.quirks),
        "skill_bonuses": dict(npc.skill_bonuses),
        "employment_history": [job_record_view(j) for j in npc.employment_history],
        "base_wage": npc.base_wage,
        "level_tier": npc.level_tier,
        "performance_modifier": performance_modifier(npc.quirks),
    }


def formatted_resume(npc: Any) -> List[str]:
    """One line per history record, oldest first."""
    lines = []
    for job in npc.employment_history:
        months = f"{job.duration_months} month" + ("" if job.duration_months == 1 else "s")
        if job.is_gap:
            lines.append(f"{job.employer} ({months})")
        else:
            lines.append(f"{job.employer} ({months}): {job.outcome}")
    return lines
