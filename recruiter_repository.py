"""
SQLite-backed recruiter pool repository.

Entries are stored as JSON snapshots of the generated NPC so a window's pool
reads back exactly as it was generated.  hired_recruits.source_entry_id is
UNIQUE: a concurrent second hire of the same entry fails on insert.
"""

import dataclasses
import json
import sqlite3
import time
import uuid
from typing import Any, Dict, List, Optional

from npc_service import GeneratedNpc, JobRecord
from recruiter_service import (
    BuildingRef,
    EntryAlreadyHired,
    HiredRecruit,
    Hiring,
    RecruiterPoolEntry,
    ShipRef,
    UnknownPoolEntry,
    hire,
)


def _json_dumps(obj: Any) -> str:
    return json.dumps(obj, separators=(",", ":"), sort_keys=True)


def _jobs_from_json(rows: List[Dict[str, Any]]) -> tuple:
    return tuple(JobRecord(**r) for r in rows)


def _generated_fields(data: Dict[str, Any]) -> Dict[str, Any]:
    """JSON lists back to the tuples the frozen records hold."""
    data["quirks"] = tuple(data.get("quirks") or [])
    data["employment_history"] = _jobs_from_json(data.get("employment_history") or [])
    data["skill_bonuses"] = tuple((str(k), int(v)) for k, v in data.get("skill_bonuses") or [])
    return data


def npc_from_json(raw: str) -> GeneratedNpc:
    return GeneratedNpc(**_generated_fields(json.loads(raw)))


def recruit_from_json(raw: str) -> HiredRecruit:
    return HiredRecruit(**_generated_fields(json.loads(raw)))


def _entry_from_row(row: sqlite3.Row) -> RecruiterPoolEntry:
    return RecruiterPoolEntry(
        entry_id=str(row["entry_id"]),
        npc=npc_from_json(row["npc_json"]),
        level_tier=int(row["level_tier"]),
        slot_index=int(row["slot_index"]),
        available_at=int(row["available_at"]),
        expires_at=int(row["expires_at"]),
    )


def _assignable_from_row(kind: Optional[str], asset_id: Optional[str]):
    if not kind or not asset_id:
        return None
    if kind == "ship":
        return ShipRef(asset_id)
    if kind == "building":
        return BuildingRef(asset_id)
    raise ValueError(f"Unknown assignable kind in hirings row: {kind}")


class SqlitePoolRepository:
    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn

    # ── Pool entries ──────────────────────────────────────────────────────────

    def entries_for_window(self, level_tier: int, rotation_timestamp: int) -> List[RecruiterPoolEntry]:
        rows = self.conn.execute(
            """
            SELECT * FROM recruiter_pool_entries
            WHERE level_tier = ? AND available_at = ?
            ORDER BY slot_index
            """,
            (level_tier, rotation_timestamp),
        ).fetchall()
        return [_entry_from_row(r) for r in rows]

    def save_entries(self, entries: List[RecruiterPoolEntry]) -> None:
        now = time.time()
        self.conn.executemany(
            """
            INSERT OR IGNORE INTO recruiter_pool_entries
              (entry_id, level_tier, slot_index, npc_class, available_at, expires_at, npc_json, created_at)
            VALUES (?,?,?,?,?,?,?,?)
            """,
            [
                (
                    e.entry_id,
                    e.level_tier,
                    e.slot_index,
                    e.npc.npc_class,
                    e.available_at,
                    e.expires_at,
                    _json_dumps(dataclasses.asdict(e.npc)),
                    now,
                )
                for e in entries
            ],
        )
        self.conn.commit()

    def expire_before(self, level_tier: int, cutoff: float) -> int:
        cur = self.conn.execute(
            "DELETE FROM recruiter_pool_entries WHERE level_tier = ? AND expires_at <= ?",
            (level_tier, cutoff),
        )
        self.conn.commit()
        return int(cur.rowcount or 0)

    def get_entry(self, entry_id: str) -> Optional[RecruiterPoolEntry]:
        row = self.conn.execute(
            "SELECT * FROM recruiter_pool_entries WHERE entry_id = ?",
            (entry_id,),
        ).fetchone()
        return _entry_from_row(row) if row else None

    # ── Hires ─────────────────────────────────────────────────────────────────

    def record_hire(self, entry_id: str, hired_at: Optional[float] = None) -> HiredRecruit:
        entry = self.get_entry(entry_id)
        if entry is None:
            raise UnknownPoolEntry(f"Unknown pool entry: {entry_id}")

        recruit = hire(entry, hired_at=hired_at)
        try:
            self.conn.execute(
                """
                INSERT INTO hired_recruits
                  (id, source_entry_id, hired_at, race, npc_class, skill, chaos_factor, recruit_json)
                VALUES (?,?,?,?,?,?,?,?)
                """,
                (
                    str(uuid.uuid4()),
                    recruit.source_entry_id,
                    recruit.hired_at,
                    recruit.race,
                    recruit.npc_class,
                    recruit.skill,
                    recruit.chaos_factor,
                    _json_dumps(dataclasses.asdict(recruit)),
                ),
            )
        except sqlite3.IntegrityError as exc:
            self.conn.rollback()
            raise EntryAlreadyHired(f"Pool entry {entry_id} has already been hired") from exc
        self.conn.commit()
        return recruit

    def hired_recruit_id(self, source_entry_id: str) -> Optional[str]:
        row = self.conn.execute(
            "SELECT id FROM hired_recruits WHERE source_entry_id = ?",
            (source_entry_id,),
        ).fetchone()
        return str(row["id"]) if row else None

    def get_hired_recruit(self, source_entry_id: str) -> Optional[HiredRecruit]:
        row = self.conn.execute(
            "SELECT recruit_json FROM hired_recruits WHERE source_entry_id = ?",
            (source_entry_id,),
        ).fetchone()
        return recruit_from_json(row["recruit_json"]) if row else None

    # ── Hirings ───────────────────────────────────────────────────────────────

    def save_hiring(self, hiring: Hiring, hiring_id: Optional[str] = None) -> str:
        """Insert or update a hiring row and return its id."""
        recruit_id = self.hired_recruit_id(hiring.hired_recruit.source_entry_id)
        if recruit_id is None:
            raise UnknownPoolEntry(f"No hired recruit for entry {hiring.hired_recruit.source_entry_id}")

        asset = hiring.assignable
        kind = asset.kind if asset else None
        asset_id = None
        if isinstance(asset, ShipRef):
            asset_id = asset.ship_id
        elif isinstance(asset, BuildingRef):
            asset_id = asset.building_id

        hid = hiring_id or str(uuid.uuid4())
        self.conn.execute(
            """
            INSERT INTO hirings
              (id, hired_recruit_id, wage, status, custom_name, hired_at, terminated_at, assignable_kind, assignable_id)
            VALUES (?,?,?,?,?,?,?,?,?)
            ON CONFLICT(id) DO UPDATE SET
              wage = excluded.wage,
              status = excluded.status,
              custom_name = excluded.custom_name,
              terminated_at = excluded.terminated_at,
              assignable_kind = excluded.assignable_kind,
              assignable_id = excluded.assignable_id
            """,
            (
                hid,
                recruit_id,
                hiring.wage,
                hiring.status,
                hiring.custom_name,
                hiring.hired_at,
                hiring.terminated_at,
                kind,
                asset_id,
            ),
        )
        self.conn.commit()
        return hid

    def load_hiring(self, hiring_id: str) -> Optional[Hiring]:
        row = self.conn.execute(
            """
            SELECT h.*, r.recruit_json
            FROM hirings h
            JOIN hired_recruits r ON r.id = h.hired_recruit_id
            WHERE h.id = ?
            """,
            (hiring_id,),
        ).fetchone()
        if not row:
            return None
        return Hiring(
            hired_recruit=recruit_from_json(row["recruit_json"]),
            wage=int(row["wage"]),
            hired_at=float(row["hired_at"]),
            assignable=_assignable_from_row(row["assignable_kind"], row["assignable_id"]),
            custom_name=row["custom_name"],
            status=str(row["status"]),
            terminated_at=row["terminated_at"],
        )
