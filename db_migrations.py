import sqlite3
import time
from dataclasses import dataclass
from typing import Callable, List


@dataclass(frozen=True)
class Migration:
    migration_id: str
    description: str
    apply: Callable[[sqlite3.Connection], None]


def _table_columns(conn: sqlite3.Connection, table: str) -> set[str]:
    rows = conn.execute(f"PRAGMA table_info({table});").fetchall()
    return {str(r["name"]) for r in rows}


def _safe_add_column(conn: sqlite3.Connection, table: str, name: str, coltype: str) -> None:
    if name in _table_columns(conn, table):
        return
    conn.execute(f"ALTER TABLE {table} ADD COLUMN {name} {coltype};")


def _migration_0001_recruiter_pool(conn: sqlite3.Connection) -> None:
    conn.executescript(
        """
        CREATE TABLE IF NOT EXISTS recruiter_pool_entries (
          entry_id TEXT PRIMARY KEY,
          level_tier INTEGER NOT NULL,
          slot_index INTEGER NOT NULL,
          npc_class TEXT NOT NULL,
          available_at INTEGER NOT NULL,
          expires_at INTEGER NOT NULL,
          npc_json TEXT NOT NULL,
          created_at REAL NOT NULL,
          UNIQUE (level_tier, available_at, slot_index)
        );
        CREATE INDEX IF NOT EXISTS idx_pool_tier_window ON recruiter_pool_entries(level_tier, available_at);
        CREATE INDEX IF NOT EXISTS idx_pool_expires ON recruiter_pool_entries(level_tier, expires_at);
        """
    )


def _migration_0002_hires(conn: sqlite3.Connection) -> None:
    """Hired copies outlive their pool entry, so there is no FK back to the pool."""
    conn.executescript(
        """
        CREATE TABLE IF NOT EXISTS hired_recruits (
          id TEXT PRIMARY KEY,
          source_entry_id TEXT NOT NULL UNIQUE,
          hired_at REAL NOT NULL,
          race TEXT NOT NULL,
          npc_class TEXT NOT NULL,
          skill INTEGER NOT NULL,
          chaos_factor INTEGER NOT NULL,
          recruit_json TEXT NOT NULL
        );

        CREATE TABLE IF NOT EXISTS hirings (
          id TEXT PRIMARY KEY,
          hired_recruit_id TEXT NOT NULL REFERENCES hired_recruits(id) ON DELETE CASCADE,
          wage INTEGER NOT NULL CHECK (wage > 0),
          status TEXT NOT NULL DEFAULT 'active',
          custom_name TEXT,
          hired_at REAL NOT NULL,
          terminated_at REAL
        );
        CREATE INDEX IF NOT EXISTS idx_hirings_recruit ON hirings(hired_recruit_id);
        """
    )


def _migration_0003_hiring_assignment(conn: sqlite3.Connection) -> None:
    """Add ship/building assignment columns to hirings."""
    _safe_add_column(conn, "hirings", "assignable_kind", "TEXT")
    _safe_add_column(conn, "hirings", "assignable_id", "TEXT")


def _migrations() -> List[Migration]:
    return [
        Migration("0001_recruiter_pool", "Create shared recruiter pool entries table", _migration_0001_recruiter_pool),
        Migration("0002_hires", "Add hired recruit copies and hirings tables", _migration_0002_hires),
        Migration("0003_hiring_assignment", "Add assignable columns to hirings", _migration_0003_hiring_assignment),
    ]


def apply_migrations(conn: sqlite3.Connection) -> None:
    conn.execute(
        """
        CREATE TABLE IF NOT EXISTS schema_migrations (
          migration_id TEXT PRIMARY KEY,
          description TEXT NOT NULL,
          applied_at REAL NOT NULL
        );
        """
    )

    applied = {
        str(r["migration_id"])
        for r in conn.execute("SELECT migration_id FROM schema_migrations").fetchall()
    }

    for migration in _migrations():
        if migration.migration_id in applied:
            continue
        migration.apply(conn)
        conn.execute(
            "INSERT INTO schema_migrations (migration_id,description,applied_at) VALUES (?,?,?)",
            (migration.migration_id, migration.description, time.time()),
        )
    conn.commit()
