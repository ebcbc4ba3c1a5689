"""
SQLite plumbing for the recruiter pool store.

Only the shared recruiter pool, hired copies and hirings are persisted; every
other generated entity is rebuilt from its seed on demand.  Each request gets
its own connection: hire exclusivity rests on the UNIQUE constraint on
hired_recruits.source_entry_id, never on a shared connection.
"""

import os
import sqlite3
from pathlib import Path
from typing import Generator, Optional, Union

from db_migrations import apply_migrations

APP_DIR = Path(__file__).resolve().parent
DB_DIR = Path(os.environ.get("DB_DIR", str(APP_DIR / "data")))
DB_PATH = Path(os.environ.get("DB_PATH", str(DB_DIR / "stellarb.db")))
BUSY_TIMEOUT_MS = int(os.environ.get("DB_BUSY_TIMEOUT_MS", "30000"))
MEMORY_DB = ":memory:"


def connect_db(path: Optional[Union[str, Path]] = None) -> sqlite3.Connection:
    """Open the pool store at path (default DB_PATH).  MEMORY_DB gives a private throwaway store."""
    target = str(path or DB_PATH)
    in_memory = target == MEMORY_DB
    if not in_memory:
        Path(target).parent.mkdir(parents=True, exist_ok=True)

    # FastAPI runs sync routes on worker threads.
    conn = sqlite3.connect(target, timeout=BUSY_TIMEOUT_MS / 1000, check_same_thread=False)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys=ON;")
    if not in_memory:
        conn.execute("PRAGMA journal_mode=WAL;")
    conn.execute(f"PRAGMA busy_timeout={BUSY_TIMEOUT_MS};")
    return conn


def init_db(path: Optional[Union[str, Path]] = None) -> sqlite3.Connection:
    """Connect and bring the pool schema up to date."""
    conn = connect_db(path)
    apply_migrations(conn)
    return conn


def get_db() -> Generator[sqlite3.Connection, None, None]:
    """Per-request pool store connection for the recruiter and health routes."""
    conn = connect_db()
    try:
        yield conn
    finally:
        conn.close()
