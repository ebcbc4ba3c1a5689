"""
Shared pytest fixtures for the StellArb generation engine tests.

Provides:
  - In-memory SQLite DB with migrations applied
  - In-memory and SQLite recruiter pool repositories
  - FastAPI TestClient backed by a temp-dir database
"""

import os
import sqlite3
import sys
import tempfile
from pathlib import Path
from typing import Generator

import pytest

# ---------------------------------------------------------------------------
# Ensure the project root is on sys.path so we can import app modules
# ---------------------------------------------------------------------------
PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

os.environ.setdefault("WORLD_SEED", "test-world")

# Use a writable temp directory for the test DB so the app startup succeeds.
_TEST_DB_DIR = tempfile.mkdtemp(prefix="stellarb_test_")
os.environ["DB_DIR"] = _TEST_DB_DIR


# ---------------------------------------------------------------------------
# Database fixtures
# ---------------------------------------------------------------------------

@pytest.fixture()
def db_conn() -> Generator[sqlite3.Connection, None, None]:
    """Yield an in-memory SQLite connection with all migrations applied."""
    from db import MEMORY_DB, init_db

    conn = init_db(MEMORY_DB)

    yield conn
    conn.close()


# ---------------------------------------------------------------------------
# Recruiter pool repositories
# ---------------------------------------------------------------------------

@pytest.fixture()
def memory_repo():
    from recruiter_service import InMemoryPoolRepository
    return InMemoryPoolRepository()


@pytest.fixture()
def sqlite_repo(db_conn):
    from recruiter_repository import SqlitePoolRepository
    return SqlitePoolRepository(db_conn)


# ---------------------------------------------------------------------------
# FastAPI TestClient
# ---------------------------------------------------------------------------

@pytest.fixture()
def client():
    """Return a Starlette TestClient wired to the FastAPI app."""
    from fastapi.testclient import TestClient
    from main import app

    with TestClient(app) as c:
        yield c
