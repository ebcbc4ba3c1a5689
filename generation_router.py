"""
Generation preview API routes.

Handles:
  /api/health
  /api/systems/{x}/{y}/{z}
  /api/frontier/{x}/{y}/{z}
  /api/buildings/preview
  /api/ships/preview
  /api/recruiters/{level_tier}
  /api/recruiters/hire

NPC payloads go through public_npc_view, so chaos_factor never leaves the server.
"""

import dataclasses
import os
import sqlite3
import time
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

import building_service
import galaxy_service
from db import get_db
from npc_service import formatted_resume, public_npc_view
from recruiter_repository import SqlitePoolRepository
from recruiter_service import (
    EntryAlreadyHired,
    Hiring,
    UnknownPoolEntry,
    rotate_recruiter_pool,
    rotation_interval_minutes,
)

WORLD_SEED = os.environ.get("WORLD_SEED", "stellarb")
RECRUITER_ACTIVE_PLAYERS_DEFAULT = int(os.environ.get("RECRUITER_ACTIVE_PLAYERS_DEFAULT", "0"))

router = APIRouter(tags=["generation"])


class BuildingPreviewRequest(BaseModel):
    race: str
    function: str
    tier: int = Field(1, ge=1, le=5)
    location_seed: str = building_service.STANDARD_LOCATION_SEED


class ShipPreviewRequest(BaseModel):
    race: str
    hull_size: str
    tier: int = Field(1, ge=1, le=5)


class HireRequest(BaseModel):
    entry_id: str
    custom_name: Optional[str] = None


def _system_payload(system: galaxy_service.GeneratedSystem) -> Dict[str, Any]:
    payload = dataclasses.asdict(system)
    payload["coordinates"] = list(system.coordinates)
    return payload


def _entry_payload(entry) -> Dict[str, Any]:
    return {
        "entry_id": entry.entry_id,
        "slot_index": entry.slot_index,
        "available_at": entry.available_at,
        "expires_at": entry.expires_at,
        "npc": public_npc_view(entry.npc),
        "resume": formatted_resume(entry.npc),
    }


@router.get("/api/health")
def api_health(conn: sqlite3.Connection = Depends(get_db)) -> Dict[str, Any]:
    conn.execute("SELECT 1")
    return {
        "ok": True,
        "service": "stellarb-generation",
    }


# ── Galaxy ────────────────────────────────────────────────────────────────────


@router.get("/api/systems/{x}/{y}/{z}")
def api_core_system(x: int, y: int, z: int) -> Dict[str, Any]:
    """Core starter-grid system under the configured world seed."""
    try:
        system = galaxy_service.generate_system(WORLD_SEED, x, y, z)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _system_payload(system)


@router.get("/api/frontier/{x}/{y}/{z}")
def api_frontier_system(x: int, y: int, z: int) -> Dict[str, Any]:
    try:
        system = galaxy_service.generate_frontier_system(x, y, z)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _system_payload(system)


# ── Blueprints ────────────────────────────────────────────────────────────────


@router.post("/api/buildings/preview")
def api_building_preview(body: BuildingPreviewRequest) -> Dict[str, Any]:
    try:
        building = building_service.generate_building(body.race, body.function, body.tier, body.location_seed)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return building_service.building_as_dict(building)


@router.post("/api/ships/preview")
def api_ship_preview(body: ShipPreviewRequest) -> Dict[str, Any]:
    try:
        ship = building_service.generate_ship(body.race, body.hull_size, body.tier)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return dataclasses.asdict(ship)


# ── Recruiters ────────────────────────────────────────────────────────────────


@router.get("/api/recruiters/{level_tier}")
def api_recruiter_pool(
    level_tier: int,
    active_players: Optional[int] = None,
    conn: sqlite3.Connection = Depends(get_db),
) -> Dict[str, Any]:
    """Current rotation of the shared recruiter pool for a level tier."""
    players = RECRUITER_ACTIVE_PLAYERS_DEFAULT if active_players is None else active_players
    try:
        entries = rotate_recruiter_pool(SqlitePoolRepository(conn), level_tier, time.time(), players)
        interval = rotation_interval_minutes(level_tier)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {
        "level_tier": level_tier,
        "rotation_interval_minutes": interval,
        "entries": [_entry_payload(e) for e in entries],
    }


@router.post("/api/recruiters/hire")
def api_recruiter_hire(body: HireRequest, conn: sqlite3.Connection = Depends(get_db)) -> Dict[str, Any]:
    repo = SqlitePoolRepository(conn)
    try:
        recruit = repo.record_hire(body.entry_id)
        hiring = Hiring.start(recruit, custom_name=body.custom_name)
        hiring_id = repo.save_hiring(hiring)
    except UnknownPoolEntry as e:
        raise HTTPException(status_code=404, detail=str(e))
    except EntryAlreadyHired as e:
        raise HTTPException(status_code=409, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    print(f"[recruiter-pool] hired entry={body.entry_id} hiring={hiring_id}")
    return {
        "ok": True,
        "hiring_id": hiring_id,
        "display_name": hiring.display_name,
        "wage": hiring.wage,
        "status": hiring.status,
        "recruit": public_npc_view(recruit),
    }
