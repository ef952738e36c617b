# app/routes/upgrades.py
from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from app.config import COMPLETE_ON_READ
from app.game.availability import AvailabilityPlanner
from app.game.timeutil import seconds_until
from app.game.upgrades import UpgradeEngine
from app.routes.deps import get_planner, get_upgrade_engine

router = APIRouter(prefix="/users/{user_id}/upgrades", tags=["upgrades"])


class StartUpgradeRequest(BaseModel):
    upgrade_id: int = Field(gt=0)
    upgrade_level: int = Field(gt=0)
    instance_name: str = Field(min_length=1, max_length=80)


class CompleteUpgradeRequest(BaseModel):
    instance_name: str = Field(min_length=1, max_length=80)
    target_level: int = Field(gt=0)


def _entry_dict(entry) -> dict:
    return {
        "id": entry.id,
        "structure_type": entry.structure_type,
        "level": entry.level,
        "build_cost": entry.build_cost,
        "build_resource": entry.build_resource,
        "build_time_seconds": entry.build_time_seconds,
    }


@router.post("")
def start_upgrade(
    user_id: str,
    payload: StartUpgradeRequest,
    engine: UpgradeEngine = Depends(get_upgrade_engine),
) -> dict:
    result = engine.start_upgrade(
        user_id,
        payload.upgrade_id,
        payload.upgrade_level,
        payload.instance_name.strip(),
    )
    return {
        "success": True,
        "message": f"Upgrade for {result.instance_name} started successfully.",
        "upgrade": {
            "id": result.upgrade_id,
            "instance_name": result.instance_name,
            "target_level": result.target_level,
            "cost": {"resource": result.resource, "amount": result.cost_paid},
            "balance_after": result.balance_after,
            "duration_seconds": result.duration_seconds,
            "started_at": result.started_at.isoformat(),
            "finishes_at": result.finishes_at.isoformat(),
        },
    }


@router.post("/{upgrade_id}/complete")
def complete_upgrade(
    user_id: str,
    upgrade_id: int,
    payload: CompleteUpgradeRequest,
    engine: UpgradeEngine = Depends(get_upgrade_engine),
) -> dict:
    result = engine.complete_upgrade(
        user_id,
        upgrade_id,
        payload.instance_name.strip(),
        payload.target_level,
    )
    return {
        "success": True,
        "message": result.message,
        "instance_name": result.instance_name,
        "level": result.level,
        "already_completed": result.already_completed,
    }


@router.post("/complete-due")
def complete_due(
    user_id: str,
    engine: UpgradeEngine = Depends(get_upgrade_engine),
) -> dict:
    results = engine.complete_due(user_id)
    return {
        "success": True,
        "completed": [
            {"instance_name": r.instance_name, "level": r.level, "message": r.message}
            for r in results
            if not r.already_completed
        ],
    }


@router.get("/in-progress")
def list_in_progress(
    user_id: str,
    engine: UpgradeEngine = Depends(get_upgrade_engine),
) -> dict:
    if COMPLETE_ON_READ:
        engine.complete_due(user_id)

    now = engine.clock()
    rows = engine.list_in_progress(user_id)
    return {
        "user_id": user_id,
        "upgrades": [
            {
                "id": up.id,
                "upgrade_id": up.catalog_entry_id,
                "instance_name": up.instance_name,
                "target_level": up.target_level,
                "status": up.status,
                "started_at": up.started_at.isoformat(),
                "finishes_at": up.finishes_at.isoformat(),
                "seconds_remaining": seconds_until(up.finishes_at, now),
                "is_due": up.finishes_at <= now,
            }
            for up in rows
        ],
        "at": now.isoformat(),
    }


@router.get("/available")
def list_available(
    user_id: str,
    planner: AvailabilityPlanner = Depends(get_planner),
) -> dict:
    available = planner.list_available(user_id)
    return {
        "user_id": user_id,
        "available": [
            {
                "instance_name": a.instance_name,
                "current_level": a.current_level,
                "next_upgrade": _entry_dict(a.next_upgrade),
            }
            for a in available
        ],
    }
