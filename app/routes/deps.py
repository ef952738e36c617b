# app/routes/deps.py
from __future__ import annotations

import secrets

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.orm import Session

from app.config import ADMIN_KEY, EngineSettings, engine_settings
from app.database import get_db
from app.game.availability import AvailabilityPlanner
from app.game.timeutil import now_utc_naive
from app.game.upgrades import UpgradeEngine


def _is_admin(x_admin_key: str | None) -> bool:
    return bool(ADMIN_KEY) and bool(x_admin_key) and secrets.compare_digest(x_admin_key, ADMIN_KEY)


def require_admin(x_admin_key: str | None = Header(default=None, alias="X-Admin-Key")) -> None:
    if not _is_admin(x_admin_key):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")


def get_settings() -> EngineSettings:
    return engine_settings()


def get_clock():
    return now_utc_naive


def get_upgrade_engine(
    db: Session = Depends(get_db),
    settings: EngineSettings = Depends(get_settings),
    clock=Depends(get_clock),
) -> UpgradeEngine:
    return UpgradeEngine.for_session(db, settings, clock)


def get_planner(
    engine: UpgradeEngine = Depends(get_upgrade_engine),
) -> AvailabilityPlanner:
    return AvailabilityPlanner(
        catalog=engine.catalog,
        upgrades=engine.upgrades,
        structures=engine.structures,
        tier_structure_name=engine.settings.tier_structure_name,
    )
