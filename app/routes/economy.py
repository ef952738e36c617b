# app/routes/economy.py
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from app.config import (
    ELIXIR_PRODUCTION_PER_SECOND,
    GOLD_PRODUCTION_PER_SECOND,
    MAX_BUILDERS_COUNT,
    RESOURCE_CAP,
    EngineSettings,
)
from app.database import get_db
from app.game.accounts import collect_production, get_or_create_account, update_settings
from app.game.economy import ResourceKind
from app.game.summary import economy_status
from app.routes.deps import get_clock, get_settings

router = APIRouter(prefix="/users/{user_id}/economy", tags=["economy"])


class EconomyUpdateRequest(BaseModel):
    gold_amount: Optional[int] = Field(default=None, ge=0, le=RESOURCE_CAP)
    elixir_amount: Optional[int] = Field(default=None, ge=0, le=RESOURCE_CAP)
    has_gold_pass: Optional[bool] = None
    builders_count: Optional[int] = Field(default=None, ge=1, le=MAX_BUILDERS_COUNT)


def _account_dict(account) -> dict:
    return {
        "user_id": account.user_id,
        "gold_amount": account.gold_amount,
        "elixir_amount": account.elixir_amount,
        "has_gold_pass": bool(account.has_gold_pass),
        "builders_count": account.builders_count,
        "last_seen_at": account.last_seen_at.isoformat() if account.last_seen_at else None,
        "resource_cap": RESOURCE_CAP,
    }


@router.get("")
def get_economy(
    user_id: str,
    db: Session = Depends(get_db),
    settings: EngineSettings = Depends(get_settings),
    clock=Depends(get_clock),
) -> dict:
    account = get_or_create_account(db, user_id, now=clock(), builders_count=settings.default_builders)
    return _account_dict(account)


@router.patch("")
def patch_economy(
    user_id: str,
    payload: EconomyUpdateRequest,
    db: Session = Depends(get_db),
    settings: EngineSettings = Depends(get_settings),
    clock=Depends(get_clock),
) -> dict:
    account = update_settings(
        db,
        user_id,
        now=clock(),
        default_builders=settings.default_builders,
        resource_cap=settings.resource_cap,
        gold_amount=payload.gold_amount,
        elixir_amount=payload.elixir_amount,
        has_gold_pass=payload.has_gold_pass,
        builders_count=payload.builders_count,
    )
    return {"success": True, "economy": _account_dict(account)}


@router.post("/collect")
def collect(
    user_id: str,
    db: Session = Depends(get_db),
    settings: EngineSettings = Depends(get_settings),
    clock=Depends(get_clock),
) -> dict:
    now = clock()
    credited = collect_production(
        db,
        user_id,
        now=now,
        default_builders=settings.default_builders,
        resource_cap=settings.resource_cap,
        rates={
            ResourceKind.GOLD: GOLD_PRODUCTION_PER_SECOND,
            ResourceKind.ELIXIR: ELIXIR_PRODUCTION_PER_SECOND,
        },
    )
    account = get_or_create_account(db, user_id, now=now, builders_count=settings.default_builders)
    return {"success": True, "collected": credited, "economy": _account_dict(account)}


@router.get("/status")
def get_status(
    user_id: str,
    db: Session = Depends(get_db),
    settings: EngineSettings = Depends(get_settings),
) -> dict:
    return economy_status(db, user_id, settings)
