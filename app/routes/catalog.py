# app/routes/catalog.py
from __future__ import annotations

from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query
from loguru import logger
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from app.database import get_db
from app.game.upgrades import unit_of_work
from app.repositories.catalog import CatalogRepository
from app.routes.deps import require_admin

router = APIRouter(prefix="/catalog", tags=["catalog"])


class CatalogEntryIn(BaseModel):
    structure_type: str = Field(min_length=1, max_length=64)
    level: int = Field(ge=1)
    build_resource: Literal["gold", "elixir"]
    build_cost: int = Field(gt=0)
    build_time_seconds: int = Field(ge=0)
    unlocks_at_town_hall: int = Field(ge=1)
    max_per_town_hall: int = Field(ge=1)


class CatalogUpsertRequest(BaseModel):
    entries: list[CatalogEntryIn] = Field(min_length=1)


@router.get("")
def list_catalog(
    town_hall: Optional[int] = Query(default=None, ge=1),
    db: Session = Depends(get_db),
) -> dict:
    repo = CatalogRepository(db)
    rows = repo.list_all() if town_hall is None else repo.list_entries_up_to_tier(town_hall)
    return {
        "entries": [
            {
                "id": e.id,
                "structure_type": e.structure_type,
                "level": e.level,
                "build_resource": e.build_resource,
                "build_cost": e.build_cost,
                "build_time_seconds": e.build_time_seconds,
                "unlocks_at_town_hall": e.unlocks_at_town_hall,
                "max_per_town_hall": e.max_per_town_hall,
            }
            for e in rows
        ],
    }


@router.put("", dependencies=[Depends(require_admin)])
def upsert_catalog(payload: CatalogUpsertRequest, db: Session = Depends(get_db)) -> dict:
    with unit_of_work(db, "upsert_catalog"):
        created, updated = CatalogRepository(db).upsert_many(e.model_dump() for e in payload.entries)
    logger.info(f"Catalog upsert: {created} created, {updated} updated")
    return {"ok": True, "created": created, "updated": updated}
