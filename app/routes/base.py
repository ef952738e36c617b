# app/routes/base.py
from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from app.database import get_db
from app.game.base_input import record_structures
from app.repositories.structures import StructureRepository

router = APIRouter(prefix="/users/{user_id}/base", tags=["base"])


class StructureLevel(BaseModel):
    name: str = Field(min_length=1, max_length=80)
    level: int = Field(ge=0)


class BaseInputRequest(BaseModel):
    structures: list[StructureLevel] = Field(min_length=1)


def _instances_dict(user_id: str, instances) -> dict:
    return {
        "user_id": user_id,
        "structures": [
            {
                "name": inst.name,
                "structure_type": inst.structure_type,
                "instance_index": inst.instance_index,
                "current_level": inst.current_level,
            }
            for inst in instances
        ],
    }


@router.get("")
def get_base(user_id: str, db: Session = Depends(get_db)) -> dict:
    return _instances_dict(user_id, StructureRepository(db).list_instances(user_id))


@router.put("")
def put_base(user_id: str, payload: BaseInputRequest, db: Session = Depends(get_db)) -> dict:
    instances = record_structures(db, user_id, [(s.name, s.level) for s in payload.structures])
    return {"success": True, **_instances_dict(user_id, instances)}
