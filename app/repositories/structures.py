# app/repositories/structures.py
from __future__ import annotations

from typing import Optional

from sqlalchemy.orm import Session

from app.game.naming import parse_instance_name
from app.models.structure_instance import StructureInstance


class StructureRepository:
    def __init__(self, db: Session) -> None:
        self.db = db

    def get_instance(self, user_id: str, name: str) -> Optional[StructureInstance]:
        return (
            self.db.query(StructureInstance)
            .filter(StructureInstance.user_id == str(user_id), StructureInstance.name == name)
            .first()
        )

    def list_instances(self, user_id: str) -> list[StructureInstance]:
        return (
            self.db.query(StructureInstance)
            .filter(StructureInstance.user_id == str(user_id))
            .order_by(StructureInstance.structure_type.asc(), StructureInstance.instance_index.asc())
            .all()
        )

    def set_level(self, instance_id: int, level: int) -> None:
        inst = self.db.get(StructureInstance, int(instance_id))
        if inst is not None:
            inst.current_level = int(level)
            self.db.flush()

    def insert_instance(self, user_id: str, name: str, level: int) -> StructureInstance:
        structure_type, index = parse_instance_name(name)
        inst = StructureInstance(
            user_id=str(user_id),
            name=name,
            structure_type=structure_type,
            instance_index=index,
            current_level=int(level),
        )
        self.db.add(inst)
        self.db.flush()
        return inst

    def get_unlock_tier(self, user_id: str, tier_structure_name: str) -> Optional[int]:
        inst = self.get_instance(user_id, tier_structure_name)
        if inst is None:
            return None
        return int(inst.current_level)
