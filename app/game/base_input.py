# app/game/base_input.py
from __future__ import annotations

from typing import Iterable, Tuple

from loguru import logger
from sqlalchemy.orm import Session

from app.game.errors import InstanceBusy, InvalidUpgrade
from app.game.naming import parse_instance_name
from app.game.upgrades import unit_of_work
from app.models.structure_instance import StructureInstance
from app.repositories.active_upgrades import ActiveUpgradeRepository
from app.repositories.catalog import CatalogRepository
from app.repositories.structures import StructureRepository


def record_structures(
    db: Session,
    user_id: str,
    rows: Iterable[Tuple[str, int]],
) -> list[StructureInstance]:
    """
    Manual base entry: rows of (instance name, current level).

    All rows are validated before anything is written. Levels never go down,
    and instances locked by an in-progress upgrade can't be edited.
    """
    rows = [((name or "").strip(), int(level)) for name, level in rows]

    structures = StructureRepository(db)
    known_types = CatalogRepository(db).structure_types()
    busy = ActiveUpgradeRepository(db).busy_instance_names(user_id)

    seen: set[str] = set()
    for name, level in rows:
        structure_type, _index = parse_instance_name(name)
        if not structure_type or structure_type not in known_types:
            raise InvalidUpgrade("Unknown structure type.", instance_name=name)
        if name in seen:
            raise InvalidUpgrade("Duplicate structure instance.", instance_name=name)
        seen.add(name)

        if level < 0:
            raise InvalidUpgrade("Level must be zero or more.", instance_name=name, level=level)
        if name in busy:
            raise InstanceBusy(name)

        existing = structures.get_instance(user_id, name)
        if existing is not None and level < int(existing.current_level):
            raise InvalidUpgrade(
                "Level can only increase.",
                instance_name=name,
                level=level,
                current_level=int(existing.current_level),
            )

    with unit_of_work(db, "record_structures"):
        for name, level in rows:
            existing = structures.get_instance(user_id, name)
            if existing is None:
                structures.insert_instance(user_id, name, level)
            else:
                structures.set_level(existing.id, level)

    logger.info(f"Recorded {len(rows)} structures for user {user_id}")
    return structures.list_instances(user_id)
