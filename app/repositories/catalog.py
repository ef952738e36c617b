# app/repositories/catalog.py
from __future__ import annotations

from typing import Iterable, Optional

from sqlalchemy.orm import Session

from app.models.catalog_entry import CatalogEntry


class CatalogRepository:
    """Read access to the upgrade catalog (plus admin upsert)."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def get_entry(self, entry_id: int) -> Optional[CatalogEntry]:
        return self.db.query(CatalogEntry).filter(CatalogEntry.id == int(entry_id)).first()

    def get_by_type_level(self, structure_type: str, level: int) -> Optional[CatalogEntry]:
        return (
            self.db.query(CatalogEntry)
            .filter(CatalogEntry.structure_type == structure_type, CatalogEntry.level == int(level))
            .first()
        )

    def list_entries_up_to_tier(self, tier: int) -> list[CatalogEntry]:
        return (
            self.db.query(CatalogEntry)
            .filter(CatalogEntry.unlocks_at_town_hall <= int(tier))
            .order_by(CatalogEntry.structure_type.asc(), CatalogEntry.level.asc())
            .all()
        )

    def list_all(self) -> list[CatalogEntry]:
        return (
            self.db.query(CatalogEntry)
            .order_by(CatalogEntry.structure_type.asc(), CatalogEntry.level.asc())
            .all()
        )

    def structure_types(self) -> set[str]:
        return {t for (t,) in self.db.query(CatalogEntry.structure_type).distinct().all()}

    def upsert_many(self, rows: Iterable[dict]) -> tuple[int, int]:
        """
        rows: dicts with structure_type, level, build_resource, build_cost,
        build_time_seconds, unlocks_at_town_hall, max_per_town_hall.
        Keyed by (structure_type, level). Returns (created, updated).
        """
        created = 0
        updated = 0
        for row in rows:
            entry = self.get_by_type_level(row["structure_type"], row["level"])
            if entry is None:
                entry = CatalogEntry(structure_type=row["structure_type"], level=int(row["level"]))
                self.db.add(entry)
                created += 1
            else:
                updated += 1

            entry.build_resource = str(row["build_resource"])
            entry.build_cost = int(row["build_cost"])
            entry.build_time_seconds = int(row["build_time_seconds"])
            entry.unlocks_at_town_hall = int(row["unlocks_at_town_hall"])
            entry.max_per_town_hall = int(row["max_per_town_hall"])
            self.db.flush()

        return created, updated
