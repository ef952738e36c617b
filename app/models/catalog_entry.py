# app/models/catalog_entry.py
from __future__ import annotations

from sqlalchemy import Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


class CatalogEntry(Base):
    __tablename__ = "defense_upgrades"
    __table_args__ = (
        UniqueConstraint("structure_type", "level", name="uq_defense_upgrades_type_level"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)

    # Examples: "Town Hall", "Cannon", "Archer Tower", "Gold Mine"
    structure_type: Mapped[str] = mapped_column(String(64), index=True, nullable=False)
    level: Mapped[int] = mapped_column(Integer, nullable=False)

    # "gold" | "elixir"
    build_resource: Mapped[str] = mapped_column(String(16), nullable=False)
    build_cost: Mapped[int] = mapped_column(Integer, nullable=False)
    build_time_seconds: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    unlocks_at_town_hall: Mapped[int] = mapped_column(Integer, default=1, index=True, nullable=False)
    max_per_town_hall: Mapped[int] = mapped_column(Integer, default=1, nullable=False)
