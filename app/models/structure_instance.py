# app/models/structure_instance.py
from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base
from app.game.timeutil import now_utc_naive


class StructureInstance(Base):
    __tablename__ = "user_base_data"
    __table_args__ = (
        UniqueConstraint("user_id", "name", name="uq_user_base_data_user_name"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)

    user_id: Mapped[str] = mapped_column(String(64), index=True, nullable=False)

    # "Cannon #2" -> structure_type "Cannon", instance_index 2
    name: Mapped[str] = mapped_column(String(80), nullable=False)
    structure_type: Mapped[str] = mapped_column(String(64), index=True, nullable=False)
    instance_index: Mapped[int] = mapped_column(Integer, default=1, nullable=False)

    current_level: Mapped[int] = mapped_column(Integer, default=0, nullable=False)  # 0 = not built yet

    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=now_utc_naive, onupdate=now_utc_naive, nullable=False
    )
