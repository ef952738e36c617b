# app/models/active_upgrade.py
from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base
from app.game.timeutil import now_utc_naive

STATUS_IN_PROGRESS = "in_progress"


class ActiveUpgrade(Base):
    __tablename__ = "user_upgrades"
    __table_args__ = (
        # One builder per structure instance; rows are deleted on completion
        UniqueConstraint("user_id", "instance_name", name="uq_user_upgrades_user_instance"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)

    user_id: Mapped[str] = mapped_column(String(64), index=True, nullable=False)

    catalog_entry_id: Mapped[int] = mapped_column(ForeignKey("defense_upgrades.id"), index=True, nullable=False)

    # e.g. "Cannon #2"
    instance_name: Mapped[str] = mapped_column(String(80), nullable=False)
    target_level: Mapped[int] = mapped_column(Integer, nullable=False)

    status: Mapped[str] = mapped_column(String(24), default=STATUS_IN_PROGRESS, index=True, nullable=False)

    started_at: Mapped[datetime] = mapped_column(DateTime, default=now_utc_naive, nullable=False)
    finishes_at: Mapped[datetime] = mapped_column(DateTime, index=True, nullable=False)

    # Snapshot of what was paid (helps debugging + deterministic tests)
    cost_resource: Mapped[str] = mapped_column(String(16), nullable=False)
    cost_paid: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
