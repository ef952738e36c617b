# app/models/economy_account.py
from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base
from app.game.timeutil import now_utc_naive


class EconomyAccount(Base):
    __tablename__ = "user_economy"

    id: Mapped[int] = mapped_column(primary_key=True)

    # Opaque id from the identity provider
    user_id: Mapped[str] = mapped_column(String(64), unique=True, index=True, nullable=False)

    gold_amount: Mapped[int] = mapped_column(Integer, default=0, server_default="0", nullable=False)
    elixir_amount: Mapped[int] = mapped_column(Integer, default=0, server_default="0", nullable=False)

    has_gold_pass: Mapped[bool] = mapped_column(Boolean, default=False, server_default="0", nullable=False)
    builders_count: Mapped[int] = mapped_column(Integer, default=4, server_default="4", nullable=False)

    # Offline production anchor (naive UTC)
    last_seen_at: Mapped[datetime | None] = mapped_column(DateTime, default=now_utc_naive, nullable=True)
