# app/game/accounts.py
from __future__ import annotations

from datetime import datetime
from typing import Dict, Optional

from loguru import logger
from sqlalchemy.orm import Session

from app.game.economy import ResourceKind, clamp_amount
from app.game.production import apply_offline_production
from app.models.economy_account import EconomyAccount
from app.repositories.accounts import AccountRepository


def get_or_create_account(
    db: Session,
    user_id: str,
    *,
    now: datetime,
    builders_count: int,
) -> EconomyAccount:
    repo = AccountRepository(db)
    account = repo.get_account(user_id)
    if account is not None:
        return account

    account = repo.create_account(user_id, builders_count=builders_count, now=now)
    db.commit()
    db.refresh(account)
    logger.info(f"Created economy account for user {user_id} ({builders_count} builders)")
    return account


def update_settings(
    db: Session,
    user_id: str,
    *,
    now: datetime,
    default_builders: int,
    resource_cap: int,
    gold_amount: Optional[int] = None,
    elixir_amount: Optional[int] = None,
    has_gold_pass: Optional[bool] = None,
    builders_count: Optional[int] = None,
) -> EconomyAccount:
    """Partial update; omitted fields keep their stored value."""
    account = get_or_create_account(db, user_id, now=now, builders_count=default_builders)

    if gold_amount is not None:
        account.gold_amount = clamp_amount(gold_amount, resource_cap)
    if elixir_amount is not None:
        account.elixir_amount = clamp_amount(elixir_amount, resource_cap)
    if has_gold_pass is not None:
        account.has_gold_pass = bool(has_gold_pass)
    if builders_count is not None:
        account.builders_count = max(1, int(builders_count))

    db.commit()
    db.refresh(account)
    return account


def collect_production(
    db: Session,
    user_id: str,
    *,
    now: datetime,
    default_builders: int,
    resource_cap: int,
    rates: Dict[ResourceKind, int],
) -> Dict[str, int]:
    account = get_or_create_account(db, user_id, now=now, builders_count=default_builders)
    credited = apply_offline_production(account, now, rates, resource_cap)
    db.commit()
    db.refresh(account)

    logger.info(
        f"Collected for user {user_id}: +{credited['gold']} gold, +{credited['elixir']} elixir "
        f"over {credited['seconds']}s"
    )
    return credited
