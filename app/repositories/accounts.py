# app/repositories/accounts.py
from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from app.game.economy import ResourceKind
from app.models.economy_account import EconomyAccount


def _balance_column(kind: ResourceKind):
    if kind is ResourceKind.GOLD:
        return EconomyAccount.gold_amount
    return EconomyAccount.elixir_amount


class AccountRepository:
    def __init__(self, db: Session) -> None:
        self.db = db

    def get_account(self, user_id: str, *, for_update: bool = False) -> Optional[EconomyAccount]:
        q = self.db.query(EconomyAccount).filter(EconomyAccount.user_id == str(user_id))
        if for_update:
            # Row lock on Postgres/MySQL; SQLite ignores it (database-level write lock)
            q = q.with_for_update()
        return q.first()

    def create_account(self, user_id: str, *, builders_count: int, now: datetime) -> EconomyAccount:
        account = EconomyAccount(
            user_id=str(user_id),
            gold_amount=0,
            elixir_amount=0,
            has_gold_pass=False,
            builders_count=int(builders_count),
            last_seen_at=now,
        )
        self.db.add(account)
        self.db.flush()
        return account

    def debit(self, user_id: str, kind: ResourceKind, amount: int) -> bool:
        """
        Compare-and-swap debit: only succeeds if the balance still covers
        `amount` at write time. Returns False when nothing was debited.
        """
        column = _balance_column(kind)
        changed = (
            self.db.query(EconomyAccount)
            .filter(EconomyAccount.user_id == str(user_id), column >= int(amount))
            .update({column: column - int(amount)}, synchronize_session=False)
        )
        return changed == 1

    def refresh(self, account: EconomyAccount) -> EconomyAccount:
        self.db.refresh(account)
        return account
