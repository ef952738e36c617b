# app/game/production.py
from __future__ import annotations

from datetime import datetime
from typing import Dict

from app.game.economy import ResourceKind, balance, clamp_amount, set_balance
from app.models.economy_account import EconomyAccount


def apply_offline_production(
    account: EconomyAccount,
    now: datetime,
    rates: Dict[ResourceKind, int],
    cap: int,
) -> Dict[str, int]:
    """
    Credit production accrued since last_seen_at, clamped to `cap`.

    rates: per-second production per resource kind.
    Returns the amount actually credited per resource (after clamping).
    """
    last = account.last_seen_at or now
    seconds = max(0, int((now - last).total_seconds()))

    credited: Dict[str, int] = {}
    for kind in ResourceKind:
        before = balance(account, kind)
        after = clamp_amount(before + seconds * int(rates.get(kind, 0)), cap)
        # Balances already above a lowered cap are left as-is
        after = max(after, before)
        set_balance(account, kind, after)
        credited[kind.value] = after - before

    account.last_seen_at = now
    credited["seconds"] = seconds
    return credited
