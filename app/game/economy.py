# app/game/economy.py
from __future__ import annotations

from enum import Enum

from app.models.economy_account import EconomyAccount


class ResourceKind(str, Enum):
    GOLD = "gold"
    ELIXIR = "elixir"

    @classmethod
    def parse(cls, value: str) -> "ResourceKind":
        key = (value or "").strip().lower()
        for kind in cls:
            if kind.value == key:
                return kind
        raise ValueError(f"Unknown resource kind: {value!r}")


# ----------------------------
# Ledger
# ----------------------------

def balance(account: EconomyAccount, kind: ResourceKind) -> int:
    if kind is ResourceKind.GOLD:
        return int(account.gold_amount)
    return int(account.elixir_amount)


def set_balance(account: EconomyAccount, kind: ResourceKind, amount: int) -> None:
    if kind is ResourceKind.GOLD:
        account.gold_amount = int(amount)
    else:
        account.elixir_amount = int(amount)


def final_cost(cost: int, has_gold_pass: bool, discount_pct: int = 20) -> int:
    """
    Gold pass knocks `discount_pct` percent off, rounded up.
    Integer math so 500 -> 400 exactly (no 0.8 float drift).
    """
    cost = int(cost)
    if not has_gold_pass:
        return cost
    keep = 100 - int(discount_pct)
    return -((-cost * keep) // 100)


def can_afford(account: EconomyAccount, kind: ResourceKind, cost: int) -> bool:
    return balance(account, kind) >= int(cost)


def clamp_amount(amount: int, cap: int) -> int:
    return min(max(0, int(amount)), int(cap))


# ----------------------------
# Builders
# ----------------------------

def free_builders(account: EconomyAccount, in_progress: int) -> int:
    return max(0, int(account.builders_count) - int(in_progress))


def has_free_builder(account: EconomyAccount, in_progress: int) -> bool:
    return free_builders(account, in_progress) > 0
