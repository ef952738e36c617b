"""
Unit tests for ledger / builder primitives and offline production
"""

from datetime import datetime, timedelta

import pytest

from app.game.economy import (
    ResourceKind,
    balance,
    can_afford,
    clamp_amount,
    final_cost,
    free_builders,
    has_free_builder,
    set_balance,
)
from app.game.production import apply_offline_production
from app.models.economy_account import EconomyAccount

T0 = datetime(2026, 1, 1, 12, 0, 0)


def _account(**kw) -> EconomyAccount:
    base = dict(user_id="u", gold_amount=0, elixir_amount=0, has_gold_pass=False, builders_count=2, last_seen_at=T0)
    base.update(kw)
    return EconomyAccount(**base)


@pytest.mark.parametrize(
    "cost, has_pass, expected",
    [
        (500, False, 500),
        (500, True, 400),
        (501, True, 401),  # 400.8 rounds up
        (1, True, 1),
        (250, True, 200),
    ],
)
def test_final_cost(cost, has_pass, expected):
    assert final_cost(cost, has_pass) == expected


def test_final_cost_custom_discount():
    assert final_cost(1000, True, discount_pct=50) == 500
    assert final_cost(999, True, discount_pct=50) == 500


def test_resource_kind_parse():
    assert ResourceKind.parse("gold") is ResourceKind.GOLD
    assert ResourceKind.parse(" Elixir ") is ResourceKind.ELIXIR
    with pytest.raises(ValueError):
        ResourceKind.parse("dark_elixir")


def test_balance_maps_to_typed_fields():
    a = _account(gold_amount=10, elixir_amount=20)
    assert balance(a, ResourceKind.GOLD) == 10
    assert balance(a, ResourceKind.ELIXIR) == 20

    set_balance(a, ResourceKind.ELIXIR, 5)
    assert a.elixir_amount == 5
    assert a.gold_amount == 10
    assert can_afford(a, ResourceKind.GOLD, 10)
    assert not can_afford(a, ResourceKind.GOLD, 11)


def test_builders():
    a = _account(builders_count=2)
    assert has_free_builder(a, 1)
    assert not has_free_builder(a, 2)
    assert free_builders(a, 1) == 1
    assert free_builders(a, 5) == 0


def test_clamp_amount():
    assert clamp_amount(-5, 100) == 0
    assert clamp_amount(50, 100) == 50
    assert clamp_amount(500, 100) == 100


def test_offline_production_accrues_per_second():
    a = _account(gold_amount=100, elixir_amount=0)
    rates = {ResourceKind.GOLD: 500, ResourceKind.ELIXIR: 250}

    credited = apply_offline_production(a, T0 + timedelta(seconds=10), rates, cap=1_000_000)

    assert credited == {"gold": 5000, "elixir": 2500, "seconds": 10}
    assert a.gold_amount == 5100
    assert a.elixir_amount == 2500
    assert a.last_seen_at == T0 + timedelta(seconds=10)


def test_offline_production_clamps_to_cap():
    a = _account(gold_amount=900)
    credited = apply_offline_production(a, T0 + timedelta(hours=1), {ResourceKind.GOLD: 500}, cap=1000)

    assert a.gold_amount == 1000
    assert credited["gold"] == 100
    assert credited["elixir"] == 0


def test_offline_production_ignores_clock_skew():
    a = _account(gold_amount=10)
    credited = apply_offline_production(a, T0 - timedelta(minutes=5), {ResourceKind.GOLD: 500}, cap=1000)

    assert credited["seconds"] == 0
    assert a.gold_amount == 10
