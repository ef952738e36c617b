"""
Economy status summary tests
"""

import pytest

from app.game.errors import NotFound
from app.game.summary import economy_status, remaining_totals
from app.models.catalog_entry import CatalogEntry
from app.models.structure_instance import StructureInstance

USER = "user-1"


def _entry(structure_type, level, cost, resource="gold", seconds=60, cap=1):
    return CatalogEntry(
        structure_type=structure_type,
        level=level,
        build_resource=resource,
        build_cost=cost,
        build_time_seconds=seconds,
        unlocks_at_town_hall=1,
        max_per_town_hall=cap,
    )


def _inst(name, level):
    return StructureInstance(user_id=USER, name=name, structure_type=name, instance_index=1, current_level=level)


def test_remaining_totals_counts_levels_above_current_and_missing_slots():
    entries = [
        _entry("Cannon", 1, 100, cap=2),
        _entry("Cannon", 2, 1000, cap=2),
        _entry("Gold Mine", 1, 50, resource="elixir", seconds=10),
    ]
    instances = [_inst("Cannon #1", 1)]

    totals = remaining_totals(instances, entries, has_gold_pass=False, discount_pct=20)

    # Cannon #1 needs L2; one missing Cannon slot needs L1+L2; one missing Gold Mine
    assert totals["gold"] == 1000 + 100 + 1000
    assert totals["elixir"] == 50
    assert totals["seconds"] == 60 * 3 + 10
    assert totals["upgrades"] == 4


def test_remaining_totals_applies_discount_per_entry():
    entries = [_entry("Cannon", 1, 501), _entry("Cannon", 2, 501)]

    totals = remaining_totals([], entries, has_gold_pass=True, discount_pct=20)

    assert totals["gold"] == 401 * 2
    assert totals["seconds"] == 120


def test_maxed_base_needs_nothing():
    entries = [_entry("Cannon", 1, 100)]
    totals = remaining_totals([_inst("Cannon #1", 1)], entries, has_gold_pass=False, discount_pct=20)
    assert totals == {"gold": 0, "elixir": 0, "seconds": 0, "upgrades": 0}


def test_economy_status(db_session, seed, settings):
    seed.account(USER, gold=5000, elixir=300, builders=2)
    seed.instance(USER, "Town Hall", 1)
    seed.entry("Cannon", 1, cost=250, tier=1, cap=1)
    seed.entry("Cannon", 2, cost=1000, tier=2, cap=1)

    status = economy_status(db_session, USER, settings)

    assert status["gold_amount"] == 5000
    assert status["builders_count"] == 2
    assert status["town_hall_level"] == 1
    assert status["total_gold_needed"] == 250
    assert status["upgrades_remaining"] == 1


def test_economy_status_requires_account(db_session, seed, settings):
    seed.instance(USER, "Town Hall", 1)
    with pytest.raises(NotFound):
        economy_status(db_session, USER, settings)
