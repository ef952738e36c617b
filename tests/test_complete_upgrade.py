"""
Completion tests: idempotency, first build, monotonic levels, due sweep
"""

from dataclasses import replace
from datetime import timedelta

import pytest

from app.game.errors import InvalidUpgrade
from app.game.upgrades import UpgradeEngine
from app.models.active_upgrade import ActiveUpgrade
from app.models.structure_instance import StructureInstance

USER = "user-1"


def _instance(db, name):
    return (
        db.query(StructureInstance)
        .filter(StructureInstance.user_id == USER, StructureInstance.name == name)
        .first()
    )


def test_complete_twice_is_idempotent(engine, seed, db_session):
    # Scenario E
    entry = seed.entry("Cannon", 2, cost=100)
    seed.instance(USER, "Cannon #1", 1)
    up_id = seed.active(USER, entry, "Cannon #1").id

    first = engine.complete_upgrade(USER, up_id, "Cannon #1", 2)
    assert first.already_completed is False
    assert first.level == 2
    assert "finished successfully" in first.message
    assert _instance(db_session, "Cannon #1").current_level == 2
    assert db_session.query(ActiveUpgrade).count() == 0

    second = engine.complete_upgrade(USER, up_id, "Cannon #1", 2)
    assert second.already_completed is True
    assert "already completed" in second.message
    assert _instance(db_session, "Cannon #1").current_level == 2


def test_first_build_creates_instance(engine, seed, db_session):
    entry = seed.entry("Cannon", 1, cost=100, cap=2)
    up = seed.active(USER, entry, "Cannon #2")

    result = engine.complete_upgrade(USER, up.id, "Cannon #2", 1)

    inst = _instance(db_session, "Cannon #2")
    assert result.level == 1
    assert inst.current_level == 1
    assert inst.structure_type == "Cannon"
    assert inst.instance_index == 2


def test_unknown_record_is_reported_as_already_completed(engine, seed, db_session):
    seed.instance(USER, "Cannon #1", 3)

    result = engine.complete_upgrade(USER, 12345, "Cannon #1", 4)

    assert result.already_completed is True
    assert _instance(db_session, "Cannon #1").current_level == 3


def test_other_users_record_is_not_touched(engine, seed, db_session):
    entry = seed.entry("Cannon", 1, cost=100)
    up = seed.active("someone-else", entry, "Cannon #1")

    result = engine.complete_upgrade(USER, up.id, "Cannon #1", 1)

    assert result.already_completed is True
    assert db_session.query(ActiveUpgrade).count() == 1
    assert _instance(db_session, "Cannon #1") is None


def test_strict_mode_rejects_mismatched_level(engine, seed, db_session):
    entry = seed.entry("Cannon", 2, cost=100)
    seed.instance(USER, "Cannon #1", 1)
    up = seed.active(USER, entry, "Cannon #1")

    with pytest.raises(InvalidUpgrade):
        engine.complete_upgrade(USER, up.id, "Cannon #1", 5)

    # Nothing happened: record still there, level unchanged
    assert db_session.query(ActiveUpgrade).count() == 1
    assert _instance(db_session, "Cannon #1").current_level == 1


def test_strict_mode_never_lowers_a_level(engine, seed, db_session):
    entry = seed.entry("Cannon", 2, cost=100)
    seed.instance(USER, "Cannon #1", 4)
    up = seed.active(USER, entry, "Cannon #1")

    result = engine.complete_upgrade(USER, up.id, "Cannon #1", 2)

    assert result.level == 4
    assert _instance(db_session, "Cannon #1").current_level == 4


def test_lenient_mode_writes_caller_level(db_session, seed, settings, clock):
    engine = UpgradeEngine.for_session(db_session, replace(settings, strict_levels=False), clock)
    entry = seed.entry("Cannon", 2, cost=100)
    seed.instance(USER, "Cannon #1", 1)
    up = seed.active(USER, entry, "Cannon #1")

    result = engine.complete_upgrade(USER, up.id, "Cannon #1", 7)

    assert result.level == 7
    assert _instance(db_session, "Cannon #1").current_level == 7


def test_start_then_complete_frees_the_builder(engine, seed, db_session):
    entry1 = seed.entry("Cannon", 1, cost=100, cap=2)
    seed.instance(USER, "Town Hall", 1)
    seed.account(USER, gold=1000, builders=1)

    started = engine.start_upgrade(USER, entry1.id, 1, "Cannon #1")
    engine.complete_upgrade(USER, started.upgrade_id, "Cannon #1", 1)
    engine.start_upgrade(USER, entry1.id, 1, "Cannon #2")

    assert db_session.query(ActiveUpgrade).count() == 1
    assert _instance(db_session, "Cannon #1").current_level == 1


def test_complete_due_only_resolves_expired_timers(engine, seed, db_session, clock):
    fast = seed.entry("Cannon", 1, cost=100, cap=2)
    slow = seed.entry("Archer Tower", 1, cost=100)
    seed.active(USER, fast, "Cannon #1", finishes_at=clock.now + timedelta(seconds=30))
    seed.active(USER, slow, "Archer Tower #1", finishes_at=clock.now + timedelta(hours=2))

    assert engine.complete_due(USER) == []

    clock.advance(60)
    results = engine.complete_due(USER)

    assert [r.instance_name for r in results] == ["Cannon #1"]
    assert _instance(db_session, "Cannon #1").current_level == 1
    assert _instance(db_session, "Archer Tower #1") is None
    remaining = db_session.query(ActiveUpgrade).all()
    assert [r.instance_name for r in remaining] == ["Archer Tower #1"]
