"""
Pytest configuration and fixtures for the upgrade tracker tests
"""

from datetime import datetime, timedelta
from typing import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.config import EngineSettings
from app.database import Base, get_db
from app.game.upgrades import UpgradeEngine
from app.models.active_upgrade import ActiveUpgrade, STATUS_IN_PROGRESS
from app.models.catalog_entry import CatalogEntry
from app.models.economy_account import EconomyAccount
from app.models.structure_instance import StructureInstance
from app.game.naming import parse_instance_name


# Test database URL (in-memory SQLite for testing)
TEST_DATABASE_URL = "sqlite:///:memory:"

T0 = datetime(2026, 1, 1, 12, 0, 0)


class FakeClock:
    def __init__(self, now: datetime = T0) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: int) -> None:
        self.now = self.now + timedelta(seconds=seconds)


class Seeder:
    """Inserts rows directly, bypassing the game layer."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def entry(
        self,
        structure_type: str,
        level: int,
        *,
        cost: int = 500,
        resource: str = "gold",
        seconds: int = 60,
        tier: int = 1,
        cap: int = 1,
    ) -> CatalogEntry:
        e = CatalogEntry(
            structure_type=structure_type,
            level=level,
            build_resource=resource,
            build_cost=cost,
            build_time_seconds=seconds,
            unlocks_at_town_hall=tier,
            max_per_town_hall=cap,
        )
        self.db.add(e)
        self.db.commit()
        return e

    def account(
        self,
        user_id: str = "user-1",
        *,
        gold: int = 0,
        elixir: int = 0,
        gold_pass: bool = False,
        builders: int = 1,
        last_seen_at: datetime = T0,
    ) -> EconomyAccount:
        a = EconomyAccount(
            user_id=user_id,
            gold_amount=gold,
            elixir_amount=elixir,
            has_gold_pass=gold_pass,
            builders_count=builders,
            last_seen_at=last_seen_at,
        )
        self.db.add(a)
        self.db.commit()
        return a

    def instance(self, user_id: str, name: str, level: int) -> StructureInstance:
        structure_type, index = parse_instance_name(name)
        inst = StructureInstance(
            user_id=user_id,
            name=name,
            structure_type=structure_type,
            instance_index=index,
            current_level=level,
        )
        self.db.add(inst)
        self.db.commit()
        return inst

    def active(
        self,
        user_id: str,
        entry: CatalogEntry,
        instance_name: str,
        *,
        finishes_at: datetime = T0 + timedelta(hours=1),
    ) -> ActiveUpgrade:
        up = ActiveUpgrade(
            user_id=user_id,
            catalog_entry_id=entry.id,
            instance_name=instance_name,
            target_level=entry.level,
            status=STATUS_IN_PROGRESS,
            started_at=T0,
            finishes_at=finishes_at,
            cost_resource=entry.build_resource,
            cost_paid=entry.build_cost,
        )
        self.db.add(up)
        self.db.commit()
        return up


@pytest.fixture(scope="function")
def db_engine():
    """
    Create test database engine
    """
    engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        future=True,
    )
    Base.metadata.create_all(engine)

    yield engine

    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture(scope="function")
def db_session(db_engine) -> Generator[Session, None, None]:
    """
    Create test database session
    """
    session_maker = sessionmaker(bind=db_engine, autoflush=False, autocommit=False, future=True)
    session = session_maker()
    yield session
    session.rollback()
    session.close()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def settings() -> EngineSettings:
    return EngineSettings()


@pytest.fixture
def seed(db_session) -> Seeder:
    return Seeder(db_session)


@pytest.fixture
def engine(db_session, settings, clock) -> UpgradeEngine:
    return UpgradeEngine.for_session(db_session, settings, clock)


@pytest.fixture
def client(db_session, settings, clock) -> Generator[TestClient, None, None]:
    from app.main import app
    from app.routes.deps import get_clock, get_settings

    def _get_db():
        yield db_session

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_clock] = lambda: clock

    with TestClient(app) as c:
        yield c

    app.dependency_overrides.clear()
