# app/game/upgrades.py
"""
Upgrade admission + lifecycle.

start_upgrade:   validate -> reserve builder -> debit -> insert timed record
complete_upgrade: delete record (idempotency signal) -> upsert structure level

Every public method is one unit of work on the injected session: commit on
success, rollback on any failure. Repositories never commit.
"""
from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Iterator, Optional

from loguru import logger
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.config import EngineSettings
from app.game.economy import ResourceKind, balance, can_afford, final_cost, has_free_builder
from app.game.errors import (
    CapacityExceeded,
    InstanceBusy,
    InsufficientResources,
    InvalidUpgrade,
    NotFound,
    StorageError,
    UpgradeError,
)
from app.game.naming import parse_instance_name
from app.game.timeutil import apply_duration_offset, finishes_at_from_seconds, now_utc_naive
from app.models.active_upgrade import ActiveUpgrade, STATUS_IN_PROGRESS
from app.models.economy_account import EconomyAccount
from app.repositories.accounts import AccountRepository
from app.repositories.active_upgrades import ActiveUpgradeRepository
from app.repositories.catalog import CatalogRepository
from app.repositories.structures import StructureRepository


@contextmanager
def unit_of_work(db: Session, operation: str) -> Iterator[None]:
    """Commit on success; roll back on any failure. Storage failures surface as StorageError."""
    try:
        yield
        db.commit()
    except UpgradeError:
        db.rollback()
        raise
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error(f"[{operation}] storage failure: {exc}")
        raise StorageError(operation) from exc
    except Exception:
        db.rollback()
        raise


@dataclass(frozen=True)
class StartResult:
    upgrade_id: int
    instance_name: str
    target_level: int
    resource: str
    cost_paid: int
    balance_after: int
    duration_seconds: int
    started_at: datetime
    finishes_at: datetime


@dataclass(frozen=True)
class CompletionResult:
    message: str
    instance_name: str
    level: int
    already_completed: bool = False


class UpgradeEngine:
    def __init__(
        self,
        db: Session,
        *,
        catalog: CatalogRepository,
        accounts: AccountRepository,
        upgrades: ActiveUpgradeRepository,
        structures: StructureRepository,
        settings: EngineSettings,
        clock: Callable[[], datetime] = now_utc_naive,
    ) -> None:
        self.db = db
        self.catalog = catalog
        self.accounts = accounts
        self.upgrades = upgrades
        self.structures = structures
        self.settings = settings
        self.clock = clock

    @classmethod
    def for_session(
        cls,
        db: Session,
        settings: EngineSettings,
        clock: Callable[[], datetime] = now_utc_naive,
    ) -> "UpgradeEngine":
        return cls(
            db,
            catalog=CatalogRepository(db),
            accounts=AccountRepository(db),
            upgrades=ActiveUpgradeRepository(db),
            structures=StructureRepository(db),
            settings=settings,
            clock=clock,
        )

    # ----------------------------
    # Transactions
    # ----------------------------

    def _unit_of_work(self, operation: str):
        return unit_of_work(self.db, operation)

    # ----------------------------
    # Accounts
    # ----------------------------

    def _load_account(self, user_id: str, *, for_update: bool = False) -> EconomyAccount:
        account = self.accounts.get_account(user_id, for_update=for_update)
        if account is not None:
            return account
        if not self.settings.auto_create_account:
            raise NotFound("account", user_id=user_id)
        return self.accounts.create_account(
            user_id, builders_count=self.settings.default_builders, now=self.clock()
        )

    # ----------------------------
    # Admission
    # ----------------------------

    def _validate_levels(self, user_id: str, entry, target_level: int, instance_name: str) -> None:
        """
        The entry must be the next catalog level for this instance, reachable
        at the user's tier, and a new instance must fit under the placement cap.
        """
        if int(target_level) != int(entry.level):
            raise InvalidUpgrade(
                "Target level does not match upgrade.",
                target_level=int(target_level),
                upgrade_level=int(entry.level),
            )
        structure_type, index = parse_instance_name(instance_name)
        if structure_type != entry.structure_type:
            raise InvalidUpgrade(
                "Instance does not match upgrade structure.",
                instance_name=instance_name,
                structure_type=entry.structure_type,
            )

        tier_name = self.settings.tier_structure_name
        tier = self.structures.get_unlock_tier(user_id, tier_name)
        if tier is None:
            raise NotFound(tier_name, user_id=user_id)
        if int(entry.unlocks_at_town_hall) > tier:
            raise InvalidUpgrade(
                "Upgrade is not unlocked yet.",
                unlocks_at=int(entry.unlocks_at_town_hall),
                tier=tier,
            )

        existing = self.structures.get_instance(user_id, instance_name)
        current = int(existing.current_level) if existing is not None else 0
        if int(entry.level) != current + 1:
            raise InvalidUpgrade(
                "Upgrade is not the next level for this instance.",
                instance_name=instance_name,
                current_level=current,
                upgrade_level=int(entry.level),
            )

        # New instance: entry is the level-1 row, which carries the cap
        if existing is None and index > int(entry.max_per_town_hall):
            raise InvalidUpgrade(
                "No free slot for another instance of this structure.",
                instance_name=instance_name,
                max_per_town_hall=int(entry.max_per_town_hall),
            )

    def start_upgrade(
        self,
        user_id: str,
        catalog_entry_id: int,
        target_level: int,
        instance_name: str,
    ) -> StartResult:
        logger.info(f"Starting upgrade for {instance_name} -> L{target_level} (user: {user_id})")

        with self._unit_of_work("start_upgrade"):
            # 1) Catalog entry
            entry = self.catalog.get_entry(catalog_entry_id)
            if entry is None:
                raise NotFound("catalog entry", catalog_entry_id=int(catalog_entry_id))
            if self.settings.strict_levels:
                self._validate_levels(user_id, entry, target_level, instance_name)

            # 2) Account (locked for the rest of the unit of work)
            account = self._load_account(user_id, for_update=True)

            # 3) Builders
            in_progress = self.upgrades.count_in_progress(user_id)
            if not has_free_builder(account, in_progress):
                logger.info(f"Rejected {instance_name}: builders busy ({in_progress}/{account.builders_count})")
                raise CapacityExceeded(int(account.builders_count), in_progress)

            # 4) Resources
            kind = ResourceKind.parse(entry.build_resource)
            cost = final_cost(entry.build_cost, bool(account.has_gold_pass), self.settings.discount_pct)
            if not can_afford(account, kind, cost):
                have = balance(account, kind)
                logger.info(f"Rejected {instance_name}: need {cost} {kind.value}, have {have}")
                raise InsufficientResources(kind.value, cost, have)

            # Effects
            if not self.accounts.debit(user_id, kind, cost):
                # Balance moved under us between the read and the write
                self.accounts.refresh(account)
                raise InsufficientResources(kind.value, cost, balance(account, kind))
            self.accounts.refresh(account)

            seconds = apply_duration_offset(entry.build_time_seconds, self.settings.duration_offset_seconds)
            started = self.clock()
            finishes = finishes_at_from_seconds(started, seconds)

            record = ActiveUpgrade(
                user_id=str(user_id),
                catalog_entry_id=entry.id,
                instance_name=instance_name,
                target_level=int(target_level),
                status=STATUS_IN_PROGRESS,
                started_at=started,
                finishes_at=finishes,
                cost_resource=kind.value,
                cost_paid=cost,
            )
            try:
                self.upgrades.insert(record)
            except IntegrityError as exc:
                raise InstanceBusy(instance_name) from exc

            # Re-count inside the same transaction: closes the check-then-write window
            after = self.upgrades.count_in_progress(user_id)
            if after > int(account.builders_count):
                raise CapacityExceeded(int(account.builders_count), after - 1)

            result = StartResult(
                upgrade_id=record.id,
                instance_name=instance_name,
                target_level=int(target_level),
                resource=kind.value,
                cost_paid=cost,
                balance_after=balance(account, kind),
                duration_seconds=seconds,
                started_at=started,
                finishes_at=finishes,
            )

        logger.info(
            f"Upgrade started: {instance_name} -> L{target_level}, paid {cost} {kind.value}, "
            f"duration={seconds}s, finishes_at={finishes.isoformat()}"
        )
        return result

    # ----------------------------
    # Completion
    # ----------------------------

    def complete_upgrade(
        self,
        user_id: str,
        upgrade_id: int,
        instance_name: str,
        target_level: int,
    ) -> CompletionResult:
        logger.info(f"Completing upgrade {instance_name} -> L{target_level} (user: {user_id})")

        with self._unit_of_work("complete_upgrade"):
            if self.settings.strict_levels:
                pending = self.upgrades.get_matching(upgrade_id, user_id, instance_name)
                if pending is not None and int(pending.target_level) != int(target_level):
                    raise InvalidUpgrade(
                        "Target level does not match upgrade in progress.",
                        target_level=int(target_level),
                        upgrade_level=int(pending.target_level),
                    )

            removed = self.upgrades.delete_matching(upgrade_id, user_id, instance_name)
            if removed == 0:
                result = CompletionResult(
                    message=f"Upgrade for {instance_name} to level {target_level} was already completed.",
                    instance_name=instance_name,
                    level=int(target_level),
                    already_completed=True,
                )
            else:
                level = self._apply_level(user_id, instance_name, int(target_level))
                result = CompletionResult(
                    message=f"Upgrade to {instance_name} level {level} finished successfully.",
                    instance_name=instance_name,
                    level=level,
                )

        if result.already_completed:
            logger.warning(f"Upgrade record {upgrade_id} not found; probably already completed.")
        else:
            logger.info(f"{instance_name} is now L{result.level} (user: {user_id})")
        return result

    def _apply_level(self, user_id: str, instance_name: str, target_level: int) -> int:
        existing = self.structures.get_instance(user_id, instance_name)
        if existing is None:
            self.structures.insert_instance(user_id, instance_name, target_level)
            return target_level

        level = target_level
        if self.settings.strict_levels:
            level = max(int(existing.current_level), target_level)
        self.structures.set_level(existing.id, level)
        return level

    def complete_due(self, user_id: str, now: Optional[datetime] = None) -> list[CompletionResult]:
        """Resolve every in-progress upgrade whose timer has run out."""
        now = now or self.clock()
        due = [
            (up.id, up.instance_name, up.target_level)
            for up in self.upgrades.list_due(user_id, now)
        ]
        return [
            self.complete_upgrade(user_id, upgrade_id, name, level)
            for upgrade_id, name, level in due
        ]

    # ----------------------------
    # Reads
    # ----------------------------

    def list_in_progress(self, user_id: str) -> list[ActiveUpgrade]:
        return self.upgrades.list_in_progress(user_id)
