# app/repositories/active_upgrades.py
from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from app.models.active_upgrade import ActiveUpgrade, STATUS_IN_PROGRESS


class ActiveUpgradeRepository:
    def __init__(self, db: Session) -> None:
        self.db = db

    def list_in_progress(self, user_id: str) -> list[ActiveUpgrade]:
        return (
            self.db.query(ActiveUpgrade)
            .filter(ActiveUpgrade.user_id == str(user_id), ActiveUpgrade.status == STATUS_IN_PROGRESS)
            .order_by(ActiveUpgrade.finishes_at.asc(), ActiveUpgrade.id.asc())
            .all()
        )

    def count_in_progress(self, user_id: str) -> int:
        return (
            self.db.query(ActiveUpgrade)
            .filter(ActiveUpgrade.user_id == str(user_id), ActiveUpgrade.status == STATUS_IN_PROGRESS)
            .count()
        )

    def busy_instance_names(self, user_id: str) -> set[str]:
        rows = (
            self.db.query(ActiveUpgrade.instance_name)
            .filter(ActiveUpgrade.user_id == str(user_id), ActiveUpgrade.status == STATUS_IN_PROGRESS)
            .all()
        )
        return {name for (name,) in rows}

    def list_due(self, user_id: str, now: datetime) -> list[ActiveUpgrade]:
        return (
            self.db.query(ActiveUpgrade)
            .filter(
                ActiveUpgrade.user_id == str(user_id),
                ActiveUpgrade.status == STATUS_IN_PROGRESS,
                ActiveUpgrade.finishes_at <= now,
            )
            .order_by(ActiveUpgrade.finishes_at.asc(), ActiveUpgrade.id.asc())
            .all()
        )

    def get_matching(self, upgrade_id: int, user_id: str, instance_name: str) -> Optional[ActiveUpgrade]:
        return (
            self.db.query(ActiveUpgrade)
            .filter(
                ActiveUpgrade.id == int(upgrade_id),
                ActiveUpgrade.user_id == str(user_id),
                ActiveUpgrade.instance_name == instance_name,
            )
            .first()
        )

    def insert(self, record: ActiveUpgrade) -> ActiveUpgrade:
        self.db.add(record)
        self.db.flush()
        return record

    def delete_matching(self, upgrade_id: int, user_id: str, instance_name: str) -> int:
        """Delete by id+user+instance; the returned row count is the idempotency signal."""
        return (
            self.db.query(ActiveUpgrade)
            .filter(
                ActiveUpgrade.id == int(upgrade_id),
                ActiveUpgrade.user_id == str(user_id),
                ActiveUpgrade.instance_name == instance_name,
            )
            .delete(synchronize_session=False)
        )
