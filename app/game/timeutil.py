# app/game/timeutil.py
from __future__ import annotations

from datetime import datetime, timedelta, timezone


def now_utc_naive() -> datetime:
    # Naive UTC datetime (no tzinfo). Works cleanly with SQLite.
    return datetime.now(timezone.utc).replace(tzinfo=None)


def apply_duration_offset(base_seconds: int, offset_seconds: int = 0) -> int:
    return max(0, int(base_seconds) + int(offset_seconds or 0))


def finishes_at_from_seconds(started_at: datetime, duration_seconds: int) -> datetime:
    return started_at + timedelta(seconds=int(duration_seconds))


def seconds_until(target: datetime, now: datetime) -> int:
    return max(0, int((target - now).total_seconds()))
