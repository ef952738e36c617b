# app/config.py
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent.parent

DATA_DIR = PROJECT_ROOT / "data"
DATA_DIR.mkdir(parents=True, exist_ok=True)

DB_PATH = DATA_DIR / "game.db"
DATABASE_URL: str = os.getenv("DATABASE_URL", f"sqlite:///{DB_PATH.as_posix()}")

# Admin override key (single source of truth). Empty disables admin endpoints.
ADMIN_KEY: str = os.getenv("ADMIN_KEY", "")

LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

# Flat offset added to every upgrade duration. Some deployments stored build
# times two hours short (7200); leave at 0 unless the catalog data needs it.
UPGRADE_DURATION_OFFSET_SECONDS: int = int(os.getenv("UPGRADE_DURATION_OFFSET_SECONDS", "0"))

# Gold pass
GOLD_PASS_DISCOUNT_PCT: int = int(os.getenv("GOLD_PASS_DISCOUNT_PCT", "20"))

# Economy caps / defaults
RESOURCE_CAP: int = int(os.getenv("RESOURCE_CAP", "24000000"))
DEFAULT_BUILDERS_COUNT: int = int(os.getenv("DEFAULT_BUILDERS_COUNT", "4"))
MAX_BUILDERS_COUNT: int = int(os.getenv("MAX_BUILDERS_COUNT", "6"))

# Offline production (per second)
GOLD_PRODUCTION_PER_SECOND: int = int(os.getenv("GOLD_PRODUCTION_PER_SECOND", "500"))
ELIXIR_PRODUCTION_PER_SECOND: int = int(os.getenv("ELIXIR_PRODUCTION_PER_SECOND", "500"))

# Policy switches
AUTO_CREATE_ACCOUNT: bool = os.getenv("AUTO_CREATE_ACCOUNT", "0") == "1"
STRICT_UPGRADE_LEVELS: bool = os.getenv("STRICT_UPGRADE_LEVELS", "1") == "1"
COMPLETE_ON_READ: bool = os.getenv("COMPLETE_ON_READ", "0") == "1"

# The structure whose level gates the catalog
TIER_STRUCTURE_NAME: str = os.getenv("TIER_STRUCTURE_NAME", "Town Hall")


@dataclass(frozen=True)
class EngineSettings:
    duration_offset_seconds: int = 0
    discount_pct: int = 20
    resource_cap: int = 24_000_000
    default_builders: int = 4
    auto_create_account: bool = False
    strict_levels: bool = True
    tier_structure_name: str = "Town Hall"


def engine_settings() -> EngineSettings:
    return EngineSettings(
        duration_offset_seconds=UPGRADE_DURATION_OFFSET_SECONDS,
        discount_pct=GOLD_PASS_DISCOUNT_PCT,
        resource_cap=RESOURCE_CAP,
        default_builders=DEFAULT_BUILDERS_COUNT,
        auto_create_account=AUTO_CREATE_ACCOUNT,
        strict_levels=STRICT_UPGRADE_LEVELS,
        tier_structure_name=TIER_STRUCTURE_NAME,
    )
