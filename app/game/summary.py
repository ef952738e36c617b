# app/game/summary.py
from __future__ import annotations

from typing import Dict, Iterable, List

from sqlalchemy.orm import Session

from app.config import EngineSettings
from app.game.economy import ResourceKind, final_cost
from app.game.errors import NotFound
from app.game.naming import strip_suffix
from app.models.catalog_entry import CatalogEntry
from app.models.structure_instance import StructureInstance
from app.repositories.accounts import AccountRepository
from app.repositories.catalog import CatalogRepository
from app.repositories.structures import StructureRepository


def remaining_totals(
    instances: Iterable[StructureInstance],
    entries: Iterable[CatalogEntry],
    *,
    has_gold_pass: bool,
    discount_pct: int,
) -> Dict[str, int]:
    """
    What it still costs to max every structure reachable at the current tier.

    - existing instance: every entry of its type above its current level
    - missing slot (count < level-1 placement cap): every entry of its type
    """
    by_type: Dict[str, List[CatalogEntry]] = {}
    for e in entries:
        by_type.setdefault(e.structure_type, []).append(e)

    needed: List[CatalogEntry] = []
    count_by_type: Dict[str, int] = {}

    for inst in instances:
        t = strip_suffix(inst.name)
        count_by_type[t] = count_by_type.get(t, 0) + 1
        needed.extend(e for e in by_type.get(t, []) if int(e.level) > int(inst.current_level))

    for t, rows in by_type.items():
        first = next((e for e in rows if int(e.level) == 1), None)
        if first is None:
            continue
        missing = max(0, int(first.max_per_town_hall) - count_by_type.get(t, 0))
        needed.extend(rows * missing)

    totals = {"gold": 0, "elixir": 0, "seconds": 0, "upgrades": len(needed)}
    for e in needed:
        kind = ResourceKind.parse(e.build_resource)
        totals[kind.value] += final_cost(e.build_cost, has_gold_pass, discount_pct)
        totals["seconds"] += int(e.build_time_seconds)
    return totals


def economy_status(db: Session, user_id: str, settings: EngineSettings) -> dict:
    account = AccountRepository(db).get_account(user_id)
    if account is None:
        raise NotFound("account", user_id=user_id)

    structures = StructureRepository(db)
    tier = structures.get_unlock_tier(user_id, settings.tier_structure_name)
    if tier is None:
        raise NotFound(settings.tier_structure_name, user_id=user_id)

    entries = CatalogRepository(db).list_entries_up_to_tier(tier)
    totals = remaining_totals(
        structures.list_instances(user_id),
        entries,
        has_gold_pass=bool(account.has_gold_pass),
        discount_pct=settings.discount_pct,
    )

    return {
        "user_id": account.user_id,
        "gold_amount": account.gold_amount,
        "elixir_amount": account.elixir_amount,
        "has_gold_pass": bool(account.has_gold_pass),
        "builders_count": account.builders_count,
        "town_hall_level": tier,
        "total_gold_needed": totals["gold"],
        "total_elixir_needed": totals["elixir"],
        "total_time_seconds": totals["seconds"],
        "upgrades_remaining": totals["upgrades"],
    }
