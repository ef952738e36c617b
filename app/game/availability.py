# app/game/availability.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, Set, Tuple

from app.game.errors import NotFound
from app.game.naming import instance_name, strip_suffix
from app.models.catalog_entry import CatalogEntry
from app.models.structure_instance import StructureInstance
from app.repositories.active_upgrades import ActiveUpgradeRepository
from app.repositories.catalog import CatalogRepository
from app.repositories.structures import StructureRepository


@dataclass(frozen=True)
class AvailableUpgrade:
    instance_name: str
    current_level: int
    next_upgrade: CatalogEntry


def plan_available(
    instances: Iterable[StructureInstance],
    entries: Iterable[CatalogEntry],
    busy: Set[str],
) -> list[AvailableUpgrade]:
    """
    entries: catalog rows already filtered to the user's tier.
    busy: instance names locked by an in-progress upgrade (never offered).
    """
    instances = list(instances)
    by_key: Dict[Tuple[str, int], CatalogEntry] = {(e.structure_type, int(e.level)): e for e in entries}

    count_by_type: Dict[str, int] = {}
    for inst in instances:
        t = strip_suffix(inst.name)
        count_by_type[t] = count_by_type.get(t, 0) + 1

    existing_names = {inst.name for inst in instances}
    available: list[AvailableUpgrade] = []

    # Existing instances -> next level
    for inst in instances:
        if inst.name in busy:
            continue
        nxt = by_key.get((strip_suffix(inst.name), int(inst.current_level) + 1))
        if nxt is not None:
            available.append(AvailableUpgrade(inst.name, int(inst.current_level), nxt))

    # New instances -> level 1, up to the placement cap
    for structure_type in sorted({t for (t, _lvl) in by_key}):
        first = by_key.get((structure_type, 1))
        if first is None:
            continue

        for i in range(count_by_type.get(structure_type, 0), int(first.max_per_town_hall)):
            candidate = instance_name(structure_type, i + 1)
            if candidate in busy or candidate in existing_names:
                continue
            available.append(AvailableUpgrade(candidate, 0, first))

    return available


class AvailabilityPlanner:
    def __init__(
        self,
        *,
        catalog: CatalogRepository,
        upgrades: ActiveUpgradeRepository,
        structures: StructureRepository,
        tier_structure_name: str,
    ) -> None:
        self.catalog = catalog
        self.upgrades = upgrades
        self.structures = structures
        self.tier_structure_name = tier_structure_name

    def unlock_tier(self, user_id: str) -> int:
        tier = self.structures.get_unlock_tier(user_id, self.tier_structure_name)
        if tier is None:
            raise NotFound(self.tier_structure_name, user_id=user_id)
        return tier

    def list_available(self, user_id: str) -> list[AvailableUpgrade]:
        busy = self.upgrades.busy_instance_names(user_id)
        tier = self.unlock_tier(user_id)
        entries = self.catalog.list_entries_up_to_tier(tier)
        instances = self.structures.list_instances(user_id)
        return plan_available(instances, entries, busy)
