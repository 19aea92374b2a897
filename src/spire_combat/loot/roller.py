from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from ..core.rng import RandomSource, resolve_rng
from .models import (
    EquipmentDrop,
    ItemDrop,
    LootCountCdfEntry,
    LootDrop,
    LootDropKind,
    LootItem,
    LootPickMode,
    LootTable,
    LootWeightedDrop,
)

logger = logging.getLogger(__name__)


def _selectable(entry: Optional[LootWeightedDrop]) -> bool:
    return entry is not None and int(entry.weight) > 0 and entry.drop is not None and entry.drop.is_valid()


class LootRoller:
    """
    Turn a LootTable into concrete LootItems.

    Order of operations (and of RNG consumption):
      1. roll the drop count from the CDF checkpoints,
      2. add every guaranteed drop,
      3. fill the remaining slots from the weighted pool.
    Malformed entries are skipped; a roll never raises.
    """

    def __init__(self, rng: Optional[RandomSource] = None) -> None:
        self.rng = rng

    @property
    def _rng(self) -> RandomSource:
        return resolve_rng(self.rng)

    def roll_loot(self, table: Optional[LootTable]) -> List[LootItem]:
        if table is None or table.is_empty():
            return []

        drop_count = self.resolve_drop_count(table.drop_count_cdf)
        results: List[LootItem] = []

        guaranteed_total = 0
        for g in table.guaranteed_drops:
            if g is None or g.drop is None or g.guaranteed_count <= 0:
                continue
            for _ in range(g.guaranteed_count):
                if self._try_add(g.drop, results):
                    guaranteed_total += 1

        total_drops = max(drop_count, guaranteed_total)
        remaining = total_drops - guaranteed_total
        if remaining <= 0 or not table.weighted_pool:
            logger.debug("Loot %s: %d guaranteed, no pool draws", table.id or "<table>", guaranteed_total)
            return results

        if table.pick_mode == LootPickMode.WITHOUT_REPLACEMENT:
            working = list(table.weighted_pool)
            for _ in range(remaining):
                idx = self.pick_weighted(working)
                if idx is None:
                    logger.debug("Weighted pool exhausted with %d draws left", remaining)
                    break
                self._try_add(working[idx].drop, results)
                del working[idx]
        else:
            for _ in range(remaining):
                idx = self.pick_weighted(table.weighted_pool)
                if idx is None:
                    break
                self._try_add(table.weighted_pool[idx].drop, results)

        logger.debug(
            "Loot %s: count=%d guaranteed=%d => %d items",
            table.id or "<table>",
            drop_count,
            guaranteed_total,
            len(results),
        )
        return results

    def resolve_drop_count(self, cdf: Sequence[LootCountCdfEntry]) -> int:
        """Roll 1..100 once; keep the largest count whose chance covers the roll."""
        if not cdf:
            return 0

        roll = self._rng.range_int(1, 101)
        best = 0
        for entry in cdf:
            if entry is None or entry.count < 0:
                continue
            chance = max(0, min(100, entry.chance_at_least_percent))
            if chance >= roll:
                best = max(best, entry.count)
        return best

    def pick_weighted(self, pool: Sequence[Optional[LootWeightedDrop]]) -> Optional[int]:
        """Return the index of a weighted pick, or None if nothing is selectable."""
        total = sum(int(e.weight) for e in pool if _selectable(e))
        if total <= 0:
            return None

        r = self._rng.range_int(1, total + 1)
        run = 0
        for i, entry in enumerate(pool):
            if not _selectable(entry):
                continue
            run += int(entry.weight)
            if run >= r:
                return i
        return None

    def _try_add(self, drop: Optional[LootDrop], out: List[LootItem]) -> bool:
        if drop is None or not drop.is_valid():
            logger.warning("Skipping loot drop with missing id: %r", drop)
            return False

        if isinstance(drop, ItemDrop):
            low = max(1, drop.min_amount)
            high = max(low, drop.max_amount)
            qty = self._rng.range_int(low, high + 1)
            out.append(LootItem(kind=LootDropKind.ITEM, loot_id=drop.item_id, stack_count=qty))
            return True

        if isinstance(drop, EquipmentDrop):
            out.append(LootItem(kind=LootDropKind.EQUIPMENT, loot_id=drop.equipment_id, stack_count=1))
            return True

        return False


def roll_loot(table: Optional[LootTable], rng: Optional[RandomSource] = None) -> List[LootItem]:
    return LootRoller(rng).roll_loot(table)


__all__ = ["LootRoller", "roll_loot"]
