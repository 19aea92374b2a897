from __future__ import annotations

import logging
from typing import Optional, Protocol

from ..core.repository import Repository
from ..loot.models import LootDropKind
from .calculator import CombatRewardCalculator
from .models import CombatRewardResult, MonsterDefinition, PlayerProgress

logger = logging.getLogger(__name__)


class LevelUpHandler(Protocol):
    """Consumes newly available level-ups on the progress record; returns levels gained."""

    def apply_level_ups(self, progress: PlayerProgress) -> int:  # pragma: no cover - Protocol
        ...


class InventorySink(Protocol):
    def add_item(self, item_id: str, quantity: int) -> None:  # pragma: no cover - Protocol
        ...

    def grant_equipment(self, equipment_id: str) -> Optional[str]:  # pragma: no cover - Protocol
        ...


class CombatRewardsPipeline:
    """Compute victory rewards and apply them to the player's progress."""

    def __init__(
        self,
        calculator: CombatRewardCalculator,
        level_up: Optional[LevelUpHandler] = None,
        inventory: Optional[InventorySink] = None,
        monsters: Optional[Repository[MonsterDefinition]] = None,
    ) -> None:
        self.calculator = calculator
        self.level_up = level_up
        self.inventory = inventory
        self.monsters = monsters

    def grant_victory_rewards_for(self, progress: PlayerProgress, monster_id: str, monster_level: int) -> CombatRewardResult:
        """Look the monster up in the injected repository, then grant as usual."""
        monster = self.monsters.get_by_id(monster_id) if self.monsters is not None else None
        if monster is None:
            logger.warning("Unknown monster id %r; rewards will be empty", monster_id)
        return self.grant_victory_rewards(progress, monster, monster_level)

    def grant_victory_rewards(
        self,
        progress: PlayerProgress,
        monster: Optional[MonsterDefinition],
        monster_level: int,
    ) -> CombatRewardResult:
        """Calculate, apply exp/gold (and loot, if an inventory is wired), run level-ups.

        Returns the calculated result unchanged whatever the level-up or
        inventory collaborators do.
        """
        result = self.calculator.calculate(monster, monster_level)

        progress.exp += result.exp
        progress.gold += result.gold
        logger.info("Victory rewards: +%d exp, +%d gold, %d loot", result.exp, result.gold, len(result.loot))

        if self.inventory is not None:
            self._grant_loot(result.loot)

        if self.level_up is not None:
            try:
                gained = self.level_up.apply_level_ups(progress)
                if gained:
                    logger.info("Level up: +%d (now L%d)", gained, progress.level)
            except Exception:
                logger.exception("Level-up handler failed; rewards already applied")

        return result

    def _grant_loot(self, loot) -> None:
        for item in loot:
            if item is None or not item.loot_id:
                continue
            if item.kind == LootDropKind.ITEM:
                self.inventory.add_item(item.loot_id, item.stack_count)
            elif item.kind == LootDropKind.EQUIPMENT:
                instance_id = self.inventory.grant_equipment(item.loot_id)
                logger.debug("Granted equipment %s as instance %s", item.loot_id, instance_id)


__all__ = ["LevelUpHandler", "InventorySink", "CombatRewardsPipeline"]
