from __future__ import annotations

import logging
from typing import Dict, Mapping, Optional, Protocol

from ..core.rng import RandomSource, resolve_rng
from ..core.settings import RewardSettings
from ..loot.roller import LootRoller
from .models import CombatRewardResult, MonsterDefinition, MonsterRarity

logger = logging.getLogger(__name__)


class CombatRewardCalculator(Protocol):
    def calculate(self, monster: Optional[MonsterDefinition], monster_level: int) -> CombatRewardResult:  # pragma: no cover
        ...


class DefaultCombatRewardCalculator:
    """Experience and gold from the monster definition, loot from its table.

    exp  = max(1, base_exp * rarity_mult)
    gold = max(0, randint(gold_min, gold_max) * rarity_mult)
    Rarities missing from ``rarity_multipliers`` use 1.0.
    """

    def __init__(
        self,
        rng: Optional[RandomSource] = None,
        loot_roller: Optional[LootRoller] = None,
        rarity_multipliers: Optional[Mapping[str, float]] = None,
    ) -> None:
        self.rng = rng
        self.loot_roller = loot_roller or LootRoller(rng)
        self.rarity_multipliers: Dict[str, float] = {
            str(k).lower(): float(v) for k, v in (rarity_multipliers or {}).items()
        }

    @classmethod
    def from_settings(cls, settings: RewardSettings, rng: Optional[RandomSource] = None) -> "DefaultCombatRewardCalculator":
        return cls(rng=rng, rarity_multipliers=settings.rarity_multipliers)

    def rarity_multiplier(self, rarity: MonsterRarity) -> float:
        return self.rarity_multipliers.get(MonsterRarity(rarity).value, 1.0)

    def calculate(self, monster: Optional[MonsterDefinition], monster_level: int) -> CombatRewardResult:
        if monster is None:
            logger.warning("Reward calculation requested without a monster; granting nothing")
            return CombatRewardResult.none()

        mult = self.rarity_multiplier(monster.rarity)
        exp = max(1, int(monster.base_exp * mult))

        gold_min = monster.gold_min
        gold_max = max(gold_min, monster.gold_max)
        rolled = resolve_rng(self.rng).range_int(gold_min, gold_max + 1)
        gold = max(0, int(rolled * mult))

        loot = tuple(self.loot_roller.roll_loot(monster.loot_table))

        logger.debug(
            "Rewards for %s (L%d, %s x%.2f): exp=%d gold=%d loot=%d",
            monster.id,
            monster_level,
            monster.rarity.value,
            mult,
            exp,
            gold,
            len(loot),
        )
        return CombatRewardResult(exp=exp, gold=gold, loot=loot)


__all__ = ["CombatRewardCalculator", "DefaultCombatRewardCalculator"]
