from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from ..combat.models import Tier
from ..loot.models import LootItem, LootTable


class MonsterRarity(str, Enum):
    COMMON = "common"
    UNCOMMON = "uncommon"
    RARE = "rare"
    ELITE = "elite"
    SPECIAL_ELITE = "special_elite"
    LORD = "lord"
    HIGH_LORD = "high_lord"
    GRAND_LORD = "grand_lord"
    MYTHICAL = "mythical"
    PRIMAL = "primal"
    GOD = "god"


@dataclass(frozen=True)
class MonsterDefinition:
    id: str
    base_exp: int = 0
    gold_min: int = 0
    gold_max: int = 0
    rarity: MonsterRarity = MonsterRarity.COMMON
    tier: Tier = Tier.TIER1
    loot_table: Optional[LootTable] = None
    name: Optional[str] = None


@dataclass
class PlayerProgress:
    """The persistent slice of the player record that rewards mutate in place."""

    level: int = 1
    exp: int = 0
    gold: int = 0


@dataclass(frozen=True)
class CombatRewardResult:
    exp: int
    gold: int
    loot: Tuple[LootItem, ...] = ()

    @classmethod
    def none(cls) -> "CombatRewardResult":
        return cls(exp=0, gold=0, loot=())


__all__ = ["MonsterRarity", "MonsterDefinition", "PlayerProgress", "CombatRewardResult"]
