from .calculator import CombatRewardCalculator, DefaultCombatRewardCalculator
from .models import CombatRewardResult, MonsterDefinition, MonsterRarity, PlayerProgress
from .pipeline import CombatRewardsPipeline, InventorySink, LevelUpHandler

__all__ = [
    "CombatRewardCalculator",
    "DefaultCombatRewardCalculator",
    "CombatRewardResult",
    "MonsterDefinition",
    "MonsterRarity",
    "PlayerProgress",
    "CombatRewardsPipeline",
    "InventorySink",
    "LevelUpHandler",
]
