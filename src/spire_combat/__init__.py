"""
Spire combat core.

Headless rule-chain resolution for turn-based combat and victory rewards:
- Hit and damage phases driven by ordered, pluggable rule lists
- Secondary-effect attempt bookkeeping
- Experience/gold reward calculation and loot table rolling

All randomness flows through an injected RandomSource so that resolutions
replay exactly under a fixed seed. UI, persistence and definition databases
compose these services from the outside.
"""
from .combat import ActionContext, ActionResolver, ActionResult
from .core.rng import RNG, RandomSource
from .core.settings import Settings
from .errors import ConfigError, NotFound, SpireCombatError
from .loot import LootRoller, LootTable, roll_loot
from .rewards import CombatRewardResult, CombatRewardsPipeline, DefaultCombatRewardCalculator

__all__ = [
    "ActionContext",
    "ActionResolver",
    "ActionResult",
    "RNG",
    "RandomSource",
    "Settings",
    "ConfigError",
    "NotFound",
    "SpireCombatError",
    "LootRoller",
    "LootTable",
    "roll_loot",
    "CombatRewardResult",
    "CombatRewardsPipeline",
    "DefaultCombatRewardCalculator",
]
