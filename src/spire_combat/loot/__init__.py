from .models import (
    EquipmentDrop,
    ItemDrop,
    LootCountCdfEntry,
    LootDropKind,
    LootGuaranteedDrop,
    LootItem,
    LootPickMode,
    LootTable,
    LootWeightedDrop,
)
from .roller import LootRoller, roll_loot

__all__ = [
    "EquipmentDrop",
    "ItemDrop",
    "LootCountCdfEntry",
    "LootDropKind",
    "LootGuaranteedDrop",
    "LootItem",
    "LootPickMode",
    "LootTable",
    "LootWeightedDrop",
    "LootRoller",
    "roll_loot",
]
