from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Union

from ..errors import ConfigError

logger = logging.getLogger(__name__)


class LootDropKind(str, Enum):
    ITEM = "item"
    EQUIPMENT = "equipment"


class LootPickMode(str, Enum):
    WITH_REPLACEMENT = "with_replacement"
    WITHOUT_REPLACEMENT = "without_replacement"


@dataclass(frozen=True)
class ItemDrop:
    """Stackable item drop; quantity is rolled inclusively in [min_amount, max_amount]."""

    item_id: str
    min_amount: int = 1
    max_amount: int = 1

    kind = LootDropKind.ITEM

    @property
    def drop_id(self) -> str:
        return self.item_id

    def is_valid(self) -> bool:
        return bool(self.item_id and self.item_id.strip())


@dataclass(frozen=True)
class EquipmentDrop:
    """Single equipment piece; its instance id is assigned by the inventory."""

    equipment_id: str

    kind = LootDropKind.EQUIPMENT

    @property
    def drop_id(self) -> str:
        return self.equipment_id

    def is_valid(self) -> bool:
        return bool(self.equipment_id and self.equipment_id.strip())


LootDrop = Union[ItemDrop, EquipmentDrop]


@dataclass(frozen=True)
class LootCountCdfEntry:
    """``count`` drops happen when the 1..100 roll is <= ``chance_at_least_percent``."""

    count: int
    chance_at_least_percent: int


@dataclass(frozen=True)
class LootGuaranteedDrop:
    drop: Optional[LootDrop]
    guaranteed_count: int = 1


@dataclass(frozen=True)
class LootWeightedDrop:
    drop: Optional[LootDrop]
    weight: int = 1


@dataclass(frozen=True)
class LootItem:
    """One rolled stack, as handed to the inventory layer."""

    kind: LootDropKind
    loot_id: str
    stack_count: int = 1
    equipment_instance_id: Optional[str] = None


def _drop_from_dict(raw: Mapping[str, Any]) -> Optional[LootDrop]:
    if "item" in raw:
        min_amount = int(raw.get("min", 1))
        return ItemDrop(
            item_id=str(raw["item"]),
            min_amount=min_amount,
            max_amount=int(raw.get("max", min_amount)),
        )
    if "equipment" in raw:
        return EquipmentDrop(equipment_id=str(raw["equipment"]))
    logger.warning("Loot entry without 'item' or 'equipment' key skipped: %r", dict(raw))
    return None


@dataclass(frozen=True)
class LootTable:
    """Read-only loot configuration for one monster or chest.

    Schema accepted by ``from_dict`` (e.g. from YAML):
    {
      "id": "goblin",
      "pick_mode": "without_replacement",
      "drop_count_cdf": [{"count": 1, "chance": 60}, {"count": 2, "chance": 15}],
      "guaranteed_drops": [{"item": "potion", "min": 1, "max": 1, "count": 2}],
      "weighted_pool": [{"equipment": "rusty_sword", "weight": 3}]
    }
    """

    drop_count_cdf: List[LootCountCdfEntry] = field(default_factory=list)
    guaranteed_drops: List[LootGuaranteedDrop] = field(default_factory=list)
    weighted_pool: List[LootWeightedDrop] = field(default_factory=list)
    pick_mode: LootPickMode = LootPickMode.WITH_REPLACEMENT
    id: str = ""

    def is_empty(self) -> bool:
        return not self.drop_count_cdf and not self.guaranteed_drops and not self.weighted_pool

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "LootTable":
        if not isinstance(data, Mapping):
            raise ConfigError(f"Loot table must be a mapping, got {type(data).__name__}")
        try:
            cdf = [
                LootCountCdfEntry(count=int(e["count"]), chance_at_least_percent=int(e["chance"]))
                for e in data.get("drop_count_cdf", []) or []
            ]
            guaranteed: List[LootGuaranteedDrop] = []
            for raw in data.get("guaranteed_drops", []) or []:
                drop = _drop_from_dict(raw)
                if drop is not None:
                    guaranteed.append(LootGuaranteedDrop(drop=drop, guaranteed_count=int(raw.get("count", 1))))
            pool: List[LootWeightedDrop] = []
            for raw in data.get("weighted_pool", []) or []:
                drop = _drop_from_dict(raw)
                if drop is not None:
                    pool.append(LootWeightedDrop(drop=drop, weight=int(raw.get("weight", 1))))
            pick_mode = LootPickMode(str(data.get("pick_mode", LootPickMode.WITH_REPLACEMENT.value)).lower())
        except (AttributeError, KeyError, TypeError, ValueError) as exc:
            raise ConfigError(f"Invalid loot table {data.get('id', '?')!r}: {exc}") from exc
        return cls(
            drop_count_cdf=cdf,
            guaranteed_drops=guaranteed,
            weighted_pool=pool,
            pick_mode=pick_mode,
            id=str(data.get("id", "")),
        )


__all__ = [
    "LootDropKind",
    "LootPickMode",
    "ItemDrop",
    "EquipmentDrop",
    "LootDrop",
    "LootCountCdfEntry",
    "LootGuaranteedDrop",
    "LootWeightedDrop",
    "LootItem",
    "LootTable",
]
