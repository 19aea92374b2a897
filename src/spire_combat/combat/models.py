from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Dict, Optional, Tuple

logger = logging.getLogger(__name__)


class DamageKind(str, Enum):
    """Selects which attacker power / defender defense pair applies."""

    PHYSICAL = "physical"
    MAGICAL = "magical"


class DamageType(str, Enum):
    NONE = "none"

    # elemental
    FIRE = "fire"
    ICE = "ice"
    LIGHTNING = "lightning"
    POISON = "poison"
    ELEMENTAL = "elemental"
    EARTH = "earth"

    # physical subtypes
    SLASHING = "slashing"
    PIERCING = "piercing"
    BLUNT = "blunt"


class RangeType(str, Enum):
    MELEE = "melee"
    RANGED = "ranged"


class SpellIntent(str, Enum):
    """What an action is for. Only damage and heal roll to hit."""

    DAMAGE = "damage"
    HEAL = "heal"
    BUFF = "buff"
    DEBUFF = "debuff"


class EffectMagnitudeBasis(str, Enum):
    """Value an effect's percentage scales from."""

    NONE = "none"
    POWER = "power"
    DAMAGE_DEALT = "damage_dealt"


class Tier(IntEnum):
    """Coarse power bracket. Higher is stronger; differences are plain ints."""

    TIER1 = 1
    TIER2 = 2
    TIER3 = 3
    TIER4 = 4
    TIER5 = 5
    TIER6 = 6


@dataclass
class MoreLessMult:
    """Multiplier bucket using the more/less model.

    Buffs stack on ``more`` (+20% => more *= 1.2), debuffs on ``less``
    (20% less => less *= 0.8). The effective factor is ``more * less``.
    """

    more: float = 1.0
    less: float = 1.0

    @property
    def final(self) -> float:
        return self.more * self.less

    def add_more(self, percent: float) -> None:
        self.more *= 1.0 + percent

    def remove_more(self, percent: float) -> None:
        f = 1.0 + percent
        if f <= 0.0:
            return
        self.more /= f

    def add_less(self, percent_less: float) -> None:
        self.less *= max(0.0, 1.0 - percent_less)

    def remove_less(self, percent_less: float) -> None:
        f = 1.0 - percent_less
        if f <= 0.0:
            return
        self.less /= f

    def reset(self) -> None:
        self.more = 1.0
        self.less = 1.0


def _kind_pick(kind: DamageKind, physical, magical):
    return magical if kind == DamageKind.MAGICAL else physical


@dataclass
class StatModifiers:
    """Bundle of flat and multiplicative combat bonuses carried by an actor.

    Kind-specific buckets (attack/physical vs magic) combine with a generic
    bucket: flats add, multipliers multiply. Per-type layers are keyed by
    DamageType and default to 0 (flat) / 1.0 (mult) when absent.
    """

    # power
    attack_power_flat: int = 0
    magic_power_flat: int = 0
    power_flat: int = 0
    attack_power_mult: MoreLessMult = field(default_factory=MoreLessMult)
    magic_power_mult: MoreLessMult = field(default_factory=MoreLessMult)
    power_mult: MoreLessMult = field(default_factory=MoreLessMult)

    # power scaling (fraction of power converted into flat damage)
    attack_power_scaling_flat: float = 0.0
    magic_power_scaling_flat: float = 0.0
    power_scaling_flat: float = 0.0
    attack_power_scaling_mult: MoreLessMult = field(default_factory=MoreLessMult)
    magic_power_scaling_mult: MoreLessMult = field(default_factory=MoreLessMult)
    power_scaling_mult: MoreLessMult = field(default_factory=MoreLessMult)

    # spell base damage
    physical_spell_base_flat: int = 0
    magic_spell_base_flat: int = 0
    spell_base_flat: int = 0
    physical_spell_base_mult: MoreLessMult = field(default_factory=MoreLessMult)
    magic_spell_base_mult: MoreLessMult = field(default_factory=MoreLessMult)
    spell_base_mult: MoreLessMult = field(default_factory=MoreLessMult)

    # generic damage
    attack_damage_flat: int = 0
    magic_damage_flat: int = 0
    damage_flat: int = 0
    physical_damage_mult: MoreLessMult = field(default_factory=MoreLessMult)
    magic_damage_mult: MoreLessMult = field(default_factory=MoreLessMult)
    damage_mult: MoreLessMult = field(default_factory=MoreLessMult)

    # defense
    physical_defense_flat: int = 0
    magic_defense_flat: int = 0
    defense_flat: int = 0
    physical_defense_mult: MoreLessMult = field(default_factory=MoreLessMult)
    magic_defense_mult: MoreLessMult = field(default_factory=MoreLessMult)
    defense_mult: MoreLessMult = field(default_factory=MoreLessMult)

    # range
    melee_damage_flat: int = 0
    ranged_damage_flat: int = 0
    melee_damage_mult: MoreLessMult = field(default_factory=MoreLessMult)
    ranged_damage_mult: MoreLessMult = field(default_factory=MoreLessMult)

    # per damage type layers
    attacker_bonus_flat: Dict[DamageType, int] = field(default_factory=dict)
    attacker_bonus_mult: Dict[DamageType, float] = field(default_factory=dict)
    attacker_weaken_flat: Dict[DamageType, int] = field(default_factory=dict)
    attacker_weaken_mult: Dict[DamageType, float] = field(default_factory=dict)
    defender_resist_flat: Dict[DamageType, int] = field(default_factory=dict)
    defender_resist_mult: Dict[DamageType, float] = field(default_factory=dict)
    defender_vuln_flat: Dict[DamageType, int] = field(default_factory=dict)
    defender_vuln_mult: Dict[DamageType, float] = field(default_factory=dict)

    # ---- kind-resolved views used by the damage rules ----

    def spell_base_flat_for(self, kind: DamageKind) -> int:
        return _kind_pick(kind, self.physical_spell_base_flat, self.magic_spell_base_flat) + self.spell_base_flat

    def spell_base_mult_for(self, kind: DamageKind) -> float:
        return _kind_pick(kind, self.physical_spell_base_mult, self.magic_spell_base_mult).final * self.spell_base_mult.final

    def power_flat_for(self, kind: DamageKind) -> int:
        return _kind_pick(kind, self.attack_power_flat, self.magic_power_flat) + self.power_flat

    def power_mult_for(self, kind: DamageKind) -> float:
        return _kind_pick(kind, self.attack_power_mult, self.magic_power_mult).final * self.power_mult.final

    def power_scaling_flat_for(self, kind: DamageKind) -> float:
        return _kind_pick(kind, self.attack_power_scaling_flat, self.magic_power_scaling_flat) + self.power_scaling_flat

    def power_scaling_mult_for(self, kind: DamageKind) -> float:
        picked = _kind_pick(kind, self.attack_power_scaling_mult, self.magic_power_scaling_mult)
        return picked.final * self.power_scaling_mult.final

    def damage_flat_for(self, kind: DamageKind) -> int:
        return _kind_pick(kind, self.attack_damage_flat, self.magic_damage_flat) + self.damage_flat

    def damage_mult_for(self, kind: DamageKind) -> float:
        return _kind_pick(kind, self.physical_damage_mult, self.magic_damage_mult).final * self.damage_mult.final

    def defense_flat_for(self, kind: DamageKind) -> int:
        return _kind_pick(kind, self.physical_defense_flat, self.magic_defense_flat) + self.defense_flat

    def defense_mult_for(self, kind: DamageKind) -> float:
        return _kind_pick(kind, self.physical_defense_mult, self.magic_defense_mult).final * self.defense_mult.final

    def range_bonus_flat(self, range_type: RangeType) -> int:
        return self.ranged_damage_flat if range_type == RangeType.RANGED else self.melee_damage_flat

    def range_bonus_mult(self, range_type: RangeType) -> float:
        bucket = self.ranged_damage_mult if range_type == RangeType.RANGED else self.melee_damage_mult
        return bucket.final

    # ---- per-type layer helpers ----

    def add_attacker_bonus(self, damage_type: DamageType, flat: int = 0, more_percent: float = 0.0) -> None:
        self.attacker_bonus_flat[damage_type] = self.attacker_bonus_flat.get(damage_type, 0) + flat
        self.attacker_bonus_mult[damage_type] = self.attacker_bonus_mult.get(damage_type, 1.0) * (1.0 + more_percent)

    def add_defender_vulnerability(self, damage_type: DamageType, flat: int = 0, more_percent: float = 0.0) -> None:
        self.defender_vuln_flat[damage_type] = self.defender_vuln_flat.get(damage_type, 0) + flat
        self.defender_vuln_mult[damage_type] = self.defender_vuln_mult.get(damage_type, 1.0) * (1.0 + more_percent)

    def add_defender_resist(self, damage_type: DamageType, flat: int = 0, less_percent: float = 0.0) -> None:
        self.defender_resist_flat[damage_type] = self.defender_resist_flat.get(damage_type, 0) + flat
        factor = max(0.0, 1.0 - less_percent)
        self.defender_resist_mult[damage_type] = self.defender_resist_mult.get(damage_type, 1.0) * factor

    def add_attacker_weaken(self, damage_type: DamageType, flat: int = 0, less_percent: float = 0.0) -> None:
        self.attacker_weaken_flat[damage_type] = self.attacker_weaken_flat.get(damage_type, 0) + flat
        factor = max(0.0, 1.0 - less_percent)
        self.attacker_weaken_mult[damage_type] = self.attacker_weaken_mult.get(damage_type, 1.0) * factor


@dataclass(frozen=True)
class DerivedStats:
    attack_power: int = 0
    magic_power: int = 0
    physical_defense: int = 0
    magical_defense: int = 0
    max_hp: int = 1
    max_mana: int = 0

    def power_for(self, kind: DamageKind) -> int:
        return _kind_pick(kind, self.attack_power, self.magic_power)

    def defense_for(self, kind: DamageKind) -> int:
        return _kind_pick(kind, self.physical_defense, self.magical_defense)


@dataclass(frozen=True)
class ActorSnapshot:
    """Read-only view of an attacker or defender at the moment of the action."""

    name: str
    level: int = 1
    tier: Tier = Tier.TIER1
    derived: DerivedStats = field(default_factory=DerivedStats)
    modifiers: StatModifiers = field(default_factory=StatModifiers)


@dataclass(frozen=True)
class EffectSpec:
    """A secondary effect configured on a spell.

    ``magnitude`` is opaque payload (duration, stacks, strength) for the
    effect-application layer. The effect's own damage is ``damage`` plus
    ``basis_percent`` of the value picked by ``basis`` (the attacker's power
    or the damage the action just dealt).
    """

    effect_id: str
    apply_chance: float = 1.0
    resist_chance: float = 0.0
    magnitude: float = 0.0
    damage: int = 0
    basis: EffectMagnitudeBasis = EffectMagnitudeBasis.NONE
    basis_percent: float = 0.0


@dataclass(frozen=True)
class ResolvedSpell:
    """Attack definition after spell level and overrides have been applied."""

    spell_id: str
    damage: int = 0
    intent: SpellIntent = SpellIntent.DAMAGE
    damage_kind: DamageKind = DamageKind.PHYSICAL
    damage_types: Tuple[DamageType, ...] = ()
    range_type: RangeType = RangeType.MELEE
    ignore_defense_percent: int = 0
    ignore_defense_flat: int = 0
    hit_chance: int = 100
    level: int = 1
    name: Optional[str] = None
    on_cast_effects: Tuple[EffectSpec, ...] = ()
    on_hit_effects: Tuple[EffectSpec, ...] = ()

    @property
    def display_name(self) -> str:
        return self.name or self.spell_id

    def effective_damage_types(self) -> Tuple[DamageType, ...]:
        """Tagged damage types, or the ``none`` type when the spell has no tags."""
        return self.damage_types if self.damage_types else (DamageType.NONE,)


__all__ = [
    "DamageKind",
    "DamageType",
    "RangeType",
    "SpellIntent",
    "EffectMagnitudeBasis",
    "Tier",
    "MoreLessMult",
    "StatModifiers",
    "DerivedStats",
    "ActorSnapshot",
    "EffectSpec",
    "ResolvedSpell",
]
