from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from ..core.rng import RandomSource
from .models import ActorSnapshot, ResolvedSpell


@dataclass
class EffectAttempt:
    """Working record for one secondary effect: rolls and outcome, not mechanics."""

    effect_id: str
    requires_hit: bool = True
    apply_chance: float = 1.0
    resist_chance: float = 0.0

    # payload from the triggering action, read by magnitude bases
    last_damage_dealt: int = 0
    last_damage_dealt_power: int = 0

    base_damage: int = 0
    final_damage: int = 0

    attempted: bool = False
    applied: bool = False
    resisted: bool = False
    magnitude: float = 0.0

    def to_result(self) -> "EffectResult":
        return EffectResult(
            effect_id=self.effect_id,
            attempted=self.attempted,
            applied=self.applied,
            resisted=self.resisted,
            magnitude=self.magnitude,
            damage=self.final_damage,
            last_damage_dealt=self.last_damage_dealt,
            last_damage_dealt_power=self.last_damage_dealt_power,
        )


@dataclass(frozen=True)
class EffectResult:
    effect_id: str
    attempted: bool
    applied: bool
    resisted: bool
    magnitude: float
    damage: int = 0
    last_damage_dealt: int = 0
    last_damage_dealt_power: int = 0


@dataclass(frozen=True)
class ActionResult:
    """Final outcome of resolving one action."""

    hit: bool
    damage: int
    effects: Tuple[EffectResult, ...] = ()

    @classmethod
    def none(cls) -> "ActionResult":
        return cls(hit=False, damage=0, effects=())


@dataclass
class ActionContext:
    """Mutable working memory for resolving one action from attacker to defender.

    The inputs (attacker, defender, spell) are frozen snapshots; phases and
    rules only write the accumulator fields below them.
    """

    attacker: Optional[ActorSnapshot] = None
    defender: Optional[ActorSnapshot] = None
    spell: Optional[ResolvedSpell] = None
    rng: Optional[RandomSource] = None

    # hit
    hit_chance: int = 100
    hit: bool = False

    # damage
    base_damage: int = 0
    flat_damage_bonus: int = 0
    damage_mult: float = 1.0
    final_damage: int = 0
    effective_defense: int = 0
    last_damage_dealt: int = 0
    last_damage_dealt_power: int = 0

    # effects
    effect_attempts: List[EffectAttempt] = field(default_factory=list)

    def has_participants(self) -> bool:
        return self.attacker is not None and self.defender is not None and self.spell is not None

    def to_result(self) -> ActionResult:
        return ActionResult(
            hit=self.hit,
            damage=max(0, self.final_damage),
            effects=tuple(a.to_result() for a in self.effect_attempts),
        )


__all__ = ["EffectAttempt", "EffectResult", "ActionResult", "ActionContext"]
