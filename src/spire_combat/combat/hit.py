from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Protocol

from ..core.rng import resolve_rng
from .context import ActionContext
from .models import StatModifiers

logger = logging.getLogger(__name__)


class HitRule(Protocol):
    """Adjusts ``ctx.hit_chance``; must not touch any other field."""

    name: str

    def apply(self, ctx: ActionContext, attacker_modifiers: Optional[StatModifiers]) -> None:  # pragma: no cover
        ...


def _clamp_percent(value: int) -> int:
    return max(0, min(100, int(value)))


class LevelTierSuppressionHitRule:
    """Reduce hit chance when the defender out-levels or out-tiers the attacker.

    Being stronger never grants a bonus. Penalties are percentage points:
    ``round(max(0, levelDiff) * per_level + max(0, tierDiff) * per_tier)``.
    """

    name = "level_tier_suppression"

    def __init__(self, level_penalty_per_level: float = 3.0, tier_penalty_per_tier: float = 3.0) -> None:
        self.level_penalty_per_level = float(level_penalty_per_level)
        self.tier_penalty_per_tier = float(tier_penalty_per_tier)

    def apply(self, ctx: ActionContext, attacker_modifiers: Optional[StatModifiers] = None) -> None:
        level_diff = ctx.defender.level - ctx.attacker.level
        tier_diff = int(ctx.defender.tier) - int(ctx.attacker.tier)

        penalty_pct = max(0, level_diff) * self.level_penalty_per_level + max(0, tier_diff) * self.tier_penalty_per_tier
        penalty = int(round(penalty_pct))
        if penalty:
            logger.debug(
                "Hit suppression: levelDiff=%d tierDiff=%d => -%d (hitChance %d -> %d)",
                level_diff,
                tier_diff,
                penalty,
                ctx.hit_chance,
                ctx.hit_chance - penalty,
            )
        ctx.hit_chance -= penalty


class HitPhase:
    """Runs the hit rules in order and makes the single pass/fail roll."""

    def __init__(self, rules: Iterable[HitRule] = ()) -> None:
        self.rules: List[HitRule] = [r for r in rules if r is not None]

    def resolve(self, ctx: ActionContext, attacker_modifiers: Optional[StatModifiers] = None) -> None:
        if ctx is None:
            return
        if not ctx.has_participants():
            logger.debug("Hit phase skipped: attacker, defender or spell missing")
            ctx.hit = False
            return

        modifiers = attacker_modifiers if attacker_modifiers is not None else ctx.attacker.modifiers

        ctx.hit_chance = _clamp_percent(ctx.hit_chance)
        for rule in self.rules:
            rule.apply(ctx, modifiers)
        ctx.hit_chance = _clamp_percent(ctx.hit_chance)

        # [0..99] < hitChance; a roll equal to hitChance misses
        roll = resolve_rng(ctx.rng).range_int(0, 100)
        ctx.hit = roll < ctx.hit_chance
        logger.debug("Hit roll %d vs %d => %s", roll, ctx.hit_chance, "hit" if ctx.hit else "miss")


__all__ = ["HitRule", "HitPhase", "LevelTierSuppressionHitRule"]
