from __future__ import annotations

import logging
import math
from typing import Iterable

from ..core.rng import resolve_rng
from .context import ActionContext, EffectAttempt
from .models import EffectMagnitudeBasis, EffectSpec

logger = logging.getLogger(__name__)


def _clamp01(value: float) -> float:
    return max(0.0, min(1.0, float(value)))


def _attacker_power(ctx: ActionContext) -> int:
    """Attacker power for the spell's damage kind, for effects resolved without a damage phase."""
    kind = ctx.spell.damage_kind
    mods = ctx.attacker.modifiers
    power = (ctx.attacker.derived.power_for(kind) + mods.power_flat_for(kind)) * mods.power_mult_for(kind)
    return max(0, math.floor(power))


class EffectPhase:
    """Roll secondary-effect attempts and record their outcome on the context.

    Only the bookkeeping lives here; what an applied effect actually does is
    up to the effect-application layer reading the EffectResults.
    """

    def resolve_on_cast(self, ctx: ActionContext) -> None:
        if ctx is None or not ctx.has_participants():
            return
        self.attempt_all(ctx, ctx.spell.on_cast_effects, requires_hit=False)

    def resolve_on_hit(self, ctx: ActionContext) -> None:
        if ctx is None or not ctx.has_participants():
            return
        self.attempt_all(ctx, ctx.spell.on_hit_effects, requires_hit=True)

    def attempt_all(self, ctx: ActionContext, specs: Iterable[EffectSpec], requires_hit: bool) -> None:
        for spec in specs:
            if spec is None or not spec.effect_id:
                continue
            ctx.effect_attempts.append(self.attempt(ctx, spec, requires_hit))

    def attempt(self, ctx: ActionContext, spec: EffectSpec, requires_hit: bool) -> EffectAttempt:
        attempt = EffectAttempt(
            effect_id=spec.effect_id,
            requires_hit=requires_hit,
            apply_chance=_clamp01(spec.apply_chance),
            resist_chance=_clamp01(spec.resist_chance),
            last_damage_dealt=max(0, ctx.last_damage_dealt),
            last_damage_dealt_power=max(0, ctx.last_damage_dealt_power),
            base_damage=max(0, int(spec.damage)),
            magnitude=spec.magnitude,
        )

        if attempt.requires_hit and not ctx.hit:
            logger.debug("Effect %s not attempted: action missed", attempt.effect_id)
            return attempt

        attempt.attempted = True
        threshold = attempt.apply_chance * (1.0 - attempt.resist_chance)
        roll = resolve_rng(ctx.rng).uniform01()
        attempt.applied = roll < threshold
        attempt.resisted = attempt.attempted and not attempt.applied

        if attempt.applied:
            attempt.final_damage = self.effect_damage(ctx, spec, attempt)

        logger.debug(
            "Effect %s: roll=%.4f threshold=%.4f applied=%s damage=%d",
            attempt.effect_id,
            roll,
            threshold,
            attempt.applied,
            attempt.final_damage,
        )
        return attempt

    def effect_damage(self, ctx: ActionContext, spec: EffectSpec, attempt: EffectAttempt) -> int:
        """``damage + round(basis_value * basis_percent / 100)``, never negative."""
        pct = max(0.0, min(100.0, float(spec.basis_percent))) / 100.0
        if spec.basis == EffectMagnitudeBasis.DAMAGE_DEALT:
            basis_value = attempt.last_damage_dealt
        elif spec.basis == EffectMagnitudeBasis.POWER:
            basis_value = attempt.last_damage_dealt_power or _attacker_power(ctx)
        else:
            basis_value = 0
        return max(0, attempt.base_damage + int(round(basis_value * pct)))


__all__ = ["EffectPhase"]
