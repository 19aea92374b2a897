"""Damage rules for the damage phase.

Each rule reads the action inputs and adjusts one or more accumulators on the
ActionContext (``base_damage``, ``flat_damage_bonus``, ``damage_mult``,
``effective_defense``). Rules know nothing about their neighbours; ordering is
owned by whoever builds the chain (see ``combat.engine``).
"""
from __future__ import annotations

import logging
import math
from typing import Callable, Optional, Protocol, Tuple

from ..core.rng import resolve_rng
from .context import ActionContext
from .models import DamageType, StatModifiers

logger = logging.getLogger(__name__)


class DamageRule(Protocol):
    name: str

    def apply(self, ctx: ActionContext, attacker_modifiers: Optional[StatModifiers]) -> None:  # pragma: no cover
        ...


def _attacker_mods(ctx: ActionContext, attacker_modifiers: Optional[StatModifiers]) -> StatModifiers:
    return attacker_modifiers if attacker_modifiers is not None else ctx.attacker.modifiers


def _aggregate_types(
    ctx: ActionContext,
    get_flat: Callable[[DamageType], int],
    get_mult: Callable[[DamageType], float],
) -> Tuple[int, float]:
    """Sum flats and multiply mults over every damage type tagged on the spell."""
    flat = 0
    mult = 1.0
    for damage_type in ctx.spell.effective_damage_types():
        flat += get_flat(damage_type)
        mult *= get_mult(damage_type)
    return flat, mult


class SpellBaseDamageBonusRule:
    """Rescale ``base_damage`` with the attacker's spell-base buckets. Runs first."""

    name = "spell_base"

    def apply(self, ctx: ActionContext, attacker_modifiers: Optional[StatModifiers] = None) -> None:
        mods = _attacker_mods(ctx, attacker_modifiers)
        kind = ctx.spell.damage_kind
        flat = mods.spell_base_flat_for(kind)
        mult = mods.spell_base_mult_for(kind)
        before = ctx.base_damage
        ctx.base_damage = math.floor((ctx.base_damage + flat) * mult)
        logger.debug("spell_base: base %d -> %d (flat=%d mult=%.3f)", before, ctx.base_damage, flat, mult)


class AttackerRangeBonusDamageRule:
    name = "attacker_range_bonus"

    def apply(self, ctx: ActionContext, attacker_modifiers: Optional[StatModifiers] = None) -> None:
        mods = _attacker_mods(ctx, attacker_modifiers)
        range_type = ctx.spell.range_type
        ctx.flat_damage_bonus += mods.range_bonus_flat(range_type)
        ctx.damage_mult *= mods.range_bonus_mult(range_type)


class AttackerTypeBonusDamageRule:
    """Per-type attacker bonuses. Inert unless ``final_damage`` is already positive."""

    name = "attacker_type_bonus"

    def apply(self, ctx: ActionContext, attacker_modifiers: Optional[StatModifiers] = None) -> None:
        if ctx.final_damage <= 0:
            ctx.final_damage = 0
            return
        mods = _attacker_mods(ctx, attacker_modifiers)
        flat, mult = _aggregate_types(
            ctx,
            lambda t: mods.attacker_bonus_flat.get(t, 0),
            lambda t: mods.attacker_bonus_mult.get(t, 1.0),
        )
        ctx.flat_damage_bonus += flat
        ctx.damage_mult *= mult
        logger.debug("attacker_type_bonus: flat+%d mult*%.3f", flat, mult)


class DefenderVulnerabilityDamageRule:
    """Per-type vulnerability debuffs on the defender increase damage taken."""

    name = "defender_vulnerability"

    def apply(self, ctx: ActionContext, attacker_modifiers: Optional[StatModifiers] = None) -> None:
        mods = ctx.defender.modifiers
        flat, mult = _aggregate_types(
            ctx,
            lambda t: mods.defender_vuln_flat.get(t, 0),
            lambda t: mods.defender_vuln_mult.get(t, 1.0),
        )
        ctx.flat_damage_bonus += flat
        ctx.damage_mult *= mult


class AttackerWeakenMitigationDamageRule:
    """Self-inflicted per-type reduction on the attacker's outgoing damage."""

    name = "attacker_weaken"

    def apply(self, ctx: ActionContext, attacker_modifiers: Optional[StatModifiers] = None) -> None:
        mods = _attacker_mods(ctx, attacker_modifiers)
        flat, mult = _aggregate_types(
            ctx,
            lambda t: mods.attacker_weaken_flat.get(t, 0),
            lambda t: mods.attacker_weaken_mult.get(t, 1.0),
        )
        ctx.flat_damage_bonus -= max(0, flat)
        ctx.damage_mult *= mult


class DefenseMitigationDamageRule:
    """Pick the defender's defense for the spell's damage kind into ``effective_defense``."""

    name = "defense_mitigation"

    def apply(self, ctx: ActionContext, attacker_modifiers: Optional[StatModifiers] = None) -> None:
        kind = ctx.spell.damage_kind
        defender = ctx.defender
        mult = max(0.0, defender.modifiers.defense_mult_for(kind))
        defense = (defender.derived.defense_for(kind) + defender.modifiers.defense_flat_for(kind)) * mult
        ctx.effective_defense = int(round(max(0.0, defense)))
        logger.debug("defense_mitigation: effective_defense=%d", ctx.effective_defense)


class DefenderResistanceMitigationDamageRule:
    """Per-type defender resistances. Inert unless ``final_damage`` is already positive."""

    name = "defender_resistance"

    def apply(self, ctx: ActionContext, attacker_modifiers: Optional[StatModifiers] = None) -> None:
        if ctx.final_damage <= 0:
            ctx.final_damage = 0
            return
        mods = ctx.defender.modifiers
        flat, mult = _aggregate_types(
            ctx,
            lambda t: mods.defender_resist_flat.get(t, 0),
            lambda t: mods.defender_resist_mult.get(t, 1.0),
        )
        ctx.flat_damage_bonus -= max(0, flat)
        ctx.damage_mult *= mult


class PowerScalingDamageRule:
    """Convert a share of attack power (physical) or magic power (magical) into flat damage.

    pct = (percent_of_power + scaling_flat) * scaling_mult
    bonus = floor(power * pct)
    """

    name = "power_scaling"

    def __init__(self, percent_of_power: float = 0.50) -> None:
        self.percent_of_power = max(0.0, float(percent_of_power))

    def apply(self, ctx: ActionContext, attacker_modifiers: Optional[StatModifiers] = None) -> None:
        mods = _attacker_mods(ctx, attacker_modifiers)
        kind = ctx.spell.damage_kind

        power = (ctx.attacker.derived.power_for(kind) + mods.power_flat_for(kind)) * mods.power_mult_for(kind)
        pct = (self.percent_of_power + mods.power_scaling_flat_for(kind)) * mods.power_scaling_mult_for(kind)
        bonus = math.floor(power * pct)

        ctx.last_damage_dealt_power = math.floor(power)
        ctx.flat_damage_bonus += bonus
        logger.debug("power_scaling: power=%.2f pct=%.3f => flat+%d", power, pct, bonus)


class GenericDamageBonusRule:
    name = "generic_damage_bonus"

    def apply(self, ctx: ActionContext, attacker_modifiers: Optional[StatModifiers] = None) -> None:
        mods = _attacker_mods(ctx, attacker_modifiers)
        kind = ctx.spell.damage_kind
        ctx.flat_damage_bonus += mods.damage_flat_for(kind)
        ctx.damage_mult *= mods.damage_mult_for(kind)


class RandomVarianceDamageRule:
    """pct=0.20 => multiplier rolled in [0.80, 1.20)."""

    name = "random_variance"

    def __init__(self, pct: float = 0.20) -> None:
        self.pct = max(0.0, float(pct))

    def apply(self, ctx: ActionContext, attacker_modifiers: Optional[StatModifiers] = None) -> None:
        roll = resolve_rng(ctx.rng).range(1.0 - self.pct, 1.0 + self.pct)
        ctx.damage_mult *= roll
        logger.debug("random_variance: roll=%.4f", roll)


class LevelTierSuppressionDamageRule:
    """Scale damage by level and tier difference.

    Symmetric: a stronger attacker gains, a weaker one loses, and the
    multiplier never drops below ``min_mult``.
    """

    name = "level_tier_suppression"

    def __init__(self, level_factor: float = 0.03, tier_factor: float = 0.20, min_mult: float = 0.05) -> None:
        self.level_factor = float(level_factor)
        self.tier_factor = float(tier_factor)
        self.min_mult = float(min_mult)

    def multiplier(self, ctx: ActionContext) -> float:
        level_delta = ctx.attacker.level - ctx.defender.level
        tier_delta = int(ctx.attacker.tier) - int(ctx.defender.tier)
        return max(self.min_mult, 1.0 + level_delta * self.level_factor + tier_delta * self.tier_factor)

    def apply(self, ctx: ActionContext, attacker_modifiers: Optional[StatModifiers] = None) -> None:
        mult = self.multiplier(ctx)
        ctx.damage_mult *= mult
        logger.debug("level_tier_suppression: mult*%.3f", mult)


class MergeTraceDamageRule:
    """End-of-chain trace. Logs the accumulators and changes nothing."""

    name = "merge_trace"

    def apply(self, ctx: ActionContext, attacker_modifiers: Optional[StatModifiers] = None) -> None:
        logger.debug(
            "damage chain done: base=%d flat=%d mult=%.4f defense=%d final=%d",
            ctx.base_damage,
            ctx.flat_damage_bonus,
            ctx.damage_mult,
            ctx.effective_defense,
            ctx.final_damage,
        )


__all__ = [
    "DamageRule",
    "SpellBaseDamageBonusRule",
    "AttackerRangeBonusDamageRule",
    "AttackerTypeBonusDamageRule",
    "DefenderVulnerabilityDamageRule",
    "AttackerWeakenMitigationDamageRule",
    "DefenseMitigationDamageRule",
    "DefenderResistanceMitigationDamageRule",
    "PowerScalingDamageRule",
    "GenericDamageBonusRule",
    "RandomVarianceDamageRule",
    "LevelTierSuppressionDamageRule",
    "MergeTraceDamageRule",
]
