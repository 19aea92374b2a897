from __future__ import annotations

import logging
from typing import Callable, Dict, List, Optional, Sequence

from ..core.rng import RandomSource
from ..core.settings import DamageSettings, HitSettings, Settings
from ..errors import ConfigError
from . import rules as damage_rules
from .context import ActionContext, ActionResult
from .damage import DamagePhase
from .effects import EffectPhase
from .hit import HitPhase, HitRule, LevelTierSuppressionHitRule
from .models import ActorSnapshot, ResolvedSpell, SpellIntent, StatModifiers
from .rules import DamageRule

logger = logging.getLogger(__name__)


HIT_RULE_FACTORIES: Dict[str, Callable[[HitSettings], HitRule]] = {
    "level_tier_suppression": lambda s: LevelTierSuppressionHitRule(
        level_penalty_per_level=s.level_penalty_per_level,
        tier_penalty_per_tier=s.tier_penalty_per_tier,
    ),
}

DAMAGE_RULE_FACTORIES: Dict[str, Callable[[DamageSettings], DamageRule]] = {
    "spell_base": lambda s: damage_rules.SpellBaseDamageBonusRule(),
    "attacker_range_bonus": lambda s: damage_rules.AttackerRangeBonusDamageRule(),
    "attacker_type_bonus": lambda s: damage_rules.AttackerTypeBonusDamageRule(),
    "defender_vulnerability": lambda s: damage_rules.DefenderVulnerabilityDamageRule(),
    "attacker_weaken": lambda s: damage_rules.AttackerWeakenMitigationDamageRule(),
    "defense_mitigation": lambda s: damage_rules.DefenseMitigationDamageRule(),
    "defender_resistance": lambda s: damage_rules.DefenderResistanceMitigationDamageRule(),
    "power_scaling": lambda s: damage_rules.PowerScalingDamageRule(percent_of_power=s.percent_of_power),
    "generic_damage_bonus": lambda s: damage_rules.GenericDamageBonusRule(),
    "random_variance": lambda s: damage_rules.RandomVarianceDamageRule(pct=s.variance_pct),
    "level_tier_suppression": lambda s: damage_rules.LevelTierSuppressionDamageRule(
        level_factor=s.level_factor,
        tier_factor=s.tier_factor,
        min_mult=s.min_mult,
    ),
    "merge_trace": lambda s: damage_rules.MergeTraceDamageRule(),
}


def build_hit_rules(settings: HitSettings) -> List[HitRule]:
    built: List[HitRule] = []
    for name in settings.rules:
        factory = HIT_RULE_FACTORIES.get(name)
        if factory is None:
            raise ConfigError(f"Unknown hit rule {name!r}; known: {sorted(HIT_RULE_FACTORIES)}")
        built.append(factory(settings))
    return built


def build_damage_rules(settings: DamageSettings) -> List[DamageRule]:
    built: List[DamageRule] = []
    for name in settings.rules:
        factory = DAMAGE_RULE_FACTORIES.get(name)
        if factory is None:
            raise ConfigError(f"Unknown damage rule {name!r}; known: {sorted(DAMAGE_RULE_FACTORIES)}")
        built.append(factory(settings))
    return built


class ActionResolver:
    """Resolve one action end to end: on-cast effects, hit, damage, on-hit effects.

    Only damage and heal intents roll to hit; other intents always land and
    deal nothing. A heal reports its amount as the action's damage.

    The resolver owns the rule ordering; the phases only run whatever list
    they are handed.
    """

    def __init__(
        self,
        hit_phase: Optional[HitPhase] = None,
        damage_phase: Optional[DamagePhase] = None,
        effect_phase: Optional[EffectPhase] = None,
    ) -> None:
        defaults = Settings()
        self.hit_phase = hit_phase or HitPhase(build_hit_rules(defaults.hit))
        self.damage_phase = damage_phase or DamagePhase(build_damage_rules(defaults.damage))
        self.effect_phase = effect_phase or EffectPhase()

    @classmethod
    def from_settings(cls, settings: Settings) -> "ActionResolver":
        return cls(
            hit_phase=HitPhase(build_hit_rules(settings.hit)),
            damage_phase=DamagePhase(build_damage_rules(settings.damage)),
        )

    def rule_names(self) -> Dict[str, Sequence[str]]:
        return {
            "hit": [r.name for r in self.hit_phase.rules],
            "damage": [r.name for r in self.damage_phase.rules],
        }

    def build_context(
        self,
        attacker: Optional[ActorSnapshot],
        defender: Optional[ActorSnapshot],
        spell: Optional[ResolvedSpell],
        rng: Optional[RandomSource] = None,
        hit_chance: Optional[int] = None,
    ) -> ActionContext:
        if hit_chance is None:
            hit_chance = spell.hit_chance if spell is not None else 100
        return ActionContext(attacker=attacker, defender=defender, spell=spell, rng=rng, hit_chance=hit_chance)

    def resolve(
        self,
        attacker: Optional[ActorSnapshot],
        defender: Optional[ActorSnapshot],
        spell: Optional[ResolvedSpell],
        rng: Optional[RandomSource] = None,
        attacker_modifiers: Optional[StatModifiers] = None,
        hit_chance: Optional[int] = None,
    ) -> ActionResult:
        ctx = self.build_context(attacker, defender, spell, rng=rng, hit_chance=hit_chance)
        return self.resolve_context(ctx, attacker_modifiers)

    def resolve_context(self, ctx: ActionContext, attacker_modifiers: Optional[StatModifiers] = None) -> ActionResult:
        if not ctx.has_participants():
            logger.warning("Action skipped: attacker, defender or spell missing")
            ctx.hit = False
            ctx.final_damage = 0
            return ctx.to_result()

        self.effect_phase.resolve_on_cast(ctx)

        intent = SpellIntent(ctx.spell.intent)
        if intent in (SpellIntent.DAMAGE, SpellIntent.HEAL):
            self.hit_phase.resolve(ctx, attacker_modifiers)
        else:
            ctx.hit = True

        if not ctx.hit:
            ctx.final_damage = 0
        elif intent == SpellIntent.DAMAGE:
            self.damage_phase.resolve(ctx, attacker_modifiers)
        elif intent == SpellIntent.HEAL:
            # heal amount, not reduced by any rule
            ctx.final_damage = max(0, ctx.spell.damage)
        else:
            ctx.final_damage = 0
        ctx.last_damage_dealt = max(0, ctx.final_damage)

        self.effect_phase.resolve_on_hit(ctx)

        result = ctx.to_result()
        logger.info(
            "%s uses %s (%s) on %s: %s for %d",
            ctx.attacker.name,
            ctx.spell.display_name,
            intent.value,
            ctx.defender.name,
            "hit" if result.hit else "miss",
            result.damage,
        )
        return result


__all__ = [
    "HIT_RULE_FACTORIES",
    "DAMAGE_RULE_FACTORIES",
    "build_hit_rules",
    "build_damage_rules",
    "ActionResolver",
]
