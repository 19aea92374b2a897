from .context import ActionContext, ActionResult, EffectAttempt, EffectResult
from .damage import DamagePhase
from .effects import EffectPhase
from .engine import ActionResolver
from .hit import HitPhase, LevelTierSuppressionHitRule
from .models import (
    ActorSnapshot,
    DamageKind,
    DamageType,
    DerivedStats,
    EffectMagnitudeBasis,
    EffectSpec,
    MoreLessMult,
    RangeType,
    ResolvedSpell,
    SpellIntent,
    StatModifiers,
    Tier,
)

__all__ = [
    "ActionContext",
    "ActionResult",
    "EffectAttempt",
    "EffectResult",
    "DamagePhase",
    "EffectPhase",
    "ActionResolver",
    "HitPhase",
    "LevelTierSuppressionHitRule",
    "ActorSnapshot",
    "DamageKind",
    "DamageType",
    "DerivedStats",
    "EffectMagnitudeBasis",
    "EffectSpec",
    "MoreLessMult",
    "RangeType",
    "ResolvedSpell",
    "SpellIntent",
    "StatModifiers",
    "Tier",
]
