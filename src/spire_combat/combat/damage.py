from __future__ import annotations

import logging
import math
from typing import Iterable, List, Optional

from .context import ActionContext
from .models import StatModifiers
from .rules import DamageRule

logger = logging.getLogger(__name__)


class DamagePhase:
    """Resolve the final damage of an action (assuming it hit, if the caller requires it).

    The formula, after the rules have run:
      raw = base_damage + flat_damage_bonus   (negative raw becomes 1, not 0)
      damage = floor(raw * max(0, damage_mult))
      defense = effective_defense * (1 - ignore% / 100) - ignore_flat
      final = max(0, floor(damage - defense))

    Notes:
    - ``final_damage`` and ``effective_defense`` are not reset before the rules
      run, so a record re-resolved a second time exposes the previous
      ``final_damage`` to rules that gate on it.
    - An ``ignore_flat`` larger than the remaining defense adds damage.
    """

    def __init__(self, rules: Iterable[DamageRule] = ()) -> None:
        self.rules: List[DamageRule] = [r for r in rules if r is not None]

    def resolve(self, ctx: ActionContext, attacker_modifiers: Optional[StatModifiers] = None) -> None:
        if ctx is None:
            return
        if not ctx.has_participants():
            logger.debug("Damage phase skipped: attacker, defender or spell missing")
            ctx.final_damage = 0
            return

        modifiers = attacker_modifiers if attacker_modifiers is not None else ctx.attacker.modifiers

        ctx.base_damage = max(0, int(ctx.spell.damage))
        ctx.flat_damage_bonus = 0
        ctx.damage_mult = 1.0

        for rule in self.rules:
            rule.apply(ctx, modifiers)

        raw = ctx.base_damage + ctx.flat_damage_bonus
        if raw < 0:
            raw = 1

        ctx.damage_mult = max(0.0, ctx.damage_mult)
        damage = max(0, math.floor(raw * ctx.damage_mult))

        spell = ctx.spell
        ignore_pct = max(0, min(100, spell.ignore_defense_percent))
        ignore_flat = max(0, spell.ignore_defense_flat)

        ctx.effective_defense = max(0, ctx.effective_defense)
        defense_after_ignore = ctx.effective_defense * (1.0 - ignore_pct / 100.0) - ignore_flat

        ctx.final_damage = max(0, math.floor(damage - defense_after_ignore))
        logger.debug(
            "Damage: raw=%d mult=%.4f => %d, defense %d -> %.2f, final=%d",
            raw,
            ctx.damage_mult,
            damage,
            ctx.effective_defense,
            defense_after_ignore,
            ctx.final_damage,
        )


__all__ = ["DamagePhase"]
