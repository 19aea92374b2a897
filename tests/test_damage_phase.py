import pytest

from spire_combat.combat.context import ActionContext
from spire_combat.combat.damage import DamagePhase
from spire_combat.combat.models import ActorSnapshot, DerivedStats, DamageKind, ResolvedSpell
from spire_combat.combat.rules import DefenseMitigationDamageRule


class SetAccumulators:
    """Test rule forcing the accumulators to fixed values."""

    name = "set_accumulators"

    def __init__(self, flat=None, mult=None, defense=None):
        self.flat = flat
        self.mult = mult
        self.defense = defense

    def apply(self, ctx, attacker_modifiers=None):
        if self.flat is not None:
            ctx.flat_damage_bonus = self.flat
        if self.mult is not None:
            ctx.damage_mult = self.mult
        if self.defense is not None:
            ctx.effective_defense = self.defense


def _ctx(spell, defender=None):
    return ActionContext(
        attacker=ActorSnapshot(name="Hero"),
        defender=defender or ActorSnapshot(name="Dummy"),
        spell=spell,
    )


def test_defense_ignore_fixture():
    spell = ResolvedSpell(spell_id="pierce", damage=100, ignore_defense_percent=50, ignore_defense_flat=10)
    ctx = _ctx(spell)
    ctx.effective_defense = 40
    DamagePhase([]).resolve(ctx)
    assert ctx.final_damage == 90


def test_defense_from_mitigation_rule_is_subtracted():
    spell = ResolvedSpell(spell_id="bolt", damage=50, damage_kind=DamageKind.MAGICAL)
    defender = ActorSnapshot(name="Golem", derived=DerivedStats(physical_defense=100, magical_defense=15))
    ctx = _ctx(spell, defender)
    DamagePhase([DefenseMitigationDamageRule()]).resolve(ctx)
    assert ctx.effective_defense == 15
    assert ctx.final_damage == 35


def test_negative_raw_is_floored_to_one_before_multiplier():
    ctx = _ctx(ResolvedSpell(spell_id="weak", damage=5))
    DamagePhase([SetAccumulators(flat=-50, mult=3.0)]).resolve(ctx)
    assert ctx.final_damage == 3


def test_raw_of_exactly_zero_is_not_floored():
    ctx = _ctx(ResolvedSpell(spell_id="weak", damage=5))
    DamagePhase([SetAccumulators(flat=-5, mult=3.0)]).resolve(ctx)
    assert ctx.final_damage == 0


def test_negative_multiplier_is_clamped_to_zero():
    ctx = _ctx(ResolvedSpell(spell_id="slash", damage=80))
    DamagePhase([SetAccumulators(mult=-2.0)]).resolve(ctx)
    assert ctx.damage_mult == 0.0
    assert ctx.final_damage == 0


def test_negative_spell_damage_is_treated_as_zero_base():
    ctx = _ctx(ResolvedSpell(spell_id="odd", damage=-30))
    DamagePhase([]).resolve(ctx)
    assert ctx.base_damage == 0
    assert ctx.final_damage == 0


def test_final_damage_and_defense_never_negative():
    ctx = _ctx(ResolvedSpell(spell_id="tap", damage=10))
    DamagePhase([SetAccumulators(defense=-100)]).resolve(ctx)
    assert ctx.effective_defense == 0
    assert ctx.final_damage == 10

    ctx = _ctx(ResolvedSpell(spell_id="tap", damage=10))
    DamagePhase([SetAccumulators(defense=500)]).resolve(ctx)
    assert ctx.final_damage == 0


def test_ignore_percent_is_clamped():
    spell = ResolvedSpell(spell_id="pierce", damage=100, ignore_defense_percent=250)
    ctx = _ctx(spell)
    DamagePhase([SetAccumulators(defense=60)]).resolve(ctx)
    assert ctx.final_damage == 100

    spell = ResolvedSpell(spell_id="blunt", damage=100, ignore_defense_percent=-20)
    ctx = _ctx(spell)
    DamagePhase([SetAccumulators(defense=60)]).resolve(ctx)
    assert ctx.final_damage == 40


def test_flat_ignore_beyond_defense_adds_damage():
    spell = ResolvedSpell(spell_id="pierce", damage=100, ignore_defense_flat=30)
    ctx = _ctx(spell)
    DamagePhase([SetAccumulators(defense=10)]).resolve(ctx)
    assert ctx.final_damage == 120


def test_accumulators_are_reset_each_resolve():
    ctx = _ctx(ResolvedSpell(spell_id="slash", damage=20))
    ctx.flat_damage_bonus = 999
    ctx.damage_mult = 7.0
    DamagePhase([]).resolve(ctx)
    assert ctx.flat_damage_bonus == 0
    assert ctx.final_damage == 20


@pytest.mark.parametrize("missing", ["attacker", "defender", "spell"])
def test_missing_participant_yields_zero(missing):
    ctx = _ctx(ResolvedSpell(spell_id="slash", damage=20))
    ctx.final_damage = 55
    setattr(ctx, missing, None)
    DamagePhase([]).resolve(ctx)
    assert ctx.final_damage == 0
