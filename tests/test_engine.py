import pytest

from spire_combat.combat.engine import ActionResolver, build_damage_rules, build_hit_rules
from spire_combat.combat.models import ActorSnapshot, DerivedStats, EffectMagnitudeBasis, EffectSpec, ResolvedSpell, SpellIntent
from spire_combat.core.rng import RNG
from spire_combat.core.settings import DEFAULT_DAMAGE_RULES, DamageSettings, HitSettings, Settings
from spire_combat.errors import ConfigError


def _attacker():
    return ActorSnapshot(name="Hero", level=10, derived=DerivedStats(attack_power=40))


def _defender():
    return ActorSnapshot(name="Goblin", level=10, derived=DerivedStats(physical_defense=10))


def test_default_chain_resolves_expected_damage(scripted_rng):
    rng = scripted_rng(ints=[10], floats=[1.0])
    spell = ResolvedSpell(spell_id="slash", damage=50)
    result = ActionResolver().resolve(_attacker(), _defender(), spell, rng=rng)

    # 50 base + floor(40 * 0.5) power scaling - 10 defense
    assert result.hit is True
    assert result.damage == 60
    assert rng.calls == [("range_int", 0, 100), ("range", 0.8, 1.2)]


def test_miss_deals_no_damage_and_skips_on_hit_effects(scripted_rng):
    rng = scripted_rng(ints=[99], units=[0.0])
    spell = ResolvedSpell(
        spell_id="venom_strike",
        damage=50,
        hit_chance=50,
        on_cast_effects=(EffectSpec(effect_id="focus"),),
        on_hit_effects=(EffectSpec(effect_id="poison"),),
    )
    result = ActionResolver().resolve(_attacker(), _defender(), spell, rng=rng)

    assert result.hit is False
    assert result.damage == 0
    focus, poison = result.effects
    assert focus.attempted and focus.applied
    assert not poison.attempted
    # on-cast roll, then hit roll; no variance draw on a miss
    assert rng.calls == [("uniform01",), ("range_int", 0, 100)]


def test_explicit_hit_chance_overrides_spell(scripted_rng):
    resolver = ActionResolver()
    ctx = resolver.build_context(_attacker(), _defender(), ResolvedSpell(spell_id="slash", hit_chance=20), hit_chance=80)
    assert ctx.hit_chance == 80
    ctx = resolver.build_context(_attacker(), _defender(), ResolvedSpell(spell_id="slash", hit_chance=20))
    assert ctx.hit_chance == 20


def test_missing_participants_fail_soft(scripted_rng):
    rng = scripted_rng()
    result = ActionResolver().resolve(_attacker(), None, ResolvedSpell(spell_id="slash", damage=50), rng=rng)
    assert result.hit is False
    assert result.damage == 0
    assert result.effects == ()
    assert rng.calls == []


def test_same_seed_gives_same_result():
    spell = ResolvedSpell(spell_id="slash", damage=50, hit_chance=60, on_hit_effects=(EffectSpec("bleed", 0.5),))
    resolver = ActionResolver()

    def run(seed):
        rng = RNG(seed=seed)
        return [resolver.resolve(_attacker(), _defender(), spell, rng=rng) for _ in range(25)]

    assert run(42) == run(42)


def test_from_settings_builds_configured_chain():
    settings = Settings(
        hit=HitSettings(rules=[]),
        damage=DamageSettings(rules=["spell_base", "power_scaling"], percent_of_power=1.0),
    )
    resolver = ActionResolver.from_settings(settings)
    assert resolver.rule_names() == {"hit": [], "damage": ["spell_base", "power_scaling"]}

    result = resolver.resolve(_attacker(), _defender(), ResolvedSpell(spell_id="slash", damage=5), rng=RNG(seed=1))
    assert result.hit is True
    assert result.damage == 45


def test_default_rule_order():
    assert ActionResolver().rule_names()["damage"] == DEFAULT_DAMAGE_RULES


def test_unknown_rule_names_raise_config_error():
    with pytest.raises(ConfigError):
        build_damage_rules(DamageSettings(rules=["spell_base", "crit"]))
    with pytest.raises(ConfigError):
        build_hit_rules(HitSettings(rules=["evasion"]))


def test_on_hit_effects_receive_damage_dealt_and_power(scripted_rng):
    rng = scripted_rng(ints=[10], floats=[1.0], units=[0.0])
    bleed = EffectSpec(effect_id="bleed", damage=2, basis=EffectMagnitudeBasis.DAMAGE_DEALT, basis_percent=50)
    spell = ResolvedSpell(spell_id="rend", damage=50, on_hit_effects=(bleed,))
    result = ActionResolver().resolve(_attacker(), _defender(), spell, rng=rng)

    assert result.damage == 60
    (effect,) = result.effects
    assert (effect.last_damage_dealt, effect.last_damage_dealt_power) == (60, 40)
    assert effect.damage == 32


def test_heal_rolls_to_hit_and_skips_damage_rules(scripted_rng):
    rng = scripted_rng(ints=[10])
    spell = ResolvedSpell(spell_id="mend", damage=25, intent=SpellIntent.HEAL)
    result = ActionResolver().resolve(_attacker(), _defender(), spell, rng=rng)

    assert result.hit is True
    assert result.damage == 25
    assert rng.calls == [("range_int", 0, 100)]


def test_missed_heal_heals_nothing(scripted_rng):
    spell = ResolvedSpell(spell_id="mend", damage=25, hit_chance=50, intent=SpellIntent.HEAL)
    result = ActionResolver().resolve(_attacker(), _defender(), spell, rng=scripted_rng(ints=[99]))
    assert (result.hit, result.damage) == (False, 0)


def test_negative_heal_amount_is_clamped(scripted_rng):
    spell = ResolvedSpell(spell_id="mend", damage=-5, intent="heal")
    result = ActionResolver().resolve(_attacker(), _defender(), spell, rng=scripted_rng())
    assert (result.hit, result.damage) == (True, 0)


@pytest.mark.parametrize("intent", [SpellIntent.BUFF, SpellIntent.DEBUFF])
def test_non_damage_intents_always_land_without_a_hit_roll(scripted_rng, intent):
    rng = scripted_rng(units=[0.0])
    spell = ResolvedSpell(
        spell_id="war_cry",
        damage=99,
        hit_chance=0,
        intent=intent,
        on_hit_effects=(EffectSpec(effect_id="rally"),),
    )
    result = ActionResolver().resolve(_attacker(), _defender(), spell, rng=rng)

    assert result.hit is True
    assert result.damage == 0
    assert result.effects[0].applied
    assert rng.calls == [("uniform01",)]
