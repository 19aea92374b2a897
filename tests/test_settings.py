from pathlib import Path

import pytest

from spire_combat.core.settings import DEFAULT_DAMAGE_RULES, DEFAULT_HIT_RULES, Settings
from spire_combat.errors import ConfigError


def test_defaults_load_from_package():
    s = Settings.load()
    assert s.hit.rules == DEFAULT_HIT_RULES
    assert s.damage.rules == DEFAULT_DAMAGE_RULES
    assert s.hit.level_penalty_per_level == 3.0
    assert s.damage.percent_of_power == 0.5
    assert s.damage.variance_pct == 0.2
    assert s.damage.min_mult == 0.05
    assert s.rewards.rarity_multipliers["special_elite"] == 1.0


def test_user_override_is_deep_merged(tmp_path: Path):
    user = tmp_path / "settings.yaml"
    user.write_text(
        """
damage:
  random_variance:
    pct: 0.0
rewards:
  rarity_multipliers:
    BOSS_LIKE: 4
    elite: 2.5
""",
        encoding="utf-8",
    )
    s = Settings.load(user)
    assert s.damage.variance_pct == 0.0
    assert s.damage.percent_of_power == 0.5
    assert s.damage.rules == DEFAULT_DAMAGE_RULES
    assert s.rewards.rarity_multipliers["elite"] == 2.5
    assert s.rewards.rarity_multipliers["boss_like"] == 4.0
    assert s.rewards.rarity_multipliers["common"] == 1.0


def test_missing_user_file_falls_back_to_defaults(tmp_path: Path):
    s = Settings.load(tmp_path / "nope.yaml")
    assert s.damage.rules == DEFAULT_DAMAGE_RULES


def test_non_mapping_user_file_raises(tmp_path: Path):
    user = tmp_path / "settings.yaml"
    user.write_text("- just\n- a list\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        Settings.load(user)


def test_unreadable_values_raise_config_error():
    with pytest.raises(ConfigError):
        Settings.from_dict({"damage": {"power_scaling": {"percent_of_power": "lots"}}})
    with pytest.raises(ConfigError):
        Settings.from_dict({"hit": ["level_tier_suppression"]})


def test_rule_lists_can_be_reordered():
    s = Settings.from_dict({"damage": {"rules": ["merge_trace", "spell_base"]}, "hit": {"rules": []}})
    assert s.damage.rules == ["merge_trace", "spell_base"]
    assert s.hit.rules == []
