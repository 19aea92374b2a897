from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass, field
from importlib import resources
from pathlib import Path
from typing import Dict, List, Optional

import yaml

from ..errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_HIT_RULES = ["level_tier_suppression"]
DEFAULT_DAMAGE_RULES = [
    "spell_base",
    "attacker_range_bonus",
    "attacker_type_bonus",
    "defender_vulnerability",
    "attacker_weaken",
    "defense_mitigation",
    "defender_resistance",
    "power_scaling",
    "generic_damage_bonus",
    "random_variance",
    "level_tier_suppression",
    "merge_trace",
]


@dataclass
class HitSettings:
    rules: List[str] = field(default_factory=lambda: list(DEFAULT_HIT_RULES))
    level_penalty_per_level: float = 3.0
    tier_penalty_per_tier: float = 3.0


@dataclass
class DamageSettings:
    rules: List[str] = field(default_factory=lambda: list(DEFAULT_DAMAGE_RULES))
    percent_of_power: float = 0.5
    variance_pct: float = 0.2
    level_factor: float = 0.03
    tier_factor: float = 0.2
    min_mult: float = 0.05


@dataclass
class RewardSettings:
    rarity_multipliers: Dict[str, float] = field(default_factory=dict)


@dataclass
class Settings:
    hit: HitSettings = field(default_factory=HitSettings)
    damage: DamageSettings = field(default_factory=DamageSettings)
    rewards: RewardSettings = field(default_factory=RewardSettings)

    @staticmethod
    def _load_yaml(path: Path) -> dict:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ConfigError(f"Settings file {path} must contain a mapping at top level")
        return data

    @classmethod
    def _deep_merge(cls, base: dict, overlay: dict) -> dict:
        merged = dict(base)
        for k, v in (overlay or {}).items():
            if isinstance(v, dict) and isinstance(base.get(k), dict):
                merged[k] = cls._deep_merge(base[k], v)
            else:
                merged[k] = v
        return merged

    @classmethod
    def from_dict(cls, data: dict) -> "Settings":
        try:
            hit_raw = data.get("hit", {}) or {}
            hit_sup = hit_raw.get("level_tier_suppression", {}) or {}
            hit = HitSettings(
                rules=[str(r) for r in hit_raw.get("rules", DEFAULT_HIT_RULES)],
                level_penalty_per_level=float(hit_sup.get("level_penalty_per_level", 3.0)),
                tier_penalty_per_tier=float(hit_sup.get("tier_penalty_per_tier", 3.0)),
            )

            dmg_raw = data.get("damage", {}) or {}
            scaling = dmg_raw.get("power_scaling", {}) or {}
            variance = dmg_raw.get("random_variance", {}) or {}
            dmg_sup = dmg_raw.get("level_tier_suppression", {}) or {}
            damage = DamageSettings(
                rules=[str(r) for r in dmg_raw.get("rules", DEFAULT_DAMAGE_RULES)],
                percent_of_power=float(scaling.get("percent_of_power", 0.5)),
                variance_pct=float(variance.get("pct", 0.2)),
                level_factor=float(dmg_sup.get("level_factor", 0.03)),
                tier_factor=float(dmg_sup.get("tier_factor", 0.2)),
                min_mult=float(dmg_sup.get("min_mult", 0.05)),
            )

            rewards_raw = data.get("rewards", {}) or {}
            multipliers = rewards_raw.get("rarity_multipliers", {}) or {}
            rewards = RewardSettings(rarity_multipliers={str(k).lower(): float(v) for k, v in multipliers.items()})
        except (AttributeError, TypeError, ValueError) as exc:
            raise ConfigError(f"Invalid settings: {exc}") from exc
        return Settings(hit=hit, damage=damage, rewards=rewards)

    @classmethod
    def load(cls, user_path: Optional[Path] = None) -> "Settings":
        """Build the hit and damage rule chains and reward tables from YAML.

        Starts from the packaged ``default_settings.yaml``; a user file, when
        given, is merged over it key by key, so it can swap a rule list or a
        single rule parameter without restating the rest.
        """
        try:
            with resources.files("spire_combat.config").joinpath("default_settings.yaml").open("r", encoding="utf-8") as f:
                default_data = yaml.safe_load(f) or {}
        except FileNotFoundError:
            logger.warning("Default settings not found; falling back to dataclass defaults.")
            default_data = {}

        user_data = {}
        if user_path is not None:
            if user_path.exists():
                user_data = cls._load_yaml(user_path)
                logger.info("Loaded user settings from %s", user_path)
            else:
                logger.warning("User settings file not found: %s", user_path)

        merged = cls._deep_merge(default_data, user_data)
        settings = cls.from_dict(merged)
        logger.debug("Settings merged: %s", dataclasses.asdict(settings))
        return settings


__all__ = ["HitSettings", "DamageSettings", "RewardSettings", "Settings", "DEFAULT_HIT_RULES", "DEFAULT_DAMAGE_RULES"]
