import argparse
import logging
import sys
from pathlib import Path

import yaml

from .combat.engine import ActionResolver
from .core.rng import RNG
from .core.settings import Settings
from .errors import SpireCombatError
from .loot.models import LootTable
from .loot.roller import LootRoller
from .logging_config import configure_logging

logger = logging.getLogger(__name__)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        prog="spire-combat",
        description="Inspect combat rule chains and roll loot tables reproducibly.",
    )
    parser.add_argument(
        "--settings",
        dest="settings_path",
        type=Path,
        default=None,
        help="Path to a user settings YAML file to load/override defaults.",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable verbose debug logging.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    roll = sub.add_parser("roll-loot", help="Roll a loot table defined in YAML.")
    roll.add_argument("table", type=Path, help="YAML file holding one loot table mapping.")
    roll.add_argument("--seed", type=int, default=None, help="Seed for a reproducible roll.")
    roll.add_argument("--times", type=int, default=1, help="Number of independent rolls.")

    sub.add_parser("show-rules", help="Print the configured hit and damage rule chains.")
    return parser.parse_args(argv)


def _roll_loot(args) -> int:
    with args.table.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    table = LootTable.from_dict(data)
    roller = LootRoller(RNG(seed=args.seed))
    for i in range(max(1, args.times)):
        loot = roller.roll_loot(table)
        line = ", ".join(f"{item.loot_id} x{item.stack_count}" for item in loot) or "(nothing)"
        print(f"#{i + 1}: {line}")
    return 0


def _show_rules(settings: Settings) -> int:
    resolver = ActionResolver.from_settings(settings)
    for phase, names in resolver.rule_names().items():
        print(f"{phase}:")
        for name in names:
            print(f"  - {name}")
    return 0


def main(argv=None) -> int:
    args = parse_args(argv)
    configure_logging(default_level=logging.DEBUG if args.debug else logging.WARNING)

    try:
        settings = Settings.load(user_path=args.settings_path)
        if args.command == "roll-loot":
            return _roll_loot(args)
        return _show_rules(settings)
    except (SpireCombatError, OSError, yaml.YAMLError) as exc:
        logger.error("%s", exc)
        print(f"error: {exc}", file=sys.stderr)
        return 2
