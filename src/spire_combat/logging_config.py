import logging
import os

ENV_VAR = "SPIRE_LOG_LEVEL"

_FORMAT = "[%(asctime)s] [%(levelname)s] %(name)s: %(message)s"
_DEBUG_FORMAT = "[%(asctime)s] [%(levelname)s] %(name)s.%(funcName)s: %(message)s"


def resolve_level(default_level: int = logging.INFO) -> int:
    """Level named by SPIRE_LOG_LEVEL, or ``default_level`` if unset or unknown."""
    level_name = os.getenv(ENV_VAR)
    if not level_name:
        return default_level
    level = logging.getLevelName(level_name.strip().upper())
    return level if isinstance(level, int) else default_level


def configure_logging(default_level: int = logging.INFO) -> int:
    """Configure the root logger once for CLI use and return the level applied.

    At DEBUG the format includes the emitting function, so each damage rule's
    trace line can be told apart.
    """
    level = resolve_level(default_level)
    logging.basicConfig(
        level=level,
        format=_DEBUG_FORMAT if level <= logging.DEBUG else _FORMAT,
    )
    return level
