class SpireCombatError(Exception):
    """Base error for spire_combat domain exceptions."""


class ConfigError(SpireCombatError):
    """Raised when settings or a rule chain definition cannot be interpreted."""


class NotFound(SpireCombatError):
    """Raised when a repository has no definition for the requested id."""
