from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Optional, Protocol, runtime_checkable

logger = logging.getLogger(__name__)


@runtime_checkable
class RandomSource(Protocol):
    """Anything that can feed the resolution pipeline with random draws."""

    def uniform01(self) -> float:  # pragma: no cover - Protocol
        ...

    def range(self, minimum: float, maximum: float) -> float:  # pragma: no cover - Protocol
        ...

    def range_int(self, min_inclusive: int, max_exclusive: int) -> int:  # pragma: no cover - Protocol
        ...


@dataclass
class RNG:
    """
    Deterministic-friendly RNG wrapper around random.Random.

    Allows injecting a fixed seed for reproducible tests and replays. Every
    stochastic rule and the loot roller draw through an instance of this (or
    any other RandomSource), never through the global random module.
    """

    seed: Optional[int] = None

    def __post_init__(self) -> None:
        self._rng = random.Random(self.seed)

    def uniform01(self) -> float:
        """Return the next random float in the range [0.0, 1.0)."""
        return self._rng.random()

    def range(self, minimum: float, maximum: float) -> float:
        """Return a random float N such that minimum <= N < maximum."""
        if maximum <= minimum:
            return minimum
        return minimum + (maximum - minimum) * self._rng.random()

    def range_int(self, min_inclusive: int, max_exclusive: int) -> int:
        """Return a random integer N such that min_inclusive <= N < max_exclusive."""
        if max_exclusive <= min_inclusive:
            return min_inclusive
        return self._rng.randrange(min_inclusive, max_exclusive)

    def state(self):
        """Return the internal PRNG state for debugging or replay."""
        return self._rng.getstate()

    def set_state(self, state) -> None:
        """Restore the internal PRNG state."""
        self._rng.setstate(state)


_ambient: RNG | None = None


def ambient_rng() -> RNG:
    """Process-wide fallback source, used only when a caller injects nothing."""
    global _ambient
    if _ambient is None:
        _ambient = RNG()
        logger.warning("No RandomSource injected; using an unseeded ambient RNG (not reproducible)")
    return _ambient


def resolve_rng(rng: RandomSource | None) -> RandomSource:
    return rng if rng is not None else ambient_rng()


__all__ = ["RandomSource", "RNG", "ambient_rng", "resolve_rng"]
