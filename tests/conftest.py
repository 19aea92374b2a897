import sys
from collections import deque
from pathlib import Path

import pytest

# Ensure 'src' is on sys.path for test imports without installing the package
ROOT = Path(__file__).resolve().parents[1]
src = ROOT / "src"
if str(src) not in sys.path:
    sys.path.insert(0, str(src))


class ScriptedRng:
    """RandomSource stub returning queued values, recording every call.

    When a queue runs dry: range_int returns its lower bound, range returns
    the midpoint and uniform01 returns 0.0.
    """

    def __init__(self, ints=(), floats=(), units=()):
        self.ints = deque(ints)
        self.floats = deque(floats)
        self.units = deque(units)
        self.calls = []

    def uniform01(self):
        self.calls.append(("uniform01",))
        return self.units.popleft() if self.units else 0.0

    def range(self, minimum, maximum):
        self.calls.append(("range", minimum, maximum))
        return self.floats.popleft() if self.floats else (minimum + maximum) / 2.0

    def range_int(self, min_inclusive, max_exclusive):
        self.calls.append(("range_int", min_inclusive, max_exclusive))
        return self.ints.popleft() if self.ints else min_inclusive


@pytest.fixture
def scripted_rng():
    return ScriptedRng
