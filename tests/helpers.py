"""
Test helpers for the pity roll test suite.

Provides deterministic random sources that stand in for SystemRandomSource:
- ScriptedRandom replays a fixed list of draws and records every request
- HighRandom always returns the top of the requested range
- LowRandom always returns the bottom of the requested range
"""

from typing import Iterable


class ScriptedRandom:
    """Returns pre-set values in order; fails loudly if a value is out of range."""

    def __init__(self, values: Iterable[int]):
        self._values = list(values)
        self.calls: list[tuple[int, int]] = []

    def randint(self, a: int, b: int) -> int:
        self.calls.append((a, b))
        if not self._values:
            raise AssertionError(f"ScriptedRandom exhausted on randint({a}, {b})")
        value = self._values.pop(0)
        if not a <= value <= b:
            raise AssertionError(f"Scripted value {value} outside [{a}, {b}]")
        return value

    @property
    def remaining(self) -> int:
        return len(self._values)


class HighRandom:
    """Always draws the maximum; a d100 roll of 100 fails anything below 100%."""

    def __init__(self):
        self.calls: list[tuple[int, int]] = []

    def randint(self, a: int, b: int) -> int:
        self.calls.append((a, b))
        return b


class LowRandom:
    """Always draws the minimum; a d100 roll of 1 succeeds at any chance above 0%."""

    def __init__(self):
        self.calls: list[tuple[int, int]] = []

    def randint(self, a: int, b: int) -> int:
        self.calls.append((a, b))
        return a
