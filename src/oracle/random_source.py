"""
Injectable random source for the decision and dice engines.

Both engines only ever need inclusive integer draws, so the interface is a
single randint(a, b) method. Anything with that method (including
random.Random itself) can be passed in, which lets tests script every branch.
"""

from __future__ import annotations

import logging
import random
import time
from typing import Optional, Protocol, runtime_checkable

logger = logging.getLogger(__name__)


@runtime_checkable
class RandomSource(Protocol):
    """Anything that can draw a uniform integer in [a, b], inclusive."""

    def randint(self, a: int, b: int) -> int:
        ...


class SystemRandomSource:
    """
    Non-cryptographic random source backed by random.Random.

    Seeded from the clock at construction unless an explicit seed is given.
    Every draw is logged at DEBUG with a running count so a verbose run shows
    exactly which numbers fed a decision.

    Usage:
        rng = SystemRandomSource(reason_prefix="Decision")
        engine = DecisionEngine(rng=rng)
    """

    def __init__(
        self,
        seed: Optional[int] = None,
        reason_prefix: str = "Roll",
    ):
        """
        Initialize the source.

        Args:
            seed: Seed for reproducible sequences. If None, uses time.time_ns().
            reason_prefix: Prefix for draw logging (e.g., "Decision", "Dice")
        """
        self.seed = seed if seed is not None else time.time_ns()
        self._rng = random.Random(self.seed)
        self._reason_prefix = reason_prefix
        self._roll_count = 0

    def randint(self, a: int, b: int) -> int:
        """
        Return random integer in range [a, b], inclusive.

        Raises:
            ValueError: If a > b
        """
        if a > b:
            raise ValueError(f"Empty range for randint: [{a}, {b}]")
        value = self._rng.randint(a, b)
        self._roll_count += 1
        label = f"d{b}" if a == 1 else f"range({a}-{b})"
        logger.debug(f"{self._reason_prefix}: {label} -> {value} (draw #{self._roll_count})")
        return value

    @property
    def roll_count(self) -> int:
        """Get the number of draws made through this source."""
        return self._roll_count

    def reset_count(self) -> None:
        """Reset the draw counter."""
        self._roll_count = 0
