"""
Dice engine for single-die rolls with an optional shift.

Supports d4, d5, d6, d8, d10, d12, d20 and d100. The shift is added to the
displayed result and range only; the raw roll is always in [1, sides].
"""

import logging
from typing import Optional

from src.data_models import DiceReport, InvalidDiceType
from src.oracle.random_source import RandomSource, SystemRandomSource

logger = logging.getLogger(__name__)


# Dice string -> number of sides
DICE_TYPES: dict[str, int] = {
    "d4": 4,
    "d5": 5,
    "d6": 6,
    "d8": 8,
    "d10": 10,
    "d12": 12,
    "d20": 20,
    "d100": 100,
}

SUPPORTED_DICE = ", ".join(DICE_TYPES)


def parse_dice_type(dice_type: str) -> int:
    """
    Map a dice string (case-insensitive) to its side count.

    Raises:
        InvalidDiceType: If the string is not a supported die
    """
    sides = DICE_TYPES.get(dice_type.strip().lower())
    if sides is None:
        raise InvalidDiceType(f"Invalid dice type '{dice_type}'. Supported: {SUPPORTED_DICE}")
    return sides


class DiceEngine:
    """Rolls one supported die; holds no state besides its random source."""

    def __init__(self, rng: Optional[RandomSource] = None):
        self._rng = rng or SystemRandomSource(reason_prefix="Dice")

    def roll(self, sides: int, shift: int = 0, label: str = "") -> DiceReport:
        """
        Roll a die with the given number of sides.

        Args:
            sides: One of the supported side counts
            shift: Amount added to the displayed result and range
            label: Display name, defaults to "d<sides>"

        Returns:
            DiceReport with the raw roll and shifted values
        """
        if sides not in DICE_TYPES.values():
            raise InvalidDiceType(f"Unsupported die with {sides} sides. Supported: {SUPPORTED_DICE}")

        roll = self._rng.randint(1, sides)
        report = DiceReport(sides=sides, roll=roll, shift=shift, label=label)
        logger.debug(f"Dice roll: {report}")
        return report

    def roll_named(self, dice_type: str, shift: int = 0) -> DiceReport:
        """Roll from a dice string such as 'd6' or 'D20'."""
        sides = parse_dice_type(dice_type)
        return self.roll(sides, shift=shift, label=dice_type)
