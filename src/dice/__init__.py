"""Stateless dice rolling, independent of the decision engine."""

from src.dice.dice_engine import DiceEngine, DICE_TYPES, parse_dice_type

__all__ = [
    "DiceEngine",
    "DICE_TYPES",
    "parse_dice_type",
]
