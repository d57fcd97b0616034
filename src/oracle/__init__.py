"""
Oracle Module for the pity roll tool.

Answers "does it happen this time?" for a named decision, making each
failure raise the odds of the next attempt.

Key components:
- DecisionEngine: effective chance, d100 roll and pity update
- RandomSource: the injectable draw interface both engines use
- SystemRandomSource: clock-seeded default implementation

Usage:
    from src.oracle import DecisionEngine, SystemRandomSource

    engine = DecisionEngine(rng=SystemRandomSource(seed=42))
    new_state, report = engine.roll(config, state)
    if report.success:
        print("Go for it")
"""

from src.oracle.random_source import RandomSource, SystemRandomSource
from src.oracle.decision_engine import DecisionEngine

__all__ = [
    "DecisionEngine",
    "RandomSource",
    "SystemRandomSource",
]
