"""
Pity-based decision engine.

Turns a named yes/no probability into a stateful roll:
- Pity: every consecutive failure adds one unit, capped at the configured max
- Grace: percentage points granted per pity unit
- Variance: a nested two-stage draw that may grant one extra grace bonus

The engine is a pure function of (Configuration, RollState, RandomSource).
It never reads or writes the stores; callers persist the returned state.
"""

import logging
from typing import Optional

from src.data_models import (
    MAX_CHANCE,
    Configuration,
    RollReport,
    RollState,
)
from src.oracle.random_source import RandomSource, SystemRandomSource

logger = logging.getLogger(__name__)


class DecisionEngine:
    """
    Computes effective chance, rolls d100 and advances the pity counter.

    Usage:
        engine = DecisionEngine(rng=SystemRandomSource())
        new_state, report = engine.roll(config, state)
        if report.success:
            ...
    """

    def __init__(self, rng: Optional[RandomSource] = None):
        """
        Initialize the engine.

        Args:
            rng: Random source for all draws. Defaults to a clock-seeded
                SystemRandomSource.
        """
        self._rng = rng or SystemRandomSource(reason_prefix="Decision")

    @staticmethod
    def grace_bonus(config: Configuration, state: RollState) -> int:
        """Percentage points earned from accumulated pity."""
        return state.pity_counter * config.grace

    def current_chance(self, config: Configuration, state: RollState) -> int:
        """
        Pity-only chance for display.

        No variance draw and no roll; the RNG is not advanced.
        """
        return min(config.chance + self.grace_bonus(config, state), MAX_CHANCE)

    def _variance_triggers(self, variance: int) -> bool:
        """
        Two-stage variance draw.

        v is uniform on [1, variance], then t is uniform on [1, v]; the bonus
        fires when t == 1. Both draws always happen, so v == 1 always fires.
        """
        v = self._rng.randint(1, variance)
        t = self._rng.randint(1, v)
        return t == 1

    def roll(
        self,
        config: Configuration,
        state: RollState,
    ) -> tuple[RollState, RollReport]:
        """
        Perform one decision roll.

        Args:
            config: Static parameters of the decision
            state: Current running state (not modified)

        Returns:
            Tuple of (new_state, report)
        """
        bonus = self.grace_bonus(config, state)
        effective = config.chance + bonus

        variance_triggered = False
        if config.variance > 0:
            variance_triggered = self._variance_triggers(config.variance)
            if variance_triggered:
                effective += config.grace

        # Clamp only after the variance bonus has been applied
        effective = min(effective, MAX_CHANCE)

        roll = self._rng.randint(1, 100)
        success = roll <= effective

        if success:
            new_pity = 0
        else:
            new_pity = min(state.pity_counter + 1, config.pity)

        logger.debug(
            f"Decision '{config.name}': base={config.chance} bonus={bonus} "
            f"variance={variance_triggered} effective={effective} roll={roll} "
            f"success={success} pity {state.pity_counter}->{new_pity}"
        )

        report = RollReport(
            base_chance=config.chance,
            pity_counter=state.pity_counter,
            grace_bonus=bonus,
            effective_chance=effective,
            roll=roll,
            success=success,
            variance_triggered=variance_triggered,
        )
        return RollState(pity_counter=new_pity, last_roll=roll), report
