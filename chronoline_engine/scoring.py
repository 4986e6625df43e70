"""Score calculation for Chronoline.

A correct placement earns ``base_score * difficulty``, plus a time bonus that
shrinks linearly with the seconds taken, minus a penalty for every failed
attempt at the same card. The result is floored at ``min_score`` and rounded
half-up to an integer. Incorrect placements always score zero.
"""

import math
from typing import Optional

from chronoline_core import ScoringConfig


class ScoreCalculator:
    """Pure score function bound to a set of scoring constants."""

    def __init__(self, config: Optional[ScoringConfig] = None):
        self.config = config or ScoringConfig()

    def calculate(
        self,
        is_correct: bool,
        time_to_place: float = 0,
        attempts: int = 1,
        difficulty: int = 1,
    ) -> int:
        """Points for one placement.

        Args:
            is_correct: Whether the placement was validated as correct
            time_to_place: Seconds the player took; negative values count as 0
            attempts: Tries for this card including this one; values below 1 count as 1
            difficulty: Card difficulty multiplier

        Returns:
            0 for an incorrect placement, otherwise an int >= min_score
        """
        if not is_correct:
            return 0

        cfg = self.config
        time_to_place = max(0.0, float(time_to_place))
        attempts = max(1, int(attempts))

        base = cfg.base_score * difficulty
        time_bonus = max(0.0, cfg.time_bonus_max - time_to_place * cfg.time_bonus_rate)
        penalty = (attempts - 1) * cfg.attempt_penalty
        raw = base + time_bonus - penalty

        return int(math.floor(max(cfg.min_score, raw) + 0.5))

    def max_score(self, difficulty: int = 1) -> int:
        """Best possible score for a card of ``difficulty``."""
        return self.calculate(True, 0, 1, difficulty)


_default_calculator = ScoreCalculator()


def calculate_score(
    is_correct: bool,
    time_to_place: float = 0,
    attempts: int = 1,
    difficulty: int = 1,
) -> int:
    """Score with the default constants (100/50/10/25/10)."""
    return _default_calculator.calculate(is_correct, time_to_place, attempts, difficulty)
