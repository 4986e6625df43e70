import unittest

from chronoline_core import ScoringConfig
from chronoline_engine.scoring import ScoreCalculator, calculate_score


class CalculateScoreTest(unittest.TestCase):
    def test_instant_first_try(self) -> None:
        self.assertEqual(calculate_score(True, 0, 1, 1), 150)

    def test_five_seconds_second_attempt(self) -> None:
        # 100 + (50 - 5 * 10) - 25
        self.assertEqual(calculate_score(True, 5, 2, 1), 75)

    def test_incorrect_scores_zero(self) -> None:
        self.assertEqual(calculate_score(False, 0, 1, 5), 0)
        self.assertEqual(calculate_score(False, 100, 9, 1), 0)

    def test_difficulty_multiplies_base(self) -> None:
        self.assertEqual(calculate_score(True, 0, 1, 3), 350)

    def test_floor_at_min_score(self) -> None:
        self.assertEqual(calculate_score(True, 1000, 50, 1), 10)

    def test_negative_time_and_zero_attempts_are_clamped(self) -> None:
        self.assertEqual(calculate_score(True, -5, 0, 1), 150)

    def test_rounds_half_up(self) -> None:
        scorer = ScoreCalculator(ScoringConfig(time_bonus_rate=1))
        # 100 + (50 - 1.5) = 148.5
        self.assertEqual(scorer.calculate(True, 1.5, 1, 1), 149)

    def test_monotonic(self) -> None:
        for difficulty in range(1, 6):
            for attempts in range(1, 6):
                previous = None
                for tenths in range(0, 120):
                    score = calculate_score(True, tenths / 10, attempts, difficulty)
                    self.assertGreaterEqual(score, 10)
                    if previous is not None:
                        self.assertLessEqual(score, previous)
                    previous = score
                self.assertGreaterEqual(
                    calculate_score(True, 2, attempts, difficulty),
                    calculate_score(True, 2, attempts + 1, difficulty),
                )

    def test_custom_constants(self) -> None:
        scorer = ScoreCalculator(ScoringConfig(base_score=200, time_bonus_max=0, attempt_penalty=50, min_score=0))
        self.assertEqual(scorer.calculate(True, 3, 2, 2), 350)
        self.assertEqual(scorer.max_score(1), 200)

    def test_invalid_constants_rejected(self) -> None:
        with self.assertRaises(ValueError):
            ScoringConfig(min_score=-1)


if __name__ == "__main__":
    unittest.main()
