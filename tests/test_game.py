import random
import unittest

from pydantic import ValidationError

from chronoline_core import Card, DifficultyProfile, GameConfig, GameStatus
from chronoline_engine import AIOpponent, PlayerType, TimelineGame, calculate_score
from chronoline_engine.placement import find_correct_position, is_timeline_chronological


def _pool(size: int = 12) -> list[Card]:
    return [
        Card(
            id=i,
            title=f"Event {i}",
            category="History" if i % 2 else "Science",
            difficulty=1 + i % 3,
            date_occurred=f"{1700 + i * 17:04d}-03-01",
        )
        for i in range(1, size + 1)
    ]


def _perfect_ai(seed: int = 0, thinking_time_ms: tuple[int, int] = (0, 0)) -> AIOpponent:
    profile = DifficultyProfile(
        key="perfect",
        name="Perfect Bot",
        accuracy=1.0,
        thinking_time_ms=thinking_time_ms,
        mistake_chance=0.0,
        learning_rate=0.5,
    )
    return AIOpponent(profile, rng=random.Random(seed))


class TimelineGameTest(unittest.TestCase):
    def setUp(self) -> None:
        self.game = TimelineGame(rng=random.Random(8), clock=lambda: 1_000)
        self.session = self.game.start(_pool(), {"cardCount": 3})

    def _correct_move(self, card: Card):
        position = find_correct_position(card, self.session.timeline)
        return self.game.place_card(card.id, position, time_to_place=0)

    def _wrong_position(self, card: Card) -> int:
        correct = find_correct_position(card, self.session.timeline)
        return 1 if correct == 0 else 0

    def test_start_uses_settings(self) -> None:
        self.assertEqual(len(self.session.timeline), 1)
        self.assertEqual(len(self.session.player_hand), 3)
        self.assertEqual(self.session.start_time, 1_000)

    def test_default_card_count_comes_from_config(self) -> None:
        game = TimelineGame(config=GameConfig(card_count=2), rng=random.Random(1))
        self.assertEqual(len(game.start(_pool()).player_hand), 2)

    def test_correct_placement(self) -> None:
        card = self.session.player_hand[0]
        outcome = self._correct_move(card)

        self.assertTrue(outcome.accepted)
        self.assertTrue(outcome.is_correct)
        self.assertEqual(outcome.player, PlayerType.HUMAN)
        self.assertEqual(outcome.points, calculate_score(True, 0, 1, card.difficulty))
        self.assertEqual(self.session.score, outcome.points)
        self.assertEqual(len(self.session.player_hand), 2)
        self.assertEqual(len(self.session.timeline), 2)
        self.assertTrue(all(entry.is_revealed for entry in self.session.timeline))
        self.assertTrue(is_timeline_chronological(self.session.timeline))

    def test_incorrect_placement_counts_attempt(self) -> None:
        card = self.session.player_hand[0]
        outcome = self.game.place_card(card.id, self._wrong_position(card))

        self.assertTrue(outcome.accepted)
        self.assertFalse(outcome.is_correct)
        self.assertEqual(outcome.points, 0)
        self.assertEqual(self.session.attempts_for(card.id), 1)
        self.assertEqual(len(self.session.player_hand), 3)
        self.assertEqual(len(self.session.timeline), 1)

        retry = self._correct_move(card)
        self.assertEqual(retry.points, calculate_score(True, 0, 2, card.difficulty))

    def test_placing_every_card_wins(self) -> None:
        for card in list(self.session.player_hand):
            self.assertTrue(self._correct_move(card).is_correct)

        self.assertEqual(self.session.status, GameStatus.WON)
        self.assertEqual(len(self.session.timeline), 4)
        self.assertTrue(is_timeline_chronological(self.session.timeline))

    def test_moves_after_the_end_are_rejected(self) -> None:
        self.game.abandon()
        self.assertEqual(self.session.status, GameStatus.ABANDONED)

        card = self.session.player_hand[0]
        outcome = self.game.place_card(card.id, 0)
        self.assertFalse(outcome.accepted)
        self.assertIn("abandoned", outcome.rejection_reason)
        self.assertEqual(len(self.session.player_hand), 3)

    def test_unknown_card_is_rejected(self) -> None:
        outcome = self.game.place_card("missing", 0)
        self.assertFalse(outcome.accepted)
        self.assertIsNone(outcome.result)

    def test_hint_counts_usage(self) -> None:
        card = self.session.player_hand[0]
        hint = self.game.use_hint(card.id)
        self.assertIn(str(card.year), hint)
        self.assertEqual(self.session.hints_used, 1)
        self.assertIsNone(self.game.use_hint("missing"))
        self.assertEqual(self.session.hints_used, 1)

    def test_ai_turn_without_opponent(self) -> None:
        self.assertIsNone(self.game.play_ai_turn())

    def test_requires_start(self) -> None:
        with self.assertRaises(RuntimeError):
            TimelineGame().place_card(1, 0)

    def test_zero_card_count_is_rejected(self) -> None:
        with self.assertRaises(ValidationError):
            TimelineGame(rng=random.Random(1)).start(_pool(), {"cardCount": 0})

    def test_empty_pool_is_rejected(self) -> None:
        with self.assertRaises(ValueError):
            TimelineGame().start([], {"cardCount": 3})

    def test_single_card_pool_is_won_immediately(self) -> None:
        game = TimelineGame(rng=random.Random(1))
        session = game.start(_pool(1), {"cardCount": 3}, opponent=_perfect_ai())

        self.assertEqual(session.player_hand, [])
        self.assertEqual(game.ai_hand, [])
        self.assertEqual(session.status, GameStatus.WON)
        self.assertIsNone(game.play_ai_turn())


class AIGameTest(unittest.TestCase):
    def test_ai_hand_is_disjoint_from_cards_in_play(self) -> None:
        game = TimelineGame(rng=random.Random(3))
        session = game.start(_pool(), {"cardCount": 3}, opponent=_perfect_ai())
        in_play = {card.key for card in [*session.timeline, *session.player_hand]}

        self.assertEqual(len(game.ai_hand), 3)
        self.assertTrue(in_play.isdisjoint(card.key for card in game.ai_hand))

    def test_perfect_ai_empties_its_hand_and_wins(self) -> None:
        ai = _perfect_ai()
        game = TimelineGame(rng=random.Random(3))
        session = game.start(_pool(), {"cardCount": 3}, opponent=ai)

        for _ in range(3):
            outcome = game.play_ai_turn()
            self.assertEqual(outcome.player, PlayerType.AI)
            self.assertTrue(outcome.is_correct)
            self.assertFalse(outcome.decision.is_mistake)
            self.assertGreater(outcome.points, 0)

        self.assertEqual(game.ai_hand, [])
        self.assertEqual(session.status, GameStatus.LOST)
        self.assertEqual(len(session.timeline), 4)
        self.assertTrue(is_timeline_chronological(session.timeline))
        self.assertEqual(len(ai.game_history), 3)
        self.assertGreater(game.ai_score, 0)
        self.assertIsNone(game.play_ai_turn())

    def test_ai_thinking_time_counts_against_its_bonus(self) -> None:
        game = TimelineGame(rng=random.Random(3))
        game.start(_pool(), {"cardCount": 2}, opponent=_perfect_ai(thinking_time_ms=(2000, 2000)))

        outcome = game.play_ai_turn()
        self.assertTrue(outcome.is_correct)
        self.assertAlmostEqual(outcome.time_to_place, 2.0)
        # 50 - 2 * 10 leaves a 30 point bonus
        self.assertEqual(outcome.points, calculate_score(True, 2.0, 1, outcome.card.difficulty))
        self.assertEqual(outcome.points, 100 * outcome.card.difficulty + 30)

    def test_new_game_keeps_ai_memory(self) -> None:
        ai = _perfect_ai()
        game = TimelineGame(rng=random.Random(3))
        game.start(_pool(), {"cardCount": 2}, opponent=ai)
        game.play_ai_turn()
        learned = len(ai.memory)

        game.start(_pool(), {"cardCount": 2}, opponent=ai)
        self.assertEqual(ai.game_history, [])
        self.assertEqual(len(ai.memory), learned)
        self.assertEqual(game.ai_score, 0)


if __name__ == "__main__":
    unittest.main()
