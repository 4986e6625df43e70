"""Turn controller for a Chronoline game.

TimelineGame owns one GameSession and applies moves to it:

1. Validate the placement with the PlacementValidator
2. On success, insert the revealed card, remove it from the hand and score it
3. On failure, count the attempt against the card
4. Check the win/lose condition and the chronology invariant

Human moves come in through ``place_card``; AI turns are driven by
``play_ai_turn`` which runs the opponent's selection and placement, validates
the result the same way and feeds it back into the opponent's memory.

Illegal moves (finished game, unknown card) are rejected with a MoveOutcome
rather than an exception.
"""

import random
from enum import Enum
from typing import Any, Callable, Mapping, Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field

from chronoline_core import (
    Card,
    GameConfig,
    GameSession,
    GameSettings,
    GameStatus,
    PlacementResult,
)
from chronoline_core.utils.logging import get_logger, log_operation

from .agents.opponent import AIOpponent, PlacementDecision
from .placement import PlacementValidator, check_win_condition, is_timeline_chronological
from .scoring import ScoreCalculator
from .session_factory import GameSessionFactory

logger = get_logger("engine.game")


class PlayerType(str, Enum):
    HUMAN = "human"
    AI = "ai"


class MoveOutcome(BaseModel):
    """Result of one attempted move."""

    model_config = ConfigDict(frozen=True)

    accepted: bool = Field(description="False if the move was refused before validation")
    player: PlayerType
    card: Optional[Card] = None
    position: int = -1
    result: Optional[PlacementResult] = None
    points: int = 0
    time_to_place: float = Field(default=0.0, description="Seconds the move took")
    rejection_reason: str = ""
    decision: Optional[PlacementDecision] = Field(default=None, description="AI placement decision")

    @property
    def is_correct(self) -> bool:
        return self.result is not None and self.result.is_correct


class TimelineGame:
    """Single game between a player and, optionally, an AI opponent.

    Usage:
        game = TimelineGame()
        game.start(events, {"cardCount": 5}, opponent=AIOpponent("hard"))
        game.place_card(card_id, position=1, time_to_place=3.2)
        game.play_ai_turn()
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        rng: Optional[random.Random] = None,
        clock: Optional[Callable[[], int]] = None,
    ):
        self.config = config or GameConfig()
        self.rng = rng or random.Random()
        self.factory = GameSessionFactory(rng=self.rng, clock=clock)
        self.validator = PlacementValidator(rng=self.rng)
        self.scorer = ScoreCalculator(self.config.scoring)

        self.session: Optional[GameSession] = None
        self.opponent: Optional[AIOpponent] = None
        self.ai_hand: list[Card] = []
        self.ai_score: int = 0
        self.ai_attempts: dict[str, int] = {}

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(
        self,
        events: Sequence[Card | Mapping[str, Any]],
        settings: GameSettings | Mapping[str, Any] | None = None,
        opponent: Optional[AIOpponent] = None,
    ) -> GameSession:
        """Create a fresh session and, with an opponent, deal the AI its hand.

        A pool that only fills the timeline leaves nothing to place, so the
        session is won on the spot.

        Raises:
            ValueError: If the event pool is empty
        """
        if not isinstance(settings, GameSettings):
            settings = GameSettings.model_validate(dict(settings or {}))
        if settings.card_count is None:
            settings = settings.model_copy(update={"card_count": self.config.card_count})

        session = self.factory.create(events, settings)
        if not session.timeline:
            raise ValueError("Cannot start a game from an empty event pool")

        self.session = session
        self.opponent = opponent
        self.ai_score = 0
        self.ai_attempts = {}
        self.ai_hand = []

        if opponent is not None:
            opponent.reset_for_new_game()
            in_play = [*self.session.timeline, *self.session.player_hand]
            self.ai_hand = self.factory.deal_hand(events, exclude=in_play, count=settings.card_count)
            logger.info("%s joins with %d card(s)", opponent.name, len(self.ai_hand))

        if check_win_condition(session.player_hand):
            self._finish(GameStatus.WON)
        return session

    def abandon(self) -> None:
        session = self._require_session()
        if session.status == GameStatus.PLAYING:
            session.status = GameStatus.ABANDONED
            logger.info("Session %s abandoned", session.session_id)

    # ------------------------------------------------------------------
    # Human moves
    # ------------------------------------------------------------------

    def place_card(self, card_id: str | int, position: int, time_to_place: float = 0.0) -> MoveOutcome:
        """Attempt to place a card from the player's hand at ``position``."""
        session = self._require_session()

        if session.is_over:
            return self._reject(PlayerType.HUMAN, position, f"Game is already {session.status.value}")

        card = session.find_in_hand(card_id)
        if card is None:
            return self._reject(PlayerType.HUMAN, position, f"Card {card_id} is not in the player's hand")

        result = self.validator.validate(card, session.timeline, position)
        points = 0

        if result.is_correct:
            attempts = session.attempts_for(card.key) + 1
            points = self.scorer.calculate(True, time_to_place, attempts, card.difficulty)
            session.score += points
            session.player_hand = [c for c in session.player_hand if c.key != card.key]
            self._insert(card, result.correct_position)
            if check_win_condition(session.player_hand):
                self._finish(GameStatus.WON)
        else:
            session.record_failed_attempt(card.key)

        return MoveOutcome(
            accepted=True,
            player=PlayerType.HUMAN,
            card=card,
            position=position,
            result=result,
            points=points,
            time_to_place=max(0.0, float(time_to_place)),
        )

    def use_hint(self, card_id: str | int) -> Optional[str]:
        """Return a hint for a card in the player's hand, or None if it isn't there."""
        session = self._require_session()
        card = session.find_in_hand(card_id)
        if card is None:
            return None
        session.hints_used += 1
        return self.validator.generate_hint(card, session.timeline)

    # ------------------------------------------------------------------
    # AI moves
    # ------------------------------------------------------------------

    def play_ai_turn(self) -> Optional[MoveOutcome]:
        """Let the opponent select, place and learn from one card.

        Returns:
            The move outcome, or None when the AI cannot move (no opponent,
            empty hand or finished game).
        """
        session = self._require_session()
        if self.opponent is None or session.is_over:
            return None

        selection = self.opponent.select_card(self.ai_hand, session.timeline)
        if selection is None:
            return None

        card = selection.card
        decision = self.opponent.determine_card_placement(card, session.timeline)
        # scored like a human who took the profile's thinking time
        time_to_place = self.opponent.thinking_time_ms() / 1000
        result = self.validator.validate(card, session.timeline, decision.position)
        self.opponent.learn_from_placement(card, result.is_correct, decision.confidence)

        points = 0
        if result.is_correct:
            attempts = self.ai_attempts.get(card.key, 0) + 1
            points = self.scorer.calculate(True, time_to_place, attempts, card.difficulty)
            self.ai_score += points
            self.ai_hand = [c for c in self.ai_hand if c.key != card.key]
            self._insert(card, result.correct_position)
            if check_win_condition(self.ai_hand):
                self._finish(GameStatus.LOST)
        else:
            self.ai_attempts[card.key] = self.ai_attempts.get(card.key, 0) + 1

        return MoveOutcome(
            accepted=True,
            player=PlayerType.AI,
            card=card,
            position=decision.position,
            result=result,
            points=points,
            time_to_place=time_to_place,
            decision=decision,
        )

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _require_session(self) -> GameSession:
        if self.session is None:
            raise RuntimeError("No game in progress. Call start() first.")
        return self.session

    def _insert(self, card: Card, position: int) -> None:
        session = self._require_session()
        session.timeline.insert(position, card.reveal())
        if not is_timeline_chronological(session.timeline):
            logger.error(
                "Timeline out of order after inserting '%s' at %d in session %s",
                card.title, position, session.session_id,
            )

    def _finish(self, status: GameStatus) -> None:
        session = self._require_session()
        session.status = status
        log_operation(
            logger,
            "Game finished",
            {"status": status.value, "player_score": session.score, "ai_score": self.ai_score},
            session_id=session.session_id,
        )

    @staticmethod
    def _reject(player: PlayerType, position: int, reason: str) -> MoveOutcome:
        logger.warning("Rejected %s move: %s", player.value, reason)
        return MoveOutcome(accepted=False, player=player, position=position, rejection_reason=reason)
