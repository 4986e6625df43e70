"""Game session construction.

Builds the opening state of a game from an event pool: one revealed card on
the timeline and ``cardCount`` cards in the player's hand. The pool itself is
never modified.
"""

import logging
import random
import time
import uuid
from typing import Any, Callable, Iterable, Mapping, Optional, Sequence

from chronoline_core import (
    DEFAULT_CARD_COUNT,
    Card,
    GameSession,
    GameSettings,
)
from chronoline_core.utils.logging import get_logger, log_operation

logger = get_logger("engine.session")


def _epoch_ms() -> int:
    return int(time.time() * 1000)


def coerce_cards(events: Iterable[Card | Mapping[str, Any]]) -> list[Card]:
    """Accept cards or plain dicts from the event pool."""
    return [event if isinstance(event, Card) else Card.model_validate(event) for event in events]


class GameSessionFactory:
    """Creates GameSession objects.

    Args:
        rng: Random source for shuffling
        clock: Returns the current time in epoch milliseconds
    """

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        clock: Optional[Callable[[], int]] = None,
    ):
        self.rng = rng or random.Random()
        self.clock = clock or _epoch_ms

    def shuffle(self, items: Sequence[Any]) -> list[Any]:
        """Fisher-Yates shuffle of a copy of ``items``."""
        shuffled = list(items)
        for i in range(len(shuffled) - 1, 0, -1):
            j = self.rng.randint(0, i)
            shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
        return shuffled

    def new_session_id(self, now_ms: int) -> str:
        # uuid4 stays unique even when the shuffle rng is seeded
        return f"game_{now_ms}_{uuid.uuid4().hex[:12]}"

    def create(
        self,
        events: Sequence[Card | Mapping[str, Any]],
        settings: GameSettings | Mapping[str, Any] | None = None,
    ) -> GameSession:
        """Create a session from ``events``.

        An empty pool yields a session with an empty timeline and hand; the
        caller is expected to treat that as an error state.
        """
        if not isinstance(settings, GameSettings):
            settings = GameSettings.model_validate(dict(settings or {}))

        card_count = settings.card_count if settings.card_count is not None else DEFAULT_CARD_COUNT
        drawn = self.shuffle(coerce_cards(events))[: card_count + 1]

        now_ms = self.clock()
        session = GameSession(
            session_id=self.new_session_id(now_ms),
            timeline=[drawn[0].reveal()] if drawn else [],
            player_hand=drawn[1:],
            settings=settings,
            start_time=now_ms,
        )

        if not drawn:
            log_operation(logger, "Created empty session", {"pool": 0}, logging.WARNING, session.session_id)
        else:
            log_operation(
                logger,
                "Created session",
                {"hand": len(session.player_hand), "first_card": drawn[0].title},
                session_id=session.session_id,
            )
        return session

    def deal_hand(
        self,
        events: Sequence[Card | Mapping[str, Any]],
        exclude: Iterable[Card] = (),
        count: int = DEFAULT_CARD_COUNT,
    ) -> list[Card]:
        """Draw up to ``count`` cards that are not already in play."""
        in_play = {card.key for card in exclude}
        available = [card for card in coerce_cards(events) if card.key not in in_play]
        return self.shuffle(available)[:count]


def create_game_session(
    events: Sequence[Card | Mapping[str, Any]],
    settings: GameSettings | Mapping[str, Any] | None = None,
    rng: Optional[random.Random] = None,
) -> GameSession:
    """Convenience wrapper around :class:`GameSessionFactory`."""
    return GameSessionFactory(rng=rng).create(events, settings)
