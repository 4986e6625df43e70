"""Core data models for Chronoline.

Cards are immutable facts supplied by the event pool. A GameSession is the
mutable container the caller threads through a game; its serialized shape
(camelCase keys) is the contract shared with the persistence layer, so field
aliases here must not change.

Validation happens at the model boundary: a card with a malformed
``dateOccurred`` is rejected when it is constructed, never inside the engine.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .dates import parse_date


# ============================================================================
# Enums
# ============================================================================


class GameStatus(str, Enum):
    """Lifecycle state of a game session."""
    PLAYING = "playing"
    WON = "won"
    LOST = "lost"
    ABANDONED = "abandoned"


class InsertionKind(str, Enum):
    """Where an insertion point sits relative to the timeline."""
    BEFORE = "before"
    BETWEEN = "between"
    AFTER = "after"


# ============================================================================
# Cards
# ============================================================================


class Card(BaseModel):
    """A historical event placed on the timeline."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str | int = Field(description="Card identifier from the event pool")
    title: str = Field(description="Event title")
    description: Optional[str] = Field(default=None, description="Event description")
    category: str = Field(description="Event category (History, Science, ...)")
    difficulty: int = Field(default=1, ge=1, le=5, description="Difficulty 1 (easy) to 5 (hard)")
    date_occurred: str = Field(alias="dateOccurred", description="ISO-8601 date of the event")

    @field_validator("date_occurred")
    @classmethod
    def _check_date(cls, value: str) -> str:
        try:
            parse_date(value)
        except ValueError as exc:
            raise ValueError(f"dateOccurred is not an ISO-8601 date: {value!r}") from exc
        return value

    @property
    def key(self) -> str:
        """Stringified id, used for attempt counters and hand lookups."""
        return str(self.id)

    @property
    def occurred_at(self) -> datetime:
        return parse_date(self.date_occurred)

    @property
    def year(self) -> int:
        return self.occurred_at.year

    @property
    def decade(self) -> int:
        return (self.year // 10) * 10

    def reveal(self) -> "TimelineCard":
        """Return this card as a revealed timeline entry."""
        data = self.model_dump()
        data["is_revealed"] = True
        return TimelineCard(**data)

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class TimelineCard(Card):
    """A card sitting on the timeline."""

    is_revealed: bool = Field(default=False, alias="isRevealed")


# A timeline is just an ordered list; entries may be plain cards or timeline cards.
Timeline = list[Card]


# ============================================================================
# Session
# ============================================================================


class GameSettings(BaseModel):
    """Settings a session was created with.

    Unknown keys are preserved so settings written by other layers survive
    a save/load round trip.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    difficulty: Optional[str | int | dict[str, int]] = Field(default=None)
    card_count: Optional[int] = Field(default=None, ge=1, alias="cardCount")
    categories: Optional[list[str]] = Field(default=None)


class GameSession(BaseModel):
    """State of a single game, created by the session factory."""

    model_config = ConfigDict(populate_by_name=True)

    session_id: str = Field(alias="sessionId")
    timeline: list[TimelineCard] = Field(default_factory=list)
    player_hand: list[Card] = Field(default_factory=list, alias="playerHand")
    settings: GameSettings = Field(default_factory=GameSettings)
    score: int = Field(default=0)
    start_time: int = Field(alias="startTime", description="Epoch milliseconds")
    attempts: dict[str, int] = Field(default_factory=dict, description="Failed tries per card id")
    hints_used: int = Field(default=0, ge=0, alias="hintsUsed")
    status: GameStatus = Field(default=GameStatus.PLAYING)

    @field_validator("attempts", mode="before")
    @classmethod
    def _stringify_attempt_keys(cls, value: Any) -> Any:
        if isinstance(value, dict):
            return {str(k): v for k, v in value.items()}
        return value

    @property
    def is_over(self) -> bool:
        return self.status != GameStatus.PLAYING

    def find_in_hand(self, card_id: str | int) -> Optional[Card]:
        wanted = str(card_id)
        for card in self.player_hand:
            if card.key == wanted:
                return card
        return None

    def attempts_for(self, card_id: str | int) -> int:
        return self.attempts.get(str(card_id), 0)

    def record_failed_attempt(self, card_id: str | int) -> int:
        key = str(card_id)
        self.attempts[key] = self.attempts.get(key, 0) + 1
        return self.attempts[key]

    def to_dict(self) -> dict[str, Any]:
        """Serialize using the camelCase persistence contract."""
        data = self.model_dump(mode="json", by_alias=True)
        data["settings"] = self.settings.model_dump(mode="json", by_alias=True, exclude_none=True)
        return data

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> "GameSession":
        return cls.model_validate(payload)


# ============================================================================
# Placement results
# ============================================================================


class PlacementResult(BaseModel):
    """Outcome of validating one placement."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    is_correct: bool = Field(alias="isCorrect")
    correct_position: int = Field(alias="correctPosition")
    user_position: int = Field(alias="userPosition")
    date_occurred: str = Field(alias="dateOccurred")
    feedback: str = Field(default="")

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


class InsertionPoint(BaseModel):
    """A slot on the timeline where a card may be dropped."""

    model_config = ConfigDict(frozen=True)

    index: int
    kind: InsertionKind
    reference_card: Optional[Card] = None
    next_card: Optional[Card] = None
    difficulty: str = "easy"
    gap: Optional[int] = Field(default=None, description="Year gap between neighbours")
