"""AI opponent for Chronoline.

The opponent plays a turn in two steps:

1. ``select_card`` ranks the hand by how confident the AI is about each card
   (70%) and how useful it is to play now (30%). Weaker profiles sometimes
   pick among the top three instead of the best card.
2. ``determine_card_placement`` finds the true chronological index and, with
   the profile's ``mistake_chance``, nudges it a few slots away to simulate a
   plausible human error.

After the caller validates the move it feeds the outcome back through
``learn_from_placement``, which updates the AI's per-bucket accuracy memory.
That memory outlives individual games; ``reset_for_new_game`` only clears the
per-game history.

One instance must not be shared between concurrently running games.
"""

import random
from typing import Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field

from chronoline_core import (
    AIMemory,
    Card,
    DifficultyProfile,
    HistoryEntry,
    MemoryKey,
    get_difficulty_profile,
)
from chronoline_core.utils.logging import get_logger

from ..placement import find_correct_position

logger = get_logger("engine.ai")

# analyze_card_placement
BASE_CONFIDENCE = 0.8
EMPTY_TIMELINE_CONFIDENCE = 0.9
FAMILIAR_WINDOW_YEARS = 10
FAMILIAR_BONUS = 0.1
AMBIGUOUS_WINDOW_YEARS = 2
AMBIGUOUS_PENALTY = 0.2
MIN_CONFIDENCE = 0.2

# select_card
CONFIDENCE_WEIGHT = 0.7
STRATEGY_WEIGHT = 0.3
RANDOM_PICK_POOL = 3

# determine_card_placement
MISTAKE_SPREAD = 0.3
MISTAKE_CONFIDENCE_FACTOR = 0.6

# learn_from_placement
SUCCESS_NUDGE = 0.1
FAILURE_NUDGE = 0.05
ACCURACY_FLOOR = 0.1


# ============================================================================
# Decisions
# ============================================================================


class CardSelection(BaseModel):
    """Which card the AI wants to play."""

    model_config = ConfigDict(frozen=True)

    card: Card
    confidence: float = Field(ge=0.0, le=1.0)
    strategic_value: float = Field(default=0.5, ge=0.0, le=1.0)
    reasoning: str = ""


class PlacementDecision(BaseModel):
    """Where the AI will drop a card."""

    model_config = ConfigDict(frozen=True)

    position: int
    correct_position: int
    confidence: float = Field(ge=0.0, le=1.0)
    is_mistake: bool = False
    reasoning: str = ""


class PerformanceStats(BaseModel):
    """Aggregates over the current game's history."""

    model_config = ConfigDict(frozen=True)

    accuracy: float = 0.0
    confidence: float = 0.0
    attempts: int = 0
    memory_size: int = 0


# ============================================================================
# Opponent
# ============================================================================


class AIOpponent:
    """Card-selecting, card-placing AI with persistent learned memory.

    Args:
        difficulty: Profile name (easy, medium, hard, expert) or a profile;
            unknown names fall back to medium
        memory: Memory table to use; passed by reference so callers can keep
            or persist it. A new empty table is created when omitted.
        rng: Random source for every stochastic choice
    """

    def __init__(
        self,
        difficulty: str | DifficultyProfile = "medium",
        memory: Optional[AIMemory] = None,
        rng: Optional[random.Random] = None,
    ):
        if isinstance(difficulty, DifficultyProfile):
            self.profile = difficulty
        else:
            self.profile = get_difficulty_profile(difficulty)
        self.memory = memory if memory is not None else AIMemory()
        self.rng = rng or random.Random()
        self.game_history: list[HistoryEntry] = []

    @property
    def name(self) -> str:
        return self.profile.name

    def thinking_time_ms(self) -> int:
        """Draw how long this opponent "thinks" about a move, in milliseconds."""
        return _draw_thinking_time(self.profile, self.rng)

    # ------------------------------------------------------------------
    # Card selection
    # ------------------------------------------------------------------

    def select_card(self, hand: Sequence[Card], timeline: Sequence[Card]) -> Optional[CardSelection]:
        """Pick the card to play next, or None if the hand is empty."""
        if not hand:
            return None

        candidates = []
        for card in hand:
            confidence = self.analyze_card_placement(card, timeline)
            strategic_value = self.calculate_strategic_value(card, hand, timeline)
            combined = confidence * CONFIDENCE_WEIGHT + strategic_value * STRATEGY_WEIGHT
            candidates.append((combined, confidence, strategic_value, card))

        # sorted() is stable, so equal scores keep hand order
        candidates.sort(key=lambda item: item[0], reverse=True)

        random_factor = 1.0 - self.profile.accuracy
        index = self._weighted_random_selection(len(candidates), random_factor)
        _, confidence, strategic_value, card = candidates[index]

        logger.debug(
            "%s selected '%s' (rank %d, confidence %.2f, strategy %.2f)",
            self.name, card.title, index + 1, confidence, strategic_value,
        )
        return CardSelection(
            card=card,
            confidence=confidence,
            strategic_value=strategic_value,
            reasoning=self.generate_reasoning(card),
        )

    def analyze_card_placement(self, card: Card, timeline: Sequence[Card]) -> float:
        """Estimate, 0.2 to 1.0, how likely the AI is to place ``card`` correctly."""
        if not timeline:
            return EMPTY_TIMELINE_CONFIDENCE

        confidence = BASE_CONFIDENCE
        year_gaps = [abs(card.year - entry.year) for entry in timeline]

        if any(gap <= FAMILIAR_WINDOW_YEARS for gap in year_gaps):
            confidence += FAMILIAR_BONUS
        if any(gap <= AMBIGUOUS_WINDOW_YEARS for gap in year_gaps):
            confidence -= AMBIGUOUS_PENALTY

        record = self.memory.get(MemoryKey.for_card(card))
        if record is not None:
            confidence = (confidence + record.accuracy) / 2

        return max(MIN_CONFIDENCE, min(1.0, confidence))

    def calculate_strategic_value(self, card: Card, hand: Sequence[Card], timeline: Sequence[Card]) -> float:
        """Score, 0.1 to 1.0, how advantageous playing ``card`` now would be."""
        value = 0.5

        # Easy cards first while the timeline is still short
        if len(timeline) < 3:
            value += (4 - card.difficulty) * 0.1

        if timeline:
            years = [entry.year for entry in timeline]
            if card.year < min(years) or card.year > max(years):
                value += 0.2

        if hand:
            average_difficulty = sum(c.difficulty for c in hand) / len(hand)
            if card.difficulty < average_difficulty:
                value += 0.1

        return max(0.1, min(1.0, value))

    def _weighted_random_selection(self, option_count: int, random_factor: float) -> int:
        if self.rng.random() < random_factor:
            return self.rng.randrange(min(option_count, RANDOM_PICK_POOL))
        return 0

    # ------------------------------------------------------------------
    # Placement
    # ------------------------------------------------------------------

    def determine_card_placement(self, card: Card, timeline: Sequence[Card]) -> PlacementDecision:
        """Choose an insertion index for ``card``, possibly with an injected mistake."""
        correct_position = find_correct_position(card, timeline)
        position = correct_position
        confidence = self.profile.accuracy

        if self.rng.random() < self.profile.mistake_chance:
            position = self._introduce_error(correct_position, len(timeline))

        is_mistake = position != correct_position
        if is_mistake:
            confidence *= MISTAKE_CONFIDENCE_FACTOR
            logger.debug(
                "%s injected a mistake for '%s': %d instead of %d",
                self.name, card.title, position, correct_position,
            )

        return PlacementDecision(
            position=position,
            correct_position=correct_position,
            confidence=confidence,
            is_mistake=is_mistake,
            reasoning=self.generate_placement_reasoning(card, timeline, position),
        )

    def _introduce_error(self, correct_position: int, timeline_length: int) -> int:
        """Shift ``correct_position`` by a bounded random offset, staying in range.

        If clamping would land back on the correct index the offset is
        mirrored. On an empty timeline there is nowhere else to go.
        """
        max_error = max(1, int(timeline_length * MISTAKE_SPREAD))
        magnitude = self.rng.randint(1, max_error)
        direction = -1 if self.rng.random() < 0.5 else 1

        position = self._clamp(correct_position + direction * magnitude, timeline_length)
        if position == correct_position:
            position = self._clamp(correct_position - direction * magnitude, timeline_length)
        return position

    @staticmethod
    def _clamp(position: int, timeline_length: int) -> int:
        return max(0, min(timeline_length, position))

    # ------------------------------------------------------------------
    # Learning
    # ------------------------------------------------------------------

    def learn_from_placement(self, card: Card, was_correct: bool, confidence: float) -> None:
        """Fold the outcome of one placement into memory and history."""
        record = self.memory.get_or_create(MemoryKey.for_card(card))
        record.attempts += 1
        if was_correct:
            record.successes += 1

        accuracy = record.successes / record.attempts
        rate = self.profile.learning_rate
        if was_correct:
            accuracy = min(1.0, accuracy + rate * SUCCESS_NUDGE)
        else:
            accuracy = max(ACCURACY_FLOOR, accuracy - rate * FAILURE_NUDGE)
        record.accuracy = accuracy

        self.game_history.append(
            HistoryEntry(card=card, was_correct=was_correct, confidence=max(0.0, min(1.0, confidence)))
        )

    def get_performance_stats(self) -> PerformanceStats:
        total = len(self.game_history)
        if total == 0:
            return PerformanceStats(memory_size=len(self.memory))

        successes = sum(1 for entry in self.game_history if entry.was_correct)
        average_confidence = sum(entry.confidence for entry in self.game_history) / total
        return PerformanceStats(
            accuracy=successes / total,
            confidence=average_confidence,
            attempts=total,
            memory_size=len(self.memory),
        )

    def reset_for_new_game(self) -> None:
        """Forget the current game; learned memory is kept."""
        self.game_history = []

    # ------------------------------------------------------------------
    # Reasoning text
    # ------------------------------------------------------------------

    def generate_reasoning(self, card: Card) -> str:
        reasonings = (
            f"I'm confident about {card.title} from {card.year}",
            f"{card.title} seems like a good strategic choice",
            f"I have high confidence in placing {card.title}",
            f"{card.title} should fit well in the timeline",
            f"This {card.category} event from {card.year} looks promising",
        )
        return self.rng.choice(reasonings)

    def generate_placement_reasoning(self, card: Card, timeline: Sequence[Card], position: int) -> str:
        if not timeline:
            return f"Starting the timeline with {card.title} from {card.year}"
        if position == 0:
            return f"{card.title} should go at the beginning"
        if position == len(timeline):
            return f"{card.title} belongs at the end of our timeline"
        return f"{card.title} fits somewhere in the middle"


def create_ai_opponent(
    difficulty: str = "medium",
    memory: Optional[AIMemory] = None,
    rng: Optional[random.Random] = None,
) -> AIOpponent:
    return AIOpponent(difficulty, memory=memory, rng=rng)


def get_ai_thinking_time(difficulty: str = "medium", rng: Optional[random.Random] = None) -> int:
    """Thinking time in milliseconds for a difficulty, drawn from its profile range.

    The engine never waits on this value; it only counts against the AI's
    time bonus.
    """
    return _draw_thinking_time(get_difficulty_profile(difficulty), rng or random.Random())


def _draw_thinking_time(profile: DifficultyProfile, rng: random.Random) -> int:
    low, high = profile.thinking_time_ms
    if high <= low:
        return low
    return rng.randrange(low, high)
