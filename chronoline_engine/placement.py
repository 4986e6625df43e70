"""Placement validation for Chronoline.

Decides whether a card was dropped at its chronological position and builds
the feedback text shown to the player. Correctness is computed first and the
text is generated from it afterwards; the randomly chosen wording never
influences the result.

No defensive date checks are made here: cards validate ``dateOccurred`` when
they are constructed.
"""

import random
from typing import Optional, Sequence

from chronoline_core import Card, InsertionKind, InsertionPoint, PlacementResult

CORRECT_TEMPLATES = (
    "Perfect! {title} ({year}) is correctly placed!",
    "Excellent placement! {title} ({year}) is exactly where it belongs!",
    "Spot on! {title} ({year}) fits the timeline perfectly!",
    "Great historical knowledge! {title} ({year}) is in the right spot!",
    "Nailed it! {title} ({year}) is correctly placed!",
)

INCORRECT_TEMPLATES = (
    "{title} ({year}) happened {direction} in history. Try again!",
    "Not quite! {title} occurred in {year}, so it belongs {direction} on the timeline.",
    "Good try! {title} needs to be placed {direction} on the timeline.",
    "Think again! {title} was in {year} ({decade}s). Try looking {direction} in the timeline.",
)

EMPTY_TIMELINE_TEMPLATE = "{title} ({year}) was placed on an empty timeline."


def find_correct_position(card: Card, timeline: Sequence[Card]) -> int:
    """Return the index where ``card`` keeps ``timeline`` ascending.

    A card dated the same as an existing entry goes in front of it.
    """
    card_date = card.occurred_at
    for index, entry in enumerate(timeline):
        if card_date <= entry.occurred_at:
            return index
    return len(timeline)


def is_timeline_chronological(timeline: Sequence[Card]) -> bool:
    """True if every entry is dated no later than the entry after it."""
    for previous, current in zip(timeline, timeline[1:]):
        if previous.occurred_at > current.occurred_at:
            return False
    return True


def check_win_condition(hand: Sequence[Card]) -> bool:
    return len(hand) == 0


def format_time(seconds: float) -> str:
    """Format a duration as ``"42s"`` or ``"2m 5s"``."""
    if seconds < 60:
        return f"{round(seconds)}s"
    minutes = int(seconds // 60)
    remaining = round(seconds % 60)
    return f"{minutes}m {remaining}s"


class PlacementValidator:
    """Validates placements and produces player feedback.

    Args:
        rng: Random source used only to pick feedback wording
    """

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()

    def validate(self, card: Card, timeline: Sequence[Card], user_position: int) -> PlacementResult:
        """Check a placement of ``card`` at ``user_position``.

        Returns:
            PlacementResult; ``is_correct`` is true only for the exact index
            returned by :func:`find_correct_position`.
        """
        correct_position = find_correct_position(card, timeline)
        is_correct = user_position == correct_position
        feedback = self.generate_feedback(card, timeline, user_position, correct_position, is_correct)
        return PlacementResult(
            is_correct=is_correct,
            correct_position=correct_position,
            user_position=user_position,
            date_occurred=card.date_occurred,
            feedback=feedback,
        )

    def generate_feedback(
        self,
        card: Card,
        timeline: Sequence[Card],
        user_position: int,
        correct_position: int,
        is_correct: bool,
    ) -> str:
        year = card.year
        if not timeline:
            return EMPTY_TIMELINE_TEMPLATE.format(title=card.title, year=year)

        if is_correct:
            template = self.rng.choice(CORRECT_TEMPLATES)
            return template.format(title=card.title, year=year)

        direction = "later" if user_position < correct_position else "earlier"
        template = self.rng.choice(INCORRECT_TEMPLATES)
        return template.format(title=card.title, year=year, decade=card.decade, direction=direction)

    def generate_hint(self, card: Card, timeline: Sequence[Card]) -> str:
        """Describe roughly where ``card`` belongs without giving the index."""
        year = card.year
        if not timeline:
            return f"This event happened in the {card.decade}s!"

        years = [entry.year for entry in timeline]
        hint = f"This event occurred in {year}. "
        if year < min(years):
            hint += "It happened before all events currently on the timeline."
        elif year > max(years):
            hint += "It happened after all events currently on the timeline."
        else:
            hint += "It fits somewhere in the middle of your current timeline."
        return hint


def generate_insertion_points(timeline: Sequence[Card]) -> list[InsertionPoint]:
    """List every slot a card can be dropped into, with a difficulty rating.

    Gaps wider than 50 years are easy to hit, gaps under 10 years are hard.
    """
    ordered = sorted(timeline, key=lambda entry: entry.occurred_at)
    points = [
        InsertionPoint(
            index=0,
            kind=InsertionKind.BEFORE,
            next_card=ordered[0] if ordered else None,
        )
    ]

    for index, (current, following) in enumerate(zip(ordered, ordered[1:])):
        gap = following.year - current.year
        difficulty = "medium"
        if gap > 50:
            difficulty = "easy"
        elif gap < 10:
            difficulty = "hard"
        points.append(
            InsertionPoint(
                index=index + 1,
                kind=InsertionKind.BETWEEN,
                reference_card=current,
                next_card=following,
                difficulty=difficulty,
                gap=gap,
            )
        )

    if ordered:
        points.append(
            InsertionPoint(
                index=len(ordered),
                kind=InsertionKind.AFTER,
                reference_card=ordered[-1],
            )
        )
    return points


_default_validator = PlacementValidator()


def validate_card_placement(card: Card, timeline: Sequence[Card], user_position: int) -> PlacementResult:
    """Module-level shortcut using a validator with an unseeded random source."""
    return _default_validator.validate(card, timeline, user_position)


def generate_placement_feedback(
    card: Card,
    timeline: Sequence[Card],
    user_position: int,
    correct_position: int,
    is_correct: bool,
) -> str:
    return _default_validator.generate_feedback(card, timeline, user_position, correct_position, is_correct)


def generate_hint(card: Card, timeline: Sequence[Card]) -> str:
    return _default_validator.generate_hint(card, timeline)
