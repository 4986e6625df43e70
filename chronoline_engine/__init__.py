"""Chronoline Engine - rules, scoring and AI for the timeline card game.

Players insert historical-event cards into chronological position on a
growing timeline. The engine decides whether a placement is correct, what it
is worth, and how an AI opponent picks and places its own cards.

Core Components:
- GameSessionFactory: Deals the opening timeline card and the player's hand
- PlacementValidator: Chronological placement checks and player feedback
- ScoreCalculator: Points for a placement from time, attempts and difficulty
- AIOpponent: Card selection, placement with injected mistakes, learned memory
- TimelineGame: Turn controller applying human and AI moves to a session

Usage:
    from chronoline_engine import TimelineGame, AIOpponent, load_events

    game = TimelineGame()
    game.start(load_events(), {"cardCount": 5}, opponent=AIOpponent("hard"))
    outcome = game.place_card(card_id, position=1, time_to_place=2.5)
"""

from .agents import (
    AIOpponent,
    CardSelection,
    PerformanceStats,
    PlacementDecision,
    create_ai_opponent,
    get_ai_thinking_time,
)
from .event_pool import load_events, parse_events
from .game import MoveOutcome, PlayerType, TimelineGame
from .placement import (
    PlacementValidator,
    check_win_condition,
    find_correct_position,
    format_time,
    generate_hint,
    generate_insertion_points,
    generate_placement_feedback,
    is_timeline_chronological,
    validate_card_placement,
)
from .scoring import ScoreCalculator, calculate_score
from .session_factory import GameSessionFactory, create_game_session

__version__ = "0.1.0"

__all__ = [
    "AIOpponent",
    "CardSelection",
    "GameSessionFactory",
    "MoveOutcome",
    "PerformanceStats",
    "PlacementDecision",
    "PlacementValidator",
    "PlayerType",
    "ScoreCalculator",
    "TimelineGame",
    "calculate_score",
    "check_win_condition",
    "create_ai_opponent",
    "create_game_session",
    "find_correct_position",
    "format_time",
    "generate_hint",
    "generate_insertion_points",
    "generate_placement_feedback",
    "get_ai_thinking_time",
    "is_timeline_chronological",
    "load_events",
    "parse_events",
    "validate_card_placement",
]
