"""AI opponents for Chronoline."""

from .opponent import (
    AIOpponent,
    CardSelection,
    PerformanceStats,
    PlacementDecision,
    create_ai_opponent,
    get_ai_thinking_time,
)

__all__ = [
    "AIOpponent",
    "CardSelection",
    "PerformanceStats",
    "PlacementDecision",
    "create_ai_opponent",
    "get_ai_thinking_time",
]
