"""Chronoline Core - data contracts and shared configuration.

Models:
- Card, TimelineCard - immutable historical events
- GameSettings, GameSession, GameStatus - per-game state and its persistence shape
- PlacementResult, InsertionPoint - validator outputs

Memory:
- MemoryKey, MemoryRecord, AIMemory, HistoryEntry - the AI's learned accuracy table

Configuration:
- ScoringConfig, DifficultyProfile, AI_DIFFICULTIES, GameConfig

Nothing in this package has gameplay behaviour; the rules live in
chronoline_engine.
"""

from .config import (
    AI_DIFFICULTIES,
    ATTEMPT_PENALTY,
    BASE_SCORE,
    DEFAULT_AI_DIFFICULTY,
    DEFAULT_CARD_COUNT,
    MIN_SCORE,
    TIME_BONUS_MAX,
    TIME_BONUS_RATE,
    DifficultyProfile,
    GameConfig,
    ScoringConfig,
    get_difficulty_profile,
)
from .memory import AIMemory, HistoryEntry, MemoryKey, MemoryRecord
from .models import (
    Card,
    GameSession,
    GameSettings,
    GameStatus,
    InsertionKind,
    InsertionPoint,
    PlacementResult,
    Timeline,
    TimelineCard,
)

__version__ = "0.1.0"

__all__ = [
    # Models
    "Card",
    "TimelineCard",
    "Timeline",
    "GameSettings",
    "GameSession",
    "GameStatus",
    "PlacementResult",
    "InsertionKind",
    "InsertionPoint",
    # Memory
    "AIMemory",
    "HistoryEntry",
    "MemoryKey",
    "MemoryRecord",
    # Config
    "AI_DIFFICULTIES",
    "ATTEMPT_PENALTY",
    "BASE_SCORE",
    "DEFAULT_AI_DIFFICULTY",
    "DEFAULT_CARD_COUNT",
    "MIN_SCORE",
    "TIME_BONUS_MAX",
    "TIME_BONUS_RATE",
    "DifficultyProfile",
    "GameConfig",
    "ScoringConfig",
    "get_difficulty_profile",
]
