"""
Chronoline Configuration.

Scoring constants, AI difficulty profiles and the top-level game config.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal, Mapping

from dotenv import load_dotenv


# ============================================================================
# Scoring constants
# ============================================================================

BASE_SCORE = 100        # points per difficulty level
TIME_BONUS_MAX = 50     # bonus for an instant placement
TIME_BONUS_RATE = 10    # bonus points lost per second
ATTEMPT_PENALTY = 25    # points lost per extra attempt
MIN_SCORE = 10          # floor for any correct placement

DEFAULT_CARD_COUNT = 5
DEFAULT_AI_DIFFICULTY = "medium"

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]


@dataclass(frozen=True)
class ScoringConfig:
    """Named constants block used by the score calculator."""

    base_score: float = BASE_SCORE
    time_bonus_max: float = TIME_BONUS_MAX
    time_bonus_rate: float = TIME_BONUS_RATE
    attempt_penalty: float = ATTEMPT_PENALTY
    min_score: float = MIN_SCORE

    def __post_init__(self) -> None:
        if self.min_score < 0:
            raise ValueError("min_score must not be negative")
        if self.time_bonus_max < 0 or self.time_bonus_rate < 0 or self.attempt_penalty < 0:
            raise ValueError("time bonus and attempt penalty values must not be negative")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ScoringConfig":
        known = {k: float(v) for k, v in data.items() if k in cls.__dataclass_fields__}
        return cls(**known)

    def to_dict(self) -> dict[str, Any]:
        return {
            "base_score": self.base_score,
            "time_bonus_max": self.time_bonus_max,
            "time_bonus_rate": self.time_bonus_rate,
            "attempt_penalty": self.attempt_penalty,
            "min_score": self.min_score,
        }


# ============================================================================
# AI difficulty profiles
# ============================================================================


@dataclass(frozen=True)
class DifficultyProfile:
    """Tuning knobs for one AI skill level."""

    key: str
    name: str
    accuracy: float
    thinking_time_ms: tuple[int, int]
    mistake_chance: float
    learning_rate: float
    description: str = ""

    def __post_init__(self) -> None:
        if not 0.0 < self.accuracy <= 1.0:
            raise ValueError(f"accuracy must be in (0, 1], got {self.accuracy}")
        if not 0.0 <= self.mistake_chance <= 1.0:
            raise ValueError(f"mistake_chance must be in [0, 1], got {self.mistake_chance}")
        if not 0.0 <= self.learning_rate <= 1.0:
            raise ValueError(f"learning_rate must be in [0, 1], got {self.learning_rate}")
        low, high = self.thinking_time_ms
        if low < 0 or high < low:
            raise ValueError(f"invalid thinking time range {self.thinking_time_ms}")


AI_DIFFICULTIES: dict[str, DifficultyProfile] = {
    "easy": DifficultyProfile(
        key="easy",
        name="Beginner Bot",
        accuracy=0.6,
        thinking_time_ms=(2000, 4000),
        mistake_chance=0.4,
        learning_rate=0.1,
        description="Makes frequent mistakes, good for beginners",
    ),
    "medium": DifficultyProfile(
        key="medium",
        name="Scholar Bot",
        accuracy=0.8,
        thinking_time_ms=(1500, 3000),
        mistake_chance=0.2,
        learning_rate=0.3,
        description="Balanced opponent, makes occasional errors",
    ),
    "hard": DifficultyProfile(
        key="hard",
        name="Historian Pro",
        accuracy=0.95,
        thinking_time_ms=(1000, 2000),
        mistake_chance=0.05,
        learning_rate=0.5,
        description="Expert-level AI, rarely makes mistakes",
    ),
    "expert": DifficultyProfile(
        key="expert",
        name="Timeline Master",
        accuracy=0.98,
        thinking_time_ms=(800, 1500),
        mistake_chance=0.02,
        learning_rate=0.7,
        description="Near-perfect AI, extremely challenging",
    ),
}


def get_difficulty_profile(name: str | None) -> DifficultyProfile:
    """Look up a profile by name, falling back to medium."""
    if name:
        profile = AI_DIFFICULTIES.get(name.strip().lower())
        if profile is not None:
            return profile
    return AI_DIFFICULTIES[DEFAULT_AI_DIFFICULTY]


# ============================================================================
# Default Paths
# ============================================================================


def get_default_config_path() -> Path:
    """Get the default config file location."""
    if env_path := os.environ.get("CHRONOLINE_CONFIG"):
        return Path(env_path)
    return Path.home() / ".chronoline" / "config.json"


# ============================================================================
# Game config
# ============================================================================


@dataclass
class GameConfig:
    """Main configuration for Chronoline.

    Aggregates scoring and AI settings and provides load/save functionality.
    """

    card_count: int = DEFAULT_CARD_COUNT
    ai_difficulty: str = DEFAULT_AI_DIFFICULTY
    ai_memory_limit: int | None = None
    scoring: ScoringConfig = field(default_factory=ScoringConfig)
    log_level: LogLevel = "INFO"

    def __post_init__(self):
        if self.card_count < 1:
            raise ValueError("card_count must be at least 1")
        if self.ai_memory_limit is not None and self.ai_memory_limit < 1:
            raise ValueError("ai_memory_limit must be at least 1")
        if self.log_level not in ("DEBUG", "INFO", "WARNING", "ERROR"):
            raise ValueError(f"log_level must be DEBUG, INFO, WARNING or ERROR, got {self.log_level!r}")

    @property
    def difficulty_profile(self) -> DifficultyProfile:
        return get_difficulty_profile(self.ai_difficulty)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "GameConfig":
        """Create config from dictionary."""
        limit = data.get("ai_memory_limit")
        return cls(
            card_count=int(data.get("card_count", DEFAULT_CARD_COUNT)),
            ai_difficulty=str(data.get("ai_difficulty", DEFAULT_AI_DIFFICULTY)),
            ai_memory_limit=int(limit) if limit is not None else None,
            scoring=ScoringConfig.from_dict(data.get("scoring", {}) or {}),
            log_level=data.get("log_level", "INFO"),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert config to dictionary."""
        return {
            "card_count": self.card_count,
            "ai_difficulty": self.ai_difficulty,
            "ai_memory_limit": self.ai_memory_limit,
            "scoring": self.scoring.to_dict(),
            "log_level": self.log_level,
        }

    @classmethod
    def load(cls, config_path: str | Path | None = None) -> "GameConfig":
        """Load configuration from a JSON file.

        Args:
            config_path: Path to config file. If None, uses default location.

        Returns:
            GameConfig instance (defaults if the file does not exist)

        Raises:
            ValueError: If the file is not valid JSON
        """
        config_path = Path(config_path) if config_path else get_default_config_path()

        if not config_path.exists():
            return cls()

        try:
            data = json.loads(config_path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid config file {config_path}: {e}") from e

        return cls.from_dict(data)

    def save(self, config_path: str | Path | None = None) -> Path:
        """Save configuration to a JSON file."""
        config_path = Path(config_path) if config_path else get_default_config_path()
        config_path.parent.mkdir(parents=True, exist_ok=True)
        config_path.write_text(json.dumps(self.to_dict(), indent=2), encoding="utf-8")
        return config_path

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> "GameConfig":
        """Build config from ``CHRONOLINE_*`` environment variables.

        A ``.env`` file is loaded first when reading the real environment.
        """
        if env is None:
            load_dotenv()
            env = os.environ

        def _get(name: str) -> str | None:
            value = env.get(f"CHRONOLINE_{name}")
            return value.strip() if value and value.strip() else None

        data: dict[str, Any] = {}
        if card_count := _get("CARD_COUNT"):
            data["card_count"] = card_count
        if difficulty := _get("AI_DIFFICULTY"):
            data["ai_difficulty"] = difficulty
        if memory_limit := _get("AI_MEMORY_LIMIT"):
            data["ai_memory_limit"] = memory_limit
        if log_level := _get("LOG_LEVEL"):
            data["log_level"] = log_level.upper()

        scoring: dict[str, Any] = {}
        for name in ScoringConfig.__dataclass_fields__:
            if value := _get(name.upper()):
                scoring[name] = value
        if scoring:
            data["scoring"] = scoring

        try:
            return cls.from_dict(data)
        except (TypeError, ValueError) as e:
            raise ValueError(f"Invalid CHRONOLINE_* environment configuration: {e}") from e
