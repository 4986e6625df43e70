"""Learned memory for the AI opponent.

The AI keeps one accuracy record per (category, decade, difficulty) bucket.
Records are updated after every placement the AI makes and consulted when it
estimates how confident it is about a card.

Memory belongs to a single AIOpponent. It is never shared between
opponents, but it deliberately survives ``reset_for_new_game`` so the AI
improves across games.
"""

from collections import OrderedDict
from datetime import UTC, datetime
from typing import Any, Iterator, Optional

from pydantic import BaseModel, ConfigDict, Field

from .models import Card


# ============================================================================
# Keys and records
# ============================================================================


class MemoryKey(BaseModel):
    """Composite bucket a card falls into."""

    model_config = ConfigDict(frozen=True)

    category: str
    decade: int
    difficulty: int

    @classmethod
    def for_card(cls, card: Card) -> "MemoryKey":
        return cls(category=card.category, decade=card.decade, difficulty=card.difficulty)

    def as_string(self) -> str:
        """Legacy flat form, ``category_decade_difficulty``."""
        return f"{self.category}_{self.decade}_{self.difficulty}"

    @classmethod
    def from_string(cls, value: str) -> "MemoryKey":
        # category may itself contain underscores; the last two parts are numeric
        category, decade, difficulty = value.rsplit("_", 2)
        return cls(category=category, decade=int(decade), difficulty=int(difficulty))


class MemoryRecord(BaseModel):
    """Observed performance for one bucket."""

    attempts: int = Field(default=0, ge=0)
    successes: int = Field(default=0, ge=0)
    accuracy: float = Field(default=0.0, ge=0.0, le=1.0)


class HistoryEntry(BaseModel):
    """One placement the AI made during the current game."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    card: Card
    was_correct: bool = Field(alias="wasCorrect")
    confidence: float = Field(ge=0.0, le=1.0)
    timestamp: int = Field(
        default_factory=lambda: int(datetime.now(UTC).timestamp() * 1000),
        description="Epoch milliseconds",
    )


# ============================================================================
# Memory table
# ============================================================================


class AIMemory:
    """Table of MemoryKey -> MemoryRecord with optional LRU eviction.

    With ``max_entries=None`` the table grows without bound. Otherwise the
    least recently used bucket is dropped once the limit is exceeded; reads
    through :meth:`get` count as use.
    """

    def __init__(self, max_entries: Optional[int] = None):
        if max_entries is not None and max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self.max_entries = max_entries
        self._records: "OrderedDict[MemoryKey, MemoryRecord]" = OrderedDict()

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, key: object) -> bool:
        return key in self._records

    def __iter__(self) -> Iterator[MemoryKey]:
        return iter(self._records)

    def items(self) -> list[tuple[MemoryKey, MemoryRecord]]:
        return list(self._records.items())

    def get(self, key: MemoryKey) -> Optional[MemoryRecord]:
        record = self._records.get(key)
        if record is not None:
            self._records.move_to_end(key)
        return record

    def get_or_create(self, key: MemoryKey) -> MemoryRecord:
        record = self.get(key)
        if record is None:
            record = MemoryRecord()
            self._records[key] = record
            self._evict()
        return record

    def clear(self) -> None:
        self._records.clear()

    def _evict(self) -> None:
        if self.max_entries is None:
            return
        while len(self._records) > self.max_entries:
            self._records.popitem(last=False)

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        return {
            "max_entries": self.max_entries,
            "records": {key.as_string(): record.model_dump() for key, record in self._records.items()},
        }

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> "AIMemory":
        memory = cls(max_entries=payload.get("max_entries"))
        for raw_key, data in (payload.get("records") or {}).items():
            memory._records[MemoryKey.from_string(raw_key)] = MemoryRecord.model_validate(data)
        memory._evict()
        return memory
