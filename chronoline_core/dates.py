"""Date helpers for Chronoline cards.

Cards carry their date as an ISO-8601 string (``dateOccurred``). Comparisons
happen on calendar instants, so every value is parsed into a timezone-aware
``datetime``. Naive values are read as UTC.
"""

from datetime import UTC, datetime


def parse_date(value: str) -> datetime:
    """Parse an ISO-8601 date or datetime string into an aware datetime.

    Raises:
        ValueError: If the string is not ISO-8601.
    """
    text = value.strip()
    # fromisoformat() only learned the "Z" suffix in 3.11; normalize anyway
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed

