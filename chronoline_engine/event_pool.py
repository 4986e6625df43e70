"""Loading event pools from JSON.

The backend normally supplies cards; for local play and tests a JSON array
of card objects works too. A small pool ships with the package.
"""

import json
from importlib import resources
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from chronoline_core import Card

SAMPLE_EVENTS_RESOURCE = "sample_events.json"


def parse_events(payload: object) -> list[Card]:
    """Turn a decoded JSON array into cards.

    Raises:
        ValueError: If the payload is not a list of valid card objects
    """
    if not isinstance(payload, list):
        raise ValueError("Event pool must be a JSON array of card objects")
    try:
        return [Card.model_validate(item) for item in payload]
    except ValidationError as e:
        raise ValueError(f"Invalid card in event pool: {e}") from e


def load_events(path: Optional[str | Path] = None) -> list[Card]:
    """Load cards from ``path``, or the bundled sample pool when omitted.

    Raises:
        FileNotFoundError: If ``path`` does not exist
        ValueError: If the file is not a valid event pool
    """
    if path is None:
        text = resources.files("chronoline_engine.data").joinpath(SAMPLE_EVENTS_RESOURCE).read_text(encoding="utf-8")
        source = SAMPLE_EVENTS_RESOURCE
    else:
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Event pool not found: {path}")
        text = path.read_text(encoding="utf-8")
        source = str(path)

    try:
        payload = json.loads(text)
    except json.JSONDecodeError as e:
        raise ValueError(f"Event pool {source} is not valid JSON: {e}") from e
    return parse_events(payload)
