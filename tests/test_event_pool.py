import json
import tempfile
import unittest
from pathlib import Path

from chronoline_engine.event_pool import load_events, parse_events


class EventPoolTest(unittest.TestCase):
    def test_bundled_sample(self) -> None:
        events = load_events()
        self.assertGreaterEqual(len(events), 20)
        self.assertEqual(len({card.key for card in events}), len(events))

    def test_load_from_file(self) -> None:
        payload = [
            {"id": "a", "title": "Printing press", "category": "Technology", "difficulty": 3, "dateOccurred": "1440-01-01"},
            {"id": "b", "title": "Magna Carta", "category": "History", "dateOccurred": "1215-06-15"},
        ]
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "events.json"
            path.write_text(json.dumps(payload), encoding="utf-8")
            events = load_events(path)
        self.assertEqual([card.title for card in events], ["Printing press", "Magna Carta"])
        self.assertEqual(events[1].difficulty, 1)

    def test_missing_file(self) -> None:
        with self.assertRaises(FileNotFoundError):
            load_events("/nonexistent/events.json")

    def test_invalid_payloads(self) -> None:
        with self.assertRaises(ValueError):
            parse_events({"id": 1})
        with self.assertRaises(ValueError):
            parse_events([{"id": 1, "title": "No date", "category": "History"}])
        with self.assertRaises(ValueError):
            parse_events([{"id": 1, "title": "Bad date", "category": "History", "dateOccurred": "yesterday"}])


if __name__ == "__main__":
    unittest.main()
