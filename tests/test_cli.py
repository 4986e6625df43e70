import json
import logging
import tempfile
import unittest
from pathlib import Path

from typer.testing import CliRunner

from chronoline_engine.cli import app

runner = CliRunner()
WIDE = {"COLUMNS": "200"}


class CliTest(unittest.TestCase):
    def tearDown(self) -> None:
        # play attaches a stderr handler bound to the runner's stream
        root = logging.getLogger("chronoline")
        for handler in list(root.handlers):
            root.removeHandler(handler)
            handler.close()

    def test_profiles(self) -> None:
        result = runner.invoke(app, ["profiles"], env=WIDE)
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("Scholar", result.output)
        self.assertIn("expert", result.output)

    def test_score(self) -> None:
        result = runner.invoke(app, ["score", "--time", "5", "--attempts", "2"], env=WIDE)
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("Score: 75", result.output)

    def test_score_incorrect(self) -> None:
        result = runner.invoke(app, ["score", "--incorrect"], env=WIDE)
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("Score: 0", result.output)

    def test_play_saves_memory(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            memory_path = Path(tmp) / "ai_memory.json"
            args = ["play", "--seed", "3", "--cards", "3", "--games", "2", "--difficulty", "expert", "--memory", str(memory_path)]
            result = runner.invoke(app, args, env=WIDE)

            self.assertEqual(result.exit_code, 0, result.output)
            self.assertIn("Timeline Master", result.output)
            saved = json.loads(memory_path.read_text(encoding="utf-8"))
            self.assertTrue(saved["records"])

            # a second run picks the saved memory back up
            again = runner.invoke(app, args, env=WIDE)
            self.assertEqual(again.exit_code, 0, again.output)

    def test_play_missing_deck(self) -> None:
        result = runner.invoke(app, ["play", "--deck", "/nonexistent/events.json"], env=WIDE)
        self.assertEqual(result.exit_code, 1)
        self.assertIn("not found", result.output)


if __name__ == "__main__":
    unittest.main()
