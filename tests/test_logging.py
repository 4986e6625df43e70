import logging
import tempfile
import unittest
from pathlib import Path

from chronoline_core.utils.logging import ChronolineFormatter, get_logger, log_error, log_operation, setup_logging


class LoggingTest(unittest.TestCase):
    def tearDown(self) -> None:
        self._reset()

    def _reset(self) -> None:
        root = logging.getLogger("chronoline")
        for handler in list(root.handlers):
            root.removeHandler(handler)
            handler.close()

    def _read_log(self, directory: str) -> str:
        for handler in logging.getLogger("chronoline").handlers:
            handler.flush()
        return (Path(directory) / "chronoline.log").read_text(encoding="utf-8")

    def test_loggers_live_under_the_package_namespace(self) -> None:
        self.assertEqual(get_logger("engine.game").name, "chronoline.engine.game")
        self.assertEqual(get_logger("chronoline.cli").name, "chronoline.cli")
        self.assertIs(get_logger("engine.game"), get_logger("engine.game"))

    def test_operation_lines_carry_the_session(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            setup_logging(level="DEBUG", log_dir=tmp, console_output=False)
            log_operation(get_logger("engine.test"), "Placed card", {"card": 3, "correct": True}, session_id="game_1")

            text = self._read_log(tmp)
            self._reset()
        self.assertIn("engine.test: Placed card: card=3, correct=True (session game_1)", text)

    def test_level_filtering_and_errors(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            setup_logging(level="WARNING", log_dir=tmp, console_output=False)
            logger = get_logger("engine.test")
            log_operation(logger, "Hidden")
            log_error(logger, "Loading event pool", FileNotFoundError("missing.json"), {"deck": "missing.json"})

            text = self._read_log(tmp)
            self._reset()
        self.assertNotIn("Hidden", text)
        self.assertIn("Loading event pool failed: FileNotFoundError: missing.json [deck=missing.json]", text)

    def test_formatter_without_colours(self) -> None:
        record = logging.LogRecord("chronoline.engine.ai", logging.WARNING, __file__, 1, "hello %s", ("there",), None)
        line = ChronolineFormatter(use_colors=False, include_timestamp=False).format(record)
        self.assertEqual(line, "WARNING engine.ai: hello there")


if __name__ == "__main__":
    unittest.main()
