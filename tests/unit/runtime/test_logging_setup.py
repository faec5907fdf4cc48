"""Tests for file-based log configuration."""

from __future__ import annotations

import logging
import tempfile
import unittest
from pathlib import Path

from lazyfm.logging_setup import configure_logging
from lazyfm.runtime.session import create_session


class ConfigureLoggingTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name)
        self.logger = logging.getLogger("lazyfm")
        self._saved = (list(self.logger.handlers), self.logger.level, self.logger.propagate)

    def tearDown(self) -> None:
        for handler in list(self.logger.handlers):
            self.logger.removeHandler(handler)
            handler.close()
        handlers, level, propagate = self._saved
        for handler in handlers:
            self.logger.addHandler(handler)
        self.logger.setLevel(level)
        self.logger.propagate = propagate
        self._tmp.cleanup()

    def test_records_from_submodules_reach_log_file(self) -> None:
        log_path = self.root / "logs" / "lazyfm.log"

        result = configure_logging(logging.DEBUG, log_path)
        logging.getLogger("lazyfm.runtime.session").info("hello from session")
        for handler in self.logger.handlers:
            handler.flush()

        self.assertEqual(result, log_path)
        self.assertFalse(self.logger.propagate)
        self.assertIn("hello from session", log_path.read_text(encoding="utf-8"))

    def test_reconfiguring_replaces_previous_handler(self) -> None:
        configure_logging(log_path=self.root / "first.log")
        configure_logging(log_path=self.root / "second.log")

        self.assertEqual(len(self.logger.handlers), 1)

    def test_unwritable_location_falls_back_to_null_handler(self) -> None:
        blocker = self.root / "file"
        blocker.write_text("", encoding="utf-8")

        result = configure_logging(log_path=blocker / "nested" / "lazyfm.log")

        self.assertIsNone(result)
        self.assertIsInstance(self.logger.handlers[0], logging.NullHandler)

    def test_create_session_logs_config_problems_to_log_file(self) -> None:
        log_path = self.root / "lazyfm.log"
        config_path = self.root / "config.json"
        config_path.write_text("[1]", encoding="utf-8")

        session = create_session(self.root, config_path=config_path, persist_bookmarks=False, log_path=log_path)
        for handler in self.logger.handlers:
            handler.flush()

        self.assertEqual(session.start_path, self.root)
        self.assertIn("is not a JSON object", log_path.read_text(encoding="utf-8"))

    def test_create_session_can_leave_logging_alone(self) -> None:
        marker = logging.NullHandler()
        self.logger.addHandler(marker)

        create_session(self.root, config_path=self.root / "missing.json", persist_bookmarks=False, setup_logging=False)

        self.assertIn(marker, self.logger.handlers)
        self.assertFalse((self.root / "lazyfm.log").exists())


if __name__ == "__main__":
    unittest.main()
