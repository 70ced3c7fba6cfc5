"""Tests for logging configuration."""

import logging
import os
import unittest
from unittest.mock import patch

from src.utils.logging import configure_logging


class TestConfigureLogging(unittest.TestCase):
    """Tests for configure_logging."""

    def setUp(self) -> None:
        """Save the root logger state."""
        root = logging.getLogger()
        self._handlers = root.handlers[:]
        self._level = root.level
        self.addCleanup(self._restore)

    def _restore(self) -> None:
        root = logging.getLogger()
        root.handlers = self._handlers
        root.setLevel(self._level)

    def test_installs_single_stdout_handler(self) -> None:
        """Test that exactly one handler is attached at the configured level."""
        with patch.dict(os.environ, {"LOG_LEVEL": "debug"}):
            configure_logging()

        root = logging.getLogger()
        self.assertEqual(len(root.handlers), 1)
        self.assertEqual(root.level, logging.DEBUG)

    def test_sql_logging_is_off_by_default(self) -> None:
        """Test that SQL statements are not logged unless LOG_SQL is set."""
        with patch.dict(os.environ, {"LOG_SQL": "false"}):
            configure_logging()

        self.assertEqual(logging.getLogger("sqlalchemy.engine").level, logging.WARNING)

    def test_sql_logging_can_be_enabled(self) -> None:
        """Test that LOG_SQL=true logs SQL statements."""
        with patch.dict(os.environ, {"LOG_SQL": "true"}):
            configure_logging()

        self.assertEqual(logging.getLogger("sqlalchemy.engine").level, logging.INFO)

    def test_invalid_level_raises(self) -> None:
        """Test that an unknown level name is rejected."""
        with patch.dict(os.environ, {"LOG_LEVEL": "LOUD"}), self.assertRaises(ValueError):
            configure_logging()


if __name__ == "__main__":
    unittest.main()
