"""Tests for logging configuration."""
import logging
from logging.handlers import TimedRotatingFileHandler
from unittest.mock import patch

import pytest

from wordmaster.config import settings
from wordmaster.logging_config import setup_logging


@pytest.fixture
def root_logger():
    """Restore root logger handlers after each test."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield root
    for handler in root.handlers[:]:
        root.removeHandler(handler)
        if handler not in handlers:
            handler.close()
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)


def test_setup_logging_console_only(root_logger):
    """Test that a single console handler is configured."""
    with patch.object(settings.logging, "dir", None):
        setup_logging("test", level="debug")

    assert root_logger.level == logging.DEBUG
    assert len(root_logger.handlers) == 1
    assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING


def test_setup_logging_with_file(root_logger, tmp_path):
    """Test that a rotating file handler is added when LOG_DIR is set."""
    log_dir = tmp_path / "logs"
    with patch.object(settings.logging, "dir", str(log_dir)):
        setup_logging(level=logging.INFO)

    file_handlers = [h for h in root_logger.handlers if isinstance(h, TimedRotatingFileHandler)]
    assert len(file_handlers) == 1
    assert (log_dir / "wordmaster.log").exists()


if __name__ == "__main__":
    pytest.main([__file__])
