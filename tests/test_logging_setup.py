import logging
import logging.handlers

import pytest

from standby.util.logging_setup import configure_logging, get_logger, level_from_name, reset_logging


def test_level_from_name():
    assert level_from_name("debug") == logging.DEBUG
    assert level_from_name(" WARNING ") == logging.WARNING
    with pytest.raises(ValueError):
        level_from_name("verbose")


def test_console_only():
    logger = configure_logging(logging.WARNING)
    assert logger is get_logger()
    assert logger.level == logging.WARNING
    assert not logger.propagate
    assert [type(h) for h in logger.handlers] == [logging.StreamHandler]


def test_rotating_file_in_new_directory(tmp_path):
    path = tmp_path / "logs" / "standby.log"
    logger = configure_logging(logging.DEBUG, console=False, log_file=str(path))
    (handler,) = logger.handlers
    assert isinstance(handler, logging.handlers.RotatingFileHandler)
    assert handler.backupCount == 5

    logger.debug("Zoom cycle complete, next target %s", 1)
    handler.flush()
    line = path.read_text(encoding="utf-8").strip()
    assert line.endswith("DEBUG   test_logging_setup: Zoom cycle complete, next target 1")


def test_reconfigure_replaces_handlers(tmp_path):
    configure_logging(console=True, log_file=str(tmp_path / "a.log"))
    logger = configure_logging(console=True)
    assert len(logger.handlers) == 1

    reset_logging()
    assert logger.handlers == []
    assert logger.propagate
