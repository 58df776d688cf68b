import logging
import logging.handlers
import os
from typing import List, Optional

_LOGGER_NAME = "standby"

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")

# Screen sessions run for hours; one line per cycle/recovery, so the log stays small.
_FORMAT = "%(asctime)s.%(msecs)03d %(levelname)-7s %(module)s: %(message)s"
_DATEFMT = "%Y-%m-%dT%H:%M:%S"

def get_logger() -> logging.Logger:
    return logging.getLogger(_LOGGER_NAME)

def level_from_name(name: str) -> int:
    """Map a --log-level value to a logging level; unknown names are an error, not INFO."""
    key = str(name).strip().upper()
    if key not in LOG_LEVELS:
        raise ValueError(f"log level must be one of: {', '.join(LOG_LEVELS)}")
    return getattr(logging, key)

def _file_handler(path: str, rotate_bytes: int, rotate_count: int) -> logging.Handler:
    parent = os.path.dirname(path)
    if parent:
        os.makedirs(parent, exist_ok=True)
    return logging.handlers.RotatingFileHandler(
        path, maxBytes=rotate_bytes, backupCount=rotate_count, encoding="utf-8"
    )

def reset_logging() -> None:
    """Detach and close every handler configure_logging() attached."""
    logger = get_logger()
    for h in list(logger.handlers):
        logger.removeHandler(h)
        h.close()
    logger.propagate = True

def configure_logging(
    level: int = logging.INFO,
    *,
    console: bool = True,
    log_file: Optional[str] = None,
    rotate_bytes: int = 5 * 1024 * 1024,
    rotate_count: int = 5,
) -> logging.Logger:
    """
    Send the "standby" logger to stderr and/or a rotating file.

    Calling it again replaces the previous handlers, so the CLI can be invoked
    repeatedly in one process (tests do this) without duplicating output.
    """
    reset_logging()
    logger = get_logger()
    logger.setLevel(level)
    logger.propagate = False

    handlers: List[logging.Handler] = []
    if console:
        handlers.append(logging.StreamHandler())
    if log_file:
        handlers.append(_file_handler(log_file, rotate_bytes, rotate_count))

    formatter = logging.Formatter(fmt=_FORMAT, datefmt=_DATEFMT)
    for h in handlers:
        h.setLevel(level)
        h.setFormatter(formatter)
        logger.addHandler(h)
    return logger
