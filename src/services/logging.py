"""Logging configuration for the finance API server.

Every record (service loggers, uvicorn, SQLAlchemy) ends up on the root
logger, which writes to stdout and to a log file. The level comes from
LOG_LEVEL, falling back to the LOG_LEVEL setting, then INFO.
"""

import logging
import os
import sys
from pathlib import Path

from src.services.config import settings

# Map string level names to logging constants
LOG_LEVEL_MAP = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}

LOG_FORMAT = "[%(asctime)s] %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# uvicorn installs its own handlers unless told otherwise; route them to root
ROUTED_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")


def get_log_level() -> int:
    """Resolve the configured logging level (unknown names mean INFO)."""
    level_str = os.getenv("LOG_LEVEL", settings.log_level or "INFO").upper()
    return LOG_LEVEL_MAP.get(level_str, logging.INFO)


def _handler(handler: logging.Handler, level: int) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
    return handler


def setup_server_logging(log_file: str = "logs/server.log") -> None:
    """
    Configure the root logger for the API server.

    Args:
        log_file: Path to log file, parent directories are created

    Behavior:
        - stdout + file output, ISO timestamps
        - replaces previously installed root handlers (safe to call twice)
        - uvicorn loggers propagate to root instead of printing on their own
        - SQL statements are logged only when DATABASE_ECHO is set
    """
    log_path = Path(log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)
    log_level = get_log_level()

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
        handler.close()

    root_logger.addHandler(_handler(logging.StreamHandler(sys.stdout), log_level))
    root_logger.addHandler(_handler(logging.FileHandler(log_path), log_level))

    for name in ROUTED_LOGGERS:
        routed = logging.getLogger(name)
        routed.handlers.clear()
        routed.propagate = True

    # Pool checkouts are noise at any level
    logging.getLogger("sqlalchemy.pool").setLevel(logging.WARNING)
    if not settings.database_echo:
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


__all__ = ["get_log_level", "setup_server_logging"]
