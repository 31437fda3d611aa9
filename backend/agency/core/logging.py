"""
Logging setup shared by the API server and the client synchronization layer.
"""

import logging
import sys
from typing import Optional

from agency.core.config import settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Libraries that log every statement, request or connection at INFO
_QUIET_LOGGERS = ("sqlalchemy.engine", "aiosqlite", "aiohttp.access", "asyncio")


def setup_logging(level: Optional[str] = None) -> None:
    """
    Configure the root logger with a stdout handler.

    Args:
        level: Level name overriding settings.LOG_LEVEL
    """
    level_name = (level or settings.LOG_LEVEL).upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.getLogger(__name__).info("Logging configured", extra={"log_level": level_name})


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
