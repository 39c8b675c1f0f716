"""
logging_config.py: logging setup shared by the app and scripts.
"""
import logging
import sys
from typing import Optional

from core.config import LOG_FORMAT, LOG_LEVEL


def setup_logging(level: Optional[str] = None, format_string: Optional[str] = None) -> None:
    """
    Configure the root logger once.

    Args:
        level: log level name (DEBUG, INFO, WARNING, ...); defaults to LOG_LEVEL
        format_string: log format; defaults to LOG_FORMAT
    """
    log_level = level or LOG_LEVEL
    numeric_level = getattr(logging, log_level.upper(), logging.INFO)

    logging.basicConfig(
        level=numeric_level,
        format=format_string or LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    # aiohttp logs every connection at INFO
    logging.getLogger("aiohttp.access").setLevel(logging.WARNING)
    logging.getLogger("aiohttp.client").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)

    logging.getLogger(__name__).info("Logging configured at %s", log_level.upper())
