"""Process-wide logging configuration for the command line entry point."""

import logging
from typing import Optional

from .config import get_settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: Optional[str] = None) -> None:
    """
    Configure root logging once per process.

    Args:
        level: Level name; defaults to LOG_LEVEL from settings
    """
    level_name = (level or get_settings().LOG_LEVEL).upper()
    logging.basicConfig(level=getattr(logging, level_name, logging.INFO), format=LOG_FORMAT)
