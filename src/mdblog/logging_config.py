"""Logging configuration"""

import sys

from loguru import logger


def configure_logging(level: str = "INFO") -> None:
    """Replace loguru's default sink with a compact stderr one."""
    logger.remove()
    logger.add(sys.stderr, level=level.upper(), format="[{time:HH:mm:ss}] {level: <7} {message}")
