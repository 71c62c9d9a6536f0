"""
Loguru sink configuration shared by the API and the scripts.
"""

import sys

from loguru import logger

LOG_FORMAT = (
    "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)


def setup_logging(level: str = "INFO", debug: bool = False) -> None:
    """Configure logging with loguru.

    Replaces the default sink with a coloured stderr sink.

    Args:
        level: Minimum level name (ignored when ``debug`` is set)
        debug: Shortcut for ``level="DEBUG"``
    """
    logger.remove()
    logger.add(
        sys.stderr,
        format=LOG_FORMAT,
        level="DEBUG" if debug else level.upper(),
    )
