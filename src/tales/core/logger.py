import logging
import sys

from tales.core.config import settings

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%H:%M:%S"


def configure_logging(level: str = settings.LOG_LEVEL) -> logging.Logger:
    """Attach a single stdout handler to the package logger."""
    logger = logging.getLogger("tales")
    logger.setLevel(level.upper())

    # Re-running the lifespan (tests, reload) must not stack handlers
    if logger.hasHandlers():
        logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    logger.addHandler(handler)
    return logger
