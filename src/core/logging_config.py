"""Logging setup for the API process."""

import logging

from config import LOG_LEVEL

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(level: str = LOG_LEVEL) -> None:
    """Configure the root logger.

    Safe to call more than once; handlers are only installed on the first call.

    Args:
        level: Logging level name, e.g. "INFO" or "DEBUG".
    """
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(level=level, format=LOG_FORMAT)
    else:
        root.setLevel(level)

    # uvicorn's access log duplicates the request lines we care about
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
