"""Logging setup for the famtree server process."""

import logging
import sys

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def setup_logging(level=logging.INFO, stream=None):
    """
    Route all log records to stderr (stdout carries the responses).

    Args:
        level: Root logger level, as a number or a name such as "DEBUG"
        stream: Stream for the handler, stderr by default
    """
    logger = logging.getLogger()
    logger.setLevel(level)

    # Remove any existing handlers to avoid duplicates
    logger.handlers.clear()

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)

    return logger
