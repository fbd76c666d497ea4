"""
Logging setup for the request parser.

Modules log through ``logging.getLogger(__name__)`` under the
``requestcore`` namespace. Nothing is configured on import; call
configure_logging() from the embedding application or the CLI.
"""

import logging
from typing import Optional

from pythonjsonlogger.json import JsonFormatter

LOGGER_NAME = "requestcore"
TEXT_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"
JSON_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def configure_logging(level=logging.INFO, log_file: Optional[str] = None, json_format: bool = False):
    """Configure logging for the request parser.

    Args:
        level: Logging level (default: INFO)
        log_file: Optional path to log file
        json_format: Emit one JSON object per record instead of text

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    # Replace handlers from a previous call
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    if json_format:
        formatter = JsonFormatter(JSON_FORMAT)
    else:
        formatter = logging.Formatter(TEXT_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger
