"""Logging configuration helpers."""

import logging

_LOGGER_NAME = "meal_dashboard"


def configure_logging(level: int | str = logging.INFO) -> None:
    """Configure the package logger with a single stream handler.

    Repeated calls only update the level.
    """
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level)
    if logger.handlers:
        return
    handler = logging.StreamHandler()
    handler.setFormatter(
        logging.Formatter("%(asctime)s %(levelname)s: %(name)s: %(message)s")
    )
    logger.addHandler(handler)
    logger.propagate = False
