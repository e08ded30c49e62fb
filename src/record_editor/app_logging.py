"""Logging configuration helpers."""

import logging

LOGGER_NAME = "record_editor"
HANDLER_NAME = "record_editor.stream"
LOCAL_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
DEPLOYED_FORMAT = "%(levelname)s: %(name)s: %(message)s"


def configure_logging(
    level: str = "INFO", environment: str = "local"
) -> logging.Logger:
    """Route ``record_editor`` logs through one stream handler.

    Repeated calls reuse the handler and only update the level and format, so
    every app instance built in a process can apply its own settings.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level.upper())
    logger.propagate = False
    handler = next((h for h in logger.handlers if h.name == HANDLER_NAME), None)
    if handler is None:
        handler = logging.StreamHandler()
        handler.set_name(HANDLER_NAME)
        logger.addHandler(handler)
    log_format = LOCAL_FORMAT if environment == "local" else DEPLOYED_FORMAT
    handler.setFormatter(logging.Formatter(log_format))
    return logger
