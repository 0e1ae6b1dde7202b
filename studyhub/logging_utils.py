"""Centralized logging configuration for the StudyHub API."""
import logging
from typing import Iterable, Optional, Union

DEFAULT_LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

_default_handler: Optional[logging.Handler] = None


def configure_logging(
    level: Union[int, str] = logging.INFO,
    handlers: Optional[Iterable[logging.Handler]] = None,
) -> logging.Logger:
    """
    Configure the root logger.

    The default stream handler is installed once, however many apps are
    built in the process.

    Args:
        level: Logging level name or number
        handlers: Handlers to install instead of the default stream handler

    Returns:
        The root logger
    """
    global _default_handler

    logger = logging.getLogger()
    logger.setLevel(level)

    if handlers is not None:
        for handler in handlers:
            logger.addHandler(handler)
    elif _default_handler is None:
        _default_handler = logging.StreamHandler()
        _default_handler.setFormatter(logging.Formatter(DEFAULT_LOG_FORMAT))
        logger.addHandler(_default_handler)

    return logger
