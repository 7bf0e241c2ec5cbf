"""
Ready-made loggers for verbose estimators.
"""

import logging


def screen_logger(channel: str = "boostml", level: int = logging.INFO) -> logging.Logger:
    """
    Logger printing timestamped messages to stderr.

    Attach it to a verbose estimator with ``set_logger`` to follow training
    progress. Calling it twice with the same channel does not duplicate
    handlers.
    """
    logger = logging.getLogger(channel)
    logger.setLevel(level)

    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(
            "[%(asctime)s] %(name)s.%(levelname)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        ))
        logger.addHandler(handler)

    return logger
