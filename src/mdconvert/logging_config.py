import logging
import sys

LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


def setup_logging(level: str = "WARNING") -> logging.Logger:
    """
    Configure the mdconvert logger for command-line use.

    Records go to stderr; stdout carries the converted Markdown. Calling this
    again only changes the level.

    Args:
        level: Logging level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)

    Returns:
        The configured "mdconvert" logger
    """
    numeric_level = getattr(logging, level.upper(), logging.WARNING)
    logger = logging.getLogger("mdconvert")
    logger.setLevel(numeric_level)

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)

    # Keep CLI output off the root logger
    logger.propagate = False

    return logger
