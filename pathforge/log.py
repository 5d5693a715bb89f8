"""Logging setup for the command-line tool.

Library modules only call ``logging.getLogger(__name__)``; handlers are
installed here, once, by whoever runs the program.
"""

import logging
from typing import Optional

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(level: str = "WARNING", name: Optional[str] = "pathforge") -> logging.Logger:
    """Attach a stream handler to the package logger.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        name: Logger to configure

    Returns:
        The configured logger
    """
    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, level.upper(), logging.WARNING))

    if not any(getattr(h, '_pathforge', False) for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._pathforge = True
        logger.addHandler(handler)

    return logger
