"""Logger lookup shared by the client, transport and upload services."""

import logging
from typing import Optional


def get_logger(name: str, level: Optional[int] = None) -> logging.Logger:
    """
    Return a 'fileservice.*' logger that propagates to the root logger.

    While the application has not configured logging (no root handlers),
    the logger is held at `level`, WARNING by default, so library chatter
    stays quiet. Once root handlers exist the level is left to the
    application.
    """
    logger = logging.getLogger(name)
    logger.propagate = True

    if not logging.getLogger().handlers:
        logger.setLevel(logging.WARNING if level is None else level)

    return logger
