"""Logging setup for applications embedding Findr.

Library modules only call ``logging.getLogger(__name__)``; the host
application decides where records go.
"""

from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def configure_logging(level: str | int = "INFO") -> logging.Logger:
    """Attach one stream handler to the ``findr`` logger.

    Calling it again only updates the level.

    Example:
        >>> import logging
        >>> from findr.core.logging import configure_logging
        >>> logger = configure_logging("DEBUG")
        >>> logger.level == logging.DEBUG
        True
    """
    logger = logging.getLogger("findr")
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
    logger.setLevel(level)

    if not any(getattr(h, "_findr_handler", False) for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._findr_handler = True  # type: ignore[attr-defined]
        logger.addHandler(handler)

    return logger
