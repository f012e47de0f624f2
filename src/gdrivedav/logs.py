"""Logging setup for processes embedding gdrivedav."""

from __future__ import annotations

import logging
from typing import Optional

LOGGER_NAME: str = "gdrivedav"

_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str = "INFO", *, stream=None) -> logging.Logger:
    """
    Attach a single stream handler to the ``gdrivedav`` logger.

    Unknown level names fall back to INFO. Calling this again replaces the
    handler installed by the previous call instead of stacking another one.
    """
    logger = logging.getLogger(LOGGER_NAME)

    resolved = _parse_level(level)
    for handler in list(logger.handlers):
        if getattr(handler, "_gdrivedav_handler", False):
            logger.removeHandler(handler)

    handler = logging.StreamHandler(stream)
    handler.setFormatter(logging.Formatter(_FORMAT))
    handler._gdrivedav_handler = True  # type: ignore[attr-defined]
    logger.addHandler(handler)
    logger.setLevel(resolved if resolved is not None else logging.INFO)

    if resolved is None:
        logger.warning("unknown log level %r, falling back to INFO", level)
    return logger


def _parse_level(level: str) -> Optional[int]:
    value = logging.getLevelName(str(level).strip().upper())
    return value if isinstance(value, int) else None
