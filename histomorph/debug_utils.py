"""Helper utilities for debugging histomorph runs."""

from __future__ import annotations

import logging
import os

LOGGER_NAME = "histomorph"


def is_debug_enabled() -> bool:
    """Return ``True`` if ``HISTOMORPH_DEBUG`` is set to a truthy value."""
    val = os.environ.get("HISTOMORPH_DEBUG", "")
    return bool(val) and val.lower() not in {"0", "false", "no"}


def debug_print(*args, **kwargs) -> None:
    """Print only when ``HISTOMORPH_DEBUG`` is enabled."""
    if is_debug_enabled():
        print(*args, **kwargs)


def enable_logging(default_level: str | None = None) -> None:
    """Configure the ``histomorph`` logger.

    With no *default_level* the logger is only set up when ``HISTOMORPH_DEBUG``
    is enabled. The level comes from ``HISTOMORPH_LOG_LEVEL`` if defined,
    otherwise from *default_level* (``DEBUG`` in debug mode).
    """
    if default_level is None:
        if not is_debug_enabled():
            return
        default_level = "DEBUG"

    level_name = os.environ.get("HISTOMORPH_LOG_LEVEL", default_level).upper()
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        level = logging.DEBUG

    logger = logging.getLogger(LOGGER_NAME)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
        logger.addHandler(handler)
    logger.setLevel(level)
