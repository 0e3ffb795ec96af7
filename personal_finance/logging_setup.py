"""Logging configuration for the ``personal_finance`` package.

Entry points (the CLI, a host application) call :func:`configure_logging` once.
Library modules only ever do ``get_logger("personal_finance.<module>")`` and
never attach handlers of their own.

The level is resolved from, in order: the explicit ``level`` argument, the
``PERSONAL_FINANCE_LOG_LEVEL`` environment variable, and finally ``INFO``.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import IO

PACKAGE_LOGGER = "personal_finance"
LEVEL_ENV_VAR = "PERSONAL_FINANCE_LOG_LEVEL"
DEFAULT_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"

_handler: logging.Handler | None = None


def resolve_level(level: int | str | None = None) -> int:
    """Return a numeric logging level for ``level`` (or the environment)."""

    if level is None:
        level = os.getenv(LEVEL_ENV_VAR) or logging.INFO
    if isinstance(level, int):
        return level
    name = level.strip().upper()
    if name.isdigit():
        return int(name)
    numeric = logging.getLevelNamesMapping().get(name)
    if numeric is None:
        raise ValueError(f"unknown log level: {level!r}")
    return numeric


def configure_logging(
    level: int | str | None = None,
    *,
    fmt: str | None = None,
    stream: IO[str] | None = None,
) -> logging.Logger:
    """Attach a single ``StreamHandler`` to the package logger.

    Calling this again only adjusts the level; no second handler is added.
    Returns the package logger.
    """

    global _handler
    logger = logging.getLogger(PACKAGE_LOGGER)
    numeric = resolve_level(level)

    if _handler is None:
        for existing in list(logger.handlers):
            if isinstance(existing, logging.NullHandler):
                logger.removeHandler(existing)
        _handler = logging.StreamHandler(stream or sys.stderr)
        _handler.setFormatter(logging.Formatter(fmt or DEFAULT_FORMAT))
        logger.addHandler(_handler)
        # The root logger must not emit these a second time.
        logger.propagate = False

    _handler.setLevel(numeric)
    logger.setLevel(numeric)
    return logger


def reset_logging() -> None:
    """Detach the handler installed by :func:`configure_logging` (used by tests)."""

    global _handler
    logger = logging.getLogger(PACKAGE_LOGGER)
    if _handler is not None:
        logger.removeHandler(_handler)
        _handler = None
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


def get_logger(name: str) -> logging.Logger:
    """Return the logger ``name``; stays silent until :func:`configure_logging` runs."""

    pkg_logger = logging.getLogger(PACKAGE_LOGGER)
    if _handler is None and not pkg_logger.handlers:
        pkg_logger.addHandler(logging.NullHandler())
    return logging.getLogger(name)


__all__ = ["configure_logging", "get_logger", "reset_logging", "resolve_level"]
