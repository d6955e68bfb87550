"""Logging setup shared by the library, the CLI and the HTTP service."""

from __future__ import annotations

import logging

from chapterpress.config import CHAPTERPRESS_LOG_LEVEL

_ROOT_LOGGER = "chapterpress"
_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def get_logger(name: str) -> logging.Logger:
    """Return a module logger.

    Context is attached with ``extra={...}`` at call sites so handlers that
    understand structured records can pick it up.
    """
    return logging.getLogger(name)


def configure_logging(level: str | int | None = None) -> None:
    """Install a single stream handler on the package loggers.

    Calling this more than once only adjusts the level.
    """
    resolved = level if level is not None else CHAPTERPRESS_LOG_LEVEL
    for name in (_ROOT_LOGGER, "server"):
        logger = logging.getLogger(name)
        logger.setLevel(resolved)
        if not logger.handlers:
            handler = logging.StreamHandler()
            handler.setFormatter(logging.Formatter(_FORMAT))
            logger.addHandler(handler)
