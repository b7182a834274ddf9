"""Logging utilities for the movie feed service."""
from __future__ import annotations

import logging

_ROOT_LOGGER_NAME = "movie_feed"
_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

_handler: logging.Handler | None = None


def configure_logging(level: str | int = "INFO") -> None:
    """Install a single stream handler on the root logger.

    Calling this again replaces the handler installed by the previous call, so
    the function is safe to use from tests and from the CLI entrypoint alike.
    """

    global _handler
    if isinstance(level, str):
        resolved = logging.getLevelName(level.strip().upper())
        if not isinstance(resolved, int):
            raise ValueError(f"unknown log level: {level!r}")
    else:
        resolved = level

    root_logger = logging.getLogger()
    if _handler is not None:
        root_logger.removeHandler(_handler)

    _handler = logging.StreamHandler()
    _handler.setFormatter(logging.Formatter(_FORMAT))
    root_logger.addHandler(_handler)
    root_logger.setLevel(resolved)

    logging.getLogger(_ROOT_LOGGER_NAME).setLevel(resolved)


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a namespaced logger rooted under ``movie_feed``."""

    logger_name = _ROOT_LOGGER_NAME if not name else f"{_ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(logger_name)


__all__ = ["configure_logging", "get_logger"]
