"""Shared logging configuration."""

from __future__ import annotations

import logging
import os

_ENV_LEVEL = "DEBMANIFEST_LOG_LEVEL"
_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def _resolve_level(value: int | str | None) -> int:
    if isinstance(value, int):
        return value
    for candidate in (value, os.environ.get(_ENV_LEVEL)):
        if isinstance(candidate, str):
            level = logging.getLevelName(candidate.strip().upper())
            if isinstance(level, int):
                return level
    return logging.INFO


def configure_logging(level: int | str | None = None) -> None:
    """Configure the root logger once; later calls only adjust the level."""
    resolved = _resolve_level(level)
    root = logging.getLogger()
    if not root.hasHandlers():
        logging.basicConfig(level=resolved, format=_FORMAT)
    else:
        root.setLevel(resolved)


def get_logger(name: str | None = None) -> logging.Logger:
    return logging.getLogger(name or "debmanifest")
