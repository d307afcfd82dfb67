"""Logging setup."""

from __future__ import annotations

import logging

from .config import LOG_LEVEL

_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = LOG_LEVEL) -> None:
    """Send all records to stderr at ``level``."""

    logging.basicConfig(level=level, format=_FORMAT)


__all__ = ["configure_logging"]
