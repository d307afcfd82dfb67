"""Core configuration and infrastructure helpers."""

from .config import (
    ALLOWED_CORS_ORIGINS,
    DATABASE_URL,
    DB_RESET,
    OSU_API_KEY,
    OSU_API_TIMEOUT,
    OSU_API_URL,
    TOP_PLAYS_LIMIT,
)
from .database import get_session, make_engine
from .errors import (
    BadInput,
    OsuTrackError,
    StoreUnavailable,
    UpstreamParseError,
    UpstreamUnavailable,
)
from .log import configure_logging
from .time import parse_upstream_datetime, utcnow

__all__ = [
    "ALLOWED_CORS_ORIGINS",
    "BadInput",
    "DATABASE_URL",
    "DB_RESET",
    "OSU_API_KEY",
    "OSU_API_TIMEOUT",
    "OSU_API_URL",
    "OsuTrackError",
    "StoreUnavailable",
    "TOP_PLAYS_LIMIT",
    "UpstreamParseError",
    "UpstreamUnavailable",
    "configure_logging",
    "get_session",
    "make_engine",
    "parse_upstream_datetime",
    "utcnow",
]
