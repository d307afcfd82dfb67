"""Application settings and environment helpers."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable, List, Optional

from dotenv import load_dotenv

load_dotenv(override=False)


def _require_env(name: str) -> str:
    """Return a required environment variable or raise an error."""

    value = os.getenv(name)
    if not value:
        raise RuntimeError(f"Missing required environment variable: {name}")
    return value


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise RuntimeError(f"{name} must be an integer") from exc


def _split_csv(raw: Optional[str]) -> List[str]:
    if not raw:
        return []
    return [item.strip() for item in raw.split(",") if item.strip()]


def _unique(values: Iterable[str]) -> List[str]:
    seen = set()
    ordered: List[str] = []
    for value in values:
        if value not in seen:
            seen.add(value)
            ordered.append(value)
    return ordered


# Upstream osu! API ----------------------------------------------------------
OSU_API_KEY = _require_env("OSU_API_KEY")
OSU_API_URL = os.getenv("OSU_API_URL", "https://osu.ppy.sh/api").rstrip("/")
OSU_API_TIMEOUT = _env_int("OSU_API_TIMEOUT", 20)

# The upstream refuses limits outside 1..100.
TOP_PLAYS_LIMIT = min(max(_env_int("TOP_PLAYS_LIMIT", 100), 1), 100)


# Storage --------------------------------------------------------------------
_PROJECT_ROOT = Path(__file__).resolve().parents[2]

DATABASE_URL = os.getenv("DATABASE_URL") or (
    f"sqlite:///{_PROJECT_ROOT / 'data' / 'osutrack.db'}"
)
DB_POOL_SIZE = _env_int("DB_POOL_SIZE", 5)
DB_MAX_OVERFLOW = _env_int("DB_MAX_OVERFLOW", 0)
DB_POOL_TIMEOUT = _env_int("DB_POOL_TIMEOUT", 10)
DB_RESET = _env_bool("DB_RESET", False)


# HTTP surface ---------------------------------------------------------------
def build_cors_origins(frontend: Optional[str], additional: Optional[str]) -> List[str]:
    """Origins the browser frontend may call from, first occurrence wins.

    ``frontend`` may itself be a comma-separated list for multi-domain deploys.
    Local development sets FRONTEND_ORIGIN to the dev server like any deploy.
    """

    return _unique([*_split_csv(frontend), *_split_csv(additional)])


ALLOWED_CORS_ORIGINS = build_cors_origins(
    os.getenv("FRONTEND_ORIGIN"), os.getenv("ADDITIONAL_ALLOWED_ORIGINS")
)

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()


__all__ = [
    "ALLOWED_CORS_ORIGINS",
    "DATABASE_URL",
    "DB_MAX_OVERFLOW",
    "DB_POOL_SIZE",
    "DB_POOL_TIMEOUT",
    "DB_RESET",
    "LOG_LEVEL",
    "OSU_API_KEY",
    "OSU_API_TIMEOUT",
    "OSU_API_URL",
    "TOP_PLAYS_LIMIT",
    "build_cors_origins",
]
