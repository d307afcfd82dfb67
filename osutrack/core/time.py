"""Time helpers."""

from __future__ import annotations

from datetime import datetime, timezone


def utcnow() -> datetime:
    """Return the current UTC datetime."""
    return datetime.now(timezone.utc)


def parse_upstream_datetime(raw: str) -> datetime:
    """Parse the upstream ``YYYY-MM-DD HH:MM:SS`` format as a UTC datetime."""
    return datetime.strptime(raw, "%Y-%m-%d %H:%M:%S").replace(tzinfo=timezone.utc)


__all__ = ["parse_upstream_datetime", "utcnow"]
