"""Database engine construction and session helpers."""

from __future__ import annotations

from pathlib import Path
from typing import Iterator

from fastapi import Request
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.pool import QueuePool, StaticPool
from sqlmodel import Session, create_engine

from .config import DB_MAX_OVERFLOW, DB_POOL_SIZE, DB_POOL_TIMEOUT


def make_engine(
    url: str,
    *,
    pool_size: int = DB_POOL_SIZE,
    max_overflow: int = DB_MAX_OVERFLOW,
    pool_timeout: int = DB_POOL_TIMEOUT,
) -> Engine:
    """Build an engine backed by a bounded connection pool.

    In-memory SQLite databases only exist for a single connection, so they
    share one connection through a ``StaticPool`` instead.
    """

    parsed = make_url(url)
    if parsed.get_backend_name() != "sqlite":
        return create_engine(
            url,
            poolclass=QueuePool,
            pool_size=pool_size,
            max_overflow=max_overflow,
            pool_timeout=pool_timeout,
            pool_pre_ping=True,
        )

    connect_args = {"check_same_thread": False}
    if parsed.database in (None, "", ":memory:"):
        return create_engine(url, connect_args=connect_args, poolclass=StaticPool)

    Path(parsed.database).parent.mkdir(parents=True, exist_ok=True)
    return create_engine(
        url,
        connect_args=connect_args,
        poolclass=QueuePool,
        pool_size=pool_size,
        max_overflow=max_overflow,
        pool_timeout=pool_timeout,
    )


def get_session(request: Request) -> Iterator[Session]:
    """FastAPI dependency that yields a session from the app's engine."""

    with Session(request.app.state.engine) as session:
        yield session


__all__ = ["get_session", "make_engine"]
