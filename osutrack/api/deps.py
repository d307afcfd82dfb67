"""Shared FastAPI dependencies."""

from __future__ import annotations

from typing import Iterator

from fastapi import Depends, Request
from sqlmodel import Session

from ..core import BadInput, get_session
from ..models import GameMode
from ..services import KeyedLocks, OsuApiClient, StatsStore


def game_mode(mode: str) -> GameMode:
    """Validate the ``{mode}`` path segment before anything else runs."""

    try:
        return GameMode(int(mode))
    except ValueError as exc:
        allowed = ", ".join(str(m.value) for m in GameMode)
        raise BadInput(f"Invalid mode {mode!r}; expected one of {allowed}") from exc


def get_store(session: Session = Depends(get_session)) -> Iterator[StatsStore]:
    yield StatsStore(session)


def get_upstream(request: Request) -> OsuApiClient:
    return request.app.state.upstream


def get_locks(request: Request) -> KeyedLocks:
    return request.app.state.locks


def get_top_limit(request: Request) -> int:
    return request.app.state.top_plays_limit


__all__ = ["game_mode", "get_locks", "get_store", "get_top_limit", "get_upstream"]
