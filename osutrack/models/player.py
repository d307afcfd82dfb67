"""Database model for tracked players."""

from __future__ import annotations

from datetime import datetime

from sqlmodel import Field as ORMField, SQLModel

from ..core.time import utcnow


class Player(SQLModel, table=True):
    """Maps an upstream player id to the last known username."""

    id: int = ORMField(primary_key=True)
    username: str = ORMField(index=True, unique=True, max_length=32)
    first_update: datetime = ORMField(default_factory=utcnow)
    last_update: datetime = ORMField(default_factory=utcnow)


__all__ = ["Player"]
