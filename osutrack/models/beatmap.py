"""Database model for cached beatmap metadata."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlmodel import Field as ORMField, SQLModel

from ..core.time import utcnow


class Beatmap(SQLModel, table=True):
    """Static beatmap metadata, cached to avoid an upstream call per lookup."""

    beatmap_id: int = ORMField(primary_key=True)
    beatmapset_id: int = ORMField(index=True)
    mode: int
    approved: int
    approved_date: Optional[datetime] = None
    last_update: Optional[datetime] = None
    total_length: int
    hit_length: int
    version: str
    artist: str
    title: str
    creator: str
    bpm: float
    source: str = ""
    difficulty: float
    diff_size: float
    diff_overall: float
    diff_approach: float
    diff_drain: float
    cached_at: datetime = ORMField(default_factory=utcnow)


__all__ = ["Beatmap"]
