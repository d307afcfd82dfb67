"""Database model for top-score achievements."""

from __future__ import annotations

from datetime import datetime
from typing import Optional, Tuple

from sqlalchemy import BigInteger, Double, Index
from sqlmodel import Field as ORMField, SQLModel

from ..core.time import utcnow


class TopPlay(SQLModel, table=True):
    """A best-score achievement on one beatmap.

    Two plays are the same achievement when they share ``beatmap_id`` and
    ``score``; pp and mods may be re-reported differently over time.
    """

    __tablename__ = "top_play"
    __table_args__ = (
        Index("ix_top_play_player_mode_recorded", "player_id", "mode", "time_recorded"),
    )

    id: Optional[int] = ORMField(default=None, primary_key=True)
    player_id: int
    mode: int
    beatmap_id: int
    score: int = ORMField(sa_type=BigInteger)
    pp: float = ORMField(default=0.0, sa_type=Double)
    enabled_mods: int = 0
    rank: str = ORMField(default="", max_length=3)
    score_time: datetime
    time_recorded: datetime = ORMField(default_factory=utcnow)

    @property
    def identity(self) -> Tuple[int, int]:
        return (self.beatmap_id, self.score)


__all__ = ["TopPlay"]
