"""Database model for point-in-time stat snapshots."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import BigInteger, Double, Index
from sqlmodel import Field as ORMField, SQLModel

from ..core.time import utcnow

# Numeric fields compared and diffed between two snapshots, in output order.
SNAPSHOT_FIELDS = (
    "count300",
    "count100",
    "count50",
    "playcount",
    "ranked_score",
    "total_score",
    "pp_rank",
    "level",
    "pp_raw",
    "accuracy",
    "count_rank_ss",
    "count_rank_s",
    "count_rank_a",
    "pp_country_rank",
)


class Snapshot(SQLModel, table=True):
    """A player's cumulative stats for one mode at one point in time.

    ``id`` doubles as the sequence number: it only ever grows for a given
    (player, mode) and rows are never updated or deleted.
    """

    __table_args__ = (
        Index("ix_snapshot_player_mode_id", "player_id", "mode", "id"),
    )

    id: Optional[int] = ORMField(default=None, primary_key=True)
    player_id: int
    mode: int
    count300: int = 0
    count100: int = 0
    count50: int = 0
    playcount: int = 0
    ranked_score: int = ORMField(default=0, sa_type=BigInteger)
    total_score: int = ORMField(default=0, sa_type=BigInteger)
    pp_rank: int = 0
    level: float = 0.0
    pp_raw: float = ORMField(default=0.0, sa_type=Double)
    accuracy: float = 0.0
    count_rank_ss: int = 0
    count_rank_s: int = 0
    count_rank_a: int = 0
    pp_country_rank: int = 0
    update_time: datetime = ORMField(default_factory=utcnow)


__all__ = ["SNAPSHOT_FIELDS", "Snapshot"]
