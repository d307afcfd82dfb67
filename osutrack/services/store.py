"""Persistence adapter over a SQLModel session.

Snapshots and top plays are append-only: nothing here updates or deletes
them. Every query failure, including waiting too long for a pooled
connection, is re-raised as ``StoreUnavailable``.
"""

from __future__ import annotations

import functools
import logging
from datetime import datetime
from typing import Callable, Dict, Iterable, List, Optional, Sequence, TypeVar

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from ..core.errors import StoreUnavailable
from ..core.time import utcnow
from ..models import Beatmap, GameMode, Player, Snapshot, TopPlay

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable)


def _store_errors(func: F) -> F:
    @functools.wraps(func)
    def wrapper(self: "StatsStore", *args, **kwargs):
        try:
            return func(self, *args, **kwargs)
        except SQLAlchemyError as exc:
            self.session.rollback()
            logger.error("Store operation %s failed: %s", func.__name__, exc)
            raise StoreUnavailable(f"Store operation failed: {func.__name__}") from exc

    return wrapper  # type: ignore[return-value]


class StatsStore:
    """Keyed lookups and appends for one request's session."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def release(self) -> None:
        """Hand the pooled connection back. Loaded objects stay readable."""

        self.session.close()

    # Players ---------------------------------------------------------------

    @_store_errors
    def player_by_name(self, username: str) -> Optional[Player]:
        """Look a player up by name, ignoring case."""

        return self.session.exec(
            select(Player).where(func.lower(Player.username) == username.lower())
        ).first()

    @_store_errors
    def record_player(self, player_id: int, username: str) -> Player:
        """Register a player on first sight, or bump ``last_update``."""

        now = utcnow()
        # A renamed account may have left the name on another id.
        stale = self.session.exec(
            select(Player).where(
                func.lower(Player.username) == username.lower(), Player.id != player_id
            )
        ).first()
        if stale is not None:
            logger.info("Name %s moved from player %s to %s", username, stale.id, player_id)
            stale.username = f"{stale.username}#{stale.id}"[:32]
            self.session.add(stale)
            self.session.flush()

        player = self.session.get(Player, player_id)
        if player is None:
            player = Player(id=player_id, username=username, first_update=now, last_update=now)
        else:
            player.username = username
            player.last_update = now
        self.session.add(player)
        self.session.commit()
        self.session.refresh(player)
        return player

    # Snapshots -------------------------------------------------------------

    @_store_errors
    def latest_snapshot(self, player_id: int, mode: GameMode) -> Optional[Snapshot]:
        return self.session.exec(
            select(Snapshot)
            .where(Snapshot.player_id == player_id, Snapshot.mode == int(mode))
            .order_by(Snapshot.id.desc())
            .limit(1)
        ).first()

    @_store_errors
    def snapshot_history(self, player_id: int, mode: GameMode) -> List[Snapshot]:
        """All snapshots, oldest first."""

        return list(
            self.session.exec(
                select(Snapshot)
                .where(Snapshot.player_id == player_id, Snapshot.mode == int(mode))
                .order_by(Snapshot.update_time.asc(), Snapshot.id.asc())
            ).all()
        )

    @_store_errors
    def append_snapshot(self, snapshot: Snapshot) -> Snapshot:
        self.session.add(snapshot)
        self.session.commit()
        self.session.refresh(snapshot)
        return snapshot

    @_store_errors
    def last_snapshot_with_pp_other_than(
        self, player_id: int, mode: GameMode, pp_raw: float
    ) -> Optional[Snapshot]:
        return self.session.exec(
            select(Snapshot)
            .where(
                Snapshot.player_id == player_id,
                Snapshot.mode == int(mode),
                Snapshot.pp_raw != pp_raw,
            )
            .order_by(Snapshot.id.desc())
            .limit(1)
        ).first()

    @_store_errors
    def first_snapshot_with_pp_after(
        self, player_id: int, mode: GameMode, pp_raw: float, after_id: int
    ) -> Optional[Snapshot]:
        return self.session.exec(
            select(Snapshot)
            .where(
                Snapshot.player_id == player_id,
                Snapshot.mode == int(mode),
                Snapshot.id > after_id,
                Snapshot.pp_raw == pp_raw,
            )
            .order_by(Snapshot.id.asc())
            .limit(1)
        ).first()

    # Top plays -------------------------------------------------------------

    @_store_errors
    def top_plays(self, player_id: int, mode: GameMode) -> List[TopPlay]:
        """All stored top plays, ordered by when they were achieved."""

        return list(
            self.session.exec(
                select(TopPlay)
                .where(TopPlay.player_id == player_id, TopPlay.mode == int(mode))
                .order_by(TopPlay.score_time.asc(), TopPlay.id.asc())
            ).all()
        )

    @_store_errors
    def top_plays_recorded_before(
        self, player_id: int, mode: GameMode, before: datetime
    ) -> List[TopPlay]:
        return list(
            self.session.exec(
                select(TopPlay)
                .where(
                    TopPlay.player_id == player_id,
                    TopPlay.mode == int(mode),
                    TopPlay.time_recorded < before,
                )
                .order_by(TopPlay.score_time.asc(), TopPlay.id.asc())
            ).all()
        )

    @_store_errors
    def append_top_plays(self, plays: Sequence[TopPlay]) -> List[TopPlay]:
        if not plays:
            return []
        self.session.add_all(plays)
        self.session.commit()
        for play in plays:
            self.session.refresh(play)
        return list(plays)

    # Beatmap cache ---------------------------------------------------------

    @_store_errors
    def beatmaps(self, beatmap_ids: Iterable[int]) -> Dict[int, Beatmap]:
        ids = list(beatmap_ids)
        if not ids:
            return {}
        rows = self.session.exec(select(Beatmap).where(Beatmap.beatmap_id.in_(ids))).all()
        return {row.beatmap_id: row for row in rows}

    @_store_errors
    def put_beatmaps(self, beatmaps: Sequence[Beatmap]) -> None:
        for beatmap in beatmaps:
            self.session.merge(beatmap)
        self.session.commit()


__all__ = ["StatsStore"]
