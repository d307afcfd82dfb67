"""Helpers turning models into API-friendly dicts."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from ..models import SNAPSHOT_FIELDS, Beatmap, Snapshot, TopPlay
from .diff import StatsDiff


def _iso(value: Optional[datetime]) -> Optional[str]:
    if value is None:
        return None
    # SQLite hands datetimes back without tzinfo; everything is stored as UTC.
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.isoformat()


def snapshot_to_dict(snapshot: Snapshot) -> Dict[str, Any]:
    return {
        "id": snapshot.id,
        "player_id": snapshot.player_id,
        "mode": snapshot.mode,
        **{name: getattr(snapshot, name) for name in SNAPSHOT_FIELDS},
        "update_time": _iso(snapshot.update_time),
    }


def top_play_to_dict(play: TopPlay) -> Dict[str, Any]:
    return {
        "id": play.id,
        "player_id": play.player_id,
        "mode": play.mode,
        "beatmap_id": play.beatmap_id,
        "score": play.score,
        "pp": play.pp,
        "enabled_mods": play.enabled_mods,
        "rank": play.rank,
        "score_time": _iso(play.score_time),
        "time_recorded": _iso(play.time_recorded),
    }


def diff_to_dict(diff: StatsDiff) -> Dict[str, Any]:
    return {
        "baseline": diff.baseline,
        **diff.deltas,
        "new_top_plays": [top_play_to_dict(play) for play in diff.new_top_plays],
    }


def beatmap_to_dict(beatmap: Beatmap) -> Dict[str, Any]:
    data = beatmap.model_dump(exclude={"cached_at"})
    data["approved_date"] = _iso(beatmap.approved_date)
    data["last_update"] = _iso(beatmap.last_update)
    return data


__all__ = [
    "beatmap_to_dict",
    "diff_to_dict",
    "snapshot_to_dict",
    "top_play_to_dict",
]
