"""Player stats endpoints.

A player or mode without data answers ``null`` (or ``[]`` for lists) with
status 200; only upstream and store failures produce error statuses.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends

from ...models import GameMode
from ...services import KeyedLocks, OsuApiClient, StatsStore
from ...services.serializers import diff_to_dict, snapshot_to_dict, top_play_to_dict
from ...services.tracking import live_stats, since_last_pp_change, update_player
from ..deps import game_mode, get_locks, get_store, get_top_limit, get_upstream

router = APIRouter(tags=["players"])


@router.get("/update/{username}/{mode}")
async def update(
    username: str,
    mode: GameMode = Depends(game_mode),
    store: StatsStore = Depends(get_store),
    upstream: OsuApiClient = Depends(get_upstream),
    locks: KeyedLocks = Depends(get_locks),
    top_limit: int = Depends(get_top_limit),
) -> Optional[Dict[str, Any]]:
    """Record the player's current stats and return what changed."""

    diff = await update_player(store, upstream, locks, username, mode, top_limit)
    return diff_to_dict(diff) if diff is not None else None


@router.get("/stats/{username}/{mode}")
def stats(
    username: str,
    mode: GameMode = Depends(game_mode),
    store: StatsStore = Depends(get_store),
) -> Optional[Dict[str, Any]]:
    """Latest stored snapshot."""

    player = store.player_by_name(username)
    if player is None:
        return None
    latest = store.latest_snapshot(player.id, mode)
    return snapshot_to_dict(latest) if latest is not None else None


@router.get("/livestats/{username}/{mode}")
async def livestats(
    username: str,
    mode: GameMode = Depends(game_mode),
    store: StatsStore = Depends(get_store),
    upstream: OsuApiClient = Depends(get_upstream),
    locks: KeyedLocks = Depends(get_locks),
) -> Optional[Dict[str, Any]]:
    """Current upstream stats, recorded first if they changed."""

    snapshot = await live_stats(store, upstream, locks, username, mode)
    return snapshot_to_dict(snapshot) if snapshot is not None else None


@router.get("/updates/{username}/{mode}")
def updates(
    username: str,
    mode: GameMode = Depends(game_mode),
    store: StatsStore = Depends(get_store),
) -> List[Dict[str, Any]]:
    """Full snapshot history, oldest first."""

    player = store.player_by_name(username)
    if player is None:
        return []
    return [snapshot_to_dict(s) for s in store.snapshot_history(player.id, mode)]


@router.get("/hiscores/{username}/{mode}")
def hiscores(
    username: str,
    mode: GameMode = Depends(game_mode),
    store: StatsStore = Depends(get_store),
) -> List[Dict[str, Any]]:
    """Every stored top play, ordered by when it was achieved."""

    player = store.player_by_name(username)
    if player is None:
        return []
    return [top_play_to_dict(p) for p in store.top_plays(player.id, mode)]


@router.get("/lastpp/{username}/{mode}")
async def lastpp(
    username: str,
    mode: GameMode = Depends(game_mode),
    store: StatsStore = Depends(get_store),
    upstream: OsuApiClient = Depends(get_upstream),
    top_limit: int = Depends(get_top_limit),
) -> Optional[Dict[str, Any]]:
    """Changes since the player's pp last moved. Writes nothing."""

    diff = await since_last_pp_change(store, upstream, username, mode, top_limit)
    return diff_to_dict(diff) if diff is not None else None


__all__ = ["router"]
