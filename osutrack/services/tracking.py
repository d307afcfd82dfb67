"""Request flows combining the upstream client, the store and the diff engine.

Upstream calls all finish before the store is touched. Store work runs in
the threadpool and hands its pooled connection back before the flow
continues, so a request waiting on the pool never blocks the event loop.
Flows that write hold the player's (id, mode) lock from reading the latest
snapshot until the last write, so two concurrent updates cannot both
decide to insert.
"""

from __future__ import annotations

import logging
import re
from typing import Dict, List, Optional

from starlette.concurrency import run_in_threadpool

from ..core.errors import BadInput
from ..models import Beatmap, GameMode, Snapshot, TopPlay
from .anchors import resolve_anchors
from .change_detector import should_store
from .diff import StatsDiff, diff_snapshots
from .locks import KeyedLocks
from .store import StatsStore
from .upstream import OsuApiClient, PlayerStats

logger = logging.getLogger(__name__)

MAX_BEATMAP_IDS = 50
_ID_LIST = re.compile(r"^\d+(,\d+)*$")


def _record_if_changed(
    store: StatsStore, username: str, fetched: Snapshot, mode: GameMode
) -> Optional[Snapshot]:
    """Register the player and append ``fetched`` when it is worth keeping.

    Returns the snapshot that was latest before this observation.
    """

    store.record_player(fetched.player_id, username)
    latest = store.latest_snapshot(fetched.player_id, mode)
    if should_store(latest, fetched):
        store.append_snapshot(fetched)
        logger.info(
            "Stored snapshot %s for player %s in mode %s",
            fetched.id,
            fetched.player_id,
            mode.name,
        )
    else:
        logger.debug(
            "Nothing changed for player %s in mode %s, snapshot skipped",
            fetched.player_id,
            mode.name,
        )
    return latest


def _apply_update(
    store: StatsStore, stats: PlayerStats, mode: GameMode, current_top: List[TopPlay]
) -> StatsDiff:
    fetched = stats.snapshot
    try:
        latest = _record_if_changed(store, stats.username, fetched, mode)
        stored_top = store.top_plays(fetched.player_id, mode)
        diff = diff_snapshots(latest, fetched, stored_top, current_top)
        if diff.new_top_plays:
            store.append_top_plays(diff.new_top_plays)
            logger.info(
                "Stored %d new top plays for player %s in mode %s",
                len(diff.new_top_plays),
                fetched.player_id,
                mode.name,
            )
        return diff
    finally:
        store.release()


async def update_player(
    store: StatsStore,
    upstream: OsuApiClient,
    locks: KeyedLocks,
    username: str,
    mode: GameMode,
    top_limit: int,
) -> Optional[StatsDiff]:
    """Fetch, record and diff against the latest stored snapshot.

    Returns None when the upstream has no stats for the player in ``mode``.
    """

    stats = await upstream.get_stats(username, mode)
    if stats is None:
        return None
    current_top = await upstream.get_top_plays(stats.snapshot.player_id, mode, top_limit)

    async with locks.hold((stats.snapshot.player_id, int(mode))):
        return await run_in_threadpool(_apply_update, store, stats, mode, current_top)


def _apply_live_stats(store: StatsStore, stats: PlayerStats, mode: GameMode) -> None:
    try:
        _record_if_changed(store, stats.username, stats.snapshot, mode)
    finally:
        store.release()


async def live_stats(
    store: StatsStore,
    upstream: OsuApiClient,
    locks: KeyedLocks,
    username: str,
    mode: GameMode,
) -> Optional[Snapshot]:
    """Return the current upstream stats, recording them if they changed."""

    stats = await upstream.get_stats(username, mode)
    if stats is None:
        return None
    async with locks.hold((stats.snapshot.player_id, int(mode))):
        await run_in_threadpool(_apply_live_stats, store, stats, mode)
    return stats.snapshot


def _diff_since_last_change(
    store: StatsStore, current: Snapshot, mode: GameMode, current_top: List[TopPlay]
) -> StatsDiff:
    player_id = current.player_id
    try:
        anchors = resolve_anchors(store, player_id, mode, current.pp_raw)

        old_top: List[TopPlay]
        if anchors.first_same is not None:
            old_top = store.top_plays_recorded_before(
                player_id, mode, anchors.first_same.update_time
            )
        elif anchors.last_different is not None:
            old_top = store.top_plays(player_id, mode)
        else:
            old_top = []

        return diff_snapshots(anchors.last_different, current, old_top, current_top)
    finally:
        store.release()


async def since_last_pp_change(
    store: StatsStore,
    upstream: OsuApiClient,
    username: str,
    mode: GameMode,
    top_limit: int,
) -> Optional[StatsDiff]:
    """Diff current stats against the last snapshot with a different pp.

    Read-only. Top plays count as new unless they were stored before the
    history first showed the current pp value. Both upstream calls finish
    before the store is touched.
    """

    stats = await upstream.get_stats(username, mode)
    if stats is None:
        return None
    current = stats.snapshot
    current_top = await upstream.get_top_plays(current.player_id, mode, top_limit)
    return await run_in_threadpool(_diff_since_last_change, store, current, mode, current_top)


def parse_beatmap_ids(raw: str) -> List[int]:
    """Parse a comma-separated id list, keeping first-seen order."""

    cleaned = raw.replace(" ", "")
    if not _ID_LIST.match(cleaned):
        raise BadInput("Beatmap ids must be a comma-separated list of integers")
    ids: List[int] = []
    for part in cleaned.split(","):
        value = int(part)
        if value not in ids:
            ids.append(value)
    if len(ids) > MAX_BEATMAP_IDS:
        raise BadInput(f"At most {MAX_BEATMAP_IDS} beatmap ids per request")
    return ids


def _cached_beatmaps(store: StatsStore, beatmap_ids: List[int]) -> Dict[int, Beatmap]:
    try:
        return store.beatmaps(beatmap_ids)
    finally:
        store.release()


def _cache_beatmaps(store: StatsStore, beatmaps: List[Beatmap]) -> None:
    try:
        store.put_beatmaps(beatmaps)
    finally:
        store.release()


async def lookup_beatmaps(
    store: StatsStore, upstream: OsuApiClient, beatmap_ids: List[int]
) -> List[Beatmap]:
    """Serve beatmaps from the cache, fetching and caching the misses."""

    cached = await run_in_threadpool(_cached_beatmaps, store, beatmap_ids)
    fetched: List[Beatmap] = []
    for beatmap_id in beatmap_ids:
        if beatmap_id in cached:
            continue
        beatmap = await upstream.get_beatmap(beatmap_id)
        if beatmap is None:
            logger.debug("Beatmap %s unknown upstream", beatmap_id)
            continue
        fetched.append(beatmap)
    if fetched:
        await run_in_threadpool(_cache_beatmaps, store, fetched)
        cached.update({beatmap.beatmap_id: beatmap for beatmap in fetched})
    return [cached[i] for i in beatmap_ids if i in cached]


__all__ = [
    "MAX_BEATMAP_IDS",
    "live_stats",
    "lookup_beatmaps",
    "parse_beatmap_ids",
    "since_last_pp_change",
    "update_player",
]
