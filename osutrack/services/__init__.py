"""Service layer helpers."""

from .anchors import Anchors, resolve_anchors
from .change_detector import should_store
from .diff import StatsDiff, diff_snapshots, new_top_plays
from .locks import KeyedLocks
from .store import StatsStore
from .upstream import OsuApiClient, PlayerStats

__all__ = [
    "Anchors",
    "KeyedLocks",
    "OsuApiClient",
    "PlayerStats",
    "StatsDiff",
    "StatsStore",
    "diff_snapshots",
    "new_top_plays",
    "resolve_anchors",
    "should_store",
]
