"""Database model exports."""

from .beatmap import Beatmap
from .mode import GameMode
from .player import Player
from .snapshot import SNAPSHOT_FIELDS, Snapshot
from .top_play import TopPlay

__all__ = [
    "Beatmap",
    "GameMode",
    "Player",
    "SNAPSHOT_FIELDS",
    "Snapshot",
    "TopPlay",
]
