"""Game mode enumeration."""

from __future__ import annotations

from enum import IntEnum


class GameMode(IntEnum):
    """Game variants tracked separately; values match the upstream ``m`` parameter."""

    STANDARD = 0
    TAIKO = 1
    CATCH = 2
    MANIA = 3


__all__ = ["GameMode"]
