"""Reference points for "since the performance value last changed" queries.

Snapshots are only written when ranks or play count move, so pp changes
are sampled sparsely. Two anchors bound the comparison:

* ``last_different``: the newest snapshot whose pp differs from the
  current value. This is the "before" side of the diff.
* ``first_same``: the oldest snapshot after ``last_different`` already
  carrying the current pp. Top plays recorded from that moment on were
  already part of the current pp.
"""

from __future__ import annotations

from typing import NamedTuple, Optional

from ..models import GameMode, Snapshot
from .store import StatsStore


class Anchors(NamedTuple):
    last_different: Optional[Snapshot]
    first_same: Optional[Snapshot]


def resolve_anchors(
    store: StatsStore, player_id: int, mode: GameMode, current_pp: float
) -> Anchors:
    """Locate both anchors with two indexed range lookups."""

    last_different = store.last_snapshot_with_pp_other_than(player_id, mode, current_pp)
    if last_different is None:
        return Anchors(None, None)

    first_same = store.first_snapshot_with_pp_after(
        player_id, mode, current_pp, after_id=last_different.id
    )
    return Anchors(last_different, first_same)


__all__ = ["Anchors", "resolve_anchors"]
