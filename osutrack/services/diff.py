"""Field-wise snapshot deltas and top play reconciliation."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Set, Tuple, Union

from ..models import SNAPSHOT_FIELDS, Snapshot, TopPlay

Number = Union[int, float]


@dataclass
class StatsDiff:
    """Change between two observations. Never persisted."""

    baseline: bool
    deltas: Dict[str, Number]
    new_top_plays: List[TopPlay] = field(default_factory=list)


def new_top_plays(old: Sequence[TopPlay], new: Sequence[TopPlay]) -> List[TopPlay]:
    """Return the entries of ``new`` whose (beatmap, score) is not in ``old``.

    pp is deliberately not part of the comparison. Repeated identities
    inside ``new`` are reported once, at their first position.
    """

    seen: Set[Tuple[int, int]] = {play.identity for play in old}
    result: List[TopPlay] = []
    for play in new:
        if play.identity in seen:
            continue
        seen.add(play.identity)
        result.append(play)
    return result


def diff_snapshots(
    prior: Optional[Snapshot],
    current: Snapshot,
    old_top: Sequence[TopPlay] = (),
    new_top: Sequence[TopPlay] = (),
) -> StatsDiff:
    """Compute ``current - prior`` for every numeric field.

    Without a prior snapshot the deltas are the current values and the diff
    is flagged as a baseline. Deltas are signed; ranks going down is normal.
    """

    if prior is None:
        deltas = {name: getattr(current, name) for name in SNAPSHOT_FIELDS}
    else:
        deltas = {
            name: getattr(current, name) - getattr(prior, name) for name in SNAPSHOT_FIELDS
        }
    return StatsDiff(
        baseline=prior is None,
        deltas=deltas,
        new_top_plays=new_top_plays(old_top, new_top),
    )


__all__ = ["StatsDiff", "diff_snapshots", "new_top_plays"]
