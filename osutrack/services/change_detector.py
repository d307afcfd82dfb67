"""Write-suppression rule for freshly fetched snapshots."""

from __future__ import annotations

from typing import Optional

from ..models import Snapshot

# A new snapshot is only worth keeping when one of these moved.
_TRIGGER_FIELDS = ("pp_rank", "pp_country_rank", "playcount")


def should_store(latest: Optional[Snapshot], fetched: Snapshot) -> bool:
    """Return True if ``fetched`` should be appended to the history."""

    if latest is None:
        return True
    return any(
        getattr(latest, field) != getattr(fetched, field) for field in _TRIGGER_FIELDS
    )


__all__ = ["should_store"]
