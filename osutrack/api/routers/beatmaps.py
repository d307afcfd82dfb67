"""Beatmap metadata endpoints."""

from __future__ import annotations

from typing import Any, Dict, List

from fastapi import APIRouter, Depends

from ...services import OsuApiClient, StatsStore
from ...services.serializers import beatmap_to_dict
from ...services.tracking import lookup_beatmaps, parse_beatmap_ids
from ..deps import get_store, get_upstream

router = APIRouter(tags=["beatmaps"])


@router.get("/beatmaps/{ids}")
async def beatmaps(
    ids: str,
    store: StatsStore = Depends(get_store),
    upstream: OsuApiClient = Depends(get_upstream),
) -> List[Dict[str, Any]]:
    """Metadata for a comma-separated list of beatmap ids."""

    beatmap_ids = parse_beatmap_ids(ids)
    return [beatmap_to_dict(b) for b in await lookup_beatmaps(store, upstream, beatmap_ids)]


__all__ = ["router"]
