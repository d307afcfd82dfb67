"""osu! v1 API client.

Every value in the upstream JSON is a quoted string, so responses are
parsed field by field into unsaved model instances. An empty list means the
upstream has nothing for the query and is reported as ``None`` / ``[]``;
anything else that goes wrong is raised.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, NamedTuple, Optional, TypeVar

import httpx

from ..core.errors import UpstreamParseError, UpstreamUnavailable
from ..core.time import parse_upstream_datetime
from ..models import Beatmap, GameMode, Snapshot, TopPlay

logger = logging.getLogger(__name__)

T = TypeVar("T")


class PlayerStats(NamedTuple):
    """Current stats as reported upstream, plus the canonical username."""

    username: str
    snapshot: Snapshot


def _field(raw: Dict[str, Any], key: str, cast: Callable[[Any], T], default: T) -> T:
    if key not in raw:
        raise UpstreamParseError(f"Upstream response is missing '{key}'")
    value = raw[key]
    if value is None:
        return default
    try:
        return cast(value)
    except (TypeError, ValueError) as exc:
        raise UpstreamParseError(
            f"Upstream value for '{key}' is not a valid {cast.__name__}: {value!r}"
        ) from exc


def _int(raw: Dict[str, Any], key: str) -> int:
    return _field(raw, key, int, 0)


def _float(raw: Dict[str, Any], key: str) -> float:
    return _field(raw, key, float, 0.0)


def _str(raw: Dict[str, Any], key: str) -> str:
    return _field(raw, key, str, "")


def _datetime(raw: Dict[str, Any], key: str):
    value = _str(raw, key)
    if not value:
        return None
    try:
        return parse_upstream_datetime(value)
    except ValueError as exc:
        raise UpstreamParseError(f"Upstream value for '{key}' is not a datetime: {value!r}") from exc


def parse_stats(raw: Dict[str, Any], mode: GameMode) -> Optional[PlayerStats]:
    """Turn one ``get_user`` entry into a ``PlayerStats``.

    Accounts that never played the mode come back with null counters; those
    are treated as having no data.
    """

    if raw.get("playcount") is None:
        return None

    snapshot = Snapshot(
        player_id=_int(raw, "user_id"),
        mode=int(mode),
        count300=_int(raw, "count300"),
        count100=_int(raw, "count100"),
        count50=_int(raw, "count50"),
        playcount=_int(raw, "playcount"),
        ranked_score=_int(raw, "ranked_score"),
        total_score=_int(raw, "total_score"),
        pp_rank=_int(raw, "pp_rank"),
        level=_float(raw, "level"),
        pp_raw=_float(raw, "pp_raw"),
        accuracy=_float(raw, "accuracy"),
        count_rank_ss=_int(raw, "count_rank_ss"),
        count_rank_s=_int(raw, "count_rank_s"),
        count_rank_a=_int(raw, "count_rank_a"),
        pp_country_rank=_int(raw, "pp_country_rank"),
    )
    return PlayerStats(username=_str(raw, "username"), snapshot=snapshot)


def parse_top_play(raw: Dict[str, Any], player_id: int, mode: GameMode) -> TopPlay:
    score_time = _datetime(raw, "date")
    if score_time is None:
        raise UpstreamParseError("Upstream top play has no date")
    return TopPlay(
        player_id=player_id,
        mode=int(mode),
        beatmap_id=_int(raw, "beatmap_id"),
        score=_int(raw, "score"),
        pp=_float(raw, "pp"),
        enabled_mods=_int(raw, "enabled_mods"),
        rank=_str(raw, "rank"),
        score_time=score_time,
    )


def parse_beatmap(raw: Dict[str, Any]) -> Beatmap:
    return Beatmap(
        beatmap_id=_int(raw, "beatmap_id"),
        beatmapset_id=_int(raw, "beatmapset_id"),
        mode=_int(raw, "mode"),
        approved=_int(raw, "approved"),
        approved_date=_datetime(raw, "approved_date"),
        last_update=_datetime(raw, "last_update"),
        total_length=_int(raw, "total_length"),
        hit_length=_int(raw, "hit_length"),
        version=_str(raw, "version"),
        artist=_str(raw, "artist"),
        title=_str(raw, "title"),
        creator=_str(raw, "creator"),
        bpm=_float(raw, "bpm"),
        source=_str(raw, "source"),
        difficulty=_float(raw, "difficultyrating"),
        diff_size=_float(raw, "diff_size"),
        diff_overall=_float(raw, "diff_overall"),
        diff_approach=_float(raw, "diff_approach"),
        diff_drain=_float(raw, "diff_drain"),
    )


class OsuApiClient:
    """Thin async wrapper around the endpoints the tracker needs."""

    def __init__(
        self,
        api_key: str,
        base_url: str,
        timeout: float = 20,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._client = client

    async def _get(self, endpoint: str, params: Dict[str, Any]) -> List[Dict[str, Any]]:
        url = f"{self.base_url}/{endpoint}"
        query = {"k": self.api_key, **params}
        try:
            if self._client is not None:
                response = await self._client.get(url, params=query, timeout=self.timeout)
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await client.get(url, params=query)
        except httpx.HTTPError as exc:
            raise UpstreamUnavailable(
                f"Error while sending request to osu! API: {exc}", {"endpoint": endpoint}
            ) from exc

        if response.status_code != 200:
            raise UpstreamUnavailable(
                f"osu! API answered {response.status_code}",
                {"endpoint": endpoint, "status": response.status_code},
            )

        try:
            payload = response.json()
        except ValueError as exc:
            raise UpstreamParseError(
                "osu! API returned invalid JSON", {"endpoint": endpoint}
            ) from exc

        if not isinstance(payload, list) or not all(isinstance(i, dict) for i in payload):
            raise UpstreamParseError(
                "osu! API returned an unexpected body", {"endpoint": endpoint}
            )
        return payload

    async def get_stats(self, username: str, mode: GameMode) -> Optional[PlayerStats]:
        """Return current stats for ``username`` in ``mode``, or None."""

        rows = await self._get(
            "get_user", {"u": username, "m": int(mode), "type": "string"}
        )
        if not rows:
            logger.debug("No upstream stats for %s in mode %s", username, mode.name)
            return None
        return parse_stats(rows[0], mode)

    async def get_top_plays(self, player_id: int, mode: GameMode, limit: int) -> List[TopPlay]:
        """Return the player's best plays in upstream order."""

        rows = await self._get(
            "get_user_best",
            {"u": player_id, "m": int(mode), "limit": limit, "type": "id"},
        )
        return [parse_top_play(row, player_id, mode) for row in rows]

    async def get_beatmap(self, beatmap_id: int) -> Optional[Beatmap]:
        rows = await self._get("get_beatmaps", {"b": beatmap_id})
        if not rows:
            return None
        return parse_beatmap(rows[0])


__all__ = [
    "OsuApiClient",
    "PlayerStats",
    "parse_beatmap",
    "parse_stats",
    "parse_top_play",
]
