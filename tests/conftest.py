"""Shared fixtures: in-memory store, mocked upstream, app client."""

from __future__ import annotations

import asyncio
import os
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Iterator, List

# Configuration is read at import time.
os.environ.setdefault("OSU_API_KEY", "test-key")
os.environ.setdefault("DATABASE_URL", "sqlite://")

import httpx  # noqa: E402
import pytest  # noqa: E402
import respx  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlmodel import Session, SQLModel  # noqa: E402

from osutrack.app import create_app  # noqa: E402
from osutrack.core import make_engine  # noqa: E402
from osutrack.models import GameMode, Snapshot, TopPlay  # noqa: E402
from osutrack.services import KeyedLocks, OsuApiClient, StatsStore  # noqa: E402

API_URL = "https://osu.test/api"
PLAYER_ID = 2543
USERNAME = "ameo"
T0 = datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


# ---------------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------------

def make_snapshot(**overrides: Any) -> Snapshot:
    values: Dict[str, Any] = dict(
        player_id=PLAYER_ID,
        mode=int(GameMode.STANDARD),
        count300=1000,
        count100=200,
        count50=30,
        playcount=100,
        ranked_score=5_000_000,
        total_score=9_000_000,
        pp_rank=5000,
        level=50.5,
        pp_raw=1500.0,
        accuracy=97.5,
        count_rank_ss=1,
        count_rank_s=10,
        count_rank_a=20,
        pp_country_rank=300,
        update_time=T0,
    )
    values.update(overrides)
    return Snapshot(**values)


def make_play(beatmap_id: int, score: int, **overrides: Any) -> TopPlay:
    values: Dict[str, Any] = dict(
        player_id=PLAYER_ID,
        mode=int(GameMode.STANDARD),
        beatmap_id=beatmap_id,
        score=score,
        pp=100.0,
        enabled_mods=0,
        rank="A",
        score_time=T0 - timedelta(days=1),
        time_recorded=T0,
    )
    values.update(overrides)
    return TopPlay(**values)


def raw_stats(**overrides: Any) -> Dict[str, Any]:
    """A ``get_user`` entry as the upstream sends it: every value quoted."""

    values: Dict[str, Any] = {
        "user_id": str(PLAYER_ID),
        "username": USERNAME,
        "count300": "1000",
        "count100": "200",
        "count50": "30",
        "playcount": "100",
        "ranked_score": "5000000",
        "total_score": "9000000",
        "pp_rank": "5000",
        "level": "50.5",
        "pp_raw": "1500",
        "accuracy": "97.5",
        "count_rank_ss": "1",
        "count_rank_s": "10",
        "count_rank_a": "20",
        "country": "US",
        "pp_country_rank": "300",
        "events": [],
    }
    values.update(overrides)
    return values


def raw_play(beatmap_id: int, score: int, **overrides: Any) -> Dict[str, Any]:
    values: Dict[str, Any] = {
        "beatmap_id": str(beatmap_id),
        "score": str(score),
        "maxcombo": "500",
        "count300": "400",
        "count100": "10",
        "count50": "0",
        "countmiss": "0",
        "perfect": "0",
        "enabled_mods": "8",
        "user_id": str(PLAYER_ID),
        "date": "2023-12-31 10:00:00",
        "rank": "S",
        "pp": "123.45",
    }
    values.update(overrides)
    return values


def raw_beatmap(beatmap_id: int, **overrides: Any) -> Dict[str, Any]:
    values: Dict[str, Any] = {
        "beatmapset_id": "1000",
        "beatmap_id": str(beatmap_id),
        "approved": "1",
        "total_length": "120",
        "hit_length": "110",
        "version": "Insane",
        "file_md5": "abc",
        "diff_size": "4",
        "diff_overall": "8",
        "diff_approach": "9",
        "diff_drain": "6",
        "mode": "0",
        "approved_date": "2020-01-01 00:00:00",
        "last_update": "2019-12-25 00:00:00",
        "artist": "Artist",
        "title": "Title",
        "creator": "Mapper",
        "bpm": "180",
        "source": "",
        "difficultyrating": "5.2",
    }
    values.update(overrides)
    return values


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def engine():
    engine = make_engine("sqlite://")
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def pooled_engine(tmp_path):
    """A file database behind a one-connection pool that gives up after 2s."""

    engine = make_engine(
        f"sqlite:///{tmp_path / 'pooled.db'}", pool_size=1, max_overflow=0, pool_timeout=2
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine) -> Iterator[Session]:
    with Session(engine) as session:
        yield session


@pytest.fixture
def store(session) -> StatsStore:
    return StatsStore(session)


@pytest.fixture
def osu_api() -> respx.Router:
    return respx.Router(base_url=API_URL, assert_all_called=False)


@pytest.fixture
def upstream(osu_api) -> OsuApiClient:
    client = httpx.AsyncClient(transport=httpx.MockTransport(osu_api.handler))
    return OsuApiClient("test-key", API_URL, client=client)


@pytest.fixture
def slow_upstream(osu_api) -> OsuApiClient:
    """Like ``upstream``, but every request yields to the event loop first."""

    async def handler(request: httpx.Request) -> httpx.Response:
        await asyncio.sleep(0.2)
        return osu_api.handler(request)

    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return OsuApiClient("test-key", API_URL, client=client)


@pytest.fixture
def locks() -> KeyedLocks:
    return KeyedLocks()


@pytest.fixture
def client(engine, upstream) -> Iterator[TestClient]:
    app = create_app(engine=engine, upstream=upstream, top_plays_limit=100)
    with TestClient(app) as client:
        yield client


def mock_user(osu_api: respx.Router, rows: List[Dict[str, Any]]) -> respx.Route:
    return osu_api.get("/get_user").mock(return_value=httpx.Response(200, json=rows))


def mock_best(osu_api: respx.Router, rows: List[Dict[str, Any]]) -> respx.Route:
    return osu_api.get("/get_user_best").mock(return_value=httpx.Response(200, json=rows))


