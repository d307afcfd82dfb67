"""Unit tests for the osu! API client."""
from __future__ import annotations

import asyncio
from datetime import datetime, timezone

import httpx
import pytest

from osutrack.core.errors import UpstreamParseError, UpstreamUnavailable
from osutrack.models import GameMode

from tests.conftest import PLAYER_ID, USERNAME, mock_best, mock_user, raw_beatmap, raw_play, raw_stats


class TestGetStats:
    def test_parses_quoted_values(self, osu_api, upstream) -> None:
        route = mock_user(osu_api, [raw_stats()])
        stats = asyncio.run(upstream.get_stats(USERNAME, GameMode.TAIKO))

        assert stats.username == USERNAME
        snapshot = stats.snapshot
        assert snapshot.player_id == PLAYER_ID
        assert snapshot.mode == int(GameMode.TAIKO)
        assert snapshot.ranked_score == 5_000_000
        assert snapshot.pp_raw == 1500.0
        assert snapshot.id is None

        params = route.calls.last.request.url.params
        assert params["k"] == "test-key"
        assert params["u"] == USERNAME
        assert params["m"] == "1"

    def test_empty_list_means_no_data(self, osu_api, upstream) -> None:
        mock_user(osu_api, [])
        assert asyncio.run(upstream.get_stats("nobody", GameMode.STANDARD)) is None

    def test_never_played_mode_means_no_data(self, osu_api, upstream) -> None:
        mock_user(osu_api, [raw_stats(playcount=None, pp_rank=None, pp_raw=None)])
        assert asyncio.run(upstream.get_stats(USERNAME, GameMode.MANIA)) is None

    def test_inactive_rank_parses_as_zero(self, osu_api, upstream) -> None:
        mock_user(osu_api, [raw_stats(pp_rank=None, pp_country_rank=None)])
        stats = asyncio.run(upstream.get_stats(USERNAME, GameMode.STANDARD))
        assert stats.snapshot.pp_rank == 0
        assert stats.snapshot.pp_country_rank == 0

    def test_missing_field_is_a_parse_error(self, osu_api, upstream) -> None:
        row = raw_stats()
        del row["pp_rank"]
        mock_user(osu_api, [row])
        with pytest.raises(UpstreamParseError):
            asyncio.run(upstream.get_stats(USERNAME, GameMode.STANDARD))

    def test_garbled_number_is_a_parse_error(self, osu_api, upstream) -> None:
        mock_user(osu_api, [raw_stats(count300="lots")])
        with pytest.raises(UpstreamParseError):
            asyncio.run(upstream.get_stats(USERNAME, GameMode.STANDARD))

    def test_non_list_body_is_a_parse_error(self, osu_api, upstream) -> None:
        osu_api.get("/get_user").mock(
            return_value=httpx.Response(200, json={"error": "Please provide a valid API key."})
        )
        with pytest.raises(UpstreamParseError):
            asyncio.run(upstream.get_stats(USERNAME, GameMode.STANDARD))

    def test_invalid_json_is_a_parse_error(self, osu_api, upstream) -> None:
        osu_api.get("/get_user").mock(return_value=httpx.Response(200, text="<html>"))
        with pytest.raises(UpstreamParseError):
            asyncio.run(upstream.get_stats(USERNAME, GameMode.STANDARD))

    def test_error_status_is_unavailable(self, osu_api, upstream) -> None:
        osu_api.get("/get_user").mock(return_value=httpx.Response(500))
        with pytest.raises(UpstreamUnavailable):
            asyncio.run(upstream.get_stats(USERNAME, GameMode.STANDARD))

    def test_transport_failure_is_unavailable(self, osu_api, upstream) -> None:
        osu_api.get("/get_user").mock(side_effect=httpx.ConnectError("refused"))
        with pytest.raises(UpstreamUnavailable):
            asyncio.run(upstream.get_stats(USERNAME, GameMode.STANDARD))


class TestGetTopPlays:
    def test_keeps_upstream_order_and_sends_limit(self, osu_api, upstream) -> None:
        route = mock_best(osu_api, [raw_play(10, 1000), raw_play(20, 2000)])
        plays = asyncio.run(upstream.get_top_plays(PLAYER_ID, GameMode.STANDARD, 50))

        assert [p.identity for p in plays] == [(10, 1000), (20, 2000)]
        assert plays[0].pp == pytest.approx(123.45)
        assert plays[0].enabled_mods == 8
        assert plays[0].score_time == datetime(2023, 12, 31, 10, 0, tzinfo=timezone.utc)

        params = route.calls.last.request.url.params
        assert params["limit"] == "50"
        assert params["type"] == "id"

    def test_empty_list(self, osu_api, upstream) -> None:
        mock_best(osu_api, [])
        assert asyncio.run(upstream.get_top_plays(PLAYER_ID, GameMode.STANDARD, 10)) == []

    def test_bad_date_is_a_parse_error(self, osu_api, upstream) -> None:
        mock_best(osu_api, [raw_play(10, 1000, date="yesterday")])
        with pytest.raises(UpstreamParseError):
            asyncio.run(upstream.get_top_plays(PLAYER_ID, GameMode.STANDARD, 10))


class TestGetBeatmap:
    def test_parses_metadata(self, osu_api, upstream) -> None:
        osu_api.get("/get_beatmaps").mock(
            return_value=httpx.Response(200, json=[raw_beatmap(75)])
        )
        beatmap = asyncio.run(upstream.get_beatmap(75))
        assert beatmap.beatmap_id == 75
        assert beatmap.difficulty == pytest.approx(5.2)
        assert beatmap.title == "Title"
