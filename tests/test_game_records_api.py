"""
Unit Tests for the Game Records API source
"""

from datetime import datetime

import httpx
import pytest
import pytz

from brain_analytics.domain.entities.entities import Difficulty, GameType
from brain_analytics.domain.exceptions import UpstreamFetchException
from brain_analytics.infrastructure.data_sources.game_records_api import (
    GameRecordsApiConfig,
    GameRecordsApiSource,
)


def make_source(handler):
    config = GameRecordsApiConfig(base_url="http://games.test", api_token="secret")
    client = httpx.Client(transport=httpx.MockTransport(handler))
    return GameRecordsApiSource(config=config, client=client)


class TestGameRecordsApiSource:

    def test_parses_games(self):
        seen = {}

        def handler(request):
            seen["url"] = str(request.url)
            seen["auth"] = request.headers.get("Authorization")
            return httpx.Response(200, json={"games": [
                {
                    "gameType": "memory_game",
                    "difficulty": "hard",
                    "score": 80,
                    "playTime": 42,
                    "mistakes": 2,
                    "completed": True,
                    "timestamp": 1718445600000,
                },
                {
                    "gameType": "puzzle_game",
                    "score": 30,
                    "timestamp": "2024-06-14T08:30:00Z",
                },
            ]})

        records = make_source(handler).get_records("u1")

        assert seen["url"] == "http://games.test/api/users/u1/data"
        assert seen["auth"] == "Bearer secret"
        assert records[0].game_type == GameType.MEMORY_GAME
        assert records[0].difficulty == Difficulty.HARD
        assert records[0].timestamp == pytz.utc.localize(datetime(2024, 6, 15, 10, 0))
        assert records[1].difficulty == Difficulty.MEDIUM
        assert records[1].completed is False
        assert records[1].timestamp == pytz.utc.localize(datetime(2024, 6, 14, 8, 30))

    def test_empty_payload(self):
        source = make_source(lambda request: httpx.Response(200, json={}))

        assert source.get_records("u1") == []

    @pytest.mark.parametrize("response", [
        httpx.Response(500, json={"error": "boom"}),
        httpx.Response(404),
        httpx.Response(200, text="not json"),
        httpx.Response(200, json={"games": "nope"}),
        httpx.Response(200, json={"games": [{"gameType": "chess", "score": 1, "timestamp": 0}]}),
        httpx.Response(200, json={"games": [{"gameType": "memory_game"}]}),
    ])
    def test_failures_raise_upstream_exception(self, response):
        source = make_source(lambda request: response)

        with pytest.raises(UpstreamFetchException):
            source.get_records("u1")

    def test_transport_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(UpstreamFetchException):
            make_source(handler).get_records("u1")
