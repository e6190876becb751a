"""
Shared fixtures: a fixed clock, a record factory and a counting record store.
"""

from datetime import datetime, timedelta
from typing import Dict, List, Optional

import pytest
import pytz

from brain_analytics.domain.entities.entities import GameRecord
from brain_analytics.domain.exceptions import UpstreamFetchException
from brain_analytics.domain.repositories.repositories import GameRecordRepository


NOW = pytz.utc.localize(datetime(2024, 6, 15, 12, 0))


def make_record(
    days_ago: float = 0,
    score: int = 50,
    game_type: str = "memory_game",
    difficulty: str = "medium",
    completed: bool = True,
    play_time: float = 60,
    mistakes: int = 0,
    now: datetime = NOW,
    minutes_ago: float = 0,
) -> GameRecord:
    return GameRecord(
        game_type=game_type,
        difficulty=difficulty,
        score=score,
        play_time=play_time,
        completed=completed,
        timestamp=now - timedelta(days=days_ago, minutes=minutes_ago),
        mistakes=mistakes,
    )


class CountingRecordStore(GameRecordRepository):
    """Record store stub that counts fetches and can be told to fail."""

    def __init__(self, records: Optional[Dict[str, List[GameRecord]]] = None):
        self.records = records or {}
        self.calls = 0
        self.fail = False

    def get_records(self, user_id: str) -> List[GameRecord]:
        self.calls += 1
        if self.fail:
            raise UpstreamFetchException("record store unavailable")
        return list(self.records.get(user_id, []))


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def clock():
    return lambda: NOW


@pytest.fixture
def increasing_history():
    """Ten memory_game/medium plays, one per day, scores 40..85."""
    scores = [40, 45, 50, 55, 60, 65, 70, 75, 80, 85]
    return [make_record(days_ago=10 - i, score=s) for i, s in enumerate(scores)]
