"""
Unit Tests for Record Stores

Tests the SQL, in-memory and CSV-backed record stores.
"""

from datetime import datetime

import pandas as pd
import pytest
import pytz

from brain_analytics.domain.entities.entities import GameType
from brain_analytics.domain.exceptions import UpstreamFetchException
from brain_analytics.infrastructure.data_sources.csv_export import load_csv_store, parse_records
from brain_analytics.infrastructure.database.database_service import DatabaseService
from brain_analytics.infrastructure.repositories.game_record_repository import (
    InMemoryGameRecordRepository,
    SqlGameRecordRepository,
)
from tests.conftest import make_record


class TestSqlGameRecordRepository:

    @pytest.fixture
    def repository(self, tmp_path):
        db = DatabaseService(f"sqlite:///{tmp_path / 'records.db'}")
        repository = SqlGameRecordRepository(db)
        repository.create_tables()
        return repository

    def test_round_trip_ordered_by_time(self, repository):
        repository.add_record("u1", make_record(days_ago=1, score=70))
        repository.add_record("u1", make_record(days_ago=3, score=30, game_type="puzzle_game"))
        repository.add_record("u2", make_record(days_ago=2))

        records = repository.get_records("u1")

        assert [r.score for r in records] == [30, 70]
        assert records[0].game_type == GameType.PUZZLE_GAME
        assert records[1].timestamp == make_record(days_ago=1).timestamp
        assert records[1].timestamp.tzinfo is not None

    def test_in_memory_database_is_shared_across_sessions(self):
        repository = SqlGameRecordRepository(DatabaseService("sqlite://"))
        repository.create_tables()
        repository.add_record("u1", make_record())

        assert len(repository.get_records("u1")) == 1

    def test_unknown_user_has_no_records(self, repository):
        assert repository.get_records("nobody") == []

    def test_database_errors_are_upstream_failures(self, tmp_path):
        # Tables never created
        repository = SqlGameRecordRepository(DatabaseService(f"sqlite:///{tmp_path / 'empty.db'}"))

        with pytest.raises(UpstreamFetchException):
            repository.get_records("u1")


class TestInMemoryGameRecordRepository:

    def test_records_per_user(self):
        repository = InMemoryGameRecordRepository({"u1": [make_record()]})
        repository.add_record("u2", make_record(score=80))

        assert len(repository.get_records("u1")) == 1
        assert repository.get_records("u2")[0].score == 80
        assert repository.get_records("u3") == []
        assert sorted(repository.user_ids()) == ["u1", "u2"]

    def test_returns_a_copy(self):
        repository = InMemoryGameRecordRepository({"u1": [make_record()]})

        repository.get_records("u1").clear()

        assert len(repository.get_records("u1")) == 1


class TestCsvExport:

    def test_load_csv(self, tmp_path):
        path = tmp_path / "records.csv"
        path.write_text(
            "userId,gameType,difficulty,score,playTime,mistakes,completed,createdAt\n"
            "u1,memory_game,easy,70,45.5,1,true,2024-06-14T10:00:00Z\n"
            "u1,reaction_game,hard,40,20,0,false,2024-06-13T10:00:00Z\n"
            "u2,chess,easy,10,5,0,true,2024-06-13T10:00:00Z\n"
        )

        store = load_csv_store(path)

        records = store.get_records("u1")
        assert len(records) == 2
        assert records[0].play_time == 45.5
        assert records[0].completed is True
        assert records[1].completed is False
        assert records[0].timestamp == pytz.utc.localize(datetime(2024, 6, 14, 10, 0))
        # Unknown game skipped
        assert store.get_records("u2") == []

    def test_epoch_millisecond_timestamps(self):
        df = pd.DataFrame([{
            "user_id": "u1",
            "game_type": "calculation_game",
            "score": 55,
            "timestamp": 1718445600000,
        }])

        records = parse_records(df)

        record = records["u1"][0]
        assert record.timestamp == pytz.utc.localize(datetime(2024, 6, 15, 10, 0))
        assert record.difficulty.value == "medium"
        assert record.completed is False

    def test_missing_columns(self):
        with pytest.raises(ValueError):
            parse_records(pd.DataFrame([{"user_id": "u1"}]))
