"""
Unit Tests for Domain Entities

Tests entity validation and value objects.
"""

from datetime import datetime

import pytest
import pytz

from brain_analytics.config import PredictorConfig
from brain_analytics.domain.entities.entities import (
    ChurnPrediction,
    Difficulty,
    GameRecord,
    GameType,
    RiskLevel,
    ScorePrediction,
)
from brain_analytics.domain.exceptions import InvalidInputException
from brain_analytics.domain.value_objects.value_objects import (
    PredictionErrorKind,
    PredictionOutcome,
    ScoreRange,
)


class TestGameRecord:

    def test_parses_identifiers(self):
        record = GameRecord(
            game_type="reaction_game",
            difficulty="expert",
            score=10,
            play_time=30,
            completed=True,
            timestamp=datetime(2024, 1, 1, 9, 0),
        )

        assert record.game_type == GameType.REACTION_GAME
        assert record.difficulty == Difficulty.EXPERT
        # Naive timestamps are treated as UTC
        assert record.timestamp == pytz.utc.localize(datetime(2024, 1, 1, 9, 0))

    def test_negative_score_rejected(self):
        with pytest.raises(ValueError):
            GameRecord("memory_game", "easy", -1, 30, True, datetime(2024, 1, 1))

    def test_unknown_game_rejected(self):
        with pytest.raises(InvalidInputException):
            GameRecord("chess", "easy", 10, 30, True, datetime(2024, 1, 1))

    def test_records_are_immutable(self):
        record = GameRecord("memory_game", "easy", 10, 30, True, datetime(2024, 1, 1))
        with pytest.raises(AttributeError):
            record.score = 99


class TestEnums:

    def test_difficulty_encoding_and_multiplier(self):
        assert [d.encoding for d in Difficulty] == [1, 2, 3, 4]
        assert Difficulty.EXPERT.multiplier == 3.0

    def test_catalog_order_and_names(self):
        assert [g.value for g in GameType] == [
            "memory_game", "reaction_game", "calculation_game", "pattern_memory", "puzzle_game",
        ]
        assert GameType.REACTION_GAME.display_name == "Reaction Speed Game"

    def test_parse_unknown_difficulty(self):
        with pytest.raises(InvalidInputException):
            Difficulty.parse("nightmare")


class TestPredictions:

    def test_score_confidence_validated(self):
        with pytest.raises(ValueError):
            ScorePrediction(prediction=50, confidence=1.5, range=ScoreRange(40, 60), horizon=7)

    def test_churn_probability_validated(self):
        with pytest.raises(ValueError):
            ChurnPrediction(probability=-0.1, confidence=0.5, risk_level=RiskLevel.LOW, horizon=30)


class TestValueObjects:

    def test_score_range(self):
        score_range = ScoreRange(40, 60)
        assert score_range.width == 20
        assert 50 in score_range
        assert 70 not in score_range

    def test_score_range_rejects_inverted_bounds(self):
        with pytest.raises(ValueError):
            ScoreRange(60, 40)

    def test_outcome_needs_exactly_one_of_value_or_error(self):
        with pytest.raises(ValueError):
            PredictionOutcome()
        with pytest.raises(ValueError):
            PredictionOutcome(value=1, error=PredictionErrorKind.INVALID_INPUT)

        assert PredictionOutcome.success(1).is_success
        assert not PredictionOutcome.failure(PredictionErrorKind.INSUFFICIENT_DATA).is_success


class TestConfig:

    def test_defaults(self, monkeypatch):
        for name in ("PREDICTION_HORIZON_DEFAULT", "CHURN_HORIZON_DEFAULT", "MIN_DATA_POINTS",
                     "CONFIDENCE_THRESHOLD", "CACHE_REFRESH_INTERVAL_MS"):
            monkeypatch.delenv(name, raising=False)

        config = PredictorConfig()

        assert config.score_horizon_default == 7
        assert config.churn_horizon_default == 30
        assert config.min_data_points == 20
        assert config.confidence_threshold == 0.7
        assert config.cache_refresh_interval_seconds == 86400.0

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("PREDICTION_HORIZON_DEFAULT", "14")
        monkeypatch.setenv("CACHE_REFRESH_INTERVAL_MS", "1000")

        config = PredictorConfig()

        assert config.engagement_horizon_default == 14
        assert config.cache_refresh_interval_seconds == 1.0

    def test_invalid_threshold(self):
        with pytest.raises(ValueError):
            PredictorConfig(confidence_threshold=2.0)
