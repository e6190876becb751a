"""
Unit Tests for Feature Extractor

Tests windowing, minimum record counts and the computed feature vectors.
"""

import pytest

from brain_analytics.domain.entities.entities import Difficulty, GameType
from brain_analytics.domain.entities.features import DifficultyFeatures, ScoreFeatures
from brain_analytics.domain.services.feature_extractor import FeatureExtractor
from tests.conftest import make_record


@pytest.fixture
def extractor(clock):
    return FeatureExtractor(clock=clock)


class TestScoreFeatures:
    """Tests for score feature extraction."""

    @pytest.mark.parametrize("count", [0, 1, 4])
    def test_sparse_window_returns_default_vector(self, extractor, count):
        records = [make_record(days_ago=i, score=90) for i in range(count)]

        features = extractor.extract_score_features(records, GameType.MEMORY_GAME, Difficulty.MEDIUM)

        assert features == ScoreFeatures.default()
        assert features.average_score == 50
        assert features.score_variance == 25
        assert features.average_play_time == 300
        assert features.average_mistakes == 3
        assert features.completion_rate == 0.7
        assert features.consistency == 0.5
        assert features.difficulty_level == 2
        assert features.game_experience == 5

    def test_records_outside_window_or_filter_do_not_count(self, extractor):
        records = [make_record(days_ago=i + 1) for i in range(4)]
        records += [
            make_record(days_ago=45),
            make_record(days_ago=2, difficulty="hard"),
            make_record(days_ago=2, game_type="reaction_game"),
        ]

        features = extractor.extract_score_features(records, GameType.MEMORY_GAME, Difficulty.MEDIUM)

        assert features == ScoreFeatures.default()

    def test_window_boundary_is_inclusive(self, extractor):
        records = [make_record(days_ago=i + 1) for i in range(4)] + [make_record(days_ago=30)]

        features = extractor.extract_score_features(records, GameType.MEMORY_GAME, Difficulty.MEDIUM)

        assert features.data_points == 5

    def test_computed_features(self, extractor):
        scores = [40, 50, 60, 70, 80, 90]
        # Given out of order; statistics must follow time order
        records = [make_record(days_ago=6 - i, score=s, mistakes=2) for i, s in enumerate(scores)]
        records.reverse()
        records.append(make_record(days_ago=60, score=10))

        features = extractor.extract_score_features(records, GameType.MEMORY_GAME, Difficulty.MEDIUM)

        assert features.average_score == pytest.approx(65.0)
        assert features.score_trend == pytest.approx(10.0)
        assert features.average_mistakes == pytest.approx(2.0)
        assert features.average_play_time == pytest.approx(60.0)
        assert features.completion_rate == 1.0
        assert features.recent_improvement == 0.0
        assert features.difficulty_level == 2
        # Experience counts every play of the game type
        assert features.game_experience == 7
        assert features.data_points == 6

    def test_difficulty_level_encoding(self, extractor):
        records = [make_record(days_ago=i, difficulty="expert") for i in range(5)]

        features = extractor.extract_score_features(records, GameType.MEMORY_GAME, Difficulty.EXPERT)

        assert features.difficulty_level == 4


class TestEngagementFeatures:

    def test_engagement_features(self, extractor):
        records = [
            make_record(minutes_ago=10),
            make_record(minutes_ago=5, game_type="reaction_game", completed=False),
            make_record(minutes_ago=0),
            make_record(days_ago=20),
        ]

        features = extractor.extract_engagement_features(records)

        assert features.daily_play_frequency == pytest.approx(3 / 7)
        assert features.session_duration == pytest.approx(3.0)
        assert features.session_frequency == pytest.approx(1 / 7)
        assert features.game_diversity == pytest.approx(2 / 5)
        assert features.completion_rate == pytest.approx(2 / 3)
        # Two active days over four plays, across the full history
        assert features.return_rate == pytest.approx(0.5)

    def test_no_recent_activity(self, extractor):
        features = extractor.extract_engagement_features([make_record(days_ago=20)])

        assert features.daily_play_frequency == 0.0
        assert features.session_duration == 0.0
        assert features.session_frequency == 0.0
        assert features.completion_rate == 0.0


class TestChurnFeatures:

    def test_empty_history(self, extractor):
        features = extractor.extract_churn_features([])

        assert features.days_since_last_activity == 999
        assert features.activity_decline == 0.0
        assert features.average_score == 0.0
        assert features.session_dropoff == 0.0

    def test_activity_decline(self, extractor):
        records = [make_record(days_ago=10, minutes_ago=i * 60) for i in range(4)]
        records.append(make_record(days_ago=2))

        features = extractor.extract_churn_features(records)

        assert features.activity_decline == pytest.approx(0.75)
        assert features.days_since_last_activity == 2

    def test_days_since_last_activity_counts_whole_days(self, extractor):
        features = extractor.extract_churn_features([make_record(days_ago=3.5), make_record(days_ago=8)])

        assert features.days_since_last_activity == 3

    def test_score_decline_and_satisfaction(self, extractor):
        scores = [80] * 5 + [50] * 5
        records = [make_record(days_ago=10 - i, score=s) for i, s in enumerate(scores)]

        features = extractor.extract_churn_features(records)

        assert features.score_decline == pytest.approx(30.0)
        assert features.average_score == pytest.approx(65.0)
        assert features.satisfaction_score == pytest.approx(0.65 * 0.7 + 1.0 * 0.3)
        assert features.game_abandonment == 0.0

    def test_session_dropoff(self, extractor):
        # Three long sessions followed by three single-game sessions
        records = []
        for day in (10, 9, 8):
            records += [make_record(days_ago=day, minutes_ago=m) for m in (0, 5, 10, 15)]
        for day in (3, 2, 1):
            records.append(make_record(days_ago=day))

        features = extractor.extract_churn_features(records)

        assert features.session_dropoff == pytest.approx(0.75)


class TestDifficultyFeatures:

    def test_sparse_history_returns_default_vector(self, extractor):
        records = [make_record(days_ago=i) for i in range(4)]

        assert extractor.extract_difficulty_features(records, GameType.MEMORY_GAME) == DifficultyFeatures.default()

    def test_uses_last_ten_plays_of_game(self, extractor):
        records = [make_record(days_ago=100 + i, score=10, difficulty="hard", completed=False) for i in range(2)]
        records += [make_record(days_ago=i, score=70, difficulty="easy") for i in range(10)]
        records.append(make_record(days_ago=0, game_type="reaction_game", score=0))

        features = extractor.extract_difficulty_features(records, GameType.MEMORY_GAME)

        assert features.average_score == pytest.approx(70.0)
        assert features.score_consistency == 1.0
        assert features.preferred_difficulty == Difficulty.EASY
        assert features.improvement_rate == 0.0
        assert features.challenge_preference == pytest.approx(0.25)
        assert features.frustration_level == 0.0

    def test_frustration_counts_low_scores_and_abandoned_games(self, extractor):
        records = [
            make_record(days_ago=5, score=20),
            make_record(days_ago=4, score=60, completed=False),
            make_record(days_ago=3, score=60),
            make_record(days_ago=2, score=60),
            make_record(days_ago=1, score=60),
        ]

        features = extractor.extract_difficulty_features(records, GameType.MEMORY_GAME)

        assert features.frustration_level == pytest.approx(0.4)


class TestGameRecommendationFeatures:

    def test_shares_and_performance(self, extractor):
        records = [make_record(days_ago=i, score=80) for i in range(3)]
        records.append(make_record(days_ago=1, score=40, game_type="reaction_game"))

        features = extractor.extract_game_recommendation_features(records)

        assert features.game_preferences[GameType.MEMORY_GAME] == pytest.approx(0.75)
        assert features.game_preferences[GameType.REACTION_GAME] == pytest.approx(0.25)
        assert features.game_preferences[GameType.PUZZLE_GAME] == 0.0
        assert features.performance_by_game[GameType.MEMORY_GAME] == pytest.approx(0.8)
        assert features.performance_by_game[GameType.REACTION_GAME] == pytest.approx(0.4)
        assert features.exploration_tendency == pytest.approx(0.4)
        assert features.skill_level == pytest.approx(0.7)
        assert features.time_availability == pytest.approx(240 / (7 * 60 * 60))

    def test_empty_history(self, extractor):
        features = extractor.extract_game_recommendation_features([])

        assert all(v == 0.0 for v in features.game_preferences.values())
        assert features.skill_level == 0.0
