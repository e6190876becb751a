"""
Unit Tests for Prediction Service

Tests the score, engagement and churn formulas.
"""

import math
from dataclasses import replace

import pytest

from brain_analytics.domain.entities.entities import Difficulty, EngagementTrend, GameType, RiskLevel
from brain_analytics.domain.entities.features import (
    ChurnFeatures,
    EngagementFeatures,
    ScoreFeatures,
)
from brain_analytics.domain.services.feature_extractor import FeatureExtractor
from brain_analytics.domain.services.prediction_service import PredictionService


@pytest.fixture
def service(clock):
    return PredictionService(min_data_points=20, clock=clock)


@pytest.fixture
def churn_features():
    return ChurnFeatures(
        activity_decline=0.2,
        average_score=60,
        score_decline=5,
        session_dropoff=0.1,
        game_abandonment=0.2,
        satisfaction_score=0.6,
        engagement_score=0.5,
        days_since_last_activity=3,
    )


class TestScorePrediction:
    """Tests for score prediction."""

    def test_default_features(self, service):
        prediction = service.calculate_score_prediction(ScoreFeatures.default(), horizon=7)

        # 50 + 0 + 0 + 0.5 * 10
        assert prediction.prediction == 55
        margin = 25 * 0.5 * (1 + math.sqrt(7) * 0.1)
        assert prediction.range.min == round(55 - margin)
        assert prediction.range.max == round(55 + margin)
        assert prediction.confidence == pytest.approx(0.15 + 0.05 + 0.225)
        assert prediction.horizon == 7
        assert not prediction.is_default

    def test_prediction_never_negative(self, service):
        features = replace(ScoreFeatures.default(), average_score=5, score_trend=-10, consistency=0)

        prediction = service.calculate_score_prediction(features, horizon=30)

        assert prediction.prediction == 0
        assert prediction.range.min == 0

    def test_margin_widens_with_horizon(self, service):
        features = ScoreFeatures.default()
        assert service.calculate_prediction_margin(features, 30) > service.calculate_prediction_margin(features, 1)

    def test_confidence_clamped(self, service):
        noisy = replace(ScoreFeatures.default(), score_variance=2000, consistency=0, game_experience=0)
        steady = replace(
            ScoreFeatures.default(),
            score_variance=0,
            consistency=1,
            game_experience=100,
            recent_improvement=50,
        )

        assert service.calculate_prediction_confidence(noisy) == 0.0
        assert service.calculate_prediction_confidence(steady) == pytest.approx(1.0)

    def test_experience_saturates_at_min_data_points(self, clock):
        features = replace(ScoreFeatures.default(), game_experience=10)

        low = PredictionService(min_data_points=20, clock=clock).calculate_prediction_confidence(features)
        high = PredictionService(min_data_points=10, clock=clock).calculate_prediction_confidence(features)

        assert high - low == pytest.approx(0.1)

    def test_increasing_scores_predict_above_mean(self, service, clock, increasing_history):
        features = FeatureExtractor(clock=clock).extract_score_features(
            increasing_history, GameType.MEMORY_GAME, Difficulty.MEDIUM
        )

        prediction = service.calculate_score_prediction(features, horizon=7)

        assert prediction.prediction > 62.5
        assert 0.0 <= prediction.confidence <= 1.0
        assert prediction.range.min <= prediction.prediction <= prediction.range.max


class TestEngagementPrediction:

    @pytest.fixture
    def features(self):
        return EngagementFeatures(
            daily_play_frequency=2.0,
            session_duration=3.0,
            session_frequency=3.5,
            game_diversity=0.4,
            completion_rate=0.8,
            return_rate=0.5,
        )

    def test_engagement_prediction(self, service, features):
        seasonal = service.calculate_seasonal_effect(7)

        prediction = service.calculate_engagement_prediction(features, horizon=7)

        assert prediction.prediction == pytest.approx(round(2.2 + seasonal, 2))
        assert prediction.trend == EngagementTrend.INCREASING
        assert prediction.confidence == pytest.approx(0.5 * 0.8 + 0.2)

    def test_seasonal_effect_uses_target_day(self, service):
        # 2024-06-15 + 7 days is day 174 of the year
        assert service.calculate_seasonal_effect(7) == pytest.approx(math.sin(174 / 365 * 2 * math.pi) * 0.1)
        assert abs(service.calculate_seasonal_effect(100)) <= 0.1

    def test_inactive_user_trend(self, service, features):
        idle = replace(features, daily_play_frequency=0.0, session_frequency=0.0)

        prediction = service.calculate_engagement_prediction(idle, horizon=7)

        assert prediction.trend == EngagementTrend.DECREASING
        assert prediction.prediction >= 0.0
        assert prediction.confidence == pytest.approx(0.2)


class TestChurnPrediction:

    def test_probability_monotonic_in_inactivity(self, service, churn_features):
        probabilities = [
            service.calculate_churn_prediction(
                replace(churn_features, days_since_last_activity=days), horizon=30
            ).probability
            for days in range(0, 1000, 7)
        ]

        assert probabilities == sorted(probabilities)
        assert all(0.0 < p < 1.0 for p in probabilities)

    def test_logistic_never_saturates(self):
        assert 0.0 < PredictionService.logistic(-1000) < 1.0
        assert 0.0 < PredictionService.logistic(1000) < 1.0
        assert PredictionService.logistic(0) == pytest.approx(0.5)

    def test_recently_active_user_is_low_risk(self, service, churn_features):
        prediction = service.calculate_churn_prediction(churn_features, horizon=30)

        assert prediction.risk_level == RiskLevel.LOW
        assert prediction.recommendations == []
        assert prediction.horizon == 30
        assert prediction.factors["days_since_last_activity"] == 3

    def test_recommendations_follow_thresholds(self, service, churn_features):
        features = replace(
            churn_features,
            activity_decline=0.8,
            score_decline=25,
            days_since_last_activity=10,
        )

        prediction = service.calculate_churn_prediction(features, horizon=30)

        assert len(prediction.recommendations) == 3

    @pytest.mark.parametrize("probability, level", [
        (0.1, RiskLevel.LOW),
        (0.3, RiskLevel.MEDIUM),
        (0.59, RiskLevel.MEDIUM),
        (0.6, RiskLevel.HIGH),
    ])
    def test_risk_levels(self, probability, level):
        assert PredictionService.classify_risk_level(probability) == level

    def test_confidence_in_unit_range(self, service, churn_features):
        extreme = replace(
            churn_features,
            days_since_last_activity=999,
            activity_decline=5,
            score_decline=100,
            game_abandonment=1,
        )
        assert service.calculate_churn_confidence(extreme) == pytest.approx(1.0)


class TestDefaults:

    def test_default_results_carry_horizon(self):
        assert PredictionService.default_score_prediction(14).horizon == 14
        assert PredictionService.default_engagement_prediction(3).horizon == 3
        assert PredictionService.default_churn_prediction(60).horizon == 60

    def test_default_values(self):
        score = PredictionService.default_score_prediction(7)
        assert (score.prediction, score.confidence, score.range.min, score.range.max) == (50, 0.5, 30, 70)
        assert score.is_default

        engagement = PredictionService.default_engagement_prediction(7)
        assert engagement.prediction == 0.5
        assert engagement.trend == EngagementTrend.STABLE

        churn = PredictionService.default_churn_prediction(30)
        assert churn.probability == 0.3
        assert churn.risk_level == RiskLevel.MEDIUM
