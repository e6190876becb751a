"""
Prediction Service Module

This domain service maps feature vectors to predictions:
1. Linear trend extrapolation for future scores
2. Frequency plus a periodic adjustment for engagement
3. Logistic risk scoring for churn

This is a pure domain service with no external dependencies.
"""

import math
from datetime import datetime, timedelta
from typing import Callable, List, Optional

from brain_analytics.config import DEFAULT_MIN_DATA_POINTS
from brain_analytics.domain.entities.entities import (
    ChurnPrediction,
    EngagementPrediction,
    EngagementTrend,
    RiskLevel,
    ScorePrediction,
)
from brain_analytics.domain.entities.features import (
    ChurnFeatures,
    EngagementFeatures,
    ScoreFeatures,
)
from brain_analytics.domain.services.statistics_service import StatisticsService
from brain_analytics.domain.value_objects.value_objects import ScoreRange
from brain_analytics.utils.time_utils import get_current_time, to_local

# Keeps the logistic output strictly inside (0, 1) in floating point
PROBABILITY_EPSILON = 1e-9

CHURN_WEIGHTS = {
    "activity_decline": 0.30,
    "score_decline": 0.20,
    "session_dropoff": 0.25,
    "game_abandonment": 0.15,
    "inactivity": 0.10,
}
INACTIVITY_BASELINE_DAYS = 30

ACTIVITY_DECLINE_ALERT = 0.5
SCORE_DECLINE_ALERT = 20
INACTIVITY_ALERT_DAYS = 7


class PredictionService:
    """
    Domain service for score, engagement and churn predictions.

    Args:
        min_data_points: Experience count at which the experience term of
            score confidence saturates.
        clock: Callable returning the current aware datetime (used by the
            seasonal engagement term).
    """

    def __init__(
        self,
        min_data_points: int = DEFAULT_MIN_DATA_POINTS,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.min_data_points = min_data_points
        self.clock = clock or get_current_time

    # --- Score ---

    def calculate_score_prediction(self, features: ScoreFeatures, horizon: int) -> ScorePrediction:
        """
        Predict the score `horizon` days ahead.

        predicted = base + trend*horizon + improvement*min(horizon, 7) + consistency*10
        """
        base_score = features.average_score
        trend_effect = features.score_trend * horizon
        improvement_effect = features.recent_improvement * min(horizon, 7)
        consistency_effect = features.consistency * 10

        predicted = base_score + trend_effect + improvement_effect + consistency_effect
        margin = self.calculate_prediction_margin(features, horizon)

        return ScorePrediction(
            prediction=max(0, round(predicted)),
            confidence=self.calculate_prediction_confidence(features),
            range=ScoreRange(
                min=max(0, round(predicted - margin)),
                max=max(0, round(predicted + margin)),
            ),
            factors={
                "base_score": base_score,
                "trend_effect": trend_effect,
                "improvement_effect": improvement_effect,
                "consistency_effect": consistency_effect,
            },
            horizon=horizon,
        )

    def calculate_prediction_confidence(self, features: ScoreFeatures) -> float:
        """
        Weighted confidence, clamped to [0, 1].

        Consistency: 30%
        Experience: 20%
        Low variance: 30%
        Recent improvement: 20%
        """
        weighted_score = (
            features.consistency * 0.3
            + min(features.game_experience / self.min_data_points, 1) * 0.2
            + (1 - features.score_variance / 100) * 0.3
            + min(features.recent_improvement / 10, 1) * 0.2
        )
        return StatisticsService.clamp_unit(weighted_score)

    def calculate_prediction_margin(self, features: ScoreFeatures, horizon: int) -> float:
        """Half-width of the prediction interval; widens with the horizon."""
        base_margin = features.score_variance * 0.5
        horizon_factor = math.sqrt(horizon) * 0.1
        return base_margin * (1 + horizon_factor)

    # --- Engagement ---

    def calculate_engagement_prediction(
        self,
        features: EngagementFeatures,
        horizon: int,
    ) -> EngagementPrediction:
        """Predict daily play frequency `horizon` days ahead."""
        base_engagement = features.daily_play_frequency
        trend_effect = base_engagement * 0.1
        seasonal_effect = self.calculate_seasonal_effect(horizon)

        predicted = base_engagement + trend_effect + seasonal_effect

        return EngagementPrediction(
            prediction=max(0.0, round(predicted, 2)),
            confidence=self.calculate_engagement_confidence(features),
            trend=EngagementTrend.INCREASING if trend_effect > 0 else EngagementTrend.DECREASING,
            factors={
                "base_engagement": base_engagement,
                "trend_effect": trend_effect,
                "seasonal_effect": seasonal_effect,
            },
            horizon=horizon,
        )

    def calculate_seasonal_effect(self, horizon: int) -> float:
        """Simple yearly sine adjustment for the target date."""
        target = to_local(self.clock() + timedelta(days=horizon))
        day_of_year = target.timetuple().tm_yday
        return math.sin(day_of_year / 365 * 2 * math.pi) * 0.1

    def calculate_engagement_confidence(self, features: EngagementFeatures) -> float:
        return StatisticsService.clamp_unit(min(features.session_frequency / 7, 1) * 0.8 + 0.2)

    # --- Churn ---

    def calculate_churn_risk_score(self, features: ChurnFeatures) -> float:
        """
        Weighted sum of risk factors.

        Inactivity enters as (days - 30): the recency margin (30 - days)
        counts against risk.
        """
        inactivity = features.days_since_last_activity - INACTIVITY_BASELINE_DAYS
        return (
            features.activity_decline * CHURN_WEIGHTS["activity_decline"]
            + features.score_decline * CHURN_WEIGHTS["score_decline"]
            + features.session_dropoff * CHURN_WEIGHTS["session_dropoff"]
            + features.game_abandonment * CHURN_WEIGHTS["game_abandonment"]
            + inactivity * CHURN_WEIGHTS["inactivity"]
        )

    @staticmethod
    def logistic(value: float) -> float:
        """Numerically stable logistic, clamped strictly inside (0, 1)."""
        if value >= 0:
            probability = 1.0 / (1.0 + math.exp(-value))
        else:
            exp_value = math.exp(value)
            probability = exp_value / (1.0 + exp_value)
        return min(1.0 - PROBABILITY_EPSILON, max(PROBABILITY_EPSILON, probability))

    def calculate_churn_prediction(self, features: ChurnFeatures, horizon: int) -> ChurnPrediction:
        """Predict the probability that the user churns within `horizon` days."""
        probability = self.logistic(self.calculate_churn_risk_score(features))

        return ChurnPrediction(
            probability=probability,
            confidence=self.calculate_churn_confidence(features),
            risk_level=self.classify_risk_level(probability),
            factors={
                "activity_decline": features.activity_decline,
                "score_decline": features.score_decline,
                "session_dropoff": features.session_dropoff,
                "game_abandonment": features.game_abandonment,
                "days_since_last_activity": features.days_since_last_activity,
            },
            recommendations=self.generate_churn_recommendations(features),
            horizon=horizon,
        )

    def calculate_churn_confidence(self, features: ChurnFeatures) -> float:
        weighted_score = (
            min(features.days_since_last_activity / 30, 1) * 0.3
            + min(features.activity_decline, 1) * 0.3
            + min(features.score_decline / 50, 1) * 0.2
            + min(features.game_abandonment, 1) * 0.2
        )
        return StatisticsService.clamp_unit(weighted_score)

    @staticmethod
    def classify_risk_level(probability: float) -> RiskLevel:
        if probability < 0.3:
            return RiskLevel.LOW
        if probability < 0.6:
            return RiskLevel.MEDIUM
        return RiskLevel.HIGH

    @staticmethod
    def generate_churn_recommendations(features: ChurnFeatures) -> List[str]:
        recommendations = []

        if features.activity_decline > ACTIVITY_DECLINE_ALERT:
            recommendations.append("Try a new game to keep things fresh")

        if features.score_decline > SCORE_DECLINE_ALERT:
            recommendations.append("Lower the difficulty and practice the basics")

        if features.days_since_last_activity > INACTIVITY_ALERT_DAYS:
            recommendations.append("Play a short session regularly to build a habit")

        return recommendations

    # --- Defaults ---

    @staticmethod
    def default_score_prediction(horizon: int) -> ScorePrediction:
        return ScorePrediction(
            prediction=50,
            confidence=0.5,
            range=ScoreRange(min=30, max=70),
            horizon=horizon,
            is_default=True,
        )

    @staticmethod
    def default_engagement_prediction(horizon: int) -> EngagementPrediction:
        return EngagementPrediction(
            prediction=0.5,
            confidence=0.5,
            trend=EngagementTrend.STABLE,
            horizon=horizon,
            is_default=True,
        )

    @staticmethod
    def default_churn_prediction(horizon: int) -> ChurnPrediction:
        return ChurnPrediction(
            probability=0.3,
            confidence=0.5,
            risk_level=RiskLevel.MEDIUM,
            horizon=horizon,
            is_default=True,
        )
