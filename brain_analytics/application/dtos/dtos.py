"""
Data Transfer Objects (DTOs) Module

DTOs are used to transfer data between layers and to/from the API.
They use Pydantic for validation and serialization.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from brain_analytics.domain.entities.entities import (
    BehaviorAnalysis,
    ChurnPrediction,
    DifficultyRecommendation,
    EngagementPrediction,
    GameRecommendation,
    GameStats,
    ScorePrediction,
)
from brain_analytics.utils.time_utils import get_current_time


# ============================================================
# Prediction DTOs
# ============================================================

class ScoreRangeDTO(BaseModel):
    min: int
    max: int

    class Config:
        from_attributes = True


class ScorePredictionDTO(BaseModel):
    """Predicted score for a game at a difficulty."""
    user_id: str
    game_type: str
    difficulty: str
    prediction: int = Field(..., ge=0)
    confidence: float = Field(..., ge=0, le=1)
    range: ScoreRangeDTO
    horizon: int
    factors: Dict[str, float] = Field(default_factory=dict)
    is_default: bool = False
    actionable: bool = False

    class Config:
        from_attributes = True


class EngagementPredictionDTO(BaseModel):
    """Expected daily play frequency."""
    user_id: str
    prediction: float
    confidence: float = Field(..., ge=0, le=1)
    trend: str
    horizon: int
    factors: Dict[str, float] = Field(default_factory=dict)
    is_default: bool = False
    actionable: bool = False


class ChurnPredictionDTO(BaseModel):
    """Churn probability with risk classification and retention suggestions."""
    user_id: str
    probability: float = Field(..., ge=0, le=1)
    confidence: float = Field(..., ge=0, le=1)
    risk_level: str
    horizon: int
    factors: Dict[str, float] = Field(default_factory=dict)
    recommendations: List[str] = Field(default_factory=list)
    is_default: bool = False
    actionable: bool = False


class DifficultyRecommendationDTO(BaseModel):
    user_id: str
    game_type: str
    recommended: str
    confidence: float = Field(..., ge=0, le=1)
    reasoning: str = ""
    is_default: bool = False
    actionable: bool = False


class GameRecommendationDTO(BaseModel):
    rank: int = Field(..., ge=1)
    game_type: str
    game_name: str
    score: float
    confidence: float = Field(..., ge=0, le=1)


class GameRecommendationsResponseDTO(BaseModel):
    """Ranked game suggestions."""
    user_id: str
    recommendations: List[GameRecommendationDTO]
    generated_at: datetime = Field(default_factory=get_current_time)


# ============================================================
# Behavior and Difficulty DTOs
# ============================================================

class BehaviorAnalysisDTO(BaseModel):
    user_id: str
    record_count: int
    time_patterns: Dict[str, Any] = Field(default_factory=dict)
    score_patterns: Dict[str, float] = Field(default_factory=dict)
    game_patterns: Dict[str, Any] = Field(default_factory=dict)


class GameStatsDTO(BaseModel):
    total_games: int
    average_score: float
    best_score: int
    recent_scores: List[int] = Field(default_factory=list)
    preferred_difficulty: str


class DifficultyReportDTO(BaseModel):
    """Per-game progress and practice recommendations."""
    user_id: str
    total_games: int
    average_score: float
    preferred_difficulty: str
    game_stats: Dict[str, GameStatsDTO] = Field(default_factory=dict)
    recommendations: List[Dict[str, str]] = Field(default_factory=list)


class AdaptiveDifficultyDTO(BaseModel):
    user_id: str
    game_type: str
    difficulty: str


class GameSettingsDTO(BaseModel):
    game_type: str
    difficulty: str
    settings: Dict[str, Any]
    goals: Dict[str, float] = Field(default_factory=dict)
    hints: Dict[str, bool] = Field(default_factory=dict)


class CacheInvalidationDTO(BaseModel):
    user_id: str
    removed: int


# ============================================================
# Generic DTOs
# ============================================================

class HealthResponseDTO(BaseModel):
    """Health check response."""
    status: str = "healthy"
    version: str = "1.0.0"
    timestamp: datetime = Field(default_factory=get_current_time)


class ErrorResponseDTO(BaseModel):
    """Error response."""
    error: str
    message: str
    details: Optional[dict] = None


# ============================================================
# Converters
# ============================================================

def score_prediction_to_dto(
    user_id: str,
    game_type: str,
    difficulty: str,
    prediction: ScorePrediction,
    actionable: bool = False,
) -> ScorePredictionDTO:
    return ScorePredictionDTO(
        user_id=user_id,
        game_type=game_type,
        difficulty=difficulty,
        prediction=prediction.prediction,
        confidence=prediction.confidence,
        range=ScoreRangeDTO.model_validate(prediction.range),
        horizon=prediction.horizon,
        factors=prediction.factors,
        is_default=prediction.is_default,
        actionable=actionable,
    )


def engagement_prediction_to_dto(
    user_id: str,
    prediction: EngagementPrediction,
    actionable: bool = False,
) -> EngagementPredictionDTO:
    return EngagementPredictionDTO(
        user_id=user_id,
        prediction=prediction.prediction,
        confidence=prediction.confidence,
        trend=prediction.trend.value,
        horizon=prediction.horizon,
        factors=prediction.factors,
        is_default=prediction.is_default,
        actionable=actionable,
    )


def churn_prediction_to_dto(
    user_id: str,
    prediction: ChurnPrediction,
    actionable: bool = False,
) -> ChurnPredictionDTO:
    return ChurnPredictionDTO(
        user_id=user_id,
        probability=prediction.probability,
        confidence=prediction.confidence,
        risk_level=prediction.risk_level.value,
        horizon=prediction.horizon,
        factors=prediction.factors,
        recommendations=prediction.recommendations,
        is_default=prediction.is_default,
        actionable=actionable,
    )


def difficulty_recommendation_to_dto(
    user_id: str,
    game_type: str,
    recommendation: DifficultyRecommendation,
    actionable: bool = False,
) -> DifficultyRecommendationDTO:
    return DifficultyRecommendationDTO(
        user_id=user_id,
        game_type=game_type,
        recommended=recommendation.recommended.value,
        confidence=recommendation.confidence,
        reasoning=recommendation.reasoning,
        is_default=recommendation.is_default,
        actionable=actionable,
    )


def game_recommendations_to_dto(
    user_id: str,
    recommendations: List[GameRecommendation],
) -> GameRecommendationsResponseDTO:
    return GameRecommendationsResponseDTO(
        user_id=user_id,
        recommendations=[
            GameRecommendationDTO(
                rank=r.rank,
                game_type=r.game_type.value,
                game_name=r.game_name,
                score=r.score,
                confidence=r.confidence,
            )
            for r in recommendations
        ],
    )


def behavior_analysis_to_dto(analysis: BehaviorAnalysis) -> BehaviorAnalysisDTO:
    return BehaviorAnalysisDTO(
        user_id=analysis.user_id,
        record_count=analysis.record_count,
        time_patterns=analysis.time_patterns,
        score_patterns=analysis.score_patterns,
        game_patterns=analysis.game_patterns,
    )


def _game_stats_to_dto(stats: GameStats) -> GameStatsDTO:
    return GameStatsDTO(
        total_games=stats.total_games,
        average_score=stats.average_score,
        best_score=stats.best_score,
        recent_scores=stats.recent_scores,
        preferred_difficulty=stats.preferred_difficulty.value,
    )


def difficulty_report_to_dto(report: Dict[str, Any]) -> DifficultyReportDTO:
    overall = report["overall_stats"]
    return DifficultyReportDTO(
        user_id=report["user_id"],
        total_games=overall["total_games"],
        average_score=overall["average_score"],
        preferred_difficulty=overall["preferred_difficulty"].value,
        game_stats={
            game_type.value: _game_stats_to_dto(stats)
            for game_type, stats in report["game_stats"].items()
        },
        recommendations=report["recommendations"],
    )
