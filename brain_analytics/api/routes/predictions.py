"""
Predictions Router

API endpoints for a user's score, engagement, churn, difficulty and
game predictions.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from brain_analytics.api.dependencies import get_predictor
from brain_analytics.application.dtos.dtos import (
    BehaviorAnalysisDTO,
    CacheInvalidationDTO,
    ChurnPredictionDTO,
    DifficultyRecommendationDTO,
    EngagementPredictionDTO,
    ErrorResponseDTO,
    GameRecommendationsResponseDTO,
    ScorePredictionDTO,
    behavior_analysis_to_dto,
    churn_prediction_to_dto,
    difficulty_recommendation_to_dto,
    engagement_prediction_to_dto,
    game_recommendations_to_dto,
    score_prediction_to_dto,
)
from brain_analytics.application.use_cases.performance_predictor import PerformancePredictor


router = APIRouter(prefix="/users/{user_id}", tags=["Predictions"])

INVALID_INPUT = {400: {"model": ErrorResponseDTO, "description": "Invalid input"}}


@router.get(
    "/predictions/score",
    response_model=ScorePredictionDTO,
    responses=INVALID_INPUT,
    summary="Predict a future score",
    description="Predicts the user's score for a game and difficulty a number of days ahead.",
)
def get_score_prediction(
    user_id: str,
    game_type: str = Query(..., description="Game identifier, e.g. memory_game"),
    difficulty: str = Query(default="medium", description="easy, medium, hard or expert"),
    horizon: Optional[int] = Query(default=None, description="Days ahead (default from config)"),
    predictor: PerformancePredictor = Depends(get_predictor),
) -> ScorePredictionDTO:
    prediction = predictor.predict_score(user_id, game_type, difficulty, horizon)
    return score_prediction_to_dto(
        user_id, game_type, difficulty, prediction, predictor.is_actionable(prediction)
    )


@router.get(
    "/predictions/engagement",
    response_model=EngagementPredictionDTO,
    responses=INVALID_INPUT,
    summary="Predict engagement",
)
def get_engagement_prediction(
    user_id: str,
    horizon: Optional[int] = Query(default=None, description="Days ahead (default from config)"),
    predictor: PerformancePredictor = Depends(get_predictor),
) -> EngagementPredictionDTO:
    prediction = predictor.predict_engagement(user_id, horizon)
    return engagement_prediction_to_dto(user_id, prediction, predictor.is_actionable(prediction))


@router.get(
    "/predictions/churn",
    response_model=ChurnPredictionDTO,
    responses=INVALID_INPUT,
    summary="Predict churn risk",
    description="Probability that the user stops playing within the horizon, with retention suggestions.",
)
def get_churn_prediction(
    user_id: str,
    horizon: Optional[int] = Query(default=None, description="Days ahead (default from config)"),
    predictor: PerformancePredictor = Depends(get_predictor),
) -> ChurnPredictionDTO:
    prediction = predictor.predict_churn_risk(user_id, horizon)
    return churn_prediction_to_dto(user_id, prediction, predictor.is_actionable(prediction))


@router.get(
    "/predictions/difficulty",
    response_model=DifficultyRecommendationDTO,
    responses=INVALID_INPUT,
    summary="Recommend a difficulty",
)
def get_difficulty_recommendation(
    user_id: str,
    game_type: str = Query(..., description="Game identifier"),
    predictor: PerformancePredictor = Depends(get_predictor),
) -> DifficultyRecommendationDTO:
    recommendation = predictor.recommend_difficulty(user_id, game_type)
    return difficulty_recommendation_to_dto(
        user_id, game_type, recommendation, predictor.is_actionable(recommendation)
    )


@router.get(
    "/predictions/games",
    response_model=GameRecommendationsResponseDTO,
    responses=INVALID_INPUT,
    summary="Recommend games",
    description="Ranks the game catalog for the user and returns the top entries.",
)
def get_game_recommendations(
    user_id: str,
    count: int = Query(default=3, description="Number of games to return"),
    predictor: PerformancePredictor = Depends(get_predictor),
) -> GameRecommendationsResponseDTO:
    return game_recommendations_to_dto(user_id, predictor.recommend_games(user_id, count))


@router.get(
    "/behavior",
    response_model=BehaviorAnalysisDTO,
    summary="Analyze play behavior",
)
def get_behavior_analysis(
    user_id: str,
    predictor: PerformancePredictor = Depends(get_predictor),
) -> BehaviorAnalysisDTO:
    return behavior_analysis_to_dto(predictor.analyze_behavior(user_id))


@router.delete(
    "/predictions/cache",
    response_model=CacheInvalidationDTO,
    summary="Drop cached predictions for a user",
)
def invalidate_predictions(
    user_id: str,
    predictor: PerformancePredictor = Depends(get_predictor),
) -> CacheInvalidationDTO:
    return CacheInvalidationDTO(user_id=user_id, removed=predictor.invalidate_user(user_id))
