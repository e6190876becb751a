"""
Difficulty Router

Adaptive difficulty progress and per-game settings.
"""

from fastapi import APIRouter, Depends, Query

from brain_analytics.api.dependencies import get_difficulty_manager, get_predictor
from brain_analytics.application.dtos.dtos import (
    AdaptiveDifficultyDTO,
    DifficultyReportDTO,
    ErrorResponseDTO,
    GameSettingsDTO,
    difficulty_report_to_dto,
)
from brain_analytics.application.use_cases.performance_predictor import PerformancePredictor
from brain_analytics.domain.entities.entities import Difficulty, GameType
from brain_analytics.domain.services.difficulty_manager import DifficultyManager


router = APIRouter(tags=["Difficulty"])


@router.get(
    "/users/{user_id}/difficulty/report",
    response_model=DifficultyReportDTO,
    summary="Difficulty progress report",
)
def get_difficulty_report(
    user_id: str,
    predictor: PerformancePredictor = Depends(get_predictor),
) -> DifficultyReportDTO:
    return difficulty_report_to_dto(predictor.difficulty_report(user_id))


@router.get(
    "/users/{user_id}/difficulty/adaptive",
    response_model=AdaptiveDifficultyDTO,
    responses={400: {"model": ErrorResponseDTO, "description": "Unknown game"}},
    summary="Adaptive difficulty for the next game",
)
def get_adaptive_difficulty(
    user_id: str,
    game_type: str = Query(..., description="Game identifier"),
    predictor: PerformancePredictor = Depends(get_predictor),
) -> AdaptiveDifficultyDTO:
    difficulty = predictor.adaptive_difficulty(user_id, game_type)
    return AdaptiveDifficultyDTO(user_id=user_id, game_type=game_type, difficulty=difficulty.value)


@router.get(
    "/games/{game_type}/settings/{difficulty}",
    response_model=GameSettingsDTO,
    responses={400: {"model": ErrorResponseDTO, "description": "Unknown game or difficulty"}},
    summary="Game parameters for a difficulty",
)
def get_game_settings(
    game_type: str,
    difficulty: str,
    manager: DifficultyManager = Depends(get_difficulty_manager),
) -> GameSettingsDTO:
    game = GameType.parse(game_type)
    level = Difficulty.parse(difficulty)
    return GameSettingsDTO(
        game_type=game.value,
        difficulty=level.value,
        settings=manager.get_game_settings(game, level),
        goals=manager.get_difficulty_goals(game, level),
        hints=manager.get_hints(game, level),
    )
