"""
API Dependencies Module

Provides dependency injection for FastAPI routes.
Contains factory functions for the predictor and its collaborators.
"""

import logging
import os
from functools import lru_cache

from brain_analytics.application.use_cases.performance_predictor import PerformancePredictor
from brain_analytics.config import PredictorConfig
from brain_analytics.domain.repositories.repositories import GameRecordRepository
from brain_analytics.domain.services.difficulty_manager import DifficultyManager
from brain_analytics.infrastructure.cache.prediction_cache import PredictionCache
from brain_analytics.infrastructure.data_sources.game_records_api import GameRecordsApiSource
from brain_analytics.infrastructure.database.database_service import DatabaseService
from brain_analytics.infrastructure.repositories.game_record_repository import (
    SqlGameRecordRepository,
)

logger = logging.getLogger(__name__)


@lru_cache()
def get_config() -> PredictorConfig:
    """Get predictor configuration (cached)."""
    return PredictorConfig()


@lru_cache()
def get_prediction_cache() -> PredictionCache:
    """Get the process-wide prediction cache."""
    return PredictionCache(get_config().cache_refresh_interval_seconds)


@lru_cache()
def get_database_service() -> DatabaseService:
    return DatabaseService()


@lru_cache()
def get_record_store() -> GameRecordRepository:
    """
    Get the record store selected by RECORD_STORE.

    `sql` (default) reads the local game_records table, `api` fetches
    from the game platform.
    """
    store = os.getenv("RECORD_STORE", "sql").lower()
    if store == "api":
        logger.info("Using game records API as record store")
        return GameRecordsApiSource()
    if store != "sql":
        logger.warning(f"Unknown RECORD_STORE {store!r}, falling back to sql")
    return SqlGameRecordRepository(get_database_service())


@lru_cache()
def get_predictor() -> PerformancePredictor:
    """Get the performance predictor (cached)."""
    return PerformancePredictor(
        repository=get_record_store(),
        cache=get_prediction_cache(),
        config=get_config(),
    )


@lru_cache()
def get_difficulty_manager() -> DifficultyManager:
    return DifficultyManager()
