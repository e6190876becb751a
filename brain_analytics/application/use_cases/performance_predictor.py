"""
Performance Predictor Use Cases

Entry point for score, engagement, churn, difficulty and game
predictions. Each prediction type has two forms:

- `evaluate_*` returns a PredictionOutcome carrying the value or the
  kind of error that prevented it.
- `predict_*` is the boundary adapter: insufficient data and upstream
  failures become the type's default result, invalid input raises
  InvalidInputException.
"""

import logging
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Sequence, TypeVar, Union

from brain_analytics.config import MAX_HORIZON_DAYS, PredictorConfig
from brain_analytics.domain.entities.entities import (
    BehaviorAnalysis,
    ChurnPrediction,
    Difficulty,
    DifficultyRecommendation,
    EngagementPrediction,
    GameRecommendation,
    GameRecord,
    GameType,
    ScorePrediction,
)
from brain_analytics.domain.exceptions import (
    InsufficientDataException,
    InvalidInputException,
)
from brain_analytics.domain.repositories.repositories import GameRecordRepository
from brain_analytics.domain.services.behavior_analysis_service import BehaviorAnalysisService
from brain_analytics.domain.services.difficulty_manager import DifficultyManager
from brain_analytics.domain.services.feature_extractor import FeatureExtractor
from brain_analytics.domain.services.prediction_service import PredictionService
from brain_analytics.domain.services.recommendation_service import RecommendationService
from brain_analytics.domain.value_objects.value_objects import (
    PredictionErrorKind,
    PredictionOutcome,
)
from brain_analytics.infrastructure.cache.prediction_cache import PredictionCache
from brain_analytics.utils.time_utils import get_current_time

logger = logging.getLogger(__name__)

T = TypeVar("T")


class PerformancePredictor:
    """
    Predicts a user's future performance from their game history.

    Args:
        repository: Record store providing each user's game history
        cache: Result cache; a private one is created when omitted
        config: Predictor options; read from the environment when omitted
        clock: Callable returning the current aware datetime
    """

    def __init__(
        self,
        repository: GameRecordRepository,
        cache: Optional[PredictionCache] = None,
        config: Optional[PredictorConfig] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.repository = repository
        self.config = config or PredictorConfig()
        if cache is None:
            cache = PredictionCache(self.config.cache_refresh_interval_seconds)
        self.cache = cache
        self.clock = clock or get_current_time

        self.feature_extractor = FeatureExtractor(clock=self.clock)
        self.prediction_service = PredictionService(
            min_data_points=self.config.min_data_points,
            clock=self.clock,
        )
        self.recommendation_service = RecommendationService()
        self.difficulty_manager = DifficultyManager()
        self.behavior_service = BehaviorAnalysisService()

    # --- Validation ---

    @staticmethod
    def _validate_user(user_id: str) -> str:
        if not user_id or not str(user_id).strip():
            raise InvalidInputException("User id cannot be empty")
        return str(user_id)

    @staticmethod
    def _validate_positive(value: int, name: str) -> int:
        if isinstance(value, bool) or not isinstance(value, int) or value < 1:
            raise InvalidInputException(f"{name} must be a positive integer, got {value!r}")
        return value

    @classmethod
    def _validate_horizon(cls, value: int) -> int:
        days = cls._validate_positive(value, "horizon")
        if days > MAX_HORIZON_DAYS:
            raise InvalidInputException(f"horizon must be at most {MAX_HORIZON_DAYS} days, got {days}")
        return days

    # --- Core pipeline ---

    def _load_history(self, user_id: str) -> List[GameRecord]:
        records = self.repository.get_records(user_id)
        if not records:
            raise InsufficientDataException(f"No game history for user {user_id}")
        return list(records)

    def _evaluate(
        self,
        prediction_type: str,
        user_id: str,
        params: Sequence[Any],
        compute: Callable[[List[GameRecord]], T],
    ) -> PredictionOutcome[T]:
        """Fetch history and compute, caching successful outcomes only."""
        key = self.cache.make_key(prediction_type, user_id, *params)

        def run() -> PredictionOutcome[T]:
            try:
                records = self._load_history(user_id)
            except InsufficientDataException as e:
                return PredictionOutcome.failure(PredictionErrorKind.INSUFFICIENT_DATA, str(e))
            except Exception as e:
                logger.error(f"Failed to fetch game history for user {user_id}: {e}")
                return PredictionOutcome.failure(PredictionErrorKind.UPSTREAM_FAILURE, str(e))

            try:
                return PredictionOutcome.success(compute(records))
            except InsufficientDataException as e:
                return PredictionOutcome.failure(PredictionErrorKind.INSUFFICIENT_DATA, str(e))
            except Exception as e:
                logger.exception(f"{prediction_type} prediction failed for user {user_id}")
                return PredictionOutcome.failure(PredictionErrorKind.UPSTREAM_FAILURE, str(e))

        return self.cache.get_or_compute(key, run, should_store=lambda outcome: outcome.is_success)

    def _resolve(
        self,
        prediction_type: str,
        outcome: PredictionOutcome[T],
        default: Callable[[], T],
    ) -> T:
        """Map an outcome to a value, substituting the default on data errors."""
        if outcome.is_success:
            return outcome.value
        if outcome.error == PredictionErrorKind.INVALID_INPUT:
            raise InvalidInputException(outcome.message)

        logger.warning(
            f"Using default {prediction_type} prediction ({outcome.error.value}): {outcome.message}"
        )
        return default()

    @staticmethod
    def _invalid(e: InvalidInputException) -> PredictionOutcome:
        return PredictionOutcome.failure(PredictionErrorKind.INVALID_INPUT, str(e))

    # --- Score ---

    def evaluate_score(
        self,
        user_id: str,
        game_type: Union[str, GameType],
        difficulty: Union[str, Difficulty],
        horizon: Optional[int] = None,
    ) -> PredictionOutcome[ScorePrediction]:
        try:
            user_id = self._validate_user(user_id)
            game = GameType.parse(game_type)
            level = Difficulty.parse(difficulty)
            days = self._validate_horizon(
                self.config.score_horizon_default if horizon is None else horizon
            )
        except InvalidInputException as e:
            return self._invalid(e)

        def compute(records: List[GameRecord]) -> ScorePrediction:
            features = self.feature_extractor.extract_score_features(records, game, level)
            return self.prediction_service.calculate_score_prediction(features, days)

        return self._evaluate("score", user_id, (game.value, level.value, days), compute)

    def predict_score(
        self,
        user_id: str,
        game_type: Union[str, GameType],
        difficulty: Union[str, Difficulty],
        horizon: Optional[int] = None,
    ) -> ScorePrediction:
        outcome = self.evaluate_score(user_id, game_type, difficulty, horizon)
        days = self.config.score_horizon_default if horizon is None else horizon
        return self._resolve(
            "score", outcome, lambda: self.prediction_service.default_score_prediction(days)
        )

    # --- Engagement ---

    def evaluate_engagement(
        self,
        user_id: str,
        horizon: Optional[int] = None,
    ) -> PredictionOutcome[EngagementPrediction]:
        try:
            user_id = self._validate_user(user_id)
            days = self._validate_horizon(
                self.config.engagement_horizon_default if horizon is None else horizon
            )
        except InvalidInputException as e:
            return self._invalid(e)

        def compute(records: List[GameRecord]) -> EngagementPrediction:
            features = self.feature_extractor.extract_engagement_features(records)
            return self.prediction_service.calculate_engagement_prediction(features, days)

        return self._evaluate("engagement", user_id, (days,), compute)

    def predict_engagement(self, user_id: str, horizon: Optional[int] = None) -> EngagementPrediction:
        outcome = self.evaluate_engagement(user_id, horizon)
        days = self.config.engagement_horizon_default if horizon is None else horizon
        return self._resolve(
            "engagement",
            outcome,
            lambda: self.prediction_service.default_engagement_prediction(days),
        )

    # --- Churn ---

    def evaluate_churn_risk(
        self,
        user_id: str,
        horizon: Optional[int] = None,
    ) -> PredictionOutcome[ChurnPrediction]:
        try:
            user_id = self._validate_user(user_id)
            days = self._validate_horizon(
                self.config.churn_horizon_default if horizon is None else horizon
            )
        except InvalidInputException as e:
            return self._invalid(e)

        def compute(records: List[GameRecord]) -> ChurnPrediction:
            features = self.feature_extractor.extract_churn_features(records)
            return self.prediction_service.calculate_churn_prediction(features, days)

        return self._evaluate("churn", user_id, (days,), compute)

    def predict_churn_risk(self, user_id: str, horizon: Optional[int] = None) -> ChurnPrediction:
        outcome = self.evaluate_churn_risk(user_id, horizon)
        days = self.config.churn_horizon_default if horizon is None else horizon
        return self._resolve(
            "churn", outcome, lambda: self.prediction_service.default_churn_prediction(days)
        )

    # --- Difficulty ---

    def evaluate_difficulty(
        self,
        user_id: str,
        game_type: Union[str, GameType],
    ) -> PredictionOutcome[DifficultyRecommendation]:
        try:
            user_id = self._validate_user(user_id)
            game = GameType.parse(game_type)
        except InvalidInputException as e:
            return self._invalid(e)

        def compute(records: List[GameRecord]) -> DifficultyRecommendation:
            features = self.feature_extractor.extract_difficulty_features(records, game)
            return self.recommendation_service.calculate_difficulty_recommendation(features)

        return self._evaluate("difficulty", user_id, (game.value,), compute)

    def recommend_difficulty(
        self,
        user_id: str,
        game_type: Union[str, GameType],
    ) -> DifficultyRecommendation:
        return self._resolve(
            "difficulty",
            self.evaluate_difficulty(user_id, game_type),
            self.recommendation_service.default_difficulty_recommendation,
        )

    # --- Games ---

    def evaluate_games(
        self,
        user_id: str,
        count: int = 3,
    ) -> PredictionOutcome[List[GameRecommendation]]:
        try:
            user_id = self._validate_user(user_id)
            count = self._validate_positive(count, "count")
        except InvalidInputException as e:
            return self._invalid(e)

        def compute(records: List[GameRecord]) -> List[GameRecommendation]:
            features = self.feature_extractor.extract_game_recommendation_features(records)
            return self.recommendation_service.calculate_game_recommendations(features, count)

        return self._evaluate("games", user_id, (count,), compute)

    def recommend_games(self, user_id: str, count: int = 3) -> List[GameRecommendation]:
        return self._resolve(
            "games",
            self.evaluate_games(user_id, count),
            lambda: self.recommendation_service.default_game_recommendations(count),
        )

    # --- Behavior and difficulty progress ---

    def _history_or_empty(self, user_id: str) -> List[GameRecord]:
        try:
            return list(self.repository.get_records(user_id))
        except Exception as e:
            logger.error(f"Failed to fetch game history for user {user_id}: {e}")
            return []

    def analyze_behavior(self, user_id: str) -> BehaviorAnalysis:
        user_id = self._validate_user(user_id)
        return self.behavior_service.analyze(user_id, self._history_or_empty(user_id))

    def difficulty_report(self, user_id: str) -> Dict[str, Any]:
        user_id = self._validate_user(user_id)
        return self.difficulty_manager.generate_difficulty_report(
            user_id, self._history_or_empty(user_id)
        )

    def adaptive_difficulty(self, user_id: str, game_type: Union[str, GameType]) -> Difficulty:
        user_id = self._validate_user(user_id)
        game = GameType.parse(game_type)
        return self.difficulty_manager.calculate_adaptive_difficulty(
            self._history_or_empty(user_id), game
        )

    # --- Cache and surfacing ---

    def invalidate_user(self, user_id: str) -> int:
        """Drop cached predictions for a user (e.g. after a new game is recorded)."""
        return self.cache.invalidate_user(user_id)

    def is_actionable(self, result: Any) -> bool:
        """Whether a prediction is confident enough to surface to the user."""
        if getattr(result, "is_default", False):
            return False
        return result.confidence >= self.config.confidence_threshold
