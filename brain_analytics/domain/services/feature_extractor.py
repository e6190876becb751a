"""
Feature Extractor

Turns a user's raw, unordered game history into the typed feature
vectors consumed by the prediction formulas. Pure computation: records
are never mutated and nothing is persisted.
"""

import logging
from datetime import datetime, timedelta
from typing import Callable, List, Optional, Sequence

from brain_analytics.domain.constants import (
    ACTIVITY_DECLINE_WINDOW_DAYS,
    CHURN_WINDOW_DAYS,
    DIFFICULTY_HISTORY_SIZE,
    ENGAGEMENT_WINDOW_DAYS,
    GAME_CATALOG,
    MIN_DIFFICULTY_RECORDS,
    MIN_IMPROVEMENT_RECORDS,
    MIN_SCORE_RECORDS,
    NO_ACTIVITY_DAYS,
    SCORE_WINDOW_DAYS,
)
from brain_analytics.domain.entities.entities import Difficulty, GameRecord, GameType
from brain_analytics.domain.entities.features import (
    ChurnFeatures,
    DifficultyFeatures,
    EngagementFeatures,
    GameRecommendationFeatures,
    ScoreFeatures,
)
from brain_analytics.domain.services.statistics_service import StatisticsService
from brain_analytics.utils.time_utils import get_current_time, to_local

logger = logging.getLogger(__name__)

# Weekly play time (seconds) treated as full availability
FULL_WEEKLY_PLAY_TIME = 7 * 60 * 60
LOW_SCORE_THRESHOLD = 30


class FeatureExtractor:
    """
    Service for extracting feature vectors from game history.

    Args:
        clock: Callable returning the current aware datetime. Windows are
            measured back from this instant.
    """

    def __init__(self, clock: Optional[Callable[[], datetime]] = None):
        self.clock = clock or get_current_time
        self.stats = StatisticsService()

    def _window(self, records: Sequence[GameRecord], days: int, now: datetime) -> List[GameRecord]:
        """Records with timestamp >= now - days, oldest first."""
        cutoff = now - timedelta(days=days)
        return self.stats.sort_by_time([r for r in records if r.timestamp >= cutoff])

    # --- Score ---

    def extract_score_features(
        self,
        records: Sequence[GameRecord],
        game_type: GameType,
        difficulty: Difficulty,
    ) -> ScoreFeatures:
        """
        Extract score features for one game type at one difficulty.

        Uses the last 30 days. With fewer than 5 qualifying records the
        fixed default vector is returned instead.
        """
        now = self.clock()
        recent = [
            r for r in self._window(records, SCORE_WINDOW_DAYS, now)
            if r.game_type == game_type and r.difficulty == difficulty
        ]

        if len(recent) < MIN_SCORE_RECORDS:
            logger.debug(
                f"Only {len(recent)} {game_type.value}/{difficulty.value} records in window, "
                f"using default score features"
            )
            return ScoreFeatures.default()

        scores = [r.score for r in recent]

        return ScoreFeatures(
            average_score=self.stats.mean(scores),
            score_trend=self.stats.trend(scores),
            score_variance=self.stats.variance(scores),
            average_play_time=self.stats.mean([r.play_time for r in recent]),
            average_mistakes=self.stats.mean([r.mistakes for r in recent]),
            completion_rate=self.stats.completion_rate(recent),
            recent_improvement=self.stats.recent_improvement(scores),
            consistency=self.stats.consistency(scores),
            difficulty_level=difficulty.encoding,
            game_experience=sum(1 for r in records if r.game_type == game_type),
            data_points=len(recent),
        )

    # --- Engagement ---

    def extract_engagement_features(self, records: Sequence[GameRecord]) -> EngagementFeatures:
        """Extract engagement features from the last 7 days of activity."""
        now = self.clock()
        recent = self._window(records, ENGAGEMENT_WINDOW_DAYS, now)
        sessions = self.stats.group_into_sessions(recent)

        return EngagementFeatures(
            daily_play_frequency=self.stats.mean(self.stats.daily_activity(recent)),
            session_duration=self.stats.mean([s.duration for s in sessions]),
            session_frequency=len(sessions) / ENGAGEMENT_WINDOW_DAYS,
            game_diversity=len({r.game_type for r in recent}) / len(GAME_CATALOG),
            completion_rate=self.stats.completion_rate(recent),
            return_rate=self._return_rate(records),
        )

    def _return_rate(self, records: Sequence[GameRecord]) -> float:
        """Distinct active days per game played."""
        unique_days = {to_local(r.timestamp).date() for r in records}
        return len(unique_days) / max(len(records), 1)

    # --- Churn ---

    def extract_churn_features(self, records: Sequence[GameRecord]) -> ChurnFeatures:
        """Extract churn risk features."""
        now = self.clock()
        recent = self._window(records, CHURN_WINDOW_DAYS, now)
        scores = [r.score for r in recent]
        completion = self.stats.completion_rate(recent)

        return ChurnFeatures(
            activity_decline=self._activity_decline(records, now),
            average_score=self.stats.mean(scores),
            score_decline=self._score_decline(scores),
            session_dropoff=self._session_dropoff(records),
            game_abandonment=self.stats.abandonment_rate(recent),
            satisfaction_score=(self.stats.mean(scores) / 100) * 0.7 + completion * 0.3,
            engagement_score=self._engagement_score(records, now),
            days_since_last_activity=self._days_since_last_activity(records, now),
        )

    def _activity_decline(self, records: Sequence[GameRecord], now: datetime) -> float:
        """Relative drop in play count: last 7 days vs the 7 days before."""
        week = timedelta(days=ACTIVITY_DECLINE_WINDOW_DAYS // 2)
        recent = sum(1 for r in records if r.timestamp > now - week)
        older = sum(1 for r in records if now - 2 * week < r.timestamp <= now - week)
        return (older - recent) / max(older, 1)

    def _score_decline(self, scores: Sequence[float]) -> float:
        if len(scores) < MIN_IMPROVEMENT_RECORDS:
            return 0.0
        return self.stats.mean(scores[-10:-5]) - self.stats.mean(scores[-5:])

    def _session_dropoff(self, records: Sequence[GameRecord]) -> float:
        """Relative drop in session length: last 3 sessions vs the 3 before."""
        sessions = self.stats.group_into_sessions(records)
        if len(sessions) < 2:
            return 0.0

        recent_sessions = sessions[-3:]
        older_sessions = sessions[-6:-3]
        if not older_sessions:
            return 0.0

        recent_avg = self.stats.mean([s.duration for s in recent_sessions])
        older_avg = self.stats.mean([s.duration for s in older_sessions])
        return (older_avg - recent_avg) / max(older_avg, 1)

    def _engagement_score(self, records: Sequence[GameRecord], now: datetime) -> float:
        recent = self._window(records, ENGAGEMENT_WINDOW_DAYS, now)
        daily_frequency = len(recent) / ENGAGEMENT_WINDOW_DAYS
        durations = [s.duration for s in self.stats.group_into_sessions(recent)]
        return (
            min(daily_frequency / 3, 1) * 0.6
            + min(self.stats.mean(durations) / 5, 1) * 0.4
        )

    def _days_since_last_activity(self, records: Sequence[GameRecord], now: datetime) -> int:
        if not records:
            return NO_ACTIVITY_DAYS
        last = max(r.timestamp for r in records)
        return (now - last) // timedelta(days=1)

    # --- Difficulty ---

    def extract_difficulty_features(
        self,
        records: Sequence[GameRecord],
        game_type: GameType,
    ) -> DifficultyFeatures:
        """
        Extract difficulty features from the last 10 plays of a game type.

        Falls back to the default vector with fewer than 5 plays.
        """
        history = self.stats.sort_by_time([r for r in records if r.game_type == game_type])
        if len(history) < MIN_DIFFICULTY_RECORDS:
            return DifficultyFeatures.default()

        recent = history[-DIFFICULTY_HISTORY_SIZE:]
        scores = [r.score for r in recent]
        low_scores = sum(1 for s in scores if s < LOW_SCORE_THRESHOLD)
        incomplete = sum(1 for r in recent if not r.completed)

        return DifficultyFeatures(
            average_score=self.stats.mean(scores),
            score_consistency=self.stats.consistency(scores),
            preferred_difficulty=self.stats.most_frequent([r.difficulty for r in recent]),
            improvement_rate=self.stats.improvement_rate(scores),
            challenge_preference=self.stats.mean([r.difficulty.encoding for r in recent]) / 4,
            frustration_level=(incomplete + low_scores) / len(recent),
        )

    # --- Game recommendation ---

    def extract_game_recommendation_features(
        self,
        records: Sequence[GameRecord],
    ) -> GameRecommendationFeatures:
        """Per-game play share and normalised performance over the full history."""
        now = self.clock()
        total = len(records)
        shares = {}
        performance = {}

        for game_type in GameType:
            game_scores = [r.score for r in records if r.game_type == game_type]
            shares[game_type] = len(game_scores) / total if total else 0.0
            performance[game_type] = self.stats.mean(game_scores) / 100 if game_scores else 0.0

        week_play_time = sum(
            r.play_time for r in self._window(records, ENGAGEMENT_WINDOW_DAYS, now)
        )

        return GameRecommendationFeatures(
            game_preferences=dict(shares),
            performance_by_game=performance,
            engagement_by_game=dict(shares),
            exploration_tendency=len({r.game_type for r in records}) / len(GAME_CATALOG),
            skill_level=self.stats.mean([r.score for r in records]) / 100,
            time_availability=min(week_play_time / FULL_WEEKLY_PLAY_TIME, 1),
        )
