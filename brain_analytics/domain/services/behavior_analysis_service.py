"""
Behavior Analysis Service

Detects when, how well and what a user plays.
"""

from collections import Counter
from typing import Any, Dict, Sequence

from brain_analytics.domain.entities.entities import BehaviorAnalysis, GameRecord
from brain_analytics.domain.services.statistics_service import StatisticsService

WEEKDAY_NAMES = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")


class BehaviorAnalysisService:

    def __init__(self):
        self.stats = StatisticsService()

    def analyze(self, user_id: str, records: Sequence[GameRecord]) -> BehaviorAnalysis:
        ordered = self.stats.sort_by_time(records)
        return BehaviorAnalysis(
            user_id=user_id,
            time_patterns=self.analyze_time_patterns(ordered),
            score_patterns=self.analyze_score_patterns(ordered),
            game_patterns=self.analyze_game_patterns(ordered),
            record_count=len(ordered),
        )

    def analyze_time_patterns(self, records: Sequence[GameRecord]) -> Dict[str, Any]:
        """Hour-of-day and day-of-week distributions with their peaks."""
        hours = self.stats.hourly_activity(records)
        days = self.stats.daily_activity(records)

        # index() returns the earliest slot on ties
        peak_hour = hours.index(max(hours))
        peak_day = days.index(max(days))

        return {
            "peak_hour": peak_hour,
            "peak_day": WEEKDAY_NAMES[peak_day],
            "time_distribution": hours,
            "day_distribution": dict(zip(WEEKDAY_NAMES, days)),
        }

    def analyze_score_patterns(self, records: Sequence[GameRecord]) -> Dict[str, float]:
        scores = [r.score for r in records]
        return {
            "mean": self.stats.mean(scores),
            "median": self.stats.median(scores),
            "std": self.stats.standard_deviation(scores),
            "trend": self.stats.trend(scores),
            "improvement": self.stats.long_term_improvement(scores),
        }

    def analyze_game_patterns(self, records: Sequence[GameRecord]) -> Dict[str, Any]:
        game_counts = Counter(r.game_type.value for r in records)
        difficulty_counts = Counter(r.difficulty.value for r in records)

        return {
            "favorite_game": game_counts.most_common(1)[0][0] if game_counts else None,
            "preferred_difficulty": (
                difficulty_counts.most_common(1)[0][0] if difficulty_counts else None
            ),
            "game_distribution": dict(game_counts),
            "difficulty_distribution": dict(difficulty_counts),
        }
