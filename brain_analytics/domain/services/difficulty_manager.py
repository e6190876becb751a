"""
Difficulty Manager

Per-game difficulty settings, difficulty-weighted scoring and adaptive
difficulty. Progress is derived from the record history on each call.
"""

import logging
from typing import Any, Dict, List, Optional, Sequence

from brain_analytics.domain.constants import (
    DEFAULT_DIFFICULTY_GOAL,
    DIFFICULTY_GOALS,
    DIFFICULTY_HISTORY_SIZE,
    GAME_SETTINGS,
    HINT_SETTINGS,
)
from brain_analytics.domain.entities.entities import (
    Difficulty,
    DifficultyAdjustment,
    GameRecord,
    GameStats,
    GameType,
)
from brain_analytics.domain.exceptions import InvalidInputException
from brain_analytics.domain.services.statistics_service import StatisticsService

logger = logging.getLogger(__name__)

DIFFICULTY_ORDER = list(Difficulty)


class DifficultyManager:
    """
    Manages difficulty settings and adaptive difficulty for each game.
    """

    def get_game_settings(self, game_type: GameType, difficulty: Difficulty) -> Dict[str, Any]:
        """
        Get the parameter table for a game at a difficulty.

        Raises:
            InvalidInputException: if the game has no settings for the difficulty
        """
        settings = GAME_SETTINGS.get(game_type.value, {}).get(difficulty.value)
        if settings is None:
            raise InvalidInputException(
                f"Invalid game or difficulty: {game_type.value}, {difficulty.value}"
            )
        return dict(settings)

    def get_game_specific_settings(
        self,
        game_type: GameType,
        difficulty: Difficulty,
        custom_params: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """Game settings overlaid with caller overrides."""
        settings = self.get_game_settings(game_type, difficulty)
        settings.update(custom_params or {})
        return settings

    @staticmethod
    def calculate_score(
        base_score: float,
        difficulty: Difficulty,
        time_bonus: float = 0,
        streak_bonus: float = 0,
        accuracy_bonus: float = 0,
    ) -> int:
        """Difficulty-weighted score: base * multiplier + bonuses."""
        final_score = base_score * difficulty.multiplier
        final_score += time_bonus + streak_bonus + accuracy_bonus
        return round(final_score)

    @staticmethod
    def increase_difficulty(current: Difficulty) -> Difficulty:
        index = DIFFICULTY_ORDER.index(current)
        return DIFFICULTY_ORDER[min(index + 1, len(DIFFICULTY_ORDER) - 1)]

    @staticmethod
    def decrease_difficulty(current: Difficulty) -> Difficulty:
        index = DIFFICULTY_ORDER.index(current)
        return DIFFICULTY_ORDER[max(index - 1, 0)]

    def get_user_stats(self, records: Sequence[GameRecord], game_type: GameType) -> GameStats:
        """
        Progress for one game.

        The average covers the last 10 plays. The preferred difficulty is
        the one of the latest completed play scoring above 70.
        """
        history = StatisticsService.sort_by_time([r for r in records if r.game_type == game_type])
        if not history:
            return GameStats()

        recent_scores = [r.score for r in history[-DIFFICULTY_HISTORY_SIZE:]]
        preferred = Difficulty.EASY
        for record in history:
            if record.completed and record.score > 70:
                preferred = record.difficulty

        return GameStats(
            total_games=len(history),
            average_score=StatisticsService.mean(recent_scores),
            best_score=max(r.score for r in history),
            recent_scores=recent_scores,
            preferred_difficulty=preferred,
        )

    @staticmethod
    def get_base_difficulty(stats: GameStats) -> Difficulty:
        if stats.total_games < 5:
            return Difficulty.EASY
        if stats.average_score > 70:
            return Difficulty.HARD
        if stats.average_score > 40:
            return Difficulty.MEDIUM
        return Difficulty.EASY

    def calculate_adaptive_difficulty(
        self,
        records: Sequence[GameRecord],
        game_type: GameType,
    ) -> Difficulty:
        """Base difficulty from overall progress, nudged by recent scores."""
        stats = self.get_user_stats(records, game_type)
        base = self.get_base_difficulty(stats)

        recent_average = StatisticsService.mean(stats.recent_scores) if stats.recent_scores else 50

        if recent_average > 80:
            return self.increase_difficulty(base)
        if recent_average < 30:
            return self.decrease_difficulty(base)
        return base

    def adjust_difficulty_dynamically(
        self,
        current: Difficulty,
        score: float,
        completed: bool,
    ) -> DifficultyAdjustment:
        """React to the latest play: step up on a strong finish, down on a poor one."""
        new_difficulty = current
        reason = None

        if score > 85 and completed:
            new_difficulty = self.increase_difficulty(current)
            reason = "high_performance"
        elif score < 30 or not completed:
            new_difficulty = self.decrease_difficulty(current)
            reason = "low_performance"

        if new_difficulty != current:
            logger.info(
                f"Difficulty adjusted {current.value} -> {new_difficulty.value} ({reason})"
            )
        else:
            reason = None

        return DifficultyAdjustment(
            previous_difficulty=current,
            new_difficulty=new_difficulty,
            reason=reason,
        )

    @staticmethod
    def get_difficulty_goals(game_type: GameType, difficulty: Difficulty) -> Dict[str, float]:
        goals = DIFFICULTY_GOALS.get(game_type.value, {}).get(difficulty.value)
        return dict(goals or DEFAULT_DIFFICULTY_GOAL)

    @staticmethod
    def get_hints(game_type: GameType, difficulty: Difficulty) -> Dict[str, bool]:
        return dict(HINT_SETTINGS.get(game_type.value, {}).get(difficulty.value, {}))

    def generate_difficulty_report(
        self,
        user_id: str,
        records: Sequence[GameRecord],
    ) -> Dict[str, Any]:
        """Per-game progress, overall averages and practice recommendations."""
        game_stats: Dict[GameType, GameStats] = {}
        total_games = 0
        total_score = 0.0

        for game_type in GameType:
            stats = self.get_user_stats(records, game_type)
            if stats.total_games == 0:
                continue
            game_stats[game_type] = stats
            total_games += stats.total_games
            total_score += stats.average_score * stats.total_games

        overall_difficulty = StatisticsService.most_frequent(
            [s.preferred_difficulty for s in game_stats.values()]
        ) if game_stats else Difficulty.EASY

        return {
            "user_id": user_id,
            "overall_stats": {
                "total_games": total_games,
                "average_score": total_score / total_games if total_games else 0.0,
                "preferred_difficulty": overall_difficulty,
            },
            "game_stats": game_stats,
            "recommendations": self.generate_recommendations(game_stats),
        }

    @staticmethod
    def generate_recommendations(game_stats: Dict[GameType, GameStats]) -> List[Dict[str, str]]:
        recommendations = []

        for game_type, stats in game_stats.items():
            name = game_type.display_name
            if stats.total_games < 3:
                recommendations.append({
                    "game_type": game_type.value,
                    "type": "practice_more",
                    "message": f"Practice {name} a bit more",
                    "priority": "high",
                })
            elif stats.average_score > 80:
                recommendations.append({
                    "game_type": game_type.value,
                    "type": "increase_difficulty",
                    "message": f"Try {name} at a higher difficulty",
                    "priority": "medium",
                })
            elif stats.average_score < 40:
                recommendations.append({
                    "game_type": game_type.value,
                    "type": "decrease_difficulty",
                    "message": f"Try {name} at a lower difficulty",
                    "priority": "high",
                })

        return recommendations
