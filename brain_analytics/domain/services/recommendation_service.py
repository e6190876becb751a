"""
Recommendation Service

Difficulty recommendation by rule cascade and game ranking by a
weighted blend of performance, engagement and preference.
"""

from typing import List

from brain_analytics.domain.entities.entities import (
    Difficulty,
    DifficultyRecommendation,
    GameRecommendation,
    GameType,
)
from brain_analytics.domain.entities.features import (
    DifficultyFeatures,
    GameRecommendationFeatures,
)

DEFAULT_RECOMMENDED_GAMES = (
    GameType.MEMORY_GAME,
    GameType.REACTION_GAME,
    GameType.CALCULATION_GAME,
)


class RecommendationService:
    """
    Generates difficulty and game recommendations from feature vectors.
    """

    def calculate_difficulty_recommendation(
        self,
        features: DifficultyFeatures,
    ) -> DifficultyRecommendation:
        """
        Recommend a difficulty. Rules are evaluated in order, first match wins:

        1. score > 80, consistency > 0.8, improving  -> hard (0.9)
        2. score > 60, consistency > 0.6             -> medium (0.7)
        3. score < 40 or consistency < 0.4           -> easy (0.8)
        4. otherwise                                 -> medium (0.5)
        """
        score = features.average_score
        consistency = features.score_consistency
        improvement = features.improvement_rate

        if score > 80 and consistency > 0.8 and improvement > 0:
            recommended, confidence = Difficulty.HARD, 0.9
        elif score > 60 and consistency > 0.6:
            recommended, confidence = Difficulty.MEDIUM, 0.7
        elif score < 40 or consistency < 0.4:
            recommended, confidence = Difficulty.EASY, 0.8
        else:
            recommended, confidence = Difficulty.MEDIUM, 0.5

        return DifficultyRecommendation(
            recommended=recommended,
            confidence=confidence,
            reasoning=self.generate_difficulty_reasoning(features),
        )

    @staticmethod
    def generate_difficulty_reasoning(features: DifficultyFeatures) -> str:
        if features.average_score > 80:
            return "Scores are consistently high; a harder challenge is recommended"
        if features.average_score < 40:
            return "Build up the fundamentals at an easier level first"
        return "Results are steady at the current level; keep practicing at this difficulty"

    def calculate_game_recommendations(
        self,
        features: GameRecommendationFeatures,
        count: int,
    ) -> List[GameRecommendation]:
        """
        Rank the catalog games and return the top `count`.

        score = performance*0.4 + engagement*0.3 + preference*0.3.
        Ties keep catalog order.
        """
        game_scores = []
        for game_type in GameType:
            performance = features.performance_by_game.get(game_type, 0.0)
            engagement = features.engagement_by_game.get(game_type, 0.0)
            preference = features.game_preferences.get(game_type, 0.0)
            score = performance * 0.4 + engagement * 0.3 + preference * 0.3
            game_scores.append((game_type, score))

        # sorted() is stable, so equal scores stay in catalog order
        ranked = sorted(game_scores, key=lambda item: item[1], reverse=True)

        return [
            GameRecommendation(
                rank=index + 1,
                game_type=game_type,
                game_name=game_type.display_name,
                score=score,
                confidence=self.calculate_recommendation_confidence(score),
            )
            for index, (game_type, score) in enumerate(ranked[:count])
        ]

    @staticmethod
    def calculate_recommendation_confidence(score: float) -> float:
        return max(0.0, min(score * 1.2, 1.0))

    @staticmethod
    def default_difficulty_recommendation() -> DifficultyRecommendation:
        return DifficultyRecommendation(
            recommended=Difficulty.MEDIUM,
            confidence=0.5,
            is_default=True,
        )

    @staticmethod
    def default_game_recommendations(count: int) -> List[GameRecommendation]:
        return [
            GameRecommendation(
                rank=index + 1,
                game_type=game_type,
                game_name=game_type.display_name,
                score=0.5,
                confidence=0.5,
            )
            for index, game_type in enumerate(DEFAULT_RECOMMENDED_GAMES[:count])
        ]
