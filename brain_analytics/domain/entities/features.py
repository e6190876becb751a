"""
Feature Vectors

Typed, per-request aggregates derived from a window of game records.
Each vector has a fixed default used when the window is too sparse.
"""

from dataclasses import dataclass, field
from typing import Dict

from brain_analytics.domain.entities.entities import Difficulty, GameType


@dataclass(frozen=True)
class ScoreFeatures:
    """Features for score prediction (one game type and difficulty, 30-day window)."""
    average_score: float
    score_trend: float
    score_variance: float
    average_play_time: float
    average_mistakes: float
    completion_rate: float
    recent_improvement: float
    consistency: float
    difficulty_level: int
    game_experience: int
    data_points: int = 0

    @classmethod
    def default(cls) -> "ScoreFeatures":
        return cls(
            average_score=50,
            score_trend=0,
            score_variance=25,
            average_play_time=300,
            average_mistakes=3,
            completion_rate=0.7,
            recent_improvement=0,
            consistency=0.5,
            difficulty_level=2,
            game_experience=5,
        )


@dataclass(frozen=True)
class EngagementFeatures:
    """Features for engagement prediction (7-day window)."""
    daily_play_frequency: float
    session_duration: float
    session_frequency: float
    game_diversity: float
    completion_rate: float
    return_rate: float


@dataclass(frozen=True)
class ChurnFeatures:
    """
    Features for churn prediction.

    activity_decline compares the last 7 days with the 7 before them;
    score-based fields use the 30-day window; session_dropoff and
    days_since_last_activity use the full history.
    """
    activity_decline: float
    average_score: float
    score_decline: float
    session_dropoff: float
    game_abandonment: float
    satisfaction_score: float
    engagement_score: float
    days_since_last_activity: int


@dataclass(frozen=True)
class DifficultyFeatures:
    """Features for difficulty recommendation (last 10 plays of one game type)."""
    average_score: float
    score_consistency: float
    preferred_difficulty: Difficulty
    improvement_rate: float
    challenge_preference: float
    frustration_level: float

    @classmethod
    def default(cls) -> "DifficultyFeatures":
        return cls(
            average_score=50,
            score_consistency=0.5,
            preferred_difficulty=Difficulty.MEDIUM,
            improvement_rate=0,
            challenge_preference=0.5,
            frustration_level=0.3,
        )


@dataclass(frozen=True)
class GameRecommendationFeatures:
    """Per-game shares and performance over the full history, keyed by catalog game."""
    game_preferences: Dict[GameType, float] = field(default_factory=dict)
    performance_by_game: Dict[GameType, float] = field(default_factory=dict)
    engagement_by_game: Dict[GameType, float] = field(default_factory=dict)
    exploration_tendency: float = 0.0
    skill_level: float = 0.0
    time_availability: float = 0.0
