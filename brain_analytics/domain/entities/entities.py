"""
Domain Entities Module

This module contains the core domain entities for the brain-training analytics system.
These entities represent the core business concepts and are independent of any infrastructure.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Union
from enum import Enum

from brain_analytics.domain.constants import DIFFICULTY_LEVELS, GAME_NAMES
from brain_analytics.domain.exceptions import InvalidInputException
from brain_analytics.domain.value_objects.value_objects import ScoreRange
from brain_analytics.utils.time_utils import ensure_aware


class GameType(Enum):
    """Known brain-training games, in catalog order."""
    MEMORY_GAME = "memory_game"
    REACTION_GAME = "reaction_game"
    CALCULATION_GAME = "calculation_game"
    PATTERN_MEMORY = "pattern_memory"
    PUZZLE_GAME = "puzzle_game"

    @classmethod
    def parse(cls, value: Union[str, "GameType"]) -> "GameType":
        """Parse a game identifier, raising InvalidInputException if unknown."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise InvalidInputException(
                f"Unknown game type: {value!r}. Available: {[g.value for g in cls]}"
            ) from None

    @property
    def display_name(self) -> str:
        return GAME_NAMES.get(self.value, self.value)


class Difficulty(Enum):
    """Difficulty levels, ordered from easiest to hardest."""
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"
    EXPERT = "expert"

    @classmethod
    def parse(cls, value: Union[str, "Difficulty"]) -> "Difficulty":
        """Parse a difficulty name, raising InvalidInputException if malformed."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise InvalidInputException(
                f"Unknown difficulty: {value!r}. Available: {[d.value for d in cls]}"
            ) from None

    @property
    def encoding(self) -> int:
        """Ordinal encoding: easy=1 ... expert=4."""
        return DIFFICULTY_LEVELS[self.value]["encoding"]

    @property
    def multiplier(self) -> float:
        return DIFFICULTY_LEVELS[self.value]["multiplier"]


class RiskLevel(Enum):
    """Churn risk classification."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class EngagementTrend(Enum):
    INCREASING = "increasing"
    DECREASING = "decreasing"
    STABLE = "stable"


@dataclass(frozen=True)
class GameRecord:
    """
    A single completed (or abandoned) play of a game.

    Records are owned by the record store; the predictor never mutates them.

    Attributes:
        game_type: Which game was played
        difficulty: Difficulty the game was played at
        score: Final score (non-negative)
        play_time: Play time in seconds (non-negative)
        completed: Whether the game was finished
        timestamp: When the game was played (naive values are treated as UTC)
        mistakes: Mistakes made during the game
    """
    game_type: GameType
    difficulty: Difficulty
    score: int
    play_time: float
    completed: bool
    timestamp: datetime
    mistakes: int = 0

    def __post_init__(self):
        if self.score < 0:
            raise ValueError("Score cannot be negative")
        if self.play_time < 0:
            raise ValueError("Play time cannot be negative")
        if self.mistakes < 0:
            raise ValueError("Mistakes cannot be negative")
        object.__setattr__(self, "game_type", GameType.parse(self.game_type))
        object.__setattr__(self, "difficulty", Difficulty.parse(self.difficulty))
        object.__setattr__(self, "timestamp", ensure_aware(self.timestamp))


@dataclass
class ScorePrediction:
    """
    Future score estimate for one game type and difficulty.

    Attributes:
        prediction: Predicted score (rounded, >= 0)
        confidence: Confidence in the prediction (0-1)
        range: Prediction interval
        factors: Contribution of each term of the formula
        horizon: Days ahead the prediction targets
    """
    prediction: int
    confidence: float
    range: ScoreRange
    horizon: int
    factors: Dict[str, float] = field(default_factory=dict)
    is_default: bool = False

    def __post_init__(self):
        if not 0.0 <= self.confidence <= 1.0:
            raise ValueError(f"Confidence must be between 0 and 1, got {self.confidence}")


@dataclass
class EngagementPrediction:
    """Expected daily play frequency at the horizon."""
    prediction: float
    confidence: float
    trend: EngagementTrend
    horizon: int
    factors: Dict[str, float] = field(default_factory=dict)
    is_default: bool = False

    def __post_init__(self):
        if not 0.0 <= self.confidence <= 1.0:
            raise ValueError(f"Confidence must be between 0 and 1, got {self.confidence}")


@dataclass
class ChurnPrediction:
    """
    Probability that the user stops playing within the horizon.

    Attributes:
        probability: Churn probability, strictly inside (0, 1)
        confidence: Confidence in the estimate (0-1)
        risk_level: low / medium / high classification of the probability
        factors: Raw risk factors that fed the model
        recommendations: Retention suggestions triggered by threshold breaches
        horizon: Days ahead the prediction targets
    """
    probability: float
    confidence: float
    risk_level: RiskLevel
    horizon: int
    factors: Dict[str, float] = field(default_factory=dict)
    recommendations: List[str] = field(default_factory=list)
    is_default: bool = False

    def __post_init__(self):
        if not 0.0 <= self.probability <= 1.0:
            raise ValueError(f"Probability must be between 0 and 1, got {self.probability}")
        if not 0.0 <= self.confidence <= 1.0:
            raise ValueError(f"Confidence must be between 0 and 1, got {self.confidence}")


@dataclass
class DifficultyRecommendation:
    recommended: Difficulty
    confidence: float
    reasoning: str = ""
    is_default: bool = False


@dataclass
class GameRecommendation:
    """A ranked game suggestion (rank is 1-based)."""
    rank: int
    game_type: GameType
    game_name: str
    score: float
    confidence: float


@dataclass
class DifficultyAdjustment:
    """Outcome of a dynamic difficulty adjustment."""
    previous_difficulty: Difficulty
    new_difficulty: Difficulty
    reason: Optional[str] = None

    @property
    def changed(self) -> bool:
        return self.previous_difficulty != self.new_difficulty


@dataclass
class GameStats:
    """Per-game progress derived from a user's records."""
    total_games: int = 0
    average_score: float = 0.0
    best_score: int = 0
    recent_scores: List[int] = field(default_factory=list)
    preferred_difficulty: Difficulty = Difficulty.EASY


@dataclass
class BehaviorAnalysis:
    """Detected play patterns for a user."""
    user_id: str
    time_patterns: Dict[str, Any] = field(default_factory=dict)
    score_patterns: Dict[str, float] = field(default_factory=dict)
    game_patterns: Dict[str, Any] = field(default_factory=dict)
    record_count: int = 0
