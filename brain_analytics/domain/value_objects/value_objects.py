"""
Domain Value Objects Module

Value objects are immutable objects that are defined by their attributes rather than identity.
They encapsulate validation logic and provide type safety.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Generic, Optional, TypeVar


T = TypeVar("T")


@dataclass(frozen=True)
class ScoreRange:
    """
    Prediction interval for a score.

    The lower bound is never negative.
    """
    min: int
    max: int

    def __post_init__(self):
        if self.min < 0:
            raise ValueError("Score range minimum cannot be negative")
        if self.max < self.min:
            raise ValueError(f"Score range is inverted: {self.min} > {self.max}")

    @property
    def width(self) -> int:
        return self.max - self.min

    def __contains__(self, score: float) -> bool:
        return self.min <= score <= self.max


class PredictionErrorKind(Enum):
    """Why a prediction could not be computed."""
    INSUFFICIENT_DATA = "insufficient_data"
    UPSTREAM_FAILURE = "upstream_failure"
    INVALID_INPUT = "invalid_input"


@dataclass(frozen=True)
class PredictionOutcome(Generic[T]):
    """
    Either a computed value or the kind of error that prevented it.

    Exactly one of `value` and `error` is set.
    """
    value: Optional[T] = None
    error: Optional[PredictionErrorKind] = None
    message: str = ""

    def __post_init__(self):
        if (self.value is None) == (self.error is None):
            raise ValueError("PredictionOutcome needs exactly one of value or error")

    @classmethod
    def success(cls, value: T) -> "PredictionOutcome[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: PredictionErrorKind, message: str = "") -> "PredictionOutcome[T]":
        return cls(error=error, message=message)

    @property
    def is_success(self) -> bool:
        return self.error is None
