"""Infrastructure cache module."""

from .prediction_cache import PredictionCache

__all__ = ["PredictionCache"]
