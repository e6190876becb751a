"""
Predictor Configuration

Runtime options for the performance predictor. Values left unset are read
from the environment, falling back to the documented defaults.
"""

import os
from dataclasses import dataclass
from typing import Optional


DEFAULT_HORIZON_DAYS = 7
DEFAULT_CHURN_HORIZON_DAYS = 30
MAX_HORIZON_DAYS = 3650
DEFAULT_MIN_DATA_POINTS = 20
DEFAULT_CONFIDENCE_THRESHOLD = 0.7
DEFAULT_CACHE_REFRESH_INTERVAL_MS = 24 * 60 * 60 * 1000


@dataclass
class PredictorConfig:
    """
    Configuration for PerformancePredictor.

    Attributes:
        score_horizon_default: Default horizon (days) for score predictions
        engagement_horizon_default: Default horizon (days) for engagement predictions
        churn_horizon_default: Default horizon (days) for churn predictions
        min_data_points: Experience count at which score confidence saturates
        confidence_threshold: Minimum confidence for a prediction to be surfaced
        cache_refresh_interval_ms: Lifetime of the result cache in milliseconds
    """
    score_horizon_default: Optional[int] = None
    engagement_horizon_default: Optional[int] = None
    churn_horizon_default: Optional[int] = None
    min_data_points: Optional[int] = None
    confidence_threshold: Optional[float] = None
    cache_refresh_interval_ms: Optional[int] = None

    def __post_init__(self):
        horizon = int(os.getenv("PREDICTION_HORIZON_DEFAULT", DEFAULT_HORIZON_DAYS))
        if self.score_horizon_default is None:
            self.score_horizon_default = horizon
        if self.engagement_horizon_default is None:
            self.engagement_horizon_default = horizon
        if self.churn_horizon_default is None:
            self.churn_horizon_default = int(
                os.getenv("CHURN_HORIZON_DEFAULT", DEFAULT_CHURN_HORIZON_DAYS)
            )
        if self.min_data_points is None:
            self.min_data_points = int(os.getenv("MIN_DATA_POINTS", DEFAULT_MIN_DATA_POINTS))
        if self.confidence_threshold is None:
            self.confidence_threshold = float(
                os.getenv("CONFIDENCE_THRESHOLD", DEFAULT_CONFIDENCE_THRESHOLD)
            )
        if self.cache_refresh_interval_ms is None:
            self.cache_refresh_interval_ms = int(
                os.getenv("CACHE_REFRESH_INTERVAL_MS", DEFAULT_CACHE_REFRESH_INTERVAL_MS)
            )

        if self.min_data_points < 1:
            raise ValueError("min_data_points must be >= 1")
        if not 0.0 <= self.confidence_threshold <= 1.0:
            raise ValueError("confidence_threshold must be between 0 and 1")
        if self.cache_refresh_interval_ms < 0:
            raise ValueError("cache_refresh_interval_ms cannot be negative")

    @property
    def cache_refresh_interval_seconds(self) -> float:
        return self.cache_refresh_interval_ms / 1000.0
