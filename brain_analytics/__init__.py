"""Adaptive performance analytics for brain-training games."""

__version__ = "1.0.0"
