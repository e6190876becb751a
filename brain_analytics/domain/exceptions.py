"""
Domain exceptions for the prediction system.
"""

class PredictionException(Exception):
    """Base exception for prediction-related errors."""
    pass

class InsufficientDataException(PredictionException):
    """Exception raised when there is not enough game history to generate a reliable prediction."""
    pass

class UpstreamFetchException(PredictionException):
    """Exception raised when the record store cannot provide a user's game history."""
    pass

class InvalidInputException(PredictionException, ValueError):
    """Exception raised for unknown game types, difficulties or out-of-range parameters."""
    pass
