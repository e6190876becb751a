"""
Domain Repository Interfaces Module

These are abstract interfaces that define how the domain layer accesses data.
Concrete implementations are provided in the infrastructure layer.
This follows the Dependency Inversion Principle (DIP).
"""

from abc import ABC, abstractmethod

from brain_analytics.domain.entities.entities import GameRecord


class GameRecordRepository(ABC):
    """Abstract record store for a user's game history."""

    @abstractmethod
    def get_records(self, user_id: str) -> list[GameRecord]:
        """
        Get the full game history for a user.

        Implementations raise UpstreamFetchException when the
        underlying store cannot be reached.
        """
        pass
