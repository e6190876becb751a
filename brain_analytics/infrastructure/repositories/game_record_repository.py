"""
Game Record Repositories

Record store implementations: SQL-backed (SQLAlchemy) and in-memory.
"""

import logging
import threading
from collections import defaultdict
from datetime import datetime
from typing import Dict, Iterable, List, Optional

import pytz
from sqlalchemy import Boolean, Column, DateTime, Float, Integer, String
from sqlalchemy.exc import SQLAlchemyError

from brain_analytics.domain.entities.entities import GameRecord
from brain_analytics.domain.exceptions import UpstreamFetchException
from brain_analytics.domain.repositories.repositories import GameRecordRepository
from brain_analytics.infrastructure.database.database_service import Base, DatabaseService

logger = logging.getLogger(__name__)


class GameRecordModel(Base):
    """
    SQLAlchemy model for a played game.
    """
    __tablename__ = "game_records"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String, index=True, nullable=False)
    game_type = Column(String, nullable=False)
    difficulty = Column(String, nullable=False, default="medium")
    score = Column(Integer, nullable=False)
    play_time = Column(Float, nullable=False)
    mistakes = Column(Integer, nullable=False, default=0)
    completed = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    def to_entity(self) -> GameRecord:
        return GameRecord(
            game_type=self.game_type,
            difficulty=self.difficulty,
            score=self.score,
            play_time=self.play_time,
            mistakes=self.mistakes or 0,
            completed=bool(self.completed),
            timestamp=self.created_at,
        )


class SqlGameRecordRepository(GameRecordRepository):
    """
    Record store backed by the game_records table.
    """

    def __init__(self, db_service: DatabaseService):
        self.db_service = db_service

    def create_tables(self):
        """Create all tables defined in Base."""
        self.db_service.create_tables()

    def add_record(self, user_id: str, record: GameRecord) -> None:
        try:
            with self.db_service.session_scope() as session:
                session.add(GameRecordModel(
                    user_id=user_id,
                    game_type=record.game_type.value,
                    difficulty=record.difficulty.value,
                    score=record.score,
                    play_time=record.play_time,
                    mistakes=record.mistakes,
                    completed=record.completed,
                    # Stored as naive UTC
                    created_at=record.timestamp.astimezone(pytz.utc).replace(tzinfo=None),
                ))
        except SQLAlchemyError as e:
            logger.error(f"Failed to save game record for user {user_id}: {e}")
            raise UpstreamFetchException(f"Could not save game record: {e}") from e

    def get_records(self, user_id: str) -> List[GameRecord]:
        try:
            with self.db_service.session_scope() as session:
                rows = (
                    session.query(GameRecordModel)
                    .filter(GameRecordModel.user_id == user_id)
                    .order_by(GameRecordModel.created_at)
                    .all()
                )
                return [row.to_entity() for row in rows]
        except SQLAlchemyError as e:
            logger.error(f"Failed to load game records for user {user_id}: {e}")
            raise UpstreamFetchException(f"Could not load game records: {e}") from e


class InMemoryGameRecordRepository(GameRecordRepository):
    """Dict-backed record store for scripts and tests."""

    def __init__(self, records: Optional[Dict[str, Iterable[GameRecord]]] = None):
        self._records: Dict[str, List[GameRecord]] = defaultdict(list)
        self._lock = threading.Lock()
        for user_id, user_records in (records or {}).items():
            self._records[user_id].extend(user_records)

    def add_record(self, user_id: str, record: GameRecord) -> None:
        with self._lock:
            self._records[user_id].append(record)

    def get_records(self, user_id: str) -> List[GameRecord]:
        with self._lock:
            return list(self._records.get(user_id, []))

    def user_ids(self) -> List[str]:
        with self._lock:
            return list(self._records)
