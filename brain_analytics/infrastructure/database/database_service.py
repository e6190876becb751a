"""
Database Service

Engine and session management for the game records database.
"""

import logging
import os
from contextlib import contextmanager
from typing import Iterator, Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

logger = logging.getLogger(__name__)

Base = declarative_base()

DEFAULT_DATABASE_URL = "sqlite:///./brain_analytics.db"


def normalize_database_url(url: str) -> str:
    # Hosted Postgres providers still hand out the legacy postgres:// scheme
    if url.startswith("postgres://"):
        return url.replace("postgres://", "postgresql://", 1)
    return url


class DatabaseService:
    """
    Owns the SQLAlchemy engine for the record store.

    Args:
        db_url: SQLAlchemy URL; DATABASE_URL, then a local SQLite file, when omitted
    """

    def __init__(self, db_url: Optional[str] = None):
        url = db_url or os.getenv("DATABASE_URL")
        if not url:
            url = DEFAULT_DATABASE_URL
            logger.warning(f"DATABASE_URL not set, using {url}")
        self.db_url = normalize_database_url(url)

        engine_kwargs = {"pool_pre_ping": True}
        parsed = make_url(self.db_url)
        if parsed.get_backend_name() == "sqlite":
            # Routes run in FastAPI's threadpool
            engine_kwargs["connect_args"] = {"check_same_thread": False}
            if parsed.database in (None, "", ":memory:"):
                # One shared connection, otherwise every session sees an empty database
                engine_kwargs["poolclass"] = StaticPool

        self.engine = create_engine(self.db_url, **engine_kwargs)
        self.SessionLocal = sessionmaker(bind=self.engine, autoflush=False, expire_on_commit=False)
        logger.info(f"Record database ready ({parsed.get_backend_name()}, {parsed.host or 'local'})")

    def create_tables(self) -> None:
        """Create all tables registered on Base."""
        Base.metadata.create_all(bind=self.engine)
        logger.info("Record tables created")

    def get_session(self) -> Session:
        return self.SessionLocal()

    @contextmanager
    def session_scope(self) -> Iterator[Session]:
        """Session that commits on success and rolls back on error."""
        session = self.get_session()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def dispose(self) -> None:
        self.engine.dispose()
