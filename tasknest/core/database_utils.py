"""
Database utility functions for consistent session management outside of request handlers.

Request handlers get their session from the ``get_db`` dependency; startup hooks,
health checks and maintenance scripts use ``get_db_session`` instead.
"""

import logging
from contextlib import contextmanager
from typing import Generator, List

from sqlalchemy import inspect, text
from sqlalchemy.orm import Session

from tasknest.db.base import Base
from tasknest.db.session import SessionLocal, engine

logger = logging.getLogger(__name__)


@contextmanager
def get_db_session() -> Generator[Session, None, None]:
    """
    Get a database session with proper cleanup using context manager.

    Usage:
        with get_db_session() as db:
            result = db.query(Model).all()

    Commits on success, rolls back and re-raises on any exception.
    """
    db = SessionLocal()
    try:
        yield db
        db.commit()
    except Exception as e:
        db.rollback()
        logger.error(f"Database session error: {e}")
        raise
    finally:
        db.close()


def check_database_connection() -> bool:
    """Return True when a trivial query succeeds."""
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return True
    except Exception as e:
        logger.error(f"Database connection check failed: {e}")
        return False


def get_missing_tables() -> List[str]:
    """Names of ORM tables that do not exist in the connected database."""
    # Registers every model on Base.metadata
    from tasknest import models  # noqa: F401

    existing_tables = inspect(engine).get_table_names()
    required_tables = [table.name for table in Base.metadata.sorted_tables]
    return [table for table in required_tables if table not in existing_tables]


def create_tables() -> None:
    from tasknest import models  # noqa: F401

    Base.metadata.create_all(bind=engine)
    logger.info("Database tables created")
