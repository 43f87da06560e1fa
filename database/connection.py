"""
Database connection and session management.

One pooled engine is created per process on first use; sessions are
acquired through a context manager that always releases the connection.
"""
import logging
from contextlib import contextmanager
from typing import Generator, Optional
from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

from config.settings import settings, ConfigurationError
from .models import Base

logger = logging.getLogger(__name__)

_engine: Optional[Engine] = None
SessionLocal = sessionmaker(autocommit=False, autoflush=False)


def _ensure_database_exists(database_url: str):
    """Create the MySQL database if it does not already exist."""
    url = make_url(database_url)
    db_name = url.database
    tmp_engine = create_engine(url.set(database=None), pool_pre_ping=True)
    with tmp_engine.connect() as conn:
        conn.execute(text(f"CREATE DATABASE IF NOT EXISTS `{db_name}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"))
        conn.commit()
    tmp_engine.dispose()


def _create_engine(database_url: str) -> Engine:
    url = make_url(database_url)

    if url.get_backend_name() == "sqlite":
        # In-memory SQLite must share one connection across threads
        return create_engine(
            url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
            echo=False,
        )

    if url.get_backend_name() == "mysql":
        _ensure_database_exists(database_url)

    return create_engine(
        url,
        pool_pre_ping=True,
        pool_recycle=3600,
        echo=False,
    )


def get_engine() -> Engine:
    """
    Get the process-wide engine, creating it on first use.

    Raises:
        ConfigurationError: If DATABASE_URL is not set
    """
    global _engine
    if _engine is None:
        database_url = settings.require("database_url")
        _engine = _create_engine(database_url)
        SessionLocal.configure(bind=_engine)
        logger.info("Database engine created for backend '%s'", _engine.url.get_backend_name())
    return _engine


def dispose_engine():
    """Dispose of the engine and its pool (on shutdown or in tests)."""
    global _engine
    if _engine is not None:
        _engine.dispose()
        _engine = None
        logger.info("Database engine disposed")


def init_db():
    """Initialize database by creating all tables."""
    Base.metadata.create_all(bind=get_engine())


def get_db() -> Generator[Session, None, None]:
    """
    Get database session.
    Use as dependency injection in FastAPI.
    """
    get_engine()
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def get_db_context():
    """
    Context manager for database session.
    Commits on success, rolls back on error, always closes.
    """
    get_engine()
    db = SessionLocal()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()
