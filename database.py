"""
Database connection and session management for DoseTrack
"""

import logging
from typing import Generator, List
from contextlib import contextmanager
from sqlalchemy import create_engine, event, inspect, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker, Session
from sqlalchemy.pool import StaticPool

from config import settings, TableNames


logger = logging.getLogger(__name__)


def _enable_sqlite_foreign_keys(engine: Engine) -> None:
    @event.listens_for(engine, "connect")
    def set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def build_engine(url: str, echo: bool = False) -> Engine:
    """
    Create an engine for the configured database

    In-memory SQLite shares a single connection so every session sees
    the same database; file-backed SQLite and server databases pool
    normally.
    """
    if url.startswith("sqlite"):
        options = {"connect_args": {"check_same_thread": False}, "echo": echo}
        if ":memory:" in url:
            options["poolclass"] = StaticPool
        engine = create_engine(url, **options)
        _enable_sqlite_foreign_keys(engine)
        return engine

    # PostgreSQL or other databases
    return create_engine(
        url,
        echo=echo,
        pool_size=10,
        max_overflow=20,
        pool_pre_ping=True
    )


engine = build_engine(settings.DATABASE_URL, settings.DATABASE_ECHO)

# Create session factory
SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine
)

# Base class for ORM models
Base = declarative_base()


@contextmanager
def get_db_context() -> Generator[Session, None, None]:
    """
    Context manager for database session.
    Used by services called outside a request.

    Usage:
        with get_db_context() as db:
            db.query(DoseLog).all()
    """
    db = SessionLocal()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def init_db() -> None:
    """
    Initialize database tables.
    Creates all tables defined in models.
    """
    # Import models to register them with Base
    import models  # noqa: F401

    Base.metadata.create_all(bind=engine)
    logger.info(f"Database initialized at: {settings.DATABASE_URL}")


class DatabaseHealthCheck:
    """Database health check utilities"""

    REQUIRED_TABLES = (TableNames.PATIENTS, TableNames.MEDICATIONS, TableNames.DOSE_LOGS)

    @staticmethod
    def is_connected() -> bool:
        """Check if database is connected"""
        try:
            with engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return True
        except Exception:
            logger.exception("Database connectivity check failed")
            return False

    @classmethod
    def missing_tables(cls) -> List[str]:
        """Required tables not present in the database"""
        present = set(inspect(engine).get_table_names())
        return [table for table in cls.REQUIRED_TABLES if table not in present]


# Export commonly used items
__all__ = [
    "engine",
    "SessionLocal",
    "Base",
    "build_engine",
    "get_db_context",
    "init_db",
    "DatabaseHealthCheck"
]
