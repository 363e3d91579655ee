"""
Database configuration for BorderWatch.

This module provides the SQLAlchemy engine, session factory and declarative base.
"""

from typing import Generator
import sqlite3
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from borderwatch.core.config import settings
from borderwatch.core.logging import logger


def create_db_engine(database_url: str) -> Engine:
    """
    Create the SQLAlchemy engine for a database URL.

    In-memory SQLite databases share a single connection so every session
    sees the same tables.
    """
    if database_url.startswith("sqlite") and ":memory:" in database_url:
        return create_engine(
            database_url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
            echo=False,
        )

    if database_url.startswith("sqlite"):
        return create_engine(
            database_url,
            connect_args={"check_same_thread": False},  # Needed for SQLite
            pool_pre_ping=True,
            pool_size=5,
            max_overflow=10,
            pool_recycle=1800,
            echo=False,
        )

    return create_engine(database_url, pool_pre_ping=True, pool_recycle=1800, echo=False)


engine = create_db_engine(settings.DATABASE_URL)

# Enable SQLite foreign key support
@event.listens_for(Engine, "connect")
def set_sqlite_pragma(dbapi_connection, connection_record):
    if isinstance(dbapi_connection, sqlite3.Connection):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.execute("PRAGMA synchronous=NORMAL")
        cursor.close()

# Create session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Base class for SQLAlchemy models
Base = declarative_base()

def get_db() -> Generator:
    """
    Get database session.

    Yields:
        Session: Database session.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

def init_db() -> None:
    """
    Initialize database by creating all tables.
    """
    # Import all models here to ensure they are registered with Base
    from borderwatch.models.user import User
    from borderwatch.models.threat import Threat
    from borderwatch.models.report import Report, ReportComment
    from borderwatch.models.alert import Alert
    from borderwatch.models.safe_zone import SafeZone
    from borderwatch.models.education import EducationResource
    from borderwatch.models.contact import EmergencyContact
    from borderwatch.models.chat import ChatMessage

    Base.metadata.create_all(bind=engine)

    logger.info(f"Database initialized at {settings.DATABASE_URL}")
