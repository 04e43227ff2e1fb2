#!/usr/bin/env python
"""
Database session management for the content platform.

This module provides:
1. The SQLAlchemy engine built from ``settings.DATABASE_URL``
2. The session factory and a generator dependency for request scoped sessions
3. A transactional scope for scripts
4. Schema initialization

Usage:
    from app.db.session import session_scope

    with session_scope() as db:
        CityService(db).find_all(language="en")
"""

import logging
from contextlib import contextmanager
from typing import Generator, Optional

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from app.core.config import settings
from app.db.models import Base

# Configure module logger
logger = logging.getLogger(__name__)


def configure_sqlite_engine(engine: Engine) -> Engine:
    """
    Enable foreign keys and SAVEPOINT support on a SQLite engine.

    pysqlite defers BEGIN on its own, which breaks nested transactions;
    transaction control is handed back to SQLAlchemy instead.
    """
    if engine.dialect.name != "sqlite":
        return engine

    @event.listens_for(engine, "connect")
    def set_sqlite_pragma(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON;")
        cursor.close()

    @event.listens_for(engine, "begin")
    def do_begin(conn):
        conn.exec_driver_sql("BEGIN")

    return engine


def build_engine(database_url: Optional[str] = None, **kwargs) -> Engine:
    """
    Create an engine for a database URL (defaults to ``settings.DATABASE_URL``).

    Args:
        database_url: SQLAlchemy URL
        **kwargs: Extra ``create_engine`` arguments

    Returns:
        Configured engine
    """
    url = database_url or settings.DATABASE_URL
    options = {"echo": settings.DB_ECHO, "pool_pre_ping": True}
    if url.startswith("sqlite"):
        options["connect_args"] = {"check_same_thread": False}
    options.update(kwargs)

    logger.info(f"Creating SQLAlchemy engine for {url.split('@')[-1]}")
    return configure_sqlite_engine(create_engine(url, **options))


engine = build_engine()

# Create session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Generator[Session, None, None]:
    """
    Get a database session with proper resource management.

    Returns:
        SQLAlchemy Session for database operations
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def session_scope(session: Optional[Session] = None):
    """
    Context manager for database transactions.

    Args:
        session: Optional session to use (if None, creates a new one)

    Yields:
        Database session for use within the transaction
    """
    close_session = False

    if session is None:
        session = SessionLocal()
        close_session = True

    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        if close_session:
            session.close()


def verify_db_connection(bind: Optional[Engine] = None) -> bool:
    """
    Verify that we can connect to the database.

    Returns:
        True if connection succeeds, False otherwise
    """
    try:
        with (bind or engine).connect() as connection:
            connection.execute(text("SELECT 1")).scalar()
            return True
    except Exception as e:
        logger.error(f"Database connection verification failed: {e}")
        return False


def init_db(reset: bool = False, bind: Optional[Engine] = None) -> bool:
    """
    Initialize the database schema.

    Args:
        reset: Whether to drop and recreate every table
        bind: Engine to use (defaults to the module engine)

    Returns:
        True if initialization succeeds, False otherwise
    """
    bind = bind or engine
    logger.info("Initializing database schema...")

    if not verify_db_connection(bind):
        logger.error("Engine connection test failed before create_all")
        return False

    try:
        if reset:
            logger.info("Dropping all tables for reset...")
            Base.metadata.drop_all(bind=bind)

        Base.metadata.create_all(bind=bind)
        logger.info(f"Database schema initialized with {len(Base.metadata.tables)} tables")
        return True
    except Exception as e:
        logger.error(f"Database schema initialization failed: {str(e)}")
        logger.exception("Database initialization error details:")
        return False
