"""
Database Configuration Module

SQLAlchemy 2.0 setup for the bookstore core.

PostgreSQL (psycopg2) is the production target; SQLite is supported for
local runs and tests. The engine is created once per process, but the core
services never reach for it directly: every operation receives an explicit
Session from its caller.

Session Management Pattern
==========================
We use the "session per request" pattern:
1. Request arrives -> create a new session
2. Pass it to the service functions for that request
3. Services commit on success, roll back on failure
4. Close session when request ends
"""

from collections.abc import Generator
from typing import Any

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from bookstore.config import Settings, get_settings

settings = get_settings()


# =============================================================================
# Database Engine
# =============================================================================
def build_engine(config: Settings) -> Engine:
    """
    Create an engine for the configured database URL.

    SQLite gets check_same_thread=False (sessions cross threads under the
    test client) and a busy timeout so concurrent writers wait for the
    database lock instead of failing at once. Pool sizing only applies to
    server databases.
    """
    kwargs: dict[str, Any] = {"echo": config.debug}

    if config.is_sqlite:
        kwargs["connect_args"] = {
            "check_same_thread": False,
            "timeout": config.sqlite_busy_timeout,
        }
    else:
        kwargs.update(
            pool_size=config.db_pool_size,
            max_overflow=config.db_max_overflow,
            pool_pre_ping=True,  # Verify connections are alive before using
        )

    return create_engine(config.database_url, **kwargs)


engine = build_engine(settings)


# =============================================================================
# Session Factory
# =============================================================================
# - autocommit=False: services decide when to commit
# - autoflush=False: flushes are explicit so the order of writes inside
#   one transaction stays predictable

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)


# =============================================================================
# Base Model Class
# =============================================================================
class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy models.

    Alembic uses Base.metadata to discover the tables for migrations.
    """
    pass


# =============================================================================
# Dependency Injection
# =============================================================================
def get_db() -> Generator[Session, None, None]:
    """
    Database session dependency for FastAPI.

    Creates a session, yields it to the route handler and closes it when
    the request ends, even if an exception was raised.

    Usage in Routes:
        @router.get("/books/{book_id}")
        def get_book(book_id: int, db: DbSession):
            return catalog.get_book(db, book_id)

    Yields:
        SQLAlchemy Session instance
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


# =============================================================================
# Utility Functions
# =============================================================================
def create_tables(bind: Engine | None = None) -> None:
    """
    Create all database tables.

    WARNING: In production, use Alembic migrations instead!
    """
    # Import models so every table is registered on Base.metadata
    import bookstore.models  # noqa: F401

    Base.metadata.create_all(bind=bind or engine)


def drop_tables(bind: Engine | None = None) -> None:
    """
    Drop all database tables.

    DANGER: This deletes all data! Development and tests only.
    """
    import bookstore.models  # noqa: F401

    Base.metadata.drop_all(bind=bind or engine)
