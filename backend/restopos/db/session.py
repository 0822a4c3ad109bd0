"""Database session management.

The SQL data source and the app config share one engine. SQLite is the
default; any SQLAlchemy URL works.
"""

import os
from collections.abc import Generator
from typing import Annotated

from fastapi import Depends
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from restopos.core.config import settings


def build_engine(database_url: str) -> Engine:
    """Create the engine, with SQLite-specific connection handling."""
    if not database_url.startswith("sqlite"):
        return create_engine(
            database_url,
            pool_size=5,
            max_overflow=10,
            pool_pre_ping=True,
            pool_recycle=3600,
        )

    if ":memory:" in database_url:
        # One shared connection, otherwise every session sees an empty database
        sqlite_engine = create_engine(
            database_url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    else:
        sqlite_engine = create_engine(
            database_url,
            connect_args={"check_same_thread": False, "timeout": 15},
            pool_pre_ping=True,
        )

    @event.listens_for(sqlite_engine, "connect")
    def set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        if ":memory:" not in database_url:
            # Order saves rewrite whole collections; WAL keeps readers unblocked
            cursor.execute("PRAGMA journal_mode=WAL")
        cursor.close()

    return sqlite_engine


if settings.sqlite_path:
    os.makedirs(os.path.dirname(os.path.abspath(settings.sqlite_path)), exist_ok=True)

engine = build_engine(settings.database_url)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Generator[Session, None, None]:
    """Get database session dependency."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


DbSession = Annotated[Session, Depends(get_db)]
