"""
Database engine configuration.

Builds the SQLAlchemy engine from settings, adjusting pool and connect
arguments for SQLite (development and tests) versus PostgreSQL.
"""

from typing import Any, Dict, Optional

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine

from frontdesk.config.settings import settings


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def build_engine(database_url: Optional[str] = None, **overrides: Any) -> Engine:
    """
    Create a SQLAlchemy engine for the given URL.

    Args:
        database_url: Connection URL (defaults to settings.DATABASE_URL)
        **overrides: Extra keyword arguments passed to create_engine

    Returns:
        Configured engine
    """
    url = database_url or settings.DATABASE_URL
    kwargs: Dict[str, Any] = {
        "echo": settings.DB_ECHO,
        "pool_pre_ping": True,
    }
    if url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
    else:
        kwargs["pool_size"] = settings.DB_POOL_SIZE
        kwargs["max_overflow"] = settings.DB_POOL_OVERFLOW
    kwargs.update(overrides)

    engine = create_engine(url, **kwargs)
    if url.startswith("sqlite"):
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
    return engine
