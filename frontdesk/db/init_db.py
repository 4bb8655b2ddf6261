"""Database initialization utilities."""

from typing import Optional

from sqlalchemy import inspect
from sqlalchemy.engine import Engine

from frontdesk.config.logging import get_logger
from frontdesk.models import Base

logger = get_logger(__name__)


def init_db(bind: Optional[Engine] = None) -> None:
    """
    Create any missing tables.

    Suitable for development and tests; production schemas are expected to
    be managed by migrations.
    """
    if bind is None:
        from frontdesk.db.session import engine as bind

    existing_tables = set(inspect(bind).get_table_names())
    Base.metadata.create_all(bind=bind)
    created = set(Base.metadata.tables) - existing_tables
    if created:
        logger.info(f"Created tables: {', '.join(sorted(created))}")
    else:
        logger.info(f"Database already initialized with {len(existing_tables)} tables")


def drop_db(bind: Optional[Engine] = None) -> None:
    """
    Drop all tables.

    WARNING: This deletes all data. Development and tests only.
    """
    if bind is None:
        from frontdesk.db.session import engine as bind

    Base.metadata.drop_all(bind=bind)
    logger.warning("All database tables dropped")
