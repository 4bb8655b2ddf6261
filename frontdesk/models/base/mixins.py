"""
SQLAlchemy model mixins for reusable functionality.
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import DateTime, String
from sqlalchemy.orm import Mapped, mapped_column


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TimestampMixin:
    """
    Mixin for automatic timestamp tracking.

    Provides created_at and updated_at fields with
    timezone-aware timestamps set on the Python side.
    """

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        index=True,
        comment="Record creation timestamp (UTC)"
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        onupdate=utcnow,
        comment="Record last update timestamp (UTC)"
    )


class AuditMixin:
    """
    Mixin for audit trail tracking.

    Records which user created and last updated the record.
    """

    created_by: Mapped[Optional[str]] = mapped_column(
        String(36),
        nullable=True,
        comment="User who created the record"
    )
    updated_by: Mapped[Optional[str]] = mapped_column(
        String(36),
        nullable=True,
        comment="User who last updated the record"
    )
