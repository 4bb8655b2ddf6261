"""
Room history model.

One row per occupancy episode of a room, from the first guest's check-in
until the room is fully vacated. Rows are never deleted.
"""

from datetime import date, datetime
from typing import Optional

from sqlalchemy import Date, DateTime, Index, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column

from frontdesk.models.base import AuditMixin, BaseModel, RoomType, RoomTypeType, TimestampMixin
from frontdesk.models.room import GuestSlotsMixin

__all__ = ["HistoryEntry"]


class HistoryEntry(BaseModel, TimestampMixin, AuditMixin, GuestSlotsMixin):
    """
    Occupancy episode of a room.

    `room_id` is a plain reference rather than a foreign key so history
    outlives room deletion; `room_number` keeps the label for reports.
    """

    __tablename__ = "room_history"

    room_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    room_number: Mapped[str] = mapped_column(String(10), nullable=False, index=True)
    room_type: Mapped[RoomType] = mapped_column(RoomTypeType(), nullable=False)
    company_name: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)

    guest1_name: Mapped[str] = mapped_column(String(100), nullable=False)
    guest1_phone: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    guest1_checkin_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    guest1_checkout_date: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        comment="Set when guest 1 leaves before the room is vacated",
    )

    guest2_name: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    guest2_phone: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    guest2_checkin_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    guest2_checkout_date: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        comment="Set when guest 2 leaves before the room is vacated",
    )

    checkout_date: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        index=True,
        comment="Null while the episode is open",
    )
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    __table_args__ = (
        # At most one open episode per room
        Index(
            "uq_room_history_open_entry",
            "room_id",
            unique=True,
            postgresql_where=text("checkout_date IS NULL"),
            sqlite_where=text("checkout_date IS NULL"),
        ),
    )

    @property
    def is_open(self) -> bool:
        return self.checkout_date is None

    @property
    def guest_count(self) -> int:
        return len(self.guests)

    def __repr__(self) -> str:
        return f"<HistoryEntry(room={self.room_number}, open={self.is_open})>"
