"""
Room model and guest slot value object.

A room holds up to two guest slots. Storage keeps them as parallel
guest1_* / guest2_* columns; code addresses them by slot index through
`get_slot` and `slot_fields`.
"""

from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import Date, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from frontdesk.models.base import (
    BaseModel,
    RoomStatus,
    RoomStatusType,
    RoomType,
    RoomTypeType,
    TimestampMixin,
)

__all__ = ["GuestSlot", "Room", "SLOT_COUNT", "SLOT_FIELDS", "slot_column", "slot_fields"]

SLOT_COUNT = 2
SLOT_FIELDS = ("name", "phone", "checkin_date")


@dataclass(frozen=True)
class GuestSlot:
    """One occupant of a room."""

    name: str
    phone: Optional[str] = None
    checkin_date: Optional[date] = None


def slot_column(index: int, field: str) -> str:
    """Column attribute backing `field` of the zero-based slot `index`."""
    if not 0 <= index < SLOT_COUNT:
        raise IndexError(f"Guest slot index out of range: {index}")
    return f"guest{index + 1}_{field}"


def slot_fields(index: int, slot: Optional[GuestSlot]) -> Dict[str, Any]:
    """Column values that store `slot` in position `index`; None empties it."""
    return {
        slot_column(index, field): getattr(slot, field) if slot is not None else None
        for field in SLOT_FIELDS
    }


class GuestSlotsMixin:
    """Slot accessors shared by Room and HistoryEntry."""

    def get_slot(self, index: int) -> Optional[GuestSlot]:
        name = getattr(self, slot_column(index, "name"))
        if not name:
            return None
        return GuestSlot(
            name=name,
            phone=getattr(self, slot_column(index, "phone")),
            checkin_date=getattr(self, slot_column(index, "checkin_date")),
        )

    @property
    def guest_slots(self) -> Tuple[Optional[GuestSlot], ...]:
        return tuple(self.get_slot(i) for i in range(SLOT_COUNT))

    @property
    def guests(self) -> List[GuestSlot]:
        """Occupied slots in slot order."""
        return [slot for slot in self.guest_slots if slot is not None]


class Room(BaseModel, TimestampMixin, GuestSlotsMixin):
    """
    Physical room with its current occupancy.

    `status` is authoritative for whether the room is occupied right now;
    history rows are never consulted for that.
    """

    __tablename__ = "rooms"

    number: Mapped[str] = mapped_column(
        String(10),
        nullable=False,
        unique=True,
        index=True,
    )
    type: Mapped[RoomType] = mapped_column(RoomTypeType(), nullable=False)
    status: Mapped[RoomStatus] = mapped_column(
        RoomStatusType(),
        nullable=False,
        default=RoomStatus.FREE,
        index=True,
    )
    company: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)

    guest1_name: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    guest1_phone: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    guest1_checkin_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)

    guest2_name: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    guest2_phone: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    guest2_checkin_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)

    # Optimistic concurrency: a stale version on flush raises StaleDataError
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

    __mapper_args__ = {"version_id_col": version}

    @property
    def is_vacant(self) -> bool:
        return not self.guests

    def __repr__(self) -> str:
        return f"<Room(number={self.number}, type={self.type}, status={self.status})>"
