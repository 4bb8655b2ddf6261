"""
Room schemas: guest input, transitions, listing and statistics.
"""

from datetime import date, datetime
from typing import List, Literal, Optional

from pydantic import Field, computed_field

from frontdesk.models.base.enums import RoomStatus, RoomType
from frontdesk.schemas.common.base import (
    BaseCreateSchema,
    BaseFilterSchema,
    BaseSchema,
    BaseUpdateSchema,
)

__all__ = [
    "GuestInput",
    "GuestSlotRead",
    "RoomCreate",
    "CheckInRequest",
    "SecondGuestRequest",
    "RoomStatusUpdate",
    "RoomFilter",
    "RoomRead",
    "RoomStats",
    "RoomView",
]


class GuestInput(BaseSchema):
    """
    Guest details as typed at the desk.

    Name and phone are checked by the room service so that a blank name
    is reported as MissingGuestName rather than a generic schema error.
    """

    name: str = Field(default="", max_length=100, description="Guest full name")
    phone: Optional[str] = Field(default=None, max_length=20, description="Guest phone")
    checkin_date: Optional[date] = Field(
        default=None,
        description="Check-in date, defaults to today",
    )


class GuestSlotRead(BaseSchema):
    name: str
    phone: Optional[str] = None
    checkin_date: Optional[date] = None


class RoomCreate(BaseCreateSchema):
    number: str = Field(..., min_length=1, max_length=10, description="Room number, e.g. 101")
    type: RoomType = Field(..., description="single or double")
    status: RoomStatus = Field(default=RoomStatus.FREE, description="Initial status")


class CheckInRequest(BaseCreateSchema):
    """First check-in of a free room, optionally with both guests."""

    guest1: GuestInput
    guest2: Optional[GuestInput] = None
    company: Optional[str] = Field(default=None, max_length=100)


class SecondGuestRequest(GuestInput):
    """Second guest joining an occupied double room."""
    pass


class RoomStatusUpdate(BaseUpdateSchema):
    # Plain string so an unknown value surfaces as InvalidStatus
    status: str = Field(..., description="Free, Occupied or Dirty")


class RoomFilter(BaseFilterSchema):
    status: Optional[RoomStatus] = None
    descending: bool = Field(default=True, description="Sort by room number, highest first")

    def cache_key(self) -> str:
        status = self.status.value if self.status else "all"
        order = "desc" if self.descending else "asc"
        return f"rooms:list:{status}:{order}"


class RoomRead(BaseSchema):
    id: str
    number: str
    type: RoomType
    status: RoomStatus
    company: Optional[str] = None

    guest1_name: Optional[str] = None
    guest1_phone: Optional[str] = None
    guest1_checkin_date: Optional[date] = None
    guest2_name: Optional[str] = None
    guest2_phone: Optional[str] = None
    guest2_checkin_date: Optional[date] = None

    version: int = 1
    updated_at: Optional[datetime] = None

    @computed_field
    @property
    def guests(self) -> List[GuestSlotRead]:
        slots = []
        for index in (1, 2):
            name = getattr(self, f"guest{index}_name")
            if name:
                slots.append(
                    GuestSlotRead(
                        name=name,
                        phone=getattr(self, f"guest{index}_phone"),
                        checkin_date=getattr(self, f"guest{index}_checkin_date"),
                    )
                )
        return slots


class RoomStats(BaseSchema):
    total: int = 0
    free: int = 0
    occupied: int = 0
    dirty: int = 0
    occupancy_rate: int = Field(default=0, description="Occupied share in whole percent")


class RoomView(BaseSchema):
    """Which room screen the caller's role opens."""

    room_id: str
    view: Literal["admin", "worker"]
    room: RoomRead
