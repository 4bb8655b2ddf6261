"""
History schemas.
"""

from datetime import date, datetime
from typing import List, Optional

from pydantic import Field, model_validator

from frontdesk.models.base.enums import RoomType
from frontdesk.schemas.common.base import BaseFilterSchema, BaseSchema

__all__ = [
    "HistoryFilter",
    "HistoryRead",
    "HistoryStats",
    "MonthlyHistory",
]


class HistoryFilter(BaseFilterSchema):
    room_id: Optional[str] = None
    date_from: Optional[date] = Field(default=None, description="Earliest guest 1 check-in")
    date_to: Optional[date] = Field(default=None, description="Latest guest 1 check-in")
    guest_name: Optional[str] = Field(default=None, description="Substring of either guest's name")
    company: Optional[str] = Field(default=None, description="Substring of the company name")
    limit: Optional[int] = Field(default=None, ge=1, le=10000)

    @model_validator(mode="after")
    def validate_date_range(self):
        if self.date_from and self.date_to and self.date_to < self.date_from:
            raise ValueError("date_to must not be before date_from")
        return self


class HistoryRead(BaseSchema):
    id: str
    room_id: str
    room_number: str
    room_type: RoomType
    company_name: Optional[str] = None

    guest1_name: str
    guest1_phone: Optional[str] = None
    guest1_checkin_date: date
    guest1_checkout_date: Optional[datetime] = None
    guest2_name: Optional[str] = None
    guest2_phone: Optional[str] = None
    guest2_checkin_date: Optional[date] = None
    guest2_checkout_date: Optional[datetime] = None

    checkout_date: Optional[datetime] = None
    notes: Optional[str] = None
    created_by: Optional[str] = None
    updated_by: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    is_open: bool = False
    guest_count: int = 0


class HistoryStats(BaseSchema):
    total_bookings: int = 0
    total_guests: int = 0
    completed_stays: int = 0
    current_guests: int = 0


class MonthlyHistory(BaseSchema):
    """History entries of one calendar month."""

    month_label: str
    year: int
    month: int
    records: List[HistoryRead] = Field(default_factory=list)
    total_guests: int = 0
