"""
ORM models. Importing this package registers every table on Base.metadata.
"""

from frontdesk.models.base import Base, RoomStatus, RoomType, UserRole
from frontdesk.models.room import GuestSlot, Room
from frontdesk.models.room_history import HistoryEntry
from frontdesk.models.user import User

__all__ = [
    "Base",
    "RoomStatus",
    "RoomType",
    "UserRole",
    "GuestSlot",
    "Room",
    "HistoryEntry",
    "User",
]
