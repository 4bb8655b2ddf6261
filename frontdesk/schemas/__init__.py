from frontdesk.schemas.common import ErrorResponse, MessageResponse, SuccessResponse
from frontdesk.schemas.history import HistoryFilter, HistoryRead, HistoryStats, MonthlyHistory
from frontdesk.schemas.room import (
    CheckInRequest,
    GuestInput,
    GuestSlotRead,
    RoomCreate,
    RoomFilter,
    RoomRead,
    RoomStats,
    RoomStatusUpdate,
    RoomView,
    SecondGuestRequest,
)
from frontdesk.schemas.user import RoleUpdate, Token, UserCreate, UserRead

__all__ = [
    "SuccessResponse",
    "ErrorResponse",
    "MessageResponse",
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
    "HistoryFilter",
    "HistoryRead",
    "HistoryStats",
    "MonthlyHistory",
    "UserCreate",
    "UserRead",
    "Token",
    "RoleUpdate",
]
