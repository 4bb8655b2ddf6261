from frontdesk.repositories.base import BaseRepository
from frontdesk.repositories.history_repository import HistoryRepository
from frontdesk.repositories.room_repository import RoomRepository
from frontdesk.repositories.user_repository import UserRepository

__all__ = [
    "BaseRepository",
    "RoomRepository",
    "HistoryRepository",
    "UserRepository",
]
