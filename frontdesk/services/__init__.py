from frontdesk.services.auth import AuthService
from frontdesk.services.base import BaseService, ServiceError, ServiceResult
from frontdesk.services.export import ExportFile, ExportService
from frontdesk.services.history import HistoryService
from frontdesk.services.room import RoomService

__all__ = [
    "BaseService",
    "ServiceResult",
    "ServiceError",
    "RoomService",
    "HistoryService",
    "ExportService",
    "ExportFile",
    "AuthService",
]
