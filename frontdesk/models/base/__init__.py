"""
Base models, mixins, enums and column types.
"""

from frontdesk.models.base.base_model import Base, BaseModel
from frontdesk.models.base.enums import RoomStatus, RoomType, UserRole
from frontdesk.models.base.mixins import AuditMixin, TimestampMixin, utcnow
from frontdesk.models.base.types import RoomStatusType, RoomTypeType, UserRoleType

__all__ = [
    "Base",
    "BaseModel",
    "RoomStatus",
    "RoomType",
    "UserRole",
    "AuditMixin",
    "TimestampMixin",
    "utcnow",
    "RoomStatusType",
    "RoomTypeType",
    "UserRoleType",
]
