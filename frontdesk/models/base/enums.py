"""
Database enums shared by models, schemas and services.
"""

import enum


class RoomStatus(str, enum.Enum):
    """Room lifecycle status."""
    FREE = "Free"
    OCCUPIED = "Occupied"
    DIRTY = "Dirty"


class RoomType(str, enum.Enum):
    """Room type; only double rooms take a second guest."""
    SINGLE = "single"
    DOUBLE = "double"


class UserRole(str, enum.Enum):
    """User role enumeration."""
    DEV = "Dev"
    ADMIN = "Admin"
    WORKER = "Worker"
    PENDING = "Pending"

    @property
    def is_admin(self) -> bool:
        return self in (UserRole.ADMIN, UserRole.DEV)

    @property
    def is_active(self) -> bool:
        return self is not UserRole.PENDING
