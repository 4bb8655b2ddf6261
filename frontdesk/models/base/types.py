"""
Custom SQLAlchemy types for domain enums.

Enum values are stored as plain strings. Legacy spellings found in older
rows are translated here, at the storage boundary, and nowhere else.
"""

from typing import Dict, List, Optional, Type

from sqlalchemy import String, TypeDecorator

from frontdesk.models.base.enums import RoomStatus, RoomType, UserRole


class StringEnumType(TypeDecorator):
    """
    Store a str-valued Enum as VARCHAR.

    Reads map stored text back to the enum, consulting `legacy_values`
    for spellings that earlier versions of the data used.
    """

    impl = String
    cache_ok = True

    enum_class: Type = None
    legacy_values: Dict[str, str] = {}

    def __init__(self, length: int = 20, **kwargs):
        super().__init__(length, **kwargs)

    @classmethod
    def stored_values(cls, value) -> List[str]:
        """Every stored spelling that reads back as `value`."""
        canonical = cls.enum_class(value).value
        return [canonical] + [old for old, new in cls.legacy_values.items() if new == canonical]

    def process_bind_param(self, value, dialect) -> Optional[str]:
        if value is None:
            return None
        return self.enum_class(value).value

    def process_result_value(self, value: Optional[str], dialect):
        if value is None:
            return None
        value = self.legacy_values.get(value, value)
        return self.enum_class(value)


class RoomStatusType(StringEnumType):
    """Room status column; accepts the historical "Ocupied" spelling."""

    cache_ok = True
    enum_class = RoomStatus
    legacy_values = {"Ocupied": RoomStatus.OCCUPIED.value}


class RoomTypeType(StringEnumType):
    cache_ok = True
    enum_class = RoomType


class UserRoleType(StringEnumType):
    cache_ok = True
    enum_class = UserRole
