"""
Custom Exceptions for the Hostel Front Desk

This module defines the exception taxonomy raised by repositories and the
transition engine. Services convert these into ServiceResult failures; the
HTTP layer renders any that escape as JSON error responses.
"""

from enum import Enum
from typing import Any, Dict, Optional


class ErrorCode(str, Enum):
    """Machine-checkable error kinds surfaced to callers"""
    # General errors
    INTERNAL_ERROR = "INTERNAL_ERROR"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"

    # Authentication & Authorization
    AUTHENTICATION_FAILED = "AUTHENTICATION_FAILED"
    INSUFFICIENT_PERMISSIONS = "INSUFFICIENT_PERMISSIONS"
    ACCOUNT_PENDING = "ACCOUNT_PENDING"

    # Validation errors
    MISSING_GUEST_NAME = "MissingGuestName"
    INVALID_PHONE_FORMAT = "InvalidPhoneFormat"
    INVALID_STATUS = "InvalidStatus"

    # Lookup and uniqueness
    ROOM_NOT_FOUND = "RoomNotFound"
    USER_NOT_FOUND = "UserNotFound"
    DUPLICATE_ROOM_NUMBER = "DuplicateRoomNumber"
    DUPLICATE_EMAIL = "DuplicateEmail"

    # State conflicts
    ROOM_NOT_AVAILABLE = "RoomNotAvailable"
    ROOM_NOT_DOUBLE = "RoomNotDouble"
    ROOM_OCCUPIED = "RoomOccupied"
    NO_FIRST_GUEST = "NoFirstGuest"
    GUEST_SLOT_FILLED = "GuestSlotFilled"
    GUEST_SLOT_EMPTY = "GuestSlotEmpty"
    OPEN_ENTRY_EXISTS = "OpenEntryExists"
    CONCURRENT_MODIFICATION = "ConcurrentModification"

    # Storage
    STORAGE_ERROR = "StorageError"

    # Exports
    NO_DATA_TO_EXPORT = "NoDataToExport"


class BaseAppException(Exception):
    """
    Base exception class for all application exceptions.

    Provides consistent error handling across the application with
    structured error information.
    """

    status_code: int = 500

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        details: Optional[Dict[str, Any]] = None,
        status_code: Optional[int] = None,
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)

    def __str__(self) -> str:
        return f"{self.error_code.value}: {self.message}"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(message='{self.message}', error_code='{self.error_code.value}')"


class ValidationError(BaseAppException):
    """Missing or malformed input; raised before any write."""

    status_code = 422

    def __init__(
        self,
        message: str = "Validation failed",
        error_code: ErrorCode = ErrorCode.VALIDATION_ERROR,
        field: Optional[str] = None,
    ):
        details = {"field": field} if field else {}
        super().__init__(message, error_code, details)
        self.field = field


class StateConflictError(BaseAppException):
    """A transition guard failed for the room's current state."""

    status_code = 409


class NotFoundError(BaseAppException):
    """A requested resource does not exist."""

    status_code = 404

    def __init__(
        self,
        resource_type: str = "Resource",
        resource_id: Optional[str] = None,
        error_code: ErrorCode = ErrorCode.NOT_FOUND,
    ):
        message = f"{resource_type} not found"
        if resource_id:
            message += f" (ID: {resource_id})"
        super().__init__(
            message,
            error_code,
            {"resource_type": resource_type, "resource_id": resource_id},
        )


class DuplicateKeyError(BaseAppException):
    """A unique key (room number, e-mail) is already taken."""

    status_code = 409


class StorageError(BaseAppException):
    """Transaction or connectivity failure in the relational store."""

    status_code = 500

    def __init__(self, message: str = "Storage operation failed", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, ErrorCode.STORAGE_ERROR, details)


class AuthenticationError(BaseAppException):
    """Credentials or token could not be verified."""

    status_code = 401

    def __init__(self, message: str = "Could not validate credentials"):
        super().__init__(message, ErrorCode.AUTHENTICATION_FAILED)


class AuthorizationError(BaseAppException):
    """The authenticated user's role does not allow the action."""

    status_code = 403

    def __init__(
        self,
        message: str = "Access denied",
        error_code: ErrorCode = ErrorCode.INSUFFICIENT_PERMISSIONS,
    ):
        super().__init__(message, error_code)


__all__ = [
    "ErrorCode",
    "BaseAppException",
    "ValidationError",
    "StateConflictError",
    "NotFoundError",
    "DuplicateKeyError",
    "StorageError",
    "AuthenticationError",
    "AuthorizationError",
]
