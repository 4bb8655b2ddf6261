"""
Mapping of service failures to HTTP responses.
"""

from typing import TypeVar

from frontdesk.core.exceptions import BaseAppException, ErrorCode
from frontdesk.services.base import ServiceResult

T = TypeVar("T")

ERROR_STATUS_CODES = {
    ErrorCode.VALIDATION_ERROR: 422,
    ErrorCode.MISSING_GUEST_NAME: 422,
    ErrorCode.INVALID_PHONE_FORMAT: 422,
    ErrorCode.INVALID_STATUS: 400,
    ErrorCode.NOT_FOUND: 404,
    ErrorCode.ROOM_NOT_FOUND: 404,
    ErrorCode.USER_NOT_FOUND: 404,
    ErrorCode.NO_DATA_TO_EXPORT: 404,
    ErrorCode.DUPLICATE_ROOM_NUMBER: 409,
    ErrorCode.DUPLICATE_EMAIL: 409,
    ErrorCode.ROOM_NOT_AVAILABLE: 409,
    ErrorCode.ROOM_NOT_DOUBLE: 409,
    ErrorCode.ROOM_OCCUPIED: 409,
    ErrorCode.NO_FIRST_GUEST: 409,
    ErrorCode.GUEST_SLOT_FILLED: 409,
    ErrorCode.GUEST_SLOT_EMPTY: 409,
    ErrorCode.OPEN_ENTRY_EXISTS: 409,
    ErrorCode.CONCURRENT_MODIFICATION: 409,
    ErrorCode.AUTHENTICATION_FAILED: 401,
    ErrorCode.INSUFFICIENT_PERMISSIONS: 403,
    ErrorCode.ACCOUNT_PENDING: 403,
    ErrorCode.STORAGE_ERROR: 500,
    ErrorCode.INTERNAL_ERROR: 500,
}


def unwrap_result(result: ServiceResult[T]) -> T:
    """
    Return the result's data or raise it as an application exception.

    The raised exception is rendered by the application's exception
    handler with the status code mapped from its error code.
    """
    if result.is_success:
        return result.data

    error = result.error
    raise BaseAppException(
        error.message,
        error.code,
        details=error.details,
        status_code=ERROR_STATUS_CODES.get(error.code, 400),
    )
