from frontdesk.services.base.base_service import BaseService
from frontdesk.services.base.service_result import (
    ErrorCode,
    ErrorSeverity,
    ServiceError,
    ServiceResult,
)

__all__ = [
    "BaseService",
    "ServiceResult",
    "ServiceError",
    "ErrorCode",
    "ErrorSeverity",
]
