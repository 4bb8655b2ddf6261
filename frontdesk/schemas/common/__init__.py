from frontdesk.schemas.common.base import (
    BaseCreateSchema,
    BaseFilterSchema,
    BaseSchema,
    BaseUpdateSchema,
)
from frontdesk.schemas.common.response import ErrorResponse, MessageResponse, SuccessResponse

__all__ = [
    "BaseSchema",
    "BaseCreateSchema",
    "BaseUpdateSchema",
    "BaseFilterSchema",
    "SuccessResponse",
    "ErrorResponse",
    "MessageResponse",
]
