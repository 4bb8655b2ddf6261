"""
User and authentication schemas.
"""

from datetime import datetime
from typing import Optional

from pydantic import EmailStr, Field, field_validator

from frontdesk.models.base.enums import UserRole
from frontdesk.schemas.common.base import BaseCreateSchema, BaseSchema, BaseUpdateSchema

__all__ = [
    "UserCreate",
    "UserRead",
    "Token",
    "RoleUpdate",
]


class UserCreate(BaseCreateSchema):
    full_name: str = Field(..., min_length=2, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=72)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.lower()


class UserRead(BaseSchema):
    id: str
    full_name: str
    email: EmailStr
    role: UserRole
    created_at: Optional[datetime] = None


class Token(BaseSchema):
    access_token: str
    token_type: str = "bearer"
    expires_in: int = Field(..., description="Lifetime in seconds")
    role: UserRole


class RoleUpdate(BaseUpdateSchema):
    role: UserRole
