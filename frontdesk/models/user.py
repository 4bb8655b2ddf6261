"""
User account model.
"""

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from frontdesk.models.base import BaseModel, TimestampMixin, UserRole, UserRoleType

__all__ = ["User"]


class User(BaseModel, TimestampMixin):
    """Front desk staff account. New accounts wait in the Pending role."""

    __tablename__ = "users"

    full_name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(Text, nullable=False, unique=True, index=True)
    password_hash: Mapped[str] = mapped_column(Text, nullable=False)
    role: Mapped[UserRole] = mapped_column(
        UserRoleType(),
        nullable=False,
        default=UserRole.PENDING,
    )

    def __repr__(self) -> str:
        return f"<User(email={self.email}, role={self.role})>"
