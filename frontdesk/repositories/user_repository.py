"""
User repository.
"""

from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from frontdesk.core.exceptions import DuplicateKeyError, ErrorCode, StorageError
from frontdesk.models.base.enums import UserRole
from frontdesk.models.user import User
from frontdesk.repositories.base.base_repository import BaseRepository


class UserRepository(BaseRepository[User]):

    not_found_code = ErrorCode.USER_NOT_FOUND
    duplicate_code = ErrorCode.DUPLICATE_EMAIL

    def __init__(self, session: Session):
        super().__init__(User, session)

    def find_by_email(self, email: str) -> Optional[User]:
        try:
            return self.session.execute(
                select(User).where(User.email == email.lower())
            ).scalar_one_or_none()
        except SQLAlchemyError as e:
            raise StorageError(f"Database error: {e}") from e

    def create_user(
        self,
        full_name: str,
        email: str,
        password_hash: str,
        role: UserRole = UserRole.PENDING,
    ) -> User:
        if self.find_by_email(email) is not None:
            raise DuplicateKeyError(
                "An account with this email already exists",
                ErrorCode.DUPLICATE_EMAIL,
                {"email": email},
            )
        return self.create({
            "full_name": full_name,
            "email": email.lower(),
            "password_hash": password_hash,
            "role": role,
        })

    def list_users(self) -> List[User]:
        try:
            return list(
                self.session.execute(select(User).order_by(User.created_at.desc()))
                .scalars()
                .all()
            )
        except SQLAlchemyError as e:
            raise StorageError(f"Database error: {e}") from e
