"""
Authentication and account service.
"""

from typing import List, Optional

from sqlalchemy.orm import Session

from frontdesk.core.exceptions import AuthenticationError
from frontdesk.core.security import PasswordHasher, TokenManager, password_hasher, token_manager
from frontdesk.models.base.enums import UserRole
from frontdesk.repositories.user_repository import UserRepository
from frontdesk.schemas.user import Token, UserCreate, UserRead
from frontdesk.services.base import BaseService, ServiceResult


class AuthService(BaseService[UserRepository]):
    """
    Sign-up, sign-in and role management.

    New accounts start as Pending and can do nothing until an admin
    assigns them a role.
    """

    def __init__(
        self,
        db_session: Session,
        hasher: Optional[PasswordHasher] = None,
        tokens: Optional[TokenManager] = None,
    ):
        super().__init__(UserRepository(db_session), db_session)
        self.hasher = hasher or password_hasher
        self.tokens = tokens or token_manager

    def sign_up(self, data: UserCreate) -> ServiceResult[UserRead]:
        try:
            with self.transaction():
                user = self.repository.create_user(
                    full_name=data.full_name,
                    email=data.email,
                    password_hash=self.hasher.hash(data.password),
                )
            self._log_operation("User signed up", user.email, {"user_id": user.id})
            return ServiceResult.success(UserRead.model_validate(user), message="Account created, awaiting approval")
        except Exception as e:
            return self._handle_exception(e, "sign up", data.email)

    def sign_in(self, email: str, password: str) -> ServiceResult[Token]:
        try:
            user = self.repository.find_by_email(email)
            if user is None or not self.hasher.verify(password, user.password_hash):
                raise AuthenticationError("Incorrect email or password")

            token = self.tokens.create_access_token(subject=user.id, role=user.role.value)
            self._log_operation("User signed in", user.email, {"user_id": user.id})
            return ServiceResult.success(
                Token(
                    access_token=token,
                    expires_in=self.tokens.expire_minutes * 60,
                    role=user.role,
                )
            )
        except Exception as e:
            return self._handle_exception(e, "sign in", email)

    def list_users(self) -> ServiceResult[List[UserRead]]:
        try:
            return ServiceResult.success(
                [UserRead.model_validate(u) for u in self.repository.list_users()]
            )
        except Exception as e:
            return self._handle_exception(e, "list users")

    def update_role(
        self,
        user_id: str,
        role: UserRole,
        acting_user_id: Optional[str] = None,
    ) -> ServiceResult[UserRead]:
        try:
            with self.transaction():
                user = self.repository.update_fields(user_id, {"role": role})
            self._log_operation(
                "Changed user role",
                user.email,
                {"user_id": acting_user_id, "target_user_id": user_id, "role": role.value},
            )
            return ServiceResult.success(UserRead.model_validate(user), message="Role updated")
        except Exception as e:
            return self._handle_exception(e, "update user role", user_id)
