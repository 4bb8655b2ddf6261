"""
FastAPI dependencies: database session, cache, services and access control.

Example usage in a router:
    @router.get("/rooms")
    def list_rooms(service: RoomService = Depends(deps.get_room_service)):
        ...
"""

from typing import Optional

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from frontdesk.config.settings import settings
from frontdesk.core.cache import CacheBackend, build_room_list_cache
from frontdesk.core.exceptions import AuthenticationError, AuthorizationError, ErrorCode
from frontdesk.core.security import token_manager
from frontdesk.db.session import get_db
from frontdesk.models.user import User
from frontdesk.repositories.user_repository import UserRepository
from frontdesk.services.auth import AuthService
from frontdesk.services.export import ExportService
from frontdesk.services.history import HistoryService
from frontdesk.services.room import RoomService

oauth2_scheme = OAuth2PasswordBearer(tokenUrl=f"{settings.API_V1_STR}/auth/sign-in")

_room_list_cache: Optional[CacheBackend] = None


# --- Database & cache ---------------------------------------------------------

def get_room_list_cache() -> CacheBackend:
    """Process-wide room list cache, built on first use."""
    global _room_list_cache
    if _room_list_cache is None:
        _room_list_cache = build_room_list_cache()
    return _room_list_cache


# --- Services -----------------------------------------------------------------

def get_room_service(
    db: Session = Depends(get_db),
    cache: CacheBackend = Depends(get_room_list_cache),
) -> RoomService:
    return RoomService(db, cache)


def get_history_service(db: Session = Depends(get_db)) -> HistoryService:
    return HistoryService(db)


def get_export_service(db: Session = Depends(get_db)) -> ExportService:
    return ExportService(db)


def get_auth_service(db: Session = Depends(get_db)) -> AuthService:
    return AuthService(db)


# --- Authentication & Authorization -------------------------------------------

def get_current_user(
    token: str = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
) -> User:
    """Resolve the bearer token to a user. Pending users pass."""
    payload = token_manager.decode_token(token)
    user = UserRepository(db).find_by_id(payload["sub"])
    if user is None:
        raise AuthenticationError("User no longer exists")
    return user


def get_active_user(current_user: User = Depends(get_current_user)) -> User:
    """Any approved staff member (Worker, Admin or Dev)."""
    if not current_user.role.is_active:
        raise AuthorizationError(
            "Account is awaiting approval by an administrator",
            ErrorCode.ACCOUNT_PENDING,
        )
    return current_user


def get_admin_user(current_user: User = Depends(get_active_user)) -> User:
    if not current_user.role.is_admin:
        raise AuthorizationError("Administrator role required")
    return current_user


__all__ = [
    "get_db",
    "get_room_list_cache",
    "get_room_service",
    "get_history_service",
    "get_export_service",
    "get_auth_service",
    "get_current_user",
    "get_active_user",
    "get_admin_user",
]
