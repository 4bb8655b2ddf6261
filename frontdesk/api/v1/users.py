"""
User administration endpoints.
"""

from typing import List

from fastapi import APIRouter, Depends

from frontdesk.api import deps
from frontdesk.api.errors import unwrap_result
from frontdesk.models.user import User
from frontdesk.schemas.common import SuccessResponse
from frontdesk.schemas.user import RoleUpdate, UserRead
from frontdesk.services.auth import AuthService

router = APIRouter(prefix="/users", tags=["Users"])


@router.get("", response_model=SuccessResponse[List[UserRead]])
def list_users(
    service: AuthService = Depends(deps.get_auth_service),
    _: User = Depends(deps.get_admin_user),
):
    return SuccessResponse(data=unwrap_result(service.list_users()))


@router.patch("/{user_id}/role", response_model=SuccessResponse[UserRead])
def update_role(
    user_id: str,
    payload: RoleUpdate,
    service: AuthService = Depends(deps.get_auth_service),
    admin: User = Depends(deps.get_admin_user),
):
    result = service.update_role(user_id, payload.role, acting_user_id=admin.id)
    return SuccessResponse(data=unwrap_result(result), message=result.message)
