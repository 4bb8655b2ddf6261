"""
Authentication endpoints.
"""

from fastapi import APIRouter, Depends, status
from fastapi.security import OAuth2PasswordRequestForm

from frontdesk.api import deps
from frontdesk.api.errors import unwrap_result
from frontdesk.models.user import User
from frontdesk.schemas.common import SuccessResponse
from frontdesk.schemas.user import Token, UserCreate, UserRead
from frontdesk.services.auth import AuthService

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post(
    "/sign-up",
    response_model=SuccessResponse[UserRead],
    status_code=status.HTTP_201_CREATED,
)
def sign_up(
    payload: UserCreate,
    service: AuthService = Depends(deps.get_auth_service),
):
    """Create an account. It stays Pending until an admin assigns a role."""
    result = service.sign_up(payload)
    return SuccessResponse(data=unwrap_result(result), message=result.message)


@router.post("/sign-in", response_model=Token)
def sign_in(
    form: OAuth2PasswordRequestForm = Depends(),
    service: AuthService = Depends(deps.get_auth_service),
):
    """OAuth2 password flow; `username` carries the e-mail address."""
    return unwrap_result(service.sign_in(form.username, form.password))


@router.get("/me", response_model=SuccessResponse[UserRead])
def read_me(current_user: User = Depends(deps.get_current_user)):
    return SuccessResponse(data=UserRead.model_validate(current_user))
