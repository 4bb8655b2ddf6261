"""
Room endpoints.

Workers can read rooms and mark them clean; every other change needs
an administrator.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from frontdesk.api import deps
from frontdesk.api.errors import unwrap_result
from frontdesk.models.base.enums import RoomStatus
from frontdesk.models.user import User
from frontdesk.schemas.common import MessageResponse, SuccessResponse
from frontdesk.schemas.room import (
    CheckInRequest,
    RoomCreate,
    RoomFilter,
    RoomRead,
    RoomStats,
    RoomStatusUpdate,
    RoomView,
    SecondGuestRequest,
)
from frontdesk.services.room import RoomService

router = APIRouter(prefix="/rooms", tags=["Rooms"])


def _respond(result) -> SuccessResponse:
    return SuccessResponse(data=unwrap_result(result), message=result.message)


# --- Reads --------------------------------------------------------------------

@router.get("", response_model=SuccessResponse[List[RoomRead]])
def list_rooms(
    room_status: Optional[RoomStatus] = Query(default=None, alias="status"),
    descending: bool = Query(default=True),
    service: RoomService = Depends(deps.get_room_service),
    _: User = Depends(deps.get_active_user),
):
    filters = RoomFilter(status=room_status, descending=descending)
    return _respond(service.list_rooms(filters))


@router.get("/stats", response_model=SuccessResponse[RoomStats])
def room_stats(
    service: RoomService = Depends(deps.get_room_service),
    _: User = Depends(deps.get_active_user),
):
    return _respond(service.room_stats())


@router.get("/{room_id}", response_model=SuccessResponse[RoomRead])
def get_room(
    room_id: str,
    service: RoomService = Depends(deps.get_room_service),
    _: User = Depends(deps.get_active_user),
):
    return _respond(service.get_room(room_id))


@router.get("/{room_id}/view", response_model=SuccessResponse[RoomView])
def room_view(
    room_id: str,
    service: RoomService = Depends(deps.get_room_service),
    current_user: User = Depends(deps.get_active_user),
):
    """Tell the client which room screen the caller's role opens."""
    return _respond(service.get_room_view(room_id, current_user.role))


@router.post("/{room_id}/clean", response_model=SuccessResponse[RoomRead])
def mark_clean(
    room_id: str,
    service: RoomService = Depends(deps.get_room_service),
    current_user: User = Depends(deps.get_active_user),
):
    return _respond(service.mark_clean(room_id, acting_user_id=current_user.id))


# --- Administration -----------------------------------------------------------

@router.post("", response_model=SuccessResponse[RoomRead], status_code=status.HTTP_201_CREATED)
def create_room(
    payload: RoomCreate,
    service: RoomService = Depends(deps.get_room_service),
    _: User = Depends(deps.get_admin_user),
):
    return _respond(service.create_room(payload))


@router.delete("/{room_id}", response_model=MessageResponse)
def delete_room(
    room_id: str,
    service: RoomService = Depends(deps.get_room_service),
    _: User = Depends(deps.get_admin_user),
):
    result = service.delete_room(room_id)
    unwrap_result(result)
    return MessageResponse(message=result.message)


@router.patch("/{room_id}/status", response_model=SuccessResponse[RoomRead])
def update_status(
    room_id: str,
    payload: RoomStatusUpdate,
    service: RoomService = Depends(deps.get_room_service),
    admin: User = Depends(deps.get_admin_user),
):
    return _respond(service.update_room_status(room_id, payload.status, acting_user_id=admin.id))


@router.post("/{room_id}/check-in", response_model=SuccessResponse[RoomRead])
def check_in(
    room_id: str,
    payload: CheckInRequest,
    service: RoomService = Depends(deps.get_room_service),
    admin: User = Depends(deps.get_admin_user),
):
    return _respond(service.check_in(room_id, payload, acting_user_id=admin.id))


@router.post("/{room_id}/second-guest", response_model=SuccessResponse[RoomRead])
def check_in_second_guest(
    room_id: str,
    payload: SecondGuestRequest,
    service: RoomService = Depends(deps.get_room_service),
    admin: User = Depends(deps.get_admin_user),
):
    return _respond(service.check_in_second_guest(room_id, payload, acting_user_id=admin.id))


@router.post("/{room_id}/checkout", response_model=SuccessResponse[RoomRead])
def checkout_room(
    room_id: str,
    service: RoomService = Depends(deps.get_room_service),
    admin: User = Depends(deps.get_admin_user),
):
    return _respond(service.checkout_room(room_id, acting_user_id=admin.id))


@router.post("/{room_id}/checkout/guest1", response_model=SuccessResponse[RoomRead])
def checkout_first_guest(
    room_id: str,
    service: RoomService = Depends(deps.get_room_service),
    admin: User = Depends(deps.get_admin_user),
):
    return _respond(service.checkout_first_guest(room_id, acting_user_id=admin.id))


@router.post("/{room_id}/checkout/guest2", response_model=SuccessResponse[RoomRead])
def checkout_second_guest(
    room_id: str,
    service: RoomService = Depends(deps.get_room_service),
    admin: User = Depends(deps.get_admin_user),
):
    return _respond(service.checkout_second_guest(room_id, acting_user_id=admin.id))
