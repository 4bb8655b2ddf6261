"""
Room service: the room state machine.

Every operation reads the room, checks its guards, writes the room and
the matching history change, and commits once. A failed guard or write
leaves both tables untouched.
"""

from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from frontdesk.config.settings import settings
from frontdesk.core.cache import CacheBackend
from frontdesk.core.exceptions import ErrorCode, StateConflictError, ValidationError
from frontdesk.models.base.enums import RoomStatus, RoomType, UserRole
from frontdesk.models.base.mixins import utcnow
from frontdesk.models.room import GuestSlot, Room, slot_column, slot_fields
from frontdesk.repositories.history_repository import HistoryRepository
from frontdesk.repositories.room_repository import RoomRepository
from frontdesk.schemas.room import (
    CheckInRequest,
    GuestInput,
    RoomCreate,
    RoomFilter,
    RoomRead,
    RoomStats,
    RoomView,
)
from frontdesk.services.base import BaseService, ServiceResult
from frontdesk.utils.date_utils import today
from frontdesk.utils.validators import clean_optional, validate_guest_input

FIRST, SECOND = 0, 1


class RoomService(BaseService[RoomRepository]):
    """
    Check-in, checkout, cleaning and status changes for rooms.

    Transitions:
        Free     --check_in-------------> Occupied
        Occupied --check_in_second_guest-> Occupied (double rooms)
        Occupied --checkout_*-----------> Occupied (one guest left) | Dirty
        Dirty    --mark_clean-----------> Free
        any      --update_room_status---> any
    """

    def __init__(
        self,
        db_session: Session,
        cache: Optional[CacheBackend] = None,
        history_repository: Optional[HistoryRepository] = None,
    ):
        super().__init__(RoomRepository(db_session, cache), db_session)
        self.history = history_repository or HistoryRepository(
            db_session, default_limit=settings.HISTORY_QUERY_LIMIT
        )

    # -------------------------------------------------------------------------
    # Registry
    # -------------------------------------------------------------------------

    def create_room(self, data: RoomCreate) -> ServiceResult[RoomRead]:
        try:
            if data.status == RoomStatus.OCCUPIED:
                raise ValidationError(
                    "A new room cannot start Occupied",
                    ErrorCode.INVALID_STATUS,
                    field="status",
                )
            with self.transaction():
                room = self.repository.create_room(data.number, data.type, data.status)
            self.repository.invalidate_cache()
            self._log_operation("Created room", room.number, {"room_id": room.id})
            return ServiceResult.success(self._snapshot(room), message="Room created successfully")
        except Exception as e:
            return self._handle_exception(e, "create room", data.number)

    def delete_room(self, room_id: str) -> ServiceResult[bool]:
        """Remove a room. Its history entries are kept."""
        try:
            with self.transaction():
                self.repository.delete(room_id)
            self.repository.invalidate_cache()
            self._log_operation("Deleted room", room_id, {"room_id": room_id})
            return ServiceResult.success(True, message="Room deleted successfully")
        except Exception as e:
            return self._handle_exception(e, "delete room", room_id)

    def get_room(self, room_id: str) -> ServiceResult[RoomRead]:
        try:
            return ServiceResult.success(self._snapshot(self.repository.get_by_id(room_id)))
        except Exception as e:
            return self._handle_exception(e, "get room", room_id)

    def get_room_view(self, room_id: str, role: UserRole) -> ServiceResult[RoomView]:
        """Pick the admin or worker room screen for `role`."""
        result = self.get_room(room_id)
        if not result:
            return result
        view = "admin" if role.is_admin else "worker"
        return ServiceResult.success(RoomView(room_id=room_id, view=view, room=result.data))

    def list_rooms(self, filters: Optional[RoomFilter] = None) -> ServiceResult[List[RoomRead]]:
        try:
            return ServiceResult.success(self.repository.list_rooms(filters))
        except Exception as e:
            return self._handle_exception(e, "list rooms")

    def room_stats(self) -> ServiceResult[RoomStats]:
        try:
            return ServiceResult.success(self.repository.aggregate_stats())
        except Exception as e:
            return self._handle_exception(e, "get room statistics")

    # -------------------------------------------------------------------------
    # Check-in
    # -------------------------------------------------------------------------

    def check_in(
        self,
        room_id: str,
        request: CheckInRequest,
        acting_user_id: Optional[str] = None,
    ) -> ServiceResult[RoomRead]:
        """
        Check the first guest (and optionally the second) into a free room.

        Failures:
            MissingGuestName, InvalidPhoneFormat: bad guest input
            RoomNotFound: unknown room
            RoomNotAvailable: room is not Free
            RoomNotDouble: second guest given for a single room
        """
        try:
            first = self._guest_slot(request.guest1, 1)
            second = None
            if request.guest2 is not None and self._has_guest_input(request.guest2):
                second = self._guest_slot(request.guest2, 2, default_date=first.checkin_date)
            company = clean_optional(request.company)

            with self.transaction():
                room = self.repository.get_by_id(room_id)
                if room.status != RoomStatus.FREE:
                    raise StateConflictError(
                        f"Room {room.number} is {room.status.value}, not Free",
                        ErrorCode.ROOM_NOT_AVAILABLE,
                        {"room_id": room.id, "status": room.status.value},
                    )
                if second is not None and room.type != RoomType.DOUBLE:
                    raise self._not_double(room)

                stale = self.history.close_entry(room.id, acting_user_id)
                if stale is not None:
                    self._logger.warning(
                        f"Closed stale open history entry {stale.id} of free room {room.number}",
                        extra={"room_id": room.id, "operation": "check_in"},
                    )

                changes: Dict[str, Any] = {
                    **slot_fields(FIRST, first),
                    **slot_fields(SECOND, second),
                    "company": company,
                    "status": RoomStatus.OCCUPIED,
                }
                self.repository.update_fields(room.id, changes)

                self.history.insert_entry({
                    "room_id": room.id,
                    "room_number": room.number,
                    "room_type": room.type,
                    "company_name": company,
                    **slot_fields(FIRST, first),
                    **slot_fields(SECOND, second),
                    "created_by": acting_user_id,
                    "updated_by": acting_user_id,
                })

            self.repository.invalidate_cache()
            self._log_transition("check_in", room, acting_user_id)
            return ServiceResult.success(self._snapshot(room), message="Check-in completed")
        except Exception as e:
            return self._handle_exception(e, "check in", room_id, {"user_id": acting_user_id})

    def check_in_second_guest(
        self,
        room_id: str,
        guest: GuestInput,
        acting_user_id: Optional[str] = None,
    ) -> ServiceResult[RoomRead]:
        """
        Add the second guest to an occupied double room.

        Failures:
            MissingGuestName, InvalidPhoneFormat: bad guest input
            RoomNotFound: unknown room
            NoFirstGuest: room has nobody checked in
            RoomNotDouble: single room
            GuestSlotFilled: second slot already taken
        """
        try:
            second = self._guest_slot(guest, 2)

            with self.transaction():
                room = self.repository.get_by_id(room_id)
                if room.status != RoomStatus.OCCUPIED or room.is_vacant:
                    raise StateConflictError(
                        f"Room {room.number} has no first guest",
                        ErrorCode.NO_FIRST_GUEST,
                        {"room_id": room.id},
                    )
                if room.type != RoomType.DOUBLE:
                    raise self._not_double(room)
                if room.get_slot(SECOND) is not None:
                    raise StateConflictError(
                        f"Room {room.number} already has a second guest",
                        ErrorCode.GUEST_SLOT_FILLED,
                        {"room_id": room.id, "slot": 2},
                    )

                self.repository.update_fields(room.id, slot_fields(SECOND, second))

                entry = self.history.open_entry(room.id)
                if entry is not None:
                    # An entry records one second guest; a later one replaces an earlier one who left
                    self.history.update_entry(entry.id, {
                        **slot_fields(SECOND, second),
                        slot_column(SECOND, "checkout_date"): None,
                        "updated_by": acting_user_id,
                    })
                else:
                    self._logger.warning(
                        f"Room {room.number} was occupied without an open history entry",
                        extra={"room_id": room.id, "operation": "check_in_second_guest"},
                    )
                    self.history.insert_entry({
                        "room_id": room.id,
                        "room_number": room.number,
                        "room_type": room.type,
                        "company_name": room.company,
                        **slot_fields(FIRST, room.get_slot(FIRST)),
                        **slot_fields(SECOND, second),
                        "created_by": acting_user_id,
                        "updated_by": acting_user_id,
                    })

            self.repository.invalidate_cache()
            self._log_transition("check_in_second_guest", room, acting_user_id)
            return ServiceResult.success(self._snapshot(room), message="Second guest checked in")
        except Exception as e:
            return self._handle_exception(e, "check in second guest", room_id, {"user_id": acting_user_id})

    # -------------------------------------------------------------------------
    # Checkout
    # -------------------------------------------------------------------------

    def checkout_first_guest(self, room_id: str, acting_user_id: Optional[str] = None) -> ServiceResult[RoomRead]:
        return self._checkout_slot(room_id, FIRST, acting_user_id)

    def checkout_second_guest(self, room_id: str, acting_user_id: Optional[str] = None) -> ServiceResult[RoomRead]:
        return self._checkout_slot(room_id, SECOND, acting_user_id)

    def _checkout_slot(self, room_id: str, index: int, acting_user_id: Optional[str]) -> ServiceResult[RoomRead]:
        """
        Check one guest out.

        The room stays Occupied while the other slot holds a guest;
        otherwise it turns Dirty and the history entry is closed.
        """
        slot_number = index + 1
        try:
            with self.transaction():
                room = self.repository.get_by_id(room_id)
                if room.get_slot(index) is None:
                    raise StateConflictError(
                        f"Room {room.number} has no guest {slot_number}",
                        ErrorCode.GUEST_SLOT_EMPTY,
                        {"room_id": room.id, "slot": slot_number},
                    )

                now = utcnow()
                other = room.get_slot(SECOND if index == FIRST else FIRST)
                if other is not None:
                    self.repository.update_fields(room.id, slot_fields(index, None))
                    entry = self.history.open_entry(room.id)
                    if entry is not None:
                        self.history.update_entry(entry.id, {
                            slot_column(index, "checkout_date"): now,
                            "updated_by": acting_user_id,
                        })
                else:
                    self.repository.update_fields(room.id, {
                        **slot_fields(index, None),
                        "company": None,
                        "status": RoomStatus.DIRTY,
                    })
                    self.history.close_entry(room.id, acting_user_id, when=now)

            self.repository.invalidate_cache()
            self._log_transition(f"checkout_guest{slot_number}", room, acting_user_id)
            return ServiceResult.success(self._snapshot(room), message=f"Guest {slot_number} checked out")
        except Exception as e:
            return self._handle_exception(e, f"check out guest {slot_number}", room_id, {"user_id": acting_user_id})

    def checkout_room(self, room_id: str, acting_user_id: Optional[str] = None) -> ServiceResult[RoomRead]:
        """Check every guest out; the room turns Dirty."""
        try:
            with self.transaction():
                room = self.repository.get_by_id(room_id)
                if room.status != RoomStatus.OCCUPIED:
                    raise StateConflictError(
                        f"Room {room.number} has no guests to check out",
                        ErrorCode.GUEST_SLOT_EMPTY,
                        {"room_id": room.id, "status": room.status.value},
                    )
                self.repository.update_fields(room.id, self._vacate_changes(RoomStatus.DIRTY))
                self.history.close_entry(room.id, acting_user_id)

            self.repository.invalidate_cache()
            self._log_transition("checkout_room", room, acting_user_id)
            return ServiceResult.success(self._snapshot(room), message="Room checked out")
        except Exception as e:
            return self._handle_exception(e, "check out room", room_id, {"user_id": acting_user_id})

    # -------------------------------------------------------------------------
    # Housekeeping and overrides
    # -------------------------------------------------------------------------

    def mark_clean(self, room_id: str, acting_user_id: Optional[str] = None) -> ServiceResult[RoomRead]:
        """Dirty -> Free. Already free rooms are left alone."""
        try:
            with self.transaction():
                room = self.repository.get_by_id(room_id)
                if room.status == RoomStatus.OCCUPIED:
                    raise StateConflictError(
                        f"Room {room.number} is occupied",
                        ErrorCode.ROOM_OCCUPIED,
                        {"room_id": room.id},
                    )
                if room.status == RoomStatus.DIRTY:
                    self.repository.update_fields(room.id, {"status": RoomStatus.FREE})

            self.repository.invalidate_cache()
            self._log_transition("mark_clean", room, acting_user_id)
            return ServiceResult.success(self._snapshot(room), message="Room is clean")
        except Exception as e:
            return self._handle_exception(e, "mark room clean", room_id, {"user_id": acting_user_id})

    def update_room_status(
        self,
        room_id: str,
        status: str,
        acting_user_id: Optional[str] = None,
    ) -> ServiceResult[RoomRead]:
        """
        Administrative override.

        Free and Dirty empty the guest slots and close the open history
        entry. Occupied is applied as given.
        """
        try:
            target = self._parse_status(status)
            with self.transaction():
                room = self.repository.get_by_id(room_id)
                if target == RoomStatus.OCCUPIED:
                    self.repository.update_fields(room.id, {"status": target})
                else:
                    self.repository.update_fields(room.id, self._vacate_changes(target))
                    self.history.close_entry(room.id, acting_user_id)

            self.repository.invalidate_cache()
            self._log_transition("update_room_status", room, acting_user_id)
            return ServiceResult.success(self._snapshot(room), message=f"Room status set to {target.value}")
        except Exception as e:
            return self._handle_exception(e, "update room status", room_id, {"user_id": acting_user_id})

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    @staticmethod
    def _has_guest_input(guest: GuestInput) -> bool:
        return bool(clean_optional(guest.name) or clean_optional(guest.phone))

    @staticmethod
    def _guest_slot(guest: GuestInput, slot_number: int, default_date=None) -> GuestSlot:
        name, phone = validate_guest_input(guest.name, guest.phone, slot_number)
        return GuestSlot(
            name=name,
            phone=phone,
            checkin_date=guest.checkin_date or default_date or today(),
        )

    @staticmethod
    def _parse_status(value: str) -> RoomStatus:
        for status in RoomStatus:
            if (value or "").strip().lower() == status.value.lower():
                return status
        raise ValidationError(
            f"Invalid room status: {value!r}",
            ErrorCode.INVALID_STATUS,
            field="status",
        )

    @staticmethod
    def _vacate_changes(status: RoomStatus) -> Dict[str, Any]:
        return {
            **slot_fields(FIRST, None),
            **slot_fields(SECOND, None),
            "company": None,
            "status": status,
        }

    @staticmethod
    def _not_double(room: Room) -> StateConflictError:
        return StateConflictError(
            f"Room {room.number} is a single room",
            ErrorCode.ROOM_NOT_DOUBLE,
            {"room_id": room.id, "type": room.type.value},
        )

    @staticmethod
    def _snapshot(room: Room) -> RoomRead:
        return RoomRead.model_validate(room)

    def _log_transition(self, operation: str, room: Room, acting_user_id: Optional[str]) -> None:
        self._log_operation(
            f"Room {operation}",
            room.number,
            {"room_id": room.id, "user_id": acting_user_id, "status": room.status.value},
        )
