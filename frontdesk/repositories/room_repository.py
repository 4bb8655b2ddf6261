"""
Room repository: typed access to room rows plus the room-list cache.
"""

import math
import re
from typing import Any, Dict, List, Optional

from sqlalchemy import String, func, select, type_coerce
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from frontdesk.config.logging import get_logger
from frontdesk.core.cache import CacheBackend, NullCache
from frontdesk.core.exceptions import DuplicateKeyError, ErrorCode, StorageError
from frontdesk.models.base.enums import RoomStatus, RoomType
from frontdesk.models.base.types import RoomStatusType
from frontdesk.models.room import Room
from frontdesk.repositories.base.base_repository import BaseRepository
from frontdesk.schemas.room import RoomFilter, RoomRead, RoomStats

logger = get_logger(__name__)

ROOM_LIST_CACHE_PATTERN = "rooms:*"

_LEADING_DIGITS = re.compile(r"\d+")


def room_number_sort_key(number: str):
    """Numeric value of a room number; labels without digits sort lowest."""
    match = _LEADING_DIGITS.search(number or "")
    return (int(match.group()) if match else -1, number or "")


class RoomRepository(BaseRepository[Room]):
    """
    Repository for Room rows.

    Handles:
    - Room CRUD with duplicate number detection
    - Numeric ordering of room numbers
    - Status counts
    - Read-through caching of the room list, cleared on every write
    """

    not_found_code = ErrorCode.ROOM_NOT_FOUND
    duplicate_code = ErrorCode.DUPLICATE_ROOM_NUMBER

    def __init__(self, session: Session, cache: Optional[CacheBackend] = None):
        super().__init__(Room, session)
        self.cache = cache if cache is not None else NullCache()

    # ============================================================================
    # WRITES
    # ============================================================================

    def create_room(
        self,
        number: str,
        room_type: RoomType,
        status: RoomStatus = RoomStatus.FREE,
    ) -> Room:
        """
        Create a room.

        Raises:
            DuplicateKeyError: Number already in use
        """
        if self.find_by_number(number) is not None:
            raise DuplicateKeyError(
                f"Room {number} already exists",
                ErrorCode.DUPLICATE_ROOM_NUMBER,
                {"number": number},
            )
        room = self.create({"number": number, "type": room_type, "status": status})
        self.invalidate_cache()
        return room

    def update_fields(self, id: str, data: Dict[str, Any]) -> Room:
        room = super().update_fields(id, data)
        self.invalidate_cache()
        return room

    def delete(self, id: str) -> None:
        super().delete(id)
        self.invalidate_cache()

    # ============================================================================
    # READS
    # ============================================================================

    def find_by_number(self, number: str) -> Optional[Room]:
        try:
            return self.session.execute(
                select(Room).where(Room.number == number)
            ).scalar_one_or_none()
        except SQLAlchemyError as e:
            raise StorageError(f"Database error: {e}") from e

    def list_rooms(self, filters: Optional[RoomFilter] = None) -> List[RoomRead]:
        """
        Rooms ordered by the numeric value of their number.

        Served from the cache when a fresh snapshot exists for the filter.
        """
        filters = filters or RoomFilter()
        key = filters.cache_key()

        cached = self.cache.get(key)
        if cached is not None:
            return [RoomRead.model_validate(item) for item in cached]

        query = select(Room)
        if filters.status is not None:
            # Compare raw text so legacy spellings match too
            query = query.where(
                type_coerce(Room.status, String).in_(RoomStatusType.stored_values(filters.status))
            )
        try:
            rooms = list(self.session.execute(query).scalars().all())
        except SQLAlchemyError as e:
            raise StorageError(f"Database error: {e}") from e

        rooms.sort(key=lambda r: room_number_sort_key(r.number), reverse=filters.descending)
        snapshot = [RoomRead.model_validate(room) for room in rooms]

        self.cache.set(key, [item.model_dump(mode="json") for item in snapshot])
        return snapshot

    def aggregate_stats(self) -> RoomStats:
        """Counts per status and the occupied share in whole percent."""
        try:
            rows = self.session.execute(
                select(Room.status, func.count(Room.id)).group_by(Room.status)
            ).all()
        except SQLAlchemyError as e:
            raise StorageError(f"Database error: {e}") from e

        counts = {status: 0 for status in RoomStatus}
        for status, count in rows:
            counts[RoomStatus(status)] += count

        total = sum(counts.values())
        occupied = counts[RoomStatus.OCCUPIED]
        return RoomStats(
            total=total,
            free=counts[RoomStatus.FREE],
            occupied=occupied,
            dirty=counts[RoomStatus.DIRTY],
            occupancy_rate=math.floor(occupied / total * 100 + 0.5) if total else 0,
        )

    # ============================================================================
    # CACHE
    # ============================================================================

    def invalidate_cache(self) -> None:
        cleared = self.cache.clear(ROOM_LIST_CACHE_PATTERN)
        if cleared:
            logger.debug(f"Cleared {cleared} room list cache entries")
