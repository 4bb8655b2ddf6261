"""
History repository: the append-only occupancy ledger.
"""

from datetime import date, datetime
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy import case, func, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from frontdesk.config.logging import get_logger
from frontdesk.core.exceptions import ErrorCode, StateConflictError, StorageError
from frontdesk.models.base.mixins import utcnow
from frontdesk.models.room_history import HistoryEntry
from frontdesk.repositories.base.base_repository import BaseRepository
from frontdesk.schemas.history import HistoryFilter, HistoryRead, HistoryStats, MonthlyHistory
from frontdesk.utils.date_utils import month_key, month_label

logger = get_logger(__name__)


class HistoryRepository(BaseRepository[HistoryEntry]):
    """
    Repository for HistoryEntry rows.

    An entry is open while checkout_date is null. At most one entry per
    room is open; insert_entry checks this inside the caller's transaction
    and a partial unique index backs it up.
    """

    duplicate_code = ErrorCode.OPEN_ENTRY_EXISTS

    def __init__(self, session: Session, default_limit: int = 1000):
        super().__init__(HistoryEntry, session)
        self.default_limit = default_limit

    def open_entry(self, room_id: str) -> Optional[HistoryEntry]:
        """The room's open entry, or None."""
        try:
            return self.session.execute(
                select(HistoryEntry)
                .where(HistoryEntry.room_id == room_id)
                .where(HistoryEntry.checkout_date.is_(None))
            ).scalars().first()
        except SQLAlchemyError as e:
            raise StorageError(f"Database error: {e}") from e

    def insert_entry(self, data: Dict[str, Any]) -> HistoryEntry:
        """
        Open a new entry for data["room_id"].

        Raises:
            StateConflictError: The room already has an open entry
        """
        if self.open_entry(data["room_id"]) is not None:
            raise StateConflictError(
                f"Room {data.get('room_number', data['room_id'])} already has an open history entry",
                ErrorCode.OPEN_ENTRY_EXISTS,
                {"room_id": data["room_id"]},
            )
        entry = self.create(data)
        logger.debug(f"Opened history entry {entry.id} for room {entry.room_number}")
        return entry

    def update_entry(self, id: str, data: Dict[str, Any]) -> HistoryEntry:
        return self.update_fields(id, data)

    def close_entry(
        self,
        room_id: str,
        closed_by: Optional[str] = None,
        when: Optional[datetime] = None,
    ) -> Optional[HistoryEntry]:
        """
        Close the room's open entry.

        No-op returning None when nothing is open.
        """
        entry = self.open_entry(room_id)
        if entry is None:
            return None

        entry.checkout_date = when or utcnow()
        entry.updated_by = closed_by
        self._flush()
        logger.debug(f"Closed history entry {entry.id} for room {entry.room_number}")
        return entry

    def query(self, filters: Optional[HistoryFilter] = None) -> List[HistoryEntry]:
        """Entries matching the filters, most recent check-in first."""
        filters = filters or HistoryFilter()
        stmt = select(HistoryEntry)

        if filters.room_id:
            stmt = stmt.where(HistoryEntry.room_id == filters.room_id)
        stmt = self._apply_date_range(stmt, filters.date_from, filters.date_to)
        if filters.guest_name:
            pattern = f"%{filters.guest_name}%"
            stmt = stmt.where(
                or_(
                    HistoryEntry.guest1_name.ilike(pattern),
                    HistoryEntry.guest2_name.ilike(pattern),
                )
            )
        if filters.company:
            stmt = stmt.where(HistoryEntry.company_name.ilike(f"%{filters.company}%"))

        stmt = stmt.order_by(
            HistoryEntry.guest1_checkin_date.desc(),
            HistoryEntry.created_at.desc(),
        ).limit(filters.limit or self.default_limit)

        try:
            return list(self.session.execute(stmt).scalars().all())
        except SQLAlchemyError as e:
            raise StorageError(f"Database error: {e}") from e

    def aggregate_stats(
        self,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
    ) -> HistoryStats:
        """Booking and guest counts over an optional check-in range."""
        stmt = select(
            func.count(HistoryEntry.id),
            func.sum(case((HistoryEntry.guest2_name.is_not(None), 1), else_=0)),
            func.sum(case((HistoryEntry.checkout_date.is_not(None), 1), else_=0)),
            func.sum(case((HistoryEntry.checkout_date.is_(None), 1), else_=0)),
        )
        stmt = self._apply_date_range(stmt, date_from, date_to)

        try:
            total, second_guests, completed, current = self.session.execute(stmt).one()
        except SQLAlchemyError as e:
            raise StorageError(f"Database error: {e}") from e

        return HistoryStats(
            total_bookings=total or 0,
            total_guests=(total or 0) + (second_guests or 0),
            completed_stays=completed or 0,
            current_guests=current or 0,
        )

    @staticmethod
    def group_by_month(entries: Iterable[HistoryEntry]) -> List[MonthlyHistory]:
        """
        Bucket entries by the month of guest 1's check-in.

        Months come newest first; records keep their incoming order.
        """
        buckets: Dict[tuple, MonthlyHistory] = {}
        for entry in entries:
            key = month_key(entry.guest1_checkin_date)
            if key is None:
                continue
            bucket = buckets.get(key)
            if bucket is None:
                bucket = MonthlyHistory(
                    month_label=month_label(*key),
                    year=key[0],
                    month=key[1],
                )
                buckets[key] = bucket
            bucket.records.append(HistoryRead.model_validate(entry))
            bucket.total_guests += entry.guest_count

        return [buckets[key] for key in sorted(buckets, reverse=True)]

    @staticmethod
    def _apply_date_range(stmt, date_from: Optional[date], date_to: Optional[date]):
        if date_from:
            stmt = stmt.where(HistoryEntry.guest1_checkin_date >= date_from)
        if date_to:
            stmt = stmt.where(HistoryEntry.guest1_checkin_date <= date_to)
        return stmt
