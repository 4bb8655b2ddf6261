"""
History service: read-only reporting over the occupancy ledger.
"""

from datetime import date
from typing import List, Optional

from sqlalchemy.orm import Session

from frontdesk.config.settings import settings
from frontdesk.repositories.history_repository import HistoryRepository
from frontdesk.schemas.history import HistoryFilter, HistoryRead, HistoryStats, MonthlyHistory
from frontdesk.services.base import BaseService, ServiceResult
from frontdesk.utils.date_utils import month_bounds, month_label, year_bounds

# Report queries cover a whole year; keep them under the filter's ceiling
REPORT_QUERY_LIMIT = 10000


class HistoryService(BaseService[HistoryRepository]):

    def __init__(self, db_session: Session):
        super().__init__(
            HistoryRepository(db_session, default_limit=settings.HISTORY_QUERY_LIMIT),
            db_session,
        )

    def get_history(self, filters: Optional[HistoryFilter] = None) -> ServiceResult[List[HistoryRead]]:
        try:
            entries = self.repository.query(filters)
            return ServiceResult.success([HistoryRead.model_validate(e) for e in entries])
        except Exception as e:
            return self._handle_exception(e, "get history")

    def history_stats(
        self,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
    ) -> ServiceResult[HistoryStats]:
        try:
            return ServiceResult.success(self.repository.aggregate_stats(date_from, date_to))
        except Exception as e:
            return self._handle_exception(e, "get history statistics")

    def monthly_history(
        self,
        year: int,
        filters: Optional[HistoryFilter] = None,
    ) -> ServiceResult[List[MonthlyHistory]]:
        """
        Entries of `year` grouped by check-in month, newest month first.

        Name and company filters from `filters` are applied before grouping.
        """
        try:
            return ServiceResult.success(self._grouped(year, filters))
        except Exception as e:
            return self._handle_exception(e, "get monthly history", year)

    def month_history(self, year: int, month: int) -> ServiceResult[MonthlyHistory]:
        """Entries of a single month; an empty bucket when there are none."""
        try:
            start, end = month_bounds(year, month)
            entries = self.repository.query(
                HistoryFilter(date_from=start, date_to=end, limit=REPORT_QUERY_LIMIT)
            )
            groups = self.repository.group_by_month(entries)
            if groups:
                return ServiceResult.success(groups[0])
            return ServiceResult.success(
                MonthlyHistory(month_label=month_label(year, month), year=year, month=month)
            )
        except Exception as e:
            return self._handle_exception(e, "get month history", f"{year}-{month:02d}")

    def _grouped(self, year: int, filters: Optional[HistoryFilter]) -> List[MonthlyHistory]:
        start, end = year_bounds(year)
        scoped = HistoryFilter(
            room_id=filters.room_id if filters else None,
            guest_name=filters.guest_name if filters else None,
            company=filters.company if filters else None,
            date_from=start,
            date_to=end,
            limit=REPORT_QUERY_LIMIT,
        )
        return self.repository.group_by_month(self.repository.query(scoped))
