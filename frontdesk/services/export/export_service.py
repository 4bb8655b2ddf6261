"""
Export service: history workbooks for the front desk.

Three workbooks are produced:
- monthly: "Summary" and "Detailed" sheets for one month
- yearly: the same two sheets for the whole year plus one summary
  sheet per month
- statistics: annual indicators and a per-month breakdown
"""

from dataclasses import dataclass
from typing import Any, Iterable, List

from sqlalchemy.orm import Session

from frontdesk.core.exceptions import ErrorCode
from frontdesk.models.base.enums import RoomType
from frontdesk.schemas.history import HistoryRead, MonthlyHistory
from frontdesk.services.base import ErrorSeverity, ServiceError, ServiceResult
from frontdesk.services.history.history_service import HistoryService
from frontdesk.utils.date_utils import format_display_date
from frontdesk.utils.excel_utils import ExcelGenerator

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

IN_PROGRESS = "In progress"
STATUS_COMPLETED = "Completed"
STATUS_ACTIVE = "Active"

SUMMARY_HEADERS = [
    "Room", "Room Type", "Company",
    "Guest 1", "Phone 1", "Check-in G1",
    "Guest 2", "Phone 2", "Check-in G2",
    "Check-out", "Status", "Total Guests",
]
SUMMARY_WIDTHS = [8, 12, 20, 25, 15, 12, 25, 15, 12, 12, 10, 10]

DETAILED_HEADERS = [
    "Room", "Room Type", "Company", "Guest No.", "Guest Name",
    "Phone", "Check-in", "Check-out", "Status", "Booking ID",
]
DETAILED_WIDTHS = [8, 12, 20, 8, 25, 15, 12, 12, 10, 38]

ANNUAL_HEADERS = ["Indicator", "Value"]
ANNUAL_WIDTHS = [30, 15]

BY_MONTH_HEADERS = [
    "Month", "Year", "Total Bookings", "Total Guests", "Active Bookings",
    "Completed Bookings", "Completion Rate", "Distinct Companies",
    "Single Rooms", "Double Rooms",
]
BY_MONTH_WIDTHS = [15, 8, 15, 15, 15, 18, 15, 18, 12, 12]


@dataclass
class ExportFile:
    filename: str
    content: bytes
    media_type: str = XLSX_MEDIA_TYPE


def _newest_first(records: Iterable[HistoryRead]) -> List[HistoryRead]:
    return sorted(records, key=lambda r: r.guest1_checkin_date, reverse=True)


def _checkout_cell(record: HistoryRead) -> str:
    return format_display_date(record.checkout_date) if record.checkout_date else IN_PROGRESS


def _status_cell(record: HistoryRead) -> str:
    return STATUS_COMPLETED if record.checkout_date else STATUS_ACTIVE


def _completion_rate(records: List[HistoryRead]) -> str:
    if not records:
        return "0%"
    completed = sum(1 for r in records if r.checkout_date)
    return f"{completed / len(records) * 100:.1f}%"


def summary_rows(records: Iterable[HistoryRead]) -> List[List[Any]]:
    """One row per booking."""
    return [
        [
            record.room_number,
            record.room_type.value,
            record.company_name or "",
            record.guest1_name,
            record.guest1_phone or "",
            format_display_date(record.guest1_checkin_date),
            record.guest2_name or "",
            record.guest2_phone or "",
            format_display_date(record.guest2_checkin_date),
            _checkout_cell(record),
            _status_cell(record),
            2 if record.guest2_name else 1,
        ]
        for record in _newest_first(records)
    ]


def _guest_tail(record: HistoryRead, left_at) -> List[Any]:
    """Checkout, status and booking id for one guest of a booking."""
    if left_at:
        return [format_display_date(left_at), STATUS_COMPLETED, record.id]
    return [IN_PROGRESS, STATUS_ACTIVE, record.id]


def detailed_rows(records: Iterable[HistoryRead]) -> List[List[Any]]:
    """
    One row per guest.

    A guest who left before the room emptied shows their own checkout;
    guest 2 without a date inherits guest 1's check-in.
    """
    rows = []
    for record in _newest_first(records):
        common = [record.room_number, record.room_type.value, record.company_name or ""]
        rows.append(
            common
            + [1, record.guest1_name, record.guest1_phone or "",
               format_display_date(record.guest1_checkin_date)]
            + _guest_tail(record, record.guest1_checkout_date or record.checkout_date)
        )
        if record.guest2_name:
            rows.append(
                common
                + [2, record.guest2_name, record.guest2_phone or "",
                   format_display_date(record.guest2_checkin_date or record.guest1_checkin_date)]
                + _guest_tail(record, record.guest2_checkout_date or record.checkout_date)
            )
    return rows


class ExportService:
    """Render history into .xlsx workbooks."""

    def __init__(self, db_session: Session, history_service: HistoryService = None):
        self.history_service = history_service or HistoryService(db_session)

    def export_monthly(self, year: int, month: int) -> ServiceResult[ExportFile]:
        result = self.history_service.month_history(year, month)
        if not result:
            return result
        month_data = result.data
        if not month_data.records:
            return self._no_data(f"No history to export for {month_data.month_label}")

        excel = ExcelGenerator()
        excel.add_worksheet("Summary", SUMMARY_HEADERS, summary_rows(month_data.records), SUMMARY_WIDTHS)
        excel.add_worksheet("Detailed", DETAILED_HEADERS, detailed_rows(month_data.records), DETAILED_WIDTHS)

        slug = month_data.month_label.lower().replace(" ", "_")
        return ServiceResult.success(ExportFile(f"history_{slug}.xlsx", excel.to_bytes()))

    def export_yearly(self, year: int) -> ServiceResult[ExportFile]:
        result = self.history_service.monthly_history(year)
        if not result:
            return result
        months: List[MonthlyHistory] = result.data
        if not months:
            return self._no_data(f"No history to export for {year}")

        all_records = [record for month in months for record in month.records]
        excel = ExcelGenerator()
        excel.add_worksheet(f"Summary {year}", SUMMARY_HEADERS, summary_rows(all_records), SUMMARY_WIDTHS)
        excel.add_worksheet(f"Detailed {year}", DETAILED_HEADERS, detailed_rows(all_records), DETAILED_WIDTHS)
        for month in months:
            excel.add_worksheet(month.month_label, SUMMARY_HEADERS, summary_rows(month.records), SUMMARY_WIDTHS)

        return ServiceResult.success(ExportFile(f"history_full_{year}.xlsx", excel.to_bytes()))

    def export_statistics(self, year: int) -> ServiceResult[ExportFile]:
        result = self.history_service.monthly_history(year)
        if not result:
            return result
        months: List[MonthlyHistory] = result.data
        if not months:
            return self._no_data(f"No history to export for {year}")

        all_records = [record for month in months for record in month.records]
        total_guests = sum(month.total_guests for month in months)
        completed = sum(1 for r in all_records if r.checkout_date)

        annual = [
            ["Total bookings in year", len(all_records)],
            ["Total guests in year", total_guests],
            ["Active bookings", len(all_records) - completed],
            ["Completed bookings", completed],
            ["Annual completion rate", _completion_rate(all_records)],
            ["Distinct companies", len({r.company_name for r in all_records if r.company_name})],
            ["Bookings in single rooms", sum(1 for r in all_records if r.room_type == RoomType.SINGLE)],
            ["Bookings in double rooms", sum(1 for r in all_records if r.room_type == RoomType.DOUBLE)],
            ["Average guests per booking", f"{total_guests / len(all_records):.2f}"],
        ]

        by_month = []
        for month in months:
            records = month.records
            done = sum(1 for r in records if r.checkout_date)
            by_month.append([
                month.month_label,
                month.year,
                len(records),
                month.total_guests,
                len(records) - done,
                done,
                _completion_rate(records),
                len({r.company_name for r in records if r.company_name}),
                sum(1 for r in records if r.room_type == RoomType.SINGLE),
                sum(1 for r in records if r.room_type == RoomType.DOUBLE),
            ])

        excel = ExcelGenerator()
        excel.add_worksheet("Annual Summary", ANNUAL_HEADERS, annual, ANNUAL_WIDTHS)
        excel.add_worksheet("By Month", BY_MONTH_HEADERS, by_month, BY_MONTH_WIDTHS)

        return ServiceResult.success(ExportFile(f"statistics_{year}.xlsx", excel.to_bytes()))

    @staticmethod
    def _no_data(message: str) -> ServiceResult:
        return ServiceResult.failure(
            ServiceError(code=ErrorCode.NO_DATA_TO_EXPORT, message=message, severity=ErrorSeverity.WARNING)
        )
