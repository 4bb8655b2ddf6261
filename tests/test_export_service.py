"""
Tests for history reporting and the Excel exports built from it.
"""

import io
from datetime import date

import pytest
from openpyxl import load_workbook

from frontdesk.core.exceptions import ErrorCode
from frontdesk.models.base.enums import RoomType
from frontdesk.schemas.history import HistoryFilter
from frontdesk.schemas.room import GuestInput
from frontdesk.services.export import ExportService
from frontdesk.services.export.export_service import DETAILED_HEADERS, SUMMARY_HEADERS


@pytest.fixture
def export_service(db_session, history_service):
    return ExportService(db_session, history_service)


@pytest.fixture
def stays(room_service, make_room, check_in):
    """
    Three bookings in 2025:
    - 101: Ana, January, checked out
    - 201: Luis and Marta, March, Luis left early, Marta still in
    - 102: Zoe, March, checked out
    """
    r101 = make_room("101")
    r102 = make_room("102")
    r201 = make_room("201", RoomType.DOUBLE)

    check_in(r101.id, name="Ana Silva", phone="+34600111222", company="Acme", checkin_date=date(2025, 1, 5))
    room_service.checkout_room(r101.id)

    check_in(
        r201.id,
        name="Luis Gomez",
        checkin_date=date(2025, 3, 10),
        guest2=GuestInput(name="Marta Ruiz"),
    )
    room_service.checkout_first_guest(r201.id)

    check_in(r102.id, name="Zoe Park", checkin_date=date(2025, 3, 2))
    room_service.checkout_room(r102.id)


def _sheet_rows(export, sheet):
    workbook = load_workbook(io.BytesIO(export.content))
    return [list(row) for row in workbook[sheet].iter_rows(values_only=True)]


class TestHistoryService:
    def test_get_history(self, history_service, stays):
        result = history_service.get_history(HistoryFilter(guest_name="marta"))
        assert [r.guest1_name for r in result.data] == ["Luis Gomez"]
        assert result.data[0].is_open
        assert result.data[0].guest_count == 2

    def test_stats(self, history_service, stays):
        stats = history_service.history_stats().data
        assert stats.total_bookings == 3
        assert stats.total_guests == 4
        assert stats.completed_stays == 2
        assert stats.current_guests == 1

    def test_monthly_history(self, history_service, stays):
        months = history_service.monthly_history(2025).data
        assert [m.month_label for m in months] == ["March 2025", "January 2025"]
        assert [r.room_number for r in months[0].records] == ["201", "102"]

    def test_other_year_is_empty(self, history_service, stays):
        assert history_service.monthly_history(2024).data == []

    def test_empty_month(self, history_service):
        month = history_service.month_history(2025, 2).data
        assert month.month_label == "February 2025"
        assert month.records == []


class TestMonthlyExport:
    def test_workbook(self, export_service, stays):
        result = export_service.export_monthly(2025, 3)

        assert result.is_success
        export = result.data
        assert export.filename == "history_march_2025.xlsx"

        workbook = load_workbook(io.BytesIO(export.content))
        assert workbook.sheetnames == ["Summary", "Detailed"]

        summary = _sheet_rows(export, "Summary")
        assert summary[0] == SUMMARY_HEADERS
        assert [row[0] for row in summary[1:]] == ["201", "102"]
        luis = summary[1]
        assert luis[3] == "Luis Gomez"
        assert luis[5] == "10/03/2025"
        assert luis[6] == "Marta Ruiz"
        assert luis[9] == "In progress"
        assert luis[10] == "Active"
        assert luis[11] == 2

    def test_detailed_rows_per_guest(self, export_service, stays):
        detailed = _sheet_rows(export_service.export_monthly(2025, 3).data, "Detailed")

        assert detailed[0] == DETAILED_HEADERS
        rows = detailed[1:]
        assert [(row[0], row[3], row[4]) for row in rows] == [
            ("201", 1, "Luis Gomez"),
            ("201", 2, "Marta Ruiz"),
            ("102", 1, "Zoe Park"),
        ]
        # Luis left early, Marta is still in the room
        assert rows[0][8] == "Completed"
        assert rows[1][7] == "In progress"
        assert rows[1][8] == "Active"
        assert rows[1][6] == "10/03/2025"

    def test_no_data(self, export_service, stays):
        result = export_service.export_monthly(2025, 2)
        assert result.error_code == ErrorCode.NO_DATA_TO_EXPORT


class TestYearlyExport:
    def test_sheets(self, export_service, stays):
        export = export_service.export_yearly(2025).data

        assert export.filename == "history_full_2025.xlsx"
        workbook = load_workbook(io.BytesIO(export.content))
        assert workbook.sheetnames == [
            "Summary 2025",
            "Detailed 2025",
            "March 2025",
            "January 2025",
        ]
        assert len(_sheet_rows(export, "Summary 2025")) == 4
        assert len(_sheet_rows(export, "Detailed 2025")) == 5

    def test_no_data(self, export_service):
        assert export_service.export_yearly(2025).error_code == ErrorCode.NO_DATA_TO_EXPORT


class TestStatisticsExport:
    def test_indicators(self, export_service, stays):
        export = export_service.export_statistics(2025).data

        assert export.filename == "statistics_2025.xlsx"
        annual = dict(_sheet_rows(export, "Annual Summary")[1:])
        assert annual["Total bookings in year"] == 3
        assert annual["Total guests in year"] == 4
        assert annual["Active bookings"] == 1
        assert annual["Completed bookings"] == 2
        assert annual["Annual completion rate"] == "66.7%"
        assert annual["Distinct companies"] == 1
        assert annual["Bookings in double rooms"] == 1
        assert annual["Average guests per booking"] == "1.33"

        by_month = _sheet_rows(export, "By Month")
        assert [row[0] for row in by_month[1:]] == ["March 2025", "January 2025"]
        assert by_month[1][2] == 2

    def test_no_data(self, export_service):
        assert export_service.export_statistics(2030).error_code == ErrorCode.NO_DATA_TO_EXPORT
