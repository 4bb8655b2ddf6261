"""
Tests for HistoryRepository: the open-entry rule, filtering and grouping.
"""

from datetime import date, datetime, timezone

import pytest

from frontdesk.core.exceptions import ErrorCode, StateConflictError
from frontdesk.models.base.enums import RoomType
from frontdesk.repositories.history_repository import HistoryRepository
from frontdesk.schemas.history import HistoryFilter


@pytest.fixture
def repo(db_session):
    return HistoryRepository(db_session)


def _entry(room_id="room-1", number="101", guest1="Ana Silva", checkin=date(2025, 3, 10), **extra):
    data = {
        "room_id": room_id,
        "room_number": number,
        "room_type": RoomType.DOUBLE,
        "guest1_name": guest1,
        "guest1_checkin_date": checkin,
    }
    data.update(extra)
    return data


def _closed(repo, **kwargs):
    entry = repo.insert_entry(_entry(**kwargs))
    repo.close_entry(entry.room_id, when=datetime(2025, 12, 31, tzinfo=timezone.utc))
    repo.session.commit()
    return entry


class TestOpenEntries:
    def test_insert_and_find_open(self, repo):
        entry = repo.insert_entry(_entry())
        repo.session.commit()

        found = repo.open_entry("room-1")
        assert found.id == entry.id
        assert found.is_open

    def test_second_open_entry_rejected(self, repo):
        repo.insert_entry(_entry())
        with pytest.raises(StateConflictError) as exc_info:
            repo.insert_entry(_entry(guest1="Bob"))
        assert exc_info.value.error_code == ErrorCode.OPEN_ENTRY_EXISTS

    def test_close_then_reopen(self, repo):
        repo.insert_entry(_entry())
        closed = repo.close_entry("room-1", closed_by="user-1")
        assert closed.checkout_date is not None
        assert closed.updated_by == "user-1"

        repo.insert_entry(_entry(guest1="Bob", checkin=date(2025, 3, 12)))
        repo.session.commit()
        assert repo.open_entry("room-1").guest1_name == "Bob"

    def test_close_without_open_entry_is_noop(self, repo):
        assert repo.close_entry("room-1") is None

    def test_update_entry(self, repo):
        entry = repo.insert_entry(_entry())
        updated = repo.update_entry(entry.id, {"guest2_name": "Bob", "updated_by": "user-2"})
        assert updated.guest2_name == "Bob"
        assert updated.guest_count == 2


class TestQuery:
    @pytest.fixture
    def seeded(self, repo):
        _closed(repo, room_id="r1", number="101", guest1="Ana Silva",
                checkin=date(2025, 1, 5), company_name="Acme Builders")
        _closed(repo, room_id="r2", number="102", guest1="Luis Gomez",
                checkin=date(2025, 2, 14), guest2_name="Marta Ruiz")
        repo.insert_entry(_entry(room_id="r3", number="201", guest1="Zoe Park",
                                 checkin=date(2025, 3, 1), company_name="Globex"))
        repo.session.commit()
        return repo

    def test_newest_checkin_first(self, seeded):
        names = [e.guest1_name for e in seeded.query()]
        assert names == ["Zoe Park", "Luis Gomez", "Ana Silva"]

    def test_date_range_is_inclusive(self, seeded):
        entries = seeded.query(HistoryFilter(date_from=date(2025, 1, 5), date_to=date(2025, 2, 14)))
        assert [e.guest1_name for e in entries] == ["Luis Gomez", "Ana Silva"]

    def test_guest_name_matches_either_guest(self, seeded):
        entries = seeded.query(HistoryFilter(guest_name="marta"))
        assert [e.guest1_name for e in entries] == ["Luis Gomez"]

    def test_company_substring(self, seeded):
        entries = seeded.query(HistoryFilter(company="acme"))
        assert [e.room_number for e in entries] == ["101"]

    def test_room_and_limit(self, seeded):
        assert len(seeded.query(HistoryFilter(room_id="r2"))) == 1
        assert len(seeded.query(HistoryFilter(limit=2))) == 2

    def test_stats(self, seeded):
        stats = seeded.aggregate_stats()
        assert stats.total_bookings == 3
        assert stats.total_guests == 4
        assert stats.completed_stays == 2
        assert stats.current_guests == 1

    def test_stats_with_range(self, seeded):
        stats = seeded.aggregate_stats(date_from=date(2025, 2, 1))
        assert stats.total_bookings == 2
        assert stats.completed_stays == 1

    def test_stats_on_empty_ledger(self, repo):
        stats = repo.aggregate_stats()
        assert (stats.total_bookings, stats.total_guests) == (0, 0)


class TestGroupByMonth:
    def test_newest_month_first(self, repo):
        _closed(repo, room_id="r1", checkin=date(2025, 1, 5))
        _closed(repo, room_id="r2", checkin=date(2025, 3, 20), guest2_name="Bob")
        _closed(repo, room_id="r3", checkin=date(2025, 3, 2))

        groups = repo.group_by_month(repo.query())
        assert [g.month_label for g in groups] == ["March 2025", "January 2025"]
        assert [len(g.records) for g in groups] == [2, 1]
        assert groups[0].total_guests == 3
        assert groups[0].records[0].guest1_checkin_date == date(2025, 3, 20)

    def test_empty(self, repo):
        assert repo.group_by_month([]) == []
