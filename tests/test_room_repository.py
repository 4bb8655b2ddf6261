"""
Tests for RoomRepository: uniqueness, ordering, statistics and caching.
"""

import pytest
from sqlalchemy import text

from frontdesk.core.cache import InMemoryCache
from frontdesk.core.exceptions import DuplicateKeyError, ErrorCode, NotFoundError
from frontdesk.models.base.enums import RoomStatus, RoomType
from frontdesk.repositories.room_repository import RoomRepository, room_number_sort_key
from frontdesk.schemas.room import RoomFilter


@pytest.fixture
def repo(db_session):
    return RoomRepository(db_session)


def _seed(repo, *specs):
    for number, room_type, status in specs:
        repo.create_room(number, room_type, status)
    repo.session.commit()


class TestRoomCrud:
    def test_create_and_find_by_number(self, repo):
        room = repo.create_room("101", RoomType.SINGLE)
        repo.session.commit()

        found = repo.find_by_number("101")
        assert found.id == room.id
        assert found.status == RoomStatus.FREE
        assert found.version == 1

    def test_duplicate_number_rejected(self, repo):
        _seed(repo, ("101", RoomType.SINGLE, RoomStatus.FREE))
        with pytest.raises(DuplicateKeyError) as exc_info:
            repo.create_room("101", RoomType.DOUBLE)
        assert exc_info.value.error_code == ErrorCode.DUPLICATE_ROOM_NUMBER

    def test_get_unknown_room(self, repo):
        with pytest.raises(NotFoundError) as exc_info:
            repo.get_by_id("missing")
        assert exc_info.value.error_code == ErrorCode.ROOM_NOT_FOUND

    def test_update_bumps_version(self, repo):
        room = repo.create_room("101", RoomType.SINGLE)
        repo.session.commit()
        repo.update_fields(room.id, {"status": RoomStatus.DIRTY})
        repo.session.commit()
        assert repo.get_by_id(room.id).version == 2


class TestListRooms:
    def test_numeric_order(self, repo):
        _seed(
            repo,
            ("9", RoomType.SINGLE, RoomStatus.FREE),
            ("101", RoomType.SINGLE, RoomStatus.FREE),
            ("10", RoomType.DOUBLE, RoomStatus.FREE),
        )
        descending = [r.number for r in repo.list_rooms()]
        ascending = [r.number for r in repo.list_rooms(RoomFilter(descending=False))]
        assert descending == ["101", "10", "9"]
        assert ascending == ["9", "10", "101"]

    def test_status_filter(self, repo):
        _seed(
            repo,
            ("101", RoomType.SINGLE, RoomStatus.FREE),
            ("102", RoomType.SINGLE, RoomStatus.DIRTY),
        )
        rooms = repo.list_rooms(RoomFilter(status=RoomStatus.DIRTY))
        assert [r.number for r in rooms] == ["102"]

    def test_sort_key_without_digits(self):
        assert room_number_sort_key("Suite") == (-1, "Suite")
        assert room_number_sort_key("12B") == (12, "12B")


class TestRoomStats:
    def test_no_rooms(self, repo):
        stats = repo.aggregate_stats()
        assert stats.total == 0
        assert stats.occupancy_rate == 0

    def test_counts_and_rate(self, repo):
        _seed(
            repo,
            ("101", RoomType.SINGLE, RoomStatus.OCCUPIED),
            ("102", RoomType.SINGLE, RoomStatus.FREE),
            ("103", RoomType.SINGLE, RoomStatus.DIRTY),
        )
        stats = repo.aggregate_stats()
        assert (stats.total, stats.free, stats.occupied, stats.dirty) == (3, 1, 1, 1)
        assert stats.occupancy_rate == 33

    def test_rate_rounds_half_up(self, repo):
        _seed(
            repo,
            ("101", RoomType.SINGLE, RoomStatus.OCCUPIED),
            ("102", RoomType.SINGLE, RoomStatus.FREE),
            ("103", RoomType.SINGLE, RoomStatus.FREE),
            ("104", RoomType.SINGLE, RoomStatus.FREE),
            ("105", RoomType.SINGLE, RoomStatus.FREE),
            ("106", RoomType.SINGLE, RoomStatus.FREE),
            ("107", RoomType.SINGLE, RoomStatus.FREE),
            ("108", RoomType.SINGLE, RoomStatus.FREE),
        )
        # 1 of 8 is 12.5%
        assert repo.aggregate_stats().occupancy_rate == 13

    def test_legacy_status_spelling_counts_as_occupied(self, repo):
        repo.session.execute(
            text(
                "INSERT INTO rooms (id, number, type, status, version, created_at, updated_at) "
                "VALUES ('legacy-1', '301', 'single', 'Ocupied', 1, "
                "'2024-01-01 00:00:00', '2024-01-01 00:00:00')"
            )
        )
        repo.session.commit()

        assert repo.get_by_id("legacy-1").status == RoomStatus.OCCUPIED
        assert repo.aggregate_stats().occupied == 1

    def test_status_filter_matches_legacy_spelling(self, repo):
        _seed(repo, ("101", RoomType.SINGLE, RoomStatus.FREE))
        repo.session.execute(
            text(
                "INSERT INTO rooms (id, number, type, status, guest1_name, version, created_at, updated_at) "
                "VALUES ('legacy-1', '301', 'single', 'Ocupied', 'Ana', 1, "
                "'2024-01-01 00:00:00', '2024-01-01 00:00:00')"
            )
        )
        repo.session.commit()

        occupied = repo.list_rooms(RoomFilter(status=RoomStatus.OCCUPIED))

        assert [r.number for r in occupied] == ["301"]
        assert len(occupied) == repo.aggregate_stats().occupied
        assert [r.number for r in repo.list_rooms(RoomFilter(status=RoomStatus.FREE))] == ["101"]


class TestRoomListCache:
    def test_second_read_served_from_cache(self, db_session):
        cache = InMemoryCache(default_ttl=60)
        repo = RoomRepository(db_session, cache)
        _seed(repo, ("101", RoomType.SINGLE, RoomStatus.FREE))

        assert [r.number for r in repo.list_rooms()] == ["101"]
        assert cache.get("rooms:list:all:desc") is not None

        # Bypass the repository so the cache does not see the write
        db_session.execute(text("UPDATE rooms SET status = 'Dirty'"))
        db_session.commit()
        assert repo.list_rooms()[0].status == RoomStatus.FREE

    def test_writes_invalidate(self, db_session):
        cache = InMemoryCache(default_ttl=60)
        repo = RoomRepository(db_session, cache)
        _seed(repo, ("101", RoomType.SINGLE, RoomStatus.FREE))
        room_id = repo.list_rooms()[0].id

        repo.update_fields(room_id, {"status": RoomStatus.DIRTY})
        db_session.commit()

        assert cache.get("rooms:list:all:desc") is None
        assert repo.list_rooms()[0].status == RoomStatus.DIRTY
