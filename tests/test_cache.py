"""
Tests for the room list cache backends.
"""

from frontdesk.core.cache import InMemoryCache, NullCache


class FakeClock:
    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


class TestInMemoryCache:
    def test_get_within_ttl(self):
        clock = FakeClock()
        cache = InMemoryCache(default_ttl=5, clock=clock)
        cache.set("rooms:list:all:desc", [{"number": "101"}])
        clock.advance(4.9)
        assert cache.get("rooms:list:all:desc") == [{"number": "101"}]

    def test_expires_after_ttl(self):
        clock = FakeClock()
        cache = InMemoryCache(default_ttl=5, clock=clock)
        cache.set("rooms:list:all:desc", [])
        clock.advance(5)
        assert cache.get("rooms:list:all:desc") is None

    def test_explicit_expire_overrides_default(self):
        clock = FakeClock()
        cache = InMemoryCache(default_ttl=5, clock=clock)
        cache.set("key", "value", expire=60)
        clock.advance(30)
        assert cache.get("key") == "value"

    def test_clear_by_pattern(self):
        cache = InMemoryCache()
        cache.set("rooms:list:all:desc", 1)
        cache.set("rooms:list:Free:asc", 2)
        cache.set("users:list", 3)

        assert cache.clear("rooms:*") == 2
        assert cache.get("rooms:list:all:desc") is None
        assert cache.get("users:list") == 3

    def test_clear_all(self):
        cache = InMemoryCache()
        cache.set("a", 1)
        cache.set("b", 2)
        assert cache.clear() == 2
        assert cache.get("a") is None

    def test_delete(self):
        cache = InMemoryCache()
        cache.set("a", 1)
        assert cache.delete("a")
        assert not cache.delete("a")


class TestNullCache:
    def test_never_stores(self):
        cache = NullCache()
        assert cache.set("a", 1) is False
        assert cache.get("a") is None
        assert cache.clear("*") == 0
