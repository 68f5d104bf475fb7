from django.core.cache.backends.locmem import LocMemCache

from exams.cache import PoolCache


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


def test_get_returns_stored_pool_until_ttl():
    clock = FakeClock()
    cache = PoolCache(ttl_seconds=300, clock=clock)
    cache.set("matching", "CAL", "ru", ("q1",))

    clock.now += 299
    assert cache.get("matching", "CAL", "ru") == ("q1",)

    clock.now += 2
    assert cache.get("matching", "CAL", "ru") is None
    assert cache.get_stats()["total"] == 0


def test_keys_include_type_topic_and_language():
    cache = PoolCache(clock=FakeClock())
    cache.set("matching", "CAL", "ru", ("ru",))
    assert cache.get("matching", "CAL", "kz") is None
    assert cache.get("multiple", "CAL", "ru") is None
    assert cache.get("matching", "GEO", "ru") is None


def test_empty_pool_is_a_hit():
    cache = PoolCache(clock=FakeClock())
    cache.set("simple:1", "RAD", "ru", ())
    assert cache.get("simple:1", "RAD", "ru") == ()


def test_cleanup_and_stats():
    clock = FakeClock()
    cache = PoolCache(ttl_seconds=10, clock=clock)
    cache.set("matching", "CAL", "ru", ())
    clock.now += 5
    cache.set("multiple", "ALG", "ru", ())
    clock.now += 6

    assert cache.get_stats() == {"total": 2, "valid": 1, "expired": 1, "ttl_seconds": 10}
    assert cache.cleanup() == 1
    assert cache.get_stats()["total"] == 1


def test_clear():
    cache = PoolCache(clock=FakeClock())
    cache.set("matching", "CAL", "ru", ())
    cache.clear()
    assert cache.get_stats()["total"] == 0


def test_set_sweeps_expired_entries_once_per_ttl():
    clock = FakeClock()
    cache = PoolCache(ttl_seconds=10, clock=clock)
    cache.set("matching", "CAL", "ru", ())

    clock.now += 11
    cache.set("multiple", "ALG", "ru", ())

    assert cache.get_stats() == {"total": 1, "valid": 1, "expired": 0, "ttl_seconds": 10}


def test_instances_share_the_cache_backend():
    # two workers, one cache alias
    worker_a = PoolCache(clock=FakeClock())
    worker_b = PoolCache(clock=FakeClock())
    worker_a.set("matching", "CAL", "ru", ("q1",))

    assert worker_b.get("matching", "CAL", "ru") == ("q1",)

    worker_a.clear()
    assert worker_b.get("matching", "CAL", "ru") is None
    assert worker_b.get_stats()["total"] == 0


def test_explicit_backend():
    backend = LocMemCache("pool-cache-tests", {})
    backend.clear()
    cache = PoolCache(clock=FakeClock(), backend=backend)
    cache.set("matching", "CAL", "ru", ("q1",))

    assert backend.get("pool:matching:CAL:ru") == (1000.0, ("q1",))
    assert PoolCache(clock=FakeClock()).get("matching", "CAL", "ru") is None
