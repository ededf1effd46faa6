import pytest

from sosrelay.core.cache import TtlCache


class FakeClock:
    def __init__(self, now: float = 1_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


def test_ttl_cache_returns_fresh_values_and_expires_old_ones():
    clock = FakeClock()
    cache = TtlCache(60, clock=clock)
    cache.set("k", "v")

    clock.now += 59
    assert cache.get("k") == "v"

    clock.now += 1
    assert cache.get("k") is None
    assert cache.stats.expired == 1


def test_ttl_cache_set_replaces_and_refreshes_entry():
    clock = FakeClock()
    cache = TtlCache(60, clock=clock)
    cache.set("k", "old")
    clock.now += 100
    cache.set("k", "new")
    assert cache.get("k") == "new"
    assert len(cache) == 1


def test_ttl_cache_clears_everything_once_over_the_bound():
    cache = TtlCache(60, max_entries=2, clock=FakeClock())
    cache.set("a", 1)
    cache.set("b", 2)
    cache.set("c", 3)
    assert len(cache) == 3

    cache.set("d", 4)
    assert len(cache) == 1
    assert cache.get("a") is None
    assert cache.get("d") == 4
    assert cache.stats.clears == 1


def test_ttl_cache_tracks_hits_and_misses():
    cache = TtlCache(60, clock=FakeClock())
    assert cache.get("missing") is None
    cache.set("k", "v")
    cache.get("k")
    assert cache.stats.as_dict() == {"hits": 1, "misses": 1, "expired": 0, "sets": 1, "clears": 0}


def test_ttl_cache_rejects_invalid_configuration():
    with pytest.raises(ValueError):
        TtlCache(0)
    with pytest.raises(ValueError):
        TtlCache(60, max_entries=0)
