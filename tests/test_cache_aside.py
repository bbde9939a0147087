import pytest

from commerce_bridge.adapters.interfaces.cache import CacheLevel
from commerce_bridge.core.exceptions import CacheError
from commerce_bridge.infrastructure.cache.cache_aside import CacheAside


class FailingBackend:
    level = CacheLevel.REDIS

    def __init__(self):
        self.closed = False

    async def open(self):
        raise CacheError("Failed to connect to Redis: connection refused")

    async def close(self):
        self.closed = True

    async def get(self, key):
        raise RuntimeError("store down")

    async def set(self, key, value, ttl):
        raise RuntimeError("store down")

    async def delete(self, key):
        raise RuntimeError("store down")

    async def delete_pattern(self, pattern):
        raise RuntimeError("store down")


def test_keys_are_deterministic():
    first = CacheAside.build_key("products:list", params={"per_page": 5, "page": 1, "search": None})
    second = CacheAside.build_key("products:list", params={"page": 1, "per_page": 5})

    assert first == second == 'products:list:{"page":1,"per_page":5}'
    assert CacheAside.build_key("variations:item", 4, 9) == "variations:item:4:9"


@pytest.mark.asyncio
async def test_get_or_fetch_serves_hits(cache):
    calls = []

    async def fetch():
        calls.append(1)
        return {"id": 1}

    assert await cache.get_or_fetch("products:item:1", fetch, 60) == {"id": 1}
    assert await cache.get_or_fetch("products:item:1", fetch, 60) == {"id": 1}
    assert len(calls) == 1


@pytest.mark.asyncio
async def test_ttl_expiry_refetches(cache, clock):
    calls = []

    async def fetch():
        calls.append(1)
        return len(calls)

    await cache.get_or_fetch("k", fetch, 60)
    clock.advance(61)
    assert await cache.get_or_fetch("k", fetch, 60) == 2


@pytest.mark.asyncio
async def test_none_results_are_not_cached(cache):
    calls = []

    async def fetch():
        calls.append(1)
        return None

    await cache.get_or_fetch("k", fetch, 60)
    await cache.get_or_fetch("k", fetch, 60)
    assert len(calls) == 2


@pytest.mark.asyncio
async def test_invalidate_key_and_pattern(cache):
    await cache.set("products:item:1", {"id": 1}, 60)
    await cache.set('products:list:{"page":1}', [1], 60)
    await cache.set('products:list:{"page":2}', [2], 60)
    await cache.set("orders:item:1", {"id": 1}, 60)

    await cache.invalidate_many("products:item:1", "products:list:*")

    assert await cache.get("products:item:1") is None
    assert await cache.get('products:list:{"page":1}') is None
    assert await cache.get('products:list:{"page":2}') is None
    assert await cache.get("orders:item:1") == {"id": 1}


@pytest.mark.asyncio
async def test_invalidation_pattern_with_json_prefix(cache):
    include = CacheAside.build_key("products:list", params={"include": [1, 2]})[:-1]
    await cache.set(include + ',"page":1}', [1], 60)
    await cache.set(include + ',"page":2}', [2], 60)
    await cache.set('products:list:{"include":1}', [3], 60)

    await cache.invalidate(include + "*")

    assert await cache.get(include + ',"page":1}') is None
    assert await cache.get(include + ',"page":2}') is None
    assert await cache.get('products:list:{"include":1}') == [3]


@pytest.mark.asyncio
async def test_backend_failures_are_swallowed():
    cache = CacheAside(FailingBackend())

    async def fetch():
        return "fresh"

    assert await cache.get("k") is None
    await cache.set("k", "v")
    await cache.invalidate("k")
    await cache.invalidate("k*")
    assert await cache.get_or_fetch("k", fetch) == "fresh"


@pytest.mark.asyncio
async def test_disabled_cache_always_misses(memory_cache):
    cache = CacheAside(memory_cache, enabled=False)
    await cache.set("k", "v", 60)
    assert await cache.get("k") is None


@pytest.mark.asyncio
async def test_unreachable_store_is_tolerated_on_open():
    backend = FailingBackend()
    cache = CacheAside(backend)

    await cache.open()
    assert await cache.get("k") is None
    await cache.close()
    assert backend.closed
