import json
import re

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from commerce_bridge.core.exceptions import CacheError
from commerce_bridge.infrastructure.cache import redis_cache as redis_cache_mod
from commerce_bridge.infrastructure.cache.cache_aside import CacheAside
from commerce_bridge.infrastructure.cache.redis_cache import RedisCache


def redis_glob_match(pattern, key):
    """Match a key the way Redis SCAN MATCH does, backslash escapes included."""
    regex, i = "", 0
    while i < len(pattern):
        char = pattern[i]
        if char == "\\" and i + 1 < len(pattern):
            i += 1
            regex += re.escape(pattern[i])
        elif char == "*":
            regex += ".*"
        elif char == "?":
            regex += "."
        elif char == "[" and "]" in pattern[i + 1:]:
            end = pattern.index("]", i + 1)
            regex += "[" + re.escape(pattern[i + 1:end]) + "]"
            i = end
        else:
            regex += re.escape(char)
        i += 1
    return re.fullmatch(regex, key, re.DOTALL) is not None


class DummyRedis:
    """Dict backed stand-in for redis.asyncio.Redis."""

    def __init__(self):
        self.store = {}
        self.ttls = {}
        self.delete_calls = []
        self.scan_calls = []
        self.keys_called = False
        self.closed = False
        self.fail = False

    def _check(self):
        if self.fail:
            raise RedisConnectionError("connection refused")

    async def ping(self):
        self._check()
        return True

    async def get(self, key):
        self._check()
        return self.store.get(key)

    async def setex(self, key, ttl, value):
        self._check()
        self.store[key] = value
        self.ttls[key] = ttl

    async def set(self, key, value):
        self._check()
        self.store[key] = value

    async def delete(self, *keys):
        self._check()
        self.delete_calls.append(keys)
        return sum(1 for key in keys if self.store.pop(key, None) is not None)

    async def scan_iter(self, match=None, count=None):
        self._check()
        self.scan_calls.append((match, count))
        for key in list(self.store):
            if redis_glob_match(match, key):
                yield key

    async def keys(self, pattern):
        self.keys_called = True
        return []

    async def aclose(self):
        self.closed = True


@pytest.fixture
def dummy_redis():
    return DummyRedis()


@pytest.fixture
def redis_cache(dummy_redis):
    return RedisCache(prefix="cb", client=dummy_redis)


@pytest.mark.asyncio
async def test_values_are_prefixed_json_with_ttl(redis_cache, dummy_redis):
    await redis_cache.set("products:item:1", {"id": 1, "name": "Hoodie"}, ttl=60)

    assert json.loads(dummy_redis.store["cb:products:item:1"]) == {"id": 1, "name": "Hoodie"}
    assert dummy_redis.ttls["cb:products:item:1"] == 60
    assert await redis_cache.get("products:item:1") == {"id": 1, "name": "Hoodie"}


@pytest.mark.asyncio
async def test_pattern_delete_uses_scan_in_batches(redis_cache, dummy_redis, monkeypatch):
    monkeypatch.setattr(redis_cache_mod, "DELETE_BATCH_SIZE", 2)
    for i in range(5):
        await redis_cache.set(f"products:list:{i}", [i], ttl=60)
    await redis_cache.set("orders:list:0", [], ttl=60)

    removed = await redis_cache.delete_pattern("products:list:*")

    assert removed == 5
    assert dummy_redis.scan_calls == [("cb:products:list:*", redis_cache_mod.SCAN_COUNT)]
    assert [len(batch) for batch in dummy_redis.delete_calls] == [2, 2, 1]
    assert not dummy_redis.keys_called
    assert "cb:orders:list:0" in dummy_redis.store


@pytest.mark.asyncio
async def test_redis_errors_become_cache_errors(redis_cache, dummy_redis):
    dummy_redis.fail = True

    with pytest.raises(CacheError):
        await redis_cache.get("k")
    with pytest.raises(CacheError):
        await redis_cache.open()


@pytest.mark.asyncio
async def test_unreachable_store_does_not_fail_reads(redis_cache, dummy_redis):
    dummy_redis.fail = True
    cache = CacheAside(redis_cache)
    calls = []

    async def fetch():
        calls.append(1)
        return {"id": 1}

    assert await cache.get_or_fetch("products:item:1", fetch, 60) == {"id": 1}
    await cache.invalidate("products:list:*")
    assert calls == [1]


@pytest.mark.asyncio
async def test_close_releases_client(redis_cache, dummy_redis):
    await redis_cache.close()
    assert dummy_redis.closed


def test_scan_pattern_escapes_glob_metacharacters():
    assert redis_cache_mod.scan_pattern('cb:products:list:{"include":[1,2]*') == (
        'cb:products:list:{"include":\\[1,2\\]*'
    )
    assert redis_cache_mod.scan_pattern("a?b\\c*") == "a\\?b\\\\c*"


@pytest.mark.asyncio
async def test_brackets_in_pattern_prefix_match_literally(redis_cache, dummy_redis):
    prefix = 'products:list:{"include":[1,2]'
    await redis_cache.set(prefix + ',"page":1}', [1], ttl=60)
    await redis_cache.set(prefix + ',"page":2}', [2], ttl=60)
    await redis_cache.set('products:list:{"include":1}', [3], ttl=60)

    assert await redis_cache.delete_pattern(prefix + "*") == 2
    assert list(dummy_redis.store) == ['cb:products:list:{"include":1}']
