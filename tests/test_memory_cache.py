import pytest


@pytest.mark.asyncio
async def test_entry_is_absent_after_expiry(memory_cache, clock):
    await memory_cache.set("products:item:1", {"id": 1}, ttl=60)

    clock.advance(59.9)
    assert await memory_cache.get("products:item:1") == {"id": 1}

    clock.advance(0.1)
    assert await memory_cache.get("products:item:1") is None
    assert memory_cache.get_keys() == []


@pytest.mark.asyncio
async def test_prefix_pattern_removes_only_matching_keys(memory_cache):
    await memory_cache.set("p1", 1, ttl=60)
    await memory_cache.set("p2", 2, ttl=60)
    await memory_cache.set("other", 3, ttl=60)

    removed = await memory_cache.delete_pattern("p*")

    assert removed == 2
    assert await memory_cache.get("p1") is None
    assert await memory_cache.get("p2") is None
    assert await memory_cache.get("other") == 3


@pytest.mark.asyncio
async def test_prefix_match_is_literal_for_json_keys(memory_cache):
    await memory_cache.set('products:list:{"include":[1,2]}', [1, 2], ttl=60)
    await memory_cache.set("products:item:1", {"id": 1}, ttl=60)

    assert await memory_cache.delete_pattern("products:list:*") == 1
    assert await memory_cache.get("products:item:1") == {"id": 1}


@pytest.mark.asyncio
async def test_brackets_in_pattern_prefix_match_literally(memory_cache):
    prefix = 'products:list:{"include":[1,2]'
    await memory_cache.set(prefix + ',"page":1}', [1], ttl=60)
    await memory_cache.set(prefix + ',"page":2}', [2], ttl=60)
    await memory_cache.set('products:list:{"include":1}', [3], ttl=60)

    assert await memory_cache.delete_pattern(prefix + "*") == 2
    assert memory_cache.get_keys() == ['products:list:{"include":1}']


@pytest.mark.asyncio
async def test_inner_wildcards_leave_other_characters_literal(memory_cache):
    await memory_cache.set("variations:list:7:[a]?", 1, ttl=60)
    await memory_cache.set("variations:list:7:a!", 2, ttl=60)

    assert memory_cache.get_keys("variations:*:[a]?") == ["variations:list:7:[a]?"]


@pytest.mark.asyncio
async def test_values_are_copied(memory_cache):
    value = {"tags": ["a"]}
    await memory_cache.set("k", value, ttl=60)
    value["tags"].append("b")

    cached = await memory_cache.get("k")
    cached["tags"].append("c")

    assert await memory_cache.get("k") == {"tags": ["a"]}


@pytest.mark.asyncio
async def test_zero_ttl_never_expires(memory_cache, clock):
    await memory_cache.set("k", "v", ttl=0)
    clock.advance(10 ** 6)
    assert await memory_cache.get("k") == "v"


@pytest.mark.asyncio
async def test_delete_reports_removed_count(memory_cache):
    await memory_cache.set("k", "v", ttl=60)
    assert await memory_cache.delete("k") == 1
    assert await memory_cache.delete("k") == 0
