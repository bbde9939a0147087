import pytest

from commerce_bridge import main
from commerce_bridge.infrastructure.cache.redis_cache import RedisCache
from commerce_bridge.server import CommerceBridgeServer


@pytest.mark.asyncio
async def test_server_starts_when_redis_is_unreachable(settings, monkeypatch):
    started = []

    async def run_stdio(self):
        started.append(self.settings.SERVER_NAME)

    monkeypatch.setattr(CommerceBridgeServer, "run_stdio", run_stdio)
    unreachable = settings.model_copy(update={"USE_REDIS": True, "REDIS_URL": "redis://127.0.0.1:1/0"})

    await main.run(unreachable)

    assert started == [unreachable.SERVER_NAME]


def test_cache_follows_settings(settings):
    cache = main.create_cache(settings.model_copy(update={
        "USE_REDIS": True,
        "REDIS_URL": "redis://127.0.0.1:1/0",
        "CACHE_DEFAULT_TTL": 42,
    }))
    assert isinstance(cache.backend, RedisCache)
    assert cache.default_ttl == 42
