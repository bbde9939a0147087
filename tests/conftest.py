"""Pytest fixtures shared by the commerce bridge tests."""

import json

import httpx
import pytest

from commerce_bridge.core.config import Settings
from commerce_bridge.infrastructure.cache.cache_aside import CacheAside
from commerce_bridge.infrastructure.cache.memory_cache import MemoryCache
from commerce_bridge.infrastructure.error.retry import RetryOptions


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class RecordingTransport(httpx.AsyncBaseTransport):
    """Upstream stub that records requests and answers from a handler."""

    def __init__(self, handler):
        self.handler = handler
        self.requests = []

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        await request.aread()
        self.requests.append(request)
        return self.handler(request)

    def count(self, method: str, path: str) -> int:
        return sum(1 for r in self.requests if r.method == method and r.url.path == path)


def json_response(status_code: int, body, headers=None) -> httpx.Response:
    return httpx.Response(
        status_code,
        content=json.dumps(body).encode("utf-8"),
        headers={"Content-Type": "application/json", **(headers or {})},
    )


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def memory_cache(clock):
    return MemoryCache(clock=clock)


@pytest.fixture
def cache(memory_cache):
    return CacheAside(memory_cache, default_ttl=300)


@pytest.fixture
def sleeps():
    return []


@pytest.fixture
def retry(sleeps):
    async def fake_sleep(delay):
        sleeps.append(delay)

    return RetryOptions(
        max_retries=3,
        initial_delay=0.3,
        backoff_factor=2.0,
        max_delay=10.0,
        sleep=fake_sleep,
        random=lambda a, b: 1.0,
    )


@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        WOOCOMMERCE_URL="https://shop.example.test",
        WOOCOMMERCE_KEY="ck_test",
        WOOCOMMERCE_SECRET="cs_test",
        WORDPRESS_USERNAME="editor",
        WORDPRESS_PASSWORD="app pass word",
        WEBHOOK_SECRET="whsec_test",
    )
