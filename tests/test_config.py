import json
import logging

import pytest

from commerce_bridge.core.config import AuthMode, Settings
from commerce_bridge.core.exceptions import ConfigError
from commerce_bridge.core.logging import StructuredLogFormatter, correlation_id, set_correlation_id
from commerce_bridge.infrastructure.cache.factory import create_cache_backend
from commerce_bridge.infrastructure.cache.memory_cache import MemoryCache
from commerce_bridge.infrastructure.cache.redis_cache import RedisCache


def test_settings_read_environment(monkeypatch):
    monkeypatch.setenv("WOOCOMMERCE_URL", "http://shop.example.test/")
    monkeypatch.setenv("WOOCOMMERCE_KEY", "ck_env")
    monkeypatch.setenv("WOOCOMMERCE_SECRET", "cs_env")
    monkeypatch.setenv("WOOCOMMERCE_AUTH_MODE", "oauth1")
    monkeypatch.setenv("MAX_RETRIES", "5")

    settings = Settings(_env_file=None)
    config = settings.woocommerce_config()

    assert config.base_url == "http://shop.example.test"
    assert config.auth_mode == AuthMode.OAUTH1
    assert settings.MAX_RETRIES == 5


def test_commerce_credentials_are_required():
    settings = Settings(_env_file=None, WOOCOMMERCE_URL="https://shop.example.test")
    with pytest.raises(ConfigError):
        settings.woocommerce_config()


def test_malformed_url_is_rejected():
    settings = Settings(_env_file=None, WOOCOMMERCE_URL="shop.example.test", WOOCOMMERCE_KEY="k", WOOCOMMERCE_SECRET="s")
    with pytest.raises(ConfigError) as exc:
        settings.woocommerce_config()
    assert exc.value.context == {"setting": "WOOCOMMERCE_URL"}


def test_content_url_defaults_to_store_url(settings):
    assert settings.wordpress_config().base_url == "https://shop.example.test"
    assert settings.has_wordpress_credentials


def test_cache_backend_selection(settings):
    assert isinstance(create_cache_backend(settings), MemoryCache)

    redis_settings = settings.model_copy(update={"USE_REDIS": True, "REDIS_URL": "redis://cache.example.test:6379/0"})
    backend = create_cache_backend(redis_settings)
    assert isinstance(backend, RedisCache)
    assert backend.prefix == "commerce_bridge"


def test_structured_formatter_emits_json():
    token = correlation_id.set("")
    try:
        set_correlation_id("req-1")
        record = logging.LogRecord("commerce_bridge.test", logging.WARNING, __file__, 10, "Cache miss", None, None)
        record.data = {"key": "products:item:1"}

        line = json.loads(StructuredLogFormatter().format(record))
    finally:
        correlation_id.reset(token)

    assert line["message"] == "Cache miss"
    assert line["level"] == "WARNING"
    assert line["correlation_id"] == "req-1"
    assert line["key"] == "products:item:1"
