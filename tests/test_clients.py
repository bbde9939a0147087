import json

import httpx
import pytest

from commerce_bridge.adapters.factory import ClientFactory
from commerce_bridge.adapters.implementations.woocommerce import WooCommerceClient
from commerce_bridge.adapters.implementations.wordpress import WordPressClient
from commerce_bridge.adapters.interfaces.connector import AuthType, HttpMethod
from commerce_bridge.core.config import AuthMode, WooCommerceConfig, WordPressConfig
from commerce_bridge.core.exceptions import ConfigError, HttpError, NetworkError

from conftest import RecordingTransport, json_response


def woo_client(base_url, handler, auth_mode=AuthMode.AUTO):
    transport = RecordingTransport(handler)
    config = WooCommerceConfig(
        base_url=base_url,
        consumer_key="ck_test",
        consumer_secret="cs_test",
        auth_mode=auth_mode,
    )
    return WooCommerceClient(config, transport=transport), transport


def raising(exc_class):
    def handler(request):
        raise exc_class("boom", request=request)
    return handler


@pytest.mark.asyncio
async def test_https_sends_query_credentials():
    client, transport = woo_client("https://shop.example.test", lambda r: json_response(200, [{"id": 1}]))

    response = await client.get("products", {"per_page": 5, "search": None})

    request = transport.requests[0]
    assert client.auth_type == AuthType.QUERY_STRING
    assert request.url.path == "/wp-json/wc/v3/products"
    assert request.url.params["consumer_key"] == "ck_test"
    assert request.url.params["consumer_secret"] == "cs_test"
    assert request.url.params["per_page"] == "5"
    assert "search" not in request.url.params
    assert "authorization" not in request.headers
    assert response.data == [{"id": 1}]


@pytest.mark.asyncio
async def test_http_signs_with_oauth_header():
    client, transport = woo_client("http://shop.example.test", lambda r: json_response(200, []))

    await client.get("orders", {"status": "processing"})

    request = transport.requests[0]
    assert client.auth_type == AuthType.OAUTH1
    assert request.headers["authorization"].startswith("OAuth ")
    assert "consumer_secret" not in request.url.params
    assert request.url.params["status"] == "processing"


def test_explicit_auth_mode_wins_over_scheme():
    client, _ = woo_client("https://shop.example.test", lambda r: json_response(200, []), AuthMode.OAUTH1)
    assert client.auth_type == AuthType.OAUTH1

    client, _ = woo_client("http://shop.example.test", lambda r: json_response(200, []), AuthMode.QUERY_STRING)
    assert client.auth_type == AuthType.QUERY_STRING


@pytest.mark.asyncio
async def test_wordpress_uses_basic_auth():
    transport = RecordingTransport(lambda r: json_response(200, {"id": 9}))
    config = WordPressConfig(base_url="https://shop.example.test", username="editor", password="app pass word")
    client = WordPressClient(config, transport=transport)

    await client.post("posts", {"title": "Hello"})

    request = transport.requests[0]
    assert request.url.path == "/wp-json/wp/v2/posts"
    assert request.headers["authorization"] == "Basic ZWRpdG9yOmFwcCBwYXNzIHdvcmQ="
    assert json.loads(request.content) == {"title": "Hello"}


@pytest.mark.asyncio
async def test_media_upload_sends_raw_body():
    transport = RecordingTransport(lambda r: json_response(201, {"id": 30}))
    config = WordPressConfig(base_url="https://shop.example.test", username="editor", password="secret")
    client = WordPressClient(config, transport=transport)

    response = await client.upload("media", b"\x89PNG", "logo.png", "image/png")

    request = transport.requests[0]
    assert request.content == b"\x89PNG"
    assert request.headers["content-type"] == "image/png"
    assert request.headers["content-disposition"] == 'attachment; filename="logo.png"'
    assert response.status == 201


@pytest.mark.asyncio
async def test_non_2xx_raises_http_error_with_body():
    body = {"code": "woocommerce_rest_product_invalid_id", "message": "Invalid ID."}
    client, _ = woo_client("https://shop.example.test", lambda r: json_response(404, body))

    with pytest.raises(HttpError) as exc:
        await client.get("products/999")

    assert exc.value.status_code == 404
    assert exc.value.body == body
    assert "Invalid ID." in exc.value.message


@pytest.mark.asyncio
async def test_connect_failure_is_network_error_not_sent():
    client, _ = woo_client("https://shop.example.test", raising(httpx.ConnectError))

    with pytest.raises(NetworkError) as exc:
        await client.get("products")
    assert exc.value.request_sent is False


@pytest.mark.asyncio
async def test_pool_timeout_is_network_error_not_sent():
    client, _ = woo_client("https://shop.example.test", raising(httpx.PoolTimeout))

    with pytest.raises(NetworkError) as exc:
        await client.request(HttpMethod.POST, "orders", json={})
    assert exc.value.request_sent is False


@pytest.mark.asyncio
async def test_read_timeout_is_network_error_sent():
    client, _ = woo_client("https://shop.example.test", raising(httpx.ReadTimeout))

    with pytest.raises(NetworkError) as exc:
        await client.request(HttpMethod.POST, "orders", json={})
    assert exc.value.request_sent is True


@pytest.mark.asyncio
async def test_unsupported_protocol_is_config_error():
    client, _ = woo_client("https://shop.example.test", raising(httpx.UnsupportedProtocol))

    with pytest.raises(ConfigError):
        await client.get("products")


def test_invalid_base_url_is_rejected():
    with pytest.raises(ConfigError):
        WooCommerceClient(WooCommerceConfig(base_url="shop.example.test", consumer_key="k", consumer_secret="s"))


@pytest.mark.asyncio
async def test_total_headers_are_exposed():
    headers = {"X-WP-Total": "42", "X-WP-TotalPages": "5"}
    client, _ = woo_client("https://shop.example.test", lambda r: json_response(200, [], headers))

    response = await client.get("products")
    assert response.total == 42
    assert response.total_pages == 5


@pytest.mark.asyncio
async def test_factory_requires_content_credentials(settings):
    incomplete = settings.model_copy(update={"WORDPRESS_PASSWORD": None})
    factory = ClientFactory(incomplete, transport=RecordingTransport(lambda r: json_response(200, {})))

    assert isinstance(factory.woocommerce(), WooCommerceClient)
    assert factory.woocommerce() is factory.woocommerce()
    with pytest.raises(ConfigError):
        factory.wordpress()
    await factory.close()
