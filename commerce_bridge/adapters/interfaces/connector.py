from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Tuple
from urllib.parse import urlparse

import httpx
from pydantic import BaseModel, Field

from commerce_bridge.core.exceptions import ConfigError, HttpError, NetworkError
from commerce_bridge.core.logging import get_logger

logger = get_logger(__name__)


class AuthType(str, Enum):
    """Enum defining supported authentication types."""
    QUERY_STRING = "query_string"
    OAUTH1 = "oauth1"
    BASIC = "basic"


class HttpMethod(str, Enum):
    """Enum defining supported HTTP methods."""
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"


class ApiResponse(BaseModel):
    """Normalized upstream response."""
    status: int
    data: Any = None
    headers: Dict[str, str] = Field(default_factory=dict)

    @property
    def total(self) -> Optional[int]:
        """Total item count reported by paginated collection endpoints."""
        value = self.headers.get("x-wp-total")
        return int(value) if value and value.isdigit() else None

    @property
    def total_pages(self) -> Optional[int]:
        value = self.headers.get("x-wp-totalpages")
        return int(value) if value and value.isdigit() else None


class APIConnector(ABC):
    """
    Base class for REST API connectors.

    Builds URLs under a fixed API root, lets subclasses attach credentials,
    sends the request over a shared httpx.AsyncClient and turns every failure
    into one of HttpError, NetworkError or ConfigError.
    """

    name = "api"

    def __init__(
        self,
        base_url: str,
        namespace: str,
        timeout: float = 30.0,
        http_client: Optional[httpx.AsyncClient] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        """
        Initialize the connector.

        Args:
            base_url: Site URL, e.g. https://shop.example.com
            namespace: REST namespace under /wp-json, e.g. wc/v3
            timeout: Request timeout in seconds
            http_client: Shared client, created on demand when omitted
            transport: Custom transport for the created client, used by tests
        """
        if not self.validate_url(base_url):
            raise ConfigError(f"Invalid base URL for {self.name} API: '{base_url}'")

        self.base_url = base_url.rstrip("/")
        self.namespace = namespace.strip("/")
        self.api_root = f"{self.base_url}/wp-json/{self.namespace}/"
        self.timeout = timeout
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(
            timeout=timeout,
            transport=transport,
            headers={"Accept": "application/json"},
        )

    @staticmethod
    def validate_url(url: str) -> bool:
        """
        Validates that a URL is absolute and uses HTTP or HTTPS.

        Args:
            url: The URL to validate

        Returns:
            bool: True if the URL is valid, False otherwise
        """
        try:
            result = urlparse(url)
        except ValueError as e:
            logger.error(f"URL validation error: {str(e)}")
            return False
        return result.scheme in ("http", "https") and bool(result.netloc)

    def build_url(self, path: str) -> str:
        """
        Builds a complete URL from an endpoint path.

        Args:
            path: Endpoint relative to the API root, e.g. "products/42"

        Returns:
            str: The complete URL
        """
        return f"{self.api_root}{path.lstrip('/')}"

    @abstractmethod
    def authorize(self, method: str, url: httpx.URL) -> Tuple[Dict[str, str], Dict[str, str]]:
        """
        Produce credentials for one request.

        Args:
            method: HTTP method
            url: Full request URL including query parameters

        Returns:
            Tuple of (extra query parameters, extra headers)
        """

    async def request(
        self,
        method: HttpMethod,
        path: str,
        params: Optional[Mapping[str, Any]] = None,
        json: Any = None,
        content: Optional[bytes] = None,
        headers: Optional[Dict[str, str]] = None
    ) -> ApiResponse:
        """
        Send an authenticated request.

        Args:
            method: HTTP method to use
            path: Endpoint relative to the API root
            params: Optional query parameters, None values are dropped
            json: Optional JSON body
            content: Optional raw body, used for media uploads
            headers: Optional request headers

        Returns:
            ApiResponse: Status, decoded body and response headers

        Raises:
            HttpError: The upstream answered with a non-2xx status
            NetworkError: No usable response was received
            ConfigError: The request could not be built or sent
        """
        method_name = HttpMethod(method).value
        query = {k: v for k, v in (params or {}).items() if v is not None}

        try:
            url = httpx.URL(self.build_url(path), params=query)
            extra_params, auth_headers = self.authorize(method_name, url)
            if extra_params:
                url = url.copy_merge_params(extra_params)

            request = self._client.build_request(
                method_name,
                url,
                json=json,
                content=content,
                headers={**(headers or {}), **auth_headers},
            )
            response = await self._client.send(request)
        except (httpx.InvalidURL, httpx.UnsupportedProtocol, httpx.LocalProtocolError) as e:
            logger.error(f"{self.name} API config error: {str(e)}")
            raise ConfigError(
                f"Request to {self.name} API was not sent: {str(e)}",
                context={"method": method_name, "path": path}
            )
        except (httpx.ConnectError, httpx.ConnectTimeout, httpx.PoolTimeout) as e:
            logger.error(f"{self.name} API connection error: {type(e).__name__}: {str(e)}")
            raise NetworkError(
                f"Could not connect to {self.name} API: {str(e) or type(e).__name__}",
                request_sent=False,
                context={"method": method_name, "path": path},
                original_exception=e
            )
        except httpx.TransportError as e:
            logger.error(f"{self.name} API request error: {type(e).__name__}: {str(e)}")
            raise NetworkError(
                f"No response from {self.name} API: {str(e) or type(e).__name__}",
                request_sent=True,
                context={"method": method_name, "path": path},
                original_exception=e
            )

        return self.handle_response(response, method_name, path)

    def handle_response(self, response: httpx.Response, method: str, path: str) -> ApiResponse:
        """
        Decode a response and raise for non-2xx statuses.

        Args:
            response: Raw httpx response
            method: HTTP method, for logging
            path: Endpoint, for logging

        Returns:
            ApiResponse: Normalized response

        Raises:
            HttpError: If the status is not 2xx
        """
        body = self.decode_body(response)

        if not response.is_success:
            logger.error(
                f"{self.name} API error: {method} {path} -> {response.status_code}",
                extra={"data": {"status_code": response.status_code, "body": body}}
            )
            raise HttpError(
                status_code=response.status_code,
                body=body,
                context={"method": method, "path": path}
            )

        return ApiResponse(
            status=response.status_code,
            data=body,
            headers={k.lower(): v for k, v in response.headers.items()},
        )

    @staticmethod
    def decode_body(response: httpx.Response) -> Any:
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return response.text

    async def get(self, path: str, params: Optional[Mapping[str, Any]] = None) -> ApiResponse:
        return await self.request(HttpMethod.GET, path, params=params)

    async def post(
        self,
        path: str,
        data: Any = None,
        params: Optional[Mapping[str, Any]] = None
    ) -> ApiResponse:
        return await self.request(HttpMethod.POST, path, params=params, json=data if data is not None else {})

    async def put(self, path: str, data: Any = None) -> ApiResponse:
        return await self.request(HttpMethod.PUT, path, json=data if data is not None else {})

    async def delete(self, path: str, params: Optional[Mapping[str, Any]] = None) -> ApiResponse:
        return await self.request(HttpMethod.DELETE, path, params=params)

    async def check_connection(self) -> bool:
        """
        Check that the API root answers with 200.

        Returns:
            True if reachable with valid credentials
        """
        try:
            response = await self.get("")
        except (HttpError, NetworkError, ConfigError) as e:
            logger.warning(f"{self.name} API connection check failed: {str(e)}")
            return False
        return response.status == 200

    async def close(self) -> None:
        if self._owns_client:
            await self._client.aclose()
