from typing import Dict, Optional, Tuple

import httpx

from commerce_bridge.adapters.interfaces.connector import APIConnector, ApiResponse, AuthType, HttpMethod
from commerce_bridge.core.config import WordPressConfig
from commerce_bridge.infrastructure.auth.basic_auth import BasicAuthHandler

WP_NAMESPACE = "wp/v2"
YOAST_NAMESPACE = "yoast/v1"
RANKMATH_NAMESPACE = "rankmath/v1"


class WordPressClient(APIConnector):
    """Client for the WordPress REST API and plugin namespaces, authenticated with HTTP Basic."""

    name = "WordPress"
    auth_type = AuthType.BASIC

    def __init__(
        self,
        config: WordPressConfig,
        namespace: str = WP_NAMESPACE,
        http_client: Optional[httpx.AsyncClient] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        """
        Initialize the WordPress client.

        Args:
            config: Connection settings
            namespace: REST namespace, wp/v2 or a plugin namespace such as yoast/v1
            http_client: Shared httpx client
            transport: Custom transport, used by tests
        """
        super().__init__(
            base_url=config.base_url,
            namespace=namespace,
            timeout=config.timeout,
            http_client=http_client,
            transport=transport,
        )
        self.config = config
        self.auth = BasicAuthHandler(config.username, config.password)
        self.name = f"WordPress ({self.namespace})"

    def authorize(self, method: str, url: httpx.URL) -> Tuple[Dict[str, str], Dict[str, str]]:
        return {}, self.auth.generate_header()

    async def upload(self, path: str, content: bytes, filename: str, mime_type: str) -> ApiResponse:
        """
        Upload a file as the raw request body.

        Args:
            path: Endpoint, normally "media"
            content: File bytes
            filename: Name stored in the media library
            mime_type: MIME type of the file

        Returns:
            ApiResponse: The created attachment
        """
        headers = {
            "Content-Type": mime_type,
            "Content-Disposition": f'attachment; filename="{filename}"',
        }
        return await self.request(HttpMethod.POST, path, content=content, headers=headers)
