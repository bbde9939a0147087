from typing import Dict, List, Optional

import httpx

from commerce_bridge.adapters.implementations.woocommerce import WooCommerceClient
from commerce_bridge.adapters.implementations.wordpress import WP_NAMESPACE, WordPressClient
from commerce_bridge.adapters.interfaces.connector import APIConnector
from commerce_bridge.core.config import Settings
from commerce_bridge.core.logging import get_logger

logger = get_logger(__name__)


class ClientFactory:
    """
    Builds the upstream API clients from settings.

    Clients are created lazily, one per API namespace, and share a single
    httpx.AsyncClient so connections are pooled across tool modules.
    """

    def __init__(
        self,
        settings: Settings,
        http_client: Optional[httpx.AsyncClient] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        """
        Initialize the client factory.

        Args:
            settings: Application settings holding the credentials
            http_client: Shared httpx client, created on demand when omitted
            transport: Custom transport for the created client, used by tests
        """
        self.settings = settings
        self._owns_http_client = http_client is None
        self.http_client = http_client or httpx.AsyncClient(
            timeout=settings.REQUEST_TIMEOUT,
            transport=transport,
            headers={"Accept": "application/json"},
        )
        self._clients: Dict[str, APIConnector] = {}
        logger.info("Initialized ClientFactory")

    def woocommerce(self) -> WooCommerceClient:
        """
        Get the commerce client.

        Raises:
            ConfigError: If the commerce URL or credentials are missing
        """
        if "woocommerce" not in self._clients:
            config = self.settings.woocommerce_config()
            self._clients["woocommerce"] = WooCommerceClient(config, http_client=self.http_client)
            logger.info(f"Created WooCommerce client for {config.base_url}")
        return self._clients["woocommerce"]

    def wordpress(self, namespace: str = WP_NAMESPACE) -> WordPressClient:
        """
        Get a content client for a REST namespace.

        Args:
            namespace: wp/v2 or a plugin namespace

        Raises:
            ConfigError: If the WordPress credentials are missing
        """
        key = f"wordpress:{namespace}"
        if key not in self._clients:
            config = self.settings.wordpress_config()
            self._clients[key] = WordPressClient(config, namespace=namespace, http_client=self.http_client)
            logger.info(f"Created WordPress client for {config.base_url} ({namespace})")
        return self._clients[key]

    def created(self) -> List[str]:
        return list(self._clients.keys())

    async def close(self) -> None:
        if self._owns_http_client:
            await self.http_client.aclose()
        self._clients.clear()
