from typing import Any, Dict, List, Optional, Tuple

import httpx

from commerce_bridge.adapters.interfaces.connector import APIConnector, ApiResponse, AuthType
from commerce_bridge.core.config import AuthMode, WooCommerceConfig
from commerce_bridge.core.logging import get_logger
from commerce_bridge.infrastructure.auth.oauth import OAuth1Signer

logger = get_logger(__name__)


class WooCommerceClient(APIConnector):
    """
    Client for the WooCommerce REST API.

    Over HTTPS the consumer key and secret travel as query parameters. Over
    plain HTTP every request is signed with OAuth 1.0a instead, since the
    secret must not cross the wire in clear text.
    """

    name = "WooCommerce"

    def __init__(
        self,
        config: WooCommerceConfig,
        http_client: Optional[httpx.AsyncClient] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        signer: Optional[OAuth1Signer] = None
    ):
        """
        Initialize the WooCommerce client.

        Args:
            config: Connection settings
            http_client: Shared httpx client
            transport: Custom transport, used by tests
            signer: OAuth 1.0a signer, built from the config when omitted
        """
        super().__init__(
            base_url=config.base_url,
            namespace=config.api_version or "wc/v3",
            timeout=config.timeout,
            http_client=http_client,
            transport=transport,
        )
        self.config = config
        self.signer = signer or OAuth1Signer(config.consumer_key, config.consumer_secret)
        self.auth_type = self._resolve_auth_type(config)

    def _resolve_auth_type(self, config: WooCommerceConfig) -> AuthType:
        is_https = httpx.URL(self.base_url).scheme == "https"

        if config.auth_mode == AuthMode.OAUTH1:
            return AuthType.OAUTH1

        if config.auth_mode == AuthMode.QUERY_STRING:
            if not is_https:
                logger.warning(
                    "WOOCOMMERCE_AUTH_MODE=query_string over a plain HTTP base URL: "
                    "consumer credentials will be sent unencrypted"
                )
            return AuthType.QUERY_STRING

        if is_https:
            return AuthType.QUERY_STRING

        logger.warning(
            f"Base URL {self.base_url} is plain HTTP, signing requests with OAuth 1.0a. "
            "Set WOOCOMMERCE_AUTH_MODE explicitly if TLS is terminated in front of the store"
        )
        return AuthType.OAUTH1

    def authorize(self, method: str, url: httpx.URL) -> Tuple[Dict[str, str], Dict[str, str]]:
        if self.auth_type == AuthType.QUERY_STRING:
            return {
                "consumer_key": self.config.consumer_key,
                "consumer_secret": self.config.consumer_secret,
            }, {}

        return {}, self.signer.authorization_header(method, url)

    async def batch(
        self,
        endpoint: str,
        create: Optional[List[Dict[str, Any]]] = None,
        update: Optional[List[Dict[str, Any]]] = None,
        delete: Optional[List[int]] = None
    ) -> ApiResponse:
        """
        Run a batch request against <endpoint>/batch.

        Args:
            endpoint: Collection endpoint, e.g. "products"
            create: Items to create
            update: Items to update, each with an id
            delete: Ids to delete

        Returns:
            ApiResponse: Per-operation results
        """
        operations: Dict[str, Any] = {}
        if create:
            operations["create"] = create
        if update:
            operations["update"] = update
        if delete:
            operations["delete"] = delete

        return await self.post(f"{endpoint.rstrip('/')}/batch", operations)
