"""
Webhook management tools and the mapping from delivered topics to cache
entries that the delivery must invalidate.
"""
from typing import Any, Dict, List, Optional, Tuple

from commerce_bridge.adapters.interfaces.connector import HttpMethod
from commerce_bridge.core.exceptions import ConfigError
from commerce_bridge.core.logging import get_logger
from commerce_bridge.infrastructure.cache.cache_aside import CacheAside
from commerce_bridge.infrastructure.error.retry import RetryOptions
from commerce_bridge.services.base import ResourceService, compact, tool
from commerce_bridge.validation import schemas

logger = get_logger(__name__)

# Topic and delivery path of the webhooks installed by setup_default_webhooks
DEFAULT_WEBHOOKS: Tuple[Tuple[str, str], ...] = (
    ("order.created", "/orders/created"),
    ("order.updated", "/orders/updated"),
    ("product.updated", "/products/updated"),
    ("customer.created", "/customers/created"),
)

TOPIC_INVALIDATIONS: Dict[str, Tuple[str, ...]] = {
    "product": ("products:*", "variations:*", "categories:products:*", "tags:products:*"),
    "order": ("orders:*", "order_notes:*", "order_refunds:*", "customers:orders:*", "reports:*"),
    "customer": ("customers:*",),
    "coupon": ("coupons:*",),
}


def invalidations_for_topic(topic: str) -> Tuple[str, ...]:
    """
    Cache patterns affected by a webhook topic such as "order.updated".

    Unknown resources map to nothing.
    """
    resource = topic.split(".", 1)[0].strip().lower()
    return TOPIC_INVALIDATIONS.get(resource, ())


class WebhookService(ResourceService):
    """Store webhooks plus a connectivity check."""

    resource = "webhooks"

    def __init__(
        self,
        client,
        cache: CacheAside,
        retry: Optional[RetryOptions] = None,
        default_secret: Optional[str] = None,
        delivery_url: Optional[str] = None
    ):
        super().__init__(client, cache, retry)
        self.default_secret = default_secret
        self.delivery_url = delivery_url

    @tool("list_webhooks", "List configured webhooks")
    async def list_webhooks(self, params: Optional[Dict[str, Any]] = None) -> Any:
        params = compact(params)
        self.validate({"params": params}, schemas.ListWebhooksRequest)
        return await self.fetch_list("webhooks", params)

    @tool("get_webhook", "Get a webhook by ID")
    async def get_webhook(self, webhook_id: int) -> Any:
        self.validate({"id": webhook_id}, schemas.IdRequest)
        return await self.fetch(self.item_key(webhook_id), f"webhooks/{webhook_id}")

    @tool("create_webhook", "Create a webhook for a topic such as order.created")
    async def create_webhook(self, data: Dict[str, Any]) -> Any:
        data = {"status": "active", **compact({"secret": self.default_secret}), **data}
        self.validate({"data": data}, schemas.CreateWebhookRequest)
        return await self.write(HttpMethod.POST, "webhooks", data, invalidate=self.entity_invalidations())

    @tool("update_webhook", "Update a webhook (status, delivery_url, topic, ...)")
    async def update_webhook(self, webhook_id: int, data: Dict[str, Any]) -> Any:
        self.validate({"id": webhook_id, "data": data}, schemas.UpdateWebhookRequest)
        return await self.write(
            HttpMethod.PUT,
            f"webhooks/{webhook_id}",
            data,
            invalidate=self.entity_invalidations(webhook_id),
        )

    @tool("delete_webhook", "Delete a webhook")
    async def delete_webhook(self, webhook_id: int) -> Any:
        self.validate({"id": webhook_id, "force": True}, schemas.DeleteRequest)
        return await self.write(
            HttpMethod.DELETE,
            f"webhooks/{webhook_id}",
            params={"force": True},
            invalidate=self.entity_invalidations(webhook_id),
        )

    @tool(
        "setup_default_webhooks",
        "Install the standard order, product and customer webhooks pointing at base_url",
    )
    async def setup_default_webhooks(self, base_url: Optional[str] = None) -> List[Any]:
        base_url = base_url or self.delivery_url
        if not base_url:
            raise ConfigError(
                "No delivery URL given and WEBHOOK_DELIVERY_URL is not set",
                code="missing_delivery_url",
            )
        self.validate({"base_url": base_url}, schemas.SetupWebhooksRequest)

        created = []
        for topic, path in DEFAULT_WEBHOOKS:
            webhook = await self.create_webhook({
                "name": f"Commerce Bridge - {topic}",
                "topic": topic,
                "delivery_url": base_url.rstrip("/") + path,
            })
            created.append(webhook)
        logger.info(f"Installed {len(created)} default webhooks for {base_url}")
        return created

    @tool("check_connection", "Check that the store API is reachable with the configured credentials")
    async def check_connection(self) -> Dict[str, Any]:
        status = await self.read("system_status")
        environment = status.get("environment", {}) if isinstance(status, dict) else {}
        return {
            "connected": True,
            "store_url": environment.get("site_url") or self.client.base_url,
            "woocommerce_version": environment.get("version"),
            "wordpress_version": environment.get("wp_version"),
        }
