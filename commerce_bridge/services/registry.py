from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from commerce_bridge.adapters.factory import ClientFactory
from commerce_bridge.adapters.implementations.wordpress import RANKMATH_NAMESPACE, YOAST_NAMESPACE
from commerce_bridge.core.config import Settings
from commerce_bridge.core.exceptions import ConfigError
from commerce_bridge.core.logging import get_logger
from commerce_bridge.infrastructure.cache.cache_aside import CacheAside
from commerce_bridge.infrastructure.error.retry import RetryOptions
from commerce_bridge.services.analytics import AnalyticsService
from commerce_bridge.services.attributes import AttributeService
from commerce_bridge.services.base import ResourceService
from commerce_bridge.services.categories import CategoryService
from commerce_bridge.services.coupons import CouponService
from commerce_bridge.services.customers import CustomerService
from commerce_bridge.services.media import MediaService
from commerce_bridge.services.orders import OrderService
from commerce_bridge.services.posts import PostService
from commerce_bridge.services.products import ProductService
from commerce_bridge.services.seo import SeoService
from commerce_bridge.services.settings import SettingsService
from commerce_bridge.services.tags import TagService
from commerce_bridge.services.webhooks import WebhookService

logger = get_logger(__name__)


@dataclass
class ServiceContext:
    """Shared dependencies handed to every tool group builder."""
    settings: Settings
    clients: ClientFactory
    cache: CacheAside
    retry: RetryOptions


ServiceBuilder = Callable[[ServiceContext], ResourceService]


@dataclass(frozen=True)
class GroupRegistration:
    builder: ServiceBuilder
    requires_content: bool = False


class ToolGroupRegistry:
    """
    Registry of tool groups.
    Maps group names to builders that create the service for that group.
    """

    def __init__(self):
        self._groups: Dict[str, GroupRegistration] = {}
        logger.debug("Initialized ToolGroupRegistry")

    def register(self, name: str, builder: ServiceBuilder, requires_content: bool = False) -> None:
        """
        Register a tool group.

        Args:
            name: Group name, e.g. "products"
            builder: Callable creating the group's service from a ServiceContext
            requires_content: Whether the group needs WordPress credentials

        Raises:
            ValueError: If the name is invalid or already registered
        """
        if not name or not isinstance(name, str):
            raise ValueError("Tool group name must be a non-empty string")
        if not callable(builder):
            raise ValueError("Tool group builder must be callable")
        if name in self._groups:
            raise ValueError(f"Tool group '{name}' is already registered")

        self._groups[name] = GroupRegistration(builder=builder, requires_content=requires_content)
        logger.debug(f"Registered tool group: {name}")

    def get(self, name: str) -> Optional[GroupRegistration]:
        return self._groups.get(name)

    def list(self) -> List[str]:
        return list(self._groups.keys())

    def is_registered(self, name: str) -> bool:
        return name in self._groups

    def clear(self) -> None:
        """Clear all registered groups. Primarily used for testing purposes."""
        self._groups.clear()

    def build(self, context: ServiceContext) -> Dict[str, ResourceService]:
        """
        Create the service of every registered group.

        Content groups whose credentials are missing are left out with a
        warning; a missing commerce configuration aborts.

        Returns:
            Dict[str, ResourceService]: Services by group name
        """
        services: Dict[str, ResourceService] = {}
        for name, registration in self._groups.items():
            try:
                services[name] = registration.builder(context)
            except ConfigError as e:
                if not registration.requires_content:
                    raise
                logger.warning(
                    f"Tool group '{name}' disabled: {e.message}",
                    extra={"data": {"group": name, "code": e.code}},
                )
        return services


def _commerce(service_class) -> ServiceBuilder:
    def builder(context: ServiceContext) -> ResourceService:
        return service_class(context.clients.woocommerce(), context.cache, context.retry)
    return builder


def _webhooks(context: ServiceContext) -> ResourceService:
    return WebhookService(
        context.clients.woocommerce(),
        context.cache,
        context.retry,
        default_secret=context.settings.WEBHOOK_SECRET,
        delivery_url=context.settings.WEBHOOK_DELIVERY_URL,
    )


def _posts(context: ServiceContext) -> ResourceService:
    return PostService(context.clients.wordpress(), context.cache, context.retry)


def _media(context: ServiceContext) -> ResourceService:
    return MediaService(
        context.clients.wordpress(),
        context.cache,
        context.retry,
        commerce_client=context.clients.woocommerce(),
    )


def _seo(context: ServiceContext) -> ResourceService:
    return SeoService(
        context.clients.wordpress(),
        context.cache,
        context.retry,
        yoast_client=context.clients.wordpress(YOAST_NAMESPACE),
        rankmath_client=context.clients.wordpress(RANKMATH_NAMESPACE),
    )


def default_registry() -> ToolGroupRegistry:
    """Registry with every built-in tool group."""
    registry = ToolGroupRegistry()
    registry.register("products", _commerce(ProductService))
    registry.register("categories", _commerce(CategoryService))
    registry.register("tags", _commerce(TagService))
    registry.register("attributes", _commerce(AttributeService))
    registry.register("orders", _commerce(OrderService))
    registry.register("customers", _commerce(CustomerService))
    registry.register("coupons", _commerce(CouponService))
    registry.register("settings", _commerce(SettingsService))
    registry.register("analytics", _commerce(AnalyticsService))
    registry.register("webhooks", _webhooks)
    registry.register("posts", _posts, requires_content=True)
    registry.register("media", _media, requires_content=True)
    registry.register("seo", _seo, requires_content=True)
    return registry
