"""
MCP server assembly.

Builds the tool services from the registry and exposes every method marked
with @tool on a FastMCP instance. Failures are categorized by ErrorHandler
and surfaced to the caller as a JSON error payload.
"""
import functools
import json
import logging
from typing import Any, Awaitable, Callable, Dict, Optional

from mcp.server.fastmcp import FastMCP
from mcp.server.fastmcp.exceptions import ToolError

from commerce_bridge.adapters.factory import ClientFactory
from commerce_bridge.core.config import Settings
from commerce_bridge.core.logging import get_logger, set_correlation_id
from commerce_bridge.infrastructure.cache.cache_aside import CacheAside
from commerce_bridge.infrastructure.error.handler import ErrorHandler
from commerce_bridge.infrastructure.error.retry import RetryOptions
from commerce_bridge.services.base import ResourceService, ToolSpec
from commerce_bridge.services.registry import ServiceContext, ToolGroupRegistry, default_registry

logger = get_logger(__name__)

INSTRUCTIONS = (
    "Tools for managing a WooCommerce store (products, orders, customers, coupons, "
    "settings, reports, webhooks) and, when configured, its WordPress content and SEO data."
)


def retry_options(settings: Settings) -> RetryOptions:
    return RetryOptions(
        max_retries=settings.MAX_RETRIES,
        initial_delay=settings.RETRY_INITIAL_DELAY,
        backoff_factor=settings.RETRY_BACKOFF_FACTOR,
        max_delay=settings.RETRY_MAX_DELAY,
    )


def wrap_tool(
    spec: ToolSpec,
    method: Callable[..., Awaitable[Any]],
    error_handler: ErrorHandler
) -> Callable[..., Awaitable[Any]]:
    """
    Wrap a service method for dispatch.

    Each call gets its own correlation id. Errors are logged once and turned
    into a ToolError whose message is the JSON error payload.
    """
    @functools.wraps(method)
    async def handler(**kwargs: Any) -> Any:
        corr_id = set_correlation_id()
        logger.debug(f"Calling tool {spec.name}", extra={"data": {"tool": spec.name}})
        try:
            return await method(**kwargs)
        except Exception as e:
            details = error_handler.handle_error(e, spec.name, {"correlation_id": corr_id})
            raise ToolError(json.dumps(ErrorHandler.to_payload(details), default=str)) from e

    return handler


class CommerceBridgeServer:
    """
    Owns the FastMCP instance together with the clients and services behind it.

    The cache is created and closed by the caller; the HTTP clients are
    closed by close().
    """

    def __init__(
        self,
        settings: Settings,
        cache: CacheAside,
        clients: Optional[ClientFactory] = None,
        registry: Optional[ToolGroupRegistry] = None
    ):
        self.settings = settings
        self.cache = cache
        self.clients = clients or ClientFactory(settings)
        self.registry = registry or default_registry()
        self.error_handler = ErrorHandler(logging.getLogger("commerce_bridge.tools"))
        self.mcp = FastMCP(settings.SERVER_NAME, instructions=INSTRUCTIONS)

        context = ServiceContext(
            settings=settings,
            clients=self.clients,
            cache=cache,
            retry=retry_options(settings),
        )
        self.services: Dict[str, ResourceService] = self.registry.build(context)
        self.tool_names = self._register_tools()
        logger.info(
            f"Registered {len(self.tool_names)} tools from {len(self.services)} groups",
            extra={"data": {"groups": list(self.services.keys())}},
        )

    def _register_tools(self) -> list:
        names = []
        for group, service in self.services.items():
            for spec, method in service.tools():
                if spec.name in names:
                    raise ValueError(f"Duplicate tool name '{spec.name}' in group '{group}'")
                self.mcp.add_tool(
                    wrap_tool(spec, method, self.error_handler),
                    name=spec.name,
                    description=spec.description,
                )
                names.append(spec.name)
        return names

    async def run_stdio(self) -> None:
        await self.mcp.run_stdio_async()

    async def close(self) -> None:
        await self.clients.close()


def build_server(
    settings: Settings,
    cache: CacheAside,
    clients: Optional[ClientFactory] = None
) -> CommerceBridgeServer:
    """
    Build the MCP server.

    Raises:
        ConfigError: If the commerce URL or credentials are missing
    """
    return CommerceBridgeServer(settings, cache, clients=clients)
