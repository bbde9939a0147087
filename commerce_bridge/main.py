"""
Entry points.

`commerce-bridge` serves the tools over MCP stdio; `commerce-bridge-webhooks`
runs the webhook receiver that keeps a shared Redis cache fresh.
"""
import asyncio
import signal
import sys

import uvicorn

from commerce_bridge.core.config import Settings, get_settings, load_env_file
from commerce_bridge.core.exceptions import ConfigError
from commerce_bridge.core.logging import configure_logging, get_logger
from commerce_bridge.infrastructure.cache.cache_aside import CacheAside
from commerce_bridge.infrastructure.cache.factory import create_cache_backend
from commerce_bridge.server import build_server

logger = get_logger(__name__)


def create_cache(settings: Settings) -> CacheAside:
    return CacheAside(
        create_cache_backend(settings),
        default_ttl=settings.CACHE_DEFAULT_TTL,
        enabled=settings.CACHE_ENABLED,
    )


async def run(settings: Settings) -> None:
    """
    Run the MCP server until stdin closes or the process is signalled.

    The cache store and HTTP clients are closed on the way out.
    """
    cache = create_cache(settings)
    await cache.open()
    server = None
    try:
        server = build_server(settings, cache)
        logger.info(f"Starting {settings.SERVER_NAME} {settings.SERVER_VERSION} on stdio")

        task = asyncio.create_task(server.run_stdio())
        loop = asyncio.get_running_loop()
        for sig in (signal.SIGINT, signal.SIGTERM):
            try:
                loop.add_signal_handler(sig, task.cancel)
            except NotImplementedError:
                # Signal handlers are unavailable on Windows event loops
                pass
        try:
            await task
        except asyncio.CancelledError:
            logger.info("Shutdown requested")
    finally:
        if server is not None:
            await server.close()
        await cache.close()
        logger.info("Server stopped")


def main() -> None:
    """Console entry point of the MCP server."""
    load_env_file()
    settings = get_settings()
    configure_logging(settings)
    try:
        asyncio.run(run(settings))
    except ConfigError as e:
        logger.critical(f"Configuration error: {e.message}", extra={"data": e.context})
        sys.exit(1)


def serve_webhooks() -> None:
    """Console entry point of the webhook receiver."""
    from commerce_bridge.api.webhooks import create_webhook_app

    load_env_file()
    settings = get_settings()
    configure_logging(settings)
    try:
        app = create_webhook_app(settings, create_cache(settings))
    except ConfigError as e:
        logger.critical(f"Configuration error: {e.message}", extra={"data": e.context})
        sys.exit(1)

    uvicorn.run(
        app,
        host=settings.WEBHOOK_HOST,
        port=settings.WEBHOOK_PORT,
        log_config=None,
    )


if __name__ == "__main__":
    main()
