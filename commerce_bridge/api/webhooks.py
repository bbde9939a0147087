"""
Webhook receiver.

Store deliveries are verified against the shared secret and the cache
entries of the affected resource are invalidated, so tool reads do not serve
data the store has already changed.
"""
from contextlib import asynccontextmanager
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, FastAPI, Request, status
from fastapi.responses import JSONResponse

from commerce_bridge.core.config import Settings
from commerce_bridge.core.exceptions import AuthenticationError
from commerce_bridge.core.logging import get_logger, set_correlation_id
from commerce_bridge.infrastructure.auth.webhook_signature import WebhookSignatureVerifier
from commerce_bridge.infrastructure.cache.cache_aside import CacheAside
from commerce_bridge.services.webhooks import invalidations_for_topic

logger = get_logger(__name__)

TOPIC_HEADER = "x-wc-webhook-topic"

router = APIRouter()


def get_verifier(request: Request) -> WebhookSignatureVerifier:
    return request.app.state.verifier


def get_cache(request: Request) -> CacheAside:
    return request.app.state.cache


def topic_from_path(path: str) -> Optional[str]:
    """Derive a topic from a delivery path such as "orders/created"."""
    parts = [part for part in path.strip("/").split("/") if part]
    if len(parts) != 2:
        return None
    resource, event = parts
    return f"{resource[:-1] if resource.endswith('s') else resource}.{event}"


async def _receive(
    request: Request,
    path: str,
    verifier: WebhookSignatureVerifier,
    cache: CacheAside
) -> Dict[str, Any]:
    set_correlation_id(request.headers.get("x-request-id"))
    payload = await request.body()
    verifier.verify(payload, verifier.extract_signature(request.headers))

    topic = request.headers.get(TOPIC_HEADER) or topic_from_path(path)
    if not topic:
        # Ping sent by the store when a webhook is created
        logger.info("Received webhook without topic")
        return {"status": "ok", "topic": None, "invalidated": []}

    patterns = list(invalidations_for_topic(topic))
    if patterns:
        await cache.invalidate_many(*patterns)
    logger.info(
        f"Processed webhook {topic}",
        extra={"data": {"topic": topic, "invalidated": patterns}},
    )
    return {"status": "ok", "topic": topic, "invalidated": patterns}


@router.get("/health", summary="Liveness check")
async def health() -> Dict[str, str]:
    return {"status": "ok"}


@router.post(
    "/webhooks",
    summary="Receive store webhook",
    status_code=status.HTTP_200_OK,
)
async def receive_webhook(
    request: Request,
    verifier: WebhookSignatureVerifier = Depends(get_verifier),
    cache: CacheAside = Depends(get_cache)
):
    return await _receive(request, "", verifier, cache)


@router.post(
    "/webhooks/{path:path}",
    summary="Receive store webhook on a topic path",
    status_code=status.HTTP_200_OK,
)
async def receive_webhook_path(
    path: str,
    request: Request,
    verifier: WebhookSignatureVerifier = Depends(get_verifier),
    cache: CacheAside = Depends(get_cache)
):
    return await _receive(request, path, verifier, cache)


async def handle_authentication_error(request: Request, exc: AuthenticationError) -> JSONResponse:
    logger.warning(
        f"Rejected webhook: {exc.message}",
        extra={"data": {"code": exc.code, "path": request.url.path}},
    )
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


def create_webhook_app(settings: Settings, cache: CacheAside) -> FastAPI:
    """
    Create the webhook receiver application.

    The cache backend is opened on startup and closed on shutdown.

    Raises:
        ConfigError: If WEBHOOK_SECRET is not set
    """
    verifier = WebhookSignatureVerifier(settings.WEBHOOK_SECRET)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await cache.open()
        try:
            yield
        finally:
            await cache.close()

    app = FastAPI(
        title=f"{settings.SERVER_NAME} webhooks",
        version=settings.SERVER_VERSION,
        lifespan=lifespan,
    )
    app.state.verifier = verifier
    app.state.cache = cache
    app.add_exception_handler(AuthenticationError, handle_authentication_error)
    app.include_router(router)
    return app
