import base64
import binascii
from typing import Any, Dict, Optional

from commerce_bridge.adapters.interfaces.connector import APIConnector, HttpMethod
from commerce_bridge.core.exceptions import ValidationError
from commerce_bridge.core.logging import get_logger
from commerce_bridge.infrastructure.cache.cache_aside import CacheAside
from commerce_bridge.infrastructure.error.retry import RetryOptions, is_safe_to_replay, with_retry
from commerce_bridge.services.base import ResourceService, compact, tool
from commerce_bridge.validation import schemas

logger = get_logger(__name__)


class MediaService(ResourceService):
    """
    WordPress media library.

    Uploads go through the content client; attaching images to products
    goes through the commerce client.
    """

    resource = "media"

    def __init__(
        self,
        client: APIConnector,
        cache: CacheAside,
        retry: Optional[RetryOptions] = None,
        commerce_client: Optional[APIConnector] = None
    ):
        super().__init__(client, cache, retry)
        self.commerce_client = commerce_client

    @tool("list_media", "List media library items (filter by media_type, mime_type, parent, search)")
    async def list_media(self, params: Optional[Dict[str, Any]] = None) -> Any:
        params = compact(params)
        self.validate({"params": params}, schemas.ListMediaRequest)
        return await self.fetch_list("media", params)

    @tool("get_media", "Get a media item by ID")
    async def get_media(self, media_id: int) -> Any:
        self.validate({"id": media_id}, schemas.IdRequest)
        return await self.fetch(self.item_key(media_id), f"media/{media_id}")

    @tool(
        "upload_media",
        "Upload a file given as base64 content; data may set title, alt_text, caption, description, post",
    )
    async def upload_media(
        self,
        filename: str,
        content_base64: str,
        mime_type: str,
        data: Optional[Dict[str, Any]] = None
    ) -> Any:
        request = {"filename": filename, "content_base64": content_base64, "mime_type": mime_type, "data": data}
        self.validate(request, schemas.UploadMediaRequest)
        try:
            content = base64.b64decode(content_base64, validate=True)
        except (binascii.Error, ValueError):
            raise ValidationError(issues=["content_base64: must be valid base64"])

        try:
            response = await with_retry(
                lambda: self.client.upload("media", content, filename, mime_type),
                self.retry,
                should_retry=is_safe_to_replay,
            )
            attachment = response.data
            logger.info(f"Uploaded {filename} ({len(content)} bytes)")

            if data and isinstance(attachment, dict) and attachment.get("id"):
                attachment = await self.write(HttpMethod.POST, f"media/{attachment['id']}", data, idempotent=True)
        finally:
            # The upload may have landed even when a later step failed
            await self.cache.invalidate_many(*self.entity_invalidations())
        return attachment

    @tool("update_media", "Update title, alt_text, caption or description of a media item")
    async def update_media(self, media_id: int, data: Dict[str, Any]) -> Any:
        self.validate({"id": media_id, "data": data}, schemas.UpdateMediaRequest)
        return await self.write(
            HttpMethod.POST,
            f"media/{media_id}",
            data,
            invalidate=self.entity_invalidations(media_id),
            idempotent=True,
        )

    @tool("delete_media", "Delete a media item permanently (media cannot be trashed)")
    async def delete_media(self, media_id: int) -> Any:
        self.validate({"id": media_id}, schemas.IdRequest)
        return await self.write(
            HttpMethod.DELETE,
            f"media/{media_id}",
            params={"force": True},
            invalidate=self.entity_invalidations(media_id),
        )

    @tool("assign_media_to_product", "Use media items as product images; append keeps the existing images")
    async def assign_media_to_product(self, product_id: int, media_ids: list, append: bool = False) -> Any:
        self.validate(
            {"product_id": product_id, "media_ids": media_ids, "append": append},
            schemas.AssignMediaToProductRequest,
        )
        commerce = self.commerce_client
        images = [{"id": media_id} for media_id in media_ids]
        if append:
            product = await self.read(f"products/{product_id}", client=commerce)
            existing = [{"id": image["id"]} for image in product.get("images", []) if image.get("id")]
            known = {image["id"] for image in existing}
            images = existing + [image for image in images if image["id"] not in known]

        return await self.write(
            HttpMethod.PUT,
            f"products/{product_id}",
            {"images": images},
            client=commerce,
            invalidate=[
                self.cache.build_key("products:item", product_id),
                "products:list:*",
                "categories:products:*",
                "tags:products:*",
            ],
        )
