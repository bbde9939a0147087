from typing import Any, Dict, List, Optional

from commerce_bridge.adapters.interfaces.connector import HttpMethod
from commerce_bridge.services.base import ResourceService, compact, tool
from commerce_bridge.services.categories import TermAssignmentMixin
from commerce_bridge.validation import schemas


class TagService(TermAssignmentMixin, ResourceService):
    """Product tags."""

    resource = "tags"
    term_field = "tags"

    @tool("list_product_tags", "List product tags")
    async def list_product_tags(self, params: Optional[Dict[str, Any]] = None) -> Any:
        params = compact(params)
        self.validate({"params": params}, schemas.ListTagsRequest)
        return await self.fetch_list("products/tags", params)

    @tool("get_product_tag", "Get a product tag by ID")
    async def get_product_tag(self, tag_id: int) -> Any:
        self.validate({"id": tag_id}, schemas.IdRequest)
        return await self.fetch(self.item_key(tag_id), f"products/tags/{tag_id}")

    @tool("create_product_tag", "Create a product tag")
    async def create_product_tag(self, data: Dict[str, Any]) -> Any:
        self.validate({"data": data}, schemas.CreateTagRequest)
        return await self.write(HttpMethod.POST, "products/tags", data, invalidate=self.entity_invalidations())

    @tool("update_product_tag", "Update a product tag")
    async def update_product_tag(self, tag_id: int, data: Dict[str, Any]) -> Any:
        self.validate({"id": tag_id, "data": data}, schemas.UpdateTagRequest)
        return await self.write(
            HttpMethod.PUT,
            f"products/tags/{tag_id}",
            data,
            invalidate=self.entity_invalidations(tag_id),
        )

    @tool("delete_product_tag", "Delete a product tag")
    async def delete_product_tag(self, tag_id: int) -> Any:
        self.validate({"id": tag_id, "force": True}, schemas.DeleteRequest)
        return await self.write(
            HttpMethod.DELETE,
            f"products/tags/{tag_id}",
            params={"force": True},
            invalidate=[
                *self.entity_invalidations(tag_id),
                self.cache.build_key("tags:products", tag_id) + ":*",
                "products:list:*",
            ],
        )

    @tool("get_products_by_tag", "List products carrying a tag")
    async def get_products_by_tag(self, tag_id: int, params: Optional[Dict[str, Any]] = None) -> Any:
        params = compact(params)
        self.validate({"id": tag_id, "params": params}, schemas.ProductsByTermRequest)
        return await self.fetch(
            self.cache.build_key("tags:products", tag_id, params=params),
            "products",
            {**params, "tag": tag_id},
        )

    @tool("assign_tags_to_product", "Set the tags of a product; append=true keeps the existing ones")
    async def assign_tags_to_product(self, product_id: int, tag_ids: List[int], append: bool = False) -> Any:
        return await self.assign_terms(product_id, tag_ids, append)
