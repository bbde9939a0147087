from typing import Any, Dict, List, Optional

from commerce_bridge.adapters.interfaces.connector import HttpMethod
from commerce_bridge.services.base import ResourceService, compact, tool
from commerce_bridge.validation import schemas


class AttributeService(ResourceService):
    """Global product attributes and their terms."""

    resource = "attributes"

    def term_invalidations(self, attribute_id: int, term_id: Optional[int] = None) -> List[str]:
        keys = [self.cache.build_key("attribute_terms:list", attribute_id) + ":*"]
        if term_id:
            keys.insert(0, self.cache.build_key("attribute_terms:item", attribute_id, term_id))
        return keys

    @tool("list_product_attributes", "List global product attributes")
    async def list_product_attributes(self) -> Any:
        return await self.fetch_list("products/attributes")

    @tool("get_product_attribute", "Get a product attribute by ID")
    async def get_product_attribute(self, attribute_id: int) -> Any:
        self.validate({"id": attribute_id}, schemas.IdRequest)
        return await self.fetch(self.item_key(attribute_id), f"products/attributes/{attribute_id}")

    @tool("create_product_attribute", "Create a global product attribute")
    async def create_product_attribute(self, data: Dict[str, Any]) -> Any:
        self.validate({"data": data}, schemas.CreateAttributeRequest)
        return await self.write(
            HttpMethod.POST,
            "products/attributes",
            data,
            invalidate=self.entity_invalidations(),
        )

    @tool("update_product_attribute", "Update a product attribute")
    async def update_product_attribute(self, attribute_id: int, data: Dict[str, Any]) -> Any:
        self.validate({"id": attribute_id, "data": data}, schemas.UpdateAttributeRequest)
        return await self.write(
            HttpMethod.PUT,
            f"products/attributes/{attribute_id}",
            data,
            invalidate=self.entity_invalidations(attribute_id),
        )

    @tool("delete_product_attribute", "Delete a product attribute together with its terms")
    async def delete_product_attribute(self, attribute_id: int) -> Any:
        self.validate({"id": attribute_id, "force": True}, schemas.DeleteRequest)
        return await self.write(
            HttpMethod.DELETE,
            f"products/attributes/{attribute_id}",
            params={"force": True},
            invalidate=[
                *self.entity_invalidations(attribute_id),
                self.cache.build_key("attribute_terms:item", attribute_id) + ":*",
                *self.term_invalidations(attribute_id),
            ],
        )

    # Terms

    @tool("list_attribute_terms", "List the terms of a product attribute")
    async def list_attribute_terms(self, attribute_id: int, params: Optional[Dict[str, Any]] = None) -> Any:
        params = compact(params)
        self.validate({"attribute_id": attribute_id, "params": params}, schemas.ListTermsRequest)
        return await self.fetch(
            self.cache.build_key("attribute_terms:list", attribute_id, params=params),
            f"products/attributes/{attribute_id}/terms",
            params,
        )

    @tool("get_attribute_term", "Get a single attribute term")
    async def get_attribute_term(self, attribute_id: int, term_id: int) -> Any:
        self.validate({"attribute_id": attribute_id, "id": term_id}, schemas.GetTermRequest)
        return await self.fetch(
            self.cache.build_key("attribute_terms:item", attribute_id, term_id),
            f"products/attributes/{attribute_id}/terms/{term_id}",
        )

    @tool("create_attribute_term", "Create a term for a product attribute")
    async def create_attribute_term(self, attribute_id: int, data: Dict[str, Any]) -> Any:
        self.validate({"attribute_id": attribute_id, "data": data}, schemas.CreateTermRequest)
        return await self.write(
            HttpMethod.POST,
            f"products/attributes/{attribute_id}/terms",
            data,
            invalidate=self.term_invalidations(attribute_id),
        )

    @tool("update_attribute_term", "Update an attribute term")
    async def update_attribute_term(self, attribute_id: int, term_id: int, data: Dict[str, Any]) -> Any:
        self.validate(
            {"attribute_id": attribute_id, "id": term_id, "data": data},
            schemas.UpdateTermRequest,
        )
        return await self.write(
            HttpMethod.PUT,
            f"products/attributes/{attribute_id}/terms/{term_id}",
            data,
            invalidate=self.term_invalidations(attribute_id, term_id),
        )

    @tool("delete_attribute_term", "Delete an attribute term")
    async def delete_attribute_term(self, attribute_id: int, term_id: int) -> Any:
        self.validate(
            {"attribute_id": attribute_id, "id": term_id, "force": True},
            schemas.DeleteTermRequest,
        )
        return await self.write(
            HttpMethod.DELETE,
            f"products/attributes/{attribute_id}/terms/{term_id}",
            params={"force": True},
            invalidate=self.term_invalidations(attribute_id, term_id),
        )
