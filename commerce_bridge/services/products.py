from typing import Any, Dict, List, Optional

from commerce_bridge.adapters.interfaces.connector import HttpMethod
from commerce_bridge.core.logging import get_logger
from commerce_bridge.services.base import ResourceService, compact, tool
from commerce_bridge.validation import schemas

logger = get_logger(__name__)

# Listings that embed product data and go stale when a product changes
PRODUCT_LISTINGS = ("categories:products:*", "tags:products:*")


class ProductService(ResourceService):
    """Products, batch updates and variations."""

    resource = "products"

    def product_invalidations(self, product_id: Optional[int] = None) -> List[str]:
        ids = (product_id,) if product_id else ()
        return [*self.entity_invalidations(*ids), *PRODUCT_LISTINGS]

    @tool("list_products", "List products with optional filters (page, per_page, search, category, tag, status, sku, ...)")
    async def list_products(self, params: Optional[Dict[str, Any]] = None) -> Any:
        params = compact(params)
        self.validate({"params": params}, schemas.ListProductsRequest)
        return await self.fetch_list("products", params)

    @tool("get_product", "Get a single product by ID")
    async def get_product(self, product_id: int) -> Any:
        self.validate({"id": product_id}, schemas.IdRequest)
        return await self.fetch(self.item_key(product_id), f"products/{product_id}")

    @tool("create_product", "Create a product; data must include at least a name")
    async def create_product(self, data: Dict[str, Any]) -> Any:
        self.validate({"data": data}, schemas.CreateProductRequest)
        product = await self.write(HttpMethod.POST, "products", data, invalidate=self.product_invalidations())
        logger.info(f"Created product {product.get('id') if isinstance(product, dict) else '?'}")
        return product

    @tool("update_product", "Update fields of an existing product")
    async def update_product(self, product_id: int, data: Dict[str, Any]) -> Any:
        self.validate({"id": product_id, "data": data}, schemas.UpdateProductRequest)
        return await self.write(
            HttpMethod.PUT,
            f"products/{product_id}",
            data,
            invalidate=self.product_invalidations(product_id),
        )

    @tool("delete_product", "Delete a product; force=true deletes permanently instead of trashing")
    async def delete_product(self, product_id: int, force: bool = False) -> Any:
        self.validate({"id": product_id, "force": force}, schemas.DeleteRequest)
        return await self.write(
            HttpMethod.DELETE,
            f"products/{product_id}",
            params={"force": force},
            invalidate=self.product_invalidations(product_id),
        )

    @tool("batch_update_products", "Create, update and delete products in one request ({create, update, delete})")
    async def batch_update_products(self, data: Dict[str, Any]) -> Any:
        self.validate({"data": data}, schemas.BatchProductsRequest)

        touched = [item["id"] for item in data.get("update") or []] + list(data.get("delete") or [])
        invalidate = self.product_invalidations()
        invalidate.extend(self.item_key(product_id) for product_id in touched)

        return await self.write(HttpMethod.POST, "products/batch", data, invalidate=invalidate)

    # Variations

    def variations_list_key(self, product_id: int, params: Dict[str, Any]) -> str:
        return self.cache.build_key("variations:list", product_id, params=params)

    def variation_invalidations(self, product_id: int, variation_id: Optional[int] = None) -> List[str]:
        keys = [
            self.cache.build_key("variations:list", product_id) + ":*",
            self.item_key(product_id),
        ]
        if variation_id:
            keys.insert(0, self.cache.build_key("variations:item", product_id, variation_id))
        return keys

    @tool("list_product_variations", "List variations of a variable product")
    async def list_product_variations(self, product_id: int, params: Optional[Dict[str, Any]] = None) -> Any:
        params = compact(params)
        self.validate({"product_id": product_id, "params": params}, schemas.ListVariationsRequest)
        return await self.fetch(
            self.variations_list_key(product_id, params),
            f"products/{product_id}/variations",
            params,
        )

    @tool("get_product_variation", "Get a single variation of a product")
    async def get_product_variation(self, product_id: int, variation_id: int) -> Any:
        self.validate({"product_id": product_id, "id": variation_id}, schemas.GetVariationRequest)
        return await self.fetch(
            self.cache.build_key("variations:item", product_id, variation_id),
            f"products/{product_id}/variations/{variation_id}",
        )

    @tool("create_product_variation", "Create a variation for a variable product")
    async def create_product_variation(self, product_id: int, data: Dict[str, Any]) -> Any:
        self.validate({"product_id": product_id, "data": data}, schemas.CreateVariationRequest)
        return await self.write(
            HttpMethod.POST,
            f"products/{product_id}/variations",
            data,
            invalidate=self.variation_invalidations(product_id),
        )

    @tool("update_product_variation", "Update a product variation")
    async def update_product_variation(self, product_id: int, variation_id: int, data: Dict[str, Any]) -> Any:
        self.validate(
            {"product_id": product_id, "id": variation_id, "data": data},
            schemas.UpdateVariationRequest,
        )
        return await self.write(
            HttpMethod.PUT,
            f"products/{product_id}/variations/{variation_id}",
            data,
            invalidate=self.variation_invalidations(product_id, variation_id),
        )

    @tool("delete_product_variation", "Delete a product variation")
    async def delete_product_variation(self, product_id: int, variation_id: int, force: bool = True) -> Any:
        self.validate(
            {"product_id": product_id, "id": variation_id, "force": force},
            schemas.DeleteVariationRequest,
        )
        return await self.write(
            HttpMethod.DELETE,
            f"products/{product_id}/variations/{variation_id}",
            params={"force": force},
            invalidate=self.variation_invalidations(product_id, variation_id),
        )
