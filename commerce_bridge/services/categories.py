from typing import Any, Dict, List, Optional

from commerce_bridge.adapters.interfaces.connector import HttpMethod
from commerce_bridge.services.base import ResourceService, compact, tool
from commerce_bridge.validation import schemas


class TermAssignmentMixin:
    """Shared logic for attaching taxonomy terms (categories, tags) to a product."""

    term_field: str = ""

    async def assign_terms(self, product_id: int, term_ids: List[int], append: bool) -> Any:
        self.validate(
            {"product_id": product_id, "term_ids": term_ids, "append": append},
            schemas.AssignTermsRequest,
        )

        terms = [{"id": term_id} for term_id in term_ids]
        if append:
            product = await self.read(f"products/{product_id}")
            existing = [{"id": term["id"]} for term in product.get(self.term_field, [])]
            known = {term["id"] for term in existing}
            terms = existing + [term for term in terms if term["id"] not in known]

        return await self.write(
            HttpMethod.PUT,
            f"products/{product_id}",
            {self.term_field: terms},
            invalidate=[
                self.cache.build_key("products:item", product_id),
                "products:list:*",
                f"{self.resource}:products:*",
                self.list_pattern(),
            ],
        )


class CategoryService(TermAssignmentMixin, ResourceService):
    """Product categories."""

    resource = "categories"
    term_field = "categories"

    @tool("list_product_categories", "List product categories")
    async def list_product_categories(self, params: Optional[Dict[str, Any]] = None) -> Any:
        params = compact(params)
        self.validate({"params": params}, schemas.ListCategoriesRequest)
        return await self.fetch_list("products/categories", params)

    @tool("get_product_category", "Get a product category by ID")
    async def get_product_category(self, category_id: int) -> Any:
        self.validate({"id": category_id}, schemas.IdRequest)
        return await self.fetch(self.item_key(category_id), f"products/categories/{category_id}")

    @tool("create_product_category", "Create a product category")
    async def create_product_category(self, data: Dict[str, Any]) -> Any:
        self.validate({"data": data}, schemas.CreateCategoryRequest)
        return await self.write(
            HttpMethod.POST,
            "products/categories",
            data,
            invalidate=self.entity_invalidations(),
        )

    @tool("update_product_category", "Update a product category")
    async def update_product_category(self, category_id: int, data: Dict[str, Any]) -> Any:
        self.validate({"id": category_id, "data": data}, schemas.UpdateCategoryRequest)
        return await self.write(
            HttpMethod.PUT,
            f"products/categories/{category_id}",
            data,
            invalidate=self.entity_invalidations(category_id),
        )

    @tool("delete_product_category", "Delete a product category (categories cannot be trashed, force is always applied)")
    async def delete_product_category(self, category_id: int) -> Any:
        self.validate({"id": category_id, "force": True}, schemas.DeleteRequest)
        return await self.write(
            HttpMethod.DELETE,
            f"products/categories/{category_id}",
            params={"force": True},
            invalidate=[
                *self.entity_invalidations(category_id),
                self.cache.build_key("categories:products", category_id) + ":*",
                "products:list:*",
            ],
        )

    @tool("get_products_by_category", "List products that belong to a category")
    async def get_products_by_category(self, category_id: int, params: Optional[Dict[str, Any]] = None) -> Any:
        params = compact(params)
        self.validate({"id": category_id, "params": params}, schemas.ProductsByTermRequest)
        query = {**params, "category": category_id}
        return await self.fetch(
            self.cache.build_key("categories:products", category_id, params=params),
            "products",
            query,
        )

    @tool("assign_categories_to_product", "Set the categories of a product; append=true keeps the existing ones")
    async def assign_categories_to_product(self, product_id: int, category_ids: List[int], append: bool = False) -> Any:
        return await self.assign_terms(product_id, category_ids, append)
