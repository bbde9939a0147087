from typing import Any, Dict, List, Optional

from commerce_bridge.adapters.interfaces.connector import HttpMethod
from commerce_bridge.services.base import ResourceService, compact, tool
from commerce_bridge.validation import schemas


class CustomerService(ResourceService):
    """Customers and their order history."""

    resource = "customers"

    def customer_invalidations(self, customer_id: Optional[int] = None) -> List[str]:
        ids = (customer_id,) if customer_id else ()
        return [*self.entity_invalidations(*ids), "customers:email:*"]

    @tool("list_customers", "List customers with optional filters (search, email, role, ...)")
    async def list_customers(self, params: Optional[Dict[str, Any]] = None) -> Any:
        params = compact(params)
        self.validate({"params": params}, schemas.ListCustomersRequest)
        return await self.fetch_list("customers", params)

    @tool("get_customer", "Get a customer by ID")
    async def get_customer(self, customer_id: int) -> Any:
        self.validate({"id": customer_id}, schemas.IdRequest)
        return await self.fetch(self.item_key(customer_id), f"customers/{customer_id}")

    @tool("create_customer", "Create a customer; data must include a valid email")
    async def create_customer(self, data: Dict[str, Any]) -> Any:
        self.validate({"data": data}, schemas.CreateCustomerRequest)
        return await self.write(HttpMethod.POST, "customers", data, invalidate=self.customer_invalidations())

    @tool("update_customer", "Update fields of a customer")
    async def update_customer(self, customer_id: int, data: Dict[str, Any]) -> Any:
        self.validate({"id": customer_id, "data": data}, schemas.UpdateCustomerRequest)
        return await self.write(
            HttpMethod.PUT,
            f"customers/{customer_id}",
            data,
            invalidate=self.customer_invalidations(customer_id),
        )

    @tool("delete_customer", "Delete a customer; reassign moves their posts to another user")
    async def delete_customer(self, customer_id: int, reassign: Optional[int] = None) -> Any:
        self.validate({"id": customer_id, "force": True, "reassign": reassign}, schemas.DeleteCustomerRequest)
        return await self.write(
            HttpMethod.DELETE,
            f"customers/{customer_id}",
            params=compact({"force": True, "reassign": reassign}),
            invalidate=[
                *self.customer_invalidations(customer_id),
                self.cache.build_key("customers:orders", customer_id) + ":*",
            ],
        )

    @tool("get_customer_orders", "List the orders placed by a customer")
    async def get_customer_orders(self, customer_id: int, params: Optional[Dict[str, Any]] = None) -> Any:
        params = compact(params)
        self.validate({"id": customer_id, "params": params}, schemas.CustomerOrdersRequest)
        return await self.fetch(
            self.cache.build_key("customers:orders", customer_id, params=params),
            "orders",
            {**params, "customer": customer_id},
        )

    @tool("find_customer_by_email", "Find a customer by email address; returns null when there is none")
    async def find_customer_by_email(self, email: str) -> Any:
        self.validate({"email": email}, schemas.FindCustomerByEmailRequest)
        matches = await self.fetch(
            self.cache.build_key("customers:email", email.lower()),
            "customers",
            {"email": email, "role": "all"},
        )
        return matches[0] if matches else None

    @tool("update_customer_metadata", "Set meta_data entries ({key, value}) on a customer")
    async def update_customer_metadata(self, customer_id: int, meta_data: List[Dict[str, Any]]) -> Any:
        self.validate({"id": customer_id, "meta_data": meta_data}, schemas.UpdateCustomerMetadataRequest)
        return await self.write(
            HttpMethod.PUT,
            f"customers/{customer_id}",
            {"meta_data": meta_data},
            invalidate=self.customer_invalidations(customer_id),
        )
