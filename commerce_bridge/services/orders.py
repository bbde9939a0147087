from typing import Any, Dict, List, Optional

from commerce_bridge.adapters.interfaces.connector import HttpMethod
from commerce_bridge.core.logging import get_logger
from commerce_bridge.services.base import ResourceService, compact, tool
from commerce_bridge.validation import schemas

logger = get_logger(__name__)

# Orders feed customer order listings and the sales reports
ORDER_DEPENDENTS = ("customers:orders:*", "reports:*")


class OrderService(ResourceService):
    """Orders, order notes and refunds."""

    resource = "orders"

    def order_invalidations(self, order_id: Optional[int] = None) -> List[str]:
        ids = (order_id,) if order_id else ()
        return [*self.entity_invalidations(*ids), *ORDER_DEPENDENTS]

    @tool("list_orders", "List orders with optional filters (status, customer, product, after, before, ...)")
    async def list_orders(self, params: Optional[Dict[str, Any]] = None) -> Any:
        params = compact(params)
        self.validate({"params": params}, schemas.ListOrdersRequest)
        return await self.fetch_list("orders", params)

    @tool("get_order", "Get a single order by ID")
    async def get_order(self, order_id: int) -> Any:
        self.validate({"id": order_id}, schemas.IdRequest)
        return await self.fetch(self.item_key(order_id), f"orders/{order_id}")

    @tool("create_order", "Create an order with billing, shipping and line items")
    async def create_order(self, data: Dict[str, Any]) -> Any:
        self.validate({"data": data}, schemas.CreateOrderRequest)
        order = await self.write(HttpMethod.POST, "orders", data, invalidate=self.order_invalidations())
        logger.info(f"Created order {order.get('id') if isinstance(order, dict) else '?'}")
        return order

    @tool("update_order", "Update fields of an existing order")
    async def update_order(self, order_id: int, data: Dict[str, Any]) -> Any:
        self.validate({"id": order_id, "data": data}, schemas.UpdateOrderRequest)
        return await self.write(
            HttpMethod.PUT,
            f"orders/{order_id}",
            data,
            invalidate=self.order_invalidations(order_id),
        )

    @tool("update_order_status", "Change the status of an order")
    async def update_order_status(self, order_id: int, status: str) -> Any:
        self.validate({"id": order_id, "status": status}, schemas.UpdateOrderStatusRequest)
        return await self.write(
            HttpMethod.PUT,
            f"orders/{order_id}",
            {"status": status},
            invalidate=self.order_invalidations(order_id),
        )

    @tool("delete_order", "Delete an order; force=true deletes permanently instead of trashing")
    async def delete_order(self, order_id: int, force: bool = False) -> Any:
        self.validate({"id": order_id, "force": force}, schemas.DeleteRequest)
        return await self.write(
            HttpMethod.DELETE,
            f"orders/{order_id}",
            params={"force": force},
            invalidate=[*self.order_invalidations(order_id), self.notes_key(order_id), self.refunds_pattern(order_id)],
        )

    # Notes

    def notes_key(self, order_id: int, note_type: Optional[str] = None) -> str:
        if note_type:
            return self.cache.build_key("order_notes", order_id, note_type)
        return self.cache.build_key("order_notes", order_id) + ":*"

    @tool("list_order_notes", "List notes attached to an order")
    async def list_order_notes(self, order_id: int, note_type: str = "any") -> Any:
        self.validate({"order_id": order_id, "type": note_type}, schemas.ListOrderNotesRequest)
        return await self.fetch(
            self.notes_key(order_id, note_type),
            f"orders/{order_id}/notes",
            {"type": note_type},
        )

    @tool("create_order_note", "Add a note to an order; customer_note=true notifies the customer")
    async def create_order_note(self, order_id: int, note: str, customer_note: bool = False) -> Any:
        data = {"note": note, "customer_note": customer_note}
        self.validate({"order_id": order_id, "data": data}, schemas.CreateOrderNoteRequest)
        return await self.write(
            HttpMethod.POST,
            f"orders/{order_id}/notes",
            data,
            invalidate=[self.notes_key(order_id)],
        )

    @tool("delete_order_note", "Delete an order note")
    async def delete_order_note(self, order_id: int, note_id: int) -> Any:
        self.validate({"order_id": order_id, "id": note_id, "force": True}, schemas.DeleteOrderNoteRequest)
        return await self.write(
            HttpMethod.DELETE,
            f"orders/{order_id}/notes/{note_id}",
            params={"force": True},
            invalidate=[self.notes_key(order_id)],
        )

    # Refunds

    def refunds_pattern(self, order_id: int) -> str:
        return self.cache.build_key("order_refunds", order_id) + ":*"

    @tool("list_order_refunds", "List refunds of an order")
    async def list_order_refunds(self, order_id: int, params: Optional[Dict[str, Any]] = None) -> Any:
        params = compact(params)
        self.validate({"order_id": order_id, "params": params}, schemas.ListOrderRefundsRequest)
        return await self.fetch(
            self.cache.build_key("order_refunds", order_id, params=params),
            f"orders/{order_id}/refunds",
            params,
        )

    @tool("create_order_refund", "Refund an order fully or partially; api_refund=true also refunds through the gateway")
    async def create_order_refund(self, order_id: int, data: Dict[str, Any]) -> Any:
        self.validate({"order_id": order_id, "data": data}, schemas.CreateOrderRefundRequest)
        return await self.write(
            HttpMethod.POST,
            f"orders/{order_id}/refunds",
            data,
            invalidate=[self.refunds_pattern(order_id), *self.order_invalidations(order_id)],
        )

    @tool("delete_order_refund", "Delete a refund record")
    async def delete_order_refund(self, order_id: int, refund_id: int) -> Any:
        self.validate({"order_id": order_id, "id": refund_id, "force": True}, schemas.DeleteOrderRefundRequest)
        return await self.write(
            HttpMethod.DELETE,
            f"orders/{order_id}/refunds/{refund_id}",
            params={"force": True},
            invalidate=[self.refunds_pattern(order_id), *self.order_invalidations(order_id)],
        )
