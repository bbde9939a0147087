from typing import Any, Dict, Optional

from commerce_bridge.adapters.interfaces.connector import HttpMethod
from commerce_bridge.services.base import ResourceService, compact, tool
from commerce_bridge.validation import schemas


class CouponService(ResourceService):
    """Discount coupons."""

    resource = "coupons"

    @tool("list_coupons", "List coupons, optionally filtered by code")
    async def list_coupons(self, params: Optional[Dict[str, Any]] = None) -> Any:
        params = compact(params)
        self.validate({"params": params}, schemas.ListCouponsRequest)
        return await self.fetch_list("coupons", params)

    @tool("get_coupon", "Get a coupon by ID")
    async def get_coupon(self, coupon_id: int) -> Any:
        self.validate({"id": coupon_id}, schemas.IdRequest)
        return await self.fetch(self.item_key(coupon_id), f"coupons/{coupon_id}")

    @tool("create_coupon", "Create a coupon; data must include a code")
    async def create_coupon(self, data: Dict[str, Any]) -> Any:
        self.validate({"data": data}, schemas.CreateCouponRequest)
        return await self.write(HttpMethod.POST, "coupons", data, invalidate=self.entity_invalidations())

    @tool("update_coupon", "Update a coupon")
    async def update_coupon(self, coupon_id: int, data: Dict[str, Any]) -> Any:
        self.validate({"id": coupon_id, "data": data}, schemas.UpdateCouponRequest)
        return await self.write(
            HttpMethod.PUT,
            f"coupons/{coupon_id}",
            data,
            invalidate=self.entity_invalidations(coupon_id),
        )

    @tool("delete_coupon", "Delete a coupon; force=true deletes permanently instead of trashing")
    async def delete_coupon(self, coupon_id: int, force: bool = False) -> Any:
        self.validate({"id": coupon_id, "force": force}, schemas.DeleteRequest)
        return await self.write(
            HttpMethod.DELETE,
            f"coupons/{coupon_id}",
            params={"force": force},
            invalidate=self.entity_invalidations(coupon_id),
        )
