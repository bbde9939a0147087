from typing import Any, Optional

from commerce_bridge.infrastructure.cache.cache_aside import REPORT_TTL
from commerce_bridge.services.base import ResourceService, compact, tool
from commerce_bridge.validation import schemas


class AnalyticsService(ResourceService):
    """
    Read-only store reports.

    Every report is cached under "reports:" so that order writes and order
    webhooks can drop them with a single pattern.
    """

    resource = "reports"

    async def report(self, path: str, params: Optional[dict] = None) -> Any:
        params = compact(params)
        key = self.cache.build_key("reports", path.replace("/", "."), params=params)
        return await self.fetch(key, path, params, ttl=REPORT_TTL)

    def period_params(self, period: Optional[str], date_min: Optional[str], date_max: Optional[str]) -> dict:
        self.validate({"period": period, "date_min": date_min, "date_max": date_max}, schemas.ReportPeriodRequest)
        # Explicit dates take precedence over a named period
        if date_min or date_max:
            return compact({"date_min": date_min, "date_max": date_max})
        return compact({"period": period or "month"})

    @tool("get_sales_report", "Sales report for a period (week, month, last_month, year) or a date range")
    async def get_sales_report(
        self,
        period: Optional[str] = None,
        date_min: Optional[str] = None,
        date_max: Optional[str] = None
    ) -> Any:
        return await self.report("reports/sales", self.period_params(period, date_min, date_max))

    @tool("get_top_sellers_report", "Best selling products for a period or a date range")
    async def get_top_sellers_report(
        self,
        period: Optional[str] = None,
        date_min: Optional[str] = None,
        date_max: Optional[str] = None
    ) -> Any:
        return await self.report("reports/top_sellers", self.period_params(period, date_min, date_max))

    @tool("get_revenue_by_date", "Revenue between two dates (YYYY-MM-DD)")
    async def get_revenue_by_date(self, date_min: str, date_max: str) -> Any:
        self.validate({"date_min": date_min, "date_max": date_max}, schemas.RevenueByDateRequest)
        return await self.report("reports/sales", {"date_min": date_min, "date_max": date_max})

    @tool("get_order_totals", "Order counts per status")
    async def get_order_totals(self) -> Any:
        return await self.report("reports/orders/totals")

    @tool("get_customer_totals", "Paying and non-paying customer counts")
    async def get_customer_totals(self) -> Any:
        return await self.report("reports/customers/totals")

    @tool("get_product_totals", "Product counts per product type")
    async def get_product_totals(self) -> Any:
        return await self.report("reports/products/totals")

    @tool("get_coupon_totals", "Coupon counts per discount type")
    async def get_coupon_totals(self) -> Any:
        return await self.report("reports/coupons/totals")

