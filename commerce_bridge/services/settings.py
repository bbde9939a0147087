from typing import Any, Dict, List

from commerce_bridge.adapters.interfaces.connector import HttpMethod
from commerce_bridge.infrastructure.cache.cache_aside import SETTINGS_TTL
from commerce_bridge.services.base import ResourceService, tool
from commerce_bridge.validation import schemas


class SettingsService(ResourceService):
    """Store settings groups (general, products, tax, shipping, ...)."""

    resource = "settings"

    def group_key(self, group: str) -> str:
        return self.cache.build_key("settings:group", group)

    def setting_key(self, group: str, setting_id: str) -> str:
        return self.cache.build_key("settings:item", group, setting_id)

    @tool("list_settings_groups", "List the available settings groups")
    async def list_settings_groups(self) -> Any:
        return await self.fetch(self.cache.build_key("settings:groups"), "settings", ttl=SETTINGS_TTL)

    @tool("get_settings_group", "Get every setting of a group, e.g. general or products")
    async def get_settings_group(self, group: str) -> Any:
        self.validate({"group": group}, schemas.SettingsGroupRequest)
        return await self.fetch(self.group_key(group), f"settings/{group}", ttl=SETTINGS_TTL)

    @tool("get_setting", "Get a single setting, e.g. group=general id=woocommerce_currency")
    async def get_setting(self, group: str, setting_id: str) -> Any:
        self.validate({"group": group, "id": setting_id}, schemas.GetSettingRequest)
        return await self.fetch(
            self.setting_key(group, setting_id),
            f"settings/{group}/{setting_id}",
            ttl=SETTINGS_TTL,
        )

    @tool("update_setting", "Update the value of a single setting")
    async def update_setting(self, group: str, setting_id: str, value: Any) -> Any:
        self.validate({"group": group, "id": setting_id, "value": value}, schemas.UpdateSettingRequest)
        return await self.write(
            HttpMethod.PUT,
            f"settings/{group}/{setting_id}",
            {"value": value},
            invalidate=[self.setting_key(group, setting_id), self.group_key(group)],
        )

    @tool("batch_update_settings", "Update several settings of one group ([{id, value}, ...])")
    async def batch_update_settings(self, group: str, updates: List[Dict[str, Any]]) -> Any:
        self.validate({"group": group, "updates": updates}, schemas.BatchUpdateSettingsRequest)
        return await self.write(
            HttpMethod.POST,
            f"settings/{group}/batch",
            {"update": updates},
            invalidate=[
                *(self.setting_key(group, item["id"]) for item in updates),
                self.group_key(group),
            ],
            idempotent=True,
        )
