"""
SEO metadata tools for the Yoast SEO and Rank Math plugins.

Plugin data is read from the plugin's own REST namespace. Writes go through
the post's registered meta fields on the core content API, which both
plugins read back.
"""
from typing import Any, Dict, Optional

from commerce_bridge.adapters.interfaces.connector import APIConnector, HttpMethod
from commerce_bridge.core.exceptions import HttpError
from commerce_bridge.core.logging import get_logger
from commerce_bridge.infrastructure.cache.cache_aside import CacheAside
from commerce_bridge.infrastructure.error.retry import RetryOptions
from commerce_bridge.services.base import ResourceService, compact, tool
from commerce_bridge.validation import schemas

logger = get_logger(__name__)

YOAST_META_KEYS = {
    "title": "_yoast_wpseo_title",
    "meta_description": "_yoast_wpseo_metadesc",
    "focus_keyword": "_yoast_wpseo_focuskw",
    "canonical": "_yoast_wpseo_canonical",
}

RANKMATH_META_KEYS = {
    "title": "rank_math_title",
    "description": "rank_math_description",
    "focus_keyword": "rank_math_focus_keyword",
    "canonical_url": "rank_math_canonical_url",
}

# Plugin file fragment used to recognise an installed plugin
PLUGIN_SLUGS = {
    "yoast": ("yoast seo", "wordpress-seo"),
    "rankmath": ("rank math", "seo-by-rank-math"),
}


class SeoService(ResourceService):
    """Yoast / Rank Math post metadata, redirects and URL analysis."""

    resource = "seo"

    def __init__(
        self,
        client: APIConnector,
        cache: CacheAside,
        retry: Optional[RetryOptions] = None,
        yoast_client: Optional[APIConnector] = None,
        rankmath_client: Optional[APIConnector] = None
    ):
        super().__init__(client, cache, retry)
        self.yoast_client = yoast_client
        self.rankmath_client = rankmath_client

    async def plugin_active(self, plugin: str) -> Optional[bool]:
        search, slug = PLUGIN_SLUGS[plugin]
        try:
            plugins = await self.read("plugins", {"search": search})
        except HttpError as e:
            # Listing plugins needs the activate_plugins capability
            if e.status_code in (401, 403):
                logger.warning(f"Cannot list plugins to detect {plugin}: HTTP {e.status_code}")
                return None
            raise
        return any(
            slug in item.get("plugin", "") and item.get("status") == "active"
            for item in plugins or []
        )

    @tool("detect_seo_plugins", "Report whether Yoast SEO and Rank Math are active (null when it cannot be determined)")
    async def detect_seo_plugins(self) -> Dict[str, Optional[bool]]:
        key = self.cache.build_key("seo:plugins")
        cached = await self.cache.get(key)
        if cached is not None:
            return cached
        result = {
            "yoast": await self.plugin_active("yoast"),
            "rankmath": await self.plugin_active("rankmath"),
        }
        await self.cache.set(key, result)
        return result

    def post_invalidations(self, plugin: str, post_id: int) -> list:
        return [
            self.cache.build_key(f"seo:{plugin}", post_id),
            self.cache.build_key("posts:item", post_id),
        ]

    async def update_meta(self, plugin: str, post_id: int, meta: Dict[str, Any]) -> Any:
        post = await self.write(
            HttpMethod.PUT,
            f"posts/{post_id}",
            {"meta": meta},
            invalidate=self.post_invalidations(plugin, post_id),
        )
        return post.get("meta", meta) if isinstance(post, dict) else post

    # Yoast

    @tool("get_yoast_post_meta", "Get the Yoast SEO data of a post")
    async def get_yoast_post_meta(self, post_id: int) -> Any:
        self.validate({"post_id": post_id}, schemas.SeoPostRequest)
        return await self.fetch(
            self.cache.build_key("seo:yoast", post_id),
            f"posts/{post_id}",
            client=self.yoast_client,
        )

    @tool("update_yoast_post_meta", "Set the Yoast title, meta_description, focus_keyword or canonical of a post")
    async def update_yoast_post_meta(self, post_id: int, data: Dict[str, Any]) -> Any:
        self.validate({"post_id": post_id, "data": data}, schemas.YoastMetaRequest)
        meta = {YOAST_META_KEYS[name]: value for name, value in data.items() if name in YOAST_META_KEYS}
        return await self.update_meta("yoast", post_id, meta)

    # Rank Math

    @tool("get_rankmath_post_meta", "Get the Rank Math SEO data of a post")
    async def get_rankmath_post_meta(self, post_id: int) -> Any:
        self.validate({"post_id": post_id}, schemas.SeoPostRequest)
        return await self.fetch(
            self.cache.build_key("seo:rankmath", post_id),
            f"posts/{post_id}",
            client=self.rankmath_client,
        )

    @tool(
        "update_rankmath_post_meta",
        "Set the Rank Math title, description, focus_keyword, secondary_keywords or canonical_url of a post",
    )
    async def update_rankmath_post_meta(self, post_id: int, data: Dict[str, Any]) -> Any:
        self.validate({"post_id": post_id, "data": data}, schemas.RankmathMetaRequest)
        meta = {RANKMATH_META_KEYS[name]: value for name, value in data.items() if name in RANKMATH_META_KEYS}
        # Rank Math keeps every focus keyword in one comma separated field
        keywords = [data.get("focus_keyword"), *data.get("secondary_keywords", [])]
        keywords = [keyword for keyword in keywords if keyword]
        if "secondary_keywords" in data and keywords:
            meta[RANKMATH_META_KEYS["focus_keyword"]] = ",".join(keywords)
        return await self.update_meta("rankmath", post_id, meta)

    # Redirects

    @tool("list_rankmath_redirects", "List Rank Math redirects")
    async def list_rankmath_redirects(self, params: Optional[Dict[str, Any]] = None) -> Any:
        params = compact(params)
        self.validate({"params": params}, schemas.ListRedirectsRequest)
        return await self.fetch(
            self.cache.build_key("seo:redirects", params=params),
            "redirections",
            params,
            client=self.rankmath_client,
        )

    @tool("create_rankmath_redirect", "Create a Rank Math redirect from url_from to url_to")
    async def create_rankmath_redirect(self, data: Dict[str, Any]) -> Any:
        data = {"header_code": 301, "status": "active", **data}
        self.validate({"data": data}, schemas.CreateRedirectRequest)
        return await self.write(
            HttpMethod.POST,
            "redirections",
            data,
            client=self.rankmath_client,
            invalidate=["seo:redirects:*"],
        )

    @tool("delete_rankmath_redirect", "Delete a Rank Math redirect")
    async def delete_rankmath_redirect(self, redirect_id: int) -> Any:
        self.validate({"id": redirect_id}, schemas.IdRequest)
        return await self.write(
            HttpMethod.DELETE,
            f"redirections/{redirect_id}",
            client=self.rankmath_client,
            invalidate=["seo:redirects:*"],
        )

    # Analysis

    @tool("analyze_seo_status", "Collect the SEO data both plugins report for a URL")
    async def analyze_seo_status(self, url: str) -> Dict[str, Any]:
        self.validate({"url": url}, schemas.AnalyzeUrlRequest)
        plugins = await self.detect_seo_plugins()
        report: Dict[str, Any] = {"url": url, "plugins": plugins}
        if plugins.get("yoast"):
            report["yoast"] = await self.read("url_info", {"url": url}, client=self.yoast_client)
        if plugins.get("rankmath"):
            report["rankmath"] = await self.read("analyzer", {"url": url}, client=self.rankmath_client)
        return report
