import copy
from typing import Any, Dict, Optional

from commerce_bridge.adapters.interfaces.connector import HttpMethod
from commerce_bridge.services.base import ResourceService, compact, tool
from commerce_bridge.validation import schemas


class PostService(ResourceService):
    """WordPress posts, pages, post taxonomies and comments."""

    resource = "posts"

    def scoped(self, resource: str) -> "PostService":
        """Key helper bound to a sibling content resource (pages, wp_categories, ...)."""
        view = copy.copy(self)
        view.resource = resource
        return view

    # Posts

    @tool("list_posts", "List blog posts with optional filters (status, categories, tags, search, ...)")
    async def list_posts(self, params: Optional[Dict[str, Any]] = None) -> Any:
        params = compact(params)
        self.validate({"params": params}, schemas.ListPostsRequest)
        return await self.fetch_list("posts", params)

    @tool("get_post", "Get a blog post by ID")
    async def get_post(self, post_id: int) -> Any:
        self.validate({"id": post_id}, schemas.IdRequest)
        return await self.fetch(self.item_key(post_id), f"posts/{post_id}")

    @tool("create_post", "Create a blog post; status defaults to draft")
    async def create_post(self, data: Dict[str, Any]) -> Any:
        data = {"status": "draft", **data}
        self.validate({"data": data}, schemas.CreatePostRequest)
        return await self.write(HttpMethod.POST, "posts", data, invalidate=self.entity_invalidations())

    @tool("update_post", "Update a blog post")
    async def update_post(self, post_id: int, data: Dict[str, Any]) -> Any:
        self.validate({"id": post_id, "data": data}, schemas.UpdatePostRequest)
        return await self.write(
            HttpMethod.PUT,
            f"posts/{post_id}",
            data,
            invalidate=self.entity_invalidations(post_id),
        )

    @tool("delete_post", "Delete a blog post; force=true skips the trash")
    async def delete_post(self, post_id: int, force: bool = False) -> Any:
        self.validate({"id": post_id, "force": force}, schemas.DeleteRequest)
        return await self.write(
            HttpMethod.DELETE,
            f"posts/{post_id}",
            params={"force": force},
            invalidate=self.entity_invalidations(post_id),
        )

    # Pages

    @tool("list_pages", "List pages")
    async def list_pages(self, params: Optional[Dict[str, Any]] = None) -> Any:
        params = compact(params)
        self.validate({"params": params}, schemas.ListPagesRequest)
        return await self.scoped("pages").fetch_list("pages", params)

    @tool("get_page", "Get a page by ID")
    async def get_page(self, page_id: int) -> Any:
        self.validate({"id": page_id}, schemas.IdRequest)
        pages = self.scoped("pages")
        return await pages.fetch(pages.item_key(page_id), f"pages/{page_id}")

    @tool("create_page", "Create a page; status defaults to draft")
    async def create_page(self, data: Dict[str, Any]) -> Any:
        data = {"status": "draft", **data}
        self.validate({"data": data}, schemas.CreatePageRequest)
        pages = self.scoped("pages")
        return await pages.write(HttpMethod.POST, "pages", data, invalidate=pages.entity_invalidations())

    @tool("update_page", "Update a page")
    async def update_page(self, page_id: int, data: Dict[str, Any]) -> Any:
        self.validate({"id": page_id, "data": data}, schemas.UpdatePageRequest)
        pages = self.scoped("pages")
        return await pages.write(
            HttpMethod.PUT,
            f"pages/{page_id}",
            data,
            invalidate=pages.entity_invalidations(page_id),
        )

    @tool("delete_page", "Delete a page; force=true skips the trash")
    async def delete_page(self, page_id: int, force: bool = False) -> Any:
        self.validate({"id": page_id, "force": force}, schemas.DeleteRequest)
        pages = self.scoped("pages")
        return await pages.write(
            HttpMethod.DELETE,
            f"pages/{page_id}",
            params={"force": force},
            invalidate=pages.entity_invalidations(page_id),
        )

    # Taxonomies

    @tool("list_post_categories", "List blog post categories")
    async def list_post_categories(self, params: Optional[Dict[str, Any]] = None) -> Any:
        params = compact(params)
        self.validate({"params": params}, schemas.ListTermsWpRequest)
        return await self.scoped("wp_categories").fetch_list("categories", params)

    @tool("create_post_category", "Create a blog post category")
    async def create_post_category(self, data: Dict[str, Any]) -> Any:
        self.validate({"data": data}, schemas.CreatePostCategoryRequest)
        terms = self.scoped("wp_categories")
        return await terms.write(HttpMethod.POST, "categories", data, invalidate=terms.entity_invalidations())

    @tool("list_post_tags", "List blog post tags")
    async def list_post_tags(self, params: Optional[Dict[str, Any]] = None) -> Any:
        params = compact(params)
        self.validate({"params": params}, schemas.ListTermsWpRequest)
        return await self.scoped("wp_tags").fetch_list("tags", params)

    @tool("create_post_tag", "Create a blog post tag")
    async def create_post_tag(self, data: Dict[str, Any]) -> Any:
        self.validate({"data": data}, schemas.CreateTagRequest)
        terms = self.scoped("wp_tags")
        return await terms.write(HttpMethod.POST, "tags", data, invalidate=terms.entity_invalidations())

    @tool("list_comments", "List comments, optionally for one post")
    async def list_comments(self, params: Optional[Dict[str, Any]] = None) -> Any:
        params = compact(params)
        self.validate({"params": params}, schemas.ListCommentsRequest)
        return await self.scoped("comments").fetch_list("comments", params)
