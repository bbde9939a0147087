"""
Shared plumbing for tool modules.

Every tool follows the same pipeline: validate the request, serve reads
through the cache, call the upstream API under the retry policy, and
invalidate affected cache entries after a successful write.
"""
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Iterable, Iterator, List, Mapping, Optional, Tuple, Type

from commerce_bridge.adapters.interfaces.connector import APIConnector, HttpMethod
from commerce_bridge.core.logging import get_logger
from commerce_bridge.infrastructure.cache.cache_aside import DETAIL_TTL, LIST_TTL, CacheAside
from commerce_bridge.infrastructure.error.retry import (
    RetryOptions,
    is_safe_to_replay,
    is_transient_error,
    with_retry,
)
from commerce_bridge.validation.base import RequestModel, validate

logger = get_logger(__name__)


@dataclass(frozen=True)
class ToolSpec:
    """Name and description under which a service method is exposed."""
    name: str
    description: str


def tool(name: str, description: str) -> Callable:
    """Mark a service coroutine as an MCP tool."""
    def decorator(func: Callable[..., Awaitable[Any]]) -> Callable[..., Awaitable[Any]]:
        func.__tool_spec__ = ToolSpec(name=name, description=description)
        return func
    return decorator


class ResourceService:
    """
    Base class for a tool module backed by one upstream resource type.

    Cache keys live under the resource namespace:
    "<resource>:list:<params>" for collections and "<resource>:item:<id>"
    for single entities.
    """

    resource: str = ""

    def __init__(self, client: APIConnector, cache: CacheAside, retry: Optional[RetryOptions] = None):
        """
        Initialize the service.

        Args:
            client: Upstream API client owned by this module
            cache: Process-wide cache-aside layer
            retry: Retry policy for upstream calls
        """
        self.client = client
        self.cache = cache
        self.retry = retry or RetryOptions()

    # Tool discovery

    def tools(self) -> Iterator[Tuple[ToolSpec, Callable[..., Awaitable[Any]]]]:
        """Yield (spec, bound method) for every method marked with @tool."""
        for attr in sorted(dir(type(self))):
            member = getattr(type(self), attr, None)
            spec = getattr(member, "__tool_spec__", None)
            if spec is not None:
                yield spec, getattr(self, attr)

    # Keys

    def list_key(self, params: Optional[Mapping[str, Any]] = None, *scope: Any) -> str:
        return self.cache.build_key(f"{self.resource}:list", *scope, params=params or {})

    def item_key(self, *ids: Any) -> str:
        return self.cache.build_key(f"{self.resource}:item", *ids)

    def list_pattern(self, *scope: Any) -> str:
        return self.cache.build_key(f"{self.resource}:list", *scope) + ":*"

    # Pipeline

    @staticmethod
    def validate(request: Mapping[str, Any], model: Type[RequestModel]) -> RequestModel:
        return validate(request, model)

    async def fetch(
        self,
        key: str,
        path: str,
        params: Optional[Mapping[str, Any]] = None,
        ttl: int = DETAIL_TTL,
        client: Optional[APIConnector] = None
    ) -> Any:
        """
        Cached read.

        Args:
            key: Cache key for the result
            path: Endpoint relative to the client's API root
            params: Query parameters
            ttl: TTL in seconds for the cached result
            client: Client to use instead of the module's own

        Returns:
            Decoded response body
        """
        return await self.cache.get_or_fetch(key, lambda: self.read(path, params, client=client), ttl)

    async def fetch_list(self, path: str, params: Optional[Mapping[str, Any]] = None, *scope: Any) -> Any:
        return await self.fetch(self.list_key(params, *scope), path, params, ttl=LIST_TTL)

    async def read(
        self,
        path: str,
        params: Optional[Mapping[str, Any]] = None,
        client: Optional[APIConnector] = None
    ) -> Any:
        """Uncached read with transient-error retries."""
        api = client or self.client
        response = await with_retry(
            lambda: api.get(path, params),
            self.retry,
            should_retry=is_transient_error,
        )
        return response.data

    async def write(
        self,
        method: HttpMethod,
        path: str,
        data: Any = None,
        params: Optional[Mapping[str, Any]] = None,
        invalidate: Iterable[str] = (),
        client: Optional[APIConnector] = None,
        idempotent: Optional[bool] = None
    ) -> Any:
        """
        Mutating call followed by cache invalidation.

        POST is treated as non-idempotent unless stated otherwise, and is only
        replayed when the upstream provably did not process the request. PUT
        and DELETE retry on any transient error.

        Args:
            method: POST, PUT or DELETE
            path: Endpoint relative to the client's API root
            data: JSON body
            params: Query parameters
            invalidate: Keys and patterns to drop once the write succeeded
            client: Client to use instead of the module's own
            idempotent: Overrides the method based replay decision

        Returns:
            Decoded response body
        """
        api = client or self.client
        if idempotent is None:
            idempotent = method != HttpMethod.POST
        predicate = is_transient_error if idempotent else is_safe_to_replay
        body = data if data is not None or method == HttpMethod.DELETE else {}

        response = await with_retry(
            lambda: api.request(method, path, params=params, json=body),
            self.retry,
            should_retry=predicate,
        )

        keys: List[str] = list(invalidate)
        if keys:
            await self.cache.invalidate_many(*keys)
        return response.data

    def entity_invalidations(self, *ids: Any) -> List[str]:
        """Entity key plus the collection pattern of this resource."""
        keys = [self.list_pattern()]
        if ids:
            keys.insert(0, self.item_key(*ids))
        return keys


def compact(params: Optional[Mapping[str, Any]]) -> dict:
    """Drop None values from a parameter mapping."""
    return {k: v for k, v in (params or {}).items() if v is not None}
