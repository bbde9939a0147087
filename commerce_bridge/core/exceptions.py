from enum import Enum
from typing import Any, Dict, List, Optional

from fastapi import status


class ErrorKind(str, Enum):
    """Tag carried by every error raised inside the bridge."""
    VALIDATION = "validation"
    NETWORK = "network"
    HTTP = "http"
    CONFIG = "config"
    CACHE = "cache"
    AUTHENTICATION = "authentication"


class BridgeError(Exception):
    """
    Base exception for bridge errors.

    All custom exceptions inherit from this class and carry a kind tag so
    callers can branch on the variant instead of probing attributes.
    """

    kind: ErrorKind = ErrorKind.CONFIG

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        code: str = "bridge_error",
        context: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.code = code
        self.context = context or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to a dictionary for consistent response format."""
        return {
            "error": {
                "kind": self.kind.value,
                "code": self.code,
                "message": self.message,
                "context": self.context
            }
        }


class ValidationError(BridgeError):
    """Exception raised when tool input does not satisfy its schema."""

    kind = ErrorKind.VALIDATION

    def __init__(
        self,
        message: str = "Validation failed",
        issues: Optional[List[str]] = None,
        code: str = "validation_error",
        context: Optional[Dict[str, Any]] = None
    ):
        self.issues = list(issues or [])
        self.details = ", ".join(self.issues)
        full_message = f"{message}: {self.details}" if self.details else message
        super().__init__(message=full_message, code=code, context=context)

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["error"]["details"] = self.details
        data["error"]["issues"] = self.issues
        return data


class NetworkError(BridgeError):
    """
    Exception raised when the upstream gave no usable response.

    ``request_sent`` is False when the connection could not be established,
    which guarantees the upstream never processed the request.
    """

    kind = ErrorKind.NETWORK

    def __init__(
        self,
        message: str = "Network error while calling upstream API",
        request_sent: bool = True,
        code: str = "network_error",
        context: Optional[Dict[str, Any]] = None,
        original_exception: Optional[Exception] = None
    ):
        super().__init__(message=message, code=code, context=context)
        self.request_sent = request_sent
        self.original_exception = original_exception

        if original_exception is not None:
            self.context["original_error"] = f"{type(original_exception).__name__}: {original_exception}"


class HttpError(BridgeError):
    """Exception raised when the upstream answered with a non-2xx status."""

    kind = ErrorKind.HTTP

    def __init__(
        self,
        status_code: int,
        body: Any = None,
        message: Optional[str] = None,
        code: str = "http_error",
        context: Optional[Dict[str, Any]] = None
    ):
        self.status_code = status_code
        self.body = body
        if message is None:
            message = f"Upstream API responded with status {status_code}"
            upstream_message = body.get("message") if isinstance(body, dict) else None
            if upstream_message:
                message = f"{message}: {upstream_message}"
        super().__init__(message=message, code=code, context=context)

    @property
    def is_server_error(self) -> bool:
        return self.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR

    @property
    def is_rate_limited(self) -> bool:
        return self.status_code == status.HTTP_429_TOO_MANY_REQUESTS

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["error"]["status_code"] = self.status_code
        data["error"]["body"] = self.body
        return data


class ConfigError(BridgeError):
    """Exception raised for missing credentials, malformed URLs or requests that were never sent."""

    kind = ErrorKind.CONFIG

    def __init__(
        self,
        message: str = "Invalid configuration",
        code: str = "config_error",
        context: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message=message, code=code, context=context)


class CacheError(BridgeError):
    """Exception raised by cache backends. Never propagated past the cache-aside layer."""

    kind = ErrorKind.CACHE

    def __init__(
        self,
        message: str = "Cache backend error",
        code: str = "cache_error",
        context: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message=message, code=code, context=context)


class AuthenticationError(BridgeError):
    """Exception raised when an inbound webhook fails signature verification."""

    kind = ErrorKind.AUTHENTICATION
    status_code = status.HTTP_401_UNAUTHORIZED

    def __init__(
        self,
        message: str = "Authentication failed",
        code: str = "authentication_error",
        context: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message=message, code=code, context=context)

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["error"]["status_code"] = self.status_code
        return data
