"""
Error handling package for Commerce Bridge.
Provides centralized error processing, categorization and retry policies.
"""

from commerce_bridge.infrastructure.error.handler import (
    ErrorCategory,
    ErrorDetails,
    ErrorHandler,
    ErrorSeverity,
)
from commerce_bridge.infrastructure.error.retry import (
    RetryOptions,
    is_network_error,
    is_rate_limit_error,
    is_safe_to_replay,
    is_server_error,
    is_transient_error,
    retryable,
    with_retry,
)

__all__ = [
    # Error handler exports
    "ErrorHandler",
    "ErrorDetails",
    "ErrorCategory",
    "ErrorSeverity",

    # Retry exports
    "RetryOptions",
    "with_retry",
    "retryable",
    "is_network_error",
    "is_server_error",
    "is_rate_limit_error",
    "is_transient_error",
    "is_safe_to_replay",
]
