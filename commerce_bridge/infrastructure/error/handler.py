"""
Error handling module for Commerce Bridge.
Provides centralized categorization, logging and caller-facing payloads for tool failures.
"""
import logging
import traceback
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional

from fastapi import status
from pydantic import BaseModel, Field

from commerce_bridge.core.exceptions import (
    AuthenticationError,
    BridgeError,
    CacheError,
    ConfigError,
    HttpError,
    NetworkError,
    ValidationError,
)
from commerce_bridge.infrastructure.error.retry import is_transient_error


class ErrorCategory(str, Enum):
    """Categorization of errors for processing and reporting."""
    VALIDATION = "validation"
    AUTHENTICATION = "authentication"
    AUTHORIZATION = "authorization"
    RATE_LIMIT = "rate_limit"
    NETWORK = "network"
    RESOURCE_NOT_FOUND = "resource_not_found"
    UPSTREAM = "upstream"
    CONFIGURATION = "configuration"
    CACHE = "cache"
    INTERNAL = "internal"


class ErrorSeverity(str, Enum):
    """Severity levels for errors."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ErrorDetails(BaseModel):
    """Structured error details for consistency in logging and reporting."""
    timestamp: datetime
    category: ErrorCategory
    severity: ErrorSeverity
    message: str
    source: str
    error_code: Optional[str] = None
    http_status_code: Optional[int] = None
    body: Any = None
    details: Optional[str] = None
    context: Dict[str, Any] = Field(default_factory=dict)
    stacktrace: Optional[str] = None
    retryable: bool = False


class ErrorHandler:
    """
    Central error processing class that categorizes tool failures, logs them
    and shapes the payload returned to the caller.
    """

    def __init__(self, logger: logging.Logger):
        """
        Initialize the error handler.

        Args:
            logger: Logger instance for error logging
        """
        self.logger = logger

        # Map exceptions to categories and severities
        self.exception_map = {
            ValidationError: (ErrorCategory.VALIDATION, ErrorSeverity.LOW),
            AuthenticationError: (ErrorCategory.AUTHENTICATION, ErrorSeverity.HIGH),
            NetworkError: (ErrorCategory.NETWORK, ErrorSeverity.MEDIUM),
            HttpError: (ErrorCategory.UPSTREAM, ErrorSeverity.MEDIUM),
            ConfigError: (ErrorCategory.CONFIGURATION, ErrorSeverity.CRITICAL),
            CacheError: (ErrorCategory.CACHE, ErrorSeverity.LOW),
        }

    def handle_error(
        self,
        exception: Exception,
        source: str,
        context: Optional[Dict[str, Any]] = None
    ) -> ErrorDetails:
        """
        Process an error: categorize and log it.

        Args:
            exception: The exception that occurred
            source: Source identifier, usually the tool name
            context: Additional context about the error

        Returns:
            ErrorDetails: Structured details about the error
        """
        error_details = self.categorize_error(exception, source, context or {})
        self.log_error(error_details)
        return error_details

    def categorize_error(
        self,
        exception: Exception,
        source: str,
        context: Dict[str, Any]
    ) -> ErrorDetails:
        """
        Categorize an error based on the exception type and build error details.

        Args:
            exception: The exception that occurred
            source: Source identifier
            context: Additional context about the error

        Returns:
            ErrorDetails: Structured details about the error
        """
        category, severity = self.exception_map.get(
            type(exception), (ErrorCategory.INTERNAL, ErrorSeverity.HIGH)
        )

        http_status_code = None
        body = None
        if isinstance(exception, HttpError):
            http_status_code = exception.status_code
            body = exception.body

            # Adjust category and severity based on HTTP status code
            if http_status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
                severity = ErrorSeverity.HIGH
            elif http_status_code == status.HTTP_429_TOO_MANY_REQUESTS:
                category = ErrorCategory.RATE_LIMIT
            elif http_status_code == status.HTTP_401_UNAUTHORIZED:
                category, severity = ErrorCategory.AUTHENTICATION, ErrorSeverity.HIGH
            elif http_status_code == status.HTTP_403_FORBIDDEN:
                category, severity = ErrorCategory.AUTHORIZATION, ErrorSeverity.HIGH
            elif http_status_code == status.HTTP_404_NOT_FOUND:
                category, severity = ErrorCategory.RESOURCE_NOT_FOUND, ErrorSeverity.LOW

        merged_context = dict(context)
        if isinstance(exception, BridgeError):
            merged_context.update(exception.context)

        return ErrorDetails(
            timestamp=datetime.now(timezone.utc),
            category=category,
            severity=severity,
            message=str(exception),
            source=source,
            error_code=getattr(exception, "code", None),
            http_status_code=http_status_code,
            body=body,
            details=getattr(exception, "details", None),
            context=merged_context,
            stacktrace="".join(traceback.format_exception(type(exception), exception, exception.__traceback__)),
            retryable=is_transient_error(exception),
        )

    def log_error(self, error_details: ErrorDetails) -> None:
        """
        Log error details at the appropriate level.

        Args:
            error_details: Structured error information
        """
        log_data = {
            "category": error_details.category.value,
            "severity": error_details.severity.value,
            "source": error_details.source,
            "retryable": error_details.retryable,
        }

        if error_details.error_code:
            log_data["error_code"] = error_details.error_code

        if error_details.http_status_code:
            log_data["http_status_code"] = error_details.http_status_code

        if error_details.context:
            log_data["context"] = error_details.context

        message = f"{error_details.source} failed: {error_details.message}"
        if error_details.severity == ErrorSeverity.CRITICAL:
            self.logger.critical(message, extra={"data": log_data})
        elif error_details.severity == ErrorSeverity.HIGH:
            self.logger.error(message, extra={"data": log_data})
            if error_details.category == ErrorCategory.INTERNAL and error_details.stacktrace:
                self.logger.error(f"Stacktrace:\n{error_details.stacktrace}")
        elif error_details.severity == ErrorSeverity.MEDIUM:
            self.logger.warning(message, extra={"data": log_data})
        else:
            self.logger.info(message, extra={"data": log_data})

    @staticmethod
    def to_payload(error_details: ErrorDetails) -> Dict[str, Any]:
        """
        Build the error payload surfaced to the tool caller.

        Args:
            error_details: Structured error information

        Returns:
            Dict with message and code, plus status, upstream body and validation details when known
        """
        payload: Dict[str, Any] = {
            "message": error_details.message,
            "code": error_details.error_code or error_details.category.value,
            "category": error_details.category.value,
        }
        if error_details.http_status_code is not None:
            payload["status_code"] = error_details.http_status_code
        if error_details.body is not None:
            payload["body"] = error_details.body
        if error_details.details:
            payload["details"] = error_details.details
        return payload
