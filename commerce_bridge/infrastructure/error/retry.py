"""
Bounded retry with exponential backoff and jitter, built on tenacity.

with_retry() re-invokes an async operation until it succeeds, the attempt
budget is spent or the retry predicate rejects the error. The error raised
at the end is always the original exception object.
"""
import asyncio
import functools
import random
from dataclasses import dataclass, field, replace
from typing import Any, Awaitable, Callable, Optional, TypeVar

from tenacity import AsyncRetrying, RetryCallState, retry_if_exception, stop_after_attempt

from commerce_bridge.core.exceptions import BridgeError, ErrorKind, HttpError, NetworkError
from commerce_bridge.core.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

JITTER_LOW = 0.8
JITTER_HIGH = 1.2


def _always_retry(error: BaseException) -> bool:
    return isinstance(error, Exception)


def _log_retry(error: BaseException, attempt: int, delay: float) -> None:
    logger.warning(
        f"Attempt {attempt} failed with {type(error).__name__}: {error}. Retrying in {delay:.2f}s",
        extra={"data": {"attempt": attempt, "delay": round(delay, 3)}}
    )


@dataclass(frozen=True)
class RetryOptions:
    """
    Retry policy.

    Attributes:
        max_retries: Total attempts, the first call included
        initial_delay: Delay before the second attempt, in seconds
        backoff_factor: Multiplier applied per attempt
        max_delay: Upper bound of the un-jittered delay, in seconds
        should_retry: Decides whether an error is worth another attempt
        on_retry: Called with (error, attempt, delay) before each sleep
        sleep: Awaitable sleep, replaceable in tests
        random: Returns a float in [a, b], replaceable in tests
    """
    max_retries: int = 3
    initial_delay: float = 0.3
    backoff_factor: float = 2.0
    max_delay: float = 10.0
    should_retry: Callable[[BaseException], bool] = _always_retry
    on_retry: Callable[[BaseException, int, float], None] = _log_retry
    sleep: Callable[[float], Awaitable[Any]] = field(default=asyncio.sleep)
    random: Callable[[float, float], float] = field(default=random.uniform)

    def compute_delay(self, attempt: int) -> float:
        """
        Delay to wait after a failed attempt.

        Args:
            attempt: 1-based number of the attempt that just failed

        Returns:
            min(initial * factor^(attempt-1), max) scaled by a factor in [0.8, 1.2]
        """
        base = min(self.initial_delay * (self.backoff_factor ** (attempt - 1)), self.max_delay)
        return base * self.random(JITTER_LOW, JITTER_HIGH)

    def wait(self, retry_state: RetryCallState) -> float:
        return self.compute_delay(retry_state.attempt_number)

    def before_sleep(self, retry_state: RetryCallState) -> None:
        self.on_retry(
            retry_state.outcome.exception(),
            retry_state.attempt_number,
            retry_state.next_action.sleep,
        )

    def retrying(self) -> AsyncRetrying:
        """tenacity controller implementing this policy."""
        return AsyncRetrying(
            stop=stop_after_attempt(max(self.max_retries, 1)),
            wait=self.wait,
            retry=retry_if_exception(self.should_retry),
            before_sleep=self.before_sleep,
            sleep=self.sleep,
            reraise=True,
        )


async def with_retry(
    operation: Callable[[], Awaitable[T]],
    options: Optional[RetryOptions] = None,
    **overrides: Any
) -> T:
    """
    Run an async operation with retries.

    Args:
        operation: Zero-argument coroutine function to invoke
        options: Retry policy, defaults to RetryOptions()
        **overrides: Field overrides applied on top of options

    Returns:
        The first successful result

    Raises:
        The last error raised by the operation, unchanged
    """
    options = options or RetryOptions()
    if overrides:
        options = replace(options, **overrides)
    return await options.retrying()(operation)


def retryable(options: Optional[RetryOptions] = None, **overrides: Any):
    """
    Decorator form of with_retry for coroutine functions.

    Args:
        options: Retry policy
        **overrides: Field overrides applied on top of options
    """
    def decorator(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> T:
            return await with_retry(lambda: func(*args, **kwargs), options, **overrides)
        return wrapper
    return decorator


# Retry predicates

def is_network_error(error: BaseException) -> bool:
    return isinstance(error, BridgeError) and error.kind is ErrorKind.NETWORK


def is_server_error(error: BaseException) -> bool:
    return isinstance(error, HttpError) and error.is_server_error


def is_rate_limit_error(error: BaseException) -> bool:
    return isinstance(error, HttpError) and error.is_rate_limited


def is_transient_error(error: BaseException) -> bool:
    """Network failures, 5xx responses and rate limiting."""
    return is_network_error(error) or is_server_error(error) or is_rate_limit_error(error)


def is_safe_to_replay(error: BaseException) -> bool:
    """
    Predicate for non-idempotent writes.

    Only errors proving the upstream did not process the request qualify:
    the connection was never established, or the request was rejected by
    rate limiting.
    """
    if isinstance(error, NetworkError):
        return not error.request_sent
    return is_rate_limit_error(error)
