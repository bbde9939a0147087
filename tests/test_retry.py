import asyncio

import pytest
from tenacity import AsyncRetrying

from commerce_bridge.core.exceptions import HttpError, NetworkError, ValidationError
from commerce_bridge.infrastructure.error.retry import (
    RetryOptions,
    is_safe_to_replay,
    is_transient_error,
    retryable,
    with_retry,
)


class Flaky:
    """Fails with the given errors, then returns "ok"."""

    def __init__(self, *errors):
        self.errors = list(errors)
        self.calls = 0

    async def __call__(self):
        self.calls += 1
        if self.errors:
            raise self.errors.pop(0)
        return "ok"


def test_delay_is_exponential_and_capped():
    options = RetryOptions(initial_delay=0.3, backoff_factor=2.0, max_delay=1.0, random=lambda a, b: 1.0)

    assert options.compute_delay(1) == pytest.approx(0.3)
    assert options.compute_delay(2) == pytest.approx(0.6)
    assert options.compute_delay(3) == pytest.approx(1.0)
    assert options.compute_delay(10) == pytest.approx(1.0)


def test_jitter_stays_within_twenty_percent():
    bounds = []

    def record(a, b):
        bounds.append((a, b))
        return b

    options = RetryOptions(initial_delay=1.0, random=record)
    assert options.compute_delay(1) == pytest.approx(1.2)
    assert bounds == [(0.8, 1.2)]


@pytest.mark.asyncio
async def test_retries_until_success(retry, sleeps):
    operation = Flaky(NetworkError(), HttpError(503))

    assert await with_retry(operation, retry, should_retry=is_transient_error) == "ok"
    assert operation.calls == 3
    assert sleeps == [pytest.approx(0.3), pytest.approx(0.6)]


@pytest.mark.asyncio
async def test_exhaustion_reraises_last_error_without_final_sleep(retry, sleeps):
    last = HttpError(502)
    operation = Flaky(HttpError(503), HttpError(500), last, HttpError(500))

    with pytest.raises(HttpError) as exc:
        await with_retry(operation, retry, should_retry=is_transient_error)

    assert exc.value is last
    assert operation.calls == 3
    assert len(sleeps) == 2


@pytest.mark.asyncio
async def test_rejected_errors_fail_immediately(retry, sleeps):
    operation = Flaky(HttpError(404, {"message": "Invalid ID."}))

    with pytest.raises(HttpError):
        await with_retry(operation, retry, should_retry=is_transient_error)

    assert operation.calls == 1
    assert sleeps == []


@pytest.mark.asyncio
async def test_rate_limit_is_retried(retry):
    operation = Flaky(HttpError(429))
    assert await with_retry(operation, retry, should_retry=is_transient_error) == "ok"


@pytest.mark.asyncio
async def test_on_retry_hook_sees_each_attempt(retry):
    seen = []
    operation = Flaky(NetworkError(), NetworkError())

    await with_retry(operation, retry, on_retry=lambda error, attempt, delay: seen.append(attempt))
    assert seen == [1, 2]


@pytest.mark.asyncio
async def test_decorator_form(retry):
    operation = Flaky(NetworkError())

    @retryable(retry, should_retry=is_transient_error)
    async def call():
        return await operation()

    assert await call() == "ok"
    assert operation.calls == 2


def test_transient_predicate():
    assert is_transient_error(NetworkError())
    assert is_transient_error(HttpError(500))
    assert is_transient_error(HttpError(429))
    assert not is_transient_error(HttpError(400))
    assert not is_transient_error(HttpError(404))
    assert not is_transient_error(ValidationError(issues=["id: is required"]))
    assert not is_transient_error(ValueError("boom"))


def test_replay_predicate_only_accepts_unsent_requests():
    assert is_safe_to_replay(NetworkError(request_sent=False))
    assert is_safe_to_replay(HttpError(429))
    assert not is_safe_to_replay(NetworkError(request_sent=True))
    assert not is_safe_to_replay(HttpError(503))


def test_policy_builds_a_tenacity_controller(retry):
    controller = retry.retrying()

    assert isinstance(controller, AsyncRetrying)
    assert controller.stop.max_attempt_number == 3
    assert controller.reraise is True


@pytest.mark.asyncio
async def test_cancellation_is_never_retried(retry, sleeps):
    operation = Flaky(asyncio.CancelledError())

    with pytest.raises(asyncio.CancelledError):
        await with_retry(operation, retry)
    assert operation.calls == 1
    assert sleeps == []
