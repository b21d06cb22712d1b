"""Tests for resilience/retry.py: RetryPolicy."""

from __future__ import annotations

import pytest

from container_build.core.exceptions import (
    BuildFailedError,
    ServiceCallError,
    ServiceConnectionError,
    ThrottlingError,
)
from container_build.resilience.retry import RetryPolicy


# ---------------------------------------------------------------------------
# execute
# ---------------------------------------------------------------------------


async def test_succeeds_first_try() -> None:
    policy = RetryPolicy(max_retries=3, backoff_base=0.0)

    async def succeed() -> str:
        return "ok"

    assert await policy.execute(succeed) == "ok"


async def test_retries_until_success() -> None:
    call_count = 0
    policy = RetryPolicy(max_retries=3, backoff_base=0.0, jitter=False)

    async def flaky(build_id: str) -> str:
        nonlocal call_count
        call_count += 1
        if call_count < 3:
            raise ServiceConnectionError("connection reset")
        return build_id

    assert await policy.execute(flaky, "abc") == "abc"
    assert call_count == 3


async def test_exhausts_retries() -> None:
    call_count = 0
    policy = RetryPolicy(max_retries=2, backoff_base=0.0, jitter=False)

    async def always_fail() -> str:
        nonlocal call_count
        call_count += 1
        raise ThrottlingError("Rate exceeded")

    with pytest.raises(ThrottlingError, match="Rate exceeded"):
        await policy.execute(always_fail)

    # 1 initial + 2 retries = 3 attempts
    assert call_count == 3


async def test_non_retryable_not_retried() -> None:
    call_count = 0
    policy = RetryPolicy(max_retries=5, backoff_base=0.0)

    async def fail() -> str:
        nonlocal call_count
        call_count += 1
        raise ValueError("not retryable")

    with pytest.raises(ValueError, match="not retryable"):
        await policy.execute(fail)

    assert call_count == 1


async def test_backoff_awaits_injected_sleep() -> None:
    delays: list[float] = []
    call_count = 0
    policy = RetryPolicy(max_retries=3, backoff_base=1.0, jitter=False)

    async def record(delay: float) -> None:
        delays.append(delay)

    async def flaky() -> str:
        nonlocal call_count
        call_count += 1
        if call_count < 3:
            raise ThrottlingError("Rate exceeded")
        return "SUCCEEDED"

    assert await policy.execute(flaky, sleep=record) == "SUCCEEDED"
    assert delays == [1.0, 2.0]


async def test_sleep_error_stops_retries() -> None:
    call_count = 0
    policy = RetryPolicy(max_retries=5, backoff_base=1.0, jitter=False)

    async def out_of_time(delay: float) -> None:
        raise TimeoutError("no time left")

    async def fail() -> str:
        nonlocal call_count
        call_count += 1
        raise ThrottlingError("Rate exceeded")

    with pytest.raises(TimeoutError):
        await policy.execute(fail, sleep=out_of_time)

    assert call_count == 1


async def test_zero_retries() -> None:
    call_count = 0
    policy = RetryPolicy(max_retries=0)

    async def fail() -> str:
        nonlocal call_count
        call_count += 1
        raise ThrottlingError("Rate exceeded")

    with pytest.raises(ThrottlingError):
        await policy.execute(fail)

    assert call_count == 1


# ---------------------------------------------------------------------------
# is_retryable
# ---------------------------------------------------------------------------


def test_default_retries_only_transient_errors() -> None:
    policy = RetryPolicy()
    assert policy.is_retryable(ThrottlingError("x"))
    assert policy.is_retryable(ServiceConnectionError("x"))
    assert not policy.is_retryable(ServiceCallError("denied", code="AccessDeniedException"))
    assert not policy.is_retryable(ServiceCallError("gone", code="BuildNotFound"))


async def test_permanent_service_error_not_retried_by_default() -> None:
    call_count = 0
    policy = RetryPolicy(backoff_base=0.0)

    async def fail() -> str:
        nonlocal call_count
        call_count += 1
        raise ServiceCallError("Build not found", code="BuildNotFound")

    with pytest.raises(ServiceCallError):
        await policy.execute(fail)

    assert call_count == 1


def test_explicit_override_wins() -> None:
    policy = RetryPolicy(retryable_exceptions=(BuildFailedError,))
    assert policy.is_retryable(ThrottlingError("x"))
    assert not policy.is_retryable(ServiceCallError("x"))
    assert policy.is_retryable(BuildFailedError("x"))


def test_custom_retryable_exceptions() -> None:
    policy = RetryPolicy(retryable_exceptions=(OSError,))
    assert policy.is_retryable(ConnectionResetError())
    assert not policy.is_retryable(KeyError("x"))


# ---------------------------------------------------------------------------
# compute_delay
# ---------------------------------------------------------------------------


def test_delay_grows_exponentially_and_caps() -> None:
    policy = RetryPolicy(backoff_base=1.0, backoff_max=5.0, jitter=False)
    assert [policy.compute_delay(n) for n in range(4)] == [1.0, 2.0, 4.0, 5.0]


def test_jitter_stays_within_bound() -> None:
    policy = RetryPolicy(backoff_base=2.0, jitter=True)
    for _ in range(20):
        assert 0.0 <= policy.compute_delay(1) <= 4.0


def test_retry_after_is_a_floor() -> None:
    policy = RetryPolicy(backoff_base=1.0, jitter=False)
    exc = ThrottlingError("slow down", retry_after=7.0)
    assert policy.compute_delay(0, exc) == 7.0
