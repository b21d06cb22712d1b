"""Retry policy with exponential backoff and jitter for build status polls."""

from __future__ import annotations

import asyncio
import logging
import random
from typing import Any, Awaitable, Callable, TypeVar

from pydantic import BaseModel, Field

from container_build.core.exceptions import (
    ContainerBuildError,
    ServiceConnectionError,
    ThrottlingError,
)

logger = logging.getLogger(__name__)

_T = TypeVar("_T")


class RetryPolicy(BaseModel):
    """Configurable retry policy with exponential backoff.

    Only ever applied to read-only calls. Starting a build is not retried,
    since a second start creates a second build.

    Attributes:
        max_retries: Maximum number of retry attempts (0 = no retries).
        backoff_base: Base delay in seconds for exponential backoff.
        backoff_max: Maximum delay in seconds (caps the exponential growth).
        jitter: If ``True``, add random jitter to the backoff delay.
        retryable_exceptions: Tuple of exception types that are eligible for retry.
    """

    max_retries: int = Field(default=3, ge=0, le=50)
    backoff_base: float = Field(default=1.0, ge=0.0)
    backoff_max: float = Field(default=30.0, ge=0.0)
    jitter: bool = True
    retryable_exceptions: tuple[type[Exception], ...] = (
        ThrottlingError,
        ServiceConnectionError,
    )

    model_config = {"arbitrary_types_allowed": True}

    def is_retryable(self, exc: Exception) -> bool:
        """Determine whether an exception should be retried.

        An explicit ``is_retryable`` override on the exception's own class
        (below :class:`ContainerBuildError`) wins; otherwise the exception is
        retried when it is an instance of ``retryable_exceptions``.
        """
        if isinstance(exc, ContainerBuildError):
            for klass in type(exc).__mro__:
                if klass is ContainerBuildError:
                    break
                if "is_retryable" in klass.__dict__:
                    return bool(exc.is_retryable)

        return isinstance(exc, self.retryable_exceptions)

    def compute_delay(self, attempt: int, exc: Exception | None = None) -> float:
        """Backoff delay for the given attempt (0-indexed).

        ``backoff_base * 2^attempt`` capped at ``backoff_max``, uniformly
        jittered when ``jitter`` is set. A ``retry_after`` hint on the
        exception is used as a floor.
        """
        delay: float = min(self.backoff_base * (2**attempt), self.backoff_max)
        if self.jitter:
            delay = random.uniform(0, delay)  # noqa: S311
        hint = getattr(exc, "retry_after", None)
        if hint is not None:
            delay = max(delay, float(hint))
        return delay

    async def execute(
        self,
        fn: Callable[..., Awaitable[_T]],
        *args: Any,
        sleep: Callable[[float], Awaitable[None]] | None = None,
        **kwargs: Any,
    ) -> _T:
        """Call ``await fn(*args, **kwargs)``, retrying retryable failures.

        Backoff delays are awaited through *sleep* (``asyncio.sleep`` when
        omitted). An exception raised by *sleep* ends the retries.

        Raises:
            Exception: The last exception raised by *fn* once retries are
                exhausted, or immediately if it is not retryable.
        """
        attempt = 0
        while True:
            try:
                return await fn(*args, **kwargs)
            except Exception as exc:
                if not self.is_retryable(exc):
                    raise
                if attempt >= self.max_retries:
                    logger.warning(
                        "Retry exhausted after %d attempt(s): %s",
                        attempt + 1,
                        exc,
                    )
                    raise

                delay = self.compute_delay(attempt, exc)
                logger.info(
                    "Retry attempt %d/%d after %.2fs: %s",
                    attempt + 1,
                    self.max_retries,
                    delay,
                    exc,
                )
                await (sleep or asyncio.sleep)(delay)
                attempt += 1
