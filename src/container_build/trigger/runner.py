"""BuildTrigger: start a build and wait for it to finish."""

from __future__ import annotations

import asyncio
import time
from typing import Any, Awaitable, Callable, TypeVar

import structlog

from container_build.core.config import TriggerConfig
from container_build.core.constants import BuildResult, BuildStatus
from container_build.core.exceptions import (
    BuildFailedError,
    BuildTimeoutError,
    ContainerBuildError,
    ServiceCallError,
)
from container_build.core.types import BuildOutcome, BuildRequest
from container_build.service.base import BuildServiceProtocol

logger = structlog.get_logger(__name__)

_T = TypeVar("_T")


class BuildTrigger:
    """Starts exactly one build and polls it until it leaves ``IN_PROGRESS``.

    Usage::

        trigger = BuildTrigger(CodeBuildService())
        result = await trigger.run("my-build-project")
        if result is BuildResult.FAILED:
            ...

    The start call is made once and never retried. Status polls are retried
    only when ``config.poll_retry_policy`` is set, and retry backoff counts
    towards ``max_wait``. Without ``max_wait`` the wait is unbounded and
    relies on the host's own timeout.

    Each invocation is independent: calling :meth:`run` twice with the same
    project starts two builds.
    """

    def __init__(
        self,
        service: BuildServiceProtocol,
        config: TriggerConfig | None = None,
        *,
        sleep: Callable[[float], Awaitable[None]] | None = None,
        clock: Callable[[], float] | None = None,
    ) -> None:
        self._service = service
        self._config = config or TriggerConfig()
        self._sleep = sleep or asyncio.sleep
        self._clock = clock or time.monotonic

    @property
    def config(self) -> TriggerConfig:
        return self._config

    async def run(
        self,
        project_name: str,
        environment: dict[str, str] | None = None,
    ) -> BuildResult:
        """Start a build of *project_name* and wait for its result.

        Returns:
            :attr:`BuildResult.SUCCEEDED` if the build's final status is
            ``SUCCEEDED``, otherwise :attr:`BuildResult.FAILED`.

        Raises:
            ServiceCallError: The start call or a status poll failed.
            BuildTimeoutError: ``max_wait`` elapsed while still in progress.
            BuildFailedError: The build failed and ``raise_on_failure`` is set.
        """
        request = BuildRequest(project_name=project_name, environment=environment or {})
        outcome = await self.execute(request)
        return outcome.result

    async def execute(self, request: BuildRequest) -> BuildOutcome:
        """Run one build for *request* and return the full outcome."""
        log = logger.bind(project=request.project_name)
        started_at = self._clock()

        instance = await self._call("start_build", self._service.start_build, request)
        build_id = instance.build_id
        status = instance.status
        log = log.bind(build_id=build_id)
        log.info("build_started", status=str(status))

        polls = 0
        while status == BuildStatus.IN_PROGRESS:
            self._check_wait(build_id, started_at, polls)
            await self._sleep(self._config.poll_interval)
            status = await self._poll(build_id, started_at, polls)
            polls += 1
            log.debug("build_polled", status=str(status), polls=polls)

        elapsed = self._clock() - started_at
        result = BuildResult.SUCCEEDED if status == BuildStatus.SUCCEEDED else BuildResult.FAILED
        outcome = BuildOutcome(
            result=result,
            build_id=build_id,
            final_status=status,
            poll_count=polls,
            elapsed_seconds=elapsed,
        )

        if outcome.succeeded:
            log.info("build_finished", status=str(status), polls=polls, elapsed=elapsed)
            return outcome

        log.warning("build_finished", status=str(status), polls=polls, elapsed=elapsed)
        if self._config.raise_on_failure:
            raise BuildFailedError(
                f"Build {build_id} finished with status {status}",
                code=str(status),
                details={"build_id": build_id, "polls": polls},
            )
        return outcome

    async def _poll(self, build_id: str, started_at: float, polls: int) -> BuildStatus | str:
        policy = self._config.poll_retry_policy
        if policy is None:
            return await self._call("get_build_status", self._service.get_build_status, build_id)

        async def backoff(delay: float) -> None:
            self._check_wait(build_id, started_at, polls)
            await self._sleep(delay)

        return await policy.execute(
            self._call,
            "get_build_status",
            self._service.get_build_status,
            build_id,
            sleep=backoff,
        )

    def _check_wait(self, build_id: str, started_at: float, polls: int) -> None:
        elapsed = self._clock() - started_at
        if self._config.max_wait is None or elapsed < self._config.max_wait:
            return
        logger.error("build_wait_timed_out", build_id=build_id, elapsed=elapsed, polls=polls)
        raise BuildTimeoutError(
            f"Build {build_id} still in progress after {elapsed:.0f}s",
            details={"build_id": build_id, "polls": polls},
        )

    @staticmethod
    async def _call(
        operation: str, fn: Callable[..., Awaitable[_T]], *args: Any
    ) -> _T:
        try:
            return await fn(*args)
        except ContainerBuildError:
            raise
        except Exception as exc:
            # Adapters outside this package may raise anything
            raise ServiceCallError(
                f"{operation} failed: {exc}", details={"operation": operation}
            ) from exc
