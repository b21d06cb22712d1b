from __future__ import annotations

import itertools
from collections import deque
from typing import Any

from container_build.core.constants import BuildStatus
from container_build.core.types import BuildInstance, BuildRequest
from container_build.service.base import BuildService


class MockBuildService(BuildService):
    """In-memory build service for testing.

    Usage::

        service = MockBuildService(start_status="IN_PROGRESS")
        service.script("IN_PROGRESS", "SUCCEEDED")       # poll responses, in order
        service.script(ServiceCallError("boom"))        # or raise on a poll
        service.fail_start(ServiceCallError("denied"))  # raise on start

        instance = await service.start_build(BuildRequest(project_name="p"))
        assert service.call_count("start_build") == 1

    Once the scripted poll responses run out the last one is repeated.
    """

    def __init__(
        self,
        start_status: BuildStatus | str = BuildStatus.IN_PROGRESS,
        *,
        build_id: str | None = None,
    ) -> None:
        self._start_status = start_status
        self._build_id = build_id
        self._counter = itertools.count(1)
        self._script: deque[BuildStatus | str | Exception] = deque()
        self._last: BuildStatus | str | Exception = start_status
        self._start_error: Exception | None = None
        self.calls: list[tuple[str, Any]] = []

    # ------------------------------------------------------------------ #
    # Scripting helpers
    # ------------------------------------------------------------------ #

    def script(self, *responses: BuildStatus | str | Exception) -> None:
        """Queue poll responses; an exception instance is raised instead of returned."""
        self._script.extend(responses)

    def fail_start(self, error: Exception) -> None:
        self._start_error = error

    # ------------------------------------------------------------------ #
    # BuildService implementation
    # ------------------------------------------------------------------ #

    async def start_build(self, request: BuildRequest) -> BuildInstance:
        self.calls.append(("start_build", request))
        if self._start_error is not None:
            raise self._start_error
        build_id = self._build_id or f"{request.project_name}:{next(self._counter)}"
        return BuildInstance(build_id=build_id, status=self._start_status)

    async def get_build_status(self, build_id: str) -> BuildStatus | str:
        self.calls.append(("get_build_status", build_id))
        if self._script:
            self._last = self._script.popleft()
        if isinstance(self._last, Exception):
            raise self._last
        return self._last

    # ------------------------------------------------------------------ #
    # Test helpers
    # ------------------------------------------------------------------ #

    def call_count(self, method: str) -> int:
        return sum(1 for m, _ in self.calls if m == method)

    def assert_called(self, method: str) -> None:
        methods = [c[0] for c in self.calls]
        assert method in methods, f"Expected call to '{method}', got: {methods}"

    def reset(self) -> None:
        self.calls.clear()
        self._script.clear()
        self._last = self._start_status
        self._start_error = None
