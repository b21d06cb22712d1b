from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Protocol, runtime_checkable

from container_build.core.constants import BuildStatus
from container_build.core.types import BuildInstance, BuildRequest


@runtime_checkable
class BuildServiceProtocol(Protocol):
    """Structural type for any build service.

    :class:`~container_build.trigger.runner.BuildTrigger` accepts this
    Protocol so it works with any backend (CodeBuild, the mock, or a
    caller's own adapter) without importing concrete classes.
    """

    async def start_build(self, request: BuildRequest) -> BuildInstance: ...

    async def get_build_status(self, build_id: str) -> BuildStatus | str: ...


class BuildService(ABC):
    """Abstract base for build service backends.

    These two calls are the entire runtime surface the trigger needs.
    Implementations raise
    :class:`~container_build.core.exceptions.ServiceCallError` for any
    failure of the underlying service.
    """

    @abstractmethod
    async def start_build(self, request: BuildRequest) -> BuildInstance:
        """Start one build of ``request.project_name``."""

    @abstractmethod
    async def get_build_status(self, build_id: str) -> BuildStatus | str:
        """Fetch the current status of a started build."""
