"""CodeBuildService: AWS CodeBuild backend.

Verified calls:
- ``StartBuild``: takes ``{projectName, environmentVariablesOverride?, buildspecOverride?}``,
  returns ``{build: {id, arn, buildStatus, ...}}``
- ``BatchGetBuilds``: takes ``{ids: [...]}``,
  returns ``{builds: [{id, buildStatus, ...}], buildsNotFound: [...]}``
"""

from __future__ import annotations

import asyncio
from typing import Any, Callable, TypeVar

import boto3
import structlog
from botocore.exceptions import (
    BotoCoreError,
    ClientError,
    ConnectTimeoutError,
    EndpointConnectionError,
    ReadTimeoutError,
)

from container_build.core.constants import BuildStatus
from container_build.core.exceptions import (
    ServiceCallError,
    ServiceConnectionError,
    ThrottlingError,
)
from container_build.core.types import BuildInstance, BuildRequest, parse_status
from container_build.service.base import BuildService

logger = structlog.get_logger(__name__)

_T = TypeVar("_T")

_THROTTLING_CODES = frozenset(
    {
        "Throttling",
        "ThrottlingException",
        "TooManyRequestsException",
        "RequestLimitExceeded",
        "AccountLimitExceededException",
    }
)


def _translate(operation: str, exc: Exception) -> ServiceCallError:
    """Convert a botocore exception into the matching :class:`ServiceCallError`."""
    if isinstance(exc, ClientError):
        error = exc.response.get("Error", {})
        code = error.get("Code")
        message = error.get("Message") or str(exc)
        status_code = exc.response.get("ResponseMetadata", {}).get("HTTPStatusCode")
        error_cls = ThrottlingError if code in _THROTTLING_CODES else ServiceCallError
        return error_cls(
            f"{operation} failed: {message}",
            code=code,
            details={"operation": operation},
            status_code=status_code,
        )
    if isinstance(exc, (EndpointConnectionError, ConnectTimeoutError, ReadTimeoutError)):
        return ServiceConnectionError(
            f"{operation} failed: {exc}",
            details={"operation": operation},
        )
    return ServiceCallError(f"{operation} failed: {exc}", details={"operation": operation})


class CodeBuildService(BuildService):
    """Build service backed by a boto3 ``codebuild`` client.

    boto3 is blocking, so each call runs in a worker thread.

    Usage::

        service = CodeBuildService(region="us-east-1")
        instance = await service.start_build(BuildRequest(project_name="my-project"))
        status = await service.get_build_status(instance.build_id)
    """

    def __init__(self, client: Any | None = None, *, region: str | None = None) -> None:
        self._client = client
        self._region = region

    @property
    def client(self) -> Any:
        if self._client is None:
            self._client = boto3.client("codebuild", region_name=self._region)
        return self._client

    async def _call(self, operation: str, fn: Callable[..., _T], **kwargs: Any) -> _T:
        try:
            return await asyncio.to_thread(fn, **kwargs)
        except (ClientError, BotoCoreError) as exc:
            logger.warning("codebuild_call_failed", operation=operation, error=str(exc))
            raise _translate(operation, exc) from exc

    async def start_build(self, request: BuildRequest) -> BuildInstance:
        params: dict[str, Any] = {"projectName": request.project_name}
        if request.environment:
            params["environmentVariablesOverride"] = [
                {"name": name, "value": value, "type": "PLAINTEXT"}
                for name, value in request.environment.items()
            ]
        if request.buildspec is not None:
            params["buildspecOverride"] = request.buildspec

        response = await self._call("StartBuild", self.client.start_build, **params)
        build = response.get("build") or {}
        if "id" not in build:
            raise ServiceCallError(
                "StartBuild returned no build",
                details={"operation": "StartBuild", "project": request.project_name},
            )
        return BuildInstance(
            build_id=build["id"],
            status=parse_status(build.get("buildStatus", BuildStatus.IN_PROGRESS)),
        )

    async def get_build_status(self, build_id: str) -> BuildStatus | str:
        response = await self._call(
            "BatchGetBuilds", self.client.batch_get_builds, ids=[build_id]
        )
        builds = response.get("builds") or []
        if not builds:
            raise ServiceCallError(
                f"Build {build_id!r} not found",
                code="BuildNotFound",
                details={"operation": "BatchGetBuilds", "build_id": build_id},
            )
        return parse_status(builds[0]["buildStatus"])
