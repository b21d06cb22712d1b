from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field

from container_build.core.constants import BuildResult, BuildStatus


class BuildRequest(BaseModel):
    """Identifies the build project to start.

    Immutable: one request is created per invocation and never changed.
    ``environment`` holds optional environment variable overrides and
    ``buildspec`` an optional buildspec override for the build (see
    :func:`container_build.buildspec.build_request`).
    """

    model_config = ConfigDict(frozen=True)

    project_name: str = Field(..., min_length=1)
    environment: dict[str, str] = Field(default_factory=dict)
    buildspec: str | None = None


class BuildInstance(BaseModel):
    """One execution attempt of a build project."""

    build_id: str
    status: BuildStatus | str
    started_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def in_progress(self) -> bool:
        return self.status == BuildStatus.IN_PROGRESS


class BuildOutcome(BaseModel):
    """Terminal outcome of a trigger invocation."""

    result: BuildResult
    build_id: str
    final_status: BuildStatus | str
    poll_count: int = 0
    elapsed_seconds: float = 0.0

    @property
    def succeeded(self) -> bool:
        return self.result == BuildResult.SUCCEEDED


def parse_status(raw: str) -> BuildStatus | str:
    """Map a raw service status onto :class:`BuildStatus`.

    Unknown values are returned unchanged so that callers still see them;
    they never equal ``IN_PROGRESS`` or ``SUCCEEDED`` and therefore end the
    wait as a failure.
    """
    try:
        return BuildStatus(raw)
    except ValueError:
        return raw
