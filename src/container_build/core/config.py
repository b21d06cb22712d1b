from __future__ import annotations

import os
from typing import Any, Literal

from pydantic import BaseModel, Field

from container_build.core.constants import DEFAULT_POLL_INTERVAL
from container_build.resilience.retry import RetryPolicy


class TriggerConfig(BaseModel):
    poll_interval: float = Field(default=DEFAULT_POLL_INTERVAL, gt=0)
    max_wait: float | None = Field(default=None, gt=0)
    """Optional bound on the total wait; ``None`` leaves it to the host timeout."""
    region: str | None = None
    poll_retry_policy: RetryPolicy | None = None
    """Optional retry policy for status polls. The start call is never retried."""
    raise_on_failure: bool = False
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_json: bool = True

    @classmethod
    def from_env(cls) -> TriggerConfig:
        """Create a :class:`TriggerConfig` from environment variables.

        Reads the following env vars (all optional):

        * ``CONTAINER_BUILD_POLL_INTERVAL`` → ``poll_interval`` (seconds)
        * ``CONTAINER_BUILD_MAX_WAIT`` → ``max_wait`` (seconds)
        * ``AWS_REGION`` → ``region``
        * ``CONTAINER_BUILD_LOG_LEVEL`` → ``log_level``
        * ``CONTAINER_BUILD_LOG_JSON`` → ``log_json`` (``0``/``false`` disables)

        Any variable that is not set or is empty is left at its default value.
        """
        kwargs: dict[str, Any] = {}

        interval = os.environ.get("CONTAINER_BUILD_POLL_INTERVAL")
        if interval:
            kwargs["poll_interval"] = float(interval)

        max_wait = os.environ.get("CONTAINER_BUILD_MAX_WAIT")
        if max_wait:
            kwargs["max_wait"] = float(max_wait)

        region = os.environ.get("AWS_REGION")
        if region:
            kwargs["region"] = region

        log_level = os.environ.get("CONTAINER_BUILD_LOG_LEVEL")
        if log_level:
            kwargs["log_level"] = log_level.upper()

        log_json = os.environ.get("CONTAINER_BUILD_LOG_JSON")
        if log_json:
            kwargs["log_json"] = log_json.lower() not in ("0", "false", "no")

        return cls(**kwargs)


class RegistryConfig(BaseModel):
    """Addressing for the image registry and source checkout of one container.

    Replaces the shell variables the build used to derive at runtime
    (``AWS_ACCOUNT_ID``, ``REGISTRY``) with explicit values.
    """

    account_id: str = Field(..., pattern=r"^\d{12}$")
    region: str = Field(..., min_length=1)
    container_name: str = Field(..., pattern=r"^[a-z0-9][a-z0-9._/-]*$")
    branch: str = "master"
    project_path: str = "."

    @property
    def registry(self) -> str:
        return f"{self.account_id}.dkr.ecr.{self.region}.amazonaws.com"

    @property
    def image_uri(self) -> str:
        return f"{self.registry}/{self.container_name}"

    def to_environment(self) -> dict[str, str]:
        """Environment variable overrides handed to the build."""
        return {
            "AWS_ACCOUNT_ID": self.account_id,
            "REGISTRY": self.registry,
            "CONTAINER_NAME": self.container_name,
            "PROJECT_BRANCH": self.branch,
            "PROJECT_PATH": self.project_path,
        }
