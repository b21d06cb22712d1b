"""container-build: start a CodeBuild container build and wait for its result."""

from container_build.__version__ import __version__
from container_build.buildspec.renderer import build_request, buildspec_yaml, render_buildspec
from container_build.core.config import RegistryConfig, TriggerConfig
from container_build.core.constants import (
    BuildResult,
    BuildStatus,
    RequestType,
    ResponseStatus,
)
from container_build.core.exceptions import (
    BuildFailedError,
    BuildTimeoutError,
    ConfigurationError,
    ContainerBuildError,
    ResponseDeliveryError,
    ServiceCallError,
    ServiceConnectionError,
    ThrottlingError,
)
from container_build.core.types import BuildInstance, BuildOutcome, BuildRequest
from container_build.custom_resource.handler import CustomResourceHandler, lambda_handler
from container_build.resilience.retry import RetryPolicy
from container_build.service.base import BuildService, BuildServiceProtocol
from container_build.service.codebuild import CodeBuildService
from container_build.service.mock import MockBuildService
from container_build.trigger.runner import BuildTrigger
from container_build.utils.logging import bind_lambda_context, configure_logging, get_logger

__all__ = [
    "__version__",
    "BuildFailedError",
    "BuildInstance",
    "BuildOutcome",
    "BuildRequest",
    "BuildResult",
    "BuildService",
    "BuildServiceProtocol",
    "BuildStatus",
    "BuildTimeoutError",
    "BuildTrigger",
    "CodeBuildService",
    "ConfigurationError",
    "ContainerBuildError",
    "CustomResourceHandler",
    "MockBuildService",
    "RegistryConfig",
    "RequestType",
    "ResponseDeliveryError",
    "ResponseStatus",
    "RetryPolicy",
    "ServiceCallError",
    "ServiceConnectionError",
    "ThrottlingError",
    "TriggerConfig",
    "bind_lambda_context",
    "build_request",
    "buildspec_yaml",
    "configure_logging",
    "get_logger",
    "lambda_handler",
    "render_buildspec",
]
