from __future__ import annotations

from typing import Any


class ContainerBuildError(Exception):
    """Base exception for all container-build errors.

    Attributes:
        code: Optional machine-readable error code (e.g. the AWS error code
            ``"ResourceNotFoundException"``).
        details: Arbitrary key/value context about the error.
        status_code: HTTP status code when the error originates from a
            service response (``None`` when not applicable).
        retry_after: Suggested delay in seconds before retrying the
            operation (``None`` when unknown or not applicable).
    """

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
        *,
        status_code: int | None = None,
        retry_after: float | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.details = details or {}
        self.status_code = status_code
        self.retry_after = retry_after

    @property
    def is_retryable(self) -> bool:
        """Whether the operation that raised this error can be retried."""
        return False


class ConfigurationError(ContainerBuildError): ...


class ServiceCallError(ContainerBuildError):
    """A start-build or status-poll call to the build service failed."""


class BuildFailedError(ContainerBuildError):
    """The build reached a terminal status other than ``SUCCEEDED``."""


class BuildTimeoutError(ContainerBuildError):
    """The build was still in progress when ``max_wait`` ran out.

    The build itself is left running; only the wait is abandoned.
    """


class ResponseDeliveryError(ContainerBuildError):
    """The custom resource acknowledgment could not be delivered."""


# ---------------------------------------------------------------------------
# Retryable specialisations
# ---------------------------------------------------------------------------


class ThrottlingError(ServiceCallError):
    """The build service rejected the call because of a request rate limit.

    Always retryable.
    """

    @property
    def is_retryable(self) -> bool:  # noqa: D102
        return True


class ServiceConnectionError(ServiceCallError):
    """A transport-level failure reaching the build service (DNS, TCP, TLS).

    Always retryable, transient network issues are common.
    """

    @property
    def is_retryable(self) -> bool:  # noqa: D102
        return True
