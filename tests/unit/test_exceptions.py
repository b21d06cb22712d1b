"""Tests for core/exceptions.py."""
from __future__ import annotations

import pytest

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


def test_base_exception_message() -> None:
    exc = ContainerBuildError("something went wrong")
    assert str(exc) == "something went wrong"


def test_base_exception_defaults() -> None:
    exc = ContainerBuildError("msg")
    assert exc.code is None
    assert exc.details == {}
    assert exc.status_code is None
    assert exc.retry_after is None
    assert exc.is_retryable is False


def test_base_exception_with_code_and_details() -> None:
    exc = ContainerBuildError(
        "msg", code="ResourceNotFoundException", details={"operation": "StartBuild"}, status_code=400
    )
    assert exc.code == "ResourceNotFoundException"
    assert exc.details == {"operation": "StartBuild"}
    assert exc.status_code == 400


@pytest.mark.parametrize(
    "exc_cls",
    [
        ConfigurationError,
        ServiceCallError,
        BuildFailedError,
        BuildTimeoutError,
        ResponseDeliveryError,
    ],
)
def test_subclasses_not_retryable(exc_cls: type[ContainerBuildError]) -> None:
    exc = exc_cls("msg")
    assert isinstance(exc, ContainerBuildError)
    assert exc.is_retryable is False


@pytest.mark.parametrize("exc_cls", [ThrottlingError, ServiceConnectionError])
def test_transient_service_errors_retryable(exc_cls: type[ServiceCallError]) -> None:
    exc = exc_cls("msg")
    assert isinstance(exc, ServiceCallError)
    assert exc.is_retryable is True


def test_can_be_caught_as_base() -> None:
    with pytest.raises(ContainerBuildError):
        raise BuildFailedError("build abc finished with status FAILED")
