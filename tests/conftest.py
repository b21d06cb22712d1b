"""Shared test fixtures."""
from __future__ import annotations

import pytest

from container_build.core.config import TriggerConfig
from container_build.service.mock import MockBuildService
from container_build.trigger.runner import BuildTrigger


class FakeClock:
    """Monotonic clock that only advances when the trigger sleeps."""

    def __init__(self) -> None:
        self.now = 0.0
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def mock_service() -> MockBuildService:
    return MockBuildService()


@pytest.fixture
def make_trigger(clock: FakeClock):  # type: ignore[no-untyped-def]
    def _make(service: MockBuildService, **config: object) -> BuildTrigger:
        return BuildTrigger(
            service, TriggerConfig(**config), sleep=clock.sleep, clock=clock
        )

    return _make
