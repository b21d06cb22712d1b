from __future__ import annotations

import asyncio

import pytest

from container_build.utils.async_helpers import run_sync


def test_run_sync_returns_value() -> None:
    """run_sync executes a coroutine and returns its result."""

    async def _coro() -> int:
        return 42

    assert run_sync(_coro()) == 42


def test_run_sync_propagates_exception() -> None:
    async def _boom() -> None:
        raise ValueError("oops")

    with pytest.raises(ValueError, match="oops"):
        run_sync(_boom())


async def test_run_sync_inside_running_loop() -> None:
    """Inside a running loop the coroutine runs on a separate thread's loop."""
    outer = asyncio.get_running_loop()

    async def _loop_id() -> int:
        return id(asyncio.get_running_loop())

    assert run_sync(_loop_id()) != id(outer)
