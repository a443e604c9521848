from __future__ import annotations

import asyncio

import pytest

from arequester import RequestCancelledError, TransportError
from arequester.cancellation import CancellationSource, run_cancellable

########################################
#     Tests for CancellationSource     #
########################################


def test_cancellation_source_initial_state() -> None:
    source = CancellationSource("https://api.example.com/data")
    assert not source.cancelled
    assert source.reason is None
    source.raise_if_cancelled()


def test_cancellation_source_cancel() -> None:
    source = CancellationSource("https://api.example.com/data")
    source.cancel("superseded")
    assert source.cancelled
    assert source.reason == "superseded"
    with pytest.raises(RequestCancelledError, match=r"superseded") as exc_info:
        source.raise_if_cancelled()
    assert exc_info.value.url == "https://api.example.com/data"


def test_cancellation_source_cancel_twice_keeps_first_reason() -> None:
    source = CancellationSource()
    source.cancel("first")
    source.cancel("second")
    assert source.reason == "first"


def test_cancellation_source_repr() -> None:
    assert repr(CancellationSource("u")) == "CancellationSource(url='u', cancelled=False)"


@pytest.mark.asyncio
async def test_cancellation_source_wait_after_cancel() -> None:
    source = CancellationSource()
    source.cancel()
    await asyncio.wait_for(source.wait(), timeout=1.0)


@pytest.mark.asyncio
async def test_cancellation_source_wait_wakes_up() -> None:
    source = CancellationSource()
    waiter = asyncio.ensure_future(source.wait())
    await asyncio.sleep(0)
    assert not waiter.done()
    source.cancel()
    await asyncio.wait_for(waiter, timeout=1.0)


#####################################
#     Tests for run_cancellable     #
#####################################


async def _value(value: int) -> int:
    await asyncio.sleep(0)
    return value


@pytest.mark.asyncio
async def test_run_cancellable_without_source() -> None:
    assert await run_cancellable(_value(1), None) == 1


@pytest.mark.asyncio
async def test_run_cancellable_returns_result() -> None:
    assert await run_cancellable(_value(2), CancellationSource()) == 2


@pytest.mark.asyncio
async def test_run_cancellable_propagates_error() -> None:
    async def fail() -> None:
        msg = "boom"
        raise TransportError(msg)

    with pytest.raises(TransportError, match=r"boom"):
        await run_cancellable(fail(), CancellationSource())


@pytest.mark.asyncio
async def test_run_cancellable_already_cancelled() -> None:
    source = CancellationSource()
    source.cancel("too late")
    coro = _value(3)
    with pytest.raises(RequestCancelledError, match=r"too late"):
        await run_cancellable(coro, source)
    assert coro.cr_frame is None


@pytest.mark.asyncio
async def test_run_cancellable_cancel_while_pending() -> None:
    source = CancellationSource()
    started = asyncio.Event()
    finished = False

    async def slow() -> int:
        nonlocal finished
        started.set()
        await asyncio.sleep(10)
        finished = True
        return 4

    task = asyncio.ensure_future(run_cancellable(slow(), source))
    await started.wait()
    source.cancel("superseded")
    with pytest.raises(RequestCancelledError, match=r"superseded"):
        await asyncio.wait_for(task, timeout=1.0)
    assert not finished


@pytest.mark.asyncio
async def test_run_cancellable_cancellation_wins_over_late_error() -> None:
    source = CancellationSource()

    async def fail_after_cancel() -> None:
        source.cancel("superseded")
        msg = "late failure"
        raise TransportError(msg)

    with pytest.raises(RequestCancelledError, match=r"superseded"):
        await run_cancellable(fail_after_cancel(), source)
