from __future__ import annotations

import asyncio
import logging

import pytest

from arequester.handlers.queue import SequentialQueue

#####################################
#     Tests for SequentialQueue     #
#####################################


class Recorder:
    """Units of work that record how many of them run at the same
    time."""

    def __init__(self) -> None:
        self.active = 0
        self.max_active = 0
        self.started: list[int] = []
        self.finished: list[int] = []

    async def work(self, index: int, delay: float = 0.0) -> int:
        self.active += 1
        self.max_active = max(self.max_active, self.active)
        self.started.append(index)
        try:
            await asyncio.sleep(delay)
            return index
        finally:
            self.active -= 1
            self.finished.append(index)


def test_sequential_queue_initial_state() -> None:
    queue = SequentialQueue()
    assert queue.pending == 0
    assert not queue.is_busy
    assert repr(queue) == "SequentialQueue(pending=0, in_progress=False)"


@pytest.mark.asyncio
async def test_sequential_queue_single_unit() -> None:
    queue = SequentialQueue()
    future = queue.enqueue(lambda: asyncio.sleep(0, result="done"))
    assert await future == "done"
    await asyncio.sleep(0)
    assert not queue.is_busy


@pytest.mark.asyncio
async def test_sequential_queue_fifo_and_single_flight() -> None:
    queue = SequentialQueue()
    recorder = Recorder()
    # Later submissions finish faster, which would reorder them without the queue
    delays = [0.05, 0.03, 0.01, 0.0]
    futures = [
        queue.enqueue(lambda i=i, d=d: recorder.work(i, d)) for i, d in enumerate(delays)
    ]
    assert queue.is_busy
    assert queue.pending == 3

    results = await asyncio.gather(*futures)

    assert results == [0, 1, 2, 3]
    assert recorder.started == [0, 1, 2, 3]
    assert recorder.finished == [0, 1, 2, 3]
    assert recorder.max_active == 1


@pytest.mark.asyncio
async def test_sequential_queue_settles_in_submission_order() -> None:
    queue = SequentialQueue()
    recorder = Recorder()
    settled: list[int] = []

    async def submit(index: int) -> None:
        settled.append(await queue.enqueue(lambda: recorder.work(index, 0.01 * (5 - index))))

    await asyncio.gather(*(submit(i) for i in range(5)))

    assert settled == [0, 1, 2, 3, 4]
    assert recorder.max_active == 1


@pytest.mark.asyncio
async def test_sequential_queue_failure_does_not_stop_draining() -> None:
    queue = SequentialQueue()
    recorder = Recorder()

    async def fail() -> None:
        msg = "unit failed"
        raise RuntimeError(msg)

    first = queue.enqueue(lambda: recorder.work(0))
    second = queue.enqueue(fail)
    third = queue.enqueue(lambda: recorder.work(2))

    assert await first == 0
    with pytest.raises(RuntimeError, match=r"unit failed"):
        await second
    assert await third == 2
    assert recorder.finished == [0, 2]


@pytest.mark.asyncio
async def test_sequential_queue_unit_called_lazily() -> None:
    queue = SequentialQueue()
    gate = asyncio.Event()
    calls: list[str] = []

    async def blocked() -> str:
        calls.append("first")
        await gate.wait()
        return "first"

    def second_unit():
        calls.append("second")
        return asyncio.sleep(0, result="second")

    first = queue.enqueue(blocked)
    second = queue.enqueue(second_unit)
    await asyncio.sleep(0.01)
    assert calls == ["first"]

    gate.set()
    assert await asyncio.gather(first, second) == ["first", "second"]
    assert calls == ["first", "second"]


@pytest.mark.asyncio
async def test_sequential_queue_skips_cancelled_caller() -> None:
    queue = SequentialQueue()
    recorder = Recorder()
    gate = asyncio.Event()

    async def blocked() -> str:
        await gate.wait()
        return "first"

    first = queue.enqueue(blocked)
    second = queue.enqueue(lambda: recorder.work(1))
    third = queue.enqueue(lambda: recorder.work(2))
    second.cancel()
    gate.set()

    assert await first == "first"
    assert await third == 2
    assert recorder.started == [2]


@pytest.mark.asyncio
async def test_sequential_queue_each_unit_runs_once() -> None:
    queue = SequentialQueue()
    counts = dict.fromkeys(range(10), 0)

    async def unit(index: int) -> int:
        counts[index] += 1
        await asyncio.sleep(0)
        return index

    results = await asyncio.gather(*(queue.enqueue(lambda i=i: unit(i)) for i in range(10)))

    assert results == list(range(10))
    assert set(counts.values()) == {1}
    assert queue.pending == 0


@pytest.mark.asyncio
async def test_sequential_queue_logs_when_debug(caplog: pytest.LogCaptureFixture) -> None:
    queue = SequentialQueue(debug=True)
    with caplog.at_level(logging.DEBUG, logger="arequester.handlers.queue"):
        await queue.enqueue(lambda: asyncio.sleep(0))
    assert "Request enqueued at enqueue" in caplog.text
    assert "Processing request queue at process_queue" in caplog.text


@pytest.mark.asyncio
async def test_sequential_queue_silent_without_debug(caplog: pytest.LogCaptureFixture) -> None:
    queue = SequentialQueue()
    with caplog.at_level(logging.DEBUG, logger="arequester.handlers.queue"):
        await queue.enqueue(lambda: asyncio.sleep(0))
    assert [r for r in caplog.records if r.name.startswith("arequester")] == []
