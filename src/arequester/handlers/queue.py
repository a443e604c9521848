r"""Sequential request queue used in ``enqueue-new`` mode.

The queue runs the units of work submitted to it one at a time, in
submission order. A failing unit only fails its own caller; the queue
keeps draining.
"""

from __future__ import annotations

__all__ = ["QueueEntry", "SequentialQueue"]

import asyncio
from collections import deque
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from arequester.utils.diagnostics import DiagnosticLogger

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable


@dataclass
class QueueEntry:
    """A unit of work waiting in the queue.

    Attributes:
        unit_of_work: Zero-argument callable returning the awaitable to
            run.
        future: Settled with the result or the exception of the unit of
            work.
    """

    unit_of_work: Callable[[], Awaitable[Any]]
    future: asyncio.Future[Any]


class SequentialQueue:
    """FIFO coordinator with at most one unit of work in flight.

    All state is touched from the event loop only, between suspension
    points, so no lock is needed.

    Args:
        debug: If ``True``, queue activity is logged.

    Example:
        ```pycon
        >>> import asyncio
        >>> from arequester.handlers.queue import SequentialQueue
        >>> async def main():
        ...     queue = SequentialQueue()
        ...     async def work(value):
        ...         await asyncio.sleep(0)
        ...         return value
        ...     futures = [queue.enqueue(lambda v=v: work(v)) for v in range(3)]
        ...     return await asyncio.gather(*futures)
        ...
        >>> asyncio.run(main())
        [0, 1, 2]

        ```
    """

    def __init__(self, *, debug: bool = False) -> None:
        self._entries: deque[QueueEntry] = deque()
        self._in_progress = False
        self._task: asyncio.Task[None] | None = None
        self._diagnostics = DiagnosticLogger(__name__, enabled=debug)

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__qualname__}(pending={len(self._entries)}, "
            f"in_progress={self._in_progress})"
        )

    @property
    def pending(self) -> int:
        """Number of entries waiting to run."""
        return len(self._entries)

    @property
    def is_busy(self) -> bool:
        """``True`` while a unit of work is running."""
        return self._in_progress

    def enqueue(self, unit_of_work: Callable[[], Awaitable[Any]]) -> asyncio.Future[Any]:
        """Submit a unit of work.

        Must be called from a running event loop.

        Args:
            unit_of_work: Zero-argument callable returning the awaitable
                to run. It is called only when the entry reaches the head
                of the queue.

        Returns:
            A future settled with the outcome of the unit of work.
        """
        future = asyncio.get_running_loop().create_future()
        self._entries.append(QueueEntry(unit_of_work=unit_of_work, future=future))
        self._diagnostics.debug("enqueue", "Request enqueued", pending=len(self._entries))
        self._advance()
        return future

    def _advance(self) -> None:
        if self._in_progress or not self._entries:
            return
        entry = self._entries.popleft()
        self._in_progress = True
        self._task = asyncio.ensure_future(self._run(entry))

    async def _run(self, entry: QueueEntry) -> None:
        try:
            if entry.future.cancelled():
                self._diagnostics.debug("process_queue", "Skipped request cancelled by its caller")
                return
            self._diagnostics.debug("process_queue", "Processing request queue")
            try:
                result = await entry.unit_of_work()
            except asyncio.CancelledError:
                entry.future.cancel()
                raise
            except Exception as exc:
                if not entry.future.done():
                    entry.future.set_exception(exc)
            else:
                if not entry.future.done():
                    entry.future.set_result(result)
        finally:
            self._in_progress = False
            self._advance()
