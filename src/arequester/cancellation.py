r"""Cancellation handles for superseded requests.

A ``CancellationSource`` is created for every request issued in
``abort-previous`` mode. The supersession tracker cancels it when a
newer request targets the same URL, and ``run_cancellable`` makes the
pending transport call end with ``RequestCancelledError`` as soon as
that happens, whether or not the transport itself watches the signal.
"""

from __future__ import annotations

__all__ = ["CancellationSource", "run_cancellable"]

import asyncio
import inspect
import logging
from typing import TYPE_CHECKING, TypeVar

from arequester.exceptions import RequestCancelledError

if TYPE_CHECKING:
    from collections.abc import Awaitable

T = TypeVar("T")

logger: logging.Logger = logging.getLogger(__name__)


class CancellationSource:
    """Best-effort abort signal for one request.

    The signal can be cancelled before the request loop is running; the
    underlying ``asyncio.Event`` is created lazily on first wait.

    Args:
        url: The URL of the request the source belongs to. Only used in
            messages.

    Example:
        ```pycon
        >>> from arequester.cancellation import CancellationSource
        >>> source = CancellationSource("https://api.example.com/data")
        >>> source.cancelled
        False
        >>> source.cancel("superseded")
        >>> source.cancelled, source.reason
        (True, 'superseded')

        ```
    """

    def __init__(self, url: str | None = None) -> None:
        self.url = url
        self._cancelled = False
        self._reason: str | None = None
        self._event: asyncio.Event | None = None

    def __repr__(self) -> str:
        return f"{self.__class__.__qualname__}(url={self.url!r}, cancelled={self._cancelled})"

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def reason(self) -> str | None:
        return self._reason

    def cancel(self, reason: str = "request cancelled") -> None:
        """Cancel the signal. Calling it again has no effect."""
        if self._cancelled:
            return
        self._cancelled = True
        self._reason = reason
        if self._event is not None:
            self._event.set()

    async def wait(self) -> None:
        """Wait until the signal is cancelled."""
        if self._event is None:
            self._event = asyncio.Event()
            if self._cancelled:
                self._event.set()
        await self._event.wait()

    def raise_if_cancelled(self) -> None:
        """Raise ``RequestCancelledError`` if the signal is cancelled."""
        if self._cancelled:
            raise RequestCancelledError(self._reason or "request cancelled", url=self.url)


async def run_cancellable(awaitable: Awaitable[T], source: CancellationSource | None) -> T:
    """Await ``awaitable`` unless ``source`` is cancelled first.

    When the source is cancelled, the task running ``awaitable`` is
    cancelled and ``RequestCancelledError`` is raised.

    Args:
        awaitable: The awaitable to run, typically a transport call.
        source: The cancellation source. If ``None``, ``awaitable`` is
            simply awaited.

    Returns:
        The result of ``awaitable``.

    Raises:
        RequestCancelledError: If ``source`` was cancelled before
            ``awaitable`` completed.
    """
    if source is None:
        return await awaitable
    if source.cancelled:
        if inspect.iscoroutine(awaitable):
            awaitable.close()
        source.raise_if_cancelled()
    work = asyncio.ensure_future(awaitable)
    watcher = asyncio.ensure_future(source.wait())
    try:
        await asyncio.wait({work, watcher}, return_when=asyncio.FIRST_COMPLETED)
    finally:
        if not watcher.done():
            watcher.cancel()
        if not work.done():
            work.cancel()
    if source.cancelled:
        await _discard(work)
        source.raise_if_cancelled()
    return work.result()


async def _discard(work: asyncio.Future) -> None:
    # The outcome of superseded work is dropped, including its errors
    try:
        await work
    except asyncio.CancelledError:
        pass
    except Exception:  # noqa: BLE001
        logger.debug("Superseded request ended with an error", exc_info=True)
