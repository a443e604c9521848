r"""Supersession tracker used in ``abort-previous`` mode.

The tracker maps a canonical URL to the cancellation source of the
request currently pending for that URL. Registering a new request for a
URL cancels the previous one.
"""

from __future__ import annotations

__all__ = ["SupersessionTracker"]

import threading
from typing import TYPE_CHECKING

from arequester.utils.diagnostics import DiagnosticLogger

if TYPE_CHECKING:
    from arequester.cancellation import CancellationSource


class SupersessionTracker:
    """Registry holding at most one live cancellation source per URL.

    Thread-safe implementation using a lock. On a single event loop the
    lock is never contended.

    Args:
        debug: If ``True``, tracker activity is logged.

    Example:
        ```pycon
        >>> from arequester.cancellation import CancellationSource
        >>> from arequester.handlers.supersession import SupersessionTracker
        >>> tracker = SupersessionTracker()
        >>> first = CancellationSource()
        >>> tracker.register("https://api.example.com/data", first)
        >>> tracker.register("https://api.example.com/data", CancellationSource())
        >>> first.cancelled
        True
        >>> len(tracker)
        1

        ```
    """

    def __init__(self, *, debug: bool = False) -> None:
        self._sources: dict[str, CancellationSource] = {}
        self._lock = threading.Lock()
        self._diagnostics = DiagnosticLogger(__name__, enabled=debug)

    def __contains__(self, url: object) -> bool:
        with self._lock:
            return url in self._sources

    def __len__(self) -> int:
        with self._lock:
            return len(self._sources)

    def __repr__(self) -> str:
        with self._lock:
            urls = sorted(self._sources)
        return f"{self.__class__.__qualname__}(urls={urls})"

    def get(self, url: str) -> CancellationSource | None:
        with self._lock:
            return self._sources.get(url)

    def register(self, url: str, source: CancellationSource) -> None:
        """Register the cancellation source of a new request.

        If a request is already pending for ``url``, its source is
        cancelled before the new source is stored.

        Args:
            url: The canonical URL of the request.
            source: The cancellation source of the new request.
        """
        with self._lock:
            previous = self._sources.get(url)
            self._sources[url] = source
        if previous is not None and previous is not source:
            self._diagnostics.debug(
                "register",
                "Aborted previous request superseded by a new request",
                url=url,
            )
            previous.cancel(f"request to {url} was superseded by a newer request")

    def release(self, url: str, source: CancellationSource | None = None) -> None:
        """Remove the mapping for ``url``.

        Args:
            url: The canonical URL of the request.
            source: If given, the mapping is removed only when it still
                points at this source, so a superseded request never
                removes the source of the request that replaced it.
        """
        with self._lock:
            current = self._sources.get(url)
            if current is None or (source is not None and current is not source):
                return
            del self._sources[url]
        self._diagnostics.debug("release", "Released request tracker entry", url=url)
