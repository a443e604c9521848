r"""Shared test helpers for requester tests.

This module contains a scriptable in-memory transport and small
factories for transport responses, so tests never touch the network.
"""

from __future__ import annotations

__all__ = [
    "TEST_HOST",
    "TEST_URL",
    "FakeTransport",
    "json_response",
    "text_response",
]

import asyncio
import json
from typing import TYPE_CHECKING, Any

from arequester.transport import TransportResponse

if TYPE_CHECKING:
    from collections.abc import Mapping

    from arequester.cancellation import CancellationSource

TEST_HOST = "api.example.com"
TEST_URL = "https://api.example.com/data"


def json_response(status: int = 200, data: Any = None, reason: str = "OK") -> TransportResponse:
    """Create a transport response with a JSON body."""
    return TransportResponse(
        status=status,
        headers={"content-type": "application/json"},
        content_type="application/json",
        body=json.dumps({} if data is None else data).encode(),
        reason=reason,
    )


def text_response(status: int = 200, text: str = "", reason: str = "OK") -> TransportResponse:
    """Create a transport response with a plain text body."""
    return TransportResponse(
        status=status,
        headers={"content-type": "text/plain; charset=utf-8"},
        content_type="text/plain; charset=utf-8",
        body=text.encode(),
        reason=reason,
    )


class FakeTransport:
    """In-memory transport recording every call.

    Args:
        responses: Response per URL. A value can be a ``TransportResponse``,
            an exception instance to raise, or a callable receiving the
            call number and returning one of those.
        default: Response used for URLs without an entry.

    Attributes:
        calls: Keyword arguments of every call, in call order.
        gates: Optional ``asyncio.Event`` per URL; calls to that URL wait
            until the event is set.
        active: Number of calls currently in progress.
        max_active: Highest value reached by ``active``.
        events: ``("start", url)`` and ``("end", url)`` markers.
    """

    def __init__(
        self,
        responses: Mapping[str, Any] | None = None,
        default: TransportResponse | None = None,
    ) -> None:
        self.responses = dict(responses or {})
        self.default = default if default is not None else json_response()
        self.calls: list[dict[str, Any]] = []
        self.gates: dict[str, asyncio.Event] = {}
        self.active = 0
        self.max_active = 0
        self.events: list[tuple[str, str]] = []

    def gate(self, url: str) -> asyncio.Event:
        """Make calls to ``url`` wait until the returned event is set."""
        event = asyncio.Event()
        self.gates[url] = event
        return event

    async def perform(
        self,
        url: str,
        method: str,
        headers: Mapping[str, str],
        body: bytes | None,
        credentials_mode: str,
        cancel_signal: CancellationSource | None = None,
    ) -> TransportResponse:
        self.calls.append(
            {
                "url": url,
                "method": method,
                "headers": dict(headers),
                "body": body,
                "credentials_mode": credentials_mode,
                "cancel_signal": cancel_signal,
            }
        )
        number = len(self.calls)
        self.active += 1
        self.max_active = max(self.max_active, self.active)
        self.events.append(("start", url))
        try:
            gate = self.gates.get(url)
            if gate is not None:
                await gate.wait()
            else:
                await asyncio.sleep(0)
            result = self.responses.get(url, self.default)
            if callable(result) and not isinstance(result, TransportResponse):
                result = result(number)
            if isinstance(result, BaseException):
                raise result
            return result
        finally:
            self.active -= 1
            self.events.append(("end", url))