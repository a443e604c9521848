r"""Transport layer performing the actual HTTP call.

The executor talks to a transport through the ``Transport`` protocol so
the HTTP stack can be swapped out in tests. ``HttpxTransport`` is the
default implementation, built on ``httpx.AsyncClient``.
"""

from __future__ import annotations

__all__ = ["HttpxTransport", "Transport", "TransportResponse"]

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Protocol

import httpx

from arequester.exceptions import TransportError

if TYPE_CHECKING:
    from collections.abc import Mapping

    from arequester.cancellation import CancellationSource

logger: logging.Logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TransportResponse:
    """Raw response returned by a transport.

    Attributes:
        status: The HTTP status code.
        headers: The response headers.
        content_type: The value of the ``Content-Type`` header, or an
            empty string.
        body: The raw response body.
        reason: The reason phrase.
    """

    status: int
    headers: Mapping[str, str] = field(default_factory=dict)
    content_type: str = ""
    body: bytes = b""
    reason: str = ""


class Transport(Protocol):
    """Interface of the object that sends requests over the network."""

    async def perform(
        self,
        url: str,
        method: str,
        headers: Mapping[str, str],
        body: bytes | None,
        credentials_mode: str,
        cancel_signal: CancellationSource | None = None,
    ) -> TransportResponse:
        """Send one request.

        Raises:
            TransportError: If no response could be obtained.
        """


class HttpxTransport:
    r"""Transport implementation on top of ``httpx.AsyncClient``.

    With ``credentials_mode="include"`` the cookies stored in the client
    jar are sent. With ``"same-origin"`` they are left out, unless the
    caller set a ``Cookie`` header explicitly.

    Args:
        client: The httpx client used to send requests. It is not closed
            by the transport.

    Example:
        ```pycon
        >>> import asyncio
        >>> import httpx
        >>> from arequester.transport import HttpxTransport
        >>> async def main():  # doctest: +SKIP
        ...     async with httpx.AsyncClient(timeout=10.0) as client:
        ...         transport = HttpxTransport(client)
        ...         response = await transport.perform(
        ...             "https://api.example.com/data", "GET", {}, None, "same-origin"
        ...         )
        ...         return response.status
        ...
        >>> asyncio.run(main())  # doctest: +SKIP

        ```
    """

    def __init__(self, client: httpx.AsyncClient) -> None:
        self._client = client

    @property
    def client(self) -> httpx.AsyncClient:
        return self._client

    async def perform(
        self,
        url: str,
        method: str,
        headers: Mapping[str, str],
        body: bytes | None,
        credentials_mode: str,
        cancel_signal: CancellationSource | None = None,
    ) -> TransportResponse:
        if cancel_signal is not None:
            cancel_signal.raise_if_cancelled()
        try:
            request = self._client.build_request(method, url, headers=dict(headers), content=body)
        except (httpx.InvalidURL, UnicodeEncodeError) as exc:
            logger.debug(f"Could not build {method} request to {url}: {exc}")
            raise TransportError(
                f"{method} request to {url} could not be built: {exc}",
                url=url,
                method=method,
                cause=exc,
            ) from exc
        if credentials_mode != "include" and not _has_header(headers, "cookie"):
            request.headers.pop("cookie", None)
        try:
            response = await self._client.send(request)
        except httpx.TimeoutException as exc:
            logger.debug(f"{method} request to {url} timed out")
            raise TransportError(
                f"{method} request to {url} timed out", url=url, method=method, cause=exc
            ) from exc
        except httpx.HTTPError as exc:
            error_type = type(exc).__name__
            logger.debug(f"{method} request to {url} encountered {error_type}: {exc}")
            raise TransportError(
                f"{method} request to {url} failed: {exc}", url=url, method=method, cause=exc
            ) from exc
        return TransportResponse(
            status=response.status_code,
            headers=dict(response.headers),
            content_type=response.headers.get("content-type", ""),
            body=response.content,
            reason=response.reason_phrase,
        )


def _has_header(headers: Mapping[str, str], name: str) -> bool:
    return any(key.lower() == name for key in headers)
