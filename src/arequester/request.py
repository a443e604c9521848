r"""One-shot functional API.

``send_request`` opens a requester, sends a single request and closes
the requester again. It is convenient for scripts; applications sending
several requests should keep an ``AsyncRequester`` open instead so the
admission policy can coordinate them.
"""

from __future__ import annotations

__all__ = ["send_request"]

from typing import TYPE_CHECKING, Any

from arequester.client import AsyncRequester
from arequester.core.config import DEFAULT_TIMEOUT

if TYPE_CHECKING:
    import httpx

    from arequester.core.config import ClientPolicy
    from arequester.outcome import ExecutionOutcome
    from arequester.request_spec import RequestSpec
    from arequester.transport import Transport


async def send_request(
    spec: RequestSpec,
    payload: Any = None,
    *,
    policy: ClientPolicy | None = None,
    transport: Transport | None = None,
    timeout: float | httpx.Timeout = DEFAULT_TIMEOUT,
) -> ExecutionOutcome:
    """Send a single request.

    Args:
        spec: The request configuration.
        payload: The payload to send. Ignored for GET and HEAD.
        policy: Optional client policy. Only ``accept_status_codes`` and
            ``debug`` matter for a single request.
        transport: Optional transport. If ``None``, a new
            ``httpx.AsyncClient`` is created and closed after use.
        timeout: Maximum seconds to wait for the server response. Only
            used if ``transport`` is ``None``. Must be > 0.

    Returns:
        ``Success``, ``RejectedStatus`` or ``TransportFailure``.

    Raises:
        ConfigError: If the configuration cannot be assembled.

    Example:
        ```pycon
        >>> import asyncio
        >>> from arequester import RequestSpec, send_request
        >>> spec = RequestSpec(base_url="api.example.com", endpoint="health", protocol="https")
        >>> outcome = asyncio.run(send_request(spec))  # doctest: +SKIP

        ```
    """
    async with AsyncRequester(policy=policy, transport=transport, timeout=timeout) as requester:
        return await requester.send(spec, payload)
