r"""arequester - Declarative asynchronous HTTP requests with admission
control.

This package sends HTTP requests described by a declarative
configuration (URL parts, method, headers, auth and payload) and
returns a classified outcome instead of raising on negative results.
Each client enforces one of two admission policies for concurrent
requests.

Key Features:
    - URL assembly from a host, optional port, string or mapping endpoint
      and query parameters
    - Header assembly with Content-Type default, bearer token and
      Accept-Language
    - ``enqueue-new`` mode: strictly sequential, first-in first-out requests
    - ``abort-previous`` mode: a newer request for a URL cancels the
      pending one
    - Configurable accepted status codes on top of 200-206
    - Outcomes as values: ``Success``, ``RejectedStatus``, ``TransportFailure``
    - Built on the httpx library

Example:
    ```pycon
    >>> import asyncio
    >>> from arequester import AsyncRequester, ClientPolicy
    >>> async def main():  # doctest: +SKIP
    ...     async with AsyncRequester(policy=ClientPolicy(accept_status_codes=(422,))) as requester:
    ...         users = requester.configure(base_url="api.example.com", endpoint="users")
    ...         outcome = await users.send()
    ...         print(outcome.to_result())
    ...
    >>> asyncio.run(main())  # doctest: +SKIP

    ```
"""

from __future__ import annotations

__all__ = [
    "AdmissionMode",
    "AsyncRequester",
    "ClientPolicy",
    "ConfigError",
    "ConfiguredRequest",
    "InvalidEndpointValueError",
    "RejectedStatus",
    "RequestCancelledError",
    "RequestSpec",
    "Success",
    "TransportError",
    "TransportFailure",
    "__version__",
    "send_request",
]

from importlib.metadata import PackageNotFoundError, version

from arequester.client import AsyncRequester, ConfiguredRequest
from arequester.core.config import AdmissionMode, ClientPolicy
from arequester.exceptions import (
    ConfigError,
    InvalidEndpointValueError,
    RequestCancelledError,
    TransportError,
)
from arequester.outcome import RejectedStatus, Success, TransportFailure
from arequester.request import send_request
from arequester.request_spec import RequestSpec

try:
    __version__ = version(__name__)
except PackageNotFoundError:  # pragma: no cover
    # Package is not installed, fallback if needed
    __version__ = "0.0.0"
