r"""Asynchronous context manager client for configured HTTP requests.

This module provides ``AsyncRequester``, the entry point of the
library. A requester is created with a ``ClientPolicy`` that decides how
concurrent requests are admitted, and hands out ``ConfiguredRequest``
objects that can be sent any number of times. The requester manages the
lifecycle of the underlying ``httpx.AsyncClient`` unless a transport is
injected.
"""

from __future__ import annotations

__all__ = ["AsyncRequester", "ConfiguredRequest"]

import logging
from typing import TYPE_CHECKING, Any

import httpx

from arequester.core.config import DEFAULT_TIMEOUT, ClientPolicy
from arequester.core.validation import validate_timeout
from arequester.executor import RequestExecutor
from arequester.request_spec import RequestSpec
from arequester.transport import HttpxTransport

if TYPE_CHECKING:
    from types import TracebackType
    from typing import Self

    from arequester.outcome import ExecutionOutcome
    from arequester.transport import Transport

logger: logging.Logger = logging.getLogger(__name__)


class ConfiguredRequest:
    """A request configuration bound to a requester.

    Instances are created by ``AsyncRequester.configure``.

    Args:
        spec: The request configuration.
        requester: The requester that sends the request.
    """

    def __init__(self, spec: RequestSpec, requester: AsyncRequester) -> None:
        self._spec = spec
        self._requester = requester

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__qualname__}(method={self._spec.method!r}, "
            f"base_url={self._spec.base_url!r})"
        )

    @property
    def spec(self) -> RequestSpec:
        return self._spec

    async def send(self, payload: Any = None) -> ExecutionOutcome:
        """Send the request with the given payload.

        Args:
            payload: The payload to send. Ignored for GET and HEAD.

        Returns:
            ``Success``, ``RejectedStatus`` or ``TransportFailure``.

        Raises:
            ConfigError: If the configuration cannot be assembled.
            RuntimeError: If the requester is not open.
        """
        return await self._requester.send(self._spec, payload)


class AsyncRequester:
    r"""Asynchronous context manager for configured HTTP requests.

    Every request sent through a requester is admitted according to its
    policy:

    - ``enqueue-new`` (default): requests run one at a time in
      submission order
    - ``abort-previous``: a new request cancels the pending request for
      the same URL, requests to different URLs run in parallel

    Args:
        policy: The client policy. If ``None``, a default
            ``ClientPolicy`` is used.
        transport: Optional transport. If ``None``, an ``HttpxTransport``
            backed by a new ``httpx.AsyncClient`` is opened when entering
            the context and closed when leaving it.
        timeout: Maximum seconds to wait for server responses. Only used
            when no transport is given. Must be > 0.

    Example:
        ```pycon
        >>> import asyncio
        >>> from arequester import AsyncRequester, ClientPolicy
        >>> async def main():  # doctest: +SKIP
        ...     policy = ClientPolicy(admission_mode="abort-previous")
        ...     async with AsyncRequester(policy=policy) as requester:
        ...         login = requester.configure(
        ...             base_url="api.example.com",
        ...             protocol="https",
        ...             endpoint={"route": "user", "controller": "login"},
        ...             method="POST",
        ...         )
        ...         outcome = await login.send({"user": "ada", "password": "secret"})
        ...         return outcome.to_result()
        ...
        >>> asyncio.run(main())  # doctest: +SKIP

        ```
    """

    def __init__(
        self,
        *,
        policy: ClientPolicy | None = None,
        transport: Transport | None = None,
        timeout: float | httpx.Timeout = DEFAULT_TIMEOUT,
    ) -> None:
        validate_timeout(timeout)
        self._timeout = timeout
        self._policy = policy if policy is not None else ClientPolicy()
        self._transport = transport
        self._client: httpx.AsyncClient | None = None
        self._executor: RequestExecutor | None = None
        self._entered = False

    @property
    def policy(self) -> ClientPolicy:
        return self._policy

    async def __aenter__(self) -> Self:
        """Enter the async context manager and open the transport.

        Returns:
            The AsyncRequester instance for making requests.
        """
        transport = self._transport
        if transport is None:
            self._client = httpx.AsyncClient(timeout=self._timeout)
            transport = HttpxTransport(self._client)
        self._executor = RequestExecutor(self._policy, transport)
        self._entered = True
        if self._policy.debug:
            logger.debug(
                f"AsyncRequester is initialized with admission mode "
                f"{self._policy.admission_mode.value!r}"
            )
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Exit the async context manager and close the owned httpx
        client.

        Args:
            exc_type: Exception type if an exception occurred.
            exc_val: Exception value if an exception occurred.
            exc_tb: Exception traceback if an exception occurred.
        """
        if self._client is not None:
            await self._client.aclose()
            self._client = None
        self._executor = None
        self._entered = False

    def _ensure_executor(self) -> RequestExecutor:
        """Ensure the requester is open.

        Returns:
            The RequestExecutor of the requester.

        Raises:
            RuntimeError: If the requester is used outside of a context
                manager.
        """
        if not self._entered or self._executor is None:
            msg = "AsyncRequester must be used within an async context manager (async with statement)"
            raise RuntimeError(msg)
        return self._executor

    def configure(self, spec: RequestSpec | None = None, **fields: Any) -> ConfiguredRequest:
        """Bind a request configuration to this requester.

        Args:
            spec: A ready-made request configuration.
            **fields: ``RequestSpec`` fields used to build the
                configuration when ``spec`` is ``None``.

        Returns:
            The configured request.

        Raises:
            ConfigError: If the fields are invalid.
            TypeError: If both ``spec`` and ``fields`` are given.

        Example:
            ```pycon
            >>> from arequester import AsyncRequester
            >>> requester = AsyncRequester()
            >>> request = requester.configure(base_url="api.example.com", endpoint="users")
            >>> request.spec.method
            'GET'

            ```
        """
        if spec is not None and fields:
            msg = "configure() takes either a RequestSpec or keyword fields, not both"
            raise TypeError(msg)
        if spec is None:
            spec = RequestSpec(**fields)
        if self._policy.debug:
            logger.debug("Request config set up")
        return ConfiguredRequest(spec, self)

    async def send(self, spec: RequestSpec, payload: Any = None) -> ExecutionOutcome:
        """Send a request.

        Args:
            spec: The request configuration.
            payload: The payload to send. Ignored for GET and HEAD.

        Returns:
            ``Success``, ``RejectedStatus`` or ``TransportFailure``.

        Raises:
            ConfigError: If the configuration cannot be assembled.
            RuntimeError: If called outside of a context manager.
        """
        executor = self._ensure_executor()
        return await executor.execute(spec, payload)
