r"""Request executor coordinating admission, transport and outcome
classification.

The executor assembles the URL, headers and body of a request, admits
it according to the client policy and turns whatever happens next into
an ``ExecutionOutcome``:

- ``enqueue-new``: the run is submitted to the ``SequentialQueue``
- ``abort-previous``: the run starts immediately and registers a
  ``CancellationSource`` in the ``SupersessionTracker``

Configuration errors are raised before any network activity. Every
later failure is returned as an outcome value.
"""

from __future__ import annotations

__all__ = ["PreparedRequest", "RequestExecutor"]

import json
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from arequester.assembler import assemble_headers, assemble_url, serialize_payload
from arequester.cancellation import CancellationSource, run_cancellable
from arequester.core.config import AdmissionMode
from arequester.exceptions import TransportError
from arequester.handlers.queue import SequentialQueue
from arequester.handlers.supersession import SupersessionTracker
from arequester.outcome import RejectedStatus, Success, TransportFailure
from arequester.utils.diagnostics import DiagnosticLogger, new_request_id, reset_request_id

if TYPE_CHECKING:
    from collections.abc import Mapping

    from arequester.core.config import ClientPolicy
    from arequester.outcome import ExecutionOutcome
    from arequester.request_spec import RequestSpec
    from arequester.transport import Transport, TransportResponse


@dataclass(frozen=True)
class PreparedRequest:
    """Wire values of a request, ready to be sent.

    Attributes:
        url: The canonical URL. Also the supersession key.
        method: The HTTP method.
        headers: The request headers.
        body: The serialized body, or ``None``.
        credentials_mode: ``"include"`` or ``"same-origin"``.
    """

    url: str
    method: str
    headers: Mapping[str, str]
    body: bytes | None
    credentials_mode: str


class RequestExecutor:
    r"""Runs requests according to a client policy.

    The queue and the tracker are owned by the executor and shared by
    every request it runs.

    Args:
        policy: The client policy.
        transport: The transport used to send requests.

    Example:
        ```pycon
        >>> import asyncio
        >>> from arequester.core.config import ClientPolicy
        >>> from arequester.executor import RequestExecutor
        >>> from arequester.request_spec import RequestSpec
        >>> async def main(transport):  # doctest: +SKIP
        ...     executor = RequestExecutor(ClientPolicy(), transport)
        ...     spec = RequestSpec(base_url="api.example.com", endpoint="users", protocol="https")
        ...     outcome = await executor.execute(spec)
        ...     return outcome.to_result()
        ...

        ```
    """

    def __init__(self, policy: ClientPolicy, transport: Transport) -> None:
        self._policy = policy
        self._transport = transport
        self._queue = SequentialQueue(debug=policy.debug)
        self._tracker = SupersessionTracker(debug=policy.debug)
        self._diagnostics = DiagnosticLogger(__name__, enabled=policy.debug)

    @property
    def policy(self) -> ClientPolicy:
        return self._policy

    @property
    def queue(self) -> SequentialQueue:
        return self._queue

    @property
    def tracker(self) -> SupersessionTracker:
        return self._tracker

    def prepare(self, spec: RequestSpec, payload: Any = None) -> PreparedRequest:
        """Assemble the wire values of a request.

        Args:
            spec: The request configuration.
            payload: The payload to send. Ignored for GET and HEAD.

        Returns:
            The prepared request.

        Raises:
            ConfigError: If the configuration cannot be assembled.
        """
        headers = assemble_headers(spec, self._diagnostics)
        body = serialize_payload(spec.method, payload, headers["Content-Type"])
        if body is not None:
            self._diagnostics.debug("prepare", "Added request body", size=len(body))
        return PreparedRequest(
            url=assemble_url(spec, self._diagnostics),
            method=spec.method,
            headers=headers,
            body=body,
            credentials_mode=spec.credentials_mode,
        )

    async def execute(self, spec: RequestSpec, payload: Any = None) -> ExecutionOutcome:
        """Execute a request and classify its outcome.

        Args:
            spec: The request configuration.
            payload: The payload to send. Ignored for GET and HEAD.

        Returns:
            ``Success``, ``RejectedStatus`` or ``TransportFailure``.

        Raises:
            ConfigError: If the configuration cannot be assembled. Nothing
                is sent in that case.
        """
        prepared = self.prepare(spec, payload)
        if self._policy.admission_mode is AdmissionMode.ENQUEUE_NEW:
            return await self._queue.enqueue(lambda: self.run(prepared))
        return await self.run(prepared)

    async def run(self, prepared: PreparedRequest) -> ExecutionOutcome:
        """Send a prepared request without going through the queue.

        In ``abort-previous`` mode the request is registered in the
        tracker for the duration of the call.
        """
        token = new_request_id()
        source = None
        try:
            if self._policy.admission_mode is AdmissionMode.ABORT_PREVIOUS:
                source = CancellationSource(prepared.url)
                self._tracker.register(prepared.url, source)
                self._diagnostics.debug("run", "Registered request in the supersession tracker")
            return await self._send(prepared, source)
        finally:
            if source is not None:
                self._tracker.release(prepared.url, source)
            reset_request_id(token)

    async def _send(
        self, prepared: PreparedRequest, source: CancellationSource | None
    ) -> ExecutionOutcome:
        self._diagnostics.debug("send", "Sending request", method=prepared.method, url=prepared.url)
        try:
            response = await run_cancellable(
                self._transport.perform(
                    prepared.url,
                    prepared.method,
                    prepared.headers,
                    prepared.body,
                    prepared.credentials_mode,
                    source,
                ),
                source,
            )
        except TransportError as exc:
            self._diagnostics.error("send", f"An error occurred during request: {exc}")
            return TransportFailure(cause=exc)

        if not self._policy.is_accepted(response.status):
            self._diagnostics.debug(
                "send",
                "Received a response with an unexpected status code",
                status=response.status,
            )
            return RejectedStatus(status=response.status, reason=response.reason)

        self._diagnostics.debug(
            "send",
            "Successfully received a response with an expected status code",
            status=response.status,
        )
        try:
            return self._decode(response)
        except (LookupError, ValueError) as exc:
            self._diagnostics.error("send", f"Could not decode response body: {exc}")
            return TransportFailure(
                cause=TransportError(
                    f"could not decode response body: {exc}",
                    url=prepared.url,
                    method=prepared.method,
                    cause=exc,
                )
            )

    def _decode(self, response: TransportResponse) -> Success:
        if "json" in response.content_type.lower():
            self._diagnostics.debug("decode", "Resolved response message as JSON")
            body = json.loads(response.body) if response.body.strip() else None
            is_json = True
        else:
            self._diagnostics.debug("decode", "Resolved response message as text")
            body = response.body.decode(_charset(response.content_type))
            is_json = False
        return Success(
            status=response.status,
            headers=dict(response.headers),
            body=body,
            reason=response.reason,
            is_json=is_json,
        )


def _charset(content_type: str) -> str:
    for param in content_type.split(";")[1:]:
        key, _, value = param.strip().partition("=")
        if key.lower() == "charset" and value:
            return value.strip('"')
    return "utf-8"
