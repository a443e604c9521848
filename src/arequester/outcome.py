r"""Outcome values returned by the request executor.

Everything that happens after URL and header assembly is reported as
one of three outcome types instead of being raised, so callers always
handle the negative cases explicitly:

- ``Success``: the status code is accepted and the body was decoded
- ``RejectedStatus``: a response arrived with a status code that is not
  accepted
- ``TransportFailure``: no usable response (network error, timeout,
  cancellation or undecodable body)

Example:
    ```pycon
    >>> from arequester.outcome import RejectedStatus
    >>> outcome = RejectedStatus(status=404, reason="Not Found")
    >>> outcome.is_success
    False
    >>> outcome.to_result()
    {'is_success': False, 'message': 'Not Found', 'status': 404}

    ```
"""

from __future__ import annotations

__all__ = ["ExecutionOutcome", "RejectedStatus", "Success", "TransportFailure"]

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Union

from arequester.exceptions import RequestCancelledError


@dataclass(frozen=True)
class Success:
    """A response whose status code is accepted by the client policy.

    Attributes:
        status: The HTTP status code.
        headers: The response headers.
        body: The decoded body. JSON responses are decoded to Python
            objects, other responses to text.
        reason: The reason phrase of the response.
        is_json: Whether ``body`` was decoded from JSON.
    """

    status: int
    headers: Mapping[str, str] = field(default_factory=dict)
    body: Any = None
    reason: str = ""
    is_json: bool = False

    @property
    def is_success(self) -> bool:
        return True

    def to_result(self) -> dict[str, Any]:
        """Flatten the outcome into a result dictionary.

        JSON objects are merged into the result, other JSON values are
        stored under ``"data"`` and text bodies under ``"text"``.
        """
        result: dict[str, Any] = {"is_success": True, "message": self.reason}
        if not self.is_json:
            result["text"] = self.body
        elif isinstance(self.body, Mapping):
            result.update(self.body)
        else:
            result["data"] = self.body
        return result


@dataclass(frozen=True)
class RejectedStatus:
    """A response whose status code is not accepted. The body is not
    decoded.

    Attributes:
        status: The HTTP status code.
        reason: The reason phrase of the response.
    """

    status: int
    reason: str = ""

    @property
    def is_success(self) -> bool:
        return False

    def to_result(self) -> dict[str, Any]:
        return {"is_success": False, "message": self.reason, "status": self.status}


@dataclass(frozen=True)
class TransportFailure:
    """A request that produced no usable response.

    Attributes:
        cause: The exception that ended the request.
    """

    cause: BaseException

    @property
    def is_success(self) -> bool:
        return False

    @property
    def cancelled(self) -> bool:
        """``True`` if the request was superseded by a newer one."""
        return isinstance(self.cause, RequestCancelledError)

    def to_result(self) -> dict[str, Any]:
        return {"is_success": False, "message": str(self.cause)}


ExecutionOutcome = Union[Success, RejectedStatus, TransportFailure]
