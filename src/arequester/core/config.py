r"""Configuration values and defaults for the requester client.

This module provides the admission modes, default constants and the
``ClientPolicy`` dataclass that is created once per ``AsyncRequester``
and shared by every request issued from it.
"""

from __future__ import annotations

__all__ = [
    "BASELINE_STATUS_CODES",
    "DEFAULT_CONTENT_TYPE",
    "DEFAULT_PROTOCOL",
    "DEFAULT_TIMEOUT",
    "AdmissionMode",
    "ClientPolicy",
]

from dataclasses import dataclass, field
from enum import Enum

from arequester.core.validation import validate_status_codes
from arequester.exceptions import ConfigError

# Default timeout in seconds for the httpx client owned by AsyncRequester
DEFAULT_TIMEOUT = 10.0

# Status codes that are always treated as a successful response
# 200: OK, 201: Created, 202: Accepted, 203: Non-Authoritative Information,
# 204: No Content, 205: Reset Content, 206: Partial Content
BASELINE_STATUS_CODES = (200, 201, 202, 203, 204, 205, 206)

DEFAULT_CONTENT_TYPE = "application/json"

DEFAULT_PROTOCOL = "http"


class AdmissionMode(str, Enum):
    """Policy applied when a new request is issued from a client.

    Attributes:
        ENQUEUE_NEW: Requests run one at a time in submission order.
        ABORT_PREVIOUS: A new request cancels the pending request that
            targets the same URL.
    """

    ENQUEUE_NEW = "enqueue-new"
    ABORT_PREVIOUS = "abort-previous"


@dataclass(frozen=True)
class ClientPolicy:
    """Immutable per-client policy.

    Args:
        admission_mode: How concurrent requests from the same client are
            admitted. Accepts an ``AdmissionMode`` or its string value.
        accept_status_codes: Extra status codes that should be treated as
            success, on top of ``BASELINE_STATUS_CODES``.
        debug: If ``True``, the client and its coordinators emit
            diagnostic log records.

    Raises:
        ConfigError: If the admission mode is unknown or a status code is
            outside ``100..599``.

    Example:
        ```pycon
        >>> from arequester.core.config import ClientPolicy
        >>> policy = ClientPolicy(admission_mode="abort-previous", accept_status_codes=(422,))
        >>> policy.admission_mode
        <AdmissionMode.ABORT_PREVIOUS: 'abort-previous'>
        >>> sorted(policy.accepted_status_codes)
        [200, 201, 202, 203, 204, 205, 206, 422]

        ```
    """

    admission_mode: AdmissionMode = AdmissionMode.ENQUEUE_NEW
    accept_status_codes: tuple[int, ...] = field(default_factory=tuple)
    debug: bool = False

    def __post_init__(self) -> None:
        try:
            mode = AdmissionMode(self.admission_mode)
        except ValueError:
            msg = (
                "admission_mode must be one of "
                f"{[m.value for m in AdmissionMode]}, got {self.admission_mode!r}"
            )
            raise ConfigError(msg) from None
        codes = tuple(self.accept_status_codes)
        validate_status_codes(codes)
        object.__setattr__(self, "admission_mode", mode)
        object.__setattr__(self, "accept_status_codes", codes)

    @property
    def accepted_status_codes(self) -> frozenset[int]:
        """The union of the baseline codes and the caller codes."""
        return frozenset(BASELINE_STATUS_CODES).union(self.accept_status_codes)

    def is_accepted(self, status_code: int) -> bool:
        return status_code in self.accepted_status_codes
