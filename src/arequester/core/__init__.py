r"""Core configuration and validation shared by every requester
component."""

from __future__ import annotations

__all__ = [
    "BASELINE_STATUS_CODES",
    "DEFAULT_CONTENT_TYPE",
    "DEFAULT_PROTOCOL",
    "DEFAULT_TIMEOUT",
    "AdmissionMode",
    "ClientPolicy",
    "validate_base_url",
    "validate_endpoint",
    "validate_header_value",
    "validate_port",
    "validate_status_codes",
    "validate_timeout",
]

from arequester.core.config import (
    BASELINE_STATUS_CODES,
    DEFAULT_CONTENT_TYPE,
    DEFAULT_PROTOCOL,
    DEFAULT_TIMEOUT,
    AdmissionMode,
    ClientPolicy,
)
from arequester.core.validation import (
    validate_base_url,
    validate_endpoint,
    validate_header_value,
    validate_port,
    validate_status_codes,
    validate_timeout,
)
