r"""Parameter validation utilities for client and request configuration.

This module provides validation functions that make sure configuration
values meet their constraints before any request is sent. Every
function raises ``ConfigError`` on invalid input.
"""

from __future__ import annotations

__all__ = [
    "validate_base_url",
    "validate_endpoint",
    "validate_header_value",
    "validate_port",
    "validate_status_codes",
    "validate_timeout",
]

from collections.abc import Mapping
from typing import Any

import httpx

from arequester.exceptions import ConfigError


def validate_timeout(timeout: float | httpx.Timeout) -> None:
    """Validate timeout parameter.

    Args:
        timeout: Maximum seconds to wait for server responses.
            Must be > 0 if provided as a numeric value.

    Raises:
        ConfigError: If timeout is a numeric value <= 0.

    Example:
        ```pycon
        >>> from arequester.core.validation import validate_timeout
        >>> validate_timeout(10.0)
        >>> validate_timeout(0)  # doctest: +SKIP
        Traceback (most recent call last):
        ...
        arequester.exceptions.ConfigError: timeout must be > 0, got 0

        ```
    """
    if isinstance(timeout, (int, float)) and timeout <= 0:
        msg = f"timeout must be > 0, got {timeout}"
        raise ConfigError(msg)


def validate_status_codes(status_codes: tuple[int, ...]) -> None:
    """Validate a tuple of HTTP status codes.

    Args:
        status_codes: The status codes to check.

    Raises:
        ConfigError: If a code is not an integer in ``100..599``.
    """
    for code in status_codes:
        if isinstance(code, bool) or not isinstance(code, int) or not 100 <= code <= 599:
            msg = f"status codes must be integers in 100..599, got {code!r}"
            raise ConfigError(msg)


def validate_port(port: int | None) -> None:
    if port is None:
        return
    if isinstance(port, bool) or not isinstance(port, int) or not 1 <= port <= 65535:
        msg = f"port must be an integer in 1..65535, got {port!r}"
        raise ConfigError(msg)


def validate_endpoint(endpoint: Any) -> None:
    """Validate the container type of an endpoint.

    Only the container is checked here. Non-string mapping values are
    reported by the assembler when the URL is built.

    Args:
        endpoint: A path string or an ordered mapping of path segments.

    Raises:
        ConfigError: If the endpoint is neither a string nor a mapping.
    """
    if not isinstance(endpoint, (str, Mapping)):
        msg = f"endpoint must be a string or a mapping, got {type(endpoint).__name__}"
        raise ConfigError(msg)


def validate_base_url(protocol: str, base_url: str) -> None:
    """Validate that a host can be turned into a URL.

    Args:
        protocol: The URL scheme.
        base_url: The host part of the URL, optionally followed by a
            path prefix.

    Raises:
        ConfigError: If httpx cannot parse ``protocol://base_url``.

    Example:
        ```pycon
        >>> from arequester.core.validation import validate_base_url
        >>> validate_base_url("https", "api.example.com")
        >>> validate_base_url("https", "api.example.com/v1")

        ```
    """
    try:
        httpx.URL(f"{protocol}://{base_url}")
    except httpx.InvalidURL as exc:
        msg = f"base_url is not a valid host, got {base_url!r} ({exc})"
        raise ConfigError(msg) from exc


def validate_header_value(name: str, value: str) -> None:
    """Validate that a header name or value can be sent on the wire.

    httpx encodes header names and values as ASCII.

    Args:
        name: Name used in the error message.
        value: The header name or value to check.

    Raises:
        ConfigError: If ``value`` contains non-ASCII characters.
    """
    if not value.isascii():
        msg = f"{name} must contain only ASCII characters, got {value!r}"
        raise ConfigError(msg)
