r"""Exception types raised by the requester.

Only configuration problems and transport failures are exceptions.
Rejected status codes and transport failures seen by the executor are
returned to the caller as outcome values (see ``arequester.outcome``).
"""

from __future__ import annotations

__all__ = [
    "ConfigError",
    "InvalidEndpointValueError",
    "RequestCancelledError",
    "TransportError",
]


class ConfigError(ValueError):
    """Raised when a client or request configuration is malformed.

    It is raised before any network activity and is never retried.

    Example:
        ```pycon
        >>> from arequester.exceptions import ConfigError
        >>> raise ConfigError("base_url is required")
        Traceback (most recent call last):
            ...
        arequester.exceptions.ConfigError: base_url is required

        ```
    """


class InvalidEndpointValueError(ConfigError):
    """Raised when an endpoint mapping holds a non-string value.

    Args:
        key: The endpoint key whose value is invalid.
        value: The offending value.
    """

    def __init__(self, key: object, value: object) -> None:
        super().__init__(
            f"endpoint value for key {key!r} must be a string, got {type(value).__name__}"
        )
        self.key = key
        self.value = value


class TransportError(RuntimeError):
    """Raised by a transport when a request could not be completed.

    Args:
        message: A descriptive error message.
        url: The URL that was requested.
        method: The HTTP method that was used.
        cause: The underlying exception, if any.

    Example:
        ```pycon
        >>> from arequester.exceptions import TransportError
        >>> error = TransportError("connection refused", url="http://localhost", method="GET")
        >>> error.url
        'http://localhost'

        ```
    """

    def __init__(
        self,
        message: str,
        *,
        url: str | None = None,
        method: str | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.url = url
        self.method = method
        self.cause = cause


class RequestCancelledError(TransportError):
    """Raised when a pending request was superseded by a newer request
    for the same URL."""
