r"""Diagnostic logging for requester components.

Each component receives a ``DiagnosticLogger`` built from the client's
``debug`` flag, so diagnostics are switched on per client instead of
process-wide. Records carry an explicit ``operation`` name and the id of
the request being processed, which makes them easy to aggregate with
``StructuredFormatter``.

Example:
    Render requester diagnostics as JSON:

    ```python
    import logging
    from arequester.utils.diagnostics import StructuredFormatter

    handler = logging.StreamHandler()
    handler.setFormatter(StructuredFormatter())

    logger = logging.getLogger("arequester")
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)
    ```
"""

from __future__ import annotations

__all__ = [
    "DiagnosticLogger",
    "StructuredFormatter",
    "get_request_id",
    "new_request_id",
    "reset_request_id",
]

import contextvars
import json
import logging
import time
import uuid
from typing import Any

# Id of the request handled by the current task
_request_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "request_id", default=None
)

_RESERVED_ATTRS = frozenset(
    logging.LogRecord("", 0, "", 0, "", None, None).__dict__.keys() | {"message", "asctime"}
)


def get_request_id() -> str | None:
    """Get the id of the request handled by the current context.

    Returns:
        The request id, or ``None`` outside of a request.
    """
    return _request_id.get()


def new_request_id() -> contextvars.Token[str | None]:
    """Assign a fresh request id to the current context.

    Returns:
        A token to pass to ``reset_request_id``.

    Example:
        ```pycon
        >>> from arequester.utils.diagnostics import (
        ...     get_request_id,
        ...     new_request_id,
        ...     reset_request_id,
        ... )
        >>> token = new_request_id()
        >>> len(get_request_id())
        12
        >>> reset_request_id(token)

        ```
    """
    return _request_id.set(uuid.uuid4().hex[:12])


def reset_request_id(token: contextvars.Token[str | None]) -> None:
    _request_id.reset(token)


class DiagnosticLogger:
    """Debug-gated logger that tags records with an operation name.

    Args:
        name: Name of the underlying ``logging.Logger``.
        enabled: If ``False``, nothing is logged.

    Example:
        ```pycon
        >>> from arequester.utils.diagnostics import DiagnosticLogger
        >>> diagnostics = DiagnosticLogger("arequester.example", enabled=True)
        >>> diagnostics.debug("assemble_url", "Generated request URL", url="http://a.b")

        ```
    """

    def __init__(self, name: str, *, enabled: bool = False) -> None:
        self._logger = logging.getLogger(name)
        self._enabled = enabled

    @property
    def enabled(self) -> bool:
        return self._enabled

    def debug(self, operation: str, message: str, **extra: Any) -> None:
        self._log(logging.DEBUG, operation, message, extra)

    def error(self, operation: str, message: str, **extra: Any) -> None:
        self._log(logging.ERROR, operation, message, extra)

    def _log(self, level: int, operation: str, message: str, extra: dict[str, Any]) -> None:
        if not self._enabled:
            return
        fields = {"operation": operation, "request_id": get_request_id(), **extra}
        self._logger.log(level, f"{message} at {operation}", extra=fields)


class StructuredFormatter(logging.Formatter):
    """JSON formatter for requester diagnostics.

    Standard fields in the JSON output:
        - timestamp: ISO 8601 timestamp (UTC, millisecond precision)
        - level: Log level name
        - logger: Logger name
        - message: Log message

    Fields passed through ``extra`` (``operation``, ``request_id`` and
    any operation specific values) are added as-is. Values that are not
    JSON serializable are rendered with ``repr``.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)
        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS:
                log_data[key] = value
        return json.dumps(log_data, default=repr)

    def formatTime(self, record: logging.LogRecord, datefmt: str | None = None) -> str:  # noqa: N802
        return (
            time.strftime("%Y-%m-%dT%H:%M:%S", time.gmtime(record.created))
            + f".{int(record.msecs):03d}Z"
        )
