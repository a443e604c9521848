r"""Utility helpers shared by requester components."""

from __future__ import annotations

__all__ = [
    "DiagnosticLogger",
    "StructuredFormatter",
    "get_request_id",
    "new_request_id",
    "reset_request_id",
]

from arequester.utils.diagnostics import (
    DiagnosticLogger,
    StructuredFormatter,
    get_request_id,
    new_request_id,
    reset_request_id,
)
