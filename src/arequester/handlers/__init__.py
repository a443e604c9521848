r"""Admission coordinators for ``enqueue-new`` and ``abort-previous``
modes."""

from __future__ import annotations

__all__ = ["QueueEntry", "SequentialQueue", "SupersessionTracker"]

from arequester.handlers.queue import QueueEntry, SequentialQueue
from arequester.handlers.supersession import SupersessionTracker
