"""
Module: export.assembly.cancellation

Purpose:
    Cooperative cancellation for long exports. The assembler checks the
    token between slices.
"""

from __future__ import annotations

import threading

from ..errors import ExportCancelled


class CancellationToken:
    """Thread-safe flag checked between page slices."""

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        """Request cancellation."""
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self, where: str = "") -> None:
        """Raise ExportCancelled if cancellation was requested."""
        if self._event.is_set():
            suffix = f" {where}" if where else ""
            raise ExportCancelled(f"Export cancelled{suffix}")
