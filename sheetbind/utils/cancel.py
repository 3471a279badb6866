"""Cooperative cancellation shared between the event loop and worker threads."""

# Module responsibilities:
# - Provide a thread-safe flag that async callers can trip and worker threads can poll.
# - Translate a tripped flag into ``OperationCancelled`` at safe checkpoints.

from __future__ import annotations

import threading

from sheetbind.errors import OperationCancelled


class CancelToken:
    """Thread-safe cancellation flag polled between rows and before I/O."""

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise OperationCancelled("operation cancelled")


__all__ = ["CancelToken"]
