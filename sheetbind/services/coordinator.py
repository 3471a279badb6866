"""
RESPONSIBILITIES
- Own the workbook path and the per-instance asyncio lock.
- Run each operation body inline or on a worker thread while the lock is held.
- Bridge asyncio task cancellation to the worker's cancel token.
PROCESS OVERVIEW
1. __init__ refuses paths that do not exist.
2. run() checks the token, acquires the lock, checks the token again.
3. The body runs via asyncio.to_thread() when run_in_worker is set.
4. If the awaiting task is cancelled the token is tripped and the worker is
   awaited to completion; the lock is only released once the worker has
   stopped touching the workbook.
5. A worker that stopped on the token re-raises CancelledError. A worker that
   had already completed returns its result, so a popped queue entry or an
   advanced cursor is never discarded.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Any, Callable, TypeVar

from sheetbind.utils.cancel import CancelToken

T = TypeVar("T")


class AccessCoordinator:
    """Serializes every operation against one workbook path."""

    def __init__(
        self,
        path: Path | str,
        *,
        run_in_worker: bool = True,
        logger: logging.Logger | None = None,
    ) -> None:
        resolved = Path(path)
        if not resolved.exists():
            raise FileNotFoundError(str(resolved))
        self.path = resolved
        self.run_in_worker = run_in_worker
        self.logger = logger or logging.getLogger(__name__)
        self._lock = asyncio.Lock()

    @property
    def busy(self) -> bool:
        return self._lock.locked()

    async def run(
        self,
        func: Callable[..., T],
        *args: Any,
        cancel_token: CancelToken | None = None,
    ) -> T:
        """Run ``func(*args, token)`` with the lock held and return its result."""

        token = cancel_token or CancelToken()
        token.raise_if_cancelled()
        async with self._lock:
            token.raise_if_cancelled()
            if not self.run_in_worker:
                return func(*args, token)

            worker = asyncio.ensure_future(asyncio.to_thread(func, *args, token))
            try:
                return await asyncio.shield(worker)
            except asyncio.CancelledError:
                token.cancel()
                await asyncio.wait([worker])
                if worker.cancelled() or worker.exception() is not None:
                    if not worker.cancelled():
                        self.logger.debug(
                            "Worker stopped after cancellation",
                            extra={"path": str(self.path), "error": repr(worker.exception())},
                        )
                    raise
                # Completed before the token was seen; its effects stand.
                self.logger.debug("Worker completed despite cancellation", extra={"path": str(self.path)})
                return worker.result()


__all__ = ["AccessCoordinator"]
