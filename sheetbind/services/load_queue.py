"""
RESPONSIBILITIES
- Snapshot-load rows into an in-memory FIFO per record type.
- Support pulling records and pushing them back for a later pass.
PROCESS OVERVIEW
1. The first dequeue/requeue for a type scans the sheet once
   (stop_at_empty_line=True) and fills that type's queue.
2. dequeue() pops the head; requeue() appends to the tail.
3. Queues are never refreshed from the workbook until reset().
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import TypeVar

from sheetbind.registry import RecordBinding, get_binding
from sheetbind.schemas.record import BaseRecord
from sheetbind.services.base import BaseExcelService
from sheetbind.utils.cancel import CancelToken

R = TypeVar("R", bound=BaseRecord)


@dataclass
class QueueState:
    queues: dict[type, deque] = field(default_factory=dict)

    def clear(self) -> None:
        self.queues.clear()


class LoadQueueExcelService(BaseExcelService):
    """In-memory work queue seeded from a worksheet."""

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._queues = QueueState()

    async def dequeue(self, record_type: type[R], *, cancel_token: CancelToken | None = None) -> R | None:
        binding = get_binding(record_type)
        return await self._coordinator.run(self._dequeue, binding, cancel_token=cancel_token)

    async def requeue(self, record: BaseRecord, *, cancel_token: CancelToken | None = None) -> None:
        binding = get_binding(type(record))
        await self._coordinator.run(self._requeue, binding, record, cancel_token=cancel_token)

    async def pending(self, record_type: type, *, cancel_token: CancelToken | None = None) -> int:
        """Number of queued records for *record_type*, loading the queue if needed."""

        binding = get_binding(record_type)
        return await self._coordinator.run(self._pending, binding, cancel_token=cancel_token)

    def _ensure_queue(self, binding: RecordBinding, cancel_token: CancelToken) -> deque:
        queue = self._queues.queues.get(binding.record_type)
        if queue is None:
            records = self._read_records(binding, False, True, cancel_token)
            queue = deque(records)
            self._queues.queues[binding.record_type] = queue
        return queue

    def _dequeue(self, binding: RecordBinding, cancel_token: CancelToken) -> BaseRecord | None:
        queue = self._ensure_queue(binding, cancel_token)
        if not queue:
            return None
        return queue.popleft()

    def _requeue(self, binding: RecordBinding, record: BaseRecord, cancel_token: CancelToken) -> None:
        queue = self._ensure_queue(binding, cancel_token)
        queue.append(record)
        self.logger.debug(
            "Record requeued",
            extra={"record": binding.type_name, "row": record.line_index, "pending": len(queue)},
        )

    def _pending(self, binding: RecordBinding, cancel_token: CancelToken) -> int:
        return len(self._ensure_queue(binding, cancel_token))

    def _reset(self, cancel_token: CancelToken) -> None:
        self._queues.clear()
        self.logger.debug("Queues reset", extra={"path": str(self.file_path)})
