"""In-memory backend for unit tests — dict-backed fake."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any, AsyncIterator

from nomina.core.exceptions import StorageError
from nomina.models.batch import DetailRecord, HeaderRecord


class MemoryBatchStore:
    """Dict-backed IBatchStore with per-operation failure injection."""

    def __init__(self) -> None:
        self.batches: dict[int, dict[str, Any]] = {}
        self.details: list[dict[str, Any]] = []
        self.closed = False
        self._next_id = 1
        self._failures: dict[str, str] = {}

    def fail_on(self, operation: str, message: str = "simulated storage failure") -> None:
        """Make ``insert_header``, ``insert_details`` or ``ping`` raise StorageError."""
        self._failures[operation] = message

    def _check(self, operation: str) -> None:
        if operation in self._failures:
            raise StorageError(self._failures[operation])

    async def insert_header(self, header: HeaderRecord, record_count: int | float) -> int:
        self._check("insert_header")
        batch_id = self._next_id
        self._next_id += 1
        self.batches[batch_id] = {**header.model_dump(), "record_count": record_count}
        return batch_id

    async def insert_details(self, batch_id: int, details: list[DetailRecord]) -> int:
        self._check("insert_details")
        if batch_id not in self.batches:
            raise StorageError(f"batch {batch_id} does not exist")
        self.details.extend({"batch_id": batch_id, **d.model_dump()} for d in details)
        return len(details)

    def details_for(self, batch_id: int) -> list[dict[str, Any]]:
        return [row for row in self.details if row["batch_id"] == batch_id]

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[None]:
        batches, details = dict(self.batches), list(self.details)
        try:
            yield
        except BaseException:
            self.batches, self.details = batches, details
            raise

    async def ping(self) -> bool:
        return "ping" not in self._failures

    def close(self) -> None:
        self.closed = True
