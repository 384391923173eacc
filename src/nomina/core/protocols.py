"""Protocol interfaces for nomina abstractions.

Storage is injected into the persistence coordinator through these Protocols:
structural typing, no inheritance required, easy to test with isinstance().
"""

from __future__ import annotations

from contextlib import AbstractAsyncContextManager
from typing import Protocol, runtime_checkable

from nomina.core.types import BatchId
from nomina.models.batch import DetailRecord, HeaderRecord


# ---------------------------------------------------------------------------
# Persistence: Batch Store
# ---------------------------------------------------------------------------

@runtime_checkable
class IBatchStore(Protocol):
    """Relational store for batch headers and their detail rows."""

    async def insert_header(self, header: HeaderRecord, record_count: int | float) -> BatchId: ...

    async def insert_details(self, batch_id: BatchId, details: list[DetailRecord]) -> int: ...

    def transaction(self) -> AbstractAsyncContextManager[None]: ...

    async def ping(self) -> bool: ...

    def close(self) -> None: ...
