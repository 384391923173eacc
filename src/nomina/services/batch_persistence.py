"""Two-phase persistence of a parsed batch: header first, then its details."""

from __future__ import annotations

import asyncio
import logging

from nomina.core.exceptions import PersistenceError, StorageError
from nomina.core.protocols import IBatchStore
from nomina.models.batch import InsertResult, ParsedBatch
from nomina.parsing.assembler import parse_batch

logger = logging.getLogger(__name__)

INSERT_HEADER = "insert_header"
INSERT_DETAILS = "insert_details"
TRANSACTION = "transaction"


class BatchPersistenceCoordinator:
    """Insert a batch header, then bulk-insert its details under the new id.

    The phases are not atomic by default: when the detail insert fails the
    header row stays committed and the raised PersistenceError carries its
    id. With ``atomic=True`` both phases run in one storage transaction and
    the header is rolled back instead.
    """

    def __init__(
        self,
        store: IBatchStore,
        *,
        atomic: bool = False,
        timeout: float | None = None,
    ) -> None:
        self._store = store
        self._atomic = atomic
        self._timeout = timeout

    async def persist(self, batch: ParsedBatch) -> InsertResult:
        if not self._atomic:
            return await self._persist(batch)

        try:
            async with self._store.transaction():
                result = await self._persist(batch)
        except PersistenceError as exc:
            # Rolled back, so no batch id survives.
            raise PersistenceError(exc.phase, exc.message) from exc
        except StorageError as exc:
            logger.error("Batch transaction failed: %s", exc)
            raise PersistenceError(TRANSACTION, str(exc)) from exc
        return result

    async def _persist(self, batch: ParsedBatch) -> InsertResult:
        batch_id = await self._run(
            INSERT_HEADER,
            self._store.insert_header(batch.header, batch.record_count),
        )

        if not batch.details:
            logger.info("Inserted batch %s with no details", batch_id)
            return InsertResult(batch_id=batch_id, inserted_count=0)

        inserted = await self._run(
            INSERT_DETAILS,
            self._store.insert_details(batch_id, batch.details),
            batch_id=batch_id,
        )
        logger.info("Inserted batch %s with %d details", batch_id, inserted)
        return InsertResult(batch_id=batch_id, inserted_count=inserted)

    async def _run(self, phase: str, operation, batch_id: int | None = None):
        try:
            return await asyncio.wait_for(operation, self._timeout)
        except StorageError as exc:
            logger.error("Error in %s: %s", phase, exc)
            raise PersistenceError(phase, str(exc), batch_id=batch_id) from exc
        except asyncio.TimeoutError as exc:
            logger.error("Timed out in %s after %ss", phase, self._timeout)
            raise PersistenceError(
                phase, f"timed out after {self._timeout}s", batch_id=batch_id
            ) from exc


async def ingest(
    content: str,
    coordinator: BatchPersistenceCoordinator,
    *,
    strict: bool = False,
) -> InsertResult:
    """Parse a payroll file and persist it.

    Raises:
        ValidationError: If the file has no header; nothing is written.
        ParseError: If the content cannot be parsed; nothing is written.
        PersistenceError: If a storage phase fails.
    """
    batch = parse_batch(content, strict=strict)
    return await coordinator.persist(batch)
