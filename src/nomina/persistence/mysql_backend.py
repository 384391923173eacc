"""MySQL backend implementing IBatchStore.

The driver is blocking, so every statement runs on a worker thread. Outside
``transaction()`` each statement runs in its own short transaction on a
pooled connection; inside it, the statements of the current task share one
connection that is committed or rolled back as a unit.

A caller that stops waiting (a phase deadline) abandons its statement: the
worker rolls it back when the driver returns instead of committing, so a
timed-out insert never leaves a row behind. Connection checkout waits for a
free slot rather than failing when every pooled connection is in use.
"""

from __future__ import annotations

import asyncio
import logging
import threading
from contextlib import asynccontextmanager
from contextvars import ContextVar
from typing import Any, AsyncIterator, Callable, Optional, TypeVar

import mysql.connector
from mysql.connector import pooling

from nomina.core.config import MySQLConfig
from nomina.core.exceptions import StorageError
from nomina.models.batch import DetailRecord, HeaderRecord

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _message(exc: mysql.connector.Error) -> str:
    """Server message when the driver has one, like ``err.sqlMessage``."""
    return getattr(exc, "msg", None) or str(exc)


class _Call:
    """Hand-off between an awaiting coroutine and its worker thread."""

    def __init__(self) -> None:
        self.lock = threading.Lock()
        self.abandoned = False
        self.done = False


class _Transaction:
    def __init__(self, connection: Any) -> None:
        self.connection = connection
        self.handed_off = False  # an abandoned worker owns cleanup


_active_transaction: ContextVar[Optional[_Transaction]] = ContextVar(
    "nomina_mysql_transaction", default=None
)


class MySQLBatchStore:
    """Production IBatchStore backed by a mysql-connector connection pool."""

    HEADER_COLUMNS = (
        "rnc_empresa", "banco_destino", "fecha_pago",
        "monto_total", "cuenta_origen", "cantidad_registros",
    )
    DETAIL_COLUMNS = ("id_nomina", "cedula", "correo", "cuenta_bancaria", "monto")

    def __init__(self, config: MySQLConfig) -> None:
        self._config = config
        self._pool: pooling.MySQLConnectionPool | None = None
        self._pool_lock = threading.Lock()
        self._slots = threading.BoundedSemaphore(config.pool_size)

    def _sql_insert(self, table: str, columns: tuple[str, ...]) -> str:
        placeholders = ", ".join(["%s"] * len(columns))
        return f"INSERT INTO {table} ({', '.join(columns)}) VALUES ({placeholders})"

    # ---- connection handling (worker threads) ----

    def _get_pool(self) -> pooling.MySQLConnectionPool:
        with self._pool_lock:
            if self._pool is None:
                self._pool = pooling.MySQLConnectionPool(
                    pool_name="nomina",
                    pool_size=self._config.pool_size,
                    autocommit=True,
                    **self._config.connect_kwargs(),
                )
                logger.info(
                    "Connected to database %r at %s:%s",
                    self._config.database, self._config.host, self._config.port,
                )
            return self._pool

    def _acquire(self):
        """Check out a pooled connection, waiting up to the timeout for a free one."""
        if not self._slots.acquire(timeout=self._config.timeout):
            raise StorageError(
                f"no free MySQL connection after {self._config.timeout}s"
            )
        try:
            return self._get_pool().get_connection()
        except mysql.connector.Error as exc:
            self._slots.release()
            raise StorageError(f"could not connect to MySQL: {_message(exc)}") from exc
        except BaseException:
            self._slots.release()
            raise

    def _release(self, connection) -> None:
        try:
            connection.close()  # back to the pool
        finally:
            self._slots.release()

    def _rollback_quietly(self, connection) -> None:
        try:
            connection.rollback()
        except mysql.connector.Error as exc:
            logger.error("Rollback failed: %s", _message(exc))

    def _run(self, work: Callable[[Any], T], call: _Call, tx: Optional[_Transaction]) -> T:
        """Run ``work(connection)`` and commit it unless the caller gave up."""
        connection = tx.connection if tx is not None else self._acquire()
        try:
            if tx is None:
                connection.start_transaction()
            result = work(connection)
            with call.lock:
                if not call.abandoned:
                    if tx is None:
                        connection.commit()
                    call.done = True
                    return result
            logger.warning("Rolling back statement abandoned after its deadline")
            raise StorageError("statement abandoned after its deadline")
        except mysql.connector.Error as exc:
            raise StorageError(_message(exc)) from exc
        finally:
            with call.lock:
                failed = not call.done
                abandoned = call.abandoned
            if tx is None:
                if failed:
                    self._rollback_quietly(connection)
                self._release(connection)
            elif abandoned:
                self._rollback_quietly(connection)
                self._release(connection)

    async def _submit(self, work: Callable[[Any], T]) -> T:
        """Await ``work`` on a worker thread; on cancellation, abandon it."""
        call = _Call()
        tx = _active_transaction.get()
        worker = asyncio.ensure_future(asyncio.to_thread(self._run, work, call, tx))
        try:
            return await asyncio.shield(worker)
        except asyncio.CancelledError:
            with call.lock:
                call.abandoned = not call.done
            if call.abandoned:
                if tx is not None:
                    tx.handed_off = True
                # Nobody awaits the worker now; retrieve its outcome when it ends.
                worker.add_done_callback(lambda f: f.cancelled() or f.exception())
                raise
            # Committed just before the deadline: report the real outcome.
            return await worker

    # ---- IBatchStore methods ----

    async def insert_header(self, header: HeaderRecord, record_count: int | float) -> int:
        sql = self._sql_insert(self._config.batch_table, self.HEADER_COLUMNS)
        params = (
            header.company_tax_id,
            header.destination_bank,
            header.payment_date,
            header.total_amount,
            header.origin_account,
            record_count,
        )

        def work(connection) -> int:
            cursor = connection.cursor()
            try:
                cursor.execute(sql, params)
                return cursor.lastrowid
            finally:
                cursor.close()

        batch_id = await self._submit(work)
        logger.debug("Inserted %s row with ID: %s", self._config.batch_table, batch_id)
        return batch_id

    async def insert_details(self, batch_id: int, details: list[DetailRecord]) -> int:
        sql = self._sql_insert(self._config.detail_table, self.DETAIL_COLUMNS)
        rows = [
            (batch_id, d.national_id, d.email, d.bank_account, d.amount)
            for d in details
        ]

        def work(connection) -> int:
            cursor = connection.cursor()
            try:
                cursor.executemany(sql, rows)
                return len(rows)
            finally:
                cursor.close()

        return await self._submit(work)

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[None]:
        connection = await asyncio.to_thread(self._acquire)
        tx = _Transaction(connection)
        token = _active_transaction.set(tx)
        try:
            await asyncio.to_thread(self._in_driver, connection.start_transaction)
            yield
            await asyncio.to_thread(self._in_driver, connection.commit)
        except BaseException:
            if not tx.handed_off:
                await asyncio.to_thread(self._rollback_quietly, connection)
            raise
        finally:
            _active_transaction.reset(token)
            if not tx.handed_off:
                self._release(connection)

    def _in_driver(self, operation: Callable[[], T]) -> T:
        try:
            return operation()
        except mysql.connector.Error as exc:
            raise StorageError(_message(exc)) from exc

    async def ping(self) -> bool:
        def check() -> None:
            connection = self._acquire()
            try:
                self._in_driver(connection.ping)
            finally:
                self._release(connection)

        try:
            await asyncio.to_thread(check)
        except StorageError as exc:
            logger.warning("MySQL ping failed: %s", exc)
            return False
        return True

    def close(self) -> None:
        with self._pool_lock:
            if self._pool is not None:
                self._pool._remove_connections()
            self._pool = None
