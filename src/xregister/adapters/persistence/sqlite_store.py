# src/xregister/adapters/persistence/sqlite_store.py
"""
SQLite Store - Default ExchangeStore Backend

stdlib sqlite3 behind a small connection pool. File databases run in WAL
mode; every connection enforces foreign keys so history rows cascade with
their exchange. Timestamps are written as UTC ISO text.

Files that USE this module:
- xregister.adapters.persistence (create_store for sqlite:/// URLs)
- tests.conftest (migrated store fixture)

Files that this module USES:
- xregister.adapters.persistence.store (ExchangeStore contract)
- xregister.domain.errors (StoreError)
"""

import logging
import sqlite3
import threading
from contextlib import contextmanager
from datetime import datetime, timezone
from queue import Empty, Queue
from typing import Any, Iterator, Optional

from xregister.adapters.persistence.store import ExchangeStore, Params, Row
from xregister.domain.errors import StoreError

log = logging.getLogger(__name__)


def _adapt(value: Any) -> Any:
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc).isoformat(sep=" ")
    return value


def _adapt_params(params: Optional[Params]) -> Any:
    if params is None:
        return ()
    if isinstance(params, dict):
        return {k: _adapt(v) for k, v in params.items()}
    return tuple(_adapt(v) for v in params)


class SQLiteExchangeStore(ExchangeStore):
    """SQLite backend using stdlib sqlite3.

    Thread-safe via a connection pool (Queue). An in-memory database is
    limited to a single connection so every caller sees the same data.
    """

    dialect = "sqlite"

    def __init__(self, db_path: str, pool_size: int = 4, acquire_timeout: float = 30.0):
        self._db_path = db_path
        self._pool_size = 1 if db_path == ":memory:" else pool_size
        self._acquire_timeout = acquire_timeout
        self._pool: Queue[sqlite3.Connection] = Queue(maxsize=self._pool_size)
        self._local = threading.local()

    def connect(self) -> None:
        try:
            for _ in range(self._pool_size):
                conn = sqlite3.connect(self._db_path, check_same_thread=False)
                conn.row_factory = sqlite3.Row
                if self._db_path != ":memory:":
                    conn.execute("PRAGMA journal_mode=WAL")
                conn.execute("PRAGMA foreign_keys=ON")
                self._pool.put(conn)
        except sqlite3.Error as e:
            raise StoreError(f"failed to open sqlite database {self._db_path}: {e}") from e
        log.info("SQLite store connected: %s (pool=%d)", self._db_path, self._pool_size)

    def close(self) -> None:
        while not self._pool.empty():
            try:
                conn = self._pool.get_nowait()
                conn.close()
            except Empty:
                break

    def _acquire(self) -> sqlite3.Connection:
        try:
            return self._pool.get(timeout=self._acquire_timeout)
        except Empty as e:
            raise StoreError("timed out waiting for a database connection") from e

    def _release(self, conn: sqlite3.Connection) -> None:
        self._pool.put(conn)

    @contextmanager
    def _connection(self) -> Iterator[sqlite3.Connection]:
        """Yield the current transaction's connection, or a pooled one that commits on exit."""
        conn = getattr(self._local, "conn", None)
        if conn is not None:
            yield conn
            return
        conn = self._acquire()
        try:
            yield conn
            conn.commit()
        except BaseException:
            conn.rollback()
            raise
        finally:
            self._release(conn)

    @contextmanager
    def transaction(self) -> Iterator[None]:
        if getattr(self._local, "conn", None) is not None:
            # Nested: join the outer transaction
            yield
            return
        conn = self._acquire()
        self._local.conn = conn
        try:
            yield
            conn.commit()
        except BaseException:
            conn.rollback()
            raise
        finally:
            self._local.conn = None
            self._release(conn)

    def _run(self, sql: str, params: Optional[Params]) -> tuple[list[Row], int]:
        try:
            with self._connection() as conn:
                cursor = conn.execute(sql, _adapt_params(params))
                rows = [dict(row) for row in cursor.fetchall()] if cursor.description else []
                return rows, cursor.rowcount
        except sqlite3.Error as e:
            raise StoreError(f"sqlite error: {e}") from e

    def execute(self, sql: str, params: Optional[Params] = None) -> int:
        _, rowcount = self._run(sql, params)
        return rowcount

    def query(self, sql: str, params: Optional[Params] = None) -> list[Row]:
        rows, _ = self._run(sql, params)
        return rows

    def query_one(self, sql: str, params: Optional[Params] = None) -> Optional[Row]:
        rows, _ = self._run(sql, params)
        return rows[0] if rows else None
