# src/xregister/adapters/persistence/postgres_store.py
"""
PostgreSQL Store - Optional ExchangeStore Backend

psycopg2 connections in a small pool, rows as dicts via RealDictCursor.
Statements keep the shared "?" placeholder style and are rewritten to
psycopg2's "%s" here.

Files that USE this module:
- xregister.adapters.persistence (create_store for postgresql:// URLs)

Files that this module USES:
- psycopg2 (installed with the postgres extra)
- xregister.adapters.persistence.store (ExchangeStore contract)
- xregister.domain.errors (StoreError)
"""

import logging
import threading
from contextlib import contextmanager
from datetime import datetime, timezone
from queue import Empty, Queue
from typing import Any, Iterator, Optional

import psycopg2
import psycopg2.extras

from xregister.adapters.persistence.store import ExchangeStore, Params, Row
from xregister.domain.errors import StoreError

log = logging.getLogger(__name__)


def _to_pyformat(sql: str) -> str:
    # Statements are written with '?' placeholders; psycopg2 wants '%s'.
    return sql.replace("%", "%%").replace("?", "%s")


def _adapt(value: Any) -> Any:
    # Columns are TIMESTAMP WITHOUT TIME ZONE holding UTC.
    if isinstance(value, datetime) and value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


class PostgresExchangeStore(ExchangeStore):
    """PostgreSQL backend using psycopg2.

    Thread-safe via a connection pool (Queue). Each call or transaction()
    acquires a dedicated connection and returns it on exit.
    """

    dialect = "postgresql"

    def __init__(self, dsn: str, pool_size: int = 4, acquire_timeout: float = 30.0):
        self._dsn = dsn
        self._pool_size = pool_size
        self._acquire_timeout = acquire_timeout
        self._pool: Queue = Queue(maxsize=pool_size)
        self._local = threading.local()

    def connect(self) -> None:
        try:
            for _ in range(self._pool_size):
                conn = psycopg2.connect(self._dsn)
                conn.autocommit = False
                self._pool.put(conn)
        except psycopg2.Error as e:
            raise StoreError(f"failed to connect to postgres: {e}") from e
        log.info("Postgres store connected (pool=%d)", self._pool_size)

    def close(self) -> None:
        while not self._pool.empty():
            try:
                conn = self._pool.get_nowait()
                conn.close()
            except Empty:
                break

    def _acquire(self):
        try:
            return self._pool.get(timeout=self._acquire_timeout)
        except Empty as e:
            raise StoreError("timed out waiting for a database connection") from e

    def _release(self, conn) -> None:
        self._pool.put(conn)

    @contextmanager
    def _connection(self):
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
        if params is None:
            args: Any = ()
        elif isinstance(params, dict):
            args = {k: _adapt(v) for k, v in params.items()}
        else:
            args = tuple(_adapt(v) for v in params)
        try:
            with self._connection() as conn:
                with conn.cursor(cursor_factory=psycopg2.extras.RealDictCursor) as cur:
                    cur.execute(_to_pyformat(sql), args)
                    rows = [dict(row) for row in cur.fetchall()] if cur.description else []
                    return rows, cur.rowcount
        except psycopg2.Error as e:
            raise StoreError(f"postgres error: {e}") from e

    def execute(self, sql: str, params: Optional[Params] = None) -> int:
        _, rowcount = self._run(sql, params)
        return rowcount

    def query(self, sql: str, params: Optional[Params] = None) -> list[Row]:
        rows, _ = self._run(sql, params)
        return rows

    def query_one(self, sql: str, params: Optional[Params] = None) -> Optional[Row]:
        rows, _ = self._run(sql, params)
        return rows[0] if rows else None
