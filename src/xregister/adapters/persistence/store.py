# src/xregister/adapters/persistence/store.py
"""
Exchange Store - Abstract Persistence Interface

Defines the minimal query contract the exchange service relies on:
execute a statement, query many rows, query one row (None when there is
no row), and close. SQL is written with '?' placeholders; backends
translate to their own parameter style.

Files that USE this module:
- xregister.adapters.persistence.sqlite_store (SQLiteExchangeStore)
- xregister.adapters.persistence.postgres_store (PostgresExchangeStore)
- xregister.application.exchange_service (ExchangeRateService depends on ExchangeStore)

Files that this module USES:
- None (pure interface definition)
"""
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Any, Iterator, Optional, Sequence, Union

Row = dict[str, Any]
Params = Union[Sequence[Any], dict[str, Any]]


class ExchangeStore(ABC):
    """Database-agnostic interface for exchange persistence.

    - Each call outside transaction() runs on its own pooled connection and
      commits on success.
    - Calls inside transaction() on the same thread share one connection and
      commit or roll back together.
    - Driver errors are raised as StoreError.
    """

    dialect: str = "generic"

    @abstractmethod
    def connect(self) -> None:
        """Initialize the connection pool."""

    @abstractmethod
    def close(self) -> None:
        """Close all connections and release resources."""

    @abstractmethod
    def execute(self, sql: str, params: Optional[Params] = None) -> int:
        """Execute a statement and return the number of affected rows."""

    @abstractmethod
    def query(self, sql: str, params: Optional[Params] = None) -> list[Row]:
        """Execute a query and return every row as a dict."""

    @abstractmethod
    def query_one(self, sql: str, params: Optional[Params] = None) -> Optional[Row]:
        """Execute a query and return the first row, or None if there is none."""

    @abstractmethod
    @contextmanager
    def transaction(self) -> Iterator[None]:
        """Context manager: commits on success, rolls back on error."""
