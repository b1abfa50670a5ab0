# src/xregister/application/exchange_service.py
"""
Exchange Rate Service - Upsert and Query Logic for Exchanges

This module is the only reader and writer of exchange state. It reconciles
a freshly fetched rate against the stored exchange for the pair (create on
first sight, update in place afterwards) and appends one history row per
received rate. It also serves the filtered read queries.

Lookup, write and history append are separate store calls by default. Two
concurrent receives for the same pair can race (lost update, or a unique
constraint failure on create). Pass transactional=True to run the three
calls inside one store transaction instead.

Files that USE this module:
- xregister.application.use_cases (sync and list use cases)
- xregister.app (composition root)
- tests.test_exchange_service (unit and integration tests)

Files that this module USES:
- xregister.adapters.persistence.store (ExchangeStore contract)
- xregister.domain.models (Exchange, ExchangeRateHistory)
"""
from __future__ import annotations  # Enable postponed evaluation of annotations

import logging  # Standard library for logging messages
from contextlib import nullcontext  # No-op context when not transactional
from datetime import datetime, timezone  # UTC timestamps for created/updated
from typing import Callable, Optional  # Type hints for the injectable clock

from xregister.adapters.persistence.store import ExchangeStore  # Store contract
from xregister.domain.errors import StoreError  # Raised when an insert yields no id
from xregister.domain.models import Exchange, ExchangeRateHistory  # Domain models

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]

_SELECT_EXCHANGE = (
    "SELECT id, base_currency, target_currency, rate, created_at, updated_at FROM exchanges"
)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ExchangeRateService:
    """Keeps the current rate per pair and its history trail."""

    def __init__(
        self,
        store: ExchangeStore,
        clock: Optional[Clock] = None,
        transactional: bool = False,
    ):
        """
        Initialize the service.
        
        Args:
            store: Any ExchangeStore implementation
            clock: Returns the current UTC time; defaults to datetime.now(timezone.utc)
            transactional: Run lookup, write and history append in one store transaction
        """
        self.store = store
        self.clock = clock or utc_now
        self.transactional = transactional

    def receive_exchange_rate(self, base: str, target: str, rate: float) -> None:
        """
        Record a fetched rate for a pair.
        
        Creates the exchange on first sight (updated_at left empty) or updates
        its rate and updated_at; in both cases appends exactly one history row.
        
        Raises:
            StoreError: If the lookup, the write or the history append fails.
                A failed history append does not undo the exchange write
                unless the service is transactional.
        """
        scope = self.store.transaction() if self.transactional else nullcontext()
        with scope:
            existing = self._get_exchange(base, target)
            if existing is None:
                exchange_id = self._create_exchange(base, target, rate)
                logger.debug("Created exchange %s-%s with id %d", base, target, exchange_id)
            else:
                exchange_id = existing.id
                self._update_exchange(exchange_id, rate)
                logger.debug("Updated exchange %s-%s: %s", base, target, rate)

            self._append_history(exchange_id, rate)
            logger.debug("Appended history for exchange %s-%s: %s", base, target, rate)

    def list_exchanges(self, base: str = "", target: str = "") -> list[Exchange]:
        """
        List exchanges, optionally filtered by base and/or target currency.
        
        Empty filters place no constraint on their column. Rows come back
        ordered by id.
        
        Raises:
            StoreError: If the query fails
        """
        clauses: list[str] = []
        params: list[str] = []
        if base:
            clauses.append("base_currency = ?")
            params.append(base)
        if target:
            clauses.append("target_currency = ?")
            params.append(target)

        sql = _SELECT_EXCHANGE
        if clauses:
            sql += " WHERE " + " AND ".join(clauses)
        sql += " ORDER BY id"

        rows = self.store.query(sql, params)
        return [Exchange.from_row(row) for row in rows]

    def get_exchange(self, base: str, target: str) -> Optional[Exchange]:
        """Return the exchange for a pair, or None if it was never synced."""
        return self._get_exchange(base, target)

    def list_history(self, exchange_id: int) -> list[ExchangeRateHistory]:
        """Return the history trail of an exchange, oldest first."""
        rows = self.store.query(
            "SELECT id, exchange_id, rate, created_at FROM exchange_rate_history "
            "WHERE exchange_id = ? ORDER BY id",
            (exchange_id,),
        )
        return [ExchangeRateHistory.from_row(row) for row in rows]

    def _get_exchange(self, base: str, target: str) -> Optional[Exchange]:
        row = self.store.query_one(
            _SELECT_EXCHANGE + " WHERE base_currency = ? AND target_currency = ? LIMIT 1",
            (base, target),
        )
        if row is None:
            return None
        return Exchange.from_row(row)

    def _create_exchange(self, base: str, target: str, rate: float) -> int:
        row = self.store.query_one(
            "INSERT INTO exchanges (base_currency, target_currency, rate, created_at) "
            "VALUES (?, ?, ?, ?) RETURNING id",
            (base, target, rate, self.clock()),
        )
        if row is None:
            raise StoreError(f"insert of exchange {base}-{target} returned no id")
        return int(row["id"])

    def _update_exchange(self, exchange_id: int, rate: float) -> None:
        self.store.execute(
            "UPDATE exchanges SET rate = ?, updated_at = ? WHERE id = ?",
            (rate, self.clock(), exchange_id),
        )

    def _append_history(self, exchange_id: int, rate: float) -> None:
        self.store.execute(
            "INSERT INTO exchange_rate_history (exchange_id, rate) VALUES (?, ?)",
            (exchange_id, rate),
        )
