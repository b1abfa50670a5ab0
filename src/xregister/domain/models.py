# src/xregister/domain/models.py
"""
Domain Models - Pure Business Objects

This module contains the domain models of the register:
- Currency pairs
- Exchanges (current rate per pair)
- Exchange rate history entries
- Exchange views (read-side shape)

Files that USE this module:
- xregister.application.* (services and use cases)
- xregister.adapters.http (renders ExchangeView)
- tests.* (tests build models directly)

Files that this module USES:
- None (pure domain layer, no external dependencies)
"""

from __future__ import annotations  # Enable postponed evaluation of annotations

from dataclasses import dataclass  # Decorator for creating data classes
from datetime import datetime, timezone  # Date/time utilities for timestamps
from typing import Any, Mapping, Optional  # Type hints for rows and optional values


def _to_utc(value: Any) -> Optional[datetime]:
    """
    Normalize a stored timestamp into an aware UTC datetime.

    SQLite hands back ISO strings, PostgreSQL hands back naive datetimes;
    both are stored in UTC.
    """
    if value is None:
        return None
    if isinstance(value, str):
        value = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


@dataclass(frozen=True)
class CurrencyPair:
    """An ordered (base, target) currency code combination."""
    base: str
    target: str

    @property
    def is_self_pair(self) -> bool:
        return self.base == self.target

    def __str__(self) -> str:
        return f"{self.base}-{self.target}"


@dataclass(frozen=True)
class Exchange:
    """
    Current-state record for one currency pair.

    Attributes:
        id: Store-assigned identifier
        base_currency: Code of the currency being priced
        target_currency: Code of the currency the rate is expressed in
        rate: 1 unit of base equals `rate` units of target
        created_at: UTC time the exchange was first synced
        updated_at: UTC time of the latest update, None until the first update
    """
    id: int
    base_currency: str
    target_currency: str
    rate: float
    created_at: datetime
    updated_at: Optional[datetime] = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> Exchange:
        return cls(
            id=int(row["id"]),
            base_currency=row["base_currency"],
            target_currency=row["target_currency"],
            rate=float(row["rate"]),
            created_at=_to_utc(row["created_at"]),
            updated_at=_to_utc(row.get("updated_at")),
        )


@dataclass(frozen=True)
class ExchangeRateHistory:
    """Immutable record of a rate observed for an exchange."""
    id: int
    exchange_id: int
    rate: float
    created_at: datetime

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> ExchangeRateHistory:
        return cls(
            id=int(row["id"]),
            exchange_id=int(row["exchange_id"]),
            rate=float(row["rate"]),
            created_at=_to_utc(row["created_at"]),
        )


@dataclass(frozen=True)
class ExchangeView:
    """
    Read-side shape of an exchange as served to API consumers.

    Attributes:
        id: Exchange identifier
        source_currency: Base currency of the exchange
        target_currency: Target currency of the exchange
        rate: Current rate
        last_acquisition: Most recent time the current rate was set
    """
    id: int
    source_currency: str
    target_currency: str
    rate: float
    last_acquisition: datetime

    @classmethod
    def from_exchange(cls, exchange: Exchange) -> ExchangeView:
        last_acquisition = exchange.updated_at if exchange.updated_at is not None else exchange.created_at
        return cls(
            id=exchange.id,
            source_currency=exchange.base_currency,
            target_currency=exchange.target_currency,
            rate=exchange.rate,
            last_acquisition=last_acquisition,
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "source_currency": self.source_currency,
            "target_currency": self.target_currency,
            "rate": self.rate,
            "last_acquisition": self.last_acquisition.isoformat(),
        }
