# src/xregister/domain/errors.py
"""
Domain Errors - Business Logic Exceptions

This module defines the exceptions raised across the sync and query paths.
A missing exchange row is not an error: stores return None for it.
"""
from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from xregister.domain.models import CurrencyPair


class DomainError(Exception):
    """Base exception for domain errors."""
    pass


class StoreError(DomainError):
    """Raised when the backing store fails (connectivity, constraint, timeout)."""
    pass


class ProviderError(DomainError):
    """Raised when a rate provider cannot produce a rate."""
    pass


class ExchangeNotFoundError(DomainError):
    """Raised when an explicit lookup of a pair finds no exchange."""
    pass


class PairFailure(DomainError):
    """
    A single pair failed during one sync cycle.

    Attributes:
        pair: The pair that failed
        error: The underlying ProviderError, StoreError or other exception
    """

    def __init__(self, pair: CurrencyPair, error: BaseException):
        super().__init__(f"sync of {pair} failed: {error}")
        self.pair = pair
        self.error = error
