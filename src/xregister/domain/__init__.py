# src/xregister/domain/__init__.py
"""
Domain Layer - Pure Business Objects

This package contains domain models and errors.
No dependencies on infrastructure or external systems.
"""

from xregister.domain.models import (
    CurrencyPair,
    Exchange,
    ExchangeRateHistory,
    ExchangeView,
)
from xregister.domain.errors import (
    DomainError,
    ExchangeNotFoundError,
    PairFailure,
    ProviderError,
    StoreError,
)

__all__ = [
    "CurrencyPair",
    "Exchange",
    "ExchangeRateHistory",
    "ExchangeView",
    "DomainError",
    "ExchangeNotFoundError",
    "PairFailure",
    "ProviderError",
    "StoreError",
]
