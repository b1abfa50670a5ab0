# src/xregister/adapters/providers/base.py
"""
Base Provider Interface for Exchange Rate Providers

This module defines the abstract base class for all exchange rate providers.
The sync use case depends only on this contract, so providers are
interchangeable.

Files that USE this module:
- xregister.adapters.providers.http_rate (HTTPRateProvider implements RateProvider)
- xregister.adapters.providers.freecurrency (FreeCurrencyAPIProvider implements RateProvider)
- xregister.application.use_cases (SyncExchangeRateUseCase depends on RateProvider)

Files that this module USES:
- None (pure interface definition)
"""
from abc import ABC, abstractmethod


class RateProvider(ABC):
    name: str = "provider"

    @abstractmethod
    def fetch_rate(self, from_currency: str, to_currency: str) -> float:
        """
        Return how many units of `to_currency` equal 1 unit of `from_currency`.

        Raises:
            ProviderError: If the rate cannot be produced. No retries are attempted.
        """
        raise NotImplementedError
