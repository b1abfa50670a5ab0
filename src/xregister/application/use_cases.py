# src/xregister/application/use_cases.py
"""
Use Cases - Sync One Pair and List Exchanges

SyncExchangeRateUseCase fetches one pair's rate and hands it to the
exchange service. ListExchangesUseCase runs a filtered listing and
reshapes exchanges into ExchangeView for API consumers.

Files that USE this module:
- xregister.application.sync_worker (runs SyncExchangeRateUseCase per pair)
- xregister.adapters.http.server (runs ListExchangesUseCase per request)
- xregister.app (composition root)

Files that this module USES:
- xregister.adapters.providers.base (RateProvider)
- xregister.application.exchange_service (ExchangeRateService)
- xregister.domain.models (CurrencyPair, ExchangeView)
"""
from __future__ import annotations

import logging
from dataclasses import dataclass

from xregister.adapters.providers.base import RateProvider
from xregister.application.exchange_service import ExchangeRateService
from xregister.domain.models import CurrencyPair, ExchangeView

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ListExchangesRequest:
    source_currency: str = ""
    target_currency: str = ""


class SyncExchangeRateUseCase:
    """Fetch the latest rate for a pair and record it."""

    def __init__(self, exchange_service: ExchangeRateService, provider: RateProvider):
        self.exchange_service = exchange_service
        self.provider = provider

    def execute(self, pair: CurrencyPair) -> float:
        """
        Sync one pair.
        
        Returns:
            The rate that was fetched and stored
            
        Raises:
            ProviderError: If the provider fails; nothing is written
            StoreError: If recording the rate fails
        """
        rate = self.provider.fetch_rate(pair.base, pair.target)
        self.exchange_service.receive_exchange_rate(pair.base, pair.target, rate)
        return rate


class ListExchangesUseCase:
    """List current exchanges in their external shape."""

    def __init__(self, exchange_service: ExchangeRateService):
        self.exchange_service = exchange_service

    def execute(self, request: ListExchangesRequest) -> list[ExchangeView]:
        exchanges = self.exchange_service.list_exchanges(
            request.source_currency, request.target_currency
        )
        return [ExchangeView.from_exchange(exchange) for exchange in exchanges]
