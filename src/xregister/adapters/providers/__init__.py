# src/xregister/adapters/providers/__init__.py
"""
Provider Adapters - External API Clients

This package contains adapters for external exchange rate APIs.
All providers implement the RateProvider interface.
"""

from xregister.adapters.providers.base import RateProvider
from xregister.adapters.providers.freecurrency import FreeCurrencyAPIProvider
from xregister.adapters.providers.http_rate import HTTPRateProvider
from xregister.config.settings import PROVIDER_HTTP, Settings


def build_provider(settings: Settings) -> RateProvider:
    """
    Create the rate provider selected by EXCHANGE_RATE_PROVIDER.
    
    Raises:
        ValueError: If the selected provider is missing its configuration
    """
    if settings.rate_provider == PROVIDER_HTTP:
        return HTTPRateProvider(
            settings.exchange_rate_api_url,
            timeout=settings.http_timeout_seconds,
        )
    return FreeCurrencyAPIProvider(
        settings.free_currency_api_key,
        base_url=settings.free_currency_api_url,
        timeout=settings.http_timeout_seconds,
    )


__all__ = [
    "RateProvider",
    "FreeCurrencyAPIProvider",
    "HTTPRateProvider",
    "build_provider",
]
