# src/xregister/adapters/providers/freecurrency.py
"""
FreeCurrencyAPI Provider

Fetches the latest rate for one pair from freecurrencyapi.com:

    GET {base_url}/latest?apikey=...&base_currency=USD&currencies=BRL
    ->  {"data": {"BRL": 5.25}}

Files that USE this module:
- xregister.adapters.providers (build_provider)
- tests.test_providers (unit tests)

Files that this module USES:
- xregister.adapters.providers.base (RateProvider interface)
- xregister.domain.errors (ProviderError)
"""
import logging

import requests

from xregister.adapters.providers.base import RateProvider
from xregister.domain.errors import ProviderError
from xregister.shared.validators import validate_api_key, validate_rate

log = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.freecurrencyapi.com/v1"


class FreeCurrencyAPIProvider(RateProvider):
    name = "freecurrencyapi"

    def __init__(self, api_key: str, base_url: str = DEFAULT_BASE_URL, timeout: int = 10):
        """
        Initialize FreeCurrencyAPI provider.
        
        Args:
            api_key: FreeCurrencyAPI key
            base_url: API root, defaults to the public v1 endpoint
            timeout: HTTP timeout in seconds
            
        Raises:
            ValueError: If the API key is missing or malformed
        """
        if not validate_api_key(api_key):
            raise ValueError("FREE_CURRENCY_API_KEY is missing or invalid.")
        self.api_key = api_key
        self.url = base_url.rstrip("/") + "/latest"
        self.timeout = timeout

    def fetch_rate(self, from_currency: str, to_currency: str) -> float:
        params = {
            "apikey": self.api_key,
            "base_currency": from_currency,
            "currencies": to_currency,
        }
        try:
            log.debug("Requesting %s→%s from FreeCurrencyAPI", from_currency, to_currency)
            resp = requests.get(self.url, params=params, timeout=self.timeout)
            resp.raise_for_status()
            data = resp.json()
        except requests.exceptions.Timeout as e:
            raise ProviderError(f"FreeCurrencyAPI timeout after {self.timeout}s") from e
        except requests.exceptions.HTTPError as e:
            status = e.response.status_code if e.response is not None else "?"
            raise ProviderError(f"FreeCurrencyAPI HTTP {status}: {e}") from e
        except requests.exceptions.RequestException as e:
            raise ProviderError(f"FreeCurrencyAPI request failed: {e}") from e
        except ValueError as e:
            raise ProviderError(f"FreeCurrencyAPI returned invalid JSON: {e}") from e

        # Expect: {"data": {"BRL": 5.25}}
        try:
            rate = float(data["data"][to_currency])
        except (KeyError, TypeError, ValueError) as e:
            raise ProviderError(
                f"FreeCurrencyAPI response missing 'data.{to_currency}' field"
            ) from e

        if not validate_rate(rate):
            raise ProviderError(f"FreeCurrencyAPI returned invalid rate {rate!r} for {from_currency}→{to_currency}")
        return rate
