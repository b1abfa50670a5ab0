# src/xregister/adapters/providers/http_rate.py
"""
Generic HTTP Rate Provider

Calls a generic conversion endpoint:

    GET {base_url}/convert?from=USD&to=BRL  ->  {"result": 5.25, ...}

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
from xregister.shared.validators import validate_rate

log = logging.getLogger(__name__)


class HTTPRateProvider(RateProvider):
    name = "http"

    def __init__(self, base_url: str, timeout: int = 10):
        """
        Initialize the generic HTTP provider.
        
        Args:
            base_url: Root URL of the rate API (without the /convert path)
            timeout: HTTP timeout in seconds
            
        Raises:
            ValueError: If base_url is empty
        """
        if not base_url:
            raise ValueError("EXCHANGE_RATE_API_URL is not configured.")
        self.url = base_url.rstrip("/") + "/convert"
        self.timeout = timeout

    def fetch_rate(self, from_currency: str, to_currency: str) -> float:
        params = {"from": from_currency, "to": to_currency}
        try:
            log.debug("Requesting %s→%s from %s", from_currency, to_currency, self.url)
            resp = requests.get(self.url, params=params, timeout=self.timeout)
            if resp.status_code != 200:
                raise ProviderError(
                    f"rate API returned unexpected status code {resp.status_code} "
                    f"for {from_currency}→{to_currency}"
                )
            data = resp.json()
        except requests.exceptions.Timeout as e:
            raise ProviderError(f"rate API timeout after {self.timeout}s") from e
        except requests.exceptions.RequestException as e:
            raise ProviderError(f"rate API request failed: {e}") from e
        except ValueError as e:
            raise ProviderError(f"rate API returned invalid JSON: {e}") from e

        try:
            rate = float(data["result"])
        except (KeyError, TypeError, ValueError) as e:
            raise ProviderError(f"rate API response missing numeric 'result': {data!r}") from e

        if not validate_rate(rate):
            raise ProviderError(f"rate API returned invalid rate {rate!r} for {from_currency}→{to_currency}")
        return rate
