"""
Foreign exchange service for currency conversion.
"""
import logging
from decimal import Decimal
from typing import Dict
import httpx
from fairfare.core.config import settings

logger = logging.getLogger(__name__)

COMMON_CURRENCIES = ["USD", "EUR", "GBP", "JPY", "INR", "AUD", "CAD", "CHF", "CNY", "SGD"]


class RateProvider:
    """Latest rates from the open ExchangeRate-API endpoint (no key required)."""

    def __init__(self, api_url: str = None, timeout: float = None):
        self.api_url = (api_url or settings.FX_API_URL).rstrip("/")
        self.timeout = timeout or settings.FX_TIMEOUT

    async def fetch(self, base_currency: str) -> Dict[str, Decimal]:
        """
        Fetch rates for a base currency.

        Returns:
            Mapping of currency code to rate (1 base = rate code)

        Raises:
            ValueError: Network, HTTP or API error
        """
        base = base_currency.upper()
        url = f"{self.api_url}/{base}"
        logger.info(f"Fetching latest exchange rates for {base}")

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.get(url)
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPStatusError as e:
            logger.error(f"HTTP error with ExchangeRate-API: {e.response.status_code} - {e.response.text}")
            raise ValueError(f"ExchangeRate-API HTTP error: {e.response.status_code}")
        except httpx.HTTPError as e:
            logger.error(f"HTTP error with ExchangeRate-API: {e}")
            raise ValueError(f"ExchangeRate-API network error: {str(e)}")

        if data.get("result") != "success":
            error_msg = data.get("error-type", "Unknown error")
            logger.error(f"ExchangeRate-API returned error: {error_msg}")
            raise ValueError(f"ExchangeRate-API error: {error_msg}")

        rates = data.get("rates", {})
        return {code: Decimal(str(rate)) for code, rate in rates.items()}


def convert(amount: Decimal, rates: Dict[str, Decimal], to_currency: str) -> Decimal:
    """
    Convert an amount in the rates' base currency.

    Raises:
        ValueError: If the target currency is not in rates
    """
    rate = rates.get(to_currency.upper())
    if rate is None:
        raise ValueError(f"{to_currency.upper()} rate not available")
    return amount * rate
