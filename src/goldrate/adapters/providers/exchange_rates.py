# src/goldrate/adapters/providers/exchange_rates.py
"""
Exchange Rate Provider - QAR conversion rates

Fetches conversion rates (units of each currency per 1 QAR) from a Supabase
edge function, with a TTL cache. When the function is unavailable, not
configured, or returns no rates, fixed offline rates are used instead so
conversion keeps working.

Files that USE this module:
- tests.test_exchange_rates (unit tests)

Files that this module USES:
- goldrate.config (settings for the Supabase endpoint, timeout and cache TTL)
"""
import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Dict, Optional

import requests

from goldrate.config import settings

log = logging.getLogger(__name__)

FALLBACK_RATES: Dict[str, float] = {
    "USD": 0.2747,
    "EUR": 0.2530,
    "GBP": 0.2180,
    "BDT": 32.82,
    "QAR": 1.0,
}
OFFLINE_MESSAGE = "Using offline rates"


@dataclass(frozen=True)
class ExchangeRates:
    """Units of each currency per 1 QAR."""
    rates: Dict[str, float] = field(default_factory=lambda: dict(FALLBACK_RATES))
    is_fallback: bool = False
    error: Optional[str] = None

    def convert(self, amount_qar: float, currency: str) -> float:
        """
        Convert a QAR amount.

        Raises:
            ValueError: If the currency has no rate
        """
        try:
            rate = self.rates[currency]
        except KeyError:
            raise ValueError(f"No exchange rate for {currency!r}") from None
        return amount_qar * rate


class ExchangeRateProvider:
    """
    Supabase-backed exchange rate provider.

    The function answers {"rates": {"USD": 0.2747, ...}}; successful
    answers are cached for the configured TTL.
    """

    # Class-level cache shared across instances
    _cache_data: Optional[ExchangeRates] = None
    _cache_ts: Optional[datetime] = None

    def __init__(self, function_url: Optional[str] = None, anon_key: Optional[str] = None,
                 timeout: Optional[int] = None):
        """
        Initialize exchange rate provider.

        Args:
            function_url: Optional function URL (defaults to the configured get-exchange-rates function)
            anon_key: Optional Supabase anon key (defaults to settings.supabase_anon_key)
            timeout: Optional HTTP timeout in seconds (defaults to settings.http_timeout_seconds)
        """
        if function_url is None and settings.supabase_url:
            function_url = settings.function_url(settings.exchange_rates_function)
        self.url = function_url or ""
        self.anon_key = anon_key if anon_key is not None else settings.supabase_anon_key
        self.timeout = timeout or settings.http_timeout_seconds
        self.ttl = timedelta(minutes=settings.exchange_rates_cache_minutes)

    def _cache_valid(self) -> bool:
        """
        Check if cached data is still valid based on TTL.

        Returns:
            True if cache exists and is within TTL, False otherwise
        """
        if self._cache_data is None or self._cache_ts is None:
            return False
        return datetime.now(timezone.utc) - self._cache_ts < self.ttl

    def _fetch_rates(self) -> Dict[str, float]:
        """
        Call the exchange rate function.

        Returns:
            Currency -> rate mapping

        Raises:
            RuntimeError: If the request fails or the payload has no usable rates
        """
        if not self.url:
            raise RuntimeError("Exchange rate function not configured")

        headers = {"apikey": self.anon_key, "Authorization": f"Bearer {self.anon_key}"} if self.anon_key else {}
        try:
            log.info("Fetching exchange rates from %s", self.url)
            resp = requests.post(self.url, headers=headers, json={}, timeout=self.timeout)
            resp.raise_for_status()
            data = resp.json()
        except requests.exceptions.Timeout:
            raise RuntimeError(f"Exchange rate request timeout after {self.timeout}s")
        except requests.exceptions.RequestException as e:
            raise RuntimeError(f"Exchange rate request failed: {e}")
        except ValueError as e:
            raise RuntimeError(f"Exchange rate function returned invalid JSON: {e}")

        rates = data.get("rates") if isinstance(data, dict) else None
        if not isinstance(rates, dict) or not rates:
            raise RuntimeError("Exchange rate response missing 'rates'")

        try:
            return {str(k): float(v) for k, v in rates.items()}
        except (TypeError, ValueError) as e:
            raise RuntimeError(f"Exchange rate response has non-numeric rates: {e}")

    def get_rates(self) -> ExchangeRates:
        """
        Get current exchange rates.

        Returns:
            Live rates (cached for the TTL), or the offline fallback rates
            with is_fallback=True when they cannot be fetched
        """
        if self._cache_valid():
            log.debug("Using cached exchange rates")
            return self._cache_data  # type: ignore[return-value]

        try:
            rates = self._fetch_rates()
        except RuntimeError as e:
            log.warning("Failed to fetch exchange rates, using fallback: %s", e)
            return ExchangeRates(rates=dict(FALLBACK_RATES), is_fallback=True, error=OFFLINE_MESSAGE)

        result = ExchangeRates(rates=rates)
        ExchangeRateProvider._cache_data = result
        ExchangeRateProvider._cache_ts = datetime.now(timezone.utc)
        log.info("Exchange rates updated (ttl=%sm)", settings.exchange_rates_cache_minutes)
        return result
