"""
Data Providers

This package contains API clients for auxiliary market data.
"""

from goldrate.adapters.providers.exchange_rates import ExchangeRateProvider, ExchangeRates, FALLBACK_RATES

__all__ = ["ExchangeRateProvider", "ExchangeRates", "FALLBACK_RATES"]
