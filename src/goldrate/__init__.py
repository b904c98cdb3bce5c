"""
GoldRate - Gold and Silver Price Extraction Engine

Fetches live gold and silver prices for Qatar and other countries through
rotating CORS proxies, parses the vendor markup, derives the missing karat
prices and keeps a per-country state with graceful degradation.
"""

__version__ = "1.0.0"
