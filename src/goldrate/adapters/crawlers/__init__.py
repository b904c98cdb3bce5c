"""
Web Crawlers for Gold Price Pages

This package fetches vendor price pages through CORS proxies and extracts
raw price fields from their markup.
"""

from goldrate.adapters.crawlers.markup_parser import ParsedMarkup, parse_markup
from goldrate.adapters.crawlers.proxy_fetcher import DEFAULT_PROXIES, ProxyFetcher, unwrap_contents

__all__ = ["ParsedMarkup", "parse_markup", "DEFAULT_PROXIES", "ProxyFetcher", "unwrap_contents"]
