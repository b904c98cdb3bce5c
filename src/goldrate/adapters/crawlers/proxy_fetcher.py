# src/goldrate/adapters/crawlers/proxy_fetcher.py
"""
Proxy Fetcher - Fetch pages through a chain of CORS proxies

The vendor price pages are fetched through public CORS-bypass proxies.
Proxies are tried in order; any failure (non-2xx status, network error,
timeout) moves on to the next proxy immediately. There is no retry within
one proxy: proxy availability, not transient network blips, is what fails.

Files that USE this module:
- goldrate.application.price_engine (PriceEngine fetches page bodies through ProxyFetcher)
- goldrate.app (builds the fetcher from settings)

Files that this module USES:
- goldrate.domain.errors (FetchFailure, ProxyExhaustedError)
- goldrate.config (settings for the per-attempt timeout)
"""

from __future__ import annotations  # Enable postponed evaluation of annotations

import asyncio  # Hard timeout around each proxy attempt
import json  # Detect JSON-wrapped proxy responses
import logging  # Standard library for logging messages
from typing import Callable, Optional, Sequence  # Type hints
from urllib.parse import quote  # URL-encode the target like encodeURIComponent

import httpx  # Async HTTP client

from goldrate.domain.errors import FetchFailure, ProxyExhaustedError

log = logging.getLogger(__name__)  # Create logger for this module

ProxyBuilder = Callable[[str], str]

# Characters encodeURIComponent leaves untouched
_URI_COMPONENT_SAFE = "-_.!~*'()"


def encode_uri_component(value: str) -> str:
    """Percent-encode a value the way JavaScript's encodeURIComponent does."""
    return quote(value, safe=_URI_COMPONENT_SAFE)


def codetabs_proxy(url: str) -> str:
    return f"https://api.codetabs.com/v1/proxy?quest={encode_uri_component(url)}"


def corsproxy_io(url: str) -> str:
    return f"https://corsproxy.io/?{encode_uri_component(url)}"


DEFAULT_PROXIES: Sequence[ProxyBuilder] = (codetabs_proxy, corsproxy_io)


def unwrap_contents(body: str) -> str:
    """
    Unwrap a JSON envelope of the form {"contents": "<html>"}.

    Some proxies wrap the target page this way. Any other body, JSON or not,
    is returned verbatim.

    Args:
        body: Raw response body

    Returns:
        The wrapped page, or the body itself
    """
    try:
        payload = json.loads(body)
    except ValueError:
        return body

    if isinstance(payload, dict):
        contents = payload.get("contents")
        if isinstance(contents, str) and contents:
            return contents
    return body


class ProxyFetcher:
    """
    Fetches a URL through an ordered chain of CORS proxies.

    Each attempt is a single GET with a hard timeout; the first proxy that
    answers with a 2xx status wins.
    """

    def __init__(
        self,
        proxies: Optional[Sequence[ProxyBuilder]] = None,
        timeout: Optional[float] = None,
    ):
        """
        Initialize the proxy chain.

        Args:
            proxies: Ordered proxy URL builders (defaults to DEFAULT_PROXIES)
            timeout: Per-attempt timeout in seconds (defaults to settings.proxy_timeout_seconds)
        """
        if timeout is None:
            from goldrate.config import settings
            timeout = settings.proxy_timeout_seconds

        self.proxies = tuple(proxies if proxies is not None else DEFAULT_PROXIES)
        if len(self.proxies) < 1:
            raise ValueError("ProxyFetcher needs at least one proxy")
        self.timeout = timeout

    async def _get(self, proxy_url: str) -> str:
        """
        Issue one GET through a proxy.

        Raises:
            FetchFailure: On a non-2xx status
            httpx.HTTPError: On network errors
            asyncio.TimeoutError: When the attempt exceeds the timeout
        """
        async with httpx.AsyncClient(timeout=self.timeout, follow_redirects=True) as client:
            resp = await asyncio.wait_for(client.get(proxy_url), timeout=self.timeout)

        if not 200 <= resp.status_code < 300:
            raise FetchFailure(f"HTTP error: status {resp.status_code}")
        return resp.text

    async def fetch(self, target_url: str) -> str:
        """
        Fetch a page body through the proxy chain.

        Args:
            target_url: Absolute HTTP(S) URL of the page

        Returns:
            Page body (unwrapped from a {"contents": ...} envelope if present)

        Raises:
            ProxyExhaustedError: If every proxy failed
        """
        last_error: Optional[BaseException] = None

        for build in self.proxies:
            proxy_url = build(target_url)
            log.info("Trying proxy: %s", proxy_url)
            try:
                body = await self._get(proxy_url)
            except asyncio.TimeoutError:
                log.warning("Proxy timed out after %ss: %s", self.timeout, proxy_url)
                last_error = FetchFailure(f"Proxy request timed out after {self.timeout}s")
                continue
            except (httpx.HTTPError, httpx.InvalidURL, FetchFailure) as e:
                log.warning("Proxy failed: %s: %s", proxy_url, e)
                last_error = e
                continue

            return unwrap_contents(body)

        log.error("All %d proxies failed for %s: %s", len(self.proxies), target_url, last_error)
        raise ProxyExhaustedError(last_error)
