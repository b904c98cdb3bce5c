"""
Price Sources - Registry of Scrapeable Country Pages

Defines the country pages prices are scraped from and a small registry
mapping slug -> PriceSource.

Files that USE this module:
- goldrate.application.price_engine (resolves slugs for manual refetch and refetch_all)
- goldrate.app (builds the default registry)

Files that this module USES:
- goldrate.domain.models (PriceSource)
- goldrate.domain.errors (UnknownSourceError)
- goldrate.shared.validators (slug, URL and currency prefix validation)
"""
from __future__ import annotations

from typing import Dict, Iterable, Iterator, List

from goldrate.domain.errors import UnknownSourceError
from goldrate.domain.models import PriceSource
from goldrate.shared.validators import validate_currency_prefix, validate_http_url, validate_slug

VENDOR_BASE_URL = "https://www.livepriceofgold.com"
DEFAULT_SLUG = "qatar"


def _vendor_source(slug: str, name: str, code: str, symbol: str, flag: str) -> PriceSource:
    return PriceSource(
        slug=slug,
        name=name,
        currency_code=code,
        currency_symbol=symbol,
        url=f"{VENDOR_BASE_URL}/{slug}-gold-price.html",
        price_prefix=code,
        flag=flag,
    )


DEFAULT_SOURCES: List[PriceSource] = [
    _vendor_source("qatar", "Qatar", "QAR", "QAR", "🇶🇦"),
    _vendor_source("uae", "United Arab Emirates", "AED", "AED", "🇦🇪"),
    _vendor_source("dubai", "Dubai", "AED", "AED", "🇦🇪"),
    _vendor_source("saudi-arabia", "Saudi Arabia", "SAR", "SAR", "🇸🇦"),
    _vendor_source("kuwait", "Kuwait", "KWD", "KWD", "🇰🇼"),
    _vendor_source("usa", "United States", "USD", "$", "🇺🇸"),
    _vendor_source("uk", "United Kingdom", "GBP", "£", "🇬🇧"),
    _vendor_source("australia", "Australia", "AUD", "A$", "🇦🇺"),
    _vendor_source("canada", "Canada", "CAD", "C$", "🇨🇦"),
    _vendor_source("singapore", "Singapore", "SGD", "S$", "🇸🇬"),
]


class SourceRegistry:
    """Immutable slug -> PriceSource mapping, in registration order."""

    def __init__(self, sources: Iterable[PriceSource]):
        """
        Build a registry and validate every source.

        Args:
            sources: Sources to register

        Raises:
            ValueError: On a duplicate slug or a malformed slug, URL or prefix
        """
        self._sources: Dict[str, PriceSource] = {}
        for source in sources:
            if source.slug in self._sources:
                raise ValueError(f"Duplicate price source slug: {source.slug}")
            if not validate_slug(source.slug):
                raise ValueError(f"Invalid price source slug: {source.slug!r}")
            if not validate_http_url(source.url):
                raise ValueError(f"Invalid URL for price source {source.slug}: {source.url!r}")
            if not validate_currency_prefix(source.price_prefix):
                raise ValueError(f"Invalid currency prefix for price source {source.slug}: {source.price_prefix!r}")
            self._sources[source.slug] = source

    def get(self, slug: str) -> PriceSource:
        """
        Resolve a slug.

        Raises:
            UnknownSourceError: If the slug is not registered
        """
        try:
            return self._sources[slug]
        except KeyError:
            raise UnknownSourceError(slug) from None

    def all(self) -> List[PriceSource]:
        return list(self._sources.values())

    def slugs(self) -> List[str]:
        return list(self._sources)

    def __contains__(self, slug: object) -> bool:
        return slug in self._sources

    def __iter__(self) -> Iterator[PriceSource]:
        return iter(self._sources.values())

    def __len__(self) -> int:
        return len(self._sources)


def default_registry() -> SourceRegistry:
    """Registry of all supported country pages."""
    return SourceRegistry(DEFAULT_SOURCES)
