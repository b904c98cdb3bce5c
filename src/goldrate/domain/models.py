"""
Domain Models - Pure Business Objects

This module contains domain models representing core business concepts:
- Price sources (one scrapeable country page)
- Gram price rows, spot gold and silver metrics
- The aggregate GoldMetrics result
- Karat purity table

Files that USE this module:
- goldrate.application.* (derivation, engine, calculator use domain models)
- goldrate.adapters.* (parser, sinks and formatter create and use domain models)
- tests.* (tests use domain models for test data)

Files that this module USES:
- None (pure domain layer, no external dependencies)
"""

from __future__ import annotations  # Enable postponed evaluation of annotations

import re  # Regular expressions for reading the karat number
from dataclasses import dataclass  # Decorator for creating data classes
from typing import Any, Dict, Optional, Tuple  # Type hints


@dataclass(frozen=True)
class KaratInfo:
    """Purity label and gold ratio (karat / 24) of one karat."""
    purity: str
    ratio: float


KARAT_PURITY: Dict[int, KaratInfo] = {
    24: KaratInfo(purity="99.9%", ratio=1.0),
    22: KaratInfo(purity="91.6%", ratio=22 / 24),
    21: KaratInfo(purity="87.5%", ratio=21 / 24),
    18: KaratInfo(purity="75.0%", ratio=18 / 24),
    14: KaratInfo(purity="58.3%", ratio=14 / 24),
    10: KaratInfo(purity="41.7%", ratio=10 / 24),
    6: KaratInfo(purity="25.0%", ratio=6 / 24),
}


def karat_label(karat: int) -> str:
    """Display label of a karat, e.g. 24 -> "24K Gold"."""
    return f"{karat}K Gold"


@dataclass(frozen=True)
class PriceSource:
    """
    One scrapeable price page.

    Attributes:
        slug: Registry key (e.g. "qatar")
        name: Display name (e.g. "Qatar")
        currency_code: ISO-like currency code (e.g. "QAR")
        currency_symbol: Symbol used for display (e.g. "QAR", "$")
        url: Target page URL
        price_prefix: Currency suffix used in the page's field keys (e.g. "QAR")
        flag: Optional flag emoji
    """
    slug: str
    name: str
    currency_code: str
    currency_symbol: str
    url: str
    price_prefix: str
    flag: str = ""


@dataclass(frozen=True)
class ChangeIndicator:
    """A change value as displayed by the vendor and whether it is a decrease."""
    value: str
    is_down: bool


@dataclass(frozen=True)
class GramPriceEntry:
    """
    One row of the gram price table.

    Attributes:
        karat: Karat label (e.g. "24K Gold")
        purity: Purity label (e.g. "99.9%")
        price_per_gram: Display string, verbatim from the vendor or derived
        change: Optional change string from the vendor
        is_down: Optional decrease flag from the vendor
    """
    karat: str
    purity: str
    price_per_gram: str
    change: Optional[str] = None
    is_down: Optional[bool] = None

    @property
    def karat_number(self) -> int:
        """Integer prefix of the karat label (0 when missing)."""
        match = re.match(r"\s*(\d+)", self.karat)
        return int(match.group(1)) if match else 0

    def to_json(self) -> Dict[str, Any]:
        """
        Convert to the JSON shape consumed by the persistence endpoint.

        Returns:
            Dictionary with camelCase keys; change/isDown only when known
        """
        data: Dict[str, Any] = {
            "karat": self.karat,
            "purity": self.purity,
            "pricePerGram": self.price_per_gram,
        }
        if self.change is not None:
            data["change"] = self.change
        if self.is_down is not None:
            data["isDown"] = self.is_down
        return data


@dataclass(frozen=True)
class SpotMetric:
    """International spot gold price in the source currency."""
    per_ounce: str
    per_tola: str
    per_kg: str
    change: str
    is_down: bool


@dataclass(frozen=True)
class SilverMetric:
    """Silver price in the source currency."""
    per_gram: str
    per_ounce: str
    per_kg: str
    change: str
    is_down: bool


@dataclass(frozen=True)
class GoldMetrics:
    """
    Aggregate extraction result of one source.

    Either it has at least one gram price, or it is the empty value and
    the fetch is treated as unproductive.
    """
    gram_prices: Tuple[GramPriceEntry, ...] = ()
    spot_gold: Optional[SpotMetric] = None
    silver_price: Optional[SilverMetric] = None

    @classmethod
    def empty(cls) -> GoldMetrics:
        """Return the canonical empty metrics."""
        return cls()

    @property
    def is_empty(self) -> bool:
        """True when no gram price was extracted."""
        return not self.gram_prices

    def gram_price(self, karat: str) -> Optional[GramPriceEntry]:
        """
        Look up the gram price row of a karat label.

        Args:
            karat: Karat label (e.g. "22K Gold")

        Returns:
            Matching entry or None
        """
        for entry in self.gram_prices:
            if entry.karat == karat:
                return entry
        return None
