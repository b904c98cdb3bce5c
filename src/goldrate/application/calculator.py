# src/goldrate/application/calculator.py
"""
Gold Calculator - Value of a gold weight at current prices

Converts a weight in grams, bori, tola or troy ounces to grams and prices
it with the gram price of the chosen karat.

Files that USE this module:
- tests.test_calculator (unit tests)

Files that this module USES:
- goldrate.domain.models (GramPriceEntry)
- goldrate.shared.validators (parse_number)
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, Union

from goldrate.domain.models import GramPriceEntry
from goldrate.shared.validators import parse_number

GRAMS_PER_UNIT: Dict[str, float] = {
    "gram": 1.0,
    "bori": 11.664,
    "tola": 11.664,
    "ounce": 31.1035,
}


@dataclass(frozen=True)
class GoldValuation:
    weight_in_grams: float
    price_per_gram: float
    total_value: float

    def formatted(self) -> Dict[str, str]:
        """Display strings: grams and gram price to 2 decimals, total with separators."""
        return {
            "weight_in_grams": f"{self.weight_in_grams:.2f}",
            "price_per_gram": f"{self.price_per_gram:.2f}",
            "total_value": f"{self.total_value:,.2f}",
        }


def to_grams(weight: Union[float, str], unit: str = "gram") -> float:
    """
    Convert a weight to grams.

    Raises:
        ValueError: If the unit is unknown
    """
    try:
        factor = GRAMS_PER_UNIT[unit]
    except KeyError:
        raise ValueError(f"Unknown weight unit: {unit!r}") from None
    return parse_number(str(weight)) * factor


def calculate_value(
    prices: Iterable[GramPriceEntry],
    weight: Union[float, str],
    unit: str = "gram",
    karat: str = "24K Gold",
) -> GoldValuation:
    """
    Price a gold weight.

    Args:
        prices: Current gram prices
        weight: Weight as a number or text (unparsable text counts as 0)
        unit: One of GRAMS_PER_UNIT
        karat: Karat label to price with; a karat missing from prices is priced at 0

    Returns:
        GoldValuation with grams, gram price and total value

    Raises:
        ValueError: If the unit is unknown
    """
    grams = to_grams(weight, unit)
    entry = next((p for p in prices if p.karat == karat), None)
    price_per_gram = parse_number(entry.price_per_gram) if entry else 0.0
    return GoldValuation(
        weight_in_grams=grams,
        price_per_gram=price_per_gram,
        total_value=price_per_gram * grams,
    )
