# src/goldrate/application/derivation.py
"""
Price Derivation - Normalize raw vendor fields into GoldMetrics

Turns the flat field/change maps of one parsed page into gram price rows,
spot gold and silver metrics. 24K, 22K and 21K come straight from the
vendor; 18K, 14K, 10K and 6K are derived from the 24K price with fixed
purity ratios.

Display strings stay exactly as the vendor printed them (thousands
separators included); only the 24K base used for arithmetic is parsed.

Files that USE this module:
- goldrate.application.price_engine (derive_metrics after every parse)
- tests.test_derivation (unit tests)

Files that this module USES:
- goldrate.domain.models (GoldMetrics and its parts, KARAT_PURITY)
- goldrate.shared.validators (parse_number)
"""
from __future__ import annotations

from typing import Dict, List, Mapping, Optional

from goldrate.domain.models import (
    KARAT_PURITY,
    ChangeIndicator,
    GoldMetrics,
    GramPriceEntry,
    SilverMetric,
    SpotMetric,
    karat_label,
)
from goldrate.shared.validators import parse_number

# Vendor field key stems; the currency prefix is appended
GOLD_GRAM_STEMS = {
    24: "GXAUUSD_",
    22: "22GXAUUSD_",
    21: "21GXAUUSD_",
}
SPOT_OUNCE_STEM = "XAUUSD_"
SPOT_TOLA_STEM = "TXAUUSD_"
SPOT_KG_STEM = "KXAUUSD_"
SILVER_GRAM_STEM = "GXAGUSD_"
SILVER_OUNCE_STEM = "XAGUSD_"
SILVER_KG_STEM = "KXAGUSD_"

BASE_KARAT = 24
DERIVED_KARATS = (18, 14, 10, 6)
MISSING = "N/A"
CHANGE_SUFFIX = "_CHANGE"


def field_key(stem: str, currency_prefix: str) -> str:
    """Vendor field key, e.g. ("GXAUUSD_", "QAR") -> "GXAUUSD_QAR"."""
    return f"{stem}{currency_prefix}"


def _change_of(changes: Mapping[str, ChangeIndicator], key: str) -> Optional[ChangeIndicator]:
    return changes.get(f"{key}{CHANGE_SUFFIX}")


def _extracted_gram_prices(
    fields: Mapping[str, str],
    changes: Mapping[str, ChangeIndicator],
    currency_prefix: str,
) -> List[GramPriceEntry]:
    entries = []
    for karat, stem in GOLD_GRAM_STEMS.items():
        key = field_key(stem, currency_prefix)
        if key not in fields:
            continue
        change = _change_of(changes, key)
        entries.append(GramPriceEntry(
            karat=karat_label(karat),
            purity=KARAT_PURITY[karat].purity,
            price_per_gram=fields[key],
            change=change.value if change else None,
            is_down=change.is_down if change else None,
        ))
    return entries


def derive_karat_prices(base_24k: float) -> List[GramPriceEntry]:
    """
    Derive 18K/14K/10K/6K gram prices from the 24K gram price.

    Args:
        base_24k: 24K price per gram

    Returns:
        Derived entries (formatted to 2 decimals, no change data),
        or an empty list if the base is not positive
    """
    if base_24k <= 0:
        return []
    return [
        GramPriceEntry(
            karat=karat_label(karat),
            purity=KARAT_PURITY[karat].purity,
            price_per_gram=f"{base_24k * KARAT_PURITY[karat].ratio:.2f}",
        )
        for karat in DERIVED_KARATS
    ]


def _spot_metric(
    fields: Mapping[str, str],
    changes: Mapping[str, ChangeIndicator],
    currency_prefix: str,
) -> Optional[SpotMetric]:
    ounce = field_key(SPOT_OUNCE_STEM, currency_prefix)
    tola = field_key(SPOT_TOLA_STEM, currency_prefix)
    kg = field_key(SPOT_KG_STEM, currency_prefix)
    if not any(k in fields for k in (ounce, tola, kg)):
        return None

    change = _change_of(changes, ounce)
    return SpotMetric(
        per_ounce=fields.get(ounce) or MISSING,
        per_tola=fields.get(tola) or MISSING,
        per_kg=fields.get(kg) or MISSING,
        change=change.value if change else "0",
        is_down=change.is_down if change else False,
    )


def _silver_metric(
    fields: Mapping[str, str],
    changes: Mapping[str, ChangeIndicator],
    currency_prefix: str,
) -> Optional[SilverMetric]:
    gram = field_key(SILVER_GRAM_STEM, currency_prefix)
    ounce = field_key(SILVER_OUNCE_STEM, currency_prefix)
    kg = field_key(SILVER_KG_STEM, currency_prefix)
    if not any(k in fields for k in (gram, ounce, kg)):
        return None

    ounce_change = _change_of(changes, ounce)
    gram_change = _change_of(changes, gram)
    # Value from the ounce change, else the gram one; either one reading down marks silver down
    change = ounce_change or gram_change
    return SilverMetric(
        per_gram=fields.get(gram) or MISSING,
        per_ounce=fields.get(ounce) or MISSING,
        per_kg=fields.get(kg) or MISSING,
        change=change.value if change else "0",
        is_down=bool(
            (ounce_change and ounce_change.is_down) or (gram_change and gram_change.is_down)
        ),
    )


def derive_metrics(
    fields: Mapping[str, str],
    changes: Mapping[str, ChangeIndicator],
    currency_prefix: str,
) -> GoldMetrics:
    """
    Build GoldMetrics from the raw field and change maps of one page.

    Args:
        fields: Field key -> raw display string
        changes: "<field key>_CHANGE" -> ChangeIndicator
        currency_prefix: Currency suffix of the field keys (e.g. "QAR")

    Returns:
        GoldMetrics with gram prices sorted by karat, highest first.
        GoldMetrics.empty() when no 24K/22K/21K field was found.
    """
    gram_prices = _extracted_gram_prices(fields, changes, currency_prefix)
    if not gram_prices:
        return GoldMetrics.empty()

    base_24k = parse_number(fields.get(field_key(GOLD_GRAM_STEMS[BASE_KARAT], currency_prefix)))
    gram_prices.extend(derive_karat_prices(base_24k))

    # sorted() is stable, so equal karats keep insertion order
    gram_prices = sorted(gram_prices, key=lambda entry: entry.karat_number, reverse=True)

    return GoldMetrics(
        gram_prices=tuple(gram_prices),
        spot_gold=_spot_metric(fields, changes, currency_prefix),
        silver_price=_silver_metric(fields, changes, currency_prefix),
    )
