# src/goldrate/adapters/crawlers/markup_parser.py
"""
Price Markup Parser

Extracts raw price fields and change indicators from a vendor price page.
Prices are marked with a data-price attribute holding the vendor field key
(e.g. GXAUUSD_QAR); change values live in elements whose id is the field
key plus "_CHANGE", inside a red-font (down) or green-font (up) wrapper.

The parser is a dumb text-extraction layer: values keep their thousands
separators and nothing is interpreted as a number here.

Files that USE this module:
- goldrate.application.price_engine (parse_markup runs on every fetched page)

Files that this module USES:
- goldrate.domain.models (ChangeIndicator)
"""

from __future__ import annotations  # Enable postponed evaluation of annotations

import itertools  # Walk an element and its ancestors
import re  # Whitespace removal
from typing import Dict, NamedTuple, Optional  # Type hints

from bs4 import BeautifulSoup, Tag  # HTML parsing library for extracting data from web pages

from goldrate.domain.models import ChangeIndicator

PRICE_ATTR = "data-price"
CHANGE_SUFFIX = "_CHANGE"
DOWN_CLASS = "red-font"
UP_CLASS = "green-font"

_WHITESPACE = re.compile(r"\s+")


class ParsedMarkup(NamedTuple):
    """Raw field map and change map from one parse pass."""
    fields: Dict[str, str]
    changes: Dict[str, ChangeIndicator]


def _belongs_to(key: str, currency_prefix: str, suffix: str = "") -> bool:
    return not currency_prefix or key.endswith(f"_{currency_prefix}{suffix}")


def _trend_element(el: Tag) -> Optional[Tag]:
    """Nearest element (itself or an ancestor) whose class mentions a trend style."""
    for node in itertools.chain((el,), el.parents):
        classes = node.get("class") or []
        joined = " ".join(classes)
        if DOWN_CLASS in joined or UP_CLASS in joined:
            return node
    return None


def _is_down(el: Tag, value: str) -> bool:
    trend = _trend_element(el)
    if trend is not None and DOWN_CLASS in (trend.get("class") or []):
        return True
    return value.startswith("-")


def parse_markup(document: str, currency_prefix: str = "") -> ParsedMarkup:
    """
    Parse a vendor page into raw price fields and change indicators.

    Args:
        document: HTML page
        currency_prefix: Optional currency (e.g. "QAR"); when given, only
            field keys of that currency are kept

    Returns:
        ParsedMarkup(fields, changes); both maps are empty when nothing matches
    """
    soup = BeautifulSoup(document or "", "html.parser")

    fields: Dict[str, str] = {}
    for el in soup.find_all(attrs={PRICE_ATTR: True}):
        key = el.get(PRICE_ATTR)
        value = _WHITESPACE.sub("", el.get_text())
        if key and value and _belongs_to(key, currency_prefix):
            fields[key] = value

    changes: Dict[str, ChangeIndicator] = {}
    for el in soup.find_all(id=lambda v: bool(v) and v.endswith(CHANGE_SUFFIX)):
        key = el.get("id")
        if not _belongs_to(key, currency_prefix, CHANGE_SUFFIX):
            continue
        value = el.get_text(strip=True) or "0"
        changes[key] = ChangeIndicator(value=value, is_down=_is_down(el, value))

    return ParsedMarkup(fields=fields, changes=changes)
