# src/goldrate/shared/validators.py
"""
Input Validation Utilities - Configuration and Data Validation

This module provides validation and number-parsing helpers. It validates
URLs, source slugs, currency prefixes and API keys used by the settings,
and parses vendor number strings ("1,234.56") into floats.

Files that USE this module:
- goldrate.config.settings (uses validation functions in Settings field validators)
- goldrate.domain.sources (validates slugs and currency prefixes of registered sources)
- goldrate.application.derivation (parse_number for the 24K base price)
- goldrate.application.calculator (parse_number for weights and gram prices)
- goldrate.adapters.persistence.file_store (parse_number for history records)

Files that this module USES:
- None (pure utility functions)
"""
import math
import re
from typing import Optional

_LEADING_NUMBER = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?")


def validate_http_url(url: str) -> bool:
    """
    Validate an absolute HTTP(S) URL.

    Args:
        url: URL to validate

    Returns:
        True if valid, False otherwise
    """
    if not url:
        return False
    return bool(re.match(r'^https?://[^\s/$.?#][^\s]*$', url))


def validate_slug(slug: str) -> bool:
    """
    Validate a source slug (lowercase words joined by hyphens, e.g. "saudi-arabia").

    Args:
        slug: Slug to validate

    Returns:
        True if valid, False otherwise
    """
    if not slug:
        return False
    return bool(re.match(r'^[a-z0-9]+(-[a-z0-9]+)*$', slug))


def validate_currency_prefix(prefix: str) -> bool:
    """
    Validate the currency prefix used in vendor field keys (e.g. "QAR").

    Args:
        prefix: Prefix to validate

    Returns:
        True if valid, False otherwise
    """
    if not prefix:
        return False
    return bool(re.match(r'^[A-Z]{3}$', prefix))


def validate_api_key(api_key: str, min_length: int = 10) -> bool:
    """
    Validate API key format.

    Args:
        api_key: API key to validate
        min_length: Minimum length requirement

    Returns:
        True if valid, False otherwise
    """
    if not api_key:
        return False

    return len(api_key) >= min_length and not api_key.isspace()


def parse_number(text: Optional[str]) -> float:
    """
    Parse a vendor number string into a float.

    Thousands separators are removed and the leading numeric part is read,
    so "9,300.50" gives 9300.5 and "300.00 QAR" gives 300.0.
    Anything unparsable (None, "", "N/A", "nan") gives 0.0.

    Args:
        text: Number-like text

    Returns:
        Parsed float, or 0.0 when no number can be read
    """
    if text is None:
        return 0.0

    cleaned = str(text).replace(",", "").strip()
    match = _LEADING_NUMBER.match(cleaned)
    if not match:
        return 0.0

    value = float(match.group(0))
    if math.isnan(value) or math.isinf(value):
        return 0.0
    return value
