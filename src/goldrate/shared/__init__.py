"""
Shared Utilities - Cross-cutting Concerns

This package contains shared utilities used across all layers:
- Validation and number parsing
- Logging configuration
"""

from goldrate.shared.validators import (
    parse_number,
    validate_api_key,
    validate_currency_prefix,
    validate_http_url,
    validate_slug,
)
from goldrate.shared.logging_conf import setup_logging

__all__ = [
    "parse_number",
    "validate_api_key",
    "validate_currency_prefix",
    "validate_http_url",
    "validate_slug",
    "setup_logging",
]
