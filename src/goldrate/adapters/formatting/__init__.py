"""
Formatting Adapters - Text Output

This package contains text formatting for price summaries and amounts.
"""

from goldrate.adapters.formatting.formatter import format_currency, source_lines

__all__ = ["format_currency", "source_lines"]
