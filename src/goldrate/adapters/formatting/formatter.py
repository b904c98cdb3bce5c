# src/goldrate/adapters/formatting/formatter.py
"""
Text Formatter - Plain-text price summaries

This module renders price state as plain text lines (used for the refresh
log) and formats money amounts in the supported display currencies.

Files that USE this module:
- goldrate.app (source_lines for the per-refresh summary)
- tests.test_formatter (unit tests)

Files that this module USES:
- goldrate.domain.models (PriceSource, GoldMetrics parts)
- goldrate.application.state_manager (SourceState)
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import List, Optional

from goldrate.application.state_manager import SourceState
from goldrate.domain.models import PriceSource

CURRENCY_SYMBOLS = {
    "QAR": "QAR",
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "BDT": "৳",
}


def format_currency(amount: float, currency: str) -> str:
    """
    Format an amount with thousands separators and 2 decimals.

    QAR puts its code after the number ("1,234.50 QAR"); the other
    currencies put their symbol in front ("$1,234.50").

    Raises:
        ValueError: If the currency is not supported
    """
    try:
        symbol = CURRENCY_SYMBOLS[currency]
    except KeyError:
        raise ValueError(f"Unsupported display currency: {currency!r}") from None

    formatted = f"{amount:,.2f}"
    if currency == "QAR":
        return f"{formatted} {symbol}"
    return f"{symbol}{formatted}"


def _fmt_change(change: Optional[str], is_down: Optional[bool]) -> str:
    """Change text with a direction arrow, or an empty string if unknown."""
    if not change:
        return ""
    arrow = "▼" if is_down else "▲"
    return f" ({arrow} {change})"


def _fmt_elapsed(seconds: int) -> str:
    """
    Format elapsed time as 'Xh:YYmin' or 'Ymin'.

    Args:
        seconds: Elapsed time in seconds (will be clamped to >= 0)

    Returns:
        Formatted string like '2h:42min' or '5min'
    """
    if seconds < 0:
        seconds = 0
    minutes = seconds // 60
    hours = minutes // 60
    mins_only = minutes % 60
    if hours > 0:
        return f"{hours}h:{mins_only:02d}min"
    return f"{mins_only}min"


def source_lines(source: PriceSource, state: SourceState, now: Optional[datetime] = None) -> str:
    """
    Render one source's state as text lines.

    Shows the gram prices, spot gold and silver when known, plus the
    error and data age. Last good prices are shown even while an error
    is reported.

    Args:
        source: The price source
        state: Its current state
        now: Reference time for the data age (defaults to now, UTC)

    Returns:
        Multi-line string
    """
    title = f"{source.flag} {source.name} ({source.currency_code})".strip()
    lines: List[str] = [title]

    metrics = state.metrics
    if metrics.is_empty:
        lines.append("— No prices available")
    for entry in metrics.gram_prices:
        lines.append(
            f"— {entry.karat} [{entry.purity}]: {entry.price_per_gram} {source.currency_symbol}"
            f"{_fmt_change(entry.change, entry.is_down)}"
        )

    spot = metrics.spot_gold
    if spot is not None:
        lines.append(
            f"— Spot gold: {spot.per_ounce}/oz, {spot.per_tola}/tola, {spot.per_kg}/kg"
            f"{_fmt_change(spot.change, spot.is_down)}"
        )

    silver = metrics.silver_price
    if silver is not None:
        lines.append(
            f"— Silver: {silver.per_gram}/g, {silver.per_ounce}/oz, {silver.per_kg}/kg"
            f"{_fmt_change(silver.change, silver.is_down)}"
        )

    if state.error:
        lines.append(f"⚠️ {state.error}")
    if state.last_updated is not None:
        now = now or datetime.now(timezone.utc)
        elapsed = int((now - state.last_updated).total_seconds())
        lines.append(f"Updated {_fmt_elapsed(elapsed)} ago")

    return "\n".join(lines)
