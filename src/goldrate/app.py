# src/goldrate/app.py
"""
Application Entry Point - Price Refresher

This module serves as the composition root. It wires the proxy fetcher,
the persistence sink and the price engine from settings, then refreshes
every registered source on a fixed interval and logs a text summary.

Files that USE this module:
- goldrate console script (pyproject entry point)

Files that this module USES:
- goldrate.shared.logging_conf (setup_logging for logging configuration)
- goldrate.config (settings for configuration management)
- goldrate.application.price_engine (PriceEngine)
- goldrate.adapters.crawlers.proxy_fetcher (ProxyFetcher)
- goldrate.adapters.persistence.price_sink (build_sink)
- goldrate.adapters.formatting.formatter (source_lines for the summary)
"""

from __future__ import annotations  # Enable postponed evaluation of annotations for forward references

import asyncio  # Event loop for the refresh cycle
import logging  # Standard library for logging messages and errors

from goldrate.adapters.crawlers.proxy_fetcher import ProxyFetcher  # Proxy chain fetcher
from goldrate.adapters.formatting.formatter import source_lines  # Text summary per source
from goldrate.adapters.persistence.price_sink import build_sink  # Configured persistence backend
from goldrate.application.price_engine import PriceEngine  # Fetch/parse/derive engine
from goldrate.domain.sources import default_registry  # Supported country pages
from goldrate.shared.logging_conf import setup_logging  # Configure logging with file rotation

logger = logging.getLogger(__name__)


def build_engine(settings) -> PriceEngine:
    """
    Build a PriceEngine from settings.

    Raises:
        UnknownSourceError: If settings.default_source is not a registered slug
    """
    registry = default_registry()
    registry.get(settings.default_source)

    return PriceEngine(
        registry=registry,
        fetcher=ProxyFetcher(timeout=settings.proxy_timeout_seconds),
        sink=build_sink(settings),
        primary_slug=settings.default_source,
        batch_size=settings.batch_size,
        batch_delay=settings.batch_delay_seconds,
    )


def log_summary(engine: PriceEngine) -> None:
    """Log one text block per source and a one-line tally."""
    states = engine.states()
    failed = 0
    for source in engine.registry:
        state = states.get(source.slug) or engine.state(source.slug)
        if state.error:
            failed += 1
        logger.info("\n%s", source_lines(source, state))
    logger.info("Refresh finished: %d ok, %d failed", len(engine.registry) - failed, failed)


async def run(engine: PriceEngine, interval_minutes: int, once: bool = False) -> None:
    """
    Refresh all sources, then repeat every interval_minutes.

    Args:
        engine: Configured engine
        interval_minutes: Minutes between refresh cycles
        once: Stop after the first cycle
    """
    try:
        while True:
            await engine.refetch_all()
            log_summary(engine)
            if once:
                break
            await asyncio.sleep(interval_minutes * 60)
    finally:
        await engine.drain()


def main() -> None:
    """
    Configure logging, build the engine and run the refresh loop.
    """
    # Import settings here so a bad .env fails inside main, not at import time
    from goldrate.config import settings

    setup_logging(
        level=settings.log_level,
        log_file=settings.log_file,
        log_dir=settings.log_dir,
        log_to_stdout=settings.log_stdout,
        max_bytes=settings.log_max_bytes,
        backup_count=settings.log_backup_count,
    )

    engine = build_engine(settings)
    logger.info(
        "Starting price refresher… %d sources, interval=%d minutes, batch size=%d, persistence=%s",
        len(engine.registry),
        settings.refresh_interval_minutes,
        engine.batch_size,
        engine.sink.name,
    )

    try:
        asyncio.run(run(engine, settings.refresh_interval_minutes, once=settings.run_once))
    except KeyboardInterrupt:
        logger.info("Refresher stopped by user (KeyboardInterrupt)")


if __name__ == "__main__":
    main()
