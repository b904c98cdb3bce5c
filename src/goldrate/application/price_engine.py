# src/goldrate/application/price_engine.py
"""
Price Engine - Fetch, parse and derive prices for every source

One engine serves the single default country and the multi-country
overview alike: each source runs Fetch -> Parse -> Derive, and the outcome
is written to that source's state. Failures never clear the last good
metrics (stale-while-revalidate) and never spill over to sibling sources.

Multi-source refreshes run in small parallel batches with a pause between
batches so the public proxies are not flooded.

Files that USE this module:
- goldrate.app (runs refetch_all on a timer)
- tests.test_price_engine (unit tests)

Files that this module USES:
- goldrate.adapters.crawlers.proxy_fetcher (ProxyFetcher)
- goldrate.adapters.crawlers.markup_parser (parse_markup)
- goldrate.application.derivation (derive_metrics)
- goldrate.application.state_manager (StateManager, SourceState)
- goldrate.adapters.persistence.price_sink (PriceSink for best-effort saves)
- goldrate.domain (PriceSource, SourceRegistry, errors)
- goldrate.config (settings for batch size, batch delay, default source)
"""
from __future__ import annotations  # Enable postponed evaluation of annotations

import asyncio  # Concurrent batch fetches and background saves
import logging  # Standard library for logging messages
from datetime import datetime, timezone  # Timestamps for last_updated
from typing import Dict, Optional, Sequence, Set  # Type hints

from goldrate.adapters.crawlers.markup_parser import parse_markup  # HTML -> raw field maps
from goldrate.adapters.crawlers.proxy_fetcher import ProxyFetcher  # Proxy chain fetcher
from goldrate.adapters.persistence.price_sink import NullSink, PriceSink  # Best-effort persistence
from goldrate.application.derivation import derive_metrics  # Raw maps -> GoldMetrics
from goldrate.application.state_manager import SourceState, StateManager  # Per-source state store
from goldrate.domain.errors import DomainError, EmptyExtractionError  # Classified failures
from goldrate.domain.models import GramPriceEntry, PriceSource  # Domain models
from goldrate.domain.sources import SourceRegistry, default_registry  # Slug -> source lookup

log = logging.getLogger(__name__)  # Create logger for this module

GENERIC_ERROR_MESSAGE = "An unexpected error occurred while fetching gold prices."


class PriceEngine:
    """
    Runs the extraction pipeline and owns the per-source state.

    The engine is meant to live on one event loop; state patches are
    synchronous, so concurrent fetches of different sources never lose
    each other's updates.
    """

    def __init__(
        self,
        registry: Optional[SourceRegistry] = None,
        fetcher: Optional[ProxyFetcher] = None,
        sink: Optional[PriceSink] = None,
        state: Optional[StateManager] = None,
        primary_slug: Optional[str] = None,
        batch_size: Optional[int] = None,
        batch_delay: Optional[float] = None,
    ):
        """
        Initialize the engine.

        Args:
            registry: Known sources (defaults to every supported country)
            fetcher: Proxy fetcher (defaults to ProxyFetcher())
            sink: Persistence for the primary source (defaults to NullSink())
            state: State store (defaults to a fresh StateManager)
            primary_slug: Source whose prices are persisted (defaults to settings.default_source)
            batch_size: Sources fetched in parallel per batch (defaults to settings.batch_size)
            batch_delay: Seconds to wait between batches (defaults to settings.batch_delay_seconds)
        """
        from goldrate.config import settings

        self.registry = registry or default_registry()
        self.fetcher = fetcher or ProxyFetcher()
        self.sink = sink or NullSink()
        self._state = state or StateManager()
        self.primary_slug = primary_slug or settings.default_source
        self.batch_size = settings.batch_size if batch_size is None else batch_size
        self.batch_delay = settings.batch_delay_seconds if batch_delay is None else batch_delay

        if self.batch_size < 1:
            raise ValueError("batch_size must be at least 1")

        self._initial_loading = True
        self._background: Set[asyncio.Task] = set()

    # ── State access ─────────────────────────────────────────────────────

    @property
    def is_initial_loading(self) -> bool:
        """True until the first multi-source refresh has completed."""
        return self._initial_loading

    def state(self, slug: str) -> SourceState:
        return self._state.get(slug)

    def states(self) -> Dict[str, SourceState]:
        return self._state.snapshot()

    # ── Single source ────────────────────────────────────────────────────

    async def fetch_one(self, source: PriceSource) -> SourceState:
        """
        Fetch, parse and derive the prices of one source.

        Never raises for fetch or parse problems: they end up in the
        source's error field while its last good metrics stay in place.

        Args:
            source: Source to refresh

        Returns:
            Snapshot of the source's state after the attempt
        """
        slug = source.slug
        self._state.patch(slug, is_loading=True, error=None)
        log.info("Fetching gold prices for %s...", source.name)

        try:
            document = await self.fetcher.fetch(source.url)
            fields, changes = parse_markup(document, source.price_prefix)
            metrics = derive_metrics(fields, changes, source.price_prefix)
            if metrics.is_empty:
                raise EmptyExtractionError()
        except DomainError as e:
            log.warning("Error fetching gold prices for %s: %s", source.name, e)
            return self._state.patch(slug, is_loading=False, error=str(e) or GENERIC_ERROR_MESSAGE)
        except Exception as e:
            log.error("Unexpected error fetching gold prices for %s: %s", source.name, e, exc_info=True)
            return self._state.patch(slug, is_loading=False, error=GENERIC_ERROR_MESSAGE)

        new_state = self._state.patch(
            slug,
            metrics=metrics,
            is_loading=False,
            error=None,
            last_updated=datetime.now(timezone.utc),
        )
        log.info("Parsed %d gram prices for %s", len(metrics.gram_prices), source.name)

        if slug == self.primary_slug:
            self._persist(metrics.gram_prices)
        return new_state

    async def refetch(self, slug: str) -> SourceState:
        """
        Manually refresh one source right away, outside any batching.

        Raises:
            UnknownSourceError: If the slug is not registered
        """
        return await self.fetch_one(self.registry.get(slug))

    # ── Many sources ─────────────────────────────────────────────────────

    async def _pause(self) -> None:
        await asyncio.sleep(self.batch_delay)

    async def fetch_many(self, sources: Sequence[PriceSource]) -> Dict[str, SourceState]:
        """
        Refresh several sources in parallel batches.

        Each batch runs concurrently and is fully settled before the next
        one starts; batch_delay seconds separate consecutive batches.

        Args:
            sources: Sources to refresh, in batch order

        Returns:
            Snapshot of each source's state keyed by slug
        """
        sources = list(sources)
        total_batches = (len(sources) + self.batch_size - 1) // self.batch_size

        for index, start in enumerate(range(0, len(sources), self.batch_size), start=1):
            batch = sources[start:start + self.batch_size]
            log.debug("Fetching batch %d/%d: %s", index, total_batches, ", ".join(s.slug for s in batch))

            results = await asyncio.gather(
                *(self.fetch_one(source) for source in batch),
                return_exceptions=True,
            )
            for source, result in zip(batch, results):
                if isinstance(result, BaseException):
                    log.error("Fetch task for %s crashed: %s", source.slug, result)
                    self._state.patch(source.slug, is_loading=False, error=GENERIC_ERROR_MESSAGE)

            if start + self.batch_size < len(sources):
                await self._pause()

        self._initial_loading = False
        return {source.slug: self._state.get(source.slug) for source in sources}

    async def refetch_all(self) -> Dict[str, SourceState]:
        """Refresh every registered source in batches."""
        return await self.fetch_many(self.registry.all())

    # ── Persistence ──────────────────────────────────────────────────────

    def _persist(self, prices: Sequence[GramPriceEntry]) -> None:
        """Schedule a detached save; its outcome is logged and discarded."""
        task = asyncio.create_task(self.sink.save(tuple(prices)))
        self._background.add(task)
        task.add_done_callback(self._on_persist_done)

    def _on_persist_done(self, task: asyncio.Task) -> None:
        self._background.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            log.warning("Background price save failed: %s", exc)

    async def drain(self) -> None:
        """Wait for pending background saves to finish."""
        if self._background:
            await asyncio.gather(*list(self._background), return_exceptions=True)
