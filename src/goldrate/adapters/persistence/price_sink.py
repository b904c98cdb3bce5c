# src/goldrate/adapters/persistence/price_sink.py
"""
Price Sinks - Best-effort persistence of fetched gram prices

A sink receives the freshly derived gram prices of the primary source after
every successful fetch. Saving is fire-and-forget: save() never raises,
failures are logged and dropped, and nothing is retried.

Files that USE this module:
- goldrate.application.price_engine (schedules sink.save as a background task)
- goldrate.app (build_sink picks the configured backend)

Files that this module USES:
- goldrate.adapters.persistence.file_store (append_history for the file backend)
- goldrate.domain.errors (PersistenceError)
- goldrate.config (settings for backend selection and Supabase endpoint)
"""
from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional, Sequence

import requests

from goldrate.adapters.persistence.file_store import append_history
from goldrate.domain.errors import PersistenceError
from goldrate.domain.models import GramPriceEntry

log = logging.getLogger(__name__)


class PriceSink(ABC):
    """Base class for price persistence backends."""

    name = "sink"

    async def save(self, prices: Sequence[GramPriceEntry]) -> None:
        """
        Persist gram prices, swallowing every failure.

        Args:
            prices: Gram price rows, highest karat first
        """
        try:
            await self._write(list(prices))
            log.info("Prices saved to %s (%d rows)", self.name, len(prices))
        except PersistenceError as e:
            log.warning("Failed to save prices to %s: %s", self.name, e)
        except Exception as e:
            log.warning("Unexpected error saving prices to %s: %s", self.name, e, exc_info=True)

    @abstractmethod
    async def _write(self, prices: Sequence[GramPriceEntry]) -> None:
        """
        Write the prices.

        Raises:
            PersistenceError: If the write fails
        """
        raise NotImplementedError


class NullSink(PriceSink):
    """Discards prices (persistence disabled)."""

    name = "null sink"

    async def _write(self, prices: Sequence[GramPriceEntry]) -> None:
        log.debug("Persistence disabled, dropping %d price rows", len(prices))


class FileHistorySink(PriceSink):
    """Appends prices to the local JSON price history."""

    name = "price history file"

    def __init__(self, path: Optional[Path] = None, max_records: Optional[int] = None):
        self.path = path
        self.max_records = max_records

    async def _write(self, prices: Sequence[GramPriceEntry]) -> None:
        try:
            await asyncio.to_thread(append_history, prices, self.path, self.max_records)
        except (OSError, RuntimeError) as e:
            raise PersistenceError(str(e)) from e


class SupabaseFunctionSink(PriceSink):
    """
    Posts prices to a Supabase edge function.

    The function receives {"prices": [{karat, purity, pricePerGram, ...}]}
    and records them server-side.
    """

    name = "Supabase"

    def __init__(self, function_url: str, anon_key: str, timeout: int = 10):
        """
        Initialize the sink.

        Args:
            function_url: Absolute URL of the save function
            anon_key: Supabase anon key (sent as apikey and bearer token)
            timeout: HTTP request timeout in seconds
        """
        self.function_url = function_url
        self.anon_key = anon_key
        self.timeout = timeout

    def _post(self, prices: Sequence[GramPriceEntry]) -> None:
        headers = {
            "apikey": self.anon_key,
            "Authorization": f"Bearer {self.anon_key}",
        }
        body = {"prices": [p.to_json() for p in prices]}
        try:
            resp = requests.post(self.function_url, json=body, headers=headers, timeout=self.timeout)
            resp.raise_for_status()
        except requests.exceptions.Timeout:
            raise PersistenceError(f"Supabase timeout after {self.timeout}s")
        except requests.exceptions.RequestException as e:
            raise PersistenceError(f"Supabase request failed: {e}") from e

    async def _write(self, prices: Sequence[GramPriceEntry]) -> None:
        await asyncio.to_thread(self._post, prices)


def build_sink(settings=None) -> PriceSink:
    """
    Create the sink selected by settings.persistence_backend.

    The "supabase" backend falls back to the file backend when the
    Supabase URL or key is missing.

    Args:
        settings: Settings instance (defaults to the global settings)

    Returns:
        Configured PriceSink
    """
    if settings is None:
        from goldrate.config import settings

    backend = settings.persistence_backend
    if backend == "none":
        return NullSink()
    if backend == "supabase":
        if settings.supabase_configured:
            return SupabaseFunctionSink(
                function_url=settings.function_url(settings.save_prices_function),
                anon_key=settings.supabase_anon_key,
                timeout=settings.http_timeout_seconds,
            )
        log.warning("PERSISTENCE_BACKEND=supabase but SUPABASE_URL/SUPABASE_ANON_KEY missing, using file backend")
    return FileHistorySink(
        path=settings.price_history_file,
        max_records=settings.history_max_records,
    )
