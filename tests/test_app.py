"""
Application Tests - Engine Wiring and the Refresh Loop

Files that USE this module:
- pytest (test runner executes these tests)

Files that this module USES:
- goldrate.app (build_engine, run, log_summary)
- goldrate.config.settings (Settings)
"""
import logging

import pytest

from goldrate.adapters.persistence.price_sink import FileHistorySink, NullSink
from goldrate.app import build_engine, log_summary, run
from goldrate.config.settings import Settings
from goldrate.domain.errors import ProxyExhaustedError, UnknownSourceError

PAGE = '<span data-price="GXAUUSD_{code}">300.00</span>'


class PageFetcher:
    """Answers every vendor page with a minimal one-price page in its currency."""

    def __init__(self, failing=()):
        self.failing = set(failing)
        self.calls = 0

    async def fetch(self, url):
        self.calls += 1
        slug = url.rsplit("/", 1)[-1].replace("-gold-price.html", "")
        if slug in self.failing:
            raise ProxyExhaustedError()
        return PAGE.format(code=CODES[slug])


CODES = {
    "qatar": "QAR", "uae": "AED", "dubai": "AED", "saudi-arabia": "SAR", "kuwait": "KWD",
    "usa": "USD", "uk": "GBP", "australia": "AUD", "canada": "CAD", "singapore": "SGD",
}


class TestBuildEngine:
    def test_wiring_from_settings(self, tmp_path):
        settings = Settings(
            _env_file=None,
            BATCH_SIZE=4,
            BATCH_DELAY_SECONDS=0,
            PROXY_TIMEOUT_SECONDS=3,
            PRICE_HISTORY_FILE=str(tmp_path / "history.json"),
            PERSISTENCE_BACKEND="file",
        )

        engine = build_engine(settings)

        assert engine.batch_size == 4
        assert engine.batch_delay == 0
        assert engine.fetcher.timeout == 3
        assert engine.primary_slug == "qatar"
        assert isinstance(engine.sink, FileHistorySink)
        assert len(engine.registry) == 10

    def test_unknown_default_source(self):
        settings = Settings(_env_file=None, DEFAULT_SOURCE="atlantis")

        with pytest.raises(UnknownSourceError):
            build_engine(settings)


class TestRun:
    @pytest.mark.asyncio
    async def test_single_cycle(self, caplog):
        engine = build_engine(Settings(_env_file=None, PERSISTENCE_BACKEND="none", BATCH_DELAY_SECONDS=0))
        engine.fetcher = PageFetcher(failing={"kuwait"})
        assert isinstance(engine.sink, NullSink)

        with caplog.at_level(logging.INFO, logger="goldrate.app"):
            await run(engine, interval_minutes=5, once=True)

        assert engine.fetcher.calls == 10
        assert engine.is_initial_loading is False
        assert engine.state("qatar").has_data
        assert engine.state("kuwait").error == "All proxies failed"
        assert "Refresh finished: 9 ok, 1 failed" in caplog.text

    def test_log_summary_before_any_fetch(self, caplog):
        engine = build_engine(Settings(_env_file=None, PERSISTENCE_BACKEND="none"))

        with caplog.at_level(logging.INFO, logger="goldrate.app"):
            log_summary(engine)

        assert "No prices available" in caplog.text
        assert "Refresh finished: 10 ok, 0 failed" in caplog.text
