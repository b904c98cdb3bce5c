"""
Configuration Tests - Settings, Source Registry, Validators and Logging

Files that USE this module:
- pytest (test runner executes these tests)

Files that this module USES:
- goldrate.config.settings (Settings)
- goldrate.domain.sources (SourceRegistry, default_registry)
- goldrate.shared (validators, setup_logging)
"""
import logging

import pytest
from pydantic import ValidationError

from goldrate.config.settings import Settings
from goldrate.domain.errors import ProxyExhaustedError, UnknownSourceError
from goldrate.domain.models import PriceSource
from goldrate.domain.sources import DEFAULT_SOURCES, SourceRegistry, default_registry
from goldrate.shared.logging_conf import setup_logging
from goldrate.shared.validators import (
    parse_number,
    validate_currency_prefix,
    validate_http_url,
    validate_slug,
)


class TestSettings:
    def test_defaults(self, monkeypatch):
        for name in ("PROXY_TIMEOUT_SECONDS", "BATCH_SIZE", "BATCH_DELAY_SECONDS", "DEFAULT_SOURCE"):
            monkeypatch.delenv(name, raising=False)

        settings = Settings(_env_file=None)

        assert settings.proxy_timeout_seconds == 15.0
        assert settings.batch_size == 3
        assert settings.batch_delay_seconds == 0.5
        assert settings.default_source == "qatar"

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("BATCH_SIZE", "5")
        monkeypatch.setenv("PERSISTENCE_BACKEND", "NONE")
        monkeypatch.setenv("LOG_LEVEL", "debug")

        settings = Settings(_env_file=None)

        assert settings.batch_size == 5
        assert settings.persistence_backend == "none"
        assert settings.log_level == "DEBUG"

    def test_invalid_backend(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, PERSISTENCE_BACKEND="postgres")

    def test_invalid_default_source(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, DEFAULT_SOURCE="Not A Slug")

    def test_invalid_batch_size(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, BATCH_SIZE=0)

    def test_function_url(self):
        settings = Settings(
            _env_file=None,
            SUPABASE_URL="https://abc.supabase.co/",
            SUPABASE_ANON_KEY="anon-key-1234567890",
        )

        assert settings.supabase_configured
        assert settings.function_url("get-exchange-rates") == (
            "https://abc.supabase.co/functions/v1/get-exchange-rates"
        )

    def test_invalid_supabase_url(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, SUPABASE_URL="not a url")


class TestSourceRegistry:
    def test_default_registry(self):
        registry = default_registry()

        assert len(registry) == len(DEFAULT_SOURCES) == 10
        assert registry.slugs()[0] == "qatar"
        assert "saudi-arabia" in registry

    def test_qatar_source(self):
        qatar = default_registry().get("qatar")

        assert qatar.url == "https://www.livepriceofgold.com/qatar-gold-price.html"
        assert qatar.price_prefix == "QAR"
        assert qatar.currency_symbol == "QAR"

    def test_unknown_slug(self):
        with pytest.raises(UnknownSourceError) as exc_info:
            default_registry().get("atlantis")

        assert exc_info.value.slug == "atlantis"
        assert str(exc_info.value) == "Unknown price source: atlantis"
        assert isinstance(exc_info.value, KeyError)

    def test_duplicate_slug(self):
        source = default_registry().get("qatar")
        with pytest.raises(ValueError, match="Duplicate"):
            SourceRegistry([source, source])

    @pytest.mark.parametrize("overrides", [
        {"slug": "Qatar"},
        {"url": "ftp://example.com/page"},
        {"price_prefix": "qar"},
    ])
    def test_invalid_source(self, overrides):
        fields = dict(
            slug="qatar",
            name="Qatar",
            currency_code="QAR",
            currency_symbol="QAR",
            url="https://example.com/qatar.html",
            price_prefix="QAR",
        )
        fields.update(overrides)

        with pytest.raises(ValueError):
            SourceRegistry([PriceSource(**fields)])


class TestValidators:
    @pytest.mark.parametrize("text,expected", [
        ("300.00", 300.0),
        ("9,300.50", 9300.5),
        (" 1,234,567.8 ", 1234567.8),
        ("300.00 QAR", 300.0),
        ("-2.5", -2.5),
        ("N/A", 0.0),
        ("", 0.0),
        (None, 0.0),
        ("nan", 0.0),
        ("1e999", 0.0),
    ])
    def test_parse_number(self, text, expected):
        assert parse_number(text) == expected

    def test_validate_slug(self):
        assert validate_slug("saudi-arabia")
        assert not validate_slug("saudi_arabia")
        assert not validate_slug("-qatar")
        assert not validate_slug("")

    def test_validate_currency_prefix(self):
        assert validate_currency_prefix("QAR")
        assert not validate_currency_prefix("QA")
        assert not validate_currency_prefix("qar")

    def test_validate_http_url(self):
        assert validate_http_url("https://www.livepriceofgold.com/qatar-gold-price.html")
        assert not validate_http_url("www.livepriceofgold.com")


class TestErrors:
    def test_proxy_exhausted_without_cause(self):
        assert str(ProxyExhaustedError()) == "All proxies failed"

    def test_proxy_exhausted_uses_last_error(self):
        cause = RuntimeError("HTTP error: status 502")
        error = ProxyExhaustedError(cause)

        assert str(error) == "HTTP error: status 502"
        assert error.last_error is cause


class TestLogging:
    def test_file_logging(self, tmp_path):
        root = logging.getLogger()
        saved_handlers, saved_level = root.handlers[:], root.level
        log_file = tmp_path / "logs" / "goldrate.log"
        try:
            setup_logging(level="DEBUG", log_file=log_file, log_to_stdout=False)
            logging.getLogger("goldrate.test").info("hello from test")

            for handler in logging.getLogger().handlers:
                handler.flush()
            assert "hello from test" in log_file.read_text(encoding="utf-8")
            assert logging.getLogger("httpx").level == logging.WARNING
        finally:
            for handler in root.handlers[:]:
                handler.close()
            root.handlers[:] = saved_handlers
            root.setLevel(saved_level)
