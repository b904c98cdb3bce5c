"""
State Manager Tests - Unit Tests for Per-source State

Files that USE this module:
- pytest (test runner executes these tests)

Files that this module USES:
- goldrate.application.state_manager (StateManager, SourceState)
"""
import pytest

from goldrate.application.state_manager import SourceState, StateManager
from goldrate.domain.models import GoldMetrics, GramPriceEntry

METRICS = GoldMetrics(gram_prices=(GramPriceEntry("24K Gold", "99.9%", "300.00"),))


class TestStateManager:
    def test_unknown_slug_starts_empty(self):
        manager = StateManager()

        state = manager.get("qatar")

        assert state == SourceState()
        assert state.metrics.is_empty
        assert state.is_loading is False
        assert state.error is None
        assert state.last_updated is None
        assert manager.has_state("qatar")

    def test_patch_only_touches_named_fields(self):
        manager = StateManager()
        manager.patch("qatar", metrics=METRICS, error="old")

        manager.patch("qatar", is_loading=True, error=None)

        state = manager.get("qatar")
        assert state.metrics == METRICS
        assert state.is_loading is True
        assert state.error is None

    def test_patches_of_different_slugs_are_independent(self):
        manager = StateManager()

        manager.patch("qatar", is_loading=True)
        manager.patch("uae", error="All proxies failed")

        assert manager.get("qatar").is_loading is True
        assert manager.get("qatar").error is None
        assert manager.get("uae").is_loading is False
        assert manager.get("uae").error == "All proxies failed"

    def test_unknown_field_rejected(self):
        manager = StateManager()

        with pytest.raises(TypeError, match="colour"):
            manager.patch("qatar", colour="gold")

    def test_get_returns_a_copy(self):
        manager = StateManager()
        state = manager.get("qatar")

        state.error = "mutated outside"

        assert manager.get("qatar").error is None

    def test_snapshot(self):
        manager = StateManager()
        manager.patch("qatar", metrics=METRICS)
        manager.patch("uae", error="failed")

        snapshot = manager.snapshot()

        assert set(snapshot) == {"qatar", "uae"}
        assert snapshot["qatar"].has_data
        assert not snapshot["uae"].has_data
