# src/goldrate/application/state_manager.py
"""
State Manager - Per-source Price State

Holds the runtime state of every price source (last good metrics, loading
flag, error, last update time). State for a slug is created empty on first
reference and is only ever patched key by key, so two sources settling at
the same moment never overwrite each other.

Files that USE this module:
- goldrate.application.price_engine (PriceEngine owns a StateManager)
- tests.test_state_manager (unit tests)

Files that this module USES:
- goldrate.domain.models (GoldMetrics)
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field, fields, replace
from datetime import datetime
from typing import Any, Dict, Optional

from goldrate.domain.models import GoldMetrics

logger = logging.getLogger(__name__)


@dataclass
class SourceState:
    """Runtime state of one price source (non-frozen, patched in place)."""
    metrics: GoldMetrics = field(default_factory=GoldMetrics.empty)
    is_loading: bool = False
    error: Optional[str] = None
    last_updated: Optional[datetime] = None

    @property
    def has_data(self) -> bool:
        """True once a successful fetch has produced metrics."""
        return not self.metrics.is_empty


_STATE_FIELDS = frozenset(f.name for f in fields(SourceState))


class StateManager:
    """Owns the slug -> SourceState map."""

    def __init__(self):
        self._states: Dict[str, SourceState] = {}

    def _entry(self, slug: str) -> SourceState:
        state = self._states.get(slug)
        if state is None:
            state = SourceState()
            self._states[slug] = state
            logger.debug("Created empty state for %s", slug)
        return state

    def get(self, slug: str) -> SourceState:
        """
        Get a snapshot of a source's state.

        Args:
            slug: Source slug

        Returns:
            Copy of the current SourceState (empty if never referenced before)
        """
        return replace(self._entry(slug))

    def patch(self, slug: str, **changes: Any) -> SourceState:
        """
        Update some fields of one source's state, leaving the rest untouched.

        Args:
            slug: Source slug
            **changes: SourceState fields to overwrite

        Returns:
            Copy of the updated SourceState

        Raises:
            TypeError: If a change names an unknown field
        """
        unknown = set(changes) - _STATE_FIELDS
        if unknown:
            raise TypeError(f"Unknown SourceState fields: {', '.join(sorted(unknown))}")

        state = self._entry(slug)
        for name, value in changes.items():
            setattr(state, name, value)
        return replace(state)

    def snapshot(self) -> Dict[str, SourceState]:
        """Copies of all known states keyed by slug."""
        return {slug: replace(state) for slug, state in self._states.items()}

    def has_state(self, slug: str) -> bool:
        return slug in self._states
