"""
Persistence Adapters - Data Storage

This package contains adapters for persisting prices:
- File-based price history (JSON)
- Supabase edge function
"""

from goldrate.adapters.persistence.file_store import HistoryRecord, append_history, load_history
from goldrate.adapters.persistence.price_sink import (
    FileHistorySink,
    NullSink,
    PriceSink,
    SupabaseFunctionSink,
    build_sink,
)

__all__ = [
    "HistoryRecord",
    "append_history",
    "load_history",
    "FileHistorySink",
    "NullSink",
    "PriceSink",
    "SupabaseFunctionSink",
    "build_sink",
]
