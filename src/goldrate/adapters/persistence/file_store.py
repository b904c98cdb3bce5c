# src/goldrate/adapters/persistence/file_store.py
"""
File Store - Price History Persistence

This module keeps a local price history in a JSON file: one record per
karat per successful fetch of the primary source. It provides atomic
appends and a time-window lookup used to chart prices over time.

Files that USE this module:
- goldrate.adapters.persistence.price_sink (FileHistorySink appends through append_history)
- tests.test_persistence (unit tests)

Files that this module USES:
- goldrate.config (settings for the history file path and size limit)
- goldrate.domain.models (GramPriceEntry)
- goldrate.shared.validators (parse_number)
"""
from __future__ import annotations

import json
import logging
import os
import shutil
import tempfile
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Iterable, List, Optional

from goldrate.domain.models import GramPriceEntry
from goldrate.shared.validators import parse_number

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class HistoryRecord:
    karat: str
    price_per_gram: float
    recorded_at: datetime

    def to_json(self) -> dict:
        """
        Convert HistoryRecord to JSON-serializable dictionary.

        Returns:
            Dictionary with ISO-formatted timestamp
        """
        return {
            "karat": self.karat,
            "price_per_gram": self.price_per_gram,
            "recorded_at": self.recorded_at.isoformat(),
        }

    @staticmethod
    def from_json(data: dict) -> "HistoryRecord":
        """
        Create HistoryRecord from JSON dictionary.

        Raises:
            KeyError, ValueError, TypeError: On a malformed record
        """
        ts = datetime.fromisoformat(str(data["recorded_at"]).replace("Z", "+00:00"))
        if ts.tzinfo is None:
            ts = ts.replace(tzinfo=timezone.utc)
        return HistoryRecord(
            karat=str(data["karat"]),
            price_per_gram=float(data["price_per_gram"]),
            recorded_at=ts.astimezone(timezone.utc),
        )


def _history_path(path: Optional[Path] = None) -> Path:
    """
    Get path to the history file and ensure its directory exists.

    Returns:
        Path object pointing to the history file
    """
    if path is None:
        from goldrate.config import settings
        path = settings.price_history_file
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    return p


def _write_atomic(p: Path, payload: list) -> None:
    """Write JSON to a temp file in the same directory, then rename it over p."""
    temp_fd, temp_path = tempfile.mkstemp(
        suffix=".json.tmp",
        dir=str(p.parent),
        text=True
    )

    try:
        with os.fdopen(temp_fd, "w", encoding="utf-8") as f:
            json.dump(payload, f, ensure_ascii=False, indent=2)
            f.flush()
            os.fsync(f.fileno())

        os.replace(temp_path, str(p))
    except Exception as e:
        try:
            os.unlink(temp_path)
        except OSError:
            pass
        raise RuntimeError(f"Failed to save history file: {e}") from e


def _read_records(p: Path) -> List[HistoryRecord]:
    """
    Read every valid record from the history file.

    A file that is not valid JSON is backed up to *.json.corrupt and
    treated as empty; individual malformed records are skipped.
    """
    if not p.exists():
        return []

    try:
        with p.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        backup_path = p.with_suffix(".json.corrupt")
        try:
            shutil.copy2(p, backup_path)
            p.unlink()
            log.warning("History file corrupted (JSON decode error), backed up to %s: %s",
                        backup_path, e)
        except OSError as backup_error:
            log.error("Failed to backup corrupt history file: %s", backup_error)
        return []

    if not isinstance(data, list):
        log.warning("History file has unexpected shape (%s), ignoring it", type(data).__name__)
        return []

    records = []
    for item in data:
        try:
            records.append(HistoryRecord.from_json(item))
        except (KeyError, ValueError, TypeError) as e:
            log.debug("Skipping malformed history record %r: %s", item, e)
    return records


def append_history(
    prices: Iterable[GramPriceEntry],
    path: Optional[Path] = None,
    max_records: Optional[int] = None,
    recorded_at: Optional[datetime] = None,
) -> int:
    """
    Append one history record per gram price and save atomically.

    Entries whose price does not parse to a positive number are skipped.
    The oldest records are dropped beyond max_records.

    Args:
        prices: Gram price rows to record
        path: History file (defaults to settings.price_history_file)
        max_records: Size limit (defaults to settings.history_max_records)
        recorded_at: Timestamp for the new records (defaults to now, UTC)

    Returns:
        Number of records appended

    Raises:
        RuntimeError: If the file cannot be written
    """
    if max_records is None:
        from goldrate.config import settings
        max_records = settings.history_max_records
    if recorded_at is None:
        recorded_at = datetime.now(timezone.utc)

    new_records = []
    for entry in prices:
        value = parse_number(entry.price_per_gram)
        if value > 0:
            new_records.append(HistoryRecord(entry.karat, value, recorded_at))

    if not new_records:
        return 0

    p = _history_path(path)
    records = _read_records(p) + new_records
    records = records[-max_records:]
    _write_atomic(p, [r.to_json() for r in records])
    log.info("Appended %d price history records to %s", len(new_records), p)
    return len(new_records)


def load_history(
    karat: str = "24K Gold",
    days: int = 30,
    path: Optional[Path] = None,
) -> List[HistoryRecord]:
    """
    Load the recorded prices of one karat over the last few days.

    Args:
        karat: Karat label (e.g. "24K Gold")
        days: Size of the time window in days
        path: History file (defaults to settings.price_history_file)

    Returns:
        Matching records, oldest first
    """
    since = datetime.now(timezone.utc) - timedelta(days=days)
    records = [
        r for r in _read_records(_history_path(path))
        if r.karat == karat and r.recorded_at >= since
    ]
    return sorted(records, key=lambda r: r.recorded_at)
