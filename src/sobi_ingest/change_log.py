"""Append-only audit log of document changes.

One JSON object per line recording which stored document changed, whether
it was updated or deleted (unpublished), and the change file that caused it.

Usage::

    log = ChangeLogger(Path("storage/change_log.jsonl"))
    log.set_context("SOBI.D130323.T065432.TXT", file_date)
    log.record(storage.key(bill), storage)
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from .normalize import to_iso
from .storage import Storage

LOGGER = logging.getLogger(__name__)


@dataclass
class ChangeEntry:
    key: str  # e.g. "2013/bill/S100A-2013"
    action: str  # update | delete
    source: str
    date: str | None  # ISO timestamp of the change file

    def to_json_line(self) -> str:
        return json.dumps(
            {"key": self.key, "action": self.action, "source": self.source, "date": self.date}
        )

    @classmethod
    def from_json_line(cls, line: str) -> ChangeEntry | None:
        line = line.strip()
        if not line:
            return None
        try:
            d = json.loads(line)
            return cls(
                key=d["key"],
                action=d.get("action", "update"),
                source=d.get("source", ""),
                date=d.get("date"),
            )
        except (json.JSONDecodeError, KeyError, TypeError):
            return None


class ChangeLogger:
    def __init__(self, log_path: Path) -> None:
        self.log_path = Path(log_path)
        self.source = ""
        self.date: datetime | None = None
        self.entries: list[ChangeEntry] = []

    def set_context(self, source_file: str, date: datetime) -> None:
        self.source = source_file
        self.date = date

    def record(self, key: str, storage: Storage) -> None:
        self._append(ChangeEntry(key, "update", self.source, to_iso(self.date)))

    def delete(self, key: str, storage: Storage) -> None:
        self._append(ChangeEntry(key, "delete", self.source, to_iso(self.date)))

    def _append(self, entry: ChangeEntry) -> None:
        self.entries.append(entry)
        self.log_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.log_path, "a", encoding="utf-8") as f:
            f.write(entry.to_json_line() + "\n")


def load_entries(log_path: Path) -> list[ChangeEntry]:
    """Read the audit log in file order, skipping malformed lines."""
    if not log_path.exists():
        return []
    entries: list[ChangeEntry] = []
    with open(log_path, encoding="utf-8") as f:
        for line in f:
            entry = ChangeEntry.from_json_line(line)
            if entry is not None:
                entries.append(entry)
    return entries
