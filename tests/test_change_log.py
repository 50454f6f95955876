"""Tests for the append-only audit log."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

from sobi_ingest.change_log import ChangeEntry, ChangeLogger, load_entries
from sobi_ingest.storage import Storage


class TestChangeEntry:
    def test_json_round_trip(self) -> None:
        entry = ChangeEntry("2020/bill/S100-2020", "update", "SOBI.D200110.T093000.TXT", None)
        assert ChangeEntry.from_json_line(entry.to_json_line()) == entry

    def test_malformed_lines(self) -> None:
        assert ChangeEntry.from_json_line("") is None
        assert ChangeEntry.from_json_line("{not json") is None
        assert ChangeEntry.from_json_line('{"action": "update"}') is None


class TestChangeLogger:
    def test_appends_to_file(
        self, tmp_path: Path, storage: Storage, file_date: datetime
    ) -> None:
        path = tmp_path / "logs" / "changes.jsonl"
        log = ChangeLogger(path)
        log.set_context("SOBI.D200110.T093000.TXT", file_date)

        log.record("2020/bill/S100-2020", storage)
        log.delete("2020/bill/S100A-2020", storage)

        entries = load_entries(path)
        assert entries == log.entries
        assert [(e.key, e.action) for e in entries] == [
            ("2020/bill/S100-2020", "update"),
            ("2020/bill/S100A-2020", "delete"),
        ]
        assert all(e.date == "2020-01-10T09:30:00" for e in entries)

    def test_reopened_log_appends(self, tmp_path: Path, storage: Storage) -> None:
        path = tmp_path / "changes.jsonl"
        ChangeLogger(path).record("2020/bill/S1-2020", storage)
        ChangeLogger(path).record("2020/bill/S2-2020", storage)
        assert [e.key for e in load_entries(path)] == ["2020/bill/S1-2020", "2020/bill/S2-2020"]

    def test_load_missing_file(self, tmp_path: Path) -> None:
        assert load_entries(tmp_path / "absent.jsonl") == []

    def test_load_skips_bad_lines(self, tmp_path: Path) -> None:
        path = tmp_path / "changes.jsonl"
        path.write_text(
            '{"key": "2020/bill/S1-2020", "action": "update", "source": "", "date": null}\n'
            "garbage\n",
            encoding="utf-8",
        )
        assert [e.key for e in load_entries(path)] == ["2020/bill/S1-2020"]
