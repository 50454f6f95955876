"""Append-only log of ingest runs.

One JSON object per line: run id, start/end, status, and one phase per change
file with its block counts.  Read back by ``scripts/log_dashboard.py``.

Usage::

    with RunLogger("ingest") as log:
        for path in paths:
            with log.phase_ctx(path.name) as phase:
                result = processor.process(path)
                phase.update(blocks=result.blocks, errors=result.errors)
"""

from __future__ import annotations

import json
import logging
import time
import uuid
from contextlib import contextmanager
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from pathlib import Path

from . import config as cfg

LOGGER = logging.getLogger(__name__)


@dataclass
class RunRecord:
    """One line in the run log."""

    run_id: str
    task: str
    started_at: str  # ISO
    ended_at: str | None = None
    duration_s: float | None = None
    status: str = "running"  # ok | error | running
    phases: list[dict] = field(default_factory=list)  # [{name, duration_s, blocks, ...}]
    error: str | None = None
    meta: dict = field(default_factory=dict)

    def to_json_line(self) -> str:
        return json.dumps(asdict(self))

    @classmethod
    def from_json_line(cls, line: str) -> RunRecord | None:
        line = line.strip()
        if not line:
            return None
        try:
            d = json.loads(line)
            return cls(
                run_id=d.get("run_id", ""),
                task=d.get("task", ""),
                started_at=d.get("started_at", ""),
                ended_at=d.get("ended_at"),
                duration_s=d.get("duration_s"),
                status=d.get("status", "ok"),
                phases=d.get("phases", []),
                error=d.get("error"),
                meta=d.get("meta", {}),
            )
        except (json.JSONDecodeError, TypeError, AttributeError):
            return None


class RunLogger:
    """Context manager that times a run and appends it to the run log."""

    def __init__(
        self,
        task: str,
        *,
        log_path: Path | None = None,
        meta: dict | None = None,
    ):
        self.task = task
        self.log_path = log_path if log_path is not None else get_log_path()
        self.meta = dict(meta or {})
        self.run_id = str(uuid.uuid4())[:8]
        self._started_at: str | None = None
        self._start_time: float | None = None
        self._phases: list[dict] = []

    def start(self) -> None:
        self._started_at = datetime.now(timezone.utc).isoformat()
        self._start_time = time.perf_counter()
        self._phases = []

    @contextmanager
    def phase_ctx(self, name: str):
        """Time a phase; the yielded dict collects extra counters."""
        t0 = time.perf_counter()
        extra: dict = {}
        try:
            yield extra
        finally:
            self._phases.append(
                {"name": name, "duration_s": round(time.perf_counter() - t0, 2), **extra}
            )

    def end(self, status: str = "ok", error: str | None = None) -> RunRecord | None:
        if self._start_time is None:
            return None
        ended_at = datetime.now(timezone.utc).isoformat()
        record = RunRecord(
            run_id=self.run_id,
            task=self.task,
            started_at=self._started_at or ended_at,
            ended_at=ended_at,
            duration_s=round(time.perf_counter() - self._start_time, 2),
            status=status,
            phases=self._phases,
            error=error,
            meta=self.meta,
        )
        try:
            self.log_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.log_path, "a", encoding="utf-8") as f:
                f.write(record.to_json_line() + "\n")
        except OSError as e:
            LOGGER.warning("Run log append failed: %s", e)
        return record

    def __enter__(self) -> RunLogger:
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if exc_type is not None:
            error = f"{exc_type.__name__}: {exc_val}" if exc_val else exc_type.__name__
            self.end("error", error)
        else:
            self.end("ok")
        return None  # do not suppress


def load_recent_runs(
    n: int = 100,
    *,
    task: str | None = None,
    log_path: Path | None = None,
) -> list[RunRecord]:
    """Load the last n runs (newest first). Optionally filter by task."""
    path = log_path or get_log_path()
    if not path.exists():
        return []
    records: list[RunRecord] = []
    with open(path, encoding="utf-8") as f:
        for line in f:
            rec = RunRecord.from_json_line(line)
            if rec is not None and (task is None or rec.task == task):
                records.append(rec)
    return records[::-1][:n]


def get_log_path() -> Path:
    return cfg.RUN_LOG_PATH
