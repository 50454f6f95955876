from __future__ import annotations

from collections.abc import Callable
from datetime import datetime
from pathlib import Path

import pytest

from sobi_ingest.change_log import ChangeLogger
from sobi_ingest.models import Bill, Person
from sobi_ingest.processor import BillProcessor
from sobi_ingest.publisher import BillPublisher
from sobi_ingest.storage import Storage

# ── SOBI line builders ────────────────────────────────────────────────────────


def _sobi_line(
    type_code: str,
    data: str = "",
    print_no: str = "S100",
    amendment: str = "",
    year: int = 2020,
) -> str:
    chamber, number = print_no[0], int(print_no[1:])
    return f"{year}{chamber}{number:05d}{amendment or ' '}{type_code}{data}"


@pytest.fixture
def sobi_line() -> Callable[..., str]:
    """Build one fixed-width SOBI record, e.g. ``2020S00100 3AN ACT ...``."""
    return _sobi_line


@pytest.fixture
def write_sobi(tmp_path: Path) -> Callable[[str, list[str]], Path]:
    """Write lines to a change file under tmp_path and return its path."""

    def _write(name: str, lines: list[str]) -> Path:
        path = tmp_path / "incoming" / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        return path

    return _write


# ── Dates ─────────────────────────────────────────────────────────────────────


@pytest.fixture
def file_date() -> datetime:
    return datetime(2020, 1, 10, 9, 30, 0)


@pytest.fixture
def later_date() -> datetime:
    return datetime(2020, 2, 14, 16, 5, 12)


# ── Collaborators ─────────────────────────────────────────────────────────────


@pytest.fixture
def storage(tmp_path: Path) -> Storage:
    return Storage(tmp_path / "storage")


@pytest.fixture
def change_log(tmp_path: Path) -> ChangeLogger:
    return ChangeLogger(tmp_path / "storage" / "change_log.jsonl")


@pytest.fixture
def publisher(storage: Storage, change_log: ChangeLogger) -> BillPublisher:
    return BillPublisher(storage, change_log)


@pytest.fixture
def processor(
    storage: Storage, change_log: ChangeLogger, publisher: BillPublisher
) -> BillProcessor:
    return BillProcessor(storage, change_log, publisher)


# ── Bill fixtures ─────────────────────────────────────────────────────────────


@pytest.fixture
def sample_bill(file_date: datetime) -> Bill:
    return Bill(
        bill_id="S100-2020",
        year=2020,
        title="An act to amend the tax law",
        sponsor=Person("SMITH"),
        publish_date=file_date,
        modified_date=file_date,
        active=True,
    )


@pytest.fixture
def sample_amendment(file_date: datetime) -> Bill:
    return Bill(
        bill_id="S100A-2020",
        year=2020,
        title="An act to amend the tax law, as amended",
        sponsor=Person("SMITH"),
        amendments=["S100-2020"],
        publish_date=file_date,
        modified_date=file_date,
        active=True,
    )
