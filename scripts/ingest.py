#!/usr/bin/env python3
"""Apply SOBI change files to the bill document store.

Files are processed one at a time in the order of the timestamps embedded in
their names (``SOBI.D130323.T065432.TXT``).  Storage is flushed after every
file.  Each run is appended to the run log (see ``scripts/log_dashboard.py``).

Usage::

    python scripts/ingest.py data/SOBI.D130323.T065432.TXT
    python scripts/ingest.py data/                      # every SOBI.* file
    python scripts/ingest.py data/ --storage-dir /tmp/storage
    python scripts/ingest.py data/ --unpublished-list unpublished.txt
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from rich.console import Console
from rich.table import Table

# Ensure the project is importable
ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT / "src"))

from sobi_ingest import config as cfg  # noqa: E402
from sobi_ingest.change_log import ChangeLogger  # noqa: E402
from sobi_ingest.overrides import (  # noqa: E402
    DEFAULT_OTHER_SPONSOR_OVERRIDES,
    load_unpublished_ids,
)
from sobi_ingest.processor import (  # noqa: E402
    BillProcessor,
    ProcessResult,
    process_files,
    sort_change_files,
)
from sobi_ingest.publisher import BillPublisher  # noqa: E402
from sobi_ingest.run_log import RunLogger  # noqa: E402
from sobi_ingest.storage import Storage  # noqa: E402

console = Console()


def _collect(paths: list[Path]) -> list[Path]:
    files: list[Path] = []
    for path in paths:
        if path.is_dir():
            files.extend(p for p in path.iterdir() if p.is_file() and p.name.startswith("SOBI."))
        else:
            files.append(path)
    return sort_change_files(files)


def _summary(results: list[ProcessResult]) -> Table:
    table = Table(title="SOBI Ingest Summary", show_lines=False)
    table.add_column("File", style="bold")
    table.add_column("Blocks", justify="right")
    table.add_column("Applied", justify="right")
    table.add_column("Errors", justify="right")
    for r in results:
        if r.skipped:
            table.add_row(r.source, "[dim]skipped[/]", "", "")
            continue
        errors = f"[bold red]{r.errors}[/]" if r.errors else "0"
        table.add_row(r.source, str(r.blocks), str(r.applied), errors)
    return table


def main() -> int:
    parser = argparse.ArgumentParser(description="Apply SOBI change files to bill storage.")
    parser.add_argument("paths", nargs="+", type=Path, help="Change files or directories.")
    parser.add_argument(
        "--storage-dir",
        type=Path,
        default=cfg.STORAGE_DIR,
        help=f"Document store root (default: {cfg.STORAGE_DIR}).",
    )
    parser.add_argument(
        "--change-log",
        type=Path,
        default=cfg.CHANGE_LOG_PATH,
        help=f"Audit log path (default: {cfg.CHANGE_LOG_PATH}).",
    )
    parser.add_argument(
        "--unpublished-list",
        type=Path,
        default=cfg.UNPUBLISHED_LIST,
        help="Text file of bill ids that must stay unpublished.",
    )
    parser.add_argument(
        "--log-level",
        default=cfg.LOG_LEVEL,
        help=f"Logging level (default: {cfg.LOG_LEVEL}).",
    )
    args = parser.parse_args()

    logging.basicConfig(level=args.log_level.upper(), format=cfg.LOG_FORMAT)
    logger = logging.getLogger("ingest")

    files = _collect(args.paths)
    if not files:
        logger.error("No change files found in %s", ", ".join(str(p) for p in args.paths))
        return 1

    storage = Storage(args.storage_dir)
    change_log = ChangeLogger(args.change_log)
    publisher = BillPublisher(
        storage,
        change_log,
        unpublished_ids=load_unpublished_ids(args.unpublished_list),
        other_sponsor_overrides=DEFAULT_OTHER_SPONSOR_OVERRIDES,
    )
    processor = BillProcessor(storage, change_log, publisher)

    with RunLogger("ingest", meta={"files": len(files)}) as log:
        results = process_files(processor, files, phase=log.phase_ctx)
        log.meta["blocks"] = sum(r.blocks for r in results)
        log.meta["errors"] = sum(r.errors for r in results)

    console.print()
    console.print(_summary(results))
    console.print()
    return 0


if __name__ == "__main__":
    sys.exit(main())
