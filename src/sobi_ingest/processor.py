"""Pipeline driver: applies SOBI change files to bills in storage.

Usage::

    processor = BillProcessor(storage, change_log, publisher)
    processor.process(Path("SOBI.D130323.T065432.TXT"))

The file is tokenized into blocks.  Each block is applied atomically to a
single bill: the bill is resolved from storage, the block's fields are
replaced and the publisher saves the result.  Errors are caught per block so
one bad record never stops the rest of the file.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from contextlib import AbstractContextManager, nullcontext
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from .appliers.events import apply_bill_event
from .appliers.fields import (
    apply_act_clause,
    apply_bill_info,
    apply_co_sponsors,
    apply_law,
    apply_law_section,
    apply_multi_sponsors,
    apply_program_info,
    apply_same_as,
    apply_sponsor,
    apply_summary,
    apply_title,
)
from .appliers.full_text import apply_text
from .appliers.votes import apply_vote_memo
from .blocks import Block, BlockType, ParseError, read_blocks
from .change_log import ChangeLogger
from .models import Bill
from .normalize import parse_sobi_filename
from .publisher import BillPublisher
from .resolver import get_or_create_bill
from .storage import Storage

LOGGER = logging.getLogger(__name__)

Applier = Callable[[str, Bill, datetime], None]

APPLIERS: dict[BlockType, Applier] = {
    BlockType.BILL_INFO: apply_bill_info,
    BlockType.LAW_SECTION: apply_law_section,
    BlockType.TITLE: apply_title,
    BlockType.BILL_EVENT: apply_bill_event,
    BlockType.SAME_AS: apply_same_as,
    BlockType.SPONSOR: apply_sponsor,
    BlockType.CO_SPONSOR: apply_co_sponsors,
    BlockType.MULTI_SPONSOR: apply_multi_sponsors,
    BlockType.PROGRAM_INFO: apply_program_info,
    BlockType.ACT_CLAUSE: apply_act_clause,
    BlockType.LAW: apply_law,
    BlockType.SUMMARY: apply_summary,
    BlockType.SPONSOR_MEMO: apply_text,
    BlockType.RESOLUTION_TEXT: apply_text,
    BlockType.TEXT: apply_text,
    BlockType.VOTE_MEMO: apply_vote_memo,
}


@dataclass
class ProcessResult:
    source: str
    date: datetime | None
    blocks: int = 0
    applied: int = 0
    errors: int = 0
    skipped: bool = False


class BillProcessor:
    def __init__(
        self,
        storage: Storage,
        change_log: ChangeLogger,
        publisher: BillPublisher | None = None,
    ) -> None:
        self.storage = storage
        self.change_log = change_log
        self.publisher = publisher or BillPublisher(storage, change_log)

    def apply_block(self, block: Block, date: datetime) -> Bill:
        """Resolve, apply and publish one block. Raises on failure."""
        applier = APPLIERS.get(block.block_type)
        if applier is None:
            raise ParseError(f"Invalid line code {block.type_code!r}")
        bill = get_or_create_bill(block, date, self.storage)
        applier(block.data, bill, date)
        bill.modified_date = date
        bill.add_data_source(block.source_file)
        self.publisher.save_bill(bill)
        return bill

    def process(self, path: Path) -> ProcessResult:
        """Apply every block of one change file. Raises OSError if unreadable."""
        path = Path(path)
        date = parse_sobi_filename(path.name)
        if date is None:
            LOGGER.error("Unparseable date in change file name: %s", path.name)
            return ProcessResult(source=path.name, date=None, skipped=True)

        self.change_log.set_context(path.name, date)
        blocks = read_blocks(path)
        result = ProcessResult(source=path.name, date=date, blocks=len(blocks))

        for block in blocks:
            LOGGER.info("Processing %s", block)
            try:
                self.apply_block(block, date)
                result.applied += 1
            except ParseError:
                result.errors += 1
                LOGGER.exception("ParseError at %s", block.location)
            except Exception:
                result.errors += 1
                LOGGER.exception("Unexpected exception at %s", block.location)

        LOGGER.info(
            "Processed %s: %d blocks, %d applied, %d errors",
            path.name,
            result.blocks,
            result.applied,
            result.errors,
        )
        return result


def sort_change_files(paths: Iterable[Path]) -> list[Path]:
    """Order change files by the timestamp in their names; unparseable last."""

    def _key(path: Path) -> tuple[int, datetime, str]:
        date = parse_sobi_filename(path.name)
        return (0, date, path.name) if date is not None else (1, datetime.min, path.name)

    return sorted((Path(p) for p in paths), key=_key)


def process_files(
    processor: BillProcessor,
    paths: Iterable[Path],
    *,
    phase: Callable[[str], AbstractContextManager[dict]] | None = None,
) -> list[ProcessResult]:
    """Drain change files one at a time, flushing storage after each.

    *phase*, e.g. ``RunLogger.phase_ctx``, wraps each file; the dict it
    yields receives the file's block counters.
    """
    results: list[ProcessResult] = []
    for path in sort_change_files(paths):
        with phase(path.name) if phase is not None else nullcontext({}) as counters:
            try:
                result = processor.process(path)
            except OSError as e:
                LOGGER.error("Could not read %s: %s", path, e)
                result = ProcessResult(source=path.name, date=None, skipped=True)
            processor.storage.flush()
            counters.update(
                blocks=result.blocks,
                applied=result.applied,
                errors=result.errors,
                skipped=result.skipped,
            )
        results.append(result)
    return results
