"""Finds or creates the bill a block applies to.

New and unpublished amendments are synced with their base bill: they take the
base bill's amendment list and shared sponsor/summary/law fields, and pull
title, act clause and law section forward from the most recently modified
active version until a proper update for those fields arrives.
"""

from __future__ import annotations

import logging
from datetime import datetime

from .blocks import Block
from .models import Bill
from .storage import Storage

LOGGER = logging.getLogger(__name__)


def _new_bill(bill_id: str, year: int, date: datetime) -> Bill:
    return Bill(bill_id=bill_id, year=year, modified_date=date, brand_new=True)


def get_or_create_bill(block: Block, date: datetime, storage: Storage) -> Bill:
    bill_id = block.bill_id
    bill = storage.get_bill(block.print_no + block.amendment, block.year)
    if bill is None:
        bill = _new_bill(bill_id, block.year, date)

    # Published bills and base bills need no version syncing
    if bill.is_published or not block.amendment:
        return bill

    base_bill_id = f"{block.print_no}-{block.year}"
    base_bill = storage.get_bill(block.print_no, block.year)
    if base_bill is None:
        LOGGER.warning(
            "Bill amendment filed without initial bill at %s - %s", block.location, block.header
        )
        base_bill = _new_bill(base_bill_id, block.year, date)
        storage.set(base_bill)

    bill.amendments = [base_bill_id]
    bill.add_amendments(base_bill.amendments)

    bill.sponsor = base_bill.sponsor
    bill.co_sponsors = list(base_bill.co_sponsors)
    bill.other_sponsors = list(base_bill.other_sponsors)
    bill.multi_sponsors = list(base_bill.multi_sponsors)
    bill.summary = base_bill.summary
    bill.law = base_bill.law

    # A re-published version can be newer than the active one; only pull
    # from active versions modified after this bill.
    latest: Bill | None = None
    for version_id in bill.amendments:
        version = storage.get_bill(version_id)
        if version is None:
            LOGGER.warning("Amendment %s of %s missing from storage", version_id, bill_id)
            continue
        if not version.active or version.modified_date is None:
            continue
        if bill.modified_date is not None and version.modified_date <= bill.modified_date:
            continue
        if latest is None or version.modified_date > latest.modified_date:
            latest = version

    if latest is not None:
        LOGGER.debug("Pulling title/act clause/law section for %s from %s", bill_id, latest.bill_id)
        bill.title = latest.title
        bill.act_clause = latest.act_clause
        bill.law_section = latest.law_section

    return bill
