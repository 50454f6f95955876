"""Save path: keeps a bill's amendment chain consistent, then persists it.

Published bills broadcast their shared fields to every version and make sure
every version lists them.  Unpublished bills are removed from their siblings'
amendment lists, hand the active flag to the latest remaining version and are
deactivated.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping

from .change_log import ChangeLogger
from .models import Bill, Person
from .storage import Storage

LOGGER = logging.getLogger(__name__)

# Senate bills and resolutions own the text of a uni-bill pair
_RE_SENATE_SERIES = re.compile(r"^[SJBR]")


class BillPublisher:
    def __init__(
        self,
        storage: Storage,
        change_log: ChangeLogger,
        *,
        unpublished_ids: set[str] | None = None,
        other_sponsor_overrides: Mapping[str, list[str]] | None = None,
    ) -> None:
        self.storage = storage
        self.change_log = change_log
        self.unpublished_ids = set(unpublished_ids or ())
        self.other_sponsor_overrides = dict(other_sponsor_overrides or {})

    def _persist(self, bill: Bill) -> None:
        self.storage.set(bill)
        self.change_log.record(self.storage.key(bill), self.storage)

    def _siblings(self, bill: Bill) -> list[Bill]:
        siblings = []
        for version_id in bill.amendments:
            version = self.storage.get_bill(version_id)
            if version is None:
                LOGGER.warning("Amendment %s of %s missing from storage", version_id, bill.bill_id)
                continue
            siblings.append(version)
        return siblings

    def apply_overrides(self, bill: Bill) -> None:
        names = self.other_sponsor_overrides.get(bill.bill_id)
        if names is not None:
            bill.other_sponsors = [Person(n) for n in names]
        if bill.bill_id in self.unpublished_ids:
            bill.publish_date = None

    def save_bill(self, bill: Bill) -> None:
        LOGGER.info("Saving %s", bill.bill_id)
        self.apply_overrides(bill)
        if bill.is_published:
            self._save_published(bill)
        else:
            self._save_unpublished(bill)

    def _save_published(self, bill: Bill) -> None:
        # Shared fields are normally sent to the base bill, but older data is
        # missing many base bills, so the broadcast goes every direction.
        for version in self._siblings(bill):
            version.add_amendment(bill.bill_id)
            if bill.active:
                version.active = False
            version.sponsor = bill.sponsor
            version.co_sponsors = list(bill.co_sponsors)
            version.other_sponsors = list(bill.other_sponsors)
            version.multi_sponsors = list(bill.multi_sponsors)
            version.law_section = bill.law_section
            version.law = bill.law
            version.summary = bill.summary
            self._persist(version)

        if bill.uni_bill:
            self._sync_uni_bill_text(bill)

        self._persist(bill)

    def _sync_uni_bill_text(self, bill: Bill) -> None:
        uni_bill = self.storage.get_bill(bill.same_as) if bill.same_as else None
        if uni_bill is None:
            LOGGER.debug("Uni-bill %s of %s not in storage yet", bill.same_as, bill.bill_id)
            return
        if _RE_SENATE_SERIES.match(bill.bill_id):
            uni_bill.full_text = bill.full_text
            self._persist(uni_bill)
        elif bill.full_text != uni_bill.full_text:
            bill.full_text = uni_bill.full_text

    def _save_unpublished(self, bill: Bill) -> None:
        if bill.amendments:
            # Assumes the last listed version is the most recent one
            new_active_id = bill.amendments[-1]
            for version in self._siblings(bill):
                version.remove_amendment(bill.bill_id)
                if bill.active and version.bill_id == new_active_id:
                    version.active = True
                self._persist(version)

        bill.active = False
        self.storage.set(bill)
        if not bill.brand_new:
            self.change_log.delete(self.storage.key(bill), self.storage)
