"""JSON document store for bills.

One JSON file per bill at ``<root>/<year>/bill/<bill_id>.json``.  Loaded
bills are cached in memory so every lookup during a run returns the same
object; ``set`` only marks a bill dirty and ``flush`` writes dirty bills
with atomic ``tmp`` + ``replace`` writes.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from .models import Action, Bill, Person, Vote
from .normalize import from_iso, to_iso

LOGGER = logging.getLogger(__name__)


# ── Serialization ────────────────────────────────────────────────────────────


def _people(names: list[str]) -> list[Person]:
    return [Person(n) for n in names]


def _names(people: list[Person]) -> list[str]:
    return [p.name for p in people]


def _vote_to_dict(v: Vote) -> dict:
    return {
        "bill_id": v.bill_id,
        "date": to_iso(v.date),
        "vote_type": v.vote_type,
        "sequence": v.sequence,
        "ayes": _names(v.ayes),
        "nays": _names(v.nays),
        "absent": _names(v.absent),
        "excused": _names(v.excused),
        "abstains": _names(v.abstains),
        "publish_date": to_iso(v.publish_date),
        "modified_date": to_iso(v.modified_date),
    }


def _vote_from_dict(d: dict) -> Vote:
    return Vote(
        bill_id=d["bill_id"],
        date=from_iso(d["date"]),
        vote_type=d.get("vote_type", "floor"),
        sequence=d.get("sequence", "1"),
        ayes=_people(d.get("ayes", [])),
        nays=_people(d.get("nays", [])),
        absent=_people(d.get("absent", [])),
        excused=_people(d.get("excused", [])),
        abstains=_people(d.get("abstains", [])),
        publish_date=from_iso(d.get("publish_date")),
        modified_date=from_iso(d.get("modified_date")),
    )


def bill_to_dict(b: Bill) -> dict:
    return {
        "bill_id": b.bill_id,
        "year": b.year,
        "title": b.title,
        "summary": b.summary,
        "law": b.law,
        "law_section": b.law_section,
        "act_clause": b.act_clause,
        "same_as": b.same_as,
        "uni_bill": b.uni_bill,
        "sponsor": b.sponsor.name if b.sponsor is not None else None,
        "co_sponsors": _names(b.co_sponsors),
        "other_sponsors": _names(b.other_sponsors),
        "multi_sponsors": _names(b.multi_sponsors),
        "full_text": b.full_text,
        "memo": b.memo,
        "actions": [{"date": to_iso(a.date), "text": a.text} for a in b.actions],
        "votes": [_vote_to_dict(v) for v in b.votes.values()],
        "amendments": list(b.amendments),
        "publish_date": to_iso(b.publish_date),
        "modified_date": to_iso(b.modified_date),
        "active": b.active,
        "current_committee": b.current_committee,
        "past_committees": list(b.past_committees),
        "stricken": b.stricken,
        "previous_versions": list(b.previous_versions),
        "data_sources": sorted(b.data_sources),
    }


def bill_from_dict(d: dict) -> Bill:
    actions = [
        Action(date=from_iso(a["date"]), text=a["text"])
        for a in d.get("actions", [])
        if isinstance(a, dict) and "date" in a and "text" in a
    ]
    votes = [_vote_from_dict(v) for v in d.get("votes", []) if isinstance(v, dict)]
    sponsor = d.get("sponsor")

    return Bill(
        bill_id=d["bill_id"],
        year=d["year"],
        title=d.get("title", ""),
        summary=d.get("summary", ""),
        law=d.get("law", ""),
        law_section=d.get("law_section", ""),
        act_clause=d.get("act_clause", ""),
        same_as=d.get("same_as", ""),
        uni_bill=d.get("uni_bill", False),
        sponsor=Person(sponsor) if sponsor is not None else None,
        co_sponsors=_people(d.get("co_sponsors", [])),
        other_sponsors=_people(d.get("other_sponsors", [])),
        multi_sponsors=_people(d.get("multi_sponsors", [])),
        full_text=d.get("full_text", ""),
        memo=d.get("memo", ""),
        actions=actions,
        votes={v.vote_id: v for v in votes},
        amendments=d.get("amendments", []),
        publish_date=from_iso(d.get("publish_date")),
        modified_date=from_iso(d.get("modified_date")),
        active=d.get("active", False),
        current_committee=d.get("current_committee", ""),
        past_committees=d.get("past_committees", []),
        stricken=d.get("stricken", False),
        previous_versions=d.get("previous_versions", []),
        data_sources=set(d.get("data_sources", [])),
    )


# ── Store ────────────────────────────────────────────────────────────────────


class Storage:
    """Key-value bill store backed by a directory of JSON files."""

    def __init__(self, root: Path) -> None:
        self.root = Path(root)
        self._cache: dict[str, Bill] = {}
        self._dirty: set[str] = set()

    @staticmethod
    def key_for(bill_id: str) -> str:
        year = bill_id.rsplit("-", 1)[-1]
        return f"{year}/bill/{bill_id}"

    def key(self, bill: Bill) -> str:
        return self.key_for(bill.bill_id)

    def _path(self, key: str) -> Path:
        return self.root / f"{key}.json"

    def get(self, key: str) -> Bill | None:
        if key in self._cache:
            return self._cache[key]
        path = self._path(key)
        if not path.exists():
            return None
        with open(path, encoding="utf-8") as f:
            bill = bill_from_dict(json.load(f))
        self._cache[key] = bill
        return bill

    def get_bill(self, print_no_or_id: str, year: int | None = None) -> Bill | None:
        """Look up by bill id (``S100A-2013``) or by print number and year."""
        bill_id = print_no_or_id if year is None else f"{print_no_or_id}-{year}"
        return self.get(self.key_for(bill_id))

    def set(self, bill: Bill) -> None:
        key = self.key(bill)
        self._cache[key] = bill
        self._dirty.add(key)

    def flush(self) -> int:
        """Write every dirty bill to disk. Returns the number written."""
        written = 0
        for key in sorted(self._dirty):
            path = self._path(key)
            path.parent.mkdir(parents=True, exist_ok=True)
            tmp = path.with_suffix(".json.tmp")
            with open(tmp, "w", encoding="utf-8") as f:
                json.dump(bill_to_dict(self._cache[key]), f, indent=2, ensure_ascii=False)
            tmp.replace(path)
            written += 1
        self._dirty.clear()
        if written:
            LOGGER.info("Flushed %d bill(s) to %s", written, self.root)
        return written

    def clear_cache(self) -> None:
        """Drop cached bills. Unflushed changes are lost."""
        if self._dirty:
            LOGGER.warning("Clearing storage cache with %d unflushed bill(s)", len(self._dirty))
        self._cache.clear()
        self._dirty.clear()
