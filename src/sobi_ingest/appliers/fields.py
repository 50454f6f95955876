"""Replace-in-full field appliers for the single-value SOBI record types.

Each applier receives the block body, the target bill and the change file
date.  Blocks are always sent in full: a field is replaced, never merged.
"""

from __future__ import annotations

import logging
import re
from datetime import datetime

from ..blocks import ParseError
from ..models import Bill, Person
from ..normalize import collapse_lines

LOGGER = logging.getLogger(__name__)

# e.g. "Same as Uni. A 372" / "Same as S 210-A"; a second reference is ignored
_RE_SAME_AS = re.compile(r"Same as( Uni\.)? ([A-Z] ?[0-9]{1,5}-?[A-Z]?)")

# sponsor, reprint no, blurb, previous print no, LBD number, previous year
_RE_BILL_INFO = re.compile(r"(.{20})([0-9]{5}[ A-Z])(.{33})([ A-Z][0-9]{5}[ `\-A-Z0-9])(.{8})(.*)")

# Assembly sponsors were once sent as "RULES COM <name> ..."
_RE_RULES_COM = re.compile(r"RULES COM ([a-zA-Z\-']+)( [A-Z])?(.*)")
_RE_RULES_REQUEST = re.compile(r"RULES \(REQUEST OF [a-zA-Z\-']*\)")


def _split_people(data: str) -> list[Person]:
    return [Person(name.strip()) for name in data.replace("\n", " ").split(",")]


def apply_bill_info(data: str, bill: Bill, date: datetime) -> None:
    """Bill status line: publishes the bill, or unpublishes it on DELETE.

    Fills in a missing sponsor and the previous session's print number.
    """
    if data.startswith("DELETE"):
        bill.publish_date = None
        return

    if not bill.is_published:
        # A status line for an unpublished bill (re)publishes and activates it
        bill.publish_date = date
        bill.active = True

    match = _RE_BILL_INFO.search(data)
    if not match:
        raise ParseError(f"Bill info pattern not matched by {data!r}")

    sponsor = match.group(1).strip()
    # The last column is the amendment slot; digits, "`" and "-" mean none
    old_bill = re.sub(r"[0-9`\-]$", "", match.group(4)).strip()
    old_year = match.group(6).strip()

    if sponsor and (bill.sponsor is None or not bill.sponsor.name):
        bill.sponsor = Person(sponsor)
    if old_bill and not old_bill.startswith("0"):
        bill.previous_versions = [f"{old_bill}-{old_year}"]


def apply_law_section(data: str, bill: Bill, date: datetime) -> None:
    """Cannot be deleted, only replaced."""
    bill.law_section = collapse_lines(data)


def apply_title(data: str, bill: Bill, date: datetime) -> None:
    """Cannot be deleted, only replaced."""
    bill.title = collapse_lines(data)


def apply_same_as(data: str, bill: Bill, date: datetime) -> None:
    stripped = data.strip()
    if stripped.lower() in ("no same as", "delete"):
        bill.same_as = ""
        bill.uni_bill = False
        return

    match = _RE_SAME_AS.search(data)
    if not match:
        LOGGER.error("Same-as pattern not matched for %s: %r", bill.bill_id, data)
        return

    if match.group(1):
        bill.uni_bill = True
    reference = match.group(2).replace("-", "").replace(" ", "")
    bill.same_as = f"{reference}-{bill.session}"


def _normalized_rules_sponsor(name: str) -> str:
    match = _RE_RULES_COM.fullmatch(name)
    if match:
        return f"RULES (REQUEST OF {match.group(1)}{match.group(2) or ''})".upper()
    if _RE_RULES_REQUEST.fullmatch(name):
        return name
    return "RULES"


def apply_sponsor(data: str, bill: Bill, date: datetime) -> None:
    """Applies sponsor lines one at a time.

    Consecutive sponsor blocks can be folded together by the tokenizer, so
    every line is handled as its own update.  DELETE removes the sponsor,
    co-sponsors and multi-sponsors.
    """
    for line in data.split("\n"):
        if line.strip() == "DELETE":
            bill.sponsor = None
            bill.co_sponsors = []
            bill.multi_sponsors = []
        elif bill.sponsor is not None and bill.sponsor.name.startswith("RULES "):
            bill.sponsor = Person(_normalized_rules_sponsor(bill.sponsor.name))
        else:
            bill.sponsor = Person(line.strip())


def apply_co_sponsors(data: str, bill: Bill, date: datetime) -> None:
    """Comma separated; DELETE arrives through the sponsor block."""
    bill.co_sponsors = _split_people(data)


def apply_multi_sponsors(data: str, bill: Bill, date: datetime) -> None:
    """Comma separated; DELETE arrives through the sponsor block."""
    bill.multi_sponsors = _split_people(data)


def apply_program_info(data: str, bill: Bill, date: datetime) -> None:
    """Program info (e.g. ``029 Governor Program``) is not stored."""
    LOGGER.debug("Ignoring program info for %s: %r", bill.bill_id, data.strip())


def apply_act_clause(data: str, bill: Bill, date: datetime) -> None:
    if data.strip() == "DELETE":
        bill.act_clause = ""
    else:
        bill.act_clause = collapse_lines(data)


def apply_law(data: str, bill: Bill, date: datetime) -> None:
    """DELETE also clears the summary.

    Law bodies can span lines, so DELETE is a prefix match.
    """
    if data.strip().startswith("DELETE"):
        bill.law = ""
        bill.summary = ""
    else:
        bill.law = collapse_lines(data)


def apply_summary(data: str, bill: Bill, date: datetime) -> None:
    """DELETE arrives through the law block."""
    bill.summary = collapse_lines(data)
