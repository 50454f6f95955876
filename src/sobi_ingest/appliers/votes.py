"""Floor vote applier for vote memo (``V``) blocks.

Expected format::

    Senate Vote    Bill: S1892              Date: 01/19/2011  Aye - 41  Nay - 19
    Nay  Adams            Aye  Addabbo          Aye  Alesi            Aye  Avella

Roster entries are fixed width: a four character vote code, a space and a
name of up to fifteen characters.  Codes: ``Aye``, ``Nay``, ``Abs`` (absent),
``Abd`` (abstained) and ``Exc`` (excused).

The same vote is sometimes transmitted twice back to back inside one block,
so every header starts a fresh vote and only the last one in the block is
stored.  Votes are identified by bill, date, type and sequence; the first
publish date seen for an identity is kept.  Votes cannot be deleted.
"""

from __future__ import annotations

import logging
import re
from datetime import datetime

from ..blocks import ParseError
from ..models import VOTE_TYPE_FLOOR, Bill, Person, Vote
from ..normalize import parse_vote_date

LOGGER = logging.getLogger(__name__)

_RE_VOTE_HEADER = re.compile(r"Senate Vote    Bill: (.{18}) Date: (.{10}).*")
_RE_VOTE_ENTRY = re.compile(r"(.{4}) (.{1,15})")

_ROSTERS = {
    "Aye": "ayes",
    "Nay": "nays",
    "Abs": "absent",
    "Abd": "abstains",
    "Exc": "excused",
}


def _start_vote(line: str, date_str: str, bill: Bill, date: datetime) -> Vote:
    try:
        vote_date = parse_vote_date(date_str)
    except ValueError:
        raise ParseError(f"Vote date not matched: {line!r}") from None

    vote = Vote(bill_id=bill.bill_id, date=vote_date, vote_type=VOTE_TYPE_FLOOR, sequence="1")
    previous = bill.find_vote(vote)
    # Retransmissions keep the date the vote was first received
    vote.publish_date = previous.publish_date if previous is not None else date
    vote.modified_date = date
    return vote


def apply_vote_memo(data: str, bill: Bill, date: datetime) -> None:
    # TODO: parse the vote sequence number once the feed starts sending it
    vote: Vote | None = None

    for line in data.split("\n"):
        header = _RE_VOTE_HEADER.search(line)
        if header:
            # Each header replaces the vote parsed so far
            vote = _start_vote(line, header.group(2), bill, date)
        elif vote is not None:
            for entry in _RE_VOTE_ENTRY.finditer(line):
                code = entry.group(1).strip()
                roster = _ROSTERS.get(code)
                if roster is None:
                    raise ParseError(f"Unknown vote type {code!r} in line: {line!r}")
                getattr(vote, roster).append(Person(entry.group(2).strip()))
        else:
            raise ParseError(f"Hit vote data without a header: {data!r}")

    if vote is not None:
        bill.update_vote(vote)
        LOGGER.debug("Applied vote %s to %s", vote.vote_id, bill.bill_id)
