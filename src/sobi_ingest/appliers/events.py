"""Bill event (``4``) applier: action history plus the facts derived from it.

Each line is ``MM/DD/YY event text``.  The feed always sends the complete
history, so the action list, same-as, committees and stricken flag are all
recomputed from the block and replaced.

Derived facts, checked most specific first:

- ``ENACTING CLAUSE STRICKEN``                  -> stricken
- ``REFERRED|COMMITTED|RECOMMIT TO <name>``     -> new current committee
- ``REPORT CAL|THIRD READING|RULES REPORT``     -> leaves committee
- ``SUBSTITUTED FOR|BY <print no>``             -> same-as
"""

from __future__ import annotations

import logging
import re
from datetime import datetime, timedelta

from ..blocks import ParseError
from ..models import Action, Bill
from ..normalize import parse_event_date

LOGGER = logging.getLogger(__name__)

_RE_BILL_EVENT = re.compile(r"([0-9]{2}/[0-9]{2}/[0-9]{2}) (.*)")
_RE_COMMITTEE_EVENT = re.compile(r"(REFERRED|COMMITTED|RECOMMIT) TO (.*)")
_RE_FLOOR_EVENT = re.compile(r"(REPORT CAL|THIRD READING|RULES REPORT)")
_RE_SUBSTITUTE_EVENT = re.compile(r"SUBSTITUTED (FOR|BY) (.*)")

STRICKEN_TEXT = "ENACTING CLAUSE STRICKEN"


def _unique_timestamp(event_date: datetime, taken: set[datetime]) -> datetime:
    """Shift same-day duplicates forward one second at a time.

    Identical events on the same day are kept, not merged; the shift keeps
    the list strictly ordered.
    """
    while event_date in taken:
        event_date += timedelta(seconds=1)
    return event_date


def apply_bill_event(data: str, bill: Bill, date: datetime) -> None:
    actions: list[Action] = []
    taken: set[datetime] = set()
    same_as = bill.same_as
    stricken = False
    current_committee = ""
    past_committees: list[str] = []

    for line in data.split("\n"):
        match = _RE_BILL_EVENT.search(line)
        if not match:
            raise ParseError(f"Bill event pattern not matched: {line!r}")
        try:
            event_date = parse_event_date(match.group(1))
        except ValueError:
            raise ParseError(f"Bill event date not parsed: {match.group(1)!r}") from None

        event_text = match.group(2).strip()
        event_date = _unique_timestamp(event_date, taken)
        taken.add(event_date)
        actions.append(Action(date=event_date, text=event_text))

        upper = event_text.upper()
        committee = _RE_COMMITTEE_EVENT.search(upper)
        if STRICKEN_TEXT in upper:
            stricken = True
        elif committee:
            if current_committee:
                past_committees.append(current_committee)
            current_committee = committee.group(2).strip()
        elif _RE_FLOOR_EVENT.search(upper):
            if current_committee:
                past_committees.append(current_committee)
            current_committee = ""
        else:
            substitute = _RE_SUBSTITUTE_EVENT.search(upper)
            if substitute:
                same_as = f"{substitute.group(2).strip()}-{bill.session}"

    bill.actions = actions
    bill.same_as = same_as
    bill.current_committee = current_committee
    bill.past_committees = past_committees
    bill.stricken = stricken
    LOGGER.debug("Applied %d action(s) to %s", len(actions), bill.bill_id)
