"""Bill text, resolution text and sponsor memo applier (``T``, ``R``, ``M``).

Expected format::

    00000.SO DOC S 63                                     BTXT                 2011
    00083   28    S 4. This act shall take effect immediately.
    00000.SO DOC S 63            *END*                    BTXT                 2011

Header lines start with ``00000.SO DOC`` and carry one of three actions:

- ``''``       start of a text segment (repeated periodically; ignored while
  a segment is already open)
- ``*END*``    end of the segment; its content replaces the stored text
- ``*DELETE*`` clears the stored text

Body lines have their five digit line number stripped.  Text blocks can run
back to back, so headers are checked on every line.
"""

from __future__ import annotations

import logging
import re
from datetime import datetime

from ..blocks import ParseError
from ..config import TEXT_FOOTER_FIX_DATE
from ..models import Bill

LOGGER = logging.getLogger(__name__)

_RE_TEXT_HEADER = re.compile(
    r"00000\.SO DOC ([ASC]) ([0-9R/A-Z ]{13}) ([A-Z* ]{24}) ([A-Z ]{20}) ([0-9]{4}).*"
)

BILL_TEXT = "BTXT"
RESOLUTION_TEXT = "RESO TEXT"
MEMO_TEXT = "MTXT"
_TEXT_TYPES = (BILL_TEXT, RESOLUTION_TEXT, MEMO_TEXT)

LINE_NUMBER_WIDTH = 5


def _field_for(text_type: str) -> str:
    return "memo" if text_type == MEMO_TEXT else "full_text"


def apply_text(data: str, bill: Bill, date: datetime) -> None:
    text_type = ""
    text: list[str] | None = None
    # Field writes are held back until the whole body has parsed
    updates: dict[str, str] = {}

    for line in data.split("\n"):
        header = _RE_TEXT_HEADER.match(line) if line.startswith("00000") else None
        if header:
            action = header.group(3).strip()
            text_type = header.group(4).strip()
            if text_type not in _TEXT_TYPES:
                raise ParseError(f"Unknown text type found: {text_type!r}")

            if action == "*DELETE*":
                updates[_field_for(text_type)] = ""
            elif action == "*END*":
                if text is None:
                    raise ParseError(f"Text END found before a body: {line!r}")
                updates[_field_for(text_type)] = "".join(text)
                text = None
            elif action == "":
                if text is None:
                    text = []
            else:
                raise ParseError(f"Unknown text action found: {action!r}")
        elif text is not None:
            text.append(line[LINE_NUMBER_WIDTH:] + "\n")
        else:
            raise ParseError(f"Text body found before header: {line!r}")

    if text is not None:
        if date < TEXT_FOOTER_FIX_DATE:
            raise ParseError("Finished text data without a footer")
        LOGGER.warning("Committing %s text for %s without a footer", text_type, bill.bill_id)
        updates[_field_for(text_type)] = "".join(text)

    for attr, value in updates.items():
        setattr(bill, attr, value)
