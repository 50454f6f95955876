"""Shared normalization utilities for the SOBI feed.

Centralizes the date formats and text clean-up rules used by the tokenizer,
the field appliers and the document store so every module agrees on them.

**Date formats:**
    - ``SOBI.D130323.T065432.TXT`` (change file names, ``yyMMdd`` + ``HHmmss``)
    - ``02/04/13``                  (bill event lines, ``MM/DD/YY``)
    - ``02/05/2013``                (vote memo headers, ``MM/DD/YYYY``)
    - ISO 8601                      (stored documents and logs)

**Print numbers:**
    The feed zero-pads bill numbers to five digits (``S01892``); stored ids
    drop the padding (``S1892``).
"""

from __future__ import annotations

import logging
import re
from datetime import datetime

LOGGER = logging.getLogger(__name__)

_RE_SOBI_FILENAME = re.compile(r"^SOBI\.D(\d{6})\.T(\d{6})\.TXT$")

EVENT_DATE_FORMAT = "%m/%d/%y"
VOTE_DATE_FORMAT = "%m/%d/%Y"


def parse_sobi_filename(name: str) -> datetime | None:
    """Return the timestamp encoded in a change file name, or None.

    Examples::

        >>> parse_sobi_filename("SOBI.D130323.T065432.TXT")
        datetime.datetime(2013, 3, 23, 6, 54, 32)
        >>> parse_sobi_filename("notes.txt") is None
        True
    """
    match = _RE_SOBI_FILENAME.match(name)
    if not match:
        return None
    try:
        return datetime.strptime(match.group(1) + match.group(2), "%y%m%d%H%M%S")
    except ValueError:
        LOGGER.debug("parse_sobi_filename: bad timestamp in %r", name)
        return None


def parse_event_date(date_str: str) -> datetime:
    """Parse a ``MM/DD/YY`` bill event date. Raises ValueError."""
    return datetime.strptime(date_str.strip(), EVENT_DATE_FORMAT)


def parse_vote_date(date_str: str) -> datetime:
    """Parse a ``MM/DD/YYYY`` vote header date. Raises ValueError."""
    return datetime.strptime(date_str.strip(), VOTE_DATE_FORMAT)


def collapse_lines(data: str) -> str:
    """Join a multi-line block body into one trimmed line."""
    return data.replace("\n", " ").strip()


def normalize_print_no(chamber: str, number: str) -> str:
    """Drop the zero padding from a feed print number.

    >>> normalize_print_no("S", "01892")
    'S1892'
    """
    return chamber + (number.lstrip("0") or "0")


def to_iso(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def from_iso(value: str | None) -> datetime | None:
    if not value:
        return None
    return datetime.fromisoformat(value)
