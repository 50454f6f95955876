"""Static lookups consulted before a bill is saved.

- The unpublished list: bill ids that must never be published.
- Other-sponsor overrides: the feed did not send co-prime sponsors for a
  handful of 2013 bills and resolutions, so they are filled in by hand.
"""

from __future__ import annotations

import logging
from pathlib import Path

LOGGER = logging.getLogger(__name__)

DEFAULT_OTHER_SPONSOR_OVERRIDES: dict[str, list[str]] = {
    "R314-2013": ["KLEIN"],
    "J375-2013": ["SKELOS", "KLEIN"],
    "R633-2013": ["KLEIN"],
    "J694-2013": ["KLEIN"],
    "J758-2013": ["SKELOS"],
    "R818-2013": ["KLEIN"],
    "J844-2013": ["KLEIN"],
    "J860-2013": ["SKELOS"],
    "J1608-2013": ["KLEIN", "STEWART-COUSINS"],
    "J1938-2013": ["KLEIN", "STEWART-COUSINS"],
    "J3100-2013": ["HANNON"],
    "S2107-2013": ["KLEIN"],
    "S3953-2013": ["ESPAILLAT"],
    "S5441-2013": ["GRISANTI", "RANZENHOFER", "GALLIVAN"],
    "S5656-2013": ["FUSCHILLO"],
    "S5657-2013": ["MARCHIONE", "CARLUCCI"],
    "S5683-2013": ["VALESKY"],
    "J2885-2013": ["KLEIN", "STEWART-COUSINS"],
    "J3307-2013": ["KLEIN", "SKELOS"],
    "J3743-2013": ["KLEIN", "STEWART-COUSINS"],
    "J3908-2013": ["KLEIN", "STEWART-COUSINS"],
    "R4036-2013": ["KLEIN"],
    "S6966-2013": ["GRIFFO"],
    "J4904-2013": ["KLEIN", "STEWART-COUSINS"],
    "J5165-2013": ["KLEIN"],
}


def load_unpublished_ids(path: Path | None) -> set[str]:
    """Read bill ids from a text file, one per line; ``#`` starts a comment.

    A missing path yields an empty set.
    """
    if path is None:
        return set()
    if not path.exists():
        LOGGER.warning("Unpublished list %s not found; publishing everything", path)
        return set()
    ids: set[str] = set()
    with open(path, encoding="utf-8") as f:
        for line in f:
            bill_id = line.split("#", 1)[0].strip()
            if bill_id:
                ids.add(bill_id)
    LOGGER.info("Loaded %d unpublished bill id(s) from %s", len(ids), path)
    return ids
