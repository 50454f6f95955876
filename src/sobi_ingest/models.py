from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

VOTE_TYPE_FLOOR = "floor"


@dataclass(frozen=True, eq=False)
class Person:
    name: str  # e.g. "ADAMS" or "RULES (REQUEST OF SILVER)"

    @property
    def key(self) -> str:
        """Whitespace-collapsed, upper-cased name used for equality."""
        return " ".join(self.name.split()).upper()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Person):
            return NotImplemented
        return self.key == other.key

    def __hash__(self) -> int:
        return hash(self.key)


@dataclass
class Action:
    date: datetime  # seconds are shifted to keep same-day duplicates ordered
    text: str  # e.g. "REFERRED TO FINANCE"


@dataclass
class Vote:
    bill_id: str  # e.g. "S1892-2011"
    date: datetime
    vote_type: str = VOTE_TYPE_FLOOR
    sequence: str = "1"
    ayes: list[Person] = field(default_factory=list)
    nays: list[Person] = field(default_factory=list)
    absent: list[Person] = field(default_factory=list)
    excused: list[Person] = field(default_factory=list)
    abstains: list[Person] = field(default_factory=list)
    publish_date: datetime | None = None
    modified_date: datetime | None = None

    @property
    def identity(self) -> tuple[str, datetime, str, str]:
        return (self.bill_id, self.date, self.vote_type, self.sequence)

    @property
    def vote_id(self) -> str:
        return f"{self.bill_id}-{self.date:%Y-%m-%d}-{self.vote_type}-{self.sequence}"


@dataclass
class Bill:
    bill_id: str  # e.g. "S100A-2013" -- printNo + amendment + "-" + year
    year: int
    title: str = ""
    summary: str = ""
    law: str = ""
    law_section: str = ""
    act_clause: str = ""
    same_as: str = ""
    uni_bill: bool = False
    sponsor: Person | None = None
    co_sponsors: list[Person] = field(default_factory=list)
    other_sponsors: list[Person] = field(default_factory=list)
    multi_sponsors: list[Person] = field(default_factory=list)
    full_text: str = ""
    memo: str = ""
    actions: list[Action] = field(default_factory=list)
    votes: dict[str, Vote] = field(default_factory=dict)  # vote_id -> Vote
    # Sibling bill ids (base bill + amendments), never including this bill
    amendments: list[str] = field(default_factory=list)
    publish_date: datetime | None = None
    modified_date: datetime | None = None
    active: bool = False
    current_committee: str = ""
    past_committees: list[str] = field(default_factory=list)
    stricken: bool = False
    previous_versions: list[str] = field(default_factory=list)
    data_sources: set[str] = field(default_factory=set)
    # Set when the bill was constructed during the current run; not persisted
    brand_new: bool = field(default=False, compare=False, repr=False)

    @property
    def print_no(self) -> str:
        """Print number including the amendment letter, e.g. ``S100A``."""
        return self.bill_id.rsplit("-", 1)[0]

    @property
    def session(self) -> int:
        return self.year

    @property
    def is_published(self) -> bool:
        return self.publish_date is not None

    def add_amendment(self, bill_id: str) -> None:
        if bill_id != self.bill_id and bill_id not in self.amendments:
            self.amendments.append(bill_id)

    def add_amendments(self, bill_ids: list[str]) -> None:
        for bill_id in bill_ids:
            self.add_amendment(bill_id)

    def remove_amendment(self, bill_id: str) -> None:
        self.amendments = [a for a in self.amendments if a != bill_id]

    def update_vote(self, vote: Vote) -> None:
        """Replace the vote with the same identity, or append it."""
        self.votes[vote.vote_id] = vote

    def find_vote(self, vote: Vote) -> Vote | None:
        for existing in self.votes.values():
            if existing.identity == vote.identity:
                return existing
        return None

    def add_data_source(self, source: str) -> None:
        self.data_sources.add(source)
