"""Block tokenizer: splits a SOBI change file into typed logical records.

Every SOBI line starts with a fixed-width 12 character header::

    2011S01892 VNay  Adams            Aye  Addabbo
    ^^^^        year
        ^       chamber letter
         ^^^^^  zero-padded bill number
              ^ amendment letter (space for the base bill)
               ^ record type code

Consecutive lines with an identical header are folded into one block when the
record type allows multi-line bodies.  Lines that are not SOBI records end the
current block and are otherwise ignored.  A record with an unknown type code
still forms a single-line block so it fails as a block when applied.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from .normalize import normalize_print_no

LOGGER = logging.getLogger(__name__)

HEADER_LENGTH = 12

_RE_BLOCK_HEADER = re.compile(r"^([0-9]{4})([A-Z])([0-9]{5})([ A-Z])([0-9A-Z])")


class ParseError(ValueError):
    """Raised when a block does not match the grammar of its record type."""


class BlockType(str, Enum):
    BILL_INFO = "1"
    LAW_SECTION = "2"
    TITLE = "3"
    BILL_EVENT = "4"
    SAME_AS = "5"
    SPONSOR = "6"
    CO_SPONSOR = "7"
    MULTI_SPONSOR = "8"
    PROGRAM_INFO = "9"
    ACT_CLAUSE = "A"
    LAW = "B"
    SUMMARY = "C"
    SPONSOR_MEMO = "M"
    RESOLUTION_TEXT = "R"
    TEXT = "T"
    VOTE_MEMO = "V"

    @property
    def multiline(self) -> bool:
        """Whether consecutive lines with the same header extend one block."""
        return self not in (BlockType.BILL_INFO, BlockType.PROGRAM_INFO)


@dataclass
class Block:
    source_file: str
    line_no: int  # 1-based line of the first record
    header: str  # e.g. "2011S01892 V"
    year: int
    print_no: str  # e.g. "S1892"
    amendment: str  # "" for the base bill
    type_code: str
    body_lines: list[str] = field(default_factory=list)

    @classmethod
    def from_line(cls, source_file: str, line_no: int, line: str) -> Block:
        match = _RE_BLOCK_HEADER.match(line)
        if not match:
            raise ParseError(f"Not a SOBI record at {source_file}:{line_no}: {line!r}")
        year, chamber, number, amendment, type_code = match.groups()
        block = cls(
            source_file=source_file,
            line_no=line_no,
            header=match.group(0),
            year=int(year),
            print_no=normalize_print_no(chamber, number),
            amendment=amendment.strip(),
            type_code=type_code,
        )
        block.extend(line)
        return block

    def extend(self, line: str) -> None:
        self.body_lines.append(line[HEADER_LENGTH:])

    @property
    def block_type(self) -> BlockType:
        try:
            return BlockType(self.type_code)
        except ValueError:
            raise ParseError(f"Invalid line code {self.type_code!r}") from None

    @property
    def multiline(self) -> bool:
        try:
            return self.block_type.multiline
        except ParseError:
            return False

    @property
    def bill_header(self) -> str:
        """Header without the type code: identifies the target bill."""
        return self.header[: HEADER_LENGTH - 1]

    @property
    def bill_id(self) -> str:
        return f"{self.print_no}{self.amendment}-{self.year}"

    @property
    def data(self) -> str:
        return "\n".join(self.body_lines)

    @property
    def location(self) -> str:
        return f"{self.source_file}:{self.line_no}"

    def __str__(self) -> str:
        return f"{self.location} [{self.header}]"


def get_blocks(lines: list[str], source_file: str = "") -> list[Block]:
    """Group raw change-file lines into blocks, in file order.

    A summary (``C``) block is always preceded by a law (``B``) block for the
    same bill; the feed leaves out blank law lines, so an empty one is
    synthesized when needed.
    """
    blocks: list[Block] = []
    block: Block | None = None

    # The trailing blank line closes the final block.
    for index, raw_line in enumerate([*lines, ""]):
        line = raw_line.replace("\0", " ")
        line_no = index + 1
        match = _RE_BLOCK_HEADER.match(line)

        if not match:
            if block is not None:
                blocks.append(block)
                block = None
            continue

        if block is None:
            block = Block.from_line(source_file, line_no, line)
        elif block.header == match.group(0) and block.multiline:
            block.extend(line)
        else:
            blocks.append(block)
            new_block = Block.from_line(source_file, line_no, line)
            if (
                new_block.bill_header == block.bill_header
                and new_block.type_code == BlockType.SUMMARY.value
                and block.type_code != BlockType.LAW.value
            ):
                blocks.append(
                    Block.from_line(source_file, line_no, block.bill_header + BlockType.LAW.value)
                )
            block = new_block

    return blocks


def read_blocks(path: Path) -> list[Block]:
    """Read a change file and tokenize it. Raises OSError if unreadable."""
    with open(path, encoding="utf-8", errors="replace") as f:
        # Only line feeds end a record; form feeds can sit inside text lines
        lines = f.read().split("\n")
    blocks = get_blocks(lines, source_file=path.name)
    LOGGER.debug("Tokenized %s: %d lines, %d blocks", path.name, len(lines), len(blocks))
    return blocks
