"""Tests for the SOBI block tokenizer."""

from __future__ import annotations

from pathlib import Path

import pytest

from sobi_ingest.blocks import Block, BlockType, ParseError, get_blocks, read_blocks


class TestBlock:
    def test_from_line(self, sobi_line) -> None:
        block = Block.from_line("SOBI.D200110.T093000.TXT", 3, sobi_line("3", "AN ACT"))
        assert block.header == "2020S00100 3"
        assert block.year == 2020
        assert block.print_no == "S100"
        assert block.amendment == ""
        assert block.block_type is BlockType.TITLE
        assert block.body_lines == ["AN ACT"]
        assert block.bill_id == "S100-2020"
        assert block.location == "SOBI.D200110.T093000.TXT:3"

    def test_amendment_letter(self, sobi_line) -> None:
        block = Block.from_line("f", 1, sobi_line("6", "SMITH", amendment="B"))
        assert block.amendment == "B"
        assert block.bill_id == "S100B-2020"
        assert block.bill_header == "2020S00100B"

    def test_non_record_raises(self) -> None:
        with pytest.raises(ParseError):
            Block.from_line("f", 1, "not a record")

    def test_unknown_type_code(self, sobi_line) -> None:
        block = Block.from_line("f", 1, sobi_line("3", "AN ACT"))
        block.type_code = "Z"
        with pytest.raises(ParseError):
            _ = block.block_type

    def test_multiline_types(self) -> None:
        assert BlockType.TITLE.multiline
        assert BlockType.TEXT.multiline
        assert not BlockType.BILL_INFO.multiline
        assert not BlockType.PROGRAM_INFO.multiline
        assert len(BlockType) == 16


class TestGetBlocks:
    def test_no_records(self) -> None:
        assert get_blocks(["hello", "", "world"]) == []

    def test_empty_input(self) -> None:
        assert get_blocks([]) == []

    def test_single_line_block(self, sobi_line) -> None:
        blocks = get_blocks([sobi_line("3", "AN ACT"), ""])
        assert len(blocks) == 1
        assert blocks[0].body_lines == ["AN ACT"]

    def test_trailing_block_closed(self, sobi_line) -> None:
        blocks = get_blocks([sobi_line("3", "AN ACT")])
        assert len(blocks) == 1

    def test_multiline_extension(self, sobi_line) -> None:
        blocks = get_blocks([sobi_line("3", "AN ACT to amend"), sobi_line("3", "the tax law")])
        assert len(blocks) == 1
        assert blocks[0].data == "AN ACT to amend\nthe tax law"

    def test_single_line_type_not_extended(self, sobi_line) -> None:
        blocks = get_blocks([sobi_line("9", "029 Governor"), sobi_line("9", "029 Governor")])
        assert len(blocks) == 2

    def test_header_change_closes_block(self, sobi_line) -> None:
        blocks = get_blocks(
            [
                sobi_line("3", "AN ACT"),
                sobi_line("3", "AN ACT", print_no="S200"),
                sobi_line("6", "SMITH", print_no="S200"),
            ]
        )
        assert [b.header for b in blocks] == ["2020S00100 3", "2020S00200 3", "2020S00200 6"]

    def test_unknown_type_code_forms_block(self, sobi_line) -> None:
        blocks = get_blocks(
            [sobi_line("3", "AN ACT"), sobi_line("X", "garbage"), sobi_line("X", "more")]
        )
        assert [b.type_code for b in blocks] == ["3", "X", "X"]
        assert blocks[1].multiline is False

    def test_non_record_line_closes_block(self, sobi_line) -> None:
        blocks = get_blocks([sobi_line("3", "AN ACT"), "garbage", sobi_line("3", "AN ACT")])
        assert len(blocks) == 2
        assert blocks[1].line_no == 3

    def test_null_bytes_become_spaces(self, sobi_line) -> None:
        line = sobi_line("3", "AN\0ACT").replace("2020S00100 ", "2020S00100\0")
        blocks = get_blocks([line])
        assert blocks[0].amendment == ""
        assert blocks[0].body_lines == ["AN ACT"]


class TestSyntheticLawBlock:
    def test_law_inserted_before_summary(self, sobi_line) -> None:
        blocks = get_blocks([sobi_line("A", "Act to amend"), sobi_line("C", "Summary text")])
        assert [b.type_code for b in blocks] == ["A", "B", "C"]
        law = blocks[1]
        assert law.header == "2020S00100 B"
        assert law.data == ""

    def test_no_insert_after_law(self, sobi_line) -> None:
        blocks = get_blocks([sobi_line("B", "Tax Law"), sobi_line("C", "Summary text")])
        assert [b.type_code for b in blocks] == ["B", "C"]

    def test_no_insert_for_other_bill(self, sobi_line) -> None:
        blocks = get_blocks(
            [sobi_line("A", "Act to amend"), sobi_line("C", "Summary", print_no="S200")]
        )
        assert [b.type_code for b in blocks] == ["A", "C"]

    def test_no_insert_for_other_amendment(self, sobi_line) -> None:
        blocks = get_blocks(
            [sobi_line("A", "Act to amend"), sobi_line("C", "Summary", amendment="A")]
        )
        assert [b.type_code for b in blocks] == ["A", "C"]

    def test_no_insert_when_summary_opens_file(self, sobi_line) -> None:
        blocks = get_blocks([sobi_line("C", "Summary text")])
        assert [b.type_code for b in blocks] == ["C"]


class TestReadBlocks:
    def test_reads_file(self, write_sobi, sobi_line) -> None:
        path: Path = write_sobi("SOBI.D200110.T093000.TXT", [sobi_line("3", "AN ACT")])
        blocks = read_blocks(path)
        assert len(blocks) == 1
        assert blocks[0].source_file == "SOBI.D200110.T093000.TXT"
        assert blocks[0].line_no == 1

    def test_form_feed_stays_inside_line(self, write_sobi, sobi_line) -> None:
        start = f"00000.SO DOC S {'100':<13} {'':<24} {'BTXT':<20} 2020"
        end = f"00000.SO DOC S {'100':<13} {'*END*':<24} {'BTXT':<20} 2020"
        path: Path = write_sobi(
            "SOBI.D200110.T093000.TXT",
            [
                sobi_line("T", start),
                sobi_line("T", "00001 first line \x0c page two"),
                sobi_line("T", "00002 second line"),
                sobi_line("T", end),
            ],
        )
        blocks = read_blocks(path)
        assert len(blocks) == 1
        assert blocks[0].body_lines[1] == "00001 first line \x0c page two"
        assert len(blocks[0].body_lines) == 4
