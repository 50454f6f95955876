"""Tests for the bill text / memo applier."""

from __future__ import annotations

from datetime import datetime

import pytest

from sobi_ingest.appliers.full_text import apply_text
from sobi_ingest.blocks import ParseError
from sobi_ingest.models import Bill


def _header(action: str = "", text_type: str = "BTXT") -> str:
    return f"00000.SO DOC S {'100':<13} {action:<24} {text_type:<20} 2020"


def _body(line_no: int, text: str) -> str:
    return f"{line_no:05d}{text}"


def _bill(**kwargs) -> Bill:
    return Bill(bill_id="S100-2020", year=2020, **kwargs)


class TestApplyText:
    def test_round_trip(self, file_date: datetime) -> None:
        bill = _bill()
        data = "\n".join(
            [
                _header(),
                _body(1, "   1  Section 1. The tax law is amended."),
                _body(2, "   2  Section 2. This act shall take effect."),
                _header("*END*"),
            ]
        )
        apply_text(data, bill, file_date)
        assert bill.full_text == (
            "   1  Section 1. The tax law is amended.\n"
            "   2  Section 2. This act shall take effect.\n"
        )

    def test_memo_text(self, file_date: datetime) -> None:
        bill = _bill(full_text="unchanged")
        data = "\n".join([_header(text_type="MTXT"), _body(1, "MEMO"), _header("*END*", "MTXT")])
        apply_text(data, bill, file_date)
        assert bill.memo == "MEMO\n"
        assert bill.full_text == "unchanged"

    def test_resolution_text(self, file_date: datetime) -> None:
        bill = _bill()
        data = "\n".join(
            [_header(text_type="RESO TEXT"), _body(1, "RESOLVED"), _header("*END*", "RESO TEXT")]
        )
        apply_text(data, bill, file_date)
        assert bill.full_text == "RESOLVED\n"

    def test_repeated_start_header_ignored(self, file_date: datetime) -> None:
        bill = _bill()
        data = "\n".join(
            [_header(), _body(1, "one"), _header(), _body(2, "two"), _header("*END*")]
        )
        apply_text(data, bill, file_date)
        assert bill.full_text == "one\ntwo\n"

    def test_delete(self, file_date: datetime) -> None:
        bill = _bill(full_text="old text", memo="old memo")
        apply_text(_header("*DELETE*"), bill, file_date)
        assert bill.full_text == ""
        assert bill.memo == "old memo"

    def test_end_without_body_raises(self, file_date: datetime) -> None:
        with pytest.raises(ParseError):
            apply_text(_header("*END*"), _bill(), file_date)

    def test_body_before_header_raises(self, file_date: datetime) -> None:
        with pytest.raises(ParseError):
            apply_text(_body(1, "orphan"), _bill(), file_date)

    def test_unknown_type_raises(self, file_date: datetime) -> None:
        with pytest.raises(ParseError):
            apply_text(_header(text_type="XTXT"), _bill(), file_date)

    def test_unknown_action_raises(self, file_date: datetime) -> None:
        with pytest.raises(ParseError):
            apply_text(_header("*BOGUS*"), _bill(), file_date)

    def test_failed_parse_leaves_bill_untouched(self, file_date: datetime) -> None:
        bill = _bill(full_text="old")
        data = "\n".join([_header(), _body(1, "new"), _header("*END*"), _header("*END*")])
        with pytest.raises(ParseError):
            apply_text(data, bill, file_date)
        assert bill.full_text == "old"


class TestUnterminatedText:
    def test_commits_partial_after_fix_date(self, file_date: datetime) -> None:
        bill = _bill(full_text="old")
        apply_text("\n".join([_header(), _body(1, "partial")]), bill, file_date)
        assert bill.full_text == "partial\n"

    def test_raises_before_fix_date(self) -> None:
        bill = _bill(full_text="old")
        with pytest.raises(ParseError):
            apply_text(
                "\n".join([_header(), _body(1, "partial")]), bill, datetime(2011, 3, 1)
            )
        assert bill.full_text == "old"

    def test_fix_date_itself_commits(self) -> None:
        bill = _bill()
        apply_text("\n".join([_header(), _body(1, "partial")]), bill, datetime(2011, 4, 23))
        assert bill.full_text == "partial\n"
