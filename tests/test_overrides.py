from __future__ import annotations

from pathlib import Path

from sobi_ingest.overrides import DEFAULT_OTHER_SPONSOR_OVERRIDES, load_unpublished_ids


class TestUnpublishedIds:
    def test_none(self) -> None:
        assert load_unpublished_ids(None) == set()

    def test_missing_file(self, tmp_path: Path) -> None:
        assert load_unpublished_ids(tmp_path / "absent.txt") == set()

    def test_comments_and_blanks(self, tmp_path: Path) -> None:
        path = tmp_path / "unpublished.txt"
        path.write_text(
            "# withdrawn\nS100-2020\n\nA372-2020  # duplicate print\n", encoding="utf-8"
        )
        assert load_unpublished_ids(path) == {"S100-2020", "A372-2020"}


def test_default_overrides_are_2013_bills() -> None:
    assert len(DEFAULT_OTHER_SPONSOR_OVERRIDES) == 25
    assert all(k.endswith("-2013") for k in DEFAULT_OTHER_SPONSOR_OVERRIDES)
    assert DEFAULT_OTHER_SPONSOR_OVERRIDES["S5441-2013"] == ["GRISANTI", "RANZENHOFER", "GALLIVAN"]
