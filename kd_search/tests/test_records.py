"""
Unit Tests: Record Source

Tests:
    - Record validation (missing / blank text)
    - JSON library loading and its failure modes
"""

import json
from pathlib import Path

import pytest

from kd_search.core.errors import ErrorCode
from kd_search.pipeline.records import Record, load_records, parse_records

SAMPLE_LIBRARY = Path(__file__).resolve().parents[2] / "data" / "books.json"


@pytest.fixture
def library_path(tmp_path):
    path = tmp_path / "books.json"
    path.write_text(json.dumps({
        "books": [
            {"title": "Dune", "author": "Frank Herbert", "summary": "Desert planet intrigue."},
            {"title": "Emma", "author": "Jane Austen", "summary": "A matchmaker meddles."},
        ]
    }))
    return path


class TestRecord:
    """Tests for Record."""

    def test_from_mapping(self):
        record = Record.from_mapping({"title": "Emma", "summary": "Matchmaking."}).unwrap()

        assert record.text == "Matchmaking."
        assert record.payload["title"] == "Emma"

    @pytest.mark.parametrize("entry", [
        {"title": "No summary"},
        {"title": "Blank", "summary": "   "},
        {"title": "Wrong type", "summary": 42},
    ])
    def test_missing_text(self, entry):
        result = Record.from_mapping(entry, position=4)

        assert result.is_err()
        assert result.error.code == ErrorCode.RECORD_MISSING_TEXT
        assert result.error.details["position"] == 4

    def test_custom_text_field(self):
        record = Record.from_mapping({"blurb": "Short."}, text_field="blurb").unwrap()
        assert record.text == "Short."

    def test_label(self):
        record = Record(text="Some text", payload={"title": "Dune", "author": "Herbert"})

        assert record.label() == "Dune"
        assert record.label(("author",)) == "Herbert"
        assert record.label(("missing",)) == "Some text"


class TestLoadRecords:
    """Tests for the JSON loader."""

    def test_load_library(self, library_path):
        records = load_records(library_path).unwrap()

        assert [r.payload["title"] for r in records] == ["Dune", "Emma"]
        assert records[0].text == "Desert planet intrigue."

    def test_top_level_list(self, tmp_path):
        path = tmp_path / "list.json"
        path.write_text(json.dumps([{"summary": "one"}, {"summary": "two"}]))

        records = load_records(path).unwrap()

        assert [r.text for r in records] == ["one", "two"]

    def test_missing_file(self, tmp_path):
        result = load_records(tmp_path / "nope.json")

        assert result.is_err()
        assert result.error.code == ErrorCode.RECORD_LOAD_FAILED

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("{not json")

        result = load_records(path)

        assert result.is_err()
        assert "invalid JSON" in result.error.message

    def test_missing_collection_key(self, library_path):
        result = load_records(library_path, collection_key="albums")

        assert result.is_err()
        assert result.error.code == ErrorCode.RECORD_LOAD_FAILED

    def test_collection_not_a_list(self, tmp_path):
        path = tmp_path / "obj.json"
        path.write_text(json.dumps({"books": {"title": "x"}}))

        assert load_records(path).is_err()

    def test_entry_not_an_object(self):
        result = parse_records([{"summary": "ok"}, "just a string"])

        assert result.is_err()
        assert result.error.code == ErrorCode.RECORD_MALFORMED
        assert result.error.details["position"] == 1

    def test_rejects_record_without_text(self, tmp_path):
        path = tmp_path / "partial.json"
        path.write_text(json.dumps({"books": [{"summary": "fine"}, {"title": "no text"}]}))

        result = load_records(path)

        assert result.is_err()
        assert result.error.code == ErrorCode.RECORD_MISSING_TEXT

    def test_sample_library(self):
        records = load_records(SAMPLE_LIBRARY).unwrap()

        assert len(records) == 12
        assert all(r.payload["author"] for r in records)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
