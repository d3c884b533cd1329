"""Tests for roster snapshot loading."""

import json

import pytest

from filing_engine.sync.snapshot import SnapshotFormatError, load_snapshot, parse_csv, parse_json


class TestParseCsv:
    """Test CSV parsing of spreadsheet exports."""

    def test_comma_delimited(self):
        text = "ИНН,НАИМЕНОВАНИЯ,Didox\n123456789,Alfa Trade,+\n"
        assert parse_csv(text) == [
            {"ИНН": "123456789", "НАИМЕНОВАНИЯ": "Alfa Trade", "Didox": "+"}
        ]

    def test_semicolon_delimited_with_quoted_cells(self):
        text = 'ИНН;НАИМЕНОВАНИЯ;1c\n123456789;"Alfa; Trade";kartoteka\n'
        records = parse_csv(text)
        assert records[0]["НАИМЕНОВАНИЯ"] == "Alfa; Trade"
        assert records[0]["1c"] == "kartoteka"

    def test_blank_lines_and_short_rows(self):
        text = "ИНН,Didox,INPS\n\n123,+\n  \n456,-,0\n"
        records = parse_csv(text)
        assert len(records) == 2
        assert records[0] == {"ИНН": "123", "Didox": "+", "INPS": ""}
        assert records[1]["INPS"] == "0"

    def test_cells_are_trimmed(self):
        records = parse_csv("ИНН , Didox \n 123 , + \n")
        assert records == [{"ИНН": "123", "Didox": "+"}]

    def test_byte_order_mark_is_stripped(self):
        records = parse_csv("\ufeffИНН,Didox\n123,+\n")
        assert "ИНН" in records[0]

    def test_empty_input(self):
        assert parse_csv("") == []
        assert parse_csv("\n\n") == []
        assert parse_csv("ИНН,Didox\n") == []


class TestParseJson:
    """Test JSON array parsing."""

    def test_values_become_strings(self):
        records = parse_json(json.dumps([{"ИНН": 123456789, "Didox": "+", "INPS": None}]))
        assert records == [{"ИНН": "123456789", "Didox": "+", "INPS": ""}]

    def test_invalid_json(self):
        with pytest.raises(SnapshotFormatError) as exc_info:
            parse_json("{not json", source="roster.json")
        assert exc_info.value.source == "roster.json"

    def test_requires_array_of_objects(self):
        with pytest.raises(SnapshotFormatError):
            parse_json('{"ИНН": "1"}')
        with pytest.raises(SnapshotFormatError):
            parse_json('[["1", "2"]]')


class TestLoadSnapshot:
    """Test file loading by extension."""

    def test_load_csv(self, tmp_path):
        path = tmp_path / "roster.csv"
        path.write_text("ИНН;Didox\n123;+\n", encoding="utf-8")
        assert load_snapshot(path) == [{"ИНН": "123", "Didox": "+"}]

    def test_load_json(self, tmp_path):
        path = tmp_path / "roster.json"
        path.write_text(json.dumps([{"ИНН": "123"}], ensure_ascii=False), encoding="utf-8")
        assert load_snapshot(str(path)) == [{"ИНН": "123"}]

    def test_unsupported_extension(self, tmp_path):
        path = tmp_path / "roster.xlsx"
        path.write_bytes(b"PK")
        with pytest.raises(SnapshotFormatError) as exc_info:
            load_snapshot(path)
        assert "unsupported" in exc_info.value.reason

    def test_non_utf8_file(self, tmp_path):
        """A cp1251 spreadsheet export is reported, not decoded by accident."""
        path = tmp_path / "roster.csv"
        path.write_bytes("ИНН;Didox\n123;+\n".encode("cp1251"))
        with pytest.raises(SnapshotFormatError) as exc_info:
            load_snapshot(path)
        assert exc_info.value.reason == "not UTF-8 text"

    def test_missing_file(self, tmp_path):
        with pytest.raises(SnapshotFormatError):
            load_snapshot(tmp_path / "missing.csv")
