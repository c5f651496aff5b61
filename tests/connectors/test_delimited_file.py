"""Tests for the delimited-text file provider."""

import pytest

from chartdeck.connectors.delimited_file import (
    convert_cell,
    load_delimited_file,
    load_delimited_source,
    parse_delimited_text,
)
from chartdeck.schema.normalizer import has_uniform_rows
from chartdeck.utils.error_handler import ShapeError
from chartdeck.utils.vis_types import SemanticType, SourceKind

CSV_TEXT = """city,revenue,opened,active
Austin, 120.5 ,2021-03-04,true

Boston,80,2020-01-15,false
Chicago,,2019-07-01,TRUE
"""


@pytest.mark.parametrize(
    "cell,expected",
    [("", None), ("42", 42), ("-3.5", -3.5), ("1e2", 100.0), ("true", True), ("False", False), ("x", "x")],
)
def test_convert_cell(cell, expected):
    """Cells convert to None, numbers, booleans or text."""
    assert convert_cell(cell) == expected


class TestParseDelimitedText:
    """Parsing uploaded text into a Dataset."""

    def test_parses_rows_and_types(self):
        """Headers, typed values and first-row types are produced."""
        dataset = parse_delimited_text(CSV_TEXT, source_name="stores.csv")

        assert dataset.header_names == ["city", "revenue", "opened", "active"]
        assert dataset.header_types == {
            "city": SemanticType.STRING,
            "revenue": SemanticType.NUMBER,
            "opened": SemanticType.DATE,
            "active": SemanticType.BOOLEAN,
        }
        assert dataset.row_count == 3
        assert dataset.rows[0] == {
            "city": "Austin",
            "revenue": 120.5,
            "opened": "2021-03-04",
            "active": True,
        }
        assert dataset.rows[2]["revenue"] is None
        assert dataset.source_kind == SourceKind.FILE
        assert has_uniform_rows(dataset)

    def test_blank_first_value_misclassifies_column(self):
        """Only the first data row drives inference."""
        dataset = parse_delimited_text("name,score\na,\nb,10\n")

        assert dataset.header_types["score"] == SemanticType.STRING
        assert dataset.rows[1]["score"] == 10

    def test_skips_rows_with_wrong_column_count(self):
        """Malformed rows are skipped with a diagnostic, not fatal."""
        dataset = parse_delimited_text("a,b\n1,2\n3\n4,5,6\n7,8\n")

        assert dataset.row_count == 2
        assert [s.line_number for s in dataset.skipped_rows] == [3, 4]
        assert dataset.skipped_rows[0].reason == "Expected 2 columns, got 1"
        assert dataset.skipped_rows[1].content == "4,5,6"

    def test_types_come_from_first_valid_row(self):
        """A skipped first row does not drive inference."""
        dataset = parse_delimited_text("a,b\nonly-one\nx,3\n")

        assert dataset.header_types == {"a": SemanticType.STRING, "b": SemanticType.NUMBER}

    def test_header_only_raises(self):
        """A header without data rows is a shape error."""
        with pytest.raises(ShapeError, match="header row and at least one data row"):
            parse_delimited_text("a,b\n\n\n")

    def test_no_valid_rows_raises(self):
        """All rows malformed is a shape error."""
        with pytest.raises(ShapeError, match="No valid data rows"):
            parse_delimited_text("a,b\n1\n2,3,4\n")

    def test_duplicate_headers_raise(self):
        """Header names must be unique."""
        with pytest.raises(ShapeError, match="duplicate column names: a"):
            parse_delimited_text("a,b,a\n1,2,3\n")

    def test_empty_header_name_raises(self):
        """Header names must be non-empty."""
        with pytest.raises(ShapeError, match="empty column name"):
            parse_delimited_text("a,,c\n1,2,3\n")

    def test_quoted_fields_and_custom_delimiter(self):
        """Quoted delimiters stay inside their cell."""
        dataset = parse_delimited_text('name;note\n"Smith; J";"x"\n', delimiter=";")

        assert dataset.rows == [{"name": "Smith; J", "note": "x"}]


def test_load_delimited_file_strips_bom(tmp_path):
    """Files are read with BOM-aware UTF-8 and named after the file."""
    path = tmp_path / "sales.csv"
    path.write_text("region,total\nNorth,3\n", encoding="utf-8-sig")

    dataset = load_delimited_file(path)

    assert dataset.header_names == ["region", "total"]
    assert dataset.source_name == "sales.csv"


def test_load_delimited_source_reports_shape_errors():
    """Shape errors come back as a failed SourceResult."""
    result = load_delimited_source("only,a,header\n")

    assert not result.success
    assert result.error == "CSV file must contain a header row and at least one data row."


def test_load_delimited_source_success():
    """A valid upload yields a Dataset."""
    result = load_delimited_source("x,y\n1,2\n", source_name="points.csv")

    assert result.success
    assert result.data.source_name == "points.csv"
