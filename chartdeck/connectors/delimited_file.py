"""
Delimited-text file provider.

Parses uploaded CSV-style text straight into a Dataset. There is no nesting to
flatten, but the Dataset invariant still holds: every row carries every header
and empty cells become explicit None. Column types come from the first valid
data row only.
"""

import csv
import io
import re
from pathlib import Path

from loguru import logger

from chartdeck.connectors.base import SourceResult
from chartdeck.schema.models import Dataset, Field, Row, SkippedRow
from chartdeck.schema.type_inference import infer_column_types, is_numeric_literal
from chartdeck.utils.error_handler import ErrorHandler, ShapeError
from chartdeck.utils.vis_types import SourceKind

_INTEGER_PATTERN = re.compile(r"^[+-]?\d+$")


def convert_cell(cell: str) -> str | int | float | bool | None:
    """
    Convert a trimmed cell to its row value.

    Empty -> None, numeric literal -> int/float, true/false -> bool, else the
    text itself.
    """
    if cell == "":
        return None
    if is_numeric_literal(cell):
        return int(cell) if _INTEGER_PATTERN.match(cell) else float(cell)
    lowered = cell.lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    return cell


def _read_header(cells: list[str]) -> list[str]:
    headers = [cell.strip() for cell in cells]
    if not any(headers):
        raise ShapeError("CSV file must contain a header row.")
    if "" in headers:
        raise ShapeError("CSV header row contains an empty column name.")

    seen: set[str] = set()
    duplicates = []
    for header in headers:
        if header in seen and header not in duplicates:
            duplicates.append(header)
        seen.add(header)
    if duplicates:
        raise ShapeError(
            f"CSV header row contains duplicate column names: {', '.join(duplicates)}"
        )
    return headers


def parse_delimited_text(
    text: str, source_name: str = "upload.csv", delimiter: str = ","
) -> Dataset:
    """
    Parse delimited text into a Dataset.

    Args:
        text: Full file content
        source_name: Display name (usually the file name)
        delimiter: Field separator

    Returns:
        Dataset with typed headers and uniform rows

    Raises:
        ShapeError: If there is no header row, no data row or no valid row

    """
    reader = csv.reader(io.StringIO(text), delimiter=delimiter)

    records: list[tuple[int, list[str]]] = []
    for cells in reader:
        # Blank lines
        if not cells or (len(cells) == 1 and not cells[0].strip()):
            continue
        records.append((reader.line_num, cells))

    if len(records) < 2:
        raise ShapeError(
            "CSV file must contain a header row and at least one data row."
        )

    headers = _read_header(records[0][1])

    valid: list[list[str]] = []
    skipped: list[SkippedRow] = []
    for line_number, cells in records[1:]:
        if len(cells) != len(headers):
            reason = f"Expected {len(headers)} columns, got {len(cells)}"
            logger.warning(f"Skipping line {line_number} of {source_name}: {reason}")
            skipped.append(
                SkippedRow(
                    line_number=line_number,
                    content=delimiter.join(cells),
                    reason=reason,
                )
            )
            continue
        valid.append([cell.strip() for cell in cells])

    if not valid:
        raise ShapeError("No valid data rows could be parsed from the CSV.")

    header_types = infer_column_types(dict(zip(headers, valid[0])), headers)
    rows: list[Row] = [
        {header: convert_cell(cell) for header, cell in zip(headers, cells)}
        for cells in valid
    ]

    logger.info(
        f"Parsed {len(rows)} data rows from {source_name}"
        + (f", {len(skipped)} rows skipped" if skipped else "")
    )
    return Dataset(
        rows=rows,
        headers=[Field(name=header, semantic_type=header_types[header]) for header in headers],
        source_name=source_name,
        source_kind=SourceKind.FILE,
        skipped_rows=skipped,
    )


def load_delimited_file(
    path: str | Path, delimiter: str = ",", encoding: str = "utf-8-sig"
) -> Dataset:
    """Read and parse a delimited file from disk."""
    file_path = Path(path)
    text = file_path.read_text(encoding=encoding)
    return parse_delimited_text(text, source_name=file_path.name, delimiter=delimiter)


def load_delimited_source(
    text: str, source_name: str = "upload.csv", delimiter: str = ","
) -> SourceResult:
    """
    Parse uploaded text into a SourceResult.

    Shape errors keep their message; anything else becomes a generic parse
    failure.
    """
    dataset, error = ErrorHandler.safe_execute(
        parse_delimited_text,
        text,
        source_name=source_name,
        delimiter=delimiter,
        error_message_prefix="Failed to read or parse the CSV file",
    )
    if error is not None:
        return SourceResult.fail(error)
    return SourceResult.ok(dataset)
