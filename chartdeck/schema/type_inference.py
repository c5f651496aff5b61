"""
Semantic type inference for dataset fields.

Two entry points converge on the same SemanticType enumeration:

    - infer_type: text samples from delimited files (first data row only)
    - infer_value_type: decoded values from document and sample sources
"""

import math
import re
from collections.abc import Mapping, Sequence
from datetime import date, datetime
from typing import Any

from chartdeck.utils.vis_types import SemanticType

_NUMERIC_PATTERN = re.compile(r"^[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?$")
_ISO_DATE_PATTERN = re.compile(
    r"^(\d{4})-(\d{2})-(\d{2})"
    r"(?:[T ]\d{2}:\d{2}(?::\d{2}(?:\.\d+)?)?(?:Z|[+-]\d{2}:?\d{2})?)?$"
)
_US_DATE_PATTERN = re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{4})$")
_BOOLEAN_LITERALS = ("true", "false")


def is_numeric_literal(value: str) -> bool:
    """Return True if the whole string is a numeric literal."""
    return bool(_NUMERIC_PATTERN.match(value.strip()))


def _is_calendar_date(year: str, month: str, day: str) -> bool:
    try:
        date(int(year), int(month), int(day))
    except ValueError:
        return False
    return True


def is_date_literal(value: str) -> bool:
    """Return True for YYYY-MM-DD or M/D/YYYY strings naming a real date."""
    text = value.strip()

    match = _ISO_DATE_PATTERN.match(text)
    if match:
        year, month, day = match.groups()
        return _is_calendar_date(year, month, day)

    match = _US_DATE_PATTERN.match(text)
    if match:
        month, day, year = match.groups()
        return _is_calendar_date(year, month, day)

    return False


def infer_type(sample: str | None) -> SemanticType:
    """
    Infer the semantic type of a field from one text sample.

    Rules, first match wins: blank -> string, numeric literal -> number,
    true/false -> boolean, valid calendar date -> date, else string.

    Args:
        sample: Raw cell text (None when the cell is missing)

    Returns:
        Inferred semantic type

    """
    if sample is None:
        return SemanticType.STRING

    text = sample.strip()
    if not text:
        return SemanticType.STRING

    if is_numeric_literal(text):
        return SemanticType.NUMBER

    if text.lower() in _BOOLEAN_LITERALS:
        return SemanticType.BOOLEAN

    if is_date_literal(text):
        return SemanticType.DATE

    return SemanticType.STRING


def infer_value_type(value: Any) -> SemanticType:
    """
    Infer the semantic type of an already decoded value from its runtime kind.

    Args:
        value: Decoded scalar from a document or sample record

    Returns:
        Inferred semantic type (unknown for None)

    """
    if value is None:
        return SemanticType.UNKNOWN
    # bool before int: bool is an int subclass
    if isinstance(value, bool):
        return SemanticType.BOOLEAN
    if isinstance(value, (int, float)):
        if isinstance(value, float) and not math.isfinite(value):
            return SemanticType.STRING
        return SemanticType.NUMBER
    if isinstance(value, (datetime, date)):
        return SemanticType.DATE
    return SemanticType.STRING


def infer_column_types(
    first_row: Mapping[str, str | None], headers: Sequence[str]
) -> dict[str, SemanticType]:
    """
    Infer a type per column using only the first data row.

    NOTE: A blank or atypical first value misclassifies the whole column.

    Args:
        first_row: Raw text values of the first data row
        headers: Column names

    Returns:
        Mapping of header name to semantic type

    """
    return {header: infer_type(first_row.get(header)) for header in headers}
