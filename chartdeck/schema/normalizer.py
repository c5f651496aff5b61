"""
Record Normalizer - heterogeneous nested records to a uniform Dataset.

Flattening rules:
    - Nested mappings become dot-path keys (``parent.child``)
    - Empty mappings become the literal string "{}"
    - Arrays are serialized to a JSON string and never recursed into
    - ObjectId -> string, dates -> ISO-8601 (None when invalid),
      binary blobs -> "[Buffer]"

Header ordering depends on the source:
    - INSERTION: first-seen key order (document store path)
    - LEXICOGRAPHIC: sorted path extraction (sample data path)

Every output row is built from the final header list, so rows share one key
set even when input records were structurally different.
"""

import json
from collections.abc import Iterable, Iterator, Mapping
from datetime import date, datetime, timezone
from typing import Any

from bson import Binary, Decimal128, ObjectId
from bson.datetime_ms import DatetimeMS
from bson.errors import InvalidBSON
from loguru import logger

from chartdeck.schema.models import Dataset, Field, Row
from chartdeck.schema.type_inference import infer_value_type
from chartdeck.utils.vis_types import HeaderOrder, SemanticType, SourceKind

EMPTY_OBJECT = "{}"
BUFFER_PLACEHOLDER = "[Buffer]"


def to_iso_string(value: datetime) -> str:
    """Format a datetime as UTC ISO-8601 with millisecond precision."""
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    return (
        f"{value.year:04d}-{value.month:02d}-{value.day:02d}"
        f"T{value.hour:02d}:{value.minute:02d}:{value.second:02d}"
        f".{value.microsecond // 1000:03d}Z"
    )


def _json_default(value: Any) -> Any:
    scalar, _ = coerce_scalar(value)
    return scalar


def _serialize(value: Any) -> str:
    return json.dumps(value, default=_json_default, separators=(",", ":"))


def coerce_scalar(value: Any) -> tuple[Any, SemanticType]:
    """
    Convert a decoded document value into a plain row scalar.

    Args:
        value: Value from a document or sample record

    Returns:
        Tuple of (scalar, structural semantic type)

    """
    if value is None:
        return None, SemanticType.UNKNOWN
    if isinstance(value, bool):
        return value, SemanticType.BOOLEAN
    if isinstance(value, ObjectId):
        return str(value), SemanticType.STRING
    # Binary subclasses bytes
    if isinstance(value, (Binary, bytes, bytearray, memoryview)):
        return BUFFER_PLACEHOLDER, SemanticType.STRING
    if isinstance(value, DatetimeMS):
        try:
            return to_iso_string(value.as_datetime()), SemanticType.DATE
        except (InvalidBSON, OverflowError, ValueError, OSError):
            return None, SemanticType.UNKNOWN
    if isinstance(value, datetime):
        return to_iso_string(value), SemanticType.DATE
    if isinstance(value, date):
        return value.isoformat(), SemanticType.DATE
    if isinstance(value, Decimal128):
        number = float(value.to_decimal())
        return number, infer_value_type(number)
    if isinstance(value, (int, float, str)):
        return value, infer_value_type(value)
    if isinstance(value, Mapping):
        if not value:
            return EMPTY_OBJECT, SemanticType.STRING
        return _serialize(dict(value)), SemanticType.STRING
    if isinstance(value, (list, tuple, set, frozenset)):
        return _serialize(list(value)), SemanticType.STRING
    return str(value), SemanticType.STRING


def _walk(record: Mapping[str, Any], prefix: str = "") -> Iterator[tuple[str, Any, SemanticType]]:
    for key, value in record.items():
        path = f"{prefix}.{key}" if prefix else str(key)
        if isinstance(value, Mapping) and value:
            yield from _walk(value, path)
        else:
            scalar, kind = coerce_scalar(value)
            yield path, scalar, kind


def flatten_record(record: Mapping[str, Any], prefix: str = "") -> dict[str, Any]:
    """
    Flatten a nested record into dot-path keys with plain scalar values.

    Args:
        record: Nested document
        prefix: Path prefix for recursive calls

    Returns:
        Flat mapping in first-seen key order

    """
    return {path: scalar for path, scalar, _ in _walk(record, prefix)}


def get_nested_value(record: Any, path: str) -> Any:
    """
    Read a dot-path from a nested record.

    Returns None when any segment is missing.
    """
    if not path:
        return record
    current = record
    for part in path.split("."):
        if isinstance(current, Mapping) and part in current:
            current = current[part]
        else:
            return None
    return current


class RecordNormalizer:
    """Turns raw records into a Dataset with uniform rows."""

    def __init__(self, header_order: HeaderOrder = HeaderOrder.INSERTION):
        """
        Initialize normalizer.

        Args:
            header_order: INSERTION (first-seen) or LEXICOGRAPHIC header order

        """
        self.header_order = header_order

    def normalize(
        self,
        records: Iterable[Mapping[str, Any]],
        source_name: str = "",
        source_kind: SourceKind = SourceKind.DOCUMENT_STORE,
    ) -> Dataset:
        """
        Normalize records into a Dataset.

        Args:
            records: Raw records, already capped by the source's fetch limit
            source_name: Display name of the source
            source_kind: Origin of the records

        Returns:
            Dataset whose rows all carry every header key

        """
        records = list(records)
        if not records:
            logger.info(f"No records to normalize for {source_name or 'source'}")
            return Dataset.empty(source_name=source_name, source_kind=source_kind)

        flattened = [
            {path: (scalar, kind) for path, scalar, kind in _walk(record)}
            for record in records
        ]
        header_names = self._collect_headers(flattened)

        if self.header_order == HeaderOrder.LEXICOGRAPHIC:
            rows = [self._extract_row(record, header_names) for record in records]
            first_kinds = {
                name: coerce_scalar(get_nested_value(records[0], name))[1]
                for name in header_names
            }
        else:
            rows = [
                {name: flat[name][0] if name in flat else None for name in header_names}
                for flat in flattened
            ]
            first = flattened[0]
            first_kinds = {
                name: first[name][1] if name in first else SemanticType.UNKNOWN
                for name in header_names
            }

        headers = [Field(name=name, semantic_type=first_kinds[name]) for name in header_names]

        logger.info(
            f"Normalized {len(rows)} records into {len(headers)} fields "
            f"({self.header_order.value} order) for {source_name or 'source'}"
        )
        return Dataset(
            rows=rows, headers=headers, source_name=source_name, source_kind=source_kind
        )

    def _collect_headers(self, flattened: list[dict[str, Any]]) -> list[str]:
        seen: dict[str, None] = {}
        for flat in flattened:
            for path in flat:
                seen.setdefault(path, None)
        if self.header_order == HeaderOrder.LEXICOGRAPHIC:
            return sorted(seen)
        return list(seen)

    @staticmethod
    def _extract_row(record: Mapping[str, Any], header_names: list[str]) -> Row:
        row: Row = {}
        for name in header_names:
            scalar, _ = coerce_scalar(get_nested_value(record, name))
            row[name] = scalar
        return row


def normalize_records(
    records: Iterable[Mapping[str, Any]],
    header_order: HeaderOrder = HeaderOrder.INSERTION,
    source_name: str = "",
    source_kind: SourceKind = SourceKind.DOCUMENT_STORE,
) -> Dataset:
    """Normalize records with a one-off RecordNormalizer."""
    return RecordNormalizer(header_order).normalize(
        records, source_name=source_name, source_kind=source_kind
    )


def has_uniform_rows(dataset: Dataset) -> bool:
    """Return True if every row carries exactly the header key set."""
    expected = set(dataset.header_names)
    return all(set(row) == expected for row in dataset.rows)
