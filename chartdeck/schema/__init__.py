"""
Dataset schema package.

Contains the dataset model, semantic type inference and record normalization.
"""

from .models import Dataset, Field, Row, SkippedRow
from .normalizer import (
    RecordNormalizer,
    flatten_record,
    get_nested_value,
    has_uniform_rows,
    normalize_records,
)
from .type_inference import infer_column_types, infer_type, infer_value_type

__all__ = [
    "Dataset",
    "Field",
    "Row",
    "SkippedRow",
    "RecordNormalizer",
    "flatten_record",
    "get_nested_value",
    "has_uniform_rows",
    "normalize_records",
    "infer_column_types",
    "infer_type",
    "infer_value_type",
]
