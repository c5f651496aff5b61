"""Category cardinality reduction and multi-series aggregation."""

import math
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from chartdeck.config.settings import CATEGORY_LIMIT
from chartdeck.schema.models import Row
from chartdeck.utils.vis_types import SemanticType


@dataclass
class ReductionResult:
    """Rows left after a top-N reduction."""

    rows: list[Row]
    applied: bool = False
    kept_categories: list[str] = field(default_factory=list)
    category_count: int = 0


def is_numeric_value(value: Any) -> bool:
    """Return True for finite int/float values (bool excluded)."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    # ints are unbounded and always finite
    return isinstance(value, int) or math.isfinite(value)


def category_key(value: Any) -> str:
    """
    Stringify a category value for grouping.

    None -> "null", booleans lowercase, integral floats without a fraction,
    so that 3 and 3.0 land in the same group.
    """
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def category_weights(
    rows: Sequence[Row],
    category_field: str,
    weight_fields: Sequence[str],
    header_types: Mapping[str, SemanticType],
) -> dict[str, float]:
    """
    Weight every category by its numeric counterpart(s) or frequency.

    A row contributes the sum of its weight-field values that are typed number
    and hold a numeric value; a row with no such value contributes 1.

    Returns:
        Category key -> weight, in first-seen order

    """
    numeric_fields = [
        f for f in weight_fields if header_types.get(f) == SemanticType.NUMBER
    ]
    weights: dict[str, float] = {}
    for row in rows:
        key = category_key(row.get(category_field))
        values = [row.get(f) for f in numeric_fields if is_numeric_value(row.get(f))]
        weight = sum(values) if values else 1
        weights[key] = weights.get(key, 0) + weight
    return weights


def top_categories(weights: Mapping[str, float], limit: int) -> list[str]:
    """Return the ``limit`` heaviest categories; ties keep first-seen order."""
    ranked = sorted(weights, key=lambda key: weights[key], reverse=True)
    return ranked[:limit]


def reduce_categories(
    rows: Sequence[Row],
    category_field: str,
    weight_fields: Sequence[str],
    header_types: Mapping[str, SemanticType],
    limit: int = CATEGORY_LIMIT,
) -> ReductionResult:
    """
    Keep only rows whose category is among the top ``limit`` by weight.

    Row order is preserved. With ``limit`` or fewer distinct categories the
    rows come back unchanged, which makes the reduction idempotent.

    Args:
        rows: Input rows
        category_field: Field holding the category
        weight_fields: Numeric counterpart field(s)
        header_types: Semantic type per header
        limit: Maximum number of categories

    Returns:
        ReductionResult with the surviving rows

    """
    weights = category_weights(rows, category_field, weight_fields, header_types)
    if len(weights) <= limit:
        return ReductionResult(
            rows=list(rows),
            applied=False,
            kept_categories=list(weights),
            category_count=len(weights),
        )

    kept = top_categories(weights, limit)
    kept_set = set(kept)
    filtered = [row for row in rows if category_key(row.get(category_field)) in kept_set]
    return ReductionResult(
        rows=filtered, applied=True, kept_categories=kept, category_count=len(weights)
    )


def aggregate_series(
    rows: Sequence[Row],
    category_field: str,
    value_fields: Sequence[str],
) -> list[Row]:
    """
    Sum every value field per category.

    Non-numeric and missing values count as 0. One output row per category in
    first-seen order; the category keeps the first raw value seen for it.
    Sums use Python numbers, so integers never overflow.

    Args:
        rows: Input rows
        category_field: Field to group by
        value_fields: Fields summed independently

    Returns:
        Aggregated rows keyed by the category field and each value field

    """
    aggregated: dict[str, Row] = {}
    for row in rows:
        key = category_key(row.get(category_field))
        out = aggregated.get(key)
        if out is None:
            out = {category_field: row.get(category_field)}
            out.update((name, 0) for name in value_fields)
            aggregated[key] = out
        for name in value_fields:
            value = row.get(name)
            if is_numeric_value(value):
                out[name] += value
    return list(aggregated.values())


def reduce_aggregated(
    rows: list[Row],
    category_field: str,
    value_fields: Sequence[str],
    limit: int = CATEGORY_LIMIT,
) -> ReductionResult:
    """
    Top-N over already aggregated rows, weighted by the total of all series.

    Kept rows stay in first-seen order.
    """
    if len(rows) <= limit:
        return ReductionResult(
            rows=rows,
            kept_categories=[category_key(row[category_field]) for row in rows],
            category_count=len(rows),
        )

    weights = {
        category_key(row[category_field]): sum(row[name] for name in value_fields)
        for row in rows
    }
    kept = top_categories(weights, limit)
    kept_set = set(kept)
    filtered = [row for row in rows if category_key(row[category_field]) in kept_set]
    return ReductionResult(
        rows=filtered, applied=True, kept_categories=kept, category_count=len(rows)
    )
