"""Tests for visualization enums."""

import pytest

from chartdeck.utils.vis_types import Axis, ChartKind, SemanticType


@pytest.mark.parametrize(
    "value,expected",
    [
        ("bar", ChartKind.BAR),
        (" Stacked-Bar ", ChartKind.STACKED_BAR),
        ("horizontal-bar", ChartKind.HORIZONTAL_BAR),
        (ChartKind.PIE, ChartKind.PIE),
    ],
)
def test_chart_kind_parse(value, expected):
    """Chart kinds resolve from their configuration values."""
    assert ChartKind.parse(value) is expected


@pytest.mark.parametrize("value", ["doughnut", "hbar", "points", "column"])
def test_chart_kind_parse_rejects_unknown_names(value):
    """Only the configuration values are accepted."""
    with pytest.raises(ValueError):
        ChartKind.parse(value)


def test_series_set_kinds():
    """Stacked and grouped bars take Y from the numeric field set."""
    assert {kind for kind in ChartKind if kind.uses_series_set} == {
        ChartKind.STACKED_BAR,
        ChartKind.GROUPED_BAR,
    }


def test_axis_other_and_categorical_types():
    """Axis flips; strings and dates are categorical."""
    assert Axis.X.other is Axis.Y and Axis.Y.other is Axis.X
    assert SemanticType.DATE.is_categorical
    assert not SemanticType.NUMBER.is_categorical
