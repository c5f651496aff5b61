"""
Chart building package.

Category reduction, chart spec building and the Plotly renderer adapter.
"""

from .plotly_renderer import ChartRenderer, PlotlyRenderer, sanitize_filename
from .reduction import (
    ReductionResult,
    aggregate_series,
    category_key,
    reduce_aggregated,
    reduce_categories,
)
from .spec_builder import BuildResult, ChartSpecBuilder, build_chart_spec

__all__ = [
    "ChartRenderer",
    "PlotlyRenderer",
    "sanitize_filename",
    "ReductionResult",
    "aggregate_series",
    "category_key",
    "reduce_aggregated",
    "reduce_categories",
    "BuildResult",
    "ChartSpecBuilder",
    "build_chart_spec",
]
