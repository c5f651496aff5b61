"""
Configuration module for chartdeck.

Environment-driven settings for chart defaults, data sources and the
document store connection.
"""

from .settings import (
    CATEGORY_LIMIT,
    CHART_CONFIG,
    CONNECTION_CONFIG,
    PREVIEW_ROW_LIMIT,
    SOURCE_CONFIG,
)

__all__ = [
    "CATEGORY_LIMIT",
    "CHART_CONFIG",
    "CONNECTION_CONFIG",
    "PREVIEW_ROW_LIMIT",
    "SOURCE_CONFIG",
]
