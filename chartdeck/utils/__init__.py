"""
Shared utilities for chartdeck.

Error handling, visualization types and dataframe helpers.
"""

from .error_handler import (
    ChartConfigurationError,
    ChartDeckError,
    ErrorHandler,
    ShapeError,
    SourceError,
)

__all__ = [
    # Utility classes
    "ErrorHandler",
    # Exception classes
    "ChartDeckError",
    "SourceError",
    "ShapeError",
    "ChartConfigurationError",
]
