"""Visualization type enums and chart specification models."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, field_validator


class SemanticType(str, Enum):
    """Semantic type assigned to a field for chart-compatibility decisions."""

    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    DATE = "date"
    UNKNOWN = "unknown"

    @property
    def is_categorical(self) -> bool:
        """Return True if values render on a category axis."""
        return self in (SemanticType.STRING, SemanticType.DATE)


class ChartKind(str, Enum):
    """Supported chart kinds."""

    BAR = "bar"
    HORIZONTAL_BAR = "horizontal-bar"
    STACKED_BAR = "stacked-bar"
    GROUPED_BAR = "grouped-bar"
    SCATTER = "scatter"
    DONUT = "donut"
    PIE = "pie"

    @property
    def uses_series_set(self) -> bool:
        """Return True if Y is the implicit set of numeric fields."""
        return self in (ChartKind.STACKED_BAR, ChartKind.GROUPED_BAR)

    @classmethod
    def parse(cls, value: "str | ChartKind") -> "ChartKind":
        """Resolve a chart kind from its value, ignoring case and surrounding spaces."""
        if isinstance(value, ChartKind):
            return value
        return cls(value.strip().lower())


class Axis(str, Enum):
    """Chart axis roles."""

    X = "x"
    Y = "y"

    @property
    def other(self) -> "Axis":
        """Return the opposite axis."""
        return Axis.Y if self is Axis.X else Axis.X


class AxisScale(str, Enum):
    """Axis scale types understood by renderers."""

    CATEGORY = "category"
    NUMBER = "number"
    TIME = "time"


class AxisPosition(str, Enum):
    """Axis placement."""

    BOTTOM = "bottom"
    LEFT = "left"


class SourceKind(str, Enum):
    """Origin of a dataset."""

    FILE = "file"
    DOCUMENT_STORE = "document_store"
    SAMPLE = "sample"


class HeaderOrder(str, Enum):
    """Header ordering convention of the record normalizer."""

    INSERTION = "insertion"
    LEXICOGRAPHIC = "lexicographic"


class SeriesDescriptor(BaseModel):
    """One renderable series of a chart."""

    type: str = Field(description="Series type: bar, scatter, donut or pie")
    x_key: str | None = Field(default=None, description="Field for X values")
    y_key: str | None = Field(default=None, description="Field for Y values")
    y_keys: list[str] | None = Field(
        default=None, description="Fields for multi-series bars"
    )
    x_name: str | None = None
    y_name: str | None = None
    direction: str | None = Field(
        default=None, description="'horizontal' for horizontal bars"
    )
    stacked: bool | None = Field(
        default=None, description="Stack (True) or group (False) multi-series bars"
    )

    # Donut/pie specific
    angle_key: str | None = None
    callout_label_key: str | None = None
    legend_item_key: str | None = None

    @field_validator("type")
    @classmethod
    def validate_type(cls, v: str) -> str:
        """Restrict series types to those the builder emits."""
        if v not in ("bar", "scatter", "donut", "pie"):
            raise ValueError(f"Unsupported series type: {v}")
        return v


class AxisDescriptor(BaseModel):
    """Configuration for a chart axis."""

    type: AxisScale
    position: AxisPosition
    title: str


class ChartSpec(BaseModel):
    """Renderer-agnostic declarative chart specification."""

    series: list[SeriesDescriptor]
    axes: list[AxisDescriptor] | None = None
    title: str
    data: list[dict[str, Any]]
