"""
Chart spec builder.

Derives a renderer-agnostic ChartSpec from a dataset, its header types and the
current selection. The builder is total: every rejected configuration comes
back as an absent spec with a human-readable diagnostic, and unexpected
failures are logged and reported the same way.

Compatibility (X requirement / Y requirement):
    bar                        any / required
    horizontal-bar             any / required
    scatter                    number or date / number or date
    donut, pie                 string or date / number
    stacked-bar, grouped-bar   string or date (others warned) / implicit set
                               of active number fields other than X
"""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field

from loguru import logger

from chartdeck.charts.reduction import (
    aggregate_series,
    reduce_aggregated,
    reduce_categories,
)
from chartdeck.config.settings import CATEGORY_LIMIT
from chartdeck.schema.models import Dataset, Row
from chartdeck.session.selection_state import SelectionState
from chartdeck.utils.error_handler import ChartConfigurationError
from chartdeck.utils.vis_types import (
    AxisDescriptor,
    AxisPosition,
    AxisScale,
    ChartKind,
    ChartSpec,
    SemanticType,
    SeriesDescriptor,
)

_SCATTER_TYPES = (SemanticType.NUMBER, SemanticType.DATE)

NO_ROWS_AFTER_FILTER = "No data remains for the selected fields after filtering."


@dataclass
class BuildResult:
    """Outcome of a chart build: a spec, or the reason there is none."""

    spec: ChartSpec | None = None
    diagnostic: str | None = None
    notes: list[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        """Return True if a spec was produced."""
        return self.spec is not None


def _kind_label(kind: ChartKind) -> str:
    return kind.value.replace("-", " ").capitalize()


def _category_scale(semantic_type: SemanticType) -> AxisScale:
    return AxisScale.CATEGORY if semantic_type.is_categorical else AxisScale.NUMBER


def _filter_note(axis_name: str, field_name: str, other_name: str, limit: int) -> str:
    return (
        f'{axis_name}-axis field "{field_name}" displaying top {limit} unique values '
        f"by their aggregated {other_name}-axis values or frequency."
    )


def _project(rows: Sequence[Row], fields: Sequence[str]) -> list[Row]:
    return [{name: row.get(name) for name in fields} for row in rows]


class ChartSpecBuilder:
    """Builds ChartSpecs for one category limit."""

    def __init__(self, category_limit: int = CATEGORY_LIMIT):
        """
        Initialize builder.

        Args:
            category_limit: Maximum categories kept on a category axis

        """
        self.category_limit = category_limit

    def build(
        self,
        dataset: Dataset,
        header_types: Mapping[str, SemanticType],
        selection: SelectionState,
    ) -> BuildResult:
        """
        Build a chart spec for the current selection.

        Args:
            dataset: Loaded dataset
            header_types: Semantic type per header
            selection: Active fields, axes and chart kind

        Returns:
            BuildResult with either a spec or a diagnostic

        """
        notes: list[str] = []
        try:
            spec = self._build(dataset, header_types, selection, notes)
        except ChartConfigurationError as e:
            logger.warning(f"Chart configuration rejected: {e}")
            return BuildResult(diagnostic=str(e), notes=notes)
        except Exception as e:
            logger.exception(f"Unexpected error building chart: {e}")
            return BuildResult(diagnostic=f"Chart could not be built: {e}", notes=notes)

        logger.info(
            f"Built {selection.chart_kind.value} chart '{spec.title}' "
            f"with {len(spec.data)} rows"
        )
        return BuildResult(spec=spec, notes=notes)

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def _require_axis(
        self,
        dataset: Dataset,
        header_types: Mapping[str, SemanticType],
        selection: SelectionState,
        field_name: str | None,
        axis_name: str,
    ) -> SemanticType:
        if field_name is None:
            raise ChartConfigurationError(f"Select a field for the {axis_name} axis.")
        if field_name not in header_types or field_name not in dataset.header_names:
            raise ChartConfigurationError(f'Unknown field "{field_name}".')
        if not selection.is_active(field_name):
            raise ChartConfigurationError(
                f'Field "{field_name}" on the {axis_name} axis is not selected.'
            )
        return header_types[field_name]

    def _build(
        self,
        dataset: Dataset,
        header_types: Mapping[str, SemanticType],
        selection: SelectionState,
        notes: list[str],
    ) -> ChartSpec:
        if dataset.is_empty:
            raise ChartConfigurationError("No data available to chart.")

        kind = selection.chart_kind
        x_field = selection.x_axis
        x_type = self._require_axis(dataset, header_types, selection, x_field, "X")

        if kind.uses_series_set:
            return self._build_series_set(dataset, header_types, selection, x_type, notes)

        y_field = selection.y_axis
        y_type = self._require_axis(dataset, header_types, selection, y_field, "Y")

        if kind is ChartKind.BAR:
            return self._build_bar(dataset, header_types, x_field, y_field, x_type, notes)
        if kind is ChartKind.HORIZONTAL_BAR:
            return self._build_horizontal_bar(
                dataset, header_types, x_field, y_field, y_type, notes
            )
        if kind is ChartKind.SCATTER:
            return self._build_scatter(dataset, x_field, y_field, x_type, y_type)
        if kind in (ChartKind.DONUT, ChartKind.PIE):
            return self._build_radial(dataset, kind, x_field, y_field, x_type, y_type)
        raise ChartConfigurationError("Selected chart type is not supported.")

    def _non_empty(self, rows: list[Row]) -> list[Row]:
        if not rows:
            raise ChartConfigurationError(NO_ROWS_AFTER_FILTER)
        return rows

    # ------------------------------------------------------------------
    # Chart kinds
    # ------------------------------------------------------------------

    def _build_bar(self, dataset, header_types, x_field, y_field, x_type, notes) -> ChartSpec:
        rows = _project(dataset.rows, [x_field, y_field])
        if x_type.is_categorical:
            reduction = reduce_categories(
                rows, x_field, [y_field], header_types, self.category_limit
            )
            rows = reduction.rows
            if reduction.applied:
                notes.append(_filter_note("X", x_field, "Y", self.category_limit))

        return ChartSpec(
            series=[
                SeriesDescriptor(type="bar", x_key=x_field, y_key=y_field, y_name=y_field)
            ],
            axes=[
                AxisDescriptor(
                    type=_category_scale(x_type), position=AxisPosition.BOTTOM, title=x_field
                ),
                AxisDescriptor(type=AxisScale.NUMBER, position=AxisPosition.LEFT, title=y_field),
            ],
            title=f"{y_field} by {x_field}",
            data=self._non_empty(rows),
        )

    def _build_horizontal_bar(
        self, dataset, header_types, x_field, y_field, y_type, notes
    ) -> ChartSpec:
        rows = _project(dataset.rows, [x_field, y_field])
        if y_type.is_categorical:
            reduction = reduce_categories(
                rows, y_field, [x_field], header_types, self.category_limit
            )
            rows = reduction.rows
            if reduction.applied:
                notes.append(_filter_note("Y", y_field, "X", self.category_limit))

        return ChartSpec(
            series=[
                SeriesDescriptor(
                    type="bar",
                    direction="horizontal",
                    x_key=x_field,
                    y_key=y_field,
                    x_name=x_field,
                    y_name=y_field,
                )
            ],
            axes=[
                AxisDescriptor(type=AxisScale.NUMBER, position=AxisPosition.BOTTOM, title=x_field),
                AxisDescriptor(
                    type=_category_scale(y_type), position=AxisPosition.LEFT, title=y_field
                ),
            ],
            title=f"{x_field} by {y_field}",
            data=self._non_empty(rows),
        )

    def _build_scatter(self, dataset, x_field, y_field, x_type, y_type) -> ChartSpec:
        if x_type not in _SCATTER_TYPES or y_type not in _SCATTER_TYPES:
            raise ChartConfigurationError(
                "Scatter plots require numeric or date X and Y axes."
            )

        def scale(semantic_type: SemanticType) -> AxisScale:
            return AxisScale.TIME if semantic_type is SemanticType.DATE else AxisScale.NUMBER

        return ChartSpec(
            series=[
                SeriesDescriptor(
                    type="scatter",
                    x_key=x_field,
                    y_key=y_field,
                    x_name=x_field,
                    y_name=y_field,
                )
            ],
            axes=[
                AxisDescriptor(type=scale(x_type), position=AxisPosition.BOTTOM, title=x_field),
                AxisDescriptor(type=scale(y_type), position=AxisPosition.LEFT, title=y_field),
            ],
            title=f"{y_field} by {x_field}",
            data=self._non_empty(_project(dataset.rows, [x_field, y_field])),
        )

    def _build_radial(self, dataset, kind, x_field, y_field, x_type, y_type) -> ChartSpec:
        label = _kind_label(kind)
        if y_type is not SemanticType.NUMBER:
            raise ChartConfigurationError(
                f"{label} charts require a numeric field for values."
            )
        if not x_type.is_categorical:
            raise ChartConfigurationError(
                f"{label} charts require a categorical or date field for labels."
            )

        return ChartSpec(
            series=[
                SeriesDescriptor(
                    type=kind.value,
                    angle_key=y_field,
                    callout_label_key=x_field,
                    legend_item_key=x_field,
                )
            ],
            axes=None,
            title=f"Distribution of {y_field} by {x_field}",
            data=self._non_empty(_project(dataset.rows, [x_field, y_field])),
        )

    def _build_series_set(self, dataset, header_types, selection, x_type, notes) -> ChartSpec:
        x_field = selection.x_axis
        kind = selection.chart_kind
        y_keys = [
            name
            for name in selection.active_fields
            if name != x_field and header_types.get(name) == SemanticType.NUMBER
        ]
        if not y_keys:
            raise ChartConfigurationError(
                f"{_kind_label(kind)} charts require at least one selected numeric "
                "field other than the X axis."
            )

        if not x_type.is_categorical:
            notes.append(
                f'X-axis field "{x_field}" is not categorical; '
                "each distinct value is treated as a category."
            )

        rows = aggregate_series(dataset.rows, x_field, y_keys)
        reduction = reduce_aggregated(rows, x_field, y_keys, self.category_limit)
        if reduction.applied:
            notes.append(_filter_note("X", x_field, "Y", self.category_limit))

        return ChartSpec(
            series=[
                SeriesDescriptor(
                    type="bar",
                    x_key=x_field,
                    y_keys=y_keys,
                    stacked=kind is ChartKind.STACKED_BAR,
                )
            ],
            axes=[
                AxisDescriptor(
                    type=AxisScale.CATEGORY, position=AxisPosition.BOTTOM, title=x_field
                ),
                AxisDescriptor(type=AxisScale.NUMBER, position=AxisPosition.LEFT, title="Values"),
            ],
            title=f"{', '.join(y_keys)} by {x_field}",
            data=self._non_empty(reduction.rows),
        )


def build_chart_spec(
    dataset: Dataset,
    header_types: Mapping[str, SemanticType],
    selection: SelectionState,
    category_limit: int = CATEGORY_LIMIT,
) -> BuildResult:
    """
    Build a chart spec; never raises.

    Args:
        dataset: Loaded dataset
        header_types: Semantic type per header
        selection: Current selection
        category_limit: Top-N threshold for category axes

    Returns:
        BuildResult

    """
    return ChartSpecBuilder(category_limit).build(dataset, header_types, selection)
