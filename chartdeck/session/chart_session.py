"""
ChartSession - event dispatcher for one user's dataset and chart configuration.

Holds the loaded Dataset, the SelectionState and the latest BuildResult.
Selection events go through the pure reducers; when a field listed in
REBUILD_DEPENDENCIES changes, a debounced rebuild is requested. User-facing
diagnostics are delivered as Notice objects to an injected notifier.

Lifecycle:
    - load: a successful load replaces the dataset wholesale, resets the
      selection and discards the current spec
    - failed load: notifier is told, prior dataset and selection are kept
    - rebuild: spec recomputed from the latest state, or discarded with a
      diagnostic when the configuration is invalid

Usage:
    >>> session = ChartSession(notifier=print)
    >>> await session.load_from(lambda: SampleDataProvider().load_dataset())
    >>> session.dispatch(ToggleField("title"))
"""

import asyncio
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any, Final

import pandas as pd
from loguru import logger

from chartdeck.charts.spec_builder import BuildResult, build_chart_spec
from chartdeck.config.settings import CATEGORY_LIMIT, CHART_CONFIG, PREVIEW_ROW_LIMIT
from chartdeck.connectors.base import SourceResult
from chartdeck.schema.models import Dataset
from chartdeck.session.rebuild_scheduler import RebuildScheduler
from chartdeck.session.selection_state import (
    AssignAxis,
    ChangeChartKind,
    ClearAxis,
    SelectionEvent,
    SelectionState,
    ToggleField,
    apply_event,
    initial_state,
)
from chartdeck.utils.data_processors import DataProcessors
from chartdeck.utils.error_handler import ErrorHandler
from chartdeck.utils.vis_types import Axis, ChartKind, ChartSpec, SemanticType

# ============================================================================
# Notices
# ============================================================================


@dataclass(frozen=True)
class Notice:
    """Transient user-facing notification."""

    level: str
    title: str
    message: str


Notifier = Callable[[Notice], None]
BuildListener = Callable[[BuildResult], None]

# State fields a rebuild depends on. A change to any of them requests one.
REBUILD_DEPENDENCIES: Final[tuple[str, ...]] = (
    "dataset",
    "active_fields",
    "x_axis",
    "y_axis",
    "chart_kind",
)


def _null_notifier(notice: Notice) -> None:
    logger.debug(f"[{notice.level}] {notice.title}: {notice.message}")


def changed_dependencies(before: SelectionState, after: SelectionState) -> list[str]:
    """Return the selection fields in REBUILD_DEPENDENCIES that differ."""
    return [
        name
        for name in REBUILD_DEPENDENCIES
        if name != "dataset" and getattr(before, name) != getattr(after, name)
    ]


# ============================================================================
# ChartSession
# ============================================================================


class ChartSession:
    """
    One user's in-memory dataset, selection and chart.

    Responsibilities:
        - Dispatch selection events through the reducers
        - Replace the dataset atomically on load
        - Debounce chart rebuilds and publish their results

    Does NOT Handle:
        - Talking to data sources (loaders are passed in)
        - Drawing charts (subscribers receive the BuildResult)
    """

    def __init__(
        self,
        notifier: Notifier | None = None,
        category_limit: int = CATEGORY_LIMIT,
        debounce_seconds: float | None = None,
        default_chart_kind: ChartKind | str | None = None,
    ):
        """
        Initialize an empty session.

        Args:
            notifier: Receives user-facing notices
            category_limit: Top-N threshold passed to the builder
            debounce_seconds: Rebuild debounce (defaults to configuration)
            default_chart_kind: Chart kind after each load (defaults to configuration)

        """
        self.notifier = notifier or _null_notifier
        self.category_limit = category_limit
        self.default_chart_kind = ChartKind.parse(
            default_chart_kind or CHART_CONFIG["default_chart_kind"]
        )
        self.dataset = Dataset.empty()
        self.selection = initial_state(self.default_chart_kind)
        self.build_result = BuildResult()
        self._listeners: list[BuildListener] = []
        self._scheduler = RebuildScheduler(self.rebuild, debounce_seconds)

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def header_types(self) -> Mapping[str, SemanticType]:
        """Return the semantic type of every header of the loaded dataset."""
        return self.dataset.header_types

    @property
    def spec(self) -> ChartSpec | None:
        """Return the current ChartSpec, or None."""
        return self.build_result.spec

    @property
    def rebuild_pending(self) -> bool:
        """Return True while a debounced rebuild is waiting."""
        return self._scheduler.pending

    def subscribe(self, listener: BuildListener) -> Callable[[], None]:
        """
        Register a listener for build results.

        Returns:
            Function that removes the listener

        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # ------------------------------------------------------------------
    # Selection events
    # ------------------------------------------------------------------

    def dispatch(self, event: SelectionEvent) -> SelectionState:
        """
        Apply a selection event.

        Args:
            event: ToggleField, AssignAxis, ClearAxis or ChangeChartKind

        Returns:
            The new selection state

        """
        before = self.selection
        self.selection = apply_event(before, event, self.header_types)

        changed = changed_dependencies(before, self.selection)
        if changed:
            logger.debug(f"{type(event).__name__} changed {changed}; requesting rebuild")
            self._scheduler.request()
        return self.selection

    def toggle_field(self, field: str) -> SelectionState:
        """Toggle a field's selection."""
        return self.dispatch(ToggleField(field))

    def assign_axis(self, axis: Axis | str, field: str) -> SelectionState:
        """Assign a field to an axis."""
        return self.dispatch(AssignAxis(Axis(axis), field))

    def clear_axis(self, axis: Axis | str) -> SelectionState:
        """Clear an axis."""
        return self.dispatch(ClearAxis(Axis(axis)))

    def change_chart_kind(self, chart_kind: ChartKind | str) -> SelectionState:
        """Change the chart kind."""
        return self.dispatch(ChangeChartKind(ChartKind.parse(chart_kind)))

    # ------------------------------------------------------------------
    # Dataset lifecycle
    # ------------------------------------------------------------------

    def load_dataset(self, dataset: Dataset) -> None:
        """
        Replace the dataset and reset selection and chart.

        Args:
            dataset: Newly loaded dataset

        """
        self._scheduler.cancel()
        self.dataset = dataset
        self.selection = initial_state(self.default_chart_kind)
        self._publish(BuildResult())

        logger.info(
            f"Loaded dataset {dataset.source_name or '<unnamed>'}: "
            f"{dataset.row_count} rows, {len(dataset.headers)} fields"
        )
        if dataset.is_empty:
            self.notifier(
                Notice("warning", "No Data", "The selected source returned no rows.")
            )
        else:
            self.notifier(
                Notice(
                    "info",
                    "Data Loaded",
                    f"Loaded {dataset.row_count} rows from {dataset.source_name}.",
                )
            )
        if dataset.skipped_rows:
            self.notifier(
                Notice(
                    "warning",
                    "Rows Skipped",
                    f"{len(dataset.skipped_rows)} malformed rows were skipped.",
                )
            )

    def apply_source_result(self, result: SourceResult) -> bool:
        """
        Apply a provider result carrying a Dataset.

        A failed result leaves the current dataset and selection untouched.

        Returns:
            True if the dataset was replaced

        """
        if not result.success:
            logger.warning(f"Dataset load failed: {result.error}")
            self.notifier(Notice("error", "Load Failed", result.error or "Unknown error"))
            return False
        self.load_dataset(result.data)
        return True

    async def load_from(self, loader: Callable[[], Any]) -> bool:
        """
        Run a blocking loader in the default executor and apply its result.

        Args:
            loader: Returns a SourceResult or a Dataset; may raise

        Returns:
            True if the dataset was replaced

        """
        loop = asyncio.get_running_loop()
        outcome, error = await loop.run_in_executor(
            None,
            lambda: ErrorHandler.safe_execute(
                loader, error_message_prefix="Failed to load data"
            ),
        )
        if error is not None:
            return self.apply_source_result(SourceResult.fail(error))
        if isinstance(outcome, Dataset):
            outcome = SourceResult.ok(outcome)
        return self.apply_source_result(outcome)

    # ------------------------------------------------------------------
    # Rebuild
    # ------------------------------------------------------------------

    def rebuild(self) -> BuildResult:
        """Build the chart for the current state and publish the result."""
        result = build_chart_spec(
            self.dataset, self.header_types, self.selection, self.category_limit
        )

        for note in result.notes:
            self.notifier(Notice("info", "Data Filtered", note))
        if not result.success and self._axes_configured():
            self.notifier(Notice("warning", "Chart Not Available", result.diagnostic))

        self._publish(result)
        return result

    def flush(self) -> None:
        """Run a pending debounced rebuild immediately."""
        self._scheduler.flush()

    def _axes_configured(self) -> bool:
        if self.selection.x_axis is None:
            return False
        return self.selection.chart_kind.uses_series_set or self.selection.y_axis is not None

    def _publish(self, result: BuildResult) -> None:
        self.build_result = result
        for listener in list(self._listeners):
            listener(result)

    # ------------------------------------------------------------------
    # Preview
    # ------------------------------------------------------------------

    def preview(self, limit: int = PREVIEW_ROW_LIMIT) -> pd.DataFrame:
        """Return the first rows of the selected fields."""
        return DataProcessors.preview(self.dataset, self.selection.active_fields, limit)
