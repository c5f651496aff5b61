"""
Session package.

Selection state reducers, debounced rebuild scheduling and connection string
persistence. ChartSession lives in ``chartdeck.session.chart_session``.
"""

from .connection_store import (
    ConnectionStore,
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
    KeyValueStore,
)
from .rebuild_scheduler import RebuildScheduler
from .selection_state import (
    AssignAxis,
    ChangeChartKind,
    ClearAxis,
    SelectionEvent,
    SelectionState,
    ToggleField,
    apply_auto_defaults,
    apply_event,
    clear_axis,
    initial_state,
    set_axis,
    set_chart_kind,
    toggle_field,
)

__all__ = [
    "ConnectionStore",
    "InMemoryKeyValueStore",
    "JsonFileKeyValueStore",
    "KeyValueStore",
    "RebuildScheduler",
    "AssignAxis",
    "ChangeChartKind",
    "ClearAxis",
    "SelectionEvent",
    "SelectionState",
    "ToggleField",
    "apply_auto_defaults",
    "apply_event",
    "clear_axis",
    "initial_state",
    "set_axis",
    "set_chart_kind",
    "toggle_field",
]
