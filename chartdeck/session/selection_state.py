"""
Field selection and axis assignment state machine.

All transitions are pure reducers returning a new SelectionState. Invariants
kept by every transition:

    - a non-null x_axis / y_axis is a member of active_fields
    - x_axis and y_axis are never the same field

Transitions:
    - toggle_field: add/remove an active field, clearing any axis bound to a
      removed field, then auto-default
    - set_axis: assign (adds the field to active_fields); dropping a field onto
      the opposite axis swaps the two assignments
    - clear_axis: unset one axis; sticky, no auto-default
    - set_chart_kind: change kind; axes are never reset
"""

from collections.abc import Mapping
from dataclasses import dataclass, replace

from loguru import logger

from chartdeck.utils.vis_types import Axis, ChartKind, SemanticType

HeaderTypes = Mapping[str, SemanticType]


@dataclass(frozen=True)
class SelectionState:
    """Active fields, axis assignments and chart kind for one dataset."""

    active_fields: tuple[str, ...] = ()
    x_axis: str | None = None
    y_axis: str | None = None
    chart_kind: ChartKind = ChartKind.BAR

    def axis(self, axis: Axis) -> str | None:
        """Return the field assigned to an axis."""
        return self.x_axis if axis is Axis.X else self.y_axis

    def with_axis(self, axis: Axis, field: str | None) -> "SelectionState":
        """Return a copy with one axis replaced."""
        if axis is Axis.X:
            return replace(self, x_axis=field)
        return replace(self, y_axis=field)

    def is_active(self, field: str) -> bool:
        """Return True if the field is selected."""
        return field in self.active_fields


# ============================================================================
# Events
# ============================================================================


@dataclass(frozen=True)
class ToggleField:
    """Checkbox toggle on a field."""

    field: str


@dataclass(frozen=True)
class AssignAxis:
    """Drop a field onto an axis."""

    axis: Axis
    field: str


@dataclass(frozen=True)
class ClearAxis:
    """Clear button on an axis."""

    axis: Axis


@dataclass(frozen=True)
class ChangeChartKind:
    """Chart kind selector change."""

    chart_kind: ChartKind


SelectionEvent = ToggleField | AssignAxis | ClearAxis | ChangeChartKind


# ============================================================================
# Reducers
# ============================================================================


def initial_state(chart_kind: ChartKind = ChartKind.BAR) -> SelectionState:
    """Create the state used right after a dataset load."""
    return SelectionState(chart_kind=chart_kind)


def _first(
    state: SelectionState,
    header_types: HeaderTypes,
    allowed: tuple[SemanticType, ...] | None,
    exclude: str | None,
) -> str | None:
    for field in state.active_fields:
        if field == exclude:
            continue
        if allowed is None or header_types.get(field, SemanticType.UNKNOWN) in allowed:
            return field
    return None


def _default_x(state: SelectionState, header_types: HeaderTypes) -> str | None:
    y = state.y_axis
    return (
        _first(state, header_types, (SemanticType.STRING, SemanticType.DATE), y)
        or _first(state, header_types, (SemanticType.NUMBER,), y)
        or _first(state, header_types, None, y)
    )


def _default_y(state: SelectionState, header_types: HeaderTypes) -> str | None:
    x = state.x_axis
    known = tuple(t for t in SemanticType if t is not SemanticType.UNKNOWN)
    return _first(state, header_types, (SemanticType.NUMBER,), x) or _first(
        state, header_types, known, x
    )


def apply_auto_defaults(
    state: SelectionState, header_types: HeaderTypes
) -> SelectionState:
    """
    Fill unset axes with default choices from the active fields.

    X prefers string/date, then number, then any field. Y prefers number, then
    any field with a known type. Both always differ from the other axis; an
    axis with no candidate stays unset.

    Args:
        state: Current selection
        header_types: Semantic type per header

    Returns:
        State with unset axes filled where possible

    """
    if state.x_axis is None:
        state = replace(state, x_axis=_default_x(state, header_types))
    if state.y_axis is None:
        state = replace(state, y_axis=_default_y(state, header_types))
    return state


def toggle_field(
    state: SelectionState, field: str, header_types: HeaderTypes
) -> SelectionState:
    """
    Add or remove a field from the active set.

    Removing a field bound to an axis clears that axis. Auto-default runs when
    both axes end up unset or an axis field was just removed.

    Args:
        state: Current selection
        field: Header name to toggle
        header_types: Semantic type per header

    Returns:
        New selection state

    """
    if field not in header_types:
        logger.warning(f"Ignoring toggle of unknown field '{field}'")
        return state

    axis_removed = False
    if state.is_active(field):
        active = tuple(f for f in state.active_fields if f != field)
        x_axis, y_axis = state.x_axis, state.y_axis
        if x_axis == field:
            x_axis, axis_removed = None, True
        if y_axis == field:
            y_axis, axis_removed = None, True
        new_state = replace(state, active_fields=active, x_axis=x_axis, y_axis=y_axis)
    else:
        new_state = replace(state, active_fields=state.active_fields + (field,))

    both_unset = new_state.x_axis is None and new_state.y_axis is None
    if both_unset or axis_removed:
        new_state = apply_auto_defaults(new_state, header_types)

    logger.debug(
        f"toggle_field({field}): active={list(new_state.active_fields)} "
        f"x={new_state.x_axis} y={new_state.y_axis}"
    )
    return new_state


def set_axis(
    state: SelectionState,
    axis: Axis,
    field: str,
    header_types: HeaderTypes | None = None,
) -> SelectionState:
    """
    Assign a field to an axis.

    If the field is currently on the other axis the two assignments swap.
    Assignment implies selection: the field is added to active_fields.

    Args:
        state: Current selection
        axis: Target axis
        field: Header name being assigned
        header_types: Optional header types used to reject unknown fields

    Returns:
        New selection state

    """
    if header_types is not None and field not in header_types:
        logger.warning(f"Ignoring assignment of unknown field '{field}' to {axis.value}")
        return state

    current = state.axis(axis)
    if field == current:
        return state

    if field == state.axis(axis.other):
        # Drag from the other axis: swap
        new_state = state.with_axis(axis, field).with_axis(axis.other, current)
    else:
        new_state = state.with_axis(axis, field)

    if not new_state.is_active(field):
        new_state = replace(new_state, active_fields=new_state.active_fields + (field,))

    logger.debug(f"set_axis({axis.value}, {field}): x={new_state.x_axis} y={new_state.y_axis}")
    return new_state


def clear_axis(state: SelectionState, axis: Axis) -> SelectionState:
    """Unset an axis without deselecting its field."""
    return state.with_axis(axis, None)


def set_chart_kind(
    state: SelectionState,
    chart_kind: ChartKind,
    header_types: HeaderTypes | None = None,
) -> SelectionState:
    """
    Change the chart kind.

    Axis assignments are kept even if they no longer suit the new kind; the
    spec builder reports the mismatch. Defaults are filled only when both
    axes are unset.
    """
    new_state = replace(state, chart_kind=chart_kind)
    if header_types is not None and new_state.x_axis is None and new_state.y_axis is None:
        new_state = apply_auto_defaults(new_state, header_types)
    return new_state


def apply_event(
    state: SelectionState, event: SelectionEvent, header_types: HeaderTypes
) -> SelectionState:
    """
    Dispatch a selection event to its reducer.

    Args:
        state: Current selection
        event: User action
        header_types: Semantic type per header

    Returns:
        New selection state

    """
    if isinstance(event, ToggleField):
        return toggle_field(state, event.field, header_types)
    elif isinstance(event, AssignAxis):
        return set_axis(state, event.axis, event.field, header_types)
    elif isinstance(event, ClearAxis):
        return clear_axis(state, event.axis)
    elif isinstance(event, ChangeChartKind):
        return set_chart_kind(state, event.chart_kind, header_types)
    raise TypeError(f"Unsupported selection event: {event!r}")
