"""Tests for field selection and the axis assignment state machine."""

import random

import pytest

from chartdeck.session.selection_state import (
    AssignAxis,
    ChangeChartKind,
    ClearAxis,
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
from chartdeck.utils.vis_types import Axis, ChartKind, SemanticType

TYPES = {
    "revenue": SemanticType.NUMBER,
    "city": SemanticType.STRING,
    "opened": SemanticType.DATE,
    "units": SemanticType.NUMBER,
    "flag": SemanticType.BOOLEAN,
    "blob": SemanticType.UNKNOWN,
}


def select(*fields):
    """Toggle fields on from the initial state."""
    state = initial_state()
    for field in fields:
        state = toggle_field(state, field, TYPES)
    return state


def assert_consistent(state: SelectionState):
    """Axes are active and distinct."""
    for field in (state.x_axis, state.y_axis):
        if field is not None:
            assert field in state.active_fields
    if state.x_axis is not None:
        assert state.x_axis != state.y_axis


# ============================================================================
# Toggle and auto-default
# ============================================================================


class TestToggleField:
    """Field toggles and the auto-default rule."""

    def test_initial_state(self):
        """Nothing selected, bar chart by default."""
        state = initial_state()

        assert state.active_fields == ()
        assert state.x_axis is None and state.y_axis is None
        assert state.chart_kind == ChartKind.BAR

    def test_single_numeric_field_goes_to_x(self):
        """X falls back to a number when nothing categorical is active."""
        state = select("revenue")

        assert state.x_axis == "revenue"
        assert state.y_axis is None

    def test_later_toggles_leave_assigned_axis_alone(self):
        """Defaults only rerun once both axes are unset again."""
        state = select("revenue", "city")

        # X was filled by the first toggle; the second toggle left Y unset
        assert state.x_axis == "revenue"
        assert state.y_axis is None

        # Clearing is sticky; the next toggle sees both axes unset and refills
        state = clear_axis(state, Axis.X)
        assert state.x_axis is None and state.y_axis is None

        state = toggle_field(state, "units", TYPES)
        assert state.x_axis == "city"
        assert state.y_axis == "revenue"

    def test_first_toggle_pair_from_empty(self):
        """Defaults run while both axes are unset."""
        state = select("blob", "city")

        # blob alone: X takes it (any field), Y has no non-unknown candidate
        assert state.x_axis == "blob"
        assert state.y_axis is None

    def test_defaults_from_multiple_active_fields(self):
        """With several active fields, X prefers string/date, Y prefers number."""
        state = apply_auto_defaults(
            SelectionState(active_fields=("revenue", "opened", "city", "units")), TYPES
        )

        assert state.x_axis == "opened"
        assert state.y_axis == "revenue"

    def test_y_falls_back_to_known_type(self):
        """Y takes a non-unknown field when no number is available."""
        state = apply_auto_defaults(
            SelectionState(active_fields=("city", "blob", "flag")), TYPES
        )

        assert state.x_axis == "city"
        assert state.y_axis == "flag"

    def test_removing_axis_field_clears_and_refills(self):
        """Removing an assigned field clears its axis and re-runs defaults."""
        state = SelectionState(
            active_fields=("city", "revenue", "units"), x_axis="city", y_axis="revenue"
        )

        state = toggle_field(state, "revenue", TYPES)

        assert "revenue" not in state.active_fields
        assert state.x_axis == "city"
        assert state.y_axis == "units"

    def test_removing_last_field_leaves_axes_unset(self):
        """No candidates means axes stay unset."""
        state = toggle_field(select("city"), "city", TYPES)

        assert state.active_fields == ()
        assert state.x_axis is None and state.y_axis is None

    def test_unknown_field_is_ignored(self):
        """Toggling a field the dataset does not have is a no-op."""
        state = select("city")

        assert toggle_field(state, "nope", TYPES) is state

    def test_toggle_preserves_selection_order(self):
        """Active fields keep the order they were selected in."""
        state = select("units", "city", "revenue")

        assert state.active_fields == ("units", "city", "revenue")


# ============================================================================
# Explicit assignment, swap and clear
# ============================================================================


class TestAxisAssignment:
    """setAxis, drag-and-drop swap and clear."""

    def test_assign_adds_field_to_active(self):
        """Assignment implies selection."""
        state = set_axis(initial_state(), Axis.Y, "units", TYPES)

        assert state.y_axis == "units"
        assert state.active_fields == ("units",)

    def test_assign_same_value_is_noop(self):
        """Assigning the current value returns the same state."""
        state = SelectionState(active_fields=("city",), x_axis="city")

        assert set_axis(state, Axis.X, "city", TYPES) is state

    @pytest.mark.parametrize("target", [Axis.X, Axis.Y])
    def test_swap_is_symmetric_and_involutive(self, target):
        """Dropping the other axis' field swaps; doing it twice restores."""
        state = SelectionState(
            active_fields=("city", "revenue"), x_axis="city", y_axis="revenue"
        )
        field = state.axis(target.other)

        swapped = set_axis(state, target, field, TYPES)

        assert swapped.axis(target) == field
        assert swapped.axis(target.other) == state.axis(target)

        restored = set_axis(swapped, target, state.axis(target), TYPES)
        assert (restored.x_axis, restored.y_axis) == (state.x_axis, state.y_axis)

    def test_swap_with_unset_axis_moves_field(self):
        """Swapping onto an unset axis leaves the source axis unset."""
        state = SelectionState(active_fields=("revenue",), y_axis="revenue")

        state = set_axis(state, Axis.X, "revenue", TYPES)

        assert state.x_axis == "revenue"
        assert state.y_axis is None

    def test_clear_is_sticky(self):
        """Clear keeps the field active and does not auto-default."""
        state = SelectionState(
            active_fields=("city", "revenue"), x_axis="city", y_axis="revenue"
        )

        state = clear_axis(state, Axis.Y)

        assert state.y_axis is None
        assert state.active_fields == ("city", "revenue")

    def test_clear_both_then_toggle_reapplies_defaults(self):
        """A field change with both axes unset runs auto-default again."""
        state = SelectionState(
            active_fields=("city", "revenue"), x_axis="city", y_axis="revenue"
        )
        state = clear_axis(clear_axis(state, Axis.X), Axis.Y)

        state = toggle_field(state, "units", TYPES)

        assert state.x_axis == "city"
        assert state.y_axis == "revenue"


# ============================================================================
# Chart kind and event dispatch
# ============================================================================


def test_chart_kind_change_keeps_axes():
    """Changing kind never resets axes."""
    state = SelectionState(active_fields=("city", "revenue"), x_axis="city", y_axis="revenue")

    state = set_chart_kind(state, ChartKind.SCATTER, TYPES)

    assert state.chart_kind == ChartKind.SCATTER
    assert (state.x_axis, state.y_axis) == ("city", "revenue")


def test_chart_kind_change_fills_when_both_unset():
    """Defaults run on kind change when both axes are unset."""
    state = SelectionState(active_fields=("revenue", "city"))

    state = set_chart_kind(state, ChartKind.DONUT, TYPES)

    assert (state.x_axis, state.y_axis) == ("city", "revenue")


def test_apply_event_dispatch():
    """Events route to their reducers."""
    state = initial_state()
    state = apply_event(state, ToggleField("city"), TYPES)
    state = apply_event(state, AssignAxis(Axis.Y, "revenue"), TYPES)
    state = apply_event(state, ChangeChartKind(ChartKind.PIE), TYPES)
    state = apply_event(state, ClearAxis(Axis.X), TYPES)

    assert state == SelectionState(
        active_fields=("city", "revenue"),
        x_axis=None,
        y_axis="revenue",
        chart_kind=ChartKind.PIE,
    )


def test_apply_event_rejects_unknown_events():
    """Unsupported events are a programming error."""
    with pytest.raises(TypeError):
        apply_event(initial_state(), "toggle", TYPES)


def test_axes_always_active_after_random_sequences():
    """Axis fields stay in active_fields after any operation sequence."""
    rng = random.Random(1234)
    fields = list(TYPES) + ["ghost"]

    for _ in range(200):
        state = initial_state()
        for _ in range(30):
            choice = rng.randrange(4)
            if choice == 0:
                event = ToggleField(rng.choice(fields))
            elif choice == 1:
                event = AssignAxis(rng.choice(list(Axis)), rng.choice(fields))
            elif choice == 2:
                event = ClearAxis(rng.choice(list(Axis)))
            else:
                event = ChangeChartKind(rng.choice(list(ChartKind)))
            state = apply_event(state, event, TYPES)
            assert_consistent(state)
