"""Tests for error handling utilities."""

import pytest

from chartdeck.utils.error_handler import (
    ChartConfigurationError,
    ChartDeckError,
    ErrorHandler,
    ShapeError,
    SourceError,
)


def test_safe_execute_success():
    """Results pass through with no error."""
    assert ErrorHandler.safe_execute(lambda a, b: a + b, 1, b=2) == (3, None)


def test_safe_execute_prefixes_unexpected_errors():
    """Unexpected exceptions get the prefix."""

    def fail():
        raise KeyError("boom")

    result, error = ErrorHandler.safe_execute(fail, error_message_prefix="Load failed")

    assert result is None
    assert error == "Load failed: 'boom'"


def test_safe_execute_keeps_domain_messages():
    """Domain errors are already user-facing."""

    def fail():
        raise ShapeError("No valid data rows could be parsed from the CSV.")

    assert ErrorHandler.safe_execute(fail)[1] == (
        "No valid data rows could be parsed from the CSV."
    )


def test_safe_execute_can_reraise():
    """return_none_on_error=False propagates."""

    def fail():
        raise ValueError("bad")

    with pytest.raises(ValueError):
        ErrorHandler.safe_execute(fail, return_none_on_error=False, log_errors=False)


def test_exception_hierarchy():
    """All domain errors share one base."""
    for error in (SourceError, ShapeError, ChartConfigurationError):
        assert issubclass(error, ChartDeckError)
