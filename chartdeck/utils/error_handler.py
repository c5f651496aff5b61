"""
Error Handling Utilities.

Exception taxonomy for chartdeck plus tuple-returning helpers (result, error)
used at the data-source and session boundaries, where failures are reported
to the user instead of propagating.
"""

import traceback
from collections.abc import Callable
from typing import TypeVar

from loguru import logger

T = TypeVar("T")


class ErrorHandler:
    """Standardized error handling utilities."""

    @staticmethod
    def safe_execute(
        func: Callable[..., T],
        *args,
        error_message_prefix: str = "Operation failed",
        log_errors: bool = True,
        return_none_on_error: bool = True,
        **kwargs,
    ) -> tuple[T | None, str | None]:
        """
        Execute a function safely with standardized error handling.

        Args:
            func: Function to execute
            *args: Arguments to pass to the function
            error_message_prefix: Prefix for error messages
            log_errors: Whether to log errors
            return_none_on_error: Whether to return None on error or raise
            **kwargs: Keyword arguments to pass to the function

        Returns:
            Tuple[Optional[T], Optional[str]]: (result, error_message)
            - On success: (result, None)
            - On failure: (None, error_message) if return_none_on_error=True

        """
        try:
            result = func(*args, **kwargs)
            return result, None
        except Exception as e:
            if isinstance(e, ChartDeckError):
                # Already a user-facing message
                error_msg = str(e)
            else:
                error_msg = f"{error_message_prefix}: {str(e)}"

            if log_errors:
                logger.error(error_msg)
                logger.debug(f"Traceback: {traceback.format_exc()}")

            if return_none_on_error:
                return None, error_msg
            else:
                raise


class ChartDeckError(Exception):
    """Base exception for chartdeck errors."""


class SourceError(ChartDeckError):
    """Sanitized failure reported by a data-source provider."""


class ShapeError(ChartDeckError):
    """Malformed input detected while parsing or normalizing a dataset."""


class ChartConfigurationError(ChartDeckError):
    """Incompatible field type, axis or chart kind combination."""
