"""
Data-source provider contract.

Every provider operation returns a SourceResult instead of raising. Failure
messages are sanitized so raw connection or credential text never reaches
the user.
"""

from dataclasses import dataclass, field
from typing import Any, Protocol


@dataclass
class SourceResult:
    """Structured result of a provider operation."""

    success: bool
    data: Any = None
    error: str | None = None

    @classmethod
    def ok(cls, data: Any) -> "SourceResult":
        """Build a successful result."""
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, error: str) -> "SourceResult":
        """Build a failed result with a user-facing message."""
        return cls(success=False, error=error)


@dataclass
class FetchedRows:
    """Raw records returned by a fetch, already capped by the limit."""

    rows: list[dict[str, Any]] = field(default_factory=list)

    @property
    def row_count(self) -> int:
        """Return number of fetched records."""
        return len(self.rows)


class DataSourceProvider(Protocol):
    """Operations the core consumes from a data source."""

    def list_databases(self, connection: str | None) -> SourceResult:
        """List user databases (SourceResult data: list[str])."""
        ...

    def list_collections(self, connection: str | None, database: str) -> SourceResult:
        """List collections of a database (SourceResult data: list[str])."""
        ...

    def fetch_rows(
        self, connection: str | None, database: str, collection: str, limit: int = 100
    ) -> SourceResult:
        """Fetch raw records (SourceResult data: FetchedRows)."""
        ...

    def load_dataset(
        self, connection: str | None, database: str, collection: str, limit: int = 100
    ) -> SourceResult:
        """Fetch and normalize records (SourceResult data: Dataset)."""
        ...


AUTH_FAILED_MESSAGE = (
    "Authentication failed. Please check your connection string and credentials."
)
TIMEOUT_MESSAGE = (
    "Connection timed out. Please check your network or database IP access list."
)
GENERIC_MESSAGE = "An unexpected error occurred while connecting to the database."


def sanitize_error(error: BaseException | None) -> str:
    """
    Map a provider exception to a safe, user-facing message.

    Args:
        error: Exception raised by the driver

    Returns:
        Message that never includes the raw exception text

    """
    if error is None:
        return "An unknown error occurred."

    text = str(error).lower()
    if "authentication" in text or "credentials" in text or "auth failed" in text:
        return AUTH_FAILED_MESSAGE
    if (
        "timed out" in text
        or "timeout" in text
        or "network error" in text
        or "connection refused" in text
    ):
        return TIMEOUT_MESSAGE
    return GENERIC_MESSAGE
