"""Dataset structures shared by ingestion, selection and chart building."""

from dataclasses import dataclass, field
from typing import Any

from chartdeck.utils.vis_types import SemanticType, SourceKind

Row = dict[str, Any]


@dataclass(frozen=True)
class Field:
    """A dataset column identified by its header name."""

    name: str
    semantic_type: SemanticType = SemanticType.STRING


@dataclass(frozen=True)
class SkippedRow:
    """A delimited-text line rejected during parsing."""

    line_number: int
    content: str
    reason: str


@dataclass
class Dataset:
    """
    Uniform tabular data produced by a single source load.

    Every row carries exactly the header names as keys; missing values are
    explicit ``None``. Datasets are replaced wholesale, never mutated.
    """

    rows: list[Row] = field(default_factory=list)
    headers: list[Field] = field(default_factory=list)
    source_name: str = ""
    source_kind: SourceKind = SourceKind.FILE
    skipped_rows: list[SkippedRow] = field(default_factory=list)

    @property
    def header_names(self) -> list[str]:
        """Return header names in dataset order."""
        return [header.name for header in self.headers]

    @property
    def header_types(self) -> dict[str, SemanticType]:
        """Return a header name to semantic type mapping."""
        return {header.name: header.semantic_type for header in self.headers}

    @property
    def row_count(self) -> int:
        """Return number of rows."""
        return len(self.rows)

    @property
    def is_empty(self) -> bool:
        """Return True if the dataset has no rows."""
        return not self.rows

    @classmethod
    def empty(
        cls, source_name: str = "", source_kind: SourceKind = SourceKind.FILE
    ) -> "Dataset":
        """Create a dataset with no rows and no headers."""
        return cls(rows=[], headers=[], source_name=source_name, source_kind=source_kind)
