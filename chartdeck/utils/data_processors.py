"""Data processing utilities for dataset preview and profiling."""

from collections.abc import Sequence

import pandas as pd
from loguru import logger
from typing_extensions import TypedDict

from chartdeck.config.settings import PREVIEW_ROW_LIMIT
from chartdeck.schema.models import Dataset


class FieldProfile(TypedDict):
    """Per-field profile of a dataset."""

    semantic_type: str
    null_count: int
    unique_count: int


class DatasetProfile(TypedDict):
    """Dataset-level profile."""

    source_name: str
    row_count: int
    column_count: int
    columns: dict[str, FieldProfile]


class DataProcessors:
    """Utility class for dataset preview and analysis."""

    @staticmethod
    def to_dataframe(dataset: Dataset, fields: Sequence[str] | None = None) -> pd.DataFrame:
        """
        Convert a dataset into a dataframe with header-ordered columns.

        Args:
            dataset: Source dataset
            fields: Restrict to these fields (kept in header order)

        Returns:
            Dataframe with object dtype columns

        """
        columns = dataset.header_names
        if fields is not None:
            wanted = set(fields)
            columns = [name for name in columns if name in wanted]
        return pd.DataFrame(
            [[row.get(name) for name in columns] for row in dataset.rows],
            columns=columns,
            dtype=object,
        )

    @staticmethod
    def preview(
        dataset: Dataset,
        fields: Sequence[str],
        limit: int = PREVIEW_ROW_LIMIT,
    ) -> pd.DataFrame:
        """
        First rows of a dataset restricted to the selected fields.

        Args:
            dataset: Source dataset
            fields: Selected fields
            limit: Maximum number of rows

        Returns:
            Preview dataframe (empty when nothing is selected)

        """
        if not fields:
            return pd.DataFrame()
        return DataProcessors.to_dataframe(dataset, fields).head(limit)

    @staticmethod
    def analyze_dataset(dataset: Dataset) -> DatasetProfile:
        """
        Profile every field of a dataset.

        Args:
            dataset: Source dataset

        Returns:
            Row/column counts plus semantic type, null count and unique count
            per field

        """
        df = DataProcessors.to_dataframe(dataset)
        header_types = dataset.header_types

        columns: dict[str, FieldProfile] = {}
        for col in df.columns:
            columns[col] = FieldProfile(
                semantic_type=header_types[col].value,
                null_count=int(df[col].isnull().sum()),
                unique_count=int(df[col].nunique()),
            )

        logger.debug(f"Profiled {len(columns)} fields of {dataset.source_name or 'dataset'}")
        return DatasetProfile(
            source_name=dataset.source_name,
            row_count=dataset.row_count,
            column_count=len(columns),
            columns=columns,
        )

