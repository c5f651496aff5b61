"""
Data source connectors package.

Providers for delimited files, MongoDB collections and bundled sample data.
"""

from .base import DataSourceProvider, FetchedRows, SourceResult, sanitize_error
from .delimited_file import (
    load_delimited_file,
    load_delimited_source,
    parse_delimited_text,
)
from .document_store import DocumentStoreProvider
from .sample_source import SAMPLE_DATASET_NAME, SampleDataProvider

__all__ = [
    "DataSourceProvider",
    "FetchedRows",
    "SourceResult",
    "sanitize_error",
    "load_delimited_file",
    "load_delimited_source",
    "parse_delimited_text",
    "DocumentStoreProvider",
    "SAMPLE_DATASET_NAME",
    "SampleDataProvider",
]
