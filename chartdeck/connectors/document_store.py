"""
Document store provider backed by MongoDB (pymongo).

Lists databases and collections and fetches a capped sample of documents,
normalizing them with insertion-order headers. A fresh client is opened per
operation and always closed. Driver errors are re-raised as SourceError with
a sanitized message and turned into a failed SourceResult at the provider
boundary.
"""

from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Any

from bson.codec_options import DatetimeConversion
from loguru import logger
from pymongo import MongoClient
from pymongo.errors import NetworkTimeout, OperationFailure, ServerSelectionTimeoutError
from pymongo.server_api import ServerApi

from chartdeck.config.settings import SOURCE_CONFIG
from chartdeck.connectors.base import (
    AUTH_FAILED_MESSAGE,
    GENERIC_MESSAGE,
    TIMEOUT_MESSAGE,
    FetchedRows,
    SourceResult,
    sanitize_error,
)
from chartdeck.schema.normalizer import RecordNormalizer
from chartdeck.utils.error_handler import ErrorHandler, SourceError
from chartdeck.utils.vis_types import HeaderOrder, SourceKind

ClientFactory = Callable[[str], Any]

# MongoDB error codes for failed authentication
_AUTH_ERROR_CODES = (18, 8000)


def default_client_factory(connection: str) -> MongoClient:
    """
    Create a MongoClient pinned to the stable server API.

    Out-of-range dates decode as DatetimeMS instead of failing the whole
    cursor; the normalizer turns them into None.
    """
    return MongoClient(
        connection,
        server_api=ServerApi("1", strict=True, deprecation_errors=True),
        serverSelectionTimeoutMS=SOURCE_CONFIG["server_selection_timeout_ms"],
        datetime_conversion=DatetimeConversion.DATETIME_AUTO,
    )


def sanitize_mongo_error(error: BaseException) -> str:
    """Map pymongo exceptions to user-facing messages."""
    if isinstance(error, OperationFailure) and error.code in _AUTH_ERROR_CODES:
        return AUTH_FAILED_MESSAGE
    if isinstance(error, (ServerSelectionTimeoutError, NetworkTimeout)):
        return TIMEOUT_MESSAGE
    return sanitize_error(error)


class DocumentStoreProvider:
    """Data-source provider for MongoDB collections."""

    def __init__(
        self,
        client_factory: ClientFactory | None = None,
        excluded_databases: tuple[str, ...] | None = None,
    ):
        """
        Initialize provider.

        Args:
            client_factory: Builds a client from a connection string
            excluded_databases: System databases hidden from listings

        """
        self.client_factory = client_factory or default_client_factory
        self.excluded_databases = (
            excluded_databases
            if excluded_databases is not None
            else SOURCE_CONFIG["excluded_databases"]
        )
        self.normalizer = RecordNormalizer(HeaderOrder.INSERTION)

    @contextmanager
    def open_client(self, connection: str, action: str) -> Iterator[Any]:
        """
        Open a client for one operation and close it afterwards.

        Args:
            connection: MongoDB connection string
            action: Description used in the error log

        Raises:
            SourceError: Any driver failure, with a sanitized message

        """
        client = None
        try:
            client = self.client_factory(connection)
            yield client
        except Exception as e:
            logger.error(f"Error {action}: {e}")
            raise SourceError(sanitize_mongo_error(e)) from e
        finally:
            if client is not None:
                client.close()

    @staticmethod
    def _run(operation: Callable[[], Any]) -> SourceResult:
        result, error = ErrorHandler.safe_execute(
            operation, error_message_prefix=GENERIC_MESSAGE, log_errors=False
        )
        if error is not None:
            return SourceResult.fail(error)
        return SourceResult.ok(result)

    def list_databases(self, connection: str | None) -> SourceResult:
        """List non-system databases."""
        if not connection:
            return SourceResult.fail("Connection string is required.")

        def operation() -> list[str]:
            with self.open_client(connection, "fetching databases") as client:
                names = [
                    name
                    for name in client.list_database_names()
                    if name not in self.excluded_databases
                ]
            logger.info(f"Fetched {len(names)} databases")
            return names

        return self._run(operation)

    def list_collections(self, connection: str | None, database: str) -> SourceResult:
        """List collections of a database."""
        if not connection or not database:
            return SourceResult.fail(
                "Connection string and database name are required."
            )

        def operation() -> list[str]:
            action = f"fetching collections for database {database}"
            with self.open_client(connection, action) as client:
                names = list(client[database].list_collection_names())
            logger.info(f"Fetched {len(names)} collections for database {database}")
            return names

        return self._run(operation)

    def fetch_rows(
        self,
        connection: str | None,
        database: str,
        collection: str,
        limit: int = SOURCE_CONFIG["fetch_limit"],
    ) -> SourceResult:
        """
        Fetch up to ``limit`` raw documents.

        Args:
            connection: MongoDB connection string
            database: Database name
            collection: Collection name
            limit: Maximum number of documents

        Returns:
            SourceResult with FetchedRows data

        """
        if not connection or not database or not collection:
            return SourceResult.fail(
                "Connection string, database name, and collection name are required."
            )
        if limit <= 0:
            return SourceResult.fail("Row limit must be a positive number.")

        def operation() -> FetchedRows:
            action = f"fetching data from collection {database}.{collection}"
            with self.open_client(connection, action) as client:
                documents = list(client[database][collection].find().limit(limit))
            logger.info(f"Fetched {len(documents)} documents from {database}.{collection}")
            return FetchedRows(rows=documents)

        return self._run(operation)

    def load_dataset(
        self,
        connection: str | None,
        database: str,
        collection: str,
        limit: int = SOURCE_CONFIG["fetch_limit"],
    ) -> SourceResult:
        """Fetch documents and normalize them into a Dataset."""
        result = self.fetch_rows(connection, database, collection, limit)
        if not result.success:
            return result

        dataset = self.normalizer.normalize(
            result.data.rows,
            source_name=f"{database}.{collection}",
            source_kind=SourceKind.DOCUMENT_STORE,
        )
        return SourceResult.ok(dataset)
