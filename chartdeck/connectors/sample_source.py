"""
Bundled sample data provider.

Serves a small fixed movies collection under ``sample_mflix.movies`` for demos
and tests, with a simulated fetch latency. Headers are produced by sorted
path extraction rather than insertion order.
"""

import time
from datetime import datetime, timezone
from typing import Any, Final

from bson import ObjectId
from loguru import logger

from chartdeck.config.settings import SOURCE_CONFIG
from chartdeck.connectors.base import FetchedRows, SourceResult
from chartdeck.schema.normalizer import RecordNormalizer
from chartdeck.utils.vis_types import HeaderOrder, SourceKind

SAMPLE_DATABASE: Final[str] = "sample_mflix"
SAMPLE_COLLECTION: Final[str] = "movies"
SAMPLE_DATASET_NAME: Final[str] = f"{SAMPLE_DATABASE}.{SAMPLE_COLLECTION}"


def _utc(year: int, month: int, day: int) -> datetime:
    return datetime(year, month, day, tzinfo=timezone.utc)


def _movie(
    oid: str,
    title: str,
    year: int,
    genres: list[str],
    runtime: int,
    rated: str,
    released: datetime,
    imdb: dict[str, Any],
    tomatoes: dict[str, Any] | None = None,
    **extra: Any,
) -> dict[str, Any]:
    movie = {
        "_id": ObjectId(oid),
        "title": title,
        "year": year,
        "genres": genres,
        "runtime": runtime,
        "rated": rated,
        "released": released,
        "imdb": imdb,
        "type": "movie",
    }
    if tomatoes is not None:
        movie["tomatoes"] = tomatoes
    movie.update(extra)
    return movie


SAMPLE_MOVIES: Final[list[dict[str, Any]]] = [
    _movie(
        "573a1390f29313caabcd4135", "Blacksmith Scene", 1893, ["Short"], 1, "UNRATED",
        _utc(1893, 5, 9), {"rating": 6.2, "votes": 1189, "id": 5},
        {"viewer": {"rating": 3.0, "numReviews": 184}, "lastUpdated": _utc(2015, 6, 28)},
    ),
    _movie(
        "573a1390f29313caabcd42e8", "The Great Train Robbery", 1903, ["Short", "Western"], 11,
        "TV-G", _utc(1903, 12, 1), {"rating": 7.4, "votes": 9847, "id": 439},
        {"viewer": {"rating": 3.7, "numReviews": 2559}, "lastUpdated": _utc(2015, 8, 13)},
    ),
    _movie(
        "573a1390f29313caabcd4323", "The Land Beyond the Sunset", 1912, ["Short", "Drama"], 14,
        "UNRATED", _utc(1912, 10, 28), {"rating": 7.1, "votes": 448, "id": 488},
        {"viewer": {"rating": 3.7, "numReviews": 53}, "lastUpdated": _utc(2015, 4, 27)},
    ),
    _movie(
        "573a1390f29313caabcd446f", "A Corner in Wheat", 1909, ["Short", "Drama"], 14, "G",
        _utc(1909, 12, 13), {"rating": 6.6, "votes": 1375, "id": 832},
        {"viewer": {"rating": 3.6, "numReviews": 109}, "lastUpdated": _utc(2015, 5, 11)},
    ),
    _movie(
        "573a1390f29313caabcd4803", "Winsor McCay", 1911, ["Animation", "Short", "Comedy"], 7,
        "UNRATED", _utc(1911, 4, 8), {"rating": 7.3, "votes": 1034, "id": 1737},
        {"viewer": {"rating": 3.4, "numReviews": 89}, "lastUpdated": _utc(2015, 8, 20)},
    ),
    _movie(
        "573a1390f29313caabcd4eaf", "Traffic in Souls", 1913, ["Crime", "Drama"], 88, "TV-PG",
        _utc(1913, 11, 24), {"rating": 6.0, "votes": 371, "id": 3471},
        {"viewer": {"rating": 3.0, "numReviews": 85}, "lastUpdated": _utc(2015, 8, 12)},
    ),
    _movie(
        "573a1390f29313caabcd50e5", "Gertie the Dinosaur", 1914, ["Animation", "Short", "Comedy"],
        12, "G", _utc(1914, 9, 15), {"rating": 7.3, "votes": 1837, "id": 4008},
        {"viewer": {"rating": 3.7, "numReviews": 29}, "lastUpdated": _utc(2015, 8, 29)},
    ),
    _movie(
        "573a1390f29313caabcd5293", "The Perils of Pauline", 1914, ["Action"], 199, "NOT RATED",
        _utc(1914, 3, 23), {"rating": 7.6, "votes": 744, "id": 4465},
        {"viewer": {"rating": 2.8, "numReviews": 9}, "lastUpdated": _utc(2015, 9, 12)},
        awards={"wins": 1, "nominations": 0},
    ),
    _movie(
        "573a1390f29313caabcd56df", "The Birth of a Nation", 1915, ["Drama", "History", "War"],
        195, "NOT RATED", _utc(1915, 3, 3), {"rating": 6.8, "votes": 15715, "id": 4972},
        {"viewer": {"rating": 3.2, "numReviews": 15129}, "lastUpdated": _utc(2015, 9, 10)},
        awards={"wins": 2, "nominations": 0},
    ),
    _movie(
        "573a1390f29313caabcd587d", "Regeneration", 1915, ["Biography", "Crime", "Drama"], 72,
        "UNRATED", _utc(1915, 9, 13), {"rating": 6.8, "votes": 516, "id": 5960},
        awards={"wins": 1, "nominations": 0},
    ),
    _movie(
        "573a1390f29313caabcd5a93", "Civilization", 1916, ["Drama", "War"], 78, "UNRATED",
        _utc(1916, 6, 2), {"rating": 6.3, "votes": 162, "id": 6517},
        {"viewer": {"rating": 3.5, "numReviews": 47}, "lastUpdated": _utc(2015, 9, 15)},
        metacritic={},
    ),
    _movie(
        "573a1390f29313caabcd5b9a", "Intolerance", 1916, ["Drama", "History"], 197, "NOT RATED",
        _utc(1916, 9, 5), {"rating": 8.0, "votes": 10180, "id": 6864},
        {"viewer": {"rating": 3.8, "numReviews": 2917}, "lastUpdated": _utc(2015, 9, 16)},
        awards={"wins": 1, "nominations": 0},
    ),
]


class SampleDataProvider:
    """Offline provider exposing the bundled sample collection."""

    def __init__(self, latency_seconds: float | None = None):
        """
        Initialize provider.

        Args:
            latency_seconds: Simulated fetch delay (defaults to configuration)

        """
        self.latency_seconds = (
            latency_seconds
            if latency_seconds is not None
            else SOURCE_CONFIG["sample_latency_seconds"]
        )
        self.normalizer = RecordNormalizer(HeaderOrder.LEXICOGRAPHIC)

    def _simulate_latency(self) -> None:
        if self.latency_seconds > 0:
            time.sleep(self.latency_seconds)

    def list_databases(self, connection: str | None = None) -> SourceResult:
        """List the sample database."""
        self._simulate_latency()
        return SourceResult.ok([SAMPLE_DATABASE])

    def list_collections(self, connection: str | None, database: str) -> SourceResult:
        """List the sample collection."""
        self._simulate_latency()
        if database != SAMPLE_DATABASE:
            return SourceResult.fail(f"Unknown sample database: {database}")
        return SourceResult.ok([SAMPLE_COLLECTION])

    def fetch_rows(
        self,
        connection: str | None = None,
        database: str = SAMPLE_DATABASE,
        collection: str = SAMPLE_COLLECTION,
        limit: int = SOURCE_CONFIG["fetch_limit"],
    ) -> SourceResult:
        """Return up to ``limit`` sample records."""
        self._simulate_latency()
        if (database, collection) != (SAMPLE_DATABASE, SAMPLE_COLLECTION):
            return SourceResult.fail(f"Unknown sample collection: {database}.{collection}")
        if limit <= 0:
            return SourceResult.fail("Row limit must be a positive number.")

        rows = [dict(movie) for movie in SAMPLE_MOVIES[:limit]]
        logger.info(f"Served {len(rows)} sample records from {SAMPLE_DATASET_NAME}")
        return SourceResult.ok(FetchedRows(rows=rows))

    def load_dataset(
        self,
        connection: str | None = None,
        database: str = SAMPLE_DATABASE,
        collection: str = SAMPLE_COLLECTION,
        limit: int = SOURCE_CONFIG["fetch_limit"],
    ) -> SourceResult:
        """Fetch the sample records and normalize them into a Dataset."""
        result = self.fetch_rows(connection, database, collection, limit)
        if not result.success:
            return result

        dataset = self.normalizer.normalize(
            result.data.rows,
            source_name=SAMPLE_DATASET_NAME,
            source_kind=SourceKind.SAMPLE,
        )
        return SourceResult.ok(dataset)
