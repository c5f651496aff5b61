"""Pytest configuration and shared fixtures for chartdeck tests."""

# Add project root to path for imports
import sys
from pathlib import Path
from unittest.mock import Mock

import pytest

project_root = Path(__file__).parent.parent
sys.path.append(str(project_root))

from chartdeck.schema.models import Dataset, Field  # noqa: E402
from chartdeck.utils.vis_types import SemanticType, SourceKind  # noqa: E402


def make_dataset(rows, types, source_name="test.csv", source_kind=SourceKind.FILE):
    """Build a Dataset from rows and a name -> SemanticType mapping."""
    return Dataset(
        rows=rows,
        headers=[Field(name=name, semantic_type=t) for name, t in types.items()],
        source_name=source_name,
        source_kind=source_kind,
    )


@pytest.fixture(scope="session")
def project_root_path():
    """Get the project root path."""
    return Path(__file__).parent.parent


@pytest.fixture
def notifier():
    """Mock notifier collecting Notice objects."""
    return Mock()


@pytest.fixture
def sales_dataset():
    """Small dataset with a categorical, a date and two numeric fields."""
    rows = [
        {"region": "North", "month": "2024-01-01", "q1": 10, "q2": 5, "active": True},
        {"region": "South", "month": "2024-02-01", "q1": 7, "q2": None, "active": False},
        {"region": "North", "month": "2024-03-01", "q1": 3, "q2": 2, "active": True},
        {"region": "East", "month": "2024-04-01", "q1": None, "q2": 8, "active": True},
        {"region": "West", "month": "2024-05-01", "q1": 1, "q2": "n/a", "active": False},
        {"region": "East", "month": "2024-06-01", "q1": 4, "q2": 1, "active": True},
    ]
    types = {
        "region": SemanticType.STRING,
        "month": SemanticType.DATE,
        "q1": SemanticType.NUMBER,
        "q2": SemanticType.NUMBER,
        "active": SemanticType.BOOLEAN,
    }
    return make_dataset(rows, types, source_name="sales.csv")


@pytest.fixture
def city_dataset():
    """25 distinct cities with one revenue row each (revenue = index)."""
    rows = [{"city": f"City {i:02d}", "revenue": i} for i in range(1, 26)]
    types = {"city": SemanticType.STRING, "revenue": SemanticType.NUMBER}
    return make_dataset(rows, types, source_name="cities.csv")


@pytest.fixture
def nested_records():
    """Structurally different nested records."""
    return [
        {
            "name": "alpha",
            "stats": {"score": 9.5, "rank": 1},
            "tags": ["a", "b"],
            "meta": {},
        },
        {
            "name": "beta",
            "stats": {"score": 7.0},
            "owner": {"email": "beta@example.com"},
        },
        {"name": "gamma", "extra": True},
    ]
