from __future__ import annotations

import matplotlib

matplotlib.use("Agg")

from typing import Any  # noqa: E402

import pytest  # noqa: E402

from panelchart.viz.backend import RenderBackend  # noqa: E402
from panelchart.viz.transition import ManualScheduler  # noqa: E402


@pytest.fixture
def crosstab_data() -> dict[str, Any]:
    """Region per row, one column per quarter."""
    return {
        "metadata": [
            {"colIndex": 0, "colName": "Region", "colType": "STRING"},
            {"colIndex": 1, "colName": "Q1", "colType": "NUMERIC"},
            {"colIndex": 2, "colName": "Q2", "colType": "NUMERIC"},
        ],
        "resultset": [
            ["North", 10, 20],
            ["South", 30, 40],
            ["East", 5, 15],
        ],
    }


@pytest.fixture
def relational_data() -> dict[str, Any]:
    """Seven countries x two products, one sales value per row."""
    countries = ["PT", "ES", "FR", "DE", "IT", "NL", "BE"]
    rows = []
    for i, country in enumerate(countries):
        rows.append([country, "Bikes", 100 + i])
        rows.append([country, "Cars", 200 + i])
    return {
        "metadata": [
            {"colIndex": 0, "colName": "Country", "colType": "STRING"},
            {"colIndex": 1, "colName": "Product", "colType": "STRING"},
            {"colIndex": 2, "colName": "Sales", "colType": "NUMERIC"},
        ],
        "resultset": rows,
    }


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture
def static_backend() -> RenderBackend:
    return RenderBackend("agg", supports_animation=False)


@pytest.fixture
def animated_backend() -> RenderBackend:
    return RenderBackend("agg", supports_animation=True)
