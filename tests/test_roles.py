from __future__ import annotations

import pytest

from panelchart.charts.roles import detect_role_mappings, init_roles
from panelchart.core.errors import ArgumentInvalidError
from panelchart.data.schema import ComplexType


def _type(*names: str) -> ComplexType:
    ct = ComplexType()
    for name in names:
        ct.add_dimension(name)
    return ct


def test_roles_follow_dimension_names() -> None:
    ct = _type("series", "category", "category2", "value")
    assert detect_role_mappings(ct) == {
        "series": ["series"],
        "category": ["category", "category2"],
        "value": "value",
    }


def test_unmatched_roles_stay_unmapped() -> None:
    roles = init_roles(_type("category", "value"))
    assert set(roles) == {"category", "value"}


def test_explicit_mapping_wins() -> None:
    roles = init_roles(_type("series", "category", "value"), {"series": "category", "category": "series"})
    assert roles["series"].grouping.dimension_names == ("category",)
    assert roles["category"].grouping.dimension_names == ("series",)


def test_explicit_mapping_to_unknown_dimension_fails() -> None:
    with pytest.raises(ArgumentInvalidError):
        init_roles(_type("category"), {"series": "nope"})


def test_camel_case_role_names_are_normalized() -> None:
    roles = init_roles(_type("series", "category", "value"), {"multiChartColumn": "series"})
    assert "multi_chart_column" in roles
    assert "multiChartColumn" not in roles
    assert roles["multi_chart_column"].grouping.dimension_names == ("series",)
