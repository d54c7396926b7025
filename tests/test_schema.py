from __future__ import annotations

import pytest

from panelchart.core.errors import ArgumentInvalidError
from panelchart.data.schema import (
    ColumnMetadata,
    ComplexType,
    GroupingSpec,
    dimension_name,
    split_dimension_name,
)


def test_column_metadata_accepts_wire_names() -> None:
    col = ColumnMetadata.model_validate({"colIndex": 2, "colName": "Sales", "colType": "NUMERIC"})
    assert col.index == 2
    assert col.name == "Sales"
    assert col.label is None
    assert col.is_numeric


def test_column_metadata_accepts_field_names() -> None:
    col = ColumnMetadata(index=0, name="Region")
    assert col.type == "STRING"
    assert not col.is_numeric


def test_dimension_names_and_levels() -> None:
    assert split_dimension_name("series") == ("series", 0)
    assert split_dimension_name("series2") == ("series", 1)
    assert split_dimension_name("value2") == ("value", 1)
    assert dimension_name("category", 0) == "category"
    assert dimension_name("category", 2) == "category3"


def test_group_dimension_names_sorted_by_level() -> None:
    ct = ComplexType()
    ct.add_dimension("category2")
    ct.add_dimension("series")
    ct.add_dimension("category")
    assert ct.group_dimension_names("category") == ["category", "category2"]
    assert ct.group_dimension_names("multi_chart_column", assert_exists=False) is None
    with pytest.raises(ArgumentInvalidError):
        ct.group_dimension_names("multi_chart_column")


def test_add_dimension_refines_existing() -> None:
    ct = ComplexType()
    ct.add_dimension("value", kind="number", label="Sales")
    dim = ct.add_dimension("value", kind="number")
    assert dim.label == "Sales"
    assert len(ct) == 1


def test_unknown_kind_is_rejected() -> None:
    with pytest.raises(ArgumentInvalidError):
        ComplexType().add_dimension("x", kind="blob")


def test_grouping_spec_parse() -> None:
    ct = ComplexType()
    ct.add_dimension("series")
    ct.add_dimension("category")
    spec = GroupingSpec.parse("series, category", ct)
    assert spec.dimension_names == ("series", "category")
    assert not spec.is_single_dimension
    assert str(spec) == "series, category"
    assert GroupingSpec.parse(["series"], ct).is_single_dimension


def test_grouping_spec_rejects_empty_and_unknown() -> None:
    ct = ComplexType()
    ct.add_dimension("series")
    with pytest.raises(ArgumentInvalidError):
        GroupingSpec.parse("", ct)
    with pytest.raises(ArgumentInvalidError):
        GroupingSpec.parse("series, nope", ct)
