"""Column metadata, dimension types and grouping specifications."""

from __future__ import annotations

import re
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from panelchart.core.errors import ArgumentInvalidError

DIMENSION_KINDS = ("string", "number", "date")

_NAME_LEVEL = re.compile(r"^(.*?)(\d*)$")


class ColumnMetadata(BaseModel):
    """One column descriptor of the input: {colIndex, colName, colLabel, colType}."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    index: int = Field(alias="colIndex")
    name: str = Field(alias="colName")
    label: str | None = Field(default=None, alias="colLabel")
    type: str = Field(default="STRING", alias="colType")

    @property
    def is_numeric(self) -> bool:
        return self.type.upper() in {"NUMERIC", "NUMBER", "INTEGER", "FLOAT", "DOUBLE"}


def split_dimension_name(name: str) -> tuple[str, int]:
    """
    'series' -> ('series', 0), 'series2' -> ('series', 1).
    """
    m = _NAME_LEVEL.match(name)
    assert m is not None
    group, digits = m.group(1), m.group(2)
    if not group:
        return name, 0
    level = int(digits) - 1 if digits else 0
    return group, max(level, 0)


def dimension_name(group: str, level: int) -> str:
    return group if level == 0 else f"{group}{level + 1}"


@dataclass(frozen=True)
class DimensionType:
    name: str
    kind: str = "string"
    label: str | None = None
    formatter: Callable[[Any], str] | None = None

    @property
    def group(self) -> str:
        return split_dimension_name(self.name)[0]

    @property
    def group_level(self) -> int:
        return split_dimension_name(self.name)[1]

    def format(self, value: Any) -> str:
        if value is None:
            return ""
        if self.formatter is not None:
            return str(self.formatter(value))
        if hasattr(value, "isoformat"):
            return value.isoformat()
        return str(value)


class ComplexType:
    """
    Ordered set of named, typed dimensions describing the bound dataset.
    """

    def __init__(self) -> None:
        self._dimensions: dict[str, DimensionType] = {}

    def add_dimension(
        self,
        name: str,
        kind: str = "string",
        label: str | None = None,
        formatter: Callable[[Any], str] | None = None,
    ) -> DimensionType:
        """Define a dimension, or refine the existing one with the same name."""
        if kind not in DIMENSION_KINDS:
            raise ArgumentInvalidError("kind", f"Unknown dimension kind '{kind}'.")

        existing = self._dimensions.get(name)
        if existing is not None:
            dim = DimensionType(
                name=name,
                kind=kind,
                label=label or existing.label,
                formatter=formatter or existing.formatter,
            )
        else:
            dim = DimensionType(name=name, kind=kind, label=label, formatter=formatter)
        self._dimensions[name] = dim
        return dim

    def __contains__(self, name: object) -> bool:
        return name in self._dimensions

    def __len__(self) -> int:
        return len(self._dimensions)

    @property
    def dimension_names(self) -> list[str]:
        return list(self._dimensions)

    def dimension(self, name: str, assert_exists: bool = True) -> DimensionType | None:
        dim = self._dimensions.get(name)
        if dim is None and assert_exists:
            raise ArgumentInvalidError("name", f"Undefined dimension '{name}'.")
        return dim

    def group_dimension_names(self, group: str, assert_exists: bool = True) -> list[str] | None:
        """Names of the dimensions of a group, ordered by level."""
        dims = sorted(
            (d for d in self._dimensions.values() if d.group == group),
            key=lambda d: d.group_level,
        )
        if not dims:
            if assert_exists:
                raise ArgumentInvalidError("group", f"Undefined dimension group '{group}'.")
            return None
        return [d.name for d in dims]


@dataclass(frozen=True)
class GroupingSpec:
    """Which dimensions to group a dataset by."""

    dimension_names: tuple[str, ...]

    @classmethod
    def parse(cls, spec: str | Sequence[str], complex_type: ComplexType) -> GroupingSpec:
        if isinstance(spec, str):
            names = [n.strip() for n in spec.split(",") if n.strip()]
        else:
            names = [str(n).strip() for n in spec]

        if not names:
            raise ArgumentInvalidError("spec", "Grouping specification is empty.")

        unknown = [n for n in names if n not in complex_type]
        if unknown:
            raise ArgumentInvalidError("spec", f"Undefined dimensions in grouping: {unknown}")

        return cls(dimension_names=tuple(names))

    @property
    def is_single_dimension(self) -> bool:
        return len(self.dimension_names) == 1

    def __str__(self) -> str:
        return ", ".join(self.dimension_names)
