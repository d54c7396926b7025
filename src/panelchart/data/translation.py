"""Translation operators: raw rows + column metadata -> typed dimensional rows."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any

import pandas as pd

from panelchart.core.constants import DEFAULT_CROSSTAB_SEPARATOR
from panelchart.core.errors import ArgumentInvalidError
from panelchart.core.options import ChartOptions, as_index_list, snake_case
from panelchart.data.engine import DataEngine
from panelchart.data.schema import (
    ColumnMetadata,
    ComplexType,
    dimension_name,
    split_dimension_name,
)

logger = logging.getLogger(__name__)


@dataclass
class TranslationOptions:
    """Options bag handed to a translation operator."""

    crosstab_mode: bool = True
    series_in_rows: bool = False
    is_multi_valued: bool = False
    dimensions: dict[str, Any] | None = None
    readers: list[Any] | None = None

    measures_indexes: list[int] | None = None  # relational multi-valued

    multi_chart_column_indexes: list[int] | None = None
    multi_chart_row_indexes: list[int] | None = None

    # crosstab
    separator: str | None = None
    measures_in_columns: bool | None = None
    measures_index: int | None = None
    measures_count: int | None = None
    categories_count: int | None = None

    is_category_time_series: bool = False
    category_time_series_format: str | None = None

    category_formatter: Callable[[Any], str] | None = None
    series_formatter: Callable[[Any], str] | None = None


def build_translation_options(options: ChartOptions) -> TranslationOptions:
    data_options = {snake_case(k): v for k, v in (options.data_options or {}).items()}
    measures_index = data_options.get("measures_index", data_options.get("measures_idx"))
    measures_count = data_options.get("measures_count", data_options.get("num_measures"))
    categories_count = data_options.get("categories_count")

    return TranslationOptions(
        crosstab_mode=bool(options.crosstab_mode),
        series_in_rows=bool(options.series_in_rows),
        is_multi_valued=bool(options.is_multi_valued),
        dimensions=options.dimensions,
        readers=options.readers,
        measures_indexes=as_index_list(options.measures_indexes),
        multi_chart_column_indexes=as_index_list(options.multi_chart_column_indexes),
        multi_chart_row_indexes=as_index_list(options.multi_chart_row_indexes),
        separator=data_options.get("separator"),
        measures_in_columns=data_options.get("measures_in_columns"),
        measures_index=int(measures_index) if measures_index is not None else None,
        measures_count=int(measures_count) if measures_count is not None else None,
        categories_count=int(categories_count) if categories_count is not None else None,
        is_category_time_series=bool(options.time_series),
        category_time_series_format=options.time_series_format if options.time_series else None,
        category_formatter=options.get_category_label,
        series_formatter=options.get_series_label,
    )


class TranslationOperator:
    """
    Base translation: owns the column plan and dimension definitions.

    Subclasses decide which columns feed which dimensions (`_reader_plan`) and
    how rows are emitted (`execute`).
    """

    def __init__(
        self,
        complex_type: ComplexType,
        resultset: Sequence[Sequence[Any]],
        metadata: Sequence[ColumnMetadata | Mapping[str, Any]],
        options: TranslationOptions,
    ) -> None:
        self.complex_type = complex_type
        self.resultset = list(resultset)
        self.metadata = [
            m if isinstance(m, ColumnMetadata) else ColumnMetadata.model_validate(m) for m in metadata
        ]
        self.options = options
        self._plan: list[tuple[str, int]] | None = None

    @property
    def column_count(self) -> int:
        if self.metadata:
            return len(self.metadata)
        return len(self.resultset[0]) if self.resultset else 0

    def column(self, index: int) -> ColumnMetadata | None:
        for m in self.metadata:
            if m.index == index:
                return m
        return self.metadata[index] if 0 <= index < len(self.metadata) else None

    # ---------------------------
    # Column plan
    # ---------------------------

    def _explicit_readers(self) -> list[tuple[str, int]]:
        plan: list[tuple[str, int]] = []
        for reader in self.options.readers or []:
            names = reader.get("names")
            indexes = as_index_list(reader.get("indexes"))
            if isinstance(names, str):
                names = [n.strip() for n in names.split(",") if n.strip()]
            if not names or indexes is None:
                raise ArgumentInvalidError("readers", f"Reader needs 'names' and 'indexes': {reader!r}")
            if len(names) != len(indexes):
                raise ArgumentInvalidError("readers", f"Reader names/indexes length mismatch: {reader!r}")
            plan.extend(zip(names, indexes))
        return plan

    def _grouped_plan(self, group: str, indexes: list[int] | None, used: set[int]) -> list[tuple[str, int]]:
        plan = []
        for level, index in enumerate(i for i in (indexes or []) if i not in used):
            plan.append((dimension_name(group, level), index))
            used.add(index)
        return plan

    def _reader_plan(self) -> list[tuple[str, int]]:
        raise NotImplementedError

    @property
    def plan(self) -> list[tuple[str, int]]:
        if self._plan is None:
            self._plan = self._reader_plan()
        return self._plan

    # ---------------------------
    # Type configuration
    # ---------------------------

    def _kind_for(self, name: str, column: ColumnMetadata | None) -> str:
        group = split_dimension_name(name)[0]
        if group == "value":
            return "number"
        if group == "category" and self.options.is_category_time_series:
            return "date"
        if column is not None and column.is_numeric:
            return "number"
        return "string"

    def _formatter_for(self, name: str) -> Callable[[Any], str] | None:
        group = split_dimension_name(name)[0]
        if group == "category":
            return self.options.category_formatter
        if group == "series":
            return self.options.series_formatter
        return None

    def _define(self, name: str, column: ColumnMetadata | None, kind: str | None = None) -> None:
        label = (column.label or column.name) if column is not None else None
        self.complex_type.add_dimension(
            name,
            kind=kind or self._kind_for(name, column),
            label=label,
            formatter=self._formatter_for(name),
        )

    def configure_type(self) -> None:
        """Define (or confirm) the dimensions this translation will fill."""
        for name, index in self.plan:
            self._define(name, self.column(index))
        self._define_derived()
        self._apply_dimension_overrides()

    def _define_derived(self) -> None:
        """Dimensions not read from a single column (none by default)."""

    def _apply_dimension_overrides(self) -> None:
        for name, spec in (self.options.dimensions or {}).items():
            spec = {snake_case(k): v for k, v in (spec or {}).items()}
            existing = self.complex_type.dimension(name, assert_exists=False)
            kind = spec.get("kind") or spec.get("value_type")
            self.complex_type.add_dimension(
                name,
                kind=kind or (existing.kind if existing else "string"),
                label=spec.get("label"),
                formatter=spec.get("formatter"),
            )

    # ---------------------------
    # Execution
    # ---------------------------

    def _read(self, name: str, value: Any) -> Any:
        if value is None:
            return None
        dim = self.complex_type.dimension(name)
        if dim.kind == "date":
            fmt = self.options.category_time_series_format
            return pd.to_datetime(value, format=fmt) if fmt else pd.to_datetime(value)
        if dim.kind == "number":
            try:
                return float(value)
            except (TypeError, ValueError):
                return None
        return value

    def execute(self, data_engine: DataEngine) -> list[dict[str, Any]]:
        raise NotImplementedError


class RelationalTranslation(TranslationOperator):
    """
    One datum per input row.

    Default plan: multi-chart columns first, then the measure column(s)
    (last column, or `measures_indexes` when multi-valued); of the remaining
    columns a single one is the category, otherwise the first is the series
    and the rest are categories.
    """

    def _reader_plan(self) -> list[tuple[str, int]]:
        plan = self._explicit_readers()
        used = {index for _, index in plan}
        taken = {name for name, _ in plan}

        plan += self._grouped_plan("multi_chart_column", self.options.multi_chart_column_indexes, used)
        plan += self._grouped_plan("multi_chart_row", self.options.multi_chart_row_indexes, used)

        free = [i for i in range(self.column_count) if i not in used]
        if "value" not in taken and free:
            if self.options.is_multi_valued and self.options.measures_indexes:
                measures = [i for i in self.options.measures_indexes if i in free]
            else:
                measures = [free[-1]]
            plan += self._grouped_plan("value", measures, used)
            free = [i for i in free if i not in used]

        if len(free) == 1:
            plan += self._grouped_plan("category", free, used)
        elif free:
            plan += self._grouped_plan("series", free[:1], used)
            plan += self._grouped_plan("category", free[1:], used)
        return plan

    def execute(self, data_engine: DataEngine) -> list[dict[str, Any]]:
        rows = []
        for raw in self.resultset:
            rows.append(
                {name: self._read(name, raw[index] if index < len(raw) else None) for name, index in self.plan}
            )
        logger.debug("Relational translation produced %d datums", len(rows))
        return rows


class CrosstabTranslation(TranslationOperator):
    """
    Pivoted input: leading columns are categories, every other column is one
    series whose name is the column name; cells are values. `series_in_rows`
    swaps the series and category roles.

    Multi-valued crosstabs carry several measures per series, either as
    `measures_count` adjacent columns headed "<series><separator><measure>"
    (measures in columns, the default) or as one row per measure with the
    measure name in the `measures_index` column (measures in rows). The n-th
    measure fills the `value`, `value2`, ... dimensions.
    """

    @property
    def _row_group(self) -> str:
        return "series" if self.options.series_in_rows else "category"

    @property
    def _column_group(self) -> str:
        return "category" if self.options.series_in_rows else "series"

    @property
    def _measures_in_rows(self) -> bool:
        return self.options.is_multi_valued and self.options.measures_in_columns is False

    def _reader_plan(self) -> list[tuple[str, int]]:
        used: set[int] = set()
        plan = self._grouped_plan("multi_chart_column", self.options.multi_chart_column_indexes, used)
        plan += self._grouped_plan("multi_chart_row", self.options.multi_chart_row_indexes, used)

        count = self.options.categories_count or 1
        free = [i for i in range(self.column_count) if i not in used]
        plan += self._grouped_plan(self._row_group, free[:count], used)
        return plan

    @property
    def measure_name_index(self) -> int | None:
        """The column naming each row's measure; only when measures are in rows."""
        if not self._measures_in_rows:
            return None
        if self.options.measures_index is not None:
            return self.options.measures_index
        planned = {index for _, index in self.plan}
        free = [i for i in range(self.column_count) if i not in planned]
        return free[0] if free else None

    @property
    def measure_indexes(self) -> list[int]:
        skipped: set[int | None] = {index for _, index in self.plan}
        skipped.add(self.measure_name_index)
        return [i for i in range(self.column_count) if i not in skipped]

    @property
    def measures_per_series(self) -> int:
        if self.options.is_multi_valued and not self._measures_in_rows:
            return max(self.options.measures_count or 1, 1)
        return 1

    def row_measure_names(self) -> list[str]:
        """Measure names found in the measure name column, in order of first appearance."""
        index = self.measure_name_index
        names: list[str] = []
        if index is None:
            return names
        for raw in self.resultset:
            if index < len(raw) and raw[index] is not None and str(raw[index]) not in names:
                names.append(str(raw[index]))
        return names

    def _define_derived(self) -> None:
        self._define(self._column_group, None, kind="string")
        count = len(self.row_measure_names()) if self._measures_in_rows else self.measures_per_series
        for level in range(max(count, 1)):
            self._define(dimension_name("value", level), None, kind="number")

    def _header(self, index: int) -> str:
        col = self.column(index)
        return col.name if col is not None else str(index)

    def _series_name(self, index: int) -> str:
        header = self._header(index)
        if not self.options.is_multi_valued:
            return header
        return header.split(self.options.separator or DEFAULT_CROSSTAB_SEPARATOR)[0]

    def _base(self, raw: Sequence[Any]) -> dict[str, Any]:
        return {name: self._read(name, raw[index] if index < len(raw) else None) for name, index in self.plan}

    def _cell(self, raw: Sequence[Any], index: int, level: int) -> Any:
        return self._read(dimension_name("value", level), raw[index] if index < len(raw) else None)

    def execute(self, data_engine: DataEngine) -> list[dict[str, Any]]:
        rows = self._execute_measures_in_rows() if self._measures_in_rows else self._execute_measures_in_columns()
        logger.debug("Crosstab translation produced %d datums", len(rows))
        return rows

    def _execute_measures_in_columns(self) -> list[dict[str, Any]]:
        step = self.measures_per_series
        indexes = self.measure_indexes
        rows = []
        for raw in self.resultset:
            base = self._base(raw)
            for start in range(0, len(indexes), step):
                chunk = indexes[start:start + step]
                row = dict(base)
                row[self._column_group] = self._series_name(chunk[0])
                for level, index in enumerate(chunk):
                    row[dimension_name("value", level)] = self._cell(raw, index, level)
                rows.append(row)
        return rows

    def _execute_measures_in_rows(self) -> list[dict[str, Any]]:
        names = self.row_measure_names()
        name_index = self.measure_name_index
        merged: dict[tuple[Any, ...], dict[str, Any]] = {}
        for raw in self.resultset:
            measure = raw[name_index] if name_index is not None and name_index < len(raw) else None
            if measure is None:
                logger.debug("Skipping crosstab row without a measure name: %r", raw)
                continue
            level = names.index(str(measure))
            base = self._base(raw)
            key = tuple(base.values())
            for index in self.measure_indexes:
                header = self._header(index)
                row = merged.setdefault(key + (header,), {**base, self._column_group: header})
                row[dimension_name("value", level)] = self._cell(raw, index, level)
        return list(merged.values())


def create_translation(
    complex_type: ComplexType,
    resultset: Sequence[Sequence[Any]],
    metadata: Sequence[ColumnMetadata | Mapping[str, Any]],
    options: ChartOptions,
) -> TranslationOperator:
    transl_options = build_translation_options(options)
    cls = CrosstabTranslation if transl_options.crosstab_mode else RelationalTranslation
    return cls(complex_type, resultset, metadata, transl_options)
