"""Bind raw rows + column metadata to a typed data engine and visual roles."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from panelchart.charts.roles import VisualRole, init_roles
from panelchart.core.options import ChartOptions
from panelchart.data.engine import DataEngine
from panelchart.data.schema import ColumnMetadata, ComplexType
from panelchart.data.translation import create_translation

logger = logging.getLogger(__name__)


def log_resultset(
    resultset: Sequence[Sequence[Any]],
    metadata: Sequence[ColumnMetadata | Mapping[str, Any]],
) -> None:
    if not logger.isEnabledFor(logging.DEBUG):
        return
    logger.debug("ROWS")
    for index, row in enumerate(resultset):
        logger.debug("row %d: %r", index, list(row))
    logger.debug("COLS")
    for col in metadata:
        if not isinstance(col, ColumnMetadata):
            col = ColumnMetadata.model_validate(col)
        logger.debug(
            "column {index: %s, name: %s, label: %s, type: %s}", col.index, col.name, col.label, col.type
        )


def bind_data(
    resultset: Sequence[Sequence[Any]],
    metadata: Sequence[ColumnMetadata | Mapping[str, Any]],
    options: ChartOptions,
    complex_type: ComplexType | None = None,
) -> tuple[DataEngine, dict[str, VisualRole]]:
    """
    Build the root data engine and resolve visual roles.

    Without a preexisting type, one is derived from the column metadata by the
    translation operator chosen by `options.crosstab_mode`.
    """
    log_resultset(resultset, metadata)

    complex_type = complex_type if complex_type is not None else ComplexType()
    translation = create_translation(complex_type, resultset, metadata, options)
    translation.configure_type()

    data_engine = DataEngine(complex_type)
    roles = init_roles(complex_type, options.roles)
    data_engine.load(translation.execute(data_engine))

    logger.debug("Bound roles: %s", {name: str(r.grouping) for name, r in roles.items()})
    return data_engine, roles
