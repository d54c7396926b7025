"""Typed dataset store over a pandas DataFrame, with grouping into slices."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from typing import Any

import pandas as pd

from panelchart.data.schema import ComplexType, GroupingSpec

_VISIBLE = "__visible__"
_LABEL_SEPARATOR = " ~ "


class DataEngine:
    """
    Dataset bound to a ComplexType.

    The root engine is created by the chart binding step; grouping produces a
    grouping node whose `leaves` are DataEngine slices sharing the same type.
    """

    def __init__(
        self,
        type: ComplexType,
        frame: pd.DataFrame | None = None,
        parent: DataEngine | None = None,
        key: Mapping[str, Any] | None = None,
        label: str = "",
    ) -> None:
        self.type = type
        self.parent = parent
        self.key: dict[str, Any] = dict(key or {})
        self.label = label
        self.leaves: list[DataEngine] = []
        self._frame = frame if frame is not None else self._empty_frame()

    # ---------------------------
    # Loading
    # ---------------------------

    def _empty_frame(self) -> pd.DataFrame:
        cols = self.type.dimension_names + [_VISIBLE]
        return pd.DataFrame(columns=cols)

    def load(self, rows: Iterable[Mapping[str, Any]]) -> None:
        """Replace the engine's content with typed rows (dimension name -> value)."""
        names = self.type.dimension_names
        df = pd.DataFrame(list(rows), columns=names)

        for name in names:
            kind = self.type.dimension(name).kind
            if kind == "number":
                df[name] = pd.to_numeric(df[name], errors="coerce")
            elif kind == "date":
                df[name] = pd.to_datetime(df[name], errors="coerce")

        df[_VISIBLE] = True
        self._frame = df.reset_index(drop=True)
        self.leaves = []

    # ---------------------------
    # Access
    # ---------------------------

    @property
    def frame(self) -> pd.DataFrame:
        """Dimension columns only."""
        return self._frame.drop(columns=[_VISIBLE])

    def __len__(self) -> int:
        return len(self._frame)

    @property
    def is_empty(self) -> bool:
        return len(self._frame) == 0

    @property
    def abs_label(self) -> str:
        parent_label = self.parent.abs_label if self.parent is not None else ""
        if parent_label and self.label:
            return f"{parent_label}{_LABEL_SEPARATOR}{self.label}"
        return self.label or parent_label

    def values(self, dimension: str, visible: bool | None = None) -> list[Any]:
        return self._select(visible)[dimension].tolist()

    def set_visible(self, mask: bool | Sequence[bool] | pd.Series) -> None:
        """Mark datums visible/hidden (a single bool applies to all)."""
        self._frame[_VISIBLE] = mask

    def _select(self, visible: bool | None) -> pd.DataFrame:
        if visible is None:
            return self._frame
        return self._frame[self._frame[_VISIBLE] == visible]

    # ---------------------------
    # Grouping
    # ---------------------------

    def group_by(self, grouping: GroupingSpec, visible: bool | None = None) -> DataEngine:
        """
        Group by the grouping's dimensions.

        Returns a grouping node over the selected datums; its `leaves` hold one
        slice per distinct key, in order of first appearance.
        """
        selected = self._select(visible)
        node = DataEngine(self.type, frame=selected, parent=self.parent, key=self.key, label=self.label)

        dims = list(grouping.dimension_names)
        if selected.empty:
            return node

        for key, sub in selected.groupby(dims, sort=False, dropna=False):
            if not isinstance(key, tuple):
                key = (key,)
            key_map = dict(zip(dims, key))
            label = _LABEL_SEPARATOR.join(
                self.type.dimension(d).format(None if pd.isna(v) else v) for d, v in key_map.items()
            )
            node.leaves.append(
                DataEngine(self.type, frame=sub.reset_index(drop=True), parent=node, key=key_map, label=label)
            )
        return node

    def get_info(self) -> str:
        visible = int(self._frame[_VISIBLE].sum()) if len(self._frame) else 0
        lines = [f"DataEngine '{self.abs_label}': {len(self)} datums ({visible} visible)"]
        for name in self.type.dimension_names:
            dim = self.type.dimension(name)
            distinct = self._frame[name].nunique(dropna=True) if name in self._frame else 0
            lines.append(f"  {name} ({dim.kind}): {distinct} distinct")
        return "\n".join(lines)
