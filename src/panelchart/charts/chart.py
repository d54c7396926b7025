"""The chart node: options, data binding, panel composition and the render lifecycle."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from panelchart.charts.binding import bind_data
from panelchart.charts.composer import compose_panels, init_base_panel
from panelchart.charts.multichart import Facet, replicate
from panelchart.charts.roles import VisualRole
from panelchart.charts.variant import ChartVariant
from panelchart.core.constants import (
    NO_DATA_EXTENSION_PREFIX,
    NO_DATA_MESSAGE,
    TRANSITION_DURATION_S,
    TRANSITION_EASING,
    Anchor,
    Orientation,
    RenderState,
)
from panelchart.core.errors import (
    ArgumentInvalidError,
    ArgumentRequiredError,
    NoDataError,
    OperationInvalidError,
)
from panelchart.core.options import ChartOptions, as_index_list, merge_options, option_value
from panelchart.data.engine import DataEngine
from panelchart.data.schema import ColumnMetadata
from panelchart.viz.backend import RenderBackend
from panelchart.viz.colors import ColorScheme, create_color_scheme
from panelchart.viz.extensions import apply_extensions
from panelchart.viz.panels import BasePanel, Label, LegendPanel, Panel, TitlePanel
from panelchart.viz.transition import Scheduler, TransitionHandle

logger = logging.getLogger(__name__)


class Chart:
    """
    A chart instance in a chart tree.

    The root chart is built by the caller and owns the resultset; facet
    charts are built by the multi-chart replicator with `parent` and
    `data_engine` options and share the root's visual roles.

    Building has two stages: `pre_render()` prepares every object that will
    be used (options, data, panels, facets) and `render()` paints them,
    optionally through an animated transition.
    """

    def __init__(
        self,
        options: Mapping[str, Any] | ChartOptions | None = None,
        *,
        variant: ChartVariant | None = None,
        backend: RenderBackend | None = None,
        scheduler: Scheduler | None = None,
    ) -> None:
        self.parent: Chart | None = option_value(options, "parent")

        if self.parent is not None:
            self.root: Chart = self.parent.root
            self.owner: Chart = self.parent.owner
            self.data_engine: DataEngine | None = option_value(options, "data_engine")
            if self.data_engine is None:
                raise ArgumentRequiredError("options.data_engine")
            self.left = option_value(options, "left")
            self.top = option_value(options, "top")
            self._role_specs: dict[str, VisualRole] = self.parent._role_specs
        else:
            self.root = self
            self.owner = self
            self.data_engine = None
            self.left = None
            self.top = None
            self._role_specs = {}

        inherited = self.parent
        self.variant = variant or (inherited.variant if inherited else ChartVariant())
        self.backend = backend or (inherited.backend if inherited else RenderBackend.detect())
        # None schedules on the paint surface's canvas timer
        self.scheduler = scheduler or (inherited.scheduler if inherited else None)

        self.options = ChartOptions.model_validate(merge_options(self.variant.default_options, options))

        self.resultset: list[Sequence[Any]] = []
        self.metadata: list[ColumnMetadata] = []
        self._data_dirty = True

        self.base_panel: BasePanel | None = None
        self.title_panel: TitlePanel | None = None
        self.legend_panel: LegendPanel | None = None
        self.content_panel: Panel | None = None
        self.facets: list[Facet] = []
        self._no_data_message: Label | None = None

        self.legend_source = "series"
        self.colors: ColorScheme | None = None
        self.second_axis_color: ColorScheme | None = None

        self.render_version = 0
        self.is_pre_rendered = False
        self.is_animating = False
        self._render_animation_start = False
        self._transition: TransitionHandle | None = None
        self._render_serial = 0
        self._state = RenderState.UNINITIALIZED

    def __repr__(self) -> str:
        kind = "root" if self.parent is None else "facet"
        return f"<Chart {self.variant.name} {kind} v{self.render_version}>"

    @property
    def state(self) -> RenderState:
        return self._state

    @property
    def no_data_message(self) -> Label | None:
        """The fallback label painted by the last no-data render, if any."""
        return self._no_data_message

    # ---------------------------
    # Data
    # ---------------------------

    def set_data(self, data: Mapping[str, Any], options: Mapping[str, Any] | None = None) -> None:
        """
        Set data shaped like {"metadata": [...], "resultset": [...]}, and
        optionally merge more options over the current ones.
        """
        self.set_resultset(data.get("resultset") or [])
        self.set_metadata(data.get("metadata") or [])
        if options:
            self.options = ChartOptions.model_validate(merge_options(self.options, options))

    def set_resultset(self, resultset: Sequence[Sequence[Any]]) -> None:
        if self.parent is not None:
            raise OperationInvalidError("Can only set resultset on root chart.")
        self.resultset = list(resultset)
        self._data_dirty = True
        if not self.resultset:
            logger.warning("Resultset is empty")

    def set_metadata(self, metadata: Sequence[ColumnMetadata | Mapping[str, Any]]) -> None:
        if self.parent is not None:
            raise OperationInvalidError("Can only set metadata on root chart.")
        self.metadata = [
            m if isinstance(m, ColumnMetadata) else ColumnMetadata.model_validate(m) for m in metadata
        ]
        self._data_dirty = True
        if not self.metadata:
            logger.warning("Metadata is empty")

    def _init_data_engine(self) -> None:
        if self.parent is None and (self._data_dirty or self.data_engine is None):
            self.data_engine, self._role_specs = bind_data(self.resultset, self.metadata, self.options)
            self._data_dirty = False

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(self.data_engine.get_info())

    # ---------------------------
    # Visual roles
    # ---------------------------

    def data_for(
        self,
        role_name: str,
        *,
        assert_exists: bool = True,
        visible: bool | None = None,
    ) -> DataEngine | None:
        """
        The chart's data grouped by a role's grouping, or None for an
        unresolved role when `assert_exists` is False.
        """
        role = self._role_specs.get(role_name)
        if role is None:
            if assert_exists:
                raise ArgumentInvalidError("role_name", f"Undefined role name '{role_name}'.")
            return None
        return self.data_engine.group_by(role.grouping, visible=visible)

    def role_of(
        self, role_name: str | None = None, *, assert_exists: bool = True
    ) -> VisualRole | dict[str, VisualRole] | None:
        """One role by name, or every role when no name is given."""
        if role_name is None:
            return dict(self._role_specs)
        role = self._role_specs.get(role_name)
        if role is None and assert_exists:
            raise ArgumentInvalidError("role_name", f"Undefined role name '{role_name}'.")
        return role

    def has_role(self, role_name: str) -> bool:
        return role_name in self._role_specs

    def legend_entries(self) -> list[tuple[str, str]]:
        data = self.data_for(self.legend_source, assert_exists=False, visible=True)
        if data is None or self.colors is None:
            return []
        return [(leaf.label, self.series_color(leaf.label)) for leaf in data.leaves]

    def second_axis_series(self) -> list[str]:
        """
        Labels of the series plotted against the second axis, picked by index
        among the root's series; negative indexes count from the end.
        """
        options = self.root.options
        series = self.root.data_for("series", assert_exists=False) if options.second_axis else None
        if series is None:
            return []
        labels = [leaf.label for leaf in series.leaves]
        indexes = as_index_list(
            options.second_axis_series_indexes
            if options.second_axis_series_indexes is not None
            else options.second_axis_idx
        )
        return [labels[i] for i in indexes or [] if -len(labels) <= i < len(labels)]

    def series_color(self, label: str) -> str:
        if self.second_axis_color is not None and label in self.second_axis_series():
            return self.second_axis_color(label)
        return self.colors(label)

    # ---------------------------
    # Lifecycle
    # ---------------------------

    def _process_options(self) -> ChartOptions:
        self.variant.process_options(self.options, self)
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("OPTIONS:\n%s", self.options.model_dump(exclude={"parent", "data_engine"}))
        return self.options

    def pre_render(self) -> None:
        self.render_version += 1
        self.is_pre_rendered = False

        logger.debug("Prerendering %r", self)

        # Child charts always have some data
        if self.parent is None and not self.options.allow_no_data and not self.resultset:
            raise NoDataError()

        # Options may be changed between renders
        self._process_options()

        self._init_data_engine()

        if self.parent is None:
            self.colors = create_color_scheme(self.options.colors)
            self.second_axis_color = create_color_scheme(self.options.second_axis_color)
        else:
            # facets color series the same way as the root legend
            self.colors = self.root.colors
            self.second_axis_color = self.root.second_axis_color

        self.facets = []
        self.content_panel = None
        self._no_data_message = None
        compose_panels(self)

        if self.parent is not None or not self.has_role("multi_chart_column"):
            self.variant.pre_render_core(self)
        else:
            self.facets = replicate(self)

        self.is_pre_rendered = True
        self._state = RenderState.PRERENDERED

    def render(self, bypass_animation: bool = False, rebuild: bool = False) -> None:
        """
        Render the chart, pre-rendering first when needed.

        When animating, the start state is painted now and the end state when
        the transition completes. A no-data condition paints a fallback message
        instead of failing.
        """
        self._cancel_transition()
        self._render_serial += 1
        serial = self._render_serial
        try:
            self.is_animating = self._render_animation_start = bool(self.options.animate) and not bypass_animation

            if not self.is_pre_rendered or rebuild:
                self.pre_render()
                # options processing may have switched animation off
                if not self.options.animate:
                    self.is_animating = self._render_animation_start = False

            if self.options.render_callback is not None:
                self.options.render_callback(self)

            # When animating, renders the animation's 'start' point
            self._state = RenderState.RENDER_START
            self.base_panel.render()

            if self.is_animating:
                self._render_animation_start = False
                self._state = RenderState.RENDER_TRANSITIONING
                self._transition = (
                    self.base_panel.transition()
                    .duration(TRANSITION_DURATION_S)
                    .ease(TRANSITION_EASING)
                    .start(lambda: self._on_transition_complete(serial))
                )
            else:
                self._on_render_end(False)

        except NoDataError:
            self._render_no_data()
        except Exception:
            logger.exception("Chart render failed")
            raise

    def _on_transition_complete(self, serial: int) -> None:
        if serial != self._render_serial:
            logger.debug("Ignoring transition end of superseded render %d of %r", serial, self)
            return
        self._transition = None
        # paint the 'end' point
        self.base_panel.render()
        self.is_animating = False
        self._on_render_end(True)

    def _cancel_transition(self) -> None:
        if self._transition is not None:
            if self._transition.cancel():
                logger.debug("Cancelled pending transition of %r", self)
            self._transition = None

    def _render_no_data(self) -> None:
        self.is_animating = self._render_animation_start = False

        if self.base_panel is None:
            logger.debug("No panel")
            self._process_options()
            init_base_panel(self)

        logger.debug("Creating no data message")
        if self._no_data_message is not None and self._no_data_message in self._no_data_message.panel.marks:
            self._no_data_message.panel.marks.remove(self._no_data_message)
        message = self.base_panel.add_mark(Label(self.base_panel, anchor=Anchor.CENTER))
        self._no_data_message = message
        message.text = NO_DATA_MESSAGE
        self.extend(message, NO_DATA_EXTENSION_PREFIX)

        self.base_panel.render()
        self._state = RenderState.RENDER_END

    def animate(self, start: Any, end: Any) -> Any:
        """The start value while the animation's start point is being painted, else the end value."""
        return start if self.root._render_animation_start else end

    def _on_render_end(self, animated: bool) -> None:
        self._state = RenderState.RENDER_END
        self.variant.on_render_end(self, animated)

    # ---------------------------
    # Extension points
    # ---------------------------

    def extend(self, target: Any, prefix: str) -> list[str]:
        """Apply the configured extension points starting with `prefix` to `target`."""
        return apply_extensions(target, prefix, self.options.extension_points)

    def get_extension(self, *parts: str) -> Any:
        """The extension point value for the key `parts` joined with '_'."""
        points = self.options.extension_points
        if not points:
            return None
        return points.get("_".join(parts))

    def is_orientation_vertical(self, orientation: str | None = None) -> bool:
        return (orientation or self.options.orientation) == Orientation.VERTICAL.value

    def is_orientation_horizontal(self, orientation: str | None = None) -> bool:
        return (orientation or self.options.orientation) == Orientation.HORIZONTAL.value
