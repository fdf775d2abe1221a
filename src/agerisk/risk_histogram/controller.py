"""Controller for the interactive risk histogram.

Provides RiskHistogramController, the event-dispatch harness that owns the
FilterState / ZoomController pair, validates control input at the boundary and
re-runs the filter -> bin -> render pipeline after every state change.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Any, Callable, Optional, Union

import pandas as pd
from nicegui import ui
from nicegui.events import GenericEventArguments

from agerisk.utils.logging import get_logger
from agerisk.risk_histogram.binning import BinningEngine
from agerisk.risk_histogram.control_panel import RiskControlPanel
from agerisk.risk_histogram.errors import InvalidFilterMode, InvalidRangeSelection, InvalidZoomRange
from agerisk.risk_histogram.figure_generator import FigureGenerator
from agerisk.risk_histogram.filter_engine import FilterEngine
from agerisk.risk_histogram.filter_state import FilterState
from agerisk.risk_histogram.histogram_config import HistogramConfig
from agerisk.risk_histogram.render_model import EmptyReason, RenderModel, on_state_change
from agerisk.risk_histogram.row_store import AGE, RawRows, RowStore
from agerisk.risk_histogram.theme import HistogramTheme, ThemeMode, get_histogram_theme
from agerisk.risk_histogram.zoom_controller import ZoomController, ZoomState

logger = get_logger(__name__)


def _safe_call(func: Callable, *args, **kwargs) -> None:
    """Safely call a function, catching 'client deleted' RuntimeErrors only."""
    try:
        func(*args, **kwargs)
    except RuntimeError as e:
        if "deleted" not in str(e).lower():
            raise


def _relayout_payload(raw: Any) -> dict:
    if isinstance(raw, list) and len(raw) == 1 and isinstance(raw[0], dict):
        return raw[0]
    if isinstance(raw, dict):
        return raw
    return {}


class RiskHistogramController:
    """Interactive stacked age histogram (low vs. high disease risk) with NiceGUI.

    **Public API:**

    - **__init__(rows, ...)** — Load records (RowStore, DataFrame or iterable of mappings).
    - **build(container=None)** — Render controls and chart. Call once.
    - **set_alcohol_mode / set_smoker_mode(mode)** — Tri-state filters, 0/1/2.
    - **set_sleep_range / set_steps_range(low, high)** — Range filters, clamped to the extent.
    - **commit_zoom(x0, x1) / clear_selection() / reset_zoom()** — Zoom state machine.
    - **set_theme(theme)** — "light" or "dark".
    - **render_model** — The RenderModel of the most recent recompute.

    Mutators return True if the state changed. They return False if the input
    was rejected, in which case the previous state stays in effect, or if it
    left the state as it was.
    """

    def __init__(
        self,
        rows: Union[RowStore, RawRows],
        *,
        config: Optional[HistogramConfig] = None,
        theme: Union[str, ThemeMode] = ThemeMode.LIGHT,
        on_render: Optional[Callable[[RenderModel], None]] = None,
    ) -> None:
        """
        Args:
            rows: Records to explore. Anything other than a RowStore is passed to RowStore.load().
            config: Display configuration. Defaults to HistogramConfig().
            theme: Initial color theme.
            on_render: Optional callback invoked with each new RenderModel.
        """
        self.row_store = rows if isinstance(rows, RowStore) else RowStore.load(rows)
        self.config = config if config is not None else HistogramConfig()
        self._theme: HistogramTheme = get_histogram_theme(theme)
        self._on_render = on_render

        self.binning_engine = BinningEngine(self.config.overview_bin_step, self.config.zoom_bin_step)
        self.figure_generator = FigureGenerator(self.config)

        if self.row_store.is_empty:
            logger.warning("No usable records; the histogram will show the empty state")
            self.filter_state: Optional[FilterState] = None
            age_extent = None
        else:
            self.filter_state = FilterState.for_store(self.row_store)
            age_extent = self.row_store.extent_of(AGE)
        self.zoom_controller = ZoomController(age_extent=age_extent, on_change=self._on_zoom_change)

        # UI handles
        self._plot: Optional[ui.plotly] = None
        self._control_panel: Optional[RiskControlPanel] = None
        self._dark_mode: Optional[ui.dark_mode] = None

        self.render_model: RenderModel = self._recompute()

    # -----------------------------
    # State accessors
    # -----------------------------
    @property
    def zoom_state(self) -> ZoomState:
        return self.zoom_controller.state

    @property
    def theme(self) -> HistogramTheme:
        return self._theme

    def visible_rows(self) -> pd.DataFrame:
        """Rows passing the current filters (independent of zoom)."""
        if self.filter_state is None:
            return self.row_store.df.copy()
        return FilterEngine(self.row_store).visible_rows(self.filter_state)

    # -----------------------------
    # Filter mutators
    # -----------------------------
    def set_alcohol_mode(self, mode: Any) -> bool:
        return self._apply_filter_change("alcohol_mode", lambda s: s.set_alcohol_mode(mode))

    def set_smoker_mode(self, mode: Any) -> bool:
        return self._apply_filter_change("smoker_mode", lambda s: s.set_smoker_mode(mode))

    def set_sleep_range(self, low: Any, high: Any) -> bool:
        return self._apply_filter_change("sleep_range", lambda s: s.set_sleep_range(low, high))

    def set_steps_range(self, low: Any, high: Any) -> bool:
        return self._apply_filter_change("steps_range", lambda s: s.set_steps_range(low, high))

    def reset_filters(self) -> bool:
        return self._apply_filter_change("all filters", lambda s: s.reset())

    def _apply_filter_change(self, what: str, mutate: Callable[[FilterState], None]) -> bool:
        if self.filter_state is None:
            logger.warning(f"Ignoring {what} change: no data loaded")
            return False
        before = replace(self.filter_state)
        try:
            mutate(self.filter_state)
        except (InvalidFilterMode, InvalidRangeSelection) as e:
            logger.warning(f"Rejected {what} change: {e}")
            self._sync_controls()
            return False
        if self.filter_state == before:
            logger.debug(f"{what} unchanged")
            self._sync_controls()
            return False

        self.refresh()
        if self.render_model.empty_reason is EmptyReason.NO_MATCHES and self.zoom_state.is_zoomed:
            logger.info("Filters left no visible rows; resetting zoom to overview")
            self.zoom_controller.reset_to_overview()
        return True

    # -----------------------------
    # Zoom mutators
    # -----------------------------
    def commit_zoom(self, raw_x0: Any, raw_x1: Any) -> bool:
        before = self.zoom_state
        try:
            self.zoom_controller.commit(raw_x0, raw_x1)
        except InvalidZoomRange as e:
            logger.warning(f"Rejected zoom selection: {e}")
            return False
        return self.zoom_state != before

    def clear_selection(self) -> bool:
        """Brush ended with an empty selection. Never changes the zoom."""
        self.zoom_controller.clear_selection_only()
        return False

    def reset_zoom(self) -> bool:
        was_zoomed = self.zoom_state.is_zoomed
        self.zoom_controller.reset_to_overview()
        return was_zoomed

    def _on_zoom_change(self, _state: ZoomState) -> None:
        self.refresh()

    # -----------------------------
    # Theme
    # -----------------------------
    def set_theme(self, theme: Union[str, ThemeMode]) -> bool:
        new_theme = get_histogram_theme(theme)
        if new_theme == self._theme:
            return False
        self._theme = new_theme
        logger.info(f"Theme -> {new_theme.mode.value}")
        if self._dark_mode is not None:
            self._dark_mode.value = new_theme.mode is ThemeMode.DARK
        self.refresh()
        return True

    # -----------------------------
    # Pipeline
    # -----------------------------
    def _recompute(self) -> RenderModel:
        return on_state_change(
            self.row_store,
            self.filter_state,
            self.zoom_controller.state,
            binning_engine=self.binning_engine,
        )

    def refresh(self) -> None:
        """Re-run filter -> bin -> render from scratch and push the result to the UI."""
        self.render_model = self._recompute()
        model = self.render_model
        if self._plot is not None:
            fig_dict = self.figure_generator.make_figure(model, self._theme)
            _safe_call(self._plot.update_figure, fig_dict)
        self._sync_controls()
        if self._on_render is not None:
            self._on_render(model)

    def _sync_controls(self) -> None:
        if self._control_panel is None:
            return
        if self.filter_state is not None:
            _safe_call(
                self._control_panel.sync_controls,
                self.filter_state,
                dark=self._theme.mode is ThemeMode.DARK,
            )
        _safe_call(
            self._control_panel.set_status,
            self.zoom_state,
            self.render_model.visible_count,
            self.render_model.total_count,
        )

    # -----------------------------
    # UI
    # -----------------------------
    def build(self, *, container: Optional[ui.element] = None) -> None:
        """Build the controls and the chart (public API). Call once.

        Args:
            container: Optional NiceGUI container to build into. If None, widgets
                are created at the current top level.
        """
        def _build_content() -> None:
            dark = self._theme.mode is ThemeMode.DARK
            self._dark_mode = ui.dark_mode(value=dark)
            with ui.row().classes("w-full gap-4 no-wrap"):
                with ui.column().classes("w-96"):
                    if self.filter_state is None:
                        ui.label(self.config.no_data_message).classes("text-sm")
                    else:
                        self._control_panel = RiskControlPanel(
                            config=self.config,
                            on_alcohol_change=self.set_alcohol_mode,
                            on_smoker_change=self.set_smoker_mode,
                            on_sleep_change=self.set_sleep_range,
                            on_steps_change=self.set_steps_range,
                            on_dark_change=lambda is_dark: self.set_theme(
                                ThemeMode.DARK if is_dark else ThemeMode.LIGHT
                            ),
                            on_reset_zoom=self.reset_zoom,
                            on_reset_filters=self.reset_filters,
                        )
                        self._control_panel.build(self.filter_state, dark=dark)
                with ui.column().classes("flex-1"):
                    fig_dict = self.figure_generator.make_figure(self.render_model, self._theme)
                    self._plot = ui.plotly(fig_dict).classes("w-full")
                    self._plot.on("plotly_relayout", self._on_plotly_relayout)
                    self._plot.on("plotly_doubleclick", self._on_plotly_doubleclick)
            self._sync_controls()

        if container is not None:
            with container:
                _build_content()
        else:
            _build_content()

    def _on_plotly_relayout(self, e: GenericEventArguments) -> None:
        payload = _relayout_payload(e.args)
        self.zoom_controller.handle_relayout(payload)

    def _on_plotly_doubleclick(self, _e: Optional[GenericEventArguments] = None) -> None:
        self.reset_zoom()
