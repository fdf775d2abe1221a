"""Filter controls for the risk histogram: tri-state toggles, range sliders, theme switch."""

from __future__ import annotations

import math
from typing import Any, Callable, Optional

from nicegui import ui

from agerisk.utils.logging import get_logger
from agerisk.risk_histogram.filter_state import FilterState
from agerisk.risk_histogram.histogram_config import HistogramConfig
from agerisk.risk_histogram.labels import (
    format_sleep_range,
    format_steps_range,
    format_zoom_status,
    tri_state_options,
)
from agerisk.risk_histogram.zoom_controller import ZoomState

logger = get_logger(__name__)


def _range_value(value: Any) -> Optional[tuple[float, float]]:
    """Extract (low, high) from a ui.range value dict; None if malformed."""
    if not isinstance(value, dict):
        return None
    low, high = value.get("min"), value.get("max")
    if low is None or high is None:
        return None
    return (low, high)


class RiskControlPanel:
    """Builds the filter controls and forwards user edits to callbacks.

    The panel holds no filter state of its own. After every callback the owner
    calls sync_controls() so the widgets always show the state actually in effect,
    including after a rejected edit.
    """

    def __init__(
        self,
        *,
        config: HistogramConfig,
        on_alcohol_change: Callable[[Any], None],
        on_smoker_change: Callable[[Any], None],
        on_sleep_change: Callable[[Any, Any], None],
        on_steps_change: Callable[[Any, Any], None],
        on_dark_change: Callable[[bool], None],
        on_reset_zoom: Callable[[], None],
        on_reset_filters: Callable[[], None],
    ) -> None:
        self.config = config
        self._on_alcohol_change = on_alcohol_change
        self._on_smoker_change = on_smoker_change
        self._on_sleep_change = on_sleep_change
        self._on_steps_change = on_steps_change
        self._on_dark_change = on_dark_change
        self._on_reset_zoom = on_reset_zoom
        self._on_reset_filters = on_reset_filters
        self._updating_programmatically = False

        self._alcohol_toggle: Optional[ui.toggle] = None
        self._smoker_toggle: Optional[ui.toggle] = None
        self._sleep_range: Optional[ui.range] = None
        self._steps_range: Optional[ui.range] = None
        self._sleep_label: Optional[ui.label] = None
        self._steps_label: Optional[ui.label] = None
        self._zoom_label: Optional[ui.label] = None
        self._count_label: Optional[ui.label] = None
        self._dark_switch: Optional[ui.switch] = None

    def build(self, state: FilterState, *, dark: bool = False) -> None:
        """Create the controls inside the current container, initialized from state."""
        options = tri_state_options()
        with ui.column().classes("w-full gap-2"):
            with ui.row().classes("w-full items-center gap-2"):
                ui.label("Alcohol").classes("w-20")
                self._alcohol_toggle = ui.toggle(
                    options,
                    value=int(state.alcohol_mode),
                    on_change=lambda e: self._forward(self._on_alcohol_change, e.value),
                )
            with ui.row().classes("w-full items-center gap-2"):
                ui.label("Smoker").classes("w-20")
                self._smoker_toggle = ui.toggle(
                    options,
                    value=int(state.smoker_mode),
                    on_change=lambda e: self._forward(self._on_smoker_change, e.value),
                )

            with ui.row().classes("w-full items-center gap-2"):
                ui.label("Sleep").classes("w-20")
                self._sleep_range = ui.range(
                    min=state.sleep_extent.min,
                    max=state.sleep_extent.max,
                    step=self.config.sleep_slider_step,
                    value={"min": state.sleep_range.low, "max": state.sleep_range.high},
                    on_change=lambda e: self._forward_range(self._on_sleep_change, e.value),
                ).classes("flex-1")
                self._sleep_label = ui.label(format_sleep_range(state.sleep_range)).classes("w-32")

            with ui.row().classes("w-full items-center gap-2"):
                ui.label("Steps").classes("w-20")
                self._steps_range = ui.range(
                    min=math.floor(state.steps_extent.min),
                    max=math.ceil(state.steps_extent.max),
                    step=self.config.steps_slider_step,
                    value={"min": math.floor(state.steps_range.low), "max": math.ceil(state.steps_range.high)},
                    on_change=lambda e: self._forward_range(self._on_steps_change, e.value),
                ).classes("flex-1")
                self._steps_label = ui.label(format_steps_range(state.steps_range)).classes("w-32")

            with ui.row().classes("w-full items-center gap-3 flex-wrap"):
                self._dark_switch = ui.switch(
                    "Dark",
                    value=dark,
                    on_change=lambda e: self._forward(self._on_dark_change, bool(e.value)),
                )
                ui.button("Reset zoom", on_click=lambda: self._on_reset_zoom())
                ui.button("Reset filters", on_click=lambda: self._on_reset_filters())
            with ui.row().classes("w-full items-center gap-3 flex-wrap"):
                self._zoom_label = ui.label("").classes("text-sm")
                self._count_label = ui.label("").classes("text-sm text-gray-600")

    def sync_controls(self, state: FilterState, *, dark: Optional[bool] = None) -> None:
        """Set widget values and labels from state without re-firing callbacks.

        dark, when given, is pushed to the Dark switch so a theme set from code
        shows up in the panel too.
        """
        self._updating_programmatically = True
        try:
            if dark is not None and self._dark_switch is not None:
                self._dark_switch.value = dark
            if self._alcohol_toggle is not None:
                self._alcohol_toggle.value = int(state.alcohol_mode)
            if self._smoker_toggle is not None:
                self._smoker_toggle.value = int(state.smoker_mode)
            if self._sleep_range is not None:
                self._sleep_range.value = {"min": state.sleep_range.low, "max": state.sleep_range.high}
            if self._steps_range is not None:
                self._steps_range.value = {"min": state.steps_range.low, "max": state.steps_range.high}
            if self._sleep_label is not None:
                self._sleep_label.text = format_sleep_range(state.sleep_range)
            if self._steps_label is not None:
                self._steps_label.text = format_steps_range(state.steps_range)
        finally:
            self._updating_programmatically = False

    def set_status(self, zoom: ZoomState, visible_count: int, total_count: int) -> None:
        if self._zoom_label is not None:
            self._zoom_label.text = format_zoom_status(zoom)
        if self._count_label is not None:
            self._count_label.text = f"{visible_count} of {total_count} people"

    def _forward(self, callback: Callable[[Any], None], value: Any) -> None:
        if self._updating_programmatically:
            return
        callback(value)

    def _forward_range(self, callback: Callable[[Any, Any], None], value: Any) -> None:
        if self._updating_programmatically:
            return
        bounds = _range_value(value)
        if bounds is None:
            logger.warning(f"Ignoring malformed range value {value!r}")
            return
        callback(*bounds)
