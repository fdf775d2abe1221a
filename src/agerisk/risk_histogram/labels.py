"""Text shown next to the filter controls and in tooltips."""

from __future__ import annotations

from agerisk.risk_histogram.filter_state import RangeSelection, TriState
from agerisk.risk_histogram.zoom_controller import ZoomState

TRI_STATE_LABELS: dict[TriState, str] = {
    TriState.EXCLUDE: "Exclude",
    TriState.ALL: "All",
    TriState.ONLY: "Only",
}


def tri_state_options() -> dict[int, str]:
    """Options dict for a ui.toggle: int value -> display name."""
    return {int(mode): label for mode, label in TRI_STATE_LABELS.items()}


def format_sleep_range(selection: RangeSelection) -> str:
    return f"{selection.low:.1f}–{selection.high:.1f} h"


def format_steps_range(selection: RangeSelection) -> str:
    return f"{selection.low:.0f}–{selection.high:.0f} steps"


def format_zoom_status(zoom: ZoomState) -> str:
    if not zoom.is_zoomed:
        return "All ages (drag on the chart to zoom, double-click to reset)"
    return f"Ages {zoom.x0}–{zoom.x1} (double-click to reset)"


def format_bin_range(x0: float, x1: float, closed: bool) -> str:
    """Interval notation for a bin, e.g. '[25, 30)' or '[26, 26]'."""
    right = "]" if closed else ")"
    return f"[{x0:g}, {x1:g}{right}"
