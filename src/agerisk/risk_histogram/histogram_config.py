"""Static configuration for the risk histogram widget."""

from __future__ import annotations

from dataclasses import dataclass, field

from agerisk.risk_histogram.binning import OVERVIEW_BIN_STEP, ZOOM_BIN_STEP


def _default_margin() -> dict[str, int]:
    # top margin leaves room for the legend
    return {"t": 60, "r": 20, "b": 40, "l": 50}


@dataclass(frozen=True)
class HistogramConfig:
    """Display and control parameters, passed by reference to renderers and controllers.

    Attributes:
        overview_bin_step: Age bin width in Overview.
        zoom_bin_step: Age bin width while Zoomed.
        sleep_slider_step: Step of the sleep-hours range slider.
        steps_slider_step: Step of the daily-steps range slider.
        width: Figure width in pixels.
        height: Figure height in pixels.
        margin: Plotly layout margin (t/r/b/l).
        x_title: X axis title.
        y_title: Y axis title.
        low_risk_label: Legend label of the bottom (disease_risk == 0) segment.
        high_risk_label: Legend label of the top segment.
        no_matches_message: Shown when filters exclude every row.
        no_data_message: Shown when no usable records were loaded.
        show_bar_totals: Draw the total count above each bar.
    """
    overview_bin_step: float = OVERVIEW_BIN_STEP
    zoom_bin_step: float = ZOOM_BIN_STEP
    sleep_slider_step: float = 0.1
    steps_slider_step: float = 100
    width: int = 800
    height: int = 440
    margin: dict[str, int] = field(default_factory=_default_margin)
    x_title: str = "Age"
    y_title: str = "Number of People"
    low_risk_label: str = "Low Risk of Chronic Disease"
    high_risk_label: str = "High Risk of Chronic Disease"
    no_matches_message: str = "No data for current filters"
    no_data_message: str = "No data loaded"
    show_bar_totals: bool = True
