"""Plotly figure generation for the risk histogram.

This module provides the FigureGenerator class, which turns a RenderModel and a
HistogramTheme into a Plotly figure dict for ui.plotly / update_figure. It owns
all pixel and color concerns; the counts come from the RenderModel unchanged.
"""

from __future__ import annotations

from typing import Optional

import plotly.graph_objects as go

from agerisk.utils.logging import get_logger
from agerisk.risk_histogram.binning import StackedBin
from agerisk.risk_histogram.histogram_config import HistogramConfig
from agerisk.risk_histogram.labels import format_bin_range
from agerisk.risk_histogram.render_model import EmptyReason, RenderModel
from agerisk.risk_histogram.theme import LIGHT_THEME, HistogramTheme

logger = get_logger(__name__)

HOVER_TEMPLATE = (
    "Age %{customdata[0]}<br>"
    "Low risk: %{customdata[1]}<br>"
    "High risk: %{customdata[2]}<br>"
    "Total: %{customdata[3]}"
    "<extra></extra>"
)


def _display_span(sb: StackedBin, step: float) -> tuple[float, float]:
    """Drawn [left, right] of a bin; a degenerate final bin [x, x] is drawn one step wide."""
    if sb.x1 > sb.x0:
        return sb.x0, sb.x1
    return sb.x0, sb.x0 + step


class FigureGenerator:
    """Generates Plotly figure dictionaries from a RenderModel.

    Attributes:
        config: Static display configuration (size, titles, labels, messages).
    """

    def __init__(self, config: Optional[HistogramConfig] = None) -> None:
        self.config = config if config is not None else HistogramConfig()

    def make_figure(self, model: RenderModel, theme: HistogramTheme = LIGHT_THEME) -> dict:
        """Generate the stacked histogram, or the explicit empty-state figure.

        Args:
            model: Output of on_state_change().
            theme: Colors to draw with.

        Returns:
            Plotly figure dictionary.
        """
        if model.is_empty:
            return self._figure_empty(model, theme)

        binning = model.binning
        step = binning.step
        spans = [_display_span(sb, step) for sb in binning.bins]
        centers = [(left + right) / 2 for left, right in spans]
        widths = [right - left for left, right in spans]
        customdata = [
            [format_bin_range(sb.x0, sb.x1, sb.bin.closed), sb.low_risk_count, sb.high_risk_count, sb.total]
            for sb in binning.bins
        ]
        bar_line = dict(color=theme.background, width=1)

        fig = go.Figure()
        # bottom segment: disease_risk == 0
        fig.add_trace(
            go.Bar(
                x=centers,
                y=[sb.low_risk_count for sb in binning.bins],
                width=widths,
                name=self.config.low_risk_label,
                marker=dict(color=theme.low_risk_color, line=bar_line),
                customdata=customdata,
                hovertemplate=HOVER_TEMPLATE,
            )
        )
        # top segment: disease_risk == 1
        fig.add_trace(
            go.Bar(
                x=centers,
                y=[sb.high_risk_count for sb in binning.bins],
                width=widths,
                name=self.config.high_risk_label,
                marker=dict(color=theme.high_risk_color, line=bar_line),
                customdata=customdata,
                hovertemplate=HOVER_TEMPLATE,
            )
        )
        if self.config.show_bar_totals:
            fig.add_trace(
                go.Scatter(
                    x=centers,
                    y=[sb.total for sb in binning.bins],
                    mode="text",
                    text=[str(sb.total) for sb in binning.bins],
                    textposition="top center",
                    textfont=dict(size=11, color=theme.foreground, family="Arial Black"),
                    hoverinfo="skip",
                    showlegend=False,
                )
            )

        d0, d1 = binning.domain
        x_right = max([d1] + [right for _, right in spans])
        y_top = max(1, binning.max_total) * 1.15

        fig.update_layout(
            self._base_layout(theme),
            barmode="stack",
            bargap=0,
            dragmode="select",
            selectdirection="h",
            hovermode="closest",
            showlegend=True,
            legend=dict(orientation="h", x=1, xanchor="right", y=1.02, yanchor="bottom"),
            xaxis=dict(
                title=self.config.x_title,
                color=theme.foreground,
                gridcolor=theme.grid,
                range=[d0, x_right],
                tickmode="array",
                tickvals=list(binning.tick_values),
                ticktext=[f"{v:g}" for v in binning.tick_values],
            ),
            yaxis=dict(
                title=self.config.y_title,
                color=theme.foreground,
                gridcolor=theme.grid,
                range=[0, y_top],
                fixedrange=True,
                rangemode="tozero",
            ),
        )
        logger.debug(f"make_figure: {len(binning.bins)} bins, policy={binning.policy.value}, theme={theme.mode.value}")
        return fig.to_dict()

    def _figure_empty(self, model: RenderModel, theme: HistogramTheme) -> dict:
        """Figure with no traces and a centered message."""
        if model.empty_reason is EmptyReason.NO_DATA:
            message = self.config.no_data_message
        else:
            message = self.config.no_matches_message
        fig = go.Figure()
        fig.update_layout(
            self._base_layout(theme),
            xaxis=dict(visible=False),
            yaxis=dict(visible=False),
            showlegend=False,
            annotations=[
                dict(
                    text=message,
                    x=0.5,
                    y=0.5,
                    xref="paper",
                    yref="paper",
                    showarrow=False,
                    font=dict(size=16, color=theme.foreground),
                )
            ],
        )
        return fig.to_dict()

    def _base_layout(self, theme: HistogramTheme) -> dict:
        return dict(
            template=theme.template,
            paper_bgcolor=theme.background,
            plot_bgcolor=theme.background,
            font=dict(color=theme.foreground),
            width=self.config.width,
            height=self.config.height,
            margin=dict(self.config.margin),
        )
