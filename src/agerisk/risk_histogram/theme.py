"""Color themes for the risk histogram.

Themes are explicit immutable structs handed to the figure generator; there
is no global theme object.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union


class ThemeMode(str, Enum):
    """UI theme mode."""

    DARK = "dark"
    LIGHT = "light"


@dataclass(frozen=True)
class HistogramTheme:
    """Colors and Plotly template for one theme mode."""

    mode: ThemeMode
    template: str
    background: str
    foreground: str
    grid: str
    low_risk_color: str
    high_risk_color: str


LIGHT_THEME = HistogramTheme(
    mode=ThemeMode.LIGHT,
    template="plotly_white",
    background="#ffffff",
    foreground="#000000",
    grid="#cccccc",
    low_risk_color="#59a14f",
    high_risk_color="#e15759",
)

DARK_THEME = HistogramTheme(
    mode=ThemeMode.DARK,
    template="plotly_dark",
    background="#000000",
    foreground="#ffffff",
    grid="rgba(255,255,255,0.2)",
    low_risk_color="#8cd17d",
    high_risk_color="#ff9d9a",
)


def resolve_theme(theme: Union[str, ThemeMode]) -> ThemeMode:
    """Convert str to ThemeMode. Default to LIGHT."""
    if isinstance(theme, ThemeMode):
        return theme
    s = str(theme).lower()
    if s in ("dark", "plotly_dark"):
        return ThemeMode.DARK
    return ThemeMode.LIGHT


def get_histogram_theme(theme: Union[str, ThemeMode]) -> HistogramTheme:
    """Get the HistogramTheme for a mode (or mode name)."""
    if resolve_theme(theme) is ThemeMode.DARK:
        return DARK_THEME
    return LIGHT_THEME
