"""Tests for theme resolution and control label formatting."""

import pytest

from agerisk.risk_histogram.filter_state import RangeSelection, TriState
from agerisk.risk_histogram.labels import (
    format_bin_range,
    format_sleep_range,
    format_steps_range,
    format_zoom_status,
    tri_state_options,
)
from agerisk.risk_histogram.theme import DARK_THEME, LIGHT_THEME, ThemeMode, get_histogram_theme, resolve_theme
from agerisk.risk_histogram.zoom_controller import OVERVIEW, ZoomState


@pytest.mark.parametrize("value,expected", [
    ("dark", ThemeMode.DARK),
    ("plotly_dark", ThemeMode.DARK),
    ("DARK", ThemeMode.DARK),
    ("light", ThemeMode.LIGHT),
    ("anything", ThemeMode.LIGHT),
    (ThemeMode.DARK, ThemeMode.DARK),
])
def test_resolve_theme(value, expected):
    assert resolve_theme(value) is expected


def test_get_histogram_theme():
    assert get_histogram_theme("dark") is DARK_THEME
    assert get_histogram_theme(ThemeMode.LIGHT) is LIGHT_THEME
    assert LIGHT_THEME.low_risk_color != LIGHT_THEME.high_risk_color


def test_theme_is_immutable():
    with pytest.raises(Exception):  # FrozenInstanceError
        LIGHT_THEME.background = "#123456"  # type: ignore[misc]


def test_tri_state_options_order():
    assert tri_state_options() == {0: "Exclude", 1: "All", 2: "Only"}
    assert list(tri_state_options()) == [int(m) for m in TriState]


def test_range_labels():
    assert format_sleep_range(RangeSelection(4.0, 9.5)) == "4.0–9.5 h"
    assert format_sleep_range(RangeSelection(5.0, 7.25)) == "5.0–7.2 h"
    assert format_steps_range(RangeSelection(1000, 12000)) == "1000–12000 steps"


def test_zoom_status():
    assert "drag" in format_zoom_status(OVERVIEW)
    assert format_zoom_status(ZoomState.zoomed(30, 40)).startswith("Ages 30–40")


def test_format_bin_range():
    assert format_bin_range(25.0, 30.0, False) == "[25, 30)"
    assert format_bin_range(26.0, 26.0, True) == "[26, 26]"
