"""Tests for FigureGenerator (Plotly dict output)."""

import pytest

from agerisk.risk_histogram.figure_generator import FigureGenerator
from agerisk.risk_histogram.filter_state import FilterState, TriState
from agerisk.risk_histogram.histogram_config import HistogramConfig
from agerisk.risk_histogram.render_model import on_state_change
from agerisk.risk_histogram.row_store import RowStore
from agerisk.risk_histogram.theme import DARK_THEME, LIGHT_THEME
from agerisk.risk_histogram.zoom_controller import OVERVIEW, ZoomState


@pytest.fixture
def generator() -> FigureGenerator:
    return FigureGenerator(HistogramConfig())


def _bar_traces(fig: dict) -> list[dict]:
    return [t for t in fig["data"] if t.get("type") == "bar"]


def test_overview_figure_structure(generator, scenario_store):
    model = on_state_change(scenario_store, FilterState.for_store(scenario_store), OVERVIEW)
    fig = generator.make_figure(model, LIGHT_THEME)
    bars = _bar_traces(fig)
    assert len(bars) == 2
    low, high = bars
    assert low["name"] == "Low Risk of Chronic Disease"
    assert high["name"] == "High Risk of Chronic Disease"
    assert list(low["y"]) == [1]
    assert list(high["y"]) == [1]
    assert list(low["x"]) == [27.5]
    assert low["marker"]["color"] == LIGHT_THEME.low_risk_color
    assert high["marker"]["color"] == LIGHT_THEME.high_risk_color

    layout = fig["layout"]
    assert layout["barmode"] == "stack"
    assert layout["dragmode"] == "select"
    assert list(layout["xaxis"]["range"]) == [25, 30]
    assert list(layout["xaxis"]["tickvals"]) == [25.0, 30.0]
    assert layout["xaxis"]["title"]["text"] == "Age"
    assert layout["yaxis"]["title"]["text"] == "Number of People"


def test_total_labels_trace(generator, scenario_store):
    model = on_state_change(scenario_store, FilterState.for_store(scenario_store), OVERVIEW)
    fig = generator.make_figure(model)
    texts = [t for t in fig["data"] if t.get("type") == "scatter"]
    assert len(texts) == 1
    assert list(texts[0]["text"]) == ["2"]


def test_totals_can_be_disabled(scenario_store):
    generator = FigureGenerator(HistogramConfig(show_bar_totals=False))
    model = on_state_change(scenario_store, FilterState.for_store(scenario_store), OVERVIEW)
    fig = generator.make_figure(model)
    assert all(t.get("type") == "bar" for t in fig["data"])


def test_zoomed_degenerate_final_bin_is_drawn_one_step_wide(generator, scenario_store):
    model = on_state_change(scenario_store, FilterState.for_store(scenario_store), ZoomState.zoomed(25, 26))
    fig = generator.make_figure(model)
    low, high = _bar_traces(fig)
    assert list(low["x"]) == [25.5, 26.5]
    assert list(low["width"]) == [1, 1]
    assert list(fig["layout"]["xaxis"]["range"]) == [25, 27]
    assert list(fig["layout"]["xaxis"]["tickvals"]) == [25.0, 26.0]


def test_hover_customdata(generator, scenario_store):
    model = on_state_change(scenario_store, FilterState.for_store(scenario_store), ZoomState.zoomed(25, 26))
    fig = generator.make_figure(model)
    low = _bar_traces(fig)[0]
    assert [list(row) for row in low["customdata"]] == [["[25, 26)", 1, 0, 1], ["[26, 26]", 0, 1, 1]]


def test_empty_model_figure_has_message(generator, scenario_store):
    state = FilterState.for_store(scenario_store)
    state.set_alcohol_mode(TriState.ONLY)
    state.set_smoker_mode(TriState.ONLY)
    model = on_state_change(scenario_store, state, OVERVIEW)
    fig = generator.make_figure(model)
    assert len(fig["data"]) == 0
    annotations = fig["layout"]["annotations"]
    assert annotations[0]["text"] == "No data for current filters"


def test_no_data_figure_message(generator):
    model = on_state_change(RowStore.load([]), None, OVERVIEW)
    fig = generator.make_figure(model)
    assert fig["layout"]["annotations"][0]["text"] == "No data loaded"


def test_dark_theme_colors(generator, scenario_store):
    model = on_state_change(scenario_store, FilterState.for_store(scenario_store), OVERVIEW)
    fig = generator.make_figure(model, DARK_THEME)
    assert fig["layout"]["paper_bgcolor"] == DARK_THEME.background
    assert _bar_traces(fig)[0]["marker"]["color"] == DARK_THEME.low_risk_color
