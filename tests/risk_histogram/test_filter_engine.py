"""Unit tests for FilterEngine.visible_rows()."""

import pandas as pd

from agerisk.risk_histogram.filter_engine import FilterEngine
from agerisk.risk_histogram.filter_state import FilterState, TriState
from agerisk.risk_histogram.row_store import RowStore


def test_no_filters_returns_all_rows(scenario_store):
    engine = FilterEngine(scenario_store)
    visible = engine.visible_rows(FilterState.for_store(scenario_store))
    pd.testing.assert_frame_equal(visible, scenario_store.df)


def test_alcohol_only_keeps_drinkers(scenario_store):
    state = FilterState.for_store(scenario_store)
    state.set_alcohol_mode(TriState.ONLY)
    visible = FilterEngine(scenario_store).visible_rows(state)
    assert visible["age"].tolist() == [26.0]


def test_visible_rows_is_ordered_subset(survey_store):
    state = FilterState.for_store(survey_store)
    state.set_smoker_mode(TriState.EXCLUDE)
    state.set_steps_range(5000, 15000)
    visible = FilterEngine(survey_store).visible_rows(state)
    assert set(visible.index) <= set(survey_store.df.index)
    assert visible.index.is_monotonic_increasing
    assert (visible["smoker"] == 0).all()
    assert visible["daily_steps"].between(5000, 15000).all()


def test_visible_rows_is_idempotent(survey_store):
    state = FilterState.for_store(survey_store)
    state.set_alcohol_mode(TriState.ONLY)
    engine = FilterEngine(survey_store)
    pd.testing.assert_frame_equal(engine.visible_rows(state), engine.visible_rows(state))


def test_visible_rows_does_not_mutate_store(survey_store):
    before = survey_store.df.copy()
    state = FilterState.for_store(survey_store)
    state.set_alcohol_mode(TriState.EXCLUDE)
    visible = FilterEngine(survey_store).visible_rows(state)
    visible["age"] = -1.0
    pd.testing.assert_frame_equal(survey_store.df, before)


def test_filters_excluding_everything_give_empty_frame(scenario_store):
    state = FilterState.for_store(scenario_store)
    state.set_alcohol_mode(TriState.ONLY)
    state.set_smoker_mode(TriState.ONLY)
    visible = FilterEngine(scenario_store).visible_rows(state)
    assert visible.empty
    assert list(visible.columns) == list(scenario_store.df.columns)


def test_empty_store_gives_empty_frame():
    store = RowStore.load([])
    visible = FilterEngine(store).visible_rows(None)
    assert visible.empty
