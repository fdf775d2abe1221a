"""Unit tests for BinningEngine bin-edge policies, stacking and ticks."""

import pandas as pd
import pytest

from agerisk.risk_histogram.binning import (
    BinningEngine,
    BinPolicy,
    bin_thresholds,
    overview_domain,
    stack_bins,
    tick_values,
)
from agerisk.risk_histogram.row_store import RowStore
from agerisk.risk_histogram.zoom_controller import OVERVIEW, ZoomState


def _store(ages, risks=None) -> RowStore:
    risks = risks if risks is not None else [0] * len(ages)
    return RowStore.load(pd.DataFrame({
        "age": ages,
        "sleep_hours": [7.0] * len(ages),
        "daily_steps": [8000] * len(ages),
        "disease_risk": risks,
    }))


def test_overview_domain_snaps_to_multiples_of_five():
    assert overview_domain(pd.Series([25.0, 26.0])) == (25, 30)
    assert overview_domain(pd.Series([18.0, 79.0])) == (15, 80)
    assert overview_domain(pd.Series([20.0, 30.0])) == (20, 30)


def test_bin_thresholds():
    assert bin_thresholds(25, 30, 5, include_upper=False) == []
    assert bin_thresholds(15, 30, 5, include_upper=False) == [20, 25]
    assert bin_thresholds(25, 26, 1, include_upper=True) == [26]
    assert bin_thresholds(40, 43, 1, include_upper=True) == [41, 42, 43]
    # last edge shorter than the step when the span is not a multiple of it
    assert bin_thresholds(0, 12, 5, include_upper=False) == [5, 10]


def test_tick_values_are_exact_multiples_of_step():
    assert tick_values((15, 30), 5) == (15.0, 20.0, 25.0, 30.0)
    assert tick_values((23, 27), 1) == (23.0, 24.0, 25.0, 26.0, 27.0)
    assert tick_values((23, 37), 5) == (25.0, 30.0, 35.0)


def test_overview_single_bin_both_risks(scenario_store):
    """Ages 25 and 26 -> one bin [25, 30] with one low and one high risk."""
    result = BinningEngine().bin(scenario_store.df, OVERVIEW)
    assert result.policy is BinPolicy.OVERVIEW
    assert result.domain == (25, 30)
    assert result.step == 5
    assert len(result.bins) == 1
    sb = result.bins[0]
    assert (sb.x0, sb.x1) == (25, 30)
    assert sb.low_risk_count == 1
    assert sb.high_risk_count == 1


def test_overview_max_age_lands_in_closed_final_bin():
    store = _store([15, 22, 30], [0, 1, 1])
    result = BinningEngine().bin(store.df, OVERVIEW)
    assert [(b.x0, b.x1) for b in result.bins] == [(15, 20), (20, 25), (25, 30)]
    assert [b.total for b in result.bins] == [1, 1, 1]
    assert result.bins[-1].bin.closed is True
    assert result.bins[-1].bin.contains(30)
    assert not result.bins[0].bin.contains(20)


def test_overview_single_age_on_step_boundary():
    store = _store([25, 25])
    result = BinningEngine().bin(store.df, OVERVIEW)
    assert result.domain == (25, 25)
    assert len(result.bins) == 1
    assert result.bins[0].total == 2


def test_overview_domain_follows_visible_rows():
    store = _store([18, 42, 77])
    narrow = store.df.loc[store.df["age"] < 50]
    assert BinningEngine().bin(store.df, OVERVIEW).domain == (15, 80)
    assert BinningEngine().bin(narrow, OVERVIEW).domain == (15, 45)


def test_zoomed_bins_are_one_year_with_inclusive_final_bin(scenario_store):
    """Zoom (25, 26) -> [25, 26) holds age 25, [26, 26] holds age 26."""
    result = BinningEngine().bin(scenario_store.df, ZoomState.zoomed(25, 26))
    assert result.policy is BinPolicy.ZOOMED
    assert result.step == 1
    assert [(b.x0, b.x1) for b in result.bins] == [(25, 26), (26, 26)]
    assert result.bins[0].bin.rows["age"].tolist() == [25.0]
    assert result.bins[1].bin.rows["age"].tolist() == [26.0]
    assert result.bins[1].bin.closed is True


def test_zoomed_domain_ignores_visible_extent_and_drops_outside_rows():
    store = _store([20, 30, 31.5, 35, 50], [0, 1, 0, 1, 0])
    result = BinningEngine().bin(store.df, ZoomState.zoomed(30, 35))
    assert result.domain == (30, 35)
    assert result.bins[0].x0 == 30
    assert result.binned_count == 3
    by_x0 = {b.x0: b for b in result.bins}
    assert by_x0[30].high_risk_count == 1
    assert by_x0[31].low_risk_count == 1
    assert by_x0[35].high_risk_count == 1
    assert result.tick_values == (30.0, 31.0, 32.0, 33.0, 34.0, 35.0)


def test_zoomed_with_no_rows_in_domain_still_has_bins():
    store = _store([20, 21])
    result = BinningEngine().bin(store.df, ZoomState.zoomed(60, 62))
    assert len(result.bins) == 3
    assert result.binned_count == 0


def test_empty_visible_rows_return_empty_signal():
    assert BinningEngine().bin(_store([]).df, OVERVIEW) is None
    assert BinningEngine().bin(_store([]).df, ZoomState.zoomed(20, 30)) is None


def test_bins_ascending_and_counts_conserved(survey_store):
    engine = BinningEngine()
    df = survey_store.df
    for zoom in (OVERVIEW, ZoomState.zoomed(30, 45)):
        result = engine.bin(df, zoom)
        x0s = [b.x0 for b in result.bins]
        assert x0s == sorted(x0s)
        d0, d1 = result.domain
        in_domain = int(df["age"].between(d0, d1).sum())
        assert result.binned_count == in_domain
        for b in result.bins:
            assert b.low_risk_count + b.high_risk_count == len(b.bin.rows)
            assert b.low_risk_count == int((b.bin.rows["disease_risk"] == 0).sum())


def test_binning_does_not_mutate_input(survey_store):
    before = survey_store.df.copy()
    BinningEngine().bin(survey_store.df, ZoomState.zoomed(20, 40))
    pd.testing.assert_frame_equal(survey_store.df, before)


def test_stack_bins_each_row_in_exactly_one_bin():
    store = _store([10, 14.999, 15, 19, 20])
    bins = stack_bins(store.df, (10, 20), [15])
    assert [b.total for b in bins] == [2, 3]


def test_engine_rejects_non_positive_steps():
    with pytest.raises(ValueError):
        BinningEngine(overview_step=0)


def test_stack_bins_gaps_keep_empty_member_frames():
    store = _store([10, 11, 13, 13], risks=[0, 1, 1, 0])
    bins = stack_bins(store.df, (10, 14), [11, 12, 13, 14])
    assert [(b.low_risk_count, b.high_risk_count) for b in bins] == [(1, 0), (0, 1), (0, 0), (1, 1), (0, 0)]
    assert bins[2].bin.rows.empty
    assert list(bins[2].bin.rows.columns) == list(store.df.columns)
    assert bins[3].bin.rows["age"].tolist() == [13.0, 13.0]


def test_stack_bins_member_rows_match_bin_intervals(survey_store):
    df = survey_store.df
    thresholds = bin_thresholds(20, 60, 1, include_upper=True)
    bins = stack_bins(df, (20, 60), thresholds)
    for b in bins:
        expected = df.loc[[b.bin.contains(a) for a in df["age"]]]
        pd.testing.assert_frame_equal(b.bin.rows, expected)
