"""Fixtures for risk histogram tests."""

from __future__ import annotations

import numpy as np
import pandas as pd
import pytest

from agerisk.risk_histogram.row_store import RowStore


@pytest.fixture
def scenario_rows() -> list[dict[str, str]]:
    """Two raw records as a CSV reader would produce them (strings)."""
    return [
        {"age": "25", "sleep_hours": "7", "daily_steps": "8000", "disease_risk": "0", "alcohol": "0", "smoker": "0"},
        {"age": "26", "sleep_hours": "7", "daily_steps": "8000", "disease_risk": "1", "alcohol": "1", "smoker": "0"},
    ]


@pytest.fixture
def scenario_store(scenario_rows) -> RowStore:
    return RowStore.load(scenario_rows)


@pytest.fixture
def survey_df() -> pd.DataFrame:
    """Random but reproducible survey frame with 300 rows."""
    rng = np.random.default_rng(42)
    n_rows = 300
    return pd.DataFrame({
        "id": np.arange(n_rows),
        "age": rng.integers(18, 80, n_rows),
        "sleep_hours": np.round(rng.uniform(4.0, 10.0, n_rows), 1),
        "daily_steps": rng.integers(1000, 20000, n_rows),
        "disease_risk": rng.integers(0, 2, n_rows),
        "alcohol": rng.integers(0, 2, n_rows),
        "smoker": rng.integers(0, 2, n_rows),
    })


@pytest.fixture
def survey_store(survey_df) -> RowStore:
    return RowStore.load(survey_df)
