"""Validated, numeric-typed record storage for the risk histogram.

This module provides the RowStore class and the Extent value type. A RowStore
is built once from untyped key-value records and is read-only afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable, Mapping, Union

import numpy as np
import pandas as pd

from agerisk.utils.logging import get_logger
from agerisk.risk_histogram.errors import EmptyRowStoreError

logger = get_logger(__name__)

AGE = "age"
SLEEP_HOURS = "sleep_hours"
DAILY_STEPS = "daily_steps"
DISEASE_RISK = "disease_risk"
ALCOHOL = "alcohol"
SMOKER = "smoker"

# Continuous fields: a row is dropped if any of these is missing or non-finite.
CONTINUOUS_FIELDS = (AGE, SLEEP_HOURS, DAILY_STEPS)
# Boolean flags: missing or unparseable values default to 0.
FLAG_FIELDS = (ALCOHOL, SMOKER)
RECORD_FIELDS = CONTINUOUS_FIELDS + (DISEASE_RISK,) + FLAG_FIELDS

RawRows = Union[pd.DataFrame, Iterable[Mapping[str, Any]]]


@dataclass(frozen=True)
class Extent:
    """Immutable [min, max] range of a continuous field."""

    min: float
    max: float

    def contains(self, value: float) -> bool:
        return self.min <= value <= self.max

    def clamp(self, value: float) -> float:
        return float(min(max(value, self.min), self.max))

    def as_tuple(self) -> tuple[float, float]:
        return (self.min, self.max)


def _coerce_flag(values: pd.Series) -> pd.Series:
    """Coerce a boolean flag column to 0/1, treating missing/unparseable as 0."""
    numeric = pd.to_numeric(values, errors="coerce").fillna(0)
    return (numeric != 0).astype(int)


class RowStore:
    """Holds the validated record set and the global extents of its fields.

    Rows keep the insertion order of the raw source. The underlying DataFrame
    has a fresh RangeIndex and exactly the columns in RECORD_FIELDS:
    float age/sleep_hours/daily_steps and int 0/1 disease_risk/alcohol/smoker.

    Attributes:
        df: The validated records. Treat as read-only.
        dropped_count: Number of raw rows rejected during load().
    """

    def __init__(self, df: pd.DataFrame, *, dropped_count: int = 0) -> None:
        missing = [c for c in RECORD_FIELDS if c not in df.columns]
        if missing:
            raise ValueError(f"RowStore frame is missing required columns {missing!r}")
        self.df = df
        self.dropped_count = dropped_count
        self._extents: dict[str, Extent] = {}

    @classmethod
    def load(cls, raw_rows: RawRows) -> "RowStore":
        """Build a RowStore from untyped records.

        Each record must provide age, sleep_hours, daily_steps and disease_risk
        as decimal-string-coercible values; alcohol and smoker may be absent.

        A row is kept iff age, sleep_hours and daily_steps all coerce to finite
        numbers. Missing or non-numeric alcohol/smoker default to 0. A
        disease_risk of 0 is low risk; any other value, including a missing
        one, is stored as 1 (high risk).

        Args:
            raw_rows: A DataFrame, or an iterable of mappings (e.g. csv.DictReader rows).

        Returns:
            A new RowStore, possibly empty.
        """
        raw = raw_rows if isinstance(raw_rows, pd.DataFrame) else pd.DataFrame(list(raw_rows))
        n_raw = len(raw)

        out = pd.DataFrame(index=raw.index)
        for col in CONTINUOUS_FIELDS:
            if col in raw.columns:
                out[col] = pd.to_numeric(raw[col], errors="coerce").astype(float)
            else:
                out[col] = np.nan
        if DISEASE_RISK in raw.columns:
            risk = pd.to_numeric(raw[DISEASE_RISK], errors="coerce")
            out[DISEASE_RISK] = (risk != 0).astype(int)
        else:
            out[DISEASE_RISK] = 1
        for col in FLAG_FIELDS:
            out[col] = _coerce_flag(raw[col]) if col in raw.columns else 0

        finite = np.isfinite(out[list(CONTINUOUS_FIELDS)].to_numpy(dtype=float)).all(axis=1)
        out = out.loc[finite].reset_index(drop=True)
        dropped = n_raw - len(out)

        if dropped:
            logger.warning(f"RowStore.load: dropped {dropped} of {n_raw} rows with missing/non-numeric {list(CONTINUOUS_FIELDS)}")
        logger.info(f"RowStore.load: {len(out)} rows loaded")
        return cls(out, dropped_count=dropped)

    def __len__(self) -> int:
        return len(self.df)

    @property
    def is_empty(self) -> bool:
        return len(self.df) == 0

    def extent_of(self, field: str) -> Extent:
        """Return the [min, max] extent of a continuous field over all rows.

        Raises:
            ValueError: If field is not a column of the store.
            EmptyRowStoreError: If the store has zero rows.
        """
        if field not in self.df.columns:
            raise ValueError(f"Unknown field {field!r}")
        if self.is_empty:
            raise EmptyRowStoreError(f"Cannot compute extent of {field!r}: row store is empty")
        if field not in self._extents:
            values = self.df[field].to_numpy(dtype=float)
            self._extents[field] = Extent(float(values.min()), float(values.max()))
        return self._extents[field]


def load_csv(path: Union[str, Path]) -> RowStore:
    """Read a CSV file with pandas and load it into a RowStore.

    All columns are read as strings so coercion happens in RowStore.load().
    """
    path = Path(path)
    logger.info(f"Loading records from {path}")
    raw = pd.read_csv(path, dtype=str, keep_default_na=False)
    return RowStore.load(raw)
