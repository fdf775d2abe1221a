"""Filter state for the risk histogram.

This module defines the TriState enum, the RangeSelection value type and the
FilterState dataclass holding two tri-state categorical selectors (alcohol,
smoker) and two continuous range selectors (sleep hours, daily steps).
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Mapping, Union

import pandas as pd

from agerisk.utils.logging import get_logger
from agerisk.risk_histogram.errors import InvalidFilterMode, InvalidRangeSelection
from agerisk.risk_histogram.row_store import (
    ALCOHOL,
    DAILY_STEPS,
    SLEEP_HOURS,
    SMOKER,
    Extent,
    RowStore,
)

logger = get_logger(__name__)


class TriState(IntEnum):
    """Inclusion mode over a boolean-valued field."""
    EXCLUDE = 0  # keep rows where flag == 0
    ALL = 1      # keep every row
    ONLY = 2     # keep rows where flag == 1

    @classmethod
    def coerce(cls, value: Union["TriState", int, str]) -> "TriState":
        """Convert a control value (0/1/2, "0"/"1"/"2", or a TriState) to TriState.

        Raises:
            InvalidFilterMode: If value is not one of {0, 1, 2}.
        """
        if isinstance(value, TriState):
            return value
        if isinstance(value, bool):
            raise InvalidFilterMode(f"Invalid tri-state mode {value!r}; expected 0, 1 or 2")
        try:
            as_int = int(value)
        except (TypeError, ValueError):
            raise InvalidFilterMode(f"Invalid tri-state mode {value!r}; expected 0, 1 or 2") from None
        if isinstance(value, float) and value != as_int:
            raise InvalidFilterMode(f"Invalid tri-state mode {value!r}; expected 0, 1 or 2")
        try:
            return cls(as_int)
        except ValueError:
            raise InvalidFilterMode(f"Invalid tri-state mode {value!r}; expected 0, 1 or 2") from None


def tri_matches(mode: TriState, flag: int) -> bool:
    """True if a row with the given 0/1 flag passes the tri-state mode.

    Raises:
        InvalidFilterMode: If mode is not one of {0, 1, 2}.
    """
    mode = TriState.coerce(mode)
    if mode is TriState.ALL:
        return True
    if mode is TriState.EXCLUDE:
        return flag == 0
    return flag == 1


def tri_mask(mode: TriState, flags: pd.Series) -> pd.Series:
    """Vectorized tri_matches over a 0/1 flag column."""
    mode = TriState.coerce(mode)
    if mode is TriState.ALL:
        return pd.Series(True, index=flags.index)
    if mode is TriState.EXCLUDE:
        return flags == 0
    return flags == 1


@dataclass(frozen=True)
class RangeSelection:
    """Closed [low, high] selection over a continuous field, low <= high."""

    low: float
    high: float

    def __post_init__(self) -> None:
        if not (math.isfinite(self.low) and math.isfinite(self.high)):
            raise InvalidRangeSelection(f"Range bounds must be finite, got [{self.low}, {self.high}]")
        if self.low > self.high:
            raise InvalidRangeSelection(f"Range low {self.low} is greater than high {self.high}")

    @classmethod
    def from_extent(cls, extent: Extent) -> "RangeSelection":
        return cls(extent.min, extent.max)

    @classmethod
    def clamped(cls, low: float, high: float, extent: Extent) -> "RangeSelection":
        """Build a selection from raw control values clamped to the extent.

        Raises:
            InvalidRangeSelection: If a bound is not a finite number or low > high.
        """
        try:
            low_f, high_f = float(low), float(high)
        except (TypeError, ValueError):
            raise InvalidRangeSelection(f"Range bounds must be numbers, got [{low!r}, {high!r}]") from None
        if not (math.isfinite(low_f) and math.isfinite(high_f)):
            raise InvalidRangeSelection(f"Range bounds must be finite, got [{low_f}, {high_f}]")
        if low_f > high_f:
            raise InvalidRangeSelection(f"Range low {low_f} is greater than high {high_f}")
        return cls(extent.clamp(low_f), extent.clamp(high_f))

    def contains(self, value: float) -> bool:
        return self.low <= value <= self.high

    def mask(self, values: pd.Series) -> pd.Series:
        return (values >= self.low) & (values <= self.high)

    def as_tuple(self) -> tuple[float, float]:
        return (self.low, self.high)


@dataclass
class FilterState:
    """Mutable filter settings for one histogram session.

    Mutate only through the set_* methods, which validate their input first
    and leave the state untouched on error. Both range selections are ANDed
    with both tri-state selectors.
    """
    sleep_extent: Extent
    steps_extent: Extent
    sleep_range: RangeSelection = field(default=None)  # type: ignore[assignment]
    steps_range: RangeSelection = field(default=None)  # type: ignore[assignment]
    alcohol_mode: TriState = TriState.ALL
    smoker_mode: TriState = TriState.ALL

    def __post_init__(self) -> None:
        if self.sleep_range is None:
            self.sleep_range = RangeSelection.from_extent(self.sleep_extent)
        if self.steps_range is None:
            self.steps_range = RangeSelection.from_extent(self.steps_extent)

    @classmethod
    def for_store(cls, row_store: RowStore) -> "FilterState":
        """Initial state for a store: full ranges, both tri-states ALL.

        Raises:
            EmptyRowStoreError: If the store has no rows (there are no extents).
        """
        return cls(
            sleep_extent=row_store.extent_of(SLEEP_HOURS),
            steps_extent=row_store.extent_of(DAILY_STEPS),
        )

    # -----------------------------
    # Setters
    # -----------------------------
    def set_alcohol_mode(self, mode: Union[TriState, int, str]) -> None:
        self.alcohol_mode = TriState.coerce(mode)
        logger.info(f"alcohol_mode -> {self.alcohol_mode.name}")

    def set_smoker_mode(self, mode: Union[TriState, int, str]) -> None:
        self.smoker_mode = TriState.coerce(mode)
        logger.info(f"smoker_mode -> {self.smoker_mode.name}")

    def set_sleep_range(self, low: float, high: float) -> None:
        self.sleep_range = RangeSelection.clamped(low, high, self.sleep_extent)
        logger.info(f"sleep_range -> {self.sleep_range.as_tuple()}")

    def set_steps_range(self, low: float, high: float) -> None:
        self.steps_range = RangeSelection.clamped(low, high, self.steps_extent)
        logger.info(f"steps_range -> {self.steps_range.as_tuple()}")

    def reset(self) -> None:
        """Restore full ranges and ALL for both tri-states."""
        self.sleep_range = RangeSelection.from_extent(self.sleep_extent)
        self.steps_range = RangeSelection.from_extent(self.steps_extent)
        self.alcohol_mode = TriState.ALL
        self.smoker_mode = TriState.ALL

    # -----------------------------
    # Predicates
    # -----------------------------
    def predicate(self, record: Mapping[str, Any]) -> bool:
        """True if a single record passes every active filter."""
        return (
            self.sleep_range.contains(record[SLEEP_HOURS])
            and self.steps_range.contains(record[DAILY_STEPS])
            and tri_matches(self.alcohol_mode, int(record[ALCOHOL]))
            and tri_matches(self.smoker_mode, int(record[SMOKER]))
        )

    def mask(self, df: pd.DataFrame) -> pd.Series:
        """Vectorized predicate over a RowStore frame."""
        return (
            self.sleep_range.mask(df[SLEEP_HOURS])
            & self.steps_range.mask(df[DAILY_STEPS])
            & tri_mask(self.alcohol_mode, df[ALCOHOL])
            & tri_mask(self.smoker_mode, df[SMOKER])
        )

    def is_filtered(self) -> bool:
        """True if any selector excludes something relative to the defaults."""
        return (
            self.alcohol_mode is not TriState.ALL
            or self.smoker_mode is not TriState.ALL
            or self.sleep_range != RangeSelection.from_extent(self.sleep_extent)
            or self.steps_range != RangeSelection.from_extent(self.steps_extent)
        )
