"""Age binning and risk stacking for the risk histogram.

Two policies, selected by ZoomState:

- Overview: step 5, domain [floor(min/5)*5, ceil(max/5)*5] re-derived from the
  currently visible rows on every call. The x-axis follows the filtered subset.
- Zoomed(x0, x1): step 1, domain fixed to [x0, x1]. Rows outside the domain are
  left out of the bins but stay visible rows.

Bins are half-open [x0, x1) except the last one, which is closed. Thresholds
follow the usual histogram convention: a threshold equal to the domain's upper
bound produces a final degenerate bin [d1, d1] holding rows whose age is
exactly d1. The zoomed policy places a threshold on every integer in (x0, x1],
the overview policy only on multiples of the step strictly inside (d0, d1).
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

import numpy as np
import pandas as pd

from agerisk.utils.logging import get_logger
from agerisk.risk_histogram.row_store import AGE, DISEASE_RISK
from agerisk.risk_histogram.zoom_controller import ZoomState

logger = get_logger(__name__)

OVERVIEW_BIN_STEP = 5
ZOOM_BIN_STEP = 1


class BinPolicy(Enum):
    """Which bin-edge policy produced a BinningResult."""
    OVERVIEW = "overview"
    ZOOMED = "zoomed"


@dataclass(frozen=True)
class Bin:
    """Age interval [x0, x1), or [x0, x1] when closed, with its member rows."""

    x0: float
    x1: float
    rows: pd.DataFrame = field(repr=False, compare=False)
    closed: bool = False

    def contains(self, age: float) -> bool:
        if self.closed:
            return self.x0 <= age <= self.x1
        return self.x0 <= age < self.x1

    def __len__(self) -> int:
        return len(self.rows)


@dataclass(frozen=True)
class StackedBin:
    """A Bin plus its low-risk (disease_risk == 0) and high-risk sub-counts."""

    bin: Bin
    low_risk_count: int
    high_risk_count: int

    @property
    def x0(self) -> float:
        return self.bin.x0

    @property
    def x1(self) -> float:
        return self.bin.x1

    @property
    def total(self) -> int:
        return self.low_risk_count + self.high_risk_count


@dataclass(frozen=True)
class BinningResult:
    """Ordered stacked bins plus the axis contract for the render sink."""

    bins: tuple[StackedBin, ...]
    domain: tuple[float, float]
    step: float
    tick_values: tuple[float, ...]
    policy: BinPolicy

    @property
    def binned_count(self) -> int:
        """Number of rows that landed in some bin."""
        return sum(b.total for b in self.bins)

    @property
    def max_total(self) -> int:
        return max((b.total for b in self.bins), default=0)


def overview_domain(ages: pd.Series, step: float = OVERVIEW_BIN_STEP) -> tuple[float, float]:
    """Snap the min/max of ages outward to multiples of step."""
    lo = float(ages.min())
    hi = float(ages.max())
    return (math.floor(lo / step) * step, math.ceil(hi / step) * step)


def bin_thresholds(d0: float, d1: float, step: float, *, include_upper: bool) -> list[float]:
    """Edges d0+step, d0+2*step, ... inside (d0, d1), plus d1 itself if include_upper."""
    thresholds = []
    k = 1
    while True:
        t = d0 + k * step
        if t > d1 or (t == d1 and not include_upper):
            break
        thresholds.append(t)
        k += 1
    return thresholds


def tick_values(domain: tuple[float, float], step: float) -> tuple[float, ...]:
    """Exact multiples of step within domain, so no fractional labels appear."""
    d0, d1 = domain
    first = math.ceil(d0 / step)
    last = math.floor(d1 / step)
    return tuple(float(k * step) for k in range(first, last + 1))


def stack_bins(
    df: pd.DataFrame,
    domain: tuple[float, float],
    thresholds: list[float],
) -> tuple[StackedBin, ...]:
    """Assign rows to bins by age and count low/high risk per bin.

    Rows whose age falls outside domain are dropped. Returns bins in ascending
    x0 order; the last bin is closed on both ends.
    """
    d0, d1 = domain
    edges = [d0] + list(thresholds) + [d1]
    ages = df[AGE].to_numpy(dtype=float)
    in_domain = (ages >= d0) & (ages <= d1)
    df_in = df.loc[in_domain]
    bin_index = np.searchsorted(np.asarray(thresholds, dtype=float), ages[in_domain], side="right")

    n_bins = len(edges) - 1
    totals = np.bincount(bin_index, minlength=n_bins)
    lows = np.bincount(
        bin_index,
        weights=(df_in[DISEASE_RISK].to_numpy() == 0).astype(float),
        minlength=n_bins,
    )
    members = {int(i): rows for i, rows in df_in.groupby(bin_index, sort=True)}
    no_rows = df_in.iloc[0:0]

    result = []
    for i in range(n_bins):
        low = int(lows[i])
        result.append(
            StackedBin(
                bin=Bin(
                    x0=float(edges[i]),
                    x1=float(edges[i + 1]),
                    rows=members.get(i, no_rows),
                    closed=(i == n_bins - 1),
                ),
                low_risk_count=low,
                high_risk_count=int(totals[i]) - low,
            )
        )
    return tuple(result)


class BinningEngine:
    """Chooses bin edges for the zoom state and produces stacked bins.

    Never mutates its inputs. Each call recomputes everything from the given
    visible rows.

    Attributes:
        overview_step: Bin width in Overview.
        zoom_step: Bin width while Zoomed.
    """

    def __init__(self, overview_step: float = OVERVIEW_BIN_STEP, zoom_step: float = ZOOM_BIN_STEP) -> None:
        if overview_step <= 0 or zoom_step <= 0:
            raise ValueError(f"Bin steps must be positive, got overview={overview_step}, zoom={zoom_step}")
        self.overview_step = overview_step
        self.zoom_step = zoom_step

    def bin(self, visible: pd.DataFrame, zoom: ZoomState) -> Optional[BinningResult]:
        """Bin the visible rows under the active policy.

        Args:
            visible: Output of FilterEngine.visible_rows().
            zoom: Current zoom state.

        Returns:
            The binning result, or None when visible is empty. None is the
            empty-result signal: binning is skipped entirely.
        """
        if visible.empty:
            logger.debug("bin: no visible rows, skipping binning")
            return None

        if zoom.is_zoomed:
            policy = BinPolicy.ZOOMED
            step = self.zoom_step
            domain = (float(zoom.x0), float(zoom.x1))
            thresholds = bin_thresholds(domain[0], domain[1], step, include_upper=True)
        else:
            policy = BinPolicy.OVERVIEW
            step = self.overview_step
            domain = overview_domain(visible[AGE], step)
            thresholds = bin_thresholds(domain[0], domain[1], step, include_upper=False)

        bins = stack_bins(visible, domain, thresholds)
        result = BinningResult(
            bins=bins,
            domain=domain,
            step=step,
            tick_values=tick_values(domain, step),
            policy=policy,
        )
        logger.debug(
            f"bin: policy={policy.value} domain={domain} step={step} "
            f"bins={len(bins)} binned_rows={result.binned_count}"
        )
        return result
