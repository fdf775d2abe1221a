"""The filter -> bin pipeline as a single pure function.

on_state_change() is what the event-dispatch harness calls after every state
mutation. It always recomputes from scratch, FilterEngine first and then
BinningEngine, and returns everything the render sink needs.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

import pandas as pd

from agerisk.utils.logging import get_logger
from agerisk.risk_histogram.binning import BinningEngine, BinningResult, BinPolicy, StackedBin
from agerisk.risk_histogram.filter_engine import FilterEngine
from agerisk.risk_histogram.filter_state import FilterState
from agerisk.risk_histogram.row_store import RowStore
from agerisk.risk_histogram.zoom_controller import ZoomState

logger = get_logger(__name__)


class EmptyReason(Enum):
    """Why a RenderModel has nothing to draw."""
    NO_DATA = "no_data"        # the row store has zero usable records
    NO_MATCHES = "no_matches"  # the filters exclude every row


@dataclass(frozen=True)
class RenderModel:
    """Everything the render sink receives for one redraw."""

    zoom: ZoomState
    visible_count: int
    total_count: int
    binning: Optional[BinningResult] = None
    empty_reason: Optional[EmptyReason] = None

    @property
    def is_empty(self) -> bool:
        return self.empty_reason is not None

    @property
    def bins(self) -> tuple[StackedBin, ...]:
        return self.binning.bins if self.binning is not None else ()

    @property
    def domain(self) -> Optional[tuple[float, float]]:
        return self.binning.domain if self.binning is not None else None

    @property
    def tick_step(self) -> Optional[float]:
        return self.binning.step if self.binning is not None else None

    @property
    def tick_values(self) -> tuple[float, ...]:
        return self.binning.tick_values if self.binning is not None else ()

    @property
    def policy(self) -> Optional[BinPolicy]:
        return self.binning.policy if self.binning is not None else None


def on_state_change(
    row_store: RowStore,
    filter_state: Optional[FilterState],
    zoom: ZoomState,
    *,
    binning_engine: Optional[BinningEngine] = None,
) -> RenderModel:
    """Recompute the histogram for the current filter and zoom state.

    Args:
        row_store: The loaded records.
        filter_state: Current filters; may be None only when row_store is empty.
        zoom: Current zoom state.
        binning_engine: Engine to use; defaults to the 5/1 step engine.

    Returns:
        A RenderModel. Empty stores and empty filter results come back as
        is_empty models, never as exceptions.
    """
    if row_store.is_empty:
        logger.warning("on_state_change: row store is empty")
        return RenderModel(zoom=zoom, visible_count=0, total_count=0, empty_reason=EmptyReason.NO_DATA)
    if filter_state is None:
        raise ValueError("filter_state is required for a non-empty row store")

    visible: pd.DataFrame = FilterEngine(row_store).visible_rows(filter_state)
    if visible.empty:
        logger.info("on_state_change: filters exclude all rows")
        return RenderModel(
            zoom=zoom,
            visible_count=0,
            total_count=len(row_store),
            empty_reason=EmptyReason.NO_MATCHES,
        )

    engine = binning_engine if binning_engine is not None else BinningEngine()
    binning = engine.bin(visible, zoom)
    return RenderModel(
        zoom=zoom,
        visible_count=len(visible),
        total_count=len(row_store),
        binning=binning,
    )
