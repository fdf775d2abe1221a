"""Risk histogram widget: filterable, zoomable stacked age histogram with NiceGUI."""

from agerisk.risk_histogram.binning import Bin, BinningEngine, BinningResult, BinPolicy, StackedBin
from agerisk.risk_histogram.controller import RiskHistogramController
from agerisk.risk_histogram.errors import (
    AgeRiskError,
    EmptyRowStoreError,
    InvalidFilterMode,
    InvalidRangeSelection,
    InvalidZoomRange,
)
from agerisk.risk_histogram.filter_engine import FilterEngine
from agerisk.risk_histogram.filter_state import FilterState, RangeSelection, TriState, tri_matches
from agerisk.risk_histogram.histogram_config import HistogramConfig
from agerisk.risk_histogram.render_model import EmptyReason, RenderModel, on_state_change
from agerisk.risk_histogram.row_store import Extent, RowStore, load_csv
from agerisk.risk_histogram.theme import HistogramTheme, ThemeMode, get_histogram_theme
from agerisk.risk_histogram.zoom_controller import OVERVIEW, ZoomController, ZoomState

__all__ = [
    "AgeRiskError",
    "Bin",
    "BinPolicy",
    "BinningEngine",
    "BinningResult",
    "EmptyReason",
    "EmptyRowStoreError",
    "Extent",
    "FilterEngine",
    "FilterState",
    "HistogramConfig",
    "HistogramTheme",
    "InvalidFilterMode",
    "InvalidRangeSelection",
    "InvalidZoomRange",
    "OVERVIEW",
    "RangeSelection",
    "RenderModel",
    "RiskHistogramController",
    "RowStore",
    "StackedBin",
    "ThemeMode",
    "TriState",
    "ZoomController",
    "ZoomState",
    "get_histogram_theme",
    "load_csv",
    "on_state_change",
    "tri_matches",
]
