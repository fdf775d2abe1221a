"""Visible-row computation for the risk histogram.

FilterEngine applies a FilterState to a RowStore. It is a pure function of
its inputs: it never mutates the store or the state and keeps no reference
to the state between calls.
"""

from __future__ import annotations

import pandas as pd

from agerisk.utils.logging import get_logger
from agerisk.risk_histogram.filter_state import FilterState
from agerisk.risk_histogram.row_store import RowStore

logger = get_logger(__name__)


class FilterEngine:
    """Produces the visible row subset for a filter state.

    Attributes:
        row_store: The read-only source records.
    """

    def __init__(self, row_store: RowStore) -> None:
        self.row_store = row_store

    def visible_rows(self, state: FilterState) -> pd.DataFrame:
        """Return rows passing state's predicate, in RowStore insertion order.

        The returned frame keeps the RowStore index labels, so it is always a
        subset of row_store.df. Calling this twice with an unchanged state
        returns equal frames.

        Args:
            state: Current filter settings (read only).

        Returns:
            Filtered dataframe; empty (not an error) when nothing matches.
        """
        df = self.row_store.df
        if df.empty:
            return df.copy()
        df_f = df.loc[state.mask(df)].copy()
        logger.debug(f"visible_rows: {len(df_f)} of {len(df)} rows")
        return df_f
