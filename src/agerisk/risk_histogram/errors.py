"""Exceptions raised by the risk histogram state and pipeline.

Empty results are not errors: an empty row store or a filter combination
that matches nothing is reported through RenderModel.is_empty instead.
"""

from __future__ import annotations


class AgeRiskError(Exception):
    """Base class for all agerisk errors."""


class InvalidFilterMode(AgeRiskError, ValueError):
    """A tri-state filter mode outside {0, 1, 2}."""


class InvalidRangeSelection(AgeRiskError, ValueError):
    """A range selection with low > high or a non-finite bound."""


class InvalidZoomRange(AgeRiskError, ValueError):
    """A committed zoom sub-range that is empty after normalization."""


class EmptyRowStoreError(AgeRiskError, LookupError):
    """An extent was requested from a row store with zero rows."""
