"""
agerisk: Interactive age / chronic-disease-risk histogram widget for NiceGUI.

This package provides:
- RiskHistogramController: stacked age histogram with tri-state and range
  filters, brush-to-zoom, and light/dark themes
- The pure filter -> bin pipeline behind it (RowStore, FilterState,
  FilterEngine, BinningEngine, ZoomController, on_state_change)
- Logging utilities for library and application use

For logging configuration in standalone scripts/demos:
    ```python
    from agerisk.utils.logging import configure_logging
    configure_logging(level="DEBUG")
    ```

When used as a library, logging is handled by the parent application's configuration.
"""

import logging

from agerisk.utils.logging import configure_logging, get_logger

from agerisk.risk_histogram import (
    FilterState,
    RiskHistogramController,
    RowStore,
    TriState,
    ZoomState,
    on_state_change,
)

# Ensure agerisk logger has NullHandler so logs don't propagate to root
# when no application has configured logging. Applications/demos call
# configure_logging() to replace this with a real handler.
_logger = logging.getLogger("agerisk")
if not _logger.handlers:
    _logger.addHandler(logging.NullHandler())

__all__ = [
    "FilterState",
    "RiskHistogramController",
    "RowStore",
    "TriState",
    "ZoomState",
    "configure_logging",
    "get_logger",
    "on_state_change",
]

__version__ = "0.1.0"
