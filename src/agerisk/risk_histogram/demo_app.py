# Demo app for RiskHistogramController
"""Demo application: stacked age histogram of a health-lifestyle survey CSV.

Usage:
    python -m agerisk.risk_histogram.demo_app [path/to/health_lifestyle_dataset.csv]
"""

from __future__ import annotations

import sys
from pathlib import Path

from nicegui import ui

from agerisk.utils.gui_defaults import setUpGuiDefaults
from agerisk.utils.logging import configure_logging, get_logger
from agerisk.risk_histogram.controller import RiskHistogramController
from agerisk.risk_histogram.row_store import load_csv

logger = get_logger(__name__)

DEFAULT_CSV = Path("health_lifestyle_dataset.csv")


def main() -> None:
    """Demo entrypoint: load the CSV named on the command line (or the default) and serve the widget."""
    configure_logging(level="INFO")

    path = Path(sys.argv[1]) if len(sys.argv) > 1 else DEFAULT_CSV
    row_store = load_csv(path)
    logger.info(f"Loaded {len(row_store)} rows from {path} ({row_store.dropped_count} dropped)")

    setUpGuiDefaults()
    ui.page_title("Age and Chronic Disease Risk")

    with ui.column().classes("w-full gap-4 p-4"):
        ui.label("Age and Chronic Disease Risk").classes("text-2xl font-bold")
        ctrl = RiskHistogramController(row_store)
        ctrl.build()

    ui.run(reload=False, native=False)


if __name__ in {"__main__", "__mp_main__"}:
    main()
