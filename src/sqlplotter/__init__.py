"""
sqlplotter: histograms and scatter plots from SQL query results.

This package provides:
- plot_engine: Freedman–Diaconis binning, axis labels from ``label__unit``
  column names, Plotly plot objects and a bounded canvas pool
- viewer_app: a NiceGUI SQLite viewer that feeds query results to the plot engine
- Logging utilities for library and application use

For logging configuration in standalone scripts:
    ```python
    from sqlplotter.utils.logging import configure_logging
    configure_logging(level="DEBUG")
    ```
"""

import logging

from sqlplotter.utils.logging import configure_logging, get_logger

from sqlplotter.plot_engine import CanvasPool, Dimension, PlotKind, PlotOrchestrator, PlotStyle

# Ensure sqlplotter logger has NullHandler so logs don't propagate to root
# when no application has configured logging.
_logger = logging.getLogger("sqlplotter")
if not _logger.handlers:
    _logger.addHandler(logging.NullHandler())

__all__ = [
    "CanvasPool",
    "Dimension",
    "PlotKind",
    "PlotOrchestrator",
    "PlotStyle",
    "configure_logging",
    "get_logger",
]

__version__ = "0.1.0"
