"""Statistical binning and plot construction for query results."""

from sqlplotter.plot_engine.axis_labels import AxisLabel, extract_unit, format_label
from sqlplotter.plot_engine.binning import BinSpec, bin_width, compute_bin_spec, nice_round, quantile
from sqlplotter.plot_engine.canvas_pool import Canvas, CanvasPool
from sqlplotter.plot_engine.plot_objects import Histogram1D, Histogram2D, PlotObject, ScatterPlot
from sqlplotter.plot_engine.plot_orchestrator import PlotOrchestrator
from sqlplotter.plot_engine.plot_state import Dimension, PlotKind, PlotRequest
from sqlplotter.plot_engine.plot_style import PlotStyle

__all__ = [
    "AxisLabel",
    "BinSpec",
    "Canvas",
    "CanvasPool",
    "Dimension",
    "Histogram1D",
    "Histogram2D",
    "PlotKind",
    "PlotObject",
    "PlotOrchestrator",
    "PlotRequest",
    "PlotStyle",
    "ScatterPlot",
    "bin_width",
    "compute_bin_spec",
    "extract_unit",
    "format_label",
    "nice_round",
    "quantile",
]
