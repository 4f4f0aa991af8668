"""Plot objects produced by the histogram and scatter builders.

A plot object owns a plotly ``go.Figure`` plus the data it was built from.
The orchestrator keeps at most one live plot object; the previous one is
disposed before the next is built.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, ClassVar, Optional, Union

import numpy as np
import plotly.graph_objects as go

from sqlplotter.plot_engine.axis_labels import AxisLabel
from sqlplotter.plot_engine.binning import BinSpec

if TYPE_CHECKING:
    from sqlplotter.plot_engine.canvas_pool import Canvas


class PlotObjectKind(Enum):
    HISTOGRAM_1D = "histogram_1d"
    HISTOGRAM_2D = "histogram_2d"
    SCATTER = "scatter"


class ScatterMode(Enum):
    """INDEX plots (row index, x); PAIRED plots (x, y)."""
    INDEX = "index"
    PAIRED = "paired"


@dataclass(eq=False)
class PlotObjectBase:
    """Shared ownership and disposal behaviour of all plot objects."""
    figure: go.Figure
    canvas: Optional["Canvas"] = field(default=None, init=False, repr=False)
    disposed: bool = field(default=False, init=False)

    kind: ClassVar[PlotObjectKind]

    @property
    def title(self) -> str:
        return self.figure.layout.title.text or ""

    def to_dict(self) -> dict[str, Any]:
        """Plotly figure dict, ready for ui.plotly / update_figure."""
        return self.figure.to_dict()

    def dispose(self) -> None:
        """Release the figure traces and detach from the canvas. Idempotent."""
        if self.disposed:
            return
        if self.canvas is not None:
            self.canvas.detach(self)
            self.canvas = None
        self.figure.data = []
        self.disposed = True


@dataclass(eq=False)
class Histogram1D(PlotObjectBase):
    column_name: str = ""
    label: AxisLabel = field(default_factory=lambda: AxisLabel(""))
    values: np.ndarray = field(default_factory=lambda: np.empty(0))
    bins: Optional[BinSpec] = None
    counts: np.ndarray = field(default_factory=lambda: np.empty(0, dtype=int))
    stats: dict[str, float] = field(default_factory=dict)

    kind: ClassVar[PlotObjectKind] = PlotObjectKind.HISTOGRAM_1D


@dataclass(eq=False)
class Histogram2D(PlotObjectBase):
    x_column_name: str = ""
    y_column_name: str = ""
    x_label: AxisLabel = field(default_factory=lambda: AxisLabel(""))
    y_label: AxisLabel = field(default_factory=lambda: AxisLabel(""))
    x_values: np.ndarray = field(default_factory=lambda: np.empty(0))
    y_values: np.ndarray = field(default_factory=lambda: np.empty(0))
    x_bins: Optional[BinSpec] = None
    y_bins: Optional[BinSpec] = None
    # shape (x_bins.count, y_bins.count), as returned by np.histogram2d
    counts: np.ndarray = field(default_factory=lambda: np.empty((0, 0), dtype=int))
    stats: dict[str, float] = field(default_factory=dict)

    kind: ClassVar[PlotObjectKind] = PlotObjectKind.HISTOGRAM_2D


@dataclass(eq=False)
class ScatterPlot(PlotObjectBase):
    mode: ScatterMode = ScatterMode.INDEX
    x_column_name: str = ""
    y_column_name: Optional[str] = None
    x: np.ndarray = field(default_factory=lambda: np.empty(0))
    y: np.ndarray = field(default_factory=lambda: np.empty(0))

    kind: ClassVar[PlotObjectKind] = PlotObjectKind.SCATTER

    @property
    def n_points(self) -> int:
        return int(len(self.x))


PlotObject = Union[Histogram1D, Histogram2D, ScatterPlot]
