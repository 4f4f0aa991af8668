"""Plot orchestration: the single entry point used by the viewer.

PlotOrchestrator turns a text table plus the user's selections into a plot
object drawn on a pooled canvas. It keeps exactly one retained plot object;
the previous one is disposed before the next one is built.
"""

from __future__ import annotations

from typing import Optional, Sequence

import numpy as np

from sqlplotter.utils.logging import get_logger
from sqlplotter.plot_engine.binning import BinSpec, compute_bin_spec
from sqlplotter.plot_engine.canvas_pool import Canvas, CanvasPool
from sqlplotter.plot_engine.histogram_builder import HistogramBuilder
from sqlplotter.plot_engine.plot_objects import PlotObject
from sqlplotter.plot_engine.plot_state import Dimension, NO_COLUMN, PlotKind, PlotRequest
from sqlplotter.plot_engine.plot_style import PlotStyle
from sqlplotter.plot_engine.scatter_builder import ScatterBuilder
from sqlplotter.plot_engine.table_processor import Row, TableProcessor

logger = get_logger(__name__)


class PlotOrchestrator:
    """Builds plots from query results and manages their lifetime.

    **Public API:**

    - **plot(table, header, x_index, y_index, plot_kind, dimension)**: build and draw a plot.
    - **plot_request(table, header, request)**: same, from a PlotRequest.
    - **current_plot**: the retained plot object, if any.
    - **close()**: dispose the retained plot and release every canvas.

    Data problems (unparseable fields, degenerate or extreme samples,
    mismatched Y) never raise. Invalid column selections are declined and
    return None. A failure while building or drawing is logged, its canvas is
    released and None is returned.
    """

    def __init__(
        self,
        canvas_pool: Optional[CanvasPool] = None,
        *,
        style: Optional[PlotStyle] = None,
        histogram_builder: Optional[HistogramBuilder] = None,
        scatter_builder: Optional[ScatterBuilder] = None,
    ) -> None:
        self._canvas_pool = canvas_pool if canvas_pool is not None else CanvasPool()
        self.style = style or PlotStyle()
        self.histogram_builder = histogram_builder or HistogramBuilder(self.style)
        self.scatter_builder = scatter_builder or ScatterBuilder(self.style)
        self._current: Optional[PlotObject] = None

    @property
    def canvas_pool(self) -> CanvasPool:
        return self._canvas_pool

    @property
    def current_plot(self) -> Optional[PlotObject]:
        return self._current

    def plot(
        self,
        table: Sequence[Row],
        header: Sequence[str],
        x_index: int,
        y_index: int = NO_COLUMN,
        plot_kind: PlotKind = PlotKind.HISTOGRAM,
        dimension: Dimension = Dimension.ONE_D,
    ) -> Optional[PlotObject]:
        """Build the requested plot and draw it on a fresh canvas.

        Args:
            table: Row-major text table (None for SQL NULL).
            header: Column names aligned with each row.
            x_index: X column index.
            y_index: Y column index, or NO_COLUMN.
            plot_kind: Histogram or scatter.
            dimension: 1D ignores y_index.

        Returns:
            The new plot object, or None if the column selection is invalid
            (in which case nothing is changed).
        """
        request = PlotRequest(x_index=x_index, y_index=y_index, plot_kind=plot_kind, dimension=dimension)
        return self.plot_request(table, header, request)

    def plot_request(
        self,
        table: Sequence[Row],
        header: Sequence[str],
        request: PlotRequest,
    ) -> Optional[PlotObject]:
        """Build and draw the plot described by ``request``; see plot()."""
        if not request.is_valid_for(len(header)):
            logger.warning(
                f"Invalid column selection x={request.x_index}, y={request.y_index} "
                f"for {len(header)} columns; plot request ignored"
            )
            return None

        processor = TableProcessor(header, table)
        x_name = processor.column_name(request.x_index)
        x_data = processor.numeric_column(request.x_index)
        y_index = request.effective_y_index
        y_name: Optional[str] = None
        y_data: Optional[np.ndarray] = None
        if y_index != NO_COLUMN:
            y_name = processor.column_name(y_index)
            y_data = processor.numeric_column(y_index)

        logger.info(
            f"plot: kind={request.plot_kind.value}, dimension={request.dimension.value}, "
            f"x={x_name!r} ({len(x_data)}/{processor.n_rows} valid), "
            f"y={y_name!r}" + (f" ({len(y_data)} valid)" if y_data is not None else "")
        )

        # binning depends only on the data; a failure here leaves the retained
        # plot and the pool as they were
        try:
            x_bins, y_bins = self._bin_specs(request.plot_kind, x_data, y_data)
        except Exception as ex:
            logger.exception(f"Error binning {x_name!r}: {ex}")
            return None

        self._dispose_current()
        plot: Optional[PlotObject] = None
        canvas: Optional[Canvas] = None
        try:
            if request.plot_kind is PlotKind.SCATTER:
                plot = self.scatter_builder.build(x_data, x_name, y_data, y_name, style=self.style)
            elif y_data is None:
                plot = self.histogram_builder.build_1d(x_data, x_name, style=self.style, bins=x_bins)
            else:
                plot = self.histogram_builder.build_2d(
                    x_data, y_data, x_name, y_name, style=self.style, x_bins=x_bins, y_bins=y_bins
                )
            canvas = self._canvas_pool.acquire()
            canvas.draw(plot, self.style)
            canvas.update()
        except Exception as ex:
            logger.exception(f"Error building plot of {x_name!r}: {ex}")
            if plot is not None:
                plot.dispose()
            if canvas is not None:
                self._canvas_pool.release(canvas)
            return None

        self._current = plot
        return plot

    @staticmethod
    def _bin_specs(
        plot_kind: PlotKind,
        x_data: np.ndarray,
        y_data: Optional[np.ndarray],
    ) -> tuple[Optional[BinSpec], Optional[BinSpec]]:
        """Histogram bins for X (and Y when it is row-aligned with X)."""
        if plot_kind is not PlotKind.HISTOGRAM:
            return None, None
        x_bins = compute_bin_spec(x_data)
        if y_data is None or len(y_data) != len(x_data):
            return x_bins, None
        return x_bins, compute_bin_spec(y_data)

    def _dispose_current(self) -> None:
        previous, self._current = self._current, None
        if previous is not None:
            previous.dispose()

    def close(self) -> None:
        """Dispose the retained plot and release all canvases."""
        self._dispose_current()
        self._canvas_pool.close_all()
