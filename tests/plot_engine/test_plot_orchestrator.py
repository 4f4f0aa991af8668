"""Integration tests for PlotOrchestrator: request -> plot object on a pooled canvas."""

import pytest

from sqlplotter.plot_engine import plot_orchestrator as orchestrator_module
from sqlplotter.plot_engine.binning import MAX_BIN_COUNT
from sqlplotter.plot_engine.canvas_pool import Canvas, CanvasPool
from sqlplotter.plot_engine.histogram_builder import HistogramBuilder
from sqlplotter.plot_engine.plot_objects import Histogram1D, Histogram2D, ScatterMode, ScatterPlot
from sqlplotter.plot_engine.plot_state import NO_COLUMN, Dimension, PlotKind, PlotRequest
from sqlplotter.plot_engine.plot_style import PlotStyle
from sqlplotter.plot_engine.plot_orchestrator import PlotOrchestrator


@pytest.fixture
def pool():
    return CanvasPool(3, release_at_exit=False)


@pytest.fixture
def orchestrator(pool):
    return PlotOrchestrator(pool)


def test_histogram_1d(orchestrator, header, rows):
    plot = orchestrator.plot(rows, header, 0)
    assert isinstance(plot, Histogram1D)
    assert plot.title == "energy (MeV)"
    assert plot.figure.layout.yaxis.title.text == "Entries / 5 MeV"
    assert orchestrator.current_plot is plot
    assert plot.canvas is orchestrator.canvas_pool.active
    assert plot.canvas.presented_figure["layout"]["title"]["text"] == "energy (MeV)"


def test_one_d_ignores_y(orchestrator, header, rows):
    plot = orchestrator.plot(rows, header, 0, 1, PlotKind.HISTOGRAM, Dimension.ONE_D)
    assert isinstance(plot, Histogram1D)


def test_histogram_2d(orchestrator, header, rows):
    plot = orchestrator.plot(rows, header, 0, 1, PlotKind.HISTOGRAM, Dimension.TWO_D)
    assert isinstance(plot, Histogram2D)
    assert plot.title == "2D Histogram of energy (MeV) vs drift time (ns)"


def test_histogram_2d_with_mismatched_columns_falls_back_to_1d(orchestrator, header, rows):
    rows = [list(r) for r in rows]
    rows[3][1] = "n/a"
    plot = orchestrator.plot(rows, header, 0, 1, PlotKind.HISTOGRAM, Dimension.TWO_D)
    assert isinstance(plot, Histogram1D)
    assert plot.stats["entries"] == 8


def test_two_d_without_y_column_is_1d(orchestrator, header, rows):
    plot = orchestrator.plot(rows, header, 0, NO_COLUMN, PlotKind.HISTOGRAM, Dimension.TWO_D)
    assert isinstance(plot, Histogram1D)


def test_scatter_modes(orchestrator, header, rows):
    index_plot = orchestrator.plot(rows, header, 1, plot_kind=PlotKind.SCATTER)
    assert isinstance(index_plot, ScatterPlot)
    assert index_plot.mode is ScatterMode.INDEX

    paired = orchestrator.plot(rows, header, 0, 1, PlotKind.SCATTER, Dimension.TWO_D)
    assert paired.mode is ScatterMode.PAIRED
    assert paired.n_points == 8


def test_non_numeric_column_still_plots(orchestrator, header, rows):
    plot = orchestrator.plot(rows, header, 2)
    assert isinstance(plot, Histogram1D)
    assert plot.stats["entries"] == 0


@pytest.mark.parametrize("x_index, y_index", [(-1, NO_COLUMN), (3, NO_COLUMN), (0, 3)])
def test_invalid_selection_changes_nothing(orchestrator, header, rows, x_index, y_index):
    first = orchestrator.plot(rows, header, 0)
    result = orchestrator.plot(rows, header, x_index, y_index, PlotKind.HISTOGRAM, Dimension.TWO_D)
    assert result is None
    assert orchestrator.current_plot is first
    assert not first.disposed
    assert len(orchestrator.canvas_pool) == 1


def test_previous_plot_is_disposed(orchestrator, header, rows):
    first = orchestrator.plot(rows, header, 0)
    second = orchestrator.plot(rows, header, 1)
    assert first.disposed
    assert not second.disposed
    assert orchestrator.current_plot is second


def test_pool_is_bounded(orchestrator, header, rows):
    for _ in range(5):
        orchestrator.plot(rows, header, 0)
    assert len(orchestrator.canvas_pool) == 3


def test_plot_request(orchestrator, header, rows):
    request = PlotRequest(x_index=0, y_index=1, plot_kind=PlotKind.SCATTER, dimension=Dimension.TWO_D)
    plot = orchestrator.plot_request(rows, header, request)
    assert plot.mode is ScatterMode.PAIRED


def test_style_reaches_builders(pool, header, rows):
    orchestrator = PlotOrchestrator(pool, style=PlotStyle(index_marker_color="green"))
    plot = orchestrator.plot(rows, header, 0, plot_kind=PlotKind.SCATTER)
    assert plot.figure.data[0].marker.color == "green"


def test_close(orchestrator, header, rows):
    plot = orchestrator.plot(rows, header, 0)
    orchestrator.close()
    assert plot.disposed
    assert orchestrator.current_plot is None
    assert len(orchestrator.canvas_pool) == 0


@pytest.mark.parametrize(
    "column",
    [
        [str(v) for v in [0.0, 0.25, 0.5, 0.75, 1.0] * 200] + ["1e9"],
        ["-1.5e308", "1.5e308", "0"],
    ],
    ids=["far_outlier", "span_beyond_float_range"],
)
def test_extreme_samples_still_plot(orchestrator, column):
    plot = orchestrator.plot([[v] for v in column], ["x"], 0)
    assert isinstance(plot, Histogram1D)
    assert 1 <= plot.bins.count <= MAX_BIN_COUNT
    assert orchestrator.current_plot is plot
    assert len(orchestrator.canvas_pool) == 1


class _BrokenHistogramBuilder(HistogramBuilder):
    def build_1d(self, *args, **kwargs):
        raise RuntimeError("renderer unavailable")


def test_failed_build_leaves_pool_unchanged(pool, header, rows, caplog):
    orchestrator = PlotOrchestrator(pool, histogram_builder=_BrokenHistogramBuilder())
    first = orchestrator.plot(rows, header, 0, plot_kind=PlotKind.SCATTER)

    assert orchestrator.plot(rows, header, 0) is None
    # the previous plot is always disposed before a new one is built
    assert first.disposed
    assert orchestrator.current_plot is None
    assert len(pool) == 1
    assert "Error building plot" in caplog.text


def test_failed_binning_leaves_state_untouched(orchestrator, header, rows, monkeypatch):
    first = orchestrator.plot(rows, header, 0)

    def broken_bins(sample):
        raise ValueError("cannot bin")

    monkeypatch.setattr(orchestrator_module, "compute_bin_spec", broken_bins)
    assert orchestrator.plot(rows, header, 1) is None
    assert orchestrator.current_plot is first
    assert not first.disposed
    assert len(orchestrator.canvas_pool) == 1


def test_failed_draw_releases_acquired_canvas(orchestrator, header, rows, monkeypatch):
    orchestrator.plot(rows, header, 0)
    before = orchestrator.canvas_pool.canvases

    def broken_draw(self, plot, style=None):
        raise RuntimeError("draw failed")

    monkeypatch.setattr(Canvas, "draw", broken_draw)
    assert orchestrator.plot(rows, header, 1) is None
    assert orchestrator.canvas_pool.canvases == before
    assert orchestrator.current_plot is None
