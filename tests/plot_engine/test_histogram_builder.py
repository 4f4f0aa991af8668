"""Unit tests for HistogramBuilder (1D and 2D)."""

import numpy as np
import pytest

from sqlplotter.plot_engine.binning import BinSpec
from sqlplotter.plot_engine.histogram_builder import HistogramBuilder
from sqlplotter.plot_engine.plot_objects import Histogram1D, Histogram2D, PlotObjectKind
from sqlplotter.plot_engine.plot_style import PlotStyle

ENERGY = np.arange(1.0, 9.0)
DRIFT = np.array([10.0, 12.0, 15.0, 11.0, 19.0, 14.0, 13.0, 18.0])


@pytest.fixture
def builder():
    return HistogramBuilder()


def _stats_annotation(fig):
    return next(a for a in fig.layout.annotations if a.name == "stats")


def test_build_1d_bins_and_titles(builder):
    hist = builder.build_1d(ENERGY, "energy__MeV")
    assert isinstance(hist, Histogram1D)
    assert hist.kind is PlotObjectKind.HISTOGRAM_1D
    assert hist.bins == BinSpec(width=5.0, lower_bound=1.0, upper_bound=8.0, count=1)
    assert int(hist.counts.sum()) == 8

    fig = hist.figure
    assert hist.title == "energy (MeV)"
    assert fig.layout.xaxis.title.text == "energy (MeV)"
    assert fig.layout.yaxis.title.text == "Entries / 5 MeV"
    assert len(fig.data) == 1
    assert fig.data[0].type == "bar"


def test_build_1d_without_unit_uses_plain_entries_title(builder):
    hist = builder.build_1d([1.0, 2.0, 2.0, 3.0], "tag")
    assert hist.title == "tag"
    assert hist.figure.layout.yaxis.title.text == "Entries"


def test_build_1d_stats_box(builder):
    hist = builder.build_1d(ENERGY, "energy__MeV")
    assert hist.stats["entries"] == 8
    assert hist.stats["mean"] == pytest.approx(4.5)
    assert hist.stats["std_dev"] == pytest.approx(np.std(ENERGY))

    fig = hist.figure
    (shape,) = fig.layout.shapes
    assert shape.xref == "paper"
    assert shape.x0 == pytest.approx(0.75)
    assert shape.x1 == pytest.approx(1.0)
    assert shape.y0 == pytest.approx(0.75)
    assert shape.y1 == pytest.approx(1.0)

    text = _stats_annotation(fig).text
    assert "Entries = 8" in text
    assert "Mean = 4.5" in text
    assert "Std Dev = " in text


def test_build_1d_stats_box_respects_style(builder):
    style = PlotStyle(show_stats_name=True, show_stats_std_dev=False)
    text = _stats_annotation(builder.build_1d(ENERGY, "energy__MeV", style).figure).text
    assert "<b>energy (MeV)</b>" in text
    assert "Std Dev" not in text

    hidden = PlotStyle(show_stats_entries=False, show_stats_mean=False, show_stats_std_dev=False)
    fig = builder.build_1d(ENERGY, "energy__MeV", hidden).figure
    assert len(fig.layout.shapes) == 0
    assert len(fig.layout.annotations) == 0


def test_build_1d_empty_values(builder):
    hist = builder.build_1d(np.empty(0), "energy__MeV")
    assert hist.bins.count == 10
    assert int(hist.counts.sum()) == 0
    assert hist.stats["entries"] == 0


def test_build_2d(builder):
    hist = builder.build_2d(ENERGY, DRIFT, "energy__MeV", "drift_time__ns")
    assert isinstance(hist, Histogram2D)
    assert hist.title == "2D Histogram of energy (MeV) vs drift time (ns)"
    assert hist.counts.shape == (hist.x_bins.count, hist.y_bins.count)
    assert int(hist.counts.sum()) == 8

    fig = hist.figure
    assert fig.data[0].type == "heatmap"
    assert fig.layout.xaxis.title.text == "energy (MeV)"
    assert fig.layout.yaxis.title.text == "drift time (ns)"

    text = _stats_annotation(fig).text
    assert "Mean x = 4.5" in text
    assert "Mean y = 14" in text


def test_build_2d_heatmap_hides_empty_bins(builder):
    """Points on the diagonal of a 10x10 grid leave off-diagonal bins empty."""
    values = [0.0, 1.0, 1.0, 1.0, 1.0, 1.0, 1.0, 10.0]
    hist = builder.build_2d(values, values, "a", "b")
    assert hist.counts.shape == (10, 10)
    z = np.asarray(hist.figure.data[0].z, dtype=float)
    assert z.shape == hist.counts.T.shape
    assert np.isnan(z).any()
    assert np.nansum(z) == 8


def test_build_2d_falls_back_to_1d_on_length_mismatch(builder):
    hist = builder.build_2d(ENERGY, DRIFT[:5], "energy__MeV", "drift_time__ns")
    assert isinstance(hist, Histogram1D)
    assert hist.title == "energy (MeV)"


def test_build_2d_falls_back_to_1d_without_y(builder):
    hist = builder.build_2d(ENERGY, None, "energy__MeV", None)
    assert isinstance(hist, Histogram1D)


def test_builder_default_style_is_used():
    builder = HistogramBuilder(PlotStyle(bar_color="green"))
    hist = builder.build_1d(ENERGY, "energy__MeV")
    assert hist.figure.data[0].marker.color == "green"


def test_build_1d_uses_precomputed_bins(builder):
    bins = BinSpec(width=2.0, lower_bound=1.0, upper_bound=8.0, count=3)
    hist = builder.build_1d(ENERGY, "energy__MeV", bins=bins)
    assert hist.bins is bins
    assert len(hist.counts) == 3
    assert hist.figure.layout.yaxis.title.text == "Entries / 2 MeV"


def test_build_1d_with_far_outlier(builder):
    values = np.append(np.linspace(0.0, 1.0, 1000), 1e9)
    hist = builder.build_1d(values, "energy__MeV")
    assert hist.bins.count <= 10_000
    assert int(hist.counts.sum()) == 1001
