"""Plotly histogram generation with automatic bin widths.

This module provides the HistogramBuilder class, which bins one or two
numeric columns (Freedman–Diaconis widths, nice-rounded) and returns
Histogram1D / Histogram2D plot objects. Counts are computed with numpy and
drawn as go.Bar (1D) or go.Heatmap (2D) so the plotted bins are exactly the
BinSpec bins.
"""

from __future__ import annotations

from typing import Optional, Union

import numpy as np
import plotly.graph_objects as go

from sqlplotter.utils.logging import get_logger
from sqlplotter.plot_engine.axis_labels import AxisLabel, entries_axis_title
from sqlplotter.plot_engine.binning import BinSpec, compute_bin_spec
from sqlplotter.plot_engine.plot_objects import Histogram1D, Histogram2D
from sqlplotter.plot_engine.plot_style import PlotStyle

logger = get_logger(__name__)


def _mean_std(values: np.ndarray) -> tuple[float, float]:
    if values.size == 0:
        return 0.0, 0.0
    return float(np.mean(values)), float(np.std(values))


class HistogramBuilder:
    """Builds 1D and 2D histogram plot objects.

    Attributes:
        style: Default PlotStyle, used when a build call does not pass one.
    """

    def __init__(self, style: Optional[PlotStyle] = None) -> None:
        self.style = style or PlotStyle()

    def build_1d(
        self,
        values: np.ndarray,
        column_name: str,
        style: Optional[PlotStyle] = None,
        bins: Optional[BinSpec] = None,
    ) -> Histogram1D:
        """Histogram of one numeric column.

        Args:
            values: Finite numeric values (may be empty).
            column_name: Raw column name, e.g. ``"energy__MeV"``.
            style: Rendering style; defaults to the builder's style.
            bins: Precomputed binning of ``values``; computed when omitted.

        Returns:
            Histogram1D whose figure holds one go.Bar trace.
        """
        style = style or self.style
        values = np.asarray(values, dtype=float)
        label = AxisLabel.from_column(column_name)
        if bins is None:
            bins = compute_bin_spec(values)
        edges = bins.edges()
        counts, _ = np.histogram(values, bins=edges)

        mean, std = _mean_std(values)
        stats = {"entries": float(values.size), "mean": mean, "std_dev": std}

        fig = go.Figure()
        fig.add_trace(go.Bar(
            x=bins.centers(),
            y=counts,
            width=np.diff(edges),
            name=label.display_name,
            marker=dict(color=style.bar_color, line=dict(width=0)),
            showlegend=False,
        ))
        fig.update_layout(
            template=style.template,
            title=dict(text=label.display_name),
            xaxis_title=label.display_name,
            yaxis_title=entries_axis_title(label.unit, bins.width),
            bargap=0,
            showlegend=False,
        )
        self._add_stat_box(fig, self._stat_lines_1d(label.display_name, stats, style), style)

        logger.debug(
            f"histogram 1D {column_name!r}: n={values.size}, width={bins.width:g}, "
            f"bins={bins.count}, range=[{bins.lower_bound:g}, {bins.upper_bound:g}]"
        )
        return Histogram1D(
            figure=fig,
            column_name=column_name,
            label=label,
            values=values,
            bins=bins,
            counts=counts,
            stats=stats,
        )

    def build_2d(
        self,
        x_values: np.ndarray,
        y_values: Optional[np.ndarray],
        x_name: str,
        y_name: Optional[str],
        style: Optional[PlotStyle] = None,
        x_bins: Optional[BinSpec] = None,
        y_bins: Optional[BinSpec] = None,
    ) -> Union[Histogram1D, Histogram2D]:
        """2D histogram of row-aligned columns.

        Falls back to the 1D histogram of X when Y is missing or its number
        of valid values differs from X's.
        """
        style = style or self.style
        x_values = np.asarray(x_values, dtype=float)
        if y_values is None or y_name is None or len(y_values) != len(x_values):
            logger.debug(
                f"2D histogram needs row-aligned Y (x={len(x_values)}, "
                f"y={None if y_values is None else len(y_values)}); building 1D of {x_name!r}"
            )
            return self.build_1d(x_values, x_name, style, bins=x_bins)
        y_values = np.asarray(y_values, dtype=float)

        x_label = AxisLabel.from_column(x_name)
        y_label = AxisLabel.from_column(y_name)
        if x_bins is None:
            x_bins = compute_bin_spec(x_values)
        if y_bins is None:
            y_bins = compute_bin_spec(y_values)
        x_edges = x_bins.edges()
        y_edges = y_bins.edges()
        counts, _, _ = np.histogram2d(x_values, y_values, bins=[x_edges, y_edges])
        counts = counts.astype(int)

        mean_x, std_x = _mean_std(x_values)
        mean_y, std_y = _mean_std(y_values)
        stats = {
            "entries": float(x_values.size),
            "mean_x": mean_x,
            "mean_y": mean_y,
            "std_dev_x": std_x,
            "std_dev_y": std_y,
        }
        title = f"2D Histogram of {x_label.display_name} vs {y_label.display_name}"

        # empty bins are left undrawn
        z = np.where(counts.T > 0, counts.T, np.nan)
        fig = go.Figure()
        fig.add_trace(go.Heatmap(
            x=x_bins.centers(),
            y=y_bins.centers(),
            z=z,
            colorscale=style.palette,
            colorbar=dict(title=dict(text="Entries")),
            hovertemplate="x=%{x}<br>y=%{y}<br>entries=%{z}<extra></extra>",
        ))
        fig.update_layout(
            template=style.template,
            title=dict(text=title),
            xaxis_title=x_label.display_name,
            yaxis_title=y_label.display_name,
            showlegend=False,
        )
        self._add_stat_box(fig, self._stat_lines_2d(title, stats, style), style)

        logger.debug(
            f"histogram 2D {x_name!r} vs {y_name!r}: n={x_values.size}, "
            f"bins={x_bins.count}x{y_bins.count}"
        )
        return Histogram2D(
            figure=fig,
            x_column_name=x_name,
            y_column_name=y_name,
            x_label=x_label,
            y_label=y_label,
            x_values=x_values,
            y_values=y_values,
            x_bins=x_bins,
            y_bins=y_bins,
            counts=counts,
            stats=stats,
        )

    @staticmethod
    def _stat_lines_1d(name: str, stats: dict[str, float], style: PlotStyle) -> list[str]:
        lines = []
        if style.show_stats_name:
            lines.append(f"<b>{name}</b>")
        if style.show_stats_entries:
            lines.append(f"Entries = {int(stats['entries'])}")
        if style.show_stats_mean:
            lines.append(f"Mean = {stats['mean']:.4g}")
        if style.show_stats_std_dev:
            lines.append(f"Std Dev = {stats['std_dev']:.4g}")
        return lines

    @staticmethod
    def _stat_lines_2d(name: str, stats: dict[str, float], style: PlotStyle) -> list[str]:
        lines = []
        if style.show_stats_name:
            lines.append(f"<b>{name}</b>")
        if style.show_stats_entries:
            lines.append(f"Entries = {int(stats['entries'])}")
        if style.show_stats_mean:
            lines.append(f"Mean x = {stats['mean_x']:.4g}")
            lines.append(f"Mean y = {stats['mean_y']:.4g}")
        if style.show_stats_std_dev:
            lines.append(f"Std Dev x = {stats['std_dev_x']:.4g}")
            lines.append(f"Std Dev y = {stats['std_dev_y']:.4g}")
        return lines

    @staticmethod
    def _add_stat_box(fig: go.Figure, lines: list[str], style: PlotStyle) -> None:
        """Transparent statistics box in the upper-right quarter of the frame."""
        if not style.any_stats_shown():
            return
        box = style.to_paper(style.stat_box_geometry())
        fig.add_shape(
            type="rect",
            xref="paper", yref="paper",
            x0=box.x1, y0=box.y1, x1=box.x2, y1=box.y2,
            fillcolor="rgba(0,0,0,0)",
            line=dict(color="black", width=1),
            layer="above",
        )
        fig.add_annotation(
            xref="paper", yref="paper",
            x=box.x1, y=box.y2,
            xanchor="left", yanchor="top",
            align="left",
            text="<br>".join(lines),
            showarrow=False,
            bgcolor="rgba(0,0,0,0)",
            font=dict(size=style.stats_font_size),
            name="stats",
        )
