"""Plotly scatter plot generation for one or two numeric columns."""

from __future__ import annotations

from typing import Optional

import numpy as np
import plotly.graph_objects as go

from sqlplotter.utils.logging import get_logger
from sqlplotter.plot_engine.plot_objects import ScatterMode, ScatterPlot
from sqlplotter.plot_engine.plot_style import PlotStyle

logger = get_logger(__name__)

PAIRED_TITLE = "2D Scatter Plot"
INDEX_AXIS_TITLE = "Index"


class ScatterBuilder:
    """Builds scatter plot objects.

    With a row-aligned Y column the points are (x[i], y[i]); otherwise the X
    values are plotted against their index.
    """

    def __init__(self, style: Optional[PlotStyle] = None) -> None:
        self.style = style or PlotStyle()

    def build(
        self,
        x_values: np.ndarray,
        x_name: str,
        y_values: Optional[np.ndarray] = None,
        y_name: Optional[str] = None,
        style: Optional[PlotStyle] = None,
    ) -> ScatterPlot:
        style = style or self.style
        x_values = np.asarray(x_values, dtype=float)
        paired = y_values is not None and y_name is not None and len(y_values) == len(x_values)

        if paired:
            xs = x_values
            ys = np.asarray(y_values, dtype=float)
            mode = ScatterMode.PAIRED
            title, series_name = PAIRED_TITLE, f"{x_name} vs {y_name}"
            x_title, y_title = x_name, y_name
            color = style.paired_marker_color
        else:
            if y_values is not None:
                logger.debug(
                    f"scatter: Y length {len(y_values)} != X length {len(x_values)}; plotting {x_name!r} vs index"
                )
            xs = np.arange(len(x_values), dtype=float)
            ys = x_values
            mode = ScatterMode.INDEX
            title = series_name = x_name
            x_title, y_title = INDEX_AXIS_TITLE, x_name
            color = style.index_marker_color

        fig = go.Figure()
        fig.add_trace(go.Scatter(
            x=xs,
            y=ys,
            mode="markers",
            name=series_name,
            marker=dict(symbol=style.marker_symbol, size=style.marker_size, color=color),
        ))
        fig.update_layout(
            template=style.template,
            title=dict(text=title),
            xaxis_title=x_title,
            yaxis_title=y_title,
            showlegend=False,
        )
        return ScatterPlot(
            figure=fig,
            mode=mode,
            x_column_name=x_name,
            y_column_name=y_name if paired else None,
            x=xs,
            y=ys,
        )
