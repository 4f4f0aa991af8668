"""Rendering style passed explicitly to every plot builder.

PlotStyle replaces process-wide style state: the orchestrator owns one value
and hands it to each builder call.
"""

from __future__ import annotations

from dataclasses import dataclass

# Statistics overlay covers this fraction of the frame in each direction.
STAT_BOX_FRACTION = 0.25


@dataclass(frozen=True)
class StatBoxGeometry:
    """Statistics box corners in canvas (NDC) fractions, 0 = left/bottom."""
    x1: float
    y1: float
    x2: float
    y2: float


@dataclass(frozen=True)
class PlotStyle:
    """Rendering defaults for histograms and scatter plots.

    Margins are fractions of the canvas size, as in the statistics box
    geometry; they are converted to pixels when a figure is laid out.
    """
    show_stats_name: bool = False
    show_stats_entries: bool = True
    show_stats_mean: bool = True
    show_stats_std_dev: bool = True
    palette: str = "Rainbow"
    bar_color: str = "rgba(70, 110, 200, 0.8)"
    index_marker_color: str = "blue"
    paired_marker_color: str = "red"
    marker_symbol: str = "circle"
    marker_size: int = 7
    left_margin: float = 0.1
    right_margin: float = 0.1
    top_margin: float = 0.1
    bottom_margin: float = 0.1
    stats_font_size: int = 11
    template: str = "plotly_white"

    @property
    def frame_width(self) -> float:
        return 1.0 - self.left_margin - self.right_margin

    @property
    def frame_height(self) -> float:
        return 1.0 - self.top_margin - self.bottom_margin

    def stat_box_geometry(self) -> StatBoxGeometry:
        """Statistics box anchored to the upper-right corner of the frame."""
        right = 1.0 - self.right_margin
        top = 1.0 - self.top_margin
        width = STAT_BOX_FRACTION * self.frame_width
        height = STAT_BOX_FRACTION * self.frame_height
        return StatBoxGeometry(x1=right - width, y1=top - height, x2=right, y2=top)

    def to_paper(self, geometry: StatBoxGeometry) -> StatBoxGeometry:
        """Convert canvas fractions to plotly paper coordinates (the frame)."""
        def px(v: float) -> float:
            return (v - self.left_margin) / self.frame_width

        def py(v: float) -> float:
            return (v - self.bottom_margin) / self.frame_height

        return StatBoxGeometry(
            x1=px(geometry.x1), y1=py(geometry.y1),
            x2=px(geometry.x2), y2=py(geometry.y2),
        )

    def margin_pixels(self, width: int, height: int) -> dict[str, int]:
        """Plotly ``layout.margin`` for a canvas of ``width`` x ``height`` pixels."""
        return dict(
            l=int(round(self.left_margin * width)),
            r=int(round(self.right_margin * width)),
            t=int(round(self.top_margin * height)),
            b=int(round(self.bottom_margin * height)),
        )

    def any_stats_shown(self) -> bool:
        return (
            self.show_stats_name
            or self.show_stats_entries
            or self.show_stats_mean
            or self.show_stats_std_dev
        )
