"""Plot selection state: plot kind, dimensionality and column selection.

This module defines the PlotKind and Dimension enums and the PlotRequest
dataclass that the viewer hands to PlotOrchestrator.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

# Column index meaning "no Y column selected".
NO_COLUMN = -1


class PlotKind(Enum):
    """Enumeration of available plot kinds."""
    HISTOGRAM = "histogram"
    SCATTER = "scatter"


class Dimension(Enum):
    """Requested dimensionality; 1D never consults the Y column."""
    ONE_D = "1D"
    TWO_D = "2D"


@dataclass(frozen=True)
class PlotRequest:
    """A single user plot request.

    Attributes:
        x_index: Index of the X column in the table header.
        y_index: Index of the Y column, or NO_COLUMN.
        plot_kind: Histogram or scatter.
        dimension: 1D or 2D; 1D ignores y_index.
    """
    x_index: int
    y_index: int = NO_COLUMN
    plot_kind: PlotKind = PlotKind.HISTOGRAM
    dimension: Dimension = Dimension.ONE_D

    @property
    def effective_y_index(self) -> int:
        """Y column index actually consulted, NO_COLUMN for 1D requests."""
        if self.dimension is Dimension.ONE_D or self.y_index < 0:
            return NO_COLUMN
        return self.y_index

    def is_valid_for(self, n_columns: int) -> bool:
        """True if the selected columns exist in a header of ``n_columns``."""
        if not 0 <= self.x_index < n_columns:
            return False
        return self.effective_y_index < n_columns
