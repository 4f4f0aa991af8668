"""Bounded FIFO pool of rendering canvases.

A Canvas is the surface one plot object is drawn on. CanvasPool keeps at most
``max_canvases`` of them; acquiring a canvas when the pool is full closes and
releases the oldest one first. Evicted canvases are never reused.

The pool does not depend on any UI toolkit. A viewer mirrors canvases on
screen through the ``on_canvas_created`` / ``on_canvas_updated`` /
``on_canvas_released`` hooks.
"""

from __future__ import annotations

import itertools
import uuid
import weakref
from collections import deque
from typing import Any, Callable, Iterator, Optional

import plotly.graph_objects as go

from sqlplotter.utils.logging import get_logger
from sqlplotter.plot_engine.plot_objects import PlotObject
from sqlplotter.plot_engine.plot_style import PlotStyle

logger = get_logger(__name__)

DEFAULT_MAX_CANVASES = 3
DEFAULT_CANVAS_WIDTH = 800
DEFAULT_CANVAS_HEIGHT = 600
CANVAS_TITLE = "Plot"

CanvasHook = Callable[["Canvas"], None]

_canvas_counter = itertools.count(1)


def _unique_canvas_name(serial: int) -> str:
    return f"canvas_{serial}_{uuid.uuid4().hex[:8]}"


def _close_canvases(canvases: "deque[Canvas]") -> None:
    while canvases:
        canvases.popleft().close()


class Canvas:
    """A rendering surface hosting at most one plot object.

    Attributes:
        serial: Process-wide creation number (1, 2, 3, ...).
        name: Unique canvas name.
        title: Window/card title.
        width: Width in pixels.
        height: Height in pixels.
        plot: Plot object currently drawn, if any.
    """

    def __init__(
        self,
        *,
        width: int = DEFAULT_CANVAS_WIDTH,
        height: int = DEFAULT_CANVAS_HEIGHT,
        title: str = CANVAS_TITLE,
        on_updated: Optional[CanvasHook] = None,
    ) -> None:
        self.serial = next(_canvas_counter)
        self.name = _unique_canvas_name(self.serial)
        self.title = title
        self.width = width
        self.height = height
        self.plot: Optional[PlotObject] = None
        self._on_updated = on_updated
        self._presented: dict[str, Any] = self._blank_figure().to_dict()
        self._closed = False

    def __repr__(self) -> str:
        return f"Canvas(name={self.name!r}, closed={self._closed})"

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def presented_figure(self) -> dict[str, Any]:
        """Figure dict as of the last update(); survives plot disposal."""
        return self._presented

    def _blank_figure(self) -> go.Figure:
        fig = go.Figure()
        fig.update_layout(width=self.width, height=self.height)
        return fig

    def draw(self, plot: PlotObject, style: Optional[PlotStyle] = None) -> None:
        """Attach ``plot`` to this canvas and size its figure to the canvas.

        Raises:
            RuntimeError: If the canvas has been closed.
        """
        if self._closed:
            raise RuntimeError(f"Cannot draw on closed canvas {self.name}")
        if self.plot is not None and self.plot is not plot:
            self.plot.dispose()
        layout: dict[str, Any] = dict(width=self.width, height=self.height)
        if style is not None:
            layout["margin"] = style.margin_pixels(self.width, self.height)
        plot.figure.update_layout(**layout)
        plot.canvas = self
        self.plot = plot

    def detach(self, plot: PlotObject) -> None:
        """Forget ``plot`` if it is the one drawn here."""
        if self.plot is plot:
            self.plot = None

    def update(self) -> None:
        """Present the current contents to the viewer."""
        if self._closed:
            raise RuntimeError(f"Cannot update closed canvas {self.name}")
        fig = self.plot.figure if self.plot is not None else self._blank_figure()
        self._presented = fig.to_dict()
        if self._on_updated is not None:
            self._on_updated(self)

    def close(self) -> None:
        """Dispose the hosted plot and mark the canvas closed. Idempotent."""
        if self._closed:
            return
        if self.plot is not None:
            self.plot.dispose()
        self.plot = None
        self._closed = True


class CanvasPool:
    """FIFO recycler of at most ``max_canvases`` canvases.

    Attributes:
        max_canvases: Upper bound on live canvases.
        width: Pixel width of new canvases.
        height: Pixel height of new canvases.
    """

    def __init__(
        self,
        max_canvases: int = DEFAULT_MAX_CANVASES,
        *,
        width: int = DEFAULT_CANVAS_WIDTH,
        height: int = DEFAULT_CANVAS_HEIGHT,
        on_canvas_created: Optional[CanvasHook] = None,
        on_canvas_updated: Optional[CanvasHook] = None,
        on_canvas_released: Optional[CanvasHook] = None,
        release_at_exit: bool = True,
    ) -> None:
        """Initialize an empty pool.

        Args:
            max_canvases: Upper bound on live canvases (>= 1).
            width: Pixel width of new canvases.
            height: Pixel height of new canvases.
            on_canvas_created: Called with each new canvas after it joins the pool.
            on_canvas_updated: Called whenever a canvas presents new contents.
            on_canvas_released: Called with each canvas after it is closed.
            release_at_exit: Close remaining canvases when the pool is garbage
                collected or the interpreter exits.

        Raises:
            ValueError: If max_canvases < 1.
        """
        if max_canvases < 1:
            raise ValueError(f"max_canvases must be >= 1, got {max_canvases}")
        self.max_canvases = int(max_canvases)
        self.width = width
        self.height = height
        self._on_canvas_created = on_canvas_created
        self._on_canvas_updated = on_canvas_updated
        self._on_canvas_released = on_canvas_released
        self._canvases: deque[Canvas] = deque()
        self._active: Optional[Canvas] = None
        if release_at_exit:
            # holds the deque, not the pool, so the pool itself can be collected
            weakref.finalize(self, _close_canvases, self._canvases)

    def __len__(self) -> int:
        return len(self._canvases)

    def __iter__(self) -> Iterator[Canvas]:
        return iter(tuple(self._canvases))

    def size(self) -> int:
        return len(self._canvases)

    @property
    def canvases(self) -> tuple[Canvas, ...]:
        """Live canvases, oldest first."""
        return tuple(self._canvases)

    @property
    def active(self) -> Optional[Canvas]:
        """Most recently acquired canvas, if it is still live."""
        return self._active

    def is_full(self) -> bool:
        return len(self._canvases) >= self.max_canvases

    def evict_oldest_if_full(self) -> Optional[Canvas]:
        """Close and release the oldest canvas when the pool is at capacity.

        Returns:
            The evicted canvas, or None if nothing was evicted.
        """
        evicted = None
        while self.is_full():
            evicted = self._canvases.popleft()
            logger.debug(f"evicting {evicted.name} (pool size {len(self._canvases) + 1}/{self.max_canvases})")
            self._release(evicted)
        return evicted

    def acquire(self) -> Canvas:
        """Create a new canvas, evicting the oldest first if the pool is full."""
        self.evict_oldest_if_full()
        canvas = Canvas(width=self.width, height=self.height, on_updated=self._on_canvas_updated)
        self._canvases.append(canvas)
        self._active = canvas
        logger.debug(f"acquired {canvas.name} ({len(self._canvases)}/{self.max_canvases})")
        if self._on_canvas_created is not None:
            self._on_canvas_created(canvas)
        return canvas

    def release(self, canvas: Canvas) -> None:
        """Close and remove ``canvas`` from the pool; no-op if it is not pooled."""
        try:
            self._canvases.remove(canvas)
        except ValueError:
            return
        self._release(canvas)

    def close_all(self) -> None:
        """Release every remaining canvas, oldest first. Idempotent."""
        while self._canvases:
            self._release(self._canvases.popleft())

    def _release(self, canvas: Canvas) -> None:
        canvas.close()
        if self._active is canvas:
            self._active = None
        if self._on_canvas_released is not None:
            self._on_canvas_released(canvas)
