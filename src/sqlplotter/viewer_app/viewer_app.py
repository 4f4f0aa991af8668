"""SQLite viewer: standalone NiceGUI application around PlotOrchestrator.

Browse tables, run SELECT queries, export results as CSV and plot columns as
histograms or scatter plots. Each plot opens on a new canvas card; at most
``max_canvases`` cards are kept, oldest closed first.

Run:
    sqlplotter [path/to/database.sqlite]
    python -m sqlplotter.viewer_app.viewer_app

Env vars:
    SQLPLOTTER_GUI_NATIVE: 1/0 (default 0)
    SQLPLOTTER_GUI_RELOAD: 1/0 (default 0)
    SQLPLOTTER_LOG_LEVEL: logging level (default INFO)
    SQLPLOTTER_DB_PATH: database opened on page load (set by main() from argv)
    HOST: bind host (default 127.0.0.1)
    PORT: bind port (default 8080)
"""

from __future__ import annotations

import os
import sqlite3
import sys
from pathlib import Path
from typing import Any, Optional

from nicegui import ui

from sqlplotter.utils.gui_defaults import setUpGuiDefaults
from sqlplotter.utils.logging import configure_logging, get_logger
from sqlplotter.plot_engine.canvas_pool import Canvas, CanvasPool
from sqlplotter.plot_engine.plot_orchestrator import PlotOrchestrator
from sqlplotter.plot_engine.plot_state import NO_COLUMN, Dimension, PlotKind
from sqlplotter.viewer_app.csv_export import export_csv
from sqlplotter.viewer_app.query_history import QueryHistory
from sqlplotter.viewer_app.sql_hints import hints_text
from sqlplotter.viewer_app.sqlite_source import QueryResult, SqliteDataSource, is_select_query, SELECT_ONLY_MESSAGE
from sqlplotter.viewer_app.viewer_config import ViewerConfig

logger = get_logger(__name__)

_PLOT_KIND_OPTIONS = {PlotKind.HISTOGRAM.value: "Histogram", PlotKind.SCATTER.value: "Scatter"}
_DIMENSION_OPTIONS = {Dimension.ONE_D.value: "1D", Dimension.TWO_D.value: "2D"}


def _env_bool(name: str, default: bool) -> bool:
    """Parse env var as bool; if unset/invalid returns default."""
    raw = os.getenv(name)
    if raw is None:
        return default
    v = raw.strip().lower()
    if v in {"1", "true", "yes", "on"}:
        return True
    if v in {"0", "false", "no", "off"}:
        return False
    return default


def _env_int(name: str, default: int) -> int:
    """Parse env var as int; if unset/invalid returns default."""
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


class ViewerController:
    """Wires the SQLite source, query history and plot engine to NiceGUI widgets.

    **Public API:**

    - **__init__(config, db_path=None)**: configure; opens db_path (or the last database) if given.
    - **build()**: build the page UI. Call once per page.
    - **close()**: release canvases and the database connection.
    """

    def __init__(self, config: ViewerConfig, db_path: Optional[str] = None) -> None:
        self.config = config
        data = config.data
        self.history = QueryHistory(data.max_query_history)
        self.result = QueryResult()
        self.source: Optional[SqliteDataSource] = None
        self._ui_alive = False
        self._canvas_cards: dict[str, tuple[ui.card, ui.plotly]] = {}

        pool = CanvasPool(
            data.max_canvases,
            width=data.canvas_width,
            height=data.canvas_height,
            on_canvas_created=self._on_canvas_created,
            on_canvas_updated=self._on_canvas_updated,
            on_canvas_released=self._on_canvas_released,
            release_at_exit=False,
        )
        self.orchestrator = PlotOrchestrator(pool)

        # UI handles
        self._db_label: Optional[ui.label] = None
        self._db_input: Optional[ui.input] = None
        self._table_select: Optional[ui.select] = None
        self._message_label: Optional[ui.label] = None
        self._result_table: Optional[ui.table] = None
        self._history_column: Optional[ui.column] = None
        self._sql_box: Optional[ui.textarea] = None
        self._hints_card: Optional[ui.card] = None
        self._hints_button: Optional[ui.button] = None
        self._csv_input: Optional[ui.input] = None
        self._kind_select: Optional[ui.select] = None
        self._dim_select: Optional[ui.select] = None
        self._x_select: Optional[ui.select] = None
        self._y_select: Optional[ui.select] = None
        self._canvas_row: Optional[ui.row] = None

        self._initial_db = db_path or data.last_db_path

    # ------------------------------------------------------------------
    # Layout
    # ------------------------------------------------------------------

    def build(self) -> None:
        """Build the viewer page."""
        self._ui_alive = True
        with ui.column().classes("w-full gap-2 p-4"):
            with ui.row().classes("w-full items-center gap-2"):
                self._db_label = ui.label("Database: (none)")
                self._db_input = ui.input("SQLite file", value=self._initial_db or "").classes("w-96")
                ui.button("Change File", on_click=self._on_change_file)

            with ui.row().classes("items-center gap-2"):
                ui.label("Table:")
                self._table_select = ui.select([], on_change=self._on_table_selected).classes("w-64")

            with ui.row().classes("w-full no-wrap gap-4"):
                with ui.column().classes("flex-1 min-w-0"):
                    self._message_label = ui.label("")
                    self._result_table = ui.table(columns=[], rows=[], row_key="_row").classes("w-full max-h-96")
                    with ui.row().classes("w-full justify-end items-center gap-2"):
                        self._csv_input = ui.input("CSV file", value="query_result.csv").classes("w-64")
                        ui.button("Save as CSV", on_click=self._on_export_csv)
                self._build_plot_controls()

            with ui.card().classes("w-full"):
                ui.label("Recent Queries").classes("font-semibold")
                self._history_column = ui.column().classes("gap-0")

            ui.label("Execute SQL:")
            with ui.row().classes("w-full no-wrap items-start gap-2"):
                self._sql_box = ui.textarea(placeholder="SELECT * FROM ...").classes("flex-1")
                ui.button("Run", on_click=self._on_run_sql)

            self._hints_button = ui.button("Show Examples", on_click=self._on_toggle_hints)
            with ui.card().classes("w-full") as self._hints_card:
                ui.label("Example SQL Queries").classes("font-semibold")
                ui.code(hints_text(), language="sql").classes("w-full")
            self._set_hints_visible(self.config.data.hints_visible)

            self._canvas_row = ui.row().classes("w-full gap-4")

        if self._initial_db:
            self._open_database(self._initial_db)

    def _build_plot_controls(self) -> None:
        with ui.card().classes("w-64"):
            ui.label("Plot Controls").classes("font-semibold self-center")
            self._kind_select = ui.select(
                _PLOT_KIND_OPTIONS, label="Plot Type:", value=PlotKind.HISTOGRAM.value
            ).classes("w-full")
            self._dim_select = ui.select(
                _DIMENSION_OPTIONS, label="Dimensions:", value=Dimension.ONE_D.value,
                on_change=self._on_dimension_changed,
            ).classes("w-full")
            self._x_select = ui.select({}, label="X Column:").classes("w-full")
            self._y_select = ui.select({}, label="Y Column:").classes("w-full")
            self._y_select.disable()
            ui.button("Plot Data", on_click=self._on_plot_clicked).classes("self-center")

    # ------------------------------------------------------------------
    # Canvas hooks
    # ------------------------------------------------------------------

    def _on_canvas_created(self, canvas: Canvas) -> None:
        if not self._ui_alive or self._canvas_row is None:
            return
        with self._canvas_row:
            with ui.card() as card:
                ui.label(f"{canvas.title}: {canvas.name}").classes("text-xs text-gray-500")
                plot = ui.plotly(canvas.presented_figure)
        self._canvas_cards[canvas.name] = (card, plot)

    def _on_canvas_updated(self, canvas: Canvas) -> None:
        entry = self._canvas_cards.get(canvas.name)
        if not self._ui_alive or entry is None:
            return
        entry[1].update_figure(canvas.presented_figure)

    def _on_canvas_released(self, canvas: Canvas) -> None:
        entry = self._canvas_cards.pop(canvas.name, None)
        if not self._ui_alive or entry is None:
            return
        entry[0].delete()

    # ------------------------------------------------------------------
    # Database / query handlers
    # ------------------------------------------------------------------

    def _open_database(self, path: str) -> None:
        source = SqliteDataSource(path)
        try:
            source.connect()
            tables = source.list_tables()
        except (FileNotFoundError, sqlite3.Error) as e:
            logger.warning(f"Failed to open database {path}: {e}")
            source.close()
            self._show_message("Failed to open selected database.")
            ui.notify(f"Failed to open {path}: {e}", type="negative")
            return

        if self.source is not None:
            self.source.close()
        self.source = source
        self._db_label.set_text(f"Database: {path}")
        self._table_select.set_options(tables, value=None)
        self._load_result(QueryResult())
        self.config.set_last_db_path(str(path))
        self._save_config()

    def _on_change_file(self) -> None:
        path = (self._db_input.value or "").strip()
        if not path:
            ui.notify("Enter the path of a SQLite file", type="warning")
            return
        self._open_database(path)

    def _on_table_selected(self, e: Any) -> None:
        name = e.value
        if not name or self.source is None:
            return
        try:
            result = self.source.select_table(name)
        except sqlite3.Error as err:
            logger.warning(f"Failed to read table {name!r}: {err}")
            self._show_message(f"Failed to read table {name}.")
            return
        self._load_result(result)

    def _on_run_sql(self) -> None:
        query = self._sql_box.value or ""
        self.history.add(query)
        self._refresh_history()

        if not is_select_query(query):
            self._show_message(SELECT_ONLY_MESSAGE)
            return
        if self.source is None:
            self._show_message("No database open.")
            return
        try:
            result = self.source.run_query(query)
        except (ValueError, sqlite3.Error) as err:
            logger.warning(f"Query failed: {err}")
            self._show_message("Query failed or returned no results.")
            ui.notify(str(err), type="negative")
            return

        self._load_result(result)
        self._table_select.set_value(None)
        self._sql_box.set_value("")

    def _on_export_csv(self) -> None:
        path = (self._csv_input.value or "").strip()
        if not path:
            return
        try:
            written = export_csv(path, self.result.header, self.result.rows)
        except ValueError as err:
            ui.notify(str(err), type="warning")
            return
        except OSError as err:
            logger.error(f"Failed to open file for writing: {path}: {err}")
            ui.notify(f"Failed to open file for writing: {path}", type="negative")
            return
        ui.notify(f"CSV export complete: {written}", type="positive")

    def _on_toggle_hints(self) -> None:
        visible = not self.config.data.hints_visible
        self._set_hints_visible(visible)
        self.config.set_hints_visible(visible)
        self._save_config()

    def _set_hints_visible(self, visible: bool) -> None:
        self._hints_card.set_visibility(visible)
        self._hints_button.set_text("Hide Examples" if visible else "Show Examples")

    # ------------------------------------------------------------------
    # Plot handlers
    # ------------------------------------------------------------------

    def _on_dimension_changed(self, e: Any) -> None:
        if e.value == Dimension.ONE_D.value:
            self._y_select.set_value(None)
            self._y_select.disable()
        else:
            self._y_select.enable()

    def _on_plot_clicked(self) -> None:
        x_index = self._x_select.value
        if x_index is None or not 0 <= x_index < len(self.result.header):
            logger.warning("Invalid X column selection.")
            ui.notify("Invalid X column selection.", type="warning")
            return
        y_index = self._y_select.value
        plot = self.orchestrator.plot(
            self.result.rows,
            self.result.header,
            x_index,
            NO_COLUMN if y_index is None else y_index,
            PlotKind(self._kind_select.value),
            Dimension(self._dim_select.value),
        )
        if plot is None:
            ui.notify("Invalid column selection.", type="warning")

    # ------------------------------------------------------------------
    # View refresh
    # ------------------------------------------------------------------

    def _load_result(self, result: QueryResult) -> None:
        self.result = result
        columns = [
            {"name": f"c{i}", "label": name, "field": f"c{i}", "align": "left"}
            for i, name in enumerate(result.header)
        ]
        rows = [
            {"_row": r, **{f"c{i}": v for i, v in enumerate(row)}}
            for r, row in enumerate(result.rows)
        ]
        self._result_table.columns = columns
        self._result_table.rows = rows
        self._result_table.update()
        self._show_message(f"{len(result.rows)} rows" if result.header else "")

        options = {i: name for i, name in enumerate(result.header)}
        self._x_select.set_options(options, value=None)
        self._y_select.set_options(options, value=None)

    def _refresh_history(self) -> None:
        self._history_column.clear()
        with self._history_column:
            for q in self.history:
                ui.label(q).classes("font-mono text-xs")

    def _show_message(self, text: str) -> None:
        self._message_label.set_text(text)

    def _save_config(self) -> None:
        try:
            self.config.save()
        except OSError as e:
            ui.notify(f"Could not save settings: {e}", type="warning")

    def close(self) -> None:
        """Release canvases and the database connection."""
        self._ui_alive = False
        self.orchestrator.close()
        if self.source is not None:
            self.source.close()
            self.source = None


# ---------------------------------------------------------------------------
# Page
# ---------------------------------------------------------------------------

DB_PATH_ENV_VAR = "SQLPLOTTER_DB_PATH"


def _initial_db_path() -> Optional[str]:
    """Database path handed over by main(); survives the reload re-import."""
    return os.getenv(DB_PATH_ENV_VAR) or None


@ui.page("/")
def home() -> None:
    """Home page: one ViewerController per client."""
    setUpGuiDefaults("text-sm")
    ui.page_title("SQLite Viewer")

    controller = ViewerController(ViewerConfig.load(), db_path=_initial_db_path())
    controller.build()
    ui.context.client.on_disconnect(controller.close)


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------

def main(argv: Optional[list[str]] = None) -> None:
    """Start the viewer. An optional first argument is the database to open."""
    configure_logging()

    args = sys.argv[1:] if argv is None else argv
    if args:
        os.environ[DB_PATH_ENV_VAR] = str(Path(args[0]).expanduser())

    native_bool = _env_bool("SQLPLOTTER_GUI_NATIVE", False)
    reload = _env_bool("SQLPLOTTER_GUI_RELOAD", False)
    host = os.getenv("HOST", "127.0.0.1")
    port = _env_int("PORT", 8080)

    logger.info(f"Starting SQLite viewer: port={port} reload={reload} native={native_bool}")

    run_kwargs: dict = {
        "host": host,
        "port": port,
        "reload": reload,
        "native": native_bool,
        "title": "SQLite Viewer",
    }
    if native_bool:
        run_kwargs["window_size"] = (1200, 900)
    ui.run(**run_kwargs)


if __name__ in {"__main__", "__mp_main__"}:
    main()
