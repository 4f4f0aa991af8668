"""Unit tests for viewer_app module (env helpers, controller without a page)."""

from __future__ import annotations

import os
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from sqlplotter.plot_engine.plot_objects import Histogram1D
from sqlplotter.viewer_app import viewer_app
from sqlplotter.viewer_app.sqlite_source import SELECT_ONLY_MESSAGE
from sqlplotter.viewer_app.viewer_config import ViewerConfig, ViewerConfigData


def test_env_bool(monkeypatch):
    key = "_TEST_SQLPLOTTER_BOOL_XYZ"
    monkeypatch.delenv(key, raising=False)
    assert viewer_app._env_bool(key, True) is True
    for val in ("1", "true", "Yes", "on"):
        monkeypatch.setenv(key, val)
        assert viewer_app._env_bool(key, False) is True
    for val in ("0", "false", "No", "off"):
        monkeypatch.setenv(key, val)
        assert viewer_app._env_bool(key, True) is False
    monkeypatch.setenv(key, "maybe")
    assert viewer_app._env_bool(key, False) is False


def test_env_int(monkeypatch):
    key = "_TEST_SQLPLOTTER_INT_XYZ"
    monkeypatch.delenv(key, raising=False)
    assert viewer_app._env_int(key, 8080) == 8080
    monkeypatch.setenv(key, "9000")
    assert viewer_app._env_int(key, 8080) == 9000
    monkeypatch.setenv(key, "not-a-port")
    assert viewer_app._env_int(key, 8080) == 8080


@pytest.fixture
def controller(tmp_path, monkeypatch):
    """Controller with the widget handles it touches replaced by mocks."""
    monkeypatch.setattr(viewer_app, "ui", MagicMock())
    config = ViewerConfig(path=tmp_path / "cfg.json", data=ViewerConfigData(max_canvases=2, max_query_history=3))
    ctrl = viewer_app.ViewerController(config)
    for name in (
        "_db_label", "_table_select", "_message_label", "_result_table", "_history_column",
        "_sql_box", "_hints_card", "_hints_button", "_x_select", "_y_select",
        "_kind_select", "_dim_select",
    ):
        setattr(ctrl, name, MagicMock())
    yield ctrl
    ctrl.close()


def test_controller_uses_config(controller):
    assert controller.orchestrator.canvas_pool.max_canvases == 2
    assert controller.history.max_entries == 3


def test_open_database_lists_tables_and_remembers_path(controller, db_path):
    controller._open_database(str(db_path))
    assert controller.source is not None
    controller._table_select.set_options.assert_called_once_with(["events", 'odd "name"'], value=None)
    assert controller.config.get_last_db_path() == str(db_path)
    assert controller.config.path.exists()


def test_open_missing_database_keeps_state(controller, tmp_path):
    controller._open_database(str(tmp_path / "missing.sqlite"))
    assert controller.source is None
    controller._message_label.set_text.assert_called_with("Failed to open selected database.")


def test_run_sql_records_history_even_when_rejected(controller, db_path):
    controller._open_database(str(db_path))
    controller._sql_box.value = "DELETE FROM events"
    controller._on_run_sql()
    assert controller.history.entries == ["DELETE FROM events"]
    controller._message_label.set_text.assert_called_with(SELECT_ONLY_MESSAGE)


def test_run_sql_loads_result(controller, db_path):
    controller._open_database(str(db_path))
    controller._sql_box.value = "SELECT energy__MeV FROM events"
    controller._on_run_sql()
    assert controller.result.header == ["energy__MeV"]
    assert len(controller.result.rows) == 3
    controller._sql_box.set_value.assert_called_with("")


def test_plot_clicked_builds_plot(controller, db_path):
    controller._open_database(str(db_path))
    controller._on_table_selected(SimpleNamespace(value="events"))
    controller._x_select.value = 1
    controller._y_select.value = None
    controller._kind_select.value = "histogram"
    controller._dim_select.value = "1D"
    controller._on_plot_clicked()

    plot = controller.orchestrator.current_plot
    assert isinstance(plot, Histogram1D)
    assert plot.stats["entries"] == 2
    assert len(controller.orchestrator.canvas_pool) == 1


def test_plot_clicked_without_x_does_nothing(controller):
    controller._x_select.value = None
    controller._on_plot_clicked()
    assert controller.orchestrator.current_plot is None


def test_main_hands_db_path_to_page_through_env(monkeypatch):
    """The path must survive the module re-import done by reload mode."""
    captured = {}
    monkeypatch.setenv(viewer_app.DB_PATH_ENV_VAR, "")
    monkeypatch.setenv("PORT", "9123")
    monkeypatch.setattr(viewer_app, "configure_logging", lambda: None)
    monkeypatch.setattr(viewer_app.ui, "run", lambda **kwargs: captured.update(kwargs))

    assert viewer_app._initial_db_path() is None
    viewer_app.main(["~/events.sqlite"])

    expected = str(Path("~/events.sqlite").expanduser())
    assert os.environ[viewer_app.DB_PATH_ENV_VAR] == expected
    assert viewer_app._initial_db_path() == expected
    assert captured["port"] == 9123
