"""SQLite viewer collaborators: data source, query history, CSV export, config and the NiceGUI app.

The NiceGUI page lives in ``sqlplotter.viewer_app.viewer_app`` and is not
imported here so the headless pieces can be used without starting a UI.
"""

from sqlplotter.viewer_app.csv_export import export_csv
from sqlplotter.viewer_app.query_history import QueryHistory
from sqlplotter.viewer_app.sqlite_source import QueryResult, SqliteDataSource
from sqlplotter.viewer_app.viewer_config import ViewerConfig, ViewerConfigData

__all__ = [
    "QueryHistory",
    "QueryResult",
    "SqliteDataSource",
    "ViewerConfig",
    "ViewerConfigData",
    "export_csv",
]
