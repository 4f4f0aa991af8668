"""SQLite data source for the viewer.

Query results are materialized as text: every value is converted with str()
and SQL NULL stays None, which is the table shape the plot engine consumes.
"""

from __future__ import annotations

import sqlite3
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Union

import pandas as pd

from sqlplotter.utils.logging import get_logger

logger = get_logger(__name__)

SELECT_ONLY_MESSAGE = "Only SELECT queries are allowed."


@dataclass
class QueryResult:
    """Header and text rows of one query."""
    header: list[str] = field(default_factory=list)
    rows: list[list[Optional[str]]] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.rows

    def to_dataframe(self) -> pd.DataFrame:
        return pd.DataFrame(self.rows, columns=self.header, dtype=object)


def is_select_query(sql: str) -> bool:
    """True for statements that start with SELECT (case-insensitive)."""
    return sql.strip().lower().startswith("select")


def _as_text(value: object) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return str(value)


class SqliteDataSource:
    """Read-only access to one SQLite database file.

    Attributes:
        path: Database file path.
    """

    def __init__(self, path: Union[str, Path]) -> None:
        self.path = Path(path)
        self._conn: Optional[sqlite3.Connection] = None

    def __enter__(self) -> "SqliteDataSource":
        self.connect()
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    @property
    def is_connected(self) -> bool:
        return self._conn is not None

    def connect(self) -> None:
        """Open the database.

        Raises:
            FileNotFoundError: If the file does not exist.
            sqlite3.Error: If the file cannot be opened as a database.
        """
        if self._conn is not None:
            return
        if not self.path.is_file():
            raise FileNotFoundError(f"Database not found: {self.path}")
        conn = sqlite3.connect(str(self.path))
        try:
            # fails fast on files that are not SQLite databases
            conn.execute("SELECT name FROM sqlite_master LIMIT 1").fetchall()
        except sqlite3.Error:
            conn.close()
            raise
        self._conn = conn
        logger.info(f"Connected to {self.path}")

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None
            logger.debug(f"Closed {self.path}")

    def _connection(self) -> sqlite3.Connection:
        if self._conn is None:
            raise RuntimeError("SqliteDataSource is not connected; call connect() first")
        return self._conn

    def list_tables(self) -> list[str]:
        """Table names in the database, sorted."""
        cur = self._connection().execute(
            "SELECT name FROM sqlite_master WHERE type = 'table' ORDER BY name"
        )
        return [row[0] for row in cur.fetchall()]

    def select_table(self, table_name: str) -> QueryResult:
        """All rows of ``table_name``."""
        quoted = table_name.replace('"', '""')
        return self._execute(f'SELECT * FROM "{quoted}"')

    def run_query(self, sql: str) -> QueryResult:
        """Run a user query.

        Raises:
            ValueError: If the statement is not a SELECT.
            sqlite3.Error: If SQLite rejects the query.
        """
        if not is_select_query(sql):
            raise ValueError(SELECT_ONLY_MESSAGE)
        return self._execute(sql)

    def _execute(self, sql: str) -> QueryResult:
        cur = self._connection().execute(sql)
        header = [d[0] for d in cur.description or ()]
        rows = [[_as_text(v) for v in row] for row in cur.fetchall()]
        logger.info(f"Query returned {len(rows)} rows x {len(header)} columns")
        return QueryResult(header=header, rows=rows)
