"""Fixtures for viewer_app tests: a small SQLite database on disk."""

from __future__ import annotations

import sqlite3
from pathlib import Path

import pytest


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    path = tmp_path / "events.sqlite"
    conn = sqlite3.connect(str(path))
    conn.executescript(
        """
        CREATE TABLE events (run INTEGER, energy__MeV REAL, drift_time__ns REAL, tag TEXT);
        INSERT INTO events VALUES (1, 1.5, 10, 'a');
        INSERT INTO events VALUES (1, 2.5, 12, 'b');
        INSERT INTO events VALUES (2, NULL, 15, 'a');
        CREATE TABLE [odd "name"] (x INTEGER);
        INSERT INTO [odd "name"] VALUES (7);
        """
    )
    conn.commit()
    conn.close()
    return path
