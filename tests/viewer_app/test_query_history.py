"""Tests for the bounded QueryHistory."""

import pytest

from sqlplotter.viewer_app.query_history import DEFAULT_MAX_QUERY_HISTORY, QueryHistory


def test_default_capacity():
    assert QueryHistory().max_entries == DEFAULT_MAX_QUERY_HISTORY == 10


def test_oldest_entry_is_dropped():
    history = QueryHistory(max_entries=3)
    for i in range(5):
        history.add(f"SELECT {i}")
    assert len(history) == 3
    assert history.entries == ["SELECT 2", "SELECT 3", "SELECT 4"]
    assert list(history) == history.entries


def test_duplicates_are_kept():
    history = QueryHistory(max_entries=3)
    history.add("SELECT 1")
    history.add("SELECT 1")
    assert history.entries == ["SELECT 1", "SELECT 1"]


def test_clear():
    history = QueryHistory()
    history.add("SELECT 1")
    history.clear()
    assert len(history) == 0


def test_invalid_capacity():
    with pytest.raises(ValueError):
        QueryHistory(max_entries=0)
