# tests/conftest.py
"""Pytest configuration and shared fixtures for sqlplotter tests."""
from __future__ import annotations

import sys
from pathlib import Path

import pytest


def pytest_configure() -> None:
    # Ensure sqlplotter package is importable when running tests from repo root.
    repo_root = Path(__file__).resolve().parents[1]
    src_dir = repo_root / "src"
    if src_dir.exists() and str(src_dir) not in sys.path:
        sys.path.insert(0, str(src_dir))


@pytest.fixture
def header() -> list[str]:
    """Column names using the label__unit convention (plus one plain column)."""
    return ["energy__MeV", "drift_time__ns", "tag"]


@pytest.fixture
def rows() -> list[list[str | None]]:
    """Eight rows of text fields; every numeric field parses."""
    return [
        ["1.0", "10", "a"],
        ["2.0", "12", "b"],
        ["3.0", "15", "a"],
        ["4.0", "11", "c"],
        ["5.0", "19", "b"],
        ["6.0", "14", "a"],
        ["7.0", "13", "c"],
        ["8.0", "18", "b"],
    ]
