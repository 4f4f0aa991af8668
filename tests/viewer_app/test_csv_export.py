"""Tests for CSV export of the displayed table."""

import pytest

from sqlplotter.viewer_app.csv_export import csv_path, export_csv


@pytest.mark.parametrize(
    "given, expected",
    [("out", "out.csv"), ("out.csv", "out.csv"), ("OUT.CSV", "OUT.CSV"), ("data.txt", "data.txt.csv")],
)
def test_csv_path_appends_suffix(tmp_path, given, expected):
    assert csv_path(tmp_path / given).name == expected


def test_export_quotes_every_field(tmp_path):
    out = export_csv(tmp_path / "sub" / "result", ["a", "b"], [["1", 'say "hi"'], [None, "x,y"]])
    assert out == tmp_path / "sub" / "result.csv"
    lines = out.read_text().splitlines()
    assert lines == ['"a","b"', '"1","say ""hi"""', '"","x,y"']


def test_export_without_rows_raises(tmp_path):
    with pytest.raises(ValueError, match="No displayed table data"):
        export_csv(tmp_path / "empty.csv", ["a"], [])
    assert not (tmp_path / "empty.csv").exists()
