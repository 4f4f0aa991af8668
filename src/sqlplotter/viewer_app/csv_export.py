"""CSV export of the displayed query result."""

from __future__ import annotations

import csv
from pathlib import Path
from typing import Optional, Sequence, Union

from sqlplotter.utils.logging import get_logger
from sqlplotter.viewer_app.sqlite_source import QueryResult

logger = get_logger(__name__)


def csv_path(path: Union[str, Path]) -> Path:
    """``path`` with a ``.csv`` suffix appended when it is missing."""
    p = Path(path)
    if not p.name.lower().endswith(".csv"):
        p = p.with_name(p.name + ".csv")
    return p


def export_csv(
    path: Union[str, Path],
    header: Sequence[str],
    rows: Sequence[Sequence[Optional[str]]],
) -> Path:
    """Write the table as CSV with every field quoted.

    Returns:
        The path actually written.

    Raises:
        ValueError: If there is no table data to export.
    """
    result = QueryResult(header=list(header), rows=[list(r) for r in rows])
    if result.is_empty:
        raise ValueError("No displayed table data to export.")
    out = csv_path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    df = result.to_dataframe()
    df.to_csv(out, index=False, quoting=csv.QUOTE_ALL, na_rep="")
    logger.info(f"CSV export complete: {out} ({len(df)} rows)")
    return out
