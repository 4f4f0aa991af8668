"""Numeric column extraction from text query results.

This module provides the TableProcessor class, which turns the row-major
string table produced by a query into numeric columns for plotting.
Extraction is lossy on purpose: fields that are missing, empty or not a
finite number are dropped from the column, never substituted.
"""

from __future__ import annotations

from typing import Optional, Sequence

import numpy as np
import pandas as pd

Row = Sequence[Optional[str]]


class TableProcessor:
    """Extracts numeric columns from a header + rows table.

    Attributes:
        header: Column names, aligned with each row.
        rows: Row-major table of text fields (None for SQL NULL).
    """

    def __init__(self, header: Sequence[str], rows: Sequence[Row]) -> None:
        self.header = list(header)
        self.rows = rows

    @property
    def n_columns(self) -> int:
        return len(self.header)

    @property
    def n_rows(self) -> int:
        return len(self.rows)

    def column_name(self, index: int) -> str:
        return self.header[index]

    def raw_column(self, index: int) -> pd.Series:
        """Text fields of one column; short rows contribute None."""
        values = [row[index] if len(row) > index else None for row in self.rows]
        return pd.Series(values, dtype=object)

    def numeric_column(self, index: int) -> np.ndarray:
        """Finite numeric values of one column, in row order.

        Args:
            index: Column index into the header.

        Returns:
            Float array whose length is <= the row count.
        """
        raw = self.raw_column(index)
        if raw.empty:
            return np.empty(0, dtype=float)
        text = raw.map(lambda v: v.strip() if isinstance(v, str) else v)
        values = pd.to_numeric(text, errors="coerce").astype(float)
        values = values[np.isfinite(values)]
        return values.to_numpy(dtype=float)
