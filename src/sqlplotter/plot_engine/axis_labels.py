"""Axis labels derived from column naming conventions.

Column names may carry a unit after a double underscore, e.g. ``energy__MeV``
or ``drift_time__ns``. The label part has single underscores turned into
spaces: ``drift_time__ns`` -> ``drift time (ns)``.
"""

from __future__ import annotations

from dataclasses import dataclass

COLUMN_UNIT_SEPARATOR = "__"
ENTRIES_TITLE = "Entries"


def _split(name: str) -> tuple[str, str] | None:
    label, sep, unit = name.partition(COLUMN_UNIT_SEPARATOR)
    if not sep:
        return None
    return label, unit


def format_label(name: str) -> str:
    """Human-readable axis title: ``"energy__MeV"`` -> ``"energy (MeV)"``.

    Names without the separator are returned unchanged.
    """
    parts = _split(name)
    if parts is None:
        return name
    label, unit = parts
    return f"{label.replace('_', ' ')} ({unit})"


def extract_unit(name: str) -> str:
    """Unit part of a column name, or ``""`` when there is none."""
    parts = _split(name)
    if parts is None:
        return ""
    return parts[1]


def entries_axis_title(unit: str, width: float) -> str:
    """Y-axis title for a histogram, e.g. ``"Entries / 0.5 MeV"``."""
    if not unit:
        return ENTRIES_TITLE
    return f"{ENTRIES_TITLE} / {width:g} {unit}"


@dataclass(frozen=True)
class AxisLabel:
    """Display name and unit for one plotted column."""
    display_name: str
    unit: str = ""

    @classmethod
    def from_column(cls, name: str) -> "AxisLabel":
        return cls(display_name=format_label(name), unit=extract_unit(name))
