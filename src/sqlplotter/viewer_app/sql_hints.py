"""Example queries shown by the viewer's "Show Examples" toggle."""

SQL_HINTS: tuple[str, ...] = (
    "-- all rows of a table",
    'SELECT * FROM "events";',
    "-- selected columns with a filter",
    'SELECT energy__MeV, drift_time__ns FROM "events" WHERE energy__MeV > 1.5;',
    "-- sort and limit",
    'SELECT * FROM "events" ORDER BY energy__MeV DESC LIMIT 100;',
    "-- aggregate per group",
    'SELECT run, COUNT(*) AS n, AVG(energy__MeV) AS mean_energy__MeV FROM "events" GROUP BY run;',
    "-- derived column, unit kept with the double-underscore convention",
    'SELECT energy__MeV * 1000 AS energy__keV FROM "events";',
)


def hints_text() -> str:
    return "\n".join(SQL_HINTS)
