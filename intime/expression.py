"""The canonical ISO-8601 duration expression.

Grammar accepted by ``parse_expression``::

    expr      := "P" date_part ["T" time_part]
    date_part := (count "Y")? (count "M")? (count "W")? (count "D")?
    time_part := (count "H")? (count "M")? (count "S")?

At least one count must be present, and a ``T`` must be followed by at
least one time component. ``format_expression`` never emits ``W``: weeks
are folded into days.
"""

import re
from typing import Protocol, TypeAlias

from intime.errors import ParseError

_EXPRESSION = re.compile(
    r"P(?!$)"
    r"(?:(?P<years>[0-9]+)Y)?"
    r"(?:(?P<months>[0-9]+)M)?"
    r"(?:(?P<weeks>[0-9]+)W)?"
    r"(?:(?P<days>[0-9]+)D)?"
    r"(?:T(?=[0-9])"
    r"(?:(?P<hours>[0-9]+)H)?"
    r"(?:(?P<minutes>[0-9]+)M)?"
    r"(?:(?P<seconds>[0-9]+)S)?"
    r")?"
)

# Unit letter to the fields (and multipliers) it is rendered from, in emission order
UnitTable: TypeAlias = tuple[tuple[str, tuple[tuple[str, int], ...]], ...]

_DATE_UNITS: UnitTable = (
    ("Y", (("years", 1),)),
    ("M", (("months", 1),)),
    ("D", (("days", 1), ("weeks", 7))),
)
_TIME_UNITS: UnitTable = (
    ("H", (("hours", 1),)),
    ("M", (("minutes", 1),)),
    ("S", (("seconds", 1),)),
)

ZERO_EXPRESSION = "P0Y"


class _Components(Protocol):
    years: int
    months: int
    weeks: int
    days: int
    hours: int
    minutes: int
    seconds: int


def parse_expression(expression: str) -> dict[str, int]:
    """Parse an expression like "P1Y2M3DT4H5M6S" into component counts.

    Returns a dict with every component field; absent units count as zero.

    Raises:
        ParseError: If the expression does not follow the grammar
    """
    if not isinstance(expression, str):
        raise TypeError(
            f"Duration expression must be a str.\n"
            f"Got {type(expression).__name__!r}: {expression!r}"
        )
    match = _EXPRESSION.fullmatch(expression)
    if match is None:
        raise ParseError(
            f"Invalid duration expression: {expression!r}\n"
            f"Expected 'P[nY][nM][nW][nD][T[nH][nM][nS]]' with at least one unit.\n"
            f"Examples: 'P3D', 'P1Y2M', 'PT30M', 'P1DT12H'"
        )
    return {field: int(value or 0) for field, value in match.groupdict().items()}


def _render(units: UnitTable, source: _Components) -> str:
    parts = []
    for letter, fields in units:
        total = sum(getattr(source, field) * multiplier for field, multiplier in fields)
        if total:
            parts.append(f"{total}{letter}")
    return "".join(parts)


def format_expression(source: _Components) -> str:
    """Render duration components as a canonical expression.

    Sub-second precision and direction are not representable and are
    dropped; an interval with nothing left to render becomes "P0Y".
    """
    date_part = _render(_DATE_UNITS, source)
    time_part = _render(_TIME_UNITS, source)
    if not date_part and not time_part:
        return ZERO_EXPRESSION
    if time_part:
        return f"P{date_part}T{time_part}"
    return f"P{date_part}"
