"""Natural language relative phrases.

Parses phrases such as "3 days", "in 2 weeks", "1 year, 2 months ago",
"tomorrow" or "next Monday" into unsigned duration components plus a
direction. Weekday phrases are only meaningful against a reference date,
so parsing always takes one.

Supported patterns:
    Keywords:
        - "now", "today" -> no offset
        - "yesterday" -> 1 day before
        - "tomorrow" -> 1 day after

    Period keywords:
        - "next week", "last month", "next year", "last day", ...

    Weekday phrases (whole-day offsets from the reference date):
        - "Monday" -> next Monday, including today
        - "next Monday" -> next Monday strictly after today
        - "last Monday" -> most recent Monday strictly before today
        - "this Monday" -> Monday of the current Monday-Sunday week

    Duration phrases:
        - "3 days", "+3 days", "-3 days", "a week", "an hour"
        - "1 year, 2 months and 3 days"
        - "in 2 weeks", "2 weeks from now", "2 weeks later"
        - "3 days ago" (flips every term)
"""

import logging
import re
from datetime import datetime
from typing import NamedTuple

from dateutil.relativedelta import relativedelta

from intime.errors import ParseError

logger = logging.getLogger(__name__)

_DAY_KEYWORDS: dict[str, int] = {
    "now": 0,
    "today": 0,
    "yesterday": -1,
    "tomorrow": 1,
}

# Weekday names to day-of-week number (Monday=0, Sunday=6)
_WEEKDAYS: dict[str, int] = {
    "monday": 0,
    "tuesday": 1,
    "wednesday": 2,
    "thursday": 3,
    "friday": 4,
    "saturday": 5,
    "sunday": 6,
    "mon": 0,
    "tue": 1,
    "tues": 1,
    "wed": 2,
    "thu": 3,
    "thur": 3,
    "thurs": 3,
    "fri": 4,
    "sat": 5,
    "sun": 6,
}

# Unit words to (field, multiplier); plurals are handled by stripping an "s"
_UNITS: dict[str, tuple[str, int]] = {
    "second": ("seconds", 1),
    "sec": ("seconds", 1),
    "s": ("seconds", 1),
    "minute": ("minutes", 1),
    "min": ("minutes", 1),
    "hour": ("hours", 1),
    "hr": ("hours", 1),
    "h": ("hours", 1),
    "day": ("days", 1),
    "d": ("days", 1),
    "week": ("weeks", 1),
    "wk": ("weeks", 1),
    "w": ("weeks", 1),
    "fortnight": ("weeks", 2),
    "month": ("months", 1),
    "mo": ("months", 1),
    "year": ("years", 1),
    "yr": ("years", 1),
    "y": ("years", 1),
}

_WEEKDAY_PHRASE = re.compile(r"^(?:(?P<direction>next|last|this)\s+)?(?P<day>[a-z]+)$")
_PERIOD_PHRASE = re.compile(r"^(?P<direction>next|last|previous)\s+(?P<unit>[a-z]+)$")
_DURATION_PHRASE = re.compile(
    r"^(?:in\s+)?(?P<body>.+?)(?:\s+(?P<suffix>ago|from\s+now|later|hence))?$"
)
_TERM = re.compile(
    r"(?:,?\s*and\b|,)?\s*(?P<sign>[+-])?\s*(?P<amount>[0-9]+|an?\b)\s*"
    r"(?P<unit>[a-z]+)\s*"
)


class RelativeOffset(NamedTuple):
    """Unsigned duration components plus the direction they point in."""

    components: dict[str, int]
    inverted: bool

    def to_relativedelta(self) -> relativedelta:
        delta = relativedelta(**self.components)
        return -delta if self.inverted else delta


def _unit(word: str) -> tuple[str, int] | None:
    return _UNITS.get(word) or _UNITS.get(word.removesuffix("s"))


def _normalize(text: str, signed: dict[str, int]) -> RelativeOffset:
    """Split signed components into magnitudes and one direction."""
    nonzero = [value for value in signed.values() if value]
    if any(value > 0 for value in nonzero) and any(value < 0 for value in nonzero):
        raise ParseError(
            f"Relative phrase points in both directions: {text!r}\n"
            f"Hint: Use one direction per phrase, e.g. '1 year 2 days ago'"
        )
    inverted = any(value < 0 for value in nonzero)
    components = {field: abs(value) for field, value in signed.items() if value}
    return RelativeOffset(components=components, inverted=inverted)


def _weekday_offset(direction: str | None, reference: datetime, target: int) -> int:
    current = reference.weekday()
    if direction is None:
        return (target - current) % 7
    if direction == "next":
        return (target - current) % 7 or 7
    if direction == "last":
        return -((current - target) % 7 or 7)
    return target - current


def _parse_terms(text: str, body: str) -> dict[str, int]:
    signed: dict[str, int] = {}
    pos = 0
    while pos < len(body):
        match = _TERM.match(body, pos)
        if match is None or match.end() == pos:
            raise ParseError(f"Cannot parse relative phrase: {text!r}")
        unit = _unit(match["unit"])
        if unit is None:
            raise ParseError(
                f"Unknown time unit {match['unit']!r} in relative phrase: {text!r}"
            )
        field, multiplier = unit
        amount = 1 if match["amount"] in ("a", "an") else int(match["amount"])
        if match["sign"] == "-":
            amount = -amount
        signed[field] = signed.get(field, 0) + amount * multiplier
        pos = match.end()
    return signed


def parse_phrase(text: str, reference: datetime) -> RelativeOffset:
    """Parse a relative phrase into a RelativeOffset.

    Args:
        text: The phrase, e.g. "3 days ago" or "next friday"
        reference: The instant weekday phrases are counted from

    Raises:
        ParseError: If the phrase is not understood or mixes directions
    """
    if not isinstance(text, str):
        raise TypeError(
            f"Relative phrase must be a str.\n"
            f"Got {type(text).__name__!r}: {text!r}"
        )
    phrase = " ".join(text.lower().split())
    if not phrase:
        raise ParseError("Cannot parse an empty relative phrase")

    if phrase in _DAY_KEYWORDS:
        return _normalize(text, {"days": _DAY_KEYWORDS[phrase]})

    match = _WEEKDAY_PHRASE.match(phrase)
    if match and match["day"] in _WEEKDAYS:
        days = _weekday_offset(match["direction"], reference, _WEEKDAYS[match["day"]])
        return _normalize(text, {"days": days})

    match = _PERIOD_PHRASE.match(phrase)
    if match and (unit := _unit(match["unit"])) is not None:
        field, multiplier = unit
        sign = 1 if match["direction"] == "next" else -1
        return _normalize(text, {field: sign * multiplier})

    match = _DURATION_PHRASE.match(phrase)
    if match is None:
        raise ParseError(f"Cannot parse relative phrase: {text!r}")
    signed = _parse_terms(text, match["body"])
    if match["suffix"] == "ago":
        signed = {field: -value for field, value in signed.items()}
    offset = _normalize(text, signed)
    logger.debug("Parsed %r as %s", text, offset)
    return offset
