"""Anchor instants and base-instant parsing.

Every projection resolves an interval against a concrete ``datetime``. This
module owns the one clock read, the timezone lookup, and the parsing of
free-form base instants for ``DurationInterval.project_from``.
"""

import logging
from datetime import datetime, tzinfo
from typing import NamedTuple
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dateutil import parser as dateutil_parser
from dateutil.relativedelta import relativedelta

from intime.errors import ParseError, ResolutionError
from intime.natural import parse_phrase
from intime.util import DEFAULT_TZ

logger = logging.getLogger(__name__)


class Resolution(NamedTuple):
    """A correlated pair of instants: where an interval starts and ends."""

    anchor: datetime
    target: datetime


def zone(tz: str | tzinfo | None) -> tzinfo:
    """Return a tzinfo for ``tz``, defaulting to ``DEFAULT_TZ``.

    Raises:
        ResolutionError: If ``tz`` names no known IANA timezone
    """
    if tz is None:
        tz = DEFAULT_TZ
    if isinstance(tz, tzinfo):
        return tz
    try:
        return ZoneInfo(tz)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ResolutionError(
            f"Unknown timezone: {tz!r}\n"
            f"Hint: Use an IANA timezone name, e.g. 'UTC', 'US/Pacific', "
            f"'Europe/London'"
        ) from exc


def now(tz: str | tzinfo | None = None) -> datetime:
    """Read the clock once, as a timezone-aware datetime in ``tz``."""
    current = datetime.now(zone(tz))
    logger.debug("Read clock: %s", current.isoformat())
    return current


def anchor(at: datetime | None, tz: str | tzinfo | None = None) -> datetime:
    """Return ``at`` when given, otherwise the current instant in ``tz``."""
    return now(tz) if at is None else at


def parse_instant(
    base: datetime | str, tz: str | tzinfo | None = None
) -> datetime:
    """Build a base instant from a datetime or a date/time string.

    Accepts:
    - datetime: Naive values are placed in ``tz``; aware values pass through
    - "now": The current instant in ``tz``
    - A relative phrase such as "tomorrow" or "3 days ago", resolved
      against the current instant
    - Anything ``dateutil.parser`` understands, e.g. "2025-01-15 09:30"
      or "2025-01-15T09:30:00+02:00"

    Raises:
        ResolutionError: If the string is not a date/time or ``tz`` is unknown
    """
    zone_info = zone(tz)
    if isinstance(base, datetime):
        if base.tzinfo is None:
            return base.replace(tzinfo=zone_info)
        return base
    if not isinstance(base, str):
        raise TypeError(
            f"Base instant must be a datetime or str.\n"
            f"Got {type(base).__name__!r}: {base!r}"
        )

    text = base.strip()
    if text.lower() == "now":
        return now(zone_info)

    current = now(zone_info)
    try:
        offset = parse_phrase(text, current)
    except ParseError:
        logger.debug("Not a relative phrase, trying dateutil: %r", text)
    else:
        return shift(current, offset.to_relativedelta())

    try:
        parsed = dateutil_parser.parse(text)
    except (dateutil_parser.ParserError, OverflowError) as exc:
        raise ResolutionError(
            f"Cannot resolve base instant: {base!r}\n"
            f"Examples:\n"
            f"  interval.project_from('now')\n"
            f"  interval.project_from('tomorrow')\n"
            f"  interval.project_from('2025-01-15 09:30', tz='US/Pacific')"
        ) from exc

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=zone_info)
    return parsed


def shift(base: datetime, delta: relativedelta) -> datetime:
    """Return ``base`` moved by ``delta``.

    Raises:
        ResolutionError: If the result falls outside the datetime range
    """
    try:
        return base + delta
    except (ValueError, OverflowError) as exc:
        raise ResolutionError(
            f"Cannot move {base.isoformat()} by {delta!r}: result is out of range\n"
            f"Hint: datetime supports years 1 through 9999"
        ) from exc
