"""Calendar-aware duration intervals with derived-unit accessors.

This is helpful when an interval is defined in a readable form, say three
days ("P3D" or "3 days"), but the total is needed as a scalar, e.g. in
seconds:

    >>> from intime import DurationInterval
    >>> ttl = DurationInterval.from_natural_language("3 days").in_seconds()
    >>> redis.expire("key", ttl)

Month and year lengths vary, so every projection resolves the interval
against a concrete anchor (the current instant unless ``now`` is given)
and measures the real elapsed time to the target.
"""

import math
from dataclasses import dataclass, replace
from datetime import datetime, timedelta, tzinfo
from typing import Any

from dateutil.relativedelta import relativedelta
from typing_extensions import Self

from intime import instant
from intime.errors import ParseError, ResolutionError
from intime.expression import format_expression, parse_expression
from intime.instant import Resolution
from intime.natural import parse_phrase
from intime.util import (
    DAY,
    DAYS_PER_WEEK,
    DEFAULT_TZ,
    HOUR,
    MINUTE,
    MONTHS_PER_YEAR,
    SECOND,
    YEAR,
    floor,
)

_MAGNITUDES = ("years", "months", "weeks", "days", "hours", "minutes", "seconds")
_ABSOLUTE = (
    "year",
    "month",
    "day",
    "weekday",
    "hour",
    "minute",
    "second",
    "microsecond",
)


@dataclass(frozen=True, kw_only=True)
class DurationInterval:
    years: int = 0
    months: int = 0
    weeks: int = 0
    days: int = 0
    hours: int = 0
    minutes: int = 0
    seconds: int = 0
    fraction: float = 0.0
    inverted: bool = False
    total_days: int | None = None

    def __post_init__(self) -> None:
        for name in _MAGNITUDES:
            value = getattr(self, name)
            if value < 0:
                raise ValueError(
                    f"DurationInterval {name} must be >= 0, got {value}\n"
                    f"Hint: Use inverted=True for intervals pointing into the past"
                )
        if not (0 <= self.fraction < 1):
            raise ValueError(
                f"DurationInterval fraction must be in [0, 1), got {self.fraction}"
            )

    def __str__(self) -> str:
        """The canonical expression, with a leading '-' when inverted."""
        expression = self.to_expression()
        return f"-{expression}" if self.inverted else expression

    def __bool__(self) -> bool:
        return any(getattr(self, name) for name in _MAGNITUDES) or bool(self.fraction)

    def __neg__(self) -> Self:
        return replace(self, inverted=not self.inverted)

    def __radd__(self, other: Any) -> datetime:
        if isinstance(other, datetime):
            return other + self.to_relativedelta()
        return NotImplemented

    def __rsub__(self, other: Any) -> datetime:
        if isinstance(other, datetime):
            return other - self.to_relativedelta()
        return NotImplemented

    # Construction

    @classmethod
    def from_expression(cls, expression: str) -> Self:
        """Create an interval from a canonical expression, e.g. "P3D".

        Raises:
            ParseError: If the expression is malformed
        """
        return cls(**parse_expression(expression))

    @classmethod
    def from_natural_language(
        cls,
        text: str,
        *,
        now: datetime | None = None,
        tz: str | tzinfo = DEFAULT_TZ,
    ) -> Self:
        """Create an interval from a relative phrase, e.g. "3 days ago".

        The phrase is resolved against ``now`` (the current instant in ``tz``
        when omitted) and the whole days between the two are kept as
        ``total_days``.

        Raises:
            ParseError: If the phrase is not understood or moves the anchor
                out of range
            ResolutionError: If ``tz`` is unknown
        """
        anchor = instant.anchor(now, tz)
        offset = parse_phrase(text, anchor)
        try:
            target = instant.shift(anchor, offset.to_relativedelta())
        except ResolutionError as exc:
            raise ParseError(
                f"Relative phrase reaches past the datetime range: {text!r}\n"
                f"Hint: datetime supports years 1 through 9999"
            ) from exc
        return cls(
            **offset.components,
            inverted=offset.inverted,
            total_days=_wall_days(anchor, target),
        )

    @classmethod
    def from_relativedelta(
        cls, delta: relativedelta, *, total_days: int | None = None
    ) -> Self:
        """Create an interval from a relative ``relativedelta``.

        Raises:
            ValueError: If the delta has absolute fields or mixed signs
        """
        absolute = [name for name in _ABSOLUTE if getattr(delta, name) is not None]
        if absolute:
            raise ValueError(
                f"Cannot build a DurationInterval from absolute relativedelta "
                f"fields: {', '.join(absolute)}\n"
                f"Hint: Use the plural (relative) forms, e.g. days=3 instead of day=3"
            )
        delta = delta.normalized()
        signed = {
            "years": delta.years,
            "months": delta.months,
            "days": delta.days,
            "hours": delta.hours,
            "minutes": delta.minutes,
            "seconds": delta.seconds,
            "microseconds": delta.microseconds,
        }
        nonzero = [value for value in signed.values() if value]
        if any(value > 0 for value in nonzero) and any(value < 0 for value in nonzero):
            raise ValueError(
                f"Cannot build a DurationInterval from a mixed-sign relativedelta: "
                f"{delta!r}"
            )
        microseconds = abs(signed.pop("microseconds"))
        return cls(
            **{name: abs(value) for name, value in signed.items()},
            fraction=microseconds / 1_000_000,
            inverted=any(value < 0 for value in nonzero),
            total_days=total_days,
        )

    @classmethod
    def from_timedelta(cls, delta: timedelta) -> Self:
        """Create an interval from a ``timedelta``; negative deltas are inverted."""
        magnitude = abs(delta)
        hours, remainder = divmod(magnitude.seconds, HOUR)
        minutes, seconds = divmod(remainder, MINUTE)
        return cls(
            days=magnitude.days,
            hours=hours,
            minutes=minutes,
            seconds=seconds,
            fraction=magnitude.microseconds / 1_000_000,
            inverted=delta < timedelta(0),
        )

    # Serialization

    def to_expression(self) -> str:
        """Return the canonical expression, ready for ``from_expression``.

        Weeks are folded into days. Fractional seconds and direction cannot
        be expressed, so an interval of only fractional seconds renders as
        "P0Y", the same as a zero interval.
        """
        return format_expression(self)

    def to_relativedelta(self) -> relativedelta:
        """Return the signed ``relativedelta`` this interval applies."""
        delta = relativedelta(
            years=self.years,
            months=self.months,
            weeks=self.weeks,
            days=self.days,
            hours=self.hours,
            minutes=self.minutes,
            seconds=self.seconds,
            microseconds=round(self.fraction * 1_000_000),
        )
        return -delta if self.inverted else delta

    # Projection

    def resolve(
        self, *, now: datetime | None = None, tz: str | tzinfo = DEFAULT_TZ
    ) -> Resolution:
        """Return the (anchor, target) pair this interval spans from ``now``.

        Raises:
            ResolutionError: If the target falls outside the datetime range
        """
        anchor = instant.anchor(now, tz)
        target = instant.shift(anchor, self.to_relativedelta())
        return Resolution(anchor=anchor, target=target)

    def project_from(
        self, base: datetime | str = "now", tz: str | tzinfo | None = None
    ) -> datetime:
        """Return a new datetime: ``base`` moved by this interval.

        Args:
            base: A datetime, "now", a relative phrase ("tomorrow") or any
                date/time string ``dateutil`` parses ("2025-01-15 09:30")
            tz: Timezone for "now" and for naive bases (default UTC)

        Raises:
            ResolutionError: If ``base`` or ``tz`` cannot be resolved
        """
        return instant.shift(instant.parse_instant(base, tz), self.to_relativedelta())

    def in_seconds(
        self, *, now: datetime | None = None, tz: str | tzinfo = DEFAULT_TZ
    ) -> int:
        anchor, target = self.resolve(now=now, tz=tz)
        return math.floor(target.timestamp()) - math.floor(anchor.timestamp())

    def in_minutes(
        self,
        truncate: bool = True,
        *,
        now: datetime | None = None,
        tz: str | tzinfo = DEFAULT_TZ,
    ) -> int | float:
        seconds = self.in_seconds(now=now, tz=tz)
        return floor(seconds / (MINUTE / SECOND), truncate)

    def in_hours(
        self,
        truncate: bool = True,
        *,
        now: datetime | None = None,
        tz: str | tzinfo = DEFAULT_TZ,
    ) -> int | float:
        minutes = self.in_minutes(False, now=instant.anchor(now, tz))
        return floor(minutes / (HOUR / MINUTE), truncate)

    def in_days(
        self,
        truncate: bool = True,
        *,
        now: datetime | None = None,
        tz: str | tzinfo = DEFAULT_TZ,
    ) -> int | float:
        hours = self.in_hours(False, now=instant.anchor(now, tz))
        return floor(hours / (DAY / HOUR), truncate)

    def in_weeks(
        self,
        truncate: bool = True,
        *,
        now: datetime | None = None,
        tz: str | tzinfo = DEFAULT_TZ,
    ) -> int | float:
        days = self.in_days(False, now=instant.anchor(now, tz))
        return floor(days / DAYS_PER_WEEK, truncate)

    def in_years(
        self,
        truncate: bool = True,
        *,
        now: datetime | None = None,
        tz: str | tzinfo = DEFAULT_TZ,
    ) -> int | float:
        """Years of a fixed 365 days, not calendar years."""
        days = self.in_days(False, now=instant.anchor(now, tz))
        return floor(days / (YEAR / DAY), truncate)

    def in_average_months(
        self,
        truncate: bool = True,
        *,
        now: datetime | None = None,
        tz: str | tzinfo = DEFAULT_TZ,
    ) -> int | float:
        """Months of an average length (a twelfth of 365 days).

        Use ``in_months_from_now`` for calendar-accurate months.
        """
        years = self.in_years(False, now=instant.anchor(now, tz))
        return floor(years * MONTHS_PER_YEAR, truncate)

    def in_months_from_now(
        self, *, now: datetime | None = None, tz: str | tzinfo = DEFAULT_TZ
    ) -> int:
        """Whole calendar months between the anchor and the target.

        Negative for inverted intervals.
        """
        anchor, target = self.resolve(now=now, tz=tz)
        difference = relativedelta(target, anchor)
        return difference.years * MONTHS_PER_YEAR + difference.months


def _wall_days(anchor: datetime, target: datetime) -> int:
    """Whole wall-clock days between two instants, ignoring direction."""
    naive_anchor = anchor.replace(tzinfo=None)
    naive_target = target.replace(tzinfo=None)
    return abs(naive_target - naive_anchor).days


