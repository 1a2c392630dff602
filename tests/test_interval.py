"""Tests for the DurationInterval value type."""

from dataclasses import FrozenInstanceError
from datetime import datetime, timedelta, timezone

import pytest
from dateutil.relativedelta import relativedelta

from intime import DurationInterval

ANCHOR = datetime(2025, 1, 1, 0, 0, 0, tzinfo=timezone.utc)


def test_default_interval_is_zero():
    """Test that a default interval has no magnitude and no direction."""
    zero = DurationInterval()

    assert not zero
    assert not zero.inverted
    assert zero.total_days is None


def test_zero_interval_is_identity():
    """Test that adding the zero interval leaves an instant unchanged."""
    assert ANCHOR + DurationInterval() == ANCHOR
    assert ANCHOR - DurationInterval() == ANCHOR


def test_negative_magnitude_rejected():
    """Test that direction must be carried by inverted, not by sign."""
    with pytest.raises(ValueError, match="days must be >= 0"):
        DurationInterval(days=-3)


@pytest.mark.parametrize("fraction", [-0.1, 1.0, 2.5])
def test_fraction_out_of_range_rejected(fraction):
    """Test that fractional seconds must lie in [0, 1)."""
    with pytest.raises(ValueError, match="fraction must be in"):
        DurationInterval(fraction=fraction)


def test_interval_is_immutable():
    """Test that fields cannot be reassigned."""
    interval = DurationInterval(days=3)

    with pytest.raises(FrozenInstanceError):
        interval.days = 4  # type: ignore[misc]


def test_fraction_only_interval_is_truthy():
    """Test that sub-second intervals are not treated as zero."""
    assert DurationInterval(fraction=0.5)


def test_add_and_subtract_from_datetime():
    """Test datetime arithmetic honors calendar lengths and direction."""
    assert ANCHOR + DurationInterval(months=1) == datetime(
        2025, 2, 1, tzinfo=timezone.utc
    )
    assert ANCHOR - DurationInterval(days=1) == datetime(
        2024, 12, 31, tzinfo=timezone.utc
    )
    assert ANCHOR + DurationInterval(days=1, inverted=True) == datetime(
        2024, 12, 31, tzinfo=timezone.utc
    )


def test_negation_flips_direction():
    """Test that -interval keeps magnitudes and flips inverted."""
    interval = DurationInterval(days=3)
    negated = -interval

    assert negated.days == 3
    assert negated.inverted
    assert not (-negated).inverted


def test_str_marks_inverted_intervals():
    """Test the string form of forward and inverted intervals."""
    assert str(DurationInterval(days=3)) == "P3D"
    assert str(DurationInterval(days=3, inverted=True)) == "-P3D"


def test_to_relativedelta_is_signed():
    """Test that inverted intervals produce negative relativedeltas."""
    assert DurationInterval(years=1, weeks=1).to_relativedelta() == relativedelta(
        years=1, days=7
    )
    assert DurationInterval(hours=2, inverted=True).to_relativedelta() == relativedelta(
        hours=-2
    )
    assert DurationInterval(
        seconds=1, fraction=0.25
    ).to_relativedelta() == relativedelta(seconds=1, microseconds=250000)


def test_from_timedelta_splits_components():
    """Test that a timedelta is split into days and clock components."""
    interval = DurationInterval.from_timedelta(
        timedelta(days=1, hours=2, minutes=3, seconds=4, microseconds=500000)
    )

    assert interval == DurationInterval(
        days=1, hours=2, minutes=3, seconds=4, fraction=0.5
    )


def test_from_timedelta_negative_is_inverted():
    """Test that a negative timedelta becomes an inverted interval."""
    interval = DurationInterval.from_timedelta(timedelta(hours=-1, minutes=-30))

    assert interval == DurationInterval(hours=1, minutes=30, inverted=True)


def test_from_relativedelta_normalizes():
    """Test that relativedelta carries are kept in normalized form."""
    interval = DurationInterval.from_relativedelta(relativedelta(months=14, days=3))

    assert interval.years == 1
    assert interval.months == 2
    assert interval.days == 3
    assert not interval.inverted


def test_from_relativedelta_negative_is_inverted():
    """Test that an all-negative relativedelta becomes inverted."""
    interval = DurationInterval.from_relativedelta(
        relativedelta(days=-3, hours=-2), total_days=3
    )

    assert interval == DurationInterval(days=3, hours=2, inverted=True, total_days=3)


def test_from_relativedelta_rejects_mixed_signs():
    """Test that mixed directions cannot be normalized."""
    with pytest.raises(ValueError, match="mixed-sign"):
        DurationInterval.from_relativedelta(relativedelta(years=1, days=-3))


def test_from_relativedelta_rejects_absolute_fields():
    """Test that absolute (singular) fields are refused."""
    with pytest.raises(ValueError, match="absolute relativedelta fields: day"):
        DurationInterval.from_relativedelta(relativedelta(day=3))
