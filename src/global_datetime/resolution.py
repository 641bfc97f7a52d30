"""Boundary: TimeUnit, with unit lengths, truncation and unit lookup."""

from __future__ import annotations

from dataclasses import dataclass

NANOS_PER_MICRO = 1_000
NANOS_PER_MILLI = 1_000_000
NANOS_PER_SECOND = 1_000_000_000
NANOS_PER_DAY = 86_400 * NANOS_PER_SECOND


@dataclass(frozen=True)
class TimeUnit:
    """A clock or calendar unit. Immutable.

    Time-based units have an exact length in nanoseconds and are added on
    the instant timeline. Date-based units are counted in days or months
    and are added to the local date of a zoned value.
    """

    label: str
    nanos: int = 0
    days: int = 0
    months: int = 0

    @property
    def is_date_based(self) -> bool:
        return self.days != 0 or self.months != 0

    @property
    def truncation_nanos(self) -> int:
        """Length used when truncating local time to this unit.

        Raises ValueError for units longer than a day, which have no
        fixed length to truncate to.
        """
        if not self.is_date_based:
            return self.nanos
        if self.days == 1 and self.months == 0:
            return NANOS_PER_DAY
        raise ValueError(
            f"{self.label} cannot be used as a truncation precision "
            f"(units longer than a day have no fixed length)"
        )

    def truncate(self, local_nanos: int) -> int:
        """Drop everything below this unit from a local nanosecond count.

        Floor semantics, so instants before the epoch truncate towards
        the past like any other.
        """
        step = self.truncation_nanos
        return local_nanos - local_nanos % step

    def is_finer_than(self, other: TimeUnit) -> bool:
        return self.truncation_nanos < other.truncation_nanos

    def __str__(self) -> str:
        return self.label


NANOSECONDS = TimeUnit("nanoseconds", nanos=1)
MICROSECONDS = TimeUnit("microseconds", nanos=NANOS_PER_MICRO)
MILLISECONDS = TimeUnit("milliseconds", nanos=NANOS_PER_MILLI)
SECONDS = TimeUnit("seconds", nanos=NANOS_PER_SECOND)
MINUTES = TimeUnit("minutes", nanos=60 * NANOS_PER_SECOND)
HOURS = TimeUnit("hours", nanos=3600 * NANOS_PER_SECOND)
HALF_DAYS = TimeUnit("half_days", nanos=12 * 3600 * NANOS_PER_SECOND)
DAYS = TimeUnit("days", days=1)
WEEKS = TimeUnit("weeks", days=7)
MONTHS = TimeUnit("months", months=1)
YEARS = TimeUnit("years", months=12)
DECADES = TimeUnit("decades", months=120)
CENTURIES = TimeUnit("centuries", months=1200)
MILLENNIA = TimeUnit("millennia", months=12000)

UNITS: dict[str, TimeUnit] = {
    unit.label: unit
    for unit in (
        NANOSECONDS,
        MICROSECONDS,
        MILLISECONDS,
        SECONDS,
        MINUTES,
        HOURS,
        HALF_DAYS,
        DAYS,
        WEEKS,
        MONTHS,
        YEARS,
        DECADES,
        CENTURIES,
        MILLENNIA,
    )
}


def unit_from_name(name: str) -> TimeUnit:
    """Look up a unit by its label, case-insensitively ("Minutes" -> MINUTES)."""
    try:
        return UNITS[name.strip().lower()]
    except (KeyError, AttributeError):
        raise ValueError(
            f"Unknown time unit {name!r}. "
            f"Expected one of: {', '.join(UNITS)}"
        ) from None
