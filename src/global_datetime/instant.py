"""Core: GlobalDateTime, a zone-normalized instant with a resettable original.

A GlobalDateTime keeps two zoned values:

- ``original``: the value exactly as supplied, in its own zone, truncated
  to the precision active at construction.
- ``current``: the same instant projected into the reference zone and
  truncated to the reference precision. Arithmetic only moves this one.

Comparisons reduce both sides to epoch milliseconds after projecting the
argument into the reference zone, so instances built from different
zones compare by instant.
"""

from __future__ import annotations

import functools
import logging
from datetime import datetime, tzinfo
from typing import Union

from global_datetime.clock import SYSTEM_CLOCK, Clock
from global_datetime.resolution import (
    MICROSECONDS,
    SECONDS,
    TimeUnit,
    unit_from_name,
)
from global_datetime.settings import MILLIS, Settings
from global_datetime.types import InvalidZoneError
from global_datetime.zoned import ZonedTimestamp, local_zone, resolve_zone, zone_id

logger = logging.getLogger(__name__)

Comparable = Union[int, datetime, ZonedTimestamp, "GlobalDateTime", str]


def _as_unit(unit: TimeUnit | str) -> TimeUnit:
    if isinstance(unit, TimeUnit):
        return unit
    return unit_from_name(unit)


@functools.total_ordering
class GlobalDateTime:
    """An instant normalized to a mutable reference zone and precision.

    Build one through the classmethods (``now``, ``from_zoned``,
    ``from_other``, ``parse``, ``from_epoch_millis``,
    ``from_database_timestamp``) or directly from a ZonedTimestamp or an
    aware datetime.

    Instances are mutable and not thread-safe. Equality and ordering
    compare epoch milliseconds only, so instances are unhashable.

    Raises InvalidZoneError if the settings' reference zone cannot be
    resolved.
    """

    def __init__(
        self,
        original: ZonedTimestamp | datetime,
        settings: Settings | None = None,
        clock: Clock | None = None,
    ) -> None:
        if settings is None:
            settings = MILLIS
        if isinstance(original, datetime):
            original = ZonedTimestamp.from_datetime(original)

        self.settings = settings
        self._clock = clock if clock is not None else SYSTEM_CLOCK
        self._reference_zone = resolve_zone(settings.reference_zone)
        self._precision = settings.precision
        self._original = original.truncated_to(self._precision)
        self._current = self._project(self._original)

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def now(
        cls, settings: Settings | None = None, clock: Clock | None = None
    ) -> GlobalDateTime:
        """Current wall-clock instant, originating in the platform's local zone."""
        clock = clock if clock is not None else SYSTEM_CLOCK
        return cls(ZonedTimestamp(clock.epoch_nanos(), local_zone()), settings, clock)

    @classmethod
    def from_zoned(
        cls,
        value: ZonedTimestamp | datetime,
        settings: Settings | None = None,
        clock: Clock | None = None,
    ) -> GlobalDateTime:
        """From a zoned value; the caller's zone becomes the original zone."""
        return cls(value, settings, clock)

    @classmethod
    def from_other(
        cls,
        other: GlobalDateTime,
        settings: Settings | None = None,
        clock: Clock | None = None,
    ) -> GlobalDateTime:
        """Copy another instance's original value, discarding its arithmetic.

        The copy starts from the source's settings, not from its current
        reference zone.
        """
        return cls(
            other.get_original(),
            settings if settings is not None else other.settings,
            clock if clock is not None else other._clock,
        )

    @classmethod
    def parse(
        cls,
        text: str,
        settings: Settings | None = None,
        clock: Clock | None = None,
    ) -> GlobalDateTime:
        """From canonical text such as '2017-08-20T14:20:18.811-05:00[America/Chicago]'.

        Raises InvalidTimestampStringError if the text does not parse.
        """
        return cls(ZonedTimestamp.parse(text), settings, clock)

    @classmethod
    def from_epoch_millis(
        cls,
        millis: int,
        settings: Settings | None = None,
        clock: Clock | None = None,
    ) -> GlobalDateTime:
        """From milliseconds since the epoch, originating in the reference zone."""
        if settings is None:
            settings = MILLIS
        original = ZonedTimestamp.from_epoch_millis(millis, settings.reference_zone)
        return cls(original, settings, clock)

    @classmethod
    def from_database_timestamp(
        cls,
        value: datetime,
        settings: Settings | None = None,
        clock: Clock | None = None,
    ) -> GlobalDateTime:
        """From a DB-API timestamp column value.

        Naive values are wall-clock times in the reference zone, the zone
        ``to_database_string`` writes in. Aware values are instants.
        """
        if settings is None:
            settings = MILLIS
        if value.tzinfo is None:
            original = ZonedTimestamp.from_naive(value, settings.reference_zone)
        else:
            original = ZonedTimestamp.from_datetime(value)
        return cls(original, settings, clock)

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def reference_zone(self) -> tzinfo:
        return self._reference_zone

    @property
    def reference_zone_id(self) -> str:
        return zone_id(self._reference_zone)

    @property
    def reference_precision(self) -> TimeUnit:
        return self._precision

    def get_normalized(self) -> ZonedTimestamp:
        """The current value in the reference zone, truncated."""
        return self._project(self._current)

    def get_original(self) -> ZonedTimestamp:
        """The original value in its own zone (not normalized), truncated."""
        return self._original.truncated_to(self._precision)

    def to_epoch_millis(self) -> int:
        return self._current.to_epoch_millis()

    def to_datetime(self) -> datetime:
        """The current value as an aware datetime (microsecond resolution)."""
        return self._current.to_datetime()

    def to_normalized_string(self) -> str:
        return self._current.format()

    def to_database_string(self) -> str:
        """Current value as 'Y-M-D H:M:S.f' for insertion into a database.

        Fields are not zero-padded ('2015-4-6 9:5:3.22034'). The fraction
        is microseconds of the second, or nanoseconds of the second when
        the precision is finer than a microsecond.
        """
        dt = self._current.to_datetime()
        if self._precision.is_finer_than(MICROSECONDS):
            fraction = self._current.nanosecond
        else:
            fraction = dt.microsecond
        return (
            f"{dt.year}-{dt.month}-{dt.day} "
            f"{dt.hour}:{dt.minute}:{dt.second}.{fraction}"
        )

    def copy(self) -> GlobalDateTime:
        """New instance whose original is this one's current value.

        Keeps the effect of any arithmetic; the copy starts again from the
        default reference zone and precision.
        """
        try:
            return GlobalDateTime(
                self._current.truncated_to(self._precision),
                self.settings,
                self._clock,
            )
        except InvalidZoneError as e:
            logger.error("Cannot copy a valid GlobalDateTime: %s", e)
            raise RuntimeError(
                f"copy of {self!r} failed although its settings were valid"
            ) from e

    def copy_original(self) -> GlobalDateTime:
        """New instance built from this one's original value."""
        return GlobalDateTime.from_other(self)

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def increase(self, amount: int, unit: TimeUnit | str) -> None:
        """Move the current value forward by ``amount`` units."""
        unit = _as_unit(unit)
        self._current = self._current.plus(amount, unit).truncated_to(self._precision)

    def decrease(self, amount: int, unit: TimeUnit | str) -> None:
        """Move the current value backward by ``amount`` units."""
        unit = _as_unit(unit)
        self._current = self._current.minus(amount, unit).truncated_to(self._precision)

    def reset_to_original(self) -> None:
        """Undo all arithmetic: recompute current from original."""
        self._current = self._project(self._original)

    def change_reference_zone(self, zone: str | tzinfo) -> None:
        """Switch the reference zone and recompute current from original.

        Any arithmetic applied so far is discarded. On an invalid zone,
        raises InvalidZoneError and leaves the instance unchanged.
        """
        resolved = resolve_zone(zone)
        self._reference_zone = resolved
        self._current = self._project(self._original)
        logger.debug(
            "Reference zone changed to %s, current rebased on original",
            zone_id(resolved),
        )

    def project_to_zone(self, zone: str | tzinfo) -> None:
        """Switch the reference zone, keeping the current value and its arithmetic.

        Raises InvalidZoneError and leaves the instance unchanged on an
        invalid zone.
        """
        resolved = resolve_zone(zone)
        self._reference_zone = resolved
        self._current = self._project(self._current)

    def reset_reference_zone_to_default(self) -> None:
        try:
            self.change_reference_zone(self.settings.reference_zone)
        except InvalidZoneError as e:
            logger.error("Cannot reset to the default reference zone: %s", e)
            raise RuntimeError(
                f"default reference zone {self.settings.reference_zone!r} "
                f"no longer resolves"
            ) from e

    def change_precision(self, unit: TimeUnit | str) -> None:
        """Reset the precision to the configured default.

        ``unit`` is not applied: the precision always returns to
        ``settings.precision``, the original is re-truncated and current
        is recomputed from it (discarding arithmetic). Unknown unit names
        raise ValueError.
        """
        default = self.settings.precision
        if _as_unit(unit) != default:
            logger.warning(
                "change_precision(%s) ignored, precision reset to %s",
                unit,
                default,
            )
        self._precision = default
        self._original = self._original.truncated_to(default)
        self._current = self._project(self._original)

    def reset_precision_to_default(self) -> None:
        self.change_precision(self.settings.precision)

    # ------------------------------------------------------------------
    # Comparison
    # ------------------------------------------------------------------

    def _project(self, value: ZonedTimestamp) -> ZonedTimestamp:
        return value.with_zone_same_instant(self._reference_zone).truncated_to(
            self._precision
        )

    def _normalized_millis(self, other: Comparable) -> int:
        """Reduce a comparison argument to epoch milliseconds.

        Epoch counts are taken as-is. Naive datetimes are wall times in the
        current reference zone. Everything else is projected into the
        reference zone and truncated first.
        """
        if isinstance(other, GlobalDateTime):
            return other.to_epoch_millis()
        if isinstance(other, bool):
            raise TypeError("Cannot compare a GlobalDateTime with a bool")
        if isinstance(other, int):
            return other
        if isinstance(other, str):
            value = ZonedTimestamp.parse(other)
        elif isinstance(other, datetime):
            if other.tzinfo is None:
                value = ZonedTimestamp.from_naive(other, self._reference_zone)
            else:
                value = ZonedTimestamp.from_datetime(other)
        elif isinstance(other, ZonedTimestamp):
            value = other
        else:
            raise TypeError(
                f"Cannot compare a GlobalDateTime with {type(other).__name__}"
            )
        return self._project(value).to_epoch_millis()

    def is_equal_to(self, other: Comparable) -> bool:
        """Same instant, at millisecond granularity.

        Raises InvalidTimestampStringError for text that does not parse.
        """
        return self.to_epoch_millis() == self._normalized_millis(other)

    def is_before(self, other: Comparable) -> bool:
        return self.to_epoch_millis() < self._normalized_millis(other)

    def is_after(self, other: Comparable) -> bool:
        return self.to_epoch_millis() > self._normalized_millis(other)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, GlobalDateTime):
            return NotImplemented
        return self.to_epoch_millis() == other.to_epoch_millis()

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, GlobalDateTime):
            return NotImplemented
        return self.to_epoch_millis() < other.to_epoch_millis()

    __hash__ = None  # type: ignore[assignment]

    # ------------------------------------------------------------------
    # Temporal predicates (relative to the clock's now)
    # ------------------------------------------------------------------

    def _now(self) -> ZonedTimestamp:
        return ZonedTimestamp(self._clock.epoch_nanos(), self._reference_zone)

    def _window(self, amount: int, unit: TimeUnit | str) -> tuple[int, int]:
        """Now and now shifted by ``amount`` units, in epoch milliseconds.

        Both come from a single clock read.
        """
        now = self._now()
        shifted = now.plus(amount, _as_unit(unit))
        return (
            now.truncated_to(self._precision).to_epoch_millis(),
            shifted.truncated_to(self._precision).to_epoch_millis(),
        )

    def has_already_happened(self) -> bool:
        now, _ = self._window(0, SECONDS)
        return self.to_epoch_millis() < now

    def has_happened_since_more_than(self, amount: int, unit: TimeUnit | str) -> bool:
        """Happened before ``now - amount units``."""
        _, window_start = self._window(-amount, unit)
        return self.to_epoch_millis() < window_start

    def has_happened_since_less_than(self, amount: int, unit: TimeUnit | str) -> bool:
        """Happened in the past, but no earlier than ``now - amount units``."""
        now, window_start = self._window(-amount, unit)
        return window_start <= self.to_epoch_millis() < now

    def is_going_to_happen_in_less_than(
        self, amount: int, unit: TimeUnit | str
    ) -> bool:
        """Still in the future, but no later than ``now + amount units``."""
        now, window_end = self._window(amount, unit)
        return now < self.to_epoch_millis() <= window_end

    def is_before_now_plus(self, amount: int, unit: TimeUnit | str) -> bool:
        """Before ``now + amount units``, whether in the past or the future."""
        _, window_end = self._window(amount, unit)
        return self.to_epoch_millis() < window_end

    def is_after_now_minus(self, amount: int, unit: TimeUnit | str) -> bool:
        """At or after ``now - amount units``, whether in the past or the future."""
        _, window_start = self._window(-amount, unit)
        return self.to_epoch_millis() >= window_start

    # ------------------------------------------------------------------

    def __str__(self) -> str:
        return self.to_normalized_string()

    def __repr__(self) -> str:
        return (
            f"GlobalDateTime({self.to_normalized_string()}, "
            f"original={self._original})"
        )
