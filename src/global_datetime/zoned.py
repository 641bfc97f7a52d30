"""Boundary: ZonedTimestamp, an instant with nanosecond resolution and a zone.

The standard library gives us the zone database (zoneinfo) and
microsecond datetimes. This module adds what the library needs on top:
nanosecond instants, the bracketed zoned-timestamp grammar
(``2017-08-20T14:20:18.811-05:00[America/Chicago]``), truncation to a
unit in local time and calendar-aware unit arithmetic.
"""

from __future__ import annotations

import logging
import os
import re
from calendar import monthrange
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone, tzinfo
from typing import Mapping
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from global_datetime.resolution import (
    NANOS_PER_DAY,
    NANOS_PER_MICRO,
    NANOS_PER_MILLI,
    NANOS_PER_SECOND,
    NANOSECONDS,
    TimeUnit,
)
from global_datetime.types import InvalidTimestampStringError, InvalidZoneError

logger = logging.getLogger(__name__)

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_LOCAL_EPOCH = datetime(1970, 1, 1)
_EPOCH_DATE = date(1970, 1, 1)
_MICROSECOND = timedelta(microseconds=1)

# Where the platform names its local zone.
TZ_ENVIRON = "TZ"
TZ_DEFAULT_FILE = "/etc/localtime"

# Largest offset the grammar accepts, in seconds (+/-18:00).
_MAX_OFFSET_SECONDS = 18 * 3600

_OFFSET_RE = re.compile(r"([+-])(\d{2}):(\d{2})(?::(\d{2}))?")
_ZONED_RE = re.compile(
    r"(?P<year>\d{4})-(?P<month>\d{2})-(?P<day>\d{2})"
    r"T(?P<hour>\d{2}):(?P<minute>\d{2})"
    r"(?::(?P<second>\d{2})(?:\.(?P<fraction>\d{1,9}))?)?"
    r"(?P<offset>Z|[+-]\d{2}:\d{2}(?::\d{2})?)"
    r"(?:\[(?P<region>[^\]]+)\])?"
)


def _reject_naive(dt: datetime, name: str) -> None:
    """Reject naive datetimes where an instant is required."""
    if dt.tzinfo is None or dt.utcoffset() is None:
        raise TypeError(
            f"{name} must be a timezone-aware datetime, got naive "
            f"{dt.isoformat()}. Attach a zone or use the database "
            f"timestamp entry point for zone-less values."
        )


def _parse_offset(text: str) -> int | None:
    """Parse 'Z' or '+HH:MM[:SS]' into seconds east of UTC, None if malformed."""
    if text == "Z":
        return 0
    match = _OFFSET_RE.fullmatch(text)
    if match is None:
        return None
    sign, hours, minutes, seconds = match.groups()
    if int(minutes) > 59 or int(seconds or 0) > 59:
        return None
    total = int(hours) * 3600 + int(minutes) * 60 + int(seconds or 0)
    if total > _MAX_OFFSET_SECONDS:
        return None
    return -total if sign == "-" else total


def format_offset(total_seconds: int) -> str:
    """Format seconds east of UTC as 'Z', '+HH:MM' or '+HH:MM:SS'."""
    if total_seconds == 0:
        return "Z"
    sign = "-" if total_seconds < 0 else "+"
    hours, rest = divmod(abs(total_seconds), 3600)
    minutes, seconds = divmod(rest, 60)
    text = f"{sign}{hours:02d}:{minutes:02d}"
    if seconds:
        text += f":{seconds:02d}"
    return text


def resolve_zone(zone: str | tzinfo) -> tzinfo:
    """Resolve a zone identifier or zone object to a validated zone.

    Accepts IANA identifiers ("Europe/Madrid"), fixed offsets ("Z",
    "+05:30") and ZoneInfo / datetime.timezone instances.

    Raises InvalidZoneError for anything the zone database cannot resolve.
    """
    if isinstance(zone, (ZoneInfo, timezone)):
        return zone
    if not isinstance(zone, str) or not zone.strip():
        raise InvalidZoneError(zone)

    offset = _parse_offset(zone)
    if offset is not None:
        return timezone(timedelta(seconds=offset))

    try:
        return ZoneInfo(zone)
    except (ZoneInfoNotFoundError, ValueError, OSError):
        raise InvalidZoneError(zone) from None


def zone_id(zone: tzinfo) -> str:
    """Identifier of a resolved zone: the IANA key or the formatted offset."""
    if isinstance(zone, ZoneInfo):
        return zone.key
    offset = zone.utcoffset(None)
    return format_offset(int(offset.total_seconds()) if offset else 0)


def _local_zone_key(environ: Mapping[str, str], localtime: str) -> str | None:
    """IANA key named by $TZ or by the /etc/localtime symlink, if any."""
    key = environ.get(TZ_ENVIRON, "").lstrip(":")
    if key and not key.startswith("/"):
        return key
    target = os.path.realpath(key or localtime)
    _, sep, key = target.partition("/zoneinfo/")
    return key if sep else None


def local_zone(
    environ: Mapping[str, str] | None = None,
    localtime: str = TZ_DEFAULT_FILE,
) -> tzinfo:
    """The platform's local zone.

    The region is kept when the platform names one ($TZ, or a
    /etc/localtime symlink into a zoneinfo tree). Otherwise this is the
    fixed offset the operating system currently reports.
    """
    if environ is None:
        environ = os.environ
    key = _local_zone_key(environ, localtime)
    if key:
        try:
            return resolve_zone(key)
        except InvalidZoneError:
            logger.debug("Local zone %r not in the zone database", key)
    return datetime.now().astimezone().tzinfo or timezone.utc


def _offset_seconds_at(epoch_nanos: int, zone: tzinfo) -> int:
    utc = _EPOCH + timedelta(microseconds=epoch_nanos // NANOS_PER_MICRO)
    offset = utc.astimezone(zone).utcoffset()
    return int(offset.total_seconds()) if offset else 0


def _add_months(d: date, months: int) -> date:
    """Add months to a date, clamping the day to the end of the month."""
    year_overflow, month_new = divmod(d.month - 1 + months, 12)
    month_new += 1
    year_new = d.year + year_overflow
    return date(
        year_new, month_new, min(d.day, monthrange(year_new, month_new)[1])
    )


@dataclass(frozen=True)
class ZonedTimestamp:
    """An instant (nanoseconds since the epoch) viewed in a zone. Immutable.

    Two values are equal when both the instant and the zone are equal;
    compare ``epoch_nanos`` to compare instants only.
    """

    epoch_nanos: int
    zone: tzinfo

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def from_datetime(cls, dt: datetime, nanosecond: int = 0) -> ZonedTimestamp:
        """Build from an aware datetime plus sub-microsecond nanoseconds.

        Zones other than ZoneInfo and datetime.timezone are kept as the
        fixed offset they report for ``dt``.
        """
        _reject_naive(dt, "dt")
        if not 0 <= nanosecond < NANOS_PER_MICRO:
            raise ValueError(
                f"nanosecond must be in [0, {NANOS_PER_MICRO}), got {nanosecond}"
            )
        micros = (dt - _EPOCH) // _MICROSECOND
        zone = dt.tzinfo
        if not isinstance(zone, (ZoneInfo, timezone)):
            zone = timezone(dt.utcoffset())
        return cls(micros * NANOS_PER_MICRO + nanosecond, zone)

    @classmethod
    def from_epoch_millis(cls, millis: int, zone: str | tzinfo) -> ZonedTimestamp:
        return cls(millis * NANOS_PER_MILLI, resolve_zone(zone))

    @classmethod
    def from_naive(cls, dt: datetime, zone: str | tzinfo) -> ZonedTimestamp:
        """Read a naive datetime as wall-clock time in ``zone``."""
        if dt.tzinfo is not None:
            raise TypeError(
                f"dt must be a naive datetime, got tzinfo={dt.tzinfo!r}"
            )
        local_micros = (dt - _LOCAL_EPOCH) // _MICROSECOND
        return cls.from_local_nanos(local_micros * NANOS_PER_MICRO, zone)

    @classmethod
    def from_local_nanos(
        cls,
        local_nanos: int,
        zone: str | tzinfo,
        preferred_offset: int | None = None,
    ) -> ZonedTimestamp:
        """Resolve a local wall-clock nanosecond count in a zone.

        Overlaps keep ``preferred_offset`` (seconds) when it is one of the
        two valid offsets, otherwise the earlier one. Gaps move the local
        time forward by the length of the gap.
        """
        zone = resolve_zone(zone)
        if isinstance(zone, timezone):
            offset = zone.utcoffset(None)
            seconds = int(offset.total_seconds()) if offset else 0
            return cls(local_nanos - seconds * NANOS_PER_SECOND, zone)

        whole_seconds = local_nanos // NANOS_PER_SECOND
        naive = _LOCAL_EPOCH + timedelta(seconds=whole_seconds)
        offsets: list[int] = []
        for fold in (0, 1):
            offset = naive.replace(tzinfo=zone, fold=fold).utcoffset()
            offsets.append(int(offset.total_seconds()) if offset else 0)

        for candidate in (preferred_offset, *offsets):
            if candidate is None or candidate not in offsets:
                continue
            epoch_nanos = local_nanos - candidate * NANOS_PER_SECOND
            if _offset_seconds_at(epoch_nanos, zone) == candidate:
                return cls(epoch_nanos, zone)

        # Gap: the earlier offset shifts the wall time past the transition.
        return cls(local_nanos - offsets[0] * NANOS_PER_SECOND, zone)

    @classmethod
    def parse(cls, text: str) -> ZonedTimestamp:
        """Parse the canonical zoned-timestamp text.

        The instant is the local date-time minus the written offset. The
        bracketed region, when present, becomes the zone; otherwise the
        zone is the fixed offset.

        Raises InvalidTimestampStringError on any deviation from the grammar.
        """
        if not isinstance(text, str):
            raise InvalidTimestampStringError(text, "not a string")
        match = _ZONED_RE.fullmatch(text)
        if match is None:
            raise InvalidTimestampStringError(text)

        fields = match.groupdict()
        try:
            local = datetime(
                int(fields["year"]),
                int(fields["month"]),
                int(fields["day"]),
                int(fields["hour"]),
                int(fields["minute"]),
                int(fields["second"] or 0),
            )
        except ValueError as e:
            raise InvalidTimestampStringError(text, str(e)) from None

        offset = _parse_offset(fields["offset"])
        if offset is None:
            raise InvalidTimestampStringError(text, "invalid offset")

        if fields["region"] is not None:
            try:
                zone = resolve_zone(fields["region"])
            except InvalidZoneError:
                raise InvalidTimestampStringError(
                    text, f"unknown zone {fields['region']!r}"
                ) from None
        else:
            zone = timezone(timedelta(seconds=offset))

        fraction = fields["fraction"] or ""
        nanos = int(fraction.ljust(9, "0")) if fraction else 0
        local_seconds = (local - _LOCAL_EPOCH) // timedelta(seconds=1)
        epoch_nanos = (local_seconds - offset) * NANOS_PER_SECOND + nanos
        return cls(epoch_nanos, zone)

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    def to_datetime(self) -> datetime:
        """Aware datetime in this zone. Sub-microsecond digits are dropped."""
        utc = _EPOCH + timedelta(microseconds=self.epoch_nanos // NANOS_PER_MICRO)
        return utc.astimezone(self.zone)

    def to_epoch_millis(self) -> int:
        return self.epoch_nanos // NANOS_PER_MILLI

    @property
    def zone_id(self) -> str:
        return zone_id(self.zone)

    @property
    def offset_seconds(self) -> int:
        return _offset_seconds_at(self.epoch_nanos, self.zone)

    @property
    def local_nanos(self) -> int:
        """Nanoseconds since 1970-01-01T00:00 on this zone's wall clock."""
        return self.epoch_nanos + self.offset_seconds * NANOS_PER_SECOND

    @property
    def nanosecond(self) -> int:
        """Nanosecond of the second (0-999,999,999)."""
        return self.epoch_nanos % NANOS_PER_SECOND

    # ------------------------------------------------------------------
    # Derivation
    # ------------------------------------------------------------------

    def with_zone_same_instant(self, zone: str | tzinfo) -> ZonedTimestamp:
        return ZonedTimestamp(self.epoch_nanos, resolve_zone(zone))

    def truncated_to(self, unit: TimeUnit) -> ZonedTimestamp:
        """Drop the fields below ``unit`` from the local date-time.

        Units longer than a day raise ValueError.
        """
        if unit == NANOSECONDS:
            return self
        local = self.local_nanos
        truncated = unit.truncate(local)
        if truncated == local:
            return self
        return ZonedTimestamp.from_local_nanos(
            truncated, self.zone, preferred_offset=self.offset_seconds
        )

    def plus(self, amount: int, unit: TimeUnit) -> ZonedTimestamp:
        """Add ``amount`` units; negative amounts move backwards.

        Time-based units move along the instant timeline. Date-based units
        move the local date (month ends clamp, so Jan 31 + 1 month is the
        last day of February) and keep the previous offset where valid.

        Raises OverflowError when the local date leaves years 1 to 9999.
        """
        if not unit.is_date_based:
            return ZonedTimestamp(self.epoch_nanos + amount * unit.nanos, self.zone)

        local = self.local_nanos
        days, time_of_day = divmod(local, NANOS_PER_DAY)
        local_date = _EPOCH_DATE + timedelta(days=days)
        try:
            if unit.months:
                local_date = _add_months(local_date, amount * unit.months)
            if unit.days:
                local_date += timedelta(days=amount * unit.days)
        except (ValueError, OverflowError) as e:
            raise OverflowError(
                f"{self} plus {amount} {unit} is outside years 1 to 9999"
            ) from e

        new_local = (local_date - _EPOCH_DATE).days * NANOS_PER_DAY + time_of_day
        return ZonedTimestamp.from_local_nanos(
            new_local, self.zone, preferred_offset=self.offset_seconds
        )

    def minus(self, amount: int, unit: TimeUnit) -> ZonedTimestamp:
        return self.plus(-amount, unit)

    # ------------------------------------------------------------------
    # Formatting
    # ------------------------------------------------------------------

    def format(self) -> str:
        """Canonical text, e.g. '2017-08-20T14:20:18.811-05:00[America/Chicago]'.

        Seconds are omitted when they and the fraction are zero. The
        fraction is written with 3, 6 or 9 digits, whichever is shortest
        without losing digits.
        """
        dt = self.to_datetime()
        text = (
            f"{dt.year:04d}-{dt.month:02d}-{dt.day:02d}"
            f"T{dt.hour:02d}:{dt.minute:02d}"
        )
        nano = self.nanosecond
        if dt.second or nano:
            text += f":{dt.second:02d}"
            if nano % NANOS_PER_MILLI == 0:
                if nano:
                    text += f".{nano // NANOS_PER_MILLI:03d}"
            elif nano % NANOS_PER_MICRO == 0:
                text += f".{nano // NANOS_PER_MICRO:06d}"
            else:
                text += f".{nano:09d}"
        text += format_offset(self.offset_seconds)
        if isinstance(self.zone, ZoneInfo):
            text += f"[{self.zone.key}]"
        return text

    __str__ = format

    def __repr__(self) -> str:
        return f"ZonedTimestamp({self})"
