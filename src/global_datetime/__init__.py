"""global-datetime: Instants normalized to a reference zone and precision."""

from global_datetime.clock import Clock, FixedClock, SystemClock
from global_datetime.instant import GlobalDateTime
from global_datetime.loaders import load_settings_json
from global_datetime.resolution import (
    CENTURIES,
    DAYS,
    DECADES,
    HALF_DAYS,
    HOURS,
    MICROSECONDS,
    MILLENNIA,
    MILLISECONDS,
    MINUTES,
    MONTHS,
    NANOSECONDS,
    SECONDS,
    WEEKS,
    YEARS,
    TimeUnit,
)
from global_datetime.settings import MILLIS, NANOS, Settings
from global_datetime.types import (
    GlobalDateTimeError,
    InvalidTimestampStringError,
    InvalidZoneError,
    ReasonCode,
)
from global_datetime.zoned import ZonedTimestamp, resolve_zone

__all__ = [
    "CENTURIES",
    "Clock",
    "DAYS",
    "DECADES",
    "FixedClock",
    "GlobalDateTime",
    "GlobalDateTimeError",
    "HALF_DAYS",
    "HOURS",
    "InvalidTimestampStringError",
    "InvalidZoneError",
    "MICROSECONDS",
    "MILLENNIA",
    "MILLIS",
    "MILLISECONDS",
    "MINUTES",
    "MONTHS",
    "NANOS",
    "NANOSECONDS",
    "ReasonCode",
    "SECONDS",
    "Settings",
    "SystemClock",
    "TimeUnit",
    "WEEKS",
    "YEARS",
    "ZonedTimestamp",
    "load_settings_json",
    "resolve_zone",
]
