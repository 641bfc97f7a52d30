"""Tests for ZonedTimestamp: parsing, formatting, truncation and arithmetic.

Test data loaded from: data/fixtures/scenarios/{parse,format,arithmetic,truncation}.json
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest

from conftest import CHICAGO_MILLIS, CHICAGO_TEXT, load_scenarios
from global_datetime.resolution import MONTHS, unit_from_name
from global_datetime.types import InvalidTimestampStringError, InvalidZoneError
from global_datetime.zoned import (
    ZonedTimestamp,
    format_offset,
    local_zone,
    resolve_zone,
    zone_id,
)

_parse = load_scenarios("parse")
PARSE_VALID = _parse["valid"]
PARSE_INVALID = _parse["invalid"]
FORMATS = load_scenarios("format")
ARITHMETIC = load_scenarios("arithmetic")
TRUNCATIONS = load_scenarios("truncation")


# ---------------------------------------------------------------------------
# Zones
# ---------------------------------------------------------------------------
class TestLocalZone:
    """The platform zone keeps its region whenever the platform names one."""

    @pytest.mark.parametrize("tz", ["America/Chicago", ":America/Chicago"])
    def test_tz_variable(self, tmp_path, tz):
        zone = local_zone({"TZ": tz}, localtime=str(tmp_path / "missing"))
        assert isinstance(zone, ZoneInfo)
        assert zone.key == "America/Chicago"

    def test_localtime_symlink(self, tmp_path):
        target = tmp_path / "zoneinfo" / "Asia" / "Kolkata"
        target.parent.mkdir(parents=True)
        target.write_bytes(b"")
        link = tmp_path / "localtime"
        link.symlink_to(target)
        zone = local_zone({}, localtime=str(link))
        assert zone_id(zone) == "Asia/Kolkata"

    def test_unnamed_zone_falls_back_to_offset(self, tmp_path):
        plain = tmp_path / "localtime"
        plain.write_bytes(b"")
        zone = local_zone({}, localtime=str(plain))
        assert isinstance(zone, timezone)

    def test_unknown_name_falls_back_to_offset(self, tmp_path):
        zone = local_zone({"TZ": "Mars/Olympus"}, localtime=str(tmp_path / "missing"))
        assert isinstance(zone, timezone)


class TestResolveZone:

    def test_region(self):
        zone = resolve_zone("Europe/Madrid")
        assert isinstance(zone, ZoneInfo)
        assert zone_id(zone) == "Europe/Madrid"

    @pytest.mark.parametrize(
        "text, seconds",
        [("Z", 0), ("+02:00", 7200), ("-05:00", -18000), ("+05:45", 20700)],
    )
    def test_fixed_offsets(self, text, seconds):
        zone = resolve_zone(text)
        assert isinstance(zone, timezone)
        assert zone.utcoffset(None) == timedelta(seconds=seconds)
        assert zone_id(zone) == text

    def test_zone_objects_pass_through(self):
        zone = ZoneInfo("America/Chicago")
        assert resolve_zone(zone) is zone
        assert resolve_zone(timezone.utc) is timezone.utc

    @pytest.mark.parametrize("zone", ["Mars/Olympus", "", 42, None])
    def test_invalid(self, zone):
        with pytest.raises(InvalidZoneError):
            resolve_zone(zone)

    @pytest.mark.parametrize(
        "seconds, expected",
        [(0, "Z"), (3600, "+01:00"), (-12600, "-03:30"), (30, "+00:00:30")],
    )
    def test_format_offset(self, seconds, expected):
        assert format_offset(seconds) == expected


# ---------------------------------------------------------------------------
# Parse / format
# ---------------------------------------------------------------------------
class TestParse:

    @pytest.mark.parametrize("case", PARSE_VALID, ids=lambda s: s["id"])
    def test_valid(self, case):
        value = ZonedTimestamp.parse(case["text"])
        assert value.epoch_nanos == case["epoch_nanos"]
        assert value.zone_id == case["zone_id"]

    @pytest.mark.parametrize("case", PARSE_INVALID, ids=lambda s: s["id"])
    def test_invalid(self, case):
        with pytest.raises(InvalidTimestampStringError) as exc_info:
            ZonedTimestamp.parse(case["text"])
        assert exc_info.value.text == case["text"]

    def test_non_string(self):
        with pytest.raises(InvalidTimestampStringError):
            ZonedTimestamp.parse(1503256818811)  # type: ignore[arg-type]

    def test_region_decides_zone_offset_decides_instant(self):
        """A written offset that disagrees with the region still fixes the instant."""
        value = ZonedTimestamp.parse("2017-08-20T19:20:18.811Z[America/Chicago]")
        assert value.to_epoch_millis() == CHICAGO_MILLIS
        assert value.format() == CHICAGO_TEXT


class TestFormat:

    @pytest.mark.parametrize("case", FORMATS, ids=lambda s: s["id"])
    def test_format(self, case):
        value = ZonedTimestamp(case["epoch_nanos"], resolve_zone(case["zone"]))
        assert value.format() == case["expected"]
        assert str(value) == case["expected"]

    @pytest.mark.parametrize("case", PARSE_VALID, ids=lambda s: s["id"])
    def test_formatted_text_parses_back(self, case):
        value = ZonedTimestamp.parse(case["text"])
        assert ZonedTimestamp.parse(value.format()) == value

    def test_repr(self):
        value = ZonedTimestamp.parse(CHICAGO_TEXT)
        assert repr(value) == f"ZonedTimestamp({CHICAGO_TEXT})"


# ---------------------------------------------------------------------------
# Conversions
# ---------------------------------------------------------------------------
class TestConversions:

    def test_from_datetime(self):
        dt = datetime(2017, 8, 20, 14, 20, 18, 811000, tzinfo=ZoneInfo("America/Chicago"))
        value = ZonedTimestamp.from_datetime(dt)
        assert value.to_epoch_millis() == CHICAGO_MILLIS
        assert value.zone_id == "America/Chicago"

    def test_from_datetime_with_nanoseconds(self):
        dt = datetime(2017, 8, 20, 19, 20, 18, 1, tzinfo=timezone.utc)
        value = ZonedTimestamp.from_datetime(dt, nanosecond=5)
        assert value.nanosecond == 1005

    def test_from_datetime_rejects_naive(self):
        with pytest.raises(TypeError, match="timezone-aware"):
            ZonedTimestamp.from_datetime(datetime(2017, 8, 20))

    def test_from_datetime_rejects_out_of_range_nanos(self):
        dt = datetime(2017, 8, 20, tzinfo=timezone.utc)
        with pytest.raises(ValueError):
            ZonedTimestamp.from_datetime(dt, nanosecond=1000)

    def test_from_naive(self):
        value = ZonedTimestamp.from_naive(
            datetime(2017, 8, 20, 21, 20, 18, 811000), "Europe/Madrid"
        )
        assert value.to_epoch_millis() == CHICAGO_MILLIS

    def test_from_naive_rejects_aware(self):
        with pytest.raises(TypeError, match="naive"):
            ZonedTimestamp.from_naive(
                datetime(2017, 8, 20, tzinfo=timezone.utc), "Europe/Madrid"
            )

    def test_to_datetime(self):
        dt = ZonedTimestamp.parse(CHICAGO_TEXT).to_datetime()
        assert (dt.year, dt.month, dt.day) == (2017, 8, 20)
        assert (dt.hour, dt.minute, dt.second, dt.microsecond) == (14, 20, 18, 811000)
        assert dt.utcoffset() == timedelta(hours=-5)

    def test_with_zone_same_instant(self):
        value = ZonedTimestamp.parse(CHICAGO_TEXT).with_zone_same_instant("Asia/Kolkata")
        assert value.to_epoch_millis() == CHICAGO_MILLIS
        assert value.offset_seconds == 19800

    def test_local_nanos(self):
        value = ZonedTimestamp.parse("1970-01-01T02:00+02:00")
        assert value.epoch_nanos == 0
        assert value.local_nanos == 2 * 3600 * 1_000_000_000

    def test_equality_includes_zone(self):
        chicago = ZonedTimestamp.parse(CHICAGO_TEXT)
        utc = chicago.with_zone_same_instant("Z")
        assert chicago.epoch_nanos == utc.epoch_nanos
        assert chicago != utc


# ---------------------------------------------------------------------------
# Truncation / arithmetic
# ---------------------------------------------------------------------------
class TestTruncation:

    @pytest.mark.parametrize("case", TRUNCATIONS, ids=lambda s: s["id"])
    def test_truncated_to(self, case):
        value = ZonedTimestamp.parse(case["text"])
        result = value.truncated_to(unit_from_name(case["unit"]))
        assert result.format() == case["expected"]
        assert result.zone == value.zone

    def test_months_rejected(self):
        with pytest.raises(ValueError):
            ZonedTimestamp.parse(CHICAGO_TEXT).truncated_to(MONTHS)


class TestArithmetic:

    @pytest.mark.parametrize("case", ARITHMETIC, ids=lambda s: s["id"])
    def test_plus(self, case):
        start = ZonedTimestamp.parse(case["start"])
        result = start.plus(case["amount"], unit_from_name(case["unit"]))
        assert result.format() == case["expected"]

    def test_day_across_dst_is_not_24_hours(self):
        """Adding a day over the spring transition moves the instant 23 hours."""
        start = ZonedTimestamp.parse("2021-03-27T12:00+01:00[Europe/Madrid]")
        result = start.plus(1, unit_from_name("days"))
        assert result.format() == "2021-03-28T12:00+02:00[Europe/Madrid]"
        assert result.epoch_nanos - start.epoch_nanos == 23 * 3600 * 1_000_000_000
