"""Shared types: ReasonCode and the GlobalDateTimeError family."""

from __future__ import annotations

from enum import IntEnum


class ReasonCode(IntEnum):
    """Numeric reason attached to every GlobalDateTimeError."""

    OK = 0
    UNEXPECTED_ERROR = 1
    INVALID_ZONE = 2
    INVALID_TIMESTAMP_STRING = 3


REASON_MESSAGES: dict[ReasonCode, str] = {
    ReasonCode.OK: "Everything OK",
    ReasonCode.UNEXPECTED_ERROR: "Unexpected error",
    ReasonCode.INVALID_ZONE: "The specified zone is not valid",
    ReasonCode.INVALID_TIMESTAMP_STRING: (
        "The specified string is not a valid zoned timestamp"
    ),
}


class GlobalDateTimeError(Exception):
    """Base class for recoverable failures reported to the caller."""

    def __init__(self, reason_code: ReasonCode, detail: str = "") -> None:
        self.reason_code = reason_code
        self.message = REASON_MESSAGES[reason_code]
        self.detail = detail
        super().__init__(f"{self.message}: {detail}" if detail else self.message)


class InvalidZoneError(GlobalDateTimeError, ValueError):
    """Raised when a zone identifier cannot be resolved by the zone database."""

    def __init__(self, zone_id: object) -> None:
        self.zone_id = zone_id
        super().__init__(ReasonCode.INVALID_ZONE, f"{zone_id!r}")


class InvalidTimestampStringError(GlobalDateTimeError, ValueError):
    """Raised when text does not follow the zoned-timestamp grammar."""

    def __init__(self, text: object, reason: str = "") -> None:
        self.text = text
        self.reason = reason
        detail = f"{text!r}" + (f" ({reason})" if reason else "")
        super().__init__(ReasonCode.INVALID_TIMESTAMP_STRING, detail)
