"""Clock abstraction for the wall-clock reads behind now() and the predicates."""

from __future__ import annotations

import time
from dataclasses import dataclass
from datetime import datetime
from typing import Protocol

from global_datetime.resolution import NANOS_PER_MILLI
from global_datetime.zoned import ZonedTimestamp


class Clock(Protocol):
    """Source of the current instant. Inject a fake in tests."""

    def epoch_nanos(self) -> int: ...


class SystemClock:
    """Default clock backed by the real system time."""

    def epoch_nanos(self) -> int:
        return time.time_ns()


@dataclass(frozen=True)
class FixedClock:
    """Clock that always returns the same instant."""

    fixed_nanos: int

    @classmethod
    def at(cls, moment: datetime) -> FixedClock:
        """Fix the clock at an aware datetime."""
        return cls(ZonedTimestamp.from_datetime(moment).epoch_nanos)

    @classmethod
    def at_epoch_millis(cls, millis: int) -> FixedClock:
        return cls(millis * NANOS_PER_MILLI)

    def epoch_nanos(self) -> int:
        return self.fixed_nanos


SYSTEM_CLOCK = SystemClock()
