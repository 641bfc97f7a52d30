"""Settings: the default reference zone and truncation precision."""

from __future__ import annotations

from dataclasses import dataclass

from global_datetime.resolution import MILLISECONDS, NANOSECONDS, TimeUnit

DEFAULT_REFERENCE_ZONE = "Europe/Madrid"


@dataclass(frozen=True)
class Settings:
    """Defaults every GlobalDateTime starts from and resets back to.

    The zone identifier is resolved (and validated) each time an instance
    is constructed or reset, not here.
    """

    reference_zone: str = DEFAULT_REFERENCE_ZONE
    precision: TimeUnit = MILLISECONDS

    def __post_init__(self) -> None:
        # Raises ValueError for units longer than a day.
        self.precision.truncation_nanos


MILLIS = Settings()
NANOS = Settings(precision=NANOSECONDS)
