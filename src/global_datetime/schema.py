"""Input validation for settings mappings."""

from __future__ import annotations

from global_datetime.resolution import unit_from_name
from global_datetime.types import InvalidZoneError
from global_datetime.zoned import resolve_zone


def validate_settings(data: dict) -> list[str]:
    """Validate a settings mapping. Returns list of error messages (empty = valid).

    Checks:
    - Only known keys are present
    - reference_zone resolves in the zone database
    - precision names a unit no longer than a day
    """
    errors: list[str] = []

    unknown = sorted(set(data) - {"reference_zone", "precision"})
    for key in unknown:
        errors.append(f"Unknown setting: {key!r}")

    if "reference_zone" in data:
        zone = data["reference_zone"]
        if not isinstance(zone, str):
            errors.append(f"reference_zone must be a string, got {zone!r}")
        else:
            try:
                resolve_zone(zone)
            except InvalidZoneError:
                errors.append(f"Invalid reference_zone: {zone!r}")

    if "precision" in data:
        name = data["precision"]
        try:
            unit = unit_from_name(name)
        except ValueError:
            errors.append(f"Invalid precision: {name!r}")
        else:
            try:
                unit.truncation_nanos
            except ValueError:
                errors.append(
                    f"Invalid precision: {name!r} is longer than a day"
                )

    return errors
