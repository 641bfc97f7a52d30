"""Settings loading from JSON files."""

from __future__ import annotations

import json
from pathlib import Path

from global_datetime.resolution import unit_from_name
from global_datetime.schema import validate_settings
from global_datetime.settings import Settings


def _build_settings(data: dict, source: str) -> Settings:
    errors = validate_settings(data)
    if errors:
        raise ValueError(
            f"Validation errors in {source}:\n"
            + "\n".join(f"  - {e}" for e in errors)
        )

    defaults = Settings()
    return Settings(
        reference_zone=data.get("reference_zone", defaults.reference_zone),
        precision=(
            unit_from_name(data["precision"])
            if "precision" in data
            else defaults.precision
        ),
    )


def load_settings_json(path: str | Path) -> Settings:
    """Load Settings from a JSON file.

    The JSON file has the format:
    {
        "settings": {
            "reference_zone": "Europe/Madrid",
            "precision": "milliseconds"
        }
    }
    The "settings" wrapper is optional. Missing keys keep their defaults.

    Raises ValueError if validation fails.
    """
    path = Path(path)
    with open(path) as f:
        data = json.load(f)

    settings_data = data.get("settings", data)
    return _build_settings(settings_data, path.name)
