"""Read a location-history export and flatten its fixes into raw rows."""

from __future__ import annotations

import json
from pathlib import Path

from takeout_rec.common.errors import LoadError
from takeout_rec.common.fs import read_json
from takeout_rec.common.models import RawFix

LOCATIONS_KEY = "locations"
FIELD_MAP = {
    "deviceTag": "device_tag",
    "latitudeE7": "latitude_e7",
    "longitudeE7": "longitude_e7",
    "timestamp": "timestamp",
    "timestampMs": "timestamp_ms",
    "accuracy": "accuracy",
    "altitude": "altitude",
    "verticalAccuracy": "vertical_accuracy",
}


def flatten_locations(document) -> list[RawFix]:
    if not isinstance(document, dict):
        raise LoadError("Source document must be a JSON object")
    if LOCATIONS_KEY not in document:
        raise LoadError(f"Source document has no '{LOCATIONS_KEY}' array")
    locations = document[LOCATIONS_KEY]
    if not isinstance(locations, list):
        raise LoadError(f"'{LOCATIONS_KEY}' must be an array")

    fixes: list[RawFix] = []
    for index, location in enumerate(locations):
        if not isinstance(location, dict):
            raise LoadError(f"{LOCATIONS_KEY}[{index}] is not an object")
        values = {attr: location.get(key) for key, attr in FIELD_MAP.items()}
        fixes.append(RawFix(index=index, **values))
    return fixes


def load_fixes(path: Path) -> list[RawFix]:
    try:
        document = read_json(path)
    except FileNotFoundError as exc:
        raise LoadError(f"Source file not found: {path}") from exc
    except (OSError, UnicodeDecodeError) as exc:
        raise LoadError(f"Unable to read source file {path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise LoadError(f"Source file {path} is not valid JSON: {exc}") from exc
    return flatten_locations(document)
