"""Data models used across the pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from takeout_rec.common.constants import RECORD_TYPE


@dataclass(frozen=True)
class RawFix:
    """One element of the source ``locations`` array, values as decoded from JSON."""

    index: int
    device_tag: Any = None
    latitude_e7: Any = None
    longitude_e7: Any = None
    timestamp: Any = None
    timestamp_ms: Any = None
    accuracy: Any = None
    altitude: Any = None
    vertical_accuracy: Any = None


@dataclass(frozen=True)
class NormalizedFix:
    lat: float | None
    lon: float | None
    timestamp_nanos: int
    tst: int
    device_tag: int | None = None
    accuracy: int | None = None
    altitude: int | None = None
    vertical_accuracy: int | None = None


@dataclass(frozen=True)
class LocationRecord:
    tid: str
    tst: int
    timestamp_nanos: int
    lat: float
    lon: float
    acc: int | None = None
    alt: int | None = None
    vac: int | None = None
    record_type: str = RECORD_TYPE
