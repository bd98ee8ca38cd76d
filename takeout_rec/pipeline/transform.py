"""Normalise coordinates and timestamps, filter unusable rows, and order by time."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Iterable

from takeout_rec.common.constants import E7_SCALE, NANOS_PER_MILLI
from takeout_rec.common.deterministic import stable_sorted
from takeout_rec.common.errors import (
    FieldTypeError,
    MissingFieldError,
    TimestampParseError,
    TransformError,
)
from takeout_rec.common.logging import log_warning
from takeout_rec.common.models import NormalizedFix, RawFix
from takeout_rec.common.time_utils import nanos_to_datetime, nanos_to_seconds, parse_instant_nanos

_MILLIS_TEXT = re.compile(r"-?[0-9]+\Z")


@dataclass
class TransformResult:
    fixes: list[NormalizedFix] = field(default_factory=list)
    rows_in: int = 0
    excluded: int = 0
    missing_position: int = 0
    invalid: int = 0


def _optional_int(raw: RawFix, attr: str, source_name: str) -> int | None:
    value = getattr(raw, attr)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        raise FieldTypeError(
            f"row {raw.index}: {source_name} must be an integer, got {type(value).__name__}",
            row_index=raw.index,
            field=source_name,
        )
    return value


def _scale_e7(raw: RawFix, attr: str, source_name: str) -> float | None:
    value = _optional_int(raw, attr, source_name)
    if value is None:
        return None
    return value / E7_SCALE


def _timestamp_nanos(raw: RawFix) -> int:
    value = raw.timestamp
    if value is not None:
        if isinstance(value, str):
            try:
                return parse_instant_nanos(value)
            except ValueError as exc:
                raise TimestampParseError(
                    f"row {raw.index}: cannot parse timestamp {value!r}",
                    row_index=raw.index,
                    field="timestamp",
                ) from exc
        if isinstance(value, int) and not isinstance(value, bool):
            # Numeric instants are nanoseconds since the epoch.
            return value
        raise FieldTypeError(
            f"row {raw.index}: timestamp must be a string or integer, got {type(value).__name__}",
            row_index=raw.index,
            field="timestamp",
        )

    millis = raw.timestamp_ms
    if millis is None:
        raise MissingFieldError(f"row {raw.index}: no timestamp", row_index=raw.index, field="timestamp")
    if isinstance(millis, bool) or not isinstance(millis, (int, str)):
        raise FieldTypeError(
            f"row {raw.index}: timestampMs must be an integer, got {type(millis).__name__}",
            row_index=raw.index,
            field="timestampMs",
        )
    if isinstance(millis, str) and _MILLIS_TEXT.match(millis) is None:
        raise TimestampParseError(
            f"row {raw.index}: cannot parse timestampMs {millis!r}",
            row_index=raw.index,
            field="timestampMs",
        )
    return int(millis) * NANOS_PER_MILLI


def normalize_fix(raw: RawFix) -> NormalizedFix:
    lat = _scale_e7(raw, "latitude_e7", "latitudeE7")
    lon = _scale_e7(raw, "longitude_e7", "longitudeE7")
    if lat is not None and lon is None:
        raise MissingFieldError(f"row {raw.index}: longitudeE7 missing", row_index=raw.index, field="longitudeE7")

    nanos = _timestamp_nanos(raw)
    try:
        nanos_to_datetime(nanos)
    except OverflowError as exc:
        raise TimestampParseError(
            f"row {raw.index}: timestamp {nanos} ns is out of range",
            row_index=raw.index,
            field="timestamp",
        ) from exc
    return NormalizedFix(
        lat=lat,
        lon=lon,
        timestamp_nanos=nanos,
        tst=nanos_to_seconds(nanos),
        device_tag=_optional_int(raw, "device_tag", "deviceTag"),
        accuracy=_optional_int(raw, "accuracy", "accuracy"),
        altitude=_optional_int(raw, "altitude", "altitude"),
        vertical_accuracy=_optional_int(raw, "vertical_accuracy", "verticalAccuracy"),
    )


def is_excluded(fix: NormalizedFix, exclude_device: int) -> bool:
    # A missing tag never matches the excluded id.
    return fix.device_tag is not None and fix.device_tag == exclude_device


def has_position(fix: NormalizedFix) -> bool:
    return fix.lat is not None


def passes_filters(fix: NormalizedFix, exclude_device: int) -> bool:
    return not is_excluded(fix, exclude_device) and has_position(fix)


def transform_fixes(
    fixes: Iterable[RawFix],
    exclude_device: int,
    *,
    on_invalid_row: str = "abort",
    logger: logging.Logger | None = None,
    **log_fields: Any,
) -> TransformResult:
    result = TransformResult()
    kept: list[NormalizedFix] = []

    for raw in fixes:
        result.rows_in += 1
        if raw.latitude_e7 is None:
            # Unusable for a location log whatever else the row holds.
            result.missing_position += 1
            continue
        try:
            fix = normalize_fix(raw)
        except TransformError as exc:
            if on_invalid_row != "skip":
                raise
            result.invalid += 1
            if logger is not None:
                log_warning(
                    logger,
                    f"skipping row {raw.index}: {exc}",
                    event="ROW_SKIPPED",
                    status="warning",
                    error_code=exc.error_code,
                    **log_fields,
                )
            continue

        if is_excluded(fix, exclude_device):
            result.excluded += 1
            continue
        kept.append(fix)

    result.fixes = stable_sorted(kept, key=lambda fix: fix.tst)
    return result
