"""UTC-focused helpers for record timestamps and run metadata."""

from __future__ import annotations

import re
from datetime import datetime, timedelta, timezone

from takeout_rec.common.constants import NANOS_PER_SECOND, RECORD_TIMESTAMP_FORMAT

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

_ISO_INSTANT = re.compile(
    r"^(?P<date>\d{4}-\d{2}-\d{2})[T ](?P<time>\d{2}:\d{2}(?::\d{2})?)"
    r"(?:[.,](?P<fraction>\d{1,9}))?"
    r"(?P<offset>Z|z|[+-]\d{2}(?::?\d{2})?)?$"
)


def utc_timestamp_iso() -> str:
    return datetime.now(tz=timezone.utc).isoformat(timespec="milliseconds")


def parse_instant_nanos(value: str) -> int:
    """Parse an ISO-8601 instant into integer nanoseconds since the Unix epoch.

    Up to nine fractional digits are kept exactly. A value without an offset is
    read as UTC. Raises ``ValueError`` for anything else.
    """
    match = _ISO_INSTANT.match(value.strip())
    if match is None:
        raise ValueError(f"not an ISO-8601 instant: {value!r}")

    offset = match.group("offset")
    tz = timezone.utc
    if offset and offset not in ("Z", "z"):
        sign = -1 if offset[0] == "-" else 1
        digits = offset[1:].replace(":", "")
        hours, minutes = int(digits[:2]), int(digits[2:] or 0)
        tz = timezone(sign * timedelta(hours=hours, minutes=minutes))

    whole = datetime.fromisoformat(f"{match.group('date')}T{match.group('time')}").replace(tzinfo=tz)
    seconds = (whole - EPOCH) // timedelta(seconds=1)
    fraction = (match.group("fraction") or "").ljust(9, "0")
    return seconds * NANOS_PER_SECOND + int(fraction)


def nanos_to_seconds(nanos: int) -> int:
    # Floor, so pre-epoch instants land in the same second the bucket key uses.
    return nanos // NANOS_PER_SECOND


def nanos_to_datetime(nanos: int) -> datetime:
    return EPOCH + timedelta(microseconds=nanos // 1_000)


def format_record_timestamp(nanos: int) -> str:
    return nanos_to_datetime(nanos).strftime(RECORD_TIMESTAMP_FORMAT)
