"""Build OwnTracks location records and render them as ``.rec`` lines."""

from __future__ import annotations

import json
import re
from typing import Iterable, Iterator

from takeout_rec.common.constants import LINE_SEPARATOR, RECORD_TYPE
from takeout_rec.common.models import LocationRecord, NormalizedFix
from takeout_rec.common.time_utils import format_record_timestamp

OPTIONAL_PAYLOAD_KEYS = ("acc", "alt", "vac")
_EXPONENT = re.compile(r"e([+-])0*(\d)")


def build_record(fix: NormalizedFix, tracker_id: str) -> LocationRecord:
    return LocationRecord(
        tid=tracker_id,
        tst=fix.tst,
        timestamp_nanos=fix.timestamp_nanos,
        lat=fix.lat,
        lon=fix.lon,
        acc=fix.accuracy,
        alt=fix.altitude,
        vac=fix.vertical_accuracy,
        record_type=RECORD_TYPE,
    )


def build_records(fixes: Iterable[NormalizedFix], tracker_id: str) -> Iterator[LocationRecord]:
    for fix in fixes:
        yield build_record(fix, tracker_id)


def record_payload(record: LocationRecord) -> dict:
    """JSON payload in wire order; absent optional values are left out entirely."""
    payload = {
        "_type": record.record_type,
        "tid": record.tid,
        "tst": record.tst,
        "lat": record.lat,
        "lon": record.lon,
    }
    for key in OPTIONAL_PAYLOAD_KEYS:
        value = getattr(record, key)
        if value is not None:
            payload[key] = value
    return payload


def serialize_record(record: LocationRecord) -> str:
    timestamp = format_record_timestamp(record.timestamp_nanos)
    body = _compact_json(record_payload(record))
    return f"{timestamp}{LINE_SEPARATOR}{body}\n"


def _json_value(value) -> str:
    if isinstance(value, float):
        # Unpadded exponents: 5e-5, 1e16.
        return _EXPONENT.sub(lambda m: "e" + ("-" if m.group(1) == "-" else "") + m.group(2), repr(value))
    return json.dumps(value, ensure_ascii=False)


def _compact_json(payload: dict) -> str:
    return "{" + ",".join(f"{json.dumps(key)}:{_json_value(value)}" for key, value in payload.items()) + "}"
