"""Split the time-ordered record stream into one ``.rec`` file per UTC month."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, Iterator

from takeout_rec.common.constants import BUCKET_FILENAME_TEMPLATE
from takeout_rec.common.deterministic import consecutive_runs
from takeout_rec.common.errors import WriteError
from takeout_rec.common.fs import ensure_dir, write_lines
from takeout_rec.common.logging import log_event
from takeout_rec.common.models import LocationRecord
from takeout_rec.common.time_utils import nanos_to_datetime
from takeout_rec.pipeline.records import serialize_record

BucketKey = tuple[int, int]


@dataclass(frozen=True)
class Bucket:
    key: BucketKey
    lines: list[str]


@dataclass
class PartitionResult:
    written: list[Path] = field(default_factory=list)
    line_counts: dict[str, int] = field(default_factory=dict)
    unflushed_lines: int = 0
    last_path: Path | None = None

    @property
    def rows_out(self) -> int:
        return sum(self.line_counts.values())


def bucket_key(record: LocationRecord) -> BucketKey:
    instant = nanos_to_datetime(record.timestamp_nanos)
    return instant.year, instant.month


def bucket_path(output_dir: Path, key: BucketKey) -> Path:
    year, month = key
    return output_dir / BUCKET_FILENAME_TEMPLATE.format(year=year, month=month)


def group_into_buckets(records: Iterable[LocationRecord]) -> Iterator[Bucket]:
    for key, run in consecutive_runs(records, key=bucket_key):
        yield Bucket(key=key, lines=[serialize_record(record) for record in run])


def _flush(path: Path, lines: list[str]) -> None:
    try:
        write_lines(path, lines)
    except OSError as exc:
        raise WriteError(f"Unable to write {path}: {exc}") from exc


def write_partitions(
    records: Iterable[LocationRecord],
    output_dir: Path,
    *,
    flush_final_bucket: bool = True,
    logger: logging.Logger | None = None,
    **log_fields: Any,
) -> PartitionResult:
    """Write each monthly run of ``records`` to its own file, overwriting any previous file.

    A bucket is flushed once the first record of the next bucket has been
    read. With ``flush_final_bucket`` off the last bucket is left unwritten,
    which is how earlier releases behaved; its path is still reported as
    ``last_path``.
    """
    try:
        ensure_dir(output_dir)
    except OSError as exc:
        raise WriteError(f"Unable to create output directory {output_dir}: {exc}") from exc

    result = PartitionResult()
    pending: Bucket | None = None

    for bucket in group_into_buckets(records):
        if pending is not None:
            _write_bucket(pending, output_dir, result, logger, log_fields)
        pending = bucket
        result.last_path = bucket_path(output_dir, bucket.key)

    if pending is not None:
        if flush_final_bucket:
            _write_bucket(pending, output_dir, result, logger, log_fields)
        else:
            result.unflushed_lines = len(pending.lines)
            if logger is not None:
                log_event(
                    logger,
                    f"final bucket {result.last_path.name} left unwritten",
                    event="BUCKET_UNFLUSHED",
                    status="skipped",
                    bucket=result.last_path.name,
                    rows_out=0,
                    **log_fields,
                )
    return result


def _write_bucket(
    bucket: Bucket,
    output_dir: Path,
    result: PartitionResult,
    logger: logging.Logger | None,
    log_fields: dict,
) -> None:
    path = bucket_path(output_dir, bucket.key)
    _flush(path, bucket.lines)
    result.written.append(path)
    result.line_counts[path.name] = len(bucket.lines)
    if logger is not None:
        log_event(
            logger,
            f"wrote {path}",
            event="BUCKET_WRITTEN",
            status="ok",
            bucket=path.name,
            rows_out=len(bucket.lines),
            **log_fields,
        )
