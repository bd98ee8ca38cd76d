"""End-to-end conversion: load, transform, build records, write monthly files."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from pathlib import Path

from takeout_rec.common.config_loader import RunSettings
from takeout_rec.common.logging import log_event
from takeout_rec.pipeline.load import load_fixes
from takeout_rec.pipeline.partition import PartitionResult, write_partitions
from takeout_rec.pipeline.records import build_records
from takeout_rec.pipeline.transform import TransformResult, transform_fixes


@dataclass(frozen=True)
class ConversionResult:
    run_id: str
    transform: TransformResult
    partition: PartitionResult

    @property
    def last_path(self) -> Path | None:
        return self.partition.last_path


def _elapsed_ms(started: float) -> int:
    return int((time.monotonic() - started) * 1000)


def run_conversion(settings: RunSettings, *, logger: logging.Logger, run_id: str) -> ConversionResult:
    started = time.monotonic()
    log_event(logger, "stage start", run_id=run_id, stage="load", event="STAGE_START", status="ok")
    raw_fixes = load_fixes(settings.input_file)
    log_event(
        logger,
        f"loaded {settings.input_file}",
        run_id=run_id,
        stage="load",
        event="STAGE_END",
        status="ok",
        rows_out=len(raw_fixes),
        duration_ms=_elapsed_ms(started),
    )

    started = time.monotonic()
    log_event(logger, "stage start", run_id=run_id, stage="transform", event="STAGE_START", status="ok")
    transformed = transform_fixes(
        raw_fixes,
        settings.exclude_device,
        on_invalid_row=settings.on_invalid_row,
        logger=logger,
        run_id=run_id,
        stage="transform",
    )
    log_event(
        logger,
        (
            f"excluded={transformed.excluded} missing_position={transformed.missing_position} "
            f"invalid={transformed.invalid}"
        ),
        run_id=run_id,
        stage="transform",
        event="STAGE_END",
        status="ok" if not transformed.invalid else "partial",
        rows_in=transformed.rows_in,
        rows_out=len(transformed.fixes),
        duration_ms=_elapsed_ms(started),
    )

    started = time.monotonic()
    log_event(logger, "stage start", run_id=run_id, stage="write", event="STAGE_START", status="ok")
    partitioned = write_partitions(
        build_records(transformed.fixes, settings.tracker_id),
        settings.output_dir,
        flush_final_bucket=settings.flush_final_bucket,
        logger=logger,
        run_id=run_id,
        stage="write",
    )
    log_event(
        logger,
        f"wrote {len(partitioned.written)} file(s) to {settings.output_dir}",
        run_id=run_id,
        stage="write",
        event="STAGE_END",
        status="ok",
        rows_in=len(transformed.fixes),
        rows_out=partitioned.rows_out,
        duration_ms=_elapsed_ms(started),
    )

    return ConversionResult(run_id=run_id, transform=transformed, partition=partitioned)
