"""Convert a location-history export into monthly OwnTracks .rec files."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from takeout_rec.common.config_loader import load_converter_config, resolve_run_settings
from takeout_rec.common.constants import EXIT_HARD_FAIL, EXIT_SUCCESS, INVALID_ROW_POLICIES
from takeout_rec.common.errors import PipelineError
from takeout_rec.common.ids import generate_run_id
from takeout_rec.common.logging import build_logger, log_event
from takeout_rec.pipeline.convert import run_conversion


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("-f", "--input-file", required=True)
    parser.add_argument("-i", "--tracker-id", default=None)
    parser.add_argument("-e", "--exclude-device", type=int, default=None)
    parser.add_argument("--output-dir", default=None)
    parser.add_argument("--config-dir", default=None)
    parser.add_argument("--overlay-config-dir", default=None)
    parser.add_argument("--on-invalid-row", default=None, choices=INVALID_ROW_POLICIES)
    parser.add_argument(
        "--no-final-flush",
        dest="flush_final_bucket",
        action="store_const",
        const=False,
        default=None,
        help="leave the last month unwritten, as earlier releases did",
    )
    parser.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARN", "ERROR"])
    parser.add_argument("--log-dir", default=None)
    parser.add_argument("--run-id", default=None)
    return parser.parse_args(argv)


def run_command(args: argparse.Namespace) -> int:
    run_id = args.run_id or generate_run_id()
    log_dir = Path(args.log_dir) if args.log_dir else None
    overlay_config_dir = Path(args.overlay_config_dir) if args.overlay_config_dir else None

    logger = build_logger(run_id, log_dir=log_dir, level=args.log_level)
    try:
        config_dir = Path(args.config_dir) if args.config_dir else None
        cfg = load_converter_config(config_dir, overlay_config_dir=overlay_config_dir)
        settings = resolve_run_settings(
            cfg,
            Path(args.input_file),
            {
                "tracker_id": args.tracker_id,
                "exclude_device": args.exclude_device,
                "output_dir": args.output_dir,
                "on_invalid_row": args.on_invalid_row,
                "flush_final_bucket": args.flush_final_bucket,
            },
        )
        result = run_conversion(settings, logger=logger, run_id=run_id)
    except PipelineError as exc:
        log_event(
            logger,
            f"conversion failed: {exc}",
            run_id=run_id,
            event="RUN_FAIL",
            status="error",
            error_code=exc.error_code,
        )
        print(f"error: {exc}", file=sys.stderr)
        return EXIT_HARD_FAIL

    if result.last_path is not None:
        print(result.last_path)
    return EXIT_SUCCESS


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv if argv is not None else sys.argv[1:])
    try:
        return run_command(args)
    except Exception as exc:
        print(f"unexpected error: {exc}", file=sys.stderr)
        return EXIT_HARD_FAIL


if __name__ == "__main__":
    raise SystemExit(main())
