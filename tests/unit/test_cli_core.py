import pytest

from takeout_rec.cli import parse_args


def test_parse_args_defaults():
    args = parse_args(["-f", "Records.json", "-i", "tt", "-e", "222"])
    assert args.input_file == "Records.json"
    assert args.tracker_id == "tt"
    assert args.exclude_device == 222
    assert args.output_dir is None
    assert args.config_dir is None
    assert args.on_invalid_row is None
    assert args.flush_final_bucket is None


def test_parse_args_accepts_overrides():
    args = parse_args(
        ["-f", "x.json", "--on-invalid-row", "skip", "--no-final-flush", "--output-dir", "out", "--overlay-config-dir", "config/live"]
    )
    assert args.on_invalid_row == "skip"
    assert args.flush_final_bucket is False
    assert args.output_dir == "out"
    assert args.overlay_config_dir == "config/live"


def test_parse_args_requires_input_file():
    with pytest.raises(SystemExit):
        parse_args(["-i", "tt"])


def test_parse_args_rejects_non_integer_device():
    with pytest.raises(SystemExit):
        parse_args(["-f", "x.json", "-e", "phone"])
