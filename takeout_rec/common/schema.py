"""Minimal strict schema for YAML config validation."""

from __future__ import annotations

from takeout_rec.common.constants import INVALID_ROW_POLICIES
from takeout_rec.common.errors import ConfigError

CONVERTER_KEYS = {
    "tracker_id",
    "exclude_device",
    "output_dir",
    "on_invalid_row",
    "flush_final_bucket",
}


def _assert_required_keys(obj: dict, required: set[str], ctx: str) -> None:
    missing = required - set(obj)
    if missing:
        missing_str = ", ".join(sorted(missing))
        raise ConfigError(f"Missing keys in {ctx}: {missing_str}")


def _assert_no_unknown_keys(obj: dict, known: set[str], ctx: str, allow_unknown: bool) -> None:
    if allow_unknown:
        return
    unknown = set(obj) - known
    if unknown:
        unknown_str = ", ".join(sorted(unknown))
        raise ConfigError(f"Unknown keys in {ctx}: {unknown_str}")


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def validate_converter_config(cfg, *, allow_unknown: bool = False) -> dict:
    if not isinstance(cfg, dict):
        raise ConfigError("converter config must be a mapping")
    _assert_required_keys(cfg, CONVERTER_KEYS, "converter config")
    _assert_no_unknown_keys(cfg, CONVERTER_KEYS, "converter config", allow_unknown)

    tracker_id = cfg["tracker_id"]
    if tracker_id is not None and not isinstance(tracker_id, str):
        raise ConfigError("tracker_id must be a string or null")
    exclude_device = cfg["exclude_device"]
    if exclude_device is not None and not _is_int(exclude_device):
        raise ConfigError("exclude_device must be an integer or null")
    if not isinstance(cfg["output_dir"], str) or not cfg["output_dir"]:
        raise ConfigError("output_dir must be a non-empty string")
    if cfg["on_invalid_row"] not in INVALID_ROW_POLICIES:
        raise ConfigError(f"on_invalid_row must be one of: {', '.join(INVALID_ROW_POLICIES)}")
    if not isinstance(cfg["flush_final_bucket"], bool):
        raise ConfigError("flush_final_bucket must be a boolean")

    return cfg


def validate_run_settings(tracker_id, exclude_device) -> None:
    """Checks applied once CLI overrides have been merged over the config file."""
    if not isinstance(tracker_id, str) or not tracker_id:
        raise ConfigError("tracker id is required (-i/--tracker-id or tracker_id in config)")
    if not _is_int(exclude_device):
        raise ConfigError("excluded device id is required (-e/--exclude-device or exclude_device in config)")
