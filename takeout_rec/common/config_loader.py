"""Configuration loading and validation."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

import yaml

from takeout_rec.common.constants import DEFAULT_OUTPUT_DIR
from takeout_rec.common.errors import ConfigError
from takeout_rec.common.fs import read_yaml
from takeout_rec.common.schema import validate_converter_config, validate_run_settings

CONFIG_FILENAME = "converter.yml"
DEFAULT_CONFIG = {
    "tracker_id": None,
    "exclude_device": None,
    "output_dir": DEFAULT_OUTPUT_DIR,
    "on_invalid_row": "abort",
    "flush_final_bucket": True,
}


@dataclass(frozen=True)
class RunSettings:
    input_file: Path
    tracker_id: str
    exclude_device: int
    output_dir: Path
    on_invalid_row: str = "abort"
    flush_final_bucket: bool = True


def _deep_merge(base: Any, overlay: Any) -> Any:
    if isinstance(base, dict) and isinstance(overlay, dict):
        merged = dict(base)
        for key, value in overlay.items():
            if key in merged:
                merged[key] = _deep_merge(merged[key], value)
            else:
                merged[key] = value
        return merged
    return overlay


def _read_mapping(path: Path) -> dict | None:
    try:
        payload = read_yaml(path)
    except OSError as exc:
        raise ConfigError(f"Unable to read config {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {path}: {exc}") from exc
    if payload is None:
        return None
    if not isinstance(payload, dict):
        raise ConfigError(f"Config {path} must contain a mapping")
    return payload


def _load_yaml_with_overlay(path: Path | None, overlay_path: Path | None) -> dict:
    base = dict(DEFAULT_CONFIG) if path is None else _read_mapping(path) or {}
    if overlay_path is None or not overlay_path.exists():
        return base
    overlay = _read_mapping(overlay_path)
    if overlay is None:
        return base
    return _deep_merge(base, overlay)


def load_converter_config(
    config_dir: Path | None = None,
    *,
    allow_unknown: bool = False,
    overlay_config_dir: Path | None = None,
) -> dict:
    """Load ``converter.yml`` from ``config_dir``, or the built-in defaults when no directory is given."""
    path = None
    if config_dir is not None:
        path = config_dir / CONFIG_FILENAME
        if not path.exists():
            raise ConfigError(f"Missing config file: {path}")
    overlay_path = overlay_config_dir / CONFIG_FILENAME if overlay_config_dir is not None else None
    cfg = _load_yaml_with_overlay(path, overlay_path)
    return validate_converter_config(cfg, allow_unknown=allow_unknown)


def resolve_run_settings(cfg: dict, input_file: Path, overrides: Mapping[str, Any]) -> RunSettings:
    """Apply CLI values that were actually given over the loaded config."""
    merged = dict(cfg)
    for key, value in overrides.items():
        if value is not None:
            merged[key] = value

    validate_run_settings(merged["tracker_id"], merged["exclude_device"])
    return RunSettings(
        input_file=input_file,
        tracker_id=merged["tracker_id"],
        exclude_device=merged["exclude_device"],
        output_dir=Path(merged["output_dir"]),
        on_invalid_row=merged["on_invalid_row"],
        flush_final_bucket=merged["flush_final_bucket"],
    )
