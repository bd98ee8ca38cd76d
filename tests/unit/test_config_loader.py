from pathlib import Path

import pytest

from takeout_rec.common.config_loader import load_converter_config, resolve_run_settings
from takeout_rec.common.errors import ConfigError

REPO_CONFIG_DIR = Path(__file__).resolve().parents[2] / "config"


def test_load_converter_config_from_repo_config_dir():
    cfg = load_converter_config(REPO_CONFIG_DIR)
    assert cfg["output_dir"] == "rust_output"
    assert cfg["flush_final_bucket"] is True


def test_load_converter_config_defaults_without_config_dir():
    cfg = load_converter_config()
    assert cfg["on_invalid_row"] == "abort"
    assert cfg["tracker_id"] is None


def test_load_converter_config_missing_file(tmp_path: Path):
    with pytest.raises(ConfigError):
        load_converter_config(tmp_path)


def test_load_converter_config_applies_overlay_values(tmp_path: Path):
    overlay = tmp_path / "overlay"
    overlay.mkdir()
    (overlay / "converter.yml").write_text("tracker_id: ab\non_invalid_row: skip\n", encoding="utf-8")

    cfg = load_converter_config(REPO_CONFIG_DIR, overlay_config_dir=overlay)

    assert cfg["tracker_id"] == "ab"
    assert cfg["on_invalid_row"] == "skip"
    assert cfg["output_dir"] == "rust_output"


def test_load_converter_config_ignores_empty_overlay_file(tmp_path: Path):
    (tmp_path / "converter.yml").write_text("", encoding="utf-8")
    cfg = load_converter_config(REPO_CONFIG_DIR, overlay_config_dir=tmp_path)
    assert cfg["tracker_id"] is None


def test_load_converter_config_rejects_non_mapping_overlay(tmp_path: Path):
    (tmp_path / "converter.yml").write_text("- not\n- a\n- mapping\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_converter_config(REPO_CONFIG_DIR, overlay_config_dir=tmp_path)


def test_load_converter_config_rejects_invalid_yaml(tmp_path: Path):
    (tmp_path / "converter.yml").write_text("tracker_id: [unterminated\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_converter_config(tmp_path)


def test_resolve_run_settings_prefers_given_cli_values():
    cfg = load_converter_config()
    cfg["tracker_id"] = "cf"
    cfg["exclude_device"] = 1

    settings = resolve_run_settings(
        cfg,
        Path("Records.json"),
        {"tracker_id": "tt", "exclude_device": None, "output_dir": "out", "flush_final_bucket": None},
    )

    assert settings.tracker_id == "tt"
    assert settings.exclude_device == 1
    assert settings.output_dir == Path("out")
    assert settings.flush_final_bucket is True


def test_resolve_run_settings_requires_tracker_id():
    with pytest.raises(ConfigError):
        resolve_run_settings(load_converter_config(), Path("Records.json"), {"exclude_device": 3})
