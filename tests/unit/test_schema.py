import pytest

from takeout_rec.common.errors import ConfigError
from takeout_rec.common.schema import validate_converter_config, validate_run_settings


BASE_CONFIG = {
    "tracker_id": None,
    "exclude_device": None,
    "output_dir": "rust_output",
    "on_invalid_row": "abort",
    "flush_final_bucket": True,
}


def test_validate_converter_config_accepts_valid_shape():
    validated = validate_converter_config(dict(BASE_CONFIG))
    assert validated["output_dir"] == "rust_output"


def test_validate_converter_config_rejects_unknown_key_by_default():
    bad = dict(BASE_CONFIG)
    bad["exclude_devices"] = [1, 2]
    with pytest.raises(ConfigError):
        validate_converter_config(bad)


def test_validate_converter_config_allows_unknown_when_enabled():
    okay = dict(BASE_CONFIG)
    okay["extra"] = 1
    validate_converter_config(okay, allow_unknown=True)


@pytest.mark.parametrize(
    ("key", "value"),
    [
        ("tracker_id", 12),
        ("exclude_device", "5"),
        ("exclude_device", True),
        ("output_dir", ""),
        ("on_invalid_row", "ignore"),
        ("flush_final_bucket", "yes"),
    ],
)
def test_validate_converter_config_rejects_bad_values(key, value):
    bad = dict(BASE_CONFIG)
    bad[key] = value
    with pytest.raises(ConfigError):
        validate_converter_config(bad)


def test_validate_converter_config_rejects_missing_keys():
    bad = dict(BASE_CONFIG)
    del bad["output_dir"]
    with pytest.raises(ConfigError):
        validate_converter_config(bad)


def test_validate_run_settings_requires_tracker_and_device():
    validate_run_settings("tt", 5)
    with pytest.raises(ConfigError):
        validate_run_settings("", 5)
    with pytest.raises(ConfigError):
        validate_run_settings("tt", None)
