import json
from pathlib import Path

import pytest

from takeout_rec.common.errors import LoadError
from takeout_rec.pipeline.load import flatten_locations, load_fixes


def test_load_fixes_flattens_fields(tmp_path: Path):
    path = tmp_path / "Records.json"
    path.write_text(
        json.dumps(
            {
                "locations": [
                    {
                        "deviceTag": 7,
                        "latitudeE7": 1,
                        "longitudeE7": 2,
                        "timestamp": "2015-01-11T12:12:00Z",
                        "accuracy": 3,
                        "altitude": 4,
                        "verticalAccuracy": 5,
                        "source": "WIFI",
                    },
                    {"timestampMs": "1423000000000"},
                ]
            }
        ),
        encoding="utf-8",
    )

    fixes = load_fixes(path)

    assert len(fixes) == 2
    first = fixes[0]
    assert (first.index, first.device_tag, first.latitude_e7, first.longitude_e7) == (0, 7, 1, 2)
    assert (first.accuracy, first.altitude, first.vertical_accuracy) == (3, 4, 5)
    assert fixes[1].index == 1
    assert fixes[1].device_tag is None
    assert fixes[1].timestamp_ms == "1423000000000"


def test_load_fixes_missing_file(tmp_path: Path):
    with pytest.raises(LoadError):
        load_fixes(tmp_path / "nope.json")


def test_load_fixes_invalid_json(tmp_path: Path):
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(LoadError):
        load_fixes(path)


@pytest.mark.parametrize(
    "document",
    [
        [],
        {"timelineObjects": []},
        {"locations": {"latitudeE7": 1}},
        {"locations": [1, 2]},
    ],
)
def test_flatten_locations_rejects_wrong_shapes(document):
    with pytest.raises(LoadError):
        flatten_locations(document)


def test_flatten_locations_accepts_empty_array():
    assert flatten_locations({"locations": []}) == []
