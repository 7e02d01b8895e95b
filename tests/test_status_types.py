import json

import pytest

from toolnotif.status_types import PrIntent


def _sample():
    return {
        "total_commits": 40,
        "groups_processed": 3,
        "commits_indexed": 12,
        "cost_burned": 1.5,
        "status_log": ["started", "indexing"],
    }


def test_from_dict_reads_all_fields():
    report = PrIntent.from_dict(_sample())
    assert report.total_commits == 40
    assert report.groups_processed == 3
    assert report.commits_indexed == 12
    assert report.cost_burned == 1.5
    assert report.status_log == ["started", "indexing"]


def test_round_trip_through_json():
    report = PrIntent.from_dict(_sample())
    again = PrIntent.from_dict(json.loads(json.dumps(report.to_dict())))
    assert again == report
    assert report.to_dict() == _sample()


def test_integer_cost_becomes_float():
    data = _sample()
    data["cost_burned"] = 2
    report = PrIntent.from_dict(data)
    assert isinstance(report.cost_burned, float)
    assert report.cost_burned == 2


def test_missing_field_is_rejected():
    data = _sample()
    del data["commits_indexed"]
    with pytest.raises(ValueError, match="commits_indexed"):
        PrIntent.from_dict(data)


@pytest.mark.parametrize(
    "name, value",
    [
        ("total_commits", "40"),
        ("groups_processed", 1.5),
        ("commits_indexed", True),
        ("cost_burned", "cheap"),
        ("status_log", "not a list"),
        ("status_log", [1, 2]),
    ],
)
def test_wrong_types_are_rejected(name, value):
    data = _sample()
    data[name] = value
    with pytest.raises(ValueError):
        PrIntent.from_dict(data)