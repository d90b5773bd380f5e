from __future__ import annotations

import pandas as pd
import pytest

from scorecard_metrics.persistence import (
    build_persisted_metrics,
    collect_labeled_values,
    compute_aggregates,
    dedupe_by_date,
)


def _ts(day: str) -> pd.Timestamp:
    return pd.Timestamp(day, tz="UTC")


def test_none_batch_is_a_no_op() -> None:
    assert build_persisted_metrics("k1", None, None) == {"points": []}
    assert build_persisted_metrics("k1", "pie", None) == {"points": []}


def test_empty_batch_yields_no_points() -> None:
    result = build_persisted_metrics("k1", None, [])
    assert result == {"points": []}
    assert result.get("latest_value") is None
    assert result.get("value_json") is None
    assert result.get("latest_date") is None


def test_empty_multi_batch_yields_no_points() -> None:
    assert build_persisted_metrics("k1", "pie", []) == {"points": []}


def test_multi_batch_collapses_to_first_labeled_point(pie_batch) -> None:
    result = build_persisted_metrics("k1", "pie", pie_batch)

    assert len(result["points"]) == 1
    row = result["points"][0]
    assert row["kpi_id"] == "k1"
    assert row["date"] == _ts("2024-01-01")
    assert row["value"] == [{"label": "A", "value": 1}, {"label": "B", "value": 2}]
    assert row["color"] is None
    assert result["value_json"] == {"A": 1, "B": 2}
    assert result["latest_value"] == 1
    assert result["latest_date"] == _ts("2024-01-01")


def test_multi_batch_without_labels_uses_date_strings_as_labels() -> None:
    batch = [
        {"date": "North", "value": 10, "color": "#111111"},
        {"date": "South", "valueArray": ["20", 5]},
        {"value": [7, 8]},
        {"date": "  ", "value": "oops"},
    ]
    result = build_persisted_metrics("k1", "bar", batch)

    assert len(result["points"]) == 1
    row = result["points"][0]
    assert row["value"] == [
        {"label": "North", "value": 10, "color": "#111111"},
        {"label": "South", "value": 20.0},
        {"label": "Value 3", "value": 7},
        {"label": "Value 4", "value": 0},
    ]
    assert row["color"] == "#111111"
    assert result["value_json"] == {"North": 10, "South": 20.0, "Value 3": 7, "Value 4": 0}
    assert result["latest_value"] == 10


def test_multi_labeled_entries_are_cleaned() -> None:
    batch = [{
        "date": "2024-02-01",
        "labeledValues": [
            {"label": "", "value": "3", "color": "#abc"},
            {"value": None},
            {"label": "C", "value": 4},
        ],
    }]
    labeled = collect_labeled_values(batch)
    assert labeled == [
        {"label": "Value 1", "value": 3.0, "color": "#abc"},
        {"label": "Value 2", "value": 0},
        {"label": "C", "value": 4},
    ]

    result = build_persisted_metrics("k1", "donut", batch)
    assert result["points"][0]["color"] == "#abc"


def test_multi_row_date_comes_from_first_point() -> None:
    batch = [
        {"date": "2024-05-02", "labeledValues": [{"label": "A", "value": 1}]},
        {"date": "2024-06-01", "labeledValues": [{"label": "B", "value": 2}]},
    ]
    result = build_persisted_metrics("k1", "radar", batch)
    assert result["points"][0]["date"] == _ts("2024-05-02")
    assert result["value_json"] == {"A": 1}


def test_duplicate_dates_last_point_wins() -> None:
    batch = [{"date": "2024-01-01", "value": 5}, {"date": "2024-01-01", "value": 9}]
    result = build_persisted_metrics("k1", "line", batch)

    assert len(result["points"]) == 1
    assert result["points"][0]["value"] == 9
    assert result["latest_value"] == 9
    assert result["value_json"] == {"0": 9}


def test_dates_are_compared_after_normalization() -> None:
    batch = [
        {"date": "2024-01-01T03:00:00Z", "value": 1},
        {"date": "2024-01-02", "value": 2},
        {"date": "2024-01-01", "value": 3},
    ]
    result = build_persisted_metrics("k1", "line", batch)

    assert [row["value"] for row in result["points"]] == [3, 2]
    assert result["latest_date"] == _ts("2024-01-02")
    assert result["latest_value"] == 2


def test_aggregates_come_from_the_latest_date_not_the_last_point() -> None:
    batch = [{"date": "2024-03-01", "value": 30}, {"date": "2024-01-01", "value": 10}]
    result = build_persisted_metrics("k1", "area", batch)
    assert result["latest_value"] == 30
    assert result["latest_date"] == _ts("2024-03-01")


def test_independent_mapping_value_precedence() -> None:
    batch = [
        {"date": "2024-01-01", "value": 1, "valueArray": [2, 3]},
        {"date": "2024-01-02", "value": 4, "valueArray": None},
    ]
    result = build_persisted_metrics("k1", "multiAxisLine", batch)

    assert [row["value"] for row in result["points"]] == [[2, 3], [4, 0]]
    assert result["value_json"] == {"0": 4, "1": 0}
    assert result["latest_value"] == 4


def test_colors_are_carried_through() -> None:
    batch = [{"date": "2024-01-01", "value": 1, "color": "#ff0000"}, {"date": "2024-01-02", "value": 2}]
    result = build_persisted_metrics("k1", "line", batch)
    assert [row["color"] for row in result["points"]] == ["#ff0000", None]


def test_malformed_points_never_raise() -> None:
    result = build_persisted_metrics("k1", "line", ["junk", None, {"date": "2024-01-01", "value": "x"}])
    values = {row["date"]: row["value"] for row in result["points"]}
    assert values[_ts("2024-01-01")] == 0


def test_percent_string_persists_as_zero() -> None:
    result = build_persisted_metrics("k1", "line", [{"date": "2024-01-01", "value": "50%"}])
    assert result["latest_value"] == 0
    assert result["value_json"] == {"0": 0}


def test_scalar_array_aggregates() -> None:
    aggregates = compute_aggregates({"date": _ts("2024-01-01"), "value": [1, 2, 3]})
    assert aggregates["value_json"] == {"0": 1, "1": 2, "2": 3}
    assert aggregates["latest_value"] == 1


def test_labeled_aggregates_later_duplicate_labels_win() -> None:
    row = {
        "date": _ts("2024-01-01"),
        "value": [{"label": "A", "value": 1}, {"label": "B", "value": 2}, {"label": "A", "value": 5}],
    }
    aggregates = compute_aggregates(row)
    assert aggregates["value_json"] == {"A": 5, "B": 2}
    assert aggregates["latest_value"] == 1


def test_dedupe_keeps_first_position() -> None:
    rows = [
        {"date": _ts("2024-01-02"), "value": 1},
        {"date": _ts("2024-01-01"), "value": 2},
        {"date": _ts("2024-01-02"), "value": 3},
    ]
    assert dedupe_by_date(rows) == [
        {"date": _ts("2024-01-02"), "value": 3},
        {"date": _ts("2024-01-01"), "value": 2},
    ]


@pytest.mark.parametrize("chart_type", ["pie", "line", "multiAxisLine", None])
def test_at_most_one_row_per_date(chart_type) -> None:
    batch = [{"date": "2024-01-01", "value": i} for i in range(5)]
    result = build_persisted_metrics("k1", chart_type, batch)
    dates = [row["date"] for row in result["points"]]
    assert len(dates) == len(set(dates)) == 1
