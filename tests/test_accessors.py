from __future__ import annotations

import pandas as pd

from scorecard_metrics.accessors import (
    create_multi_value,
    create_single_value,
    get_display_value,
    get_numeric_value,
    get_text_value,
    map_metric_value,
    value_to_chart_data,
)


def test_display_value_prefers_index_zero() -> None:
    assert get_display_value({"0": 42}) == "42"
    assert get_display_value({"1": 7, "0": 3.5}) == "3.5"


def test_display_value_integral_float_has_no_trailing_zero() -> None:
    assert get_display_value({"0": 42.0}) == "42"


def test_display_value_single_entry_and_summary() -> None:
    assert get_display_value({"North": 10}) == "10"
    assert get_display_value({"A": 1, "B": 2}) == "2 values"
    assert get_display_value({}) == ""


def test_numeric_value() -> None:
    assert get_numeric_value({"0": 0, "1": 5}) == 0
    assert get_numeric_value({"A": "12.5"}) == 12.5
    assert get_numeric_value({"A": "n/a"}) == 0
    assert get_numeric_value({}) == 0


def test_text_value() -> None:
    assert get_text_value({"0": "On track"}) == "On track"
    assert get_text_value({"A": 3}) == "3"
    assert get_text_value({}) == ""


def test_value_to_chart_data() -> None:
    assert value_to_chart_data({"North": 10, "South": "20.5", "East": "?"}) == [
        {"label": "North", "value": 10},
        {"label": "South", "value": 20.5},
        {"label": "East", "value": 0},
    ]


def test_create_values() -> None:
    assert create_single_value(5) == {"0": 5}
    source = {"A": 1}
    created = create_multi_value(source)
    assert created == source and created is not source


def test_map_metric_value_scalar() -> None:
    metric = map_metric_value("line", pd.Timestamp("2024-01-01", tz="UTC"), 5, "")
    assert metric == {"date": "2024-01-01", "value": 5, "color": None}


def test_map_metric_value_sums_arrays() -> None:
    metric = map_metric_value("multiAxisLine", "2024-01-02", [3, 4], "#fff")
    assert metric["value"] == 7
    assert metric["value_array"] == [3, 4]
    assert metric["color"] == "#fff"
    assert "labeled_values" not in metric


def test_map_metric_value_labeled() -> None:
    labeled = [{"label": "A", "value": 1}, {"label": "B", "value": 2}]
    metric = map_metric_value("pie", "2024-01-03", labeled)
    assert metric["value"] == 3
    assert metric["value_array"] == [1, 2]
    assert metric["labeled_values"] == labeled
