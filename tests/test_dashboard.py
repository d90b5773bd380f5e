from __future__ import annotations

import pandas as pd
import pytest

from scorecard_metrics.dashboard import HISTORY_COLUMNS, get_kpi_view, get_metric_history
from scorecard_metrics.updates import apply_metric_update


def test_history_is_sorted_and_mapped(store, locks) -> None:
    apply_metric_update(
        store, "axis", "multiAxisLine",
        [
            {"date": "2024-01-03", "valueArray": [5, 1]},
            {"date": "2024-01-01", "valueArray": [2, 2], "color": "#123456"},
        ],
        locks=locks,
    )
    history = get_metric_history(store, "axis", "multiAxisLine")

    assert list(history.columns) == HISTORY_COLUMNS
    assert history["date"].tolist() == ["2024-01-01", "2024-01-03"]
    assert history["value"].tolist() == [4, 6]
    assert history["value_array"].tolist() == [[2, 2], [5, 1]]
    assert history["color"].tolist() == ["#123456", None]


def test_history_for_unknown_kpi_is_empty(store) -> None:
    history = get_metric_history(store, "missing", "line")
    assert history.empty
    assert list(history.columns) == HISTORY_COLUMNS


def test_kpi_view_for_line_chart(store, locks) -> None:
    apply_metric_update(
        store, "rev", "line",
        [{"date": "2024-01-01", "value": 100}, {"date": "2024-01-02", "value": 90}],
        locks=locks,
    )
    kpi = {"id": "rev", "chart_type": "line", "show_legend": 0, "reverse_trend": True}
    view = get_kpi_view(store, kpi)

    assert view["chart_class"] == "single"
    assert view["value_json"] == {"0": 90}
    assert view["display_value"] == "90"
    assert view["latest_date"] == pd.Timestamp("2024-01-02", tz="UTC")
    assert view["trend_value"] == pytest.approx(-10.0)
    assert view["trend_rag"] == "green"
    assert view["chart_settings"]["show_legend"] is False
    assert [m["date"] for m in view["metrics"]] == ["2024-01-01", "2024-01-02"]


def test_kpi_view_for_pie_chart(store, locks, pie_batch) -> None:
    apply_metric_update(store, "mix", "pie", pie_batch, locks=locks)
    view = get_kpi_view(store, {"id": "mix", "chart_type": "pie"})

    assert view["chart_class"] == "multi"
    assert view["display_value"] == "2 values"
    assert view["trend_value"] is None
    assert view["trend_rag"] == "grey"
    assert view["metrics"][0]["labeled_values"] == [
        {"label": "A", "value": 1},
        {"label": "B", "value": 2},
    ]


def test_kpi_view_without_history(store) -> None:
    view = get_kpi_view(store, {"id": "new"})
    assert view["chart_type"] is None
    assert view["display_value"] == ""
    assert view["metrics"] == []
    assert view["latest_date"] is None
