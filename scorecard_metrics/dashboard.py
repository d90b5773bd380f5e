"""
Dashboard-ready output functions.

These are the primary entry points for a front end. Each function returns
plain dicts or DataFrames suitable for rendering number tiles, charts and
history tables.
"""

import logging
from collections.abc import Mapping

import pandas as pd

from .accessors import get_display_value, map_metric_value
from .kpis import classify_trend, compute_trend
from .settings import resolve_chart_settings
from .storage import MetricStore
from .values import chart_type_class

logger = logging.getLogger(__name__)

HISTORY_COLUMNS = ["date", "value", "value_array", "labeled_values", "color"]


def get_metric_history(
    store: MetricStore,
    kpi_id: str,
    chart_type: str | None,
) -> pd.DataFrame:
    """Metric history for one KPI, one row per stored date.

    Returns
    -------
    DataFrame with columns:
        date, value, value_array, labeled_values, color
    sorted by date. Array values are summed into `value`.
    """
    stored = store.fetch_metrics(kpi_id)

    if stored.empty:
        logger.warning("No metric history for KPI '%s'", kpi_id)
        return pd.DataFrame(columns=HISTORY_COLUMNS)

    rows = []
    for _, row in stored.iterrows():
        color = row.get("color")
        metric = map_metric_value(
            chart_type,
            row["date"],
            row["value"],
            color if isinstance(color, str) else None,
        )
        rows.append({col: metric.get(col) for col in HISTORY_COLUMNS})

    history = pd.DataFrame(rows, columns=HISTORY_COLUMNS)
    return history.sort_values("date").reset_index(drop=True)


def get_kpi_view(store: MetricStore, kpi: Mapping) -> dict:
    """Single entry point a front end would call to render one KPI tile.

    Parameters
    ----------
    store : MetricStore holding the KPI's history and summary fields.
    kpi : KPI record with at least `id`; optionally `chart_type`,
          `reverse_trend`, explicit chart-setting columns and a
          `chart_settings` blob.

    Returns
    -------
    Dict with structure:
    {
        "id": "...",
        "chart_type": "pie",
        "chart_class": "multi",
        "chart_settings": {...},
        "value_json": {"North": 10, "South": 20},
        "display_value": "2 values",
        "latest_date": Timestamp | None,
        "metrics": [{"date": "2024-01-01", "value": 30, ...}],
        "trend_value": float | None,
        "trend_rag": "green" | "red" | "grey",
    }
    """
    kpi_id = kpi["id"]
    chart_type = kpi.get("chart_type")
    summary = store.get_kpi_summary(kpi_id)

    history = get_metric_history(store, kpi_id, chart_type)
    trend = compute_trend(history)
    value_json = summary.get("value_json") or {}

    return {
        "id": kpi_id,
        "chart_type": chart_type,
        "chart_class": chart_type_class(chart_type),
        "chart_settings": resolve_chart_settings(kpi),
        "value_json": value_json,
        "display_value": get_display_value(value_json),
        "latest_date": summary.get("latest_date"),
        "metrics": history.to_dict(orient="records"),
        "trend_value": trend,
        "trend_rag": classify_trend(trend, bool(kpi.get("reverse_trend", False))),
    }
