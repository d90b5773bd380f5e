"""
Scorecard Metrics — KPI value normalisation and persistence core

Turns loosely-typed KPI updates (numbers, arrays, label-keyed maps,
delimited strings, labeled values) into canonical, storage-ready rows per
KPI per date, and projects stored values back into display values.

To plug in a real database:
    Implement storage.MetricStore against the metrics table (unique on
    kpi_id + date) and pass it to updates.apply_metric_update. Share one
    KpiLockRegistry between every writer of the same store.

To render a KPI tile:
    Call dashboard.get_kpi_view(store, kpi) to get a plain dict with the
    resolved chart settings, display value, metric history and trend.

To add a chart type:
    Add an entry to config.CHART_TYPE_REGISTRY with its chart_class
    ("single", "multi" or "multiAxisLine").
"""

from .accessors import (
    get_display_value,
    get_numeric_value,
    get_text_value,
    map_metric_value,
    value_to_chart_data,
)
from .dates import normalize_date_only
from .persistence import build_persisted_metrics
from .settings import resolve_chart_settings
from .validation import validate_visualization_data
from .values import chart_type_class, normalize_value_for_chart_type

__all__ = [
    "build_persisted_metrics",
    "chart_type_class",
    "get_display_value",
    "get_numeric_value",
    "get_text_value",
    "map_metric_value",
    "normalize_date_only",
    "normalize_value_for_chart_type",
    "resolve_chart_settings",
    "validate_visualization_data",
    "value_to_chart_data",
]
