"""
Configuration: chart-type registry, chart-settings fields, constants.

CHART_TYPE_REGISTRY maps each chart-type tag to its value class, whether
its data points carry labeled values, whether it needs per-point colours,
and the display labels used in validation messages.
"""

import re

# ---------------------------------------------------------------------------
# Chart-type classes
# ---------------------------------------------------------------------------
SINGLE = "single"
MULTI = "multi"
MULTI_AXIS = "multiAxisLine"

MULTI_AXIS_CHART_TYPE = "multiAxisLine"

# ---------------------------------------------------------------------------
# Chart-type registry
# ---------------------------------------------------------------------------
# chart_class: "single", "multi" or "multiAxisLine"
# uses_labeled_values: data points are category -> value pairs
# requires_color: every category needs a colour
# dimension_label / value_label: wording for validation messages
CHART_TYPE_REGISTRY: dict[str, dict] = {
    "line": {
        "chart_class": SINGLE,
        "uses_labeled_values": False,
        "requires_color": False,
        "dimension_label": "Date",
        "value_label": "Value",
    },
    "area": {
        "chart_class": SINGLE,
        "uses_labeled_values": False,
        "requires_color": False,
        "dimension_label": "Date",
        "value_label": "Value",
    },
    "scatter": {
        "chart_class": SINGLE,
        "uses_labeled_values": False,
        "requires_color": False,
        "dimension_label": "X Value",
        "value_label": "Y Value",
    },
    "heatmap": {
        "chart_class": SINGLE,
        "uses_labeled_values": True,
        "requires_color": False,
        "dimension_label": "Category",
        "value_label": "Value",
    },
    "bar": {
        "chart_class": MULTI,
        "uses_labeled_values": True,
        "requires_color": True,
        "dimension_label": "Category",
        "value_label": "Value",
    },
    "column": {
        "chart_class": MULTI,
        "uses_labeled_values": True,
        "requires_color": True,
        "dimension_label": "Category",
        "value_label": "Value",
    },
    "pie": {
        "chart_class": MULTI,
        "uses_labeled_values": True,
        "requires_color": True,
        "dimension_label": "Category",
        "value_label": "Value",
    },
    "donut": {
        "chart_class": MULTI,
        "uses_labeled_values": True,
        "requires_color": True,
        "dimension_label": "Category",
        "value_label": "Value",
    },
    "radar": {
        "chart_class": MULTI,
        "uses_labeled_values": True,
        "requires_color": False,
        "dimension_label": "Dimension",
        "value_label": "Score",
    },
    "radialBar": {
        "chart_class": MULTI,
        "uses_labeled_values": True,
        "requires_color": True,
        "dimension_label": "Category",
        "value_label": "Value",
    },
    "multiAxisLine": {
        "chart_class": MULTI_AXIS,
        "uses_labeled_values": False,
        "requires_color": False,
        "dimension_label": "Date",
        "value_label": "Primary Value",
        "secondary_value_label": "Secondary Value",
    },
    "sankey": {
        "chart_class": SINGLE,
        "uses_labeled_values": False,
        "requires_color": False,
        "dimension_label": "Node",
        "value_label": "Value",
    },
}

# Chart types whose whole batch collapses into one categorical row
MULTI_VALUE_CHART_TYPES = frozenset(
    name for name, entry in CHART_TYPE_REGISTRY.items() if entry["chart_class"] == MULTI
)

# ---------------------------------------------------------------------------
# Chart settings
# ---------------------------------------------------------------------------
# column: explicit KPI column (wins when set)
# json_keys: keys looked up in the embedded chart_settings blob, in order
# kind: "bool" fields accept 0/1 from the database
CHART_SETTING_FIELDS: dict[str, dict] = {
    "stroke_width": {"column": "stroke_width", "json_keys": ("strokeWidth",), "default": 2, "kind": "number"},
    "stroke_color": {"column": "stroke_color", "json_keys": ("strokeColor",), "default": "#5094af", "kind": "color"},
    "stroke_opacity": {"column": "stroke_opacity", "json_keys": ("strokeOpacity",), "default": 1.0, "kind": "number"},
    "fill_opacity": {"column": "fill_opacity", "json_keys": ("fillOpacity",), "default": 0.8, "kind": "number"},
    "show_legend": {"column": "show_legend", "json_keys": ("showLegend",), "default": True, "kind": "bool"},
    # showGridlines is the legacy spelling still found in older blobs
    "show_gridlines": {
        "column": "show_gridlines",
        "json_keys": ("showGridLines", "showGridlines"),
        "default": True,
        "kind": "bool",
    },
    "show_data_labels": {"column": "show_data_labels", "json_keys": ("showDataLabels",), "default": False, "kind": "bool"},
    "primary_label": {"column": "primary_label", "json_keys": ("primaryLabel",), "default": "Value 1", "kind": "text"},
    "secondary_label": {"column": "secondary_label", "json_keys": ("secondaryLabel",), "default": "Value 2", "kind": "text"},
    "primary_series_type": {
        "column": "primary_series_type",
        "json_keys": ("primarySeriesType",),
        "default": "line",
        "kind": "text",
    },
    "secondary_series_type": {
        "column": "secondary_series_type",
        "json_keys": ("secondarySeriesType",),
        "default": "line",
        "kind": "text",
    },
    "style_subtitle": {"column": "style_subtitle", "json_keys": ("styleSubtitle",), "default": False, "kind": "bool"},
    "sync_axis_scales": {"column": "sync_axis_scales", "json_keys": ("syncAxisScales",), "default": False, "kind": "bool"},
}

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------
# Years a four-digit "YYYY-MM-DD" key can represent
DATE_KEY_YEAR_RANGE = (1000, 9999)
LABEL_FALLBACK_TEMPLATE = "Value {n}"

# Separators accepted in free-text multi-value input ("North:10, South:20")
MULTI_VALUE_TOKEN_PATTERN = re.compile(r"[\s,;|]+")

DEFAULT_PALETTE = [
    "#5094af",
    "#36c9b8",
    "#dea821",
    "#ee7411",
    "#e0451f",
    "#8c6bb1",
]
