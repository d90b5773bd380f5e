"""
Read-side helpers for stored KPI values.

A KPI's current value is a dict keyed by string index ("0", "1", ...) for
numbers and plain arrays, or by category label for labeled values.
"""

from collections.abc import Mapping
from typing import Any

from .dates import normalize_date_only
from .values import is_labeled_value_list, normalize_value_for_chart_type, to_finite_number


def _format_scalar(value: Any) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _primary(value: Mapping) -> Any:
    if "0" in value:
        return value["0"]
    for item in value.values():
        return item
    return None


def get_display_value(value: Mapping) -> str:
    """Display string: the "0" entry, the only entry, or a count summary."""
    if "0" in value:
        return _format_scalar(value["0"])
    values = list(value.values())
    if not values:
        return ""
    if len(values) == 1:
        return _format_scalar(values[0])
    return f"{len(values)} values"


def get_numeric_value(value: Mapping) -> int | float:
    num = to_finite_number(_primary(value))
    return num if num is not None else 0


def get_text_value(value: Mapping) -> str:
    primary = _primary(value)
    return "" if primary is None else _format_scalar(primary)


def value_to_chart_data(value: Mapping) -> list[dict]:
    """Project every entry into {"label", "value"} pairs for chart series."""
    data = []
    for label, raw in value.items():
        num = to_finite_number(raw)
        data.append({"label": str(label), "value": num if num is not None else 0})
    return data


def create_single_value(value: int | float | str) -> dict:
    return {"0": value}


def create_multi_value(data: Mapping) -> dict:
    return dict(data)


def map_metric_value(
    chart_type: str | None,
    raw_date: Any,
    raw_value: Any,
    color: str | None = None,
) -> dict:
    """Re-hydrate a stored metric row for display.

    Array values are summed into `value`; the elements are kept in
    `value_array`, and labeled lists are also returned as `labeled_values`.
    """
    normalized = normalize_value_for_chart_type(chart_type, raw_value)
    metric = {
        "date": normalize_date_only(raw_date),
        "color": color or None,
    }

    if is_labeled_value_list(normalized):
        numbers = [to_finite_number(item.get("value")) or 0 for item in normalized]
        metric["value"] = sum(numbers)
        metric["value_array"] = numbers
        metric["labeled_values"] = list(normalized)
    elif isinstance(normalized, list):
        metric["value"] = sum(normalized)
        metric["value_array"] = list(normalized)
    else:
        metric["value"] = normalized

    return metric
