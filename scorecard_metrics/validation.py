"""
Validation of chart data points before they are submitted.

This is a caller-side check for forms and import screens. The persistence
pipeline never calls it: it accepts and coerces whatever it is given.
"""

from collections.abc import Mapping

from .config import CHART_TYPE_REGISTRY, MULTI_AXIS_CHART_TYPE
from .values import to_finite_number


def _is_finite(value) -> bool:
    return to_finite_number(value) is not None and not isinstance(value, bool)


def _validate_labeled(idx: int, point: Mapping, labeled: list, definition: dict) -> list[str]:
    errors = []
    for lv_idx, entry in enumerate(labeled, start=1):
        entry = entry if isinstance(entry, Mapping) else {}
        label = entry.get("label")
        if not isinstance(label, str) or not label.strip():
            errors.append(f"Row {idx}, Value {lv_idx}: label is required.")
        if not _is_finite(entry.get("value")):
            errors.append(f"Row {idx}, Value {lv_idx}: numeric value is required.")
        if definition["requires_color"] and not entry.get("color"):
            errors.append(f"Row {idx}, Value {lv_idx}: color is required.")

    if (
        definition["requires_color"]
        and not point.get("color")
        and all(not (e.get("color") if isinstance(e, Mapping) else None) for e in labeled)
    ):
        errors.append(f"Row {idx}: set a color for this {definition['dimension_label']}.")
    return errors


def validate_visualization_data(
    visualization_type: str,
    chart_type: str | None,
    data_points: list,
) -> dict:
    """Check that data points are complete enough to draw `chart_type`.

    Returns
    -------
    {"is_valid": bool, "errors": [str, ...]} with 1-based row numbers.
    """
    errors: list[str] = []

    if visualization_type != "chart":
        return {"is_valid": True, "errors": errors}

    if not chart_type:
        errors.append("Select a chart type.")
        return {"is_valid": False, "errors": errors}

    if chart_type == "sankey":
        return {"is_valid": True, "errors": errors}

    definition = CHART_TYPE_REGISTRY.get(chart_type, CHART_TYPE_REGISTRY["line"])

    if not data_points:
        errors.append("Add at least one data point.")
        return {"is_valid": False, "errors": errors}

    for idx, point in enumerate(data_points, start=1):
        point = point if isinstance(point, Mapping) else {}

        label = point.get("date")
        if not isinstance(label, str) or not label.strip():
            errors.append(f"Row {idx}: {definition['dimension_label']} is required.")

        if chart_type == MULTI_AXIS_CHART_TYPE:
            value_array = point.get("valueArray")
            if isinstance(value_array, list):
                primary = value_array[0] if len(value_array) > 0 else None
                secondary = value_array[1] if len(value_array) > 1 else None
            else:
                primary, secondary = point.get("value"), None
            if not _is_finite(primary):
                errors.append(f"Row {idx}: primary {definition['value_label']} is required.")
            if not _is_finite(secondary):
                secondary_label = definition.get("secondary_value_label", "Secondary value")
                errors.append(f"Row {idx}: {secondary_label} is required.")
            continue

        if definition["uses_labeled_values"]:
            labeled = point.get("labeledValues")
            if isinstance(labeled, list) and labeled:
                errors.extend(_validate_labeled(idx, point, labeled, definition))
            else:
                if not _is_finite(point.get("value")):
                    errors.append(f"Row {idx}: numeric {definition['value_label']} is required.")
                if definition["requires_color"] and not point.get("color"):
                    errors.append(
                        f"Row {idx}: color is required for this {definition['dimension_label']}."
                    )
        elif not _is_finite(point.get("value")):
            errors.append(f"Row {idx}: numeric {definition['value_label']} is required.")

    return {"is_valid": not errors, "errors": errors}
