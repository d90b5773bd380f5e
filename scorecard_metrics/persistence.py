"""
Metric persistence: turn one update batch for a KPI into the rows that may
be written under the unique (kpi_id, date) constraint, plus the summary
fields denormalised onto the KPI record.

Rules
-----
- None means "leave history alone" and yields no rows and no aggregates.
- Multi-value chart types (bar, pie, radar, ...) collapse the whole batch
  into one row of labeled values dated at the first point's date.
- Every other chart type maps points independently.
- Duplicate dates are resolved by submission order: the last point wins.
- latest_value / value_json / latest_date describe the most recent row.
"""

import logging
from collections.abc import Mapping
from typing import Any

from .config import LABEL_FALLBACK_TEMPLATE
from .dates import date_key_to_timestamp, normalize_date_only
from .values import (
    is_multi_value_chart_type,
    normalize_value_for_chart_type,
    to_finite_number,
)

logger = logging.getLogger(__name__)


def _as_point(point: Any) -> Mapping:
    return point if isinstance(point, Mapping) else {}


def _clean_label(label: Any, idx: int) -> str:
    if isinstance(label, str) and label.strip():
        return label
    return LABEL_FALLBACK_TEMPLATE.format(n=idx + 1)


def _labeled_entry(label: str, value: Any, color: Any) -> dict:
    entry = {"label": label, "value": value}
    if color:
        entry["color"] = str(color)
    return entry


def collect_labeled_values(points: list) -> list[dict]:
    """Build the representative labeled values for a multi-value batch.

    The first point carrying a non-empty `labeledValues` list supplies the
    categories verbatim. Without one, every point becomes a category whose
    label is the point's raw `date` string.
    """
    for point in points:
        labeled = point.get("labeledValues")
        if isinstance(labeled, (list, tuple)) and labeled:
            entries = []
            for idx, item in enumerate(labeled):
                item = _as_point(item)
                value = to_finite_number(item.get("value"))
                entries.append(_labeled_entry(
                    _clean_label(item.get("label"), idx),
                    value if value is not None else 0,
                    item.get("color"),
                ))
            return entries

    entries = []
    for idx, point in enumerate(points):
        value_array = point.get("valueArray")
        raw_value = point.get("value")
        candidates = []
        if isinstance(value_array, (list, tuple)) and value_array:
            candidates.append(value_array[0])
        if isinstance(raw_value, (list, tuple)) and raw_value:
            candidates.append(raw_value[0])
        candidates.append(raw_value)

        value = 0
        for candidate in candidates:
            num = to_finite_number(candidate)
            if num is not None:
                value = num
                break

        entries.append(_labeled_entry(
            _clean_label(point.get("date"), idx),
            value,
            point.get("color"),
        ))
    return entries


def _first_present(point: Mapping, *keys: str) -> Any:
    for key in keys:
        if point.get(key) is not None:
            return point[key]
    return None


def _build_rows(kpi_id: str, chart_type: str | None, points: list) -> list[dict]:
    if is_multi_value_chart_type(chart_type):
        if not points:
            return []
        labeled_values = collect_labeled_values(points)
        date_key = normalize_date_only(points[0].get("date"))
        return [{
            "kpi_id": kpi_id,
            "date": date_key_to_timestamp(date_key),
            "value": normalize_value_for_chart_type(chart_type, labeled_values),
            "color": labeled_values[0].get("color") if labeled_values else None,
        }]

    rows = []
    for point in points:
        date_key = normalize_date_only(point.get("date"))
        raw = _first_present(point, "labeledValues", "valueArray", "value")
        color = point.get("color")
        rows.append({
            "kpi_id": kpi_id,
            "date": date_key_to_timestamp(date_key),
            "value": normalize_value_for_chart_type(chart_type, raw),
            "color": str(color) if color else None,
        })
    return rows


def dedupe_by_date(rows: list[dict]) -> list[dict]:
    """Keep one row per date; a later row replaces an earlier one in place."""
    by_date: dict = {}
    for row in rows:
        by_date[row["date"]] = row
    return list(by_date.values())


def compute_aggregates(row: dict) -> dict:
    """Return latest_value, value_json and latest_date for the latest row.

    Labeled values are keyed by label (later duplicates overwrite earlier
    ones), plain lists by string index, scalars under "0".
    """
    value = row["value"]
    aggregates: dict = {"latest_date": row["date"]}

    if isinstance(value, (list, tuple)):
        if value and isinstance(value[0], Mapping):
            value_json = {}
            for idx, item in enumerate(value):
                item = _as_point(item)
                label = item.get("label")
                number = item.get("value")
                key = label if isinstance(label, str) else str(idx)
                value_json[key] = number if to_finite_number(number) is not None else 0
            first = value[0].get("value") if value else None
            aggregates["value_json"] = value_json
            aggregates["latest_value"] = first if to_finite_number(first) is not None else None
        else:
            aggregates["value_json"] = {str(idx): item for idx, item in enumerate(value)}
            aggregates["latest_value"] = value[0] if value else None
    else:
        aggregates["value_json"] = {"0": value}
        aggregates["latest_value"] = value

    return aggregates


def build_persisted_metrics(
    kpi_id: str,
    chart_type: str | None,
    incoming: list | None,
) -> dict:
    """Normalise an update batch into persisted rows and KPI summary fields.

    Parameters
    ----------
    kpi_id : Owning KPI id, copied onto every row.
    chart_type : The KPI's chart-type tag; decides collapse and value shape.
    incoming : Loosely-typed points from the update payload, or None when the
               caller asked for history to be left untouched.

    Returns
    -------
    Dict with structure:
    {
        "points": [{"kpi_id": ..., "date": Timestamp, "value": ..., "color": ...}],
        "latest_value": ...,   # only when at least one row survives
        "value_json": {...},
        "latest_date": Timestamp,
    }
    """
    if incoming is None:
        return {"points": []}

    points = [_as_point(point) for point in incoming]
    rows = dedupe_by_date(_build_rows(kpi_id, chart_type, points))

    if not rows:
        logger.info("No metric rows built for KPI %s", kpi_id)
        return {"points": []}

    latest = max(rows, key=lambda row: row["date"])
    result = {"points": rows}
    result.update(compute_aggregates(latest))

    logger.info(
        "Built %d metric rows for KPI %s from %d incoming points",
        len(rows), kpi_id, len(points),
    )
    return result
