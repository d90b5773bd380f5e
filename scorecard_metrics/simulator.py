"""
Simulated update payloads for the scorecard metrics pipeline.

Generates realistic client-style batches for each chart-type class,
including the loosely-typed shapes real clients send (numeric strings,
category names in the date field, legacy dataPoints bodies).
All values are synthetic.
"""

import numpy as np
import pandas as pd

from .config import DEFAULT_PALETTE, MULTI, MULTI_AXIS
from .values import chart_type_class

# Seed for reproducibility
_RNG = np.random.default_rng(42)

# ---------------------------------------------------------------------------
# Typical KPI parameters
# ---------------------------------------------------------------------------
_SERIES_PARAMS = {
    "base": 1_250,
    "std": 60,
    "drift": 1.01,
    "secondary_ratio": 0.35,
}

_CATEGORIES = [
    ("North", 420),
    ("South", 310),
    ("East", 275),
    ("West", 190),
]


def generate_history(
    chart_type: str | None = "line",
    start_date: str = "2026-01-01",
    n_days: int = 14,
) -> list[dict]:
    """Generate a dated history batch for single and multiAxisLine charts.

    Every third point sends its value as a string, the way form inputs do.
    """
    dates = pd.date_range(start_date, periods=n_days, freq="D")
    chart_class = chart_type_class(chart_type)
    points = []

    for i, date in enumerate(dates):
        primary = _SERIES_PARAMS["base"] * (_SERIES_PARAMS["drift"] ** i)
        primary = round(primary + _RNG.normal(0, _SERIES_PARAMS["std"]), 1)
        point: dict = {"date": date.strftime("%Y-%m-%d")}

        if chart_class == MULTI_AXIS:
            secondary = round(primary * _SERIES_PARAMS["secondary_ratio"] + _RNG.normal(0, 5), 1)
            point["valueArray"] = [primary, secondary]
        elif i % 3 == 2:
            point["value"] = str(primary)
        else:
            point["value"] = primary

        points.append(point)

    return points


def generate_category_batch(
    date: str = "2026-01-14",
    labeled: bool = True,
) -> list[dict]:
    """Generate a categorical batch for multi-value charts.

    With labeled=True a single point carries `labeledValues`; otherwise each
    category arrives as its own point with the category name in `date`,
    as older clients send it.
    """
    entries = []
    for idx, (label, base) in enumerate(_CATEGORIES):
        value = round(base + _RNG.normal(0, base * 0.05), 1)
        entries.append({
            "label": label,
            "value": value,
            "color": DEFAULT_PALETTE[idx % len(DEFAULT_PALETTE)],
        })

    if labeled:
        return [{"date": date, "labeledValues": entries}]

    return [
        {"date": e["label"], "value": e["value"], "color": e["color"]}
        for e in entries
    ]


def generate_update_payload(
    chart_type: str | None,
    legacy_key: bool = False,
) -> dict:
    """Generate a full update body for a KPI of the given chart type."""
    if chart_type_class(chart_type) == MULTI:
        batch = generate_category_batch()
    else:
        batch = generate_history(chart_type)

    key = "dataPoints" if legacy_key else "metrics"
    return {"chartType": chart_type, key: batch}
