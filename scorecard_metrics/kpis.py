"""
KPI computation functions — pure functions with no side effects.

Provides trend calculation over a KPI's metric history and RAG
classification of that trend.
"""

import logging

import numpy as np
import pandas as pd

logger = logging.getLogger(__name__)


def compute_trend(history: pd.DataFrame) -> float | None:
    """Return latest minus previous value over the two most recent rows.

    Multi-value rows are compared by their summed `value`. Returns None
    when there are fewer than two rows or either value is not a number.
    """
    if history is None or len(history) < 2:
        return None

    ordered = history.sort_values("date")
    latest = ordered.iloc[-1]
    previous = ordered.iloc[-2]

    for row in (latest, previous):
        if not _is_number(row.get("value")):
            logger.debug("Trend unavailable: non-numeric value %r", row.get("value"))
            return None

    return float(latest["value"] - previous["value"])


def _is_number(value) -> bool:
    if isinstance(value, (bool, np.bool_)):
        return False
    return isinstance(value, (int, float, np.integer, np.floating)) and pd.notna(value)


def classify_trend(trend_value: float | None, reverse_trend: bool = False) -> str:
    """Return 'green', 'red', or 'grey' for a trend.

    Logic
    -----
    - no trend or a flat trend: grey
    - reverse_trend=False: rising is green, falling is red
    - reverse_trend=True:  falling is green, rising is red
    """
    if trend_value is None or pd.isna(trend_value) or trend_value == 0:
        return "grey"

    rising = trend_value > 0
    is_good = not rising if reverse_trend else rising
    return "green" if is_good else "red"
