"""
Chart settings resolution.

A KPI row carries display settings in two places: explicit columns
(stroke_width, show_legend, ...) and an embedded `chart_settings` JSON blob
written by older clients. Each field resolves independently:

    explicit column  >  JSON blob  >  default

Rows may come straight from a DataFrame, so NaN counts as "not set".
"""

import json
import logging
from collections.abc import Mapping
from typing import Any

import numpy as np
import pandas as pd

from .config import CHART_SETTING_FIELDS

logger = logging.getLogger(__name__)


def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, (list, tuple, dict)):
        return False
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def _as_bool(value: Any) -> Any:
    # MySQL tinyint(1) columns come back as 0/1
    if isinstance(value, (bool, np.bool_)):
        return bool(value)
    if isinstance(value, (int, float, np.integer, np.floating)):
        return bool(value)
    return value


def load_settings_blob(raw: Any) -> dict:
    """Return the embedded settings blob as a dict.

    Accepts a mapping or a JSON string. Anything else, including invalid
    JSON, yields an empty dict.
    """
    if _is_missing(raw):
        return {}
    if isinstance(raw, Mapping):
        return dict(raw)
    if isinstance(raw, (str, bytes)):
        try:
            parsed = json.loads(raw)
        except ValueError:
            logger.warning("Ignoring unparseable chart_settings blob: %r", raw)
            return {}
        return parsed if isinstance(parsed, dict) else {}
    return {}


def resolve_chart_settings(row: Mapping) -> dict:
    """Merge explicit columns, the JSON blob and defaults into one record.

    Parameters
    ----------
    row : KPI record (dict or pandas Series) with optional explicit columns
          and an optional `chart_settings` blob.

    Returns
    -------
    Dict keyed by every field in config.CHART_SETTING_FIELDS.
    """
    blob = load_settings_blob(row.get("chart_settings"))
    resolved = {}

    for field, rule in CHART_SETTING_FIELDS.items():
        value = row.get(rule["column"])
        if _is_missing(value):
            value = None
            for key in rule["json_keys"]:
                candidate = blob.get(key)
                if not _is_missing(candidate):
                    value = candidate
                    break
        if value is None:
            value = rule["default"]
        elif rule["kind"] == "bool":
            value = _as_bool(value)
        resolved[field] = value

    return resolved


def extract_chart_setting_columns(settings: Mapping | None) -> dict:
    """Map a client settings blob onto explicit column values.

    Only keys present in the blob are returned, so callers can merge the
    result without clobbering columns the client did not send.
    """
    if not settings:
        return {}

    columns = {}
    for rule in CHART_SETTING_FIELDS.values():
        # The legacy spelling matches the column name, so it is checked first
        for key in reversed(rule["json_keys"]):
            if not _is_missing(settings.get(key)):
                columns[rule["column"]] = settings[key]
                break
    return columns
