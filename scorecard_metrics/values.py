"""
Value normalisation: classify a chart type and coerce loosely-typed
client values into the canonical shape for that class.

Canonical shapes
----------------
- single         -> scalar (int or float)
- multi          -> list of scalars, or list of labeled values
                    ({"label": str, "value": number, "color"?: str})
- multiAxisLine  -> [primary, secondary]

All shape-sniffing of raw input lives in this module. Coercion never
raises: anything that is not a finite number is treated as absent.
"""

import logging
import math
from collections.abc import Mapping
from typing import Any

import numpy as np

from .config import (
    CHART_TYPE_REGISTRY,
    MULTI,
    MULTI_AXIS,
    MULTI_VALUE_CHART_TYPES,
    MULTI_VALUE_TOKEN_PATTERN,
    SINGLE,
)

logger = logging.getLogger(__name__)

Scalar = int | float


def chart_type_class(chart_type: str | None) -> str:
    """Return 'single', 'multi' or 'multiAxisLine' for a chart-type tag.

    Unknown and missing tags are 'single'.
    """
    if not chart_type:
        return SINGLE
    entry = CHART_TYPE_REGISTRY.get(chart_type)
    if entry is None:
        return SINGLE
    return entry["chart_class"]


def is_multi_value_chart_type(chart_type: str | None) -> bool:
    return chart_type in MULTI_VALUE_CHART_TYPES


def to_finite_number(value: Any) -> Scalar | None:
    """Coerce a value to a finite number, returning None when that fails.

    Booleans count as 0/1, integers stay integers, strings are stripped and
    must parse as a plain number. NaN and infinities are rejected.
    """
    if value is None:
        return None
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, np.generic):
        value = value.item()
        if isinstance(value, bool):
            return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        value = value.strip()
        if not value or value.startswith("="):
            return None
    try:
        num = float(value)
    except (ValueError, TypeError, OverflowError):
        return None
    if not math.isfinite(num):
        return None
    return num


def parse_multi_value_string(text: str) -> list[Scalar]:
    """Extract numbers from free text such as 'North:10, South:20'.

    Tokens are split on whitespace, commas, semicolons and pipes. For a
    'label:number' token only the part after the first colon counts.
    Tokens that are not numbers are dropped; order is preserved.
    """
    numbers = []
    for token in MULTI_VALUE_TOKEN_PATTERN.split(text):
        token = token.strip()
        if not token:
            continue
        candidate = token.split(":")[1] if ":" in token else token
        num = to_finite_number(candidate)
        if num is not None:
            numbers.append(num)
    return numbers


def is_labeled_value(item: Any) -> bool:
    return (
        isinstance(item, Mapping)
        and isinstance(item.get("label"), str)
        and isinstance(item.get("value"), (int, float, np.number))
        and not isinstance(item.get("value"), bool)
    )


def is_labeled_value_list(value: Any) -> bool:
    """True when `value` is a non-empty list whose first entry is a labeled value."""
    return isinstance(value, (list, tuple)) and len(value) > 0 and is_labeled_value(value[0])


def _finite_list(items) -> list[Scalar]:
    numbers = []
    for item in items:
        num = to_finite_number(item)
        if num is None:
            logger.debug("Dropping non-numeric multi-value entry %r", item)
            continue
        numbers.append(num)
    return numbers


def _first_finite(*candidates) -> Scalar:
    for candidate in candidates:
        num = to_finite_number(candidate)
        if num is not None:
            return num
    return 0


def _normalize_multi_axis(raw: Any) -> list[Scalar]:
    if isinstance(raw, (list, tuple)):
        primary = raw[0] if len(raw) > 0 else None
        secondary = raw[1] if len(raw) > 1 else None
        return [_first_finite(primary), _first_finite(secondary)]

    if isinstance(raw, Mapping):
        ordered = list(raw.values())
        primary = _first_finite(
            raw.get("a"),
            raw.get("primary"),
            raw.get("0", raw.get(0)),
            ordered[0] if len(ordered) > 0 else None,
        )
        secondary = _first_finite(
            raw.get("b"),
            raw.get("secondary"),
            raw.get("1", raw.get(1)),
            ordered[1] if len(ordered) > 1 else None,
        )
        return [primary, secondary]

    return [_first_finite(raw), 0]


def _normalize_multi(raw: Any) -> list:
    if is_labeled_value_list(raw):
        # Category identity is kept exactly as supplied
        return list(raw)

    if isinstance(raw, (list, tuple)):
        return _finite_list(raw) or [0]

    if isinstance(raw, Mapping):
        return _finite_list(raw.values()) or [0]

    if isinstance(raw, str):
        numbers = parse_multi_value_string(raw)
        # A bare numeric string contributes once as a token and once whole
        whole = to_finite_number(raw)
        if whole is not None:
            numbers.append(whole)
        return numbers or [0]

    return [_first_finite(raw)]


def normalize_value_for_chart_type(chart_type: str | None, raw: Any):
    """Coerce `raw` into the canonical value for `chart_type`.

    Parameters
    ----------
    chart_type : Chart-type tag (e.g. "line", "pie", "multiAxisLine") or None.
    raw : Whatever the client sent: scalar, list, mapping, delimited string
          or a list of labeled values.

    Returns
    -------
    A scalar for single-class charts, a two-element list for multiAxisLine,
    otherwise a list of scalars or the untouched list of labeled values.
    Failed coercions fall back to 0 (or [0] for an empty multi value).
    """
    chart_class = chart_type_class(chart_type)

    if chart_class == MULTI_AXIS:
        return _normalize_multi_axis(raw)

    if chart_class == MULTI:
        return _normalize_multi(raw)

    if isinstance(raw, (list, tuple)):
        return _first_finite(raw[0] if raw else None)
    return _first_finite(raw)
