"""
Date normalisation: collapse any date-like input to a UTC calendar-day key.
"""

import datetime as dt
import logging
from typing import Any

import pandas as pd

from .config import DATE_KEY_YEAR_RANGE

logger = logging.getLogger(__name__)


def _date_key(day: dt.date) -> str | None:
    """'YYYY-MM-DD' for `day`, or None when the year has no four-digit form."""
    low, high = DATE_KEY_YEAR_RANGE
    if not low <= day.year <= high:
        return None
    return day.isoformat()


def _today_key() -> str:
    return pd.Timestamp.now(tz="UTC").date().isoformat()


def _to_utc(ts: pd.Timestamp) -> pd.Timestamp:
    # Naive timestamps are taken to be UTC already
    if ts.tzinfo is None:
        return ts.tz_localize("UTC")
    return ts.tz_convert("UTC")


def normalize_date_only(value: Any = None) -> str:
    """Return the UTC calendar date of `value` as 'YYYY-MM-DD'.

    datetime / Timestamp inputs are converted to UTC first; date inputs keep
    their calendar day. Non-empty strings are parsed with pandas. Anything
    missing, unparseable or outside years 1000-9999 resolves to today's UTC
    date, so the function never raises and is idempotent on its own output.
    """
    if isinstance(value, dt.date) and not isinstance(value, dt.datetime):
        return _date_key(value) or _today_key()

    if isinstance(value, str):
        value = value.strip()
        if not value:
            return _today_key()
    elif not isinstance(value, dt.datetime):
        return _today_key()

    try:
        ts = pd.Timestamp(value)
        if pd.isna(ts):
            return _today_key()
        key = _date_key(_to_utc(ts).date())
    except (ValueError, TypeError, OverflowError):
        key = None

    if key is None:
        logger.warning("Could not parse date value %r, defaulting to today", value)
        return _today_key()
    return key


def date_key_to_timestamp(date_key: str) -> pd.Timestamp:
    """Midnight UTC timestamp for a 'YYYY-MM-DD' key."""
    return pd.Timestamp(f"{date_key}T00:00:00", tz="UTC")
