"""Small shared helpers for dates and row keys."""

from __future__ import annotations

import math
from datetime import date, datetime
from typing import Any

import pandas as pd


def parse_date(s: str) -> date:
    """Parse a date string in YYYY-MM-DD format.

    Args:
        s: Date string in ISO format (YYYY-MM-DD).

    Returns:
        Parsed date object.

    Raises:
        ValueError: If the date string is not in YYYY-MM-DD format.

    Examples:
        >>> parse_date("2024-06-01")
        datetime.date(2024, 6, 1)

    """
    return datetime.strptime(s, "%Y-%m-%d").date()


def to_date(value: Any) -> date:
    """Coerce a date-like value into a ``datetime.date``.

    Accepts ``date``, ``datetime`` (including ``pd.Timestamp``) and strings
    the backend returns, such as ``"2024-06-01"`` or
    ``"2024-06-01T10:30:00+00:00"``.

    Raises:
        ValueError: If the value is missing or cannot be parsed.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str) and value.strip():
        ts = pd.to_datetime(value.strip())
        return ts.date()
    raise ValueError(f"Cannot interpret {value!r} as a date")


def to_optional_date(value: Any) -> date | None:
    """Like ``to_date``, but missing or unparseable values map to ``None``.

    Used on backend rows, where one malformed date must not fail the run.
    """
    if isinstance(value, str):
        if not value.strip():
            return None
    elif value is None or pd.isna(value):
        return None
    if isinstance(value, (date, datetime)):
        return to_date(value)
    ts = pd.to_datetime(value.strip() if isinstance(value, str) else value, errors="coerce")
    if pd.isna(ts):
        return None
    return ts.date()


def as_key(value: Any) -> str | None:
    """Normalize an identifier read from a table into a string key.

    pandas turns integer columns with gaps into floats, so ``1001.0`` is
    mapped back to ``"1001"``. Missing values map to ``None``.

    Examples:
        >>> as_key(1001.0)
        '1001'
        >>> as_key(" T-01 ")
        'T-01'
        >>> as_key(float("nan")) is None
        True
    """
    if value is None:
        return None
    if isinstance(value, float):
        if math.isnan(value):
            return None
        if value.is_integer():
            return str(int(value))
    if value is pd.NA or value is pd.NaT:
        return None
    text = str(value).strip()
    return text or None
