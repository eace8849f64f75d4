"""Data-quality checks on the raw back-office tables.

Each ``check_*`` function takes one or more raw frames (backend column
names) and returns a list of ``QAResult``. The aggregation itself tolerates
every condition reported here; the checks make the degradations visible.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import pandas as pd

from sales_core.utils import as_key

logger = logging.getLogger(__name__)

ERROR = "ERROR"
WARN = "WARN"


@dataclass
class QAResult:
    """Represents a single QA check result.

    Attributes:
        level: Severity level, either "ERROR" or "WARN".
        message: Human-readable message describing the issue.

    Examples:
        >>> result = QAResult("ERROR", "Found 2 duplicate payments")
        >>> result.level
        'ERROR'
    """

    level: str  # "ERROR" or "WARN"
    message: str


def _keys(series: pd.Series) -> pd.Series:
    return series.map(as_key)


def _sample(values: pd.Series, n: int = 5) -> str:
    shown = [str(v) for v in values.drop_duplicates().head(n)]
    return ", ".join(shown)


def check_quantities(lines: pd.DataFrame) -> list[QAResult]:
    """Flag order lines whose quantity is zero, negative or not numeric.

    Such lines pass through aggregation unchanged and yield zero or
    negative subtotals.

    Examples:
        >>> df = pd.DataFrame({"transno": ["T1", "T1"], "prodcode": ["A", "B"], "quantity": [2, -1]})
        >>> [r.level for r in check_quantities(df)]
        ['WARN']
    """
    out: list[QAResult] = []
    qty = pd.to_numeric(lines["quantity"], errors="coerce")
    bad = lines[qty.isna() | (qty <= 0)]
    if not bad.empty:
        out.append(
            QAResult(
                WARN,
                f"Found {len(bad)} order line(s) with non-positive or missing quantity "
                f"(transno: {_sample(_keys(bad['transno']))}).",
            )
        )
    return out


def check_duplicate_price_dates(prices: pd.DataFrame) -> list[QAResult]:
    """Flag products with more than one price on the same effective date.

    The price row appearing later in the input wins.
    """
    out: list[QAResult] = []
    if prices.empty:
        return out
    df = pd.DataFrame(
        {
            "prodcode": _keys(prices["prodcode"]),
            "effdate": pd.to_datetime(prices["effdate"], errors="coerce").dt.normalize(),
        }
    ).dropna()
    dup_mask = df.duplicated(subset=["prodcode", "effdate"], keep=False)
    if dup_mask.any():
        dups = df[dup_mask]
        pairs = dups.drop_duplicates()
        out.append(
            QAResult(
                WARN,
                f"Found {len(pairs)} duplicate (prodcode, effdate) price date(s) "
                f"(prodcode: {_sample(pairs['prodcode'])}); the later row is used.",
            )
        )
    return out


def check_orphan_lines(sales: pd.DataFrame, lines: pd.DataFrame) -> list[QAResult]:
    """Flag order lines whose transaction number matches no sale."""
    out: list[QAResult] = []
    known = set(_keys(sales["transno"]).dropna())
    line_keys = _keys(lines["transno"])
    orphans = line_keys[~line_keys.isin(known)]
    if not orphans.empty:
        out.append(
            QAResult(
                WARN,
                f"Found {len(orphans)} order line(s) for unknown transactions "
                f"(transno: {_sample(orphans)}).",
            )
        )
    return out


def check_orphan_payments(sales: pd.DataFrame, payments: pd.DataFrame) -> list[QAResult]:
    """Flag payments whose transaction number matches no sale."""
    out: list[QAResult] = []
    known = set(_keys(sales["transno"]).dropna())
    payment_keys = _keys(payments["transno"])
    orphans = payment_keys[~payment_keys.isin(known)]
    if not orphans.empty:
        out.append(
            QAResult(
                WARN,
                f"Found {len(orphans)} payment(s) for unknown transactions "
                f"(transno: {_sample(orphans)}).",
            )
        )
    return out


def check_duplicate_payments(payments: pd.DataFrame) -> list[QAResult]:
    """Flag transactions with more than one payment row.

    Only the first payment of a transaction is used for its status.

    Examples:
        >>> df = pd.DataFrame({"transno": ["T1", "T1", "T2"], "amount": [5.0, 5.0, 3.0]})
        >>> [r.level for r in check_duplicate_payments(df)]
        ['ERROR']
    """
    out: list[QAResult] = []
    keys = _keys(payments["transno"]).dropna()
    dup = keys[keys.duplicated(keep=False)]
    if not dup.empty:
        out.append(
            QAResult(
                ERROR,
                f"Found {dup.nunique()} transaction(s) with more than one payment "
                f"(transno: {_sample(dup)}).",
            )
        )
    return out
