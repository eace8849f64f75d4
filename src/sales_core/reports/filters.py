"""List filters of the report pages: search, status filter and top-N."""

from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from sales_core.sales.status import SALE_STATUSES
from sales_core.types import AggregatedSale, EntityRollup
from sales_core.utils import to_date

ALL = "all"

SORT_KEYS = {
    "units": lambda r: r.total_units,
    "revenue": lambda r: r.total_revenue,
    "sales": lambda r: r.sales_count,
}


def _matches(term: str, *fields: object) -> bool:
    return any(term in str(f).lower() for f in fields if f is not None)


def search_sales(sales: Sequence[AggregatedSale], term: Optional[str]) -> list[AggregatedSale]:
    """Sales whose number, customer, employee or date contains ``term``.

    Matching is case-insensitive; a blank term keeps every sale.
    """
    term = (term or "").strip().lower()
    if not term:
        return list(sales)
    return [
        s
        for s in sales
        if _matches(term, s.id, s.customer_name, s.employee_name, s.order_date.isoformat())
    ]


def filter_by_status(sales: Sequence[AggregatedSale], status: Optional[str]) -> list[AggregatedSale]:
    """Sales with the given status; ``"all"`` or None keeps every sale.

    Raises:
        ValueError: If status is not a known sale status.
    """
    if status is None or status.lower() == ALL:
        return list(sales)
    status = status.lower()
    if status not in SALE_STATUSES:
        raise ValueError(
            f"Invalid status '{status}'. Must be one of {ALL}, {', '.join(SALE_STATUSES)}."
        )
    return [s for s in sales if s.status == status]


def filter_by_date_range(
    sales: Sequence[AggregatedSale],
    start_date: Optional[object] = None,
    end_date: Optional[object] = None,
) -> list[AggregatedSale]:
    """Sales dated within [start_date, end_date]; either bound may be None."""
    start: Optional[date] = to_date(start_date) if start_date else None
    end: Optional[date] = to_date(end_date) if end_date else None
    return [
        s
        for s in sales
        if (start is None or s.order_date >= start) and (end is None or s.order_date <= end)
    ]


def search_rollups(rollups: Sequence[EntityRollup], term: Optional[str]) -> list[EntityRollup]:
    """Rollups whose key or label contains ``term`` (case-insensitive)."""
    term = (term or "").strip().lower()
    if not term:
        return list(rollups)
    return [r for r in rollups if _matches(term, r.key, r.label)]


def top_n(
    rollups: Sequence[EntityRollup],
    by: str = "units",
    limit: Optional[int] = None,
) -> list[EntityRollup]:
    """The first ``limit`` rollups ordered by ``by``, descending.

    Ties keep their input order. The rollups keep the rank assigned at
    aggregation time.

    Args:
        rollups: Product or employee rollups.
        by: One of "units", "revenue" or "sales".
        limit: Maximum number of rollups; None or <= 0 keeps all.

    Raises:
        ValueError: If ``by`` is not a known sort key.
    """
    if by not in SORT_KEYS:
        raise ValueError(f"Invalid sort key '{by}'. Must be one of {', '.join(SORT_KEYS)}.")
    ordered = sorted(rollups, key=SORT_KEYS[by], reverse=True)
    if limit is None or limit <= 0:
        return ordered
    return ordered[:limit]
