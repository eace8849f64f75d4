"""Sales marts: DataFrame views over aggregated sales and rollups.

These tables back the list views and reports of the back office:

- **sales_frame**: one row per sale (transaction list).
- **lines_frame**: one row per priced line.
- **rollup_frame**: one row per product or employee rollup.
- **monthly_summary**: one row per calendar month with sales count and revenue.
- **overview_metrics** / **status_distribution**: dashboard figures.
"""

from __future__ import annotations

import logging
from typing import Any, Sequence

import numpy as np
import pandas as pd

from sales_core.sales.status import COMPLETED, PENDING
from sales_core.types import AggregatedSale, EntityRollup

logger = logging.getLogger(__name__)

SALES_FRAME_COLUMNS = [
    "transno",
    "order_date",
    "customer_ref",
    "customer",
    "employee_ref",
    "employee",
    "line_count",
    "total_units",
    "total_amount",
    "paid_amount",
    "status",
]

LINES_FRAME_COLUMNS = [
    "transno",
    "line_no",
    "product_code",
    "description",
    "quantity",
    "unit_price",
    "subtotal",
]

ROLLUP_FRAME_COLUMNS = [
    "rank",
    "key",
    "label",
    "total_units",
    "total_revenue",
    "sales_count",
    "unit",
    "unit_price",
    "hire_date",
]

MONTHLY_COLUMNS = ["month", "month_start", "sales", "revenue"]


def sales_frame(sales: Sequence[AggregatedSale]) -> pd.DataFrame:
    """One row per sale, in the order of ``sales``."""
    rows = [
        {
            "transno": s.id,
            "order_date": s.order_date,
            "customer_ref": s.customer_ref,
            "customer": s.customer_name,
            "employee_ref": s.employee_ref,
            "employee": s.employee_name,
            "line_count": len(s.lines),
            "total_units": s.total_units,
            "total_amount": s.total_amount,
            "paid_amount": s.paid_amount,
            "status": s.status,
        }
        for s in sales
    ]
    if not rows:
        return pd.DataFrame(columns=SALES_FRAME_COLUMNS)
    return pd.DataFrame(rows, columns=SALES_FRAME_COLUMNS)


def lines_frame(sales: Sequence[AggregatedSale]) -> pd.DataFrame:
    """One row per priced line; ``line_no`` is 1-based within its sale."""
    rows = [
        {
            "transno": s.id,
            "line_no": i,
            "product_code": line.product_code,
            "description": line.description,
            "quantity": line.quantity,
            "unit_price": line.unit_price,
            "subtotal": line.subtotal,
        }
        for s in sales
        for i, line in enumerate(s.lines, start=1)
    ]
    if not rows:
        return pd.DataFrame(columns=LINES_FRAME_COLUMNS)
    return pd.DataFrame(rows, columns=LINES_FRAME_COLUMNS)


def rollup_frame(rollups: Sequence[EntityRollup]) -> pd.DataFrame:
    """One row per rollup, in rank order as given."""
    rows = [
        {
            "rank": r.rank,
            "key": r.key,
            "label": r.label,
            "total_units": r.total_units,
            "total_revenue": r.total_revenue,
            "sales_count": r.sales_count,
            "unit": r.unit,
            "unit_price": r.unit_price,
            "hire_date": r.hire_date,
        }
        for r in rollups
    ]
    if not rows:
        return pd.DataFrame(columns=ROLLUP_FRAME_COLUMNS)
    return pd.DataFrame(rows, columns=ROLLUP_FRAME_COLUMNS)


def monthly_summary(
    sales: Sequence[AggregatedSale],
    fill_missing: bool = True,
) -> pd.DataFrame:
    """Sales count and revenue per calendar month.

    Args:
        sales: Aggregated sales.
        fill_missing: If True, months between the first and last sale
            without any sale appear with zero sales and revenue.

    Returns:
        DataFrame with columns: month ("Jan 2024"), month_start, sales,
        revenue; sorted chronologically.
    """
    df = sales_frame(sales)
    if df.empty:
        return pd.DataFrame(columns=MONTHLY_COLUMNS)

    df["period"] = pd.to_datetime(df["order_date"]).dt.to_period("M")
    grouped = df.groupby("period", sort=True).agg(
        sales=("transno", "count"),
        revenue=("total_amount", "sum"),
    )
    if fill_missing:
        full_range = pd.period_range(grouped.index.min(), grouped.index.max(), freq="M")
        grouped = grouped.reindex(full_range, fill_value=0)
        grouped.index.name = "period"

    grouped = grouped.reset_index()
    grouped["month"] = grouped["period"].dt.strftime("%b %Y")
    grouped["month_start"] = grouped["period"].dt.start_time
    grouped["revenue"] = grouped["revenue"].astype(float)
    return grouped[MONTHLY_COLUMNS]


def sales_growth(monthly: pd.DataFrame) -> float | None:
    """Revenue growth of the last month over the previous one, in percent.

    Returns None when there are fewer than two months or the previous month
    had no revenue. The result is rounded to one decimal.
    """
    if len(monthly) < 2:
        return None
    last = float(monthly["revenue"].iloc[-1])
    previous = float(monthly["revenue"].iloc[-2])
    if previous <= 0:
        return None
    return round((last - previous) / previous * 100, 1)


def overview_metrics(sales: Sequence[AggregatedSale]) -> dict[str, Any]:
    """Headline figures of the sales overview report.

    Returns:
        Dictionary with total_sales, total_revenue, average_order_value,
        completed_sales, pending_sales and completion_rate (percent). All
        values are 0 when there are no sales.
    """
    total_sales = len(sales)
    if total_sales == 0:
        return {
            "total_sales": 0,
            "total_revenue": 0.0,
            "average_order_value": 0.0,
            "completed_sales": 0,
            "pending_sales": 0,
            "completion_rate": 0.0,
        }

    amounts = np.array([s.total_amount for s in sales], dtype=float)
    statuses = np.array([s.status for s in sales])
    total_revenue = float(amounts.sum())
    completed = int((statuses == COMPLETED).sum())
    pending = int((statuses == PENDING).sum())

    return {
        "total_sales": total_sales,
        "total_revenue": total_revenue,
        "average_order_value": total_revenue / total_sales,
        "completed_sales": completed,
        "pending_sales": pending,
        "completion_rate": completed / total_sales * 100,
    }


def status_distribution(sales: Sequence[AggregatedSale]) -> pd.DataFrame:
    """Number of completed and pending sales, for the status chart."""
    metrics = overview_metrics(sales)
    return pd.DataFrame(
        {
            "name": ["Completed", "Pending"],
            "value": [metrics["completed_sales"], metrics["pending_sales"]],
        }
    )
