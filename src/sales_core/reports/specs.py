"""Column specs for the back-office reports.

Each spec is a list of ``Column`` objects consumed by ``format_table``. The
monetary columns pre-format their values as currency strings; counts stay
numeric.
"""

from __future__ import annotations

from typing import Any

from sales_core.reports.format import Column, read_field
from sales_core.types import AggregatedSale


def format_currency(value: float) -> str:
    """Format an amount as US dollars.

    Examples:
        >>> format_currency(1234.5)
        '$1,234.50'
        >>> format_currency(-3)
        '-$3.00'
    """
    value = float(value or 0.0)
    sign = "-" if value < 0 else ""
    return f"{sign}${abs(value):,.2f}"


def format_percent(value: float) -> str:
    return f"{float(value):.1f}%"


def _status_label(status: str) -> str:
    return status.capitalize() if status else ""


def month_or_id(row: Any) -> str:
    """Month label for summary rows, transaction number for sale rows."""
    month = read_field(row, "month")
    if month:
        return str(month)
    return str(read_field(row, "id") or read_field(row, "transno") or "")


def _amount(row: Any) -> str:
    # summary rows carry "revenue", sale rows "total_amount"
    value = read_field(row, "total_amount")
    if value is None:
        value = read_field(row, "revenue")
    return format_currency(value or 0.0)


SALES_COLUMNS = [
    Column("Transaction #", "id"),
    Column("Date", "order_date"),
    Column("Customer", "customer_name"),
    Column("Employee", "employee_name"),
    Column("Amount", lambda s: format_currency(s.total_amount)),
    Column("Status", lambda s: _status_label(s.status)),
]

TOP_PRODUCTS_COLUMNS = [
    Column("Rank", "rank"),
    Column("Product Code", "key"),
    Column("Product Name", "label"),
    Column("Units Sold", "total_units"),
    Column("Revenue", lambda r: format_currency(r.total_revenue)),
    Column("Unit Price", lambda r: format_currency(r.unit_price)),
]

TOP_EMPLOYEES_COLUMNS = [
    Column("Rank", "rank"),
    Column("Employee ID", "key"),
    Column("Employee Name", "label"),
    Column("Sales Count", "sales_count"),
    Column("Revenue", lambda r: format_currency(r.total_revenue)),
    Column("Hire Date", lambda r: r.hire_date.isoformat() if r.hire_date else "N/A"),
]

METRIC_COLUMNS = [
    Column("Metric", "metric"),
    Column("Value", "value"),
]

DETAIL_COLUMNS = [
    Column("Detail", "detail"),
    Column("Value", "value"),
]

# Rows may be monthly summary rows or sales
MONTHLY_COLUMNS = [
    Column("Month/ID", month_or_id),
    Column("Sales", lambda r: read_field(r, "sales") if read_field(r, "month") else 1),
    Column("Amount", _amount),
]


def overview_rows(metrics: dict[str, Any]) -> list[dict[str, str]]:
    """Metric/value rows of the sales overview report.

    Args:
        metrics: Output of ``sales.marts.overview_metrics``.
    """
    return [
        {"metric": "Total Sales", "value": str(metrics["total_sales"])},
        {"metric": "Total Revenue", "value": format_currency(metrics["total_revenue"])},
        {"metric": "Average Order Value", "value": format_currency(metrics["average_order_value"])},
        {"metric": "Completed Sales", "value": str(metrics["completed_sales"])},
        {"metric": "Pending Sales", "value": str(metrics["pending_sales"])},
        {"metric": "Completion Rate", "value": format_percent(metrics["completion_rate"])},
    ]


def transaction_rows(sale: AggregatedSale) -> list[dict[str, str]]:
    """Detail/value rows describing a single transaction and its lines."""
    rows = [
        {"detail": "Transaction No", "value": sale.id},
        {"detail": "Date", "value": sale.order_date.isoformat()},
        {"detail": "Customer", "value": sale.customer_name},
        {"detail": "Employee", "value": sale.employee_name},
        {"detail": "Status", "value": sale.status},
        {"detail": "Total Amount", "value": format_currency(sale.total_amount)},
    ]
    if sale.lines:
        rows.append({"detail": "", "value": ""})
        rows.append({"detail": "Products:", "value": ""})
        for i, line in enumerate(sale.lines, start=1):
            rows.append(
                {
                    "detail": f"{i}. {line.description}",
                    "value": (
                        f"{line.quantity} @ {format_currency(line.unit_price)} = "
                        f"{format_currency(line.subtotal)}"
                    ),
                }
            )
    return rows
