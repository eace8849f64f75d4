"""Reports module.

This module turns aggregated sales and rollups into renderer-agnostic tables
(headers + rows + metadata) and writes them out:

- **format**: ``Column`` specs and ``format_table``.
- **specs**: column specs of the back-office reports.
- **filters**: search, status filter and top-N.
- **render**: console text and CSV export.

Example:
    >>> from sales_core.reports import SALES_COLUMNS, format_table, render_text
    >>> from sales_core.sales import get_sales_collection
    >>>
    >>> result = get_sales_collection(start_date="2024-01-01", end_date="2024-01-31")
    >>> table = format_table(result.sales, SALES_COLUMNS, title="Sales Transactions")
    >>> print(render_text(table))
"""

from sales_core.reports.filters import (
    filter_by_date_range,
    filter_by_status,
    search_rollups,
    search_sales,
    top_n,
)
from sales_core.reports.format import Column, TableData, format_table
from sales_core.reports.render import render_text, write_csv
from sales_core.reports.specs import (
    DETAIL_COLUMNS,
    METRIC_COLUMNS,
    MONTHLY_COLUMNS,
    SALES_COLUMNS,
    TOP_EMPLOYEES_COLUMNS,
    TOP_PRODUCTS_COLUMNS,
    format_currency,
    overview_rows,
    transaction_rows,
)

__all__ = [
    "Column",
    "DETAIL_COLUMNS",
    "METRIC_COLUMNS",
    "MONTHLY_COLUMNS",
    "SALES_COLUMNS",
    "TOP_EMPLOYEES_COLUMNS",
    "TOP_PRODUCTS_COLUMNS",
    "TableData",
    "filter_by_date_range",
    "filter_by_status",
    "format_currency",
    "format_table",
    "overview_rows",
    "render_text",
    "search_rollups",
    "search_sales",
    "top_n",
    "transaction_rows",
    "write_csv",
]
