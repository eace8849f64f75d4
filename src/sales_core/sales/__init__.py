"""Sales domain module.

This module turns raw order, line, price and payment rows into aggregated
sales and rollups:

- **prices**: price in effect for a product on a date.
- **lines**: order lines joined with resolved prices.
- **aggregate**: sale total and payment status.
- **collection**: all sales of a run plus product/employee rollups.
- **marts**: DataFrame views for lists and reports.

Example:
    >>> from sales_core.sales import get_sales, get_sales_collection
    >>>
    >>> result = get_sales_collection(start_date="2024-01-01", end_date="2024-12-31")
    >>> result.sales[0].status
    'completed'
    >>>
    >>> # Product rollups as a DataFrame
    >>> products_df = get_sales(grain="product")
"""

from sales_core.sales.aggregate import aggregate_sale
from sales_core.sales.api import build_collection, get_sales, get_sales_collection
from sales_core.sales.collection import CollectionResult, aggregate_collection
from sales_core.sales.directory import Directory
from sales_core.sales.lines import materialize
from sales_core.sales.prices import PriceResolver
from sales_core.sales.status import CANCELLED, COMPLETED, PENDING, derive_status

__all__ = [
    "CANCELLED",
    "COMPLETED",
    "CollectionResult",
    "Directory",
    "PENDING",
    "PriceResolver",
    "aggregate_collection",
    "aggregate_sale",
    "build_collection",
    "derive_status",
    "get_sales",
    "get_sales_collection",
    "materialize",
]
