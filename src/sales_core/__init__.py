"""Sales Core - aggregation of back-office sales, rollups and reports.

This package turns the rows of a small retail back office (sales, order
lines, price history, payments and name tables) into aggregated sales and
product/employee rollups, and formats them into report tables:

- **Raw**: batched retrieval of the backend tables (``sales_core.raw``)
- **Sales**: price resolution, sale totals, payment status and rollups
  (``sales_core.sales``)
- **Reports**: renderer-agnostic tables, filters and CSV/text output
  (``sales_core.reports``)

Module Structure:
    sales_core.raw: REST client and raw table fetch
    sales_core.sales: Domain aggregation and marts
    sales_core.reports: Report formatting, filters and renderers
    sales_core.qa: Data quality checks on raw tables
    sales_core.config: BackendConfig and ReportPaths
    sales_core.cli: ``sales-core`` command

Quick Start:
    >>> from sales_core import BackendConfig
    >>> from sales_core.sales import get_sales, get_sales_collection
    >>> from sales_core.reports import SALES_COLUMNS, format_table
    >>>
    >>> config = BackendConfig.from_env()
    >>>
    >>> # All sales of January with totals and status
    >>> result = get_sales_collection(start_date="2024-01-01", end_date="2024-01-31", config=config)
    >>> table = format_table(result.sales, SALES_COLUMNS, title="Sales Transactions")
    >>>
    >>> # Top products as a DataFrame
    >>> products = get_sales(grain="product", config=config)
"""

__version__ = "0.1.0"

from sales_core.config import BackendConfig, ReportPaths
from sales_core.exceptions import (
    ConfigError,
    DataQualityError,
    ETLError,
    ExtractionError,
    SalesCoreError,
)

__all__ = [
    "BackendConfig",
    "ConfigError",
    "DataQualityError",
    "ETLError",
    "ExtractionError",
    "ReportPaths",
    "SalesCoreError",
    "__version__",
]
