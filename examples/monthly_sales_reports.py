"""Example: Monthly sales reports using the sales API

This example loads one month of sales, prints the headline figures, lists the
top products and employees, and exports the sales list to CSV.

Prerequisites:
- Set SALES_API_URL and SALES_API_KEY environment variables
- Optional: SALES_TIMEOUT, SALES_RETRIES
"""

from sales_core import BackendConfig, ReportPaths
from sales_core.reports import (
    SALES_COLUMNS,
    TOP_EMPLOYEES_COLUMNS,
    TOP_PRODUCTS_COLUMNS,
    format_table,
    render_text,
    top_n,
    write_csv,
)
from sales_core.sales import get_sales, get_sales_collection
from sales_core.sales.marts import overview_metrics

# Define the month
month_start = "2024-06-01"  # MODIFY AS NEEDED
month_end = "2024-06-30"  # MODIFY AS NEEDED

config = BackendConfig.from_env()
paths = ReportPaths.from_root("data")

# One run: fetch raw tables, aggregate every sale and roll up products/employees
print(f"Loading sales for {month_start} to {month_end}...")
result = get_sales_collection(start_date=month_start, end_date=month_end, config=config)

metrics = overview_metrics(result.sales)
print(f"Sales: {metrics['total_sales']}, revenue: ${metrics['total_revenue']:,.2f}")
print(f"Completion rate: {metrics['completion_rate']:.1f}%")

# Top 5 products by units sold, top 5 employees by number of sales
products = format_table(top_n(result.product_rollups, "units", 5), TOP_PRODUCTS_COLUMNS, title="Top Products Report")
employees = format_table(top_n(result.employee_rollups, "sales", 5), TOP_EMPLOYEES_COLUMNS, title="Top Employees Report")
print()
print(render_text(products))
print()
print(render_text(employees))

# Export the full sales list
sales = format_table(result.sales, SALES_COLUMNS, title="Sales Transactions")
paths.ensure_dirs()
path = write_csv(sales, paths.export_path("sales-report"))
print(f"\nSales list exported to {path}")

# The same data as DataFrames, one grain at a time
df_lines = get_sales(start_date=month_start, end_date=month_end, grain="line", config=config)
print(f"\nLine grain: {len(df_lines)} rows")
print(df_lines.head())
