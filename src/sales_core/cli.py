"""Command-line interface for the sales reports.

Usage:

    sales-core sales --start 2024-01-01 --end 2024-01-31 --status pending --print
    sales-core products --limit 10 --sort-by revenue --out data
    sales-core employees --print
    sales-core overview --start 2024-01-01 --end 2024-12-31 --print
    sales-core monthly --out data
    sales-core transaction --id T-0001 --print
    sales-core qa --start 2024-01-01 --end 2024-01-31

Backend settings are read from SALES_API_URL, SALES_API_KEY, SALES_TIMEOUT
and SALES_RETRIES. Every run fetches fresh rows; nothing is cached.

Exit codes: 0 on success, 1 on extraction or data-quality failures (and on
QA errors), 2 on configuration or argument errors.
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional, Sequence

from sales_core.config import BackendConfig, ReportPaths
from sales_core.exceptions import ConfigError, DataQualityError, ExtractionError
from sales_core.qa import run_sales_qa
from sales_core.raw.client import RestClient
from sales_core.raw.tables import fetch_raw_tables
from sales_core.reports.filters import (
    filter_by_status,
    search_rollups,
    search_sales,
    top_n,
)
from sales_core.reports.format import TableData, format_table
from sales_core.reports.render import render_text, write_csv
from sales_core.reports.specs import (
    DETAIL_COLUMNS,
    METRIC_COLUMNS,
    MONTHLY_COLUMNS,
    SALES_COLUMNS,
    TOP_EMPLOYEES_COLUMNS,
    TOP_PRODUCTS_COLUMNS,
    overview_rows,
    transaction_rows,
)
from sales_core.sales.api import build_collection
from sales_core.sales.collection import CollectionResult
from sales_core.sales.marts import monthly_summary, overview_metrics
from sales_core.utils import parse_date

logger = logging.getLogger(__name__)

REPORTS = ("sales", "products", "employees", "overview", "monthly", "transaction")
COMMANDS = REPORTS + ("qa",)

# report -> (title, export file name)
REPORT_TITLES = {
    "sales": ("Sales Transactions", "sales-report"),
    "products": ("Top Products Report", "top-products-report"),
    "employees": ("Top Employees Report", "top-employees-report"),
    "overview": ("Sales Overview Report", "sales-overview-report"),
    "monthly": ("Monthly Sales Report", "monthly-sales-report"),
}


def _date_arg(value: str) -> str:
    try:
        parse_date(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid date {value!r}, expected YYYY-MM-DD") from None
    return value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sales-core",
        description="Build back-office sales reports from the REST backend.",
    )
    parser.add_argument("command", choices=COMMANDS, help="Report to build, or 'qa'.")
    parser.add_argument("--start", type=_date_arg, help="First sale date, YYYY-MM-DD (inclusive).")
    parser.add_argument("--end", type=_date_arg, help="Last sale date, YYYY-MM-DD (inclusive).")
    parser.add_argument(
        "--limit",
        type=int,
        default=None,
        help="Maximum number of products/employees to list (default: all).",
    )
    parser.add_argument(
        "--sort-by",
        choices=["units", "revenue", "sales"],
        default=None,
        help="Order of top products/employees (default: units for products, "
        "sales for employees).",
    )
    parser.add_argument("--search", default=None, help="Case-insensitive search term.")
    parser.add_argument(
        "--status",
        default="all",
        help="Sale status to keep in the sales report: all, pending, completed, cancelled.",
    )
    parser.add_argument("--id", dest="transno", default=None, help="Transaction number.")
    parser.add_argument(
        "--include-idle",
        action="store_true",
        help="Also list products and employees without sales.",
    )
    parser.add_argument(
        "--out",
        default=None,
        help="Data root; the CSV export is written to <out>/exports/<report>-<date>.csv.",
    )
    parser.add_argument(
        "--print",
        dest="print_table",
        action="store_true",
        help="Print the report as a text table (default when --out is not given).",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging.")
    return parser


def build_report(result: CollectionResult, args: argparse.Namespace) -> tuple[TableData, str]:
    """Build the requested report table from an aggregated collection.

    Returns:
        Tuple of (table, export file name without date and extension).

    Raises:
        ValueError: If a filter argument is invalid or the transaction is unknown.
    """
    metadata = {}
    if args.start or args.end:
        metadata["period"] = f"{args.start or '...'} to {args.end or '...'}"

    command = args.command
    if command == "transaction":
        if not args.transno:
            raise ValueError("The transaction report requires --id")
        sale = next((s for s in result.sales if s.id == args.transno), None)
        if sale is None:
            raise ValueError(f"Transaction {args.transno!r} not found")
        table = format_table(
            transaction_rows(sale),
            DETAIL_COLUMNS,
            title=f"Transaction {sale.id}",
            metadata=metadata,
        )
        return table, f"transaction-{sale.id}"

    title, filename = REPORT_TITLES[command]
    if command == "sales":
        sales = filter_by_status(search_sales(result.sales, args.search), args.status)
        table = format_table(sales, SALES_COLUMNS, title=title, metadata=metadata)
    elif command == "products":
        rollups = top_n(
            search_rollups(result.product_rollups, args.search),
            by=args.sort_by or "units",
            limit=args.limit,
        )
        table = format_table(rollups, TOP_PRODUCTS_COLUMNS, title=title, metadata=metadata)
    elif command == "employees":
        rollups = top_n(
            search_rollups(result.employee_rollups, args.search),
            by=args.sort_by or "sales",
            limit=args.limit,
        )
        table = format_table(rollups, TOP_EMPLOYEES_COLUMNS, title=title, metadata=metadata)
    elif command == "overview":
        rows = overview_rows(overview_metrics(result.sales))
        table = format_table(rows, METRIC_COLUMNS, title=title, metadata=metadata)
    else:  # monthly
        monthly = monthly_summary(result.sales)
        table = format_table(monthly, MONTHLY_COLUMNS, title=title, metadata=metadata)
    return table, filename


def _print_qa(raw) -> int:
    qa = run_sales_qa(raw)
    print(
        f"QA results: {qa.summary['error_count']} ERROR(S), "
        f"{qa.summary['warning_count']} WARNING(S)"
    )
    for r in qa.results:
        prefix = "[ERROR]" if r.level == "ERROR" else "[WARN ]"
        print(prefix, r.message)
    return 1 if qa.has_errors else 0


def main(argv: Optional[Sequence[str]] = None, client: Optional[RestClient] = None) -> int:
    """Main CLI entry point.

    Args:
        argv: Command-line arguments (default: ``sys.argv[1:]``).
        client: REST client to use instead of one built from the environment.

    Returns:
        Process exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.start and args.end and args.start > args.end:
        print(f"Error: --start {args.start} is after --end {args.end}", file=sys.stderr)
        return 2

    try:
        if client is None:
            client = RestClient(BackendConfig.from_env())
        raw = fetch_raw_tables(client, args.start, args.end)

        if args.command == "qa":
            return _print_qa(raw)

        result = build_collection(raw, include_idle=args.include_idle)
        table, filename = build_report(result, args)
    except ConfigError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2
    except (ExtractionError, DataQualityError) as e:
        logger.error("%s: %s", type(e).__name__, e)
        print(f"Failed to build the {args.command} report: {e}", file=sys.stderr)
        return 1

    if args.out:
        paths = ReportPaths.from_root(args.out)
        paths.ensure_dirs()
        path = write_csv(table, paths.export_path(filename))
        print(f"Exported {len(table)} row(s) to {path}")
    if args.print_table or not args.out:
        print(render_text(table))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
