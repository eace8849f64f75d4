"""Public API for sales data.

This module provides the main entry points for loading aggregated sales.
Every call fetches fresh raw rows; nothing is cached between calls.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import pandas as pd

from sales_core.config import BackendConfig
from sales_core.raw.client import RestClient
from sales_core.raw.tables import RawTables, fetch_raw_tables
from sales_core.sales.collection import CollectionResult, aggregate_collection
from sales_core.sales.marts import lines_frame, monthly_summary, rollup_frame, sales_frame
from sales_core.sales.transform import transform_raw
from sales_core.utils import parse_date

logger = logging.getLogger(__name__)

GRAINS = ("sale", "line", "product", "employee", "monthly")


def build_collection(
    raw: RawTables,
    *,
    as_of: Any = None,
    include_idle: bool = False,
) -> CollectionResult:
    """Aggregate already-fetched raw tables.

    Args:
        raw: Raw tables of the run.
        as_of: Date for the products' current unit price (see
            ``aggregate_collection``).
        include_idle: Also roll up products and employees without sales.

    Raises:
        DataQualityError: If a raw frame misses a required column.
    """
    orders, resolver, payments, directory = transform_raw(raw)
    return aggregate_collection(
        orders,
        resolver,
        payments,
        directory,
        as_of=as_of,
        include_idle=include_idle,
    )


def get_sales_collection(
    client: Optional[RestClient] = None,
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
    *,
    config: Optional[BackendConfig] = None,
    as_of: Any = None,
    include_idle: bool = False,
) -> CollectionResult:
    """Fetch the raw tables and aggregate them in one run.

    Args:
        client: REST client. If None, one is built from ``config`` or, when
            that is also None, from the environment.
        start_date: Optional first sale date in YYYY-MM-DD format (inclusive).
        end_date: Optional last sale date in YYYY-MM-DD format (inclusive).
        config: Backend configuration used when ``client`` is None.
        as_of: Date for the products' current unit price.
        include_idle: Also roll up products and employees without sales.

    Returns:
        CollectionResult of the run.

    Raises:
        ValueError: If a date is not in YYYY-MM-DD format or start > end.
        ConfigError: If no client is given and the configuration is incomplete.
        ExtractionError: If any raw table cannot be fetched.
    """
    start = parse_date(start_date) if start_date else None
    end = parse_date(end_date) if end_date else None
    if start and end and start > end:
        raise ValueError(f"start_date {start_date} is after end_date {end_date}")

    if client is None:
        client = RestClient(config or BackendConfig.from_env())

    logger.info("Loading sales for %s to %s", start_date or "-", end_date or "-")
    raw = fetch_raw_tables(client, start_date, end_date)
    return build_collection(raw, as_of=as_of, include_idle=include_idle)


def get_sales(
    client: Optional[RestClient] = None,
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
    grain: str = "sale",
    *,
    config: Optional[BackendConfig] = None,
    include_idle: bool = False,
) -> pd.DataFrame:
    """Load aggregated sales data at the specified grain.

    Args:
        client: REST client (see ``get_sales_collection``).
        start_date: Optional first sale date in YYYY-MM-DD format (inclusive).
        end_date: Optional last sale date in YYYY-MM-DD format (inclusive).
        grain: Data grain to return:
            - "sale": One row per sale with total and status (default).
            - "line": One row per priced line.
            - "product": Product rollups ranked by units sold.
            - "employee": Employee rollups ranked by units sold.
            - "monthly": Sales count and revenue per month.
        config: Backend configuration used when ``client`` is None.
        include_idle: Also roll up products and employees without sales.

    Returns:
        DataFrame at the requested grain.

    Raises:
        ValueError: If grain is not one of GRAINS.

    Examples:
        >>> df = get_sales(start_date="2024-01-01", end_date="2024-12-31")
        >>> df = get_sales(grain="product")
    """
    if grain not in GRAINS:
        raise ValueError(f"Invalid grain '{grain}'. Must be one of {', '.join(GRAINS)}.")

    result = get_sales_collection(
        client, start_date, end_date, config=config, include_idle=include_idle
    )
    if grain == "sale":
        return sales_frame(result.sales)
    elif grain == "line":
        return lines_frame(result.sales)
    elif grain == "product":
        return rollup_frame(result.product_rollups)
    elif grain == "employee":
        return rollup_frame(result.employee_rollups)
    else:  # monthly
        return monthly_summary(result.sales)
