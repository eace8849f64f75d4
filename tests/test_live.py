"""Live tests against a real REST backend.

These tests validate the raw layer and the aggregation with real credentials.
They are skipped unless SALES_API_URL and SALES_API_KEY are set.
"""

import os
from datetime import date, timedelta

import pytest

from sales_core.sales.status import SALE_STATUSES


def _require_credentials() -> None:
    if not (os.environ.get("SALES_API_URL") and os.environ.get("SALES_API_KEY")):
        pytest.skip("Live test skipped: SALES_API_URL and SALES_API_KEY environment variables required")


@pytest.mark.live
def test_live_sales_collection() -> None:
    """Live test: fetch the last 90 days and check the aggregated result."""
    _require_credentials()

    from sales_core.sales import get_sales_collection

    end_date = date.today()
    start_date = end_date - timedelta(days=90)

    result = get_sales_collection(
        start_date=start_date.isoformat(),
        end_date=end_date.isoformat(),
    )

    print(f"\n[Live Test] {len(result.sales)} sale(s) between {start_date} and {end_date}")
    for sale in result.sales:
        assert start_date <= sale.order_date <= end_date
        assert sale.status in SALE_STATUSES
    ranks = [r.rank for r in result.product_rollups]
    assert ranks == list(range(1, len(ranks) + 1))


@pytest.mark.live
def test_live_qa() -> None:
    """Live test: QA checks run on the full raw tables."""
    _require_credentials()

    from sales_core.config import BackendConfig
    from sales_core.qa import run_sales_qa
    from sales_core.raw import RestClient, fetch_raw_tables

    raw = fetch_raw_tables(RestClient(BackendConfig.from_env()))
    result = run_sales_qa(raw)

    print(f"\n[Live QA Test] {result.summary}")
    assert result.summary["total_sales"] == len(raw.sales)
