"""Tests for the sales QA checks."""

from dataclasses import replace

import pandas as pd
import pytest

from sales_core.exceptions import DataQualityError
from sales_core.qa import QAResult, SalesQAResult, run_sales_qa
from sales_core.qa.checks import (
    check_duplicate_payments,
    check_duplicate_price_dates,
    check_orphan_lines,
    check_orphan_payments,
    check_quantities,
)
from sales_core.raw.tables import RawTables


@pytest.fixture
def dirty_raw() -> RawTables:
    return RawTables.from_rows(
        sales=[{"transno": "T1", "salesdate": "2024-01-15", "custno": "C1", "empno": "E1"}],
        lines=[
            {"transno": "T1", "prodcode": "A", "quantity": 2},
            {"transno": "T1", "prodcode": "B", "quantity": 0},
            {"transno": "T9", "prodcode": "A", "quantity": 1},
        ],
        prices=[
            {"prodcode": "A", "unitprice": 10.0, "effdate": "2024-01-01"},
            {"prodcode": "A", "unitprice": 11.0, "effdate": "2024-01-01"},
            {"prodcode": "B", "unitprice": 3.0, "effdate": "2024-01-01"},
        ],
        payments=[
            {"transno": "T1", "amount": 5.0, "paydate": "2024-01-15"},
            {"transno": "T1", "amount": 5.0, "paydate": "2024-01-16"},
            {"transno": "T8", "amount": 3.0, "paydate": "2024-01-16"},
        ],
    )


def test_clean_data_has_no_issues(raw_tables) -> None:
    result = run_sales_qa(raw_tables)

    assert isinstance(result, SalesQAResult)
    assert result.results == []
    assert not result.has_errors
    assert result.summary["total_sales"] == 4
    assert result.summary["total_lines"] == 5


def test_dirty_data_issues(dirty_raw) -> None:
    result = run_sales_qa(dirty_raw)

    assert result.has_errors
    assert result.summary["error_count"] == 1
    assert result.summary["warning_count"] == 4
    assert len(result.errors) == 1
    assert "more than one payment" in result.errors[0].message
    assert len(result.warnings) == 4


def test_check_quantities(dirty_raw) -> None:
    results = check_quantities(dirty_raw.lines)

    assert [r.level for r in results] == ["WARN"]
    assert "1 order line(s)" in results[0].message


def test_check_quantities_non_numeric() -> None:
    lines = pd.DataFrame({"transno": ["T1", "T2"], "prodcode": ["A", "A"], "quantity": ["x", 3]})

    results = check_quantities(lines)

    assert "T1" in results[0].message


def test_check_duplicate_price_dates(dirty_raw) -> None:
    results = check_duplicate_price_dates(dirty_raw.prices)

    assert len(results) == 1
    assert results[0].level == "WARN"
    assert "prodcode: A" in results[0].message


def test_check_orphans(dirty_raw) -> None:
    lines = check_orphan_lines(dirty_raw.sales, dirty_raw.lines)
    payments = check_orphan_payments(dirty_raw.sales, dirty_raw.payments)

    assert "T9" in lines[0].message
    assert "T8" in payments[0].message


def test_check_duplicate_payments_none(raw_tables) -> None:
    assert check_duplicate_payments(raw_tables.payments) == []


def test_missing_columns_raise(raw_tables) -> None:
    broken = replace(raw_tables, lines=pd.DataFrame({"transno": ["T1"], "prodcode": ["A"]}))

    with pytest.raises(DataQualityError, match="salesdetail"):
        run_sales_qa(broken)


def test_qa_result_fields() -> None:
    result = QAResult("ERROR", "Found duplicate rows")

    assert result.level == "ERROR"
    assert result.message == "Found duplicate rows"
