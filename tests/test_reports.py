"""Tests for report formatting, column specs, filters and renderers."""

from datetime import date, datetime

import numpy as np
import pandas as pd
import pytest

from sales_core.reports.filters import (
    filter_by_date_range,
    filter_by_status,
    search_rollups,
    search_sales,
    top_n,
)
from sales_core.reports.format import Column, format_table, read_field, to_cell
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
from sales_core.sales.api import build_collection
from sales_core.sales.marts import monthly_summary, overview_metrics


@pytest.fixture
def collection(raw_tables):
    return build_collection(raw_tables)


# --------------------------------------------------------------------------- #
# Formatter
# --------------------------------------------------------------------------- #


def test_rollup_round_trip_through_accessor_columns(collection) -> None:
    """Reading back each column reproduces the rollup values exactly."""
    rollups = collection.product_rollups + collection.employee_rollups
    fields = ["key", "label", "rank", "total_units", "total_revenue", "sales_count", "unit_price"]
    columns = [Column(name, name) for name in fields]

    table = format_table(rollups, columns)

    for name in fields:
        assert table.column(name) == [getattr(r, name) for r in rollups]


def test_callable_accessor_round_trip(collection) -> None:
    columns = [
        Column("Code", lambda r: r.key),
        Column("Revenue", lambda r: r.total_revenue),
        Column("Hire Date", "hire_date"),
    ]

    table = format_table(collection.employee_rollups, columns)

    assert table.column("Revenue") == [r.total_revenue for r in collection.employee_rollups]
    assert table.column("Hire Date") == ["2020-03-01", ""]


def test_dotted_accessor_reads_nested_records(collection) -> None:
    columns = [Column("Order Date", "order.order_date"), Column("Payment", "payment.amount")]

    table = format_table(collection.sales, columns)

    assert table.column("Order Date")[0] == "2024-01-15"
    assert table.column("Payment") == [25.0, 20.0, "", 0.0]


def test_missing_values_render_empty() -> None:
    rows = [{"a": None, "b": float("nan")}, {"a": "x"}]

    table = format_table(rows, [Column("A", "a"), Column("B", "b")])

    assert table.rows == [["", ""], ["x", ""]]


@pytest.mark.parametrize(
    "value, expected",
    [
        (date(2024, 6, 1), "2024-06-01"),
        (pd.Timestamp("2024-06-01"), "2024-06-01"),
        (datetime(2024, 6, 1, 9, 30), "2024-06-01T09:30:00"),
        (pd.NaT, ""),
        (np.int64(3), 3),
        (np.float64(2.5), 2.5),
        ("text", "text"),
        (True, "True"),
    ],
)
def test_to_cell(value, expected) -> None:
    assert to_cell(value) == expected


def test_format_table_accepts_dataframe() -> None:
    df = pd.DataFrame({"code": ["A", "B"], "units": [5, 3]})

    table = format_table(df, [Column("Code", "code"), Column("Units", "units")])

    assert table.rows == [["A", 5], ["B", 3]]
    assert isinstance(table.rows[0][1], int)


def test_format_table_metadata() -> None:
    table = format_table([], [Column("A", "a")], title="Empty", metadata={"period": "2024"})

    assert len(table) == 0
    assert table.title == "Empty"
    assert table.metadata["period"] == "2024"
    assert table.metadata["generated"] == date.today().isoformat()


def test_format_table_rejects_bad_specs() -> None:
    with pytest.raises(ValueError, match="At least one column"):
        format_table([], [])
    with pytest.raises(ValueError, match="Duplicate"):
        format_table([], [Column("A", "a"), Column("A", "b")])
    with pytest.raises(ValueError):
        Column("", "a")
    with pytest.raises(TypeError):
        Column("A", 3)


def test_unknown_column_raises_key_error() -> None:
    table = format_table([{"a": 1}], [Column("A", "a")])

    with pytest.raises(KeyError):
        table.column("B")


def test_read_field() -> None:
    assert read_field({"a": {"b": 2}}, "a.b") == 2
    assert read_field({"a": None}, "a.b") is None
    assert read_field(object(), "missing") is None


# --------------------------------------------------------------------------- #
# Report specs
# --------------------------------------------------------------------------- #


@pytest.mark.parametrize(
    "value, expected",
    [(0, "$0.00"), (1234.5, "$1,234.50"), (-3, "-$3.00"), (None, "$0.00")],
)
def test_format_currency(value, expected) -> None:
    assert format_currency(value) == expected


def test_sales_report(collection) -> None:
    table = format_table(collection.sales, SALES_COLUMNS)

    assert table.headers == ["Transaction #", "Date", "Customer", "Employee", "Amount", "Status"]
    assert table.rows[0] == ["T1", "2024-01-15", "Ana Cruz", "Maria Santos", "$25.00", "Completed"]
    assert table.column("Status") == ["Completed", "Pending", "Pending", "Completed"]


def test_top_products_report(collection) -> None:
    table = format_table(collection.product_rollups, TOP_PRODUCTS_COLUMNS)

    assert table.rows[0] == [1, "A", "Coffee", 5, "$50.00", "$12.00"]


def test_top_employees_report(collection) -> None:
    table = format_table(collection.employee_rollups, TOP_EMPLOYEES_COLUMNS)

    assert table.column("Employee Name") == ["Maria Santos", "Jose Reyes"]
    assert table.column("Sales Count") == [2, 1]
    assert table.column("Hire Date") == ["2020-03-01", "N/A"]


def test_overview_report(collection) -> None:
    table = format_table(overview_rows(overview_metrics(collection.sales)), METRIC_COLUMNS)

    values = dict(table.rows)
    assert values["Total Sales"] == "4"
    assert values["Total Revenue"] == "$65.00"
    assert values["Average Order Value"] == "$16.25"
    assert values["Completion Rate"] == "50.0%"


def test_transaction_detail_report(collection) -> None:
    table = format_table(transaction_rows(collection.sales[0]), DETAIL_COLUMNS)

    values = dict(table.rows)
    assert values["Transaction No"] == "T1"
    assert values["Total Amount"] == "$25.00"
    assert values["1. Coffee"] == "2 @ $10.00 = $20.00"
    assert values["2. Tea"] == "1 @ $5.00 = $5.00"


def test_monthly_column_is_month_or_transaction(collection) -> None:
    """One column spec formats monthly summary rows and sale rows side by side."""
    summary = monthly_summary(collection.sales).to_dict("records")
    rows = summary[:1] + collection.sales[:1]

    table = format_table(rows, MONTHLY_COLUMNS)

    assert table.column("Month/ID") == ["Jan 2024", "T1"]
    assert table.column("Sales") == [1, 1]
    assert table.column("Amount") == ["$25.00", "$25.00"]


# --------------------------------------------------------------------------- #
# Filters
# --------------------------------------------------------------------------- #


@pytest.mark.parametrize(
    "term, expected",
    [
        ("ana", ["T1", "T3"]),
        ("SANTOS", ["T1", "T3"]),
        ("2024-02", ["T2", "T3"]),
        ("t4", ["T4"]),
        ("", ["T1", "T2", "T3", "T4"]),
        (None, ["T1", "T2", "T3", "T4"]),
        ("nobody", []),
    ],
)
def test_search_sales(collection, term, expected) -> None:
    assert [s.id for s in search_sales(collection.sales, term)] == expected


def test_filter_by_status(collection) -> None:
    assert [s.id for s in filter_by_status(collection.sales, "pending")] == ["T2", "T3"]
    assert [s.id for s in filter_by_status(collection.sales, "Completed")] == ["T1", "T4"]
    assert len(filter_by_status(collection.sales, "all")) == 4
    assert filter_by_status(collection.sales, "cancelled") == []
    with pytest.raises(ValueError, match="Invalid status"):
        filter_by_status(collection.sales, "refunded")


def test_filter_by_date_range(collection) -> None:
    sales = filter_by_date_range(collection.sales, "2024-02-01", date(2024, 2, 29))

    assert [s.id for s in sales] == ["T2", "T3"]
    assert len(filter_by_date_range(collection.sales)) == 4


def test_search_rollups(collection) -> None:
    assert [r.key for r in search_rollups(collection.product_rollups, "tea")] == ["B"]
    assert [r.key for r in search_rollups(collection.employee_rollups, "e2")] == ["E2"]


def test_top_n(collection) -> None:
    products = collection.product_rollups

    assert [r.key for r in top_n(products, "units", 2)] == ["A", "B"]
    assert [r.key for r in top_n(products, "revenue")] == ["A", "B", "C"]
    assert len(top_n(products, limit=0)) == 3
    with pytest.raises(ValueError, match="Invalid sort key"):
        top_n(products, "price")


def test_top_n_keeps_rank_and_input_order_on_ties(collection) -> None:
    employees = collection.employee_rollups

    ranked = top_n(employees, "units")

    assert [r.key for r in ranked] == ["E1", "E2"]
    assert [r.rank for r in ranked] == [1, 2]


# --------------------------------------------------------------------------- #
# Renderers
# --------------------------------------------------------------------------- #


def test_render_text(collection) -> None:
    table = format_table(collection.product_rollups, TOP_PRODUCTS_COLUMNS, title="Top Products Report")

    text = render_text(table)
    lines = text.splitlines()

    assert lines[0] == "Top Products Report"
    assert lines[1].startswith("=")
    assert any(line.startswith("Rank") for line in lines)
    assert "Coffee" in text
    assert "$50.00" in text


def test_render_text_without_rows() -> None:
    text = render_text(format_table([], [Column("A", "a")], title="Nothing"))

    assert text.endswith("No rows.")


def test_write_csv(collection, tmp_path) -> None:
    table = format_table(collection.sales, SALES_COLUMNS)
    path = tmp_path / "exports" / "sales.csv"

    write_csv(table, path)

    df = pd.read_csv(path)
    assert list(df.columns) == table.headers
    assert list(df["Transaction #"]) == ["T1", "T2", "T3", "T4"]
    assert list(df["Amount"]) == ["$25.00", "$30.00", "$10.00", "$0.00"]
