"""Tests for collection aggregation and product/employee rollups."""

from datetime import date

from sales_core.sales.api import build_collection
from sales_core.sales.collection import (
    EMPLOYEE,
    PRODUCT,
    aggregate_collection,
    index_payments,
    rank_rollups,
)
from sales_core.sales.prices import PriceResolver
from sales_core.sales.status import COMPLETED, PENDING
from sales_core.types import EntityRollup, Order, OrderLine, Payment, PricePoint


def _orders() -> list[Order]:
    d = date(2024, 6, 1)
    return [
        Order("O1", None, "E1", d, (OrderLine("A", 2), OrderLine("B", 1))),
        Order("O2", None, "E2", d, (OrderLine("A", 3),)),
        Order("O3", None, "E1", d, (OrderLine("B", 2),)),
    ]


def _resolver() -> PriceResolver:
    return PriceResolver(
        [PricePoint("A", 10.0, date(2024, 1, 1)), PricePoint("B", 4.0, date(2024, 1, 1))]
    )


def test_product_rollups_ranked_by_units() -> None:
    result = aggregate_collection(_orders(), _resolver())

    by_key = {r.key: r for r in result.product_rollups}
    assert by_key["A"].total_units == 5
    assert by_key["B"].total_units == 3
    assert by_key["A"].rank == 1
    assert by_key["B"].rank == 2
    assert by_key["A"].total_revenue == 50.0
    assert by_key["B"].total_revenue == 12.0
    assert by_key["A"].sales_count == 2
    assert all(r.kind == PRODUCT for r in result.product_rollups)


def test_employee_rollups_totals() -> None:
    result = aggregate_collection(_orders(), _resolver())

    e1, e2 = result.employee_rollups
    assert (e1.key, e1.rank, e1.sales_count, e1.total_units) == ("E1", 1, 2, 5)
    assert e1.total_revenue == 24.0 + 8.0
    assert (e2.key, e2.rank, e2.sales_count) == ("E2", 2, 1)
    assert all(r.kind == EMPLOYEE for r in result.employee_rollups)


def test_employee_rollups_ranked_by_units_not_sales_count() -> None:
    d = date(2024, 6, 1)
    orders = [
        Order("O1", None, "E2", d, (OrderLine("A", 1),)),
        Order("O2", None, "E2", d, (OrderLine("A", 1),)),
        Order("O3", None, "E1", d, (OrderLine("B", 10),)),
    ]

    result = aggregate_collection(orders, _resolver())

    ranked = [(r.key, r.rank, r.total_units, r.sales_count) for r in result.employee_rollups]
    assert ranked == [("E1", 1, 10, 1), ("E2", 2, 2, 2)]


def test_sales_without_employee_are_logged(caplog) -> None:
    orders = _orders() + [Order("O4", None, None, date(2024, 6, 1), (OrderLine("A", 9),))]

    with caplog.at_level("INFO", logger="sales_core.sales.collection"):
        result = aggregate_collection(orders, _resolver())

    assert [r.key for r in result.employee_rollups] == ["E1", "E2"]
    assert "1 sale(s) without an employee" in caplog.text


def test_sales_keep_input_order_and_status() -> None:
    payments = [Payment("O2", 30.0), Payment("O1", 5.0)]

    result = aggregate_collection(_orders(), _resolver(), payments)

    assert [s.id for s in result.sales] == ["O1", "O2", "O3"]
    assert [s.status for s in result.sales] == [PENDING, COMPLETED, PENDING]


def test_unresolved_names_use_placeholder() -> None:
    result = aggregate_collection(_orders(), _resolver())

    assert {s.customer_name for s in result.sales} == {"Unknown"}
    assert {r.label for r in result.product_rollups} == {"Unknown"}
    assert {r.label for r in result.employee_rollups} == {"Unknown"}


def test_ranks_are_dense_and_ties_keep_input_order() -> None:
    rollups = [
        EntityRollup(PRODUCT, "X", total_units=2),
        EntityRollup(PRODUCT, "Y", total_units=7),
        EntityRollup(PRODUCT, "Z", total_units=2),
        EntityRollup(PRODUCT, "W", total_units=0),
    ]

    ranked = rank_rollups(rollups, by="total_units")

    assert [r.key for r in ranked] == ["Y", "X", "Z", "W"]
    assert [r.rank for r in ranked] == [1, 2, 3, 4]
    units = [r.total_units for r in ranked]
    assert units == sorted(units, reverse=True)


def test_index_payments_keeps_first() -> None:
    indexed = index_payments([Payment("O1", 5.0), Payment("O1", 50.0), Payment("O2", 1.0)])

    assert indexed["O1"].amount == 5.0
    assert set(indexed) == {"O1", "O2"}


def test_empty_collection() -> None:
    result = aggregate_collection([], _resolver(), as_of="2024-06-01")

    assert result.sales == []
    assert result.product_rollups == []
    assert result.employee_rollups == []
    assert result.as_of == date(2024, 6, 1)


def test_build_collection_from_raw_tables(raw_tables) -> None:
    result = build_collection(raw_tables)

    totals = {s.id: s.total_amount for s in result.sales}
    assert totals == {"T1": 25.0, "T2": 30.0, "T3": 10.0, "T4": 0.0}
    statuses = {s.id: s.status for s in result.sales}
    assert statuses == {"T1": COMPLETED, "T2": PENDING, "T3": PENDING, "T4": COMPLETED}

    t1 = result.sales[0]
    assert t1.customer_name == "Ana Cruz"
    assert t1.employee_name == "Maria Santos"
    assert [line.description for line in t1.lines] == ["Coffee", "Tea"]

    t4 = result.sales[3]
    assert t4.customer_name == "Unknown"
    assert t4.employee_name == "Unknown"


def test_current_unit_price_uses_latest_order_date(raw_tables) -> None:
    result = build_collection(raw_tables)

    assert result.as_of == date(2024, 3, 5)
    products = {r.key: r for r in result.product_rollups}
    assert [r.key for r in result.product_rollups] == ["A", "B", "C"]
    assert products["A"].unit_price == 12.0
    assert products["A"].unit == "pc"
    assert products["C"].unit_price == 0.0


def test_explicit_as_of(raw_tables) -> None:
    result = build_collection(raw_tables, as_of=date(2024, 1, 31))

    assert {r.key: r.unit_price for r in result.product_rollups}["A"] == 10.0


def test_employee_without_ref_is_not_rolled_up(raw_tables) -> None:
    result = build_collection(raw_tables)

    assert [r.key for r in result.employee_rollups] == ["E1", "E2"]
    e1 = result.employee_rollups[0]
    assert e1.hire_date == date(2020, 3, 1)
    assert e1.total_revenue == 35.0
    assert result.employee_rollups[1].hire_date is None


def test_include_idle_adds_entities_without_sales(raw_tables) -> None:
    result = build_collection(raw_tables, include_idle=True)

    products = [r.key for r in result.product_rollups]
    employees = [r.key for r in result.employee_rollups]
    assert products == ["A", "B", "C", "D"]
    assert employees == ["E1", "E2", "E3"]
    idle = result.employee_rollups[-1]
    assert (idle.rank, idle.total_units, idle.sales_count, idle.label) == (3, 0, 0, "Lia Tan")
