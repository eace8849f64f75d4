"""Collection aggregation: every sale of a run plus product/employee rollups.

Each order is aggregated independently; rollups are folded from the
aggregated sales afterwards. Nothing here writes to any store, so an
abandoned run can simply be dropped.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import date
from typing import Any, Iterable, Optional, Sequence

from sales_core.sales.aggregate import aggregate_sale
from sales_core.sales.directory import Directory
from sales_core.sales.lines import materialize
from sales_core.sales.prices import PriceResolver
from sales_core.types import AggregatedSale, EntityRollup, Order, Payment
from sales_core.utils import to_date

logger = logging.getLogger(__name__)

PRODUCT = "product"
EMPLOYEE = "employee"


@dataclass(frozen=True)
class CollectionResult:
    """Result of one collection aggregation run.

    Attributes:
        sales: One AggregatedSale per input order, in input order.
        product_rollups: Product rollups ranked by units sold.
        employee_rollups: Employee rollups ranked by units sold.
        as_of: Date used to resolve the products' current unit price.
    """

    sales: list[AggregatedSale]
    product_rollups: list[EntityRollup]
    employee_rollups: list[EntityRollup]
    as_of: date


def index_payments(payments: Iterable[Payment]) -> dict[str, Payment]:
    """Index payments by order id.

    At most one payment per order is expected. When the backend returns
    several, the first one is kept and the others are logged.
    """
    by_order: dict[str, Payment] = {}
    for payment in payments:
        if payment.order_id in by_order:
            logger.warning(
                "Ignoring extra payment for order %s (amount %s)",
                payment.order_id,
                payment.amount,
            )
            continue
        by_order[payment.order_id] = payment
    return by_order


def rank_rollups(rollups: Sequence[EntityRollup], by: str) -> list[EntityRollup]:
    """Sort rollups by ``by`` descending and assign 1-based ranks.

    The sort is stable: rollups with equal values keep their relative input
    order, so ranks form a dense 1..N permutation.
    """
    ordered = sorted(rollups, key=lambda r: getattr(r, by), reverse=True)
    return [replace(rollup, rank=i) for i, rollup in enumerate(ordered, start=1)]


def rollup_products(
    sales: Sequence[AggregatedSale],
    resolver: PriceResolver,
    directory: Optional[Directory] = None,
    *,
    as_of: Any = None,
    include_idle: bool = False,
) -> list[EntityRollup]:
    """Roll up units, revenue and sales count per product code.

    Products are collected in order of first appearance across the sales,
    then ranked by ``total_units`` descending.

    Args:
        sales: Aggregated sales of the run.
        resolver: Price resolver, used for the current unit price.
        directory: Optional name directory for labels and units.
        as_of: Date for the current unit price. Defaults to today.
        include_idle: Also include catalog products that were never sold.
    """
    directory = directory or Directory()
    as_of = to_date(as_of) if as_of is not None else date.today()

    units: dict[str, float] = {}
    revenue: dict[str, float] = {}
    orders: dict[str, set[str]] = {}
    for sale in sales:
        for line in sale.lines:
            code = line.product_code
            units[code] = units.get(code, 0) + line.quantity
            revenue[code] = revenue.get(code, 0.0) + line.subtotal
            orders.setdefault(code, set()).add(sale.id)

    if include_idle:
        for code in directory.products:
            units.setdefault(code, 0)
            revenue.setdefault(code, 0.0)
            orders.setdefault(code, set())

    rollups = [
        EntityRollup(
            kind=PRODUCT,
            key=code,
            label=directory.product_label(code),
            total_units=units[code],
            total_revenue=revenue[code],
            sales_count=len(orders[code]),
            unit=directory.product_unit(code),
            unit_price=resolver.resolve(code, as_of),
        )
        for code in units
    ]
    return rank_rollups(rollups, by="total_units")


def rollup_employees(
    sales: Sequence[AggregatedSale],
    directory: Optional[Directory] = None,
    *,
    include_idle: bool = False,
) -> list[EntityRollup]:
    """Roll up sales count, units and revenue per employee.

    ``sales_count`` counts orders, not lines, and ``total_revenue`` sums each
    order's ``total_amount``. Sales without an employee ref are not rolled
    up; their count is logged. Rollups are ranked by ``total_units``
    descending, like products.
    """
    directory = directory or Directory()

    counts: dict[str, int] = {}
    units: dict[str, float] = {}
    revenue: dict[str, float] = {}
    unassigned = 0
    for sale in sales:
        ref = sale.employee_ref
        if ref is None:
            unassigned += 1
            continue
        counts[ref] = counts.get(ref, 0) + 1
        units[ref] = units.get(ref, 0) + sale.total_units
        revenue[ref] = revenue.get(ref, 0.0) + sale.total_amount
    if unassigned:
        logger.info("%d sale(s) without an employee not rolled up", unassigned)

    if include_idle:
        for ref in directory.employees:
            counts.setdefault(ref, 0)
            units.setdefault(ref, 0)
            revenue.setdefault(ref, 0.0)

    rollups = []
    for ref in counts:
        employee = directory.employees.get(ref)
        rollups.append(
            EntityRollup(
                kind=EMPLOYEE,
                key=ref,
                label=directory.employee_name(ref),
                total_units=units[ref],
                total_revenue=revenue[ref],
                sales_count=counts[ref],
                hire_date=employee.hire_date if employee is not None else None,
            )
        )
    return rank_rollups(rollups, by="total_units")


def aggregate_collection(
    orders: Iterable[Order],
    resolver: PriceResolver,
    payments: Iterable[Payment] = (),
    directory: Optional[Directory] = None,
    *,
    as_of: Any = None,
    include_idle: bool = False,
) -> CollectionResult:
    """Aggregate a full set of orders and roll up per-product/per-employee metrics.

    Args:
        orders: Orders of the run, each with its lines.
        resolver: Price resolver built from the run's price history.
        payments: Payments of the run; at most one per order is used.
        directory: Optional name directory; unresolved names become "Unknown".
        as_of: Date for the products' current unit price. Defaults to the
            latest order date of the run, or today for an empty run.
        include_idle: Also roll up catalog products and employees without sales.

    Returns:
        CollectionResult with sales in input order and ranked rollups.

    Examples:
        >>> resolver = PriceResolver([PricePoint("A", 10.0, date(2024, 1, 1))])
        >>> order = Order("O1", "C1", "E1", date(2024, 6, 1), (OrderLine("A", 2),))
        >>> result = aggregate_collection([order], resolver)
        >>> result.sales[0].total_amount, result.sales[0].status
        (20.0, 'pending')
    """
    directory = directory or Directory()
    payments_by_order = index_payments(payments)

    sales: list[AggregatedSale] = []
    for order in orders:
        priced = materialize(order, resolver, directory)
        sales.append(aggregate_sale(order, priced, payments_by_order.get(order.id), directory))

    if as_of is None:
        as_of = max((s.order_date for s in sales), default=date.today())
    else:
        as_of = to_date(as_of)

    product_rollups = rollup_products(
        sales, resolver, directory, as_of=as_of, include_idle=include_idle
    )
    employee_rollups = rollup_employees(sales, directory, include_idle=include_idle)

    logger.info(
        "Aggregated %d sale(s), %d product rollup(s), %d employee rollup(s)",
        len(sales),
        len(product_rollups),
        len(employee_rollups),
    )
    return CollectionResult(
        sales=sales,
        product_rollups=product_rollups,
        employee_rollups=employee_rollups,
        as_of=as_of,
    )
