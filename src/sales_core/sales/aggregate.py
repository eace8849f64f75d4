"""Sale-level aggregation: totals and status for one order."""

from __future__ import annotations

from typing import Optional, Sequence

from sales_core.sales.directory import Directory
from sales_core.sales.status import derive_status
from sales_core.types import AggregatedSale, Order, Payment, PricedLine


def sale_total(priced_lines: Sequence[PricedLine]) -> float:
    """Sum line subtotals left to right.

    The accumulation order follows the line order so that floating-point
    totals are reproducible for a given input.
    """
    total = 0.0
    for line in priced_lines:
        total += line.subtotal
    return total


def aggregate_sale(
    order: Order,
    priced_lines: Sequence[PricedLine],
    payment: Optional[Payment] = None,
    directory: Optional[Directory] = None,
) -> AggregatedSale:
    """Fold priced lines into an AggregatedSale.

    Args:
        order: The source order.
        priced_lines: Output of ``materialize`` for this order.
        payment: The payment recorded for the order, if any.
        directory: Optional name directory for customer/employee labels.

    Returns:
        AggregatedSale with ``total_amount`` and derived ``status``. An order
        without lines has a total of 0.

    Raises:
        ValueError: If the payment belongs to another order.
    """
    if payment is not None and payment.order_id != order.id:
        raise ValueError(
            f"Payment for order {payment.order_id!r} passed to aggregate order {order.id!r}"
        )

    directory = directory or Directory()
    total = sale_total(priced_lines)
    return AggregatedSale(
        order=order,
        lines=tuple(priced_lines),
        total_amount=total,
        status=derive_status(total, payment),
        payment=payment,
        customer_name=directory.customer_name(order.customer_ref),
        customer_address=directory.customer_address(order.customer_ref),
        employee_name=directory.employee_name(order.employee_ref),
    )
