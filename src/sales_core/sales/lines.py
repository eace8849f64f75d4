"""Sale line materialization: join order lines with resolved prices."""

from __future__ import annotations

import logging
from typing import Optional

from sales_core.sales.directory import Directory
from sales_core.sales.prices import PriceResolver
from sales_core.types import Order, PricedLine

logger = logging.getLogger(__name__)


def materialize(
    order: Order,
    resolver: PriceResolver,
    directory: Optional[Directory] = None,
) -> list[PricedLine]:
    """Price every line of an order as of the order date.

    Lines come back in the same order as ``order.lines``. Quantities are not
    validated: a zero or negative quantity yields a zero or negative
    subtotal.

    Args:
        order: Order whose lines should be priced.
        resolver: Price resolver for the current run.
        directory: Optional name directory used to label each line.

    Returns:
        List of PricedLine, one per order line.
    """
    directory = directory or Directory()
    priced: list[PricedLine] = []
    for line in order.lines:
        unit_price = resolver.resolve(line.product_code, order.order_date)
        if line.quantity <= 0:
            logger.debug(
                "Order %s line %s has non-positive quantity %s",
                order.id,
                line.product_code,
                line.quantity,
            )
        priced.append(
            PricedLine(
                product_code=line.product_code,
                quantity=line.quantity,
                unit_price=unit_price,
                subtotal=line.quantity * unit_price,
                description=directory.product_label(line.product_code),
            )
        )
    return priced
