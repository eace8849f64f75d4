"""Payment status derivation for sales.

This is the single place where a sale's status is computed. Views, marts and
exports read ``AggregatedSale.status`` rather than comparing amounts again.
"""

from __future__ import annotations

from typing import Optional

from sales_core.types import Payment

PENDING = "pending"
COMPLETED = "completed"
# Recognized on records but never derived here
CANCELLED = "cancelled"

SALE_STATUSES = (PENDING, COMPLETED, CANCELLED)


def derive_status(total_amount: float, payment: Optional[Payment]) -> str:
    """Derive the status of a sale from its total and recorded payment.

    Rules:
    - no payment recorded -> ``"pending"``
    - ``payment.amount >= total_amount`` -> ``"completed"``
    - ``payment.amount < total_amount`` -> ``"pending"`` (partial payment)

    ``"cancelled"`` is never returned.

    Examples:
        >>> derive_status(20.0, None)
        'pending'
        >>> derive_status(20.0, Payment(order_id="O1", amount=20.0))
        'completed'
        >>> derive_status(20.0, Payment(order_id="O1", amount=15.0))
        'pending'
        >>> derive_status(0.0, Payment(order_id="O2", amount=0.0))
        'completed'
    """
    if payment is None:
        return PENDING
    if payment.amount >= total_amount:
        return COMPLETED
    return PENDING
