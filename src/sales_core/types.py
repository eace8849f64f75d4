"""Domain records shared across the sales core.

Every record is a frozen dataclass: aggregation runs rebuild them from the
raw tables on each call and never mutate them afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional, Tuple

from sales_core.config import UNKNOWN_LABEL


@dataclass(frozen=True)
class Product:
    """Catalog entry for a product.

    Attributes:
        code: Unique product code (``prodcode``).
        description: Display name.
        unit: Unit of sale, e.g. ``"pc"`` or ``"kg"``.
    """

    code: str
    description: str = ""
    unit: str = ""


@dataclass(frozen=True)
class Customer:
    ref: str
    name: str = ""
    address: str = ""


@dataclass(frozen=True)
class Employee:
    ref: str
    first_name: str = ""
    last_name: str = ""
    hire_date: Optional[date] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


@dataclass(frozen=True)
class PricePoint:
    """Historical price of a product, effective from ``effective_date`` until superseded."""

    product_code: str
    unit_price: float
    effective_date: date


@dataclass(frozen=True)
class OrderLine:
    product_code: str
    quantity: float
    order_id: Optional[str] = None


@dataclass(frozen=True)
class Payment:
    order_id: str
    amount: float
    payment_date: Optional[date] = None


@dataclass(frozen=True)
class Order:
    """A sale transaction as stored: header plus ordered lines.

    Attributes:
        id: Transaction number (``transno``), unique.
        customer_ref: Customer key (``custno``), may be None.
        employee_ref: Employee key (``empno``), may be None.
        order_date: Date of the sale; prices are resolved as of this date.
        lines: Order lines in the order they were retrieved.
    """

    id: str
    customer_ref: Optional[str]
    employee_ref: Optional[str]
    order_date: date
    lines: Tuple[OrderLine, ...] = ()


@dataclass(frozen=True)
class PricedLine:
    """An order line joined with the price in effect on the order date."""

    product_code: str
    quantity: float
    unit_price: float
    subtotal: float
    description: str = UNKNOWN_LABEL


@dataclass(frozen=True)
class AggregatedSale:
    """Reconstructed view of one sale with computed total and status.

    Attributes:
        order: The source order.
        lines: Priced lines, in the same order as ``order.lines``.
        total_amount: Sum of line subtotals, accumulated in line order.
        status: ``"pending"`` or ``"completed"``.
        payment: The recorded payment, if any.
        customer_name: Resolved customer name or the placeholder label.
        customer_address: Resolved customer address or ``""``.
        employee_name: Resolved employee full name or the placeholder label.
    """

    order: Order
    lines: Tuple[PricedLine, ...]
    total_amount: float
    status: str
    payment: Optional[Payment] = None
    customer_name: str = UNKNOWN_LABEL
    customer_address: str = ""
    employee_name: str = UNKNOWN_LABEL

    @property
    def id(self) -> str:
        return self.order.id

    @property
    def order_date(self) -> date:
        return self.order.order_date

    @property
    def customer_ref(self) -> Optional[str]:
        return self.order.customer_ref

    @property
    def employee_ref(self) -> Optional[str]:
        return self.order.employee_ref

    @property
    def paid_amount(self) -> float:
        return self.payment.amount if self.payment is not None else 0.0

    @property
    def total_units(self) -> float:
        return sum(line.quantity for line in self.lines)


@dataclass(frozen=True)
class EntityRollup:
    """Aggregated metrics for one product or one employee across many sales.

    Attributes:
        kind: ``"product"`` or ``"employee"``.
        key: Product code or employee ref.
        label: Display name or the placeholder label.
        total_units: Sum of quantities sold.
        total_revenue: Sum of subtotals (products) or sale totals (employees).
        rank: 1-based position after the stable descending sort.
        sales_count: Number of sales (orders, not lines) involved.
        unit: Product unit (products only).
        unit_price: Price in effect at the run's as-of date (products only).
        hire_date: Hire date (employees only).
    """

    kind: str
    key: str
    label: str = UNKNOWN_LABEL
    total_units: float = 0
    total_revenue: float = 0.0
    rank: int = 0
    sales_count: int = 0
    unit: str = ""
    unit_price: float = 0.0
    hire_date: Optional[date] = None
