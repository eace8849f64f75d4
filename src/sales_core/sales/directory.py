"""Display-name lookups for customers, employees and products.

A lookup that cannot be resolved returns the placeholder label instead of
failing, so a sale referencing a deleted customer still shows up in reports.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, Optional

from sales_core.config import UNKNOWN_LABEL
from sales_core.types import Customer, Employee, Product

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Directory:
    """Read-only name directory for one aggregation run."""

    customers: dict[str, Customer] = field(default_factory=dict)
    employees: dict[str, Employee] = field(default_factory=dict)
    products: dict[str, Product] = field(default_factory=dict)

    @classmethod
    def build(
        cls,
        customers: Iterable[Customer] = (),
        employees: Iterable[Employee] = (),
        products: Iterable[Product] = (),
    ) -> Directory:
        return cls(
            customers={c.ref: c for c in customers},
            employees={e.ref: e for e in employees},
            products={p.code: p for p in products},
        )

    def customer_name(self, ref: Optional[str]) -> str:
        customer = self.customers.get(ref) if ref is not None else None
        if customer is None or not customer.name:
            logger.debug("Unresolved customer %r", ref)
            return UNKNOWN_LABEL
        return customer.name

    def customer_address(self, ref: Optional[str]) -> str:
        customer = self.customers.get(ref) if ref is not None else None
        return customer.address if customer is not None else ""

    def employee_name(self, ref: Optional[str]) -> str:
        employee = self.employees.get(ref) if ref is not None else None
        if employee is None or not employee.full_name:
            logger.debug("Unresolved employee %r", ref)
            return UNKNOWN_LABEL
        return employee.full_name

    def product_label(self, code: Optional[str]) -> str:
        product = self.products.get(code) if code is not None else None
        if product is None or not product.description:
            logger.debug("Unresolved product %r", code)
            return UNKNOWN_LABEL
        return product.description

    def product_unit(self, code: Optional[str]) -> str:
        product = self.products.get(code) if code is not None else None
        return product.unit if product is not None else ""
