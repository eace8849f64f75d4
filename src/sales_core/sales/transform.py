"""Convert raw backend frames into domain records.

Raw frames use the backend's column names; this module maps them onto the
dataclasses in ``sales_core.types``. Values are coerced the way the back
office displays them: a missing quantity or amount counts as 0, a missing
name as empty (later shown as "Unknown").
"""

from __future__ import annotations

import logging
from typing import Any

import pandas as pd

from sales_core.raw.tables import RawTables
from sales_core.sales.directory import Directory
from sales_core.sales.prices import PriceResolver
from sales_core.types import Customer, Employee, Order, OrderLine, Payment, Product
from sales_core.utils import as_key, to_optional_date

logger = logging.getLogger(__name__)

PRICE_RENAMES = {"prodcode": "product_code", "unitprice": "unit_price", "effdate": "effective_date"}


def _text(value: Any) -> str:
    if value is None or pd.isna(value):
        return ""
    return str(value).strip()


def _number(value: float) -> float:
    value = float(value)
    return int(value) if value.is_integer() else value


def orders_from_frames(sales: pd.DataFrame, lines: pd.DataFrame) -> list[Order]:
    """Build orders from the ``sales`` and ``salesdetail`` frames.

    Orders keep the row order of ``sales``; each order's lines keep the row
    order of ``lines``. Lines whose transaction is not among the sales are
    dropped here (QA reports them). Sales without a transaction number or
    date cannot be priced and are skipped with a warning; an unparseable
    date counts as missing.
    """
    quantities = pd.to_numeric(lines["quantity"], errors="coerce").fillna(0)

    by_order: dict[str, list[OrderLine]] = {}
    for transno, prodcode, qty in zip(lines["transno"], lines["prodcode"], quantities):
        order_id = as_key(transno)
        code = as_key(prodcode)
        if order_id is None or code is None:
            continue
        by_order.setdefault(order_id, []).append(
            OrderLine(product_code=code, quantity=_number(qty), order_id=order_id)
        )

    orders: list[Order] = []
    skipped = 0
    for transno, salesdate, custno, empno in zip(
        sales["transno"], sales["salesdate"], sales["custno"], sales["empno"]
    ):
        order_id = as_key(transno)
        order_date = to_optional_date(salesdate)
        if order_id is None or order_date is None:
            skipped += 1
            continue
        orders.append(
            Order(
                id=order_id,
                customer_ref=as_key(custno),
                employee_ref=as_key(empno),
                order_date=order_date,
                lines=tuple(by_order.get(order_id, ())),
            )
        )
    if skipped:
        logger.warning("Skipped %d sale row(s) without transaction number or valid date", skipped)
    logger.debug("Built %d order(s) from %d line row(s)", len(orders), len(lines))
    return orders


def payments_from_frame(payments: pd.DataFrame) -> list[Payment]:
    amounts = pd.to_numeric(payments["amount"], errors="coerce").fillna(0.0)
    result = []
    for transno, amount, paydate in zip(payments["transno"], amounts, payments["paydate"]):
        order_id = as_key(transno)
        if order_id is None:
            continue
        result.append(
            Payment(order_id=order_id, amount=float(amount), payment_date=to_optional_date(paydate))
        )
    return result


def directory_from_frames(
    customers: pd.DataFrame,
    employees: pd.DataFrame,
    products: pd.DataFrame,
) -> Directory:
    """Build the name directory from the customer, employee and product tables."""
    customer_records = [
        Customer(ref=key, name=_text(name), address=_text(address))
        for key, name, address in zip(
            map(as_key, customers["custno"]), customers["custname"], customers["address"]
        )
        if key is not None
    ]
    employee_records = [
        Employee(
            ref=key,
            first_name=_text(first),
            last_name=_text(last),
            hire_date=to_optional_date(hired),
        )
        for key, first, last, hired in zip(
            map(as_key, employees["empno"]),
            employees["firstname"],
            employees["lastname"],
            employees["hiredate"],
        )
        if key is not None
    ]
    product_records = [
        Product(code=key, description=_text(desc), unit=_text(unit))
        for key, desc, unit in zip(
            map(as_key, products["prodcode"]), products["description"], products["unit"]
        )
        if key is not None
    ]
    return Directory.build(customer_records, employee_records, product_records)


def resolver_from_frame(prices: pd.DataFrame) -> PriceResolver:
    """Build the price resolver from the ``pricehist`` frame."""
    return PriceResolver.from_frame(prices.rename(columns=PRICE_RENAMES))


def transform_raw(raw: RawTables) -> tuple[list[Order], PriceResolver, list[Payment], Directory]:
    """Validate raw tables and convert them into the inputs of a collection run.

    Raises:
        DataQualityError: If a raw frame misses a required column.
    """
    raw.validate()
    return (
        orders_from_frames(raw.sales, raw.lines),
        resolver_from_frame(raw.prices),
        payments_from_frame(raw.payments),
        directory_from_frames(raw.customers, raw.employees, raw.products),
    )
