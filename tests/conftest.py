"""Shared fixtures: in-memory backend rows, a fake table client and a fake HTTP session.

Sample data (prices: A=10 from 2024-01-01, A=12 from 2024-02-15, B=5 from 2024-01-01;
product C is never priced):

    T1 2024-01-15 C1 E1  A x2, B x1  -> 25.0, paid 25.0 -> completed
    T2 2024-02-10 C2 E2  A x3        -> 30.0, paid 20.0 -> pending
    T3 2024-02-20 C1 E1  B x2        -> 10.0, no payment -> pending
    T4 2024-03-05 C9 --  C x1        ->  0.0, paid 0.0  -> completed
"""

from __future__ import annotations

import re
import threading
from typing import Any, Optional

import pytest

from sales_core.exceptions import ExtractionError
from sales_core.raw.tables import RawTables


def sample_rows() -> dict[str, list[dict[str, Any]]]:
    """Backend rows keyed by table name."""
    return {
        "sales": [
            {"transno": "T1", "salesdate": "2024-01-15", "custno": "C1", "empno": "E1"},
            {"transno": "T2", "salesdate": "2024-02-10", "custno": "C2", "empno": "E2"},
            {"transno": "T3", "salesdate": "2024-02-20", "custno": "C1", "empno": "E1"},
            {"transno": "T4", "salesdate": "2024-03-05", "custno": "C9", "empno": None},
        ],
        "salesdetail": [
            {"transno": "T1", "prodcode": "A", "quantity": 2},
            {"transno": "T1", "prodcode": "B", "quantity": 1},
            {"transno": "T2", "prodcode": "A", "quantity": 3},
            {"transno": "T3", "prodcode": "B", "quantity": 2},
            {"transno": "T4", "prodcode": "C", "quantity": 1},
        ],
        "pricehist": [
            {"prodcode": "A", "unitprice": 10.0, "effdate": "2024-01-01"},
            {"prodcode": "A", "unitprice": 12.0, "effdate": "2024-02-15"},
            {"prodcode": "B", "unitprice": 5.0, "effdate": "2024-01-01"},
        ],
        "payment": [
            {"transno": "T1", "amount": 25.0, "paydate": "2024-01-15"},
            {"transno": "T2", "amount": 20.0, "paydate": "2024-02-11"},
            {"transno": "T4", "amount": 0.0, "paydate": "2024-03-05"},
        ],
        "customer": [
            {"custno": "C1", "custname": "Ana Cruz", "address": "12 Main St"},
            {"custno": "C2", "custname": "Ben Ong", "address": "4 Pier Rd"},
        ],
        "employee": [
            {"empno": "E1", "firstname": "Maria", "lastname": "Santos", "hiredate": "2020-03-01"},
            {"empno": "E2", "firstname": "Jose", "lastname": "Reyes", "hiredate": None},
            {"empno": "E3", "firstname": "Lia", "lastname": "Tan", "hiredate": "2023-01-09"},
        ],
        "product": [
            {"prodcode": "A", "description": "Coffee", "unit": "pc"},
            {"prodcode": "B", "description": "Tea", "unit": "box"},
            {"prodcode": "C", "description": "Cake", "unit": "pc"},
            {"prodcode": "D", "description": "Juice", "unit": "btl"},
        ],
    }


def _in_values(value: str) -> list[str]:
    return [v.replace('\\"', '"') for v in re.findall(r'"((?:[^"\\]|\\.)*)"', value)]


class FakeClient:
    """Stands in for RestClient: serves rows from memory and records every call."""

    def __init__(self, rows: dict[str, list[dict[str, Any]]], fail_on: tuple[str, ...] = ()):
        self.rows = rows
        self.fail_on = set(fail_on)
        self.calls: list[tuple[str, Optional[dict[str, str]], Optional[str]]] = []
        self._lock = threading.Lock()

    def tables_called(self) -> list[str]:
        return [table for table, _, _ in self.calls]

    def select(
        self,
        table: str,
        columns: str = "*",
        filters: Optional[dict[str, str]] = None,
        order: Optional[str] = None,
    ) -> list[dict[str, Any]]:
        with self._lock:
            self.calls.append((table, filters, order))
        if table in self.fail_on:
            raise ExtractionError(f"Reading {table} failed. HTTP 503: unavailable")
        rows = list(self.rows.get(table, []))
        if filters and "transno" in filters:
            wanted = set(_in_values(filters["transno"]))
            rows = [r for r in rows if str(r["transno"]) in wanted]
        return rows


class FakeResponse:
    def __init__(self, payload: Any = None, status_code: int = 200, text: Optional[str] = None):
        self._payload = payload
        self.status_code = status_code
        self.text = text if text is not None else repr(payload)

    def json(self) -> Any:
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload


class FakeSession:
    """Minimal requests.Session replacement returning queued responses."""

    def __init__(self, responses: list[Any]):
        self.responses = list(responses)
        self.headers: dict[str, str] = {}
        self.requests: list[tuple[str, dict[str, Any]]] = []

    def get(self, url: str, params: Optional[dict[str, Any]] = None, **kwargs: Any) -> FakeResponse:
        self.requests.append((url, dict(params or {})))
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


@pytest.fixture
def rows() -> dict[str, list[dict[str, Any]]]:
    return sample_rows()


@pytest.fixture
def fake_client(rows) -> FakeClient:
    return FakeClient(rows)


@pytest.fixture
def raw_tables(rows) -> RawTables:
    return RawTables.from_rows(
        sales=rows["sales"],
        lines=rows["salesdetail"],
        prices=rows["pricehist"],
        payments=rows["payment"],
        customers=rows["customer"],
        employees=rows["employee"],
        products=rows["product"],
    )
