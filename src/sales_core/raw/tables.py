"""Raw layer: batched retrieval of the back-office tables.

One aggregation run reads each table once (chunked ``in`` filters for the
lines and payments of a date-filtered run) instead of issuing one query per
sale and per line. The independent reads are issued concurrently; the first
failure aborts the run.
"""

from __future__ import annotations

import logging
from concurrent.futures import FIRST_EXCEPTION, ThreadPoolExecutor, wait
from dataclasses import dataclass
from typing import Any, Callable, Optional

import pandas as pd

from sales_core.exceptions import DataQualityError
from sales_core.raw.client import RestClient, in_filter
from sales_core.utils import as_key

logger = logging.getLogger(__name__)

# Backend table -> columns read by the core
TABLE_COLUMNS: dict[str, list[str]] = {
    "sales": ["transno", "salesdate", "custno", "empno"],
    "salesdetail": ["transno", "prodcode", "quantity"],
    "pricehist": ["prodcode", "unitprice", "effdate"],
    "payment": ["transno", "amount", "paydate"],
    "customer": ["custno", "custname", "address"],
    "employee": ["empno", "firstname", "lastname", "hiredate"],
    "product": ["prodcode", "description", "unit"],
}

# Max transaction numbers per ``in`` filter, keeps URLs well under server limits
IN_CHUNK_SIZE = 200


def _frame(rows: list[dict[str, Any]], table: str) -> pd.DataFrame:
    columns = TABLE_COLUMNS[table]
    if not rows:
        return pd.DataFrame(columns=columns)
    df = pd.DataFrame.from_records(rows)
    # columns absent from every row come back as nulls
    for col in columns:
        if col not in df.columns:
            df[col] = None
    return df


@dataclass
class RawTables:
    """Raw rows of one run, one DataFrame per backend table.

    Column names are the backend's (``transno``, ``prodcode``, ...).
    """

    sales: pd.DataFrame
    lines: pd.DataFrame
    prices: pd.DataFrame
    payments: pd.DataFrame
    customers: pd.DataFrame
    employees: pd.DataFrame
    products: pd.DataFrame

    FIELD_TABLES = {
        "sales": "sales",
        "lines": "salesdetail",
        "prices": "pricehist",
        "payments": "payment",
        "customers": "customer",
        "employees": "employee",
        "products": "product",
    }

    @classmethod
    def from_rows(cls, **rows: list[dict[str, Any]]) -> RawTables:
        """Build RawTables from lists of row dicts keyed by field name.

        Fields that are not given become empty frames.

        Examples:
            >>> raw = RawTables.from_rows(sales=[{"transno": "T1", "salesdate": "2024-06-01"}])
            >>> len(raw.lines)
            0
        """
        unknown = set(rows) - set(cls.FIELD_TABLES)
        if unknown:
            raise ValueError(f"Unknown raw table field(s): {sorted(unknown)}")
        frames = {
            name: _frame(rows.get(name) or [], table) for name, table in cls.FIELD_TABLES.items()
        }
        return cls(**frames)

    def validate(self) -> None:
        """Check that every frame has the columns the core reads.

        Raises:
            DataQualityError: If any required column is missing.
        """
        problems = []
        for name, table in self.FIELD_TABLES.items():
            df: pd.DataFrame = getattr(self, name)
            missing = [c for c in TABLE_COLUMNS[table] if c not in df.columns]
            if missing:
                problems.append(f"{table}: {missing}")
        if problems:
            raise DataQualityError(f"Missing required columns in raw tables: {'; '.join(problems)}")


def _sales_filters(start_date: Optional[str], end_date: Optional[str]) -> dict[str, str]:
    if start_date and end_date:
        return {"and": f"(salesdate.gte.{start_date},salesdate.lte.{end_date})"}
    if start_date:
        return {"salesdate": f"gte.{start_date}"}
    if end_date:
        return {"salesdate": f"lte.{end_date}"}
    return {}


def _select_for_transnos(
    client: RestClient,
    table: str,
    transnos: Optional[list[str]],
) -> list[dict[str, Any]]:
    columns = ",".join(TABLE_COLUMNS[table])
    if transnos is None:
        return client.select(table, columns)
    rows: list[dict[str, Any]] = []
    for i in range(0, len(transnos), IN_CHUNK_SIZE):
        chunk = transnos[i : i + IN_CHUNK_SIZE]
        rows.extend(client.select(table, columns, filters={"transno": in_filter(chunk)}))
    return rows


def fetch_raw_tables(
    client: RestClient,
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
    *,
    max_workers: int = 4,
) -> RawTables:
    """Fetch every table needed for one aggregation run.

    The sales headers are read first (filtered by ``salesdate`` when a date
    range is given); the remaining tables are then read concurrently. With a
    date range, lines and payments are restricted to the selected
    transaction numbers.

    Args:
        client: REST client.
        start_date: Optional first sale date, YYYY-MM-DD (inclusive).
        end_date: Optional last sale date, YYYY-MM-DD (inclusive).
        max_workers: Number of concurrent table reads.

    Returns:
        RawTables with one DataFrame per table.

    Raises:
        ExtractionError: If any read fails. No partial result is returned.
    """
    filters = _sales_filters(start_date, end_date)
    sales_rows = client.select(
        "sales",
        ",".join(TABLE_COLUMNS["sales"]),
        filters=filters or None,
        order="salesdate.asc,transno.asc",
    )

    transnos: Optional[list[str]] = None
    if filters:
        transnos = [k for k in (as_key(r.get("transno")) for r in sales_rows) if k is not None]

    def simple(table: str) -> Callable[[], list[dict[str, Any]]]:
        return lambda: client.select(table, ",".join(TABLE_COLUMNS[table]))

    jobs: dict[str, Callable[[], list[dict[str, Any]]]] = {
        "lines": lambda: _select_for_transnos(client, "salesdetail", transnos),
        "payments": lambda: _select_for_transnos(client, "payment", transnos),
        "prices": simple("pricehist"),
        "customers": simple("customer"),
        "employees": simple("employee"),
        "products": simple("product"),
    }
    if transnos is not None and not transnos:
        logger.info("No sales between %s and %s", start_date, end_date)
        jobs["lines"] = list
        jobs["payments"] = list

    logger.info("Fetching %d raw table(s) with %d worker(s)", len(jobs) + 1, max_workers)
    with ThreadPoolExecutor(max_workers=max_workers) as pool:
        futures = {pool.submit(job): name for name, job in jobs.items()}
        done, pending = wait(futures, return_when=FIRST_EXCEPTION)
        for fut in done:
            exc = fut.exception()
            if exc is not None:
                for other in pending:
                    other.cancel()
                logger.error("Fetching %s failed: %s", futures[fut], exc)
                raise exc
        results = {name: fut.result() for fut, name in futures.items()}

    return RawTables.from_rows(sales=sales_rows, **results)
