"""Render-target-agnostic table formatting.

A report is described by a list of columns. Each column has a header and an
accessor: either a field name (dotted paths reach into nested records or
mappings) or a function of the row. The formatter never inspects what kind
of row it receives, so one column spec can mix row variants, e.g. a
"Month/ID" column showing a month label for summary rows and a transaction
number for sale rows.

The resulting ``TableData`` drives any renderer: a chart, a console table,
a CSV export or a PDF.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Callable, Iterable, Optional, Sequence, Union

import numpy as np
import pandas as pd

logger = logging.getLogger(__name__)

Cell = Union[str, int, float]
Accessor = Union[str, Callable[[Any], Any]]


def read_field(row: Any, path: str) -> Any:
    """Read a possibly dotted field from a record or mapping.

    Missing attributes or keys anywhere along the path yield None.

    Examples:
        >>> read_field({"customer": {"name": "Ana"}}, "customer.name")
        'Ana'
        >>> read_field({"customer": None}, "customer.name") is None
        True
    """
    value = row
    for part in path.split("."):
        if value is None:
            return None
        if isinstance(value, Mapping):
            value = value.get(part)
        else:
            value = getattr(value, part, None)
    return value


def to_cell(value: Any) -> Cell:
    """Normalize a value into a table cell.

    None and NaN become ``""``, dates become ISO strings, numpy scalars
    become Python numbers; strings, ints and floats pass through unchanged.
    """
    if value is None:
        return ""
    if isinstance(value, np.generic):
        value = value.item()
    if value is pd.NaT:
        return ""
    if isinstance(value, datetime):
        # midnight timestamps are plain dates read back from the backend
        if (value.hour, value.minute, value.second, value.microsecond) == (0, 0, 0, 0):
            return value.date().isoformat()
        return value.isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, bool):
        return str(value)
    if isinstance(value, float) and np.isnan(value):
        return ""
    if isinstance(value, (str, int, float)):
        return value
    return str(value)


@dataclass(frozen=True)
class Column:
    """One column of a report.

    Attributes:
        header: Column header label.
        accessor: Field name (dotted paths allowed) or a function of the row
            returning a string or number.
    """

    header: str
    accessor: Accessor

    def __post_init__(self) -> None:
        if not self.header:
            raise ValueError("Column header must not be empty")
        if not (isinstance(self.accessor, str) or callable(self.accessor)):
            raise TypeError(
                f"Column {self.header!r}: accessor must be a field name or a callable, "
                f"got {type(self.accessor).__name__}"
            )

    def value(self, row: Any) -> Cell:
        if isinstance(self.accessor, str):
            raw = read_field(row, self.accessor)
        else:
            raw = self.accessor(row)
        return to_cell(raw)


@dataclass
class TableData:
    """Headers, rows and metadata of a formatted report.

    Attributes:
        headers: Column headers, in column order.
        rows: One list of cells per input row.
        metadata: Free-form report information (title, generation date,
            date range, ...), for renderers to print above the table.
    """

    headers: list[str]
    rows: list[list[Cell]]
    metadata: dict[str, str] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.rows)

    @property
    def title(self) -> str:
        return self.metadata.get("title", "")

    def column(self, header: str) -> list[Cell]:
        """Read back all cells of one column.

        Raises:
            KeyError: If no column has this header.
        """
        try:
            idx = self.headers.index(header)
        except ValueError:
            raise KeyError(f"No column {header!r}; columns are {self.headers}") from None
        return [row[idx] for row in self.rows]

    def to_frame(self) -> pd.DataFrame:
        """Return the table as a DataFrame with the headers as columns."""
        return pd.DataFrame(self.rows, columns=self.headers)


def format_table(
    rows: Union[pd.DataFrame, Iterable[Any]],
    columns: Sequence[Column],
    *,
    title: Optional[str] = None,
    metadata: Optional[Mapping[str, Any]] = None,
) -> TableData:
    """Format rows into headers + cell rows according to a column spec.

    Args:
        rows: Records, mappings or a DataFrame (one row per record).
        columns: Column spec.
        title: Optional report title, stored in the metadata.
        metadata: Optional extra metadata; values are stringified.

    Returns:
        TableData with one row per input row, in input order.

    Raises:
        ValueError: If the column spec is empty or has duplicate headers.

    Examples:
        >>> table = format_table(
        ...     [{"code": "A", "units": 5}],
        ...     [Column("Product Code", "code"), Column("Units", lambda r: r["units"] * 2)],
        ... )
        >>> table.headers, table.rows
        (['Product Code', 'Units'], [['A', 10]])
    """
    if not columns:
        raise ValueError("At least one column is required")
    headers = [c.header for c in columns]
    duplicates = sorted({h for h in headers if headers.count(h) > 1})
    if duplicates:
        raise ValueError(f"Duplicate column headers: {duplicates}")

    if isinstance(rows, pd.DataFrame):
        rows = rows.to_dict("records")

    table_rows = [[column.value(row) for column in columns] for row in rows]

    info: dict[str, str] = {"generated": date.today().isoformat()}
    if title:
        info["title"] = title
    for key, value in (metadata or {}).items():
        info[str(key)] = str(to_cell(value))

    logger.debug("Formatted %d row(s) into %d column(s)", len(table_rows), len(headers))
    return TableData(headers=headers, rows=table_rows, metadata=info)
