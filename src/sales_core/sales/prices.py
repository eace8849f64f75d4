"""Price resolution against the price history table.

The resolver is built once per aggregation run from the bulk price table,
replacing one price query per order line with in-memory lookups.
"""

from __future__ import annotations

import logging
from bisect import bisect_right
from datetime import date
from typing import Any, Iterable, Optional

import pandas as pd

from sales_core.exceptions import DataQualityError
from sales_core.types import PricePoint
from sales_core.utils import as_key, to_date, to_optional_date

logger = logging.getLogger(__name__)

PRICE_COLUMNS = ["product_code", "unit_price", "effective_date"]


class PriceResolver:
    """Resolve the unit price of a product in effect on a given date.

    For a product and an as-of date, the resolver picks the price point with
    the latest ``effective_date`` that is not after the as-of date. When the
    product has no such point the price is ``0.0``; orders referencing
    not-yet-priced products still aggregate.

    Price points sharing an effective date are kept as given; the one that
    appears later in the input wins.

    Lookups are memoized per ``(product_code, as_of)`` for the lifetime of
    the resolver, which is one aggregation run. Build a new resolver from
    freshly fetched rows for the next run.

    Example:
        >>> resolver = PriceResolver([
        ...     PricePoint("A", 10.0, date(2024, 1, 1)),
        ...     PricePoint("A", 12.5, date(2024, 7, 1)),
        ... ])
        >>> resolver.resolve("A", date(2024, 6, 1))
        10.0
        >>> resolver.resolve("A", date(2024, 7, 1))
        12.5
        >>> resolver.resolve("A", date(2023, 12, 31))
        0.0
    """

    def __init__(self, price_points: Iterable[PricePoint] = ()) -> None:
        history: dict[str, list[PricePoint]] = {}
        for point in price_points:
            history.setdefault(point.product_code, []).append(point)

        self._points: dict[str, list[PricePoint]] = {}
        self._dates: dict[str, list[date]] = {}
        for code, points in history.items():
            # sort is stable, so same-date points keep their input order
            ordered = sorted(points, key=lambda p: to_date(p.effective_date))
            self._points[code] = ordered
            self._dates[code] = [to_date(p.effective_date) for p in ordered]

        self._cache: dict[tuple[str, date], float] = {}
        logger.debug(
            "Price resolver built with %d product(s), %d price point(s)",
            len(self._points),
            sum(len(p) for p in self._points.values()),
        )

    @classmethod
    def from_frame(cls, df: pd.DataFrame) -> PriceResolver:
        """Build a resolver from a price history DataFrame.

        Args:
            df: DataFrame with columns ``product_code``, ``unit_price`` and
                ``effective_date``. Missing prices are read as ``0``.

        Raises:
            DataQualityError: If a required column is missing.
        """
        missing = [c for c in PRICE_COLUMNS if c not in df.columns]
        if missing:
            raise DataQualityError(
                f"Missing required columns in price history: {missing}. Required: {PRICE_COLUMNS}"
            )
        return cls(price_points_from_frame(df))

    def __len__(self) -> int:
        return len(self._points)

    def __contains__(self, product_code: object) -> bool:
        return product_code in self._points

    def effective_point(self, product_code: str, as_of: Any) -> Optional[PricePoint]:
        """Return the price point in effect for the product on ``as_of``, if any."""
        dates = self._dates.get(product_code)
        if not dates:
            return None
        idx = bisect_right(dates, to_date(as_of))
        if idx == 0:
            return None
        return self._points[product_code][idx - 1]

    def resolve(self, product_code: str, as_of: Any) -> float:
        """Return the unit price in effect for the product on ``as_of``.

        Args:
            product_code: Product code to look up.
            as_of: Date (or date-like value) to resolve against, usually the
                order date.

        Returns:
            The unit price, or ``0.0`` if no price was effective yet.
        """
        as_of = to_date(as_of)
        key = (product_code, as_of)
        cached = self._cache.get(key)
        if cached is not None:
            return cached

        point = self.effective_point(product_code, as_of)
        if point is None:
            logger.debug("No price for %s on or before %s, using 0", product_code, as_of)
            price = 0.0
        else:
            price = point.unit_price
        self._cache[key] = price
        return price


def price_points_from_frame(df: pd.DataFrame) -> list[PricePoint]:
    """Convert a price history DataFrame into PricePoint records.

    Rows without a product code or a parseable effective date cannot be
    placed on the timeline and are skipped with a warning.
    """
    prices = pd.to_numeric(df["unit_price"], errors="coerce").fillna(0.0)
    points: list[PricePoint] = []
    skipped = 0
    for code, price, eff in zip(df["product_code"], prices, df["effective_date"]):
        key = as_key(code)
        effective = to_optional_date(eff)
        if key is None or effective is None:
            skipped += 1
            continue
        points.append(PricePoint(product_code=key, unit_price=float(price), effective_date=effective))
    if skipped:
        logger.warning("Skipped %d price row(s) without product code or valid effective date", skipped)
    return points
