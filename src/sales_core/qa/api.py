"""Public API for the sales QA pipeline.

This module runs the data-quality checks on the raw tables of a run in
memory, without reading or writing any files.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from sales_core.qa.checks import (
    ERROR,
    WARN,
    QAResult,
    check_duplicate_payments,
    check_duplicate_price_dates,
    check_orphan_lines,
    check_orphan_payments,
    check_quantities,
)
from sales_core.raw.tables import RawTables

logger = logging.getLogger(__name__)


@dataclass
class SalesQAResult:
    """Result of the sales QA pipeline.

    Attributes:
        summary: Dictionary with row counts and issue counts.
        results: Individual check results, errors and warnings.
    """

    summary: dict
    results: list[QAResult] = field(default_factory=list)

    @property
    def errors(self) -> list[QAResult]:
        return [r for r in self.results if r.level == ERROR]

    @property
    def warnings(self) -> list[QAResult]:
        return [r for r in self.results if r.level == WARN]

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)


def run_sales_qa(raw: RawTables) -> SalesQAResult:
    """Run the data-quality checks on the raw tables of a run.

    This function:
    - does NOT read or write any files,
    - does NOT print (logging only).

    Args:
        raw: Raw tables, typically the output of ``fetch_raw_tables``.

    Returns:
        SalesQAResult with a summary and one QAResult per issue found.

    Raises:
        DataQualityError: If a raw frame misses a required column.

    Examples:
        >>> raw = RawTables.from_rows(
        ...     sales=[{"transno": "T1", "salesdate": "2024-06-01"}],
        ...     payments=[{"transno": "T1", "amount": 5.0}, {"transno": "T1", "amount": 5.0}],
        ... )
        >>> run_sales_qa(raw).has_errors
        True
    """
    raw.validate()
    logger.info(
        "Running QA checks on %d sale(s), %d line(s), %d payment(s)",
        len(raw.sales),
        len(raw.lines),
        len(raw.payments),
    )

    results: list[QAResult] = []
    results.extend(check_quantities(raw.lines))
    results.extend(check_duplicate_price_dates(raw.prices))
    results.extend(check_orphan_lines(raw.sales, raw.lines))
    results.extend(check_orphan_payments(raw.sales, raw.payments))
    results.extend(check_duplicate_payments(raw.payments))

    for r in results:
        log = logger.error if r.level == ERROR else logger.warning
        log("QA %s: %s", r.level, r.message)

    summary = {
        "total_sales": len(raw.sales),
        "total_lines": len(raw.lines),
        "total_payments": len(raw.payments),
        "total_prices": len(raw.prices),
        "error_count": sum(1 for r in results if r.level == ERROR),
        "warning_count": sum(1 for r in results if r.level == WARN),
    }
    logger.info(
        "QA complete: %d error(s), %d warning(s)",
        summary["error_count"],
        summary["warning_count"],
    )
    return SalesQAResult(summary=summary, results=results)
