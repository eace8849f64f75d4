"""QA module for data quality assurance.

This module provides quality checks for the raw back-office tables.

Example:
    >>> from sales_core.raw import RestClient, fetch_raw_tables
    >>> from sales_core.config import BackendConfig
    >>> from sales_core.qa import run_sales_qa
    >>>
    >>> client = RestClient(BackendConfig.from_env())
    >>> raw = fetch_raw_tables(client, "2024-01-01", "2024-01-31")
    >>>
    >>> result = run_sales_qa(raw)
    >>> print(result.summary)
    >>> for issue in result.errors:
    ...     print(issue.message)

"""

from sales_core.qa.api import SalesQAResult, run_sales_qa
from sales_core.qa.checks import QAResult

__all__ = ["QAResult", "SalesQAResult", "run_sales_qa"]
