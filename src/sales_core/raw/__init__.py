"""Raw layer: retrieval of the back-office tables from the REST backend.

Example:
    >>> from sales_core.config import BackendConfig
    >>> from sales_core.raw import RestClient, fetch_raw_tables
    >>>
    >>> client = RestClient(BackendConfig.from_env())
    >>> raw = fetch_raw_tables(client, "2024-01-01", "2024-12-31")
    >>> raw.sales.head()
"""

from sales_core.raw.client import RestClient, make_session
from sales_core.raw.tables import TABLE_COLUMNS, RawTables, fetch_raw_tables

__all__ = ["TABLE_COLUMNS", "RawTables", "RestClient", "fetch_raw_tables", "make_session"]
