"""Raw layer: HTTP access to the back-office REST API.

The back office keeps its tables in a hosted PostgreSQL database whose REST
layer (PostgREST) is generated from the schema. This module reads whole
tables, or filtered slices of them, as lists of JSON rows.

Environment:
  SALES_API_URL: Project URL, e.g. https://xyz.supabase.co
  SALES_API_KEY: API key (anon or service role)
  SALES_TIMEOUT=60   # seconds
  SALES_RETRIES=3

Notes:
- Requests go through a Session with urllib3 Retry on connection errors and
  429/5xx responses, and a default timeout. Each thread uses its own Session.
- Tables are paged with limit/offset so that the server's max-rows setting
  never truncates a result silently.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Iterable, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from sales_core.config import DEFAULT_RETRIES, DEFAULT_TIMEOUT, BackendConfig
from sales_core.exceptions import ExtractionError

logger = logging.getLogger(__name__)


def make_session(
    api_key: str,
    timeout: float = DEFAULT_TIMEOUT,
    retries: int = DEFAULT_RETRIES,
) -> requests.Session:
    """Create a requests Session with auth headers, retry logic and default timeout.

    Configures the session with:
    - ``apikey`` and ``Authorization: Bearer`` headers
    - Retry adapter for HTTP/HTTPS with exponential backoff
    - Default timeout for all requests
    - Retries on 429, 500, 502, 503, 504 status codes

    Args:
        api_key: Backend API key.
        timeout: Default timeout in seconds for all requests.
        retries: Number of retry attempts.

    Returns:
        Configured requests.Session object.
    """
    s = requests.Session()
    s.headers.update(
        {
            "apikey": api_key,
            "Authorization": f"Bearer {api_key}",
            "Accept": "application/json",
        }
    )
    retry = Retry(
        total=retries,
        connect=retries,
        read=retries,
        status=retries,
        backoff_factor=0.8,  # 0.8, 1.6, 3.2, ...
        status_forcelist=(429, 500, 502, 503, 504),
        allowed_methods=frozenset({"GET", "HEAD", "OPTIONS"}),
        raise_on_status=False,
    )
    adapter = HTTPAdapter(max_retries=retry)
    s.mount("http://", adapter)
    s.mount("https://", adapter)
    # Default timeouts via a wrapper
    orig_request = s.request

    def timed_request(method: str, url: str, **kwargs: Any) -> requests.Response:
        kwargs.setdefault("timeout", timeout)
        return orig_request(method, url, **kwargs)

    s.request = timed_request  # type: ignore[method-assign,assignment]
    return s


def ensure_ok(resp: requests.Response, msg: str) -> None:
    """Check if HTTP response is successful, raise ExtractionError if not.

    Raises:
        ExtractionError: If response status code is not in 200-299 range.
    """
    if not (200 <= resp.status_code < 300):
        raise ExtractionError(f"{msg}. HTTP {resp.status_code}: {resp.text[:400]}")


def in_filter(values: Iterable[Any]) -> str:
    """Build a PostgREST ``in`` filter value.

    Examples:
        >>> in_filter(["T-1", "T,2"])
        'in.("T-1","T,2")'
    """
    quoted = []
    for v in values:
        text = str(v).replace("\\", "\\\\").replace('"', '\\"')
        quoted.append(f'"{text}"')
    return f"in.({','.join(quoted)})"


class RestClient:
    """Read-only client for the back-office REST API.

    Without an explicit ``session``, each thread gets its own Session, so
    ``fetch_raw_tables`` workers never share connection state.

    Example:
        >>> client = RestClient(BackendConfig.from_env())
        >>> rows = client.select("product", "prodcode,description,unit")
    """

    def __init__(
        self,
        config: BackendConfig,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.config = config
        self._shared_session = session
        self._local = threading.local()
        if session is not None:
            self._apply_schema(session)

    def _apply_schema(self, session: requests.Session) -> None:
        if self.config.schema != "public":
            session.headers["Accept-Profile"] = self.config.schema

    @property
    def session(self) -> requests.Session:
        """The injected session, or the calling thread's own session."""
        if self._shared_session is not None:
            return self._shared_session
        session = getattr(self._local, "session", None)
        if session is None:
            session = make_session(self.config.api_key, self.config.timeout, self.config.retries)
            self._apply_schema(session)
            self._local.session = session
        return session

    def select(
        self,
        table: str,
        columns: str = "*",
        filters: Optional[dict[str, str]] = None,
        order: Optional[str] = None,
    ) -> list[dict[str, Any]]:
        """Read all rows of ``table`` matching ``filters``.

        Args:
            table: Table name, e.g. ``"sales"``.
            columns: PostgREST select list, e.g. ``"transno,salesdate"``.
            filters: PostgREST filters, e.g. ``{"salesdate": "gte.2024-01-01"}``.
            order: Optional PostgREST order clause, e.g. ``"effdate.asc"``.

        Returns:
            List of row dictionaries, in server order, across all pages.

        Raises:
            ExtractionError: On connection failure, non-2xx status or a body
                that is not a JSON array.
        """
        url = f"{self.config.rest_url}/{table}"
        page_size = self.config.page_size
        rows: list[dict[str, Any]] = []
        offset = 0
        while True:
            params: dict[str, Any] = {"select": columns, "limit": page_size, "offset": offset}
            if filters:
                params.update(filters)
            if order:
                params["order"] = order

            try:
                resp = self.session.get(url, params=params)
            except requests.RequestException as e:
                raise ExtractionError(f"Request to {table} failed: {e}") from e

            ensure_ok(resp, f"Reading {table} failed")
            try:
                page = resp.json()
            except ValueError as e:
                raise ExtractionError(f"Response for {table} is not valid JSON: {e}") from e
            if not isinstance(page, list):
                raise ExtractionError(
                    f"Unexpected response for {table}: expected a JSON array, "
                    f"got {type(page).__name__}"
                )

            rows.extend(page)
            logger.debug("Read %d row(s) from %s at offset %d", len(page), table, offset)
            if len(page) < page_size:
                break
            offset += page_size

        logger.info("Fetched %d row(s) from %s", len(rows), table)
        return rows
