"""Configuration for the sales core.

This module provides the backend connection settings used by the raw layer
and the filesystem paths used by report exports.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import date
from pathlib import Path

from sales_core.exceptions import ConfigError

# Label used wherever a customer, employee or product cannot be resolved
UNKNOWN_LABEL = "Unknown"

DEFAULT_TIMEOUT = 60.0
DEFAULT_RETRIES = 3
DEFAULT_PAGE_SIZE = 1000


@dataclass
class BackendConfig:
    """Connection settings for the hosted REST backend.

    Attributes:
        base_url: Project URL, e.g. ``https://xyz.supabase.co``. The REST
            endpoint is ``<base_url>/rest/v1``.
        api_key: API key sent as both ``apikey`` and bearer token.
        timeout: Default timeout in seconds for every request.
        retries: Number of retry attempts on connection errors and
            429/5xx responses.
        page_size: Rows requested per page when reading a table.
        schema: Database schema exposed by the REST layer.
    """

    base_url: str
    api_key: str
    timeout: float = DEFAULT_TIMEOUT
    retries: int = DEFAULT_RETRIES
    page_size: int = DEFAULT_PAGE_SIZE
    schema: str = "public"

    def __post_init__(self) -> None:
        if not self.base_url:
            raise ConfigError("Backend base_url must be set.")
        if not self.api_key:
            raise ConfigError("Backend api_key must be set.")
        if self.timeout <= 0:
            raise ConfigError(f"timeout must be positive, got {self.timeout}")
        if self.retries < 0:
            raise ConfigError(f"retries must be >= 0, got {self.retries}")
        if self.page_size <= 0:
            raise ConfigError(f"page_size must be positive, got {self.page_size}")
        self.base_url = self.base_url.rstrip("/")

    @property
    def rest_url(self) -> str:
        """Root URL of the auto-generated REST API."""
        return f"{self.base_url}/rest/v1"

    @classmethod
    def from_env(cls) -> BackendConfig:
        """Build the configuration from environment variables.

        Reads:
            SALES_API_URL: Backend project URL (required).
            SALES_API_KEY: Backend API key (required).
            SALES_TIMEOUT: Request timeout in seconds (default: 60).
            SALES_RETRIES: Retry attempts (default: 3).

        Raises:
            ConfigError: If a required variable is missing or a numeric
                variable cannot be parsed.

        Examples:
            >>> os.environ["SALES_API_URL"] = "https://example.supabase.co"
            >>> os.environ["SALES_API_KEY"] = "secret"
            >>> BackendConfig.from_env().rest_url
            'https://example.supabase.co/rest/v1'
        """
        base_url = os.environ.get("SALES_API_URL", "").strip().strip('"').strip("'")
        api_key = os.environ.get("SALES_API_KEY", "").strip().strip('"').strip("'")
        if not base_url:
            raise ConfigError("SALES_API_URL environment variable must be set.")
        if not api_key:
            raise ConfigError("SALES_API_KEY environment variable must be set.")

        try:
            timeout = float(os.environ.get("SALES_TIMEOUT", DEFAULT_TIMEOUT))
            retries = int(os.environ.get("SALES_RETRIES", DEFAULT_RETRIES))
        except ValueError as e:
            raise ConfigError(f"Invalid numeric backend setting: {e}") from e

        return cls(base_url=base_url, api_key=api_key, timeout=timeout, retries=retries)


@dataclass
class ReportPaths:
    """Filesystem paths used when exporting reports.

    Attributes:
        data_root: Root directory for generated files.

    Directory Structure:
        data_root/
        └── exports/    # CSV report exports, one file per report and day
    """

    data_root: Path

    @classmethod
    def from_root(cls, data_root: str | Path) -> ReportPaths:
        """Create ReportPaths from a root directory.

        Examples:
            >>> ReportPaths.from_root("data").exports
            PosixPath('data/exports')
        """
        if isinstance(data_root, str):
            data_root = Path(data_root)
        return cls(data_root=data_root)

    @property
    def exports(self) -> Path:
        """Directory for report exports."""
        return self.data_root / "exports"

    def export_path(self, name: str, on: date | None = None) -> Path:
        """Path of the export file for report ``name`` generated on ``on``."""
        on = on or date.today()
        return self.exports / f"{name}-{on.isoformat()}.csv"

    def ensure_dirs(self) -> None:
        """Create all directories in the data structure."""
        self.exports.mkdir(parents=True, exist_ok=True)
