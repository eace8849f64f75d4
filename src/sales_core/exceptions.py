"""Domain-specific exceptions for the sales core.

This module defines custom exceptions that are part of the public API.
All exceptions inherit from SalesCoreError for easy catching.

Per-row degradations (missing price, missing payment, unknown display name)
are never raised; they are absorbed into default values. Only configuration
problems, unusable input frames and failed retrievals surface as exceptions.
"""


class SalesCoreError(Exception):
    """Base exception for all sales core errors.

    Users can catch this exception to handle any error raised by the package.
    """

    pass


class ConfigError(SalesCoreError):
    """Raised when there is a configuration error.

    This exception is raised when:
    - The backend URL or API key is missing
    - Invalid configuration values are provided (e.g. a non-numeric timeout)
    """

    pass


class DataQualityError(SalesCoreError):
    """Raised when raw input frames cannot be aggregated.

    This exception is raised when:
    - Required columns are missing from a raw table
    - A QA check marks the input as unusable
    """

    pass


class ETLError(SalesCoreError):
    """Raised when a pipeline stage fails."""

    pass


class ExtractionError(ETLError):
    """Raised when retrieving raw rows from the REST backend fails.

    This exception is raised when:
    - The connection to the backend fails or times out
    - The backend answers with a non-2xx status
    - The response body is not the expected JSON array

    An extraction failure aborts the whole aggregation run; the core never
    aggregates from an incomplete fetch.
    """

    pass
