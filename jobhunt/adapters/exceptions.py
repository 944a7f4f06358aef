"""Custom exceptions for job source adapters."""


class AdapterError(Exception):
    """Base exception for all adapter errors.

    Anything derived from this is caught at the adapter boundary: the
    identifier (or the whole source) is skipped and the search continues.
    """


class AdapterHTTPError(AdapterError):
    """HTTP request failed with an error status or transport failure.

    status_code is 0 when no response was received (connection refused,
    DNS failure, ...).
    """

    def __init__(self, message: str, status_code: int, url: str) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.url = url


class AdapterTimeoutError(AdapterError):
    """HTTP request did not complete within the configured timeout."""

    def __init__(self, message: str, url: str) -> None:
        super().__init__(message)
        self.url = url


class AdapterResponseError(AdapterError):
    """Response body could not be parsed or had an unexpected shape."""


class AdapterConfigurationError(AdapterError):
    """Adapter was constructed with invalid settings."""
