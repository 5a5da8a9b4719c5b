"""Exception hierarchy for the GraphRAG console client."""

from __future__ import annotations


class GraphRAGConsoleError(Exception):
    """Base exception for all console client errors."""


class ValidationError(GraphRAGConsoleError):
    """Input rejected before any network call (e.g. empty text)."""


class TransportError(GraphRAGConsoleError):
    """Base for failures talking to the GraphRAG backend."""


class ApiError(TransportError):
    """Backend answered with a non-success HTTP status."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ApiConnectionError(TransportError):
    """Backend could not be reached at the configured base URL."""

    def __init__(self, base_url: str) -> None:
        super().__init__(
            f"Cannot connect to API server. Make sure the GraphRAG API is running on {base_url}"
        )
        self.base_url = base_url


class ApiTimeoutError(TransportError):
    """Backend did not answer within the configured request timeout."""

    def __init__(self, base_url: str, timeout: float | None) -> None:
        super().__init__(
            f"The GraphRAG API at {base_url} did not respond within {timeout} seconds"
        )
        self.base_url = base_url
        self.timeout = timeout


class ResponseParsingError(TransportError):
    """Backend response was not JSON or did not have the expected shape."""


class RefreshError(GraphRAGConsoleError):
    """Pulling a stats or cost snapshot failed."""

    def __init__(self, panel: str, cause: Exception) -> None:
        super().__init__(f"Failed to refresh {panel}: {cause}")
        self.panel = panel
        self.cause = cause
