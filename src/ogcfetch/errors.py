"""Custom exception hierarchy for ogcfetch."""

from pathlib import Path
from typing import Optional, Union


class OgcFetchError(Exception):
    """Base exception for the ogcfetch library."""

    retryable = False

    def __init__(self, message: str, cause: Optional[Exception] = None):
        super().__init__(message)
        self.cause = cause


class ValidationError(OgcFetchError, ValueError):
    """Query or configuration input rejected before any request is sent."""
    pass


class ConfigurationError(OgcFetchError, ValueError):
    """Configuration and setup errors."""
    pass


class TransportError(OgcFetchError):
    """No response was received (connection, DNS, TLS or timeout failure)."""

    retryable = True


class RequestFailed(OgcFetchError):
    """The server answered with a non-success HTTP status."""

    def __init__(
        self,
        status: int,
        message: Optional[str] = None,
        url: Optional[str] = None,
        cause: Optional[Exception] = None,
    ):
        super().__init__(message or f"Request failed with status {status}", cause)
        self.status = status
        self.url = url

    @property
    def retryable(self) -> bool:  # type: ignore[override]
        return self.status >= 500


class DecodeFailed(OgcFetchError):
    """The response body could not be decoded into the expected result."""
    pass


class IoError(OgcFetchError):
    """Local file creation or write failure while persisting a tile."""

    def __init__(
        self,
        message: str,
        path: Optional[Union[str, Path]] = None,
        cause: Optional[Exception] = None,
    ):
        super().__init__(message, cause)
        self.path = Path(path) if path is not None else None
