# liveweb/exceptions.py
"""
Shared exception classes used across the live-web fetcher.

Fetch outcomes are returned as values (see liveweb.fetch.outcome); these
exceptions back the raising-style API and the decoder/pool contracts.
"""

from __future__ import annotations


class LiveWebError(Exception):
    """Base class for live-web fetch failures."""

    def __init__(self, message: str, url: str | None = None) -> None:
        super().__init__(message)
        self.url = url


class ResourceNotAvailableError(LiveWebError):
    """
    Raised by a container decoder when the record is missing or malformed.

    Examples:
        - empty or truncated record stream
        - header line that is not an ARC record header
        - inner status line without a numeric code
    """

    pass


class LiveDocumentNotAvailableError(LiveWebError):
    """
    The live document does not exist or could not be retrieved upstream.

    Terminal for the URL; callers should not retry it.
    """

    pass


class LiveWebCacheUnavailableError(LiveWebError):
    """
    The live-fetch subsystem itself is unavailable.

    Examples:
        - connection refused / connect timeout / socket timeout
        - non-200 status from the live-fetch endpoint
    """

    pass


class PoolTimeoutError(LiveWebError, TimeoutError):
    """Raised when no pooled connection slot frees up within the connect timeout."""

    pass


__all__ = [
    "LiveWebError",
    "ResourceNotAvailableError",
    "LiveDocumentNotAvailableError",
    "LiveWebCacheUnavailableError",
    "PoolTimeoutError",
]
