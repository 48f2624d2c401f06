# liveweb/fetch/classify.py
"""
Pure mapping from what happened during a fetch to one of three outcome kinds.

Precedence (first match wins):
  bad url            -> DOCUMENT_NOT_AVAILABLE
  transport failure  -> CACHE_UNAVAILABLE
  outer status!=200  -> CACHE_UNAVAILABLE   (a missing outer status counts as != 200)
  decode failure     -> DOCUMENT_NOT_AVAILABLE
  inner status 502   -> DOCUMENT_NOT_AVAILABLE
  otherwise          -> RESOURCE
"""

from __future__ import annotations

from enum import Enum

import httpx

from ..exceptions import PoolTimeoutError
from .outcome import CacheUnavailable, DocumentNotAvailable, FetchFailure

# Inner status the upstream live fetcher uses to say "could not retrieve the document"
UPSTREAM_FETCH_FAILED_STATUS = 502


class OutcomeKind(str, Enum):
    RESOURCE = "resource"
    DOCUMENT_NOT_AVAILABLE = "document-not-available"
    CACHE_UNAVAILABLE = "cache-unavailable"


class TransportFailure(str, Enum):
    CONNECT_REFUSED = "connect-refused"
    CONNECT_TIMEOUT = "connect-timeout"
    SOCKET_TIMEOUT = "socket-timeout"


def transport_failure_of(exc: BaseException) -> TransportFailure | None:
    """
    Name the transport condition behind exc, or None if it is not one we classify.
    Unclassified exceptions are expected to propagate.
    """
    if isinstance(exc, (httpx.ConnectTimeout, httpx.PoolTimeout, PoolTimeoutError)):
        return TransportFailure.CONNECT_TIMEOUT
    if isinstance(exc, httpx.ConnectError):
        return TransportFailure.CONNECT_REFUSED
    if isinstance(exc, httpx.ReadTimeout):
        return TransportFailure.SOCKET_TIMEOUT
    return None


def classify(
    *,
    bad_url: bool = False,
    transport_failure: TransportFailure | None = None,
    outer_status: int | None = None,
    decode_failed: bool = False,
    inner_status: int | None = None,
) -> OutcomeKind:
    if bad_url:
        return OutcomeKind.DOCUMENT_NOT_AVAILABLE
    if transport_failure is not None:
        return OutcomeKind.CACHE_UNAVAILABLE
    if outer_status != 200:
        return OutcomeKind.CACHE_UNAVAILABLE
    if decode_failed:
        return OutcomeKind.DOCUMENT_NOT_AVAILABLE
    if inner_status == UPSTREAM_FETCH_FAILED_STATUS:
        return OutcomeKind.DOCUMENT_NOT_AVAILABLE
    return OutcomeKind.RESOURCE


def failure_outcome(kind: OutcomeKind, url: str, detail: str | None = None) -> FetchFailure:
    """Build the failure value for kind; reason is "<detail> : <url>" or just the url."""
    reason = f"{detail} : {url}" if detail else url
    if kind is OutcomeKind.DOCUMENT_NOT_AVAILABLE:
        return DocumentNotAvailable(reason, url=url)
    if kind is OutcomeKind.CACHE_UNAVAILABLE:
        return CacheUnavailable(reason, url=url)
    raise ValueError(f"{kind} is not a failure outcome")


__all__ = [
    "OutcomeKind",
    "TransportFailure",
    "UPSTREAM_FETCH_FAILED_STATUS",
    "classify",
    "failure_outcome",
    "transport_failure_of",
]
