# liveweb/fetch/__init__.py
"""
Live-web fetcher: pooled HTTP connections, ARC payload decoding and a
three-way outcome (Resource | DocumentNotAvailable | CacheUnavailable).

Caller-facing API:
  - LiveWebFetcher(pool=None, decoder=None).fetch(url) -> FetchOutcome
  - fetch_live(url) -> FetchOutcome

Other public entry points:
  - ConnectionPool, ConnectionPoolConfig, PooledConnection
  - classify, transport_failure_of, failure_outcome, OutcomeKind, TransportFailure
  - FetchRequest, DocumentNotAvailable, CacheUnavailable
"""

from .classify import (
    UPSTREAM_FETCH_FAILED_STATUS,
    OutcomeKind,
    TransportFailure,
    classify,
    failure_outcome,
    transport_failure_of,
)
from .client import (
    RECORD_ID,
    LiveWebFetcher,
    fetch_live,
)
from .outcome import (
    CacheUnavailable,
    DocumentNotAvailable,
    FetchFailure,
    FetchOutcome,
    FetchRequest,
    is_failure,
)
from .pool import (
    ConnectionPool,
    ConnectionPoolConfig,
    PooledConnection,
)

__all__ = [
    # facade
    "fetch_live",
    # fetcher
    "LiveWebFetcher",
    "RECORD_ID",
    # outcomes
    "FetchRequest",
    "FetchOutcome",
    "FetchFailure",
    "DocumentNotAvailable",
    "CacheUnavailable",
    "is_failure",
    # classifier
    "OutcomeKind",
    "TransportFailure",
    "UPSTREAM_FETCH_FAILED_STATUS",
    "classify",
    "failure_outcome",
    "transport_failure_of",
    # pool
    "ConnectionPool",
    "ConnectionPoolConfig",
    "PooledConnection",
]
