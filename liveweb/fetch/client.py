# liveweb/fetch/client.py
from __future__ import annotations

import gzip
import io
import logging

import httpx

from ..arc import ArcRecordDecoder, ContainerDecoder
from ..config import LiveWebSettings, parse_host_port
from ..exceptions import PoolTimeoutError, ResourceNotAvailableError
from ..resource import Resource
from .classify import OutcomeKind, classify, failure_outcome, transport_failure_of
from .outcome import FetchOutcome, FetchRequest, is_failure
from .pool import ConnectionPool, ConnectionPoolConfig, PooledConnection

log = logging.getLogger(__name__)

# Identifier handed to the decoder for the single record in each payload
RECORD_ID = "id"

# Transport failures reported as CacheUnavailable; anything else propagates
_TRANSPORT_ERRORS = (
    httpx.ConnectError,
    httpx.ConnectTimeout,
    httpx.PoolTimeout,
    httpx.ReadTimeout,
    PoolTimeoutError,
)

# --------------------------------------------------------------------------------------------------
# Helpers
# --------------------------------------------------------------------------------------------------


def _parse_url(url: str) -> httpx.URL | None:
    if not isinstance(url, str) or not url.strip():
        return None
    try:
        parsed = httpx.URL(url)
    except (httpx.InvalidURL, TypeError, ValueError):
        return None
    if parsed.scheme not in ("http", "https") or not parsed.host:
        return None
    return parsed


# --------------------------------------------------------------------------------------------------
# Fetcher
# --------------------------------------------------------------------------------------------------


class LiveWebFetcher:
    """
    Fetch the current live version of a URL as a Resource.

    The live-fetch endpoint (normally reached through the configured proxy)
    answers with a gzip-compressed single ARC record. Flow:
      1) malformed url                    -> DocumentNotAvailable, no I/O
      2) acquire a pooled connection, GET -> refused/timeouts: CacheUnavailable
      3) outer status != 200              -> CacheUnavailable
      4) gunzip + decode the record       -> undecodable: DocumentNotAvailable
      5) inner status 502                 -> DocumentNotAvailable
      6) otherwise                        -> the decoded Resource
    The connection is released before any outcome is returned or raised.
    Nothing is cached and nothing is retried.
    """

    def __init__(
        self,
        pool: ConnectionPool | None = None,
        decoder: ContainerDecoder | None = None,
        *,
        settings: LiveWebSettings | None = None,
    ) -> None:
        self._owns_pool = pool is None
        self.pool = pool if pool is not None else ConnectionPool(
            ConnectionPoolConfig.from_settings(settings)
        )
        self.decoder = decoder if decoder is not None else ArcRecordDecoder()

    # ---- core fetch ------------------------------------------------------------------

    def fetch(self, url: str) -> FetchOutcome:
        target = _parse_url(url)
        if target is None:
            log.warning("Bad URL for live web fetch: %r", url)
            return failure_outcome(classify(bad_url=True), str(url), "bad url")

        try:
            with self.pool.connection(target.host) as conn:
                return self._fetch_with(conn, url)
        except _TRANSPORT_ERRORS as exc:
            failure = transport_failure_of(exc)
            detail = str(exc) or type(exc).__name__
            log.warning("live web %s for %s: %s", failure.value, url, detail)
            return failure_outcome(classify(transport_failure=failure), url, detail)

    def fetch_request(self, request: FetchRequest) -> FetchOutcome:
        # max_cache_ms / use_older are accepted but there is no cache to consult
        return self.fetch(request.url)

    def get_cached_resource(
        self, url: str, max_cache_ms: int = 0, use_older: bool = False
    ) -> Resource:
        """
        Raising variant of fetch().

        Raises LiveDocumentNotAvailableError or LiveWebCacheUnavailableError.
        """
        outcome = self.fetch_request(FetchRequest(url, max_cache_ms, use_older))
        if is_failure(outcome):
            raise outcome.to_exception()
        return outcome

    # ----------------------------------------------------------------------------------
    # Internals
    # ----------------------------------------------------------------------------------

    def _fetch_with(self, conn: PooledConnection, url: str) -> FetchOutcome:
        response = conn.get(url)
        outer_status = int(response.status_code)
        if outer_status != 200:
            log.warning("live web endpoint returned %d for %s", outer_status, url)
            return failure_outcome(classify(outer_status=outer_status), url)

        payload = conn.read_body()
        stream = io.BytesIO(gzip.decompress(payload))
        try:
            resource = self.decoder.decode(stream, RECORD_ID)
        except ResourceNotAvailableError as exc:
            log.info("live document not available for %s: %s", url, exc)
            return failure_outcome(classify(outer_status=200, decode_failed=True), url)

        kind = classify(outer_status=200, inner_status=resource.status_code)
        if kind is not OutcomeKind.RESOURCE:
            log.info("upstream could not retrieve %s (inner %d)", url, resource.status_code)
            resource.close()
            return failure_outcome(kind, url)

        log.debug("fetched %s (inner %d)", url, resource.status_code)
        return resource

    # ----------------------------------------------------------------------------------
    # Configuration
    # ----------------------------------------------------------------------------------

    def set_proxy_host_port(self, host_port: str) -> None:
        """
        Proxy later requests through host_port, e.g. "localhost:3128".
        Values without a colon after the host are ignored.
        """
        parsed = parse_host_port(host_port)
        if parsed is not None:
            self.pool.set_proxy(*parsed)

    def set_max_total_connections(self, max_total_connections: int) -> None:
        self.pool.set_max_total_connections(max_total_connections)

    def set_max_host_connections(self, max_host_connections: int) -> None:
        self.pool.set_max_per_host_connections(max_host_connections)

    @property
    def connection_timeout_ms(self) -> int:
        return self.pool.connect_timeout_ms

    @connection_timeout_ms.setter
    def connection_timeout_ms(self, value: int) -> None:
        self.pool.set_connect_timeout_ms(value)

    @property
    def socket_timeout_ms(self) -> int:
        return self.pool.socket_timeout_ms

    @socket_timeout_ms.setter
    def socket_timeout_ms(self, value: int) -> None:
        self.pool.set_socket_timeout_ms(value)

    # ----------------------------------------------------------------------------------
    # Lifecycle
    # ----------------------------------------------------------------------------------

    def shutdown(self) -> None:
        # an injected pool belongs to the caller and is left open
        if self._owns_pool:
            self.pool.close()

    def __enter__(self) -> LiveWebFetcher:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.shutdown()


# --- facade ------------------------------------------------------------------


def fetch_live(url: str) -> FetchOutcome:
    """
    One-shot fetch with env-configured settings.

    Usage:
        from liveweb.fetch import fetch_live
        outcome = fetch_live("https://example.com/")
    """
    with LiveWebFetcher() as fetcher:
        return fetcher.fetch(url)


__all__ = ["LiveWebFetcher", "RECORD_ID", "fetch_live"]
