# liveweb/fetch/pool.py
from __future__ import annotations

import dataclasses
import logging
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass

import httpx

from ..config import DEFAULT_USER_AGENT, LiveWebSettings, load_settings
from ..exceptions import PoolTimeoutError

log = logging.getLogger(__name__)

# --------------------------------------------------------------------------------------------------
# Configuration
# --------------------------------------------------------------------------------------------------


@dataclass
class ConnectionPoolConfig:
    max_total_connections: int = 20
    max_per_host_connections: int = 2
    connect_timeout_ms: int = 10_000  # 0 = wait indefinitely
    socket_timeout_ms: int = 10_000  # 0 = wait indefinitely
    proxy: tuple[str, int] | None = None
    user_agent: str = DEFAULT_USER_AGENT

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        if int(self.max_total_connections) <= 0:
            raise ValueError(f"max_total_connections must be > 0; got {self.max_total_connections}")
        if int(self.max_per_host_connections) <= 0:
            raise ValueError(
                f"max_per_host_connections must be > 0; got {self.max_per_host_connections}"
            )
        if int(self.connect_timeout_ms) < 0:
            raise ValueError(f"connect_timeout_ms must be >= 0; got {self.connect_timeout_ms}")
        if int(self.socket_timeout_ms) < 0:
            raise ValueError(f"socket_timeout_ms must be >= 0; got {self.socket_timeout_ms}")

    @classmethod
    def from_settings(cls, settings: LiveWebSettings | None = None) -> ConnectionPoolConfig:
        s = settings or load_settings()
        return cls(
            max_total_connections=s.max_total_connections,
            max_per_host_connections=s.max_host_connections,
            connect_timeout_ms=s.connect_timeout_ms,
            socket_timeout_ms=s.socket_timeout_ms,
            proxy=s.proxy,
            user_agent=s.user_agent,
        )


def _ms_to_s(ms: int) -> float | None:
    # httpx treats None as "no timeout"
    return None if ms == 0 else ms / 1000.0


# --------------------------------------------------------------------------------------------------
# Leases
# --------------------------------------------------------------------------------------------------


class PooledConnection:
    """
    A host-keyed slot in a ConnectionPool, bound to the httpx client and
    timeouts that were current when it was acquired.
    """

    def __init__(
        self, pool: ConnectionPool, host: str, client: httpx.Client, timeout: httpx.Timeout
    ) -> None:
        self.pool = pool
        self.host = host
        self.client = client
        self.timeout = timeout
        self.released = False
        self._response: httpx.Response | None = None

    def get(self, url: str, headers: dict[str, str] | None = None) -> httpx.Response:
        """Issue a streamed GET; the body is read with read_body()."""
        if self.released:
            raise RuntimeError(f"connection to {self.host} was already released")
        request = self.client.build_request("GET", url, headers=headers, timeout=self.timeout)
        self._response = self.client.send(request, stream=True)
        return self._response

    def read_body(self) -> bytes:
        """Read the full body as sent, without Content-Encoding decoding."""
        if self._response is None:
            raise RuntimeError("read_body() called before get()")
        return b"".join(self._response.iter_raw())

    def release(self) -> None:
        self.pool.release(self)

    def _close_response(self) -> None:
        if self._response is not None:
            self._response.close()
            self._response = None

    def __enter__(self) -> PooledConnection:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()


# --------------------------------------------------------------------------------------------------
# Pool
# --------------------------------------------------------------------------------------------------


class ConnectionPool:
    """
    Bounded set of reusable HTTP connections, keyed by host.

    acquire() blocks while either the total or the per-host cap is saturated,
    for at most connect_timeout_ms, then raises PoolTimeoutError. Configuration
    may change at any time; changes apply to connections acquired afterwards.
    Safe for concurrent use from any number of threads (no FIFO ordering).
    """

    def __init__(
        self,
        config: ConnectionPoolConfig | None = None,
        *,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._config = config or ConnectionPoolConfig.from_settings()
        self._transport = transport
        self._cond = threading.Condition()
        self._total = 0
        self._per_host: dict[str, int] = {}
        self._leases: dict[httpx.Client, int] = {}
        self._retired: set[httpx.Client] = set()
        self._closed = False
        self._client = self._new_client()

    # ---- client construction ---------------------------------------------------------

    def _new_client(self) -> httpx.Client:
        proxy = None
        if self._config.proxy is not None:
            host, port = self._config.proxy
            proxy = f"http://{host}:{port}"
        client = httpx.Client(
            headers={"User-Agent": self._config.user_agent},
            proxy=proxy,
            transport=self._transport,
            follow_redirects=True,
            # slot accounting happens here, not in httpx
            limits=httpx.Limits(
                max_connections=None,
                max_keepalive_connections=self._config.max_total_connections,
            ),
        )
        self._leases[client] = 0
        return client

    def _timeout(self) -> httpx.Timeout:
        return httpx.Timeout(
            _ms_to_s(self._config.socket_timeout_ms),
            connect=_ms_to_s(self._config.connect_timeout_ms),
        )

    def _has_slot(self, host: str) -> bool:
        return (
            self._total < self._config.max_total_connections
            and self._per_host.get(host, 0) < self._config.max_per_host_connections
        )

    # ---- acquire / release -----------------------------------------------------------

    def acquire(self, host: str) -> PooledConnection:
        host = host.strip().lower()
        with self._cond:
            if self._closed:
                raise RuntimeError("connection pool is closed")
            if not self._has_slot(host):
                log.debug(
                    "pool saturated for %s (host=%d total=%d); waiting",
                    host,
                    self._per_host.get(host, 0),
                    self._total,
                )
                ok = self._cond.wait_for(
                    lambda: self._closed or self._has_slot(host),
                    timeout=_ms_to_s(self._config.connect_timeout_ms),
                )
                if self._closed:
                    raise RuntimeError("connection pool is closed")
                if not ok:
                    raise PoolTimeoutError(
                        f"Timeout waiting for connection to {host} "
                        f"after {self._config.connect_timeout_ms}ms"
                    )
            self._total += 1
            self._per_host[host] = self._per_host.get(host, 0) + 1
            client = self._client
            self._leases[client] += 1
            return PooledConnection(self, host, client, self._timeout())

    def release(self, conn: PooledConnection) -> None:
        """Return a connection's slot. Releasing the same lease twice is a no-op."""
        with self._cond:
            if conn.released:
                return
            conn.released = True
        try:
            conn._close_response()
        finally:
            retire: httpx.Client | None = None
            with self._cond:
                self._total -= 1
                remaining = self._per_host.get(conn.host, 0) - 1
                if remaining > 0:
                    self._per_host[conn.host] = remaining
                else:
                    self._per_host.pop(conn.host, None)
                self._leases[conn.client] -= 1
                if conn.client in self._retired and self._leases[conn.client] == 0:
                    self._retired.discard(conn.client)
                    self._leases.pop(conn.client, None)
                    retire = conn.client
                self._cond.notify_all()
            if retire is not None:
                retire.close()

    @contextmanager
    def connection(self, host: str) -> Iterator[PooledConnection]:
        """Acquire a slot for host and release it on every exit path."""
        conn = self.acquire(host)
        try:
            yield conn
        finally:
            self.release(conn)

    # ---- configuration ---------------------------------------------------------------

    @property
    def config(self) -> ConnectionPoolConfig:
        with self._cond:
            return dataclasses.replace(self._config)

    def _update(self, **changes) -> None:
        with self._cond:
            self._config = dataclasses.replace(self._config, **changes)
            self._cond.notify_all()

    def set_max_total_connections(self, n: int) -> None:
        self._update(max_total_connections=int(n))

    def set_max_per_host_connections(self, n: int) -> None:
        self._update(max_per_host_connections=int(n))

    def set_connect_timeout_ms(self, ms: int) -> None:
        self._update(connect_timeout_ms=int(ms))

    def set_socket_timeout_ms(self, ms: int) -> None:
        self._update(socket_timeout_ms=int(ms))

    def set_proxy(self, host: str, port: int) -> None:
        """Route later acquisitions through host:port; open leases keep their client."""
        self._swap_client(proxy=(host, int(port)))

    def clear_proxy(self) -> None:
        self._swap_client(proxy=None)

    def _swap_client(self, **changes) -> None:
        retire: httpx.Client | None = None
        with self._cond:
            if self._closed:
                raise RuntimeError("connection pool is closed")
            self._config = dataclasses.replace(self._config, **changes)
            old = self._client
            self._client = self._new_client()
            if self._leases.get(old, 0) == 0:
                self._leases.pop(old, None)
                retire = old
            else:
                self._retired.add(old)
        if retire is not None:
            retire.close()
        log.debug("pool proxy set to %s", self._config.proxy)

    @property
    def proxy(self) -> tuple[str, int] | None:
        return self._config.proxy

    @property
    def connect_timeout_ms(self) -> int:
        return self._config.connect_timeout_ms

    @property
    def socket_timeout_ms(self) -> int:
        return self._config.socket_timeout_ms

    # ---- introspection / lifecycle ---------------------------------------------------

    def in_use(self, host: str | None = None) -> int:
        """Connections currently held, for one host or in total."""
        with self._cond:
            if host is None:
                return self._total
            return self._per_host.get(host.strip().lower(), 0)

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        with self._cond:
            if self._closed:
                return
            self._closed = True
            clients = [self._client, *self._retired]
            self._retired.clear()
            self._cond.notify_all()
        for client in clients:
            try:
                client.close()
            except Exception:
                log.warning("error closing pooled client", exc_info=True)

    def __enter__(self) -> ConnectionPool:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


__all__ = ["ConnectionPool", "ConnectionPoolConfig", "PooledConnection"]
