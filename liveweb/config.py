# liveweb/config.py
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv


def _getenv_int(name: str, default: int) -> int:
    v = os.getenv(name, str(default)).strip()
    try:
        return int(v)
    except ValueError as err:
        raise ValueError(f"Environment variable {name} must be an integer; got {v!r}") from err


def _getenv_str(name: str, default: str) -> str:
    return os.getenv(name, default).strip()


def parse_host_port(value: str) -> tuple[str, int] | None:
    """
    Split "host:port" into its parts.

    Returns None when there is no colon after a non-empty host (the value is
    ignored, as with an unset proxy). A non-numeric port raises ValueError.
    """
    colon_idx = value.find(":")
    if colon_idx <= 0:
        return None
    host = value[:colon_idx]
    port = int(value[colon_idx + 1 :])
    return host, port


# Load .env from project root if present
ROOT = Path(__file__).resolve().parents[1]
load_dotenv(ROOT / ".env", override=False)

DEFAULT_USER_AGENT = "LiveWebFetcher/0.1"


# -------------------------------
# Live-web fetch config (constants, env-overridable)
# -------------------------------
LIVEWEB_PROXY: str = _getenv_str("LIVEWEB_PROXY", "")
LIVEWEB_MAX_TOTAL_CONNECTIONS: int = _getenv_int("LIVEWEB_MAX_TOTAL_CONNECTIONS", 20)
LIVEWEB_MAX_HOST_CONNECTIONS: int = _getenv_int("LIVEWEB_MAX_HOST_CONNECTIONS", 2)
# 0 disables the timeout
LIVEWEB_CONNECT_TIMEOUT_MS: int = _getenv_int("LIVEWEB_CONNECT_TIMEOUT_MS", 10_000)
LIVEWEB_SOCKET_TIMEOUT_MS: int = _getenv_int("LIVEWEB_SOCKET_TIMEOUT_MS", 10_000)
LIVEWEB_USER_AGENT: str = _getenv_str("LIVEWEB_USER_AGENT", DEFAULT_USER_AGENT)


@dataclass(frozen=True)
class LiveWebSettings:
    proxy: tuple[str, int] | None
    max_total_connections: int
    max_host_connections: int
    connect_timeout_ms: int
    socket_timeout_ms: int
    user_agent: str


def load_settings() -> LiveWebSettings:
    """Read the live-web settings from the environment at call time."""
    return LiveWebSettings(
        proxy=parse_host_port(_getenv_str("LIVEWEB_PROXY", "")),
        max_total_connections=_getenv_int("LIVEWEB_MAX_TOTAL_CONNECTIONS", 20),
        max_host_connections=_getenv_int("LIVEWEB_MAX_HOST_CONNECTIONS", 2),
        connect_timeout_ms=_getenv_int("LIVEWEB_CONNECT_TIMEOUT_MS", 10_000),
        socket_timeout_ms=_getenv_int("LIVEWEB_SOCKET_TIMEOUT_MS", 10_000),
        user_agent=_getenv_str("LIVEWEB_USER_AGENT", DEFAULT_USER_AGENT),
    )


__all__ = [
    "LiveWebSettings",
    "load_settings",
    "parse_host_port",
    "LIVEWEB_PROXY",
    "LIVEWEB_MAX_TOTAL_CONNECTIONS",
    "LIVEWEB_MAX_HOST_CONNECTIONS",
    "LIVEWEB_CONNECT_TIMEOUT_MS",
    "LIVEWEB_SOCKET_TIMEOUT_MS",
    "LIVEWEB_USER_AGENT",
]
