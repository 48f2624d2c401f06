# tests/conftest.py
from __future__ import annotations

import gzip
import sys
from collections.abc import Callable
from pathlib import Path

import pytest

# Ensure project root importable
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


def build_arc_record(
    url: str = "http://example.com/",
    status: int = 200,
    reason: str = "OK",
    headers: list[tuple[str, str]] | None = None,
    body: bytes = b"<html>hello</html>",
    *,
    ip: str = "93.184.216.34",
    date: str = "20261019120000",
    mime: str = "text/html",
) -> bytes:
    """One uncompressed ARC v1 record wrapping an HTTP response."""
    if headers is None:
        headers = [("Content-Type", "text/html"), ("Content-Length", str(len(body)))]
    http = f"HTTP/1.1 {status} {reason}\r\n".encode()
    for name, value in headers:
        http += f"{name}: {value}\r\n".encode()
    http += b"\r\n" + body
    header_line = f"{url} {ip} {date} {mime} {len(http)}\n".encode()
    return header_line + http + b"\n"


@pytest.fixture
def arc_record() -> Callable[..., bytes]:
    return build_arc_record


@pytest.fixture
def arc_payload() -> Callable[..., bytes]:
    """Gzip-compressed single-record payload, as the live-web proxy sends it."""

    def _build(*args, **kwargs) -> bytes:
        return gzip.compress(build_arc_record(*args, **kwargs))

    return _build
