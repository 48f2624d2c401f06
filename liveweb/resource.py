# liveweb/resource.py
from __future__ import annotations

import io
from dataclasses import dataclass, field
from typing import BinaryIO

import httpx


@dataclass
class Resource:
    """
    A decoded live document, shaped like an archived capture.

    status_code is the inner status (the original document's own HTTP status),
    not the status of the live-fetch endpoint.
    """

    status_code: int
    headers: httpx.Headers
    body: BinaryIO
    url: str = ""
    ip_address: str = ""
    archive_date: str = ""  # 14-digit timestamp, e.g. 20261019120000
    mime_type: str = ""
    record_id: str = ""
    _closed: bool = field(default=False, init=False, repr=False)

    def read(self, n: int = -1) -> bytes:
        return self.body.read(n)

    def close(self) -> None:
        if not self._closed:
            self._closed = True
            self.body.close()

    def __enter__(self) -> Resource:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    @classmethod
    def from_bytes(
        cls,
        status_code: int,
        headers: list[tuple[str, str]] | dict[str, str] | None,
        body: bytes,
        **meta: str,
    ) -> Resource:
        return cls(
            status_code=int(status_code),
            headers=httpx.Headers(headers or {}),
            body=io.BytesIO(body),
            **meta,
        )
