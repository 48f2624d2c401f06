# liveweb/arc/decoder.py
from __future__ import annotations

import logging
from typing import BinaryIO, Protocol

from warcio.recordloader import ArchiveLoadFailed, ArcWarcRecordLoader
from warcio.statusandheaders import StatusAndHeadersParserException

from ..exceptions import ResourceNotAvailableError
from ..resource import Resource

log = logging.getLogger(__name__)


class ContainerDecoder(Protocol):
    """Turns a decompressed container stream into a Resource."""

    def decode(self, stream: BinaryIO, record_id: str) -> Resource: ...


class ArcRecordDecoder:
    """
    Decode a single ARC v1 record (already gunzipped) into a Resource.

    Record layout:
      <url> <ip-address> <archive-date> <content-type> <length>\\n
      <HTTP status line, headers and body: exactly <length> bytes>

    Raises ResourceNotAvailableError for an empty or malformed record.
    """

    def __init__(self) -> None:
        self._loader = ArcWarcRecordLoader(arc2warc=False)

    def decode(self, stream: BinaryIO, record_id: str) -> Resource:
        try:
            record = self._loader.parse_record_stream(stream, known_format="arc")
        except EOFError as exc:
            raise ResourceNotAvailableError(f"empty record stream ({record_id})") from exc
        except (ArchiveLoadFailed, StatusAndHeadersParserException) as exc:
            raise ResourceNotAvailableError(f"malformed ARC record ({record_id}): {exc}") from exc

        if record.rec_type != "response" or record.http_headers is None:
            raise ResourceNotAvailableError(
                f"ARC record has no HTTP response ({record_id}): rec_type={record.rec_type}"
            )

        raw_status = record.http_headers.get_statuscode()
        try:
            status = int(raw_status)
        except (TypeError, ValueError) as exc:
            raise ResourceNotAvailableError(
                f"bad inner status {raw_status!r} ({record_id})"
            ) from exc

        body = record.raw_stream.read()
        rec_headers = record.rec_headers
        log.debug("decoded ARC record %s status=%s bytes=%d", record_id, status, len(body))
        return Resource.from_bytes(
            status,
            record.http_headers.headers,
            body,
            url=rec_headers.get_header("uri") or "",
            ip_address=rec_headers.get_header("ip-address") or "",
            archive_date=rec_headers.get_header("archive-date") or "",
            mime_type=rec_headers.get_header("content-type") or "",
            record_id=record_id,
        )


__all__ = ["ContainerDecoder", "ArcRecordDecoder"]
