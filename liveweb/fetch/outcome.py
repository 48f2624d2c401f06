# liveweb/fetch/outcome.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from ..exceptions import LiveDocumentNotAvailableError, LiveWebCacheUnavailableError
from ..resource import Resource


@dataclass(frozen=True)
class FetchRequest:
    """
    A live-web fetch request.

    max_cache_ms and use_older are part of the caller-facing contract but are
    not consulted: every fetch goes to the network.
    """

    url: str
    max_cache_ms: int = 0
    use_older: bool = False


@dataclass(frozen=True)
class DocumentNotAvailable:
    """The live document does not exist (bad url, undecodable record, inner 502)."""

    reason: str
    url: str = ""

    def to_exception(self) -> LiveDocumentNotAvailableError:
        return LiveDocumentNotAvailableError(self.reason, url=self.url)


@dataclass(frozen=True)
class CacheUnavailable:
    """The live-fetch subsystem is unavailable (transport failure, outer status != 200)."""

    reason: str
    url: str = ""

    def to_exception(self) -> LiveWebCacheUnavailableError:
        return LiveWebCacheUnavailableError(self.reason, url=self.url)


FetchFailure = Union[DocumentNotAvailable, CacheUnavailable]
FetchOutcome = Union[Resource, DocumentNotAvailable, CacheUnavailable]


def is_failure(outcome: FetchOutcome) -> bool:
    return isinstance(outcome, (DocumentNotAvailable, CacheUnavailable))


__all__ = [
    "FetchRequest",
    "DocumentNotAvailable",
    "CacheUnavailable",
    "FetchFailure",
    "FetchOutcome",
    "is_failure",
]
