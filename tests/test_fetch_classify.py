# tests/test_fetch_classify.py
from __future__ import annotations

import httpx
import pytest

from liveweb.exceptions import (
    LiveDocumentNotAvailableError,
    LiveWebCacheUnavailableError,
    PoolTimeoutError,
)
from liveweb.fetch import (
    CacheUnavailable,
    DocumentNotAvailable,
    OutcomeKind,
    TransportFailure,
    classify,
    failure_outcome,
    transport_failure_of,
)

DNA = OutcomeKind.DOCUMENT_NOT_AVAILABLE
CU = OutcomeKind.CACHE_UNAVAILABLE
RES = OutcomeKind.RESOURCE


# -------------------------------- classify table --------------------------------------


@pytest.mark.parametrize(
    "kwargs, expected",
    [
        (dict(bad_url=True), DNA),
        # bad url wins over everything else
        (dict(bad_url=True, transport_failure=TransportFailure.CONNECT_REFUSED), DNA),
        (dict(transport_failure=TransportFailure.CONNECT_REFUSED), CU),
        (dict(transport_failure=TransportFailure.CONNECT_TIMEOUT), CU),
        (dict(transport_failure=TransportFailure.SOCKET_TIMEOUT), CU),
        (dict(transport_failure=TransportFailure.SOCKET_TIMEOUT, outer_status=200), CU),
        (dict(outer_status=404), CU),
        (dict(outer_status=500), CU),
        (dict(outer_status=502, inner_status=200), CU),
        (dict(outer_status=None), CU),
        (dict(), CU),
        (dict(outer_status=200, decode_failed=True), DNA),
        (dict(outer_status=200, decode_failed=True, inner_status=200), DNA),
        (dict(outer_status=200, inner_status=502), DNA),
        (dict(outer_status=200, inner_status=200), RES),
        (dict(outer_status=200, inner_status=404), RES),
        (dict(outer_status=200, inner_status=500), RES),
    ],
)
def test_classify_is_total_and_ordered(kwargs, expected):
    assert classify(**kwargs) is expected


def test_classify_has_no_side_effects():
    args = dict(outer_status=200, inner_status=502)
    assert classify(**args) is classify(**args)
    assert args == dict(outer_status=200, inner_status=502)


# -------------------------------- transport mapping -----------------------------------


@pytest.mark.parametrize(
    "exc, expected",
    [
        (httpx.ConnectError("Connection refused"), TransportFailure.CONNECT_REFUSED),
        (httpx.ConnectTimeout("timed out"), TransportFailure.CONNECT_TIMEOUT),
        (httpx.PoolTimeout("pool"), TransportFailure.CONNECT_TIMEOUT),
        (PoolTimeoutError("no slot"), TransportFailure.CONNECT_TIMEOUT),
        (httpx.ReadTimeout("read timed out"), TransportFailure.SOCKET_TIMEOUT),
    ],
)
def test_transport_failure_of_known(exc, expected):
    assert transport_failure_of(exc) is expected


@pytest.mark.parametrize(
    "exc",
    [
        httpx.ReadError("reset"),
        httpx.RemoteProtocolError("bad framing"),
        httpx.WriteTimeout("write"),
        OSError("disk"),
        ValueError("nope"),
    ],
)
def test_transport_failure_of_unclassified(exc):
    assert transport_failure_of(exc) is None


# -------------------------------- failure values --------------------------------------


def test_failure_outcome_reason_with_detail():
    out = failure_outcome(CU, "http://example.com/", "Connection refused")
    assert isinstance(out, CacheUnavailable)
    assert out.reason == "Connection refused : http://example.com/"
    assert out.url == "http://example.com/"


def test_failure_outcome_reason_is_url_without_detail():
    out = failure_outcome(DNA, "http://example.com/")
    assert isinstance(out, DocumentNotAvailable)
    assert out.reason == "http://example.com/"


def test_failure_outcome_rejects_resource_kind():
    with pytest.raises(ValueError):
        failure_outcome(RES, "http://example.com/")


def test_failures_convert_to_exceptions():
    dna = DocumentNotAvailable("gone", url="http://a/").to_exception()
    cu = CacheUnavailable("down", url="http://a/").to_exception()
    assert isinstance(dna, LiveDocumentNotAvailableError)
    assert isinstance(cu, LiveWebCacheUnavailableError)
    assert str(cu) == "down"
    assert dna.url == "http://a/"
