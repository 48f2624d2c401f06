# tests/test_cli_fetch_live.py
from __future__ import annotations

import importlib.util
from pathlib import Path

import pytest
import respx
from httpx import Response

SCRIPT = Path(__file__).resolve().parents[1] / "scripts" / "fetch_live.py"


@pytest.fixture
def cli():
    spec = importlib.util.spec_from_file_location("fetch_live_cli", SCRIPT)
    mod = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(mod)
    return mod


@respx.mock
def test_cli_prints_resource_result(cli, arc_payload, capsys, tmp_path):
    url = "http://example.com/"
    respx.get(url).mock(return_value=Response(200, content=arc_payload(url, body=b"<p>hi</p>")))
    out_file = tmp_path / "page.html"

    rc = cli.main(["-u", url, "--proxy", "", "-o", str(out_file)])

    assert rc == 0
    assert "RESULT outcome=resource status=200" in capsys.readouterr().out
    assert out_file.read_bytes() == b"<p>hi</p>"


@respx.mock
def test_cli_exit_code_for_unavailable_service(cli, capsys):
    url = "http://example.com/"
    respx.get(url).mock(return_value=Response(503))

    rc = cli.main(["-u", url, "--proxy", ""])

    assert rc == 1
    assert "RESULT outcome=cache-unavailable" in capsys.readouterr().out


def test_cli_bad_url_is_not_a_failure_exit(cli, capsys):
    rc = cli.main(["-u", "not a url", "--proxy", ""])
    assert rc == 0
    assert "RESULT outcome=document-not-available" in capsys.readouterr().out
