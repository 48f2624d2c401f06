# scripts/fetch_live.py
"""
Manual live-web fetch through the pooled fetcher.

Usage:

  python scripts/fetch_live.py --url "https://example.com/" --proxy localhost:3128 --verbose
  python scripts/fetch_live.py -u "https://example.com/" --print-body
  python scripts/fetch_live.py -u "https://example.com/" --out page.html

Notes:
- Works from repo root without installing the package (adds project root to sys.path).
- Prints a human summary and a final single-line RESULT that scripts can parse.
"""

from __future__ import annotations

import argparse
import logging
import sys
import time
from pathlib import Path

# --- make liveweb/ importable when running from repo root ------------------------------------------
REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from liveweb.config import (  # noqa: E402
    LIVEWEB_CONNECT_TIMEOUT_MS,
    LIVEWEB_MAX_HOST_CONNECTIONS,
    LIVEWEB_MAX_TOTAL_CONNECTIONS,
    LIVEWEB_PROXY,
    LIVEWEB_SOCKET_TIMEOUT_MS,
)
from liveweb.fetch import (  # noqa: E402
    CacheUnavailable,
    DocumentNotAvailable,
    LiveWebFetcher,
)


def main(argv: list[str] | None = None) -> int:
    ap = argparse.ArgumentParser(description="Fetch a live URL as an archive-style resource.")
    ap.add_argument("-u", "--url", required=True, help="URL to fetch, e.g. https://example.com/")
    ap.add_argument(
        "--proxy", default=LIVEWEB_PROXY, help="Live-web proxy host:port (default: LIVEWEB_PROXY)"
    )
    ap.add_argument("--connect-timeout-ms", type=int, default=LIVEWEB_CONNECT_TIMEOUT_MS)
    ap.add_argument("--socket-timeout-ms", type=int, default=LIVEWEB_SOCKET_TIMEOUT_MS)
    ap.add_argument("--max-total", type=int, default=LIVEWEB_MAX_TOTAL_CONNECTIONS)
    ap.add_argument("--max-host", type=int, default=LIVEWEB_MAX_HOST_CONNECTIONS)
    ap.add_argument("-v", "--verbose", action="store_true", help="Verbose logging")
    ap.add_argument(
        "--print-body", action="store_true", help="Write response body to stdout (binary-safe)"
    )
    ap.add_argument("-o", "--out", help="Write body to file instead of stdout")
    args = ap.parse_args(argv)

    if args.verbose and not logging.getLogger().handlers:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s %(message)s")

    out_path: Path | None = Path(args.out) if args.out else None

    start = time.time()
    with LiveWebFetcher() as fetcher:
        if args.proxy:
            fetcher.set_proxy_host_port(args.proxy)
        else:
            fetcher.pool.clear_proxy()
        fetcher.connection_timeout_ms = args.connect_timeout_ms
        fetcher.socket_timeout_ms = args.socket_timeout_ms
        fetcher.set_max_total_connections(args.max_total)
        fetcher.set_max_host_connections(args.max_host)
        outcome = fetcher.fetch(args.url)
    elapsed = time.time() - start

    if isinstance(outcome, (DocumentNotAvailable, CacheUnavailable)):
        kind = (
            "document-not-available"
            if isinstance(outcome, DocumentNotAvailable)
            else "cache-unavailable"
        )
        if args.verbose:
            print(f"[cli] Reason ........: {outcome.reason}")
        print(f"RESULT outcome={kind} elapsed_s={elapsed:.3f}")
        # non-zero exit only for infrastructure failures
        return 1 if kind == "cache-unavailable" else 0

    body = outcome.read()
    outcome.close()
    if args.verbose:
        print(f"[cli] Inner status ..: {outcome.status_code}")
        print(f"[cli] Archive date ..: {outcome.archive_date or '-'}")
        print(f"[cli] Content-Type ..: {outcome.headers.get('content-type', '-')}")
        print(f"[cli] Body bytes ....: {len(body)}")
        print(f"[cli] Elapsed (s) ...: {elapsed:.3f}")

    print(f"RESULT outcome=resource status={outcome.status_code} elapsed_s={elapsed:.3f}")

    if body:
        if out_path:
            out_path.parent.mkdir(parents=True, exist_ok=True)
            out_path.write_bytes(body)
            if args.verbose:
                print(f"[cli] Wrote body -> {out_path}")
        elif args.print_body:
            try:
                sys.stdout.buffer.write(body)
                if not body.endswith(b"\n"):
                    sys.stdout.write("\n")
            except BrokenPipeError:
                pass
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
