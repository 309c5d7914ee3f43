from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Optional, Sequence

import uvicorn

from ibaraki_kyuko.config import get_settings
from ibaraki_kyuko.fetcher import InvalidPostId, UpstreamError, fetch_cancellations
from ibaraki_kyuko.parser import parse_cancellation_html
from ibaraki_kyuko.server import create_app


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Extract class cancellation info from Ibaraki CT bulletins")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="cmd", required=True)

    parse_parser = sub.add_parser("parse", help="Parse a saved bulletin HTML file")
    parse_parser.add_argument("path", type=Path, help="HTML file to parse")

    fetch_parser = sub.add_parser("fetch", help="Fetch a bulletin post and parse it")
    fetch_parser.add_argument("--post-id", type=str, default=None, help="WordPress post id (default from settings)")
    fetch_parser.add_argument("--output", type=Path, default=None, help="Write JSON here instead of stdout")

    serve_parser = sub.add_parser("serve", help="Run the HTTP API")
    serve_parser.add_argument("--host", type=str, default=None)
    serve_parser.add_argument("--port", type=int, default=None)
    return parser.parse_args(argv)


def dump_json(payload, output: Optional[Path] = None) -> None:
    text = json.dumps(payload, ensure_ascii=False, indent=2)
    if output:
        output.write_text(text + "\n", encoding="utf-8")
        logging.info("Wrote %s", output)
    else:
        print(text)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
    )

    settings = get_settings()

    if args.cmd == "parse":
        html = args.path.read_text(encoding="utf-8")
        records = parse_cancellation_html(html)
        dump_json([record.to_dict() for record in records])
        return 0

    if args.cmd == "fetch":
        post_id = args.post_id or settings.default_post_id
        try:
            envelope = fetch_cancellations(post_id, settings)
        except (UpstreamError, InvalidPostId) as exc:
            logging.error("Failed to fetch post %s: %s", post_id, exc)
            return 1
        dump_json(envelope, args.output)
        return 0

    host = args.host or settings.host
    port = args.port or settings.port
    logging.info("Serving on http://%s:%d/api", host, port)
    uvicorn.run(create_app(settings), host=host, port=port)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
