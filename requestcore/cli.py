#!/usr/bin/env python3
"""
Command line entry point: parse a raw HTTP request and print it as JSON.

Usage:
    requestcore request.txt
    printf 'GET /?a=1 HTTP/1.1\\r\\n\\r\\n' | requestcore
"""

import argparse
import io
import json
import logging
import sys
from typing import Any, Dict, List, Optional

from .core.config import MALFORMED_FAIL, MALFORMED_SKIP, ParserConfig
from .core.errors import RequestParseError, SessionError
from .core.http_request import HttpRequest
from .core.logging_utils import configure_logging
from .core.request_parser import parse_request


def request_to_dict(request: HttpRequest) -> Dict[str, Any]:
    """Render a parsed request as JSON-serializable data."""
    session_id = request.session_id()
    return {
        "method": request.method.value,
        "version": request.version,
        "path": request.path,
        "parameters": dict(request.parameters),
        "headers": dict(request.headers),
        "cookies": dict(request.cookies),
        "body": request.body,
        "session_id": str(session_id) if session_id else None,
    }


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Parse a raw HTTP/1.x request and print it as JSON")
    parser.add_argument(
        "file",
        nargs="?",
        default="-",
        help="File holding the raw request (default: stdin)",
    )
    parser.add_argument(
        "--encoding",
        default="utf-8",
        help="Charset for the request and percent-escapes (default: utf-8)",
    )
    parser.add_argument(
        "--strict-parameters",
        action="store_true",
        help="Reject parameter tokens without '=' instead of skipping them",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: WARNING)",
    )
    parser.add_argument(
        "--json-logs",
        action="store_true",
        help="Emit log records as JSON",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(level=getattr(logging, args.log_level), json_format=args.json_logs)

    try:
        config = ParserConfig(
            encoding=args.encoding,
            malformed_parameters=MALFORMED_FAIL if args.strict_parameters else MALFORMED_SKIP,
        )
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    if args.file == "-":
        raw = sys.stdin.buffer.read()
    else:
        with open(args.file, "rb") as fh:
            raw = fh.read()

    try:
        request = parse_request(io.BytesIO(raw), config)
        output = request_to_dict(request)
    except (RequestParseError, SessionError) as e:
        print(f"Error: {type(e).__name__}: {e}", file=sys.stderr)
        return 1

    print(json.dumps(output, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
